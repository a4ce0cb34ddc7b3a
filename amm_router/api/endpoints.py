"""API endpoints for pair derivation and quoting."""

from dataclasses import replace

import structlog
from fastapi import APIRouter, Depends

from amm_router.config import RouterContext
from amm_router.models.api import (
    AmountsInRequest,
    AmountsOutRequest,
    AmountsResponse,
    ErrorResponse,
    LiquidityRequest,
    LiquidityResponse,
    PairAddressRequest,
    PairAddressResponse,
    PairReserves,
)
from amm_router.models.types import short
from amm_router.pairs.locator import pair_for_context
from amm_router.pairs.ordering import sort_tokens
from amm_router.pools.memory import InMemoryChain
from amm_router.routing.amounts import get_amounts_in, get_amounts_out
from amm_router.routing.liquidity import compute_liquidity_amounts

logger = structlog.get_logger()

router = APIRouter(responses={400: {"model": ErrorResponse}})


def get_context() -> RouterContext:
    """Dependency provider for the deployment context.

    Override this in tests to quote against another deployment:
        app.dependency_overrides[get_context] = lambda: context

    Returns:
        Context built from AMM_ROUTER_* environment variables.
    """
    return RouterContext.from_env()


def build_chain(context: RouterContext, pairs: list[PairReserves]) -> InMemoryChain:
    """In-memory chain holding exactly the given reserves."""
    chain = InMemoryChain(context)
    for snapshot in pairs:
        chain.seed_pair(
            snapshot.token0,
            snapshot.token1,
            int(snapshot.reserve0),
            int(snapshot.reserve1),
        )
    return chain


@router.post("/pairs/address")
async def pair_address(
    request: PairAddressRequest,
    context: RouterContext = Depends(get_context),
) -> PairAddressResponse:
    """Derive the CREATE2 address of a pair.

    The request may override the factory and init code hash, e.g. to
    locate pairs of a fork.
    """
    if request.factory is not None:
        context = replace(context, factory=request.factory)
    if request.init_code_hash is not None:
        context = replace(context, init_code_hash=request.init_code_hash)

    token0, token1 = sort_tokens(request.token_a, request.token_b)
    pair = pair_for_context(context, token0, token1)
    logger.debug("pair_address", pair=short(pair), factory=short(context.factory))
    return PairAddressResponse(pair=pair, token0=token0, token1=token1)


@router.post("/quote/amounts-out")
async def quote_amounts_out(
    request: AmountsOutRequest,
    context: RouterContext = Depends(get_context),
) -> AmountsResponse:
    """Amounts received at each node of the path for an exact input."""
    chain = build_chain(context, request.pairs)
    amounts = get_amounts_out(context, chain.factory, int(request.amount_in), request.path)
    logger.info(
        "quoted_amounts_out",
        hops=len(request.path) - 1,
        amount_in=amounts[0],
        amount_out=amounts[-1],
    )
    return AmountsResponse(amounts=[str(amount) for amount in amounts])


@router.post("/quote/amounts-in")
async def quote_amounts_in(
    request: AmountsInRequest,
    context: RouterContext = Depends(get_context),
) -> AmountsResponse:
    """Amounts required at each node of the path for an exact output."""
    chain = build_chain(context, request.pairs)
    amounts = get_amounts_in(context, chain.factory, int(request.amount_out), request.path)
    logger.info(
        "quoted_amounts_in",
        hops=len(request.path) - 1,
        amount_in=amounts[0],
        amount_out=amounts[-1],
    )
    return AmountsResponse(amounts=[str(amount) for amount in amounts])


@router.post("/quote/liquidity")
async def quote_liquidity(
    request: LiquidityRequest,
    context: RouterContext = Depends(get_context),
) -> LiquidityResponse:
    """Ratio-preserving deposit amounts for a pair.

    A pair missing from the snapshot is treated as new and empty, so the
    desired amounts come back unchanged.
    """
    chain = build_chain(context, request.pairs)
    amount_a, amount_b = compute_liquidity_amounts(
        context,
        chain.factory,
        request.token_a,
        request.token_b,
        int(request.amount_a_desired),
        int(request.amount_b_desired),
        int(request.amount_a_min),
        int(request.amount_b_min),
    )
    return LiquidityResponse(amount_a=str(amount_a), amount_b=str(amount_b))
