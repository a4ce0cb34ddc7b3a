"""Chained amount calculation along a token path."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from amm_router.amm.uniswap_v2 import amm_for_fee
from amm_router.errors import InvalidPath
from amm_router.models.types import short
from amm_router.pairs.reserves import get_reserves

if TYPE_CHECKING:
    from amm_router.config import RouterContext
    from amm_router.pools.interfaces import PairFactory

logger = structlog.get_logger()


def check_path(path: list[str]) -> None:
    if len(path) < 2:
        raise InvalidPath(f"Path needs at least 2 tokens, got {len(path)}")


def get_amounts_out(
    context: RouterContext,
    factory: PairFactory,
    amount_in: int,
    path: list[str],
) -> list[int]:
    """Amounts received at each node when selling amount_in along path.

    amounts[0] is amount_in; amounts[i + 1] is the output of hop i. Each
    hop's reserves are read only after the previous hop is priced.

    Args:
        context: Router deployment constants
        factory: Resolves pair addresses to pair handles
        amount_in: Exact amount of path[0] sold
        path: Token addresses, at least 2

    Returns:
        Amount vector with one entry per path node

    Raises:
        InvalidPath: If path has fewer than 2 tokens
        InsufficientInputAmount: If an amount along the path is zero
        InsufficientLiquidity: If a pair on the path has an empty reserve
    """
    check_path(path)
    amm = amm_for_fee(context.fee_multiplier)

    amounts = [amount_in]
    for i in range(len(path) - 1):
        reserve_in, reserve_out = get_reserves(context, factory, path[i], path[i + 1])
        amount_out = amm.get_amount_out(amounts[i], reserve_in, reserve_out)
        logger.debug(
            "hop_priced_out",
            hop=i,
            token_in=short(path[i]),
            token_out=short(path[i + 1]),
            amount_in=amounts[i],
            amount_out=amount_out,
        )
        amounts.append(amount_out)
    return amounts


def get_amounts_in(
    context: RouterContext,
    factory: PairFactory,
    amount_out: int,
    path: list[str],
) -> list[int]:
    """Amounts required at each node to receive amount_out at the end of path.

    amounts[-1] is amount_out; amounts[i] is the input hop i needs. The
    path is walked from the last hop back to the first.

    Raises:
        InvalidPath: If path has fewer than 2 tokens
        InsufficientOutputAmount: If an amount along the path is zero
        InsufficientLiquidity: If a pair cannot provide the requested output
    """
    check_path(path)
    amm = amm_for_fee(context.fee_multiplier)

    amounts = [0] * len(path)
    amounts[-1] = amount_out
    for i in range(len(path) - 1, 0, -1):
        reserve_in, reserve_out = get_reserves(context, factory, path[i - 1], path[i])
        amounts[i - 1] = amm.get_amount_in(amounts[i], reserve_in, reserve_out)
        logger.debug(
            "hop_priced_in",
            hop=i - 1,
            token_in=short(path[i - 1]),
            token_out=short(path[i]),
            amount_in=amounts[i - 1],
            amount_out=amounts[i],
        )
    return amounts


__all__ = ["get_amounts_out", "get_amounts_in"]
