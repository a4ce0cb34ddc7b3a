"""Reserve lookup oriented to the caller's token order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from amm_router.models.types import normalize_address, short
from amm_router.pairs.locator import pair_for_context
from amm_router.pairs.ordering import sort_tokens

if TYPE_CHECKING:
    from amm_router.config import RouterContext
    from amm_router.pools.interfaces import PairContract, PairFactory

logger = structlog.get_logger()


def get_reserves(
    context: RouterContext,
    factory: PairFactory,
    token_a: str,
    token_b: str,
) -> tuple[int, int]:
    """Fetch a pair's reserves ordered as (reserve_a, reserve_b).

    The pair address is derived with CREATE2, never looked up, and the
    reserves are read fresh on every call.

    Args:
        context: Router deployment constants
        factory: Resolves the derived address to a pair handle
        token_a: Token whose reserve comes first in the result
        token_b: Token whose reserve comes second in the result

    Returns:
        (reserve_a, reserve_b)
    """
    token0, _ = sort_tokens(token_a, token_b)
    pair = factory.pair_at(pair_for_context(context, token_a, token_b))
    reserve0, reserve1, _ = pair.get_reserves()
    if normalize_address(token_a) == token0:
        return reserve0, reserve1
    return reserve1, reserve0


def orient_reserves(pair: PairContract, token_in: str) -> tuple[int, int]:
    """Reserves of an already-resolved pair as (reserve_in, reserve_out)."""
    reserve0, reserve1, _ = pair.get_reserves()
    if normalize_address(token_in) == pair.token0:
        return reserve0, reserve1
    if normalize_address(token_in) == pair.token1:
        return reserve1, reserve0
    logger.debug("token_not_in_pair", pair=short(pair.address), token=short(token_in))
    raise ValueError(f"Token {token_in} not in pair {pair.address}")


__all__ = ["get_reserves", "orient_reserves"]
