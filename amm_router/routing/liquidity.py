"""Deposit amounts that preserve a pair's current ratio."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from amm_router.amm.uniswap_v2 import uniswap_v2
from amm_router.errors import InsufficientAAmount, InsufficientBAmount
from amm_router.models.types import short
from amm_router.pairs.reserves import get_reserves

if TYPE_CHECKING:
    from amm_router.config import RouterContext
    from amm_router.pools.interfaces import PairFactory

logger = structlog.get_logger()


def compute_liquidity_amounts(
    context: RouterContext,
    factory: PairFactory,
    token_a: str,
    token_b: str,
    amount_a_desired: int,
    amount_b_desired: int,
    amount_a_min: int,
    amount_b_min: int,
) -> tuple[int, int]:
    """Amounts of A and B to deposit so the pair's ratio is unchanged.

    Creates the pair first if the factory has none. An empty pair takes
    the desired amounts as-is (the first depositor sets the price).
    Otherwise one side is deposited in full and the other is quoted from
    the reserves, choosing whichever side fits inside the desired amounts.

    Args:
        context: Router deployment constants
        factory: Pair factory (may create the pair)
        token_a: First token
        token_b: Second token
        amount_a_desired: Most of A the caller is willing to deposit
        amount_b_desired: Most of B the caller is willing to deposit
        amount_a_min: Least of A the caller accepts depositing
        amount_b_min: Least of B the caller accepts depositing

    Returns:
        (amount_a, amount_b) to transfer into the pair

    Raises:
        InsufficientAAmount: If the ratio-preserving A is below amount_a_min
        InsufficientBAmount: If the ratio-preserving B is below amount_b_min
    """
    if factory.get_pair(token_a, token_b) is None:
        factory.create_pair(token_a, token_b)

    reserve_a, reserve_b = get_reserves(context, factory, token_a, token_b)
    if reserve_a == 0 and reserve_b == 0:
        logger.debug("liquidity_first_deposit", token_a=short(token_a), token_b=short(token_b))
        return amount_a_desired, amount_b_desired

    amount_b_optimal = uniswap_v2.quote(amount_a_desired, reserve_a, reserve_b)
    if amount_b_optimal <= amount_b_desired:
        if amount_b_optimal < amount_b_min:
            raise InsufficientBAmount(f"B amount {amount_b_optimal} below minimum {amount_b_min}")
        return amount_a_desired, amount_b_optimal

    amount_a_optimal = uniswap_v2.quote(amount_b_desired, reserve_b, reserve_a)
    # floor(floor(a*rB/rA)*rA/rB) <= a
    assert amount_a_optimal <= amount_a_desired, "quote() inconsistent with reserves"
    if amount_a_optimal < amount_a_min:
        raise InsufficientAAmount(f"A amount {amount_a_optimal} below minimum {amount_a_min}")
    return amount_a_optimal, amount_b_desired


__all__ = ["compute_liquidity_amounts"]
