"""Pair identity: token ordering, address derivation and reserve lookup."""

from amm_router.pairs.locator import pair_for, pair_for_context, pair_salt
from amm_router.pairs.ordering import sort_tokens
from amm_router.pairs.reserves import get_reserves, orient_reserves

__all__ = [
    "sort_tokens",
    "pair_salt",
    "pair_for",
    "pair_for_context",
    "get_reserves",
    "orient_reserves",
]
