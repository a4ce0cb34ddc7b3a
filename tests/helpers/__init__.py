"""Test helpers module for shared test utilities.

- constants: Token addresses, accounts and the frozen clock
- factories: Chain, router and snapshot factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    DAI,
    DAI_WETH_PAIR,
    DEADLINE,
    FOT,
    NOW,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    USDC,
    WETH,
    WETH_USDC_PAIR,
)
from tests.helpers.factories import fund, fund_native, make_chain, make_pair_snapshot, make_router

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "WETH_USDC_PAIR",
    "DAI_WETH_PAIR",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "FOT",
    "ALICE",
    "BOB",
    "NOW",
    "DEADLINE",
    # Factories
    "make_chain",
    "make_router",
    "fund",
    "fund_native",
    "make_pair_snapshot",
]
