"""AMM pricing implementations."""

from amm_router.amm.base import AMM
from amm_router.amm.uniswap_v2 import UniswapV2, amm_for_fee, uniswap_v2

__all__ = [
    # Base class
    "AMM",
    # UniswapV2
    "UniswapV2",
    "uniswap_v2",
    "amm_for_fee",
]
