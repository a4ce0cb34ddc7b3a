"""Path pricing, liquidity sizing and swap execution.

Module structure:
- amounts.py: get_amounts_out / get_amounts_in along a token path
- liquidity.py: ratio-preserving deposit amounts
- swap.py: SwapStrategy and its precomputed / fee-on-transfer variants
- router.py: Router facade with deadlines, bounds and native currency
"""

from amm_router.routing.amounts import get_amounts_in, get_amounts_out
from amm_router.routing.liquidity import compute_liquidity_amounts
from amm_router.routing.router import Router
from amm_router.routing.swap import FeeOnTransferSwap, PrecomputedSwap, SwapStrategy

__all__ = [
    "FeeOnTransferSwap",
    "PrecomputedSwap",
    "Router",
    "SwapStrategy",
    "compute_liquidity_amounts",
    "get_amounts_in",
    "get_amounts_out",
]
