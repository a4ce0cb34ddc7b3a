"""Constant-product AMM router: pair derivation, pricing and swap routing."""

from amm_router.config import DEFAULT_CONTEXT, RouterContext
from amm_router.routing.router import Router

__version__ = "0.1.0"
__all__ = ["DEFAULT_CONTEXT", "Router", "RouterContext", "__version__"]
