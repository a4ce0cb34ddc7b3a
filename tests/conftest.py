"""Pytest configuration and fixtures."""

import pytest

from amm_router.config import DEFAULT_CONTEXT, RouterContext
from amm_router.pools.memory import InMemoryChain
from amm_router.routing.router import Router
from tests.helpers import make_chain, make_router


@pytest.fixture
def context() -> RouterContext:
    """Mainnet UniswapV2 deployment context."""
    return DEFAULT_CONTEXT


@pytest.fixture
def chain(context: RouterContext) -> InMemoryChain:
    """Empty in-memory chain with a frozen clock."""
    return make_chain(context)


@pytest.fixture
def router(chain: InMemoryChain) -> Router:
    """Router over the chain fixture."""
    return make_router(chain)
