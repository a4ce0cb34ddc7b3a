"""Pair, factory and ledger collaborators.

Provides the protocols the router drives and an in-memory implementation.
"""

from .interfaces import PairContract, PairFactory, TokenLedger
from .memory import InMemoryChain, InMemoryFactory, InMemoryLedger, InMemoryPair

__all__ = [
    "PairContract",
    "PairFactory",
    "TokenLedger",
    "InMemoryChain",
    "InMemoryFactory",
    "InMemoryLedger",
    "InMemoryPair",
]
