"""Interfaces of the contracts the router talks to.

The router never holds reserves or balances itself. It reads and moves
them through these three collaborators. Side 0/1 of a pair always follows
the canonical (token0, token1) order from sort_tokens().

Calls are synchronous and either complete or raise; the router performs
no retries.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PairContract(Protocol):
    """A constant-product pair holding two token reserves."""

    address: str
    token0: str
    token1: str

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_timestamp_last)."""
        ...

    def swap(self, amount0_out: int, amount1_out: int, to: str, data: bytes) -> None:
        """Send the requested outputs to `to`.

        Tokens paid in must already sit in the pair's balance; the pair
        checks the fee-adjusted constant product after paying out.
        """
        ...

    def mint(self, to: str) -> int:
        """Mint LP tokens for the balances deposited since the last sync."""
        ...

    def burn(self, to: str) -> tuple[int, int]:
        """Burn the LP tokens held by the pair and pay out both tokens."""
        ...


@runtime_checkable
class PairFactory(Protocol):
    """Creates pairs and looks them up by token pair or address."""

    def get_pair(self, token_a: str, token_b: str) -> str | None:
        """Address of the pair for two tokens, or None if not created."""
        ...

    def create_pair(self, token_a: str, token_b: str) -> str:
        """Deploy the pair for two tokens and return its address."""
        ...

    def pair_at(self, address: str) -> PairContract:
        """Resolve a pair address to its contract handle."""
        ...


@runtime_checkable
class TokenLedger(Protocol):
    """Token balances, push transfers and native-token wrapping."""

    def balance_of(self, token: str, owner: str) -> int:
        """Balance of `owner` in `token`."""
        ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move `amount` of `token` from `sender` to `recipient`.

        Fee-on-transfer tokens may credit the recipient with less than
        `amount`.
        """
        ...

    def native_balance_of(self, owner: str) -> int:
        """Native (unwrapped) balance of `owner`."""
        ...

    def transfer_native(self, sender: str, recipient: str, amount: int) -> None:
        """Move native currency between accounts."""
        ...

    def deposit(self, owner: str, amount: int) -> None:
        """Wrap `amount` of `owner`'s native balance into the wrapped token."""
        ...

    def withdraw(self, owner: str, amount: int) -> None:
        """Unwrap `amount` of `owner`'s wrapped token into native balance."""
        ...


__all__ = ["PairContract", "PairFactory", "TokenLedger"]
