"""In-memory pair, factory and token ledger.

A deterministic stand-in for the on-chain contracts the router drives.
Pairs follow UniswapV2Pair semantics: reserves only move on mint, burn,
swap and sync; swaps are checked against the fee-adjusted constant
product; the first mint locks MINIMUM_LIQUIDITY at the zero address.

InMemoryChain bundles a ledger and a factory and provides transaction(),
which restores all balances and reserves if the block raises. That is
how the router's all-or-nothing operations are honoured off-chain.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from amm_router.config import DEFAULT_CONTEXT, RouterContext
from amm_router.constants import FEE_DENOMINATOR, MINIMUM_LIQUIDITY
from amm_router.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidTo,
    KInvariantViolated,
    LedgerError,
    PairError,
    PairNotFound,
)
from amm_router.models.types import ZERO_ADDRESS, normalize_address, short
from amm_router.pairs.locator import pair_for_context
from amm_router.pairs.ordering import sort_tokens
from amm_router.safe_int import S

logger = structlog.get_logger()

# Transfer fees are expressed in basis points
BPS = 10_000

# (pairs by address, pair address by tokens, reserves by address)
_FactoryState = tuple[
    dict[str, "InMemoryPair"],
    dict[tuple[str, str], str],
    dict[str, tuple[int, int, int]],
]


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise LedgerError(f"Amount cannot be negative: {amount}")


class InMemoryLedger:
    """Token balances, native balances and the wrapped native token.

    Tokens registered with a transfer fee credit recipients with
    `amount - amount * fee_bps // 10000`; the fee is burned.
    """

    def __init__(self, weth: str) -> None:
        self.weth = normalize_address(weth)
        self._balances: dict[tuple[str, str], int] = {}
        self._supply: dict[str, int] = {}
        self._native: dict[str, int] = {}
        self._transfer_fee_bps: dict[str, int] = {}

    # --- Configuration ---

    def set_transfer_fee(self, token: str, fee_bps: int) -> None:
        """Make `token` a fee-on-transfer token."""
        if not 0 <= fee_bps < BPS:
            raise ValueError(f"Transfer fee must be in [0, {BPS}) bps, got {fee_bps}")
        self._transfer_fee_bps[normalize_address(token)] = fee_bps

    # --- Token balances ---

    def balance_of(self, token: str, owner: str) -> int:
        return self._balances.get((normalize_address(token), normalize_address(owner)), 0)

    def total_supply(self, token: str) -> int:
        return self._supply.get(normalize_address(token), 0)

    def mint(self, token: str, to: str, amount: int) -> None:
        """Create `amount` of `token` in `to`'s balance."""
        _check_amount(amount)
        token, to = normalize_address(token), normalize_address(to)
        self._supply[token] = (S(self.total_supply(token)) + amount).value
        self._credit(token, to, amount)

    def burn(self, token: str, owner: str, amount: int) -> None:
        """Destroy `amount` of `token` from `owner`'s balance."""
        _check_amount(amount)
        token, owner = normalize_address(token), normalize_address(owner)
        self._debit(token, owner, amount)
        self._supply[token] = (S(self.total_supply(token)) - amount).value

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        _check_amount(amount)
        token = normalize_address(token)
        sender, recipient = normalize_address(sender), normalize_address(recipient)
        self._debit(token, sender, amount)
        fee = amount * self._transfer_fee_bps.get(token, 0) // BPS
        if fee:
            self._supply[token] = (S(self.total_supply(token)) - fee).value
        self._credit(token, recipient, amount - fee)

    def _credit(self, token: str, owner: str, amount: int) -> None:
        key = (token, owner)
        self._balances[key] = (S(self._balances.get(key, 0)) + amount).value

    def _debit(self, token: str, owner: str, amount: int) -> None:
        key = (token, owner)
        balance = self._balances.get(key, 0)
        if amount > balance:
            raise LedgerError(
                f"Insufficient {short(token)} balance for {short(owner)}: {balance} < {amount}"
            )
        self._balances[key] = balance - amount

    # --- Native currency ---

    def native_balance_of(self, owner: str) -> int:
        return self._native.get(normalize_address(owner), 0)

    def fund_native(self, owner: str, amount: int) -> None:
        """Credit native currency out of thin air (genesis allocation)."""
        _check_amount(amount)
        owner = normalize_address(owner)
        self._native[owner] = (S(self.native_balance_of(owner)) + amount).value

    def transfer_native(self, sender: str, recipient: str, amount: int) -> None:
        _check_amount(amount)
        sender, recipient = normalize_address(sender), normalize_address(recipient)
        balance = self.native_balance_of(sender)
        if amount > balance:
            raise LedgerError(
                f"Insufficient native balance for {short(sender)}: {balance} < {amount}"
            )
        self._native[sender] = balance - amount
        self._native[recipient] = (S(self.native_balance_of(recipient)) + amount).value

    def deposit(self, owner: str, amount: int) -> None:
        _check_amount(amount)
        owner = normalize_address(owner)
        balance = self.native_balance_of(owner)
        if amount > balance:
            raise LedgerError(
                f"Insufficient native balance for {short(owner)}: {balance} < {amount}"
            )
        self._native[owner] = balance - amount
        self.mint(self.weth, owner, amount)

    def withdraw(self, owner: str, amount: int) -> None:
        self.burn(self.weth, owner, amount)
        self.fund_native(owner, amount)

    # --- Snapshots ---

    def snapshot(self) -> tuple[dict[Any, int], ...]:
        return (dict(self._balances), dict(self._supply), dict(self._native))

    def restore(self, state: tuple[dict[Any, int], ...]) -> None:
        balances, supply, native = state
        self._balances = dict(balances)
        self._supply = dict(supply)
        self._native = dict(native)


class InMemoryPair:
    """A constant-product pair whose token balances live in an InMemoryLedger.

    The pair's own address doubles as its LP token in the ledger.
    """

    def __init__(
        self,
        address: str,
        token0: str,
        token1: str,
        ledger: InMemoryLedger,
        fee_multiplier: int = DEFAULT_CONTEXT.fee_multiplier,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.address = normalize_address(address)
        self.token0 = normalize_address(token0)
        self.token1 = normalize_address(token1)
        self.ledger = ledger
        self.fee_multiplier = fee_multiplier
        self.clock = clock
        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0

    def __repr__(self) -> str:
        return (
            f"InMemoryPair({short(self.address)}, reserves=({self.reserve0}, {self.reserve1}))"
        )

    def get_reserves(self) -> tuple[int, int, int]:
        return self.reserve0, self.reserve1, self.block_timestamp_last

    @property
    def total_supply(self) -> int:
        return self.ledger.total_supply(self.address)

    def balances(self) -> tuple[int, int]:
        """Current ledger balances of (token0, token1) held by the pair."""
        return (
            self.ledger.balance_of(self.token0, self.address),
            self.ledger.balance_of(self.token1, self.address),
        )

    def _update(self, balance0: int, balance1: int) -> None:
        self.reserve0 = S(balance0).value
        self.reserve1 = S(balance1).value
        self.block_timestamp_last = int(self.clock()) % 2**32

    def mint(self, to: str) -> int:
        """Mint LP tokens for the tokens deposited since the last update.

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth no LP tokens
        """
        balance0, balance1 = self.balances()
        amount0 = (S(balance0) - self.reserve0).value
        amount1 = (S(balance1) - self.reserve1).value
        total_supply = self.total_supply

        if total_supply == 0:
            root_k = (S(amount0) * amount1).isqrt()
            if root_k <= MINIMUM_LIQUIDITY:
                raise InsufficientLiquidityMinted(
                    f"Initial deposit sqrt({amount0} * {amount1}) <= {MINIMUM_LIQUIDITY}"
                )
            liquidity = (root_k - MINIMUM_LIQUIDITY).value
            self.ledger.mint(self.address, ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        else:
            liquidity = min(
                (S(amount0) * total_supply // self.reserve0).value,
                (S(amount1) * total_supply // self.reserve1).value,
            )
            if liquidity <= 0:
                raise InsufficientLiquidityMinted(f"Deposit ({amount0}, {amount1}) mints nothing")

        self.ledger.mint(self.address, to, liquidity)
        self._update(balance0, balance1)
        logger.debug(
            "pair_mint",
            pair=short(self.address),
            amount0=amount0,
            amount1=amount1,
            liquidity=liquidity,
        )
        return liquidity

    def burn(self, to: str) -> tuple[int, int]:
        """Burn the LP tokens sent to the pair and pay out both tokens pro rata.

        Raises:
            InsufficientLiquidityBurned: If either payout rounds to zero
        """
        balance0, balance1 = self.balances()
        liquidity = self.ledger.balance_of(self.address, self.address)
        total_supply = self.total_supply
        if total_supply == 0:
            raise InsufficientLiquidityBurned("Pair has no liquidity")

        amount0 = (S(liquidity) * balance0 // total_supply).value
        amount1 = (S(liquidity) * balance1 // total_supply).value
        if amount0 <= 0 or amount1 <= 0:
            raise InsufficientLiquidityBurned(f"Burning {liquidity} pays ({amount0}, {amount1})")

        self.ledger.burn(self.address, self.address, liquidity)
        self.ledger.transfer(self.token0, self.address, to, amount0)
        self.ledger.transfer(self.token1, self.address, to, amount1)
        self._update(*self.balances())
        logger.debug(
            "pair_burn",
            pair=short(self.address),
            amount0=amount0,
            amount1=amount1,
            liquidity=liquidity,
        )
        return amount0, amount1

    def swap(self, amount0_out: int, amount1_out: int, to: str, data: bytes = b"") -> None:
        """Pay out the requested amounts, then verify the constant product.

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InsufficientLiquidity: If an output would drain its reserve
            InvalidTo: If `to` is one of the pair's tokens
            InsufficientInputAmount: If nothing was paid in
            KInvariantViolated: If the fee-adjusted product decreased
        """
        if data:
            raise PairError("Flash swaps (non-empty data) are not supported")
        if amount0_out <= 0 and amount1_out <= 0:
            raise InsufficientOutputAmount("Swap must pay out at least one token")
        if amount0_out >= self.reserve0 or amount1_out >= self.reserve1:
            raise InsufficientLiquidity(
                f"Output ({amount0_out}, {amount1_out}) exceeds reserves "
                f"({self.reserve0}, {self.reserve1})"
            )

        to = normalize_address(to)
        if to in (self.token0, self.token1):
            raise InvalidTo(f"Swap recipient {to} is a pair token")

        if amount0_out > 0:
            self.ledger.transfer(self.token0, self.address, to, amount0_out)
        if amount1_out > 0:
            self.ledger.transfer(self.token1, self.address, to, amount1_out)
        balance0, balance1 = self.balances()

        amount0_in = max(balance0 - (self.reserve0 - amount0_out), 0)
        amount1_in = max(balance1 - (self.reserve1 - amount1_out), 0)
        if amount0_in <= 0 and amount1_in <= 0:
            raise InsufficientInputAmount("Swap received no input")

        fee = FEE_DENOMINATOR - self.fee_multiplier
        balance0_adjusted = S(balance0) * FEE_DENOMINATOR - S(amount0_in) * fee
        balance1_adjusted = S(balance1) * FEE_DENOMINATOR - S(amount1_in) * fee
        k_before = S(self.reserve0) * self.reserve1 * FEE_DENOMINATOR**2
        if balance0_adjusted * balance1_adjusted < k_before:
            raise KInvariantViolated(f"K decreased in pair {self.address}")

        self._update(balance0, balance1)

    def sync(self) -> None:
        """Force reserves to match balances."""
        self._update(*self.balances())

    def skim(self, to: str) -> None:
        """Send balances in excess of reserves to `to`."""
        balance0, balance1 = self.balances()
        if balance0 > self.reserve0:
            self.ledger.transfer(self.token0, self.address, to, balance0 - self.reserve0)
        if balance1 > self.reserve1:
            self.ledger.transfer(self.token1, self.address, to, balance1 - self.reserve1)


class InMemoryFactory:
    """Creates InMemoryPairs at their CREATE2 addresses."""

    def __init__(
        self,
        ledger: InMemoryLedger,
        context: RouterContext = DEFAULT_CONTEXT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ledger = ledger
        self.context = context
        self.clock = clock
        self._pairs: dict[str, InMemoryPair] = {}
        self._by_tokens: dict[tuple[str, str], str] = {}

    @property
    def all_pairs(self) -> list[str]:
        """Pair addresses in creation order."""
        return list(self._pairs)

    def get_pair(self, token_a: str, token_b: str) -> str | None:
        return self._by_tokens.get(sort_tokens(token_a, token_b))

    def create_pair(self, token_a: str, token_b: str) -> str:
        """Create the pair for two tokens.

        Raises:
            PairError: If the pair already exists
        """
        token0, token1 = sort_tokens(token_a, token_b)
        if (token0, token1) in self._by_tokens:
            raise PairError(f"Pair exists for {token0}/{token1}")

        address = pair_for_context(self.context, token0, token1)
        self._pairs[address] = InMemoryPair(
            address,
            token0,
            token1,
            self.ledger,
            fee_multiplier=self.context.fee_multiplier,
            clock=self.clock,
        )
        self._by_tokens[(token0, token1)] = address
        logger.info("pair_created", pair=short(address), token0=short(token0), token1=short(token1))
        return address

    def pair_at(self, address: str) -> InMemoryPair:
        """Resolve an address to its pair.

        Raises:
            PairNotFound: If no pair was created at that address
        """
        pair = self._pairs.get(normalize_address(address))
        if pair is None:
            raise PairNotFound(f"No pair at {address}")
        return pair

    def snapshot(self) -> _FactoryState:
        reserves = {addr: pair.get_reserves() for addr, pair in self._pairs.items()}
        return dict(self._pairs), dict(self._by_tokens), reserves

    def restore(self, state: _FactoryState) -> None:
        pairs, by_tokens, reserves = state
        self._pairs = dict(pairs)
        self._by_tokens = dict(by_tokens)
        for address, (reserve0, reserve1, timestamp) in reserves.items():
            pair = self._pairs[address]
            pair.reserve0, pair.reserve1, pair.block_timestamp_last = reserve0, reserve1, timestamp


class InMemoryChain:
    """A ledger and factory with all-or-nothing transactions."""

    def __init__(
        self,
        context: RouterContext = DEFAULT_CONTEXT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.context = context
        self.ledger = InMemoryLedger(context.weth)
        self.factory = InMemoryFactory(self.ledger, context, clock)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Revert every balance and reserve change if the block raises."""
        ledger_state = self.ledger.snapshot()
        factory_state = self.factory.snapshot()
        try:
            yield
        except BaseException as err:
            self.ledger.restore(ledger_state)
            self.factory.restore(factory_state)
            logger.debug("transaction_reverted", error=type(err).__name__)
            raise

    def seed_pair(self, token_a: str, token_b: str, reserve_a: int, reserve_b: int) -> InMemoryPair:
        """Create a pair (if needed) holding exactly the given reserves.

        Tokens are minted straight into the pair and synced; no LP tokens
        are issued. Useful for pricing against a known reserve snapshot.
        """
        address = self.factory.get_pair(token_a, token_b)
        if address is None:
            address = self.factory.create_pair(token_a, token_b)
        pair = self.factory.pair_at(address)
        balance0, balance1 = pair.balances()
        if normalize_address(token_a) == pair.token0:
            amount0, amount1 = reserve_a, reserve_b
        else:
            amount0, amount1 = reserve_b, reserve_a
        if amount0 < balance0 or amount1 < balance1:
            raise ValueError("seed_pair can only grow reserves")
        self.ledger.mint(pair.token0, pair.address, amount0 - balance0)
        self.ledger.mint(pair.token1, pair.address, amount1 - balance1)
        pair.sync()
        return pair


__all__ = ["InMemoryLedger", "InMemoryPair", "InMemoryFactory", "InMemoryChain"]
