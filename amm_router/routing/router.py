"""Router facade: caller-facing liquidity and swap operations.

Each operation checks its deadline, runs inside the host's transaction
(if one is supplied), moves tokens through the ledger and drives the
pairs through the swap strategies in routing.swap.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING

import structlog

from amm_router.amm.uniswap_v2 import amm_for_fee
from amm_router.errors import (
    ExcessiveInputAmount,
    Expired,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientOutputAmount,
    InvalidPath,
)
from amm_router.models.types import normalize_address, short
from amm_router.pairs.locator import pair_for_context
from amm_router.pairs.ordering import sort_tokens
from amm_router.routing.amounts import check_path, get_amounts_in, get_amounts_out
from amm_router.routing.liquidity import compute_liquidity_amounts
from amm_router.routing.swap import FeeOnTransferSwap, PrecomputedSwap

if TYPE_CHECKING:
    from amm_router.config import RouterContext
    from amm_router.pools.interfaces import PairContract, PairFactory, TokenLedger
    from amm_router.pools.memory import InMemoryChain

logger = structlog.get_logger()


class Router:
    """Caller-facing router over a factory and a token ledger.

    `sender` on every operation is the account paying tokens in. Native
    currency (`value`) is pulled from the sender into the router's own
    address, wrapped, and forwarded; unused native value is refunded.

    Dependencies are injected so tests can swap the collaborators:
        router = Router(context, factory, ledger, clock=lambda: 0)
    """

    def __init__(
        self,
        context: RouterContext,
        factory: PairFactory,
        ledger: TokenLedger,
        clock: Callable[[], float] = time.time,
        transaction: Callable[[], AbstractContextManager[None]] | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            context: Deployment constants (factory, WETH, init code hash)
            factory: Pair factory
            ledger: Token ledger
            clock: Returns the current time in seconds, compared to deadlines
            transaction: Factory for an all-or-nothing context; each
                operation runs inside one. None means the host already
                guarantees atomicity.
        """
        self.context = context
        self.factory = factory
        self.ledger = ledger
        self.clock = clock
        self._transaction = transaction
        self.amm = amm_for_fee(context.fee_multiplier)

    @classmethod
    def for_chain(cls, chain: InMemoryChain, clock: Callable[[], float] = time.time) -> Router:
        """Router over an InMemoryChain, using its transactions."""
        return cls(chain.context, chain.factory, chain.ledger, clock, chain.transaction)

    # --- Helpers ---

    @property
    def weth(self) -> str:
        return self.context.weth

    @property
    def address(self) -> str:
        return self.context.router

    def _ensure(self, deadline: int) -> None:
        now = self.clock()
        if deadline < now:
            raise Expired(f"Deadline {deadline} passed (now {int(now)})")

    def _atomic(self) -> AbstractContextManager[None]:
        if self._transaction is None:
            return nullcontext()
        return self._transaction()

    def _pair_address(self, token_a: str, token_b: str) -> str:
        return pair_for_context(self.context, token_a, token_b)

    def _pair(self, token_a: str, token_b: str) -> PairContract:
        return self.factory.pair_at(self._pair_address(token_a, token_b))

    def _require_start(self, path: list[str]) -> None:
        if not path or normalize_address(path[0]) != self.weth:
            raise InvalidPath("Path must start with WETH")

    def _require_end(self, path: list[str]) -> None:
        if not path or normalize_address(path[-1]) != self.weth:
            raise InvalidPath("Path must end with WETH")

    def _wrap_into_pair(self, amount: int, path: list[str]) -> None:
        """Wrap native value held by the router and pay it into the first pair."""
        self.ledger.deposit(self.address, amount)
        self.ledger.transfer(self.weth, self.address, self._pair_address(path[0], path[1]), amount)

    def _unwrap_to(self, amount: int, to: str) -> None:
        self.ledger.withdraw(self.address, amount)
        self.ledger.transfer_native(self.address, to, amount)

    # --- Add liquidity ---

    def add_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int, int]:
        """Deposit two tokens at the pair's current ratio.

        Returns:
            (amount_a, amount_b, liquidity) actually deposited and minted
        """
        self._ensure(deadline)
        with self._atomic():
            amount_a, amount_b = compute_liquidity_amounts(
                self.context,
                self.factory,
                token_a,
                token_b,
                amount_a_desired,
                amount_b_desired,
                amount_a_min,
                amount_b_min,
            )
            pair = self._pair(token_a, token_b)
            self.ledger.transfer(token_a, sender, pair.address, amount_a)
            self.ledger.transfer(token_b, sender, pair.address, amount_b)
            liquidity = pair.mint(to)

        logger.info(
            "add_liquidity",
            pair=short(pair.address),
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b, liquidity

    def add_liquidity_eth(
        self,
        sender: str,
        token: str,
        amount_token_desired: int,
        amount_token_min: int,
        amount_eth_min: int,
        to: str,
        deadline: int,
        value: int,
    ) -> tuple[int, int, int]:
        """Deposit a token and native currency; unused native value is refunded.

        Returns:
            (amount_token, amount_eth, liquidity)
        """
        self._ensure(deadline)
        with self._atomic():
            amount_token, amount_eth = compute_liquidity_amounts(
                self.context,
                self.factory,
                token,
                self.weth,
                amount_token_desired,
                value,
                amount_token_min,
                amount_eth_min,
            )
            pair = self._pair(token, self.weth)
            self.ledger.transfer(token, sender, pair.address, amount_token)
            self.ledger.transfer_native(sender, self.address, value)
            self.ledger.deposit(self.address, amount_eth)
            self.ledger.transfer(self.weth, self.address, pair.address, amount_eth)
            liquidity = pair.mint(to)
            if value > amount_eth:
                self.ledger.transfer_native(self.address, sender, value - amount_eth)

        logger.info(
            "add_liquidity_eth",
            pair=short(pair.address),
            amount_token=amount_token,
            amount_eth=amount_eth,
            refund=value - amount_eth,
            liquidity=liquidity,
        )
        return amount_token, amount_eth, liquidity

    # --- Remove liquidity ---

    def _remove_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
    ) -> tuple[int, int]:
        pair = self._pair(token_a, token_b)
        # LP tokens go to the pair, which burns whatever it holds of itself
        self.ledger.transfer(pair.address, sender, pair.address, liquidity)
        amount0, amount1 = pair.burn(to)
        token0, _ = sort_tokens(token_a, token_b)
        if normalize_address(token_a) == token0:
            amount_a, amount_b = amount0, amount1
        else:
            amount_a, amount_b = amount1, amount0
        if amount_a < amount_a_min:
            raise InsufficientAAmount(f"A amount {amount_a} below minimum {amount_a_min}")
        if amount_b < amount_b_min:
            raise InsufficientBAmount(f"B amount {amount_b} below minimum {amount_b_min}")
        return amount_a, amount_b

    def remove_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        """Burn LP tokens and receive both underlying tokens.

        Returns:
            (amount_a, amount_b) paid to `to`
        """
        self._ensure(deadline)
        with self._atomic():
            amount_a, amount_b = self._remove_liquidity(
                sender, token_a, token_b, liquidity, amount_a_min, amount_b_min, to
            )
        logger.info("remove_liquidity", liquidity=liquidity, amount_a=amount_a, amount_b=amount_b)
        return amount_a, amount_b

    def remove_liquidity_eth(
        self,
        sender: str,
        token: str,
        liquidity: int,
        amount_token_min: int,
        amount_eth_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        """Burn LP tokens of a token/WETH pair, receiving native currency.

        Returns:
            (amount_token, amount_eth)
        """
        self._ensure(deadline)
        with self._atomic():
            amount_token, amount_eth = self._remove_liquidity(
                sender, token, self.weth, liquidity, amount_token_min, amount_eth_min, self.address
            )
            self.ledger.transfer(token, self.address, to, amount_token)
            self._unwrap_to(amount_eth, to)
        logger.info(
            "remove_liquidity_eth",
            liquidity=liquidity,
            amount_token=amount_token,
            amount_eth=amount_eth,
        )
        return amount_token, amount_eth

    def remove_liquidity_eth_supporting_fee_on_transfer_tokens(
        self,
        sender: str,
        token: str,
        liquidity: int,
        amount_token_min: int,
        amount_eth_min: int,
        to: str,
        deadline: int,
    ) -> int:
        """remove_liquidity_eth for tokens that take a fee on transfer.

        The token amount forwarded is whatever the router actually holds
        after the burn, not the amount the pair reported.

        Returns:
            amount_eth
        """
        self._ensure(deadline)
        with self._atomic():
            _, amount_eth = self._remove_liquidity(
                sender, token, self.weth, liquidity, amount_token_min, amount_eth_min, self.address
            )
            received = self.ledger.balance_of(token, self.address)
            self.ledger.transfer(token, self.address, to, received)
            self._unwrap_to(amount_eth, to)
        logger.info(
            "remove_liquidity_eth_fot",
            liquidity=liquidity,
            amount_token=received,
            amount_eth=amount_eth,
        )
        return amount_eth

    # --- Swaps (precomputed amounts) ---

    def swap_exact_tokens_for_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Sell exactly amount_in of path[0] for at least amount_out_min of path[-1]."""
        self._ensure(deadline)
        with self._atomic():
            amounts = get_amounts_out(self.context, self.factory, amount_in, path)
            self._check_min_out(amounts[-1], amount_out_min)
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amounts[0])
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, to)
        self._log_swap("swap_exact_tokens_for_tokens", path, amounts)
        return amounts

    def swap_tokens_for_exact_tokens(
        self,
        sender: str,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Buy exactly amount_out of path[-1] for at most amount_in_max of path[0]."""
        self._ensure(deadline)
        with self._atomic():
            amounts = get_amounts_in(self.context, self.factory, amount_out, path)
            self._check_max_in(amounts[0], amount_in_max)
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amounts[0])
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, to)
        self._log_swap("swap_tokens_for_exact_tokens", path, amounts)
        return amounts

    def swap_exact_eth_for_tokens(
        self,
        sender: str,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
        value: int,
    ) -> list[int]:
        """Sell exactly `value` native currency along a WETH-first path."""
        self._ensure(deadline)
        self._require_start(path)
        with self._atomic():
            amounts = get_amounts_out(self.context, self.factory, value, path)
            self._check_min_out(amounts[-1], amount_out_min)
            self.ledger.transfer_native(sender, self.address, value)
            self._wrap_into_pair(amounts[0], path)
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, to)
        self._log_swap("swap_exact_eth_for_tokens", path, amounts)
        return amounts

    def swap_tokens_for_exact_eth(
        self,
        sender: str,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Buy exactly amount_out native currency along a WETH-last path."""
        self._ensure(deadline)
        self._require_end(path)
        with self._atomic():
            amounts = get_amounts_in(self.context, self.factory, amount_out, path)
            self._check_max_in(amounts[0], amount_in_max)
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amounts[0])
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, self.address)
            self._unwrap_to(amounts[-1], to)
        self._log_swap("swap_tokens_for_exact_eth", path, amounts)
        return amounts

    def swap_exact_tokens_for_eth(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Sell exactly amount_in of path[0] for native currency."""
        self._ensure(deadline)
        self._require_end(path)
        with self._atomic():
            amounts = get_amounts_out(self.context, self.factory, amount_in, path)
            self._check_min_out(amounts[-1], amount_out_min)
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amounts[0])
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, self.address)
            self._unwrap_to(amounts[-1], to)
        self._log_swap("swap_exact_tokens_for_eth", path, amounts)
        return amounts

    def swap_eth_for_exact_tokens(
        self,
        sender: str,
        amount_out: int,
        path: list[str],
        to: str,
        deadline: int,
        value: int,
    ) -> list[int]:
        """Buy exactly amount_out of path[-1] with native currency; refunds the rest."""
        self._ensure(deadline)
        self._require_start(path)
        with self._atomic():
            amounts = get_amounts_in(self.context, self.factory, amount_out, path)
            self._check_max_in(amounts[0], value)
            self.ledger.transfer_native(sender, self.address, value)
            self._wrap_into_pair(amounts[0], path)
            PrecomputedSwap(self.context, self.factory, amounts).execute(path, to)
            if value > amounts[0]:
                self.ledger.transfer_native(self.address, sender, value - amounts[0])
        self._log_swap("swap_eth_for_exact_tokens", path, amounts)
        return amounts

    # --- Swaps (fee-on-transfer tokens) ---

    def swap_exact_tokens_for_tokens_supporting_fee_on_transfer_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> int:
        """Exact-input swap where any token on the path may take a transfer fee.

        The minimum is checked against the recipient's balance change, not
        against a precomputed amount.

        Returns:
            Amount of path[-1] the recipient actually received
        """
        self._ensure(deadline)
        check_path(path)
        with self._atomic():
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amount_in)
            balance_before = self.ledger.balance_of(path[-1], to)
            FeeOnTransferSwap(self.context, self.factory, self.ledger).execute(path, to)
            received = self.ledger.balance_of(path[-1], to) - balance_before
            self._check_min_out(received, amount_out_min)
        self._log_swap("swap_exact_tokens_for_tokens_fot", path, [amount_in, received])
        return received

    def swap_exact_eth_for_tokens_supporting_fee_on_transfer_tokens(
        self,
        sender: str,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
        value: int,
    ) -> int:
        """Exact native-input swap for a fee-on-transfer output token."""
        self._ensure(deadline)
        check_path(path)
        self._require_start(path)
        with self._atomic():
            self.ledger.transfer_native(sender, self.address, value)
            self._wrap_into_pair(value, path)
            balance_before = self.ledger.balance_of(path[-1], to)
            FeeOnTransferSwap(self.context, self.factory, self.ledger).execute(path, to)
            received = self.ledger.balance_of(path[-1], to) - balance_before
            self._check_min_out(received, amount_out_min)
        self._log_swap("swap_exact_eth_for_tokens_fot", path, [value, received])
        return received

    def swap_exact_tokens_for_eth_supporting_fee_on_transfer_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> int:
        """Exact-input swap of a fee-on-transfer token for native currency."""
        self._ensure(deadline)
        check_path(path)
        self._require_end(path)
        with self._atomic():
            self.ledger.transfer(path[0], sender, self._pair_address(path[0], path[1]), amount_in)
            FeeOnTransferSwap(self.context, self.factory, self.ledger).execute(path, self.address)
            amount_out = self.ledger.balance_of(self.weth, self.address)
            self._check_min_out(amount_out, amount_out_min)
            self._unwrap_to(amount_out, to)
        self._log_swap("swap_exact_tokens_for_eth_fot", path, [amount_in, amount_out])
        return amount_out

    # --- Bounds and logging ---

    def _check_min_out(self, amount_out: int, amount_out_min: int) -> None:
        if amount_out < amount_out_min:
            raise InsufficientOutputAmount(f"Output {amount_out} below minimum {amount_out_min}")

    def _check_max_in(self, amount_in: int, amount_in_max: int) -> None:
        if amount_in > amount_in_max:
            raise ExcessiveInputAmount(f"Input {amount_in} exceeds maximum {amount_in_max}")

    def _log_swap(self, operation: str, path: list[str], amounts: list[int]) -> None:
        logger.info(
            operation,
            path=[short(token) for token in path],
            amount_in=amounts[0],
            amount_out=amounts[-1],
        )

    # --- Library passthroughs ---

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        return self.amm.quote(amount_a, reserve_a, reserve_b)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return self.amm.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return self.amm.get_amount_in(amount_out, reserve_in, reserve_out)

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        return get_amounts_out(self.context, self.factory, amount_in, path)

    def get_amounts_in(self, amount_out: int, path: list[str]) -> list[int]:
        return get_amounts_in(self.context, self.factory, amount_out, path)


__all__ = ["Router"]
