"""Multi-hop swap execution through pair contracts.

Two strategies share one hop loop:
- PrecomputedSwap pays out amounts from get_amounts_out/get_amounts_in
- FeeOnTransferSwap re-derives each hop's input from the pair's balance,
  for tokens that take a cut on every transfer

In both cases the caller must already have transferred the first hop's
input into the first pair.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from amm_router.amm.uniswap_v2 import amm_for_fee
from amm_router.errors import InvalidPath
from amm_router.models.types import normalize_address, short
from amm_router.pairs.locator import pair_for_context
from amm_router.pairs.ordering import sort_tokens
from amm_router.pairs.reserves import orient_reserves
from amm_router.safe_int import S

if TYPE_CHECKING:
    from amm_router.config import RouterContext
    from amm_router.pools.interfaces import PairContract, PairFactory, TokenLedger

logger = structlog.get_logger()


class SwapStrategy(ABC):
    """Walks a path and calls swap() on every pair along it.

    Subclasses decide how much each hop pays out; routing of that amount
    is shared. Output goes to the next pair on the path, or to the final
    recipient on the last hop.
    """

    def __init__(self, context: RouterContext, factory: PairFactory) -> None:
        self.context = context
        self.factory = factory

    @abstractmethod
    def hop_output(self, hop: int, pair: PairContract, token_in: str, token_out: str) -> int:
        """Amount of token_out that hop `hop` should pay out."""
        ...

    def execute(self, path: list[str], to: str) -> list[int]:
        """Run every hop of the path.

        Args:
            path: Token addresses, at least 2
            to: Recipient of the last hop's output

        Returns:
            Output amount of each hop, in path order
        """
        if len(path) < 2:
            raise InvalidPath(f"Path needs at least 2 tokens, got {len(path)}")

        outputs: list[int] = []
        for i in range(len(path) - 1):
            token_in = normalize_address(path[i])
            token_out = normalize_address(path[i + 1])
            token0, _ = sort_tokens(token_in, token_out)
            pair = self.factory.pair_at(pair_for_context(self.context, token_in, token_out))

            amount_out = self.hop_output(i, pair, token_in, token_out)
            amount0_out, amount1_out = (0, amount_out) if token_in == token0 else (amount_out, 0)
            if i < len(path) - 2:
                recipient = pair_for_context(self.context, token_out, path[i + 2])
            else:
                recipient = normalize_address(to)

            logger.debug(
                "hop_swap",
                strategy=type(self).__name__,
                hop=i,
                pair=short(pair.address),
                amount0_out=amount0_out,
                amount1_out=amount1_out,
                recipient=short(recipient),
            )
            pair.swap(amount0_out, amount1_out, recipient, b"")
            outputs.append(amount_out)
        return outputs


class PrecomputedSwap(SwapStrategy):
    """Pays out an amount vector computed before execution."""

    def __init__(self, context: RouterContext, factory: PairFactory, amounts: list[int]) -> None:
        super().__init__(context, factory)
        self.amounts = amounts

    def execute(self, path: list[str], to: str) -> list[int]:
        if len(self.amounts) != len(path):
            raise ValueError(
                f"Amount vector has {len(self.amounts)} entries for a {len(path)}-token path"
            )
        return super().execute(path, to)

    def hop_output(self, hop: int, pair: PairContract, token_in: str, token_out: str) -> int:
        return self.amounts[hop + 1]


class FeeOnTransferSwap(SwapStrategy):
    """Prices each hop from what the pair actually received.

    The input of a hop is the pair's balance of token_in minus its stored
    reserve, i.e. whatever arrived since the last sync after any transfer
    fee was taken.
    """

    def __init__(self, context: RouterContext, factory: PairFactory, ledger: TokenLedger) -> None:
        super().__init__(context, factory)
        self.ledger = ledger
        self.amm = amm_for_fee(context.fee_multiplier)

    def hop_output(self, hop: int, pair: PairContract, token_in: str, token_out: str) -> int:
        reserve_in, reserve_out = orient_reserves(pair, token_in)
        balance_in = self.ledger.balance_of(token_in, pair.address)
        amount_in = (S(balance_in) - S(reserve_in)).value
        amount_out = self.amm.get_amount_out(amount_in, reserve_in, reserve_out)
        logger.debug(
            "hop_received",
            hop=hop,
            pair=short(pair.address),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out


def swap_along_path(
    context: RouterContext,
    factory: PairFactory,
    amounts: list[int],
    path: list[str],
    to: str,
) -> list[int]:
    """Execute a path with precomputed per-hop amounts."""
    return PrecomputedSwap(context, factory, amounts).execute(path, to)


def swap_along_path_supporting_fee_on_transfer(
    context: RouterContext,
    factory: PairFactory,
    ledger: TokenLedger,
    path: list[str],
    to: str,
) -> list[int]:
    """Execute a path, deriving each hop's input from balance deltas."""
    return FeeOnTransferSwap(context, factory, ledger).execute(path, to)


__all__ = [
    "SwapStrategy",
    "PrecomputedSwap",
    "FeeOnTransferSwap",
    "swap_along_path",
    "swap_along_path_supporting_fee_on_transfer",
]
