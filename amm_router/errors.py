"""Router error classes.

Each error names the condition the UniswapV2 router reverts with
(e.g. ``UniswapV2Library: INSUFFICIENT_LIQUIDITY``). All of them are
terminal for the enclosing operation.
"""


class RouterError(Exception):
    """Base error for routing and pricing operations."""

    pass


# Malformed pair input


class IdenticalAddresses(RouterError):
    """Both sides of a pair are the same token."""

    pass


class ZeroAddress(RouterError):
    """The low side of a pair is the zero address."""

    pass


# Non-positive amounts


class InsufficientAmount(RouterError):
    """Quote input amount must be positive."""

    pass


class InsufficientInputAmount(RouterError):
    """Swap input amount must be positive."""

    pass


class InsufficientOutputAmount(RouterError):
    """Swap output amount must be positive, or fell below the caller's minimum."""

    pass


class InsufficientLiquidity(RouterError):
    """A reserve is empty, or the requested output would drain it."""

    pass


class InvalidPath(RouterError):
    """Path is too short or does not start/end with the wrapped native token."""

    pass


# Caller-declared bounds


class ExcessiveInputAmount(RouterError):
    """Required input exceeds the caller's maximum."""

    pass


class InsufficientAAmount(RouterError):
    """Token A amount fell below the caller's minimum."""

    pass


class InsufficientBAmount(RouterError):
    """Token B amount fell below the caller's minimum."""

    pass


class Expired(RouterError):
    """Operation deadline has passed."""

    pass


class PairNotFound(RouterError):
    """No pair is registered at the derived address."""

    pass


# Collaborator failures (in-memory pools and ledger)


class PairError(RouterError):
    """Base error for pair contract operations."""

    pass


class InsufficientLiquidityMinted(PairError):
    """Deposit is too small to mint any liquidity."""

    pass


class InsufficientLiquidityBurned(PairError):
    """Burn would return zero of one token."""

    pass


class InvalidTo(PairError):
    """Swap recipient is one of the pair's own tokens."""

    pass


class KInvariantViolated(PairError):
    """Fee-adjusted product of balances decreased during a swap."""

    pass


class LedgerError(RouterError):
    """Token ledger failure (e.g. insufficient balance)."""

    pass


__all__ = [
    "RouterError",
    "IdenticalAddresses",
    "ZeroAddress",
    "InsufficientAmount",
    "InsufficientInputAmount",
    "InsufficientOutputAmount",
    "InsufficientLiquidity",
    "InvalidPath",
    "ExcessiveInputAmount",
    "InsufficientAAmount",
    "InsufficientBAmount",
    "Expired",
    "PairNotFound",
    "PairError",
    "InsufficientLiquidityMinted",
    "InsufficientLiquidityBurned",
    "InvalidTo",
    "KInvariantViolated",
    "LedgerError",
]
