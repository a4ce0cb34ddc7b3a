"""Base class for AMM pricing implementations."""

from abc import ABC, abstractmethod


class AMM(ABC):
    """Abstract base class for AMM pricing math.

    Implementations are pure: given amounts and reserves they return an
    amount, or raise a RouterError subclass when the inputs cannot be
    priced. Reserves are always passed oriented as (in, out).
    """

    @abstractmethod
    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Equivalent amount of B for amount_a of A at the current ratio (no fee).

        Args:
            amount_a: Amount of token A
            reserve_a: Pool reserve of token A
            reserve_b: Pool reserve of token B

        Returns:
            Amount of token B
        """
        ...

    @abstractmethod
    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount
        """
        ...

    @abstractmethod
    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input token amount
        """
        ...
