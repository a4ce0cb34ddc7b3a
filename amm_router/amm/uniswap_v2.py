"""UniswapV2 pricing math.

UniswapV2 uses the constant product formula: x * y = k
With a 0.3% fee on input amounts.
"""

from __future__ import annotations

from amm_router.amm.base import AMM
from amm_router.constants import DEFAULT_FEE_MULTIPLIER, FEE_DENOMINATOR
from amm_router.errors import (
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
)
from amm_router.safe_int import S


class UniswapV2(AMM):
    """UniswapV2 constant product math.

    Formula: amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

    The 997/1000 factor accounts for the 0.3% fee. All intermediate values
    go through SafeInt, so a product above 2**256 - 1 raises
    Uint256Overflow instead of silently growing.
    """

    def __init__(self, fee_multiplier: int = DEFAULT_FEE_MULTIPLIER) -> None:
        """Initialize with a fee tier.

        Args:
            fee_multiplier: Input scaling over 1000 (997 for 0.3%, 998 for 0.2%)
        """
        if not 0 < fee_multiplier <= FEE_DENOMINATOR:
            raise ValueError(f"fee_multiplier must be in (0, {FEE_DENOMINATOR}]")
        self.fee_multiplier = fee_multiplier

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Proportional amount: amount_b = amount_a * reserve_b / reserve_a (floor).

        Raises:
            InsufficientAmount: If amount_a <= 0
            InsufficientLiquidity: If either reserve <= 0
        """
        if amount_a <= 0:
            raise InsufficientAmount(f"Quote amount must be positive, got {amount_a}")
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity(f"Empty reserves: ({reserve_a}, {reserve_b})")

        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using constant product formula.

        Formula: amount_out = (in * fee * res_out) / (res_in * 1000 + in * fee)

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount (rounded down)

        Raises:
            InsufficientInputAmount: If amount_in <= 0
            InsufficientLiquidity: If either reserve <= 0
        """
        if amount_in <= 0:
            raise InsufficientInputAmount(f"Input amount must be positive, got {amount_in}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(f"Empty reserves: ({reserve_in}, {reserve_out})")

        amount_in_with_fee = S(amount_in) * S(self.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate required input for desired output.

        Formula: amount_in = (res_in * out * 1000) / ((res_out - out) * fee) + 1

        The +1 rounds in the pool's favour: the result is always strictly
        above the exact rational input.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input token amount

        Raises:
            InsufficientOutputAmount: If amount_out <= 0
            InsufficientLiquidity: If either reserve <= 0, or amount_out >= reserve_out
        """
        if amount_out <= 0:
            raise InsufficientOutputAmount(f"Output amount must be positive, got {amount_out}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(f"Empty reserves: ({reserve_in}, {reserve_out})")
        if amount_out >= reserve_out:
            # Can't extract the whole reserve
            raise InsufficientLiquidity(
                f"Output {amount_out} would drain reserve {reserve_out}"
            )

        numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
        denominator = (S(reserve_out) - S(amount_out)) * S(self.fee_multiplier)

        return ((numerator // denominator) + S(1)).value


# Singleton instance (0.3% fee)
uniswap_v2 = UniswapV2()


def amm_for_fee(fee_multiplier: int) -> UniswapV2:
    """Return the pricing instance for a fee tier, sharing the default one."""
    if fee_multiplier == uniswap_v2.fee_multiplier:
        return uniswap_v2
    return UniswapV2(fee_multiplier)


__all__ = ["UniswapV2", "uniswap_v2", "amm_for_fee"]
