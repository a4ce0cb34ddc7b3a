"""Tests for UniswapV2 constant product pricing."""

import pytest

from amm_router.amm.uniswap_v2 import UniswapV2, amm_for_fee, uniswap_v2
from amm_router.errors import (
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
)
from amm_router.safe_int import UINT256_MAX, Uint256Overflow


class TestQuote:
    """Tests for quote()."""

    def test_proportional(self):
        assert uniswap_v2.quote(50, 100, 200) == 100

    def test_floors(self):
        """quote(1, 3, 2) = floor(2/3) = 0."""
        assert uniswap_v2.quote(1, 3, 2) == 0

    def test_zero_amount(self):
        with pytest.raises(InsufficientAmount):
            uniswap_v2.quote(0, 100, 200)

    def test_empty_reserve(self):
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.quote(10, 0, 200)
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.quote(10, 100, 0)


class TestGetAmountOut:
    """Tests for get_amount_out()."""

    def test_basic(self):
        """100 in against (1000, 1000) gives 90 after the 0.3% fee."""
        assert uniswap_v2.get_amount_out(100, 1000, 1000) == 90

    def test_realistic_reserves(self):
        """1 ETH into a 100 ETH / 250K USDC pool."""
        amount_out = uniswap_v2.get_amount_out(10**18, 100 * 10**18, 250_000 * 10**6)
        # (1 * 997 * 250000) / (100 * 1000 + 997) = 2467.9...
        expected = 2468 * 10**6
        assert abs(amount_out - expected) < expected * 0.001
        assert amount_out < 250_000 * 10**6

    def test_zero_input(self):
        with pytest.raises(InsufficientInputAmount):
            uniswap_v2.get_amount_out(0, 1000, 1000)

    def test_empty_reserves(self):
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.get_amount_out(100, 0, 1000)
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.get_amount_out(100, 1000, 0)

    def test_overflow(self):
        """Products beyond uint256 raise rather than grow silently."""
        with pytest.raises(Uint256Overflow):
            uniswap_v2.get_amount_out(UINT256_MAX // 2, 1000, UINT256_MAX // 2)

    def test_always_below_reserve(self):
        """Even a huge input cannot drain the output reserve."""
        assert uniswap_v2.get_amount_out(10**30, 1000, 1000) < 1000

    @pytest.mark.parametrize("reserves", [(1000, 1000), (10**6, 3 * 10**6), (10**18, 10**9)])
    def test_strictly_increasing(self, reserves):
        """A larger input never yields the same or a smaller output."""
        reserve_in, reserve_out = reserves
        step = reserve_in // 10
        previous = uniswap_v2.get_amount_out(step, reserve_in, reserve_out)
        for amount_in in range(2 * step, reserve_in * 3, step):
            current = uniswap_v2.get_amount_out(amount_in, reserve_in, reserve_out)
            assert current > previous
            previous = current

    @pytest.mark.parametrize("amount_in", [1, 7, 100, 999, 10**6])
    def test_below_fee_free_quote(self, amount_in):
        """The fee makes output strictly worse than the spot quote."""
        reserve_in, reserve_out = 10**6, 2 * 10**6
        amount_out = uniswap_v2.get_amount_out(amount_in, reserve_in, reserve_out)
        assert amount_out < amount_in * reserve_out // reserve_in


class TestGetAmountIn:
    """Tests for get_amount_in()."""

    def test_basic(self):
        """Buying 90 out of (1000, 1000) costs 100."""
        assert uniswap_v2.get_amount_in(90, 1000, 1000) == 100

    def test_zero_output(self):
        with pytest.raises(InsufficientOutputAmount):
            uniswap_v2.get_amount_in(0, 1000, 1000)

    def test_empty_reserves(self):
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.get_amount_in(10, 0, 1000)

    def test_output_equal_to_reserve(self):
        """The whole output reserve can never be bought."""
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.get_amount_in(1000, 1000, 1000)
        with pytest.raises(InsufficientLiquidity):
            uniswap_v2.get_amount_in(1001, 1000, 1000)

    @pytest.mark.parametrize("amount_out", [1, 10, 90, 500, 999])
    def test_above_exact_inverse(self, amount_out):
        """Rounding is strictly in the pool's favour."""
        reserve_in, reserve_out = 1000, 1000
        amount_in = uniswap_v2.get_amount_in(amount_out, reserve_in, reserve_out)
        # amount_in > reserve_in * out * 1000 / ((reserve_out - out) * 997)
        assert amount_in * (reserve_out - amount_out) * 997 > reserve_in * amount_out * 1000


class TestRoundTrip:
    """Rounding properties across get_amount_in / get_amount_out."""

    @pytest.mark.parametrize("amount_out", [1, 2, 50, 90, 996, 10**5, 5 * 10**5])
    def test_buying_then_selling_covers_output(self, amount_out):
        """Paying get_amount_in(y) always yields at least y."""
        reserve_in, reserve_out = 10**6, 10**6
        amount_in = uniswap_v2.get_amount_in(amount_out, reserve_in, reserve_out)
        assert uniswap_v2.get_amount_out(amount_in, reserve_in, reserve_out) >= amount_out

    @pytest.mark.parametrize("amount_in", [1000, 1001, 1002, 12_345, 10**5])
    def test_selling_then_buying_costs_at_most_one_more(self, amount_in):
        """Buying back the output of x never costs more than x + 1."""
        reserve_in, reserve_out = 10**6, 10**6
        amount_out = uniswap_v2.get_amount_out(amount_in, reserve_in, reserve_out)
        assert uniswap_v2.get_amount_in(amount_out, reserve_in, reserve_out) <= amount_in + 1

    def test_literal_inverse_can_undershoot(self):
        """Several inputs floor to one output; the inverse returns the smallest."""
        amount_out = uniswap_v2.get_amount_out(1002, 10**6, 10**6)
        assert amount_out == 997
        assert uniswap_v2.get_amount_in(amount_out, 10**6, 10**6) == 1001


class TestFeeTiers:
    """Tests for non-default fee multipliers."""

    def test_amm_for_fee_shares_default(self):
        assert amm_for_fee(997) is uniswap_v2

    def test_lower_fee_pays_more(self):
        assert amm_for_fee(998).get_amount_out(100, 1000, 1000) >= uniswap_v2.get_amount_out(
            100, 1000, 1000
        )

    def test_fee_free(self):
        """Multiplier 1000 prices like plain x * y = k."""
        # 100 * 1000 / 1100 = 90.9
        assert UniswapV2(1000).get_amount_out(100, 1000, 1000) == 90

    def test_invalid_multiplier(self):
        with pytest.raises(ValueError):
            UniswapV2(0)
        with pytest.raises(ValueError):
            UniswapV2(1001)
