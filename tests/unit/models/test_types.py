"""Tests for address and amount types."""

import pytest

from amm_router.models.types import is_valid_address, normalize_address
from tests.helpers import USDC, WETH


class TestIsValidAddress:
    """Tests for is_valid_address()."""

    def test_valid(self):
        assert is_valid_address(WETH)
        assert is_valid_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")

    @pytest.mark.parametrize(
        "address",
        [
            "0x" + "1_" * 20,
            "0x" + "gg" * 20,
            "0x" + "11" * 19,
            "0x" + "11" * 21,
            "11" * 21,
            " 0x" + "11" * 20,
            "0x" + "11" * 20 + "\n",
        ],
    )
    def test_invalid(self, address):
        assert not is_valid_address(address)

    def test_normalize_rejects_underscores(self):
        with pytest.raises(ValueError):
            normalize_address("0x" + "1_" * 20, validate=True)

    def test_normalize_lowercases(self):
        assert normalize_address(USDC.upper()[2:], validate=True) == USDC
