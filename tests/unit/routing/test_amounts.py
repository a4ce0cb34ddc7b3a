"""Tests for multi-hop amount calculation."""

import pytest

from amm_router.amm.uniswap_v2 import uniswap_v2
from amm_router.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InvalidPath,
    PairNotFound,
)
from amm_router.routing.amounts import get_amounts_in, get_amounts_out
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C


@pytest.fixture
def two_hop(chain):
    """A/B and B/C pairs, each holding (1000, 1000)."""
    chain.seed_pair(TOKEN_A, TOKEN_B, 1000, 1000)
    chain.seed_pair(TOKEN_B, TOKEN_C, 1000, 1000)
    return chain


class TestGetAmountsOut:
    """Tests for get_amounts_out()."""

    def test_single_hop(self, two_hop, context):
        assert get_amounts_out(context, two_hop.factory, 100, [TOKEN_A, TOKEN_B]) == [100, 90]

    def test_two_hops(self, two_hop, context):
        """Each hop prices the previous hop's output."""
        amounts = get_amounts_out(context, two_hop.factory, 100, [TOKEN_A, TOKEN_B, TOKEN_C])
        assert amounts == [100, 90, 82]

    def test_matches_sequential_single_hops(self, chain, context):
        chain.seed_pair(TOKEN_A, TOKEN_B, 5 * 10**6, 7 * 10**6)
        chain.seed_pair(TOKEN_B, TOKEN_C, 3 * 10**6, 10**6)
        amounts = get_amounts_out(context, chain.factory, 12_345, [TOKEN_A, TOKEN_B, TOKEN_C])

        hop0 = uniswap_v2.get_amount_out(12_345, 5 * 10**6, 7 * 10**6)
        hop1 = uniswap_v2.get_amount_out(hop0, 3 * 10**6, 10**6)
        assert amounts == [12_345, hop0, hop1]

    def test_reverse_direction(self, chain, context):
        """Reserves are oriented to the direction of travel."""
        chain.seed_pair(TOKEN_A, TOKEN_B, 1000, 2000)
        assert get_amounts_out(context, chain.factory, 100, [TOKEN_B, TOKEN_A])[1] == (
            uniswap_v2.get_amount_out(100, 2000, 1000)
        )

    def test_short_path(self, two_hop, context):
        with pytest.raises(InvalidPath):
            get_amounts_out(context, two_hop.factory, 100, [TOKEN_A])
        with pytest.raises(InvalidPath):
            get_amounts_out(context, two_hop.factory, 100, [])

    def test_zero_input(self, two_hop, context):
        with pytest.raises(InsufficientInputAmount):
            get_amounts_out(context, two_hop.factory, 0, [TOKEN_A, TOKEN_B])

    def test_intermediate_rounds_to_zero(self, chain, context):
        """A hop whose output floors to zero stops the next hop."""
        chain.seed_pair(TOKEN_A, TOKEN_B, 10**9, 1)
        chain.seed_pair(TOKEN_B, TOKEN_C, 1000, 1000)
        with pytest.raises(InsufficientInputAmount):
            get_amounts_out(context, chain.factory, 10, [TOKEN_A, TOKEN_B, TOKEN_C])

    def test_missing_pair(self, two_hop, context):
        with pytest.raises(PairNotFound):
            get_amounts_out(context, two_hop.factory, 100, [TOKEN_A, TOKEN_C])

    def test_empty_pair(self, chain, context):
        chain.factory.create_pair(TOKEN_A, TOKEN_B)
        with pytest.raises(InsufficientLiquidity):
            get_amounts_out(context, chain.factory, 100, [TOKEN_A, TOKEN_B])


class TestGetAmountsIn:
    """Tests for get_amounts_in()."""

    def test_single_hop(self, two_hop, context):
        assert get_amounts_in(context, two_hop.factory, 90, [TOKEN_A, TOKEN_B]) == [100, 90]

    def test_two_hops(self, two_hop, context):
        """Walks the path backwards from the requested output."""
        amounts = get_amounts_in(context, two_hop.factory, 82, [TOKEN_A, TOKEN_B, TOKEN_C])
        assert amounts == [100, 90, 82]

    def test_output_exceeds_reserve(self, two_hop, context):
        with pytest.raises(InsufficientLiquidity):
            get_amounts_in(context, two_hop.factory, 1000, [TOKEN_A, TOKEN_B])

    def test_short_path(self, two_hop, context):
        with pytest.raises(InvalidPath):
            get_amounts_in(context, two_hop.factory, 10, [TOKEN_C])

    def test_covers_requested_output(self, two_hop, context):
        """Selling the computed input yields at least the requested output."""
        path = [TOKEN_A, TOKEN_B, TOKEN_C]
        amounts_in = get_amounts_in(context, two_hop.factory, 50, path)
        amounts_out = get_amounts_out(context, two_hop.factory, amounts_in[0], path)
        assert amounts_out[-1] >= 50
