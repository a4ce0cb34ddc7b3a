"""Tests for the in-memory pair, factory and ledger."""

import pytest

from amm_router.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidTo,
    LedgerError,
    PairError,
    PairNotFound,
)
from amm_router.models.types import ZERO_ADDRESS
from amm_router.pairs.locator import pair_for_context
from amm_router.pools.interfaces import PairContract, PairFactory, TokenLedger
from tests.helpers import ALICE, BOB, NOW, TOKEN_A, TOKEN_B, WETH


class TestInMemoryLedger:
    """Tests for InMemoryLedger."""

    def test_transfer(self, chain):
        chain.ledger.mint(TOKEN_A, ALICE, 100)
        chain.ledger.transfer(TOKEN_A, ALICE, BOB, 40)
        assert chain.ledger.balance_of(TOKEN_A, ALICE) == 60
        assert chain.ledger.balance_of(TOKEN_A, BOB) == 40

    def test_transfer_fee_is_burned(self, chain):
        chain.ledger.set_transfer_fee(TOKEN_A, 250)  # 2.5%
        chain.ledger.mint(TOKEN_A, ALICE, 1000)
        chain.ledger.transfer(TOKEN_A, ALICE, BOB, 1000)
        assert chain.ledger.balance_of(TOKEN_A, BOB) == 975
        assert chain.ledger.total_supply(TOKEN_A) == 975

    def test_invalid_transfer_fee(self, chain):
        with pytest.raises(ValueError):
            chain.ledger.set_transfer_fee(TOKEN_A, 10_000)

    def test_insufficient_balance(self, chain):
        chain.ledger.mint(TOKEN_A, ALICE, 10)
        with pytest.raises(LedgerError):
            chain.ledger.transfer(TOKEN_A, ALICE, BOB, 11)

    def test_wrap_and_unwrap(self, chain):
        chain.ledger.fund_native(ALICE, 100)
        chain.ledger.deposit(ALICE, 60)
        assert chain.ledger.native_balance_of(ALICE) == 40
        assert chain.ledger.balance_of(WETH, ALICE) == 60

        chain.ledger.withdraw(ALICE, 10)
        assert chain.ledger.native_balance_of(ALICE) == 50
        assert chain.ledger.balance_of(WETH, ALICE) == 50

    def test_insufficient_native(self, chain):
        chain.ledger.fund_native(ALICE, 5)
        with pytest.raises(LedgerError):
            chain.ledger.transfer_native(ALICE, BOB, 6)
        with pytest.raises(LedgerError):
            chain.ledger.deposit(ALICE, 6)

    def test_negative_amounts_rejected(self, chain):
        """A negative transfer would pull tokens from the recipient."""
        chain.ledger.mint(TOKEN_A, BOB, 50)
        chain.ledger.fund_native(BOB, 50)
        with pytest.raises(LedgerError):
            chain.ledger.transfer(TOKEN_A, ALICE, BOB, -10)
        with pytest.raises(LedgerError):
            chain.ledger.transfer_native(ALICE, BOB, -10)
        with pytest.raises(LedgerError):
            chain.ledger.mint(TOKEN_A, ALICE, -1)
        with pytest.raises(LedgerError):
            chain.ledger.burn(TOKEN_A, BOB, -1)
        with pytest.raises(LedgerError):
            chain.ledger.fund_native(ALICE, -1)
        with pytest.raises(LedgerError):
            chain.ledger.deposit(ALICE, -1)
        assert chain.ledger.balance_of(TOKEN_A, ALICE) == 0
        assert chain.ledger.balance_of(TOKEN_A, BOB) == 50
        assert chain.ledger.native_balance_of(BOB) == 50
        assert chain.ledger.total_supply(TOKEN_A) == 50

    def test_case_insensitive_owners(self, chain):
        chain.ledger.mint(TOKEN_A, ALICE.upper().replace("0X", "0x"), 5)
        assert chain.ledger.balance_of(TOKEN_A, ALICE) == 5


class TestInMemoryPair:
    """Tests for InMemoryPair."""

    @pytest.fixture
    def pair(self, chain):
        return chain.seed_pair(TOKEN_A, TOKEN_B, 1000, 1000)

    def test_satisfies_protocol(self, chain, pair):
        assert isinstance(pair, PairContract)
        assert isinstance(chain.factory, PairFactory)
        assert isinstance(chain.ledger, TokenLedger)

    def test_reserves_and_timestamp(self, pair):
        assert pair.get_reserves() == (1000, 1000, NOW % 2**32)

    def test_first_mint_locks_minimum(self, chain):
        address = chain.factory.create_pair(TOKEN_A, TOKEN_B)
        pair = chain.factory.pair_at(address)
        chain.ledger.mint(TOKEN_A, address, 4000)
        chain.ledger.mint(TOKEN_B, address, 9000)

        assert pair.mint(ALICE) == 5000
        assert chain.ledger.balance_of(address, ZERO_ADDRESS) == 1000
        assert pair.total_supply == 6000

    def test_first_mint_too_small(self, chain):
        address = chain.factory.create_pair(TOKEN_A, TOKEN_B)
        chain.ledger.mint(TOKEN_A, address, 1000)
        chain.ledger.mint(TOKEN_B, address, 1000)
        with pytest.raises(InsufficientLiquidityMinted):
            chain.factory.pair_at(address).mint(ALICE)

    def test_burn_without_supply(self, pair):
        """Seeded pairs have reserves but no LP tokens."""
        with pytest.raises(InsufficientLiquidityBurned):
            pair.burn(ALICE)

    def test_swap(self, chain, pair):
        chain.ledger.mint(TOKEN_A, pair.address, 100)
        pair.swap(0, 90, BOB)
        assert chain.ledger.balance_of(TOKEN_B, BOB) == 90
        assert pair.get_reserves()[:2] == (1100, 910)

    def test_swap_rejects_flash_data(self, pair):
        with pytest.raises(PairError):
            pair.swap(0, 1, BOB, b"\x01")

    def test_swap_without_output(self, pair):
        with pytest.raises(InsufficientOutputAmount):
            pair.swap(0, 0, BOB)

    def test_swap_draining_reserve(self, pair):
        with pytest.raises(InsufficientLiquidity):
            pair.swap(0, 1000, BOB)

    def test_swap_to_pair_token(self, pair):
        with pytest.raises(InvalidTo):
            pair.swap(0, 10, TOKEN_A)

    def test_swap_without_input(self, pair):
        with pytest.raises(InsufficientInputAmount):
            pair.swap(0, 10, BOB)

    def test_skim(self, chain, pair):
        chain.ledger.mint(TOKEN_A, pair.address, 7)
        pair.skim(BOB)
        assert chain.ledger.balance_of(TOKEN_A, BOB) == 7
        assert pair.get_reserves()[:2] == (1000, 1000)


class TestInMemoryFactory:
    """Tests for InMemoryFactory."""

    def test_create_at_derived_address(self, chain, context):
        address = chain.factory.create_pair(TOKEN_B, TOKEN_A)
        assert address == pair_for_context(context, TOKEN_A, TOKEN_B)
        assert chain.factory.get_pair(TOKEN_A, TOKEN_B) == address
        assert chain.factory.all_pairs == [address]

        pair = chain.factory.pair_at(address)
        assert (pair.token0, pair.token1) == (TOKEN_A, TOKEN_B)

    def test_create_twice(self, chain):
        chain.factory.create_pair(TOKEN_A, TOKEN_B)
        with pytest.raises(PairError):
            chain.factory.create_pair(TOKEN_B, TOKEN_A)

    def test_unknown_address(self, chain, context):
        assert chain.factory.get_pair(TOKEN_A, TOKEN_B) is None
        with pytest.raises(PairNotFound):
            chain.factory.pair_at(pair_for_context(context, TOKEN_A, TOKEN_B))


class TestInMemoryChain:
    """Tests for transactions and seeding."""

    def test_transaction_reverts_on_error(self, chain):
        pair = chain.seed_pair(TOKEN_A, TOKEN_B, 1000, 1000)
        chain.ledger.mint(TOKEN_A, ALICE, 100)

        with pytest.raises(RuntimeError):
            with chain.transaction():
                chain.ledger.transfer(TOKEN_A, ALICE, pair.address, 100)
                pair.swap(0, 90, BOB)
                raise RuntimeError("abort")

        assert chain.ledger.balance_of(TOKEN_A, ALICE) == 100
        assert chain.ledger.balance_of(TOKEN_B, BOB) == 0
        assert pair.get_reserves()[:2] == (1000, 1000)

    def test_transaction_commits(self, chain):
        chain.ledger.mint(TOKEN_A, ALICE, 100)
        with chain.transaction():
            chain.ledger.transfer(TOKEN_A, ALICE, BOB, 100)
        assert chain.ledger.balance_of(TOKEN_A, BOB) == 100

    def test_seed_pair_grows_existing(self, chain):
        chain.seed_pair(TOKEN_A, TOKEN_B, 100, 200)
        pair = chain.seed_pair(TOKEN_B, TOKEN_A, 300, 150)
        assert pair.get_reserves()[:2] == (150, 300)

    def test_seed_pair_cannot_shrink(self, chain):
        chain.seed_pair(TOKEN_A, TOKEN_B, 100, 200)
        with pytest.raises(ValueError):
            chain.seed_pair(TOKEN_A, TOKEN_B, 50, 200)
