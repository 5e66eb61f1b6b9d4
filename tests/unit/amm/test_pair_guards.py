"""Tests for the pair lock, transfer failures and protocol fee."""

import pytest

from dex.errors import Locked, NotAuthorized, TransferFailed
from tests.helpers import ADMIN, ALICE, BOB, FEE_TO, pay_in, sorted_tokens
from tests.helpers.tokens import FailingToken, ReentrantToken


def _deploy(exchange, token_cls, symbol):
    ledger = exchange.ledger
    return token_cls(ledger, ledger.next_address(exchange.deployer), symbol=symbol)


def _outputs(pair, asset, amount):
    """(amount0_out, amount1_out) taking `amount` of `asset` out of pair."""
    return (amount, 0) if pair.asset0 == asset.address else (0, amount)


class TestReentrancy:
    """A malicious asset cannot re-enter a pair mid-operation."""

    @pytest.fixture
    def evil_pool(self, exchange, token_b):
        evil = _deploy(exchange, ReentrantToken, "EVIL")
        exchange.factory.create_pair(evil.address, token_b.address)
        pair = exchange.pair(evil.address, token_b.address)
        evil.mint(pair.address, 10_000)
        token_b.mint(pair.address, 10_000)
        pair.mint(ALICE)
        return pair, evil, token_b

    def test_sync_from_transfer_hook_is_rejected(self, exchange, evil_pool):
        pair, evil, token_b = evil_pool
        evil.hook = pair.sync
        token_b.mint(pair.address, 1000)
        reserves_before = pair.get_reserves()
        events_before = len(exchange.ledger.events)

        with pytest.raises(Locked):
            pair.swap(*_outputs(pair, evil, 100), BOB)

        assert pair.get_reserves() == reserves_before
        assert evil.balance_of(BOB) == 0
        assert len(exchange.ledger.events) == events_before
        assert not pair.locked

    def test_swap_from_burn_payout_is_rejected(self, evil_pool):
        pair, evil, token_b = evil_pool
        evil.hook = lambda: pair.swap(*_outputs(pair, token_b, 1), BOB)
        pair.transfer(ALICE, pair.address, 1000)

        with pytest.raises(Locked):
            pair.burn(ALICE)
        assert pair.balance_of(pair.address) == 1000

    def test_mint_from_flash_callback_is_rejected(self, exchange, evil_pool):
        pair, _, token_b = evil_pool
        with pytest.raises(Locked):
            pair.swap(*_outputs(pair, token_b, 100), BOB, callback=lambda *args: pair.mint(BOB))
        assert token_b.balance_of(BOB) == 0

    def test_lock_released_after_failure(self, evil_pool):
        pair, evil, _ = evil_pool
        evil.hook = pair.sync
        with pytest.raises(Locked):
            pair.swap(*_outputs(pair, evil, 100), BOB)
        evil.hook = None
        pair.sync()
        assert not pair.locked


class TestTransferFailure:
    """A failed asset transfer aborts the pair operation."""

    def test_swap_output_transfer_failure(self, exchange, token_b):
        bad = _deploy(exchange, FailingToken, "BAD")
        exchange.factory.create_pair(bad.address, token_b.address)
        pair = exchange.pair(bad.address, token_b.address)
        bad.mint(pair.address, 10_000)
        token_b.mint(pair.address, 10_000)
        pair.mint(ALICE)
        token_b.mint(pair.address, 1000)
        bad.failing = True

        with pytest.raises(TransferFailed):
            pair.swap(*_outputs(pair, bad, 500), BOB)
        assert pair.get_reserves()[:2] == (10_000, 10_000)


class TestProtocolFee:
    """Tests for the protocol's share of fee growth."""

    @pytest.fixture
    def fee_pool(self, exchange, empty_pair):
        exchange.factory.set_fee_recipient(FEE_TO, sender=ADMIN)
        t0, t1 = sorted_tokens(exchange, empty_pair)
        pay_in(t0, empty_pair, 1_000_000)
        pay_in(t1, empty_pair, 1_000_000)
        empty_pair.mint(ALICE)
        return empty_pair, t0, t1

    def test_k_last_recorded_when_fee_on(self, fee_pool):
        pair, _, _ = fee_pool
        assert pair.k_last == 10**12

    def test_fee_minted_on_next_liquidity_event(self, fee_pool, router):
        """Fee growth from one swap mints total * dRootK / (5 * rootK + rootKLast)."""
        pair, t0, _ = fee_pool
        out = router.get_amount_out(100_000, 1_000_000, 1_000_000)
        assert out == 90_661
        pay_in(t0, pair, 100_000)
        pair.swap(0, out, BOB)
        assert pair.balance_of(FEE_TO) == 0

        pair.transfer(ALICE, pair.address, 1000)
        pair.burn(ALICE)

        # rootK = isqrt(1_100_000 * 909_339) = 1_000_136
        # 1_000_000 * 136 // (1_000_136 * 5 + 1_000_000) = 22
        assert pair.balance_of(FEE_TO) == 22

    def test_no_fee_when_off(self, exchange, fee_pool, router):
        pair, t0, _ = fee_pool
        exchange.factory.set_fee_recipient(None, sender=ADMIN)
        pay_in(t0, pair, 100_000)
        pair.swap(0, router.get_amount_out(100_000, 1_000_000, 1_000_000), BOB)

        pair.transfer(ALICE, pair.address, 1000)
        pair.burn(ALICE)

        assert pair.balance_of(FEE_TO) == 0
        assert pair.k_last == 0

    def test_only_admin_switches_fee(self, exchange):
        with pytest.raises(NotAuthorized):
            exchange.factory.set_fee_recipient(FEE_TO, sender=BOB)
