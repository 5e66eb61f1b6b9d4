"""Tests for the pair's liquidity-share token surface."""

import pytest

from dex.events import Approval, Transfer
from tests.helpers import ALICE, BOB, CAROL, pay_in, sorted_tokens


@pytest.fixture
def pair(exchange, empty_pair):
    t0, t1 = sorted_tokens(exchange, empty_pair)
    pay_in(t0, empty_pair, 1000)
    pay_in(t1, empty_pair, 4000)
    empty_pair.mint(ALICE)
    return empty_pair


class TestShareTransfers:
    """Shares move like any fungible asset."""

    def test_metadata(self, pair):
        assert pair.symbol == "CP-LP"
        assert pair.decimals == 18

    def test_transfer(self, exchange, pair):
        assert pair.transfer(ALICE, BOB, 400) is True
        assert pair.balance_of(ALICE) == 600
        assert pair.balance_of(BOB) == 400
        event = exchange.ledger.events.of_type(Transfer)[-1]
        assert (event.sender, event.recipient, event.amount) == (ALICE, BOB, 400)

    def test_transfer_more_than_balance_fails(self, pair):
        assert pair.transfer(ALICE, BOB, 1001) is False
        assert pair.balance_of(ALICE) == 1000

    def test_supply_unchanged_by_transfers(self, pair):
        pair.transfer(ALICE, BOB, 10)
        assert pair.total_supply == 2000


class TestAllowances:
    """Tests for approve / transfer_from."""

    def test_approve_emits(self, exchange, pair):
        assert pair.approve(ALICE, BOB, 300) is True
        assert pair.allowance(ALICE, BOB) == 300
        event = exchange.ledger.events.of_type(Approval)[-1]
        assert (event.owner, event.spender, event.amount) == (ALICE, BOB, 300)

    def test_transfer_from_spends_allowance(self, pair):
        pair.approve(ALICE, BOB, 300)

        assert pair.transfer_from(BOB, ALICE, CAROL, 200) is True
        assert pair.balance_of(CAROL) == 200
        assert pair.allowance(ALICE, BOB) == 100

    def test_transfer_from_beyond_allowance_fails(self, pair):
        pair.approve(ALICE, BOB, 100)
        assert pair.transfer_from(BOB, ALICE, CAROL, 101) is False
        assert pair.allowance(ALICE, BOB) == 100
        assert pair.balance_of(CAROL) == 0

    def test_allowance_kept_when_balance_short(self, pair):
        pair.approve(ALICE, BOB, 5000)
        assert pair.transfer_from(BOB, ALICE, CAROL, 2000) is False
        assert pair.allowance(ALICE, BOB) == 5000

    def test_owner_needs_no_allowance(self, pair):
        assert pair.transfer_from(ALICE, ALICE, BOB, 10) is True
