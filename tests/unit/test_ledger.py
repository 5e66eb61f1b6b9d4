"""Tests for the ledger runtime: registry, clocks and call frames."""

import pytest

from dex.assets import Token
from dex.clock import ManualClock, SystemClock
from dex.errors import DexError, InsufficientLiquidity, InvalidAsset
from dex.ledger import Contract, FungibleAsset, Ledger
from tests.helpers import ALICE, BOB


@pytest.fixture
def world() -> Ledger:
    return Ledger(ManualClock(100))


def _token(ledger: Ledger, symbol: str = "TKN") -> Token:
    return Token(ledger, ledger.next_address(ALICE), symbol=symbol)


class TestRegistry:
    """Tests for contract lookup."""

    def test_register_and_lookup(self, world):
        token = _token(world)
        assert world.contract(token.address) is token
        assert world.contract(token.address.upper().replace("0X", "0x")) is token
        assert token.address in world

    def test_duplicate_address_rejected(self, world):
        token = _token(world)
        with pytest.raises(ValueError):
            Token(world, token.address, symbol="DUP")

    def test_next_address_is_unique_and_deterministic(self):
        first, second = Ledger(ManualClock()), Ledger(ManualClock())
        a1, a2 = first.next_address(ALICE), first.next_address(ALICE)
        assert a1 != a2
        assert second.next_address(ALICE) == a1
        assert len(a1) == 42

    def test_asset_lookup_requires_fungible(self, world):
        with pytest.raises(InvalidAsset):
            world.asset(BOB)

    def test_asset_lookup_rejects_non_asset_contract(self, world):
        """A registered contract without the transfer surface is not an asset."""
        plain = Contract(world, world.next_address(ALICE))
        plain.state = None
        world.register(plain)

        with pytest.raises(InvalidAsset):
            world.asset(plain.address)

    def test_asset_lookup_returns_token(self, world):
        token = _token(world)
        found = world.asset(token.address)
        assert found is token
        assert isinstance(found, FungibleAsset)


class TestTransactions:
    """Tests for atomic call frames."""

    def test_failure_restores_state_and_events(self, world):
        token = _token(world)
        token.mint(ALICE, 100)
        events_before = len(world.events)

        with pytest.raises(InsufficientLiquidity):
            with world.transaction("test"):
                token.transfer(ALICE, BOB, 60)
                assert token.balance_of(BOB) == 60
                raise InsufficientLiquidity()

        assert token.balance_of(ALICE) == 100
        assert token.balance_of(BOB) == 0
        assert len(world.events) == events_before
        assert world.depth == 0

    def test_caught_inner_failure_keeps_outer_changes(self, world):
        token = _token(world)
        token.mint(ALICE, 100)

        with world.transaction("outer"):
            token.transfer(ALICE, BOB, 10)
            with pytest.raises(DexError):
                with world.transaction("inner"):
                    token.transfer(ALICE, BOB, 50)
                    raise InsufficientLiquidity()

        assert token.balance_of(BOB) == 10
        assert token.balance_of(ALICE) == 90

    def test_contracts_deployed_in_failed_frame_are_forgotten(self, world):
        with pytest.raises(RuntimeError):
            with world.transaction("deploy"):
                token = _token(world)
                raise RuntimeError("boom")
        assert token.address not in world

    def test_failed_deploy_releases_its_address(self, world):
        """Deployer nonces roll back with the frame, so the address is reused."""
        with pytest.raises(RuntimeError):
            with world.transaction("deploy"):
                token = _token(world)
                raise RuntimeError("boom")

        retry = _token(world)

        assert retry.address == token.address
        assert world.contract(retry.address) is retry


class TestClocks:
    """Tests for time sources."""

    def test_manual_clock(self):
        clock = ManualClock(10)
        assert clock.advance(5) == 15
        clock.set(20)
        assert clock.now() == 20

    def test_manual_clock_never_goes_back(self):
        clock = ManualClock(10)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(9)

    def test_system_clock_is_monotonic(self):
        clock = SystemClock()
        first = clock.now()
        assert clock.now() >= first > 0
