"""Pytest configuration and fixtures."""

import pytest

from dex.assets import Token
from dex.clock import ManualClock
from dex.exchange import Exchange
from tests.helpers import ADMIN, START_TIME


@pytest.fixture
def clock() -> ManualClock:
    """Ledger clock starting at START_TIME."""
    return ManualClock(START_TIME)


@pytest.fixture
def exchange(clock: ManualClock) -> Exchange:
    """Freshly deployed exchange with ADMIN as fee admin."""
    return Exchange.deploy(ADMIN, clock=clock)


@pytest.fixture
def ledger(exchange: Exchange):
    return exchange.ledger


@pytest.fixture
def factory(exchange: Exchange):
    return exchange.factory


@pytest.fixture
def router(exchange: Exchange):
    return exchange.router


@pytest.fixture
def token_a(exchange: Exchange) -> Token:
    return exchange.create_token("TKA")


@pytest.fixture
def token_b(exchange: Exchange) -> Token:
    return exchange.create_token("TKB")


@pytest.fixture
def token_c(exchange: Exchange) -> Token:
    return exchange.create_token("TKC")


@pytest.fixture
def token_d(exchange: Exchange) -> Token:
    return exchange.create_token("TKD")


@pytest.fixture
def empty_pair(exchange: Exchange, token_a: Token, token_b: Token):
    """Pair for token_a/token_b with no liquidity."""
    exchange.factory.create_pair(token_a.address, token_b.address)
    return exchange.pair(token_a.address, token_b.address)
