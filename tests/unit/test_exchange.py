"""Tests for exchange deployment wiring."""

import dex.exchange as exchange_module
from dex.assets import Token
from dex.clock import ManualClock
from dex.config import EngineConfig
from dex.exchange import Exchange, get_default_exchange
from tests.helpers import ADMIN


class TestDeploy:
    def test_contracts_registered(self, exchange):
        ledger = exchange.ledger
        for contract in (exchange.factory, exchange.router, exchange.wrapped_native):
            assert contract.address in ledger
            assert ledger.contract(contract.address) is contract

    def test_addresses_are_distinct(self, exchange):
        addresses = {
            exchange.factory.address,
            exchange.router.address,
            exchange.wrapped_native.address,
        }
        assert len(addresses) == 3

    def test_deployment_is_deterministic(self):
        first = Exchange.deploy(ADMIN, clock=ManualClock(0))
        second = Exchange.deploy(ADMIN, clock=ManualClock(0))
        assert first.factory.address == second.factory.address
        assert first.router.address == second.router.address

    def test_router_wiring(self, exchange):
        assert exchange.router.factory is exchange.factory
        assert exchange.router.wrapped_native == exchange.wrapped_native.address
        assert exchange.factory.fee_admin == ADMIN

    def test_custom_config(self):
        config = EngineConfig(fee_numerator=1, fee_denominator=1000)
        exchange = Exchange.deploy(ADMIN, config=config)
        assert exchange.factory.config is config
        # 1000 * 999 * 2000 / (1000 * 1000 + 1000 * 999)
        assert exchange.router.get_amount_out(1000, 1000, 2000) == 999

    def test_create_token(self, exchange):
        token = exchange.create_token("USD", decimals=6)
        assert isinstance(token, Token)
        assert token.decimals == 6
        assert exchange.ledger.asset(token.address) is token


class TestDefaultExchange:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setattr(exchange_module, "_default_exchange", None)
        monkeypatch.setenv("DEX_FEE_ADMIN", ADMIN)
        monkeypatch.setenv("DEX_FEE_NUMERATOR", "5")

        exchange = get_default_exchange()

        assert exchange.factory.fee_admin == ADMIN
        assert exchange.factory.config.fee_numerator == 5
        assert get_default_exchange() is exchange
