"""Wiring for a complete exchange: ledger, factory, router and wrapped native asset."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog

from dex.amm.pair import Pair
from dex.assets import Token
from dex.clock import Clock
from dex.config import EngineConfig
from dex.factory import Factory
from dex.ledger import Ledger
from dex.models.types import to_address
from dex.routing.router import Router

logger = structlog.get_logger()

# Deployer account used for the default exchange
DEFAULT_DEPLOYER = "0x" + "de" * 20


@dataclass
class Exchange:
    """A deployed exchange and the world it lives in."""

    ledger: Ledger
    factory: Factory
    router: Router
    wrapped_native: Token
    deployer: str

    @classmethod
    def deploy(
        cls,
        fee_admin: str,
        *,
        clock: Clock | None = None,
        config: EngineConfig | None = None,
        deployer: str = DEFAULT_DEPLOYER,
    ) -> Exchange:
        """Stand up a fresh ledger with factory, wrapped native asset and router."""
        deployer = to_address(deployer)
        ledger = Ledger(clock)
        factory = Factory(
            ledger,
            ledger.next_address(deployer),
            fee_admin=fee_admin,
            config=config if config is not None else EngineConfig(),
        )
        wrapped_native = Token(ledger, ledger.next_address(deployer), symbol="WNATIVE")
        router = Router(
            ledger,
            ledger.next_address(deployer),
            factory=factory,
            wrapped_native=wrapped_native.address,
        )
        logger.info(
            "exchange_deployed",
            factory=factory.address,
            router=router.address,
            wrapped_native=wrapped_native.address,
        )
        return cls(ledger, factory, router, wrapped_native, deployer)

    def create_token(self, symbol: str, decimals: int = 18) -> Token:
        """Deploy a new issuable token on this exchange's ledger."""
        return Token(
            self.ledger, self.ledger.next_address(self.deployer), symbol=symbol, decimals=decimals
        )

    def pair(self, asset_a: str, asset_b: str) -> Pair:
        """Pair object for two assets.

        Raises:
            PairNotFound: If the assets have no pair
        """
        return self.factory.pair_for(asset_a, asset_b)


_default_exchange: Exchange | None = None


def get_default_exchange() -> Exchange:
    """Process-wide exchange, configured from DEX_* environment variables."""
    global _default_exchange
    if _default_exchange is None:
        _default_exchange = Exchange.deploy(
            os.environ.get("DEX_FEE_ADMIN", DEFAULT_DEPLOYER),
            config=EngineConfig.from_env(),
        )
    return _default_exchange
