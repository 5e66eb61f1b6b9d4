"""Engine configuration."""

import os
from dataclasses import dataclass

from dex.constants import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    MINIMUM_LIQUIDITY,
    PAIR_INIT_HASH,
    PROTOCOL_FEE_DIVISOR,
)


@dataclass(frozen=True)
class EngineConfig:
    """Centralized policy parameters for pairs and routers.

    The trading fee and minimum liquidity lock are policy choices, not
    properties of the constant-product math, so they live here rather than
    inside the formulas. A Router and the Pairs it trades through must share
    the same config or previews will diverge from execution.

    Attributes:
        fee_numerator: Fee charged on swap input, as numerator (default: 3)
        fee_denominator: Fee denominator (default: 1000, so 3/1000 = 0.3%)
        minimum_liquidity: Shares permanently locked on the first deposit
            (default: 1000)
        protocol_fee_divisor: Protocol fee takes 1/(divisor + 1) of fee
            growth when a fee recipient is set (default: 5, i.e. 1/6)
        pair_init_hash: 32-byte hex salt used for deterministic pair
            addresses
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    minimum_liquidity: int = MINIMUM_LIQUIDITY
    protocol_fee_divisor: int = PROTOCOL_FEE_DIVISOR
    pair_init_hash: str = PAIR_INIT_HASH

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not 0 <= self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}): {self.fee_numerator}"
            )
        if self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity must be non-negative: {self.minimum_liquidity}")
        if self.protocol_fee_divisor <= 0:
            raise ValueError(
                f"protocol_fee_divisor must be positive: {self.protocol_fee_divisor}"
            )
        init_hash = self.pair_init_hash
        if not (init_hash.startswith("0x") and len(init_hash) == 66):
            raise ValueError(f"pair_init_hash must be 0x + 64 hex chars: {init_hash}")
        try:
            bytes.fromhex(init_hash[2:])
        except ValueError as err:
            raise ValueError(f"pair_init_hash is not hex: {init_hash}") from err

    @property
    def fee_multiplier(self) -> int:
        """Share of the input kept after the fee, scaled by fee_denominator.

        For 3/1000 this returns 997.
        """
        return self.fee_denominator - self.fee_numerator

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from DEX_* environment variables, defaulting each."""
        return cls(
            fee_numerator=int(os.environ.get("DEX_FEE_NUMERATOR", FEE_NUMERATOR)),
            fee_denominator=int(os.environ.get("DEX_FEE_DENOMINATOR", FEE_DENOMINATOR)),
            minimum_liquidity=int(os.environ.get("DEX_MINIMUM_LIQUIDITY", MINIMUM_LIQUIDITY)),
            protocol_fee_divisor=int(
                os.environ.get("DEX_PROTOCOL_FEE_DIVISOR", PROTOCOL_FEE_DIVISOR)
            ),
            pair_init_hash=os.environ.get("DEX_PAIR_INIT_HASH", PAIR_INIT_HASH),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
