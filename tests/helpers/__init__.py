"""Test helpers module for shared test utilities.

- constants: Account addresses, times and reference vectors
- market: Funding and pool-seeding shortcuts
- tokens: Adversarial asset doubles
"""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    BOB,
    CAROL,
    DEADLINE,
    FEE_TO,
    START_TIME,
    ZERO,
)
from tests.helpers.market import fund, pay_in, seed_pair, sorted_tokens

__all__ = [
    # Constants
    "ADMIN",
    "ALICE",
    "BOB",
    "CAROL",
    "DEADLINE",
    "FEE_TO",
    "START_TIME",
    "ZERO",
    # Market helpers
    "fund",
    "pay_in",
    "seed_pair",
    "sorted_tokens",
]
