"""Shared account addresses and times for tests.

All addresses are lowercase, matching what the engine stores.

Usage:
    from tests.helpers import ALICE, BOB
"""

# =============================================================================
# Accounts
# =============================================================================

ADMIN = "0x" + "ad" * 20  # Factory fee admin
ALICE = "0x" + "a1" * 20  # Liquidity provider / trader
BOB = "0x" + "b0" * 20  # Trader / recipient
CAROL = "0x" + "ca" * 20
FEE_TO = "0x" + "fe" * 20  # Protocol fee recipient

ZERO = "0x" + "00" * 20

# =============================================================================
# Time
# =============================================================================

START_TIME = 1_700_000_000
DEADLINE = START_TIME + 3_600

# =============================================================================
# Mainnet reference data (deterministic pair address vectors)
# =============================================================================

UNISWAP_V2_FACTORY = "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
DAI_WETH_PAIR = "0xa478c2975ab1ea89e8196811f51a7b7ade33eb11"
USDC_WETH_PAIR = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
