"""Protocol constants for the constant-product exchange engine.

Centralizes well-known addresses and the default policy parameters. The
policy values (fee, minimum liquidity, protocol fee divisor) are defaults
only; pass an EngineConfig to override them.
"""

# The null identifier: never a valid asset, holds the locked minimum liquidity
ZERO_ADDRESS = "0x" + "00" * 20

# Liquidity shares minted to ZERO_ADDRESS on a pool's first deposit
MINIMUM_LIQUIDITY = 1000

# Trading fee: 0.3% expressed as 3/1000
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000

# Protocol fee takes 1/(divisor + 1) of fee growth, i.e. 1/6 with divisor 5
PROTOCOL_FEE_DIVISOR = 5

# Reserves must fit in 112 bits so UQ112x112 price ratios stay exact
UINT112_MAX = 2**112 - 1
UINT256_MAX = 2**256 - 1

# Creator salt mixed into CREATE2-style pair addresses
PAIR_INIT_HASH = "0x" + "96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f"

# Liquidity share token metadata
LP_TOKEN_NAME = "Constant Product LP"
LP_TOKEN_SYMBOL = "CP-LP"
LP_TOKEN_DECIMALS = 18

# Hop limit for route discovery
DEFAULT_MAX_HOPS = 3
