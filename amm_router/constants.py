"""Protocol constants for the constant-product router.

Centralizes well-known addresses and pool parameters.
"""

from amm_router.models.types import is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate and return an address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Fee: amount_in is scaled by FEE_MULTIPLIER / FEE_DENOMINATOR (0.3% fee)
FEE_DENOMINATOR = 1000
DEFAULT_FEE_MULTIPLIER = 997

# Liquidity permanently locked by the first mint of every pair
MINIMUM_LIQUIDITY = 10**3

# Prefix byte of a CREATE2 address preimage
CREATE2_PREFIX = b"\xff"

# Mainnet UniswapV2 deployment (lowercase for consistency)
# All addresses are validated at import time to catch typos early
UNISWAP_V2_FACTORY = _validate_address("factory", "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f")
UNISWAP_V2_ROUTER = _validate_address("router", "0x7a250d5630b4cf539739df2c5dacb4c659f2488d")
WETH = _validate_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")

# keccak256 of the UniswapV2Pair creation code. Identifies the pool
# implementation; changing it changes every derived pair address.
UNISWAP_V2_INIT_CODE_HASH = "0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f"
