"""Shared address and amount types.

Assets, pairs and accounts are all identified by 20-byte hex addresses kept
in lowercase so that string comparison gives the canonical asset order.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from dex.constants import UINT256_MAX
from dex.errors import InvalidAddress


def validate_uint256(value: Any) -> str:
    """Validate that a value is a uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


# 20-byte address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str) -> str:
    """Lowercase an address and ensure the 0x prefix. Does not validate."""
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    return addr


def is_valid_address(address: object) -> bool:
    """Check if a value is a 0x-prefixed 20-byte hex string."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != 42:
        return False
    try:
        bytes.fromhex(address[2:])
    except ValueError:
        return False
    return True


def to_address(address: str) -> str:
    """Validate and normalize an address.

    Raises:
        InvalidAddress: If address is not a 0x-prefixed 20-byte hex string
    """
    if not is_valid_address(address):
        raise InvalidAddress(f"Invalid address: {address!r}", address=address)
    return address.lower()


def address_bytes(address: str) -> bytes:
    """Raw 20 bytes of a validated address."""
    return bytes.fromhex(to_address(address)[2:])
