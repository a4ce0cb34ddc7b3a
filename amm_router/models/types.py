"""Shared type definitions for addresses and amounts.

These types are used by the pricing library, the in-memory pools and the
API schemas.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from amm_router.safe_int import UINT256_MAX

# The zero sentinel; never a valid token
ZERO_ADDRESS = "0x" + "00" * 20

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
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


def validate_address(value: Any) -> str:
    """Pydantic hook: validate and lowercase an address."""
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {type(value).__name__}")
    return normalize_address(value, validate=True)


# Ethereum address, normalized to lowercase
Address = Annotated[str, BeforeValidator(validate_address)]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# 32-byte hash, hex encoded
Bytes32 = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address.

    Args:
        address: String to validate

    Returns:
        True if valid Ethereum address format
    """
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.fullmatch(address) is not None


def address_to_bytes(address: str) -> bytes:
    """Decode a 0x-prefixed address into its 20 raw bytes."""
    return bytes.fromhex(normalize_address(address, validate=True)[2:])


def short(address: str) -> str:
    """Last 8 hex chars of an address, for log lines."""
    return address[-8:]
