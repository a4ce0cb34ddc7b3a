"""Address types and API schemas."""

from amm_router.models.types import Address, Bytes32, Uint256

__all__ = [
    "Address",
    "Bytes32",
    "Uint256",
]
