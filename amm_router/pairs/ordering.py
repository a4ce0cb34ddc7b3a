"""Canonical ordering of token pairs."""

from amm_router.errors import IdenticalAddresses, ZeroAddress
from amm_router.models.types import ZERO_ADDRESS, normalize_address


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the pair (token0, token1) in canonical order.

    Pair contracts index their two sides by this order: token0 is the
    address with the smaller 160-bit value. Lowercase 0x-hex strings of
    equal length compare the same way as the integers they encode.

    Args:
        token_a: First token address (any case)
        token_b: Second token address (any case)

    Returns:
        Normalized (token0, token1) with token0 < token1

    Raises:
        IdenticalAddresses: If both addresses are the same token
        ZeroAddress: If the lower address is the zero address
        ValueError: If either input is not a 20-byte hex address
    """
    a = normalize_address(token_a, validate=True)
    b = normalize_address(token_b, validate=True)
    if a == b:
        raise IdenticalAddresses(f"Identical addresses: {a}")
    token0, token1 = (a, b) if a < b else (b, a)
    if token0 == ZERO_ADDRESS:
        raise ZeroAddress("Zero address in pair")
    return token0, token1


__all__ = ["sort_tokens"]
