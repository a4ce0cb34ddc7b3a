"""Deterministic pair address derivation (CREATE2)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from eth_abi.packed import encode_packed
from eth_utils import keccak

from amm_router.constants import CREATE2_PREFIX, UNISWAP_V2_INIT_CODE_HASH
from amm_router.models.types import address_to_bytes
from amm_router.pairs.ordering import sort_tokens

if TYPE_CHECKING:
    from amm_router.config import RouterContext


def pair_salt(token_a: str, token_b: str) -> bytes:
    """CREATE2 salt of a pair: keccak256(abi.encodePacked(token0, token1))."""
    token0, token1 = sort_tokens(token_a, token_b)
    return keccak(encode_packed(["address", "address"], [token0, token1]))


def pair_for(
    factory: str,
    token_a: str,
    token_b: str,
    init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH,
) -> str:
    """Compute the address of the pair for two tokens without any lookup.

    address = keccak256(0xff ++ factory ++ salt ++ init_code_hash)[12:]

    The result depends only on the arguments, so it can address a pair
    that has not been created yet. Token order does not matter.

    Args:
        factory: Factory address that deploys the pairs
        token_a: First token address
        token_b: Second token address
        init_code_hash: keccak256 of the pair creation code (0x-hex)

    Returns:
        Lowercase 0x-prefixed pair address

    Raises:
        IdenticalAddresses: If token_a == token_b
        ZeroAddress: If either token is the zero address
    """
    preimage = (
        CREATE2_PREFIX
        + address_to_bytes(factory)
        + pair_salt(token_a, token_b)
        + bytes.fromhex(init_code_hash.removeprefix("0x"))
    )
    return "0x" + keccak(preimage)[12:].hex()


def pair_for_context(context: RouterContext, token_a: str, token_b: str) -> str:
    """pair_for using the factory and init code hash of a RouterContext."""
    return pair_for(context.factory, token_a, token_b, context.init_code_hash)


__all__ = ["pair_salt", "pair_for", "pair_for_context"]
