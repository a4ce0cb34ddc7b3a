"""Router configuration."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

from amm_router.constants import (
    DEFAULT_FEE_MULTIPLIER,
    FEE_DENOMINATOR,
    UNISWAP_V2_FACTORY,
    UNISWAP_V2_INIT_CODE_HASH,
    UNISWAP_V2_ROUTER,
    WETH,
)
from amm_router.models.types import normalize_address

_HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$")

ENV_PREFIX = "AMM_ROUTER_"


@dataclass(frozen=True)
class RouterContext:
    """Deployment-wide constants every router operation depends on.

    Fixed at construction time and passed explicitly to each operation
    instead of living in module globals.

    Attributes:
        factory: Address of the pair factory (CREATE2 deployer)
        weth: Address of the wrapped native token
        init_code_hash: keccak256 of the pair creation code, as 0x-hex.
            Part of every derived pair address.
        router: Address the router acts from when it holds funds in transit
            (wrapped native token, LP tokens being unwrapped)
        fee_multiplier: Input scaling over FEE_DENOMINATOR (997 = 0.3% fee)
    """

    factory: str = UNISWAP_V2_FACTORY
    weth: str = WETH
    init_code_hash: str = UNISWAP_V2_INIT_CODE_HASH
    router: str = UNISWAP_V2_ROUTER
    fee_multiplier: int = DEFAULT_FEE_MULTIPLIER

    def __post_init__(self) -> None:
        # Normalize in place; frozen dataclasses need object.__setattr__
        object.__setattr__(self, "factory", normalize_address(self.factory, validate=True))
        object.__setattr__(self, "weth", normalize_address(self.weth, validate=True))
        object.__setattr__(self, "router", normalize_address(self.router, validate=True))
        init_code_hash = self.init_code_hash.lower()
        if not _HASH_PATTERN.match(init_code_hash):
            raise ValueError(f"Invalid init code hash: {self.init_code_hash}")
        object.__setattr__(self, "init_code_hash", init_code_hash)
        if not 0 < self.fee_multiplier <= FEE_DENOMINATOR:
            raise ValueError(
                f"fee_multiplier must be in (0, {FEE_DENOMINATOR}], got {self.fee_multiplier}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RouterContext:
        """Build a context from AMM_ROUTER_* environment variables.

        Unset variables fall back to the mainnet UniswapV2 deployment:
        - AMM_ROUTER_FACTORY
        - AMM_ROUTER_WETH
        - AMM_ROUTER_INIT_CODE_HASH
        - AMM_ROUTER_ROUTER_ADDRESS
        - AMM_ROUTER_FEE_MULTIPLIER

        Raises:
            ValueError: If a variable holds an invalid address, hash or number
        """
        env = os.environ if environ is None else environ
        return cls(
            factory=env.get(f"{ENV_PREFIX}FACTORY", UNISWAP_V2_FACTORY),
            weth=env.get(f"{ENV_PREFIX}WETH", WETH),
            init_code_hash=env.get(f"{ENV_PREFIX}INIT_CODE_HASH", UNISWAP_V2_INIT_CODE_HASH),
            router=env.get(f"{ENV_PREFIX}ROUTER_ADDRESS", UNISWAP_V2_ROUTER),
            fee_multiplier=int(env.get(f"{ENV_PREFIX}FEE_MULTIPLIER", DEFAULT_FEE_MULTIPLIER)),
        )


# Default configuration instance
DEFAULT_CONTEXT = RouterContext()
