"""Request/response schemas for the quote API.

Field names are camelCase on the wire and snake_case in Python. Amounts
travel as decimal strings so values above 2**53 survive JSON clients.
"""

from pydantic import BaseModel, Field, model_validator

from amm_router.models.types import Address, Bytes32, Uint256


class PairReserves(BaseModel):
    """A pair's reserves, as read from chain by the caller."""

    token0: Address = Field(description="First token of the pair")
    token1: Address = Field(description="Second token of the pair")
    reserve0: Uint256 = Field(description="Reserve of token0")
    reserve1: Uint256 = Field(description="Reserve of token1")


class _WithPairs(BaseModel):
    """Base for requests priced against a reserve snapshot."""

    pairs: list[PairReserves] = Field(
        default_factory=list,
        description="Reserve snapshot for every pair the request touches",
    )

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _unique_pairs(self) -> "_WithPairs":
        seen: set[frozenset[str]] = set()
        for pair in self.pairs:
            key = frozenset((pair.token0, pair.token1))
            if key in seen:
                raise ValueError(f"Duplicate reserves for pair {pair.token0}/{pair.token1}")
            seen.add(key)
        return self


class PairAddressRequest(BaseModel):
    """Derive a pair address; factory and init code hash default to the server's."""

    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    factory: Address | None = None
    init_code_hash: Bytes32 | None = Field(default=None, alias="initCodeHash")

    model_config = {"populate_by_name": True}


class PairAddressResponse(BaseModel):
    pair: Address
    token0: Address
    token1: Address


class AmountsOutRequest(_WithPairs):
    amount_in: Uint256 = Field(alias="amountIn", description="Exact amount of path[0] sold")
    path: list[Address] = Field(description="Token path, at least 2 entries")


class AmountsInRequest(_WithPairs):
    amount_out: Uint256 = Field(alias="amountOut", description="Exact amount of path[-1] bought")
    path: list[Address] = Field(description="Token path, at least 2 entries")


class AmountsResponse(BaseModel):
    """One amount per path node."""

    amounts: list[Uint256]


class LiquidityRequest(_WithPairs):
    """Desired deposit and the minimums the caller accepts."""

    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    amount_a_desired: Uint256 = Field(alias="amountADesired")
    amount_b_desired: Uint256 = Field(alias="amountBDesired")
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")


class LiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Body of a 400 response."""

    error: str = Field(description="Error class name, e.g. InsufficientLiquidity")
    detail: str
