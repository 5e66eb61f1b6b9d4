"""Pydantic models for the exchange HTTP API.

Amounts travel as decimal strings so 112-bit reserves and UQ112.112 prices
survive JSON intact.
"""

from enum import Enum

from pydantic import BaseModel, Field

from dex.amm.pair import Pair
from dex.models.types import Address, Uint256
from dex.routing.types import RouteQuote


class PairInfo(BaseModel):
    """Committed state of one pair."""

    address: Address
    asset0: Address
    asset1: Address
    reserve0: Uint256
    reserve1: Uint256
    total_supply: Uint256 = Field(alias="totalSupply")
    block_timestamp_last: int = Field(alias="blockTimestampLast")
    price0_cumulative_last: Uint256 = Field(alias="price0CumulativeLast")
    price1_cumulative_last: Uint256 = Field(alias="price1CumulativeLast")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pair(cls, pair: Pair) -> "PairInfo":
        return cls(
            address=pair.address,
            asset0=pair.asset0,
            asset1=pair.asset1,
            reserve0=pair.reserve0,
            reserve1=pair.reserve1,
            total_supply=pair.total_supply,
            block_timestamp_last=pair.block_timestamp_last,
            price0_cumulative_last=pair.price0_cumulative_last,
            price1_cumulative_last=pair.price1_cumulative_last,
        )


class PairList(BaseModel):
    pairs: list[PairInfo]
    count: int


class QuoteRequest(BaseModel):
    """Amount and asset path for a multi-hop quote."""

    amount: Uint256
    path: list[Address] = Field(min_length=2)


class QuoteResponse(BaseModel):
    path: list[Address]
    amounts: list[Uint256]

    @classmethod
    def from_route(cls, route: RouteQuote) -> "QuoteResponse":
        return cls(path=list(route.path), amounts=[str(a) for a in route.amounts])


class RouteKind(str, Enum):
    """Which side of the trade is fixed."""

    EXACT_IN = "exactIn"
    EXACT_OUT = "exactOut"


class BestRouteRequest(BaseModel):
    """Search for the best path between two assets."""

    asset_in: Address = Field(alias="assetIn")
    asset_out: Address = Field(alias="assetOut")
    amount: Uint256
    kind: RouteKind = RouteKind.EXACT_IN
    max_hops: int = Field(default=3, ge=1, le=5, alias="maxHops")

    model_config = {"populate_by_name": True}


class BestRouteResponse(BaseModel):
    """Best route found, or `route: null` when the assets are not connected."""

    route: QuoteResponse | None = None


class ErrorResponse(BaseModel):
    error: str
    category: str
    detail: str
