"""Read-only API endpoints over a deployed exchange."""

import structlog
from fastapi import APIRouter, Depends

from dex.exchange import Exchange, get_default_exchange
from dex.models.api import (
    BestRouteRequest,
    BestRouteResponse,
    ErrorResponse,
    PairInfo,
    PairList,
    QuoteRequest,
    QuoteResponse,
    RouteKind,
)

logger = structlog.get_logger()

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Engine rejected the request"},
        404: {"model": ErrorResponse, "description": "No pair for the assets"},
    }
)


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a prepared exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange
    """
    return get_default_exchange()


@router.get("/pairs")
def list_pairs(exchange: Exchange = Depends(get_exchange)) -> PairList:
    """All pairs in creation order."""
    factory = exchange.factory
    pairs = [PairInfo.from_pair(factory.pair_at(address)) for address in factory.all_pairs()]
    return PairList(pairs=pairs, count=len(pairs))


@router.get("/pairs/{asset_a}/{asset_b}")
def get_pair(asset_a: str, asset_b: str, exchange: Exchange = Depends(get_exchange)) -> PairInfo:
    """State of the pair for two assets, in either order."""
    return PairInfo.from_pair(exchange.pair(asset_a, asset_b))


@router.post("/quote/exact-in")
def quote_exact_in(
    request: QuoteRequest, exchange: Exchange = Depends(get_exchange)
) -> QuoteResponse:
    """Amounts along a path for an exact input."""
    route = exchange.router.quote_exact_in(int(request.amount), request.path)
    logger.debug("quote_exact_in", path=request.path, amount_out=route.amount_out)
    return QuoteResponse.from_route(route)


@router.post("/quote/exact-out")
def quote_exact_out(
    request: QuoteRequest, exchange: Exchange = Depends(get_exchange)
) -> QuoteResponse:
    """Amounts along a path for an exact output."""
    route = exchange.router.quote_exact_out(int(request.amount), request.path)
    logger.debug("quote_exact_out", path=request.path, amount_in=route.amount_in)
    return QuoteResponse.from_route(route)


@router.post("/quote/best-route")
def best_route(
    request: BestRouteRequest, exchange: Exchange = Depends(get_exchange)
) -> BestRouteResponse:
    """Best path between two assets within the hop limit."""
    amount = int(request.amount)
    if request.kind == RouteKind.EXACT_IN:
        route = exchange.router.best_route_exact_in(
            amount, request.asset_in, request.asset_out, request.max_hops
        )
    else:
        route = exchange.router.best_route_exact_out(
            amount, request.asset_in, request.asset_out, request.max_hops
        )
    if route is None:
        logger.info("no_route", asset_in=request.asset_in, asset_out=request.asset_out)
        return BestRouteResponse()
    return BestRouteResponse(route=QuoteResponse.from_route(route))
