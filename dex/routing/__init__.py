"""Routing: multi-hop quotes, path discovery and the router contract."""

from dex.routing.pathfinding import PathFinder, TokenGraph
from dex.routing.router import Router
from dex.routing.types import HopResult, RouteQuote

__all__ = ["HopResult", "PathFinder", "RouteQuote", "Router", "TokenGraph"]
