"""Type definitions for routing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HopResult:
    """One pair traversal within a route."""

    pair: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class RouteQuote:
    """Projected amounts along a path."""

    path: tuple[str, ...]
    amounts: tuple[int, ...]
    hops: tuple[HopResult, ...]

    @property
    def amount_in(self) -> int:
        return self.amounts[0]

    @property
    def amount_out(self) -> int:
        return self.amounts[-1]

    @property
    def is_multihop(self) -> bool:
        return len(self.path) > 2


__all__ = ["HopResult", "RouteQuote"]
