"""Asset graph and path discovery over a factory's pairs.

Nodes are assets, edges are pairs. Paths are lists of asset addresses
suitable for Router.get_amounts_out / get_amounts_in.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from dex.constants import DEFAULT_MAX_HOPS
from dex.models.types import normalize_address

if TYPE_CHECKING:
    from dex.factory import Factory


class TokenGraph:
    """Adjacency sets of assets connected by at least one pair."""

    def __init__(self) -> None:
        self._adjacency: dict[str, set[str]] = {}

    @classmethod
    def from_factory(cls, factory: Factory) -> TokenGraph:
        graph = cls()
        for address in factory.all_pairs():
            pair = factory.pair_at(address)
            graph.add_edge(pair.asset0, pair.asset1)
        return graph

    def add_edge(self, asset_a: str, asset_b: str) -> None:
        self._adjacency.setdefault(asset_a, set()).add(asset_b)
        self._adjacency.setdefault(asset_b, set()).add(asset_a)

    def get_neighbors(self, asset: str) -> set[str]:
        return self._adjacency.get(normalize_address(asset), set())

    def has_token(self, asset: str) -> bool:
        return normalize_address(asset) in self._adjacency

    @property
    def token_count(self) -> int:
        return len(self._adjacency)


class PathFinder:
    """Cached path queries over a factory.

    Pairs are never removed, so the graph only goes stale when the pair
    count grows; the cache is rebuilt whenever that count changes.

    Usage:
        finder = PathFinder(factory)
        paths = finder.find_all_paths(asset_in, asset_out, max_hops=2)
    """

    def __init__(self, factory: Factory) -> None:
        self._factory = factory
        self._graph: TokenGraph | None = None
        self._pair_count = -1
        self._path_cache: dict[tuple[str, str, int, int], list[list[str]]] = {}
        self._shortest_path_cache: dict[tuple[str, str, int], list[str] | None] = {}

    def invalidate(self) -> None:
        self._graph = None
        self._path_cache.clear()
        self._shortest_path_cache.clear()

    @property
    def graph(self) -> TokenGraph:
        count = self._factory.all_pairs_length()
        if self._graph is None or count != self._pair_count:
            self.invalidate()
            self._graph = TokenGraph.from_factory(self._factory)
            self._pair_count = count
        return self._graph

    def find_all_paths(
        self,
        asset_in: str,
        asset_out: str,
        max_hops: int = DEFAULT_MAX_HOPS,
        max_paths: int = 20,
    ) -> list[list[str]]:
        """Simple paths from asset_in to asset_out, shortest first.

        Args:
            asset_in: Starting asset
            asset_out: Target asset
            max_hops: Maximum number of pairs traversed
            max_paths: Stop after this many paths

        Returns:
            Paths as asset lists; empty if none exist
        """
        start = normalize_address(asset_in)
        target = normalize_address(asset_out)
        if start == target or max_hops < 1:
            return []

        graph = self.graph
        key = (start, target, max_hops, max_paths)
        if key in self._path_cache:
            return [list(p) for p in self._path_cache[key]]
        if not graph.has_token(start) or not graph.has_token(target):
            self._path_cache[key] = []
            return []

        paths: list[list[str]] = []
        queue: deque[list[str]] = deque([[start]])
        while queue and len(paths) < max_paths:
            path = queue.popleft()
            # Sorted so results are stable across runs
            for neighbor in sorted(graph.get_neighbors(path[-1])):
                if neighbor == target:
                    paths.append(path + [target])
                    if len(paths) >= max_paths:
                        break
                elif neighbor not in path and len(path) < max_hops:
                    queue.append(path + [neighbor])

        self._path_cache[key] = paths
        return [list(p) for p in paths]

    def find_shortest_path(
        self,
        asset_in: str,
        asset_out: str,
        max_hops: int = DEFAULT_MAX_HOPS,
    ) -> list[str] | None:
        """Fewest-hop path, or None if none exists within max_hops."""
        start = normalize_address(asset_in)
        target = normalize_address(asset_out)
        if start == target:
            return [start]

        graph = self.graph
        key = (start, target, max_hops)
        if key in self._shortest_path_cache:
            return self._shortest_path_cache[key]

        result: list[str] | None = None
        queue: deque[list[str]] = deque([[start]])
        visited = {start}
        while queue and result is None:
            path = queue.popleft()
            if len(path) > max_hops:
                continue
            for neighbor in sorted(graph.get_neighbors(path[-1])):
                if neighbor == target:
                    result = path + [neighbor]
                    break
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(path + [neighbor])

        self._shortest_path_cache[key] = result
        return result


__all__ = ["TokenGraph", "PathFinder"]
