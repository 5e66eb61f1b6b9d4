"""Router: liquidity and swap orchestration over a factory's pairs.

The router holds no balances between calls. Every operation pulls the
caller's assets straight into pair custody (the caller must have approved
the router), calls the pair, and lets the pair pay out to the recipient.
Deadlines are checked before anything else.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from dex.amm.constant_product import ConstantProductMath
from dex.amm.pair import Pair
from dex.constants import DEFAULT_MAX_HOPS
from dex.errors import (
    DexError,
    ExcessiveInputAmount,
    Expired,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientOutputAmount,
    InvalidPath,
    TransferFailed,
)
from dex.events import LiquidityAdded, LiquidityRemoved, SwapExecuted
from dex.factory import Factory, sort_assets
from dex.ledger import Contract, Ledger, atomic
from dex.models.types import to_address
from dex.routing.pathfinding import PathFinder
from dex.routing.types import HopResult, RouteQuote

logger = structlog.get_logger()


class Router(Contract):
    """Stateless front end for adding/removing liquidity and swapping.

    Attributes:
        factory: The factory whose pairs this router trades through
        math: Pricing formulas, sharing the factory's config
    """

    state: None

    def __init__(
        self,
        ledger: Ledger,
        address: str,
        *,
        factory: Factory,
        wrapped_native: str,
    ) -> None:
        super().__init__(ledger, address)
        self.state = None
        self.factory = factory
        self._wrapped_native = to_address(wrapped_native)
        self.math = ConstantProductMath(factory.config)
        self.path_finder = PathFinder(factory)
        ledger.register(self)

    @property
    def wrapped_native(self) -> str:
        return self._wrapped_native

    # =========================================================================
    # Pure helpers
    # =========================================================================

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        return self.math.quote(amount_a, reserve_a, reserve_b)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return self.math.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return self.math.get_amount_in(amount_out, reserve_in, reserve_out)

    def get_reserves(self, asset_a: str, asset_b: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_a, reserve_b).

        Raises:
            PairNotFound: If the assets have no pair
        """
        return self.factory.pair_for(asset_a, asset_b).reserves_for(asset_a)

    def quote_exact_in(self, amount_in: int, path: Sequence[str]) -> RouteQuote:
        """Project an exact input forward along path, hop by hop.

        Raises:
            InvalidPath: If path has fewer than two assets
            PairNotFound: If a hop has no pair
        """
        path = self._check_path(path)
        amounts = [amount_in]
        hops: list[HopResult] = []
        for asset_in, asset_out in zip(path, path[1:]):
            pair = self.factory.pair_for(asset_in, asset_out)
            reserve_in, reserve_out = pair.reserves_for(asset_in)
            amount_out = self.math.get_amount_out(amounts[-1], reserve_in, reserve_out)
            hops.append(HopResult(pair.address, asset_in, asset_out, amounts[-1], amount_out))
            amounts.append(amount_out)
        return RouteQuote(tuple(path), tuple(amounts), tuple(hops))

    def quote_exact_out(self, amount_out: int, path: Sequence[str]) -> RouteQuote:
        """Work an exact output backward along path to the required input.

        Raises:
            InvalidPath: If path has fewer than two assets
            PairNotFound: If a hop has no pair
        """
        path = self._check_path(path)
        amounts = [amount_out]
        hops: list[HopResult] = []
        for asset_in, asset_out in zip(reversed(path[:-1]), reversed(path[1:])):
            pair = self.factory.pair_for(asset_in, asset_out)
            reserve_in, reserve_out = pair.reserves_for(asset_in)
            amount_in = self.math.get_amount_in(amounts[0], reserve_in, reserve_out)
            hops.insert(0, HopResult(pair.address, asset_in, asset_out, amount_in, amounts[0]))
            amounts.insert(0, amount_in)
        return RouteQuote(tuple(path), tuple(amounts), tuple(hops))

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        return list(self.quote_exact_in(amount_in, path).amounts)

    def get_amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        return list(self.quote_exact_out(amount_out, path).amounts)

    def best_route_exact_in(
        self, amount_in: int, asset_in: str, asset_out: str, max_hops: int = DEFAULT_MAX_HOPS
    ) -> RouteQuote | None:
        """Candidate path with the largest final output, or None."""
        best: RouteQuote | None = None
        for path in self.path_finder.find_all_paths(asset_in, asset_out, max_hops):
            try:
                candidate = self.quote_exact_in(amount_in, path)
            except DexError as err:
                logger.debug("route_skipped", path=path, reason=err.kind.value)
                continue
            if best is None or candidate.amount_out > best.amount_out:
                best = candidate
        return best

    def best_route_exact_out(
        self, amount_out: int, asset_in: str, asset_out: str, max_hops: int = DEFAULT_MAX_HOPS
    ) -> RouteQuote | None:
        """Candidate path requiring the smallest input, or None."""
        best: RouteQuote | None = None
        for path in self.path_finder.find_all_paths(asset_in, asset_out, max_hops):
            try:
                candidate = self.quote_exact_out(amount_out, path)
            except DexError as err:
                logger.debug("route_skipped", path=path, reason=err.kind.value)
                continue
            if best is None or candidate.amount_in < best.amount_in:
                best = candidate
        return best

    # =========================================================================
    # Liquidity
    # =========================================================================

    @atomic
    def add_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[int, int, int]:
        """Deposit both assets at the pool ratio and mint shares to recipient.

        Creates the pair if it does not exist yet.

        Returns:
            (amount_a, amount_b, liquidity)

        Raises:
            Expired: If deadline has passed
            InsufficientAAmount: If only an A amount below amount_a_min fits the ratio
            InsufficientBAmount: If only a B amount below amount_b_min fits the ratio
        """
        self._ensure(deadline)
        asset_a, asset_b = to_address(asset_a), to_address(asset_b)
        if self.factory.get_pair(asset_a, asset_b) is None:
            self.factory.create_pair(asset_a, asset_b)
        pair = self.factory.pair_for(asset_a, asset_b)

        amount_a, amount_b = self._optimal_amounts(
            pair, asset_a, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min
        )
        self._pull(asset_a, sender, pair.address, amount_a)
        self._pull(asset_b, sender, pair.address, amount_b)
        liquidity = pair.mint(recipient, sender=self.address)

        self.emit(
            LiquidityAdded,
            provider=sender.lower(),
            pair=pair.address,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        logger.info(
            "liquidity_added",
            pair=pair.address,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b, liquidity

    @atomic
    def remove_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[int, int]:
        """Return shares to the pair and withdraw the underlying to recipient.

        Returns:
            (amount_a, amount_b)

        Raises:
            Expired: If deadline has passed
            PairNotFound: If the assets have no pair
            InsufficientAAmount: If less than amount_a_min of A came back
            InsufficientBAmount: If less than amount_b_min of B came back
        """
        self._ensure(deadline)
        asset_a, asset_b = to_address(asset_a), to_address(asset_b)
        pair = self.factory.pair_for(asset_a, asset_b)

        self._pull(pair.address, sender, pair.address, liquidity)
        amount0, amount1 = pair.burn(recipient, sender=self.address)
        asset0, _ = sort_assets(asset_a, asset_b)
        amount_a, amount_b = (amount0, amount1) if asset_a == asset0 else (amount1, amount0)
        if amount_a < amount_a_min:
            raise InsufficientAAmount(amount=amount_a, minimum=amount_a_min)
        if amount_b < amount_b_min:
            raise InsufficientBAmount(amount=amount_b, minimum=amount_b_min)

        self.emit(
            LiquidityRemoved,
            provider=sender.lower(),
            pair=pair.address,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        logger.info(
            "liquidity_removed",
            pair=pair.address,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b

    # =========================================================================
    # Swaps
    # =========================================================================

    @atomic
    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        """Sell exactly amount_in of path[0] for as much of path[-1] as possible.

        Raises:
            Expired: If deadline has passed
            InsufficientOutputAmount: If the final output is below amount_out_min
        """
        self._ensure(deadline)
        route = self.quote_exact_in(amount_in, path)
        if route.amount_out < amount_out_min:
            raise InsufficientOutputAmount(amount_out=route.amount_out, minimum=amount_out_min)
        self._execute(route, recipient, sender)
        return list(route.amounts)

    @atomic
    def swap_tokens_for_exact_tokens(
        self,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        """Buy exactly amount_out of path[-1] for as little of path[0] as possible.

        Raises:
            Expired: If deadline has passed
            ExcessiveInputAmount: If the required input exceeds amount_in_max
        """
        self._ensure(deadline)
        route = self.quote_exact_out(amount_out, path)
        if route.amount_in > amount_in_max:
            raise ExcessiveInputAmount(amount_in=route.amount_in, maximum=amount_in_max)
        self._execute(route, recipient, sender)
        return list(route.amounts)

    # =========================================================================
    # Internal
    # =========================================================================

    def _ensure(self, deadline: int) -> None:
        now = self.ledger.now()
        if now > deadline:
            raise Expired(f"Deadline {deadline} passed at {now}", deadline=deadline, now=now)

    def _check_path(self, path: Sequence[str]) -> list[str]:
        if len(path) < 2:
            raise InvalidPath(f"Path needs at least two assets, got {len(path)}")
        return [to_address(asset) for asset in path]

    def _optimal_amounts(
        self,
        pair: Pair,
        asset_a: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
    ) -> tuple[int, int]:
        reserve_a, reserve_b = pair.reserves_for(asset_a)
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired

        # All of A, proportional B
        amount_b_optimal = self.math.quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_min <= amount_b_optimal <= amount_b_desired:
            return amount_a_desired, amount_b_optimal

        # All of B, proportional A
        amount_a_optimal = self.math.quote(amount_b_desired, reserve_b, reserve_a)
        if amount_a_min <= amount_a_optimal <= amount_a_desired:
            return amount_a_optimal, amount_b_desired

        if amount_a_optimal <= amount_a_desired:
            raise InsufficientAAmount(amount=amount_a_optimal, minimum=amount_a_min)
        raise InsufficientBAmount(amount=amount_b_optimal, minimum=amount_b_min)

    def _pull(self, asset: str, owner: str, to: str, amount: int) -> None:
        if not self.ledger.asset(asset).transfer_from(self.address, owner, to, amount):
            raise TransferFailed(
                f"Could not move {amount} of {asset} from {owner}", asset=asset, owner=owner
            )

    def _execute(self, route: RouteQuote, recipient: str, sender: str) -> None:
        """Fund the first pair, then swap hop by hop into the next pair or recipient."""
        recipient = to_address(recipient)
        hops = route.hops
        self._pull(route.path[0], sender, hops[0].pair, route.amount_in)
        for i, hop in enumerate(hops):
            pair = self.factory.pair_at(hop.pair)
            if hop.asset_in == pair.asset0:
                amount0_out, amount1_out = 0, hop.amount_out
            else:
                amount0_out, amount1_out = hop.amount_out, 0
            to = hops[i + 1].pair if i + 1 < len(hops) else recipient
            pair.swap(amount0_out, amount1_out, to, sender=self.address)

        self.emit(
            SwapExecuted,
            sender=sender.lower(),
            path=route.path,
            amounts=route.amounts,
            recipient=recipient,
        )
        logger.info(
            "swap_executed",
            path=list(route.path),
            amount_in=route.amount_in,
            amount_out=route.amount_out,
        )
