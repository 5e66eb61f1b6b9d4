"""Time-weighted average prices from pair accumulators.

A pair's price accumulators only move when the pair is touched. To read
them "as of now" without a write, add the time since the last update
multiplied by the current spot ratio. Two observations a period apart then
give the average price over that period:

    average = (cumulative_end - cumulative_start) / (t_end - t_start)

Prices are UQ112.112: asset1 per asset0 for price0, asset0 per asset1 for
price1.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from dex.amm.pair import Pair
from dex.errors import InsufficientLiquidity, InvalidAsset, PeriodNotElapsed
from dex.math.fixed_point import fraction, mul_decode

logger = structlog.get_logger()


@dataclass(frozen=True)
class PriceObservation:
    """Snapshot of a pair's accumulators at a point in time."""

    timestamp: int
    price0_cumulative: int
    price1_cumulative: int


def current_cumulative_prices(pair: Pair) -> PriceObservation:
    """Accumulators as they would be if the pair were updated right now."""
    reserve0, reserve1, last = pair.get_reserves()
    now = pair.ledger.now()
    price0 = pair.price0_cumulative_last
    price1 = pair.price1_cumulative_last
    elapsed = now - last
    if elapsed > 0 and reserve0 != 0 and reserve1 != 0:
        price0 += fraction(reserve1, reserve0) * elapsed
        price1 += fraction(reserve0, reserve1) * elapsed
    return PriceObservation(now, price0, price1)


def average_price(start: PriceObservation, end: PriceObservation) -> tuple[int, int]:
    """UQ112.112 average prices (price0, price1) between two observations.

    Raises:
        PeriodNotElapsed: If no time passed between the observations
    """
    elapsed = end.timestamp - start.timestamp
    if elapsed <= 0:
        raise PeriodNotElapsed(start=start.timestamp, end=end.timestamp)
    return (
        (end.price0_cumulative - start.price0_cumulative) // elapsed,
        (end.price1_cumulative - start.price1_cumulative) // elapsed,
    )


class FixedWindowOracle:
    """Average price over a fixed window, recomputed at most once per period."""

    def __init__(self, pair: Pair, period: int) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive: {period}")
        reserve0, reserve1, _ = pair.get_reserves()
        if reserve0 == 0 or reserve1 == 0:
            raise InsufficientLiquidity(f"Pair {pair.address} has no liquidity")
        self.pair = pair
        self.period = period
        self.observation = current_cumulative_prices(pair)
        self.price0_average = 0
        self.price1_average = 0

    def update(self) -> tuple[int, int]:
        """Roll the window forward.

        Raises:
            PeriodNotElapsed: If less than `period` seconds passed since the last update
        """
        latest = current_cumulative_prices(self.pair)
        if latest.timestamp - self.observation.timestamp < self.period:
            raise PeriodNotElapsed(
                last=self.observation.timestamp, now=latest.timestamp, period=self.period
            )
        self.price0_average, self.price1_average = average_price(self.observation, latest)
        self.observation = latest
        logger.debug(
            "oracle_updated",
            pair=self.pair.address,
            timestamp=latest.timestamp,
            price0_average=self.price0_average,
            price1_average=self.price1_average,
        )
        return self.price0_average, self.price1_average

    def consult(self, asset: str, amount_in: int) -> int:
        """Value of `amount_in` of `asset` in the other asset at the window average.

        Raises:
            InvalidAsset: If asset is not in the pair
        """
        asset = asset.lower()
        if asset == self.pair.asset0:
            return mul_decode(self.price0_average, amount_in)
        if asset == self.pair.asset1:
            return mul_decode(self.price1_average, amount_in)
        raise InvalidAsset(f"Asset {asset} not in pair {self.pair.address}", asset=asset)
