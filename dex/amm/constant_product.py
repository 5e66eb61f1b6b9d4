"""Constant-product pricing: x * y = k with a fee charged on input.

Formula (fee 3/1000):
    amount_out = in * 997 * r_out / (r_in * 1000 + in * 997)
    amount_in  = r_in * out * 1000 / ((r_out - out) * 997) + 1
"""

from __future__ import annotations

from dex.amm.base import AMM
from dex.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from dex.errors import (
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
)
from dex.safe_int import S


class ConstantProductMath(AMM):
    """Pure constant-product formulas parameterized by an EngineConfig."""

    def __init__(self, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self.config = config

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """amount_a * reserve_b / reserve_a, truncating.

        Raises:
            InsufficientAmount: If amount_a is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_a <= 0:
            raise InsufficientAmount(amount=amount_a)
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity(reserve_a=reserve_a, reserve_b=reserve_b)
        return (S(amount_a) * reserve_b // reserve_a).value

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output for an exact input.

        Raises:
            InsufficientInputAmount: If amount_in is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_in <= 0:
            raise InsufficientInputAmount(amount_in=amount_in)
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(reserve_in=reserve_in, reserve_out=reserve_out)

        amount_in_with_fee = S(amount_in) * self.config.fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * self.config.fee_denominator + amount_in_with_fee
        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Required input for an exact output, rounded up by one unit.

        Raises:
            InsufficientOutputAmount: If amount_out is zero
            InsufficientLiquidity: If either reserve is zero or the output
                would drain the output reserve
        """
        if amount_out <= 0:
            raise InsufficientOutputAmount(amount_out=amount_out)
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(reserve_in=reserve_in, reserve_out=reserve_out)
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} would drain reserve {reserve_out}",
                amount_out=amount_out,
                reserve_out=reserve_out,
            )

        numerator = S(reserve_in) * amount_out * self.config.fee_denominator
        denominator = (S(reserve_out) - amount_out) * self.config.fee_multiplier
        return (numerator // denominator + 1).value

    def first_deposit_liquidity(self, amount0: int, amount1: int) -> int:
        """Shares for the first deposit: isqrt(amount0 * amount1) less the lock.

        Returns zero when the root does not exceed the locked minimum.
        """
        root = (S(amount0) * amount1).isqrt()
        return root.saturating_sub(self.config.minimum_liquidity).value

    def proportional_liquidity(
        self, amount0: int, amount1: int, reserve0: int, reserve1: int, total_supply: int
    ) -> int:
        """Shares for a later deposit: the smaller of the two pro-rata claims."""
        share0 = S(amount0) * total_supply // reserve0
        share1 = S(amount1) * total_supply // reserve1
        return share0.min(share1).value

    def satisfies_invariant(
        self,
        balance0: int,
        balance1: int,
        amount0_in: int,
        amount1_in: int,
        reserve0: int,
        reserve1: int,
    ) -> bool:
        """Fee-adjusted k check used by swap.

        adjusted_i = balance_i * denominator - amount_in_i * numerator
        requires adjusted0 * adjusted1 >= reserve0 * reserve1 * denominator^2
        """
        den = self.config.fee_denominator
        num = self.config.fee_numerator
        adjusted0 = S(balance0) * den - S(amount0_in) * num
        adjusted1 = S(balance1) * den - S(amount1_in) * num
        return adjusted0 * adjusted1 >= S(reserve0) * reserve1 * den * den
