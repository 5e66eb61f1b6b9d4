"""Constant-product pair contract.

A Pair holds custody of two assets, tracks the reserves it last committed,
issues liquidity shares against them and maintains the cumulative price
accumulators used by time-weighted oracles.

Reserves are not balances: assets are sent to the pair first, then mint,
swap or sync reads the difference between actual balances and the committed
reserves. Every mutating entry point holds the pair lock for its full
duration and runs in its own ledger transaction frame.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from dex.amm.constant_product import ConstantProductMath
from dex.assets import FungibleToken, TokenState
from dex.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from dex.constants import (
    LP_TOKEN_DECIMALS,
    LP_TOKEN_NAME,
    LP_TOKEN_SYMBOL,
    UINT112_MAX,
    ZERO_ADDRESS,
)
from dex.errors import (
    IdenticalAssets,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidAsset,
    InvalidRecipient,
    KInvariantViolation,
    Locked,
    Overflow,
    TransferFailed,
)
from dex.events import Burn, Mint, Swap, Sync
from dex.ledger import Ledger, atomic
from dex.math.fixed_point import fraction
from dex.models.types import to_address
from dex.safe_int import S

logger = structlog.get_logger()

# (sender, amount0_out, amount1_out, data), invoked after outputs are sent
SwapCallback = Callable[[str, int, int, bytes], None]


@dataclass
class PairState(TokenState):
    reserve0: int = 0
    reserve1: int = 0
    block_timestamp_last: int = 0
    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0
    k_last: int = 0
    locked: bool = False


class Pair(FungibleToken):
    """One pool for an ordered asset pair; also the pool's liquidity share token.

    Attributes:
        factory: Address of the factory that created the pair
        asset0: Lower of the two asset addresses
        asset1: Higher of the two asset addresses
        config: Fee and minimum-liquidity policy
    """

    state: PairState

    def __init__(
        self,
        ledger: Ledger,
        address: str,
        *,
        factory: str,
        asset0: str,
        asset1: str,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        super().__init__(
            ledger,
            address,
            name=LP_TOKEN_NAME,
            symbol=LP_TOKEN_SYMBOL,
            decimals=LP_TOKEN_DECIMALS,
            state=PairState(),
        )
        asset0, asset1 = to_address(asset0), to_address(asset1)
        if asset0 == asset1:
            raise IdenticalAssets(asset=asset0)
        if asset0 > asset1:
            raise ValueError(f"Pair assets must be sorted: {asset0} > {asset1}")
        self.factory = to_address(factory)
        self.asset0 = asset0
        self.asset1 = asset1
        self.config = config
        self.math = ConstantProductMath(config)
        ledger.register(self)

    # =========================================================================
    # Views
    # =========================================================================

    def get_reserves(self) -> tuple[int, int, int]:
        """(reserve0, reserve1, block_timestamp_last)."""
        s = self.state
        return s.reserve0, s.reserve1, s.block_timestamp_last

    @property
    def reserve0(self) -> int:
        return self.state.reserve0

    @property
    def reserve1(self) -> int:
        return self.state.reserve1

    @property
    def price0_cumulative_last(self) -> int:
        return self.state.price0_cumulative_last

    @property
    def price1_cumulative_last(self) -> int:
        return self.state.price1_cumulative_last

    @property
    def block_timestamp_last(self) -> int:
        return self.state.block_timestamp_last

    @property
    def k_last(self) -> int:
        return self.state.k_last

    @property
    def locked(self) -> bool:
        return self.state.locked

    def has_asset(self, asset: str) -> bool:
        return asset.lower() in (self.asset0, self.asset1)

    def other_asset(self, asset: str) -> str:
        """The asset on the other side of the pool."""
        asset = asset.lower()
        if asset == self.asset0:
            return self.asset1
        if asset == self.asset1:
            return self.asset0
        raise InvalidAsset(f"Asset {asset} not in pair {self.address}", asset=asset)

    def reserves_for(self, asset_in: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        asset_in = asset_in.lower()
        if asset_in == self.asset0:
            return self.state.reserve0, self.state.reserve1
        if asset_in == self.asset1:
            return self.state.reserve1, self.state.reserve0
        raise InvalidAsset(f"Asset {asset_in} not in pair {self.address}", asset=asset_in)

    # =========================================================================
    # Pool operations
    # =========================================================================

    @atomic
    def mint(self, recipient: str, *, sender: str | None = None) -> int:
        """Issue shares for assets transferred in since the last update.

        The first deposit mints isqrt(amount0 * amount1) shares, of which
        `minimum_liquidity` are locked forever at the zero address.

        Returns:
            Shares minted to recipient

        Raises:
            InvalidRecipient: If recipient is the zero address
            InsufficientLiquidityMinted: If the deposit is worth zero shares
            Locked: If called from inside another pair operation
        """
        recipient = self._check_recipient(recipient)
        with self._lock():
            reserve0, reserve1 = self.state.reserve0, self.state.reserve1
            balance0, balance1 = self._balances()
            amount0 = S(balance0).saturating_sub(reserve0).value
            amount1 = S(balance1).saturating_sub(reserve1).value

            fee_on = self._mint_protocol_fee(reserve0, reserve1)
            total_supply = self.state.total_supply
            if total_supply == 0:
                liquidity = self.math.first_deposit_liquidity(amount0, amount1)
                if liquidity > 0 and self.config.minimum_liquidity > 0:
                    self._mint(ZERO_ADDRESS, self.config.minimum_liquidity)
            else:
                liquidity = self.math.proportional_liquidity(
                    amount0, amount1, reserve0, reserve1, total_supply
                )
            if liquidity <= 0:
                raise InsufficientLiquidityMinted(amount0=amount0, amount1=amount1)

            self._mint(recipient, liquidity)
            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self.state.k_last = self.state.reserve0 * self.state.reserve1

            self.emit(
                Mint,
                sender=(sender or recipient).lower(),
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
                reserve0=self.state.reserve0,
                reserve1=self.state.reserve1,
            )
            logger.debug(
                "pair_mint",
                pair=self.address,
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
            )
            return liquidity

    @atomic
    def burn(self, recipient: str, *, sender: str | None = None) -> tuple[int, int]:
        """Redeem the shares held by the pair itself for underlying assets.

        Returns:
            (amount0, amount1) sent to recipient

        Raises:
            InvalidRecipient: If recipient is the zero address
            InsufficientLiquidityBurned: If either payout rounds to zero
            Locked: If called from inside another pair operation
        """
        recipient = self._check_recipient(recipient)
        with self._lock():
            reserve0, reserve1 = self.state.reserve0, self.state.reserve1
            balance0, balance1 = self._balances()
            liquidity = self.balance_of(self.address)

            fee_on = self._mint_protocol_fee(reserve0, reserve1)
            total_supply = self.state.total_supply
            if liquidity == 0 or total_supply == 0:
                raise InsufficientLiquidityBurned(liquidity=liquidity)
            amount0 = (S(liquidity) * balance0 // total_supply).value
            amount1 = (S(liquidity) * balance1 // total_supply).value
            if amount0 == 0 or amount1 == 0:
                raise InsufficientLiquidityBurned(
                    liquidity=liquidity, amount0=amount0, amount1=amount1
                )

            self._burn(self.address, liquidity)
            self._send(self.asset0, recipient, amount0)
            self._send(self.asset1, recipient, amount1)

            balance0, balance1 = self._balances()
            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self.state.k_last = self.state.reserve0 * self.state.reserve1

            self.emit(
                Burn,
                sender=(sender or recipient).lower(),
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
                recipient=recipient,
                reserve0=self.state.reserve0,
                reserve1=self.state.reserve1,
            )
            logger.debug(
                "pair_burn",
                pair=self.address,
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
            )
            return amount0, amount1

    @atomic
    def swap(
        self,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        *,
        sender: str | None = None,
        callback: SwapCallback | None = None,
        data: bytes = b"",
    ) -> None:
        """Send outputs optimistically, then require enough input to hold k.

        Inputs are whatever the pair holds above `reserve - amount_out` once
        the outputs (and the optional flash-swap callback) have run.

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InvalidRecipient: If recipient is the zero address or a pooled asset
            InsufficientLiquidity: If an output reaches its reserve
            InsufficientInputAmount: If nothing was paid in
            KInvariantViolation: If the fee-adjusted product decreased
            Locked: If called from inside another pair operation
        """
        if amount0_out < 0 or amount1_out < 0:
            raise ValueError(f"Negative swap output: {amount0_out}, {amount1_out}")
        if amount0_out == 0 and amount1_out == 0:
            raise InsufficientOutputAmount(amount0_out=0, amount1_out=0)
        recipient = self._check_recipient(recipient)
        if recipient in (self.asset0, self.asset1):
            raise InvalidRecipient(f"Recipient {recipient} is a pooled asset")
        with self._lock():
            reserve0, reserve1 = self.state.reserve0, self.state.reserve1
            if amount0_out >= reserve0 or amount1_out >= reserve1:
                raise InsufficientLiquidity(
                    amount0_out=amount0_out,
                    amount1_out=amount1_out,
                    reserve0=reserve0,
                    reserve1=reserve1,
                )

            if amount0_out > 0:
                self._send(self.asset0, recipient, amount0_out)
            if amount1_out > 0:
                self._send(self.asset1, recipient, amount1_out)
            caller = (sender or recipient).lower()
            if callback is not None:
                callback(caller, amount0_out, amount1_out, data)

            balance0, balance1 = self._balances()
            amount0_in = S(balance0).saturating_sub(reserve0 - amount0_out).value
            amount1_in = S(balance1).saturating_sub(reserve1 - amount1_out).value
            if amount0_in == 0 and amount1_in == 0:
                raise InsufficientInputAmount(balance0=balance0, balance1=balance1)
            if not self.math.satisfies_invariant(
                balance0, balance1, amount0_in, amount1_in, reserve0, reserve1
            ):
                raise KInvariantViolation(
                    balance0=balance0, balance1=balance1, reserve0=reserve0, reserve1=reserve1
                )

            self._update(balance0, balance1, reserve0, reserve1)
            self.emit(
                Swap,
                sender=caller,
                amount0_in=amount0_in,
                amount1_in=amount1_in,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
                recipient=recipient,
                reserve0=self.state.reserve0,
                reserve1=self.state.reserve1,
            )
            logger.debug(
                "pair_swap",
                pair=self.address,
                amount0_in=amount0_in,
                amount1_in=amount1_in,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
            )

    @atomic
    def skim(self, recipient: str) -> tuple[int, int]:
        """Send any balance above the committed reserves to recipient."""
        recipient = to_address(recipient)
        with self._lock():
            balance0, balance1 = self._balances()
            excess0 = S(balance0).saturating_sub(self.state.reserve0).value
            excess1 = S(balance1).saturating_sub(self.state.reserve1).value
            if excess0:
                self._send(self.asset0, recipient, excess0)
            if excess1:
                self._send(self.asset1, recipient, excess1)
            return excess0, excess1

    @atomic
    def sync(self) -> None:
        """Commit actual balances as reserves."""
        with self._lock():
            balance0, balance1 = self._balances()
            self._update(balance0, balance1, self.state.reserve0, self.state.reserve1)

    # =========================================================================
    # Internal
    # =========================================================================

    @contextmanager
    def _lock(self) -> Iterator[None]:
        if self.state.locked:
            raise Locked(f"Pair {self.address} is locked")
        self.state.locked = True
        try:
            yield
        finally:
            self.state.locked = False

    def _check_recipient(self, recipient: str) -> str:
        recipient = to_address(recipient)
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient("Recipient is the zero address")
        return recipient

    def _balances(self) -> tuple[int, int]:
        return (
            self.ledger.asset(self.asset0).balance_of(self.address),
            self.ledger.asset(self.asset1).balance_of(self.address),
        )

    def _send(self, asset: str, to: str, amount: int) -> None:
        if not self.ledger.asset(asset).transfer(self.address, to, amount):
            raise TransferFailed(f"Transfer of {amount} {asset} to {to} failed", asset=asset)

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Accumulate prices over the elapsed time, then commit balances."""
        if balance0 > UINT112_MAX or balance1 > UINT112_MAX:
            raise Overflow(balance0=balance0, balance1=balance1)
        s = self.state
        now = self.ledger.now()
        elapsed = now - s.block_timestamp_last
        if elapsed > 0 and reserve0 != 0 and reserve1 != 0:
            # Pre-update reserves: the price that held over the elapsed window
            s.price0_cumulative_last += fraction(reserve1, reserve0) * elapsed
            s.price1_cumulative_last += fraction(reserve0, reserve1) * elapsed
        s.reserve0 = balance0
        s.reserve1 = balance1
        s.block_timestamp_last = now
        self.emit(Sync, reserve0=balance0, reserve1=balance1)

    def _fee_recipient(self) -> str | None:
        factory = self.ledger.contract(self.factory)
        return getattr(factory, "fee_recipient", None)

    def _mint_protocol_fee(self, reserve0: int, reserve1: int) -> bool:
        """Mint the protocol's cut of fee growth since the last liquidity event.

        Returns:
            True if a fee recipient is configured
        """
        fee_recipient = self._fee_recipient()
        k_last = self.state.k_last
        if fee_recipient is None:
            if k_last != 0:
                self.state.k_last = 0
            return False
        if k_last != 0:
            root_k = (S(reserve0) * reserve1).isqrt()
            root_k_last = S(k_last).isqrt()
            if root_k > root_k_last:
                numerator = S(self.state.total_supply) * (root_k - root_k_last)
                denominator = root_k * self.config.protocol_fee_divisor + root_k_last
                liquidity = (numerator // denominator).value
                if liquidity > 0:
                    self._mint(fee_recipient, liquidity)
                    logger.debug(
                        "protocol_fee_minted",
                        pair=self.address,
                        recipient=fee_recipient,
                        liquidity=liquidity,
                    )
        return True
