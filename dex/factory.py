"""Pair factory: one pair per unordered asset combination.

Pairs are deployed at CREATE2-style deterministic addresses:

    keccak256(0xff ++ factory ++ keccak256(asset0 ++ asset1) ++ init_hash)[12:]

so any client can compute where the pair for two assets lives without
asking the factory.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from eth_abi.packed import encode_packed
from eth_utils import keccak

from dex.amm.pair import Pair
from dex.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from dex.constants import ZERO_ADDRESS
from dex.errors import (
    IdenticalAssets,
    InvalidAddress,
    NotAuthorized,
    PairExists,
    PairNotFound,
    ZeroAsset,
)
from dex.events import FeeAdminSet, FeeRecipientSet, PairCreated
from dex.ledger import Contract, Ledger, atomic
from dex.models.types import address_bytes, to_address

logger = structlog.get_logger()


def sort_assets(asset_a: str, asset_b: str) -> tuple[str, str]:
    """Canonical (asset0, asset1) order for two distinct, non-zero assets.

    Raises:
        InvalidAddress: If either is not an address
        IdenticalAssets: If both are the same asset
        ZeroAsset: If either is the zero address
    """
    asset_a, asset_b = to_address(asset_a), to_address(asset_b)
    if asset_a == asset_b:
        raise IdenticalAssets(asset=asset_a)
    asset0, asset1 = (asset_a, asset_b) if asset_a < asset_b else (asset_b, asset_a)
    if asset0 == ZERO_ADDRESS:
        raise ZeroAsset()
    return asset0, asset1


def compute_pair_address(
    factory: str, asset_a: str, asset_b: str, init_hash: str = DEFAULT_ENGINE_CONFIG.pair_init_hash
) -> str:
    """Deterministic pair address for two assets under a factory."""
    asset0, asset1 = sort_assets(asset_a, asset_b)
    salt = keccak(
        encode_packed(["address", "address"], [address_bytes(asset0), address_bytes(asset1)])
    )
    packed = b"\xff" + address_bytes(factory) + salt + bytes.fromhex(init_hash[2:])
    return "0x" + keccak(packed)[12:].hex()


@dataclass
class FactoryState:
    pairs_by_assets: dict[tuple[str, str], str] = field(default_factory=dict)
    all_pairs: list[str] = field(default_factory=list)
    fee_recipient: str | None = None
    fee_admin: str = ZERO_ADDRESS


class Factory(Contract):
    """Creates and indexes pairs; holds the protocol fee switch."""

    state: FactoryState

    def __init__(
        self,
        ledger: Ledger,
        address: str,
        *,
        fee_admin: str,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        super().__init__(ledger, address)
        fee_admin = to_address(fee_admin)
        if fee_admin == ZERO_ADDRESS:
            raise InvalidAddress("Fee admin cannot be the zero address")
        self.config = config
        self.state = FactoryState(fee_admin=fee_admin)
        ledger.register(self)

    # --- Views ---

    @property
    def fee_recipient(self) -> str | None:
        return self.state.fee_recipient

    @property
    def fee_admin(self) -> str:
        return self.state.fee_admin

    def get_pair(self, asset_a: str, asset_b: str) -> str | None:
        """Pair address for two assets in either order, or None."""
        return self.state.pairs_by_assets.get((asset_a.lower(), asset_b.lower()))

    def pair_at(self, address: str) -> Pair:
        """Resolve a pair created by this factory.

        Raises:
            PairNotFound: If no pair of this factory lives at address
        """
        found = self.ledger.contract(address)
        if not isinstance(found, Pair) or found.factory != self.address:
            raise PairNotFound(f"No pair at {address}", pair=address)
        return found

    def pair_for(self, asset_a: str, asset_b: str) -> Pair:
        """Resolve the pair for two assets.

        Raises:
            PairNotFound: If no pair exists for them
        """
        address = self.get_pair(asset_a, asset_b)
        if address is None:
            raise PairNotFound(
                f"No pair for {asset_a} / {asset_b}", asset_a=asset_a, asset_b=asset_b
            )
        return self.pair_at(address)

    def all_pairs_length(self) -> int:
        return len(self.state.all_pairs)

    def pair_by_index(self, index: int) -> str | None:
        if 0 <= index < len(self.state.all_pairs):
            return self.state.all_pairs[index]
        return None

    def all_pairs(self) -> list[str]:
        return list(self.state.all_pairs)

    def compute_pair_address(self, asset_a: str, asset_b: str) -> str:
        return compute_pair_address(self.address, asset_a, asset_b, self.config.pair_init_hash)

    # --- Mutations ---

    @atomic
    def create_pair(self, asset_a: str, asset_b: str) -> str:
        """Deploy the pair for two assets.

        Returns:
            The new pair's address

        Raises:
            IdenticalAssets: If both assets are the same
            ZeroAsset: If either asset is the zero address
            PairExists: If the pair was already created
        """
        asset0, asset1 = sort_assets(asset_a, asset_b)
        if (asset0, asset1) in self.state.pairs_by_assets:
            raise PairExists(asset0=asset0, asset1=asset1)

        address = self.compute_pair_address(asset0, asset1)
        Pair(
            self.ledger,
            address,
            factory=self.address,
            asset0=asset0,
            asset1=asset1,
            config=self.config,
        )
        self.state.pairs_by_assets[(asset0, asset1)] = address
        self.state.pairs_by_assets[(asset1, asset0)] = address
        self.state.all_pairs.append(address)
        index = len(self.state.all_pairs) - 1

        self.emit(PairCreated, asset0=asset0, asset1=asset1, pair=address, index=index)
        logger.info("pair_created", asset0=asset0, asset1=asset1, pair=address, index=index)
        return address

    @atomic
    def set_fee_recipient(self, fee_recipient: str | None, *, sender: str) -> None:
        """Turn the protocol fee on (an address) or off (None).

        Raises:
            NotAuthorized: If sender is not the fee admin
        """
        self._require_admin(sender)
        new = to_address(fee_recipient) if fee_recipient is not None else None
        old = self.state.fee_recipient
        self.state.fee_recipient = new
        self.emit(FeeRecipientSet, old=old, new=new)
        logger.info("fee_recipient_set", old=old, new=new)

    @atomic
    def set_fee_admin(self, fee_admin: str, *, sender: str) -> None:
        """Hand the fee admin role to another account.

        Raises:
            NotAuthorized: If sender is not the fee admin
            InvalidAddress: If fee_admin is the zero address
        """
        self._require_admin(sender)
        new = to_address(fee_admin)
        if new == ZERO_ADDRESS:
            raise InvalidAddress("Fee admin cannot be the zero address")
        old = self.state.fee_admin
        self.state.fee_admin = new
        self.emit(FeeAdminSet, old=old, new=new)
        logger.info("fee_admin_set", old=old, new=new)

    def _require_admin(self, sender: str) -> None:
        if sender.lower() != self.state.fee_admin:
            raise NotAuthorized(f"{sender} is not the fee admin", sender=sender)
