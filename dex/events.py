"""Event records emitted by exchange contracts.

Events are an append-only audit trail for observers. The engine itself
never reads them back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class Event:
    """Base event. `emitter` is the address of the contract that emitted it."""

    emitter: str

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.name, **asdict(self)}


# --- Factory ---


@dataclass(frozen=True)
class PairCreated(Event):
    asset0: str
    asset1: str
    pair: str
    index: int


@dataclass(frozen=True)
class FeeRecipientSet(Event):
    old: str | None
    new: str | None


@dataclass(frozen=True)
class FeeAdminSet(Event):
    old: str
    new: str


# --- Pair ---


@dataclass(frozen=True)
class Mint(Event):
    sender: str
    amount0: int
    amount1: int
    liquidity: int
    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class Burn(Event):
    sender: str
    amount0: int
    amount1: int
    liquidity: int
    recipient: str
    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class Swap(Event):
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    recipient: str
    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class Sync(Event):
    reserve0: int
    reserve1: int


# --- Fungible shares ---


@dataclass(frozen=True)
class Transfer(Event):
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    spender: str
    amount: int


# --- Router ---


@dataclass(frozen=True)
class LiquidityAdded(Event):
    provider: str
    pair: str
    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class LiquidityRemoved(Event):
    provider: str
    pair: str
    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class SwapExecuted(Event):
    sender: str
    path: tuple[str, ...]
    amounts: tuple[int, ...]
    recipient: str


@dataclass
class EventLog:
    """Ordered event sink shared by every contract on a ledger."""

    records: list[Event] = field(default_factory=list)

    def emit(self, event: Event) -> None:
        self.records.append(event)
        logger.debug("event_emitted", event_type=event.name, **asdict(event))

    def truncate(self, length: int) -> None:
        """Drop events recorded after position `length`."""
        del self.records[length:]

    def of_type(self, event_type: type[Event]) -> list[Event]:
        return [e for e in self.records if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
