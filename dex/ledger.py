"""In-memory ledger runtime.

The ledger is the shared world every contract lives in: an address-indexed
registry, a clock and an event log. Public mutating calls run inside
`Ledger.transaction` frames. A frame that raises restores every contract's
state to what it was on entry, forgets contracts deployed inside it and
drops the events it emitted, then re-raises. Frames nest, so a failing inner
call that the caller catches only reverts the inner call.
"""

from __future__ import annotations

import copy
import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog
from eth_utils import keccak

from dex.clock import Clock, SystemClock
from dex.errors import DexError, InvalidAsset
from dex.events import Event, EventLog
from dex.models.types import address_bytes, to_address

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


@runtime_checkable
class FungibleAsset(Protocol):
    """What the engine needs from an asset.

    `sender` and `spender` stand in for the calling account. A False return
    means the transfer did not happen.
    """

    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...


class Contract:
    """Base for anything with an address and revertible state.

    Subclasses keep all mutable data in `self.state` (a dataclass). Anything
    outside `state` is treated as immutable after construction.
    """

    state: Any

    def __init__(self, ledger: Ledger, address: str) -> None:
        self.ledger = ledger
        self.address = to_address(address)

    def snapshot(self) -> Any:
        return copy.deepcopy(self.state)

    def restore(self, snapshot: Any) -> None:
        self.state = snapshot

    def emit(self, event_type: type[Event], **fields: Any) -> None:
        self.ledger.events.emit(event_type(emitter=self.address, **fields))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"


def atomic(method: F) -> F:
    """Run a Contract method in its own ledger transaction frame."""

    @functools.wraps(method)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.ledger.transaction(f"{type(self).__name__}.{method.__name__}"):
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Ledger:
    """Contract registry, clock and event log for one exchange world."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.events = EventLog()
        self._contracts: dict[str, Contract] = {}
        self._nonces: dict[str, int] = {}
        self._depth = 0

    def now(self) -> int:
        return self.clock.now()

    @property
    def depth(self) -> int:
        """Number of open transaction frames."""
        return self._depth

    # --- Registry ---

    def register(self, contract: Contract) -> None:
        if contract.address in self._contracts:
            raise ValueError(f"Address already in use: {contract.address}")
        self._contracts[contract.address] = contract
        logger.debug(
            "contract_deployed", contract=type(contract).__name__, address=contract.address
        )

    def contract(self, address: str) -> Contract | None:
        return self._contracts.get(address.lower())

    def asset(self, address: str) -> FungibleAsset:
        """Resolve a deployed fungible asset.

        Raises:
            InvalidAsset: If no FungibleAsset lives there
        """
        found = self.contract(address)
        if not isinstance(found, FungibleAsset):
            raise InvalidAsset(f"No fungible asset at {address}", asset=address)
        return found

    def next_address(self, deployer: str) -> str:
        """Fresh address derived from the deployer and its deployment count."""
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        digest = keccak(address_bytes(deployer) + nonce.to_bytes(32, "big"))
        return "0x" + digest[12:].hex()

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)

    # --- Call frames ---

    @contextmanager
    def transaction(self, label: str = "call") -> Iterator[None]:
        """Atomic call frame.

        On any exception, every contract is restored to its entry state,
        contracts deployed in this frame are removed, deployer nonces and
        events emitted in this frame are rolled back, and the exception
        propagates.

        Entry deep-copies the state of every registered contract, so each
        call costs time proportional to the whole ledger. Fine for test and
        simulation worlds of a few hundred contracts; not meant for more.
        """
        snapshots = {addr: c.snapshot() for addr, c in self._contracts.items()}
        nonces = dict(self._nonces)
        event_mark = len(self.events)
        self._depth += 1
        try:
            yield
        except Exception as err:
            for addr in [a for a in self._contracts if a not in snapshots]:
                del self._contracts[addr]
            for addr, snap in snapshots.items():
                self._contracts[addr].restore(snap)
            self._nonces = nonces
            self.events.truncate(event_mark)
            logger.info(
                "call_reverted",
                call=label,
                depth=self._depth,
                error=err.kind.value if isinstance(err, DexError) else type(err).__name__,
            )
            raise
        finally:
            self._depth -= 1
