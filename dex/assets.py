"""Fungible asset interface and the in-memory share/token implementation.

Pairs only ever talk to assets through FungibleAsset. FungibleToken is the
balance/allowance bookkeeping shared by the pair's liquidity shares and by
the simple Token used to stand up test and demo markets.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from dex.constants import ZERO_ADDRESS
from dex.errors import InvalidRecipient
from dex.events import Approval, Transfer
from dex.ledger import Contract, FungibleAsset, Ledger, atomic
from dex.safe_int import S

logger = structlog.get_logger()


@dataclass
class TokenState:
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0


class FungibleToken(Contract):
    """Balance and allowance bookkeeping with Transfer/Approval events."""

    state: TokenState

    def __init__(
        self,
        ledger: Ledger,
        address: str,
        *,
        name: str,
        symbol: str,
        decimals: int = 18,
        state: TokenState | None = None,
    ) -> None:
        super().__init__(ledger, address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.state = state if state is not None else TokenState()

    # --- Views ---

    @property
    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, account: str) -> int:
        return self.state.balances.get(account.lower(), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.state.allowances.get((owner.lower(), spender.lower()), 0)

    # --- Mutations ---

    @atomic
    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self._move(sender.lower(), to.lower(), amount)

    @atomic
    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            raise ValueError(f"Negative allowance: {amount}")
        owner, spender = owner.lower(), spender.lower()
        self.state.allowances[(owner, spender)] = amount
        self.emit(Approval, owner=owner, spender=spender, amount=amount)
        return True

    @atomic
    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        spender, owner = spender.lower(), owner.lower()
        if spender != owner:
            allowed = self.allowance(owner, spender)
            if allowed < amount:
                logger.debug("allowance_exceeded", token=self.address, owner=owner, spender=spender)
                return False
            if not self._move(owner, to.lower(), amount):
                return False
            self.state.allowances[(owner, spender)] = allowed - amount
            return True
        return self._move(owner, to.lower(), amount)

    # --- Internal ---

    def _move(self, sender: str, to: str, amount: int) -> bool:
        if amount < 0:
            raise ValueError(f"Negative transfer amount: {amount}")
        balance = self.balance_of(sender)
        if balance < amount:
            return False
        balances = self.state.balances
        balances[sender] = balance - amount
        balances[to] = balances.get(to, 0) + amount
        self.emit(Transfer, sender=sender, recipient=to, amount=amount)
        return True

    def _mint(self, to: str, amount: int) -> None:
        to = to.lower()
        balances = self.state.balances
        balances[to] = (S(balances.get(to, 0)) + amount).value
        self.state.total_supply = (S(self.state.total_supply) + amount).value
        self.emit(Transfer, sender=ZERO_ADDRESS, recipient=to, amount=amount)

    def _burn(self, owner: str, amount: int) -> None:
        owner = owner.lower()
        balances = self.state.balances
        balances[owner] = (S(balances.get(owner, 0)) - amount).value
        self.state.total_supply = (S(self.state.total_supply) - amount).value
        self.emit(Transfer, sender=owner, recipient=ZERO_ADDRESS, amount=amount)


class Token(FungibleToken):
    """Freely issuable token for standing up markets."""

    def __init__(
        self, ledger: Ledger, address: str, *, symbol: str, decimals: int = 18
    ) -> None:
        super().__init__(ledger, address, name=symbol, symbol=symbol, decimals=decimals)
        ledger.register(self)

    @atomic
    def mint(self, to: str, amount: int) -> None:
        if to.lower() == ZERO_ADDRESS:
            raise InvalidRecipient("Cannot mint to the zero address")
        self._mint(to, amount)



__all__ = ["FungibleAsset", "FungibleToken", "Token", "TokenState"]
