"""Adversarial asset doubles.

Usage:
    from tests.helpers.tokens import ReentrantToken

    evil = ReentrantToken(ledger, address, symbol="EVIL")
    evil.hook = lambda: pair.sync()
"""

from collections.abc import Callable

from dex.assets import Token


class ReentrantToken(Token):
    """Calls `hook` after every transfer, to re-enter whoever moved it."""

    hook: Callable[[], object] | None = None

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        moved = super().transfer(sender, to, amount)
        if self.hook is not None:
            self.hook()
        return moved


class FailingToken(Token):
    """Reports failure on every transfer while `failing` is set."""

    failing: bool = False

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        if self.failing:
            return False
        return super().transfer(sender, to, amount)
