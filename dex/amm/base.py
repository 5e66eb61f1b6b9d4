"""Base class for swap pricing curves."""

from abc import ABC, abstractmethod


class AMM(ABC):
    """Pricing rules of a two-asset pool.

    Implementations raise DexError subclasses for inputs the curve cannot
    price rather than returning sentinel values.
    """

    @abstractmethod
    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B equal in value to `amount_a` at the current pool ratio, no fee."""
        ...

    @abstractmethod
    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output received for an exact input, after the trading fee."""
        ...

    @abstractmethod
    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Smallest input that yields at least `amount_out`, after the trading fee."""
        ...
