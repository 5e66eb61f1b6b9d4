"""Checked integer arithmetic for reserve and share accounting.

Pool math runs on Python's unbounded ints, so the failure modes that matter
are a subtraction going negative and a zero divisor. SafeInt turns both into
an ArithmeticError at the exact operation that produced it. UintOverflow is
raised by the fixed-point encoder for values wider than a reserve slot.

Usage pattern:
    from dex.safe_int import S

    def shares_for(amount: int, supply: int, reserve: int) -> int:
        return (S(amount) * supply // reserve).value   # DivisionByZero on empty reserve
"""

from __future__ import annotations

import math


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Division by zero."""


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""


class UintOverflow(SafeIntError):
    """Value does not fit the requested unsigned width."""


class SafeInt:
    """Non-negative integer with checked operators.

    Attributes:
        value: The wrapped integer (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract, raising Underflow below zero."""
        rhs = _raw(other)
        if rhs > self._value:
            raise Underflow(f"Underflow: {self._value} - {rhs}")
        return SafeInt(self._value - rhs)

    def __rsub__(self, other: int) -> SafeInt:
        if self._value > other:
            raise Underflow(f"Underflow: {other} - {self._value}")
        return SafeInt(other - self._value)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Truncating division, raising DivisionByZero on a zero divisor."""
        rhs = _raw(other)
        if rhs == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // rhs)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Named operations ---

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _raw(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping at zero instead of raising."""
        return SafeInt(max(0, self._value - _raw(other)))

    def isqrt(self) -> SafeInt:
        """Floor of the square root."""
        return SafeInt(math.isqrt(self._value))


def _raw(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


S = SafeInt
