"""UQ112.112 binary fixed-point numbers.

A UQ112.112 value is an unsigned integer whose low 112 bits are the
fraction. Reserves fit in 112 bits, so a reserve ratio encoded this way is
exact to 2**-112 and fits in 224 bits. Price accumulators sum such ratios
multiplied by elapsed seconds; they are plain Python ints and never wrap.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from dex.constants import UINT112_MAX
from dex.safe_int import S, UintOverflow

__all__ = [
    "RESOLUTION",
    "Q112",
    "encode",
    "uqdiv",
    "fraction",
    "decode",
    "mul_decode",
    "to_decimal",
]

RESOLUTION = 112
Q112 = 1 << RESOLUTION


def encode(value: int) -> int:
    """Encode a uint112 as UQ112.112.

    Raises:
        UintOverflow: If value does not fit in 112 bits
    """
    if not 0 <= value <= UINT112_MAX:
        raise UintOverflow(f"Value does not fit uint112: {value}")
    return value << RESOLUTION


def uqdiv(encoded: int, divisor: int) -> int:
    """Divide a UQ112.112 value by a uint112, truncating.

    Raises:
        DivisionByZero: If divisor is zero
    """
    return (S(encoded) // divisor).value


def fraction(numerator: int, denominator: int) -> int:
    """UQ112.112 encoding of numerator / denominator."""
    return uqdiv(encode(numerator), denominator)


def decode(value: int) -> int:
    """Integer part of a UQ112.112 value."""
    return value >> RESOLUTION


def mul_decode(value: int, amount: int) -> int:
    """Multiply a UQ112.112 price by an integer amount, truncating to an integer."""
    return (value * amount) >> RESOLUTION


def to_decimal(value: int) -> Decimal:
    """Exact Decimal rendering of a UQ112.112 value, for display."""
    with localcontext() as ctx:
        ctx.prec = 80
        return Decimal(value) / Decimal(Q112)
