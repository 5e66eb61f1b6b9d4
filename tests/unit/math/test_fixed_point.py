"""Tests for UQ112.112 fixed-point helpers."""

from decimal import Decimal

import pytest

from dex.constants import UINT112_MAX
from dex.math.fixed_point import Q112, decode, encode, fraction, mul_decode, to_decimal, uqdiv
from dex.safe_int import DivisionByZero, UintOverflow


class TestEncoding:
    """Tests for encode/decode."""

    def test_encode_shifts_by_112(self):
        assert encode(1) == Q112
        assert encode(5) == 5 * 2**112

    def test_encode_rejects_oversized(self):
        with pytest.raises(UintOverflow):
            encode(UINT112_MAX + 1)

    def test_decode_truncates(self):
        assert decode(encode(7) + Q112 // 2) == 7


class TestFraction:
    """Tests for reserve ratios."""

    def test_whole_ratio(self):
        assert fraction(4000, 1000) == 4 * Q112

    def test_fractional_ratio_is_exact_power_of_two(self):
        """1000/4000 is 1/4, exactly 2**110 in UQ112.112."""
        assert fraction(1000, 4000) == 2**110

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            fraction(1, 0)

    def test_uqdiv(self):
        assert uqdiv(encode(9), 3) == encode(3)


class TestMulDecode:
    """Tests for applying a price to an amount."""

    def test_price_times_amount(self):
        assert mul_decode(4 * Q112, 1000) == 4000
        assert mul_decode(2**110, 4000) == 1000

    def test_truncates(self):
        assert mul_decode(fraction(1, 3), 10) == 3

    def test_to_decimal(self):
        assert to_decimal(fraction(1, 4)) == Decimal("0.25")
