"""Tests for SafeInt checked arithmetic."""

import pytest

from dex.safe_int import DivisionByZero, S, SafeInt, SafeIntError, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        assert SafeInt(SafeInt(7)).value == 7

    def test_rejects_other_types(self):
        """Floats, strings and bools are not amounts."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(1.5)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_mul(self):
        assert (S(2) + 3) * 4 == 20
        assert 3 + S(2) == 5
        assert 4 * S(2) == 8

    def test_sub_underflow_raises(self):
        with pytest.raises(Underflow):
            S(1) - 2
        with pytest.raises(Underflow):
            1 - S(2)

    def test_sub_to_zero_is_fine(self):
        assert (S(5) - 5).value == 0

    def test_floordiv_truncates(self):
        assert (S(7) // 2).value == 3

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7) // 0

    def test_errors_are_arithmetic_errors(self):
        """Callers can catch ArithmeticError generically."""
        assert issubclass(SafeIntError, ArithmeticError)
        assert issubclass(Underflow, SafeIntError)

    def test_saturating_sub(self):
        assert S(3).saturating_sub(5).value == 0
        assert S(5).saturating_sub(3).value == 2

    def test_min(self):
        assert S(3).min(5) == 3
        assert S(5).min(S(3)) == 3

    def test_isqrt(self):
        assert S(4_000_000).isqrt() == 2000
        assert S(2_000_000).isqrt() == 1414
        assert S(0).isqrt() == 0

    def test_comparisons(self):
        assert S(3) < 4
        assert S(3) <= S(3)
        assert S(5) > S(4)
        assert S(5) >= 5
        assert S(5) == 5
        assert S(5) != 6

    def test_bool(self):
        assert not S(0)
        assert S(1)

