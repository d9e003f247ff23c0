"""Property-based tests using Hypothesis.

These tests verify laws that must hold for *all* operands, including
magnitudes far beyond the float safe-integer range, and that the two
backends agree with each other digit for digit.
"""
from __future__ import annotations

import pytest
from hypothesis import assume, given, settings
from hypothesis.strategies import integers, sampled_from

from literals import MAX_SAFE_INTEGER

# ---------------------------------------------------------------------------
# Shared configuration
# ---------------------------------------------------------------------------

wide = integers(min_value=-(2**300), max_value=2**300)
around_safe = integers(min_value=MAX_SAFE_INTEGER - 1000, max_value=MAX_SAFE_INTEGER + 1000)
operand = wide | around_safe | integers(min_value=-300, max_value=300)
bits = integers(min_value=0, max_value=300)
radixes = sampled_from([2, 10, 16, 36])

BINARY_OPERATIONS = [
    "add",
    "subtract",
    "multiply",
    "divide",
    "remainder",
    "bitwise_and",
    "bitwise_or",
    "bitwise_xor",
]

COMPARISONS = [
    "equal",
    "not_equal",
    "less_than",
    "less_or_equal",
    "greater_than",
    "greater_or_equal",
]


def _string_result(p, op, a, b):
    try:
        return p.to_string(getattr(p, op)(p.from_value(a), p.from_value(b)))
    except ZeroDivisionError as e:
        return type(e).__name__


# ===================================================================
# EQUIVALENCE
# ===================================================================

class TestEquivalence:

    @pytest.mark.parametrize("op", BINARY_OPERATIONS)
    @given(a=operand, b=operand)
    @settings(max_examples=150)
    def test_binary_operations_agree(self, native, fallback, op, a, b):
        assert _string_result(native, op, a, b) == _string_result(fallback, op, a, b)

    @pytest.mark.parametrize("op", COMPARISONS)
    @given(a=operand, b=operand)
    def test_comparisons_agree(self, native, fallback, op, a, b):
        n = getattr(native, op)(native.from_value(a), native.from_value(b))
        f = getattr(fallback, op)(fallback.from_value(a), fallback.from_value(b))
        assert n is f

    @given(a=operand, n=integers(min_value=0, max_value=400))
    def test_shifts_agree(self, native, fallback, a, n):
        for op in ("left_shift", "signed_right_shift"):
            assert native.to_string(getattr(native, op)(native.from_value(a), n)) == (
                fallback.to_string(getattr(fallback, op)(fallback.from_value(a), n))
            )

    @given(n=bits, a=operand)
    def test_widths_agree(self, native, fallback, n, a):
        for op in ("as_int_n", "as_uint_n"):
            assert native.to_string(getattr(native, op)(n, native.from_value(a))) == (
                fallback.to_string(getattr(fallback, op)(n, fallback.from_value(a)))
            )

    @given(a=operand, radix=integers(min_value=2, max_value=36))
    def test_to_string_agrees(self, native, fallback, a, radix):
        assert native.to_string(native.from_value(a), radix) == (
            fallback.to_string(fallback.from_value(a), radix)
        )

    @given(a=operand)
    def test_to_number_agrees(self, native, fallback, a):
        assert native.to_number(native.from_value(a)) == fallback.to_number(
            fallback.from_value(a)
        )


# ===================================================================
# TRUNCATING DIVISION
# ===================================================================

class TestDivisionLaw:

    @given(a=operand, b=operand)
    @settings(max_examples=300)
    def test_quotient_times_divisor_plus_remainder(self, provider, a, b):
        assume(b != 0)
        x, y = provider.from_value(a), provider.from_value(b)
        q = provider.divide(x, y)
        r = provider.remainder(x, y)
        assert provider.equal(provider.add(provider.multiply(q, y), r), x)

    @given(a=operand, b=operand)
    def test_remainder_sign_follows_dividend(self, provider, a, b):
        assume(b != 0)
        r = provider.to_int(provider.remainder(provider.from_value(a), provider.from_value(b)))
        assert r == 0 or (r < 0) == (a < 0)
        assert abs(r) < abs(b)

    @given(a=operand, b=operand)
    def test_quotient_rounds_toward_zero(self, provider, a, b):
        assume(b != 0)
        q = provider.to_int(provider.divide(provider.from_value(a), provider.from_value(b)))
        assert q == int(abs(a) // abs(b)) * (1 if (a < 0) == (b < 0) else -1)


# ===================================================================
# WIDTH FIXING
# ===================================================================

class TestWidthProperties:

    @given(n=bits, a=operand)
    def test_as_uint_n_idempotent(self, provider, n, a):
        once = provider.as_uint_n(n, provider.from_value(a))
        assert provider.as_uint_n(n, once) == once

    @given(n=bits, a=operand)
    def test_as_int_n_idempotent(self, provider, n, a):
        once = provider.as_int_n(n, provider.from_value(a))
        assert provider.as_int_n(n, once) == once

    @given(n=integers(min_value=1, max_value=300), a=operand)
    def test_ranges(self, provider, n, a):
        signed = provider.to_int(provider.as_int_n(n, provider.from_value(a)))
        unsigned = provider.to_int(provider.as_uint_n(n, provider.from_value(a)))
        assert -(2 ** (n - 1)) <= signed < 2 ** (n - 1)
        assert 0 <= unsigned < 2**n
        assert (signed - unsigned) % 2**n == 0
        assert (unsigned - a) % 2**n == 0


# ===================================================================
# ROUND TRIPS
# ===================================================================

class TestRoundTrip:

    @given(a=operand, radix=radixes)
    def test_to_string_reparses(self, provider, a, radix):
        text = provider.to_string(provider.from_value(a), radix)
        assert int(text, radix) == a

    @given(a=operand)
    def test_prefixed_literals(self, provider, a):
        assume(a >= 0)
        for radix, prefix in ((16, "0x"), (8, "0o"), (2, "0b")):
            text = prefix + provider.to_string(provider.from_value(a), radix)
            assert provider.to_int(provider.from_value(text)) == a

    @given(a=operand)
    def test_decimal_string(self, provider, a):
        assert provider.to_int(provider.from_value(str(a))) == a

    @given(a=integers(min_value=-MAX_SAFE_INTEGER, max_value=MAX_SAFE_INTEGER))
    def test_safe_integers_are_exact_floats(self, provider, a):
        x = provider.from_value(float(a))
        assert provider.to_number(x) == float(a)
        assert provider.to_int(x) == a


# ===================================================================
# BITWISE
# ===================================================================

class TestBitwiseProperties:

    @given(a=operand, b=operand)
    def test_matches_twos_complement(self, provider, a, b):
        x, y = provider.from_value(a), provider.from_value(b)
        assert provider.to_int(provider.bitwise_and(x, y)) == a & b
        assert provider.to_int(provider.bitwise_or(x, y)) == a | b
        assert provider.to_int(provider.bitwise_xor(x, y)) == a ^ b

    @given(a=operand, n=integers(min_value=0, max_value=400))
    def test_shift_round_trip(self, provider, a, n):
        x = provider.from_value(a)
        assert provider.signed_right_shift(provider.left_shift(x, n), n) == x
