"""
Capability provider interface and the LargeInteger value type.

A Provider owns one big-integer representation (its *raw* type) and
implements the full operation set over it.  Everything that decides the
*meaning* of an operation lives in the ``Provider`` base class:

  1. operand validation
  2. truncating division and dividend-signed remainder
  3. shift, width and radix domain checks
  4. width folding for as_int_n / as_uint_n
  5. the two deliberately unsupported operations

Subclasses only supply the handful of primitives that genuinely differ
between representations (construction, truncated divmod, radix
formatting, exact conversion back to ``int``).  Keeping the rules in one
place is what makes the two backends observably identical.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from config import Settings
from errors import (
    BackendMismatchError,
    DivisionByZeroError,
    InvalidOperandError,
    RangeError,
    UnsupportedOperationError,
)
from literals import Literal, check_number, check_radix, parse_literal


class Backend(str, Enum):
    NATIVE = "native"
    FALLBACK = "fallback"


# ---------------------------------------------------------------------------
# LargeInteger
# ---------------------------------------------------------------------------

class LargeInteger:
    """An immutable signed integer of unbounded magnitude.

    Values are produced by ``from_value`` or as the result of another
    operation, never by calling the class.  Each value remembers the
    provider that produced it; its ``backend`` tag is what the dispatcher
    checks before letting it into an operation.

    There are no arithmetic operators and no implicit conversion to
    ``int`` or ``float``.  Use ``to_int`` / ``to_number`` / ``to_string``.
    """

    __slots__ = ("_provider", "_value")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise UnsupportedOperationError(
            "LargeInteger()", "values are created with from_value()"
        )

    @classmethod
    def _wrap(cls, provider: Provider, value: Any) -> LargeInteger:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_provider", provider)
        object.__setattr__(obj, "_value", value)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("LargeInteger is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("LargeInteger is immutable")

    def __copy__(self) -> LargeInteger:
        return self

    def __deepcopy__(self, memo: dict) -> LargeInteger:
        return self

    def __reduce__(self) -> tuple:
        # Rebuilt from its decimal literal by the provider that made it.
        return (self._provider.from_value, (str(self),))

    @property
    def backend(self) -> Backend:
        return self._provider.backend

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LargeInteger):
            return NotImplemented
        return self.backend == other.backend and self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    def __pos__(self) -> LargeInteger:
        return self._provider.unary_plus(self)

    def __str__(self) -> str:
        return self._provider.to_string(self)

    def __repr__(self) -> str:
        return f"LargeInteger({self}, backend={self.backend.value!r})"


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class Provider(ABC):
    """Full operation set over one raw big-integer representation."""

    backend: Backend

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings if settings is not None else Settings()

    # -- backend primitives -------------------------------------------------

    @abstractmethod
    def _from_int(self, value: int) -> Any:
        """Build a raw value from a Python int."""

    @abstractmethod
    def _from_literal(self, literal: Literal) -> Any:
        """Build a raw value from a validated literal."""

    @abstractmethod
    def _truncated_divmod(self, a: Any, b: Any) -> tuple[Any, Any]:
        """Quotient rounded toward zero, remainder signed like ``a``."""

    @abstractmethod
    def _format(self, raw: Any, radix: int) -> str:
        """Digits of ``raw`` in ``radix``, lowercase, ``-`` if negative."""

    @abstractmethod
    def _to_int(self, raw: Any) -> int:
        """Exact conversion to a Python int."""

    # -- internal helpers ---------------------------------------------------

    def _wrap(self, raw: Any) -> LargeInteger:
        return LargeInteger._wrap(self, raw)

    def _raw(self, operation: str, *values: Any) -> tuple[Any, ...]:
        for v in values:
            if not isinstance(v, LargeInteger):
                raise InvalidOperandError(operation, v, "LargeInteger")
        return tuple(v._value for v in values)

    def _shift_amount(self, operation: str, amount: Any) -> int:
        if isinstance(amount, LargeInteger):
            n = self._to_int(amount._value)
        elif isinstance(amount, int) and not isinstance(amount, bool):
            n = amount
        else:
            raise InvalidOperandError(operation, amount, "LargeInteger or int")
        if n < 0:
            raise RangeError(f"{operation}: shift amount must be >= 0, got {n}", n)
        return n

    def _width(self, operation: str, bits: Any) -> int:
        if isinstance(bits, bool) or not isinstance(bits, int):
            raise InvalidOperandError(operation, bits, "int")
        if bits < 0:
            raise RangeError(f"{operation}: bits must be >= 0, got {bits}", bits)
        return bits

    def _check_size(self, operation: str, bits: int) -> None:
        if bits > self.settings.max_bits:
            raise RangeError(
                f"{operation}: maximum LargeInteger size exceeded "
                f"({bits} > {self.settings.max_bits} bits)",
                bits,
            )

    # -- construction -------------------------------------------------------

    def from_value(self, value: Any) -> LargeInteger:
        """Create a LargeInteger from a str, bool, int or integral float."""
        if isinstance(value, LargeInteger):
            if value.backend != self.backend:
                raise BackendMismatchError(
                    "from_value", self.backend.value, value.backend.value
                )
            return value
        if isinstance(value, bool):
            return self._wrap(self._from_int(int(value)))
        if isinstance(value, int):
            return self._wrap(self._from_int(value))
        if isinstance(value, float):
            return self._wrap(self._from_int(check_number(value)))
        if isinstance(value, str):
            return self._wrap(self._from_literal(parse_literal(value)))
        raise InvalidOperandError("from_value", value, "str, int, float or bool")

    # -- arithmetic ---------------------------------------------------------

    def add(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("add", a, b)
        return self._wrap(x + y)

    def subtract(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("subtract", a, b)
        return self._wrap(x - y)

    def multiply(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("multiply", a, b)
        return self._wrap(x * y)

    def divide(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        """Integer division truncating toward zero."""
        x, y = self._raw("divide", a, b)
        if not y:
            raise DivisionByZeroError("divide")
        q, _ = self._truncated_divmod(x, y)
        return self._wrap(q)

    def remainder(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        """Remainder of truncating division; its sign follows ``a``."""
        x, y = self._raw("remainder", a, b)
        if not y:
            raise DivisionByZeroError("remainder")
        _, r = self._truncated_divmod(x, y)
        return self._wrap(r)

    def exponentiate(self, base: LargeInteger, exponent: LargeInteger) -> LargeInteger:
        x, e = self._raw("exponentiate", base, exponent)
        if e < 0:
            raise RangeError("exponentiate: exponent must be >= 0", self._to_int(e))
        n = self._to_int(e)
        # |x| <= 1 never grows, whatever the exponent.
        if abs(x).bit_length() > 1:
            self._check_size("exponentiate", (abs(x).bit_length() - 1) * n + 1)
        return self._wrap(x**n)

    def unary_minus(self, a: LargeInteger) -> LargeInteger:
        (x,) = self._raw("unary_minus", a)
        return self._wrap(-x)

    def unary_plus(self, a: LargeInteger) -> LargeInteger:
        raise UnsupportedOperationError(
            "unary_plus",
            "it would coerce a LargeInteger to a fixed-precision number",
        )

    # -- comparison ---------------------------------------------------------

    def equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        x, y = self._raw("equal", a, b)
        return bool(x == y)

    def less_than(self, a: LargeInteger, b: LargeInteger) -> bool:
        x, y = self._raw("less_than", a, b)
        return bool(x < y)

    def greater_than(self, a: LargeInteger, b: LargeInteger) -> bool:
        x, y = self._raw("greater_than", a, b)
        return bool(x > y)

    def not_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return not self.equal(a, b)

    def less_or_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return not self.greater_than(a, b)

    def greater_or_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return not self.less_than(a, b)

    # -- bitwise ------------------------------------------------------------

    def bitwise_and(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("bitwise_and", a, b)
        return self._wrap(x & y)

    def bitwise_or(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("bitwise_or", a, b)
        return self._wrap(x | y)

    def bitwise_xor(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        x, y = self._raw("bitwise_xor", a, b)
        return self._wrap(x ^ y)

    def bitwise_not(self, a: LargeInteger) -> LargeInteger:
        (x,) = self._raw("bitwise_not", a)
        return self._wrap(~x)

    def left_shift(self, value: LargeInteger, amount: LargeInteger | int) -> LargeInteger:
        (x,) = self._raw("left_shift", value)
        n = self._shift_amount("left_shift", amount)
        if not x:
            return value
        self._check_size("left_shift", x.bit_length() + n)
        return self._wrap(x << n)

    def signed_right_shift(
        self, value: LargeInteger, amount: LargeInteger | int
    ) -> LargeInteger:
        """Arithmetic right shift; negative values stay negative."""
        (x,) = self._raw("signed_right_shift", value)
        n = self._shift_amount("signed_right_shift", amount)
        if n >= x.bit_length():
            # Everything shifted out: only the sign remains.
            return self._wrap(self._from_int(-1 if x < 0 else 0))
        return self._wrap(x >> n)

    def unsigned_right_shift(self, value: LargeInteger, amount: Any) -> LargeInteger:
        raise UnsupportedOperationError(
            "unsigned_right_shift",
            "an unbounded integer has no fixed width to shift zeros into",
        )

    # -- width fixing -------------------------------------------------------

    def as_int_n(self, bits: int, value: LargeInteger) -> LargeInteger:
        """Wrap ``value`` into a signed two's-complement integer of ``bits``."""
        n = self._width("as_int_n", bits)
        (x,) = self._raw("as_int_n", value)
        if n == 0:
            return self._wrap(self._from_int(0))
        if x.bit_length() < n:
            return value
        self._check_size("as_int_n", n)
        modulus = 1 << n
        r = x % modulus
        if r >= modulus >> 1:
            r -= modulus
        return self._wrap(r)

    def as_uint_n(self, bits: int, value: LargeInteger) -> LargeInteger:
        """Wrap ``value`` into an unsigned integer of ``bits``."""
        n = self._width("as_uint_n", bits)
        (x,) = self._raw("as_uint_n", value)
        if n == 0:
            return self._wrap(self._from_int(0))
        if x >= 0 and x.bit_length() <= n:
            return value
        self._check_size("as_uint_n", n)
        return self._wrap(x % (1 << n))

    # -- conversion ---------------------------------------------------------

    def to_number(self, value: LargeInteger) -> float:
        """Nearest float; precision is silently lost beyond 2**53."""
        (x,) = self._raw("to_number", value)
        i = self._to_int(x)
        try:
            return float(i)
        except OverflowError:
            return math.inf if i > 0 else -math.inf

    def to_int(self, value: LargeInteger) -> int:
        (x,) = self._raw("to_int", value)
        return self._to_int(x)

    def to_string(self, value: LargeInteger, radix: int = 10) -> str:
        (x,) = self._raw("to_string", value)
        return self._format(x, check_radix(radix))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend.value!r})"
