"""
Input domain for LargeInteger construction.

Two concerns live here because both providers must apply them
identically:

  * the string literal grammar (decimal with optional sign, or a
    ``0x`` / ``0o`` / ``0b`` prefixed literal without a sign)
  * the safe-integer range of the platform's float type, outside of
    which a float can no longer be converted exactly
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from errors import LiteralSyntaxError, PrecisionLossError, RangeError


# ---------------------------------------------------------------------------
# Safe integer range
# ---------------------------------------------------------------------------

MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

MIN_RADIX = 2
MAX_RADIX = 36

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def is_safe_integer(value: int) -> bool:
    return MIN_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER


def check_number(value: float) -> int:
    """Convert a float to an int, refusing anything inexact.

    Fractional values (and NaN / infinity) raise ``RangeError``; whole
    values beyond the safe-integer range raise ``PrecisionLossError``.
    """
    if not math.isfinite(value) or not value.is_integer():
        raise RangeError(
            f"The number {value!r} cannot be converted to a LargeInteger "
            f"because it is not an integer",
            value,
        )
    result = int(value)
    if not is_safe_integer(result):
        raise PrecisionLossError(value)
    return result


def check_radix(radix: int) -> int:
    if isinstance(radix, bool) or not isinstance(radix, int):
        raise RangeError(f"radix must be an integer, got {radix!r}", radix)
    if not MIN_RADIX <= radix <= MAX_RADIX:
        raise RangeError(
            f"radix must be between {MIN_RADIX} and {MAX_RADIX}, got {radix}",
            radix,
        )
    return radix


# ---------------------------------------------------------------------------
# Literal grammar
# ---------------------------------------------------------------------------

_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_BODY = {
    16: re.compile(r"[0-9a-fA-F]+"),
    8: re.compile(r"[0-7]+"),
    2: re.compile(r"[01]+"),
}


@dataclass(frozen=True)
class Literal:
    """A validated integer literal, split into sign, digits and base."""

    negative: bool
    digits: str
    base: int

    @property
    def is_zero(self) -> bool:
        return self.digits.strip("0") == ""


def parse_literal(text: str) -> Literal:
    """Validate ``text`` and split it into its parts.

    Surrounding whitespace is ignored and the empty string means zero.
    """
    body = text.strip()
    if not body:
        return Literal(negative=False, digits="0", base=10)

    base = _PREFIXES.get(body[:2].lower())
    if base is not None:
        digits = body[2:]
        if not _BODY[base].fullmatch(digits):
            raise LiteralSyntaxError(text)
        return Literal(negative=False, digits=digits.lower(), base=base)

    if not _DECIMAL.fullmatch(body):
        raise LiteralSyntaxError(text)
    negative = body[0] == "-"
    return Literal(negative=negative, digits=body.lstrip("+-"), base=10)
