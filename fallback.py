"""
Fallback provider: software big integers over the built-in ``int``.

``int`` already stores arbitrarily many digits, but its semantics differ
from the contract in two places that this module takes care of:

  * ``//`` and ``%`` round toward negative infinity; the contract wants
    truncation toward zero.
  * ``int(text)`` and ``str(n)`` refuse decimal strings longer than the
    interpreter's digit limit; radix conversion here works in word-sized
    chunks so it never hits that limit.
"""

from __future__ import annotations

from literals import DIGITS, MAX_RADIX, MIN_RADIX, Literal
from provider import Backend, Provider


WORD_BITS = 60


def _chunk(radix: int) -> tuple[int, int]:
    """Largest ``k`` with ``radix**k`` below one word, and that power."""
    k = 1
    while radix ** (k + 1) < 1 << WORD_BITS:
        k += 1
    return k, radix**k


CHUNKS = {radix: _chunk(radix) for radix in range(MIN_RADIX, MAX_RADIX + 1)}

# Bases where int() / format() work on bits and have no digit limit.
_BINARY_FORMATS = {2: "b", 8: "o", 16: "x"}


def truncated_divmod(a: int, b: int) -> tuple[int, int]:
    """divmod() rounding the quotient toward zero instead of -inf."""
    q, r = divmod(a, b)
    # divmod rounds toward -inf; step back when the signs differ and
    # the division was inexact.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
        r -= b
    return q, r


def parse_digits(digits: str, base: int) -> int:
    """Parse an unsigned digit string one word-sized chunk at a time."""
    if base in _BINARY_FORMATS:
        return int(digits, base)
    k, scale = CHUNKS[base]
    head = len(digits) % k or k
    result = int(digits[:head], base)
    for start in range(head, len(digits), k):
        result = result * scale + int(digits[start : start + k], base)
    return result


def _word_digits(word: int, radix: int) -> str:
    if radix == 10:
        return str(word)
    if word == 0:
        return "0"
    out = []
    while word:
        word, d = divmod(word, radix)
        out.append(DIGITS[d])
    return "".join(reversed(out))


def format_digits(n: int, radix: int) -> str:
    """Render ``n`` in ``radix`` (lowercase, leading ``-`` if negative)."""
    if n < 0:
        return "-" + format_digits(-n, radix)
    if radix in _BINARY_FORMATS:
        return format(n, _BINARY_FORMATS[radix])
    k, scale = CHUNKS[radix]
    words = []
    while n >= scale:
        n, word = divmod(n, scale)
        words.append(word)
    parts = [_word_digits(n, radix)]
    parts.extend(_word_digits(w, radix).rjust(k, "0") for w in reversed(words))
    return "".join(parts)


class FallbackProvider(Provider):
    """Raw values are plain ``int``."""

    backend = Backend.FALLBACK

    def _from_int(self, value: int) -> int:
        return int(value)

    def _from_literal(self, literal: Literal) -> int:
        magnitude = parse_digits(literal.digits, literal.base)
        return -magnitude if literal.negative else magnitude

    def _truncated_divmod(self, a: int, b: int) -> tuple[int, int]:
        return truncated_divmod(a, b)

    def _format(self, raw: int, radix: int) -> str:
        return format_digits(raw, radix)

    def _to_int(self, raw: int) -> int:
        return raw
