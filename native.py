"""Native provider: GMP integers through gmpy2."""

from __future__ import annotations

from typing import Any

import gmpy2

from literals import Literal
from provider import Backend, Provider


class NativeProvider(Provider):
    """Raw values are ``gmpy2.mpz``.

    GMP already offers truncating division (``t_divmod``) and
    arbitrary-radix output (``mpz.digits``); the operators ``&``, ``|``,
    ``^``, ``~`` and ``>>`` follow infinite-width two's-complement rules
    just like ``int``.
    """

    backend = Backend.NATIVE

    def _from_int(self, value: int) -> Any:
        return gmpy2.mpz(value)

    def _from_literal(self, literal: Literal) -> Any:
        magnitude = gmpy2.mpz(literal.digits, literal.base)
        return -magnitude if literal.negative else magnitude

    def _truncated_divmod(self, a: Any, b: Any) -> tuple[Any, Any]:
        return gmpy2.t_divmod(a, b)

    def _format(self, raw: Any, radix: int) -> str:
        return raw.digits(radix)

    def _to_int(self, raw: Any) -> int:
        return int(raw)
