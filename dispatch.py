"""
The dispatch layer.

A Dispatcher binds itself to exactly one Provider the first time it is
used and forwards every operation to it for the rest of its life:

    UNRESOLVED --probe--> NATIVE
               \\-------> FALLBACK

Resolution is guarded by a lock so that concurrent first use still
probes once and every caller observes the same provider.  After that,
operations are pure functions over immutable values and need no
locking at all.

In strict mode the dispatcher also checks that every LargeInteger
operand carries the bound provider's backend tag.  Values from the
other backend are rejected with BackendMismatchError instead of being
silently mixed.  With strict off the check is skipped: a foreign value
is handed to the bound provider as is, and the result carries the bound
provider's tag even though its raw value came from the other backend.

The module-level functions at the bottom forward to a process-wide
dispatcher configured from the environment (see config.py).
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import threading
from typing import Any, Callable

from config import BackendPreference, Settings
from errors import BackendMismatchError, BackendUnavailableError
from provider import Backend, LargeInteger, Provider

logger = logging.getLogger(__name__)


NATIVE_MODULE = "gmpy2"


def native_available() -> bool:
    """Whether the native big-integer library is installed and imports cleanly."""
    if importlib.util.find_spec(NATIVE_MODULE) is None:
        return False
    try:
        importlib.import_module(NATIVE_MODULE)
    except ImportError as e:
        logger.warning("%s is installed but failed to import: %s", NATIVE_MODULE, e)
        return False
    return True


class Dispatcher:
    """Routes every operation to the provider chosen at first use."""

    def __init__(
        self,
        settings: Settings | None = None,
        probe: Callable[[], bool] = native_available,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self._probe = probe
        self._provider: Provider | None = None
        self._lock = threading.Lock()

    # -- resolution ---------------------------------------------------------

    @property
    def state(self) -> str:
        provider = self._provider
        return "unresolved" if provider is None else provider.backend.value

    def resolve(self) -> Provider:
        """Return the bound provider, choosing it on the first call."""
        provider = self._provider
        if provider is not None:
            return provider
        with self._lock:
            if self._provider is None:
                self._provider = self._select()
                logger.info(
                    "Resolved LargeInteger backend: %s",
                    self._provider.backend.value,
                )
            return self._provider

    def _select(self) -> Provider:
        preference = self.settings.backend
        if preference == BackendPreference.FALLBACK:
            return self._build(Backend.FALLBACK)

        available = self._probe()
        logger.debug(
            "Probe for %s: %s", NATIVE_MODULE, "found" if available else "missing"
        )

        if available:
            try:
                return self._build(Backend.NATIVE)
            except BackendUnavailableError:
                if preference == BackendPreference.NATIVE:
                    raise
                logger.warning("Native backend failed to load, using fallback")
                return self._build(Backend.FALLBACK)
        if preference == BackendPreference.NATIVE:
            raise BackendUnavailableError(Backend.NATIVE.value)
        return self._build(Backend.FALLBACK)

    def _build(self, backend: Backend) -> Provider:
        if backend == Backend.NATIVE:
            try:
                from native import NativeProvider
            except ImportError as e:
                raise BackendUnavailableError(Backend.NATIVE.value) from e
            return NativeProvider(self.settings)
        from fallback import FallbackProvider

        return FallbackProvider(self.settings)

    # -- operand checking ---------------------------------------------------

    def _bound(self, operation: str, *operands: Any) -> Provider:
        provider = self.resolve()
        if self.settings.strict:
            for operand in operands:
                if (
                    isinstance(operand, LargeInteger)
                    and operand.backend != provider.backend
                ):
                    raise BackendMismatchError(
                        operation, provider.backend.value, operand.backend.value
                    )
        return provider

    # -- construction -------------------------------------------------------

    def from_value(self, value: Any) -> LargeInteger:
        return self._bound("from_value", value).from_value(value)

    # -- arithmetic ---------------------------------------------------------

    def add(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("add", a, b).add(a, b)

    def subtract(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("subtract", a, b).subtract(a, b)

    def multiply(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("multiply", a, b).multiply(a, b)

    def divide(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("divide", a, b).divide(a, b)

    def remainder(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("remainder", a, b).remainder(a, b)

    def exponentiate(self, base: LargeInteger, exponent: LargeInteger) -> LargeInteger:
        return self._bound("exponentiate", base, exponent).exponentiate(base, exponent)

    def unary_minus(self, a: LargeInteger) -> LargeInteger:
        return self._bound("unary_minus", a).unary_minus(a)

    def unary_plus(self, a: LargeInteger) -> LargeInteger:
        return self.resolve().unary_plus(a)

    # -- comparison ---------------------------------------------------------

    def equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("equal", a, b).equal(a, b)

    def not_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("not_equal", a, b).not_equal(a, b)

    def less_than(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("less_than", a, b).less_than(a, b)

    def less_or_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("less_or_equal", a, b).less_or_equal(a, b)

    def greater_than(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("greater_than", a, b).greater_than(a, b)

    def greater_or_equal(self, a: LargeInteger, b: LargeInteger) -> bool:
        return self._bound("greater_or_equal", a, b).greater_or_equal(a, b)

    # -- bitwise ------------------------------------------------------------

    def bitwise_and(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("bitwise_and", a, b).bitwise_and(a, b)

    def bitwise_or(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("bitwise_or", a, b).bitwise_or(a, b)

    def bitwise_xor(self, a: LargeInteger, b: LargeInteger) -> LargeInteger:
        return self._bound("bitwise_xor", a, b).bitwise_xor(a, b)

    def bitwise_not(self, a: LargeInteger) -> LargeInteger:
        return self._bound("bitwise_not", a).bitwise_not(a)

    def left_shift(self, value: LargeInteger, amount: LargeInteger | int) -> LargeInteger:
        return self._bound("left_shift", value, amount).left_shift(value, amount)

    def signed_right_shift(
        self, value: LargeInteger, amount: LargeInteger | int
    ) -> LargeInteger:
        provider = self._bound("signed_right_shift", value, amount)
        return provider.signed_right_shift(value, amount)

    def unsigned_right_shift(self, value: LargeInteger, amount: Any) -> LargeInteger:
        return self.resolve().unsigned_right_shift(value, amount)

    # -- width fixing -------------------------------------------------------

    def as_int_n(self, bits: int, value: LargeInteger) -> LargeInteger:
        return self._bound("as_int_n", value).as_int_n(bits, value)

    def as_uint_n(self, bits: int, value: LargeInteger) -> LargeInteger:
        return self._bound("as_uint_n", value).as_uint_n(bits, value)

    # -- conversion ---------------------------------------------------------

    def to_number(self, value: LargeInteger) -> float:
        return self._bound("to_number", value).to_number(value)

    def to_int(self, value: LargeInteger) -> int:
        return self._bound("to_int", value).to_int(value)

    def to_string(self, value: LargeInteger, radix: int = 10) -> str:
        return self._bound("to_string", value).to_string(value, radix)

    def __repr__(self) -> str:
        return f"Dispatcher(state={self.state!r}, strict={self.settings.strict})"


# ---------------------------------------------------------------------------
# Process-wide dispatcher
# ---------------------------------------------------------------------------

_default: Dispatcher | None = None
_default_lock = threading.Lock()


def default_dispatcher() -> Dispatcher:
    """The dispatcher behind the module-level functions.

    Built on first use from ``Settings.from_env()``; there is no way to
    rebind it afterwards.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Dispatcher(Settings.from_env())
    return _default


def from_value(value: Any) -> LargeInteger:
    return default_dispatcher().from_value(value)


def add(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().add(a, b)


def subtract(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().subtract(a, b)


def multiply(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().multiply(a, b)


def divide(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().divide(a, b)


def remainder(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().remainder(a, b)


def exponentiate(base: LargeInteger, exponent: LargeInteger) -> LargeInteger:
    return default_dispatcher().exponentiate(base, exponent)


def unary_minus(a: LargeInteger) -> LargeInteger:
    return default_dispatcher().unary_minus(a)


def unary_plus(a: LargeInteger) -> LargeInteger:
    return default_dispatcher().unary_plus(a)


def equal(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().equal(a, b)


def not_equal(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().not_equal(a, b)


def less_than(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().less_than(a, b)


def less_or_equal(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().less_or_equal(a, b)


def greater_than(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().greater_than(a, b)


def greater_or_equal(a: LargeInteger, b: LargeInteger) -> bool:
    return default_dispatcher().greater_or_equal(a, b)


def bitwise_and(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().bitwise_and(a, b)


def bitwise_or(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().bitwise_or(a, b)


def bitwise_xor(a: LargeInteger, b: LargeInteger) -> LargeInteger:
    return default_dispatcher().bitwise_xor(a, b)


def bitwise_not(a: LargeInteger) -> LargeInteger:
    return default_dispatcher().bitwise_not(a)


def left_shift(value: LargeInteger, amount: LargeInteger | int) -> LargeInteger:
    return default_dispatcher().left_shift(value, amount)


def signed_right_shift(value: LargeInteger, amount: LargeInteger | int) -> LargeInteger:
    return default_dispatcher().signed_right_shift(value, amount)


def unsigned_right_shift(value: LargeInteger, amount: Any) -> LargeInteger:
    return default_dispatcher().unsigned_right_shift(value, amount)


def as_int_n(bits: int, value: LargeInteger) -> LargeInteger:
    return default_dispatcher().as_int_n(bits, value)


def as_uint_n(bits: int, value: LargeInteger) -> LargeInteger:
    return default_dispatcher().as_uint_n(bits, value)


def to_number(value: LargeInteger) -> float:
    return default_dispatcher().to_number(value)


def to_int(value: LargeInteger) -> int:
    return default_dispatcher().to_int(value)


def to_string(value: LargeInteger, radix: int = 10) -> str:
    return default_dispatcher().to_string(value, radix)
