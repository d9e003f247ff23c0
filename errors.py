"""Error taxonomy for the large-integer layer.

Every error derives from ``LargeIntegerError`` and from the built-in
exception a Python caller would naturally catch (``ValueError``,
``TypeError``, ``ZeroDivisionError``).  Errors are raised at the point of
the offending call; nothing is deferred.
"""

from __future__ import annotations

from typing import Any


class LargeIntegerError(Exception):
    """Base class for every error raised by this package."""


class LiteralSyntaxError(LargeIntegerError, ValueError):
    """Raised when a string is not a valid integer literal."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Cannot convert {text!r} to a LargeInteger")


class RangeError(LargeIntegerError, ValueError):
    """Raised when a value or parameter is outside its allowed domain."""

    def __init__(self, message: str, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class PrecisionLossError(LargeIntegerError, ValueError):
    """Raised when a float is outside the range it represents exactly."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(
            f"The number {value!r} is outside the safe integer range "
            f"and cannot be converted without losing precision"
        )


class DivisionByZeroError(LargeIntegerError, ZeroDivisionError):
    """Raised by divide/remainder when the divisor is zero."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: division by zero")


class UnsupportedOperationError(LargeIntegerError, TypeError):
    """Raised for operations that are deliberately not provided."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is not supported: {reason}")


class InvalidOperandError(LargeIntegerError, TypeError):
    """Raised when an operand has the wrong Python type."""

    def __init__(self, operation: str, value: Any, expected: str) -> None:
        self.operation = operation
        self.value = value
        super().__init__(
            f"{operation}: expected {expected}, got {type(value).__name__}"
        )


class BackendMismatchError(LargeIntegerError, TypeError):
    """Raised when an operand was produced by a different backend."""

    def __init__(self, operation: str, expected: str, actual: str) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{operation}: operand belongs to the {actual!r} backend, "
            f"but the bound backend is {expected!r}"
        )


class BackendUnavailableError(LargeIntegerError, RuntimeError):
    """Raised when the native backend is required but cannot be found."""

    def __init__(self, backend: str) -> None:
        self.backend = backend
        super().__init__(f"The {backend!r} backend is not available")
