"""Formal contract for every LargeInteger provider.

Each operation is described against a plain-``int`` reference model:

- postconditions: what the result must equal for valid inputs
- error conditions: which inputs must raise, and which exception
- algebraic properties: relationships that must hold across operations

The contract is machine-readable.  The conformance tests and the
equivalence search (validation/equivalence_search.py) iterate over it,
so a new postcondition here is checked against both backends without
writing another test.

Layers
------
reference model   truncdiv / truncrem / wrap_signed / wrap_unsigned / to_radix
invoke()          runs one operation on a provider with int inputs and outputs
OperationSpec     per-operation contract (post/error/properties)
ContractSpec      the full contract, plus the operations that must always fail
build_spec()      constructs the ContractSpec
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from errors import DivisionByZeroError, RangeError, UnsupportedOperationError
from literals import DIGITS
from provider import LargeInteger, Provider


# ---------------------------------------------------------------------------
# Reference model
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division)."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def truncrem(a: int, b: int) -> int:
    """Remainder matching ``truncdiv``: its sign follows ``a``."""
    return a - b * truncdiv(a, b)


def wrap_unsigned(bits: int, v: int) -> int:
    return v % (1 << bits) if bits else 0


def wrap_signed(bits: int, v: int) -> int:
    if bits == 0:
        return 0
    r = v % (1 << bits)
    return r - (1 << bits) if r >= 1 << (bits - 1) else r


def to_radix(v: int, radix: int) -> str:
    if v < 0:
        return "-" + to_radix(-v, radix)
    out = [DIGITS[v % radix]]
    while v >= radix:
        v //= radix
        out.append(DIGITS[v % radix])
    return "".join(reversed(out))


# ---------------------------------------------------------------------------
# Running operations with int inputs
# ---------------------------------------------------------------------------

WIDTH_OPERATIONS = frozenset({"as_int_n", "as_uint_n"})


def invoke(provider: Provider, operation: str, *args: int) -> Any:
    """Call ``operation`` on ``provider``, converting ints in and out.

    Width operations take their first argument (the bit count) as a
    plain int; every other argument becomes a LargeInteger.  LargeInteger
    results come back as ints, booleans are returned unchanged.
    """
    op = getattr(provider, operation)
    if operation in WIDTH_OPERATIONS:
        bits, value = args
        result = op(bits, provider.from_value(value))
    else:
        result = op(*(provider.from_value(a) for a in args))
    if isinstance(result, LargeInteger):
        return provider.to_int(result)
    return result


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free int values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    arity: int
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition] = field(default_factory=list)
    properties: list[AlgebraicProperty] = field(default_factory=list)
    # Inputs outside this predicate are too large to be worth computing.
    applies: Callable[..., bool] = lambda *args: True

    def should_fail(self, *args: int) -> type | None:
        """The exception the inputs must raise, or None."""
        for ec in self.error_conditions:
            if ec.trigger(*args):
                return ec.exception
        return None


@dataclass(frozen=True)
class ContractSpec:
    """Complete contract every provider must satisfy."""

    operations: dict[str, OperationSpec]
    unsupported: dict[str, type]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def _exact(name: str, description: str, model: Callable[..., Any]) -> Postcondition:
    return Postcondition(
        name, description, lambda *args: args[-1] == model(*args[:-1])
    )


def _zero_divisor(name: str) -> ErrorCondition:
    return ErrorCondition(
        "division_by_zero",
        f"DivisionByZeroError when the divisor of {name} is zero",
        lambda a, b: b == 0,
        DivisionByZeroError,
    )


def _negative(name: str, position: int, what: str) -> ErrorCondition:
    return ErrorCondition(
        f"negative_{what}",
        f"RangeError when the {what} of {name} is negative",
        lambda *args: args[position] < 0,
        RangeError,
    )


def build_spec() -> ContractSpec:
    """Construct the full provider contract."""

    # ------------------------------------------------------------ arithmetic
    add_spec = OperationSpec(
        name="add",
        arity=2,
        postconditions=[_exact("exact_sum", "Result equals a + b", lambda a, b: a + b)],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda p, a, b: invoke(p, "add", a, b) == invoke(p, "add", b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda p, a: invoke(p, "add", a, 0) == a,
            ),
        ],
    )

    subtract_spec = OperationSpec(
        name="subtract",
        arity=2,
        postconditions=[
            _exact("exact_difference", "Result equals a - b", lambda a, b: a - b),
        ],
        properties=[
            AlgebraicProperty(
                "self_inverse", "subtract(a, a) == 0", 1,
                lambda p, a: invoke(p, "subtract", a, a) == 0,
            ),
            AlgebraicProperty(
                "add_inverse", "subtract(add(a, b), b) == a", 2,
                lambda p, a, b: invoke(p, "subtract", invoke(p, "add", a, b), b) == a,
            ),
        ],
    )

    multiply_spec = OperationSpec(
        name="multiply",
        arity=2,
        postconditions=[
            _exact("exact_product", "Result equals a * b", lambda a, b: a * b),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda p, a, b: (
                    invoke(p, "multiply", a, b) == invoke(p, "multiply", b, a)
                ),
            ),
            AlgebraicProperty(
                "zero", "multiply(a, 0) == 0", 1,
                lambda p, a: invoke(p, "multiply", a, 0) == 0,
            ),
        ],
    )

    divide_spec = OperationSpec(
        name="divide",
        arity=2,
        postconditions=[
            _exact("truncated_quotient", "Result equals a / b rounded toward zero", truncdiv),
        ],
        error_conditions=[_zero_divisor("divide")],
        properties=[
            AlgebraicProperty(
                "division_law", "divide(a, b) * b + remainder(a, b) == a", 2,
                lambda p, a, b: (
                    invoke(p, "divide", a, b) * b + invoke(p, "remainder", a, b) == a
                ),
            ),
            AlgebraicProperty(
                "truncation", "abs(divide(a, b)) <= abs(a)", 2,
                lambda p, a, b: abs(invoke(p, "divide", a, b)) <= abs(a),
            ),
        ],
    )

    remainder_spec = OperationSpec(
        name="remainder",
        arity=2,
        postconditions=[
            _exact("truncated_remainder", "Result equals a - b * truncdiv(a, b)", truncrem),
            Postcondition(
                "sign_follows_dividend",
                "A non-zero remainder has the sign of the dividend",
                lambda a, b, result: result == 0 or (result < 0) == (a < 0),
            ),
            Postcondition(
                "smaller_than_divisor",
                "abs(result) < abs(b)",
                lambda a, b, result: abs(result) < abs(b),
            ),
        ],
        error_conditions=[_zero_divisor("remainder")],
    )

    exponentiate_spec = OperationSpec(
        name="exponentiate",
        arity=2,
        postconditions=[
            _exact("exact_power", "Result equals a ** b", lambda a, b: a**b),
        ],
        error_conditions=[_negative("exponentiate", 1, "exponent")],
        applies=lambda a, b: b < 64,
    )

    unary_minus_spec = OperationSpec(
        name="unary_minus",
        arity=1,
        postconditions=[_exact("negation", "Result equals -a", lambda a: -a)],
        properties=[
            AlgebraicProperty(
                "involution", "unary_minus(unary_minus(a)) == a", 1,
                lambda p, a: invoke(p, "unary_minus", invoke(p, "unary_minus", a)) == a,
            ),
        ],
    )

    # ------------------------------------------------------------ comparison
    def _comparison(name: str, model: Callable[[int, int], bool]) -> OperationSpec:
        return OperationSpec(
            name=name,
            arity=2,
            postconditions=[
                _exact("total_order", f"Result matches {name} on ints", model),
            ],
        )

    equal_spec = _comparison("equal", lambda a, b: a == b)
    not_equal_spec = _comparison("not_equal", lambda a, b: a != b)
    less_than_spec = _comparison("less_than", lambda a, b: a < b)
    less_or_equal_spec = _comparison("less_or_equal", lambda a, b: a <= b)
    greater_than_spec = _comparison("greater_than", lambda a, b: a > b)
    greater_or_equal_spec = _comparison("greater_or_equal", lambda a, b: a >= b)

    less_than_spec.properties.append(AlgebraicProperty(
        "trichotomy", "exactly one of a < b, a == b, a > b", 2,
        lambda p, a, b: [
            invoke(p, "less_than", a, b),
            invoke(p, "equal", a, b),
            invoke(p, "greater_than", a, b),
        ].count(True) == 1,
    ))

    # --------------------------------------------------------------- bitwise
    bitwise_and_spec = OperationSpec(
        name="bitwise_and",
        arity=2,
        postconditions=[
            _exact("twos_complement_and", "Result equals a & b", lambda a, b: a & b),
        ],
    )

    bitwise_or_spec = OperationSpec(
        name="bitwise_or",
        arity=2,
        postconditions=[
            _exact("twos_complement_or", "Result equals a | b", lambda a, b: a | b),
        ],
    )

    bitwise_xor_spec = OperationSpec(
        name="bitwise_xor",
        arity=2,
        postconditions=[
            _exact("twos_complement_xor", "Result equals a ^ b", lambda a, b: a ^ b),
        ],
        properties=[
            AlgebraicProperty(
                "self_inverse", "bitwise_xor(bitwise_xor(a, b), b) == a", 2,
                lambda p, a, b: (
                    invoke(p, "bitwise_xor", invoke(p, "bitwise_xor", a, b), b) == a
                ),
            ),
        ],
    )

    bitwise_not_spec = OperationSpec(
        name="bitwise_not",
        arity=1,
        postconditions=[_exact("complement", "Result equals -a - 1", lambda a: -a - 1)],
        properties=[
            AlgebraicProperty(
                "de_morgan", "not(a & b) == not(a) | not(b)", 2,
                lambda p, a, b: invoke(p, "bitwise_not", invoke(p, "bitwise_and", a, b))
                == invoke(
                    p, "bitwise_or",
                    invoke(p, "bitwise_not", a), invoke(p, "bitwise_not", b),
                ),
            ),
        ],
    )

    left_shift_spec = OperationSpec(
        name="left_shift",
        arity=2,
        postconditions=[
            _exact("multiplies_by_power_of_two", "Result equals a * 2**b", lambda a, b: a << b),
        ],
        error_conditions=[_negative("left_shift", 1, "shift_amount")],
        applies=lambda a, b: b < 4096,
        properties=[
            AlgebraicProperty(
                "right_shift_inverse", "signed_right_shift(left_shift(a, n), n) == a", 2,
                lambda p, a, n: invoke(
                    p, "signed_right_shift", invoke(p, "left_shift", a, abs(n) % 200), abs(n) % 200
                ) == a,
            ),
        ],
    )

    signed_right_shift_spec = OperationSpec(
        name="signed_right_shift",
        arity=2,
        postconditions=[
            _exact(
                "floor_division_by_power_of_two", "Result equals a >> b",
                lambda a, b: (-1 if a < 0 else 0) if b >= a.bit_length() else a >> b,
            ),
        ],
        error_conditions=[_negative("signed_right_shift", 1, "shift_amount")],
    )

    # ----------------------------------------------------------- width fixing
    as_int_n_spec = OperationSpec(
        name="as_int_n",
        arity=2,
        postconditions=[
            _exact("signed_wrap", "Result equals value mod 2**bits, folded signed", wrap_signed),
            Postcondition(
                "in_signed_range",
                "-2**(bits-1) <= result < 2**(bits-1)",
                lambda bits, v, result: (
                    result == 0 if bits == 0
                    else -(1 << (bits - 1)) <= result < 1 << (bits - 1)
                ),
            ),
        ],
        error_conditions=[_negative("as_int_n", 0, "bits")],
        applies=lambda bits, v: bits < 4096,
        properties=[
            AlgebraicProperty(
                "idempotence", "as_int_n(n, as_int_n(n, x)) == as_int_n(n, x)", 2,
                lambda p, n, x: invoke(
                    p, "as_int_n", abs(n) % 130, invoke(p, "as_int_n", abs(n) % 130, x)
                ) == invoke(p, "as_int_n", abs(n) % 130, x),
            ),
        ],
    )

    as_uint_n_spec = OperationSpec(
        name="as_uint_n",
        arity=2,
        postconditions=[
            _exact("unsigned_wrap", "Result equals value mod 2**bits", wrap_unsigned),
            Postcondition(
                "in_unsigned_range",
                "0 <= result < 2**bits",
                lambda bits, v, result: 0 <= result < max(1, 1 << bits),
            ),
        ],
        error_conditions=[_negative("as_uint_n", 0, "bits")],
        applies=lambda bits, v: bits < 4096,
        properties=[
            AlgebraicProperty(
                "idempotence", "as_uint_n(n, as_uint_n(n, x)) == as_uint_n(n, x)", 2,
                lambda p, n, x: invoke(
                    p, "as_uint_n", abs(n) % 130, invoke(p, "as_uint_n", abs(n) % 130, x)
                ) == invoke(p, "as_uint_n", abs(n) % 130, x),
            ),
        ],
    )

    return ContractSpec(
        operations={
            spec.name: spec
            for spec in (
                add_spec,
                subtract_spec,
                multiply_spec,
                divide_spec,
                remainder_spec,
                exponentiate_spec,
                unary_minus_spec,
                equal_spec,
                not_equal_spec,
                less_than_spec,
                less_or_equal_spec,
                greater_than_spec,
                greater_or_equal_spec,
                bitwise_and_spec,
                bitwise_or_spec,
                bitwise_xor_spec,
                bitwise_not_spec,
                left_shift_spec,
                signed_right_shift_spec,
                as_int_n_spec,
                as_uint_n_spec,
            )
        },
        unsupported={
            "unsigned_right_shift": UnsupportedOperationError,
            "unary_plus": UnsupportedOperationError,
        },
    )
