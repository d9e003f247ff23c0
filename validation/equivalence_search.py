"""Equivalence search: discovers behaviour that differs between backends.

This module runs independently of the test suite.  Over a fixed set of
edge-case magnitudes (zero, one, the safe-integer boundary, word
boundaries, values far beyond 2**64) it searches for:

1. Equivalence violations: the native and fallback providers return
   different ``to_string`` output, or raise different errors, for the
   same operation and inputs.
2. Postcondition violations: a provider disagrees with the int
   reference model in spec.py.
3. Error condition violations: inputs that must raise don't (or raise
   the wrong exception).
4. Unsupported-operation violations: an operation that must always
   fail succeeded.

Run directly::

    python -m validation.equivalence_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field
from typing import Any

sys.path.insert(0, ".")

from fallback import FallbackProvider
from literals import MAX_SAFE_INTEGER
from provider import LargeInteger, Provider
from spec import ContractSpec, build_spec, invoke


# ---------------------------------------------------------------------------
# Sample magnitudes
# ---------------------------------------------------------------------------

def edge_values() -> list[int]:
    """Signed magnitudes around every boundary the backends care about."""
    magnitudes = {
        0, 1, 2, 3, 7, 8, 127, 128, 255, 256,
        2**31 - 1, 2**31, 2**32,
        MAX_SAFE_INTEGER, MAX_SAFE_INTEGER + 1, MAX_SAFE_INTEGER + 2,
        2**63 - 1, 2**63, 2**64 - 1, 2**64, 2**64 + 1,
        10**18, 10**19, 10**40, 2**127 + 12345, 3**200,
    }
    values = set(magnitudes) | {-m for m in magnitudes}
    return sorted(values)


SMALL_VALUES = [-130, -129, -128, -9, -8, -7, -2, -1, 0, 1, 2, 7, 8, 9, 63, 64, 65, 127, 128, 129]


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Equivalence Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found: all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _inputs(name: str, arity: int, values: list[int]) -> list[tuple[int, ...]]:
    if name in ("as_int_n", "as_uint_n"):
        return [(bits, v) for bits in (-1, 0, 1, 7, 8, 32, 53, 64, 65) for v in values]
    if name in ("left_shift", "signed_right_shift", "exponentiate"):
        return [(v, n) for v in values for n in (-1, 0, 1, 7, 53, 64, 65, 200)]
    return list(itertools.product(values, repeat=arity))


def _outcome(provider: Provider, name: str, args: tuple[int, ...]) -> str:
    """to_string of the result, or the name of the raised error."""
    try:
        op = getattr(provider, name)
        if name in ("as_int_n", "as_uint_n"):
            result = op(args[0], provider.from_value(args[1]))
        else:
            result = op(*(provider.from_value(a) for a in args))
    except Exception as e:
        return f"raise {type(e).__name__}"
    if isinstance(result, LargeInteger):
        return provider.to_string(result)
    return repr(result)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_equivalence_violations(
    native: Provider,
    fallback: Provider,
    spec: ContractSpec,
    values: list[int],
) -> tuple[list[Counterexample], int]:
    """Compare both providers operation by operation."""
    cxs: list[Counterexample] = []
    checks = 0

    for name, op_spec in spec.operations.items():
        for args in _inputs(name, op_spec.arity, values):
            if not op_spec.applies(*args):
                continue
            checks += 1
            expected = _outcome(native, name, args)
            actual = _outcome(fallback, name, args)
            if expected != actual:
                cxs.append(Counterexample(
                    category="equivalence_violation",
                    operation=name,
                    inputs=args,
                    expected=f"native: {expected}",
                    actual=f"fallback: {actual}",
                    description="Backends disagree",
                ))

    for value in values:
        for radix in (2, 8, 10, 16, 36):
            checks += 1
            expected = native.to_string(native.from_value(value), radix)
            actual = fallback.to_string(fallback.from_value(value), radix)
            if expected != actual:
                cxs.append(Counterexample(
                    category="equivalence_violation",
                    operation="to_string",
                    inputs=(value, radix),
                    expected=f"native: {expected}",
                    actual=f"fallback: {actual}",
                    description="Backends format differently",
                ))

    return cxs, checks


def search_postcondition_violations(
    provider: Provider,
    spec: ContractSpec,
    values: list[int],
) -> tuple[list[Counterexample], int]:
    """Verify postconditions against the int reference model."""
    cxs: list[Counterexample] = []
    checks = 0

    for name, op_spec in spec.operations.items():
        for args in _inputs(name, op_spec.arity, values):
            if not op_spec.applies(*args) or op_spec.should_fail(*args):
                continue
            checks += 1
            try:
                result = invoke(provider, name, *args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_spec.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=name,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    provider: Provider,
    spec: ContractSpec,
    values: list[int],
) -> tuple[list[Counterexample], int]:
    """Verify every error condition raises the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for name, op_spec in spec.operations.items():
        for args in _inputs(name, op_spec.arity, values):
            for ec in op_spec.error_conditions:
                if not ec.trigger(*args):
                    continue
                checks += 1
                try:
                    result = invoke(provider, name, *args)
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=name,
                        inputs=args,
                        expected=ec.exception.__name__,
                        actual=f"result={result}",
                        description=(
                            f"Error condition '{ec.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))
                except ec.exception:
                    pass  # expected
                except Exception as e:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=name,
                        inputs=args,
                        expected=ec.exception.__name__,
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_unsupported_violations(
    provider: Provider,
    spec: ContractSpec,
    values: list[int],
) -> tuple[list[Counterexample], int]:
    """Operations that must always fail, whatever the operands."""
    cxs: list[Counterexample] = []
    checks = 0

    for name, exception in spec.unsupported.items():
        op = getattr(provider, name)
        for v in values:
            checks += 1
            args: tuple[Any, ...] = (provider.from_value(v),)
            if name == "unsigned_right_shift":
                args += (provider.from_value(1),)
            try:
                op(*args)
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=name,
                    inputs=(v,),
                    expected=exception.__name__,
                    actual="returned normally",
                    description="Unsupported operation succeeded",
                ))
            except exception:
                pass

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    providers: list[Provider],
    values: list[int] | None = None,
) -> SearchReport:
    """Run the full search over ``providers``.

    Every provider is checked against the contract; when two are given
    they are also compared with each other.
    """
    spec = build_spec()
    values = values if values is not None else edge_values()
    report = SearchReport()

    for provider in providers:
        for search_fn in (
            search_postcondition_violations,
            search_error_condition_violations,
            search_unsupported_violations,
        ):
            cxs, checks = search_fn(provider, spec, values)
            report.counterexamples.extend(cxs)
            report.checks_run += checks

    if len(providers) == 2:
        cxs, checks = search_equivalence_violations(*providers, spec, values)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Search the fallback provider, and compare it with native if present."""
    from dispatch import native_available

    providers: list[Provider] = []
    if native_available():
        from native import NativeProvider

        providers.append(NativeProvider())
    else:
        print("gmpy2 not found: checking the fallback provider only")
    providers.append(FallbackProvider())

    all_passed = True
    for name, values in (("edge magnitudes", edge_values()), ("small values", SMALL_VALUES)):
        print(f"\n--- Samples: {name} ---")
        report = run_search(providers, values)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL SAMPLES PASSED")
    else:
        print("SOME SAMPLES HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
