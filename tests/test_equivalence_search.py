"""Tests for the stand-alone equivalence search tool."""
from __future__ import annotations

from fallback import FallbackProvider
from validation.equivalence_search import (
    SMALL_VALUES,
    Counterexample,
    SearchReport,
    edge_values,
    run_search,
    search_equivalence_violations,
)
from spec import build_spec


class BrokenFallback(FallbackProvider):
    """Floors instead of truncating, the classic porting mistake."""

    def _truncated_divmod(self, a, b):
        return divmod(a, b)


class TestEdgeValues:

    def test_symmetric_and_sorted(self):
        values = edge_values()
        assert values == sorted(values)
        assert all(-v in values for v in values)

    def test_crosses_safe_integer_boundary(self):
        values = edge_values()
        assert 2**53 in values and 2**53 - 1 in values
        assert max(values) > 2**64


class TestSearch:

    def test_both_providers_pass(self, native, fallback):
        report = run_search([native, fallback], SMALL_VALUES)
        assert report.passed, report.summary()
        assert report.checks_run > 0

    def test_edge_values_pass(self, native, fallback):
        report = run_search([native, fallback])
        assert report.passed, report.summary()

    def test_fallback_alone_passes(self, fallback):
        report = run_search([fallback], SMALL_VALUES)
        assert report.passed, report.summary()

    def test_broken_provider_is_caught(self, fallback):
        report = run_search([BrokenFallback()], [-7, 2, 7])
        assert not report.passed
        categories = {cx.category for cx in report.counterexamples}
        assert "postcondition_violation" in categories
        assert {cx.operation for cx in report.counterexamples} <= {"divide", "remainder"}

    def test_disagreement_between_providers(self, fallback):
        cxs, checks = search_equivalence_violations(
            fallback, BrokenFallback(), build_spec(), [-7, 2]
        )
        assert checks > 0
        assert any(cx.operation == "divide" and cx.inputs == (-7, 2) for cx in cxs)


class TestReport:

    def test_summary_lists_counterexamples(self):
        report = SearchReport(checks_run=3)
        report.counterexamples.append(Counterexample(
            category="equivalence_violation",
            operation="divide",
            inputs=(-7, 2),
            expected="native: -3",
            actual="fallback: -4",
            description="Backends disagree",
        ))
        text = report.summary()
        assert not report.passed
        assert "Counterexamples found: 1" in text
        assert "divide" in text and "fallback: -4" in text

    def test_summary_when_clean(self):
        assert "all checks passed" in SearchReport().summary()
