"""Tests for FinancialInterpreter — orchestration, parallelism and timeouts."""

import threading

import pytest
import structlog

from statement_interpreter.errors import AnalysisTimeoutError, InsufficientDataError
from statement_interpreter.schemas.flags import RedFlagId
from statement_interpreter.schemas.report import AnalysisOptions
from tests.fixtures.builders import (
    distressed_company,
    healthy_balance,
    healthy_cash_flow,
    healthy_company,
    healthy_income,
    make_statements,
)


class _BlockingRatioAnalyzer:
    """Stands in for RatioAnalyzer; blocks until released."""

    def __init__(self):
        self.release = threading.Event()

    def analyze(self, statements, include_industry_context=True):
        self.release.wait(timeout=5)
        return []


class _ContextRecordingRatioAnalyzer:
    """Stands in for RatioAnalyzer; remembers the bound log context."""

    def __init__(self):
        self.seen = None

    def analyze(self, statements, include_industry_context=True):
        self.seen = structlog.contextvars.get_contextvars()
        return []


class TestFinancialInterpreter:
    """End-to-end runs through the container-built interpreter."""

    @pytest.fixture(autouse=True)
    def _interpreter(self, container, fixed_now):
        self.container = container
        self.fixed_now = fixed_now
        self.interpreter = container.interpreter(clock=lambda: fixed_now)

    def test_healthy_report(self):
        """Report carries every section and the injected clock."""
        report = self.interpreter.analyze(healthy_company())
        assert report.symbol == "HLTH"
        assert report.timestamp == self.fixed_now
        assert report.health_score.grade == "A+"
        assert report.red_flags == []
        assert len(report.green_flags) == 14
        assert len(report.ratios) == 22
        assert report.data_quality.historical_depth.annual == 5
        assert report.beginner_summary.top_three_strengths
        assert report.recommendations[0].title == "Strong Buy Candidate"

    def test_distressed_report(self):
        report = self.interpreter.analyze(distressed_company())
        assert report.health_score.grade == "F"
        assert report.red_flags[0].flag.id == RedFlagId.INSOLVENCY_RISK
        assert report.green_flags == []
        assert report.data_quality.warnings == [
            "Limited historical data (3 years) - ideally need 5+ years for reliable trends"
        ]

    def test_validation_runs_first(self):
        """Too little history is fatal before any analyzer runs."""
        statements = make_statements(healthy_income()[:1], healthy_balance(), healthy_cash_flow())
        with pytest.raises(InsufficientDataError):
            self.interpreter.analyze(statements)

    def test_parallel_matches_sequential(self):
        """Running the analyzers on the pool changes nothing in the output."""
        sequential = self.container.interpreter(clock=lambda: self.fixed_now)
        parallel = self.container.interpreter(
            clock=lambda: self.fixed_now, parallel_analyzers=True
        )
        assert parallel.parallel_analyzers is True
        assert sequential.parallel_analyzers is False
        a = sequential.analyze(distressed_company())
        b = parallel.analyze(distressed_company())
        assert a.model_dump() == b.model_dump()

    def test_industry_context_option(self):
        report = self.interpreter.analyze(
            healthy_company(), AnalysisOptions(include_industry_context=False)
        )
        assert all(r.interpretation.industry_context is None for r in report.ratios)

    def test_peer_analysis_is_ignored(self):
        report = self.interpreter.analyze(
            healthy_company(), AnalysisOptions(include_peer_analysis=True)
        )
        assert report.health_score.grade == "A+"

    def test_synthesize_ttm(self, acme):
        """Summing four quarters feeds TTM figures into the ratios.

        The quarters omit cost of revenue and interest, so ratios needing
        them drop out once the TTM period is preferred.
        """
        annual = {r.id: r for r in self.interpreter.analyze(acme).ratios}
        assert "inventory_turnover" in annual
        assert "interest_coverage" in annual

        report = self.interpreter.analyze(acme, AnalysisOptions(synthesize_ttm=True))
        ratios = {r.id: r for r in report.ratios}
        assert "inventory_turnover" not in ratios
        assert "interest_coverage" not in ratios
        assert ratios["cash_flow_to_net_income"].value == pytest.approx(1.6 / 1.25)
        assert report.company_name == "Acme Industrial Corp."

    def test_quick_analysis(self):
        quick = self.interpreter.quick_analysis(distressed_company())
        assert quick.symbol == "DSTR"
        assert quick.health_grade == "F"
        assert quick.top_concern == "Insolvency Risk - Negative Equity"
        assert quick.top_strength is None

    def test_quick_analysis_healthy(self):
        quick = self.interpreter.quick_analysis(healthy_company())
        assert quick.overall == 98
        assert quick.top_concern is None
        assert quick.top_strength == "Superior Cash Generation"


class TestAnalyzerTimeout:

    def test_slow_analyzer_times_out(self, container):
        """One budget covers the whole analyzer stage."""
        blocking = _BlockingRatioAnalyzer()
        interpreter = container.interpreter(
            ratio_analyzer=blocking,
            parallel_analyzers=True,
            analysis_timeout_seconds=0.05,
        )
        try:
            with pytest.raises(AnalysisTimeoutError, match="HLTH"):
                interpreter.analyze(healthy_company())
        finally:
            blocking.release.set()


class TestAnalysisLogContext:

    def test_symbol_bound_while_analyzing(self, container):
        """Events logged during a run carry the company symbol."""
        recorder = _ContextRecordingRatioAnalyzer()
        interpreter = container.interpreter(ratio_analyzer=recorder, parallel_analyzers=False)
        interpreter.analyze(healthy_company())
        assert recorder.seen["symbol"] == "HLTH"
        assert "symbol" not in structlog.contextvars.get_contextvars()
