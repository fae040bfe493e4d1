"""Runs the full interpretation over one company's statements.

Validation comes first and is fatal. The four analyzers are independent and
run together on a thread pool (or one after another when parallelism is
disabled); scoring, translation and recommendations follow on their results.
"""

from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Callable, Optional

from statement_interpreter.engines.beginner_translator import BeginnerTranslator
from statement_interpreter.engines.green_flag_analyzer import GreenFlagAnalyzer
from statement_interpreter.engines.health_scorer import HealthScorer
from statement_interpreter.engines.insight_generator import InsightGenerator
from statement_interpreter.engines.ratio_analyzer import RatioAnalyzer
from statement_interpreter.engines.red_flag_analyzer import RedFlagAnalyzer
from statement_interpreter.engines.statement_validator import StatementValidator
from statement_interpreter.engines.trend_analyzer import TrendAnalyzer
from statement_interpreter.errors import AnalysisTimeoutError
from statement_interpreter.logging_config import analysis_context, get_logger
from statement_interpreter.schemas.report import (
    AnalysisOptions,
    FinancialInterpretationReport,
    QuickAnalysis,
)
from statement_interpreter.schemas.statements import FinancialStatements

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FinancialInterpreter:
    """Orchestrates validator, analyzers, scorer and translators."""

    def __init__(
        self,
        validator: StatementValidator,
        ratio_analyzer: RatioAnalyzer,
        trend_analyzer: TrendAnalyzer,
        red_flag_analyzer: RedFlagAnalyzer,
        green_flag_analyzer: GreenFlagAnalyzer,
        health_scorer: HealthScorer,
        beginner_translator: BeginnerTranslator,
        insight_generator: InsightGenerator,
        parallel_analyzers: bool = True,
        analysis_timeout_seconds: float = 30.0,
        clock: Clock = _utc_now,
    ):
        self.validator = validator
        self.ratios = ratio_analyzer
        self.trends = trend_analyzer
        self.red_flags = red_flag_analyzer
        self.green_flags = green_flag_analyzer
        self.scorer = health_scorer
        self.translator = beginner_translator
        self.insights = insight_generator
        self.parallel_analyzers = parallel_analyzers
        self.analysis_timeout_seconds = analysis_timeout_seconds
        self.clock = clock

    def analyze(
        self,
        statements: FinancialStatements,
        options: Optional[AnalysisOptions] = None,
    ) -> FinancialInterpretationReport:
        """Produce the full report.

        Raises:
            InsufficientDataError: The statements fail validation.
            AnalysisTimeoutError: The analyzer stage overran its budget.
        """
        with analysis_context(statements.symbol):
            return self._analyze(statements, options or AnalysisOptions())

    def _analyze(
        self,
        statements: FinancialStatements,
        options: AnalysisOptions,
    ) -> FinancialInterpretationReport:
        now = self.clock()
        logger.info(
            "analysis_started",
            annual_periods=len(statements.income_statements.annual),
            parallel=self.parallel_analyzers,
        )

        if options.synthesize_ttm:
            statements = statements.with_synthesized_ttm()
        if options.include_peer_analysis:
            logger.warning("peer_analysis_not_supported")

        data_quality = self.validator.validate(statements, as_of=now)

        ratios, trends, red_flags, green_flags = self._run_analyzers(
            statements, options.include_industry_context
        )

        health = self.scorer.score(red_flags, green_flags, ratios, trends)
        summary = self.translator.translate(health, red_flags, green_flags, ratios, trends)
        recommendations = self.insights.generate(health, red_flags, green_flags, trends)

        report = FinancialInterpretationReport(
            symbol=statements.symbol,
            company_name=statements.company_name,
            timestamp=now,
            data_quality=data_quality,
            health_score=health,
            red_flags=red_flags,
            green_flags=green_flags,
            ratios=ratios,
            trends=trends,
            beginner_summary=summary,
            recommendations=recommendations,
        )

        logger.info(
            "analysis_completed",
            overall=health.overall,
            grade=health.grade,
            red_flags=len(red_flags),
            green_flags=len(green_flags),
            recommendations=len(recommendations),
        )
        return report

    def quick_analysis(
        self,
        statements: FinancialStatements,
        options: Optional[AnalysisOptions] = None,
    ) -> QuickAnalysis:
        """Grade plus the single most severe concern and strongest positive."""
        report = self.analyze(statements, options)
        return QuickAnalysis(
            symbol=report.symbol,
            overall=report.health_score.overall,
            health_grade=report.health_score.grade,
            top_concern=report.red_flags[0].flag.title if report.red_flags else None,
            top_strength=report.green_flags[0].flag.title if report.green_flags else None,
        )

    # ── helpers ──────────────────────────────────────────────────────

    def _run_analyzers(self, statements: FinancialStatements, include_industry_context: bool):
        if not self.parallel_analyzers:
            return (
                self.ratios.analyze(statements, include_industry_context=include_industry_context),
                self.trends.analyze(statements),
                self.red_flags.analyze(statements),
                self.green_flags.analyze(statements),
            )

        pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="analyzer")
        try:
            futures = (
                pool.submit(
                    self.ratios.analyze, statements, include_industry_context=include_industry_context
                ),
                pool.submit(self.trends.analyze, statements),
                pool.submit(self.red_flags.analyze, statements),
                pool.submit(self.green_flags.analyze, statements),
            )
            # One budget for the whole stage, not per analyzer.
            _, pending = wait(futures, timeout=self.analysis_timeout_seconds)
            if pending:
                logger.error(
                    "analysis_timeout",
                    timeout_seconds=self.analysis_timeout_seconds,
                    pending=len(pending),
                )
                raise AnalysisTimeoutError(
                    f"Analysis of {statements.symbol} exceeded "
                    f"{self.analysis_timeout_seconds}s"
                )
            return tuple(f.result() for f in futures)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
