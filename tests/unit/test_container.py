"""Tests for the dependency injection container.

Verifies that the container wires every engine from Settings and that
overrides isolate tests.
"""

from dependency_injector import providers

from statement_interpreter.config import Settings
from statement_interpreter.container import AppContainer
from statement_interpreter.engines import (
    BeginnerTranslator,
    GreenFlagAnalyzer,
    HealthScorer,
    InsightGenerator,
    RatioAnalyzer,
    RedFlagAnalyzer,
    StatementValidator,
    TrendAnalyzer,
)
from statement_interpreter.services import FinancialInterpreter


class TestContainerConfiguration:
    """Test container configuration and wiring."""

    def test_container_creates_settings(self):
        """Container provides Settings singleton."""
        container = AppContainer()
        settings = container.settings()

        assert isinstance(settings, Settings)
        assert settings.app_name == "statement-interpreter"
        assert settings is container.settings()

    def test_container_creates_engines(self):
        """Every engine is a singleton."""
        container = AppContainer()
        engines = {
            container.statement_validator: StatementValidator,
            container.ratio_analyzer: RatioAnalyzer,
            container.trend_analyzer: TrendAnalyzer,
            container.red_flag_analyzer: RedFlagAnalyzer,
            container.green_flag_analyzer: GreenFlagAnalyzer,
            container.health_scorer: HealthScorer,
            container.beginner_translator: BeginnerTranslator,
            container.insight_generator: InsightGenerator,
        }
        for provider, cls in engines.items():
            instance = provider()
            assert isinstance(instance, cls)
            assert instance is provider()

    def test_interpreter_is_a_factory(self):
        """A fresh interpreter per call, sharing the engine singletons."""
        container = AppContainer()
        first = container.interpreter()
        second = container.interpreter()

        assert isinstance(first, FinancialInterpreter)
        assert first is not second
        assert first.ratios is second.ratios


class TestContainerSettings:
    """Settings flow into the engines they configure."""

    def test_settings_override(self, container, settings):
        assert container.settings() is settings
        assert container.interpreter().parallel_analyzers is False

    def test_engine_parameters_from_settings(self):
        container = AppContainer()
        container.settings.override(providers.Object(Settings(
            min_annual_periods=3,
            preferred_annual_periods=7,
            default_tax_rate=0.3,
            recommendation_limit=4,
            analysis_timeout_seconds=2.5,
        )))
        try:
            validator = container.statement_validator()
            assert validator.min_annual_periods == 3
            assert validator.preferred_annual_periods == 7
            assert container.ratio_analyzer().default_tax_rate == 0.3
            assert container.insight_generator().limit == 4
            assert container.interpreter().analysis_timeout_seconds == 2.5
        finally:
            container.settings.reset_override()

    def test_override_dependency_in_factory(self, container):
        """Factory call kwargs replace a wired dependency."""
        scorer = HealthScorer()
        interpreter = container.interpreter(health_scorer=scorer)
        assert interpreter.scorer is scorer
