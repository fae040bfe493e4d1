"""Dependency Injection Container.

Centralized definition of the interpreter's object graph using
dependency-injector. Every engine is stateless, so engines are singletons;
the interpreter itself is a factory so overrides take effect per call.

Usage::

    from statement_interpreter.container import AppContainer

    container = AppContainer()
    interpreter = container.interpreter()
    report = interpreter.analyze(statements)

    # Swap a dependency in tests
    container.settings.override(providers.Object(Settings(parallel_analyzers=False)))
"""

from dependency_injector import containers, providers

from statement_interpreter.config import Settings
from statement_interpreter.engines.beginner_translator import BeginnerTranslator
from statement_interpreter.engines.green_flag_analyzer import GreenFlagAnalyzer
from statement_interpreter.engines.health_scorer import HealthScorer
from statement_interpreter.engines.insight_generator import InsightGenerator
from statement_interpreter.engines.ratio_analyzer import RatioAnalyzer
from statement_interpreter.engines.red_flag_analyzer import RedFlagAnalyzer
from statement_interpreter.engines.statement_validator import StatementValidator
from statement_interpreter.engines.trend_analyzer import TrendAnalyzer
from statement_interpreter.services.interpretation_service import FinancialInterpreter


class AppContainer(containers.DeclarativeContainer):
    """Application Dependency Injection Container.

    - Configuration (Settings)
    - Engines (validation, analysis, scoring, translation)
    - Services (orchestration)
    """

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    # ══════════════════════════════════════════════════════════════════
    # ENGINES (Business Logic Layer)
    # ══════════════════════════════════════════════════════════════════

    statement_validator = providers.Singleton(
        StatementValidator,
        min_annual_periods=settings.provided.min_annual_periods,
        preferred_annual_periods=settings.provided.preferred_annual_periods,
    )

    ratio_analyzer = providers.Singleton(
        RatioAnalyzer,
        default_tax_rate=settings.provided.default_tax_rate,
    )

    trend_analyzer = providers.Singleton(TrendAnalyzer)

    red_flag_analyzer = providers.Singleton(RedFlagAnalyzer)

    green_flag_analyzer = providers.Singleton(
        GreenFlagAnalyzer,
        default_tax_rate=settings.provided.default_tax_rate,
    )

    health_scorer = providers.Singleton(HealthScorer)

    beginner_translator = providers.Singleton(BeginnerTranslator)

    insight_generator = providers.Singleton(
        InsightGenerator,
        limit=settings.provided.recommendation_limit,
    )

    # ══════════════════════════════════════════════════════════════════
    # SERVICES (Orchestration Layer)
    # ══════════════════════════════════════════════════════════════════

    interpreter = providers.Factory(
        FinancialInterpreter,
        validator=statement_validator,
        ratio_analyzer=ratio_analyzer,
        trend_analyzer=trend_analyzer,
        red_flag_analyzer=red_flag_analyzer,
        green_flag_analyzer=green_flag_analyzer,
        health_scorer=health_scorer,
        beginner_translator=beginner_translator,
        insight_generator=insight_generator,
        parallel_analyzers=settings.provided.parallel_analyzers,
        analysis_timeout_seconds=settings.provided.analysis_timeout_seconds,
    )
