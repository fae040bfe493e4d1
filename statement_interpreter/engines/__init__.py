"""Core analysis engines."""

from statement_interpreter.engines.beginner_translator import BeginnerTranslator
from statement_interpreter.engines.green_flag_analyzer import GreenFlagAnalyzer
from statement_interpreter.engines.health_scorer import HealthScorer
from statement_interpreter.engines.insight_generator import InsightGenerator
from statement_interpreter.engines.ratio_analyzer import RatioAnalyzer
from statement_interpreter.engines.red_flag_analyzer import RedFlagAnalyzer
from statement_interpreter.engines.statement_validator import StatementValidator
from statement_interpreter.engines.trend_analyzer import TrendAnalyzer

__all__ = [
    "BeginnerTranslator",
    "GreenFlagAnalyzer",
    "HealthScorer",
    "InsightGenerator",
    "RatioAnalyzer",
    "RedFlagAnalyzer",
    "StatementValidator",
    "TrendAnalyzer",
]
