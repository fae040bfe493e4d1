"""Pydantic schemas for statements, flags, ratios, trends and reports."""

from statement_interpreter.schemas.flags import (
    GreenFlag,
    GreenFlagId,
    GreenFlagWithConfidence,
    RedFlag,
    RedFlagId,
    RedFlagWithConfidence,
    Severity,
    Strength,
)
from statement_interpreter.schemas.health import HealthCategoryName, HealthScore, HealthScoreCategory
from statement_interpreter.schemas.ratios import FinancialRatio, RatioCategory, RatioScore
from statement_interpreter.schemas.report import (
    AnalysisOptions,
    BeginnerSummary,
    DataQuality,
    FinancialInterpretationReport,
    QuickAnalysis,
    Recommendation,
)
from statement_interpreter.schemas.statements import (
    BalanceSheetPeriod,
    CashFlowPeriod,
    FinancialStatements,
    IncomeStatementPeriod,
)
from statement_interpreter.schemas.trends import TrendAnalysis, TrendDirection, TrendMetric

__all__ = [
    "FinancialStatements", "IncomeStatementPeriod", "BalanceSheetPeriod", "CashFlowPeriod",
    "RedFlag", "RedFlagId", "RedFlagWithConfidence", "Severity",
    "GreenFlag", "GreenFlagId", "GreenFlagWithConfidence", "Strength",
    "FinancialRatio", "RatioCategory", "RatioScore",
    "TrendAnalysis", "TrendDirection", "TrendMetric",
    "HealthScore", "HealthScoreCategory", "HealthCategoryName",
    "AnalysisOptions", "BeginnerSummary", "DataQuality", "Recommendation",
    "FinancialInterpretationReport", "QuickAnalysis",
]
