"""Financial ratio schemas."""

from enum import Enum
from typing import Optional

from statement_interpreter.schemas.base import CamelModel


class RatioCategory(str, Enum):
    LIQUIDITY = "liquidity"
    PROFITABILITY = "profitability"
    EFFICIENCY = "efficiency"
    LEVERAGE = "leverage"
    CASH_FLOW = "cash_flow"


class RatioScore(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class BenchmarkTable(CamelModel):
    excellent: float
    good: float
    fair: float
    poor: float


class RatioInterpretation(CamelModel):
    score: RatioScore
    beginner_explanation: str
    benchmark: BenchmarkTable
    industry_context: Optional[str] = None


class ActualValues(CamelModel):
    numerator: float
    denominator: float


class FinancialRatio(CamelModel):
    id: str
    name: str
    category: RatioCategory
    value: Optional[float] = None
    formula: str
    formula_description: str
    interpretation: RatioInterpretation
    actual_values: Optional[ActualValues] = None
