"""Report-level schemas: data quality, summaries, recommendations."""

from datetime import datetime
from enum import Enum
from typing import Optional

from statement_interpreter.schemas.base import CamelModel
from statement_interpreter.schemas.flags import GreenFlagWithConfidence, RedFlagWithConfidence
from statement_interpreter.schemas.health import HealthScore
from statement_interpreter.schemas.ratios import FinancialRatio
from statement_interpreter.schemas.trends import TrendAnalysis


class HistoricalDepth(CamelModel):
    annual: int
    quarterly: int


class DataQuality(CamelModel):
    completeness: int = 100
    last_updated: str
    fiscal_year_end: str
    data_points: int
    historical_depth: HistoricalDepth
    warnings: list[str] = []


class SimpleRating(str, Enum):
    EXCELLENT = "🟢 Excellent"
    GOOD = "🟢 Good"
    FAIR = "🟡 Fair"
    POOR = "🔴 Poor"


class InvestmentSuitability(CamelModel):
    conservative: bool
    growth: bool
    value: bool
    income: bool


class BeginnerSummary(CamelModel):
    one_line_summary: str
    health_description: str
    top_three_strengths: list[str]
    top_three_concerns: list[str]
    simple_rating: SimpleRating
    investment_suitability: InvestmentSuitability


class RecommendationType(str, Enum):
    ACTION = "action"
    MONITOR = "monitor"
    INVESTIGATE = "investigate"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class Recommendation(CamelModel):
    type: RecommendationType
    priority: Priority
    title: str
    description: str
    rationale: str
    timeframe: Optional[str] = None


class AnalysisOptions(CamelModel):
    include_industry_context: bool = True
    include_peer_analysis: bool = False  # accepted but not supported
    synthesize_ttm: bool = False


class FinancialInterpretationReport(CamelModel):
    """Everything derived from one company's statements."""

    symbol: str
    company_name: Optional[str] = None
    timestamp: datetime
    data_quality: DataQuality
    health_score: HealthScore
    red_flags: list[RedFlagWithConfidence]
    green_flags: list[GreenFlagWithConfidence]
    ratios: list[FinancialRatio]
    trends: list[TrendAnalysis]
    beginner_summary: BeginnerSummary
    recommendations: list[Recommendation]


class QuickAnalysis(CamelModel):
    symbol: str
    overall: int
    health_grade: str
    top_concern: Optional[str] = None
    top_strength: Optional[str] = None
