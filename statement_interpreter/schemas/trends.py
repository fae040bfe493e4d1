"""Multi-year trend schemas."""

from enum import Enum
from typing import Optional

from statement_interpreter.schemas.base import CamelModel


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DETERIORATING = "deteriorating"
    VOLATILE = "volatile"


class TrendMetric(str, Enum):
    REVENUE = "Revenue"
    NET_INCOME = "Net Income"
    EPS = "Earnings Per Share"
    OPERATING_CASH_FLOW = "Operating Cash Flow"
    FREE_CASH_FLOW = "Free Cash Flow"
    GROSS_MARGIN = "Gross Margin %"
    OPERATING_MARGIN = "Operating Margin %"
    NET_MARGIN = "Net Margin %"
    TOTAL_DEBT = "Total Debt"
    DEBT_TO_EQUITY = "Debt-to-Equity Ratio"
    RETURN_ON_EQUITY = "Return on Equity %"
    ASSET_TURNOVER = "Asset Turnover"
    SHARES_OUTSTANDING = "Shares Outstanding"
    DIVIDENDS_PAID = "Dividends Paid"


MARGIN_METRICS = (TrendMetric.GROSS_MARGIN, TrendMetric.OPERATING_MARGIN, TrendMetric.NET_MARGIN)


class TrendPeriod(CamelModel):
    date: str
    value: float
    percentage_change: Optional[float] = None


class TrendAnalysis(CamelModel):
    metric: TrendMetric
    periods: list[TrendPeriod]  # oldest first
    direction: TrendDirection
    cagr: Optional[float] = None  # percent
    cagr_confidence: Optional[str] = None  # "standard" | "low"
    volatility: float = 0.0
    beginner_insight: str
    visual_indicator: str
