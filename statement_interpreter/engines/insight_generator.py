"""Prioritised recommendations.

Four buckets are evaluated in a fixed order: critical, risk management,
opportunity, monitoring. The combined list is stable-sorted by priority and
truncated to the configured limit.
"""

import logging

from statement_interpreter.schemas.flags import (
    GreenFlagId,
    GreenFlagWithConfidence,
    RedFlagId,
    RedFlagWithConfidence,
)
from statement_interpreter.schemas.health import HealthCategoryName, HealthScore
from statement_interpreter.schemas.report import (
    PRIORITY_ORDER,
    Priority,
    Recommendation,
    RecommendationType,
)
from statement_interpreter.schemas.trends import (
    MARGIN_METRICS,
    TrendAnalysis,
    TrendDirection,
    TrendMetric,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 8


def _rec(
    type_: RecommendationType,
    priority: Priority,
    title: str,
    description: str,
    rationale: str,
    timeframe: str,
) -> Recommendation:
    return Recommendation(
        type=type_,
        priority=priority,
        title=title,
        description=description,
        rationale=rationale,
        timeframe=timeframe,
    )


class _Inputs:
    def __init__(
        self,
        health: HealthScore,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        trends: list[TrendAnalysis],
    ):
        self.health = health
        self.red = {f.flag.id for f in red_flags}
        self.green = {f.flag.id for f in green_flags}
        self.directions = {t.metric: t.direction for t in trends}

    def trend_is(self, metric: TrendMetric, direction: TrendDirection) -> bool:
        return self.directions.get(metric) == direction

    def any_margin(self, direction: TrendDirection) -> bool:
        return any(self.trend_is(m, direction) for m in MARGIN_METRICS)


def _critical(x: _Inputs) -> list[Recommendation]:
    recs = []
    if RedFlagId.INSOLVENCY_RISK in x.red:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.HIGH,
            "Critical: Insolvency Risk",
            "Company has negative equity - liabilities exceed assets.",
            "This indicates severe financial distress and potential bankruptcy risk.",
            "Immediate",
        ))
    if RedFlagId.LIQUIDITY_CRISIS in x.red:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.HIGH,
            "Urgent: Liquidity Crisis",
            "Company cannot meet short-term obligations without external financing.",
            "May need to sell assets or raise emergency funding to avoid default.",
            "Next 3-6 months",
        ))
    if RedFlagId.CASH_BURN_LEVERAGED in x.red:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.HIGH,
            "High Risk: Cash Burn + High Debt",
            "Company is losing money while carrying significant debt.",
            "Limited runway before requiring refinancing or restructuring.",
            "Monitor monthly",
        ))
    if x.health.overall < 50 and not recs:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.HIGH,
            "Poor Financial Health",
            "Multiple red flags indicate significant financial weakness.",
            "High risk of value destruction - consider exiting or avoiding position.",
            "Immediate review",
        ))
    return recs


def _risk_management(x: _Inputs) -> list[Recommendation]:
    recs = []
    if RedFlagId.UNSUSTAINABLE_DEBT_SERVICE in x.red:
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.HIGH,
            "Monitor Debt Refinancing",
            "Track upcoming debt maturities and refinancing options.",
            "Current cash flow insufficient to service debt - refinancing critical.",
            "Quarterly",
        ))
    margin_flags = x.red & {RedFlagId.GROSS_MARGIN_COMPRESSION, RedFlagId.MARGIN_COMPRESSION_TREND}
    if margin_flags or x.any_margin(TrendDirection.DETERIORATING):
        recs.append(_rec(
            RecommendationType.INVESTIGATE, Priority.MEDIUM,
            "Investigate Margin Pressure",
            "Analyze competitive dynamics and cost structure.",
            "Declining margins indicate pricing pressure or rising costs.",
            "Next earnings call",
        ))
    if x.red & {RedFlagId.RECEIVABLES_QUALITY_ISSUE, RedFlagId.INVENTORY_BUILDUP}:
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.MEDIUM,
            "Track Working Capital",
            "Monitor cash conversion cycle and collection periods.",
            "Working capital deterioration can lead to liquidity issues.",
            "Monthly",
        ))
    if RedFlagId.UNSUSTAINABLE_DIVIDEND in x.red:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.MEDIUM,
            "Expect Dividend Cut",
            "Dividend exceeds free cash flow - cut likely.",
            "Company borrowing to pay dividends is unsustainable.",
            "Next 1-2 quarters",
        ))
    if x.trend_is(TrendMetric.REVENUE, TrendDirection.DETERIORATING):
        recs.append(_rec(
            RecommendationType.INVESTIGATE, Priority.MEDIUM,
            "Analyze Revenue Decline",
            "Understand whether decline is cyclical or structural.",
            "Falling revenue often precedes broader financial issues.",
            "Immediate",
        ))
    return recs


def _opportunity(x: _Inputs) -> list[Recommendation]:
    recs = []
    if x.health.overall >= 80:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.MEDIUM,
            "Strong Buy Candidate",
            "Excellent financial health with multiple competitive advantages.",
            "High-quality companies often outperform over long term.",
            "Consider for core holding",
        ))
    if GreenFlagId.COMPOUND_GROWTH_MACHINE in x.green:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.MEDIUM,
            "Growth Investment Opportunity",
            "Revenue, earnings, and cash flow all growing >10% annually.",
            "Compound growth creates significant long-term value.",
            "Long-term hold (3-5 years)",
        ))
    if x.green & {GreenFlagId.CAPITAL_LIGHT_GROWTH, GreenFlagId.SUPERIOR_ROIC}:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.LOW,
            "Efficient Capital Allocator",
            "Company generates high returns with minimal capital needs.",
            "Capital efficiency enables faster growth and higher returns.",
            "Accumulate on dips",
        ))
    if x.green & {GreenFlagId.AGGRESSIVE_BUYBACKS, GreenFlagId.DIVIDEND_GROWTH}:
        recs.append(_rec(
            RecommendationType.ACTION, Priority.LOW,
            "Shareholder-Friendly Management",
            "Consistent capital returns through buybacks and/or dividends.",
            "Direct value creation for shareholders.",
            "Hold for income/appreciation",
        ))
    if x.any_margin(TrendDirection.IMPROVING):
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.LOW,
            "Margin Expansion Story",
            "Profitability improving - operational leverage kicking in.",
            "Margin expansion often leads to multiple expansion.",
            "Track quarterly progress",
        ))
    return recs


def _monitoring(x: _Inputs) -> list[Recommendation]:
    recs = []
    overall = x.health.overall
    if 60 <= overall < 75:
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.MEDIUM,
            "Regular Monitoring Required",
            "Company has both strengths and weaknesses to track.",
            "Mixed signals require ongoing assessment.",
            "Quarterly reviews",
        ))
    if (
        GreenFlagId.SUPERIOR_CASH_GENERATION not in x.green
        and RedFlagId.POOR_EARNINGS_QUALITY not in x.red
    ):
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.LOW,
            "Track Cash Flow Quality",
            "Monitor operating cash flow vs net income ratio.",
            "Cash flow quality indicates earnings sustainability.",
            "Each earnings report",
        ))
    if x.trend_is(TrendMetric.DEBT_TO_EQUITY, TrendDirection.DETERIORATING):
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.MEDIUM,
            "Watch Leverage Levels",
            "Debt increasing - monitor covenant compliance.",
            "Rising leverage reduces financial flexibility.",
            "Quarterly",
        ))
    if x.health.category(HealthCategoryName.GROWTH).score < 60:
        recs.append(_rec(
            RecommendationType.INVESTIGATE, Priority.LOW,
            "Assess Competitive Position",
            "Compare growth rates with industry peers.",
            "Lagging growth may indicate market share loss.",
            "Annual review",
        ))
    if overall >= 75:
        recs.append(_rec(
            RecommendationType.MONITOR, Priority.LOW,
            "Track Valuation Levels",
            "Monitor price relative to intrinsic value.",
            "Even great companies can become overvalued.",
            "Monthly",
        ))
    return recs


BUCKETS = (_critical, _risk_management, _opportunity, _monitoring)


class InsightGenerator:
    """Build the capped, priority-ordered recommendation list."""

    def __init__(self, limit: int = DEFAULT_LIMIT):
        self.limit = limit

    def generate(
        self,
        health: HealthScore,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        trends: list[TrendAnalysis],
    ) -> list[Recommendation]:
        inputs = _Inputs(health, red_flags, green_flags, trends)
        recommendations: list[Recommendation] = []
        for bucket in BUCKETS:
            recommendations.extend(bucket(inputs))

        recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])
        if len(recommendations) > self.limit:
            logger.debug("Dropping %d lower-priority recommendations", len(recommendations) - self.limit)
        return recommendations[: self.limit]
