"""Composite financial health score.

Each category starts from its baseline (see
:data:`~statement_interpreter.domain.scoring.CATEGORY_BASELINES`) and is
moved by fixed point deltas for ratio bands, flag presence and trend
direction. Category scores are clamped to [0, 100]; the overall score is
their weighted sum, rounded half-up, and the letter grade is read off the
rounded value.
"""

import logging
from typing import Optional

from statement_interpreter.domain.scoring import (
    CATEGORY_BASELINES,
    CATEGORY_WEIGHTS,
    grade_for_score,
    overall_score,
)
from statement_interpreter.schemas.flags import (
    GreenFlagId,
    GreenFlagWithConfidence,
    RedFlagCategory,
    RedFlagId,
    RedFlagWithConfidence,
    Severity,
    Strength,
)
from statement_interpreter.schemas.health import (
    HealthCategoryName,
    HealthScore,
    HealthScoreCategory,
)
from statement_interpreter.schemas.ratios import FinancialRatio, RatioScore
from statement_interpreter.schemas.trends import (
    MARGIN_METRICS,
    TrendAnalysis,
    TrendDirection,
    TrendMetric,
)
from statement_interpreter.utils.financial_math import clamp

logger = logging.getLogger(__name__)

MAX_HIGHLIGHTS = 3
MAX_INSIGHTS = 5


class _Signals:
    """Lookup view over the four analyzer outputs."""

    def __init__(
        self,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        ratios: list[FinancialRatio],
        trends: list[TrendAnalysis],
    ):
        self.red_flags = red_flags
        self.green_flags = green_flags
        self.ratios = ratios
        self.trends = trends
        self.red_ids = {f.flag.id for f in red_flags}
        self.green_ids = {f.flag.id for f in green_flags}
        self._ratio_values = {r.id: r.value for r in ratios}
        self._trends = {t.metric: t for t in trends}

    def ratio(self, ratio_id: str) -> Optional[float]:
        return self._ratio_values.get(ratio_id)

    def trend(self, metric: TrendMetric) -> Optional[TrendAnalysis]:
        return self._trends.get(metric)

    def direction(self, metric: TrendMetric) -> Optional[TrendDirection]:
        trend = self._trends.get(metric)
        return trend.direction if trend is not None else None


class _Category:
    def __init__(self, name: HealthCategoryName):
        self.name = name
        self.score = float(CATEGORY_BASELINES[name])
        self.factors: list[str] = []

    def adjust(self, delta: float, factor: str) -> None:
        self.score += delta
        self.factors.append(factor)

    def result(self) -> HealthScoreCategory:
        return HealthScoreCategory(
            name=self.name,
            score=clamp(self.score),
            weight=CATEGORY_WEIGHTS[self.name],
            factors=self.factors,
        )


# ── Category scoring ──────────────────────────────────────────────────


def _profitability(s: _Signals) -> _Category:
    cat = _Category(HealthCategoryName.PROFITABILITY)

    net_margin = s.ratio("net_margin")
    if net_margin is not None:
        if net_margin >= 15:
            cat.adjust(15, "Excellent net margins")
        elif net_margin >= 10:
            cat.adjust(10, "Good net margins")
        elif net_margin >= 5:
            cat.adjust(5, "Adequate net margins")
        elif net_margin < 0:
            cat.adjust(-20, "Unprofitable")

    roe = s.ratio("roe")
    if roe is not None:
        if roe >= 20:
            cat.adjust(15, "Superior ROE")
        elif roe >= 15:
            cat.adjust(10, "Strong ROE")
        elif roe >= 10:
            cat.adjust(5, "Decent ROE")
        elif roe < 5:
            cat.adjust(-10, "Poor ROE")

    fcf_margin = s.ratio("fcf_margin")
    if fcf_margin is not None:
        if fcf_margin >= 15:
            cat.adjust(10, "Excellent cash generation")
        elif fcf_margin >= 10:
            cat.adjust(5, "Good cash generation")
        elif fcf_margin < 0:
            cat.adjust(-15, "Negative free cash flow")

    if GreenFlagId.SUPERIOR_CASH_GENERATION in s.green_ids:
        cat.adjust(10, "High-quality earnings")
    if RedFlagId.NEGATIVE_GROSS_MARGIN in s.red_ids:
        cat.adjust(-25, "Negative gross margins")
    if RedFlagId.POOR_EARNINGS_QUALITY in s.red_ids:
        cat.adjust(-10, "Poor earnings quality")

    for metric in MARGIN_METRICS:
        direction = s.direction(metric)
        if direction == TrendDirection.IMPROVING:
            cat.adjust(5, f"{metric.value} improving")
        elif direction == TrendDirection.DETERIORATING:
            cat.adjust(-5, f"{metric.value} declining")
    return cat


def _growth(s: _Signals) -> _Category:
    cat = _Category(HealthCategoryName.GROWTH)
    revenue = s.trend(TrendMetric.REVENUE)
    earnings = s.trend(TrendMetric.NET_INCOME)

    if revenue is not None:
        rate = revenue.cagr
        if rate is not None and rate >= 15:
            cat.adjust(20, "Strong revenue growth")
        elif rate is not None and rate >= 10:
            cat.adjust(15, "Good revenue growth")
        elif rate is not None and rate >= 5:
            cat.adjust(10, "Moderate revenue growth")
        elif revenue.direction == TrendDirection.DETERIORATING:
            cat.adjust(-15, "Declining revenue")

    if earnings is not None:
        rate = earnings.cagr
        if rate is not None and rate >= 15:
            cat.adjust(15, "Strong earnings growth")
        elif rate is not None and rate >= 10:
            cat.adjust(10, "Good earnings growth")
        elif earnings.direction == TrendDirection.DETERIORATING:
            cat.adjust(-10, "Declining earnings")

    fcf_direction = s.direction(TrendMetric.FREE_CASH_FLOW)
    if fcf_direction == TrendDirection.IMPROVING:
        cat.adjust(10, "Growing free cash flow")
    elif fcf_direction == TrendDirection.DETERIORATING:
        cat.adjust(-5, "Declining free cash flow")

    if GreenFlagId.COMPOUND_GROWTH_MACHINE in s.green_ids:
        cat.adjust(15, "Exceptional compound growth")
    if GreenFlagId.OPERATING_LEVERAGE in s.green_ids:
        cat.adjust(10, "Strong operating leverage")

    if (
        revenue is not None
        and earnings is not None
        and revenue.volatility < 20
        and earnings.volatility < 30
    ):
        cat.adjust(5, "Consistent growth")
    return cat


def _financial_stability(s: _Signals) -> _Category:
    cat = _Category(HealthCategoryName.FINANCIAL_STABILITY)

    current_ratio = s.ratio("current_ratio")
    if current_ratio is not None:
        if current_ratio >= 2:
            cat.adjust(10, "Strong liquidity")
        elif current_ratio >= 1.5:
            cat.adjust(5, "Good liquidity")
        elif current_ratio < 1:
            cat.adjust(-20, "Liquidity concerns")

    debt_to_equity = s.ratio("debt_to_equity")
    if debt_to_equity is not None:
        if debt_to_equity <= 0.5:
            cat.adjust(10, "Conservative leverage")
        elif debt_to_equity <= 1:
            cat.adjust(5, "Moderate leverage")
        elif debt_to_equity > 2:
            cat.adjust(-15, "High leverage")

    coverage = s.ratio("interest_coverage")
    if coverage is not None:
        if coverage >= 5:
            cat.adjust(5, "Strong interest coverage")
        elif coverage < 2:
            cat.adjust(-10, "Weak interest coverage")

    if GreenFlagId.FORTRESS_BALANCE_SHEET in s.green_ids:
        cat.adjust(15, "Fortress balance sheet")
    if RedFlagId.INSOLVENCY_RISK in s.red_ids:
        cat.adjust(-40, "Insolvency risk")
    if RedFlagId.LIQUIDITY_CRISIS in s.red_ids:
        cat.adjust(-30, "Liquidity crisis")
    if RedFlagId.CASH_BURN_LEVERAGED in s.red_ids:
        cat.adjust(-25, "Cash burn with high debt")
    if RedFlagId.UNSUSTAINABLE_DEBT_SERVICE in s.red_ids:
        cat.adjust(-20, "Unsustainable debt service")

    leverage_direction = s.direction(TrendMetric.DEBT_TO_EQUITY)
    if leverage_direction == TrendDirection.IMPROVING:
        cat.adjust(5, "Deleveraging")
    elif leverage_direction == TrendDirection.DETERIORATING:
        cat.adjust(-5, "Increasing leverage")
    return cat


def _efficiency(s: _Signals) -> _Category:
    cat = _Category(HealthCategoryName.EFFICIENCY)

    turnover = s.ratio("asset_turnover")
    if turnover is not None:
        if turnover >= 2:
            cat.adjust(15, "Excellent asset efficiency")
        elif turnover >= 1.5:
            cat.adjust(10, "Good asset efficiency")
        elif turnover >= 1:
            cat.adjust(5, "Adequate asset efficiency")
        else:
            cat.adjust(-5, "Poor asset utilization")

    roa = s.ratio("roa")
    if roa is not None:
        if roa >= 10:
            cat.adjust(15, "Excellent ROA")
        elif roa >= 7:
            cat.adjust(10, "Good ROA")
        elif roa >= 5:
            cat.adjust(5, "Fair ROA")
        elif roa < 3:
            cat.adjust(-5, "Poor ROA")

    inventory_turnover = s.ratio("inventory_turnover")
    if inventory_turnover is not None and inventory_turnover >= 6:
        cat.adjust(5, "Efficient inventory management")
    receivables_turnover = s.ratio("receivables_turnover")
    if receivables_turnover is not None and receivables_turnover >= 12:
        cat.adjust(5, "Fast collections")

    if GreenFlagId.CAPITAL_LIGHT_GROWTH in s.green_ids:
        cat.adjust(10, "Capital-light model")
    if s.red_ids & {RedFlagId.RECEIVABLES_QUALITY_ISSUE, RedFlagId.INVENTORY_BUILDUP}:
        cat.adjust(-10, "Working capital issues")
    if RedFlagId.RISING_CAPITAL_INTENSITY in s.red_ids:
        cat.adjust(-10, "Rising capital needs")

    direction = s.direction(TrendMetric.ASSET_TURNOVER)
    if direction == TrendDirection.IMPROVING:
        cat.adjust(5, "Improving efficiency")
    elif direction == TrendDirection.DETERIORATING:
        cat.adjust(-5, "Declining efficiency")
    return cat


def _shareholder_value(s: _Signals) -> _Category:
    cat = _Category(HealthCategoryName.SHAREHOLDER_VALUE)

    if GreenFlagId.AGGRESSIVE_BUYBACKS in s.green_ids:
        cat.adjust(15, "Aggressive buybacks")
    if GreenFlagId.DIVIDEND_GROWTH in s.green_ids:
        cat.adjust(10, "Growing dividends")
    if GreenFlagId.SUSTAINABLE_DIVIDENDS in s.green_ids:
        cat.adjust(10, "Well-covered dividends")
    if RedFlagId.DILUTION_TREADMILL in s.red_ids:
        cat.adjust(-20, "Shareholder dilution")
    if RedFlagId.UNSUSTAINABLE_DIVIDEND in s.red_ids:
        cat.adjust(-15, "Unsustainable dividend")

    shares = s.direction(TrendMetric.SHARES_OUTSTANDING)
    if shares == TrendDirection.IMPROVING:
        cat.adjust(10, "Declining share count")
    elif shares == TrendDirection.DETERIORATING:
        cat.adjust(-10, "Share count increasing")

    dividends = s.trend(TrendMetric.DIVIDENDS_PAID)
    if dividends is not None:
        if dividends.direction == TrendDirection.IMPROVING and (dividends.cagr or 0) > 5:
            cat.adjust(10, "Strong dividend growth")
        elif dividends.direction == TrendDirection.DETERIORATING:
            cat.adjust(-5, "Dividend cuts")

    eps = s.direction(TrendMetric.EPS)
    if eps == TrendDirection.IMPROVING:
        cat.adjust(10, "Growing EPS")
    elif eps == TrendDirection.DETERIORATING:
        cat.adjust(-5, "Declining EPS")

    if GreenFlagId.CONSERVATIVE_ACCOUNTING in s.green_ids:
        cat.adjust(5, "Conservative accounting")
    return cat


CATEGORY_SCORERS = (
    _profitability,
    _growth,
    _financial_stability,
    _efficiency,
    _shareholder_value,
)


# ── Narrative ─────────────────────────────────────────────────────────


def _key_strengths(s: _Signals) -> list[str]:
    strengths = [f.flag.title for f in s.green_flags if f.flag.strength == Strength.EXCEPTIONAL]
    strengths += [
        f"{r.name}: {r.value:.1f}"
        for r in s.ratios
        if r.interpretation.score == RatioScore.EXCELLENT and r.value is not None
    ]
    strengths += [
        f"{t.metric.value} growing {t.cagr:.1f}% annually"
        for t in s.trends
        if t.direction == TrendDirection.IMPROVING and t.cagr is not None and t.cagr > 10
    ]
    return strengths[:MAX_HIGHLIGHTS]


def _key_weaknesses(s: _Signals) -> list[str]:
    weaknesses = [f.flag.title for f in s.red_flags if f.flag.severity == Severity.CRITICAL]
    weaknesses += [f.flag.title for f in s.red_flags if f.flag.severity == Severity.HIGH]
    weaknesses += [
        f"Poor {r.name}: {r.value:.1f}"
        for r in s.ratios
        if r.interpretation.score == RatioScore.POOR and r.value is not None
    ]
    weaknesses += [
        f"{t.metric.value} declining" for t in s.trends if t.direction == TrendDirection.DETERIORATING
    ]
    return weaknesses[:MAX_HIGHLIGHTS]


def _summary(score: int, grade: str, s: _Signals) -> str:
    red = len(s.red_flags)
    green = len(s.green_flags)
    critical = sum(1 for f in s.red_flags if f.flag.severity == Severity.CRITICAL)
    if score >= 80:
        return (
            f"Strong financial health (Grade: {grade}) with {green} positive indicators "
            f"and {red} minor concerns."
        )
    if score >= 65:
        return (
            f"Moderate financial health (Grade: {grade}) with {green} strengths balanced "
            f"by {red} areas of concern."
        )
    if score >= 50:
        suffix = f" including {critical} critical issues" if critical else ""
        return f"Weak financial health (Grade: {grade}) with {red} warning signs{suffix}."
    return (
        f"Poor financial health (Grade: {grade}) with {red} red flags including {critical} "
        "critical problems requiring immediate attention."
    )


def _beginner_interpretation(score: int, grade: str) -> str:
    if score >= 85:
        return (
            f"This is an A-grade company ({grade}) - like a student who excels in all subjects. "
            "Very healthy financially with minimal risks."
        )
    if score >= 75:
        return (
            f"This is a B-grade company ({grade}) - like a good student with mostly strong marks. "
            "Solid investment with some minor areas to watch."
        )
    if score >= 65:
        return (
            f"This is a C-grade company ({grade}) - passing but with clear weaknesses. "
            "Okay for experienced investors who understand the risks."
        )
    if score >= 50:
        return (
            f"This is a D-grade company ({grade}) - barely passing with serious problems. "
            "High risk investment requiring careful monitoring."
        )
    return (
        f"This is a failing company ({grade}) - like a student failing multiple classes. "
        "Very risky investment that could lose significant value."
    )


def _actionable_insights(score: int, s: _Signals) -> list[str]:
    insights: list[str] = []
    if any(f.flag.severity == Severity.CRITICAL for f in s.red_flags):
        insights.append(
            "⚠️ Address critical financial issues immediately - consider avoiding or reducing position"
        )

    if score >= 80:
        insights.append("✅ Strong candidate for long-term investment - consider dollar-cost averaging")
        if GreenFlagId.AGGRESSIVE_BUYBACKS in s.green_ids:
            insights.append("💰 Share buybacks increasing per-share value - good for buy-and-hold")
    elif score >= 65:
        insights.append("📊 Monitor quarterly results for improvement in weak areas")
        if any(f.flag.category == RedFlagCategory.LEVERAGE for f in s.red_flags):
            insights.append("💳 Watch debt levels and refinancing schedule closely")
    else:
        insights.append("🔍 Requires deep analysis before investing - consider safer alternatives")
        if score < 50:
            insights.append("⛔ High risk - only suitable for speculation or turnaround plays")

    if s.direction(TrendMetric.REVENUE) == TrendDirection.DETERIORATING:
        insights.append("📉 Revenue declining - investigate competitive position and market trends")
    if any(s.direction(m) == TrendDirection.DETERIORATING for m in MARGIN_METRICS):
        insights.append("💸 Margins under pressure - monitor pricing power and cost management")
    if GreenFlagId.COMPOUND_GROWTH_MACHINE in s.green_ids:
        insights.append("🚀 Exceptional growth profile - suitable for growth-focused portfolios")
    if GreenFlagId.FORTRESS_BALANCE_SHEET in s.green_ids:
        insights.append("🏰 Rock-solid balance sheet - excellent downside protection")
    return insights[:MAX_INSIGHTS]


class HealthScorer:
    """Fold the analyzer outputs into a single weighted health score."""

    def score(
        self,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        ratios: list[FinancialRatio],
        trends: list[TrendAnalysis],
    ) -> HealthScore:
        signals = _Signals(red_flags, green_flags, ratios, trends)
        categories = [scorer(signals).result() for scorer in CATEGORY_SCORERS]

        overall = overall_score({c.name: c.score for c in categories})
        grade = grade_for_score(overall)
        logger.info(
            "Health score %d (%s): %s",
            overall,
            grade,
            ", ".join(f"{c.name.value}={c.score:.0f}" for c in categories),
        )

        return HealthScore(
            overall=overall,
            grade=grade,
            categories=categories,
            summary=_summary(overall, grade, signals),
            beginner_interpretation=_beginner_interpretation(overall, grade),
            key_strengths=_key_strengths(signals),
            key_weaknesses=_key_weaknesses(signals),
            actionable_insights=_actionable_insights(overall, signals),
        )
