"""Plain-English summary of an analysis.

Phrase tables for flags are keyed by the flag id enums and must cover every
id; a missing entry fails at import time. Ratio and trend phrases fall back
to a generic sentence built from the display name.
"""

from statement_interpreter.domain.scoring import simple_rating
from statement_interpreter.schemas.flags import (
    GreenFlagId,
    GreenFlagWithConfidence,
    RedFlagId,
    RedFlagWithConfidence,
    Severity,
    Strength,
)
from statement_interpreter.schemas.health import HealthCategoryName, HealthScore
from statement_interpreter.schemas.ratios import FinancialRatio, RatioScore
from statement_interpreter.schemas.report import BeginnerSummary, InvestmentSuitability
from statement_interpreter.schemas.trends import (
    MARGIN_METRICS,
    TrendAnalysis,
    TrendDirection,
    TrendMetric,
)

MAX_HIGHLIGHTS = 3
NO_CONCERNS = "No major financial concerns identified"

GREEN_FLAG_PHRASES: dict[GreenFlagId, str] = {
    GreenFlagId.SUPERIOR_CASH_GENERATION: "Turns profits into real cash very efficiently",
    GreenFlagId.HIGH_FCF_MARGIN: "Keeps a large share of sales as free cash",
    GreenFlagId.COMPOUND_GROWTH_MACHINE: "Growing rapidly year after year like a snowball",
    GreenFlagId.CAPITAL_LIGHT_GROWTH: "Grows without needing heavy investment",
    GreenFlagId.FORTRESS_BALANCE_SHEET: "Has more cash than debt - very safe",
    GreenFlagId.CONSERVATIVE_LEVERAGE: "Uses very little debt",
    GreenFlagId.STRONG_PRICING_POWER: "Can raise prices without losing customers",
    GreenFlagId.EXPANDING_MARGINS: "Keeping more profit from every sale",
    GreenFlagId.AGGRESSIVE_BUYBACKS: "Buying back shares to increase value",
    GreenFlagId.SIGNIFICANT_BUYBACKS: "Returning large amounts of cash through buybacks",
    GreenFlagId.SUSTAINABLE_DIVIDENDS: "Pays dividends it can easily afford",
    GreenFlagId.DIVIDEND_GROWTH: "Increases dividend payments every year",
    GreenFlagId.OPERATING_LEVERAGE: "Profits growing faster than sales",
    GreenFlagId.EXCEPTIONAL_ROE: "Generates exceptional returns for shareholders",
    GreenFlagId.HIGH_ROA: "Squeezes strong profits out of its assets",
    GreenFlagId.SUPERIOR_ROIC: "Makes excellent use of invested money",
    GreenFlagId.CONSERVATIVE_ACCOUNTING: "Reports honest, reliable numbers",
}

RED_FLAG_PHRASES: dict[RedFlagId, str] = {
    RedFlagId.INSOLVENCY_RISK: "Owes more than it owns - bankruptcy risk",
    RedFlagId.LIQUIDITY_CRISIS: "Can't pay bills coming due soon",
    RedFlagId.LIQUIDITY_WARNING: "Thin cushion for paying upcoming bills",
    RedFlagId.CASH_BURN_LEVERAGED: "Losing money while deep in debt",
    RedFlagId.UNSUSTAINABLE_DEBT_SERVICE: "Struggling to pay debt obligations",
    RedFlagId.WEAK_INTEREST_COVERAGE: "Profits barely cover interest payments",
    RedFlagId.NEGATIVE_GROSS_MARGIN: "Can't sell products for profit",
    RedFlagId.GROSS_MARGIN_COMPRESSION: "Profit margins shrinking rapidly",
    RedFlagId.RECEIVABLES_QUALITY_ISSUE: "Customers not paying on time",
    RedFlagId.INVENTORY_BUILDUP: "Products not selling, piling up",
    RedFlagId.POOR_EARNINGS_QUALITY: "Profits not backed by real cash",
    RedFlagId.HIGH_ACCRUALS: "Reported profits far from actual cash",
    RedFlagId.DILUTION_TREADMILL: "Issuing shares, diluting ownership",
    RedFlagId.MARGIN_COMPRESSION_TREND: "Becoming less profitable over time",
    RedFlagId.UNSUSTAINABLE_DIVIDEND: "Paying dividends it cannot afford",
    RedFlagId.RISING_CAPITAL_INTENSITY: "Needs more spending to maintain business",
}

for _table, _ids in ((GREEN_FLAG_PHRASES, GreenFlagId), (RED_FLAG_PHRASES, RedFlagId)):
    _missing = set(_ids) - set(_table)
    if _missing:
        raise ValueError(f"Missing plain-English phrases for {sorted(m.value for m in _missing)}")

EXCELLENT_RATIO_PHRASES: dict[str, str] = {
    "current_ratio": "Strong liquidity with {value}x coverage of short-term bills",
    "roe": "Excellent {value}% return for shareholders",
    "roa": "Very efficient with {value}% return on assets",
    "net_margin": "Keeps {value}% of revenue as profit - very profitable",
    "fcf_margin": "Converts {value}% of sales to free cash - exceptional",
    "debt_to_equity": "Very low debt at {value}x equity - conservative",
    "interest_coverage": "Earns {value}x interest payments - very safe",
}

POOR_RATIO_PHRASES: dict[str, str] = {
    "current_ratio": "Weak liquidity - only {value}x coverage of bills",
    "roe": "Poor {value}% return for shareholders",
    "roa": "Inefficient with only {value}% return on assets",
    "net_margin": "Only {value}% profit margin - very thin",
    "fcf_margin": "Poor cash conversion at {value}%",
    "debt_to_equity": "High debt at {value}x equity - risky",
    "interest_coverage": "Only {value}x interest coverage - dangerous",
}

IMPROVING_TREND_PHRASES: dict[TrendMetric, str] = {
    TrendMetric.REVENUE: "Sales growing {growth}% per year",
    TrendMetric.NET_INCOME: "Profits growing {growth}% annually",
    TrendMetric.FREE_CASH_FLOW: "Cash generation improving {growth}% yearly",
    TrendMetric.GROSS_MARGIN: "Profit margins expanding",
    TrendMetric.OPERATING_MARGIN: "Operating efficiency improving",
    TrendMetric.RETURN_ON_EQUITY: "Shareholder returns increasing",
}

CATEGORY_DESCRIPTIONS: dict[HealthCategoryName, str] = {
    HealthCategoryName.PROFITABILITY: "Profit generation",
    HealthCategoryName.GROWTH: "Business growth",
    HealthCategoryName.FINANCIAL_STABILITY: "Financial safety",
    HealthCategoryName.EFFICIENCY: "Operational efficiency",
    HealthCategoryName.SHAREHOLDER_VALUE: "Shareholder returns",
}


def one_line_summary(overall: int, grade: str) -> str:
    if overall >= 90:
        return f"Exceptional company ({grade}) - Like finding a star athlete in peak condition."
    if overall >= 80:
        return f"Very healthy company ({grade}) - Like a well-maintained car that runs smoothly."
    if overall >= 70:
        return f"Good company with minor issues ({grade}) - Like a solid house that needs some repairs."
    if overall >= 60:
        return (
            f"Average company with notable weaknesses ({grade}) - "
            "Like a car that runs but needs work."
        )
    if overall >= 50:
        return f"Struggling company ({grade}) - Like a business barely staying afloat."
    return f"Company in serious trouble ({grade}) - Like a sinking ship that needs rescue."


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _ratio_phrase(ratio: FinancialRatio, table: dict[str, str], fallback: str) -> str:
    value = f"{ratio.value:.1f}"
    template = table.get(ratio.id)
    if template is None:
        return fallback.format(name=ratio.name, value=value)
    return template.format(value=value)


def _improving_trend_phrase(trend: TrendAnalysis) -> str:
    growth = f"{trend.cagr:.1f}" if trend.cagr is not None else "N/A"
    template = IMPROVING_TREND_PHRASES.get(trend.metric)
    if template is None:
        return f"{trend.metric.value} improving strongly"
    return template.format(growth=growth)


class BeginnerTranslator:
    """Turn a scored analysis into a summary a first-time investor can read."""

    def translate(
        self,
        health: HealthScore,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        ratios: list[FinancialRatio],
        trends: list[TrendAnalysis],
    ) -> BeginnerSummary:
        return BeginnerSummary(
            one_line_summary=one_line_summary(health.overall, health.grade),
            health_description=self.health_description(health, red_flags, green_flags),
            top_three_strengths=self.top_strengths(green_flags, ratios, trends),
            top_three_concerns=self.top_concerns(red_flags, ratios, trends),
            simple_rating=simple_rating(health.overall),
            investment_suitability=self.suitability(health, red_flags, green_flags, trends),
        )

    def health_description(
        self,
        health: HealthScore,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
    ) -> str:
        if health.overall >= 80:
            parts = ["This company is financially strong and well-managed."]
        elif health.overall >= 65:
            parts = ["This company has solid fundamentals but some areas need attention."]
        elif health.overall >= 50:
            parts = ["This company faces significant challenges that create investment risk."]
        else:
            parts = ["This company is in poor financial health with serious problems."]

        critical = sum(1 for f in red_flags if f.flag.severity == Severity.CRITICAL)
        if critical:
            verb = "is" if critical == 1 else "are"
            parts.append(
                f"There {verb} {_plural(critical, 'critical issue')} requiring immediate attention."
            )

        exceptional = sum(1 for f in green_flags if f.flag.strength == Strength.EXCEPTIONAL)
        if exceptional:
            parts.append(
                f"The company excels in {_plural(exceptional, 'key area')}, "
                "showing competitive advantages."
            )

        # Ties resolve to the later category.
        weighted = list(reversed(health.categories))
        best = max(weighted, key=lambda c: c.score * c.weight)
        worst = min(weighted, key=lambda c: c.score * c.weight)
        if best.score >= 80:
            parts.append(f"{CATEGORY_DESCRIPTIONS[best.name]} is particularly strong.")
        if worst.score < 50:
            parts.append(f"{CATEGORY_DESCRIPTIONS[worst.name]} needs significant improvement.")

        return " ".join(parts)

    def top_strengths(
        self,
        green_flags: list[GreenFlagWithConfidence],
        ratios: list[FinancialRatio],
        trends: list[TrendAnalysis],
    ) -> list[str]:
        strengths = [
            GREEN_FLAG_PHRASES[f.flag.id]
            for f in green_flags
            if f.flag.strength == Strength.EXCEPTIONAL
        ]
        strengths += [
            _ratio_phrase(r, EXCELLENT_RATIO_PHRASES, "Strong {name}: {value}")
            for r in ratios
            if r.interpretation.score == RatioScore.EXCELLENT and r.value is not None
        ]
        strengths += [
            _improving_trend_phrase(t)
            for t in trends
            if t.direction == TrendDirection.IMPROVING and t.cagr is not None and t.cagr > 10
        ]
        return strengths[:MAX_HIGHLIGHTS]

    def top_concerns(
        self,
        red_flags: list[RedFlagWithConfidence],
        ratios: list[FinancialRatio],
        trends: list[TrendAnalysis],
    ) -> list[str]:
        concerns = [
            RED_FLAG_PHRASES[f.flag.id] for f in red_flags if f.flag.severity == Severity.CRITICAL
        ]
        concerns += [
            RED_FLAG_PHRASES[f.flag.id] for f in red_flags if f.flag.severity == Severity.HIGH
        ]
        concerns += [
            _ratio_phrase(r, POOR_RATIO_PHRASES, "Weak {name}: {value}")
            for r in ratios
            if r.interpretation.score == RatioScore.POOR and r.value is not None
        ]
        concerns += [
            f"{t.metric.value} heading the wrong way"
            for t in trends
            if t.direction == TrendDirection.DETERIORATING
        ]
        return concerns[:MAX_HIGHLIGHTS] or [NO_CONCERNS]

    def suitability(
        self,
        health: HealthScore,
        red_flags: list[RedFlagWithConfidence],
        green_flags: list[GreenFlagWithConfidence],
        trends: list[TrendAnalysis],
    ) -> InvestmentSuitability:
        green = {f.flag.id for f in green_flags}
        red = {f.flag.id for f in red_flags}
        has_critical = any(f.flag.severity == Severity.CRITICAL for f in red_flags)
        overall = health.overall

        steady_margins = any(
            t.metric in MARGIN_METRICS
            and t.direction in (TrendDirection.STABLE, TrendDirection.IMPROVING)
            for t in trends
        )
        conservative = (
            overall >= 70
            and not has_critical
            and (
                GreenFlagId.FORTRESS_BALANCE_SHEET in green
                or GreenFlagId.SUSTAINABLE_DIVIDENDS in green
                or steady_margins
            )
        )

        growth_trend = any(
            t.metric in (TrendMetric.REVENUE, TrendMetric.NET_INCOME)
            and t.direction == TrendDirection.IMPROVING
            and t.cagr is not None
            and t.cagr > 10
            for t in trends
        )
        growth = overall >= 65 and (
            bool(green & {GreenFlagId.COMPOUND_GROWTH_MACHINE, GreenFlagId.OPERATING_LEVERAGE})
            or growth_trend
        )

        value = (
            overall >= 60
            and not has_critical
            and bool(
                green
                & {
                    GreenFlagId.EXCEPTIONAL_ROE,
                    GreenFlagId.SUPERIOR_ROIC,
                    GreenFlagId.SUPERIOR_CASH_GENERATION,
                    GreenFlagId.HIGH_FCF_MARGIN,
                }
            )
        )

        dividend_trend = any(
            t.metric == TrendMetric.DIVIDENDS_PAID and t.direction == TrendDirection.IMPROVING
            for t in trends
        )
        income = (
            overall >= 65
            and (
                bool(green & {GreenFlagId.DIVIDEND_GROWTH, GreenFlagId.SUSTAINABLE_DIVIDENDS})
                or dividend_trend
            )
            and RedFlagId.UNSUSTAINABLE_DIVIDEND not in red
        )

        return InvestmentSuitability(
            conservative=conservative, growth=growth, value=value, income=income
        )
