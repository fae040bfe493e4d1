"""Multi-year trend classification.

Each tracked metric becomes an oldest-first series built from the annual
statements. A series yields a :class:`TrendAnalysis` with year-over-year
changes, CAGR, volatility, a direction and a one-sentence insight.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from statement_interpreter.schemas.statements import FinancialStatements, StatementPeriod
from statement_interpreter.schemas.trends import (
    TrendAnalysis,
    TrendDirection,
    TrendMetric,
    TrendPeriod,
)
from statement_interpreter.utils.financial_math import cagr, growth_rate, population_stdev

logger = logging.getLogger(__name__)

VOLATILITY_LIMIT = 50.0
CONSISTENCY_SHARE = 0.7
STEP_CHANGE = 5.0
OVERALL_CHANGE = 10.0
RELIABLE_CAGR_PERIODS = 5
MIN_CAGR_PERIODS = 3

# A rising value is bad news for these, so the direction is mirrored.
LOWER_IS_BETTER = frozenset(
    {TrendMetric.TOTAL_DEBT, TrendMetric.DEBT_TO_EQUITY, TrendMetric.SHARES_OUTSTANDING}
)

VISUAL_INDICATORS = {
    TrendDirection.IMPROVING: "📈",
    TrendDirection.STABLE: "📊",
    TrendDirection.DETERIORATING: "📉",
    TrendDirection.VOLATILE: "🎢",
}

_MIRRORED = {
    TrendDirection.IMPROVING: TrendDirection.DETERIORATING,
    TrendDirection.DETERIORATING: TrendDirection.IMPROVING,
}


@dataclass(frozen=True)
class _Stats:
    """Classification inputs handed to the insight writers."""

    direction: TrendDirection
    cagr: Optional[float]
    latest_value: float
    latest_change: Optional[float]


def _label(period: StatementPeriod) -> str:
    if period.date:
        return period.date
    return str(period.fiscal_year) if period.fiscal_year is not None else ""


def classify(values: list[float], changes: list[float], volatility: float) -> TrendDirection:
    """Direction of an oldest-first series, before any lower-is-better mirroring.

    >>> classify([100, 110, 121], [10.0, 10.0], 0.0)
    <TrendDirection.IMPROVING: 'improving'>
    >>> classify([100, 101, 100], [1.0, -0.99], 1.0)
    <TrendDirection.STABLE: 'stable'>
    """
    if volatility > VOLATILITY_LIMIT:
        return TrendDirection.VOLATILE

    if changes:
        rising = sum(1 for c in changes if c > STEP_CHANGE)
        falling = sum(1 for c in changes if c < -STEP_CHANGE)
        if rising >= len(changes) * CONSISTENCY_SHARE:
            return TrendDirection.IMPROVING
        if falling >= len(changes) * CONSISTENCY_SHARE:
            return TrendDirection.DETERIORATING

    overall = growth_rate(values[-1], values[0])
    if overall is None:
        return TrendDirection.STABLE
    if overall > OVERALL_CHANGE:
        return TrendDirection.IMPROVING
    if overall < -OVERALL_CHANGE:
        return TrendDirection.DETERIORATING
    return TrendDirection.STABLE


# ── Insights ──────────────────────────────────────────────────────────


def _revenue_insight(s: _Stats) -> str:
    rate = s.cagr or 0.0
    if s.direction == TrendDirection.IMPROVING:
        return f"Sales growing steadily at {rate:.1f}% per year - business expanding like a growing tree."
    if s.direction == TrendDirection.DETERIORATING:
        return (
            f"Sales declining {abs(rate):.1f}% annually - business shrinking, "
            "needs new growth strategy."
        )
    if s.direction == TrendDirection.VOLATILE:
        return "Sales jumping up and down unpredictably - business lacks stability."
    return (
        f"Sales relatively flat ({s.latest_change or 0.0:.1f}% change) - "
        "mature business or growth stalled."
    )


def _earnings_insight(s: _Stats) -> str:
    rate = s.cagr or 0.0
    if s.direction == TrendDirection.IMPROVING and rate > 15:
        return f"Profits growing {rate:.1f}% annually - excellent wealth creation for shareholders."
    if s.direction == TrendDirection.IMPROVING:
        return f"Profits growing steadily at {rate:.1f}% per year - healthy business performance."
    if s.direction == TrendDirection.DETERIORATING:
        return "Profits declining - company struggling to maintain profitability."
    if s.direction == TrendDirection.VOLATILE:
        return "Profits very inconsistent - hard to predict future earnings."
    return "Profits stable but not growing - consider growth initiatives."


def _three_way(improving: str, deteriorating: str, otherwise: str) -> Callable[[_Stats], str]:
    def insight(s: _Stats) -> str:
        if s.direction == TrendDirection.IMPROVING:
            return improving
        if s.direction == TrendDirection.DETERIORATING:
            return deteriorating
        return otherwise

    return insight


def _margin_insight(kind: str) -> Callable[[_Stats], str]:
    def insight(s: _Stats) -> str:
        if s.direction == TrendDirection.IMPROVING:
            return f"{kind} margins expanding - keeping more profit from each sale."
        if s.direction == TrendDirection.DETERIORATING:
            return f"{kind} margins shrinking - competitive pressure or rising costs eating profits."
        return f"{kind} margins stable at {s.latest_value:.1f}% - consistent profitability."

    return insight


def _debt_ratio_insight(s: _Stats) -> str:
    if s.direction == TrendDirection.IMPROVING and s.latest_value < 1:
        return "Leverage decreasing - becoming more financially conservative and safe."
    if s.direction == TrendDirection.DETERIORATING and s.latest_value > 2:
        return "Leverage increasing dangerously - high financial risk developing."
    if s.direction == TrendDirection.DETERIORATING:
        return "Taking on more debt relative to equity - monitor borrowing levels."
    return f"Debt-to-equity stable at {s.latest_value:.2f}x - consistent capital structure."


def _roe_insight(s: _Stats) -> str:
    if s.direction == TrendDirection.IMPROVING and s.latest_value > 15:
        return (
            f"Return on equity improving to {s.latest_value:.1f}% - management creating more "
            "value for shareholders."
        )
    if s.direction == TrendDirection.DETERIORATING:
        return "Return on equity declining - less profitable use of shareholder money."
    return f"Return on equity stable at {s.latest_value:.1f}% - consistent shareholder returns."


def _dividend_insight(s: _Stats) -> str:
    rate = s.cagr or 0.0
    if s.direction == TrendDirection.IMPROVING and rate > 5:
        return f"Dividends growing {rate:.1f}% annually - increasing income for shareholders."
    if s.direction == TrendDirection.DETERIORATING:
        return "Dividends declining - possible cash flow concerns or strategic shift."
    if s.direction == TrendDirection.VOLATILE:
        return "Dividend payments inconsistent - unpredictable income stream."
    return "Dividends stable - reliable income for shareholders."


INSIGHTS: dict[TrendMetric, Callable[[_Stats], str]] = {
    TrendMetric.REVENUE: _revenue_insight,
    TrendMetric.NET_INCOME: _earnings_insight,
    TrendMetric.EPS: _three_way(
        "Earnings per share growing - each share becoming more valuable over time.",
        "Earnings per share declining - watch for dilution or profit pressure.",
        "Earnings per share stable - consistent value for shareholders.",
    ),
    TrendMetric.OPERATING_CASH_FLOW: _three_way(
        "Cash from operations growing - business generating more real money each year.",
        "Operating cash flow declining - concerning trend for business health.",
        "Operating cash flow stable - consistent cash generation.",
    ),
    TrendMetric.FREE_CASH_FLOW: _three_way(
        "Free cash flow growing - more money available for dividends, buybacks, or growth.",
        "Free cash flow declining - less money for shareholders or investments.",
        "Free cash flow stable - predictable cash available.",
    ),
    TrendMetric.GROSS_MARGIN: _margin_insight("Gross"),
    TrendMetric.OPERATING_MARGIN: _margin_insight("Operating"),
    TrendMetric.NET_MARGIN: _margin_insight("Net"),
    TrendMetric.TOTAL_DEBT: _three_way(
        "Debt decreasing - company paying down obligations and reducing financial risk.",
        "Debt increasing - monitor leverage and ability to service growing obligations.",
        "Debt levels stable - maintaining consistent capital structure.",
    ),
    TrendMetric.DEBT_TO_EQUITY: _debt_ratio_insight,
    TrendMetric.RETURN_ON_EQUITY: _roe_insight,
    TrendMetric.ASSET_TURNOVER: _three_way(
        "Asset efficiency improving - generating more sales from existing assets.",
        "Asset efficiency declining - assets becoming less productive.",
        "Asset utilization stable - consistent operational efficiency.",
    ),
    TrendMetric.SHARES_OUTSTANDING: _three_way(
        "Share count decreasing through buybacks - each remaining share worth more of the company.",
        "Share count increasing - watch for dilution reducing per-share value.",
        "Share count stable - no significant dilution or buybacks.",
    ),
    TrendMetric.DIVIDENDS_PAID: _dividend_insight,
}

if set(INSIGHTS) != set(TrendMetric):
    raise ValueError("Every trend metric needs an insight writer")


class TrendAnalyzer:
    """Build and classify the multi-year series for every tracked metric."""

    def analyze(self, statements: FinancialStatements) -> list[TrendAnalysis]:
        trends: list[TrendAnalysis] = []
        for metric, series in self._series(statements):
            if len(series) < 2:
                logger.debug("%s: %s trend skipped, %d periods", statements.symbol, metric.value, len(series))
                continue
            trends.append(self.evaluate(metric, series))

        logger.info("%s: %d trends analysed", statements.symbol, len(trends))
        return trends

    def evaluate(self, metric: TrendMetric, series: list[tuple[str, float]]) -> TrendAnalysis:
        """Classify one oldest-first ``(date, value)`` series."""
        values = [value for _, value in series]
        periods = [TrendPeriod(date=series[0][0], value=values[0])]
        changes: list[float] = []
        for (date, value), previous in zip(series[1:], values):
            change = growth_rate(value, previous)
            periods.append(TrendPeriod(date=date, value=value, percentage_change=change))
            if change is not None:
                changes.append(change)

        volatility = population_stdev(changes)
        direction = classify(values, changes, volatility)
        if metric in LOWER_IS_BETTER:
            direction = _MIRRORED.get(direction, direction)

        growth = None
        confidence = None
        if len(values) >= MIN_CAGR_PERIODS:
            growth = cagr(values[0], values[-1], len(values) - 1)
            if growth is not None:
                confidence = "standard" if len(values) >= RELIABLE_CAGR_PERIODS else "low"

        stats = _Stats(
            direction=direction,
            cagr=growth,
            latest_value=values[-1],
            latest_change=periods[-1].percentage_change,
        )
        return TrendAnalysis(
            metric=metric,
            periods=periods,
            direction=direction,
            cagr=growth,
            cagr_confidence=confidence,
            volatility=volatility,
            beginner_insight=INSIGHTS[metric](stats),
            visual_indicator=VISUAL_INDICATORS[direction],
        )

    # ── series ───────────────────────────────────────────────────────

    def _series(self, statements: FinancialStatements):
        income = statements.income_statements.annual
        balance = statements.balance_sheets.annual
        cash = statements.cash_flow_statements.annual

        def collect(periods, value_of) -> list[tuple[str, float]]:
            points = []
            for p in periods:
                value = value_of(p)
                if value is not None:
                    points.append((_label(p), value))
            return list(reversed(points))

        def ratio(numerator, denominator, scale=1.0):
            if numerator is None or denominator is None or denominator <= 0:
                return None
            return numerator / denominator * scale

        yield TrendMetric.REVENUE, collect(income, lambda p: p.revenue)
        yield TrendMetric.NET_INCOME, collect(income, lambda p: p.net_income)
        yield TrendMetric.EPS, collect(income, lambda p: p.eps_diluted)
        yield TrendMetric.OPERATING_CASH_FLOW, collect(cash, lambda p: p.operating_cash_flow)
        yield TrendMetric.FREE_CASH_FLOW, collect(cash, lambda p: p.fcf)
        yield TrendMetric.GROSS_MARGIN, collect(income, lambda p: ratio(p.gross_profit, p.revenue, 100))
        yield TrendMetric.OPERATING_MARGIN, collect(income, lambda p: ratio(p.operating_income, p.revenue, 100))
        yield TrendMetric.NET_MARGIN, collect(income, lambda p: ratio(p.net_income, p.revenue, 100))
        yield TrendMetric.TOTAL_DEBT, collect(balance, lambda p: p.total_debt)
        yield TrendMetric.DEBT_TO_EQUITY, collect(
            balance, lambda p: ratio(p.total_debt, p.total_shareholder_equity)
        )

        # Same-index pairing: income year i with balance sheet year i.
        roe = [
            (_label(i), ratio(i.net_income, b.total_shareholder_equity, 100))
            for i, b in zip(income, balance)
        ]
        yield TrendMetric.RETURN_ON_EQUITY, [pt for pt in reversed(roe) if pt[1] is not None]

        turnover = []
        for inc, current, previous in zip(income, balance, balance[1:]):
            if current.total_assets is None or previous.total_assets is None:
                continue
            value = ratio(inc.revenue, (current.total_assets + previous.total_assets) / 2)
            if value is not None:
                turnover.append((_label(inc), value))
        yield TrendMetric.ASSET_TURNOVER, list(reversed(turnover))

        yield TrendMetric.SHARES_OUTSTANDING, collect(
            balance, lambda p: p.shares_outstanding or None
        )
        yield TrendMetric.DIVIDENDS_PAID, collect(
            cash, lambda p: abs(p.dividends_paid) if p.dividends_paid else None
        )
