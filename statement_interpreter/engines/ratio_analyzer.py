"""Financial ratio computation and interpretation.

Ratios are computed from the TTM income / cash flow statements when
supplied (else the latest annual ones), the latest annual balance sheet,
and the prior annual balance sheet for two-period averages. A ratio whose
inputs are missing, or whose denominator is zero or negative, is skipped.

Bands and display metadata come from
:mod:`statement_interpreter.domain.benchmarks`; this module only does the
arithmetic and writes the plain-language explanation.
"""

import logging
from typing import Callable, Dict, Optional

from statement_interpreter.domain.benchmarks import RATIO_DEFINITIONS
from statement_interpreter.engines.context import (
    DAYS_PER_YEAR,
    StatementContext,
    invested_capital_returns,
)
from statement_interpreter.schemas.ratios import (
    ActualValues,
    FinancialRatio,
    RatioInterpretation,
)
from statement_interpreter.schemas.statements import FinancialStatements
from statement_interpreter.utils.financial_math import period_average

logger = logging.getLogger(__name__)


def _tier(value: float, *steps: tuple[float, str], otherwise: str) -> str:
    """First message whose threshold ``value`` reaches (descending thresholds)."""
    for threshold, message in steps:
        if value >= threshold:
            return message
    return otherwise


def _tier_low(value: float, *steps: tuple[float, str], otherwise: str) -> str:
    """First message whose ceiling ``value`` stays under (ascending ceilings)."""
    for ceiling, message in steps:
        if value <= ceiling:
            return message
    return otherwise


# ── Explanations ──────────────────────────────────────────────────────


def _explain_current_ratio(v: float) -> str:
    return f"Company has ${v:.2f} in current assets for every $1 of short-term debt. " + _tier(
        v,
        (1.5, "Healthy cushion for paying bills."),
        (1, "Can pay bills but limited cushion."),
        otherwise="May struggle to pay short-term obligations.",
    )


def _explain_quick_ratio(v: float) -> str:
    return f"Without selling inventory, company has ${v:.2f} for every $1 of near-term bills. " + _tier(
        v,
        (1, "Can meet obligations without inventory sales."),
        otherwise="Would need to sell inventory to pay all bills.",
    )


def _explain_cash_ratio(v: float) -> str:
    return f"Company can immediately pay {v * 100:.0f}% of short-term debts with cash on hand. " + _tier(
        v, (0.5, "Strong cash position."), otherwise="Limited immediate liquidity."
    )


def _explain_working_capital(v: float) -> str:
    if v >= 0:
        return f"Company has {v:.0f}% extra liquidity beyond immediate needs."
    return "Working capital deficit - needs external funding for operations."


def _explain_gross_margin(v: float) -> str:
    return f"Company keeps ${v:.0f} as gross profit for every $100 in sales. " + _tier(
        v,
        (40, "Strong pricing power or low production costs."),
        (20, "Reasonable profit after direct costs."),
        otherwise="Low profitability - competitive pressure or high costs.",
    )


def _explain_operating_margin(v: float) -> str:
    return f"Company earns ${v:.1f} in operating profit per $100 of sales. " + _tier(
        v,
        (15, "Efficiently run operations."),
        (10, "Decent operational efficiency."),
        (0, "Low operational efficiency."),
        otherwise="Losing money on operations.",
    )


def _explain_net_margin(v: float) -> str:
    return f"Company keeps ${v:.1f} as final profit for every $100 in sales. " + _tier(
        v,
        (10, "Strong bottom-line profitability."),
        (5, "Reasonable final margins."),
        (0, "Thin profit margins."),
        otherwise="Losing money overall.",
    )


def _explain_roe(v: float) -> str:
    return f"Shareholders earn {v:.1f}% annual return on their investment. " + _tier(
        v,
        (20, "Exceptional returns - better than most investments!"),
        (15, "Good returns for shareholders."),
        (10, "Adequate returns."),
        otherwise="Poor returns - consider alternatives.",
    )


def _explain_roa(v: float) -> str:
    return f"Company generates ${v:.1f} profit annually per $100 of assets. " + _tier(
        v,
        (7, "Efficient use of assets."),
        (5, "Adequate asset productivity."),
        otherwise="Poor asset utilization.",
    )


def _explain_roic(v: float) -> str:
    return f"Company generates ${v:.1f} profit annually per $100 of total investor capital. " + _tier(
        v,
        (20, "Exceptional returns - likely has strong competitive advantage."),
        (15, "Great capital efficiency - well-managed business."),
        (10, "Acceptable returns - verify it exceeds cost of capital."),
        otherwise="Poor returns - may be destroying shareholder value.",
    )


def _explain_asset_turnover(v: float) -> str:
    return f"Company generates ${v:.2f} in sales for every $1 of assets. " + _tier(
        v,
        (1.5, "Very efficient asset use."),
        (1, "Reasonable asset efficiency."),
        otherwise="Assets underutilized.",
    )


def _explain_inventory_turnover(v: float) -> str:
    if v <= 0:
        return "No inventory was sold during the period - stock is sitting idle."
    days = DAYS_PER_YEAR / v
    return f"Inventory sells {v:.1f} times per year (every {days:.0f} days). " + _tier(
        v,
        (8, "Fast-moving inventory - fresh products."),
        (4, "Good inventory management."),
        otherwise="Slow inventory - risk of obsolescence.",
    )


def _explain_days_inventory(v: float) -> str:
    return f"Products sit in inventory for about {v:.0f} days before selling. " + _tier_low(
        v,
        (30, "Inventory moves very quickly."),
        (61, "Healthy inventory cycle."),
        (91, "Inventory is slow to move."),
        otherwise="Inventory piling up - risk of write-downs.",
    )


def _explain_collection(days: float) -> str:
    return f"Customers pay within {days:.0f} days on average. " + _tier_low(
        days,
        (30, "Excellent collection - strong customer relationships."),
        (45, "Good payment collection."),
        (60, "Acceptable collection period."),
        otherwise="Slow collections - cash flow impact.",
    )


def _explain_receivables_turnover(v: float) -> str:
    return _explain_collection(DAYS_PER_YEAR / v)


def _explain_debt_to_equity(v: float) -> str:
    return f"Company has ${v:.2f} of debt for every $1 of equity. " + _tier_low(
        v,
        (0.5, "Conservative financing - low risk."),
        (1, "Balanced debt levels."),
        (2, "Significant leverage - monitor closely."),
        otherwise="High financial risk.",
    )


def _explain_debt_to_assets(v: float) -> str:
    return f"{v * 100:.0f}% of assets are financed by debt. " + _tier_low(
        v,
        (0.3, "Most assets owned outright - very safe."),
        (0.5, "Reasonable debt financing."),
        otherwise="High debt dependency.",
    )


def _explain_interest_coverage(v: float) -> str:
    return f"Company earns {v:.1f}x its interest payments. " + _tier(
        v,
        (3, "Comfortable interest coverage."),
        (2, "Adequate coverage but limited cushion."),
        (1, "Barely covering interest - risky."),
        otherwise="Cannot cover interest from operations.",
    )


def _explain_equity_multiplier(v: float) -> str:
    return f"Company controls ${v:.2f} of assets per $1 of equity. " + _tier_low(
        v,
        (2, "Conservative leverage."),
        (3, "Moderate leverage use."),
        otherwise="High leverage - amplifies both gains and losses.",
    )


def _explain_ocf_ratio(v: float) -> str:
    return f"Operating cash covers {v * 100:.0f}% of short-term debts. " + _tier(
        v,
        (1, "Can pay all short-term debts from operations."),
        (0.5, "Good cash generation vs obligations."),
        otherwise="Limited cash coverage.",
    )


def _explain_fcf_margin(v: float) -> str:
    return f"Company converts {v:.1f}% of sales into free cash. " + _tier(
        v,
        (15, "Exceptional cash generation!"),
        (10, "Strong free cash flow."),
        (5, "Decent cash generation."),
        (0, "Limited free cash."),
        otherwise="Burning cash.",
    )


def _explain_cash_flow_quality(v: float) -> str:
    return f"Cash flow is {v:.2f}x reported profits. " + _tier(
        v,
        (1.2, "High-quality earnings backed by cash."),
        (1, "Earnings converting well to cash."),
        (0.8, "Some earnings not yet collected."),
        otherwise="Earnings quality concern - profits not becoming cash.",
    )


EXPLANATIONS: Dict[str, Callable[[float], str]] = {
    "current_ratio": _explain_current_ratio,
    "quick_ratio": _explain_quick_ratio,
    "cash_ratio": _explain_cash_ratio,
    "working_capital_ratio": _explain_working_capital,
    "gross_margin": _explain_gross_margin,
    "operating_margin": _explain_operating_margin,
    "net_margin": _explain_net_margin,
    "roe": _explain_roe,
    "roa": _explain_roa,
    "roic": _explain_roic,
    "asset_turnover": _explain_asset_turnover,
    "inventory_turnover": _explain_inventory_turnover,
    "days_inventory_outstanding": _explain_days_inventory,
    "receivables_turnover": _explain_receivables_turnover,
    "days_sales_outstanding": _explain_collection,
    "debt_to_equity": _explain_debt_to_equity,
    "debt_to_assets": _explain_debt_to_assets,
    "interest_coverage": _explain_interest_coverage,
    "equity_multiplier": _explain_equity_multiplier,
    "operating_cash_flow_ratio": _explain_ocf_ratio,
    "fcf_margin": _explain_fcf_margin,
    "cash_flow_to_net_income": _explain_cash_flow_quality,
}

_missing = set(RATIO_DEFINITIONS) ^ set(EXPLANATIONS)
if _missing:
    raise ValueError(f"Ratio explanations out of sync with definitions: {sorted(_missing)}")


class _RatioList:
    """Per-call collector that turns a raw value into a FinancialRatio."""

    def __init__(self, include_industry_context: bool):
        self.include_industry_context = include_industry_context
        self.items: list[FinancialRatio] = []

    def add(
        self,
        ratio_id: str,
        value: float,
        actual: Optional[tuple[float, float]] = None,
    ) -> None:
        definition = RATIO_DEFINITIONS[ratio_id]
        interpretation = RatioInterpretation(
            score=definition.benchmark.band(value),
            beginner_explanation=EXPLANATIONS[ratio_id](value),
            benchmark=definition.benchmark.table(),
            industry_context=definition.industry_context if self.include_industry_context else None,
        )
        self.items.append(
            FinancialRatio(
                id=definition.id,
                name=definition.name,
                category=definition.category,
                value=value,
                formula=definition.formula,
                formula_description=definition.formula_description,
                interpretation=interpretation,
                actual_values=(
                    ActualValues(numerator=actual[0], denominator=actual[1]) if actual else None
                ),
            )
        )


class RatioAnalyzer:
    """Compute every ratio the statements support, grouped by category."""

    def __init__(self, default_tax_rate: float = 0.21):
        self.default_tax_rate = default_tax_rate

    def analyze(
        self,
        statements: FinancialStatements,
        include_industry_context: bool = True,
    ) -> list[FinancialRatio]:
        ctx = StatementContext(statements)
        ratios = _RatioList(include_industry_context)
        if ctx.balance(0) is None:
            logger.debug("%s: no annual balance sheet, ratios skipped", statements.symbol)
            return ratios.items

        self._liquidity(ctx, ratios)
        self._profitability(ctx, ratios)
        self._efficiency(ctx, ratios)
        self._leverage(ctx, ratios)
        self._cash_flow(ctx, ratios)

        logger.info("%s: %d ratios computed", statements.symbol, len(ratios.items))
        return ratios.items

    # ── categories ───────────────────────────────────────────────────

    def _liquidity(self, ctx: StatementContext, ratios: _RatioList) -> None:
        b = ctx.balance(0)
        liabilities = b.current_liabilities
        if liabilities is None or liabilities <= 0:
            return

        if b.current_assets is not None:
            ratios.add("current_ratio", b.current_assets / liabilities)
        if b.current_assets is not None and b.inventory is not None:
            ratios.add("quick_ratio", (b.current_assets - b.inventory) / liabilities)
        if b.cash_and_cash_equivalents is not None:
            ratios.add("cash_ratio", b.cash_and_cash_equivalents / liabilities)
        if b.current_assets is not None:
            working_capital = b.current_assets - liabilities
            ratios.add("working_capital_ratio", working_capital / liabilities * 100)

    def _profitability(self, ctx: StatementContext, ratios: _RatioList) -> None:
        income, b, prev = ctx.recent_income, ctx.balance(0), ctx.balance(1)
        if income is None:
            return

        revenue = income.revenue
        if revenue is not None and revenue > 0:
            if income.gross_profit is not None:
                ratios.add(
                    "gross_margin", income.gross_profit / revenue * 100,
                    (income.gross_profit, revenue),
                )
            if income.operating_income is not None:
                ratios.add("operating_margin", income.operating_income / revenue * 100)
            if income.net_income is not None:
                ratios.add("net_margin", income.net_income / revenue * 100)

        if income.net_income is not None and b.total_shareholder_equity is not None:
            avg_equity = period_average(
                b.total_shareholder_equity,
                prev.total_shareholder_equity if prev is not None else None,
            )
            if avg_equity > 0:
                ratios.add("roe", income.net_income / avg_equity * 100)

        if income.net_income is not None and b.total_assets is not None:
            avg_assets = period_average(
                b.total_assets, prev.total_assets if prev is not None else None
            )
            if avg_assets > 0:
                ratios.add("roa", income.net_income / avg_assets * 100)

        returns = invested_capital_returns(income, b, self.default_tax_rate)
        if returns is not None:
            nopat, invested = returns
            ratios.add("roic", nopat / invested * 100, (nopat, invested))

    def _efficiency(self, ctx: StatementContext, ratios: _RatioList) -> None:
        income, b, prev = ctx.recent_income, ctx.balance(0), ctx.balance(1)
        if income is None:
            return

        if income.revenue is not None and b.total_assets is not None:
            avg_assets = period_average(
                b.total_assets, prev.total_assets if prev is not None else None
            )
            if avg_assets > 0:
                ratios.add("asset_turnover", income.revenue / avg_assets)

        if income.cost_of_revenue is not None and b.inventory is not None and b.inventory > 0:
            avg_inventory = period_average(
                b.inventory, prev.inventory if prev is not None else None
            )
            if avg_inventory > 0:
                turnover = abs(income.cost_of_revenue) / avg_inventory
                ratios.add("inventory_turnover", turnover)
                if turnover > 0:
                    ratios.add("days_inventory_outstanding", DAYS_PER_YEAR / turnover)

        if (
            income.revenue is not None
            and income.revenue > 0
            and b.net_receivables is not None
            and b.net_receivables > 0
        ):
            avg_receivables = period_average(
                b.net_receivables, prev.net_receivables if prev is not None else None
            )
            if avg_receivables > 0:
                turnover = income.revenue / avg_receivables
                ratios.add("receivables_turnover", turnover)
                ratios.add("days_sales_outstanding", DAYS_PER_YEAR / turnover)

    def _leverage(self, ctx: StatementContext, ratios: _RatioList) -> None:
        income, b = ctx.recent_income, ctx.balance(0)
        debt = b.total_debt
        equity = b.total_shareholder_equity

        if debt is not None and equity is not None and equity > 0:
            ratios.add("debt_to_equity", debt / equity)
        if debt is not None and b.total_assets is not None and b.total_assets > 0:
            ratios.add("debt_to_assets", debt / b.total_assets)
        if (
            income is not None
            and income.operating_income is not None
            and income.interest_expense is not None
            and income.interest_expense > 0
        ):
            ratios.add("interest_coverage", income.operating_income / income.interest_expense)
        if b.total_assets is not None and equity is not None and equity > 0:
            ratios.add("equity_multiplier", b.total_assets / equity)

    def _cash_flow(self, ctx: StatementContext, ratios: _RatioList) -> None:
        income, cash_flow, b = ctx.recent_income, ctx.recent_cash_flow, ctx.balance(0)
        if cash_flow is None:
            return
        ocf = cash_flow.operating_cash_flow

        if ocf is not None and b.current_liabilities is not None and b.current_liabilities > 0:
            ratios.add("operating_cash_flow_ratio", ocf / b.current_liabilities)

        if income is None:
            return
        fcf = cash_flow.fcf
        if fcf is not None and income.revenue is not None and income.revenue > 0:
            ratios.add("fcf_margin", fcf / income.revenue * 100)
        if ocf is not None and income.net_income is not None and income.net_income != 0:
            ratios.add(
                "cash_flow_to_net_income", ocf / income.net_income,
                (ocf, income.net_income),
            )
