"""Green flag detection: positive financial signals.

Mirrors the red flag registry: independent rules, folded and ordered by
strength (exceptional first).
"""

import logging
from typing import Optional, Sequence

from statement_interpreter.engines.context import StatementContext, invested_capital_returns
from statement_interpreter.engines.rules import GreenFlagRule
from statement_interpreter.schemas.flags import (
    STRENGTH_ORDER,
    GreenFlag,
    GreenFlagCategory,
    GreenFlagId,
    GreenFlagWithConfidence,
    Strength,
)
from statement_interpreter.schemas.statements import FinancialStatements
from statement_interpreter.utils.financial_math import (
    cagr,
    growth_rate,
    period_average,
    population_stdev,
)
from statement_interpreter.utils.formatting import currency

logger = logging.getLogger(__name__)


def _gross_margins(ctx: StatementContext, count: int) -> Optional[list[float]]:
    """Latest ``count`` gross margins (newest first), or None if any is missing."""
    margins = []
    for i in range(count):
        income = ctx.income(i)
        if income is None or income.revenue is None or income.gross_profit is None:
            return None
        if income.revenue <= 0:
            return None
        margins.append(income.gross_profit / income.revenue * 100)
    return margins


# ── Cash generation & growth ──────────────────────────────────────────


class SuperiorCashGenerationRule(GreenFlagRule):
    flag_id = GreenFlagId.SUPERIOR_CASH_GENERATION
    strength = Strength.EXCEPTIONAL
    category = GreenFlagCategory.PROFITABILITY
    title = "Superior Cash Generation"
    formula = "Operating Cash Flow / Net Income > 1.2"
    data_used = ("Operating Cash Flow", "Net Income")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income, cash_flow = ctx.recent_income, ctx.recent_cash_flow
        if income is None or cash_flow is None:
            return None
        if income.net_income is None or income.net_income <= 0 or cash_flow.operating_cash_flow is None:
            return None

        ratio = cash_flow.operating_cash_flow / income.net_income
        if ratio <= 1.2:
            return None
        return self.flag(
            technical=f"OCF/NI ratio: {ratio:.2f}",
            beginner=(
                f"For every $1 of profit reported, company generates ${ratio:.2f} in actual cash - "
                "sign of high-quality earnings."
            ),
            value=ratio,
            benchmark=1.2,
            insight="Company converts profits to cash very efficiently.",
        )


class HighFcfMarginRule(GreenFlagRule):
    flag_id = GreenFlagId.HIGH_FCF_MARGIN
    strength = Strength.EXCEPTIONAL
    category = GreenFlagCategory.PROFITABILITY
    title = "Exceptional Free Cash Flow Margin"
    formula = "Free Cash Flow / Revenue > 15%"
    data_used = ("Free Cash Flow", "Revenue")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income, cash_flow = ctx.recent_income, ctx.recent_cash_flow
        if income is None or cash_flow is None or income.revenue is None or income.revenue <= 0:
            return None
        fcf = cash_flow.fcf
        if fcf is None:
            return None

        fcf_margin = fcf / income.revenue * 100
        if fcf_margin <= 15:
            return None
        return self.flag(
            technical=f"FCF margin: {fcf_margin:.1f}%",
            beginner=(
                f"Company keeps ${fcf_margin:.0f} as free cash for every $100 in sales - "
                "like having a high-profit ATM machine."
            ),
            value=fcf_margin,
            benchmark=15,
            insight="Plenty of cash for growth, dividends, or buybacks.",
        )


class CompoundGrowthRule(GreenFlagRule):
    """Revenue, earnings and FCF CAGR above 10% across the latest three years."""

    flag_id = GreenFlagId.COMPOUND_GROWTH_MACHINE
    strength = Strength.EXCEPTIONAL
    category = GreenFlagCategory.GROWTH
    title = "Compound Growth Machine"
    formula = "Revenue, Earnings, and FCF all growing > 10% CAGR"
    data_used = ("Revenue", "Net Income", "Free Cash Flow (3-year)")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income_now, income_then = ctx.income(0), ctx.income(2)
        cash_now, cash_then = ctx.cash_flow(0), ctx.cash_flow(2)
        if None in (income_now, income_then, cash_now, cash_then):
            return None

        pairs = (
            (income_then.revenue, income_now.revenue),
            (income_then.net_income, income_now.net_income),
            (cash_then.fcf, cash_now.fcf),
        )
        rates = []
        for start, end in pairs:
            if start is None or end is None:
                return None
            rate = cagr(start, end, 2)
            if rate is None:
                return None
            rates.append(rate)

        revenue_cagr, earnings_cagr, fcf_cagr = rates
        if min(rates) <= 10:
            return None
        return self.flag(
            technical=(
                f"3yr CAGR - Revenue: {revenue_cagr:.1f}%, Earnings: {earnings_cagr:.1f}%, "
                f"FCF: {fcf_cagr:.1f}%"
            ),
            beginner=(
                "Company growing like a snowball rolling downhill - sales, profits, and cash "
                "all growing >10% per year."
            ),
            value=min(rates),
            benchmark=10,
            insight="Consistent growth across all key metrics.",
        )


class CapitalLightGrowthRule(GreenFlagRule):
    flag_id = GreenFlagId.CAPITAL_LIGHT_GROWTH
    strength = Strength.EXCEPTIONAL
    category = GreenFlagCategory.EFFICIENCY
    title = "Capital-Light Growth Model"
    formula = "CapEx / Revenue < 5%"
    data_used = ("Capital Expenditures", "Revenue")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        current, previous, cash_flow = ctx.income(0), ctx.income(1), ctx.cash_flow(0)
        if current is None or previous is None or cash_flow is None:
            return None
        if current.revenue is None or previous.revenue is None or current.revenue <= 0:
            return None
        if not cash_flow.capital_expenditures:
            return None

        intensity = abs(cash_flow.capital_expenditures) / current.revenue * 100
        if intensity >= 5 or current.revenue <= previous.revenue:
            return None
        return self.flag(
            technical=f"CapEx only {intensity:.1f}% of revenue",
            beginner="Company grows without heavy spending - like a software business vs a factory.",
            value=intensity,
            benchmark=5,
            insight="Scalable business model with high returns on investment.",
        )


class OperatingLeverageRule(GreenFlagRule):
    flag_id = GreenFlagId.OPERATING_LEVERAGE
    strength = Strength.STRONG
    category = GreenFlagCategory.EFFICIENCY
    title = "Strong Operating Leverage"
    formula = "Operating Income growth > 1.5x Revenue growth"
    data_used = ("Revenue", "Operating Income (YoY)")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        current, previous = ctx.income(0), ctx.income(1)
        if current is None or previous is None:
            return None
        fields = (current.revenue, previous.revenue, current.operating_income, previous.operating_income)
        if any(v is None for v in fields):
            return None

        revenue_growth = growth_rate(current.revenue, previous.revenue)
        income_growth = growth_rate(current.operating_income, previous.operating_income)
        if revenue_growth is None or income_growth is None:
            return None
        if revenue_growth <= 5 or income_growth <= revenue_growth * 1.5:
            return None

        leverage = income_growth / revenue_growth
        return self.flag(
            technical=f"Operating income grew {leverage:.1f}x faster than revenue",
            beginner=(
                "Profits growing much faster than sales - like a gym that gets more profitable "
                "as it adds members without adding costs."
            ),
            value=leverage,
            benchmark=1.5,
            insight="Business scales beautifully - high incremental margins.",
        )


# ── Balance sheet ─────────────────────────────────────────────────────


class FortressBalanceSheetRule(GreenFlagRule):
    flag_id = GreenFlagId.FORTRESS_BALANCE_SHEET
    strength = Strength.STRONG
    category = GreenFlagCategory.FINANCIAL_HEALTH
    title = "Fortress Balance Sheet"
    formula = "Cash > Total Debt AND Current Ratio > 2"
    data_used = ("Cash & Equivalents", "Total Debt", "Current Assets", "Current Liabilities")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        balance = ctx.balance(0)
        if balance is None:
            return None
        cash, debt = balance.cash_and_cash_equivalents, balance.total_debt
        if cash is None or debt is None or not balance.total_assets:
            return None
        if balance.current_assets is None or not balance.current_liabilities:
            return None

        net_cash = cash - debt
        current_ratio = balance.current_assets / balance.current_liabilities
        if net_cash <= 0 or current_ratio <= 2:
            return None

        net_cash_pct = net_cash / balance.total_assets * 100
        return self.flag(
            technical=f"Net cash: {currency(net_cash)} ({net_cash_pct:.1f}% of assets)",
            beginner=(
                "Company has more cash than debt - could pay off all debts today and still "
                "have money left."
            ),
            value=net_cash_pct,
            benchmark=0,
            insight="Exceptional financial flexibility and safety.",
        )


class ConservativeLeverageRule(GreenFlagRule):
    flag_id = GreenFlagId.CONSERVATIVE_LEVERAGE
    strength = Strength.GOOD
    category = GreenFlagCategory.FINANCIAL_HEALTH
    title = "Conservative Debt Levels"
    formula = "Debt / Equity < 0.3"
    data_used = ("Total Debt", "Shareholder Equity")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        balance = ctx.balance(0)
        if balance is None or balance.total_debt is None:
            return None
        equity = balance.total_shareholder_equity
        if equity is None or equity <= 0:
            return None

        debt_to_equity = balance.total_debt / equity
        if debt_to_equity >= 0.3:
            return None
        return self.flag(
            technical=f"D/E ratio: {debt_to_equity:.2f}",
            beginner="Company uses very little debt - like owning your home with a small mortgage.",
            value=debt_to_equity,
            benchmark=0.3,
            insight="Low financial risk with room to borrow if needed.",
        )


# ── Pricing power ─────────────────────────────────────────────────────


class StrongPricingPowerRule(GreenFlagRule):
    flag_id = GreenFlagId.STRONG_PRICING_POWER
    strength = Strength.STRONG
    category = GreenFlagCategory.PROFITABILITY
    title = "Strong Pricing Power"
    formula = "Gross Margin > 40% with low volatility"
    data_used = ("Gross Profit", "Revenue (3-year trend)")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        margins = _gross_margins(ctx, 3)
        if margins is None:
            return None
        average = sum(margins) / len(margins)
        spread = population_stdev(margins)
        if average <= 40 or spread >= 2:
            return None
        return self.flag(
            technical=f"Stable gross margin: {average:.1f}% (±{spread:.1f}%)",
            beginner="Company maintains high profit margins - can raise prices without losing customers.",
            value=average,
            benchmark=40,
            insight="Sign of competitive advantage or brand strength.",
        )


class ExpandingMarginsRule(GreenFlagRule):
    flag_id = GreenFlagId.EXPANDING_MARGINS
    strength = Strength.GOOD
    category = GreenFlagCategory.PROFITABILITY
    title = "Expanding Profit Margins"
    formula = "Gross margin expansion > 3 percentage points"
    data_used = ("Gross Profit", "Revenue (YoY comparison)")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        margins = _gross_margins(ctx, 3)
        if margins is None:
            return None
        expansion = margins[0] - margins[2]
        if expansion <= 3:
            return None
        return self.flag(
            technical=f"Gross margin expanded {expansion:.1f} percentage points",
            beginner=(
                "Company keeping more profit from each sale - getting more efficient or "
                "raising prices successfully."
            ),
            value=expansion,
            benchmark=3,
            insight="Improving competitive position or operational efficiency.",
        )


# ── Shareholder returns ───────────────────────────────────────────────


class AggressiveBuybacksRule(GreenFlagRule):
    flag_id = GreenFlagId.AGGRESSIVE_BUYBACKS
    strength = Strength.STRONG
    category = GreenFlagCategory.SHAREHOLDER_FRIENDLY
    title = "Aggressive Share Buybacks"
    formula = "Share count declining > 5% over 2 years"
    data_used = ("Shares Outstanding (2-year comparison)",)

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        if not ctx.balance_annual:
            return None
        current = ctx.balance(0)
        past = ctx.balance(min(2, len(ctx.balance_annual) - 1))
        if current.shares_outstanding is None or not past.shares_outstanding:
            return None

        change = growth_rate(current.shares_outstanding, past.shares_outstanding)
        if change is None or change >= -5:
            return None
        return self.flag(
            technical=f"Share count reduced {abs(change):.1f}% over 2 years",
            beginner=(
                "Company buying back shares - making each remaining share more valuable, "
                "like slicing a pizza into fewer pieces."
            ),
            value=abs(change),
            benchmark=5,
            insight="Management confident in business and returning cash to shareholders.",
        )


class SignificantBuybacksRule(GreenFlagRule):
    flag_id = GreenFlagId.SIGNIFICANT_BUYBACKS
    strength = Strength.STRONG
    category = GreenFlagCategory.SHAREHOLDER_FRIENDLY
    title = "Significant Share Buybacks"
    formula = "Annual buybacks > 2% of revenue"
    data_used = ("Stock Repurchased", "Revenue")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        cash_flow, income = ctx.cash_flow(0), ctx.income(0)
        if cash_flow is None or income is None or not cash_flow.stock_repurchased:
            return None
        if income.revenue is None or income.revenue <= 0:
            return None

        amount = abs(cash_flow.stock_repurchased)
        to_revenue = amount / income.revenue * 100
        if to_revenue <= 2:
            return None
        return self.flag(
            technical=f"${amount / 1e9:.1f}B in buybacks ({to_revenue:.1f}% of revenue)",
            beginner=(
                f"Company spent ${amount / 1e9:.0f} billion buying back shares - "
                "returning massive cash to shareholders."
            ),
            value=to_revenue,
            benchmark=2,
            insight="Major capital return program benefiting shareholders.",
            strength=Strength.EXCEPTIONAL if to_revenue > 5 else Strength.STRONG,
        )


class SustainableDividendsRule(GreenFlagRule):
    flag_id = GreenFlagId.SUSTAINABLE_DIVIDENDS
    strength = Strength.GOOD
    category = GreenFlagCategory.SHAREHOLDER_FRIENDLY
    title = "Well-Covered Dividends"
    formula = "Dividends < 50% of Free Cash Flow"
    data_used = ("Dividends Paid", "Free Cash Flow")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        cash_flow = ctx.cash_flow(0)
        if cash_flow is None or not cash_flow.dividends_paid:
            return None
        fcf = cash_flow.fcf
        if fcf is None or fcf <= 0:
            return None

        payout = abs(cash_flow.dividends_paid) / fcf * 100
        if payout >= 50:
            return None
        return self.flag(
            technical=f"Payout ratio: {payout:.0f}% of FCF",
            beginner="Company pays dividends comfortably from cash flow - plenty left for growth.",
            value=payout,
            benchmark=50,
            insight="Dividend is safe with room for growth.",
        )


class DividendGrowthRule(GreenFlagRule):
    flag_id = GreenFlagId.DIVIDEND_GROWTH
    strength = Strength.GOOD
    category = GreenFlagCategory.SHAREHOLDER_FRIENDLY
    title = "Consistent Dividend Growth"
    formula = "Dividends growing consistently"
    data_used = ("Dividends Paid (3-year trend)",)

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        dividends = []
        for i in range(3):
            cash_flow = ctx.cash_flow(i)
            if cash_flow is None or not cash_flow.dividends_paid:
                return None
            dividends.append(abs(cash_flow.dividends_paid))

        if not dividends[0] > dividends[1] > dividends[2]:
            return None
        rate = cagr(dividends[2], dividends[0], 2)
        return self.flag(
            technical=f"Dividend CAGR: {rate:.1f}%",
            beginner=(
                "Company increases dividends every year - like getting a raise on your "
                "investment income."
            ),
            value=rate,
            benchmark=0,
            insight="Management confident in sustainable cash generation.",
        )


# ── Returns on capital ────────────────────────────────────────────────


class ExceptionalRoeRule(GreenFlagRule):
    flag_id = GreenFlagId.EXCEPTIONAL_ROE
    strength = Strength.STRONG
    category = GreenFlagCategory.PROFITABILITY
    title = "Exceptional Return on Equity"
    formula = "Net Income / Avg Equity > 20%"
    data_used = ("Net Income", "Shareholder Equity")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income, balance, previous = ctx.income(0), ctx.balance(0), ctx.balance(1)
        if income is None or balance is None or income.net_income is None:
            return None
        if balance.total_shareholder_equity is None:
            return None

        avg_equity = period_average(
            balance.total_shareholder_equity,
            previous.total_shareholder_equity if previous is not None else None,
        )
        if avg_equity <= 0:
            return None
        roe = income.net_income / avg_equity * 100
        if roe <= 20:
            return None
        return self.flag(
            technical=f"ROE: {roe:.1f}%",
            beginner=(
                f"Company earns ${roe:.0f} annually for every $100 invested by shareholders - "
                "better than most investments!"
            ),
            value=roe,
            benchmark=20,
            insight="Management excels at generating shareholder returns.",
        )


class HighRoaRule(GreenFlagRule):
    flag_id = GreenFlagId.HIGH_ROA
    strength = Strength.GOOD
    category = GreenFlagCategory.PROFITABILITY
    title = "High Return on Assets"
    formula = "Net Income / Avg Assets > 10%"
    data_used = ("Net Income", "Total Assets")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income, balance, previous = ctx.income(0), ctx.balance(0), ctx.balance(1)
        if income is None or balance is None or income.net_income is None:
            return None
        if not balance.total_assets:
            return None

        avg_assets = period_average(
            balance.total_assets, previous.total_assets if previous is not None else None
        )
        if avg_assets <= 0:
            return None
        roa = income.net_income / avg_assets * 100
        if roa <= 10:
            return None
        return self.flag(
            technical=f"ROA: {roa:.1f}%",
            beginner=(
                f"Company generates ${roa:.0f} profit for every $100 of assets - "
                "very efficient use of resources."
            ),
            value=roa,
            benchmark=10,
            insight="Efficient asset utilization.",
        )


class SuperiorRoicRule(GreenFlagRule):
    flag_id = GreenFlagId.SUPERIOR_ROIC
    strength = Strength.EXCEPTIONAL
    category = GreenFlagCategory.PROFITABILITY
    title = "Superior Return on Invested Capital"
    formula = "NOPAT / Invested Capital > 15%"
    data_used = ("Operating Income", "Tax Rate", "Invested Capital")

    def __init__(self, default_tax_rate: float = 0.21):
        self.default_tax_rate = default_tax_rate

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        returns = invested_capital_returns(ctx.income(0), ctx.balance(0), self.default_tax_rate)
        if returns is None:
            return None
        nopat, invested = returns
        roic = nopat / invested * 100
        if roic <= 15:
            return None
        return self.flag(
            technical=f"ROIC: {roic:.1f}%",
            beginner=(
                f"Company earns ${roic:.0f} for every $100 invested - sign of competitive advantage."
            ),
            value=roic,
            benchmark=15,
            insight="Excellent capital allocation driving superior returns.",
        )


class ConservativeAccountingRule(GreenFlagRule):
    flag_id = GreenFlagId.CONSERVATIVE_ACCOUNTING
    strength = Strength.GOOD
    category = GreenFlagCategory.FINANCIAL_HEALTH
    title = "Conservative Accounting"
    formula = "|Accruals / Assets| < 2%"
    data_used = ("Net Income", "Operating Cash Flow", "Total Assets")

    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        income, cash_flow, balance = ctx.income(0), ctx.cash_flow(0), ctx.balance(0)
        if income is None or cash_flow is None or balance is None:
            return None
        if income.net_income is None or cash_flow.operating_cash_flow is None:
            return None
        if not balance.total_assets:
            return None

        accruals_pct = (income.net_income - cash_flow.operating_cash_flow) / balance.total_assets * 100
        if abs(accruals_pct) >= 2:
            return None
        return self.flag(
            technical=f"Accruals ratio: {accruals_pct:.1f}%",
            beginner=(
                "Reported profits closely match actual cash - no accounting tricks or "
                "aggressive assumptions."
            ),
            value=abs(accruals_pct),
            benchmark=2,
            insight="Trustworthy financial reporting.",
        )


def default_green_flag_rules(default_tax_rate: float = 0.21) -> tuple[GreenFlagRule, ...]:
    return (
        SuperiorCashGenerationRule(),
        HighFcfMarginRule(),
        CompoundGrowthRule(),
        CapitalLightGrowthRule(),
        FortressBalanceSheetRule(),
        ConservativeLeverageRule(),
        StrongPricingPowerRule(),
        ExpandingMarginsRule(),
        AggressiveBuybacksRule(),
        SignificantBuybacksRule(),
        SustainableDividendsRule(),
        OperatingLeverageRule(),
        ExceptionalRoeRule(),
        HighRoaRule(),
        SuperiorRoicRule(default_tax_rate),
        ConservativeAccountingRule(),
        DividendGrowthRule(),
    )


class GreenFlagAnalyzer:
    """Run every green flag rule and return the hits, strongest first."""

    def __init__(
        self,
        default_tax_rate: float = 0.21,
        rules: Optional[Sequence[GreenFlagRule]] = None,
    ):
        self.rules = tuple(rules) if rules is not None else default_green_flag_rules(default_tax_rate)

    def analyze(self, statements: FinancialStatements) -> list[GreenFlagWithConfidence]:
        ctx = StatementContext(statements)
        flags: list[GreenFlagWithConfidence] = []
        for rule in self.rules:
            flag = rule.evaluate(ctx)
            if flag is None:
                logger.debug("%s: %s not raised", statements.symbol, rule.flag_id.value)
                continue
            flags.append(GreenFlagWithConfidence(flag=flag, data_used=list(rule.data_used)))

        flags = sorted(flags, key=lambda f: STRENGTH_ORDER[f.flag.strength])
        logger.info("%s: %d green flags", statements.symbol, len(flags))
        return flags
