"""Red flag detection: financial warning signs.

Each rule is independent and reads only the periods it needs. The analyzer
folds the registry and orders the result by severity.
"""

import logging
from typing import Optional, Sequence

from statement_interpreter.engines.context import StatementContext
from statement_interpreter.engines.rules import RedFlagRule
from statement_interpreter.schemas.flags import (
    SEVERITY_ORDER,
    RedFlag,
    RedFlagCategory,
    RedFlagId,
    RedFlagWithConfidence,
    Severity,
)
from statement_interpreter.schemas.statements import FinancialStatements
from statement_interpreter.utils.financial_math import growth_rate, margin, safe_ratio
from statement_interpreter.utils.formatting import currency

logger = logging.getLogger(__name__)

# Debt-to-equity reported when equity is zero or negative.
NEGATIVE_EQUITY_LEVERAGE = 999.0


def _eps(income) -> Optional[float]:
    if income is None:
        return None
    return income.eps_diluted if income.eps_diluted is not None else income.eps


# ── Solvency & liquidity ──────────────────────────────────────────────


class InsolvencyRule(RedFlagRule):
    flag_id = RedFlagId.INSOLVENCY_RISK
    severity = Severity.CRITICAL
    category = RedFlagCategory.SOLVENCY
    title = "Insolvency Risk - Negative Equity"
    formula = "Total Liabilities > Total Assets"
    data_used = ("Total Assets", "Total Liabilities")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        balance = ctx.balance(0)
        if balance is None or balance.total_assets is None or balance.total_liabilities is None:
            return None
        if balance.total_assets <= 0 or balance.total_liabilities <= balance.total_assets:
            return None

        deficit = balance.total_liabilities - balance.total_assets
        deficit_pct = deficit / balance.total_assets * 100
        return self.flag(
            technical=f"Liabilities exceed assets by {currency(deficit)} ({deficit_pct:.1f}%)",
            beginner=(
                "The company owes more than it owns - like having a mortgage bigger than "
                "your house value. This is a serious financial distress signal."
            ),
            value=balance.total_liabilities,
            threshold=balance.total_assets,
            recommendation=(
                "Immediate investigation required. Check for restructuring plans or bankruptcy risk."
            ),
        )


def _current_ratio(ctx: StatementContext) -> Optional[float]:
    balance = ctx.balance(0)
    if balance is None or balance.current_assets is None or balance.current_liabilities is None:
        return None
    if balance.current_liabilities <= 0:
        return None
    return balance.current_assets / balance.current_liabilities


class LiquidityCrisisRule(RedFlagRule):
    """Current ratio below 1 and operating cash flow cannot close the gap.

    Cash flow falls back from TTM to the latest annual statement, then to
    net income.
    """

    flag_id = RedFlagId.LIQUIDITY_CRISIS
    severity = Severity.CRITICAL
    category = RedFlagCategory.LIQUIDITY
    title = "Severe Liquidity Crisis"
    formula = "Current Assets / Current Liabilities < 1"
    data_used = ("Current Assets", "Current Liabilities", "Operating Cash Flow")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        current_ratio = _current_ratio(ctx)
        if current_ratio is None or current_ratio >= 1:
            return None

        cash_flow = ctx.recent_cash_flow
        ocf = cash_flow.operating_cash_flow if cash_flow is not None else None
        if ocf is None:
            income = ctx.income(0)
            ocf = income.net_income if income is not None else None
        if ocf is None:
            return None

        balance = ctx.balance(0)
        working_capital = balance.current_assets - balance.current_liabilities
        if ocf > abs(working_capital):
            return None

        return self.flag(
            technical=(
                f"Current ratio: {current_ratio:.2f}, "
                f"Working capital deficit: {currency(abs(working_capital))}"
            ),
            beginner=(
                f"Company has ${current_ratio:.2f} for every $1 of bills due this year - "
                "can't pay all bills without borrowing or selling assets."
            ),
            value=current_ratio,
            threshold=1,
            recommendation=(
                "Check cash burn rate and available credit lines. "
                "Company may struggle to meet short-term obligations."
            ),
        )


class LiquidityWarningRule(RedFlagRule):
    flag_id = RedFlagId.LIQUIDITY_WARNING
    severity = Severity.MEDIUM
    category = RedFlagCategory.LIQUIDITY
    title = "Tight Liquidity"
    formula = "Current Assets / Current Liabilities < 1.2"
    data_used = ("Current Assets", "Current Liabilities")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        current_ratio = _current_ratio(ctx)
        if current_ratio is None or not 1 <= current_ratio < 1.2:
            return None
        return self.flag(
            technical=f"Current ratio: {current_ratio:.2f}",
            beginner=(
                f"Company has only ${current_ratio:.2f} for every $1 of near-term bills - "
                "limited financial cushion."
            ),
            value=current_ratio,
            threshold=1.2,
            recommendation="Monitor cash flow trends and credit availability.",
        )


class CashBurnLeveragedRule(RedFlagRule):
    flag_id = RedFlagId.CASH_BURN_LEVERAGED
    severity = Severity.CRITICAL
    category = RedFlagCategory.LIQUIDITY
    title = "Cash Burn with High Debt"
    formula = "Operating Cash Flow < 0 AND Debt/Equity > 2"
    data_used = ("Operating Cash Flow", "Total Debt", "Total Equity", "Cash")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        balance, cash_flow = ctx.balance(0), ctx.cash_flow(0)
        if balance is None or cash_flow is None:
            return None
        ocf = cash_flow.operating_cash_flow
        equity = balance.total_shareholder_equity
        if ocf is None or equity is None or ocf >= 0:
            return None

        if equity <= 0:
            debt_to_equity = NEGATIVE_EQUITY_LEVERAGE
        elif balance.total_debt is None:
            return None
        else:
            debt_to_equity = balance.total_debt / equity
        if debt_to_equity <= 2:
            return None

        monthly_burn = abs(ocf) / 12
        cash = balance.cash_and_cash_equivalents
        if cash is None:
            runway = "Cash runway: unknown."
        else:
            runway = f"Cash runway: {cash / monthly_burn:.1f} months."
        return self.flag(
            technical=f"Burning {currency(monthly_burn)}/month with D/E ratio: {debt_to_equity:.1f}x",
            beginner=(
                "Company is losing money every month while already deep in debt - "
                "like maxing credit cards while unemployed."
            ),
            value=debt_to_equity,
            threshold=2,
            recommendation=f"{runway} Check refinancing options and cost reduction plans.",
        )


# ── Leverage ──────────────────────────────────────────────────────────


class DebtServiceRule(RedFlagRule):
    flag_id = RedFlagId.UNSUSTAINABLE_DEBT_SERVICE
    severity = Severity.HIGH
    category = RedFlagCategory.LEVERAGE
    title = "Unsustainable Debt Service"
    formula = "Operating Cash Flow / (Interest + Principal) < 1"
    data_used = ("Operating Cash Flow", "Interest Expense", "Debt Repayment")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        income, cash_flow = ctx.income(0), ctx.cash_flow(0)
        if income is None or cash_flow is None:
            return None
        ocf = cash_flow.operating_cash_flow
        interest = income.interest_expense
        if ocf is None or interest is None or interest <= 0:
            return None

        principal = abs(cash_flow.debt_repayment or 0.0)
        coverage = ocf / (interest + principal)
        if coverage >= 1:
            return None
        return self.flag(
            technical=f"Debt service coverage: {coverage:.2f}x",
            beginner="Company needs to borrow more just to pay existing debts - entering a debt spiral.",
            value=coverage,
            threshold=1,
            recommendation="Review debt restructuring options and covenant compliance.",
        )


class WeakInterestCoverageRule(RedFlagRule):
    flag_id = RedFlagId.WEAK_INTEREST_COVERAGE
    severity = Severity.MEDIUM
    category = RedFlagCategory.LEVERAGE
    title = "Weak Interest Coverage"
    formula = "Operating Income / Interest Expense < 2"
    data_used = ("Operating Income", "Interest Expense")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        income = ctx.income(0)
        if income is None or income.operating_income is None:
            return None
        if income.interest_expense is None or income.interest_expense <= 0:
            return None

        coverage = income.operating_income / income.interest_expense
        if coverage >= 2:
            return None
        return self.flag(
            technical=f"Interest coverage: {coverage:.2f}x",
            beginner=(
                f"Company earns only ${coverage:.2f} for every $1 of interest owed - "
                "little margin for error."
            ),
            value=coverage,
            threshold=2,
            recommendation="Monitor debt levels and refinancing risk.",
        )


# ── Profitability ─────────────────────────────────────────────────────


def _gross_margin(income) -> Optional[float]:
    if income is None or income.revenue is None or income.gross_profit is None:
        return None
    if income.revenue <= 0:
        return None
    return margin(income.gross_profit, income.revenue)


class NegativeGrossMarginRule(RedFlagRule):
    flag_id = RedFlagId.NEGATIVE_GROSS_MARGIN
    severity = Severity.CRITICAL
    category = RedFlagCategory.PROFITABILITY
    title = "Negative Gross Margin"
    formula = "Gross Profit < 0"
    data_used = ("Revenue", "Cost of Revenue", "Gross Profit")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        current = _gross_margin(ctx.income(0))
        if current is None or current >= 0:
            return None
        return self.flag(
            technical=f"Gross margin: {current:.1f}%",
            beginner=(
                "Company can't even sell products for more than they cost to make - "
                "losing money on every sale."
            ),
            value=current,
            threshold=0,
            recommendation="Investigate pricing strategy and cost structure immediately.",
        )


class GrossMarginCompressionRule(RedFlagRule):
    flag_id = RedFlagId.GROSS_MARGIN_COMPRESSION
    severity = Severity.HIGH
    category = RedFlagCategory.PROFITABILITY
    title = "Severe Margin Compression"
    formula = "Gross Margin declined > 5 percentage points"
    data_used = ("Revenue", "Gross Profit (current & previous year)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        current = _gross_margin(ctx.income(0))
        previous = _gross_margin(ctx.income(1))
        # A negative margin is reported by NegativeGrossMarginRule instead.
        if current is None or previous is None or current < 0:
            return None

        decline = previous - current
        if decline <= 5:
            return None
        return self.flag(
            technical=f"Gross margin declined {decline:.1f} percentage points YoY",
            beginner=(
                f"Company keeps {decline:.1f}% less profit from each dollar of sales "
                "compared to last year."
            ),
            value=decline,
            threshold=5,
            recommendation="Analyze competitive pressures and cost inflation impact.",
        )


class PoorEarningsQualityRule(RedFlagRule):
    flag_id = RedFlagId.POOR_EARNINGS_QUALITY
    severity = Severity.HIGH
    category = RedFlagCategory.PROFITABILITY
    title = "Poor Earnings Quality"
    formula = "Operating Cash Flow / Net Income < 0.8"
    data_used = ("Operating Cash Flow", "Net Income")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        income, cash_flow = ctx.recent_income, ctx.recent_cash_flow
        if income is None or cash_flow is None:
            return None
        net_income = income.net_income
        ocf = cash_flow.operating_cash_flow
        # The ratio is meaningless for loss-making periods.
        if net_income is None or ocf is None or net_income <= 0:
            return None

        quality = ocf / net_income
        if quality >= 0.8:
            return None
        return self.flag(
            technical=f"OCF/NI ratio: {quality:.2f}",
            beginner="Profits on paper but not turning into real cash - potential accounting red flag.",
            value=quality,
            threshold=0.8,
            recommendation="Investigate accruals and revenue recognition policies.",
        )


class HighAccrualsRule(RedFlagRule):
    flag_id = RedFlagId.HIGH_ACCRUALS
    severity = Severity.MEDIUM
    category = RedFlagCategory.PROFITABILITY
    title = "High Accruals"
    formula = "|(Net Income - OCF) / Ending Cash| > 10%"
    data_used = ("Net Income", "Operating Cash Flow", "Ending Cash Position")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        income, annual_cf, recent_cf = ctx.income(0), ctx.cash_flow(0), ctx.recent_cash_flow
        if income is None or annual_cf is None or recent_cf is None:
            return None
        if income.net_income is None or recent_cf.operating_cash_flow is None:
            return None

        accruals = income.net_income - recent_cf.operating_cash_flow
        ratio = safe_ratio(accruals, annual_cf.end_cash_position)
        if ratio is None or abs(ratio * 100) <= 10:
            return None

        pct = ratio * 100
        return self.flag(
            technical=f"Accruals ratio: {pct:.1f}%",
            beginner="Large gap between reported profits and actual cash - earnings may be overstated.",
            value=abs(pct),
            threshold=10,
            recommendation="Review accounting policies and one-time items.",
        )


class MarginCompressionTrendRule(RedFlagRule):
    flag_id = RedFlagId.MARGIN_COMPRESSION_TREND
    severity = Severity.MEDIUM
    category = RedFlagCategory.PROFITABILITY
    title = "Persistent Margin Compression"
    formula = "Operating margin declining for 2+ consecutive years"
    data_used = ("Operating Income", "Revenue (3-year trend)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        margins = []
        for i in range(3):
            income = ctx.income(i)
            if income is None or income.revenue is None or income.operating_income is None:
                return None
            if income.revenue <= 0:
                return None
            margins.append(income.operating_income / income.revenue * 100)

        # margins[0] is the latest year
        declining = margins[0] < margins[1] < margins[2]
        total_decline = margins[2] - margins[0]
        if not declining or total_decline <= 3:
            return None
        return self.flag(
            technical=f"Operating margin declined {total_decline:.1f} percentage points over 2 years",
            beginner=(
                "Company keeping less profit from each sale year after year - "
                "competitive pressure or rising costs."
            ),
            value=total_decline,
            threshold=3,
            recommendation="Analyze pricing power and cost structure.",
        )


# ── Efficiency / working capital ──────────────────────────────────────


def _revenue_growth(ctx: StatementContext) -> Optional[float]:
    current, previous = ctx.income(0), ctx.income(1)
    if current is None or previous is None:
        return None
    if current.revenue is None or previous.revenue is None or previous.revenue <= 0:
        return None
    return growth_rate(current.revenue, previous.revenue)


def _balance_growth(ctx: StatementContext, field: str) -> Optional[float]:
    current, previous = ctx.balance(0), ctx.balance(1)
    if current is None or previous is None:
        return None
    now, before = getattr(current, field), getattr(previous, field)
    if now is None or before is None or before <= 0:
        return None
    return growth_rate(now, before)


class ReceivablesQualityRule(RedFlagRule):
    flag_id = RedFlagId.RECEIVABLES_QUALITY_ISSUE
    severity = Severity.MEDIUM
    category = RedFlagCategory.EFFICIENCY
    title = "Deteriorating Receivables Quality"
    formula = "Receivables growth > Revenue growth + 10%"
    data_used = ("Accounts Receivable", "Revenue (YoY comparison)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        receivables_growth = _balance_growth(ctx, "net_receivables")
        revenue_growth = _revenue_growth(ctx)
        if receivables_growth is None or revenue_growth is None:
            return None
        if receivables_growth <= revenue_growth + 10:
            return None
        return self.flag(
            technical=f"Receivables grew {receivables_growth:.1f}% vs revenue {revenue_growth:.1f}%",
            beginner="Customers taking longer to pay - money getting stuck in IOUs instead of cash.",
            value=receivables_growth,
            threshold=revenue_growth + 10,
            recommendation="Review customer credit quality and collection procedures.",
        )


class InventoryBuildupRule(RedFlagRule):
    flag_id = RedFlagId.INVENTORY_BUILDUP
    severity = Severity.MEDIUM
    category = RedFlagCategory.EFFICIENCY
    title = "Excessive Inventory Buildup"
    formula = "Inventory growth > Revenue growth + 15%"
    data_used = ("Inventory", "Revenue (YoY comparison)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        inventory_growth = _balance_growth(ctx, "inventory")
        revenue_growth = _revenue_growth(ctx)
        if inventory_growth is None or revenue_growth is None:
            return None
        if inventory_growth <= revenue_growth + 15:
            return None
        return self.flag(
            technical=f"Inventory grew {inventory_growth:.1f}% vs revenue {revenue_growth:.1f}%",
            beginner="Products piling up in warehouses - may indicate slowing demand.",
            value=inventory_growth,
            threshold=revenue_growth + 15,
            recommendation="Check for obsolete inventory and demand trends.",
        )


class DilutionTreadmillRule(RedFlagRule):
    flag_id = RedFlagId.DILUTION_TREADMILL
    severity = Severity.HIGH
    category = RedFlagCategory.EFFICIENCY
    title = "Shareholder Dilution"
    formula = "Share growth > 5% annually AND declining EPS"
    data_used = ("Shares Outstanding", "EPS (multi-year)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        latest, two_years_ago = ctx.balance(0), ctx.balance(2)
        if latest is None or two_years_ago is None:
            return None
        shares_now, shares_then = latest.shares_outstanding, two_years_ago.shares_outstanding
        if shares_now is None or shares_then is None or shares_now <= 0 or shares_then <= 0:
            return None

        share_growth = ((shares_now / shares_then) ** 0.5 - 1) * 100
        eps_now, eps_before = _eps(ctx.income(0)), _eps(ctx.income(1))
        if eps_now is None or eps_before is None:
            return None
        if share_growth <= 5 or eps_now >= eps_before:
            return None
        return self.flag(
            technical=f"Share count growing {share_growth:.1f}% annually, EPS declining",
            beginner=(
                "Company keeps issuing new shares, making each share worth less - like printing money."
            ),
            value=share_growth,
            threshold=5,
            recommendation="Evaluate funding alternatives and capital efficiency.",
        )


class RisingCapitalIntensityRule(RedFlagRule):
    flag_id = RedFlagId.RISING_CAPITAL_INTENSITY
    severity = Severity.MEDIUM
    category = RedFlagCategory.EFFICIENCY
    title = "Rising Capital Intensity"
    formula = "CapEx/Revenue increasing without commensurate growth"
    data_used = ("Capital Expenditures", "Revenue (YoY)")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        intensities = []
        for i in range(2):
            income, cash_flow = ctx.income(i), ctx.cash_flow(i)
            if income is None or cash_flow is None:
                return None
            if income.revenue is None or income.revenue <= 0 or cash_flow.capital_expenditures is None:
                return None
            intensities.append(abs(cash_flow.capital_expenditures) / income.revenue * 100)

        increase = intensities[0] - intensities[1]
        revenue_growth = _revenue_growth(ctx)
        if increase <= 2 or revenue_growth is None or revenue_growth >= 10:
            return None
        return self.flag(
            technical=f"CapEx/Revenue increased {increase:.1f} percentage points",
            beginner=(
                "Company needs to spend more just to maintain business - "
                "like a car needing more repairs as it ages."
            ),
            value=intensities[0],
            threshold=intensities[1] + 2,
            recommendation="Evaluate return on invested capital and growth investments.",
        )


# ── Shareholder returns ───────────────────────────────────────────────


class UnsustainableDividendRule(RedFlagRule):
    flag_id = RedFlagId.UNSUSTAINABLE_DIVIDEND
    severity = Severity.HIGH
    category = RedFlagCategory.LIQUIDITY
    title = "Unsustainable Dividend"
    formula = "Dividends > Free Cash Flow"
    data_used = ("Dividends Paid", "Free Cash Flow")

    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        cash_flow = ctx.recent_cash_flow
        if cash_flow is None or not cash_flow.dividends_paid:
            return None
        dividends = abs(cash_flow.dividends_paid)
        fcf = cash_flow.fcf
        if fcf is None or fcf <= 0 or dividends <= fcf:
            return None

        payout = dividends / fcf * 100
        return self.flag(
            technical=f"Payout ratio: {payout:.0f}% of FCF",
            beginner=(
                "Company paying dividends by borrowing money - robbing future to pay shareholders today."
            ),
            value=payout,
            threshold=100,
            recommendation="Dividend cut likely unless cash flow improves.",
        )


DEFAULT_RED_FLAG_RULES: tuple[RedFlagRule, ...] = (
    InsolvencyRule(),
    LiquidityCrisisRule(),
    LiquidityWarningRule(),
    CashBurnLeveragedRule(),
    DebtServiceRule(),
    WeakInterestCoverageRule(),
    NegativeGrossMarginRule(),
    GrossMarginCompressionRule(),
    ReceivablesQualityRule(),
    InventoryBuildupRule(),
    PoorEarningsQualityRule(),
    HighAccrualsRule(),
    DilutionTreadmillRule(),
    MarginCompressionTrendRule(),
    UnsustainableDividendRule(),
    RisingCapitalIntensityRule(),
)


class RedFlagAnalyzer:
    """Run every red flag rule and return the hits, most severe first."""

    def __init__(self, rules: Optional[Sequence[RedFlagRule]] = None):
        self.rules = tuple(rules) if rules is not None else DEFAULT_RED_FLAG_RULES

    def analyze(self, statements: FinancialStatements) -> list[RedFlagWithConfidence]:
        ctx = StatementContext(statements)
        flags: list[RedFlagWithConfidence] = []
        for rule in self.rules:
            flag = rule.evaluate(ctx)
            if flag is None:
                logger.debug("%s: %s not raised", statements.symbol, rule.flag_id.value)
                continue
            flags.append(RedFlagWithConfidence(flag=flag, data_used=list(rule.data_used)))

        # sorted() is stable, so registry order breaks ties
        flags = sorted(flags, key=lambda f: SEVERITY_ORDER[f.flag.severity])
        logger.info("%s: %d red flags", statements.symbol, len(flags))
        return flags
