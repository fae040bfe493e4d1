"""Read-only views over a company's statements shared by every analyzer."""

from typing import Optional, Sequence, TypeVar

from statement_interpreter.schemas.statements import (
    BalanceSheetPeriod,
    CashFlowPeriod,
    FinancialStatements,
    IncomeStatementPeriod,
)

T = TypeVar("T")

DAYS_PER_YEAR = 365


def _at(periods: Sequence[T], index: int) -> Optional[T]:
    return periods[index] if 0 <= index < len(periods) else None


class StatementContext:
    """Index-safe access to annual and TTM periods (annual index 0 = latest)."""

    def __init__(self, statements: FinancialStatements):
        self.statements = statements
        self.income_annual = statements.income_statements.annual
        self.balance_annual = statements.balance_sheets.annual
        self.cash_flow_annual = statements.cash_flow_statements.annual

    def income(self, index: int = 0) -> Optional[IncomeStatementPeriod]:
        return _at(self.income_annual, index)

    def balance(self, index: int = 0) -> Optional[BalanceSheetPeriod]:
        return _at(self.balance_annual, index)

    def cash_flow(self, index: int = 0) -> Optional[CashFlowPeriod]:
        return _at(self.cash_flow_annual, index)

    @property
    def recent_income(self) -> Optional[IncomeStatementPeriod]:
        """TTM income statement when supplied, else the latest annual one."""
        return self.statements.income_statements.ttm or self.income(0)

    @property
    def recent_cash_flow(self) -> Optional[CashFlowPeriod]:
        """TTM cash flow statement when supplied, else the latest annual one."""
        return self.statements.cash_flow_statements.ttm or self.cash_flow(0)


def effective_tax_rate(income: IncomeStatementPeriod, default_tax_rate: float) -> float:
    if (
        income.income_tax_expense is not None
        and income.income_before_tax is not None
        and income.income_before_tax > 0
    ):
        return income.income_tax_expense / income.income_before_tax
    return default_tax_rate


def invested_capital_returns(
    income: Optional[IncomeStatementPeriod],
    balance: Optional[BalanceSheetPeriod],
    default_tax_rate: float,
) -> Optional[tuple[float, float]]:
    """(NOPAT, invested capital), or None when ROIC is undefined.

    Invested capital = total debt + equity − cash and must be positive.
    """
    if income is None or balance is None:
        return None
    if income.operating_income is None or balance.total_shareholder_equity is None:
        return None
    nopat = income.operating_income * (1 - effective_tax_rate(income, default_tax_rate))
    invested = (
        (balance.total_debt or 0.0)
        + balance.total_shareholder_equity
        - (balance.cash_and_cash_equivalents or 0.0)
    )
    if invested <= 0:
        return None
    return nopat, invested
