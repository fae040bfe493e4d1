"""Input schemas: normalized financial statements for one company.

Collections are ordered newest first. Every numeric field is optional; a
missing value means the data provider did not report it.
"""

from typing import Generic, Optional, TypeVar

from statement_interpreter.schemas.base import CamelModel


class StatementPeriod(CamelModel):
    date: Optional[str] = None
    fiscal_year: Optional[int] = None
    fiscal_quarter: Optional[int] = None

    def populated_fields(self) -> int:
        """Number of fields carrying a value."""
        return sum(1 for v in self.model_dump().values() if v is not None)


class IncomeStatementPeriod(StatementPeriod):
    revenue: Optional[float] = None
    cost_of_revenue: Optional[float] = None
    gross_profit: Optional[float] = None
    operating_income: Optional[float] = None
    net_income: Optional[float] = None
    eps: Optional[float] = None
    eps_diluted: Optional[float] = None
    interest_expense: Optional[float] = None
    income_tax_expense: Optional[float] = None
    income_before_tax: Optional[float] = None


class BalanceSheetPeriod(StatementPeriod):
    total_assets: Optional[float] = None
    total_liabilities: Optional[float] = None
    current_assets: Optional[float] = None
    current_liabilities: Optional[float] = None
    inventory: Optional[float] = None
    net_receivables: Optional[float] = None
    cash_and_cash_equivalents: Optional[float] = None
    short_term_debt: Optional[float] = None
    long_term_debt: Optional[float] = None
    total_shareholder_equity: Optional[float] = None
    shares_outstanding: Optional[float] = None

    @property
    def total_debt(self) -> Optional[float]:
        """Short-term plus long-term debt.

        A missing component counts as zero; unknown when both are missing.
        """
        if self.short_term_debt is None and self.long_term_debt is None:
            return None
        return (self.short_term_debt or 0.0) + (self.long_term_debt or 0.0)


class CashFlowPeriod(StatementPeriod):
    operating_cash_flow: Optional[float] = None
    capital_expenditures: Optional[float] = None  # outflow, sign varies by provider
    free_cash_flow: Optional[float] = None
    dividends_paid: Optional[float] = None
    stock_repurchased: Optional[float] = None
    debt_repayment: Optional[float] = None
    end_cash_position: Optional[float] = None

    @property
    def fcf(self) -> Optional[float]:
        """Reported free cash flow, else OCF − |CapEx| when both exist."""
        if self.free_cash_flow is not None:
            return self.free_cash_flow
        if self.operating_cash_flow is None or self.capital_expenditures is None:
            return None
        return self.operating_cash_flow - abs(self.capital_expenditures)


P = TypeVar("P", bound=StatementPeriod)


class StatementCollection(CamelModel, Generic[P]):
    annual: list[P] = []
    quarterly: list[P] = []
    ttm: Optional[P] = None


# Flow fields summed across quarters when building a TTM period.
_INCOME_FLOW_FIELDS = (
    "revenue", "cost_of_revenue", "gross_profit", "operating_income",
    "net_income", "eps", "eps_diluted", "interest_expense",
    "income_tax_expense", "income_before_tax",
)
_CASH_FLOW_FIELDS = (
    "operating_cash_flow", "capital_expenditures", "free_cash_flow",
    "dividends_paid", "stock_repurchased", "debt_repayment",
)


def _sum_quarters(quarters: list, fields: tuple[str, ...]) -> dict:
    summed: dict = {}
    for name in fields:
        values = [getattr(q, name) for q in quarters]
        summed[name] = None if any(v is None for v in values) else sum(values)
    return summed


class FinancialStatements(CamelModel):
    """Everything the interpreter needs for one company."""

    symbol: str
    company_name: Optional[str] = None
    income_statements: StatementCollection[IncomeStatementPeriod] = StatementCollection[IncomeStatementPeriod]()
    balance_sheets: StatementCollection[BalanceSheetPeriod] = StatementCollection[BalanceSheetPeriod]()
    cash_flow_statements: StatementCollection[CashFlowPeriod] = StatementCollection[CashFlowPeriod]()
    updated_at: Optional[str] = None

    def with_synthesized_ttm(self) -> "FinancialStatements":
        """Return a copy with TTM periods built from the last four quarters.

        Supplied TTM periods are kept. A field is only summed when all four
        quarters report it.
        """
        updates: dict = {}

        income_q = self.income_statements.quarterly[:4]
        if self.income_statements.ttm is None and len(income_q) == 4:
            ttm = IncomeStatementPeriod(
                date=income_q[0].date,
                fiscal_year=income_q[0].fiscal_year,
                **_sum_quarters(income_q, _INCOME_FLOW_FIELDS),
            )
            updates["income_statements"] = self.income_statements.model_copy(update={"ttm": ttm})

        cash_q = self.cash_flow_statements.quarterly[:4]
        if self.cash_flow_statements.ttm is None and len(cash_q) == 4:
            ttm = CashFlowPeriod(
                date=cash_q[0].date,
                fiscal_year=cash_q[0].fiscal_year,
                end_cash_position=cash_q[0].end_cash_position,
                **_sum_quarters(cash_q, _CASH_FLOW_FIELDS),
            )
            updates["cash_flow_statements"] = self.cash_flow_statements.model_copy(update={"ttm": ttm})

        return self.model_copy(update=updates) if updates else self
