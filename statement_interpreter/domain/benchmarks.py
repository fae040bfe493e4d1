"""Ratio benchmark table.

This is the **single source of truth** for:
- Ratio ids, display names and categories
- Formulas shown to the reader
- Band thresholds (excellent / good / fair / poor)
- Industry context sentences

Usage:
    from statement_interpreter.domain.benchmarks import RATIO_DEFINITIONS

    definition = RATIO_DEFINITIONS["current_ratio"]
    definition.benchmark.band(1.7)  # -> RatioScore.GOOD
"""

from dataclasses import dataclass
from typing import Dict, Optional

from statement_interpreter.schemas.ratios import BenchmarkTable, RatioCategory, RatioScore


@dataclass(frozen=True)
class Benchmark:
    """Band thresholds. ``poor`` is informational only."""

    excellent: float
    good: float
    fair: float
    poor: float
    lower_is_better: bool = False

    def band(self, value: float) -> RatioScore:
        if self.lower_is_better:
            if value <= self.excellent:
                return RatioScore.EXCELLENT
            if value <= self.good:
                return RatioScore.GOOD
            if value <= self.fair:
                return RatioScore.FAIR
            return RatioScore.POOR
        if value >= self.excellent:
            return RatioScore.EXCELLENT
        if value >= self.good:
            return RatioScore.GOOD
        if value >= self.fair:
            return RatioScore.FAIR
        return RatioScore.POOR

    def table(self) -> BenchmarkTable:
        return BenchmarkTable(
            excellent=self.excellent, good=self.good, fair=self.fair, poor=self.poor
        )


@dataclass(frozen=True)
class RatioDefinition:
    id: str
    name: str
    category: RatioCategory
    formula: str
    formula_description: str
    benchmark: Benchmark
    industry_context: Optional[str] = None


_L = RatioCategory.LIQUIDITY
_P = RatioCategory.PROFITABILITY
_E = RatioCategory.EFFICIENCY
_V = RatioCategory.LEVERAGE
_C = RatioCategory.CASH_FLOW

_DEFINITIONS = [
    # Liquidity
    RatioDefinition(
        "current_ratio", "Current Ratio", _L,
        "Current Assets / Current Liabilities",
        "Measures ability to pay short-term obligations",
        Benchmark(2, 1.5, 1, 0.5),
        "Retail and manufacturing typically need higher ratios than service companies.",
    ),
    RatioDefinition(
        "quick_ratio", "Quick Ratio (Acid Test)", _L,
        "(Current Assets - Inventory) / Current Liabilities",
        "Measures immediate liquidity without selling inventory",
        Benchmark(1.5, 1, 0.5, 0.25),
    ),
    RatioDefinition(
        "cash_ratio", "Cash Ratio", _L,
        "Cash & Equivalents / Current Liabilities",
        "Most conservative liquidity measure",
        Benchmark(1, 0.5, 0.2, 0.1),
    ),
    RatioDefinition(
        "working_capital_ratio", "Working Capital Coverage", _L,
        "(Current Assets - Current Liabilities) / Current Liabilities × 100",
        "Excess liquidity as % of short-term obligations",
        Benchmark(100, 50, 0, -50),
    ),
    # Profitability
    RatioDefinition(
        "gross_margin", "Gross Profit Margin", _P,
        "Gross Profit / Revenue × 100",
        "Profit after direct costs",
        Benchmark(40, 30, 20, 10),
        "Software: 70-80%, Retail: 25-35%, Manufacturing: 20-30%",
    ),
    RatioDefinition(
        "operating_margin", "Operating Margin", _P,
        "Operating Income / Revenue × 100",
        "Profit from core business operations",
        Benchmark(20, 15, 10, 5),
    ),
    RatioDefinition(
        "net_margin", "Net Profit Margin", _P,
        "Net Income / Revenue × 100",
        "Final profit after all expenses",
        Benchmark(15, 10, 5, 0),
    ),
    RatioDefinition(
        "roe", "Return on Equity (ROE)", _P,
        "Net Income / Average Shareholders Equity × 100",
        "Return generated for shareholders",
        Benchmark(20, 15, 10, 5),
        "Compare to S&P 500 average of ~14%",
    ),
    RatioDefinition(
        "roa", "Return on Assets (ROA)", _P,
        "Net Income / Average Total Assets × 100",
        "How efficiently assets generate profit",
        Benchmark(10, 7, 5, 2),
    ),
    RatioDefinition(
        "roic", "Return on Invested Capital (ROIC)", _P,
        "NOPAT / (Debt + Equity - Cash) × 100",
        "True returns on ALL investor capital",
        Benchmark(20, 15, 10, 5),
    ),
    # Efficiency
    RatioDefinition(
        "asset_turnover", "Asset Turnover", _E,
        "Revenue / Average Total Assets",
        "Revenue generated per dollar of assets",
        Benchmark(2, 1.5, 1, 0.5),
        "Retail: 2-3x, Manufacturing: 1-2x, Utilities: 0.3-0.5x",
    ),
    RatioDefinition(
        "inventory_turnover", "Inventory Turnover", _E,
        "Cost of Goods Sold / Average Inventory",
        "How quickly inventory sells",
        Benchmark(12, 6, 4, 2),
        "Grocery: 12-15x, Electronics: 5-6x, Luxury goods: 1-2x",
    ),
    RatioDefinition(
        "days_inventory_outstanding", "Days Inventory Outstanding", _E,
        "365 / Inventory Turnover",
        "Days an item sits in inventory before it sells",
        Benchmark(30, 61, 91, 183, lower_is_better=True),
    ),
    RatioDefinition(
        "receivables_turnover", "Receivables Turnover", _E,
        "Revenue / Average Accounts Receivable",
        "How quickly customers pay",
        # 365/30, 365/45, 365/60 days
        Benchmark(12.17, 8.11, 6.08, 4),
        "Net 30 is standard for most industries",
    ),
    RatioDefinition(
        "days_sales_outstanding", "Days Sales Outstanding", _E,
        "365 / Receivables Turnover",
        "Average days to collect payment from customers",
        Benchmark(30, 45, 60, 90, lower_is_better=True),
        "Net 30 is standard for most industries",
    ),
    # Leverage
    RatioDefinition(
        "debt_to_equity", "Debt-to-Equity Ratio", _V,
        "Total Debt / Total Equity",
        "Financial leverage level",
        Benchmark(0.5, 1, 2, 3, lower_is_better=True),
        "Utilities and real estate typically have higher ratios",
    ),
    RatioDefinition(
        "debt_to_assets", "Debt-to-Assets Ratio", _V,
        "Total Debt / Total Assets",
        "Portion of assets financed by debt",
        Benchmark(0.3, 0.5, 0.7, 0.8, lower_is_better=True),
    ),
    RatioDefinition(
        "interest_coverage", "Interest Coverage Ratio", _V,
        "Operating Income / Interest Expense",
        "Ability to pay interest obligations",
        Benchmark(5, 3, 2, 1),
    ),
    RatioDefinition(
        "equity_multiplier", "Equity Multiplier", _V,
        "Total Assets / Total Equity",
        "Assets per dollar of equity",
        Benchmark(2, 3, 4, 5, lower_is_better=True),
    ),
    # Cash flow
    RatioDefinition(
        "operating_cash_flow_ratio", "Operating Cash Flow Ratio", _C,
        "Operating Cash Flow / Current Liabilities",
        "Cash generated vs short-term obligations",
        Benchmark(1, 0.5, 0.2, 0.1),
    ),
    RatioDefinition(
        "fcf_margin", "Free Cash Flow Margin", _C,
        "Free Cash Flow / Revenue × 100",
        "Cash available after reinvestment",
        Benchmark(15, 10, 5, 0),
    ),
    RatioDefinition(
        "cash_flow_to_net_income", "OCF/Net Income (Earnings Quality)", _C,
        "Operating Cash Flow / Net Income",
        "Quality of earnings",
        Benchmark(1.2, 1, 0.8, 0.5),
    ),
]

RATIO_DEFINITIONS: Dict[str, RatioDefinition] = {d.id: d for d in _DEFINITIONS}
