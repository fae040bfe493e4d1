"""Red / green flag schemas."""

from enum import Enum
from typing import Optional

from statement_interpreter.schemas.base import CamelModel


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Strength(str, Enum):
    EXCEPTIONAL = "exceptional"
    STRONG = "strong"
    GOOD = "good"


SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.HIGH: 1, Severity.MEDIUM: 2, Severity.LOW: 3}
STRENGTH_ORDER = {Strength.EXCEPTIONAL: 0, Strength.STRONG: 1, Strength.GOOD: 2}


class RedFlagCategory(str, Enum):
    LIQUIDITY = "liquidity"
    SOLVENCY = "solvency"
    PROFITABILITY = "profitability"
    EFFICIENCY = "efficiency"
    LEVERAGE = "leverage"


class GreenFlagCategory(str, Enum):
    GROWTH = "growth"
    PROFITABILITY = "profitability"
    EFFICIENCY = "efficiency"
    FINANCIAL_HEALTH = "financial_health"
    SHAREHOLDER_FRIENDLY = "shareholder_friendly"


class RedFlagId(str, Enum):
    INSOLVENCY_RISK = "insolvency_risk"
    LIQUIDITY_CRISIS = "liquidity_crisis"
    LIQUIDITY_WARNING = "liquidity_warning"
    CASH_BURN_LEVERAGED = "cash_burn_leveraged"
    UNSUSTAINABLE_DEBT_SERVICE = "unsustainable_debt_service"
    WEAK_INTEREST_COVERAGE = "weak_interest_coverage"
    NEGATIVE_GROSS_MARGIN = "negative_gross_margin"
    GROSS_MARGIN_COMPRESSION = "gross_margin_compression"
    RECEIVABLES_QUALITY_ISSUE = "receivables_quality_issue"
    INVENTORY_BUILDUP = "inventory_buildup"
    POOR_EARNINGS_QUALITY = "poor_earnings_quality"
    HIGH_ACCRUALS = "high_accruals"
    DILUTION_TREADMILL = "dilution_treadmill"
    MARGIN_COMPRESSION_TREND = "margin_compression_trend"
    UNSUSTAINABLE_DIVIDEND = "unsustainable_dividend"
    RISING_CAPITAL_INTENSITY = "rising_capital_intensity"


class GreenFlagId(str, Enum):
    SUPERIOR_CASH_GENERATION = "superior_cash_generation"
    HIGH_FCF_MARGIN = "high_fcf_margin"
    COMPOUND_GROWTH_MACHINE = "compound_growth_machine"
    CAPITAL_LIGHT_GROWTH = "capital_light_growth"
    FORTRESS_BALANCE_SHEET = "fortress_balance_sheet"
    CONSERVATIVE_LEVERAGE = "conservative_leverage"
    STRONG_PRICING_POWER = "strong_pricing_power"
    EXPANDING_MARGINS = "expanding_margins"
    AGGRESSIVE_BUYBACKS = "aggressive_buybacks"
    SIGNIFICANT_BUYBACKS = "significant_buybacks"
    SUSTAINABLE_DIVIDENDS = "sustainable_dividends"
    DIVIDEND_GROWTH = "dividend_growth"
    OPERATING_LEVERAGE = "operating_leverage"
    EXCEPTIONAL_ROE = "exceptional_roe"
    HIGH_ROA = "high_roa"
    SUPERIOR_ROIC = "superior_roic"
    CONSERVATIVE_ACCOUNTING = "conservative_accounting"


class ConfidenceFactor(CamelModel):
    name: str
    status: str  # available | calculated
    description: str


class ConfidenceScore(CamelModel):
    """Reported statement data is taken at face value: always maximum."""

    score: int = 100
    level: str = "maximum"
    source: str = "SEC EDGAR"
    factors: list[ConfidenceFactor] = [
        ConfidenceFactor(
            name="Data Completeness",
            status="available",
            description="All required financial data available from SEC filings",
        )
    ]


class RedFlag(CamelModel):
    id: RedFlagId
    severity: Severity
    category: RedFlagCategory
    title: str
    technical_description: str
    beginner_explanation: str
    formula: str
    value: Optional[float] = None
    threshold: Optional[float] = None
    recommendation: str


class GreenFlag(CamelModel):
    id: GreenFlagId
    strength: Strength
    category: GreenFlagCategory
    title: str
    technical_description: str
    beginner_explanation: str
    formula: str
    value: Optional[float] = None
    benchmark: Optional[float] = None
    insight: str


class RedFlagWithConfidence(CamelModel):
    flag: RedFlag
    confidence: ConfidenceScore = ConfidenceScore()
    data_used: list[str]


class GreenFlagWithConfidence(CamelModel):
    flag: GreenFlag
    confidence: ConfidenceScore = ConfidenceScore()
    data_used: list[str]
