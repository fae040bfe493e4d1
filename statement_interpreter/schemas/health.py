"""Health score schemas."""

from enum import Enum

from statement_interpreter.schemas.base import CamelModel


class HealthCategoryName(str, Enum):
    PROFITABILITY = "profitability"
    GROWTH = "growth"
    FINANCIAL_STABILITY = "financial_stability"
    EFFICIENCY = "efficiency"
    SHAREHOLDER_VALUE = "shareholder_value"


class HealthScoreCategory(CamelModel):
    name: HealthCategoryName
    score: float  # 0–100
    weight: int
    factors: list[str]


class HealthScore(CamelModel):
    overall: int  # 0–100
    grade: str
    categories: list[HealthScoreCategory]
    summary: str
    beginner_interpretation: str
    key_strengths: list[str]
    key_weaknesses: list[str]
    actionable_insights: list[str]

    def category(self, name: HealthCategoryName) -> HealthScoreCategory:
        return next(c for c in self.categories if c.name == name)
