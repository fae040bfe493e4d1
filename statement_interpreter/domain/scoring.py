"""Health-score constants and formulas.

Usage:
    from statement_interpreter.domain.scoring import grade_for_score, overall_score

    overall = overall_score({HealthCategoryName.GROWTH: 80, ...})  # 0–100 int
    grade = grade_for_score(overall)  # "B+"
"""

from typing import Dict

from statement_interpreter.schemas.health import HealthCategoryName
from statement_interpreter.schemas.report import SimpleRating
from statement_interpreter.utils.financial_math import clamp, round_half_up

CATEGORY_WEIGHTS: Dict[HealthCategoryName, int] = {
    HealthCategoryName.PROFITABILITY: 25,
    HealthCategoryName.GROWTH: 20,
    HealthCategoryName.FINANCIAL_STABILITY: 25,
    HealthCategoryName.EFFICIENCY: 15,
    HealthCategoryName.SHAREHOLDER_VALUE: 15,
}

if sum(CATEGORY_WEIGHTS.values()) != 100:
    raise ValueError("Health category weights must sum to 100")

CATEGORY_BASELINES: Dict[HealthCategoryName, float] = {
    HealthCategoryName.PROFITABILITY: 50,
    HealthCategoryName.GROWTH: 50,
    HealthCategoryName.FINANCIAL_STABILITY: 75,
    HealthCategoryName.EFFICIENCY: 50,
    HealthCategoryName.SHAREHOLDER_VALUE: 50,
}

# Descending (threshold, grade); anything below the last threshold is F.
GRADE_LADDER = [
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D"),
]


def grade_for_score(score: float) -> str:
    """Letter grade for a 0–100 score.

    Examples:
        >>> grade_for_score(95)
        'A+'
        >>> grade_for_score(72)
        'B-'
        >>> grade_for_score(49.9)
        'F'
    """
    for threshold, grade in GRADE_LADDER:
        if score >= threshold:
            return grade
    return "F"


def overall_score(category_scores: Dict[HealthCategoryName, float]) -> int:
    """Weighted average of category scores, clamped and rounded half-up.

    Examples:
        >>> overall_score({name: 100 for name in CATEGORY_WEIGHTS})
        100
        >>> overall_score({name: 50 for name in CATEGORY_WEIGHTS})
        50
    """
    weighted = sum(
        category_scores[name] * weight / 100 for name, weight in CATEGORY_WEIGHTS.items()
    )
    return round_half_up(clamp(weighted))


def simple_rating(score: float) -> SimpleRating:
    if score >= 80:
        return SimpleRating.EXCELLENT
    if score >= 70:
        return SimpleRating.GOOD
    if score >= 55:
        return SimpleRating.FAIR
    return SimpleRating.POOR
