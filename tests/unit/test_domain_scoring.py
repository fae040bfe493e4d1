"""Unit tests for domain.scoring and the ratio benchmark table."""

import pytest

from statement_interpreter.domain.benchmarks import RATIO_DEFINITIONS
from statement_interpreter.domain.scoring import (
    CATEGORY_BASELINES,
    CATEGORY_WEIGHTS,
    GRADE_LADDER,
    grade_for_score,
    overall_score,
    simple_rating,
)
from statement_interpreter.schemas.health import HealthCategoryName
from statement_interpreter.schemas.ratios import RatioScore
from statement_interpreter.schemas.report import SimpleRating


class TestCategoryWeights:
    def test_weights_sum_to_100(self):
        assert sum(CATEGORY_WEIGHTS.values()) == 100

    def test_every_category_weighted_and_baselined(self):
        assert set(CATEGORY_WEIGHTS) == set(HealthCategoryName)
        assert set(CATEGORY_BASELINES) == set(HealthCategoryName)


class TestGradeForScore:
    @pytest.mark.parametrize(
        "score,grade",
        [
            (100, "A+"), (95, "A+"), (94.9, "A"), (90, "A"), (85, "A-"),
            (80, "B+"), (75, "B"), (70, "B-"), (65, "C+"), (60, "C"),
            (55, "C-"), (50, "D"), (49.9, "F"), (0, "F"),
        ],
    )
    def test_ladder(self, score, grade):
        assert grade_for_score(score) == grade

    def test_ladder_is_total(self):
        """Every integer score maps to exactly one known grade."""
        grades = {g for _, g in GRADE_LADDER} | {"F"}
        for score in range(0, 101):
            assert grade_for_score(score) in grades


class TestOverallScore:
    def test_uniform_scores(self):
        assert overall_score({name: 80 for name in CATEGORY_WEIGHTS}) == 80

    def test_baselines_give_c_minus(self):
        """Neutral input: 50/50/75/50/50 weighted is 56.25."""
        overall = overall_score(dict(CATEGORY_BASELINES))
        assert overall == 56
        assert grade_for_score(overall) == "C-"

    def test_weighted(self):
        scores = {
            HealthCategoryName.PROFITABILITY: 100,
            HealthCategoryName.GROWTH: 0,
            HealthCategoryName.FINANCIAL_STABILITY: 100,
            HealthCategoryName.EFFICIENCY: 0,
            HealthCategoryName.SHAREHOLDER_VALUE: 0,
        }
        assert overall_score(scores) == 50

    def test_half_rounds_up(self):
        scores = {name: 0 for name in CATEGORY_WEIGHTS}
        scores[HealthCategoryName.GROWTH] = 2.5  # 0.5 weighted
        assert overall_score(scores) == 1


class TestSimpleRating:
    @pytest.mark.parametrize(
        "score,rating",
        [
            (80, SimpleRating.EXCELLENT),
            (79, SimpleRating.GOOD),
            (70, SimpleRating.GOOD),
            (55, SimpleRating.FAIR),
            (54, SimpleRating.POOR),
        ],
    )
    def test_bands(self, score, rating):
        assert simple_rating(score) == rating


class TestBenchmarks:
    def test_higher_is_better_band(self):
        bench = RATIO_DEFINITIONS["current_ratio"].benchmark
        assert bench.band(2.5) == RatioScore.EXCELLENT
        assert bench.band(1.7) == RatioScore.GOOD
        assert bench.band(1.0) == RatioScore.FAIR
        assert bench.band(0.8) == RatioScore.POOR

    def test_lower_is_better_band(self):
        bench = RATIO_DEFINITIONS["debt_to_equity"].benchmark
        assert bench.band(0.2) == RatioScore.EXCELLENT
        assert bench.band(0.9) == RatioScore.GOOD
        assert bench.band(1.8) == RatioScore.FAIR
        assert bench.band(2.5) == RatioScore.POOR

    def test_receivables_turnover_matches_collection_days(self):
        """Turnover bands line up with the 30/45/60 day collection bands."""
        turnover = RATIO_DEFINITIONS["receivables_turnover"].benchmark
        days = RATIO_DEFINITIONS["days_sales_outstanding"].benchmark
        for d in (25, 40, 55, 75):
            assert turnover.band(365 / d) == days.band(d)
