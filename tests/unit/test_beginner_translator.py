"""Tests for BeginnerTranslator — plain-English summaries and suitability."""

from statement_interpreter.engines.beginner_translator import (
    GREEN_FLAG_PHRASES,
    NO_CONCERNS,
    RED_FLAG_PHRASES,
    BeginnerTranslator,
    one_line_summary,
)
from statement_interpreter.engines.green_flag_analyzer import GreenFlagAnalyzer
from statement_interpreter.engines.health_scorer import HealthScorer
from statement_interpreter.engines.ratio_analyzer import RatioAnalyzer
from statement_interpreter.engines.red_flag_analyzer import RedFlagAnalyzer
from statement_interpreter.engines.trend_analyzer import TrendAnalyzer
from statement_interpreter.schemas.flags import GreenFlagId, RedFlagId
from statement_interpreter.schemas.health import HealthCategoryName, HealthScoreCategory
from statement_interpreter.schemas.report import SimpleRating
from tests.fixtures.builders import distressed_company, healthy_company


def translate(statements):
    red = RedFlagAnalyzer().analyze(statements)
    green = GreenFlagAnalyzer().analyze(statements)
    ratios = RatioAnalyzer().analyze(statements)
    trends = TrendAnalyzer().analyze(statements)
    health = HealthScorer().score(red, green, ratios, trends)
    return BeginnerTranslator().translate(health, red, green, ratios, trends)


def baseline_health(**update):
    return HealthScorer().score([], [], [], []).model_copy(update=update)


class TestPhraseTables:

    def test_every_flag_has_a_phrase(self):
        assert set(GREEN_FLAG_PHRASES) == set(GreenFlagId)
        assert set(RED_FLAG_PHRASES) == set(RedFlagId)

    def test_one_line_summary_bands(self):
        assert one_line_summary(92, "A").startswith("Exceptional company (A)")
        assert one_line_summary(80, "B+").startswith("Very healthy company (B+)")
        assert one_line_summary(55, "C-").startswith("Struggling company (C-)")
        assert one_line_summary(10, "F").startswith("Company in serious trouble (F)")


class TestHealthyTranslation:

    def setup_method(self):
        self.summary = translate(healthy_company())

    def test_one_line_summary(self):
        assert self.summary.one_line_summary == (
            "Exceptional company (A+) - Like finding a star athlete in peak condition."
        )
        assert self.summary.simple_rating == SimpleRating.EXCELLENT

    def test_health_description(self):
        assert self.summary.health_description == (
            "This company is financially strong and well-managed. "
            "The company excels in 6 key areas, showing competitive advantages. "
            "Financial safety is particularly strong."
        )

    def test_strengths_from_exceptional_flags(self):
        assert self.summary.top_three_strengths == [
            "Turns profits into real cash very efficiently",
            "Keeps a large share of sales as free cash",
            "Growing rapidly year after year like a snowball",
        ]

    def test_concerns_fall_back_to_poor_ratios(self):
        """With no red flags a poor ratio still surfaces, via the generic phrase."""
        assert "Weak Asset Turnover: 0.9" in self.summary.top_three_concerns

    def test_suits_every_style(self):
        suitability = self.summary.investment_suitability
        assert suitability.conservative
        assert suitability.growth
        assert suitability.value
        assert suitability.income


class TestDistressedTranslation:

    def setup_method(self):
        self.summary = translate(distressed_company())

    def test_concerns_lead_with_critical_flags(self):
        assert self.summary.top_three_concerns == [
            "Owes more than it owns - bankruptcy risk",
            "Can't pay bills coming due soon",
            "Losing money while deep in debt",
        ]

    def test_health_description(self):
        description = self.summary.health_description
        assert description.startswith(
            "This company is in poor financial health with serious problems. "
            "There are 4 critical issues requiring immediate attention."
        )
        assert description.endswith("Financial safety needs significant improvement.")

    def test_suits_nobody(self):
        suitability = self.summary.investment_suitability
        assert not any(
            [suitability.conservative, suitability.growth, suitability.value, suitability.income]
        )
        assert self.summary.simple_rating == SimpleRating.POOR


class TestTranslatorEdges:

    def setup_method(self):
        self.translator = BeginnerTranslator()

    def test_no_concerns_placeholder(self):
        assert self.translator.top_concerns([], [], []) == [NO_CONCERNS]

    def test_weakest_category_ties_resolve_to_later(self):
        """Equal weighted scores name the category listed later."""
        health = baseline_health()
        categories = [
            c if c.name not in (HealthCategoryName.EFFICIENCY, HealthCategoryName.SHAREHOLDER_VALUE)
            else HealthScoreCategory(name=c.name, score=40, weight=c.weight, factors=[])
            for c in health.categories
        ]
        description = self.translator.health_description(
            health.model_copy(update={"categories": categories}), [], []
        )
        assert description.endswith("Shareholder returns needs significant improvement.")

    def test_singular_critical_issue(self):
        red = [f for f in RedFlagAnalyzer().analyze(distressed_company())
               if f.flag.id == RedFlagId.INSOLVENCY_RISK]
        description = self.translator.health_description(baseline_health(overall=40), red, [])
        assert "There is 1 critical issue requiring immediate attention." in description
