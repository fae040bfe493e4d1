"""Tests for the green flag rules and GreenFlagAnalyzer."""

import pytest

from statement_interpreter.engines.context import StatementContext
from statement_interpreter.engines.green_flag_analyzer import (
    AggressiveBuybacksRule,
    ConservativeAccountingRule,
    ExpandingMarginsRule,
    GreenFlagAnalyzer,
    OperatingLeverageRule,
    SignificantBuybacksRule,
    SuperiorRoicRule,
)
from statement_interpreter.schemas.flags import GreenFlagId, Strength
from tests.fixtures.builders import B, distressed_company, healthy_company, make_statements


def _ctx(income=(), balance=(), cash_flow=()):
    return StatementContext(make_statements(income, balance, cash_flow))


class TestGreenFlagAnalyzer:

    def setup_method(self):
        self.analyzer = GreenFlagAnalyzer()

    def test_healthy_company_flags(self):
        flags = {f.flag.id for f in self.analyzer.analyze(healthy_company())}
        assert flags == {
            GreenFlagId.SUPERIOR_CASH_GENERATION,
            GreenFlagId.HIGH_FCF_MARGIN,
            GreenFlagId.COMPOUND_GROWTH_MACHINE,
            GreenFlagId.CAPITAL_LIGHT_GROWTH,
            GreenFlagId.FORTRESS_BALANCE_SHEET,
            GreenFlagId.CONSERVATIVE_LEVERAGE,
            GreenFlagId.STRONG_PRICING_POWER,
            GreenFlagId.AGGRESSIVE_BUYBACKS,
            GreenFlagId.SIGNIFICANT_BUYBACKS,
            GreenFlagId.SUSTAINABLE_DIVIDENDS,
            GreenFlagId.EXCEPTIONAL_ROE,
            GreenFlagId.HIGH_ROA,
            GreenFlagId.SUPERIOR_ROIC,
            GreenFlagId.DIVIDEND_GROWTH,
        }

    def test_ordered_by_strength(self):
        """Exceptional first, then strong, then good."""
        flags = self.analyzer.analyze(healthy_company())
        rank = {Strength.EXCEPTIONAL: 0, Strength.STRONG: 1, Strength.GOOD: 2}
        strengths = [rank[f.flag.strength] for f in flags]
        assert strengths == sorted(strengths)
        assert flags[0].flag.id == GreenFlagId.SUPERIOR_CASH_GENERATION
        assert flags[0].flag.title == "Superior Cash Generation"

    def test_distressed_company_has_none(self):
        assert self.analyzer.analyze(distressed_company()) == []

    def test_empty_statements_raise_nothing(self):
        assert self.analyzer.analyze(make_statements()) == []


class TestShareholderRules:

    def test_significant_buybacks_promoted_above_five_percent(self):
        """Buybacks above 5% of revenue are exceptional."""
        flag = SignificantBuybacksRule().evaluate(StatementContext(healthy_company()))
        assert flag.value == pytest.approx(6.0)
        assert flag.strength == Strength.EXCEPTIONAL

    def test_significant_buybacks_default_strength(self):
        flag = SignificantBuybacksRule().evaluate(_ctx(
            income=[{"revenue": 100 * B}],
            cash_flow=[{"stock_repurchased": -3 * B}],
        ))
        assert flag.value == pytest.approx(3.0)
        assert flag.strength == Strength.STRONG

    def test_aggressive_buybacks_compare_two_years_back(self):
        flag = AggressiveBuybacksRule().evaluate(StatementContext(healthy_company()))
        assert flag.value == pytest.approx(6.0)
        assert flag.technical_description == "Share count reduced 6.0% over 2 years"

    def test_aggressive_buybacks_short_history(self):
        """With fewer than three sheets the oldest one is the comparison."""
        flag = AggressiveBuybacksRule().evaluate(_ctx(balance=[
            {"shares_outstanding": 90}, {"shares_outstanding": 100},
        ]))
        assert flag.value == pytest.approx(10.0)


class TestProfitabilityRules:

    def test_expanding_margins(self):
        flag = ExpandingMarginsRule().evaluate(_ctx(income=[
            {"revenue": 100, "gross_profit": 46},
            {"revenue": 100, "gross_profit": 44},
            {"revenue": 100, "gross_profit": 40},
        ]))
        assert flag.value == pytest.approx(6.0)

    def test_operating_leverage(self):
        """Operating income growing 1.5x faster than revenue."""
        flag = OperatingLeverageRule().evaluate(_ctx(income=[
            {"revenue": 110, "operating_income": 13},
            {"revenue": 100, "operating_income": 10},
        ]))
        assert flag is not None
        assert flag.id == GreenFlagId.OPERATING_LEVERAGE

    def test_conservative_accounting(self):
        flag = ConservativeAccountingRule().evaluate(_ctx(
            income=[{"net_income": 10}],
            balance=[{"total_assets": 1000}],
            cash_flow=[{"operating_cash_flow": 11}],
        ))
        assert flag.value == pytest.approx(0.1)

    def test_superior_roic_uses_configured_tax_rate(self):
        """Without pre-tax income the configured rate sets NOPAT."""
        ctx = _ctx(
            income=[{"operating_income": 40}],
            balance=[{"total_shareholder_equity": 100, "long_term_debt": 100,
                      "cash_and_cash_equivalents": 0}],
        )
        assert SuperiorRoicRule(default_tax_rate=0.5).evaluate(ctx) is None
        assert SuperiorRoicRule(default_tax_rate=0.0).evaluate(ctx).value == pytest.approx(20.0)
