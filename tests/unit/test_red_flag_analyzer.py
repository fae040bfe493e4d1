"""Tests for the red flag rules and RedFlagAnalyzer."""

import pytest

from statement_interpreter.engines.context import StatementContext
from statement_interpreter.engines.red_flag_analyzer import (
    CashBurnLeveragedRule,
    GrossMarginCompressionRule,
    InsolvencyRule,
    InventoryBuildupRule,
    LiquidityCrisisRule,
    LiquidityWarningRule,
    NEGATIVE_EQUITY_LEVERAGE,
    PoorEarningsQualityRule,
    ReceivablesQualityRule,
    RedFlagAnalyzer,
    RisingCapitalIntensityRule,
    UnsustainableDividendRule,
)
from statement_interpreter.engines.health_scorer import HealthScorer
from statement_interpreter.schemas.flags import RedFlagId, Severity
from statement_interpreter.schemas.health import HealthCategoryName
from tests.fixtures.builders import B, distressed_company, healthy_company, make_statements


def _ctx(income=(), balance=(), cash_flow=()):
    return StatementContext(make_statements(income, balance, cash_flow))


class TestRedFlagAnalyzer:
    """Whole-registry behaviour."""

    def setup_method(self):
        self.analyzer = RedFlagAnalyzer()

    def test_healthy_company_has_no_red_flags(self):
        assert self.analyzer.analyze(healthy_company()) == []

    def test_distressed_company_flags_in_severity_order(self):
        """Severity first, registry order within a severity."""
        flags = self.analyzer.analyze(distressed_company())
        assert [f.flag.id for f in flags] == [
            RedFlagId.INSOLVENCY_RISK,
            RedFlagId.LIQUIDITY_CRISIS,
            RedFlagId.CASH_BURN_LEVERAGED,
            RedFlagId.NEGATIVE_GROSS_MARGIN,
            RedFlagId.UNSUSTAINABLE_DEBT_SERVICE,
            RedFlagId.DILUTION_TREADMILL,
            RedFlagId.WEAK_INTEREST_COVERAGE,
            RedFlagId.HIGH_ACCRUALS,
            RedFlagId.MARGIN_COMPRESSION_TREND,
        ]
        severities = [f.flag.severity for f in flags]
        assert severities[:4] == [Severity.CRITICAL] * 4
        assert severities[4:6] == [Severity.HIGH] * 2
        assert severities[6:] == [Severity.MEDIUM] * 3

    def test_flags_carry_data_used(self):
        flags = self.analyzer.analyze(distressed_company())
        insolvency = flags[0]
        assert insolvency.data_used == ["Total Assets", "Total Liabilities"]
        assert insolvency.flag.title == "Insolvency Risk - Negative Equity"
        assert insolvency.flag.technical_description == (
            "Liabilities exceed assets by $15.00B (18.8%)"
        )

    def test_empty_statements_raise_nothing(self):
        """Rules skip silently when their inputs are absent."""
        assert self.analyzer.analyze(make_statements()) == []

    def test_custom_rule_registry(self):
        analyzer = RedFlagAnalyzer(rules=[LiquidityWarningRule()])
        assert analyzer.analyze(distressed_company()) == []


class TestSolvencyAndLiquidityRules:

    def test_insolvency_deficit(self):
        """Liabilities 120B against assets 100B: a 20B (20%) deficit."""
        flag = InsolvencyRule().evaluate(
            _ctx(balance=[{"total_liabilities": 120 * B, "total_assets": 100 * B}])
        )
        assert flag.severity == Severity.CRITICAL
        assert flag.technical_description == "Liabilities exceed assets by $20.00B (20.0%)"
        assert flag.value == pytest.approx(120 * B)
        assert flag.threshold == pytest.approx(100 * B)

    def test_insolvency_costs_forty_stability_points(self):
        statements = make_statements(
            balance=[{"total_liabilities": 120 * B, "total_assets": 100 * B}]
        )
        red = RedFlagAnalyzer().analyze(statements)
        assert [f.flag.id for f in red] == [RedFlagId.INSOLVENCY_RISK]
        stability = HealthScorer().score(red, [], [], []).category(
            HealthCategoryName.FINANCIAL_STABILITY
        )
        assert stability.score == 75 - 40
        assert "Insolvency risk" in stability.factors

    def test_liquidity_crisis_when_cash_flow_cannot_cover_gap(self):
        """Current ratio 0.83 with a $10 gap: OCF up to 10 still flags."""
        balance = [{"current_assets": 50, "current_liabilities": 60}]
        for ocf in (5, 10):
            flag = LiquidityCrisisRule().evaluate(
                _ctx(balance=balance, cash_flow=[{"operating_cash_flow": ocf}])
            )
            assert flag.id == RedFlagId.LIQUIDITY_CRISIS
            assert flag.severity == Severity.CRITICAL
            assert flag.value == pytest.approx(50 / 60)
            assert flag.technical_description == (
                "Current ratio: 0.83, Working capital deficit: $10"
            )

    def test_no_liquidity_crisis_when_cash_flow_covers_gap(self):
        flag = LiquidityCrisisRule().evaluate(_ctx(
            balance=[{"current_assets": 50, "current_liabilities": 60}],
            cash_flow=[{"operating_cash_flow": 11}],
        ))
        assert flag is None

    def test_liquidity_crisis_prefers_ttm_cash_flow(self):
        """A weak TTM figure overrides a covering annual one."""
        flag = LiquidityCrisisRule().evaluate(StatementContext(make_statements(
            balance=[{"current_assets": 50, "current_liabilities": 60}],
            cash_flow=[{"operating_cash_flow": 20}],
            cash_flow_ttm={"operating_cash_flow": 5},
        )))
        assert flag.id == RedFlagId.LIQUIDITY_CRISIS

    def test_liquidity_crisis_falls_back_to_net_income(self):
        balance = [{"current_assets": 50, "current_liabilities": 60}]
        assert LiquidityCrisisRule().evaluate(
            _ctx(income=[{"net_income": 5}], balance=balance)
        ) is not None
        assert LiquidityCrisisRule().evaluate(
            _ctx(income=[{"net_income": 20}], balance=balance)
        ) is None

    def test_liquidity_crisis_needs_some_cash_measure(self):
        flag = LiquidityCrisisRule().evaluate(
            _ctx(balance=[{"current_assets": 50, "current_liabilities": 60}])
        )
        assert flag is None

    def test_liquidity_warning_band(self):
        """Current ratio in [1, 1.2) is a warning."""
        flag = LiquidityWarningRule().evaluate(
            _ctx(balance=[{"current_assets": 110, "current_liabilities": 100}])
        )
        assert flag.id == RedFlagId.LIQUIDITY_WARNING
        assert flag.value == pytest.approx(1.1)
        assert flag.threshold == 1.2

    def test_liquidity_warning_not_below_one(self):
        flag = LiquidityWarningRule().evaluate(
            _ctx(balance=[{"current_assets": 90, "current_liabilities": 100}])
        )
        assert flag is None

    def test_cash_burn_negative_equity_sentinel(self):
        """Negative equity reports the sentinel leverage and a cash runway."""
        flag = CashBurnLeveragedRule().evaluate(StatementContext(distressed_company()))
        assert flag.value == NEGATIVE_EQUITY_LEVERAGE
        assert flag.recommendation.startswith("Cash runway: 5.0 months.")


class TestProfitabilityRules:

    def test_gross_margin_compression(self):
        flag = GrossMarginCompressionRule().evaluate(_ctx(income=[
            {"revenue": 100, "gross_profit": 30},
            {"revenue": 100, "gross_profit": 40},
        ]))
        assert flag.value == pytest.approx(10.0)
        assert flag.severity == Severity.HIGH

    def test_gross_margin_compression_defers_to_negative_margin(self):
        flag = GrossMarginCompressionRule().evaluate(_ctx(income=[
            {"revenue": 100, "gross_profit": -5},
            {"revenue": 100, "gross_profit": 40},
        ]))
        assert flag is None

    def test_poor_earnings_quality(self):
        flag = PoorEarningsQualityRule().evaluate(_ctx(
            income=[{"net_income": 100}],
            cash_flow=[{"operating_cash_flow": 50}],
        ))
        assert flag.value == pytest.approx(0.5)

    def test_poor_earnings_quality_ignores_losses(self):
        flag = PoorEarningsQualityRule().evaluate(_ctx(
            income=[{"net_income": -100}],
            cash_flow=[{"operating_cash_flow": -150}],
        ))
        assert flag is None


class TestWorkingCapitalRules:

    def test_receivables_outpacing_revenue(self):
        flag = ReceivablesQualityRule().evaluate(_ctx(
            income=[{"revenue": 110}, {"revenue": 100}],
            balance=[{"net_receivables": 150}, {"net_receivables": 100}],
        ))
        assert flag.value == pytest.approx(50.0)
        assert flag.threshold == pytest.approx(20.0)

    def test_inventory_buildup(self):
        flag = InventoryBuildupRule().evaluate(_ctx(
            income=[{"revenue": 110}, {"revenue": 100}],
            balance=[{"inventory": 150}, {"inventory": 100}],
        ))
        assert flag.value == pytest.approx(50.0)
        assert flag.threshold == pytest.approx(25.0)

    def test_inventory_in_line_with_revenue(self):
        flag = InventoryBuildupRule().evaluate(_ctx(
            income=[{"revenue": 110}, {"revenue": 100}],
            balance=[{"inventory": 115}, {"inventory": 100}],
        ))
        assert flag is None

    def test_rising_capital_intensity(self):
        flag = RisingCapitalIntensityRule().evaluate(_ctx(
            income=[{"revenue": 105}, {"revenue": 100}],
            cash_flow=[{"capital_expenditures": -10}, {"capital_expenditures": -5}],
        ))
        assert flag.value == pytest.approx(10 / 105 * 100)
        assert flag.threshold == pytest.approx(7.0)


class TestDividendRule:

    def test_dividend_above_free_cash_flow(self):
        flag = UnsustainableDividendRule().evaluate(_ctx(cash_flow=[{
            "operating_cash_flow": 100, "capital_expenditures": -60, "dividends_paid": -50,
        }]))
        assert flag.value == pytest.approx(125.0)
        assert flag.technical_description == "Payout ratio: 125% of FCF"

    def test_dividend_of_twelve_against_fcf_of_eight(self):
        flag = UnsustainableDividendRule().evaluate(_ctx(cash_flow=[{
            "free_cash_flow": 8, "dividends_paid": -12,
        }]))
        assert flag.value == pytest.approx(150.0)
        assert flag.technical_description == "Payout ratio: 150% of FCF"

    def test_unsustainable_dividend_lowers_shareholder_value(self):
        red = RedFlagAnalyzer().analyze(
            make_statements(cash_flow=[{"free_cash_flow": 8, "dividends_paid": -12}])
        )
        assert [f.flag.id for f in red] == [RedFlagId.UNSUSTAINABLE_DIVIDEND]
        shareholder = HealthScorer().score(red, [], [], []).category(
            HealthCategoryName.SHAREHOLDER_VALUE
        )
        assert shareholder.score == 50 - 15
        assert "Unsustainable dividend" in shareholder.factors

    def test_covered_dividend(self):
        flag = UnsustainableDividendRule().evaluate(_ctx(cash_flow=[{
            "operating_cash_flow": 100, "capital_expenditures": -20, "dividends_paid": -50,
        }]))
        assert flag is None
