"""Tests for StatementValidator."""

import pytest

from statement_interpreter.engines.statement_validator import StatementValidator
from statement_interpreter.errors import InsufficientDataError, InterpreterError
from tests.fixtures.builders import healthy_balance, healthy_cash_flow, healthy_income, make_statements


class TestStatementValidator:
    def setup_method(self):
        self.validator = StatementValidator()

    def test_five_years_no_warnings(self, healthy, fixed_now):
        """Full history yields a clean data-quality record."""
        quality = self.validator.validate(healthy, as_of=fixed_now)

        assert quality.completeness == 100
        assert quality.warnings == []
        assert quality.historical_depth.annual == 5
        assert quality.historical_depth.quarterly == 0
        assert quality.fiscal_year_end == "2024-12-31"

    def test_last_updated_falls_back_to_clock(self, healthy, fixed_now):
        quality = self.validator.validate(healthy, as_of=fixed_now)
        assert quality.last_updated == fixed_now.isoformat()

    def test_last_updated_prefers_statement_timestamp(self, acme, fixed_now):
        quality = self.validator.validate(acme, as_of=fixed_now)
        assert quality.last_updated == "2025-02-14T00:00:00Z"

    def test_short_history_warns(self, acme, fixed_now):
        """Three years is enough to analyse but below the preferred depth."""
        quality = self.validator.validate(acme, as_of=fixed_now)
        assert quality.warnings == [
            "Limited historical data (3 years) - ideally need 5+ years for reliable trends"
        ]

    def test_data_points_count_populated_annual_fields(self):
        statements = make_statements(
            income=[{"revenue": 1.0}, {"revenue": 2.0}],
            balance=[{"total_assets": 1.0}],
            cash_flow=[{"operating_cash_flow": 1.0}],
        )
        quality = self.validator.validate(statements)
        # each period also carries date + fiscal_year
        assert quality.data_points == 3 * 2 + 1 * 3 + 1 * 3

    def test_single_year_rejected(self):
        statements = make_statements(
            healthy_income()[:1], healthy_balance()[:1], healthy_cash_flow()[:1]
        )
        with pytest.raises(InsufficientDataError, match="Insufficient historical data"):
            self.validator.validate(statements)

    def test_missing_collections_named(self):
        statements = make_statements(income=healthy_income())
        with pytest.raises(InsufficientDataError) as exc_info:
            self.validator.validate(statements)
        assert exc_info.value.missing == ["balanceSheets", "cashFlowStatements"]

    def test_error_is_interpreter_error(self):
        with pytest.raises(InterpreterError):
            self.validator.validate(make_statements())

    def test_thresholds_configurable(self, acme):
        strict = StatementValidator(min_annual_periods=4)
        with pytest.raises(InsufficientDataError):
            strict.validate(acme)

        relaxed = StatementValidator(preferred_annual_periods=3)
        assert relaxed.validate(acme).warnings == []
