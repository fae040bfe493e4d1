"""Unit tests for financial math utilities."""

import pytest

from statement_interpreter.utils.financial_math import (
    cagr,
    clamp,
    growth_rate,
    margin,
    period_average,
    population_stdev,
    round_half_up,
    safe_ratio,
)


# ── growth_rate ──────────────────────────────────────────────────────────

class TestGrowthRate:
    def test_positive_growth(self):
        assert growth_rate(115, 100) == 15.0

    def test_negative_growth(self):
        assert growth_rate(85, 100) == -15.0

    def test_zero_base_returns_none(self):
        assert growth_rate(100, 0) is None

    def test_negative_to_positive(self):
        # relative to |previous|
        assert growth_rate(50, -100) == 150.0

    def test_both_negative(self):
        assert growth_rate(-50, -100) == 50.0


# ── margin / safe_ratio ──────────────────────────────────────────────────

class TestMargin:
    def test_basic_margin(self):
        assert margin(30, 100) == 30.0

    def test_zero_denominator_returns_none(self):
        assert margin(30, 0) is None


class TestSafeRatio:
    def test_quotient(self):
        assert safe_ratio(3, 2) == 1.5

    @pytest.mark.parametrize("num,den", [(None, 2), (2, None), (1, 0)])
    def test_undefined(self, num, den):
        assert safe_ratio(num, den) is None


# ── averages and dispersion ──────────────────────────────────────────────

class TestPeriodAverage:
    def test_two_periods(self):
        assert period_average(100, 80) == 90.0

    def test_no_prior_period_uses_current(self):
        assert period_average(100, None) == 100


class TestPopulationStdev:
    def test_known_value(self):
        assert population_stdev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_constant_series(self):
        assert population_stdev([5, 5, 5]) == 0.0

    def test_empty(self):
        assert population_stdev([]) == 0.0


# ── cagr ─────────────────────────────────────────────────────────────────

class TestCagr:
    def test_ten_percent(self):
        assert cagr(100, 121, 2) == pytest.approx(10.0)

    def test_decline(self):
        assert cagr(100, 81, 2) == pytest.approx(-10.0)

    def test_non_positive_start(self):
        assert cagr(0, 100, 2) is None
        assert cagr(-5, 100, 2) is None

    def test_non_positive_end(self):
        assert cagr(100, -1, 2) is None

    def test_zero_span(self):
        assert cagr(100, 110, 0) is None


# ── clamp / rounding ─────────────────────────────────────────────────────

class TestClampAndRound:
    def test_clamp_bounds(self):
        assert clamp(120) == 100.0
        assert clamp(-4) == 0.0
        assert clamp(42.5) == 42.5

    def test_round_half_up(self):
        assert round_half_up(72.5) == 73
        assert round_half_up(72.49) == 72
        # differs from banker's rounding
        assert round_half_up(56.5) == 57
