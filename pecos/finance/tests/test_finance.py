"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Financial Math
════════════════════════════════════════════════════════════════════════════════════════════════════

COCOMO, function points, ROI/NPV/IRR/payback, correlation and sensitivity.
"""

import math

import pytest

from pecos.finance import (
    CocomoMode,
    IRRResult,
    cocomo,
    correlation,
    function_points,
    irr,
    irr_with_status,
    npv,
    payback_period,
    roi,
    sensitivity_analysis,
)


class TestCocomo:
    """Basic COCOMO estimates."""

    def test_zero_lines_gives_zero(self):
        estimate = cocomo(0)
        assert estimate.effort == 0
        assert estimate.cost == 0
        assert estimate.duration == 0

    def test_cost_is_monotonic_in_size(self):
        sizes = [1000, 5000, 10000, 50000]
        costs = [cocomo(s).cost for s in sizes]
        assert costs == sorted(costs)
        assert len(set(costs)) == len(costs)

    def test_semidetached_formula(self):
        estimate = cocomo(10000, CocomoMode.SEMIDETACHED, hourly_rate=100)
        effort = 3.0 * 10 ** 1.12
        assert estimate.effort == pytest.approx(effort)
        assert estimate.duration == pytest.approx(2.5 * effort ** 0.35)
        assert estimate.cost == pytest.approx(effort * 160 * 100)

    def test_mode_accepts_string(self):
        assert cocomo(8000, "embedded").effort == pytest.approx(3.6 * 8 ** 1.2)

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            cocomo(8000, "agile")


class TestFunctionPoints:
    def test_default_counts(self):
        # 10·4 + 8·5 + 5·4 + 3·10 + 2·7 = 144 FP
        estimate = function_points(10, 8, 5, 3, 2)
        assert estimate.function_points == 144
        assert estimate.effort == 144 * 7
        assert estimate.cost == pytest.approx(144 * 7 * 75)

    def test_complexity_factor_scales(self):
        base = function_points(10, 8, 5, 3, 2)
        adjusted = function_points(10, 8, 5, 3, 2, complexity_factor=1.2)
        assert adjusted.cost == pytest.approx(base.cost * 1.2)


class TestInvestmentMetrics:
    """ROI, NPV, IRR and payback."""

    def test_roi(self):
        assert roi(150, 100) == pytest.approx(50.0)
        assert roi(50, 100) == pytest.approx(-50.0)

    def test_roi_zero_cost(self):
        assert roi(100, 0) == 0.0

    def test_npv_discounts_first_flow_one_period(self):
        assert npv([110], 0.1, 100) == pytest.approx(0.0)

    def test_npv_zero_rate_is_sum(self):
        assert npv([30, 30, 30], 0.0, 100) == pytest.approx(-10.0)

    def test_irr_round_trip(self):
        flows = [50, 50, 50]
        rate = irr(flows, 100)
        assert abs(npv(flows, rate / 100, 100)) < 0.02

    def test_irr_status_converged(self):
        result = irr_with_status([60, 60], 100)
        assert isinstance(result, IRRResult)
        assert result.converged
        assert abs(npv([60, 60], result.rate / 100, 100)) < 0.02

    def test_irr_flat_npv_stops_at_initial_guess(self):
        result = irr_with_status([0, 0, 0], 100)
        assert not result.converged
        assert result.iterations == 0
        assert result.rate == pytest.approx(10.0)

    def test_irr_iteration_cap(self):
        result = irr_with_status([50, 50, 50], 100, max_iterations=1)
        assert result.iterations <= 1
        assert math.isfinite(result.rate)

    def test_irr_matches_status_rate(self):
        flows = [30, 40, 50]
        assert irr(flows, 90) == irr_with_status(flows, 90).rate

    def test_payback_interpolates(self):
        assert payback_period([40, 40, 40], 100) == pytest.approx(2.5)

    def test_payback_first_period(self):
        assert payback_period([200], 100) == pytest.approx(0.5)

    def test_payback_never_recovered(self):
        assert payback_period([10, 10], 100) == 2.0

    def test_payback_zero_investment(self):
        assert payback_period([0, 10], 0) == 0.0


class TestCorrelation:
    def test_perfect_positive(self):
        assert correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert correlation([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_empty_and_constant(self):
        assert correlation([], []) == 0.0
        assert correlation([1, 1, 1], [1, 2, 3]) == 0.0


class TestSensitivity:
    """One-at-a-time sensitivity."""

    def test_linear_parameter_has_unit_sensitivity(self):
        results = sensitivity_analysis({"a": 10.0, "b": 5.0}, lambda p: p["a"] * p["b"])
        assert results["a"].sensitivity == pytest.approx(1.0)
        assert results["a"].increase == pytest.approx(60.0)
        assert results["a"].decrease == pytest.approx(40.0)

    def test_unused_parameter_is_zero(self):
        results = sensitivity_analysis({"a": 10.0, "b": 5.0}, lambda p: p["a"])
        assert results["b"].sensitivity == 0.0

    def test_zero_base_result(self):
        results = sensitivity_analysis({"a": 0.0}, lambda p: p["a"])
        assert results["a"].sensitivity == 0.0

    def test_base_parameters_untouched(self):
        base = {"a": 1.0}
        sensitivity_analysis(base, lambda p: p["a"] * 2)
        assert base == {"a": 1.0}
