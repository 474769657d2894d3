# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for FinancialCalculations

Covers the IRR solver (closed-form cases, undefined cases, fallback and
determinism) and the simple ratio helpers.
"""

import pytest
from pydantic import ValidationError

from structura.core import FinancialCalculations
from structura.core.primitives import IRRSolverSettings


class TestIRR:
    """Tests for calculate_irr."""

    @pytest.mark.parametrize(
        "outflow, inflow, years",
        [
            (1_000, 1_331, 3),
            (100, 200, 1),
            (250_000, 600_000, 5),
            (500_000, 1_000_000, 7),
        ],
    )
    def test_single_outflow_single_inflow_matches_closed_form(self, outflow, inflow, years):
        """IRR of -P at t=0 and +F at t=n equals (F/P)^(1/n) - 1."""
        flows = [-outflow] + [0] * (years - 1) + [inflow]
        expected = (inflow / outflow) ** (1 / years) - 1

        irr = FinancialCalculations.calculate_irr(flows)

        assert irr == pytest.approx(expected, abs=1e-6)

    def test_level_annuity(self):
        """A 10% coupon bond bought at par yields 10%."""
        flows = [-1_000, 100, 100, 100, 1_100]
        assert FinancialCalculations.calculate_irr(flows) == pytest.approx(0.10, abs=1e-6)

    def test_all_negative_is_undefined(self):
        assert FinancialCalculations.calculate_irr([-100, -50, -10]) is None

    def test_all_positive_is_undefined(self):
        assert FinancialCalculations.calculate_irr([100, 50, 10]) is None

    def test_never_recoups_is_undefined(self):
        """Every cumulative sum stays negative: no real IRR to report."""
        assert FinancialCalculations.calculate_irr([-1_000, 10, 10, 10]) is None

    def test_too_few_flows_is_undefined(self):
        assert FinancialCalculations.calculate_irr([-1_000]) is None
        assert FinancialCalculations.calculate_irr([]) is None

    def test_non_finite_flows_are_undefined(self):
        assert FinancialCalculations.calculate_irr([-1_000, float("inf")]) is None

    def test_deterministic(self):
        """Identical input yields an identical rate."""
        flows = [-337_000, 26_400, 28_800, 31_200, 33_800, 840_000]
        first = FinancialCalculations.calculate_irr(flows)
        second = FinancialCalculations.calculate_irr(flows)
        assert first == second

    def test_bisection_fallback_when_newton_hits_iteration_cap(self):
        """A one-iteration cap forces the bisection path, which still converges."""
        settings = IRRSolverSettings(max_iterations=1)
        irr = FinancialCalculations.calculate_irr([-1_000, 0, 0, 1_728], settings)
        assert irr == pytest.approx(0.20, abs=1e-6)

    def test_high_return_inside_widened_band(self):
        """A 500% single-year return is found inside the default band."""
        irr = FinancialCalculations.calculate_irr([-100, 600])
        assert irr == pytest.approx(5.0, abs=1e-6)

    def test_root_outside_narrowed_band_is_undefined(self):
        """Newton finds 500%, but a band capped at 100% rejects it and brackets nothing."""
        settings = IRRSolverSettings(upper_bound=1.0)
        assert FinancialCalculations.calculate_irr([-100, 600], settings) is None


class TestIRRSolverSettings:
    """Validation of the solver configuration."""

    def test_inverted_band_rejected(self):
        with pytest.raises(ValidationError):
            IRRSolverSettings(lower_bound=0.5, upper_bound=0.1, guess=0.2)

    def test_guess_outside_band_rejected(self):
        with pytest.raises(ValidationError):
            IRRSolverSettings(lower_bound=-0.5, upper_bound=1.0, guess=2.0)


class TestRatios:
    """Tests for multiples, coverage and NPV."""

    def test_equity_multiple(self):
        assert FinancialCalculations.calculate_equity_multiple(
            [-1_000, 100, 100, 1_300]
        ) == pytest.approx(1.5)

    def test_equity_multiple_without_investment(self):
        assert FinancialCalculations.calculate_equity_multiple([100, 100]) is None
        assert FinancialCalculations.calculate_equity_multiple([]) is None

    def test_dscr_undefined_without_debt_service(self):
        """Zero debt service means undefined coverage, not zero or infinity."""
        assert FinancialCalculations.calculate_dscr(79_500, 0) is None

    def test_dscr(self):
        assert FinancialCalculations.calculate_dscr(120_000, 100_000) == pytest.approx(1.2)

    def test_cash_on_cash_without_equity(self):
        assert FinancialCalculations.calculate_cash_on_cash(10_000, 0) is None

    def test_annualized_return(self):
        assert FinancialCalculations.calculate_annualized_return(1.21, 2) == pytest.approx(0.10)
        assert FinancialCalculations.calculate_annualized_return(None, 5) is None

    def test_npv_at_irr_is_zero(self):
        flows = [-1_000, 0, 0, 1_331]
        assert FinancialCalculations.calculate_npv(flows, 0.10) == pytest.approx(0.0, abs=1e-6)
