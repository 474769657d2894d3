# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for core financial metrics. These functions are pure
(math-only) and operate on annual cash-flow sequences indexed from year 0;
other modules should delegate to these to ensure a single source of truth for
financial calculations. Rates here are decimals (0.15 for 15%).
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from pyxirr import npv
from scipy.optimize import bisect, newton

from .primitives import IRRSolverSettings

logger = logging.getLogger(__name__)


def _as_flows(cash_flows: Sequence[float]) -> np.ndarray:
    return np.asarray(list(cash_flows), dtype=float)


def _npv_at(flows: np.ndarray, rate: float) -> float:
    periods = np.arange(flows.size)
    return float(flows @ np.power(1.0 + rate, -periods))


def _npv_derivative_at(flows: np.ndarray, rate: float) -> float:
    periods = np.arange(flows.size)
    return float(-(periods * flows) @ np.power(1.0 + rate, -periods - 1.0))


def _newton_irr(flows: np.ndarray, settings: IRRSolverSettings) -> Optional[float]:
    """Newton-Raphson on NPV(r); None when it stalls, fails to converge or leaves the band."""
    try:
        with np.errstate(all="ignore"):
            rate = newton(
                lambda r: _npv_at(flows, r),
                settings.guess,
                fprime=lambda r: _npv_derivative_at(flows, r),
                tol=settings.tolerance,
                maxiter=settings.max_iterations,
            )
    except RuntimeError as e:
        logger.debug(f"IRR Newton did not converge: {e}")
        return None

    rate = float(rate)
    if not np.isfinite(rate) or not (settings.lower_bound < rate < settings.upper_bound):
        logger.debug(f"IRR Newton converged outside the solver band (rate={rate:.6f})")
        return None
    return rate


def _bisection_irr(flows: np.ndarray, settings: IRRSolverSettings) -> Optional[float]:
    """Bisection over the plausible band; None when the band brackets no root."""
    low, high = settings.lower_bound, settings.upper_bound
    npv_low, npv_high = _npv_at(flows, low), _npv_at(flows, high)
    if npv_low == 0.0:
        return low
    if npv_high == 0.0:
        return high
    if np.sign(npv_low) == np.sign(npv_high):
        logger.debug("IRR bisection band does not bracket a root")
        return None

    try:
        return float(
            bisect(
                lambda r: _npv_at(flows, r),
                low,
                high,
                xtol=settings.bisection_tolerance,
                maxiter=settings.bisection_max_iterations,
            )
        )
    except RuntimeError:
        logger.debug("IRR bisection failed to converge")
        return None


class FinancialCalculations:
    """
    Pure mathematical functions for financial calculations.

    Static methods for core financial metrics, independent of deal structure
    or business logic.
    """

    @staticmethod
    def calculate_irr(
        cash_flows: Sequence[float], settings: Optional[IRRSolverSettings] = None
    ) -> Optional[float]:
        """
        Calculate Internal Rate of Return for an annual cash-flow series.

        `scipy.optimize.newton` from `settings.guess` with the analytic NPV
        derivative; if the derivative vanishes, the iteration cap is reached or
        the root lands outside the plausible band, the solver falls back to
        bisection over the band.

        Args:
            cash_flows: Annual flows, index 0 = initial outflow (negative),
                        terminal year including exit proceeds.
            settings: Solver configuration; defaults to `IRRSolverSettings()`.

        Returns:
            IRR as decimal (e.g., 0.15 for 15%) or None if undefined

        Edge Cases Handled:
            - Fewer than two flows → None
            - No sign change (all negative / all positive) → None
            - Investment never recoups (every cumulative sum negative) → None
            - Non-finite values → None
            - Neither Newton nor bisection finds a root in the band → None

        Example:
            ```python
            irr = FinancialCalculations.calculate_irr([-1000, 100, 100, 1200])
            print(f"IRR: {irr:.2%}")  # IRR: 12.94%
            ```
        """
        settings = settings or IRRSolverSettings()
        flows = _as_flows(cash_flows)

        if flows.size < 2 or not np.all(np.isfinite(flows)):
            return None

        has_negative = (flows < 0).any()
        has_positive = (flows > 0).any()
        if not (has_negative and has_positive):
            return None  # Need both investments and returns

        if (np.cumsum(flows) < 0).all():
            return None  # Never recoups

        rate = _newton_irr(flows, settings)
        if rate is None:
            rate = _bisection_irr(flows, settings)
        return rate

    @staticmethod
    def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> Optional[float]:
        """
        Calculate Net Present Value of an annual series using PyXIRR.

        Args:
            cash_flows: Annual flows starting at year 0 (undiscounted)
            discount_rate: Annual discount rate as decimal (e.g., 0.10 for 10%)

        Returns:
            NPV as float or None if cannot calculate
        """
        flows = _as_flows(cash_flows)
        if flows.size == 0 or discount_rate <= -1:
            return None
        return float(npv(discount_rate, flows.tolist()))

    @staticmethod
    def calculate_equity_multiple(cash_flows: Sequence[float]) -> Optional[float]:
        """
        Calculate equity multiple (total returns / initial investment).

        Returns are every flow after year 0, net of any later negative years.

        Returns:
            Multiple as float (e.g., 2.5 for 2.5x) or None when the series
            does not start with an investment
        """
        flows = _as_flows(cash_flows)
        if flows.size == 0 or flows[0] >= 0:
            return None
        return float(flows[1:].sum() / -flows[0])

    @staticmethod
    def calculate_dscr(noi: float, debt_service: float) -> Optional[float]:
        """
        Calculate Debt Service Coverage Ratio (NOI / annual debt service).

        Returns None when there is no debt service: coverage is undefined,
        which is distinct from both zero and infinity.
        """
        if debt_service <= 0:
            return None
        return noi / debt_service

    @staticmethod
    def calculate_cash_on_cash(cash_flow: float, equity: float) -> Optional[float]:
        """Annual cash flow / equity invested, or None with no equity."""
        if equity <= 0:
            return None
        return cash_flow / equity

    @staticmethod
    def calculate_annualized_return(equity_multiple: Optional[float], years: int) -> Optional[float]:
        """Compound annual return implied by an equity multiple over `years`."""
        if equity_multiple is None or equity_multiple <= 0 or years <= 0:
            return None
        return equity_multiple ** (1.0 / years) - 1.0
