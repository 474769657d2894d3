# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Loan amortization calculations"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd
from pydantic import Field
from pyxirr import pmt

from ..core.primitives import Model, Percentage, PositiveFloat


def _amortization_months(amortization_years: float) -> int:
    return int(round(amortization_years * 12))


def monthly_payment(principal: float, annual_rate: float, amortization_years: float) -> float:
    """
    Level monthly payment (P&I) for a loan.

    Args:
        principal: Loan amount
        annual_rate: Annual interest rate in percent (6.5 for 6.5%)
        amortization_years: Amortization term; 0 means interest-only

    Returns:
        Monthly payment; interest-only when the term is 0, straight-line
        principal when the rate is 0.
    """
    if principal <= 0:
        return 0.0
    monthly_rate = annual_rate / 100 / 12
    periods = _amortization_months(amortization_years)
    if periods == 0:
        return principal * monthly_rate
    if monthly_rate == 0:
        return principal / periods
    return float(pmt(monthly_rate, periods, principal)) * -1


def annual_debt_service(principal: float, annual_rate: float, amortization_years: float) -> float:
    """Twelve level monthly payments."""
    return monthly_payment(principal, annual_rate, amortization_years) * 12


def mortgage_constant(annual_rate: float, amortization_years: float) -> float:
    """Annual debt service per dollar of principal (decimal, e.g. 0.0758)."""
    return annual_debt_service(1.0, annual_rate, amortization_years)


def remaining_balance(
    principal: float, annual_rate: float, amortization_years: float, months_paid: int
) -> float:
    """
    Outstanding balance after `months_paid` level payments.

    Interest-only loans (term 0) keep their full balance; the balance never
    goes below zero and is zero once the amortization term has run.
    """
    if principal <= 0:
        return 0.0
    periods = _amortization_months(amortization_years)
    if periods == 0:
        return principal
    months_paid = max(0, min(months_paid, periods))
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return max(0.0, principal - (principal / periods) * months_paid)
    factor = (1 + monthly_rate) ** periods
    factor_paid = (1 + monthly_rate) ** months_paid
    return max(0.0, principal * (factor - factor_paid) / (factor - 1))


class LoanAmortization(Model):
    """
    Class representing a loan's amortization schedule placed on the deal calendar.

    Handles the generation of monthly schedules and the roll-up into the
    annual debt service and balances the structure models consume. Months are
    counted from acquisition (deal month 0 is the first month of year 1), so a
    loan originated at a refinance can be placed at `start_month`.

    Attributes:
        loan_amount (PositiveFloat): Initial loan amount
        annual_rate (Percentage): Annual interest rate in percent
        amortization_years (PositiveFloat): Amortization term; 0 = interest-only
        interest_only (bool): Force interest-only payments regardless of term
        start_month (int): Deal month of the first payment
        payoff_month (Optional[int]): Deal month at which the loan is retired
            (no payments from this month on), e.g. a bridge taken out by a refi

    Examples:
        >>> # Standard 30-year loan at 6.5%
        >>> loan = LoanAmortization(loan_amount=700_000.0, annual_rate=6.5, amortization_years=30)
        >>> round(loan.annual_debt_service)
        53094

        >>> # 24-month interest-only bridge
        >>> bridge = LoanAmortization(
        ...     loan_amount=800_000.0, annual_rate=10.0, interest_only=True, payoff_month=24
        ... )
        >>> schedule, summary = bridge.amortization_schedule(24)
    """

    loan_amount: PositiveFloat
    annual_rate: Percentage
    amortization_years: PositiveFloat = 30.0
    interest_only: bool = False
    start_month: int = Field(default=0, ge=0)
    payoff_month: Optional[int] = Field(default=None, ge=0)

    @property
    def is_interest_only(self) -> bool:
        return self.interest_only or _amortization_months(self.amortization_years) == 0

    @property
    def monthly_payment(self) -> float:
        if self.is_interest_only:
            return self.loan_amount * self.annual_rate / 100 / 12
        return monthly_payment(self.loan_amount, self.annual_rate, self.amortization_years)

    @property
    def annual_debt_service(self) -> float:
        """Debt service for a full year of level payments."""
        return self.monthly_payment * 12

    def balance_after(self, months_paid: int) -> float:
        """Outstanding balance after `months_paid` payments of this loan."""
        if self.is_interest_only:
            return self.loan_amount if months_paid >= 0 else 0.0
        return remaining_balance(
            self.loan_amount, self.annual_rate, self.amortization_years, months_paid
        )

    def balance_at(self, deal_month: int) -> float:
        """
        Balance outstanding once the deal's first `deal_month` months have run.

        Zero before origination and from the payoff month on; the balance at
        the end of hold year y is `balance_at(12 * y)`.
        """
        if deal_month < self.start_month:
            return 0.0
        if self.payoff_month is not None and deal_month >= self.payoff_month:
            return 0.0
        return self.balance_after(deal_month - self.start_month)

    def amortization_schedule(self, months: int) -> Tuple[pd.DataFrame, pd.Series]:
        """
        Generate a monthly amortization schedule for `months` payments.

        Handles two payment modes:
        1. Interest-only: Payment = Interest only (no principal reduction)
        2. Amortizing: Level payment; the final payment clears the balance

        Returns:
            Tuple containing:
            - DataFrame indexed by payment number with columns:
                Begin Balance, Payment, Interest, Principal, End Balance
            - Series with summary statistics:
                Total Payments, Total Interest Paid, Total Principal Paid,
                Final Balance
        """
        monthly_rate = self.annual_rate / 100 / 12
        amortizing_periods = _amortization_months(self.amortization_years)
        level_payment = self.monthly_payment

        payments = np.zeros(months)
        interest_paid = np.zeros(months)
        principal_paid = np.zeros(months)
        balances = np.zeros(months + 1)  # Extra element for initial balance
        balances[0] = self.loan_amount

        for i in range(months):
            current_balance = balances[i]
            if current_balance <= 0:
                continue

            interest_payment = current_balance * monthly_rate
            if self.is_interest_only:
                payment = interest_payment
                principal_payment = 0.0
            elif i >= amortizing_periods - 1:
                # Final payment clears any rounding residue
                payment = current_balance + interest_payment
                principal_payment = current_balance
            else:
                payment = level_payment
                principal_payment = payment - interest_payment

            payments[i] = payment
            interest_paid[i] = interest_payment
            principal_paid[i] = principal_payment
            balances[i + 1] = current_balance - principal_payment

        df = pd.DataFrame(
            {
                "Payment Number": np.arange(1, months + 1),
                "Begin Balance": balances[:-1],
                "Payment": payments,
                "Interest": interest_paid,
                "Principal": principal_paid,
                "End Balance": balances[1:],
            }
        ).set_index("Payment Number")

        summary = pd.Series(
            {
                "Total Payments": payments.sum(),
                "Total Interest Paid": interest_paid.sum(),
                "Total Principal Paid": principal_paid.sum(),
                "Final Balance": balances[-1],
            }
        )
        return df, summary

    def yearly_debt_service(self, years: int) -> np.ndarray:
        """
        Debt service paid in each deal year 1..`years`.

        Payments start at `start_month` and stop at `payoff_month`.
        """
        horizon = years * 12
        calendar = np.zeros(horizon)
        active = horizon - self.start_month
        if active > 0:
            schedule, _ = self.amortization_schedule(active)
            calendar[self.start_month :] = schedule["Payment"].to_numpy()
        if self.payoff_month is not None:
            calendar[self.payoff_month :] = 0.0
        return calendar.reshape(years, 12).sum(axis=1)

    def total_interest(self, months: int) -> float:
        """Interest paid over the first `months` payments."""
        _, summary = self.amortization_schedule(months)
        return float(summary["Total Interest Paid"])
