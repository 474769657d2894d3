# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for loan amortization

Payment formulas, balance round trips, and the calendar placement used by
the structure models (origination month, payoff month).
"""

import numpy as np
import pytest

from structura.debt import (
    LoanAmortization,
    annual_debt_service,
    monthly_payment,
    mortgage_constant,
    remaining_balance,
)


class TestPaymentFormulas:
    """Tests for the level-payment helpers."""

    def test_standard_thirty_year_payment(self):
        """$700k at 6.5% over 30 years pays about $4,424.49 a month."""
        assert monthly_payment(700_000, 6.5, 30) == pytest.approx(4_424.49, abs=0.05)

    def test_zero_term_is_interest_only(self):
        assert monthly_payment(1_000_000, 6.0, 0) == pytest.approx(5_000.0)
        assert remaining_balance(1_000_000, 6.0, 0, 120) == 1_000_000

    def test_zero_rate_is_straight_line(self):
        assert monthly_payment(360_000, 0.0, 30) == pytest.approx(1_000.0)
        assert remaining_balance(360_000, 0.0, 30, 180) == pytest.approx(180_000.0)

    def test_annual_debt_service_is_twelve_payments(self):
        assert annual_debt_service(700_000, 6.5, 30) == pytest.approx(
            monthly_payment(700_000, 6.5, 30) * 12
        )

    def test_mortgage_constant(self):
        """Annual debt service per dollar borrowed."""
        assert mortgage_constant(6.5, 30) == pytest.approx(0.07585, abs=1e-4)

    @pytest.mark.parametrize(
        "principal, rate, years",
        [(700_000, 6.5, 30), (250_000, 3.5, 15), (1_000_000, 10.0, 25), (50_000, 0.25, 5)],
    )
    def test_balance_round_trip(self, principal, rate, years):
        """The level payment retires the loan exactly at the end of its term."""
        assert remaining_balance(principal, rate, years, years * 12) == pytest.approx(0, abs=1e-6)
        assert remaining_balance(principal, rate, years, 0) == pytest.approx(principal)

    def test_balance_matches_iterated_schedule(self):
        principal, rate, years = 700_000, 6.5, 30
        payment = monthly_payment(principal, rate, years)
        balance = principal
        for _ in range(60):
            balance = balance * (1 + rate / 100 / 12) - payment
        assert remaining_balance(principal, rate, years, 60) == pytest.approx(balance, rel=1e-9)


class TestLoanAmortization:
    """Tests for the LoanAmortization model."""

    def test_schedule_fully_amortizes(self):
        loan = LoanAmortization(loan_amount=700_000, annual_rate=6.5, amortization_years=30)
        schedule, summary = loan.amortization_schedule(360)

        assert len(schedule) == 360
        assert summary["Final Balance"] == pytest.approx(0.0, abs=1e-6)
        assert summary["Total Principal Paid"] == pytest.approx(700_000)
        assert summary["Total Payments"] == pytest.approx(
            summary["Total Interest Paid"] + summary["Total Principal Paid"]
        )

    def test_schedule_columns(self):
        loan = LoanAmortization(loan_amount=100_000, annual_rate=5.0, amortization_years=10)
        schedule, _ = loan.amortization_schedule(12)
        assert list(schedule.columns) == [
            "Begin Balance",
            "Payment",
            "Interest",
            "Principal",
            "End Balance",
        ]
        assert schedule.index.name == "Payment Number"
        assert schedule.index[0] == 1

    def test_interest_only_schedule(self):
        loan = LoanAmortization(loan_amount=800_000, annual_rate=10.0, interest_only=True)
        schedule, summary = loan.amortization_schedule(24)

        assert np.allclose(schedule["Payment"], 800_000 * 0.10 / 12)
        assert summary["Total Principal Paid"] == 0
        assert summary["Final Balance"] == pytest.approx(800_000)
        assert loan.balance_after(24) == 800_000

    def test_yearly_debt_service_respects_payoff(self):
        """A bridge retired at month 24 pays nothing in years 3+."""
        bridge = LoanAmortization(
            loan_amount=800_000, annual_rate=10.0, interest_only=True, payoff_month=24
        )
        yearly = bridge.yearly_debt_service(5).tolist()

        assert yearly[:2] == pytest.approx([80_000, 80_000])
        assert yearly[2:] == pytest.approx([0, 0, 0])
        assert bridge.balance_at(12) == 800_000
        assert bridge.balance_at(24) == 0

    def test_yearly_debt_service_respects_start_month(self):
        """A loan originated at month 24 pays a full year from year 3 on."""
        loan = LoanAmortization(
            loan_amount=500_000, annual_rate=7.0, amortization_years=30, start_month=24
        )
        yearly = loan.yearly_debt_service(5).tolist()

        assert yearly[:2] == pytest.approx([0, 0])
        assert yearly[2:] == pytest.approx([loan.annual_debt_service] * 3)
        assert loan.balance_at(12) == 0
        assert loan.balance_at(24) == pytest.approx(500_000)
        assert loan.balance_at(60) == pytest.approx(loan.balance_after(36))

    def test_total_interest(self):
        loan = LoanAmortization(loan_amount=800_000, annual_rate=10.0, interest_only=True)
        assert loan.total_interest(24) == pytest.approx(160_000)
