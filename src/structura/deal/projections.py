# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Multi-year operating projections.

Gross income compounds at the rent growth rate, vacancy is applied to the
grown gross income, and expenses compound at the expense growth rate. Exit
pricing capitalizes the forward (year N+1) NOI at the exit cap rate.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.primitives import Model
from .inputs import DealInputsBase


class YearlyProjection(Model):
    """One hold-period year of operations, debt and value."""

    year: int
    gross_income: float
    vacancy_loss: float
    effective_income: float
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cumulative_cash_flow: float
    property_value: float
    loan_balance: float
    equity: float


def _bump_fractions(years: int, rent_bump_pct: float, bump_month: int) -> np.ndarray:
    """Share of each year's months at or after `bump_month`, scaled by the bump."""
    if rent_bump_pct == 0:
        return np.zeros(years)
    year_end_months = np.arange(1, years + 1) * 12
    fractions = np.clip((year_end_months - bump_month) / 12, 0.0, 1.0)
    return fractions * rent_bump_pct / 100


def project_operations(
    base: DealInputsBase,
    years: Optional[int] = None,
    rent_bump_pct: float = 0.0,
    bump_month: int = 0,
) -> pd.DataFrame:
    """
    Project yearly operations for years 1..`years` (default: hold period).

    `rent_bump_pct` raises rental income (not other income) from deal month
    `bump_month` on, pro-rated inside the year in which it lands.

    Returns:
        DataFrame indexed by Year with columns Gross Income, Vacancy Loss,
        Effective Income, Operating Expenses and NOI.
    """
    years = base.hold_period if years is None else years
    exponents = np.arange(years)
    rent_factor = np.power(1 + base.annual_rent_growth / 100, exponents)
    expense_factor = np.power(1 + base.annual_expense_growth / 100, exponents)

    bump = _bump_fractions(years, rent_bump_pct, bump_month)
    gross = (base.gross_rental_income * (1 + bump) + base.other_income) * rent_factor
    vacancy = gross * base.vacancy_rate / 100
    effective = gross - vacancy
    expenses = base.total_operating_expenses * expense_factor

    return pd.DataFrame(
        {
            "Gross Income": gross,
            "Vacancy Loss": vacancy,
            "Effective Income": effective,
            "Operating Expenses": expenses,
            "NOI": effective - expenses,
        },
        index=pd.Index(np.arange(1, years + 1), name="Year"),
    )


def forward_noi(base: DealInputsBase, rent_bump_pct: float = 0.0) -> float:
    """NOI of year N+1, the year a buyer at exit underwrites."""
    operations = project_operations(
        base, years=base.hold_period + 1, rent_bump_pct=rent_bump_pct
    )
    return float(operations["NOI"].iloc[-1])


def exit_sale_price(
    base: DealInputsBase, rent_bump_pct: float = 0.0, cap_rate: Optional[float] = None
) -> float:
    """Forward NOI capitalized at `cap_rate` (default: the exit cap rate)."""
    cap_rate = base.exit_cap_rate if cap_rate is None else cap_rate
    if cap_rate <= 0:
        return 0.0
    return forward_noi(base, rent_bump_pct) / (cap_rate / 100)


def break_even_occupancy(
    base: DealInputsBase, debt_service: float, gross_potential: Optional[float] = None
) -> float:
    """
    Occupancy (%) at which income covers expenses plus debt service.

    Clamped to 0-100; 100 when there is no potential income.
    """
    gross_potential = base.gross_potential_income if gross_potential is None else gross_potential
    if gross_potential <= 0:
        return 100.0
    required = base.total_operating_expenses + debt_service
    return min(100.0, max(0.0, required / gross_potential * 100))


def build_projections(
    base: DealInputsBase,
    operations: pd.DataFrame,
    debt_service: Sequence[float],
    loan_balances: Sequence[float],
    cash_flows: Optional[Sequence[float]] = None,
) -> List[YearlyProjection]:
    """
    Assemble `YearlyProjection` rows from projected operations and debt.

    Property value is each year's NOI grown one year and capitalized at the
    exit cap rate; equity is value less the year-end loan balance. Cash flow
    is NOI less debt service unless `cash_flows` supplies it, e.g. net of
    asset-management fees.
    """
    projections: List[YearlyProjection] = []
    cumulative = 0.0
    growth = 1 + base.annual_rent_growth / 100

    for index, ((year, row), ds, balance) in enumerate(
        zip(operations.iterrows(), debt_service, loan_balances)
    ):
        cash_flow = row["NOI"] - ds if cash_flows is None else cash_flows[index]
        cumulative += cash_flow
        value = row["NOI"] * growth / (base.exit_cap_rate / 100)
        projections.append(
            YearlyProjection(
                year=int(year),
                gross_income=float(row["Gross Income"]),
                vacancy_loss=float(row["Vacancy Loss"]),
                effective_income=float(row["Effective Income"]),
                operating_expenses=float(row["Operating Expenses"]),
                noi=float(row["NOI"]),
                debt_service=float(ds),
                cash_flow=float(cash_flow),
                cumulative_cash_flow=float(cumulative),
                property_value=float(value),
                loan_balance=float(balance),
                equity=float(value - balance),
            )
        )
    return projections
