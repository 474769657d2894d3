# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Property-level deal inputs.

`DealInputsBase` carries the facts every financing structure shares: price,
income, expenses, growth and exit assumptions. `MarketSignals` carries the
optional live data a caller may have fetched (current mortgage rate, a comp
estimate, agency eligibility, market cap rate); the engine never fetches it.

Example:
    ```python
    base = DealInputsBase(
        purchase_price=1_000_000,
        units=10,
        gross_rental_income=150_000,
        operating_expenses=40_000,
        property_taxes=15_000,
        insurance=8_000,
        exit_cap_rate=6.0,
        market=MarketSignals(current_mortgage_rate=6.75),
    )
    base.year_one_noi  # 79_500.0
    ```
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..core.primitives import (
    GrowthPercentage,
    Model,
    Percentage,
    PositiveFloat,
    PositiveInt,
    StrictlyPositiveFloat,
)


class MarketSignals(Model):
    """Caller-supplied live market data. Every field is optional."""

    current_mortgage_rate: Optional[Percentage] = Field(
        default=None, description="Prevailing mortgage rate, % (e.g. 6.75)."
    )
    comp_estimate: Optional[PositiveFloat] = Field(
        default=None, description="Comparable-sales value estimate, $."
    )
    agency_eligible: bool = Field(
        default=False, description="Whether the deal qualifies for agency debt."
    )
    market_cap_rate: Optional[StrictlyPositiveFloat] = Field(
        default=None, description="Market cap rate, %, used for exit scenarios."
    )


class DealInputsBase(Model):
    """
    Property-level assumptions shared by every structure.

    All rates are percent values. Operating expenses exclude the itemized
    capex reserve, taxes and insurance.
    """

    purchase_price: PositiveFloat
    units: PositiveInt = 0
    gross_rental_income: PositiveFloat
    other_income: PositiveFloat = 0.0
    vacancy_rate: Percentage = 5.0
    operating_expenses: PositiveFloat = 0.0
    capex_reserve: PositiveFloat = 0.0
    property_taxes: PositiveFloat = 0.0
    insurance: PositiveFloat = 0.0
    hold_period: int = Field(default=5, ge=1, description="Hold period in whole years.")
    exit_cap_rate: StrictlyPositiveFloat
    annual_rent_growth: GrowthPercentage = 3.0
    annual_expense_growth: GrowthPercentage = 3.0
    renovation_budget: PositiveFloat = 0.0
    closing_costs_pct: Percentage = 3.0
    closing_costs_override: Optional[PositiveFloat] = Field(
        default=None,
        description="Itemized buyer closing costs, $; replaces the percentage when set.",
    )
    market: MarketSignals = Field(default_factory=MarketSignals)

    @property
    def gross_potential_income(self) -> float:
        """Rent plus other income at 100% occupancy."""
        return self.gross_rental_income + self.other_income

    @property
    def total_operating_expenses(self) -> float:
        """Opex plus capex reserve, taxes and insurance."""
        return self.operating_expenses + self.capex_reserve + self.property_taxes + self.insurance

    @property
    def closing_costs(self) -> float:
        if self.closing_costs_override is not None:
            return self.closing_costs_override
        return self.purchase_price * self.closing_costs_pct / 100

    @property
    def year_one_noi(self) -> float:
        effective_income = self.gross_potential_income * (1 - self.vacancy_rate / 100)
        return effective_income - self.total_operating_expenses

    @property
    def going_in_cap_rate(self) -> float:
        """Year-1 NOI over purchase price, in percent (0 with no price)."""
        if self.purchase_price <= 0:
            return 0.0
        return self.year_one_noi / self.purchase_price * 100
