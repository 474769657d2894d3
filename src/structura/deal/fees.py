# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sponsor fees charged on syndicated deals.

Acquisition and construction-management fees are capitalized into project
cost at closing, the asset-management fee is charged every year on that
year's gross income, and the disposition fee comes out of the sale price.
"""

from __future__ import annotations

from typing import List

import pandas as pd
from pydantic import Field

from ..core.primitives import Model, Percentage


class SponsorFees(Model):
    """
    Fee schedule paid to the GP.

    Usage Examples:
        fees = SponsorFees(acquisition_fee_pct=2, asset_management_fee_pct=1.5)
        fees.acquisition_fee(1_000_000)  # 20_000.0
    """

    acquisition_fee_pct: Percentage = Field(default=0.0, description="% of purchase price.")
    asset_management_fee_pct: Percentage = Field(
        default=0.0, description="% of each year's gross income."
    )
    disposition_fee_pct: Percentage = Field(default=0.0, description="% of sale price.")
    construction_mgmt_fee_pct: Percentage = Field(
        default=0.0, description="% of the renovation budget."
    )

    def acquisition_fee(self, purchase_price: float) -> float:
        return purchase_price * self.acquisition_fee_pct / 100

    def construction_mgmt_fee(self, renovation_budget: float) -> float:
        return renovation_budget * self.construction_mgmt_fee_pct / 100

    def capitalized_fees(self, purchase_price: float, renovation_budget: float) -> float:
        """Fees paid at closing and funded with project capital."""
        return self.acquisition_fee(purchase_price) + self.construction_mgmt_fee(renovation_budget)

    def asset_management_fees(self, gross_income: pd.Series) -> pd.Series:
        """Yearly asset-management fee on a series of gross income."""
        return gross_income * self.asset_management_fee_pct / 100

    def disposition_fee(self, sale_price: float) -> float:
        return sale_price * self.disposition_fee_pct / 100

    def total_fees(
        self,
        purchase_price: float,
        renovation_budget: float,
        gross_income: pd.Series,
        sale_price: float,
    ) -> float:
        """Every fee paid over the hold."""
        return (
            self.capitalized_fees(purchase_price, renovation_budget)
            + float(self.asset_management_fees(gross_income).sum())
            + self.disposition_fee(sale_price)
        )

    def fee_schedule(
        self, purchase_price: float, renovation_budget: float, gross_income: pd.Series, sale_price: float
    ) -> pd.DataFrame:
        """Fees by year, year 0 holding the capitalized closing fees."""
        years: List[int] = [0] + list(gross_income.index)
        asset_mgmt = self.asset_management_fees(gross_income)
        frame = pd.DataFrame(
            0.0,
            index=pd.Index(years, name="Year"),
            columns=["Acquisition", "Construction Management", "Asset Management", "Disposition"],
        )
        frame.loc[0, "Acquisition"] = self.acquisition_fee(purchase_price)
        frame.loc[0, "Construction Management"] = self.construction_mgmt_fee(renovation_budget)
        frame.loc[list(gross_income.index), "Asset Management"] = asset_mgmt.to_numpy()
        if len(gross_income.index):
            frame.loc[gross_income.index[-1], "Disposition"] = self.disposition_fee(sale_price)
        frame["Total"] = frame.sum(axis=1)
        return frame
