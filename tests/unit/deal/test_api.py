# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the public deal API and sponsor fees."""

import pandas as pd
import pytest

from structura.core.primitives import StructureKindEnum
from structura.deal import (
    WATERFALL_TEMPLATES,
    SponsorFees,
    analyze_structure,
    calculate_promote,
    default_structure_parameters,
)

from ...conftest import create_base_deal


class TestCalculatePromote:
    """Waterfall over an analyzed structure's equity cash flows."""

    def test_promote_over_conventional(self, base_deal):
        params = default_structure_parameters(StructureKindEnum.CONVENTIONAL, base_deal)
        result = analyze_structure(base_deal, params)

        outputs = calculate_promote(base_deal, result, WATERFALL_TEMPLATES["Standard 70/30"])

        assert len(outputs.distributions) == base_deal.hold_period
        assert outputs.gp_equity + outputs.lp_equity == pytest.approx(result.total_equity)
        assert outputs.gp_total_return + outputs.lp_total_return == pytest.approx(
            sum(result.equity_cash_flows[1:])
        )
        assert outputs.gp_irr > outputs.lp_irr

    def test_hold_period_mismatch_rejected(self, base_deal):
        result = analyze_structure(base_deal, {"kind": "all_cash"})
        longer = create_base_deal(hold_period=7)

        with pytest.raises(ValueError, match="covers 5 years"):
            calculate_promote(longer, result, WATERFALL_TEMPLATES["JV 50/50"])


class TestSponsorFees:
    """Tests for SponsorFees."""

    @pytest.fixture
    def fees(self):
        return SponsorFees(
            acquisition_fee_pct=2,
            asset_management_fee_pct=1.5,
            disposition_fee_pct=1,
            construction_mgmt_fee_pct=5,
        )

    def test_individual_fees(self, fees):
        assert fees.acquisition_fee(1_000_000) == pytest.approx(20_000)
        assert fees.construction_mgmt_fee(200_000) == pytest.approx(10_000)
        assert fees.capitalized_fees(1_000_000, 200_000) == pytest.approx(30_000)
        assert fees.disposition_fee(1_500_000) == pytest.approx(15_000)

    def test_fee_schedule_totals(self, fees):
        gross_income = pd.Series([100_000.0, 110_000.0], index=pd.Index([1, 2], name="Year"))
        schedule = fees.fee_schedule(1_000_000, 200_000, gross_income, 1_500_000)

        assert list(schedule.index) == [0, 1, 2]
        assert schedule.loc[0, "Total"] == pytest.approx(30_000)
        assert schedule.loc[1, "Asset Management"] == pytest.approx(1_500)
        assert schedule.loc[2, "Disposition"] == pytest.approx(15_000)
        assert schedule["Total"].sum() == pytest.approx(
            fees.total_fees(1_000_000, 200_000, gross_income, 1_500_000)
        )
