# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for sensitivity grids

Grid layout and labels, the single base cell, per-cell failure reporting,
and the direction of returns across exit cap rate and rent growth.
"""

import pytest

from structura.analysis import (
    build_exit_sensitivity,
    calculate_deal_sensitivity,
    calculate_promote_sensitivity,
)
from structura.core.primitives import AnalysisSettings, StructureKindEnum
from structura.deal import (
    WATERFALL_TEMPLATES,
    AllCashParameters,
    ConventionalParameters,
    analyze_structure,
    calculate_promote,
    default_structure_parameters,
)


class TestPromoteSensitivity:
    """GP/LP grids over the default conventional structure."""

    @pytest.fixture
    def grid(self, base_deal):
        return calculate_promote_sensitivity(base_deal, WATERFALL_TEMPLATES["Standard 70/30"])

    def test_default_layout(self, grid):
        assert grid.row_label == "Exit Cap Rate"
        assert grid.column_label == "Rent Growth"
        assert grid.row_labels == ["5.0%", "5.5%", "6.0%", "6.5%", "7.0%"]
        assert grid.column_labels == ["2.0%", "2.5%", "3.0%", "3.5%", "4.0%"]
        assert len(grid.cells) == 5
        assert all(len(row) == 5 for row in grid.cells)

    def test_base_cell_present_exactly_once(self, grid):
        base_cells = [cell for row in grid.cells for cell in row if cell.is_base]
        assert len(base_cells) == 1
        assert grid.base_cell is base_cells[0]
        assert (grid.base_cell.exit_cap_rate, grid.base_cell.rent_growth) == (6.0, 3.0)

    def test_cells_carry_party_returns(self, grid):
        cell = grid.base_cell
        assert cell.error is None
        assert cell.lp_irr is not None and cell.gp_irr is not None
        assert cell.lp_multiple is not None and cell.gp_multiple is not None

    def test_lower_exit_cap_raises_lp_irr(self, grid):
        column = grid.base_column
        lp_irrs = [row[column].lp_irr for row in grid.cells]
        assert lp_irrs == sorted(lp_irrs, reverse=True)

    def test_base_cell_matches_promote_on_base_deal(self, base_deal, grid):
        params = default_structure_parameters(StructureKindEnum.CONVENTIONAL, base_deal)
        result = analyze_structure(base_deal, params)
        outputs = calculate_promote(base_deal, result, WATERFALL_TEMPLATES["Standard 70/30"])
        assert grid.base_cell.lp_irr == pytest.approx(outputs.lp_irr)


class TestDealSensitivity:
    """Deal-level grids."""

    def test_invalid_cells_reported_not_raised(self, base_deal):
        """A step that drives the exit cap to zero fails only its own row."""
        grid = calculate_deal_sensitivity(
            base_deal,
            AllCashParameters(),
            exit_cap_deltas=[-6.0, 1.0],
            rent_growth_deltas=[0.5],
        )

        assert grid.row_labels == ["0.0%", "6.0%", "7.0%"]
        assert all(cell.error is not None for cell in grid.cells[0])
        assert all(cell.error is None for row in grid.cells[1:] for cell in row)
        assert len(grid.failed_cells) == 2

    def test_zero_delta_added_when_missing(self, base_deal):
        grid = calculate_deal_sensitivity(
            base_deal, ConventionalParameters(), exit_cap_deltas=[0.5], rent_growth_deltas=[-1]
        )
        assert grid.row_values == [6.0, 6.5]
        assert grid.column_values == [2.0, 3.0]
        assert grid.base_cell.is_base

    def test_settings_supply_default_steps(self, base_deal):
        settings = AnalysisSettings(
            sensitivity={"exit_cap_deltas": [-0.25, 0.25], "rent_growth_deltas": [1.0]}
        )
        grid = calculate_deal_sensitivity(base_deal, ConventionalParameters(), settings)
        assert grid.row_labels == ["5.8%", "6.0%", "6.2%"]
        assert len(grid.column_values) == 2

    def test_higher_growth_raises_irr(self, base_deal):
        grid = calculate_deal_sensitivity(base_deal, AllCashParameters())
        row = grid.cells[grid.base_row]
        irrs = [cell.irr for cell in row]
        assert irrs == sorted(irrs)


class TestExitSensitivity:
    """Three-scenario exit pricing around a market cap rate."""

    def test_scenario_cap_rates(self):
        scenarios = build_exit_sensitivity(6.0, 100_000, lambda price: None)
        assert scenarios.optimistic.cap_rate == 5.5
        assert scenarios.base.cap_rate == 6.25
        assert scenarios.conservative.cap_rate == 6.75
        assert scenarios.base.sale_price == pytest.approx(100_000 / 0.0625)

    def test_optimistic_floor(self):
        scenarios = build_exit_sensitivity(2.2, 100_000, lambda price: 10.0)
        assert scenarios.optimistic.cap_rate == 2.0
        assert scenarios.optimistic.irr == 10.0
