#!/usr/bin/env python3
"""
Structure Comparison for a Small Multifamily Acquisition

Runs one ten-unit, $1M deal through all five financing structures, prints
the side-by-side metrics with the per-metric winner, splits the conventional
deal's cash through the Standard 70/30 promote, and shows how LP returns move
across exit cap rate and rent growth.
"""

import sys
from pathlib import Path

# Add src to path so we can import structura
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pandas as pd

from structura.analysis import calculate_promote_sensitivity
from structura.core.primitives import StructureKindEnum
from structura.deal import (
    WATERFALL_TEMPLATES,
    DealInputsBase,
    MarketSignals,
    analyze_structure,
    calculate_promote,
    compare_structures,
    default_structure_parameters,
)
from structura.reporting import distributions_frame, sensitivity_frame


def main():
    print("🏘️  DEAL STRUCTURE COMPARISON")
    print("=" * 65)
    print()

    base = DealInputsBase(
        purchase_price=1_000_000,
        units=10,
        gross_rental_income=150_000,
        vacancy_rate=5,
        operating_expenses=40_000,
        property_taxes=15_000,
        insurance=8_000,
        hold_period=5,
        exit_cap_rate=6,
        market=MarketSignals(current_mortgage_rate=6.5, market_cap_rate=6.25),
    )
    print(f"Year-1 NOI:      ${base.year_one_noi:,.0f}")
    print(f"Going-in cap:    {base.going_in_cap_rate:.2f}%")
    print()

    # === ALL STRUCTURES ===
    comparison = compare_structures(
        base,
        list(StructureKindEnum),
        overrides={StructureKindEnum.CONVENTIONAL: {"ltv_pct": 70}},
    )
    with pd.option_context("display.float_format", "{:,.2f}".format, "display.width", 140):
        print(comparison.to_frame())
    for failure in comparison.failures:
        print(f"⚠️  {failure.label}: {failure.reason}")
    print()

    # === PROMOTE ON THE CONVENTIONAL DEAL ===
    params = default_structure_parameters(StructureKindEnum.CONVENTIONAL, base).patch(ltv_pct=70)
    result = analyze_structure(base, params)
    promote = calculate_promote(base, result, WATERFALL_TEMPLATES["Standard 70/30"])

    print("💰 Standard 70/30 promote")
    print("-" * 45)
    print(f"LP IRR: {promote.lp_irr:.2f}%   LP multiple: {promote.lp_equity_multiple:.2f}x")
    print(f"GP IRR: {promote.gp_irr:.2f}%   GP multiple: {promote.gp_equity_multiple:.2f}x")
    print(f"GP promote earned: ${promote.gp_promote_earned:,.0f}")
    print(distributions_frame(promote.distributions)[["LP Total", "GP Total"]].round(0))
    print()

    # === SENSITIVITY ===
    grid = calculate_promote_sensitivity(base, WATERFALL_TEMPLATES["Standard 70/30"], params)
    print("📈 LP IRR by exit cap rate (rows) and rent growth (columns)")
    print("-" * 45)
    print(sensitivity_frame(grid, "lp_irr").round(2))


if __name__ == "__main__":
    main()
