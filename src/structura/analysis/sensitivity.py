# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sensitivity analysis over exit cap rate and rent growth.

Rows step the exit cap rate, columns step annual rent growth. Every cell
rebuilds the base deal through full validation, reruns the structure model
(and the waterfall, for promote grids) and reads off returns. A cell whose
inputs are invalid or whose analysis fails carries an `error` instead of
aborting the sweep. The unperturbed base case is always present exactly once
and flagged `is_base`.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..core.primitives import AnalysisSettings, Model, StructureKindEnum
from ..deal.calculator import analyze_structure
from ..deal.distribution_calculator import DistributionCalculator
from ..deal.inputs import DealInputsBase
from ..deal.partnership import PromoteConfig
from ..deal.results import ExitScenario, ExitSensitivity
from ..deal.structures import StructureParameters, default_structure_parameters

logger = logging.getLogger(__name__)


class SensitivityCell(Model):
    """
    One grid point.

    Promote grids fill the LP/GP fields; deal grids fill `irr` and
    `equity_multiple`. IRRs are percent values.
    """

    exit_cap_rate: float
    rent_growth: float
    is_base: bool = False
    lp_irr: Optional[float] = None
    gp_irr: Optional[float] = None
    lp_multiple: Optional[float] = None
    gp_multiple: Optional[float] = None
    irr: Optional[float] = None
    equity_multiple: Optional[float] = None
    error: Optional[str] = None


class SensitivityGrid(Model):
    """Exit cap rate (rows) x rent growth (columns) matrix of cells."""

    row_label: str = "Exit Cap Rate"
    column_label: str = "Rent Growth"
    row_values: List[float]
    column_values: List[float]
    row_labels: List[str]
    column_labels: List[str]
    cells: List[List[SensitivityCell]]
    base_row: int
    base_column: int

    @property
    def base_cell(self) -> SensitivityCell:
        return self.cells[self.base_row][self.base_column]

    @property
    def failed_cells(self) -> List[SensitivityCell]:
        return [cell for row in self.cells for cell in row if cell.error is not None]


def _normalize_deltas(deltas: Sequence[float]) -> List[float]:
    """Sorted, de-duplicated steps that always include 0 exactly once."""
    return sorted(set(float(d) for d in deltas) | {0.0})


def _format_pct(value: float) -> str:
    return f"{value:.1f}%"


def _sweep(
    base: DealInputsBase,
    evaluate: Callable[[DealInputsBase], Dict[str, Optional[float]]],
    exit_cap_deltas: Sequence[float],
    rent_growth_deltas: Sequence[float],
) -> SensitivityGrid:
    cap_deltas = _normalize_deltas(exit_cap_deltas)
    growth_deltas = _normalize_deltas(rent_growth_deltas)
    row_values = [base.exit_cap_rate + d for d in cap_deltas]
    column_values = [base.annual_rent_growth + d for d in growth_deltas]

    cells: List[List[SensitivityCell]] = []
    for cap_delta, cap_rate in zip(cap_deltas, row_values):
        row: List[SensitivityCell] = []
        for growth_delta, growth in zip(growth_deltas, column_values):
            is_base = cap_delta == 0.0 and growth_delta == 0.0
            try:
                perturbed = base.revalidate(exit_cap_rate=cap_rate, annual_rent_growth=growth)
                values = evaluate(perturbed)
                cell = SensitivityCell(
                    exit_cap_rate=cap_rate, rent_growth=growth, is_base=is_base, **values
                )
            except (ValidationError, ValueError) as e:
                logger.warning(
                    f"Sensitivity cell failed (exit cap {cap_rate:.2f}%, "
                    f"rent growth {growth:.2f}%): {e}"
                )
                cell = SensitivityCell(
                    exit_cap_rate=cap_rate, rent_growth=growth, is_base=is_base, error=str(e)
                )
            row.append(cell)
        cells.append(row)

    return SensitivityGrid(
        row_values=row_values,
        column_values=column_values,
        row_labels=[_format_pct(v) for v in row_values],
        column_labels=[_format_pct(v) for v in column_values],
        cells=cells,
        base_row=cap_deltas.index(0.0),
        base_column=growth_deltas.index(0.0),
    )


def calculate_promote_sensitivity(
    base: DealInputsBase,
    config: PromoteConfig,
    params: Optional[StructureParameters] = None,
    settings: Optional[AnalysisSettings] = None,
    exit_cap_deltas: Optional[Sequence[float]] = None,
    rent_growth_deltas: Optional[Sequence[float]] = None,
) -> SensitivityGrid:
    """
    GP/LP returns across exit cap rate and rent growth.

    Each cell analyzes the deal under `params` (default: conventional
    financing at market defaults) and runs its equity cash flows through the
    `config` waterfall.

    Args:
        base: Base deal; perturbed copies are revalidated per cell
        config: Waterfall to apply
        params: Structure parameters; defaults to CONVENTIONAL defaults
        settings: Analysis settings; supplies the default deltas
        exit_cap_deltas: Percentage-point steps for rows
        rent_growth_deltas: Percentage-point steps for columns
    """
    settings = settings or AnalysisSettings()
    if params is None:
        params = default_structure_parameters(
            StructureKindEnum.CONVENTIONAL, base, settings=settings
        )
    calculator = DistributionCalculator(config, settings.irr)

    def evaluate(deal: DealInputsBase) -> Dict[str, Optional[float]]:
        result = analyze_structure(deal, params, settings)
        outputs = calculator.distribute(result.equity_cash_flows[1:], result.total_equity)
        return {
            "lp_irr": outputs.lp_irr,
            "gp_irr": outputs.gp_irr,
            "lp_multiple": outputs.lp_equity_multiple,
            "gp_multiple": outputs.gp_equity_multiple,
        }

    return _sweep(
        base,
        evaluate,
        exit_cap_deltas if exit_cap_deltas is not None else settings.sensitivity.exit_cap_deltas,
        rent_growth_deltas
        if rent_growth_deltas is not None
        else settings.sensitivity.rent_growth_deltas,
    )


def calculate_deal_sensitivity(
    base: DealInputsBase,
    params: StructureParameters,
    settings: Optional[AnalysisSettings] = None,
    exit_cap_deltas: Optional[Sequence[float]] = None,
    rent_growth_deltas: Optional[Sequence[float]] = None,
) -> SensitivityGrid:
    """Deal-level IRR and equity multiple across exit cap rate and rent growth."""
    settings = settings or AnalysisSettings()

    def evaluate(deal: DealInputsBase) -> Dict[str, Optional[float]]:
        result = analyze_structure(deal, params, settings)
        return {"irr": result.irr, "equity_multiple": result.equity_multiple}

    return _sweep(
        base,
        evaluate,
        exit_cap_deltas if exit_cap_deltas is not None else settings.sensitivity.exit_cap_deltas,
        rent_growth_deltas
        if rent_growth_deltas is not None
        else settings.sensitivity.rent_growth_deltas,
    )


def build_exit_sensitivity(
    market_cap_rate: float,
    exit_noi: float,
    irr_for_sale_price: Callable[[float], Optional[float]],
) -> ExitSensitivity:
    """
    Three exit scenarios around the market cap rate.

    Optimistic compresses 50bp (floored at 2%), base adds the customary 25bp
    exit spread and conservative adds 75bp.

    Args:
        market_cap_rate: Market cap rate, %
        exit_noi: Forward NOI the buyer capitalizes
        irr_for_sale_price: Deal IRR (%) given a gross sale price
    """

    def scenario(cap_rate: float) -> ExitScenario:
        sale_price = exit_noi / (cap_rate / 100)
        return ExitScenario(
            cap_rate=cap_rate, sale_price=sale_price, irr=irr_for_sale_price(sale_price)
        )

    return ExitSensitivity(
        optimistic=scenario(max(2.0, market_cap_rate - 0.5)),
        base=scenario(market_cap_rate + 0.25),
        conservative=scenario(market_cap_rate + 0.75),
    )
