# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Deal Analysis API

Public entry points for structure analysis, comparison, promote waterfalls
and sensitivity grids. Every function is pure: inputs are frozen models and
each call builds and discards its own projections and waterfall state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Union

from ..core.primitives import AnalysisSettings, StructureKindEnum
from .calculator import analyze_structure as _analyze_structure
from .comparator import StructureComparison
from .comparator import compare_structures as _compare_structures
from .distribution_calculator import DistributionCalculator, PromoteOutputs
from .inputs import DealInputsBase, MarketSignals
from .partnership import PromoteConfig
from .results import DealAnalysisResult
from .structures import StructureParameters
from .structures import default_structure_parameters as _default_structure_parameters

# Localize heavy imports to call-sites to avoid a deal <-> analysis import cycle
if TYPE_CHECKING:
    from ..analysis.sensitivity import SensitivityGrid

logger = logging.getLogger(__name__)


def default_structure_parameters(
    kind: StructureKindEnum,
    base: DealInputsBase,
    market: Optional[MarketSignals] = None,
    settings: Optional[AnalysisSettings] = None,
) -> StructureParameters:
    """Seed structure-specific defaults from the base deal and live market data."""
    return _default_structure_parameters(kind, base, market=market, settings=settings)


def analyze_structure(
    base: DealInputsBase,
    params: Union[StructureParameters, Dict[str, Any]],
    settings: Optional[AnalysisSettings] = None,
) -> DealAnalysisResult:
    """
    Analyze a deal under one financing structure.

    Example:
        ```python
        params = default_structure_parameters(StructureKindEnum.CONVENTIONAL, base)
        result = analyze_structure(base, params.patch(ltv_pct=70, interest_rate=6.5))
        print(f"IRR: {result.irr:.2f}%  DSCR: {result.dscr:.2f}")
        ```
    """
    return _analyze_structure(base, params, settings)


def compare_structures(
    base: DealInputsBase,
    kinds: Iterable[StructureKindEnum],
    overrides: Optional[Mapping[StructureKindEnum, Mapping[str, Any]]] = None,
    settings: Optional[AnalysisSettings] = None,
) -> StructureComparison:
    """Analyze several structures against one base; failures are reported per structure."""
    return _compare_structures(base, kinds, overrides=overrides, settings=settings)


def calculate_promote(
    base: DealInputsBase,
    structure_result: DealAnalysisResult,
    config: PromoteConfig,
    settings: Optional[AnalysisSettings] = None,
) -> PromoteOutputs:
    """
    Run a GP/LP waterfall over an analyzed deal's equity cash flows.

    The structure's yearly equity cash (exit proceeds included in the final
    year) is the distributable cash; its total equity is split between GP
    and LP by `config`.
    """
    settings = settings or AnalysisSettings()
    if structure_result.hold_period != base.hold_period:
        raise ValueError(
            f"Result covers {structure_result.hold_period} years but the deal holds "
            f"{base.hold_period}"
        )
    distributable = structure_result.equity_cash_flows[1:]
    outputs = DistributionCalculator(config, settings.irr).distribute(
        distributable, structure_result.total_equity
    )
    logger.info(
        f"Promote on {structure_result.label}: GP promote earned "
        f"{outputs.gp_promote_earned:,.0f}"
    )
    return outputs


def calculate_promote_sensitivity(
    base: DealInputsBase,
    config: PromoteConfig,
    params: Optional[StructureParameters] = None,
    settings: Optional[AnalysisSettings] = None,
) -> "SensitivityGrid":
    """GP/LP IRR and multiples over an exit cap rate x rent growth grid."""
    from ..analysis.sensitivity import calculate_promote_sensitivity as _sensitivity

    return _sensitivity(base, config, params=params, settings=settings)


def calculate_deal_sensitivity(
    base: DealInputsBase,
    params: StructureParameters,
    settings: Optional[AnalysisSettings] = None,
) -> "SensitivityGrid":
    """Deal IRR and equity multiple over an exit cap rate x rent growth grid."""
    from ..analysis.sensitivity import calculate_deal_sensitivity as _sensitivity

    return _sensitivity(base, params, settings=settings)
