# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structure comparison.

Runs several financing structures against one base deal and marks, per
metric, the single best finite non-zero value. A structure that fails to
analyze is reported as an `AnalysisFailure` in its slot; it never aborts the
rest of the batch.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import ValidationError

from ..core.primitives import AnalysisSettings, MetricDirectionEnum, Model, StructureKindEnum
from .calculator import analyze_structure
from .inputs import DealInputsBase
from .results import AnalysisFailure, DealAnalysisResult
from .structures import default_structure_parameters

logger = logging.getLogger(__name__)

ComparisonEntry = Union[DealAnalysisResult, AnalysisFailure]

# (result attribute, display name, direction)
COMPARISON_METRICS: Tuple[Tuple[str, str, MetricDirectionEnum], ...] = (
    ("cash_on_cash", "Cash-on-Cash", MetricDirectionEnum.MAX),
    ("irr", "IRR", MetricDirectionEnum.MAX),
    ("equity_multiple", "Equity Multiple", MetricDirectionEnum.MAX),
    ("total_equity", "Total Equity", MetricDirectionEnum.MIN),
    ("total_debt", "Total Debt", MetricDirectionEnum.MIN),
    ("dscr", "DSCR", MetricDirectionEnum.MAX),
    ("cash_flow", "Year-1 Cash Flow", MetricDirectionEnum.MAX),
    ("break_even_occupancy", "Break-Even Occupancy", MetricDirectionEnum.MIN),
    ("total_profit", "Total Profit", MetricDirectionEnum.MAX),
)


class StructureComparison(Model):
    """Results for the requested structures, in request order."""

    entries: List[ComparisonEntry]

    @property
    def results(self) -> List[DealAnalysisResult]:
        return [entry for entry in self.entries if isinstance(entry, DealAnalysisResult)]

    @property
    def failures(self) -> List[AnalysisFailure]:
        return [entry for entry in self.entries if isinstance(entry, AnalysisFailure)]

    def best_by_metric(self) -> Dict[str, Optional[StructureKindEnum]]:
        """
        Structure holding the best value of each comparison metric.

        Only finite, non-zero values compete; a tie for best, or no
        candidate at all, maps the metric to None.
        """
        best: Dict[str, Optional[StructureKindEnum]] = {}
        for attribute, _, direction in COMPARISON_METRICS:
            candidates = [
                (getattr(result, attribute), result.kind)
                for result in self.results
                if getattr(result, attribute) is not None
                and math.isfinite(getattr(result, attribute))
                and getattr(result, attribute) != 0
            ]
            if not candidates:
                best[attribute] = None
                continue
            pick = max if direction is MetricDirectionEnum.MAX else min
            extreme = pick(value for value, _ in candidates)
            winners = [kind for value, kind in candidates if value == extreme]
            best[attribute] = winners[0] if len(winners) == 1 else None
        return best

    def to_frame(self) -> pd.DataFrame:
        """Metrics by structure: one row per metric, one column per structure label."""
        from ..reporting.frames import comparison_frame

        return comparison_frame(self)


def compare_structures(
    base: DealInputsBase,
    kinds: Iterable[StructureKindEnum],
    overrides: Optional[Mapping[StructureKindEnum, Mapping[str, Any]]] = None,
    settings: Optional[AnalysisSettings] = None,
) -> StructureComparison:
    """
    Analyze each structure kind against `base`.

    Args:
        base: Shared property-level inputs
        kinds: Structure kinds to run, in display order
        overrides: Per-kind field updates applied to the default parameters
            through the variant's typed `patch`
        settings: Analysis settings shared by every run

    Returns:
        StructureComparison with one entry per requested kind
    """
    settings = settings or AnalysisSettings()
    overrides = {StructureKindEnum(k): v for k, v in (overrides or {}).items()}

    entries: List[ComparisonEntry] = []
    for kind in kinds:
        kind = StructureKindEnum(kind)
        try:
            params = default_structure_parameters(kind, base, settings=settings)
            if kind in overrides:
                params = params.patch(**overrides[kind])
            entries.append(analyze_structure(base, params, settings))
        except (ValidationError, ValueError) as e:
            logger.warning(f"{kind.label} analysis failed: {e}")
            entries.append(AnalysisFailure(kind=kind, label=kind.label, reason=str(e)))

    return StructureComparison(entries=entries)
