# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
DataFrame views of analysis results.

Tabular presentations for notebooks and exports: projections by year,
waterfall distributions by year, structure comparisons with per-metric
winners, and sensitivity grids with exit cap rates as rows and rent growth
as columns. These are formatting helpers only; no calculation happens here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

import pandas as pd

if TYPE_CHECKING:
    from ..analysis.sensitivity import SensitivityGrid
    from ..deal.comparator import StructureComparison
    from ..deal.distribution_calculator import YearlyDistribution
    from ..deal.results import DealAnalysisResult

_PROJECTION_COLUMNS = {
    "gross_income": "Gross Income",
    "vacancy_loss": "Vacancy Loss",
    "effective_income": "Effective Income",
    "operating_expenses": "Operating Expenses",
    "noi": "NOI",
    "debt_service": "Debt Service",
    "cash_flow": "Cash Flow",
    "cumulative_cash_flow": "Cumulative Cash Flow",
    "property_value": "Property Value",
    "loan_balance": "Loan Balance",
    "equity": "Equity",
}

_DISTRIBUTION_COLUMNS = {
    "distributable_cash": "Distributable Cash",
    "lp_capital_returned": "LP Capital Returned",
    "gp_capital_returned": "GP Capital Returned",
    "lp_pref": "LP Pref",
    "gp_catch_up": "GP Catch-Up",
    "lp_share": "LP Share",
    "gp_share": "GP Share",
    "gp_promote": "GP Promote",
    "lp_total": "LP Total",
    "gp_total": "GP Total",
    "pref_shortfall": "Pref Shortfall",
    "lp_cumulative": "LP Cumulative",
    "gp_cumulative": "GP Cumulative",
}


def projections_frame(result: "DealAnalysisResult") -> pd.DataFrame:
    """Yearly projections indexed by Year."""
    df = pd.DataFrame([p.model_dump() for p in result.projections])
    return df.set_index("year").rename(columns=_PROJECTION_COLUMNS).rename_axis("Year")


def distributions_frame(distributions: Sequence["YearlyDistribution"]) -> pd.DataFrame:
    """Waterfall distributions indexed by Year, with a Total row."""
    df = pd.DataFrame([d.model_dump() for d in distributions])
    df = df.set_index("year").rename(columns=_DISTRIBUTION_COLUMNS).rename_axis("Year")

    # Cumulative and carried balances do not sum across years
    flow_columns = [
        c for c in df.columns if c not in ("Pref Shortfall", "LP Cumulative", "GP Cumulative")
    ]
    df.loc["Total", flow_columns] = df[flow_columns].sum()
    return df


def comparison_frame(comparison: "StructureComparison") -> pd.DataFrame:
    """
    Metrics by structure.

    Rows are comparison metrics and columns are structure labels; a final
    "Best" column names the winning structure per metric (empty on ties).
    Failed structures appear as a column of NaN.
    """
    from ..deal.comparator import COMPARISON_METRICS
    from ..deal.results import DealAnalysisResult

    best = comparison.best_by_metric()
    columns = {}
    for entry in comparison.entries:
        if isinstance(entry, DealAnalysisResult):
            columns[entry.label] = [getattr(entry, attr) for attr, _, _ in COMPARISON_METRICS]
        else:
            columns[entry.label] = [None] * len(COMPARISON_METRICS)

    df = pd.DataFrame(columns, index=[name for _, name, _ in COMPARISON_METRICS], dtype=float)
    df["Best"] = [
        best[attr].label if best[attr] is not None else "" for attr, _, _ in COMPARISON_METRICS
    ]
    df.index.name = "Metric"
    return df


def sensitivity_frame(grid: "SensitivityGrid", metric: str = "irr") -> pd.DataFrame:
    """
    One metric of a sensitivity grid as a matrix.

    Args:
        grid: Grid to render
        metric: Cell attribute, e.g. "irr", "lp_irr", "gp_multiple"
    """
    values: List[List[float]] = [
        [getattr(cell, metric) for cell in row] for row in grid.cells
    ]
    df = pd.DataFrame(
        values,
        index=pd.Index(grid.row_labels, name=grid.row_label),
        columns=pd.Index(grid.column_labels, name=grid.column_label),
        dtype=float,
    )
    return df
