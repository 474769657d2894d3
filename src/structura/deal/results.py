# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Deal analysis results.

`DealAnalysisResult` holds the metrics every structure reports plus at most
one structure-specific extension block. Percent-valued metrics (`irr`,
`cash_on_cash`, `cap_rate`, `break_even_occupancy`, `annualized_return`) are
percent, not decimals. Undefined metrics are None; the only infinity is the
BRIDGE_REFI cash-on-cash when the refinance returns all invested capital.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, model_validator
from typing_extensions import Self

from ..core.primitives import Model, StructureKindEnum
from .distribution_calculator import YearlyDistribution
from .projections import YearlyProjection


class BridgeRefiMetrics(Model):
    """Refinance outcome of a bridge-to-permanent deal."""

    cash_out_on_refi: float = Field(
        description="Refi proceeds less bridge payoff and refi closing costs; negative means cash in."
    )
    cash_left_in_deal: float = Field(description="Initial equity less cash out; not clamped.")
    refi_loan_amount: float
    total_bridge_cost: float = Field(description="Bridge interest over the term plus points.")
    after_repair_value: float
    refi_year: int
    infinite_return: bool


class AssumableMetrics(Model):
    """Rate advantage of assuming the seller's loan."""

    blended_rate: float
    annual_rate_savings: float
    total_rate_savings: float
    assumption_fee: float


class SyndicationMetrics(Model):
    """Per-party results from the waterfall, plus sponsor fees."""

    gp_equity: float
    lp_equity: float
    gp_irr: Optional[float]
    lp_irr: Optional[float]
    gp_equity_multiple: Optional[float]
    lp_equity_multiple: Optional[float]
    gp_total_return: float
    lp_total_return: float
    total_fees: float
    gp_promote_earned: float
    distributions: List[YearlyDistribution]


class ExitScenario(Model):
    """Sale price and IRR at one exit cap rate."""

    cap_rate: float
    sale_price: float
    irr: Optional[float]


class ExitSensitivity(Model):
    """Optimistic / base / conservative exits around the market cap rate."""

    optimistic: ExitScenario
    base: ExitScenario
    conservative: ExitScenario


class DealAnalysisResult(Model):
    """
    Metrics for one structure applied to one base deal.

    Year-1 figures (`noi`, `debt_service`, `cash_flow`) describe the first
    hold year, except BRIDGE_REFI, which reports stabilized figures on the
    permanent loan. `equity_cash_flows` is the series the IRR is computed on:
    `[-total_equity, cf1, ..., cfN + net sale proceeds]`.
    """

    kind: StructureKindEnum
    label: str
    total_project_cost: float
    total_equity: float
    total_debt: float
    noi: float
    debt_service: float
    cash_flow: float
    cash_on_cash: Optional[float]
    cap_rate: float
    dscr: Optional[float]
    projected_sale_price: float
    net_sale_proceeds: float
    total_cash_flow: float
    total_profit: float
    equity_multiple: Optional[float]
    irr: Optional[float]
    annualized_return: Optional[float]
    break_even_occupancy: float
    projections: List[YearlyProjection]
    equity_cash_flows: List[float]
    exit_sensitivity: Optional[ExitSensitivity] = None
    bridge_refi: Optional[BridgeRefiMetrics] = None
    assumable: Optional[AssumableMetrics] = None
    syndication: Optional[SyndicationMetrics] = None

    @model_validator(mode="after")
    def validate_extension(self) -> Self:
        extensions = {
            StructureKindEnum.BRIDGE_REFI: self.bridge_refi,
            StructureKindEnum.ASSUMABLE: self.assumable,
            StructureKindEnum.SYNDICATION: self.syndication,
        }
        for kind, block in extensions.items():
            if block is not None and kind is not self.kind:
                raise ValueError(f"{self.kind.label} results cannot carry a {kind.label} block")
        return self

    @property
    def hold_period(self) -> int:
        return len(self.projections)


class AnalysisFailure(Model):
    """A structure that could not be analyzed in a batch run."""

    kind: StructureKindEnum
    label: str
    reason: str
