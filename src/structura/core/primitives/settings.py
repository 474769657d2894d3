# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import List

from pydantic import Field, field_validator, model_validator
from typing_extensions import Self

from .model import Model
from .types import Percentage, PositiveInt


class IRRSolverSettings(Model):
    """
    Configuration for the IRR root finder.

    Newton-Raphson runs first from `guess`; bisection over
    [`lower_bound`, `upper_bound`] is the fallback. Bounds are decimal rates.

    Usage Examples:
        # Tighter tolerance for reconciliation against a spreadsheet
        settings = IRRSolverSettings(tolerance=1e-10)

        # Restrict the plausible band to +/-100%
        settings = IRRSolverSettings(lower_bound=-0.99, upper_bound=1.0)
    """

    guess: float = Field(default=0.10, description="Initial Newton iterate (decimal).")
    tolerance: float = Field(
        default=1e-7, gt=0, description="Newton step size treated as converged (decimal rate)."
    )
    max_iterations: PositiveInt = Field(
        default=100, description="Newton iteration cap before falling back to bisection."
    )
    lower_bound: float = Field(
        default=-0.99, gt=-1, description="Lowest plausible rate (decimal)."
    )
    upper_bound: float = Field(
        default=10.0, description="Highest plausible rate (decimal)."
    )
    bisection_tolerance: float = Field(default=1e-9, gt=0)
    bisection_max_iterations: PositiveInt = Field(default=200)

    @model_validator(mode="after")
    def validate_band(self) -> Self:
        if self.upper_bound <= self.lower_bound:
            raise ValueError("upper_bound must be greater than lower_bound")
        if not (self.lower_bound < self.guess < self.upper_bound):
            raise ValueError("guess must lie inside the solver band")
        return self


class SensitivitySettings(Model):
    """Default grid steps (percentage points) for sensitivity sweeps."""

    exit_cap_deltas: List[float] = Field(default_factory=lambda: [-1.0, -0.5, 0.0, 0.5, 1.0])
    rent_growth_deltas: List[float] = Field(
        default_factory=lambda: [-1.0, -0.5, 0.0, 0.5, 1.0]
    )

    @field_validator("exit_cap_deltas", "rent_growth_deltas")
    @classmethod
    def validate_deltas(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("Sensitivity deltas cannot be empty")
        return v


class AnalysisSettings(Model):
    """
    Settings shared by every structure model and batch operation.

    These control deal-level conventions (selling costs, the market rate used
    when no live rate is supplied) and the numeric behavior of the
    IRR solver. All public entry points accept an optional `settings`; when
    omitted, `AnalysisSettings()` is used.
    """

    selling_costs_pct: Percentage = Field(
        default=5.0, description="Broker and transfer costs at sale, % of sale price."
    )
    default_market_rate: Percentage = Field(
        default=7.0,
        description="Mortgage rate used when no live market rate is supplied.",
    )
    irr: IRRSolverSettings = Field(default_factory=IRRSolverSettings)
    sensitivity: SensitivitySettings = Field(default_factory=SensitivitySettings)
