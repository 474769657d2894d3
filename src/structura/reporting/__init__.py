# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structura Reporting Module

pandas views of results for notebooks and exports:
    projections_frame(result)
    distributions_frame(outputs.distributions)
    comparison_frame(comparison)      # or comparison.to_frame()
    sensitivity_frame(grid, "lp_irr")
"""

from .frames import (
    comparison_frame,
    distributions_frame,
    projections_frame,
    sensitivity_frame,
)

__all__ = [
    "comparison_frame",
    "distributions_frame",
    "projections_frame",
    "sensitivity_frame",
]
