# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structura Analysis

Read-only consumers of the structure models and the waterfall: sensitivity
grids over exit cap rate and rent growth, and exit scenarios around the
market cap rate.
"""

from .sensitivity import (
    SensitivityCell,
    SensitivityGrid,
    build_exit_sensitivity,
    calculate_deal_sensitivity,
    calculate_promote_sensitivity,
)

__all__ = [
    # Grids
    "SensitivityCell",
    "SensitivityGrid",
    # Sweeps
    "calculate_deal_sensitivity",
    "calculate_promote_sensitivity",
    # Exit scenarios
    "build_exit_sensitivity",
]
