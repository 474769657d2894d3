# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structura Core Primitives

Essential building blocks shared by every deal model: the immutable base
model, constrained numeric types, enums, settings and validation helpers.
"""

from .enums import MetricDirectionEnum, StructureKindEnum, TierKindEnum
from .model import Model
from .settings import AnalysisSettings, IRRSolverSettings, SensitivitySettings
from .types import (
    GrowthPercentage,
    Percentage,
    PositiveFloat,
    PositiveInt,
    StrictlyPositiveFloat,
)
from .validation import ValidationMixin, normalize_split

__all__ = [
    # Core models
    "Model",
    # Settings
    "AnalysisSettings",
    "IRRSolverSettings",
    "SensitivitySettings",
    # Enums
    "MetricDirectionEnum",
    "StructureKindEnum",
    "TierKindEnum",
    # Types
    "GrowthPercentage",
    "Percentage",
    "PositiveFloat",
    "PositiveInt",
    "StrictlyPositiveFloat",
    # Validation
    "ValidationMixin",
    "normalize_split",
]
