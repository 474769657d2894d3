# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structura Core Framework

Foundational building blocks for deal structure analysis: primitives and the
single-source financial calculations (IRR, NPV, multiples, coverage).
"""

from . import primitives
from .calculations import FinancialCalculations

__all__ = [
    "primitives",
    "FinancialCalculations",
]
