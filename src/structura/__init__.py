# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
Structura - Deal Structure Analysis for Real Estate Acquisitions

Compare how one property performs under different financing structures
(all cash, conventional, bridge-to-refi, loan assumption, syndication),
split the resulting cash flows through GP/LP promote waterfalls, and sweep
returns across exit cap rate and rent growth.

Key Entry Points:
- structura.deal.analyze_structure() - One structure, strongly-typed result
- structura.deal.compare_structures() - Side-by-side comparison
- structura.deal.calculate_promote() - GP/LP waterfall over a result
- structura.analysis.* - Sensitivity grids
- structura.reporting.* - pandas views

Example Usage:
    ```python
    from structura.core.primitives import StructureKindEnum
    from structura.deal import DealInputsBase, compare_structures

    base = DealInputsBase(
        purchase_price=1_000_000,
        gross_rental_income=120_000,
        operating_expenses=34_500,
        exit_cap_rate=7.0,
    )
    comparison = compare_structures(base, list(StructureKindEnum))
    print(comparison.to_frame())
    ```
"""

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "deal",
    "debt",
    "reporting",
]


_LAZY_MODULES = {
    "analysis": "structura.analysis",
    "core": "structura.core",
    "deal": "structura.deal",
    "debt": "structura.debt",
    "reporting": "structura.reporting",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'structura' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
