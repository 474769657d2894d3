# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .amortization import (
    LoanAmortization,
    annual_debt_service,
    monthly_payment,
    mortgage_constant,
    remaining_balance,
)

# Define __all__ to specify what gets imported with "from structura.debt import *"
__all__ = [
    # Payment calculations
    "LoanAmortization",
    "annual_debt_service",
    "monthly_payment",
    "mortgage_constant",
    "remaining_balance",
]
