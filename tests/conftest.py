# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for Structura testing.

Provides a ready-made base deal (a ten-unit, $1M acquisition) and helpers for
building variations of it without repeating every field.
"""

from __future__ import annotations

from typing import Any

import pytest

from structura.core.primitives import AnalysisSettings
from structura.deal import DealInputsBase


def create_base_deal(**overrides: Any) -> DealInputsBase:
    """
    Create the reference deal used throughout the tests.

    Year-1 NOI is 79,500 (150,000 gross, 5% vacancy, 63,000 of expenses),
    a 7.95% going-in cap rate on the $1M price.

    Example:
        >>> deal = create_base_deal(hold_period=7)
        >>> deal.year_one_noi
        79500.0
    """
    fields = dict(
        purchase_price=1_000_000,
        units=10,
        gross_rental_income=150_000,
        vacancy_rate=5,
        operating_expenses=40_000,
        property_taxes=15_000,
        insurance=8_000,
        hold_period=5,
        exit_cap_rate=6,
    )
    fields.update(overrides)
    return DealInputsBase(**fields)


@pytest.fixture
def base_deal() -> DealInputsBase:
    return create_base_deal()


@pytest.fixture
def settings() -> AnalysisSettings:
    return AnalysisSettings()
