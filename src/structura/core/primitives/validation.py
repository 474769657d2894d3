# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Split normalization for percentage pairs.

GP/LP tier splits and GP/LP equity shares are entered as a pair that must
total 100. Callers may give one side and have the other derived; giving
neither, or two sides that disagree, is an input error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

SPLIT_TOLERANCE = 1e-9


class ValidationMixin:
    """Pair-normalization helpers usable from any model's validators."""

    @classmethod
    def normalize_complementary_pair(
        cls,
        data: Dict[str, Any],
        field_a: str,
        field_b: str,
        total: float = 100.0,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Fill in whichever side of a pair is missing so the pair sums to `total`.

        Args:
            data: Raw model input (mode="before")
            field_a: First field name, e.g. "gp_split_pct"
            field_b: Second field name, e.g. "lp_split_pct"
            total: Required sum of the pair
            error_message: Overrides the default message

        Returns:
            A copy of `data` with both fields set

        Raises:
            ValueError: Neither side given, or both given and off by more
                than `SPLIT_TOLERANCE`
        """
        gp_side = data.get(field_a)
        lp_side = data.get(field_b)

        if gp_side is None and lp_side is None:
            raise ValueError(error_message or f"Either {field_a} or {field_b} must be provided")

        data = dict(data)
        if gp_side is None:
            data[field_a] = total - lp_side
        elif lp_side is None:
            data[field_b] = total - gp_side
        elif abs((gp_side + lp_side) - total) > SPLIT_TOLERANCE:
            raise ValueError(
                error_message
                or f"{field_a} ({gp_side}) + {field_b} ({lp_side}) must equal {total:g}"
            )
        return data


def normalize_split(cls, data: Any, field_a: str, field_b: str) -> Any:
    """
    Body of a before-validator for a GP/LP percentage pair.

    Usage:
        @model_validator(mode="before")
        @classmethod
        def normalize(cls, data):
            return normalize_split(cls, data, "gp_split_pct", "lp_split_pct")
    """
    if not isinstance(data, dict):
        return data
    return ValidationMixin.normalize_complementary_pair(data, field_a, field_b)
