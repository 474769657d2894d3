# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class StructureKindEnum(str, Enum):
    """
    Financing structures the deal calculator can model.

    Each value pairs with exactly one parameter variant in
    `structura.deal.structures` (see `StructureParameters`).
    """

    ALL_CASH = "all_cash"
    CONVENTIONAL = "conventional"
    BRIDGE_REFI = "bridge_refi"
    ASSUMABLE = "assumable"
    SYNDICATION = "syndication"

    @property
    def label(self) -> str:
        """Display label used in comparison tables."""
        return _STRUCTURE_LABELS[self]

    @property
    def description(self) -> str:
        return _STRUCTURE_DESCRIPTIONS[self]


_STRUCTURE_LABELS = {
    StructureKindEnum.ALL_CASH: "All Cash",
    StructureKindEnum.CONVENTIONAL: "Conventional",
    StructureKindEnum.BRIDGE_REFI: "Bridge → Refi",
    StructureKindEnum.ASSUMABLE: "Assumable",
    StructureKindEnum.SYNDICATION: "Syndication",
}

_STRUCTURE_DESCRIPTIONS = {
    StructureKindEnum.ALL_CASH: "No leverage, 100% equity",
    StructureKindEnum.CONVENTIONAL: "Standard bank financing",
    StructureKindEnum.BRIDGE_REFI: "Value-add: acquire, renovate, refinance",
    StructureKindEnum.ASSUMABLE: "Take over the seller's low-rate mortgage",
    StructureKindEnum.SYNDICATION: "Multi-investor partnership structure",
}


class TierKindEnum(str, Enum):
    """
    Role a waterfall tier plays in the distribution of a year's cash.

    Derived from which optional fields a `WaterfallTier` carries, in this
    precedence: return of capital, preferred return, catch-up, IRR hurdle,
    plain split.
    """

    RETURN_OF_CAPITAL = "return_of_capital"
    PREFERRED_RETURN = "preferred_return"
    CATCH_UP = "catch_up"
    IRR_HURDLE = "irr_hurdle"
    SPLIT = "split"


class MetricDirectionEnum(str, Enum):
    """Whether a larger or a smaller value of a comparison metric is better."""

    MAX = "max"
    MIN = "min"
