# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Partnership Models for GP/LP Waterfall Distribution

This module defines the tier list and equity split that drive the promote
waterfall. Tiers are processed strictly in the order given; the model never
reorders them, since tier order is a modeling decision left to the caller.

Key Features:
- Ordered waterfall tiers: return of capital, preferred return, GP catch-up,
  LP IRR hurdle, and plain profit splits
- GP/LP split normalization: supply one side and the other is derived
- Named templates for common carry structures

Example:
    ```python
    config = PromoteConfig(
        gp_equity_pct=10,
        tiers=[
            WaterfallTier(name="LP Preferred Return", pref_rate=8, lp_split_pct=100),
            WaterfallTier(name="GP Catch-Up", catch_up_pct=50, gp_split_pct=100),
            WaterfallTier(name="Profit Split", gp_split_pct=30),
        ],
    )
    config.lp_equity_pct  # 90.0
    ```
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, model_validator
from typing_extensions import Annotated, Self

from ..core.primitives import (
    Model,
    Percentage,
    StrictlyPositiveFloat,
    TierKindEnum,
    normalize_split,
)

# =============================================================================
# WATERFALL TIERS
# =============================================================================


class WaterfallTier(Model):
    """
    One entry of the ordered waterfall.

    The tier's role is set by which optional field it carries:

    - `returns_capital`: pays down unreturned LP capital at the tier's split
    - `pref_rate`: accrues a preferred return on unreturned LP capital; unpaid
      amounts carry forward to later years
    - `catch_up_pct`: share of the slice paid to the GP until the GP's share of
      profits reaches `catch_up_target_pct` (or the GP split of the next split
      tier when no target is given)
    - `irr_hurdle`: cash keeps flowing at the prior split until the LP IRR
      reaches the hurdle, then this tier's split takes over
    - none of the above: a plain split that takes all remaining cash when it is
      reached, or sets the prior split for an IRR-hurdle tier right after it

    Attributes:
        name: Display name of the tier
        gp_split_pct: GP share of the tier's cash, %
        lp_split_pct: LP share of the tier's cash, %; always 100 - gp_split_pct
    """

    name: str
    pref_rate: Optional[StrictlyPositiveFloat] = Field(
        default=None, description="LP preferred return, % per year (e.g. 8)."
    )
    catch_up_pct: Optional[Annotated[float, Field(gt=0, le=100)]] = Field(
        default=None, description="GP share of the catch-up slice, %."
    )
    catch_up_target_pct: Optional[Percentage] = Field(
        default=None, description="GP share of total profits that ends the catch-up, %."
    )
    returns_capital: bool = False
    gp_split_pct: Percentage
    lp_split_pct: Percentage
    irr_hurdle: Optional[Annotated[float, Field(gt=-100)]] = Field(
        default=None, description="LP IRR that activates this tier, %."
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_splits(cls, data: Any) -> Any:
        return normalize_split(cls, data, "gp_split_pct", "lp_split_pct")

    @model_validator(mode="after")
    def validate_single_role(self) -> Self:
        roles = [
            self.returns_capital,
            self.pref_rate is not None,
            self.catch_up_pct is not None,
            self.irr_hurdle is not None,
        ]
        if sum(roles) > 1:
            raise ValueError(
                f"Tier '{self.name}' mixes roles; use one of returns_capital, "
                "pref_rate, catch_up_pct or irr_hurdle per tier"
            )
        if self.catch_up_target_pct is not None and self.catch_up_pct is None:
            raise ValueError(f"Tier '{self.name}': catch_up_target_pct requires catch_up_pct")
        return self

    @property
    def kind(self) -> TierKindEnum:
        if self.returns_capital:
            return TierKindEnum.RETURN_OF_CAPITAL
        if self.pref_rate is not None:
            return TierKindEnum.PREFERRED_RETURN
        if self.catch_up_pct is not None:
            return TierKindEnum.CATCH_UP
        if self.irr_hurdle is not None:
            return TierKindEnum.IRR_HURDLE
        return TierKindEnum.SPLIT

    @property
    def split(self) -> Tuple[float, float]:
        """(GP fraction, LP fraction) as decimals."""
        return self.gp_split_pct / 100, self.lp_split_pct / 100

    def with_gp_split(self, gp_split_pct: float) -> "WaterfallTier":
        """Copy with a new GP split; the LP side is recomputed."""
        return self.revalidate(gp_split_pct=gp_split_pct, lp_split_pct=100 - gp_split_pct)

    def with_lp_split(self, lp_split_pct: float) -> "WaterfallTier":
        """Copy with a new LP split; the GP side is recomputed."""
        return self.revalidate(gp_split_pct=100 - lp_split_pct, lp_split_pct=lp_split_pct)


# =============================================================================
# PROMOTE CONFIGURATION
# =============================================================================


class PromoteConfig(Model):
    """
    Equity split plus ordered tier list for one waterfall.

    `gp_equity_pct` and `lp_equity_pct` are normalized like tier splits: give
    either side and the other is derived so they sum to 100.
    """

    name: Optional[str] = None
    gp_equity_pct: Percentage
    lp_equity_pct: Percentage
    tiers: List[WaterfallTier] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_equity(cls, data: Any) -> Any:
        return normalize_split(cls, data, "gp_equity_pct", "lp_equity_pct")

    @property
    def pro_rata_split(self) -> Tuple[float, float]:
        """(GP fraction, LP fraction) of equity, as decimals."""
        return self.gp_equity_pct / 100, self.lp_equity_pct / 100

    def catch_up_target(self, index: int) -> Optional[float]:
        """
        Target GP share of profits (decimal) for the catch-up tier at `index`.

        Uses the tier's explicit target, else the GP split of the next split
        or hurdle tier; None when there is neither.
        """
        tier = self.tiers[index]
        if tier.catch_up_target_pct is not None:
            return tier.catch_up_target_pct / 100
        for later in self.tiers[index + 1 :]:
            if later.kind in (TierKindEnum.SPLIT, TierKindEnum.IRR_HURDLE):
                return later.gp_split_pct / 100
        return None


# =============================================================================
# TEMPLATES
# =============================================================================


def _template(name: str, gp_equity_pct: float, tiers: List[Dict[str, Any]]) -> PromoteConfig:
    return PromoteConfig(
        name=name,
        gp_equity_pct=gp_equity_pct,
        tiers=[WaterfallTier(**tier) for tier in tiers],
    )


WATERFALL_TEMPLATES: Dict[str, PromoteConfig] = {
    template.name: template
    for template in (
        _template(
            "Standard 70/30",
            10,
            [
                {"name": "LP Preferred Return", "pref_rate": 8, "gp_split_pct": 0},
                {"name": "GP Catch-Up", "catch_up_pct": 50, "gp_split_pct": 100},
                {"name": "Profit Split", "gp_split_pct": 30},
            ],
        ),
        _template(
            "Conservative 80/20",
            5,
            [
                {"name": "LP Preferred Return", "pref_rate": 10, "gp_split_pct": 0},
                {"name": "Profit Split", "gp_split_pct": 20},
            ],
        ),
        _template(
            "Aggressive GP",
            20,
            [
                {"name": "LP Preferred Return", "pref_rate": 6, "gp_split_pct": 0},
                {"name": "GP Catch-Up", "catch_up_pct": 100, "gp_split_pct": 100},
                {"name": "Profit Split", "gp_split_pct": 40},
                {"name": "Above 15% IRR", "gp_split_pct": 50, "irr_hurdle": 15},
            ],
        ),
        _template(
            "Simple Pro-Rata",
            10,
            [{"name": "Pro-Rata Split", "gp_split_pct": 10}],
        ),
        _template(
            "JV 50/50",
            50,
            [
                {"name": "Preferred Return", "pref_rate": 8, "gp_split_pct": 0},
                {"name": "Profit Split", "gp_split_pct": 50},
            ],
        ),
    )
}
