# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financing structure parameters.

Each structure kind has its own parameter model carrying only the fields its
mechanics use. `StructureParameters` is the closed, `kind`-discriminated union
of the five, so pydantic picks the right model when parsing a dict and the
dispatcher in `calculator` can switch exhaustively on the variant type.

Overrides go through `patch`, which rejects keys the variant does not have and
revalidates the result:

    ```python
    params = default_structure_parameters(StructureKindEnum.CONVENTIONAL, base)
    params = params.patch(ltv_pct=70, interest_rate=6.5)
    params.patch(bridge_rate=9)  # ValueError: not a conventional field
    ```
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

from pydantic import Field, TypeAdapter, model_validator
from typing_extensions import Annotated

from ..core.primitives import (
    AnalysisSettings,
    Model,
    Percentage,
    PositiveFloat,
    StrictlyPositiveFloat,
    StructureKindEnum,
    normalize_split,
)
from .fees import SponsorFees
from .inputs import DealInputsBase, MarketSignals
from .partnership import PromoteConfig, WaterfallTier

logger = logging.getLogger(__name__)


class _StructureParametersBase(Model):
    """Shared behavior for the structure variants."""

    # Pairs that must sum to 100; patching one side recomputes the other
    _complementary_pairs: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    def patch(self, **updates: Any) -> "StructureParameters":
        """
        Return a revalidated copy with `updates` applied.

        Raises:
            ValueError: If a key is not a field of this structure kind, or
                the patched values fail validation
        """
        fields = set(type(self).model_fields) - {"kind"}
        unknown = sorted(set(updates) - fields)
        if unknown:
            raise ValueError(
                f"{self.kind.label} parameters have no field(s): {', '.join(unknown)}"
            )

        data: Dict[str, Any] = self.model_dump()
        for field_a, field_b in self._complementary_pairs:
            if field_a in updates and field_b not in updates:
                data.pop(field_b)
            elif field_b in updates and field_a not in updates:
                data.pop(field_a)
        data.update(updates)
        return type(self).model_validate(data)


class AllCashParameters(_StructureParametersBase):
    """No debt: the buyer funds price, closing costs and renovation."""

    kind: Literal[StructureKindEnum.ALL_CASH] = StructureKindEnum.ALL_CASH


class ConventionalParameters(_StructureParametersBase):
    """Single fixed-rate loan sized on purchase price."""

    kind: Literal[StructureKindEnum.CONVENTIONAL] = StructureKindEnum.CONVENTIONAL
    ltv_pct: Percentage = 75.0
    interest_rate: Percentage = 7.0
    amortization_years: PositiveFloat = Field(
        default=30.0, description="Amortization term; 0 means interest-only."
    )
    loan_term_years: int = Field(default=10, ge=1)
    interest_only: bool = False
    loan_origination_pct: Percentage = 1.0


class BridgeRefiParameters(_StructureParametersBase):
    """
    Bridge loan through renovation and lease-up, then a permanent refinance.

    The refinance happens when the bridge term ends; that month must fall
    inside the hold period.
    """

    kind: Literal[StructureKindEnum.BRIDGE_REFI] = StructureKindEnum.BRIDGE_REFI
    bridge_ltv_pct: Percentage = 80.0
    bridge_rate: Percentage = 10.0
    bridge_term_months: int = Field(default=24, ge=1)
    bridge_origination_pts: Percentage = 2.0
    bridge_interest_only: bool = True
    bridge_amortization_years: PositiveFloat = 30.0
    stabilization_months: int = Field(
        default=6, ge=0, description="Months after acquisition before the rent bump lands."
    )
    post_rehab_rent_bump: PositiveFloat = Field(
        default=20.0, description="Rent increase after renovation, %."
    )
    refi_ltv_pct: Percentage = 75.0
    refi_rate: Percentage = 7.0
    refi_amortization: PositiveFloat = 30.0
    refi_term_years: int = Field(default=10, ge=1)
    refi_closing_costs_pct: Percentage = Field(
        default=2.0, description="Refinance closing costs, % of the new loan."
    )
    arv_override: Optional[StrictlyPositiveFloat] = None


class AssumableParameters(_StructureParametersBase):
    """Assumption of the seller's loan, optionally with a supplemental loan."""

    kind: Literal[StructureKindEnum.ASSUMABLE] = StructureKindEnum.ASSUMABLE
    existing_loan_balance: PositiveFloat
    existing_rate: Percentage = 3.5
    existing_term_remaining_months: int = Field(default=300, ge=1)
    assumption_fee_pct: Percentage = 1.0
    supplemental_loan_amount: PositiveFloat = 0.0
    supplemental_rate: Optional[Percentage] = Field(
        default=None, description="Defaults to the market rate."
    )
    supplemental_term_years: PositiveFloat = 10.0
    market_rate: Optional[Percentage] = Field(
        default=None,
        description="Rate the savings are measured against; defaults to the live market rate.",
    )


class SyndicationParameters(_StructureParametersBase):
    """
    Conventional debt plus a GP/LP equity split, sponsor fees and a waterfall.

    When `tiers` is omitted, the waterfall is built from the flat fields:
    an LP preferred return, a split above pref, and an IRR hurdle above
    which the GP promote steps up.
    """

    _complementary_pairs: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("gp_equity_pct", "lp_equity_pct"),
    )

    kind: Literal[StructureKindEnum.SYNDICATION] = StructureKindEnum.SYNDICATION
    ltv_pct: Percentage = 65.0
    interest_rate: Percentage = 7.0
    amortization_years: PositiveFloat = 30.0
    loan_term_years: int = Field(default=10, ge=1)
    interest_only: bool = False
    loan_origination_pct: Percentage = 0.0
    gp_equity_pct: Percentage = 10.0
    lp_equity_pct: Percentage = 90.0
    acquisition_fee_pct: Percentage = 2.0
    asset_management_fee_pct: Percentage = 1.5
    disposition_fee_pct: Percentage = 1.0
    construction_mgmt_fee_pct: Percentage = 5.0
    preferred_return: Percentage = 8.0
    gp_promote_above_pref: Percentage = 20.0
    irr_hurdle: Optional[Percentage] = 15.0
    gp_promote_above_hurdle: Percentage = 30.0
    tiers: Optional[List[WaterfallTier]] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_equity(cls, data: Any) -> Any:
        if isinstance(data, dict) and ("gp_equity_pct" in data or "lp_equity_pct" in data):
            return normalize_split(cls, data, "gp_equity_pct", "lp_equity_pct")
        return data

    @property
    def fees(self) -> SponsorFees:
        return SponsorFees(
            acquisition_fee_pct=self.acquisition_fee_pct,
            asset_management_fee_pct=self.asset_management_fee_pct,
            disposition_fee_pct=self.disposition_fee_pct,
            construction_mgmt_fee_pct=self.construction_mgmt_fee_pct,
        )

    def waterfall_tiers(self) -> List[WaterfallTier]:
        """Explicit tiers, or the pref / split / hurdle ladder from the flat fields."""
        if self.tiers is not None:
            return list(self.tiers)
        tiers = []
        if self.preferred_return > 0:
            tiers.append(
                WaterfallTier(
                    name="LP Preferred Return", pref_rate=self.preferred_return, gp_split_pct=0
                )
            )
        tiers.append(WaterfallTier(name="Profit Split", gp_split_pct=self.gp_promote_above_pref))
        if self.irr_hurdle is not None:
            tiers.append(
                WaterfallTier(
                    name=f"Above {self.irr_hurdle:g}% IRR",
                    gp_split_pct=self.gp_promote_above_hurdle,
                    irr_hurdle=self.irr_hurdle,
                )
            )
        return tiers

    def promote_config(self) -> PromoteConfig:
        return PromoteConfig(
            name="Syndication",
            gp_equity_pct=self.gp_equity_pct,
            lp_equity_pct=self.lp_equity_pct,
            tiers=self.waterfall_tiers(),
        )


StructureParameters = Annotated[
    Union[
        AllCashParameters,
        ConventionalParameters,
        BridgeRefiParameters,
        AssumableParameters,
        SyndicationParameters,
    ],
    Field(discriminator="kind"),
]


def market_rate(
    base: DealInputsBase,
    market: Optional[MarketSignals] = None,
    settings: Optional[AnalysisSettings] = None,
) -> float:
    """Caller-supplied mortgage rate, else the configured fallback."""
    market = market or base.market
    if market.current_mortgage_rate is not None:
        return market.current_mortgage_rate
    settings = settings or AnalysisSettings()
    return settings.default_market_rate


def default_structure_parameters(
    kind: StructureKindEnum,
    base: DealInputsBase,
    market: Optional[MarketSignals] = None,
    settings: Optional[AnalysisSettings] = None,
) -> StructureParameters:
    """
    Seed parameters for `kind` from the base deal and live market data.

    Debt rates default to the current mortgage rate (or the configured
    fallback); the assumable balance defaults to 60% of purchase price.
    """
    kind = StructureKindEnum(kind)
    rate = market_rate(base, market, settings)
    logger.debug(f"Seeding {kind.label} defaults at a {rate:.2f}% market rate")

    if kind is StructureKindEnum.ALL_CASH:
        return AllCashParameters()
    if kind is StructureKindEnum.CONVENTIONAL:
        return ConventionalParameters(interest_rate=rate)
    if kind is StructureKindEnum.BRIDGE_REFI:
        return BridgeRefiParameters(refi_rate=rate)
    if kind is StructureKindEnum.ASSUMABLE:
        return AssumableParameters(existing_loan_balance=round(base.purchase_price * 0.6))
    if kind is StructureKindEnum.SYNDICATION:
        return SyndicationParameters(interest_rate=rate)
    raise ValueError(f"Unknown structure kind: {kind}")


_STRUCTURE_PARAMETERS_ADAPTER: TypeAdapter = TypeAdapter(StructureParameters)


def parse_structure_parameters(data: Dict[str, Any]) -> StructureParameters:
    """Validate a plain mapping (e.g. from JSON) into the matching variant by `kind`."""
    return _STRUCTURE_PARAMETERS_ADAPTER.validate_python(data)
