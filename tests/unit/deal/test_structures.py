# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for structure parameter variants, defaults and typed patches."""

import pytest
from pydantic import ValidationError

from structura.core.primitives import AnalysisSettings, StructureKindEnum, TierKindEnum
from structura.deal import (
    AllCashParameters,
    AssumableParameters,
    BridgeRefiParameters,
    ConventionalParameters,
    MarketSignals,
    SyndicationParameters,
    WaterfallTier,
    default_structure_parameters,
    market_rate,
    parse_structure_parameters,
)

from ...conftest import create_base_deal


class TestDefaults:
    """Tests for default_structure_parameters."""

    @pytest.mark.parametrize(
        "kind, variant",
        [
            (StructureKindEnum.ALL_CASH, AllCashParameters),
            (StructureKindEnum.CONVENTIONAL, ConventionalParameters),
            (StructureKindEnum.BRIDGE_REFI, BridgeRefiParameters),
            (StructureKindEnum.ASSUMABLE, AssumableParameters),
            (StructureKindEnum.SYNDICATION, SyndicationParameters),
        ],
    )
    def test_variant_per_kind(self, base_deal, kind, variant):
        params = default_structure_parameters(kind, base_deal)
        assert isinstance(params, variant)
        assert params.kind is kind

    def test_rates_follow_live_market(self):
        deal = create_base_deal(market={"current_mortgage_rate": 6.25})

        assert default_structure_parameters(
            StructureKindEnum.CONVENTIONAL, deal
        ).interest_rate == 6.25
        assert default_structure_parameters(StructureKindEnum.BRIDGE_REFI, deal).refi_rate == 6.25
        assert default_structure_parameters(
            StructureKindEnum.SYNDICATION, deal
        ).interest_rate == 6.25

    def test_explicit_market_overrides_deal_market(self, base_deal):
        market = MarketSignals(current_mortgage_rate=5.5)
        assert market_rate(base_deal, market) == 5.5

    def test_fallback_market_rate_from_settings(self, base_deal):
        settings = AnalysisSettings(default_market_rate=8.0)
        assert market_rate(base_deal, settings=settings) == 8.0

    def test_assumable_balance_is_sixty_percent_of_price(self, base_deal):
        params = default_structure_parameters(StructureKindEnum.ASSUMABLE, base_deal)
        assert params.existing_loan_balance == 600_000


class TestPatch:
    """Typed overrides through `patch`."""

    def test_patch_updates_and_revalidates(self):
        params = ConventionalParameters().patch(ltv_pct=70, interest_rate=6.5)
        assert (params.ltv_pct, params.interest_rate) == (70, 6.5)

    def test_patch_rejects_foreign_field(self):
        with pytest.raises(ValueError, match="bridge_rate"):
            ConventionalParameters().patch(bridge_rate=9)

    def test_patch_rejects_kind(self):
        with pytest.raises(ValueError):
            ConventionalParameters().patch(kind=StructureKindEnum.ALL_CASH)

    def test_patch_rejects_invalid_value(self):
        with pytest.raises(ValidationError):
            ConventionalParameters().patch(ltv_pct=150)

    def test_patch_recomputes_complementary_equity(self):
        params = SyndicationParameters().patch(gp_equity_pct=20)
        assert (params.gp_equity_pct, params.lp_equity_pct) == (20, 80)

        params = SyndicationParameters().patch(lp_equity_pct=75)
        assert (params.gp_equity_pct, params.lp_equity_pct) == (25, 75)

    def test_inconsistent_equity_split_rejected(self):
        with pytest.raises(ValidationError):
            SyndicationParameters(gp_equity_pct=20, lp_equity_pct=70)


class TestParsing:
    """Mappings are validated into the variant named by `kind`."""

    def test_parse_by_kind(self):
        params = parse_structure_parameters({"kind": "conventional", "ltv_pct": 70})
        assert isinstance(params, ConventionalParameters)
        assert params.ltv_pct == 70

    def test_field_from_other_variant_rejected(self):
        with pytest.raises(ValidationError):
            parse_structure_parameters({"kind": "all_cash", "ltv_pct": 70})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_structure_parameters({"kind": "seller_finance"})


class TestSyndicationWaterfall:
    """The flat syndication fields build a pref / split / hurdle ladder."""

    def test_default_ladder(self):
        tiers = SyndicationParameters().waterfall_tiers()
        assert [tier.kind for tier in tiers] == [
            TierKindEnum.PREFERRED_RETURN,
            TierKindEnum.SPLIT,
            TierKindEnum.IRR_HURDLE,
        ]
        assert tiers[0].pref_rate == 8
        assert tiers[1].gp_split_pct == 20
        assert (tiers[2].irr_hurdle, tiers[2].gp_split_pct) == (15, 30)

    def test_no_hurdle_no_pref(self):
        tiers = SyndicationParameters(irr_hurdle=None, preferred_return=0).waterfall_tiers()
        assert [tier.kind for tier in tiers] == [TierKindEnum.SPLIT]

    def test_explicit_tiers_win(self):
        explicit = [WaterfallTier(name="Pro-Rata", gp_split_pct=10)]
        params = SyndicationParameters(tiers=explicit)
        assert params.promote_config().tiers == explicit

    def test_promote_config_equity(self):
        config = SyndicationParameters(gp_equity_pct=15).promote_config()
        assert (config.gp_equity_pct, config.lp_equity_pct) == (15, 85)

    def test_fees(self):
        fees = SyndicationParameters().fees
        assert fees.acquisition_fee(1_000_000) == pytest.approx(20_000)
        assert fees.disposition_fee(1_500_000) == pytest.approx(15_000)
