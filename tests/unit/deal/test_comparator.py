# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for side-by-side structure comparison."""

import pytest

from structura.core.primitives import StructureKindEnum
from structura.deal import AnalysisFailure, DealAnalysisResult, compare_structures

ALL_KINDS = list(StructureKindEnum)


class TestCompareStructures:
    """Tests for compare_structures."""

    def test_one_entry_per_kind_in_order(self, base_deal):
        comparison = compare_structures(base_deal, ALL_KINDS)

        assert [entry.kind for entry in comparison.entries] == ALL_KINDS
        assert all(isinstance(entry, DealAnalysisResult) for entry in comparison.entries)
        assert comparison.failures == []

    def test_deterministic(self, base_deal):
        """Same base and kinds twice gives identical results."""
        first = compare_structures(base_deal, ALL_KINDS)
        second = compare_structures(base_deal, ALL_KINDS)
        assert first == second

    def test_overrides_applied(self, base_deal):
        comparison = compare_structures(
            base_deal,
            [StructureKindEnum.CONVENTIONAL],
            overrides={StructureKindEnum.CONVENTIONAL: {"ltv_pct": 70, "interest_rate": 6.5}},
        )
        assert comparison.results[0].total_debt == pytest.approx(700_000)

    def test_failure_isolated_to_its_structure(self, base_deal):
        """A bad override and an impossible bridge term fail alone."""
        comparison = compare_structures(
            base_deal,
            ALL_KINDS,
            overrides={
                StructureKindEnum.CONVENTIONAL: {"bridge_rate": 9},
                StructureKindEnum.BRIDGE_REFI: {"bridge_term_months": 72},
            },
        )

        failures = {failure.kind: failure for failure in comparison.failures}
        assert set(failures) == {StructureKindEnum.CONVENTIONAL, StructureKindEnum.BRIDGE_REFI}
        assert "bridge_rate" in failures[StructureKindEnum.CONVENTIONAL].reason
        assert isinstance(comparison.entries[1], AnalysisFailure)
        assert len(comparison.results) == 3

    def test_invalid_value_reported_as_failure(self, base_deal):
        comparison = compare_structures(
            base_deal,
            [StructureKindEnum.SYNDICATION],
            overrides={StructureKindEnum.SYNDICATION: {"gp_equity_pct": 120}},
        )
        assert len(comparison.failures) == 1
        assert comparison.failures[0].label == "Syndication"

    def test_overleveraged_assumption_reported_as_failure(self, base_deal):
        comparison = compare_structures(
            base_deal,
            [StructureKindEnum.ALL_CASH, StructureKindEnum.ASSUMABLE],
            overrides={StructureKindEnum.ASSUMABLE: {"existing_loan_balance": 1_500_000}},
        )
        assert len(comparison.results) == 1
        assert comparison.failures[0].kind is StructureKindEnum.ASSUMABLE
        assert "exceed the total project cost" in comparison.failures[0].reason


class TestBestByMetric:
    """Per-metric winners: finite, non-zero and unique."""

    def test_conventional_beats_all_cash(self, base_deal):
        best = compare_structures(
            base_deal, [StructureKindEnum.ALL_CASH, StructureKindEnum.CONVENTIONAL]
        ).best_by_metric()

        assert best["irr"] is StructureKindEnum.CONVENTIONAL
        assert best["total_equity"] is StructureKindEnum.CONVENTIONAL
        assert best["cash_flow"] is StructureKindEnum.ALL_CASH
        # Zero debt and undefined DSCR do not compete
        assert best["total_debt"] is StructureKindEnum.CONVENTIONAL
        assert best["dscr"] is StructureKindEnum.CONVENTIONAL

    def test_ties_have_no_winner(self, base_deal):
        best = compare_structures(
            base_deal, [StructureKindEnum.CONVENTIONAL, StructureKindEnum.CONVENTIONAL]
        ).best_by_metric()
        assert all(winner is None for winner in best.values())

    def test_infinite_values_do_not_compete(self, base_deal):
        """The bridge deal's infinite cash-on-cash is excluded from the ranking."""
        best = compare_structures(
            base_deal, [StructureKindEnum.ALL_CASH, StructureKindEnum.BRIDGE_REFI]
        ).best_by_metric()
        assert best["cash_on_cash"] is StructureKindEnum.ALL_CASH

    def test_failures_ignored(self, base_deal):
        best = compare_structures(
            base_deal,
            [StructureKindEnum.ALL_CASH, StructureKindEnum.CONVENTIONAL],
            overrides={StructureKindEnum.CONVENTIONAL: {"ltv_pct": 101}},
        ).best_by_metric()
        assert best["irr"] is StructureKindEnum.ALL_CASH
