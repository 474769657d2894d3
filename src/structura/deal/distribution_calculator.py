# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Partnership Distribution Calculator

This module implements the GP/LP promote waterfall. Each year's distributable
cash is allocated across the ordered tiers of a `PromoteConfig`; unreturned
capital, unpaid preferred return, cumulative totals and the LP's own cash-flow
history are carried from year to year in an immutable `WaterfallState` that
is threaded through a fold over the hold period. Nothing is stored on the
calculator itself, so concurrent runs never share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from ..core.calculations import FinancialCalculations
from ..core.primitives import IRRSolverSettings, Model, TierKindEnum
from .partnership import PromoteConfig, WaterfallTier

logger = logging.getLogger(__name__)


class YearlyDistribution(Model):
    """One year of waterfall output."""

    year: int
    distributable_cash: float
    lp_capital_returned: float
    gp_capital_returned: float
    lp_pref: float
    gp_catch_up: float
    lp_share: float
    gp_share: float
    gp_promote: float
    lp_total: float
    gp_total: float
    pref_shortfall: float
    lp_cumulative: float
    gp_cumulative: float


class PromoteOutputs(Model):
    """
    Results of a full waterfall run.

    IRRs are percent values and None when undefined; multiples are None when
    the party contributed no equity. Cash-flow series start with the party's
    contribution as a negative year-0 flow.
    """

    gp_equity: float
    lp_equity: float
    gp_irr: Optional[float]
    lp_irr: Optional[float]
    gp_equity_multiple: Optional[float]
    lp_equity_multiple: Optional[float]
    gp_total_return: float
    lp_total_return: float
    gp_promote_earned: float
    distributions: List[YearlyDistribution]
    gp_cash_flows: List[float]
    lp_cash_flows: List[float]


@dataclass(frozen=True)
class WaterfallState:
    """
    Accumulator carried between years of one waterfall run.

    Attributes:
        lp_unreturned: LP capital not yet returned by a return-of-capital tier
        gp_unreturned: GP capital not yet returned
        pref_owed: Unpaid preferred return per tier (0 for non-pref tiers)
        lp_cumulative: LP distributions to date
        gp_cumulative: GP distributions to date
        capital_returned: LP + GP capital returned to date
        gp_capital_returned: GP capital returned to date
        lp_flows: LP cash flows to date, starting with -LP equity
    """

    lp_unreturned: float
    gp_unreturned: float
    pref_owed: Tuple[float, ...]
    lp_cumulative: float = 0.0
    gp_cumulative: float = 0.0
    capital_returned: float = 0.0
    gp_capital_returned: float = 0.0
    lp_flows: Tuple[float, ...] = ()

    @classmethod
    def initial(cls, config: PromoteConfig, lp_equity: float, gp_equity: float) -> "WaterfallState":
        return cls(
            lp_unreturned=lp_equity,
            gp_unreturned=gp_equity,
            pref_owed=tuple(0.0 for _ in config.tiers),
            lp_flows=(-lp_equity,),
        )


@dataclass
class _YearAllocation:
    """Running allocation inside a single year; discarded once the year closes."""

    remaining: float
    lp_capital: float = 0.0
    gp_capital: float = 0.0
    lp_pref: float = 0.0
    gp_catch_up: float = 0.0
    lp_share: float = 0.0
    gp_share: float = 0.0

    @property
    def lp_total(self) -> float:
        return self.lp_capital + self.lp_pref + self.lp_share

    @property
    def gp_total(self) -> float:
        return self.gp_capital + self.gp_catch_up + self.gp_share

    def pay_split(self, amount: float, split: Tuple[float, float]) -> None:
        gp_fraction, lp_fraction = split
        self.gp_share += amount * gp_fraction
        self.lp_share += amount * lp_fraction
        self.remaining -= amount


def _hurdle_lp_amount(lp_flows: Sequence[float], hurdle_pct: float) -> float:
    """
    LP receipts needed this year for the LP IRR to equal `hurdle_pct`.

    Solves NPV(hurdle) = 0 for the current year's flow given every prior LP
    flow; a non-positive result means the hurdle is already met.
    """
    rate = hurdle_pct / 100
    year = len(lp_flows)
    present_value = sum(flow / (1 + rate) ** t for t, flow in enumerate(lp_flows))
    return -present_value * (1 + rate) ** year


@dataclass
class DistributionCalculator:
    """
    Allocates yearly distributable cash through an ordered GP/LP waterfall.

    Tiers are processed in the order given and never reordered. Negative
    yearly cash is distributed as zero. Every year, LP total plus GP total
    equals that year's distributable cash.

    Attributes:
        config: Equity split and ordered tier list
        settings: IRR solver settings for the per-party IRRs

    Example:
        ```python
        calculator = DistributionCalculator(WATERFALL_TEMPLATES["Standard 70/30"])
        outputs = calculator.distribute([50_000, 52_000, 54_000, 56_000, 1_250_000], 1_000_000)
        outputs.lp_irr, outputs.gp_irr
        ```
    """

    config: PromoteConfig
    settings: IRRSolverSettings = field(default_factory=IRRSolverSettings)

    # ------------------------------------------------------------------
    # Tier handlers
    # ------------------------------------------------------------------

    def _return_capital(
        self, tier: WaterfallTier, alloc: _YearAllocation, lp_unreturned: float, gp_unreturned: float
    ) -> Tuple[float, float]:
        gp_fraction, lp_fraction = tier.split
        if lp_fraction > 0:
            amount = min(alloc.remaining, lp_unreturned / lp_fraction)
        else:
            amount = min(alloc.remaining, gp_unreturned)

        lp_paid = amount * lp_fraction
        gp_paid = amount * gp_fraction
        gp_capital = min(gp_paid, gp_unreturned)

        alloc.lp_capital += lp_paid
        alloc.gp_capital += gp_capital
        alloc.gp_share += gp_paid - gp_capital
        alloc.remaining -= amount
        return lp_unreturned - lp_paid, gp_unreturned - gp_capital

    def _pay_pref(
        self, tier: WaterfallTier, alloc: _YearAllocation, carried: float, lp_unreturned: float
    ) -> float:
        """Accrue and pay this tier's pref; returns the shortfall to carry forward."""
        gp_fraction, lp_fraction = tier.split
        owed = carried + lp_unreturned * tier.pref_rate / 100
        if alloc.remaining > 0 and lp_fraction > 0 and owed > 0:
            amount = min(alloc.remaining, owed / lp_fraction)
            lp_paid = amount * lp_fraction
            alloc.lp_pref += lp_paid
            alloc.gp_share += amount * gp_fraction
            alloc.remaining -= amount
            owed -= lp_paid
        return max(0.0, owed)

    def _pay_catch_up(
        self,
        tier: WaterfallTier,
        alloc: _YearAllocation,
        state: WaterfallState,
        target: Optional[float],
    ) -> None:
        gp_fraction = tier.catch_up_pct / 100
        if target is None:
            amount = alloc.remaining
        else:
            capital = state.capital_returned + alloc.lp_capital + alloc.gp_capital
            total_profit = (
                state.lp_cumulative + state.gp_cumulative + alloc.lp_total + alloc.gp_total - capital
            )
            gp_profit = (
                state.gp_cumulative + alloc.gp_total - state.gp_capital_returned - alloc.gp_capital
            )
            shortfall = target * total_profit - gp_profit
            if shortfall <= 0:
                amount = 0.0
            elif gp_fraction <= target:
                amount = alloc.remaining  # Target unreachable at this catch-up rate
            else:
                amount = min(alloc.remaining, shortfall / (gp_fraction - target))

        alloc.gp_catch_up += amount * gp_fraction
        alloc.lp_share += amount * (1 - gp_fraction)
        alloc.remaining -= amount

    def _pay_to_hurdle(
        self,
        tier: WaterfallTier,
        alloc: _YearAllocation,
        state: WaterfallState,
        prior_split: Tuple[float, float],
    ) -> None:
        _, lp_fraction = prior_split
        needed = _hurdle_lp_amount(state.lp_flows, tier.irr_hurdle) - alloc.lp_total
        if needed <= 0:
            return
        if lp_fraction > 0:
            amount = min(alloc.remaining, needed / lp_fraction)
        else:
            amount = alloc.remaining
        alloc.pay_split(amount, prior_split)
        if alloc.remaining > 0:
            logger.debug(f"LP IRR reached the {tier.irr_hurdle}% hurdle of tier '{tier.name}'")

    # ------------------------------------------------------------------
    # Fold
    # ------------------------------------------------------------------

    def _feeds_hurdle(self, index: int) -> bool:
        tiers = self.config.tiers
        return index + 1 < len(tiers) and tiers[index + 1].kind is TierKindEnum.IRR_HURDLE

    def _distribute_year(
        self, state: WaterfallState, year: int, cash: float
    ) -> Tuple[WaterfallState, YearlyDistribution]:
        alloc = _YearAllocation(remaining=cash)
        lp_unreturned, gp_unreturned = state.lp_unreturned, state.gp_unreturned
        pref_owed = list(state.pref_owed)
        current_split: Optional[Tuple[float, float]] = None

        for index, tier in enumerate(self.config.tiers):
            kind = tier.kind
            if kind is TierKindEnum.PREFERRED_RETURN:
                # Pref accrues even in years with no cash
                pref_owed[index] = self._pay_pref(tier, alloc, pref_owed[index], lp_unreturned)
            elif kind is TierKindEnum.SPLIT:
                current_split = tier.split
                # A split feeding an IRR hurdle is paid by the hurdle tier
                if alloc.remaining > 0 and not self._feeds_hurdle(index):
                    alloc.pay_split(alloc.remaining, tier.split)
            elif alloc.remaining <= 0:
                if kind is TierKindEnum.IRR_HURDLE:
                    current_split = tier.split
            elif kind is TierKindEnum.RETURN_OF_CAPITAL:
                lp_unreturned, gp_unreturned = self._return_capital(
                    tier, alloc, lp_unreturned, gp_unreturned
                )
            elif kind is TierKindEnum.CATCH_UP:
                self._pay_catch_up(tier, alloc, state, self.config.catch_up_target(index))
            elif kind is TierKindEnum.IRR_HURDLE:
                prior_split = current_split or self.config.pro_rata_split
                self._pay_to_hurdle(tier, alloc, state, prior_split)
                current_split = tier.split

        if alloc.remaining > 0:
            alloc.pay_split(alloc.remaining, current_split or self.config.pro_rata_split)

        gp_pro_rata = cash * self.config.gp_equity_pct / 100
        lp_total, gp_total = alloc.lp_total, alloc.gp_total
        new_state = replace(
            state,
            lp_unreturned=lp_unreturned,
            gp_unreturned=gp_unreturned,
            pref_owed=tuple(pref_owed),
            lp_cumulative=state.lp_cumulative + lp_total,
            gp_cumulative=state.gp_cumulative + gp_total,
            capital_returned=state.capital_returned + alloc.lp_capital + alloc.gp_capital,
            gp_capital_returned=state.gp_capital_returned + alloc.gp_capital,
            lp_flows=state.lp_flows + (lp_total,),
        )
        distribution = YearlyDistribution(
            year=year,
            distributable_cash=cash,
            lp_capital_returned=alloc.lp_capital,
            gp_capital_returned=alloc.gp_capital,
            lp_pref=alloc.lp_pref,
            gp_catch_up=alloc.gp_catch_up,
            lp_share=alloc.lp_share,
            gp_share=alloc.gp_share,
            gp_promote=max(0.0, gp_total - gp_pro_rata),
            lp_total=lp_total,
            gp_total=gp_total,
            pref_shortfall=sum(pref_owed),
            lp_cumulative=new_state.lp_cumulative,
            gp_cumulative=new_state.gp_cumulative,
        )
        logger.debug(
            f"Year {year}: distributable={cash:,.0f} LP={lp_total:,.0f} GP={gp_total:,.0f} "
            f"pref shortfall={distribution.pref_shortfall:,.0f}"
        )
        return new_state, distribution

    def distribute(self, distributable: Sequence[float], total_equity: float) -> PromoteOutputs:
        """
        Run the waterfall over a hold period.

        Args:
            distributable: Cash available to partners in years 1..N, with exit
                proceeds included in the final year
            total_equity: Equity contributed by GP and LP together

        Returns:
            PromoteOutputs with yearly distributions and per-party metrics
        """
        gp_fraction, lp_fraction = self.config.pro_rata_split
        gp_equity = total_equity * gp_fraction
        lp_equity = total_equity * lp_fraction

        state = WaterfallState.initial(self.config, lp_equity, gp_equity)
        distributions: List[YearlyDistribution] = []
        for year, cash in enumerate(distributable, start=1):
            state, distribution = self._distribute_year(state, year, max(0.0, float(cash)))
            distributions.append(distribution)

        gp_cash_flows = [-gp_equity] + [d.gp_total for d in distributions]
        lp_cash_flows = [-lp_equity] + [d.lp_total for d in distributions]
        gp_received = sum(d.gp_total for d in distributions)
        lp_received = sum(d.lp_total for d in distributions)

        return PromoteOutputs(
            gp_equity=gp_equity,
            lp_equity=lp_equity,
            gp_irr=self._irr_pct(gp_cash_flows, gp_equity),
            lp_irr=self._irr_pct(lp_cash_flows, lp_equity),
            gp_equity_multiple=FinancialCalculations.calculate_equity_multiple(gp_cash_flows),
            lp_equity_multiple=FinancialCalculations.calculate_equity_multiple(lp_cash_flows),
            gp_total_return=gp_received,
            lp_total_return=lp_received,
            gp_promote_earned=sum(d.gp_promote for d in distributions),
            distributions=distributions,
            gp_cash_flows=gp_cash_flows,
            lp_cash_flows=lp_cash_flows,
        )

    def _irr_pct(self, cash_flows: List[float], equity: float) -> Optional[float]:
        if equity <= 0:
            return None
        irr = FinancialCalculations.calculate_irr(cash_flows, self.settings)
        return irr * 100 if irr is not None else None
