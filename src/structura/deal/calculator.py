# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structure models.

One function per financing structure turns a `DealInputsBase` plus that
structure's parameters into a `DealAnalysisResult`; `analyze_structure`
dispatches on the parameter variant. Every model follows the same outline:

1. **Sources & uses**: project cost, debt, equity
2. **Debt**: yearly debt service and year-end balances from `LoanAmortization`
3. **Operations**: projected NOI and equity cash flow per year
4. **Exit**: forward NOI at the exit cap, less selling costs and payoff
5. **Metrics**: IRR on `[-equity, cf1, ..., cfN + net sale]`, multiple,
   profit, coverage and break-even occupancy
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np
from typing_extensions import assert_never

from ..core.calculations import FinancialCalculations
from ..core.primitives import AnalysisSettings, StructureKindEnum
from ..debt import LoanAmortization, annual_debt_service
from .distribution_calculator import DistributionCalculator
from .inputs import DealInputsBase
from .projections import (
    YearlyProjection,
    break_even_occupancy,
    build_projections,
    exit_sale_price,
    forward_noi,
    project_operations,
)
from .results import (
    AssumableMetrics,
    BridgeRefiMetrics,
    DealAnalysisResult,
    SyndicationMetrics,
)
from .structures import (
    AllCashParameters,
    AssumableParameters,
    BridgeRefiParameters,
    ConventionalParameters,
    StructureParameters,
    SyndicationParameters,
    market_rate,
    parse_structure_parameters,
)

logger = logging.getLogger(__name__)


def _year_end_balances(loans: Sequence[LoanAmortization], years: int) -> np.ndarray:
    return np.array(
        [sum(loan.balance_at(12 * year) for loan in loans) for year in range(1, years + 1)]
    )


def _yearly_debt_service(loans: Sequence[LoanAmortization], years: int) -> np.ndarray:
    total = np.zeros(years)
    for loan in loans:
        total += loan.yearly_debt_service(years)
    return total


def _percent(value: Optional[float]) -> Optional[float]:
    return value * 100 if value is not None else None


def _finalize(
    base: DealInputsBase,
    kind: StructureKindEnum,
    settings: AnalysisSettings,
    *,
    total_project_cost: float,
    total_equity: float,
    total_debt: float,
    projections: List[YearlyProjection],
    equity_cash: Sequence[float],
    operating_cash: Sequence[float],
    sale_price: float,
    net_sale_for: Callable[[float], float],
    exit_noi: float,
    noi: float,
    debt_service: float,
    cash_flow: float,
    cash_on_cash: Optional[float],
    dscr: Optional[float],
    break_even: float,
    **extension: Any,
) -> DealAnalysisResult:
    """
    Assemble the shared metrics.

    `equity_cash` is the equity-level cash per year before the sale (after
    fees, including refinance proceeds); `operating_cash` is the same without
    capital events and feeds `total_cash_flow`.
    """

    def equity_flows(net_sale: float) -> List[float]:
        flows = [-total_equity] + [float(cf) for cf in equity_cash]
        flows[-1] += net_sale
        return flows

    def irr_for_sale_price(price: float) -> Optional[float]:
        return _percent(
            FinancialCalculations.calculate_irr(equity_flows(net_sale_for(price)), settings.irr)
        )

    net_sale = net_sale_for(sale_price)
    flows = equity_flows(net_sale)
    equity_multiple = FinancialCalculations.calculate_equity_multiple(flows)

    exit_sensitivity = None
    market_cap_rate = base.market.market_cap_rate
    if market_cap_rate is not None and exit_noi > 0:
        from ..analysis.sensitivity import build_exit_sensitivity

        exit_sensitivity = build_exit_sensitivity(market_cap_rate, exit_noi, irr_for_sale_price)

    return DealAnalysisResult(
        kind=kind,
        label=kind.label,
        total_project_cost=total_project_cost,
        total_equity=total_equity,
        total_debt=total_debt,
        noi=noi,
        debt_service=debt_service,
        cash_flow=cash_flow,
        cash_on_cash=cash_on_cash,
        cap_rate=base.going_in_cap_rate,
        dscr=dscr,
        projected_sale_price=sale_price,
        net_sale_proceeds=net_sale,
        total_cash_flow=float(np.sum(operating_cash)),
        total_profit=float(sum(flows)),
        equity_multiple=equity_multiple,
        irr=_percent(FinancialCalculations.calculate_irr(flows, settings.irr)),
        annualized_return=_percent(
            FinancialCalculations.calculate_annualized_return(equity_multiple, base.hold_period)
        ),
        break_even_occupancy=break_even,
        projections=projections,
        equity_cash_flows=flows,
        exit_sensitivity=exit_sensitivity,
        **extension,
    )


def _cash_on_cash_pct(cash_flow: float, equity: float) -> Optional[float]:
    return _percent(FinancialCalculations.calculate_cash_on_cash(cash_flow, equity))


# =============================================================================
# STRUCTURE MODELS
# =============================================================================


def analyze_all_cash(
    base: DealInputsBase, params: AllCashParameters, settings: AnalysisSettings
) -> DealAnalysisResult:
    """No debt: equity funds price, closing costs and renovation; DSCR is undefined."""
    years = base.hold_period
    total_equity = base.purchase_price + base.closing_costs + base.renovation_budget

    operations = project_operations(base)
    noi = operations["NOI"].to_numpy()
    projections = build_projections(base, operations, np.zeros(years), np.zeros(years))

    selling = settings.selling_costs_pct / 100
    return _finalize(
        base,
        params.kind,
        settings,
        total_project_cost=total_equity,
        total_equity=total_equity,
        total_debt=0.0,
        projections=projections,
        equity_cash=noi,
        operating_cash=noi,
        sale_price=exit_sale_price(base),
        net_sale_for=lambda price: price * (1 - selling),
        exit_noi=forward_noi(base),
        noi=base.year_one_noi,
        debt_service=0.0,
        cash_flow=base.year_one_noi,
        cash_on_cash=_cash_on_cash_pct(base.year_one_noi, total_equity),
        dscr=None,
        break_even=break_even_occupancy(base, 0.0),
    )


def analyze_conventional(
    base: DealInputsBase, params: ConventionalParameters, settings: AnalysisSettings
) -> DealAnalysisResult:
    """Single fixed-rate loan at LTV on purchase price; balance repaid at exit."""
    years = base.hold_period
    loan_amount = base.purchase_price * params.ltv_pct / 100
    origination_fee = loan_amount * params.loan_origination_pct / 100
    total_project_cost = (
        base.purchase_price + base.closing_costs + base.renovation_budget + origination_fee
    )
    total_equity = total_project_cost - loan_amount

    loan = LoanAmortization(
        loan_amount=loan_amount,
        annual_rate=params.interest_rate,
        amortization_years=params.amortization_years,
        interest_only=params.interest_only,
    )
    if params.loan_term_years < years:
        logger.debug(
            f"Loan term ({params.loan_term_years}y) is shorter than the hold ({years}y); "
            "the balloon is assumed rolled on the same terms"
        )

    debt_service = loan.yearly_debt_service(years)
    balances = _year_end_balances([loan], years)
    operations = project_operations(base)
    cash = operations["NOI"].to_numpy() - debt_service
    projections = build_projections(base, operations, debt_service, balances)

    noi = base.year_one_noi
    year_one_ds = float(debt_service[0])
    selling = settings.selling_costs_pct / 100
    exit_balance = float(balances[-1])
    return _finalize(
        base,
        params.kind,
        settings,
        total_project_cost=total_project_cost,
        total_equity=total_equity,
        total_debt=loan_amount,
        projections=projections,
        equity_cash=cash,
        operating_cash=cash,
        sale_price=exit_sale_price(base),
        net_sale_for=lambda price: price * (1 - selling) - exit_balance,
        exit_noi=forward_noi(base),
        noi=noi,
        debt_service=year_one_ds,
        cash_flow=noi - year_one_ds,
        cash_on_cash=_cash_on_cash_pct(noi - year_one_ds, total_equity),
        dscr=FinancialCalculations.calculate_dscr(noi, year_one_ds),
        break_even=break_even_occupancy(base, year_one_ds),
    )


def analyze_bridge_refi(
    base: DealInputsBase, params: BridgeRefiParameters, settings: AnalysisSettings
) -> DealAnalysisResult:
    """
    Bridge loan on purchase price, rent step-up after renovation, then a
    permanent refinance sized on after-repair value when the bridge term ends.

    Headline NOI, debt service and cash-on-cash are stabilized figures on the
    permanent loan, measured against the cash left in the deal after the
    refinance. When the refinance returns all invested equity the deal is
    flagged `infinite_return` and cash-on-cash is infinite.

    Raises:
        ValueError: If the bridge term runs past the hold period
    """
    years = base.hold_period
    refi_month = params.bridge_term_months
    if refi_month > years * 12:
        raise ValueError(
            f"Bridge term of {refi_month} months ends after the {years}-year hold period"
        )

    bridge_amount = base.purchase_price * params.bridge_ltv_pct / 100
    bridge_points = bridge_amount * params.bridge_origination_pts / 100
    total_project_cost = (
        base.purchase_price + base.closing_costs + base.renovation_budget + bridge_points
    )
    initial_equity = total_project_cost - bridge_amount

    bridge = LoanAmortization(
        loan_amount=bridge_amount,
        annual_rate=params.bridge_rate,
        amortization_years=params.bridge_amortization_years,
        interest_only=params.bridge_interest_only,
        payoff_month=refi_month,
    )

    # Stabilized operations: full rent bump, year-1 expense level
    stabilized = base.revalidate(
        gross_rental_income=base.gross_rental_income * (1 + params.post_rehab_rent_bump / 100)
    )
    stabilized_noi = stabilized.year_one_noi
    arv = params.arv_override or stabilized_noi / (base.exit_cap_rate / 100)

    refi_amount = max(0.0, arv * params.refi_ltv_pct / 100)
    bridge_payoff = bridge.balance_after(refi_month)
    refi_costs = refi_amount * params.refi_closing_costs_pct / 100
    cash_out = refi_amount - bridge_payoff - refi_costs
    cash_left = initial_equity - cash_out

    permanent = LoanAmortization(
        loan_amount=refi_amount,
        annual_rate=params.refi_rate,
        amortization_years=params.refi_amortization,
        start_month=refi_month,
    )
    loans = [bridge, permanent]
    debt_service = _yearly_debt_service(loans, years)
    balances = _year_end_balances(loans, years)

    operations = project_operations(
        base, rent_bump_pct=params.post_rehab_rent_bump, bump_month=params.stabilization_months
    )
    operating = operations["NOI"].to_numpy() - debt_service
    refi_year = math.ceil(refi_month / 12)
    equity_cash = operating.copy()
    equity_cash[refi_year - 1] += cash_out
    projections = build_projections(base, operations, debt_service, balances)

    permanent_ds = permanent.annual_debt_service
    stabilized_cash_flow = stabilized_noi - permanent_ds
    infinite_return = cash_left <= 0
    if infinite_return:
        cash_on_cash: Optional[float] = math.inf
        logger.info(f"Bridge refinance returns all equity (cash out {cash_out:,.0f})")
    else:
        cash_on_cash = _cash_on_cash_pct(stabilized_cash_flow, cash_left)

    selling = settings.selling_costs_pct / 100
    exit_balance = float(balances[-1])
    return _finalize(
        base,
        params.kind,
        settings,
        total_project_cost=total_project_cost,
        total_equity=initial_equity,
        total_debt=refi_amount,
        projections=projections,
        equity_cash=equity_cash,
        operating_cash=operating,
        sale_price=exit_sale_price(base, rent_bump_pct=params.post_rehab_rent_bump),
        net_sale_for=lambda price: price * (1 - selling) - exit_balance,
        exit_noi=forward_noi(base, rent_bump_pct=params.post_rehab_rent_bump),
        noi=stabilized_noi,
        debt_service=permanent_ds,
        cash_flow=stabilized_cash_flow,
        cash_on_cash=cash_on_cash,
        dscr=FinancialCalculations.calculate_dscr(stabilized_noi, permanent_ds),
        break_even=break_even_occupancy(stabilized, permanent_ds),
        bridge_refi=BridgeRefiMetrics(
            cash_out_on_refi=cash_out,
            cash_left_in_deal=cash_left,
            refi_loan_amount=refi_amount,
            total_bridge_cost=bridge.total_interest(refi_month) + bridge_points,
            after_repair_value=arv,
            refi_year=refi_year,
            infinite_return=infinite_return,
        ),
    )


def analyze_assumable(
    base: DealInputsBase, params: AssumableParameters, settings: AnalysisSettings
) -> DealAnalysisResult:
    """
    Assumed seller loan at its locked rate, amortizing over its remaining
    term, plus an optional supplemental loan. Savings compare the assumed
    payment with a market-rate loan of the same balance and term.
    """
    years = base.hold_period
    rate_now = params.market_rate
    if rate_now is None:
        rate_now = market_rate(base, settings=settings)
    supplemental_rate = (
        params.supplemental_rate if params.supplemental_rate is not None else rate_now
    )
    remaining_years = params.existing_term_remaining_months / 12

    assumed_balance = params.existing_loan_balance
    supplemental_amount = params.supplemental_loan_amount
    assumption_fee = assumed_balance * params.assumption_fee_pct / 100
    total_debt = assumed_balance + supplemental_amount
    total_project_cost = (
        base.purchase_price + base.closing_costs + base.renovation_budget + assumption_fee
    )
    total_equity = total_project_cost - total_debt
    if total_debt > total_project_cost:
        raise ValueError(
            f"Assumed and supplemental loans (${total_debt:,.0f}) exceed the "
            f"total project cost (${total_project_cost:,.0f})"
        )

    assumed = LoanAmortization(
        loan_amount=assumed_balance,
        annual_rate=params.existing_rate,
        amortization_years=remaining_years,
    )
    loans = [assumed]
    if supplemental_amount > 0:
        loans.append(
            LoanAmortization(
                loan_amount=supplemental_amount,
                annual_rate=supplemental_rate,
                amortization_years=params.supplemental_term_years,
            )
        )

    debt_service = _yearly_debt_service(loans, years)
    balances = _year_end_balances(loans, years)
    operations = project_operations(base)
    cash = operations["NOI"].to_numpy() - debt_service
    projections = build_projections(base, operations, debt_service, balances)

    annual_savings = (
        annual_debt_service(assumed_balance, rate_now, remaining_years)
        - assumed.annual_debt_service
    )
    total_savings = annual_savings * min(years, remaining_years)
    blended_rate = (
        (assumed_balance * params.existing_rate + supplemental_amount * supplemental_rate)
        / total_debt
        if total_debt > 0
        else params.existing_rate
    )

    noi = base.year_one_noi
    year_one_ds = float(debt_service[0])
    selling = settings.selling_costs_pct / 100
    exit_balance = float(balances[-1])
    return _finalize(
        base,
        params.kind,
        settings,
        total_project_cost=total_project_cost,
        total_equity=total_equity,
        total_debt=total_debt,
        projections=projections,
        equity_cash=cash,
        operating_cash=cash,
        sale_price=exit_sale_price(base),
        net_sale_for=lambda price: price * (1 - selling) - exit_balance,
        exit_noi=forward_noi(base),
        noi=noi,
        debt_service=year_one_ds,
        cash_flow=noi - year_one_ds,
        cash_on_cash=_cash_on_cash_pct(noi - year_one_ds, total_equity),
        dscr=FinancialCalculations.calculate_dscr(noi, year_one_ds),
        break_even=break_even_occupancy(base, year_one_ds),
        assumable=AssumableMetrics(
            blended_rate=blended_rate,
            annual_rate_savings=annual_savings,
            total_rate_savings=total_savings,
            assumption_fee=assumption_fee,
        ),
    )


def analyze_syndication(
    base: DealInputsBase, params: SyndicationParameters, settings: AnalysisSettings
) -> DealAnalysisResult:
    """
    Conventional debt with sponsor fees and a GP/LP waterfall.

    Acquisition and construction-management fees are capitalized into project
    cost, asset-management fees come out of each year's cash, and the
    disposition fee comes out of the sale. What remains is distributable
    cash, which the waterfall splits between GP and LP.
    """
    years = base.hold_period
    fees = params.fees
    loan_amount = base.purchase_price * params.ltv_pct / 100
    origination_fee = loan_amount * params.loan_origination_pct / 100
    total_project_cost = (
        base.purchase_price
        + base.closing_costs
        + base.renovation_budget
        + origination_fee
        + fees.capitalized_fees(base.purchase_price, base.renovation_budget)
    )
    total_equity = total_project_cost - loan_amount

    loan = LoanAmortization(
        loan_amount=loan_amount,
        annual_rate=params.interest_rate,
        amortization_years=params.amortization_years,
        interest_only=params.interest_only,
    )
    debt_service = loan.yearly_debt_service(years)
    balances = _year_end_balances([loan], years)
    operations = project_operations(base)
    asset_management = fees.asset_management_fees(operations["Gross Income"]).to_numpy()
    cash = operations["NOI"].to_numpy() - debt_service - asset_management
    projections = build_projections(base, operations, debt_service, balances, cash)

    sale_price = exit_sale_price(base)
    selling = settings.selling_costs_pct / 100
    exit_balance = float(balances[-1])

    def net_sale_for(price: float) -> float:
        return price * (1 - selling) - fees.disposition_fee(price) - exit_balance

    distributable = cash.copy()
    distributable[-1] += net_sale_for(sale_price)
    promote = DistributionCalculator(params.promote_config(), settings.irr).distribute(
        distributable, total_equity
    )

    noi = base.year_one_noi
    year_one_ds = float(debt_service[0])
    return _finalize(
        base,
        params.kind,
        settings,
        total_project_cost=total_project_cost,
        total_equity=total_equity,
        total_debt=loan_amount,
        projections=projections,
        equity_cash=cash,
        operating_cash=cash,
        sale_price=sale_price,
        net_sale_for=net_sale_for,
        exit_noi=forward_noi(base),
        noi=noi,
        debt_service=year_one_ds,
        cash_flow=float(cash[0]),
        cash_on_cash=_cash_on_cash_pct(float(cash[0]), total_equity),
        dscr=FinancialCalculations.calculate_dscr(noi, year_one_ds),
        break_even=break_even_occupancy(base, year_one_ds),
        syndication=SyndicationMetrics(
            gp_equity=promote.gp_equity,
            lp_equity=promote.lp_equity,
            gp_irr=promote.gp_irr,
            lp_irr=promote.lp_irr,
            gp_equity_multiple=promote.gp_equity_multiple,
            lp_equity_multiple=promote.lp_equity_multiple,
            gp_total_return=promote.gp_total_return,
            lp_total_return=promote.lp_total_return,
            total_fees=fees.total_fees(
                base.purchase_price,
                base.renovation_budget,
                operations["Gross Income"],
                sale_price,
            ),
            gp_promote_earned=promote.gp_promote_earned,
            distributions=promote.distributions,
        ),
    )


# =============================================================================
# DISPATCH
# =============================================================================


def analyze_structure(
    base: DealInputsBase,
    params: Union[StructureParameters, Dict[str, Any]],
    settings: Optional[AnalysisSettings] = None,
) -> DealAnalysisResult:
    """
    Analyze one financing structure.

    Args:
        base: Property-level inputs
        params: Structure parameters (or a mapping with a `kind` key)
        settings: Analysis settings; defaults to `AnalysisSettings()`

    Returns:
        DealAnalysisResult with year-level detail on `.projections`

    Raises:
        ValueError: Invalid parameters, or mechanics that cannot apply to this
            deal (e.g. a bridge term longer than the hold)
    """
    settings = settings or AnalysisSettings()
    if isinstance(params, dict):
        params = parse_structure_parameters(params)

    if isinstance(params, AllCashParameters):
        result = analyze_all_cash(base, params, settings)
    elif isinstance(params, ConventionalParameters):
        result = analyze_conventional(base, params, settings)
    elif isinstance(params, BridgeRefiParameters):
        result = analyze_bridge_refi(base, params, settings)
    elif isinstance(params, AssumableParameters):
        result = analyze_assumable(base, params, settings)
    elif isinstance(params, SyndicationParameters):
        result = analyze_syndication(base, params, settings)
    else:
        assert_never(params)

    irr_text = f"{result.irr:.2f}%" if result.irr is not None else "N/A"
    multiple_text = f"{result.equity_multiple:.2f}x" if result.equity_multiple is not None else "N/A"
    logger.info(
        f"Analyzed {result.label}: equity={result.total_equity:,.0f} IRR={irr_text} "
        f"multiple={multiple_text}"
    )
    return result

