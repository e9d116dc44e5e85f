"""
Financial Indicators

NPV, IRR and TCEA (annual effective total-cost rate) of a payment plan,
seen from the borrower: the disbursement is an inflow at period 0 and every
payment is an outflow.
"""

from typing import List, Sequence

from mortgage_sim.calculations import irr
from mortgage_sim.calculations.rates import effective_annual_rate
from mortgage_sim.models import FinancialIndicators, PaymentPeriod


def build_cash_flows(
    principal: float,
    schedule: Sequence[PaymentPeriod],
    include_charges: bool = True,
) -> List[float]:
    """
    Cash-flow vector of length term + 1.

    Args:
        principal: Amount disbursed at period 0
        schedule: Payment plan
        include_charges: Use the full net cash flow (payment, insurance and
            fees) when True, only principal and interest when False

    Returns:
        [principal, -outflow_1, ..., -outflow_n]
    """
    if include_charges:
        return [principal] + [-row.net_cash_flow for row in schedule]
    return [principal] + [-row.payment for row in schedule]


def compute_indicators(
    principal: float,
    schedule: Sequence[PaymentPeriod],
    discount_rate_monthly: float,
    lower: float = irr.LOWER_BOUND,
    upper: float = irr.UPPER_BOUND,
    tolerance: float = irr.TOLERANCE,
    max_iterations: int = irr.MAX_ITERATIONS,
) -> FinancialIndicators:
    """
    Calculate NPV, IRR and TCEA for a payment plan.

    NPV and TCEA use the all-in cash flows; IRR uses principal and interest
    only. Non-convergence of either root is flagged, never raised.

    Args:
        principal: Amount disbursed
        schedule: Payment plan from generate_schedule
        discount_rate_monthly: Monthly rate used to discount for NPV
        lower, upper, tolerance, max_iterations: IRR bisection settings

    Returns:
        FinancialIndicators
    """
    all_in = build_cash_flows(principal, schedule, include_charges=True)
    interest_only = build_cash_flows(principal, schedule, include_charges=False)

    npv = irr.calculate_npv(all_in, discount_rate_monthly)
    interest_irr = irr.calculate_irr(interest_only, lower, upper, tolerance, max_iterations)
    all_in_irr = irr.calculate_irr(all_in, lower, upper, tolerance, max_iterations)

    irr_annual = effective_annual_rate(interest_irr.rate) * 100

    return FinancialIndicators(
        npv=npv,
        discount_rate=discount_rate_monthly,
        discount_rate_annual=effective_annual_rate(discount_rate_monthly) * 100,
        irr_monthly=interest_irr.rate,
        irr_annual=irr_annual,
        tcea_monthly=all_in_irr.rate,
        tcea=effective_annual_rate(all_in_irr.rate) * 100,
        tcea_interest_only=irr_annual,
        irr_converged=interest_irr.converged,
        tcea_converged=all_in_irr.converged,
    )
