"""
Loan Amortization Calculations

Builds French-method (constant installment) payment plans with an optional
total grace phase and partial grace phase ahead of regular amortization.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from mortgage_sim.exceptions import InvalidGraceConfigurationError, InvalidLoanTermsError
from mortgage_sim.models import (
    AncillaryCharges,
    GracePhase,
    LoanTerms,
    PaymentPeriod,
    ScheduleSummary,
)

logger = logging.getLogger(__name__)

NO_CHARGES = AncillaryCharges()


def calculate_payment(balance: float, monthly_rate: float, periods: int) -> float:
    """
    Calculate the constant installment that amortizes a balance.

    Matches Excel's PMT() function:

        payment = balance * rate / (1 - (1 + rate)^-periods)

    Args:
        balance: Balance to amortize
        monthly_rate: Effective monthly rate as decimal
        periods: Number of installments

    Returns:
        Installment amount (positive number)
    """
    if periods <= 0:
        raise ValueError("Number of periods must be positive")

    if monthly_rate == 0:
        return balance / periods

    return balance * monthly_rate / (1 - (1 + monthly_rate) ** -periods)


def validate_loan_terms(
    terms: LoanTerms,
    max_total_grace: Optional[int] = None,
    max_partial_grace: Optional[int] = None,
) -> None:
    """
    Reject terms that cannot produce a schedule.

    The range checks repeat the LoanTerms field constraints for terms built
    with model_construct, which skips validation.

    Args:
        terms: Loan terms
        max_total_grace: Most total grace months the lender allows; no limit when None
        max_partial_grace: Most partial grace months the lender allows; no limit when None

    Raises:
        InvalidLoanTermsError: If a field is out of range
        InvalidGraceConfigurationError: If grace periods exceed a limit or
            consume the term
    """
    if terms.principal <= 0:
        raise InvalidLoanTermsError(
            "Principal must be positive", context={"principal": terms.principal}
        )
    if terms.term_months <= 0:
        raise InvalidLoanTermsError(
            "Term must be positive", context={"term_months": terms.term_months}
        )
    if terms.annual_rate < 0:
        raise InvalidLoanTermsError(
            "Interest rate cannot be negative", context={"annual_rate": terms.annual_rate}
        )
    if terms.total_grace_months < 0 or terms.partial_grace_months < 0:
        raise InvalidLoanTermsError(
            "Grace periods cannot be negative",
            context={
                "total_grace_months": terms.total_grace_months,
                "partial_grace_months": terms.partial_grace_months,
            },
        )
    if max_total_grace is not None and terms.total_grace_months > max_total_grace:
        raise InvalidGraceConfigurationError(
            "Invalid grace configuration: total grace exceeds the allowed maximum",
            context={
                "total_grace_months": terms.total_grace_months,
                "max_total_grace": max_total_grace,
            },
        )
    if max_partial_grace is not None and terms.partial_grace_months > max_partial_grace:
        raise InvalidGraceConfigurationError(
            "Invalid grace configuration: partial grace exceeds the allowed maximum",
            context={
                "partial_grace_months": terms.partial_grace_months,
                "max_partial_grace": max_partial_grace,
            },
        )
    if terms.regular_months < 1:
        raise InvalidGraceConfigurationError(
            "Invalid grace configuration: grace periods must leave at least one amortizing period",
            context={
                "term_months": terms.term_months,
                "total_grace_months": terms.total_grace_months,
                "partial_grace_months": terms.partial_grace_months,
            },
        )


def plan_phases(terms: LoanTerms) -> List[Tuple[GracePhase, int]]:
    """Return the schedule phases in order, with their length in months."""
    return [
        (GracePhase.total, terms.total_grace_months),
        (GracePhase.partial, terms.partial_grace_months),
        (GracePhase.none, terms.regular_months),
    ]


def calculate_period_charges(
    balance: float, charges: AncillaryCharges
) -> Tuple[float, float, float]:
    """Life insurance on the opening balance, then the two flat charges."""
    return (
        balance * charges.life_insurance_rate,
        charges.property_insurance,
        charges.statement_fee,
    )


def total_grace_period(
    period: int,
    balance: float,
    monthly_rate: float,
    due_date: Optional[date] = None,
) -> PaymentPeriod:
    """Nothing is paid; interest is added to the balance."""
    interest = balance * monthly_rate
    return PaymentPeriod(
        period=period,
        phase=GracePhase.total,
        due_date=due_date,
        opening_balance=balance,
        interest=interest,
        payment=0.0,
        amortization=0.0,
        closing_balance=balance + interest,
        net_cash_flow=0.0,
    )


def partial_grace_period(
    period: int,
    balance: float,
    monthly_rate: float,
    charges: AncillaryCharges = NO_CHARGES,
    due_date: Optional[date] = None,
) -> PaymentPeriod:
    """Interest and charges are paid; the balance does not move."""
    interest = balance * monthly_rate
    life, prop, fee = calculate_period_charges(balance, charges)
    return PaymentPeriod(
        period=period,
        phase=GracePhase.partial,
        due_date=due_date,
        opening_balance=balance,
        interest=interest,
        payment=interest,
        amortization=0.0,
        closing_balance=balance,
        life_insurance=life,
        property_insurance=prop,
        statement_fee=fee,
        net_cash_flow=interest + life + prop + fee,
    )


def amortizing_period(
    period: int,
    balance: float,
    monthly_rate: float,
    installment: float,
    charges: AncillaryCharges = NO_CHARGES,
    is_last: bool = False,
    due_date: Optional[date] = None,
) -> PaymentPeriod:
    """
    Split the constant installment into interest and principal.

    The last period amortizes exactly the remaining balance so the loan
    closes at zero.
    """
    interest = balance * monthly_rate
    if is_last:
        amortization = balance
        closing_balance = 0.0
    else:
        amortization = installment - interest
        closing_balance = balance - amortization

    payment = amortization + interest
    life, prop, fee = calculate_period_charges(balance, charges)
    return PaymentPeriod(
        period=period,
        phase=GracePhase.none,
        due_date=due_date,
        opening_balance=balance,
        interest=interest,
        payment=payment,
        amortization=amortization,
        closing_balance=closing_balance,
        life_insurance=life,
        property_insurance=prop,
        statement_fee=fee,
        net_cash_flow=payment + life + prop + fee,
    )


def generate_schedule(
    terms: LoanTerms,
    monthly_rate: float,
    charges: Optional[AncillaryCharges] = None,
) -> List[PaymentPeriod]:
    """
    Generate the full payment plan, one entry per month.

    Args:
        terms: Loan terms (principal, term and grace lengths are used here)
        monthly_rate: Effective monthly rate as decimal
        charges: Insurance and fees; zero when omitted

    Returns:
        List of payment periods ordered by period number

    Raises:
        InvalidGraceConfigurationError: If grace periods consume the term
        InvalidLoanTermsError: If principal, term or rate are out of range
    """
    validate_loan_terms(terms)
    if monthly_rate <= -1:
        raise InvalidLoanTermsError(
            "Monthly rate must be greater than -100%", context={"monthly_rate": monthly_rate}
        )
    charges = charges or NO_CHARGES

    schedule: List[PaymentPeriod] = []
    balance = terms.principal
    period = 0

    for phase, months in plan_phases(terms):
        logger.debug("Phase %s: %d months from balance %.2f", phase.name, months, balance)
        installment = 0.0
        if phase is GracePhase.none:
            installment = calculate_payment(balance, monthly_rate, months)

        for i in range(1, months + 1):
            period += 1
            due = None
            if terms.disbursement_date is not None:
                due = terms.disbursement_date + relativedelta(months=period)

            if phase is GracePhase.total:
                row = total_grace_period(period, balance, monthly_rate, due)
            elif phase is GracePhase.partial:
                row = partial_grace_period(period, balance, monthly_rate, charges, due)
            else:
                row = amortizing_period(
                    period,
                    balance,
                    monthly_rate,
                    installment,
                    charges,
                    is_last=(i == months),
                    due_date=due,
                )

            schedule.append(row)
            balance = row.closing_balance

    return schedule


def summarize_schedule(schedule: List[PaymentPeriod]) -> ScheduleSummary:
    """Calculate totals over a payment plan."""
    regular = [row for row in schedule if row.phase is GracePhase.none]

    return ScheduleSummary(
        installment=regular[0].payment if regular else 0.0,
        capitalized_interest=sum(
            row.interest for row in schedule if row.phase is GracePhase.total
        ),
        total_interest=sum(row.interest for row in schedule),
        total_amortization=sum(row.amortization for row in schedule),
        total_life_insurance=sum(row.life_insurance for row in schedule),
        total_property_insurance=sum(row.property_insurance for row in schedule),
        total_statement_fees=sum(row.statement_fee for row in schedule),
        total_paid=sum(row.net_cash_flow for row in schedule),
    )
