"""
Credit simulation service.

Runs the full pipeline for one credit: rate normalization, payment plan,
totals and financial indicators. Policy defaults (opportunity cost, charge
preset, IRR bracket) come from settings unless the caller passes them.
"""

import logging
from typing import Optional

from mortgage_sim.calculations.amortization import (
    generate_schedule,
    summarize_schedule,
    validate_loan_terms,
)
from mortgage_sim.calculations.indicators import compute_indicators
from mortgage_sim.calculations.rates import normalize_to_monthly_rate
from mortgage_sim.config import Settings, get_settings
from mortgage_sim.models import (
    AncillaryCharges,
    CreditSimulation,
    LoanTerms,
    RateType,
)

logger = logging.getLogger(__name__)


def default_charges(principal: float, settings: Optional[Settings] = None) -> AncillaryCharges:
    """
    Standard charges for a housing credit.

    Life insurance on the outstanding balance, property insurance as a
    yearly rate on the amount financed billed monthly, and a flat
    statement fee.
    """
    settings = settings or get_settings()
    return AncillaryCharges(
        life_insurance_rate=settings.life_insurance_rate,
        property_insurance=principal * settings.property_insurance_rate / 12,
        statement_fee=settings.statement_fee,
    )


def simulate_credit(
    terms: LoanTerms,
    charges: Optional[AncillaryCharges] = None,
    discount_rate: Optional[float] = None,
    max_total_grace: Optional[int] = None,
    max_partial_grace: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> CreditSimulation:
    """
    Simulate a credit end to end.

    Args:
        terms: Loan terms
        charges: Insurance and fees; zero when omitted
        discount_rate: Opportunity cost as annual effective percent
            (e.g., 9.0); settings.discount_rate when omitted
        max_total_grace: Most total grace months allowed;
            settings.max_total_grace when omitted
        max_partial_grace: Most partial grace months allowed;
            settings.max_partial_grace when omitted
        settings: Settings override

    Returns:
        CreditSimulation with schedule, totals and indicators

    Raises:
        InvalidGraceConfigurationError: If grace periods exceed the allowed
            maxima or consume the term
        InvalidLoanTermsError: If the terms are otherwise out of range
    """
    settings = settings or get_settings()
    charges = charges or AncillaryCharges()
    if discount_rate is None:
        discount_rate = settings.discount_rate
    if max_total_grace is None:
        max_total_grace = settings.max_total_grace
    if max_partial_grace is None:
        max_partial_grace = settings.max_partial_grace
    validate_loan_terms(terms, max_total_grace, max_partial_grace)

    monthly_rate = normalize_to_monthly_rate(
        terms.annual_rate, terms.rate_type, terms.compounding
    )
    schedule = generate_schedule(terms, monthly_rate, charges)
    summary = summarize_schedule(schedule)

    discount_rate_monthly = normalize_to_monthly_rate(discount_rate, RateType.effective)
    indicators = compute_indicators(
        terms.principal,
        schedule,
        discount_rate_monthly,
        lower=settings.irr_lower_bound,
        upper=settings.irr_upper_bound,
        tolerance=settings.irr_tolerance,
        max_iterations=settings.irr_max_iterations,
    )

    if not (indicators.irr_converged and indicators.tcea_converged):
        logger.warning(
            "Low-confidence indicators for credit of %.2f over %d months",
            terms.principal,
            terms.term_months,
        )
    logger.debug(
        "Simulated %d periods: installment %.2f, TCEA %.4f%%",
        len(schedule),
        summary.installment,
        indicators.tcea,
    )

    return CreditSimulation(
        terms=terms,
        charges=charges,
        monthly_rate=monthly_rate,
        schedule=schedule,
        summary=summary,
        indicators=indicators,
    )
