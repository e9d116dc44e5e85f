"""
Simulate the demo housing credit and print its payment plan.
Uses the standard charge preset and the configured opportunity cost.
"""
import logging
import sys
import os
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mortgage_sim.config import get_settings
from mortgage_sim.models import LoanTerms
from mortgage_sim.services.simulation import default_charges, simulate_credit


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    # 20-year credit, 6 months total grace then 6 months partial grace
    terms = LoanTerms(
        principal=250000,
        term_months=240,
        annual_rate=9.5,
        rate_type="EFECTIVA",
        total_grace_months=6,
        partial_grace_months=6,
        disbursement_date=date(2025, 1, 15),
    )
    charges = default_charges(terms.principal, settings)

    simulation = simulate_credit(terms, charges, settings=settings)

    print(f"Credit: {terms.principal:,.2f} over {terms.term_months} months")
    print(f"  Rate: {terms.annual_rate:.2f}% {terms.rate_type.value}")
    print(f"  Monthly rate: {simulation.monthly_rate:.6%}")
    print(f"  Installment: {simulation.summary.installment:,.2f}")
    print(f"  Capitalized interest: {simulation.summary.capitalized_interest:,.2f}")
    print(f"  Total paid: {simulation.summary.total_paid:,.2f}")

    print("\nPeriod  Due         Grace  Opening       Interest    Payment     Charges   Closing")
    for row in simulation.schedule[:18]:
        print(
            f"{row.period:>6}  {row.due_date}  {row.phase.value:^5}  "
            f"{row.opening_balance:>12,.2f}  {row.interest:>10,.2f}  "
            f"{row.payment:>10,.2f}  {row.charges:>8,.2f}  {row.closing_balance:>12,.2f}"
        )
    print(f"... {len(simulation.schedule) - 18} more periods")

    indicators = simulation.indicators
    print(f"\nNPV at {indicators.discount_rate_annual:.2f}% COK: {indicators.npv:,.2f}")
    print(f"IRR: {indicators.irr_annual:.4f}%")
    print(f"TCEA: {indicators.tcea:.4f}%")
    if not (indicators.irr_converged and indicators.tcea_converged):
        print("Warning: IRR did not converge; indicators are estimates.")


if __name__ == "__main__":
    main()
