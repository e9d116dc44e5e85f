"""
Property-based tests for payment plan and indicator invariants.

Uses Hypothesis to check properties that must hold for every valid credit.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mortgage_sim.calculations.amortization import calculate_payment, generate_schedule
from mortgage_sim.calculations.indicators import build_cash_flows, compute_indicators
from mortgage_sim.calculations.irr import calculate_npv
from mortgage_sim.calculations.rates import normalize_to_monthly_rate
from mortgage_sim.models import AncillaryCharges, Compounding, GracePhase, LoanTerms, RateType


annual_rates = st.one_of(st.just(0.0), st.floats(min_value=0.01, max_value=30.0))


@st.composite
def loan_terms(draw, with_grace=True):
    """Valid loan terms, optionally with grace periods."""
    term = draw(st.integers(min_value=1, max_value=360))
    total_grace = 0
    partial_grace = 0
    if with_grace:
        total_grace = draw(st.integers(min_value=0, max_value=min(24, term - 1)))
        partial_grace = draw(
            st.integers(min_value=0, max_value=min(24, term - 1 - total_grace))
        )
    return LoanTerms(
        principal=draw(st.floats(min_value=1000.0, max_value=1e7, allow_nan=False)),
        term_months=term,
        annual_rate=draw(annual_rates),
        rate_type=draw(st.sampled_from(list(RateType))),
        compounding=draw(st.sampled_from(list(Compounding))),
        total_grace_months=total_grace,
        partial_grace_months=partial_grace,
    )


ancillary_charges = st.builds(
    AncillaryCharges,
    life_insurance_rate=st.floats(min_value=0.0, max_value=0.001),
    property_insurance=st.floats(min_value=0.0, max_value=100.0),
    statement_fee=st.floats(min_value=0.0, max_value=20.0),
)


def _monthly_rate(terms):
    return normalize_to_monthly_rate(terms.annual_rate, terms.rate_type, terms.compounding)


class TestScheduleProperties:
    """Invariants of generated payment plans."""

    @given(terms=loan_terms(), charges=ancillary_charges)
    @settings(max_examples=100, deadline=None)
    def test_final_balance_is_zero(self, terms, charges):
        schedule = generate_schedule(terms, _monthly_rate(terms), charges)
        assert len(schedule) == terms.term_months
        assert schedule[-1].closing_balance == 0.0

    @given(terms=loan_terms(), charges=ancillary_charges)
    @settings(max_examples=100, deadline=None)
    def test_balances_are_continuous(self, terms, charges):
        schedule = generate_schedule(terms, _monthly_rate(terms), charges)
        assert schedule[0].opening_balance == terms.principal
        for previous, current in zip(schedule, schedule[1:]):
            assert current.opening_balance == previous.closing_balance

    @given(terms=loan_terms())
    @settings(max_examples=100, deadline=None)
    def test_amortization_repays_balance(self, terms):
        """Principal repaid equals the principal plus any capitalized interest."""
        schedule = generate_schedule(terms, _monthly_rate(terms))
        capitalized = sum(r.interest for r in schedule if r.phase is GracePhase.total)
        total = sum(r.amortization for r in schedule)
        assert total == pytest.approx(terms.principal + capitalized, rel=1e-9)

    @given(terms=loan_terms(with_grace=False))
    @settings(max_examples=100, deadline=None)
    def test_no_grace_installment_matches_formula(self, terms):
        monthly = _monthly_rate(terms)
        schedule = generate_schedule(terms, monthly)
        expected = calculate_payment(terms.principal, monthly, terms.term_months)
        for row in schedule[:-1]:
            assert row.payment == pytest.approx(expected, rel=1e-9)
        assert schedule[-1].payment == pytest.approx(expected, rel=1e-6)
        assert sum(r.amortization for r in schedule) == pytest.approx(terms.principal, rel=1e-9)

    @given(terms=loan_terms(), charges=ancillary_charges)
    @settings(max_examples=100, deadline=None)
    def test_grace_phases(self, terms, charges):
        monthly = _monthly_rate(terms)
        schedule = generate_schedule(terms, monthly, charges)

        for row in schedule[: terms.total_grace_months]:
            assert row.phase is GracePhase.total
            assert row.net_cash_flow == 0
            assert row.payment == 0
            if monthly > 0:
                assert row.closing_balance > row.opening_balance

        partial_end = terms.total_grace_months + terms.partial_grace_months
        for row in schedule[terms.total_grace_months:partial_end]:
            assert row.phase is GracePhase.partial
            assert row.closing_balance == row.opening_balance
            assert row.net_cash_flow == pytest.approx(row.interest + row.charges)

    @given(
        principal=st.floats(min_value=1000.0, max_value=1e7, allow_nan=False),
        term=st.integers(min_value=1, max_value=360),
    )
    @settings(max_examples=100, deadline=None)
    def test_zero_rate_is_straight_line(self, principal, term):
        terms = LoanTerms(principal=principal, term_months=term, annual_rate=0.0)
        schedule = generate_schedule(terms, 0.0)
        for row in schedule:
            assert row.interest == 0
            assert row.amortization == pytest.approx(principal / term, rel=1e-9)


class TestIndicatorProperties:
    """Invariants of NPV and IRR."""

    @given(terms=loan_terms(), charges=ancillary_charges)
    @settings(max_examples=50, deadline=None)
    def test_npv_at_irr_is_zero(self, terms, charges):
        schedule = generate_schedule(terms, _monthly_rate(terms), charges)
        indicators = compute_indicators(terms.principal, schedule, 0.0072)

        assert indicators.irr_converged
        assert indicators.tcea_converged
        all_in = build_cash_flows(terms.principal, schedule)
        interest_only = build_cash_flows(terms.principal, schedule, include_charges=False)
        assert abs(calculate_npv(all_in, indicators.tcea_monthly)) < 1e-4
        assert abs(calculate_npv(interest_only, indicators.irr_monthly)) < 1e-4

    @given(
        principal=st.floats(min_value=0.01, max_value=10.0, allow_nan=False),
        term=st.integers(min_value=1, max_value=360),
        annual_rate=annual_rates,
    )
    @settings(max_examples=50, deadline=None)
    def test_small_principal_irr_matches_loan_rate(self, principal, term, annual_rate):
        terms = LoanTerms(principal=principal, term_months=term, annual_rate=annual_rate)
        monthly = _monthly_rate(terms)
        schedule = generate_schedule(terms, monthly)
        indicators = compute_indicators(principal, schedule, 0.0072)

        assert indicators.irr_converged
        assert abs(indicators.irr_monthly - monthly) < 1e-9

    @given(terms=loan_terms())
    @settings(max_examples=50, deadline=None)
    def test_results_are_repeatable(self, terms):
        monthly = _monthly_rate(terms)
        first = compute_indicators(terms.principal, generate_schedule(terms, monthly), 0.0072)
        second = compute_indicators(terms.principal, generate_schedule(terms, monthly), 0.0072)
        assert first == second
