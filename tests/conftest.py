"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mortgage_sim.config import Settings, get_settings
from mortgage_sim.models import AncillaryCharges, LoanTerms


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset them around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with the shipped defaults, ignoring any env file."""
    return Settings(_env_file=None)


@pytest.fixture
def plain_terms():
    """100,000 over 12 months at 12% effective, no grace."""
    return LoanTerms(
        principal=100000,
        term_months=12,
        annual_rate=12.0,
        rate_type="EFFECTIVE",
    )


@pytest.fixture
def grace_terms():
    """Credit with both grace phases."""
    return LoanTerms(
        principal=150000,
        term_months=60,
        annual_rate=10.0,
        rate_type="NOMINAL",
        compounding="QUARTERLY",
        total_grace_months=3,
        partial_grace_months=4,
    )


@pytest.fixture
def charges():
    """Life insurance, property insurance and statement fee."""
    return AncillaryCharges(
        life_insurance_rate=0.00035,
        property_insurance=37.5,
        statement_fee=5.0,
    )
