"""
Rate Conversions

Converts quoted annual rates into the effective monthly rate every other
calculation works with.
"""

from typing import Union

from mortgage_sim.models import Compounding, RateType

DEFAULT_PERIODS_PER_YEAR = 12


def compounding_periods(compounding: Union[Compounding, str, None]) -> int:
    """
    Number of compounding periods per year.

    Unrecognized labels fall back to monthly compounding instead of failing.
    """
    parsed = Compounding.parse(compounding)
    if parsed is None:
        return DEFAULT_PERIODS_PER_YEAR
    return parsed.periods_per_year


def annual_to_monthly_rate(effective_annual: float) -> float:
    """Convert an effective annual rate (decimal) to effective monthly."""
    return ((1 + effective_annual) ** (1 / 12)) - 1


def effective_annual_rate(monthly_rate: float) -> float:
    """Convert an effective monthly rate (decimal) to effective annual."""
    return ((1 + monthly_rate) ** 12) - 1


def normalize_to_monthly_rate(
    annual_rate: float,
    rate_type: Union[RateType, str] = RateType.effective,
    compounding: Union[Compounding, str, None] = Compounding.monthly,
) -> float:
    """
    Convert a quoted annual rate to an effective monthly rate.

    Args:
        annual_rate: Annual rate as percentage (e.g., 12.0 for 12%)
        rate_type: EFFECTIVE or NOMINAL
        compounding: Compounding frequency, only used for nominal rates

    Returns:
        Effective monthly rate as decimal (e.g., 0.009489 for 0.9489%)
    """
    if annual_rate == 0:
        return 0.0

    rate = annual_rate / 100

    if RateType.parse(rate_type) is RateType.effective:
        return annual_to_monthly_rate(rate)

    m = compounding_periods(compounding)
    return annual_to_monthly_rate(((1 + rate / m) ** m) - 1)
