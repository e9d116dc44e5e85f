"""
IRR and NPV Calculations

NPV over periodic cash flows and IRR by bisection. A credit's cash flows
are one positive disbursement followed by non-positive payments, so NPV
changes sign exactly once and bisection always closes on the root without
needing a derivative.
"""

import logging
from typing import Sequence

import numpy as np

from mortgage_sim.models import IRRResult

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
LOWER_BOUND = -0.99
UPPER_BOUND = 10.0
RATE_TOLERANCE = 1e-10


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Periodic cash flows, the first one at period 0
        discount_rate: Periodic discount rate (e.g., 0.0072 for 0.72% monthly)

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + discount_rate) ** periods))


def _signed_npv(flows: np.ndarray, rate: float) -> float:
    """
    A value with the same sign as NPV that stays finite across the bracket.

    For negative rates the flows are compounded to the last period instead
    of discounted to period 0, so (1 + rate) is never raised to a large
    negative power.
    """
    periods = np.arange(flows.size)
    if rate >= 0:
        return float(np.sum(flows * (1 + rate) ** -periods.astype(float)))
    return float(np.sum(flows * (1 + rate) ** (periods[-1] - periods).astype(float)))


def calculate_irr(
    cash_flows: Sequence[float],
    lower: float = LOWER_BOUND,
    upper: float = UPPER_BOUND,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
    rate_tolerance: float = RATE_TOLERANCE,
) -> IRRResult:
    """
    Calculate IRR (Internal Rate of Return) using bisection.

    A midpoint is accepted once the bracket around it is narrower than
    rate_tolerance and the NPV there is within tolerance.

    Args:
        cash_flows: Periodic cash flows, the first one at period 0
        lower: Lowest periodic rate searched (must be above -1)
        upper: Highest periodic rate searched
        tolerance: Largest absolute NPV accepted as zero
        max_iterations: Bisection steps before giving up
        rate_tolerance: Largest bracket half-width accepted around the root

    Returns:
        IRRResult with the periodic rate. When the bracket does not close
        within the iteration cap the midpoint of the final bracket is
        returned with converged=False.

    Raises:
        ValueError: If fewer than 2 cash flows or the bracket is invalid
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size < 2:
        raise ValueError("At least 2 cash flows required")
    if lower <= -1 or upper <= lower:
        raise ValueError(f"Invalid IRR bracket [{lower}, {upper}]")

    low_value = _signed_npv(flows, lower)
    high_value = _signed_npv(flows, upper)

    # An exact zero is a root whatever the scaling
    if low_value == 0:
        return IRRResult(rate=lower, converged=True, iterations=0)
    if high_value == 0:
        return IRRResult(rate=upper, converged=True, iterations=0)

    if (low_value < 0) == (high_value < 0):
        rate = (lower + upper) / 2
        logger.warning(
            "IRR is not bracketed by [%s, %s]; returning midpoint %s", lower, upper, rate
        )
        return IRRResult(rate=rate, converged=False, iterations=0)

    for iteration in range(1, max_iterations + 1):
        mid = (lower + upper) / 2
        value = _signed_npv(flows, mid)

        if value == 0:
            return IRRResult(rate=mid, converged=True, iterations=iteration)
        if (upper - lower) / 2 < rate_tolerance and abs(calculate_npv(flows, mid)) < tolerance:
            return IRRResult(rate=mid, converged=True, iterations=iteration)

        if (value < 0) == (low_value < 0):
            lower, low_value = mid, value
        else:
            upper = mid

    rate = (lower + upper) / 2
    logger.warning(
        "IRR did not converge after %d iterations; best estimate %s", max_iterations, rate
    )
    return IRRResult(rate=rate, converged=False, iterations=max_iterations)
