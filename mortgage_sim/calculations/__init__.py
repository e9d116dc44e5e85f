"""
Financial Calculation Engine

Rate normalization, payment plans and financial indicators for credit
simulations. All calculations are pure functions of their inputs.
"""

from mortgage_sim.calculations import rates, amortization, irr, indicators

__all__ = ["rates", "amortization", "irr", "indicators"]
