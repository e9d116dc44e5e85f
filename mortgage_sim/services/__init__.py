"""
Application services module.
"""

from mortgage_sim.services.simulation import default_charges, simulate_credit

__all__ = ["default_charges", "simulate_credit"]
