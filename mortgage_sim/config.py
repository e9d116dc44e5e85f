"""
Simulation settings using Pydantic Settings.

These are policy defaults (opportunity cost, charge preset, root-finder
bounds). Engine functions take them as plain parameters; only the
simulation service reads them.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("MORTGAGE_SIM_APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables."""

    # App settings
    app_name: str = "Mortgage Simulator"
    log_level: str = "INFO"
    app_env: str = "development"

    # Opportunity cost (COK) for NPV, annual effective percent
    discount_rate: float = 9.0

    # Charge preset for housing credits
    life_insurance_rate: float = 0.00035  # monthly, on outstanding balance
    property_insurance_rate: float = 0.003  # yearly, on amount financed
    statement_fee: float = 5.0  # flat, per month

    # Lender limits on grace periods, in months
    max_total_grace: int = 12
    max_partial_grace: int = 12

    # IRR bisection
    irr_lower_bound: float = -0.99
    irr_upper_bound: float = 10.0
    irr_tolerance: float = 1e-4
    irr_max_iterations: int = 100

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        env_prefix = "MORTGAGE_SIM_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
