"""
Exceptions raised by the simulation engine.

Input problems abort the whole computation and reach the caller unchanged.
IRR non-convergence is not an error: it is flagged on the result instead.
"""

from typing import Any, Dict, Optional


class SimulationError(Exception):
    """Base class for all simulation errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({details})"
        return self.message


class InvalidLoanTermsError(SimulationError, ValueError):
    """Raised when loan terms cannot produce a schedule."""


class InvalidGraceConfigurationError(InvalidLoanTermsError):
    """Raised when grace periods leave no regular amortizing period."""
