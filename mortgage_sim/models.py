"""
Pydantic models for credit simulations.

Inputs (LoanTerms, AncillaryCharges) are immutable and validated on
construction. Outputs (PaymentPeriod, ScheduleSummary, FinancialIndicators)
are plain records the caller persists or renders.
"""

import enum
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RateType(str, enum.Enum):
    """How the annual rate of a credit is quoted."""

    effective = "EFFECTIVE"
    nominal = "NOMINAL"

    @classmethod
    def parse(cls, value) -> "RateType":
        """Parse a rate type label. Anything not effective is nominal."""
        if isinstance(value, cls):
            return value
        label = str(value).strip().upper()
        if label in ("EFFECTIVE", "EFECTIVA", "TEA"):
            return cls.effective
        return cls.nominal


class Compounding(str, enum.Enum):
    """Compounding frequency of a nominal annual rate."""

    monthly = "MONTHLY"
    quarterly = "QUARTERLY"
    semiannual = "SEMIANNUAL"
    annual = "ANNUAL"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]

    @classmethod
    def parse(cls, value) -> Optional["Compounding"]:
        """Parse a compounding label, returning None when unrecognized."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        return _COMPOUNDING_LABELS.get(str(value).strip().upper())


_PERIODS_PER_YEAR = {
    Compounding.monthly: 12,
    Compounding.quarterly: 4,
    Compounding.semiannual: 2,
    Compounding.annual: 1,
}

# Spanish labels are what persisted credits carry
_COMPOUNDING_LABELS = {
    "MONTHLY": Compounding.monthly,
    "MENSUAL": Compounding.monthly,
    "QUARTERLY": Compounding.quarterly,
    "TRIMESTRAL": Compounding.quarterly,
    "SEMIANNUAL": Compounding.semiannual,
    "SEMESTRAL": Compounding.semiannual,
    "ANNUAL": Compounding.annual,
    "ANUAL": Compounding.annual,
}


class GracePhase(str, enum.Enum):
    """Phase a payment period belongs to, by payment-plan grace code."""

    total = "T"
    partial = "P"
    none = "S"


class LoanTerms(BaseModel):
    """Terms of a credit to simulate."""

    model_config = ConfigDict(frozen=True)

    principal: float = Field(gt=0)
    term_months: int = Field(gt=0)
    annual_rate: float = Field(ge=0, description="Annual rate in percent, e.g. 12.0")
    rate_type: RateType = RateType.effective
    compounding: Compounding = Compounding.monthly  # only used for nominal rates
    total_grace_months: int = Field(default=0, ge=0)
    partial_grace_months: int = Field(default=0, ge=0)
    disbursement_date: Optional[date] = None

    @field_validator("rate_type", mode="before")
    @classmethod
    def _parse_rate_type(cls, value):
        return RateType.parse(value)

    @field_validator("compounding", mode="before")
    @classmethod
    def _parse_compounding(cls, value):
        return Compounding.parse(value) or Compounding.monthly

    @property
    def regular_months(self) -> int:
        """Months left for regular amortization after both grace phases."""
        return self.term_months - self.total_grace_months - self.partial_grace_months


class AncillaryCharges(BaseModel):
    """Monthly charges billed on top of principal and interest."""

    model_config = ConfigDict(frozen=True)

    life_insurance_rate: float = Field(
        default=0.0, ge=0, description="Monthly fraction of the opening balance"
    )
    property_insurance: float = Field(default=0.0, ge=0, description="Flat monthly amount")
    statement_fee: float = Field(default=0.0, ge=0, description="Flat monthly amount")


class PaymentPeriod(BaseModel):
    """One month of a payment plan."""

    model_config = ConfigDict(frozen=True)

    period: int
    phase: GracePhase
    due_date: Optional[date] = None
    opening_balance: float
    interest: float
    payment: float = Field(description="Principal plus interest paid this period")
    amortization: float
    closing_balance: float
    life_insurance: float = 0.0
    property_insurance: float = 0.0
    statement_fee: float = 0.0
    net_cash_flow: float = Field(
        description="Total paid by the borrower: payment plus every charge"
    )

    @property
    def charges(self) -> float:
        return self.life_insurance + self.property_insurance + self.statement_fee


class ScheduleSummary(BaseModel):
    """Totals over a payment plan."""

    installment: float = Field(description="Constant payment of the regular phase")
    capitalized_interest: float
    total_interest: float
    total_amortization: float
    total_life_insurance: float
    total_property_insurance: float
    total_statement_fees: float
    total_paid: float


class IRRResult(BaseModel):
    """Outcome of the IRR root finder."""

    model_config = ConfigDict(frozen=True)

    rate: float
    converged: bool
    iterations: int


class FinancialIndicators(BaseModel):
    """NPV, IRR and total-cost rates for a payment plan.

    Two cash-flow vectors are kept apart:

    * interest-only: disbursement, then principal-and-interest payments.
      ``irr_monthly`` and ``irr_annual`` come from this vector.
    * all-in: disbursement, then payments plus insurance and fees.
      ``npv``, ``tcea_monthly`` and ``tcea`` come from this vector.

    ``tcea_interest_only`` is the alternative total-cost definition that
    equals the annualized interest-only IRR. Callers pick the definition
    they report.
    """

    npv: float
    discount_rate: float = Field(description="Monthly discount rate used for NPV")
    discount_rate_annual: float = Field(description="Discount rate as annual effective percent")
    irr_monthly: float
    irr_annual: float = Field(description="Percent")
    tcea_monthly: float
    tcea: float = Field(description="Percent, all-in vector")
    tcea_interest_only: float = Field(description="Percent, interest-only vector")
    irr_converged: bool = True
    tcea_converged: bool = True


class CreditSimulation(BaseModel):
    """Everything produced for one simulation request."""

    terms: LoanTerms
    charges: AncillaryCharges
    monthly_rate: float
    schedule: List[PaymentPeriod]
    summary: ScheduleSummary
    indicators: FinancialIndicators
