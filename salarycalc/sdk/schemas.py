"""Pydantic schemas for salary rules, conversion inputs and results.

Rule schemas validate the rules/*.yaml files and provide typed access to
tax brackets, insurance rates, allowances, ceilings and regional minimum
wages. All schemas use extra='forbid' so typos in rule files cause clear
errors rather than silent ignoring, and frozen=True so a loaded rule set
can be shared across calls without copying.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


Direction = Literal["forward", "inverse"]


# =============================================================================
# Rule Schemas - loaded from rules/<year>.yaml
# =============================================================================


class TaxBracket(BaseModel):
    """Single progressive tax band."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_bound: float = Field(..., ge=0, description="Taxable income where the band starts")
    upper_bound: Optional[float] = Field(default=None, description="Band end (None for the top band)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")

    @model_validator(mode="after")
    def check_bounds(self) -> "TaxBracket":
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ValueError(
                f"upper_bound ({self.upper_bound}) must exceed lower_bound ({self.lower_bound})"
            )
        return self


class ContributionRates(BaseModel):
    """Insurance sub-rates for one side (employee or employer), in percent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    social: float = Field(..., ge=0, le=100, description="Social insurance rate (%)")
    health: float = Field(..., ge=0, le=100, description="Health insurance rate (%)")
    unemployment: float = Field(..., ge=0, le=100, description="Unemployment insurance rate (%)")

    @property
    def total(self) -> float:
        """Total contribution rate (%)."""
        return self.social + self.health + self.unemployment


class InsuranceRates(BaseModel):
    """Employee and employer contribution rates."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee: ContributionRates
    employer: ContributionRates

    @model_validator(mode="after")
    def check_employee_total(self) -> "InsuranceRates":
        # At 100% net would stay flat as gross rises
        if self.employee.total >= 100:
            raise ValueError(f"employee contribution total must be below 100% (got {self.employee.total})")
        return self


class AllowanceConfig(BaseModel):
    """Family allowances deducted before tax."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    self_allowance: float = Field(..., ge=0, description="Allowance for the taxpayer")
    per_dependent_allowance: float = Field(..., ge=0, description="Allowance per registered dependant")
    max_dependents: int = Field(..., ge=0, description="Highest accepted dependant count")


class InsuranceCeilings(BaseModel):
    """Caps on the salary used as insurance base.

    Social and health contributions are capped at base_salary times
    social_health_multiplier. Unemployment contributions are capped at the
    zone minimum wage times unemployment_multiplier.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_salary: float = Field(..., gt=0, description="Statutory base salary")
    social_health_multiplier: float = Field(default=20, gt=0)
    unemployment_multiplier: float = Field(default=20, gt=0)

    @property
    def social_health_cap(self) -> float:
        return self.base_salary * self.social_health_multiplier

    def unemployment_cap(self, zone: "Zone") -> float:
        return zone.minimum_wage * self.unemployment_multiplier


class Zone(BaseModel):
    """Region with its statutory minimum wage."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Human-readable region label")
    minimum_wage: float = Field(..., gt=0, description="Monthly regional minimum wage")


class SalaryLimits(BaseModel):
    """Accepted salary range and monetary precision."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min_salary: float = Field(..., gt=0, description="Lowest accepted gross salary")
    max_salary: float = Field(..., gt=0, description="Highest accepted gross salary")
    tolerance: float = Field(default=2, gt=0, description="Round-trip tolerance in currency units")
    rounding_unit: float = Field(default=1, gt=0, description="Smallest reported currency unit")

    @model_validator(mode="after")
    def check_range(self) -> "SalaryLimits":
        if self.max_salary <= self.min_salary:
            raise ValueError(
                f"max_salary ({self.max_salary}) must exceed min_salary ({self.min_salary})"
            )
        # Reported net can stay flat for three consecutive rounding units
        if self.tolerance < 2 * self.rounding_unit:
            raise ValueError(
                f"tolerance ({self.tolerance}) must be at least twice "
                f"rounding_unit ({self.rounding_unit})"
            )
        return self


class SalaryRules(BaseModel):
    """Complete conversion rules for a year."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    currency: str = "VND"
    tax_brackets: List[TaxBracket] = Field(..., min_length=1)
    insurance: InsuranceRates
    allowance: AllowanceConfig
    ceilings: InsuranceCeilings
    zones: Dict[str, Zone] = Field(..., min_length=1)
    limits: SalaryLimits

    @model_validator(mode="after")
    def check_bracket_table(self) -> "SalaryRules":
        """Validate the bracket table spans [0, inf) without gaps or overlaps."""
        errors = []
        brackets = self.tax_brackets

        if brackets[0].lower_bound != 0:
            errors.append(f"first bracket must start at 0 (got {brackets[0].lower_bound})")

        for i, (current, following) in enumerate(zip(brackets, brackets[1:])):
            if current.upper_bound is None:
                errors.append(f"bracket {i} is unbounded but is not the last bracket")
                continue
            if current.upper_bound != following.lower_bound:
                errors.append(
                    f"bracket {i} ends at {current.upper_bound} but bracket {i + 1} "
                    f"starts at {following.lower_bound}"
                )
            if following.rate <= current.rate:
                errors.append(
                    f"bracket {i + 1} rate ({following.rate}) must exceed "
                    f"bracket {i} rate ({current.rate})"
                )

        if brackets[-1].upper_bound is not None:
            errors.append("last bracket must be unbounded (upper_bound: null)")

        if errors:
            raise ValueError("; ".join(errors))

        return self


# =============================================================================
# Conversion Schemas
# =============================================================================


class SalaryInput(BaseModel):
    """One conversion request.

    Range checks live in convert.validate_input so each failure maps to a
    specific error kind; this schema only enforces types.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    salary: float = Field(..., description="Gross (forward) or target net (inverse)")
    dependants: int = Field(default=0, description="Registered dependants")
    zone: str = Field(..., description="Region identifier, e.g. 'I'")
    direction: Direction = "forward"
    insurance_base: Optional[float] = Field(
        default=None,
        description="Declared insurance salary; defaults to gross",
    )


class InsuranceBreakdown(BaseModel):
    """Contribution amounts for one side."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    social: float
    health: float
    unemployment: float
    total: float


class ConversionResult(BaseModel):
    """Immutable snapshot of one gross/net computation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    direction: Direction
    zone: str
    dependants: int
    gross: float
    net: float
    insurance_base: float
    employee: InsuranceBreakdown
    employer: InsuranceBreakdown
    self_allowance: float
    dependant_allowance: float
    total_allowance: float
    pre_tax_income: float
    taxable_income: float = Field(..., ge=0)
    bracket_taxes: List[float]
    total_tax: float = Field(..., ge=0)

    @property
    def employer_cost(self) -> float:
        """Total cost of employment (gross plus employer contributions)."""
        return self.gross + self.employer.total
