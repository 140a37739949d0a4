"""Errors raised by the conversion core.

Every error carries a stable ``kind`` string so consuming layers (CLI,
scripts) can branch on the failure without matching on messages.
None of these are retryable: the core is pure, so callers re-invoke
with corrected input.
"""


class SalaryCalcError(ValueError):
    """Base class for input and inversion failures."""

    kind = "SalaryCalcError"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": str(self), "details": self.details}


class InvalidSalaryRange(SalaryCalcError):
    """Salary (or target net) outside the configured limits."""

    kind = "InvalidSalaryRange"


class InvalidDependentCount(SalaryCalcError):
    """Dependant count outside [0, max_dependents]."""

    kind = "InvalidDependentCount"


class InvalidZone(SalaryCalcError):
    """Unknown region identifier."""

    kind = "InvalidZone"


class InvalidInsuranceBase(SalaryCalcError):
    """Negative insurance base, or contributions exceeding gross."""

    kind = "InvalidInsuranceBase"


class InversionUnreachable(SalaryCalcError):
    """No gross within the configured range reproduces the requested net."""

    kind = "InversionUnreachable"
