"""Salary Calc SDK - Core functionality for gross/net salary conversion."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    validate_setting,
    SETTINGS_KEYS,
    # Rule files
    get_rules_dirs,
    get_available_years,
    find_rules_file,
    load_rules_file,
    load_salary_rules,
    clear_rules_cache,
    get_default_year,
    get_default_zone,
    RulesNotFoundError,
    RulesValidationError,
)

from .schemas import (
    TaxBracket,
    ContributionRates,
    InsuranceRates,
    AllowanceConfig,
    InsuranceCeilings,
    Zone,
    SalaryLimits,
    SalaryRules,
    SalaryInput,
    InsuranceBreakdown,
    ConversionResult,
)

from .errors import (
    SalaryCalcError,
    InvalidSalaryRange,
    InvalidDependentCount,
    InvalidZone,
    InvalidInsuranceBase,
    InversionUnreachable,
)

from .convert import (
    convert,
    validate_input,
    gross_to_net,
    net_to_gross,
    resolve_zone,
)

from .solver import (
    solve_gross,
    bisect_gross,
    gross_breakpoints,
    MAX_BISECTION_ITERATIONS,
)

from .rounding import round_amount, allocate_rounded

from . import taxes

__all__ = [
    # Settings
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "validate_setting",
    "SETTINGS_KEYS",
    # Rule files
    "get_rules_dirs",
    "get_available_years",
    "find_rules_file",
    "load_rules_file",
    "load_salary_rules",
    "clear_rules_cache",
    "get_default_year",
    "get_default_zone",
    "RulesNotFoundError",
    "RulesValidationError",
    # Schemas
    "TaxBracket",
    "ContributionRates",
    "InsuranceRates",
    "AllowanceConfig",
    "InsuranceCeilings",
    "Zone",
    "SalaryLimits",
    "SalaryRules",
    "SalaryInput",
    "InsuranceBreakdown",
    "ConversionResult",
    # Errors
    "SalaryCalcError",
    "InvalidSalaryRange",
    "InvalidDependentCount",
    "InvalidZone",
    "InvalidInsuranceBase",
    "InversionUnreachable",
    # Conversion
    "convert",
    "validate_input",
    "gross_to_net",
    "net_to_gross",
    "resolve_zone",
    # Solver
    "solve_gross",
    "bisect_gross",
    "gross_breakpoints",
    "MAX_BISECTION_ITERATIONS",
    # Rounding
    "round_amount",
    "allocate_rounded",
    # Taxes module
    "taxes",
]
