"""Configuration management for Salary Calc.

Configuration comes from two places:

1. settings.json - Machine-specific preferences
   - default_year: rule year used when none is given
   - default_zone: region used when none is given
   - rules_dir: extra directory searched first for <year>.yaml rule files

2. Rule files - <year>.yaml, one per effective year
   - Shipped with the package under salarycalc/rules/
   - Overridable per machine by dropping a file with the same name into
     rules_dir or <config_dir>/rules/

Config directory resolution:
1. SALARY_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/salary-calc/ (XDG_CONFIG_HOME fallback)

Rule year resolution: the requested year if a file exists, otherwise the
latest year before it. Rules change mid-year at most, so an older file
stays valid until a newer one is published.
"""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .schemas import SalaryRules

logger = logging.getLogger(__name__)

APP_NAME = "salary-calc"
SETTINGS_FILENAME = "settings.json"
RULES_DIRNAME = "rules"
DEFAULT_ZONE = "I"

# Recognized settings.json keys and what they hold
SETTINGS_KEYS = {
    "default_year": "Rule year used when --year is not given",
    "default_zone": "Region used when --zone is not given",
    "rules_dir": "Directory searched first for <year>.yaml rule files",
}


class RulesNotFoundError(FileNotFoundError):
    """Raised when no rule file covers the requested year."""
    pass


class RulesValidationError(ValueError):
    """Raised when a rule file fails schema validation."""

    def __init__(self, source: Path, error: ValidationError):
        self.source = source
        self.errors = error.errors()
        lines = [f"Invalid rules file {source}:"]
        for err in self.errors:
            location = ".".join(str(part) for part in err["loc"]) or "<root>"
            lines.append(f"  {location}: {err['msg']}")
        super().__init__("\n".join(lines))


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. SALARY_CALC_CONFIG_PATH environment variable
    2. ~/.config/salary-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("SALARY_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting. Returns False if it was not set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def validate_setting(key: str, value: str) -> tuple[bool, Any]:
    """Validate and coerce a settings value given as text.

    Returns:
        Tuple of (is_valid, coerced_value_or_error_message)
    """
    if key not in SETTINGS_KEYS:
        valid = ", ".join(sorted(SETTINGS_KEYS))
        return False, f"Unknown setting '{key}'. Valid settings: {valid}"

    if key == "default_year":
        if not value.isdigit() or len(value) != 4:
            return False, f"Invalid year '{value}'. Must be 4 digits."
        return True, int(value)

    if key == "default_zone":
        return True, value.strip().upper()

    # rules_dir
    rules_path = Path(value).expanduser().resolve()
    if not rules_path.is_dir():
        return False, f"Not a directory: {rules_path}"
    return True, str(rules_path)


# =============================================================================
# Rule files
# =============================================================================


def get_builtin_rules_dir() -> Path:
    """Rule files shipped with the package."""
    return Path(__file__).parent.parent / RULES_DIRNAME


def get_rules_dirs() -> list[Path]:
    """Directories searched for rule files, highest priority first."""
    dirs = []
    custom = get_setting("rules_dir")
    if custom:
        dirs.append(Path(custom))
    dirs.append(get_config_dir() / RULES_DIRNAME)
    dirs.append(get_builtin_rules_dir())
    return dirs


def get_available_years() -> list[int]:
    """Sorted list of years with a rule file in any rules directory (descending)."""
    years = set()
    for rules_dir in get_rules_dirs():
        if rules_dir.is_dir():
            years.update(int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


def find_rules_file(year: int) -> Path:
    """Locate the rule file for a year, falling back to prior years.

    Raises:
        RulesNotFoundError: If no file exists for the year or any earlier year
    """
    candidate_years = [y for y in get_available_years() if y <= int(year)]
    if not candidate_years:
        raise RulesNotFoundError(
            f"No salary rules for {year} or earlier. "
            f"Searched: {', '.join(str(d) for d in get_rules_dirs())}"
        )

    resolved_year = candidate_years[0]
    if resolved_year != int(year):
        logger.info(f"No rules for {year}; using {resolved_year} rules")

    for rules_dir in get_rules_dirs():
        path = rules_dir / f"{resolved_year}.yaml"
        if path.exists():
            logger.debug(f"Rules for {year}: {path}")
            return path

    # get_available_years only lists files that exist
    raise RulesNotFoundError(f"Rules file for {resolved_year} disappeared during lookup")


def parse_rules(data: dict, source: Path) -> SalaryRules:
    """Validate raw rule data.

    Raises:
        RulesValidationError: If the data does not match the schema
    """
    try:
        return SalaryRules.model_validate(data)
    except ValidationError as e:
        raise RulesValidationError(source, e) from e


def load_rules_file(path: Path) -> SalaryRules:
    """Load and validate a single rule file."""
    path = Path(path)
    if not path.exists():
        raise RulesNotFoundError(f"Rules file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    return parse_rules(data, path)


@lru_cache(maxsize=32)
def _load_rules_cached(path: str, mtime: float) -> SalaryRules:
    return load_rules_file(Path(path))


def get_default_year() -> int:
    """Year from settings, else the latest available rule year."""
    year = get_setting("default_year")
    if year:
        return int(year)
    available = get_available_years()
    if not available:
        raise RulesNotFoundError("No salary rule files found")
    return available[0]


def get_default_zone() -> str:
    """Zone from settings, else Region I."""
    return get_setting("default_zone") or DEFAULT_ZONE


def load_salary_rules(year: Optional[int] = None) -> SalaryRules:
    """Load validated rules for a year (default: settings or latest).

    Loaded rule sets are cached by file path and modification time, so
    repeated conversions share one immutable SalaryRules instance.

    Raises:
        RulesNotFoundError: No rule file covers the year
        RulesValidationError: The rule file is invalid
    """
    if year is None:
        year = get_default_year()
    path = find_rules_file(year)
    return _load_rules_cached(str(path), path.stat().st_mtime)


def clear_rules_cache() -> None:
    """Drop cached rule sets (after editing rule files in place)."""
    _load_rules_cached.cache_clear()
