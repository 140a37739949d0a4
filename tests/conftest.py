"""Shared fixtures for salary-calc tests."""

import json

import pytest
import yaml

from salarycalc.sdk import clear_rules_cache, load_rules_file
from salarycalc.sdk.config import get_builtin_rules_dir


@pytest.fixture
def rules():
    """Shipped 2024 rule set."""
    return load_rules_file(get_builtin_rules_dir() / "2024.yaml")


@pytest.fixture
def raw_rules():
    """Shipped 2024 rule data as a plain dict, for building variants."""
    with open(get_builtin_rules_dir() / "2024.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    monkeypatch.setenv("SALARY_CALC_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({}))
    clear_rules_cache()

    yield {"config_dir": config_dir, "tmp_path": tmp_path}

    clear_rules_cache()
