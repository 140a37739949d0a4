"""Tests for the salary-calc CLI commands."""

import json

import pytest
import yaml
from click.testing import CliRunner

from salarycalc.cli.__main__ import cli


@pytest.fixture
def runner(isolated_env):
    return CliRunner()


class TestConversionCommands:
    """gross-to-net, net-to-gross and convert."""

    def test_gross_to_net(self, runner):
        result = runner.invoke(cli, ["gross-to-net", "20000000"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["net"] == 17_460_000
        assert data["total_tax"] == 440_000
        assert data["employee"]["total"] == 2_100_000
        assert data["year"] == 2024
        assert data["currency"] == "VND"
        assert data["employer_cost"] == 24_300_000

    def test_net_to_gross(self, runner):
        result = runner.invoke(cli, ["net-to-gross", "17460000"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["direction"] == "inverse"
        assert data["gross"] == 20_000_000

    def test_convert_with_options(self, runner):
        result = runner.invoke(cli, [
            "convert", "35000000", "--direction", "forward",
            "-d", "2", "-z", "ii", "--insurance-base", "10000000", "--year", "2023",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["zone"] == "II"
        assert data["dependants"] == 2
        assert data["insurance_base"] == 10_000_000
        assert data["year"] == 2023

    def test_invalid_zone(self, runner):
        result = runner.invoke(cli, ["gross-to-net", "20000000", "--zone", "Z"])

        assert result.exit_code == 1
        assert "InvalidZone" in result.output

    def test_non_finite_insurance_base(self, runner):
        result = runner.invoke(cli, ["gross-to-net", "20000000", "--insurance-base", "nan"])

        assert result.exit_code == 1
        assert "InvalidInsuranceBase" in result.output

    def test_out_of_range_salary(self, runner):
        result = runner.invoke(cli, ["gross-to-net", "500"])

        assert result.exit_code == 1
        assert "InvalidSalaryRange" in result.output

    def test_unreachable_net(self, runner):
        result = runner.invoke(cli, ["net-to-gross", "0"])

        assert result.exit_code == 1
        assert "InversionUnreachable" in result.output

    def test_missing_year(self, runner):
        result = runner.invoke(cli, ["gross-to-net", "20000000", "--year", "1999"])

        assert result.exit_code == 1
        assert "No salary rules" in result.output

    def test_default_zone_from_settings(self, runner):
        runner.invoke(cli, ["settings", "set", "default_zone", "IV"])
        result = runner.invoke(cli, ["gross-to-net", "120000000"])

        data = json.loads(result.output)
        assert data["zone"] == "IV"
        assert data["employee"]["unemployment"] == 690_000


class TestRulesCommands:
    """rules list/show/validate."""

    def test_list(self, runner):
        result = runner.invoke(cli, ["rules", "list"])

        assert result.exit_code == 0
        assert "2024:" in result.output
        assert "2023:" in result.output

    def test_show_with_quick_table(self, runner):
        result = runner.invoke(cli, ["rules", "show", "2024", "--quick-table"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["allowance"]["self_allowance"] == 11_000_000
        assert data["quick_table"][2]["base_tax"] == pytest.approx(750_000)

    def test_validate_good_file(self, runner, raw_rules, tmp_path):
        path = tmp_path / "candidate.yaml"
        path.write_text(yaml.dump(raw_rules))

        result = runner.invoke(cli, ["rules", "validate", str(path)])

        assert result.exit_code == 0
        assert "7 brackets" in result.output

    def test_validate_bad_file(self, runner, raw_rules, tmp_path):
        raw_rules["tax_brackets"][1]["lower_bound"] = 4_000_000
        path = tmp_path / "candidate.yaml"
        path.write_text(yaml.dump(raw_rules))

        result = runner.invoke(cli, ["rules", "validate", str(path)])

        assert result.exit_code == 1
        assert "Invalid rules file" in result.output


class TestSettingsCommands:
    """settings show/set/unset."""

    def test_set_show_unset(self, runner):
        result = runner.invoke(cli, ["settings", "set", "default_year", "2023"])
        assert result.exit_code == 0
        assert "Set default_year: 2023" in result.output

        result = runner.invoke(cli, ["settings", "show"])
        assert "default_year: 2023" in result.output

        result = runner.invoke(cli, ["settings", "unset", "default_year"])
        assert "Cleared default_year." in result.output

    def test_set_invalid_value(self, runner):
        result = runner.invoke(cli, ["settings", "set", "default_year", "soon"])

        assert result.exit_code == 1
        assert "Invalid year" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert "salary-calc" in result.output
