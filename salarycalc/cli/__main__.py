"""Salary Calc CLI - Command-line interface for gross/net salary conversion."""

import json
import logging
import os

import click

from salarycalc import __version__
from salarycalc.sdk import (
    SalaryCalcError,
    SalaryInput,
    RulesNotFoundError,
    RulesValidationError,
    convert,
    get_default_zone,
    load_salary_rules,
)

from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.WARNING),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)


@click.group()
@click.version_option(version=__version__, prog_name="salary-calc")
def cli():
    """Salary Calc - Gross/net salary conversion.

    Converts a monthly gross salary to net (after insurance and personal
    income tax) and back. Results are printed as JSON.

    Rules are loaded from (in order):

    \b
    1. settings.json 'rules_dir' (if set)
    2. ~/.config/salary-calc/rules/<year>.yaml
    3. Rule files shipped with the package

    Run 'salary-calc rules list' to see available years.
    """
    pass


cli.add_command(rules_group)
cli.add_command(settings_group)


def _conversion_options(func):
    """Options shared by all conversion commands."""
    func = click.option(
        "--year", "-y", type=int, default=None,
        help="Rule year (default: settings default_year or latest)",
    )(func)
    func = click.option(
        "--insurance-base", type=float, default=None,
        help="Declared insurance salary (default: gross salary)",
    )(func)
    func = click.option(
        "--zone", "-z", default=None,
        help="Region identifier, e.g. I, II, III, IV (default: settings default_zone or I)",
    )(func)
    func = click.option(
        "--dependants", "-d", type=int, default=0, show_default=True,
        help="Number of registered dependants",
    )(func)
    return func


def _run_conversion(amount, direction, dependants, zone, insurance_base, year):
    """Load rules, convert, print JSON. Maps SDK errors to click errors."""
    try:
        rules = load_salary_rules(year)
    except (RulesNotFoundError, RulesValidationError) as e:
        raise click.ClickException(str(e))

    salary_input = SalaryInput(
        salary=amount,
        dependants=dependants,
        zone=zone or get_default_zone(),
        direction=direction,
        insurance_base=insurance_base,
    )

    try:
        result = convert(salary_input, rules)
    except SalaryCalcError as e:
        raise click.ClickException(f"{e.kind}: {e}")

    output = result.model_dump()
    output["year"] = rules.year
    output["currency"] = rules.currency
    output["employer_cost"] = result.employer_cost
    click.echo(json.dumps(output, indent=2))


@cli.command("gross-to-net")
@click.argument("gross", type=float)
@_conversion_options
def gross_to_net_cmd(gross, dependants, zone, insurance_base, year):
    """Convert a monthly GROSS salary to net.

    Examples:
        salary-calc gross-to-net 20000000
        salary-calc gross-to-net 35000000 -d 2 -z II
    """
    _run_conversion(gross, "forward", dependants, zone, insurance_base, year)


@cli.command("net-to-gross")
@click.argument("net", type=float)
@_conversion_options
def net_to_gross_cmd(net, dependants, zone, insurance_base, year):
    """Find the monthly gross salary that yields NET.

    Examples:
        salary-calc net-to-gross 17460000
        salary-calc net-to-gross 30000000 -d 1 --insurance-base 10000000
    """
    _run_conversion(net, "inverse", dependants, zone, insurance_base, year)


@cli.command("convert")
@click.argument("amount", type=float)
@click.option(
    "--direction", type=click.Choice(["forward", "inverse"]), default="forward",
    show_default=True, help="forward: AMOUNT is gross; inverse: AMOUNT is target net",
)
@_conversion_options
def convert_cmd(amount, direction, dependants, zone, insurance_base, year):
    """Convert AMOUNT in the given direction."""
    _run_conversion(amount, direction, dependants, zone, insurance_base, year)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
