"""Rule file CLI commands.

Lists, shows and validates <year>.yaml rule files.
"""

import json
from pathlib import Path

import click

from salarycalc.sdk import (
    RulesNotFoundError,
    RulesValidationError,
    find_rules_file,
    get_available_years,
    get_rules_dirs,
    load_rules_file,
    load_salary_rules,
)
from salarycalc.sdk.taxes import bracket_base_amounts


@click.group()
def rules():
    """Inspect salary rule files (<year>.yaml)."""
    pass


@rules.command("list")
def rules_list():
    """List available rule years and where they are loaded from."""
    click.echo("Rules directories (highest priority first):")
    for rules_dir in get_rules_dirs():
        status = "" if rules_dir.is_dir() else " (not found)"
        click.echo(f"  {rules_dir}{status}")
    click.echo()

    years = get_available_years()
    if not years:
        click.echo("No rule files found.")
        return

    click.echo("Available years:")
    for year in years:
        click.echo(f"  {year}: {find_rules_file(year)}")


@rules.command("show")
@click.argument("year", type=int, required=False)
@click.option("--quick-table", is_flag=True, help="Also print the base + marginal rate tax table")
def rules_show(year, quick_table):
    """Show resolved rules for YEAR (default: settings or latest) as JSON."""
    try:
        salary_rules = load_salary_rules(year)
    except (RulesNotFoundError, RulesValidationError) as e:
        raise click.ClickException(str(e))

    output = salary_rules.model_dump()
    if quick_table:
        output["quick_table"] = [
            {"over": lower, "base_tax": base, "rate": rate}
            for lower, base, rate in bracket_base_amounts(salary_rules.tax_brackets)
        ]
    click.echo(json.dumps(output, indent=2))


@rules.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def rules_validate(path):
    """Validate a rule file at PATH without installing it."""
    try:
        salary_rules = load_rules_file(Path(path))
    except RulesValidationError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"OK: {path} (year {salary_rules.year}, {len(salary_rules.tax_brackets)} brackets, "
        f"{len(salary_rules.zones)} zones)"
    )
