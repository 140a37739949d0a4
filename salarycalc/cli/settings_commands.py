"""Settings CLI commands for Salary Calc.

Manages settings.json - default year, default zone, custom rules directory.
"""

import click

from salarycalc.sdk import (
    SETTINGS_KEYS,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
    validate_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - default_year: rule year used when --year is not given
    - default_zone: region used when --zone is not given
    - rules_dir: directory searched first for <year>.yaml rule files
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        return

    click.echo("Current settings:")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(SETTINGS_KEYS)))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    Examples:
        salary-calc settings set default_zone II
        salary-calc settings set rules_dir ~/salary-rules
    """
    valid, result = validate_setting(key, value)
    if not valid:
        raise click.ClickException(result)

    set_setting(key, result)
    click.echo(f"Set {key}: {result}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("unset")
@click.argument("key", type=click.Choice(sorted(SETTINGS_KEYS)))
def settings_unset(key):
    """Remove KEY, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key}.")
    else:
        click.echo(f"{key} was not set.")
