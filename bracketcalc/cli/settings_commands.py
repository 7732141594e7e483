"""Settings CLI commands for Bracket Calc.

Manages settings.json - rules directory, output format, cache TTL.
"""

import click
from pathlib import Path

from bracketcalc.sdk import (
    BUNDLED_RULES_DIR,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_rules_dir,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_dir: custom rule-sets directory
    - default_output_format: json or text
    - cache_ttl_seconds: rule-set cache lifetime for long-running servers
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
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    rules_dir = get_rules_dir()
    suffix = " (bundled)" if rules_dir == BUNDLED_RULES_DIR else ""
    click.echo(f"  rules_dir: {rules_dir}{suffix}")


@settings.command("rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_dir, revert to bundled rule-sets")
def settings_rules_dir(path, clear):
    """Set or clear the custom rule-sets directory.

    PATH must contain one sub-directory per family (tax/, sss/), each with
    an index.yaml and one document per effective date.

    Examples:
        bracket-calc settings rules-dir ~/rule-sets
        bracket-calc settings rules-dir --clear
    """
    if clear:
        current = load_settings()
        if "rules_dir" in current:
            del current["rules_dir"]
            save_settings(current)
            click.echo("Cleared rules_dir setting.")
            click.echo(f"Rules directory is now: {get_rules_dir()}")
        else:
            click.echo("rules_dir was not set.")
        return

    if not path:
        current_rules_dir = load_settings().get("rules_dir")
        if current_rules_dir:
            click.echo(f"Current rules_dir: {current_rules_dir}")
        else:
            click.echo(f"No custom rules_dir set. Using: {get_rules_dir()}")
        return

    rules_path = Path(path).expanduser().resolve()
    if not rules_path.is_dir():
        raise click.ClickException(f"Not a directory: {rules_path}")

    set_setting("rules_dir", str(rules_path))
    click.echo(f"Set rules_dir: {rules_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("format")
@click.argument("fmt", required=False, type=click.Choice(["json", "text"]))
def settings_format(fmt):
    """Show or set the default output format."""
    if not fmt:
        click.echo(f"default_output_format: {get_setting('default_output_format')}")
        return
    set_setting("default_output_format", fmt)
    click.echo(f"Set default_output_format: {fmt}")
