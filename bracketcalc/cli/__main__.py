"""Bracket Calc CLI - Command-line interface for bracket lookups."""

import json

import click
from rich.console import Console

from bracketcalc import __version__
from bracketcalc.sdk import (
    FAMILIES,
    ConfigNotFoundError,
    DataUnavailable,
    build_engine,
    configure_logging,
    get_setting,
)

from .settings_commands import settings as settings_group

FORMAT_CHOICES = click.Choice(["json", "text"])


def _engine(family: str, rules_dir):
    try:
        # One-shot CLI calls gain nothing from the TTL cache
        return build_engine(family, rules_dir=rules_dir, ttl_seconds=0)
    except KeyError as e:
        raise click.ClickException(str(e.args[0]))
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))


def _output_format(fmt):
    return fmt or get_setting("default_output_format", "json")


def _run(action):
    """Run an SDK call, converting domain errors to CLI errors."""
    try:
        return action()
    except DataUnavailable as e:
        raise click.ClickException(f"Rule-set data unavailable: {e}")
    except ValueError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="bracket-calc")
def cli():
    """Bracket Calc - dated tax and contribution bracket lookups.

    Rule-sets are loaded from (in order):

    \b
    1. BRACKET_CALC_RULES_DIR environment variable
    2. settings.json 'rules_dir' key (see 'bracket-calc settings')
    3. Rule-sets bundled with the package

    Set LOG_LEVEL=DEBUG to trace resolution.
    """
    configure_logging()


cli.add_command(settings_group)


@cli.command("bracket")
@click.argument("family")
@click.option("--date", "as_of", required=True, help="As-of date (YYYY-MM-DD)")
@click.option("--salary", type=float, required=True, help="Salary or taxable income")
@click.option("--type", "schedule", help="Schedule within the rule-set (e.g. monthly)")
@click.option("--rules-dir", type=click.Path(file_okay=False), help="Override the rule-sets directory")
@click.option("--format", "fmt", type=FORMAT_CHOICES, help="Output format (default: settings or json)")
def bracket_cmd(family, as_of, salary, schedule, rules_dir, fmt):
    """Compute the bracket breakdown for SALARY as of DATE.

    Examples:
        bracket-calc bracket tax --date 2024-03-15 --salary 30000 --type monthly
        bracket-calc bracket sss --date 2025-02-01 --salary 25000 --format text
    """
    engine = _engine(family, rules_dir)
    data = _run(lambda: engine.get_bracket(as_of, salary, schedule=schedule))

    if _output_format(fmt) == "text":
        from .renderers.bracket_renderer import render_breakdown
        render_breakdown(Console(), engine.family.name, data)
    else:
        click.echo(json.dumps(data, indent=2))


@cli.command("dates")
@click.argument("family")
@click.option("--rules-dir", type=click.Path(file_okay=False), help="Override the rule-sets directory")
@click.option("--format", "fmt", type=FORMAT_CHOICES, help="Output format (default: settings or json)")
def dates_cmd(family, rules_dir, fmt):
    """List the effective dates available for FAMILY."""
    engine = _engine(family, rules_dir)
    dates = _run(engine.select_dates)

    if _output_format(fmt) == "text":
        from .renderers.bracket_renderer import render_dates
        render_dates(Console(), engine.family.name, dates)
    else:
        click.echo(json.dumps(dates, indent=2))


@cli.command("table")
@click.argument("family")
@click.option("--date", "as_of", required=True, help="As-of date (YYYY-MM-DD)")
@click.option("--type", "schedule", help="Schedule within the rule-set (e.g. monthly)")
@click.option("--rules-dir", type=click.Path(file_okay=False), help="Override the rule-sets directory")
@click.option("--format", "fmt", type=FORMAT_CHOICES, help="Output format (default: settings or json)")
def table_cmd(family, as_of, schedule, rules_dir, fmt):
    """Show the full labeled bracket table in effect on DATE."""
    engine = _engine(family, rules_dir)
    data = _run(lambda: engine.get_table(as_of, schedule=schedule))

    if _output_format(fmt) == "text":
        from .renderers.bracket_renderer import render_table
        render_table(Console(), engine.family.name, data)
    else:
        click.echo(json.dumps(data, indent=2))


@cli.command("families")
def families_cmd():
    """List the known rule families."""
    for family in FAMILIES.values():
        schedules = f" (types: {', '.join(family.schedules)})" if family.schedules else ""
        click.echo(f"{family.name}: {family.description}{schedules}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
