"""Rich renderer for bracket lookups and tables.

Transforms SDK JSON output into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table


def _money(value) -> str:
    return f"{value:,.2f}"


def render_breakdown(console: Console, family: str, data: dict) -> None:
    """Render a flattened bracket lookup.

    Args:
        console: Rich Console instance
        family: Rule family name (for the title)
        data: SDK output from BracketEngine.get_bracket()
    """
    bracket = data["bracket"]

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("key", style="dim")
    summary.add_column("value", justify="right")
    summary.add_row("Range", bracket.get("range_label", ""))
    summary.add_row("Rate", f"{bracket['percentage_rate']}%")

    # Breakdown fields follow the bracket key in payload order
    for key, value in data.items():
        if key == "bracket" or isinstance(value, dict):
            continue
        summary.add_row(key, _money(value))

    console.print(Panel(summary, title=f"{family} bracket", border_style="cyan"))

    groups = {k: v for k, v in data.items() if k != "bracket" and isinstance(v, dict)}
    if not groups:
        return

    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("Group")
    table.add_column("Part")
    table.add_column("Amount", justify="right")
    for group, parts in groups.items():
        for part, amount in parts.items():
            style = "bold" if part == "total" else None
            table.add_row(group, part, _money(amount), style=style)
    console.print(table)


def render_dates(console: Console, family: str, dates: list) -> None:
    table = Table(title=f"{family} effective dates", box=box.SIMPLE_HEAD)
    table.add_column("Key")
    table.add_column("Label")
    for entry in dates:
        table.add_row(entry["key"], entry["label"])
    console.print(table)


def render_table(console: Console, family: str, data: dict) -> None:
    """Render a materialized rule-set table."""
    title = f"{family} {data['key']}"
    if data.get("schedule"):
        title += f" ({data['schedule']})"

    table = Table(title=title, caption=data.get("label") or None, box=box.SIMPLE_HEAD)
    table.add_column("Range")
    table.add_column("Fixed", justify="right")
    table.add_column("Rate", justify="right")
    for row in data["brackets"]:
        table.add_row(row["range_label"], _money(row["fixed_amount"]), f"{row['percentage_rate']}%")
    console.print(table)
