"""Bracket Calc MCP Server - FastMCP implementation for bracket lookup tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bracketcalc.sdk import (
    FAMILIES,
    BracketEngine,
    ConfigNotFoundError,
    DataUnavailable,
    build_engine,
    configure_logging,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("bracket-calc")

# One engine per family; each wraps a TTL-cached repository
_engines: dict[str, BracketEngine] = {}


def get_engine(family: str) -> BracketEngine:
    key = family.strip().lower()
    if key not in _engines:
        _engines[key] = build_engine(key)
    return _engines[key]


# --- Tools ---

@mcp.tool()
async def get_bracket(
    family: str = Field(description="Rule family ('tax' or 'sss')"),
    date: str = Field(description="As-of date (YYYY-MM-DD)"),
    salary: float = Field(description="Salary or taxable income for the period"),
    schedule: str | None = Field(default=None, description="Tax table type: daily, weekly, semi-monthly, monthly"),
) -> dict[str, Any]:
    """Compute the bracket breakdown for a salary as of a date.

    Tax results use taxOffset / taxFix / taxByPercentage / taxTotal.
    SSS results use offset / fix / byPercentage / total plus employee,
    employer and monthly_salary_credit part totals.
    """
    try:
        return get_engine(family).get_bracket(date, salary, schedule=schedule)
    except (KeyError, ValueError, DataUnavailable, ConfigNotFoundError) as e:
        logger.error(f"Error computing {family} bracket for {date}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_selectable_dates(
    family: str = Field(description="Rule family ('tax' or 'sss')"),
) -> dict[str, Any]:
    """List the effective dates available for a rule family, oldest first."""
    try:
        dates = get_engine(family).select_dates()
        return {"family": family, "dates": dates, "count": len(dates)}
    except (KeyError, DataUnavailable, ConfigNotFoundError) as e:
        logger.error(f"Error listing {family} dates: {e}")
        return {"error": str(e), "dates": [], "count": 0}


@mcp.tool()
async def get_table(
    family: str = Field(description="Rule family ('tax' or 'sss')"),
    date: str = Field(description="As-of date (YYYY-MM-DD)"),
    schedule: str | None = Field(default=None, description="Tax table type: daily, weekly, semi-monthly, monthly"),
) -> dict[str, Any]:
    """Get the full labeled bracket table in effect on a date."""
    try:
        return get_engine(family).get_table(date, schedule=schedule)
    except (KeyError, ValueError, DataUnavailable, ConfigNotFoundError) as e:
        logger.error(f"Error loading {family} table for {date}: {e}")
        return {"error": str(e), "brackets": []}


@mcp.tool()
async def list_families() -> dict[str, Any]:
    """List the known rule families and their table types."""
    return {
        "families": [
            {"name": f.name, "description": f.description, "schedules": list(f.schedules)}
            for f in FAMILIES.values()
        ]
    }


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
