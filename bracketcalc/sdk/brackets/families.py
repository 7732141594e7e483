"""Rule family definitions.

A family is one kind of bracket schedule (withholding tax, SSS
contributions). The engine is the same for all of them; a family only
changes payload naming, the schedules it accepts and the compound parts it
totals.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class RuleFamily:
    """Configuration for one rule family."""

    name: str
    description: str = ""
    field_prefix: str = ""
    schedules: tuple[str, ...] = ()
    compound_groups: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def field_name(self, suffix: str) -> str:
        """Payload key for a breakdown field.

        Example:
            tax family: field_name("offset") -> "taxOffset"
            sss family: field_name("offset") -> "offset"
        """
        if not self.field_prefix:
            return suffix
        return f"{self.field_prefix}{suffix[0].upper()}{suffix[1:]}"

    def check_schedule(self, schedule: Optional[str]) -> Optional[str]:
        """Normalize a schedule name and reject ones this family does not define.

        Raises:
            ValueError: If the family has no such schedule
        """
        if schedule is None or schedule == "":
            return None
        normalized = schedule.strip().lower().replace("_", "-")
        if not self.schedules:
            raise ValueError(f"Family '{self.name}' has a single table; got type '{schedule}'")
        if normalized not in self.schedules:
            raise ValueError(
                f"Unknown type '{schedule}' for family '{self.name}'. "
                f"Expected one of: {', '.join(self.schedules)}"
            )
        return normalized


TAX = RuleFamily(
    name="tax",
    description="Withholding tax on compensation",
    field_prefix="tax",
    schedules=("daily", "weekly", "semi-monthly", "monthly"),
)

SSS = RuleFamily(
    name="sss",
    description="Social Security System contributions",
    field_prefix="",
    compound_groups={
        "employee": ("regular", "mpf"),
        "employer": ("regular", "mpf", "ec"),
        "monthly_salary_credit": ("regular", "mpf"),
    },
)

FAMILIES = {family.name: family for family in (TAX, SSS)}


def get_family(name: str) -> RuleFamily:
    """Look up a built-in family by name (case-insensitive).

    Raises:
        KeyError: If the family is not known
    """
    family = FAMILIES.get(name.strip().lower())
    if family is None:
        raise KeyError(f"Unknown rule family '{name}'. Known families: {', '.join(FAMILIES)}")
    return family
