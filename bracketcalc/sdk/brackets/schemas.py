"""Pydantic schemas for rule-set documents.

These schemas validate the rule-sets/<family>/*.yaml files and provide typed
access to brackets, schedules and compound parts.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DataUnavailable(Exception):
    """Raised when rule-set data cannot be loaded or is malformed."""
    pass


class NoApplicableRuleSet(DataUnavailable):
    """Raised when a family has no rule-sets to resolve against."""
    pass


class Bracket(BaseModel):
    """Single range bracket within a rule-set."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    range_start: float = Field(..., ge=0, description="Inclusive lower bound")
    range_end: Optional[float] = Field(default=None, description="Exclusive upper bound (None if open-ended)")
    fixed_amount: float = Field(default=0.0, ge=0, description="Base amount at the bracket floor")
    percentage_rate: float = Field(default=0.0, ge=0, le=100, description="Marginal rate in percent")
    parts: dict[str, float] = Field(default_factory=dict, description="Named fixed sub-components")

    @model_validator(mode="after")
    def _check_range(self) -> "Bracket":
        if self.range_end is not None and self.range_end <= self.range_start:
            raise ValueError(
                f"range_end {self.range_end} must be greater than range_start {self.range_start}"
            )
        return self

    @property
    def is_open_ended(self) -> bool:
        return self.range_end is None


def _check_contiguous(brackets: list[Bracket], where: str) -> None:
    """Require each range_end to meet the next start and the top bracket to be open-ended.

    Raises:
        ValueError: On a gap, an overlap or a bounded top bracket
    """
    ordered = sorted(brackets, key=lambda b: b.range_start)
    for current, following in zip(ordered, ordered[1:]):
        if current.range_end is not None and current.range_end != following.range_start:
            raise ValueError(
                f"{where}: bracket from {current.range_start} ends at {current.range_end} "
                f"but the next starts at {following.range_start}"
            )
    top = ordered[-1]
    if top.range_end is not None:
        raise ValueError(
            f"{where}: top bracket from {top.range_start} must be open-ended (got range_end {top.range_end})"
        )


class RuleSet(BaseModel):
    """A dated collection of brackets.

    Single-table families carry ``brackets`` directly. Families with several
    tables (e.g. withholding tax per pay period) carry ``schedules`` and name
    the one that populates ``brackets`` via ``default_schedule``.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    effective_start: date
    label: str = ""
    brackets: list[Bracket] = Field(default_factory=list)
    schedules: dict[str, list[Bracket]] = Field(default_factory=dict)
    default_schedule: Optional[str] = None
    schedule: Optional[str] = Field(default=None, description="Schedule that populated brackets")

    @model_validator(mode="before")
    @classmethod
    def _fill_default_schedule(cls, data):
        if not isinstance(data, dict):
            return data
        schedules = data.get("schedules") or {}
        if schedules and not data.get("brackets"):
            default = data.get("default_schedule") or next(iter(schedules))
            if default not in schedules:
                raise ValueError(f"default_schedule '{default}' not in schedules {sorted(schedules)}")
            data = {**data, "default_schedule": default, "schedule": default, "brackets": schedules[default]}
        return data

    @model_validator(mode="after")
    def _check_brackets(self) -> "RuleSet":
        if not self.brackets:
            raise ValueError(f"rule-set {self.effective_start} has no brackets")
        _check_contiguous(self.brackets, f"rule-set {self.effective_start}")
        for name, brackets in self.schedules.items():
            if not brackets:
                raise ValueError(f"schedule '{name}' of rule-set {self.effective_start} has no brackets")
            _check_contiguous(brackets, f"schedule '{name}' of rule-set {self.effective_start}")
        return self

    @property
    def key(self) -> str:
        return self.effective_start.isoformat()

    def schedule_names(self) -> list[str]:
        return list(self.schedules)

    def for_schedule(self, name: Optional[str]) -> "RuleSet":
        """Return a copy whose brackets are the named schedule's list.

        None returns the rule-set unchanged (default schedule).

        Raises:
            DataUnavailable: If the rule-set has no schedule by that name.
        """
        if name is None or name == self.schedule:
            return self
        if name not in self.schedules:
            available = ", ".join(self.schedules) or "none"
            raise DataUnavailable(
                f"Schedule '{name}' not defined for rule-set {self.key} (available: {available})"
            )
        return self.model_copy(update={"brackets": self.schedules[name], "schedule": name})


class IndexEntry(BaseModel):
    """One entry of a family's index.yaml."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    effective_start: date
    label: str = ""
    file: Optional[str] = Field(default=None, description="Document file name (default: <date>.yaml)")


class RuleSetIndex(BaseModel):
    """A family's index document listing all available rule-sets."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    family: Optional[str] = None
    rule_sets: list[IndexEntry] = Field(default_factory=list)


class SelectableDate(BaseModel):
    """Effective date option for selection lists."""
    model_config = ConfigDict(frozen=True)

    key: str
    label: str


class BreakdownResult(BaseModel):
    """Computed monetary breakdown for one located bracket."""
    model_config = ConfigDict(frozen=True)

    bracket: Bracket
    offset: float = Field(..., ge=0)
    marginal_amount: float
    fixed_amount: float
    total_amount: float
    compound: dict[str, dict[str, float]] = Field(default_factory=dict)
