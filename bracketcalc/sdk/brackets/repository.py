"""Rule-set loading.

Directory layout per family:

    <rules_dir>/<family>/index.yaml        # lists effective dates and labels
    <rules_dir>/<family>/2023-01-01.yaml   # one document per effective date

Documents may also be JSON (`.json`). When index.yaml is absent, every file
named after an ISO date is treated as a rule-set.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

import yaml
from pydantic import ValidationError

from .resolver import DateLike, list_selectable_dates, parse_as_of
from .schemas import DataUnavailable, IndexEntry, RuleSet, RuleSetIndex, SelectableDate

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.yaml"
DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


class RuleSetRepository:
    """Read-only source of one family's rule-sets."""

    family: str = ""

    def load_all(self) -> list[RuleSet]:
        """Return every known rule-set (order not guaranteed)."""
        raise NotImplementedError

    def load_one(self, effective_start: DateLike) -> RuleSet:
        """Return the rule-set with exactly this effective date."""
        raise NotImplementedError

    def list_index(self) -> list[SelectableDate]:
        """Return the available effective dates, oldest first."""
        return list_selectable_dates(self.load_all())


class InMemoryRuleSetRepository(RuleSetRepository):
    """Repository over rule-sets that are already decoded."""

    def __init__(self, rule_sets: Iterable[Union[RuleSet, dict]], family: str = ""):
        self.family = family
        self._rule_sets = [_coerce_rule_set(r, source="memory") for r in rule_sets]

    def load_all(self) -> list[RuleSet]:
        return list(self._rule_sets)

    def load_one(self, effective_start: DateLike) -> RuleSet:
        target = parse_as_of(effective_start)
        matches = [r for r in self._rule_sets if r.effective_start == target]
        if not matches:
            raise DataUnavailable(f"No {self.family or 'rule'} rule-set effective {target}")
        return matches[-1]


class FileRuleSetRepository(RuleSetRepository):
    """Repository reading YAML/JSON documents from a rules directory."""

    def __init__(self, rules_dir: Union[str, Path], family: str):
        self.rules_dir = Path(rules_dir)
        self.family = family

    @property
    def family_dir(self) -> Path:
        return self.rules_dir / self.family

    def _require_family_dir(self) -> Path:
        family_dir = self.family_dir
        if not family_dir.is_dir():
            raise DataUnavailable(f"Rule-set directory not found for family '{self.family}': {family_dir}")
        return family_dir

    def _load_index(self) -> list[IndexEntry]:
        """Read index.yaml, or scan date-named files if there is no index."""
        family_dir = self._require_family_dir()
        index_file = family_dir / INDEX_FILENAME

        if index_file.exists():
            raw = _read_document(index_file)
            if isinstance(raw, list):
                raw = {"rule_sets": raw}
            try:
                return list(RuleSetIndex.model_validate(raw or {}).rule_sets)
            except ValidationError as e:
                raise DataUnavailable(f"Malformed index {index_file}: {e}") from e

        entries = []
        for path in sorted(family_dir.iterdir()):
            if path.suffix not in DOCUMENT_SUFFIXES:
                continue
            try:
                effective = date.fromisoformat(path.stem)
            except ValueError:
                logger.debug(f"Skipping non-dated file {path.name}")
                continue
            entries.append(IndexEntry(effective_start=effective, file=path.name))
        return entries

    def _document_path(self, entry: IndexEntry) -> Path:
        family_dir = self.family_dir
        if entry.file:
            return family_dir / entry.file
        stem = entry.effective_start.isoformat()
        for suffix in DOCUMENT_SUFFIXES:
            candidate = family_dir / f"{stem}{suffix}"
            if candidate.exists():
                return candidate
        return family_dir / f"{stem}.yaml"

    def _load_entry(self, entry: IndexEntry) -> RuleSet:
        path = self._document_path(entry)
        if not path.exists():
            raise DataUnavailable(f"Rule-set file not found for {self.family} {entry.effective_start}: {path}")

        raw = _read_document(path)
        if not isinstance(raw, dict):
            raise DataUnavailable(f"Rule-set document must be a mapping: {path}")
        raw = dict(raw)
        raw.setdefault("effective_start", entry.effective_start)
        if entry.label and not raw.get("label"):
            raw["label"] = entry.label

        rule_set = _coerce_rule_set(raw, source=str(path))
        if rule_set.effective_start != entry.effective_start:
            raise DataUnavailable(
                f"{path} declares effective_start {rule_set.effective_start}, "
                f"index lists {entry.effective_start}"
            )
        return rule_set

    def load_all(self) -> list[RuleSet]:
        entries = self._load_index()
        rule_sets = [self._load_entry(entry) for entry in entries]
        logger.debug(f"Loaded {len(rule_sets)} {self.family} rule-set(s) from {self.family_dir}")
        return rule_sets

    def load_one(self, effective_start: DateLike) -> RuleSet:
        target = parse_as_of(effective_start)
        matches = [e for e in self._load_index() if e.effective_start == target]
        if not matches:
            raise DataUnavailable(f"No {self.family} rule-set effective {target} in {self.family_dir}")
        return self._load_entry(matches[-1])

    def list_index(self) -> list[SelectableDate]:
        entries = sorted(self._load_index(), key=lambda e: e.effective_start)
        by_date = {e.effective_start: e for e in entries}
        return [
            SelectableDate(key=d.isoformat(), label=e.label or d.isoformat())
            for d, e in by_date.items()
        ]


def _read_document(path: Path):
    """Parse a YAML or JSON file, wrapping failures as DataUnavailable."""
    try:
        with open(path, "r") as f:
            if path.suffix == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise DataUnavailable(f"Cannot read {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DataUnavailable(f"Cannot parse {path}: {e}") from e


def _coerce_rule_set(data: Union[RuleSet, dict], source: str) -> RuleSet:
    if isinstance(data, RuleSet):
        return data
    try:
        return RuleSet.model_validate(data)
    except ValidationError as e:
        raise DataUnavailable(f"Malformed rule-set ({source}): {e}") from e


def get_repository(family: str, rules_dir: Optional[Union[str, Path]] = None) -> FileRuleSetRepository:
    """Build a file repository for family, defaulting to the configured rules dir.

    Raises:
        ConfigNotFoundError: If the configured rules dir does not exist
    """
    if rules_dir is None:
        from ..config import get_rules_dir
        rules_dir = get_rules_dir(require_exists=True)
    return FileRuleSetRepository(rules_dir, family)
