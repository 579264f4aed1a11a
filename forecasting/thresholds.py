"""
Historical Threshold Table
==========================
Per-(month, weekday) sales statistics used as classification baselines.

The table is built once, explicitly, and handed to the evaluator. It is
read-only after construction, so any number of callers may share it.

JSON layout (keys are stringified month and weekday):

    {
        "1": {"days": {"0": {"name": "Monday", "mean": 8200.0,
                             "q1": 6900.0, "q3": 9400.0}, ...}},
        ...
        "reference": {"days": {"0": {...}, ...}}
    }

The optional "reference" block holds the fixed reference period used for
weather projection. When it is missing, each weekday's reference entry is
the average of that weekday's statistics across all months in the table.
"""

import json
import math
import os
from types import MappingProxyType
from typing import Dict, NamedTuple, Tuple

from config import settings
from forecasting.errors import MissingBaselineError, ThresholdTableError
from forecasting.rounding import round_money


REFERENCE_KEY = 'reference'


class ThresholdEntry(NamedTuple):
    """Historical sales statistics for one weekday of one month."""
    name: str
    mean: float
    q1: float
    q3: float


def _parse_entry(raw: dict, context: str) -> ThresholdEntry:
    """Build a validated ThresholdEntry from a raw JSON mapping."""
    if not isinstance(raw, dict):
        raise ThresholdTableError(f"{context}: expected an object, got {type(raw).__name__}")

    values = {}
    for field in ('mean', 'q1', 'q3'):
        value = raw.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ThresholdTableError(f"{context}: '{field}' must be a number")
        if not math.isfinite(value):
            raise ThresholdTableError(f"{context}: '{field}' must be finite")
        values[field] = float(value)

    name = raw.get('name')
    if not isinstance(name, str) or not name:
        raise ThresholdTableError(f"{context}: 'name' must be a non-empty string")

    return ThresholdEntry(name=name, mean=values['mean'], q1=values['q1'], q3=values['q3'])


def _parse_days(block: dict, context: str) -> Dict[int, ThresholdEntry]:
    """Parse the {"days": {"0": {...}}} block of one month."""
    if not isinstance(block, dict) or not isinstance(block.get('days'), dict):
        raise ThresholdTableError(f"{context}: expected a 'days' object")

    days = {}
    for weekday_key, raw_entry in block['days'].items():
        try:
            weekday = int(weekday_key)
        except (TypeError, ValueError):
            raise ThresholdTableError(f"{context}: invalid weekday key '{weekday_key}'")
        days[weekday] = _parse_entry(raw_entry, f"{context}, weekday {weekday}")
    return days


def _average_reference(entries: Dict[Tuple[int, int], ThresholdEntry]) -> Dict[int, ThresholdEntry]:
    """Average each weekday's statistics over every month in the table."""
    by_weekday: Dict[int, list] = {}
    for (month, weekday) in sorted(entries):
        by_weekday.setdefault(weekday, []).append(entries[(month, weekday)])

    reference = {}
    for weekday, month_entries in by_weekday.items():
        count = len(month_entries)
        reference[weekday] = ThresholdEntry(
            name=month_entries[0].name,
            mean=round_money(sum(e.mean for e in month_entries) / count),
            q1=round_money(sum(e.q1 for e in month_entries) / count),
            q3=round_money(sum(e.q3 for e in month_entries) / count),
        )
    return reference


class ThresholdTable:
    """
    Immutable lookup of historical thresholds keyed by (month, weekday).

    Args:
        entries: Mapping of (month 1-12, weekday 0-6) to ThresholdEntry
        reference: Optional mapping of weekday to the reference-period entry
    """

    def __init__(self, entries: Dict[Tuple[int, int], ThresholdEntry],
                 reference: Dict[int, ThresholdEntry] = None):
        checked = {}
        for (month, weekday), entry in entries.items():
            if not 1 <= month <= 12 or not 0 <= weekday <= 6:
                raise ThresholdTableError(f"Key out of range: month {month}, weekday {weekday}")
            checked[(month, weekday)] = self._check_invariant(entry, f"month {month}, weekday {weekday}")

        if reference is None:
            reference = _average_reference(checked)

        checked_reference = {}
        for weekday, entry in reference.items():
            if not 0 <= weekday <= 6:
                raise ThresholdTableError(f"Reference weekday out of range: {weekday}")
            checked_reference[weekday] = self._check_invariant(entry, f"reference weekday {weekday}")

        self._entries = MappingProxyType(checked)
        self._reference = MappingProxyType(checked_reference)

    @staticmethod
    def _check_invariant(entry: ThresholdEntry, context: str) -> ThresholdEntry:
        if not entry.q1 <= entry.mean <= entry.q3:
            raise ThresholdTableError(
                f"{context}: expected q1 <= mean <= q3, got "
                f"q1={entry.q1}, mean={entry.mean}, q3={entry.q3}"
            )
        return entry

    @classmethod
    def from_dict(cls, data: dict) -> 'ThresholdTable':
        """Build a table from the parsed JSON layout described above."""
        if not isinstance(data, dict):
            raise ThresholdTableError("Threshold data must be a JSON object")

        entries = {}
        reference = None
        for month_key, block in data.items():
            if month_key == REFERENCE_KEY:
                reference = _parse_days(block, "reference")
                continue
            try:
                month = int(month_key)
            except (TypeError, ValueError):
                raise ThresholdTableError(f"Invalid month key '{month_key}'")
            for weekday, entry in _parse_days(block, f"month {month}").items():
                entries[(month, weekday)] = entry

        return cls(entries, reference)

    @classmethod
    def from_json(cls, path: str) -> 'ThresholdTable':
        """Load a table from a JSON file."""
        with open(path, encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ThresholdTableError(f"Invalid JSON in {path}: {e}") from e
        return cls.from_dict(data)

    def get(self, month: int, weekday: int) -> ThresholdEntry:
        """Return the entry for (month, weekday) or raise MissingBaselineError."""
        try:
            return self._entries[(month, weekday)]
        except KeyError:
            raise MissingBaselineError(month, weekday) from None

    def reference_entry(self, weekday: int) -> ThresholdEntry:
        """Return the fixed reference-period entry for a weekday."""
        try:
            return self._reference[weekday]
        except KeyError:
            raise MissingBaselineError(None, weekday) from None

    def months(self) -> list:
        """Months that have at least one entry, ascending."""
        return sorted({month for month, _ in self._entries})

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def load_threshold_table(path: str = None) -> ThresholdTable:
    """
    Load the historical threshold table from disk.

    Args:
        path: JSON file path (defaults to settings.THRESHOLD_TABLE_PATH)

    Returns:
        ThresholdTable ready to inject into a ForecastEvaluator
    """
    path = path or settings.THRESHOLD_TABLE_PATH

    if not os.path.exists(path):
        raise ThresholdTableError(f"Threshold table not found: {path}")

    table = ThresholdTable.from_json(path)
    print(f"Loaded {len(table)} threshold entries across {len(table.months())} months from {path}")
    return table
