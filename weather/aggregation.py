"""
Hourly Weather Aggregation
==========================
Normalizes hourly readings from the prediction API into daily figures.

Upstream data has gone through several generations, so the same physical
quantity arrives under different field names:

    precipitation:  precipitation -> precipitacao_total -> Chuva_aberta
    temperature:    temperature -> temp_media -> mean(temp_max, temp_min) -> temp_max
    date:           fullDate -> date

Each quantity is resolved by an ordered tuple of accessors. An accessor
returns a number or None; the first number wins. A reading with no usable
precipitation field contributes 0 rather than failing the aggregation.
"""

import math
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence


Accessor = Callable[[dict], Optional[float]]


def as_number(value) -> Optional[float]:
    """Return value as float if it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def numeric_field(name: str) -> Accessor:
    """Accessor reading a single numeric field."""
    def accessor(reading: dict) -> Optional[float]:
        return as_number(reading.get(name))
    accessor.__name__ = f"field_{name}"
    return accessor


def midpoint_field(low_name: str, high_name: str) -> Accessor:
    """Accessor averaging two numeric fields; None unless both are present."""
    def accessor(reading: dict) -> Optional[float]:
        low = as_number(reading.get(low_name))
        high = as_number(reading.get(high_name))
        if low is None or high is None:
            return None
        return (low + high) / 2
    accessor.__name__ = f"midpoint_{low_name}_{high_name}"
    return accessor


PRECIPITATION_ACCESSORS = (
    numeric_field('precipitation'),
    numeric_field('precipitacao_total'),
    numeric_field('Chuva_aberta'),
)

TEMPERATURE_ACCESSORS = (
    numeric_field('temperature'),
    numeric_field('temp_media'),
    midpoint_field('temp_min', 'temp_max'),
    numeric_field('temp_max'),
)

# Daily extremes are taken from the hourly maximum first
EXTREME_TEMPERATURE_ACCESSORS = (
    numeric_field('temp_max'),
    numeric_field('temperature'),
    numeric_field('temp_media'),
)

DATE_FIELDS = ('fullDate', 'date')


def resolve_first(reading: dict, accessors: Sequence[Accessor]) -> Optional[float]:
    """Return the first non-None value produced by the accessors."""
    for accessor in accessors:
        value = accessor(reading)
        if value is not None:
            return value
    return None


def resolve_precipitation(reading: dict) -> float:
    """Precipitation of one reading in mm; 0 when no known field holds a number."""
    value = resolve_first(reading, PRECIPITATION_ACCESSORS)
    return 0.0 if value is None else value


def resolve_temperature(reading: dict) -> Optional[float]:
    """Temperature of one reading in °C, or None."""
    return resolve_first(reading, TEMPERATURE_ACCESSORS)


def resolve_date(reading: dict) -> Optional[date]:
    """
    Calendar date of a reading.

    Accepts date/datetime objects and ISO strings ('2024-01-01' or
    '2024-01-01T13:00:00'). An unusable field falls through to the next one;
    None when no field holds a date.
    """
    for name in DATE_FIELDS:
        value = reading.get(name)
        if value is None or value == '':
            continue
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip()[:10])
            except ValueError:
                continue
    return None


def aggregate_daily(readings: Iterable[dict]) -> List[Dict[str, object]]:
    """
    Sum hourly precipitation into one total per calendar day.

    Readings without a date are skipped. Identical readings are not
    deduplicated; each one counts.

    Args:
        readings: Hourly readings of any supported shape

    Returns:
        List of {'date': 'YYYY-MM-DD', 'total': mm} sorted by date
    """
    totals: Dict[date, float] = defaultdict(float)

    for reading in readings:
        day = resolve_date(reading)
        if day is None:
            continue
        totals[day] += resolve_precipitation(reading)

    return [
        {'date': day.isoformat(), 'total': totals[day]}
        for day in sorted(totals)
    ]


def daily_temperature_range(readings: Iterable[dict]) -> List[Dict[str, object]]:
    """
    Highest and lowest hourly temperature per calendar day.

    Days where no reading carries a temperature are left out.

    Returns:
        List of {'date', 'temp_max', 'temp_min', 'readings'} sorted by date
    """
    temps: Dict[date, List[float]] = defaultdict(list)

    for reading in readings:
        day = resolve_date(reading)
        if day is None:
            continue
        value = resolve_first(reading, EXTREME_TEMPERATURE_ACCESSORS)
        if value is not None:
            temps[day].append(value)

    return [
        {
            'date': day.isoformat(),
            'temp_max': max(temps[day]),
            'temp_min': min(temps[day]),
            'readings': len(temps[day]),
        }
        for day in sorted(temps)
    ]
