"""
Weather Data Loader
===================
Loads cached hourly weather readings from DuckDB and assembles the daily
weather figures used for classification.

The hourly_weather table mirrors the API's readings, so its columns vary with
the generation of data that was cached. Only the candidate columns that
exist in the table are selected.
"""

import os
from typing import Dict, List, Tuple

import duckdb
import pandas as pd

from config import settings
from weather.aggregation import (
    aggregate_daily,
    daily_temperature_range,
    resolve_date,
    resolve_temperature,
    as_number
)


HOURLY_TABLE = 'hourly_weather'

# Reading columns that may be present in the cache, in table order
HOURLY_COLUMNS = [
    'precipitation',
    'precipitacao_total',
    'Chuva_aberta',
    'temperature',
    'temp_media',
    'temp_max',
    'temp_min',
    'humidity',
    'radiation',
]


def _create_hourly_table(conn, columns: List[str]):
    """Create the hourly cache table with the given reading columns."""
    column_defs = ",\n                ".join(f'"{col}" DOUBLE' for col in columns)
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {HOURLY_TABLE} (
                store_no VARCHAR,
                date VARCHAR,
                reading_time VARCHAR,
                {column_defs}
        )
    """)


def save_hourly_readings(readings: List[dict], store_no, db_path: str = None) -> int:
    """
    Cache raw hourly readings for a store in DuckDB.

    Readings keep their original field names; unknown fields are dropped.
    Readings without a date are not cached.

    Args:
        readings: Hourly readings as returned by the API
        store_no: Store identifier
        db_path: Path to the DuckDB file

    Returns:
        Number of readings written
    """
    db_path = db_path or settings.HOURLY_WEATHER_DB_PATH
    os.makedirs(os.path.dirname(db_path) or '.', exist_ok=True)

    rows = []
    for reading in readings:
        day = resolve_date(reading)
        if day is None:
            continue
        row = {
            'store_no': str(store_no),
            'date': day.isoformat(),
            'reading_time': str(reading.get('date') or ''),
        }
        for col in HOURLY_COLUMNS:
            row[col] = as_number(reading.get(col))
        rows.append(row)

    if not rows:
        print(f"No dated hourly readings to cache for store {store_no}")
        return 0

    df = pd.DataFrame(rows, columns=['store_no', 'date', 'reading_time'] + HOURLY_COLUMNS)
    # Keep numeric dtype even when a whole column is missing
    df[HOURLY_COLUMNS] = df[HOURLY_COLUMNS].astype('float64')

    conn = duckdb.connect(db_path)
    try:
        _create_hourly_table(conn, HOURLY_COLUMNS)
        conn.register('hourly_df', df)
        conn.execute(f"INSERT INTO {HOURLY_TABLE} SELECT * FROM hourly_df")
        conn.unregister('hourly_df')
    finally:
        conn.close()

    print(f"Cached {len(rows)} hourly readings for store {store_no} in {db_path}")
    return len(rows)


def load_hourly_readings(db_path: str = None) -> Dict[Tuple[str, str], List[dict]]:
    """
    Load cached hourly readings from DuckDB.

    Args:
        db_path: Path to hourly_weather.db

    Returns:
        Dictionary keyed by (store_no, date) with lists of reading dicts
    """
    db_path = db_path or settings.HOURLY_WEATHER_DB_PATH
    readings: Dict[Tuple[str, str], List[dict]] = {}

    if not os.path.exists(db_path):
        print(f"Hourly weather database not found: {db_path}")
        return readings

    conn = duckdb.connect(db_path, read_only=True)
    try:
        columns = conn.execute(
            "SELECT column_name FROM information_schema.columns WHERE table_name = ?",
            [HOURLY_TABLE]
        ).fetchall()
        column_names = [col[0] for col in columns]
        if not column_names:
            print(f"No {HOURLY_TABLE} table in {db_path}")
            return readings

        reading_cols = [col for col in HOURLY_COLUMNS if col in column_names]
        select_cols = ", ".join(["store_no", "date"] + [f'"{col}"' for col in reading_cols])
        rows = conn.execute(f"""
            SELECT {select_cols}
            FROM {HOURLY_TABLE}
            ORDER BY store_no, date
        """).fetchall()
    finally:
        conn.close()

    for row in rows:
        key = (str(row[0]), str(row[1]))
        reading = {'fullDate': str(row[1])}
        for col, value in zip(reading_cols, row[2:]):
            value = as_number(value)
            if value is not None:
                reading[col] = value
        readings.setdefault(key, []).append(reading)

    print(f"Loaded {len(rows)} hourly readings for {len(readings)} store-days")
    return readings


def fill_missing_days_from_cache(readings: List[dict], dates: List[str], store_no,
                                 db_path: str = None) -> List[dict]:
    """
    Add cached hourly readings for days the API returned nothing for.

    Args:
        readings: Hourly readings fetched from the API
        dates: Requested days as 'YYYY-MM-DD'
        store_no: Store whose cache entries are used
        db_path: Path to hourly_weather.db

    Returns:
        Fetched readings followed by cached readings for the missing days
    """
    fetched_days = {day.isoformat() for day in map(resolve_date, readings) if day is not None}
    missing = [d for d in dates if d not in fetched_days]
    if not missing:
        return list(readings)

    cached = load_hourly_readings(db_path)
    combined = list(readings)
    filled = 0
    for day in missing:
        day_readings = cached.get((str(store_no), day), [])
        if day_readings:
            filled += 1
        combined.extend(day_readings)

    print(f"Filled {filled} of {len(missing)} day(s) without fresh hourly data from cache")
    return combined


def build_daily_weather(weather_data: List[dict],
                        hourly_readings: List[dict] = None) -> Dict[str, dict]:
    """
    Combine the API's daily weather with aggregated hourly readings.

    Hourly precipitation totals replace the daily precipitation figure and
    hourly temperature extremes replace the daily extremes. Missing
    temperature and radiation fall back to the configured defaults.

    Args:
        weather_data: Daily weather records from the prediction API
        hourly_readings: Hourly readings covering the same days

    Returns:
        Dictionary keyed by 'YYYY-MM-DD' with temperature, temp_max,
        temp_min, precipitation and radiation
    """
    daily: Dict[str, dict] = {}

    for record in weather_data or []:
        day = resolve_date(record)
        if day is None:
            continue
        precipitation = as_number(record.get('precipitation'))
        daily[day.isoformat()] = {
            'temperature': resolve_temperature(record),
            'temp_max': as_number(record.get('temp_max')),
            'temp_min': as_number(record.get('temp_min')),
            'precipitation': 0.0 if precipitation is None else precipitation,
            'radiation': as_number(record.get('radiation')),
        }

    if hourly_readings:
        for item in aggregate_daily(hourly_readings):
            day_weather = daily.setdefault(item['date'], _empty_day())
            day_weather['precipitation'] = item['total']

        for item in daily_temperature_range(hourly_readings):
            day_weather = daily.setdefault(item['date'], _empty_day())
            day_weather['temp_max'] = item['temp_max']
            day_weather['temp_min'] = item['temp_min']

    for day_weather in daily.values():
        if day_weather['temperature'] is None:
            if day_weather['temp_max'] is not None and day_weather['temp_min'] is not None:
                day_weather['temperature'] = (day_weather['temp_max'] + day_weather['temp_min']) / 2
            else:
                day_weather['temperature'] = settings.DEFAULT_TEMPERATURE
        if day_weather['radiation'] is None:
            day_weather['radiation'] = settings.DEFAULT_RADIATION

    return daily


def _empty_day() -> dict:
    return {
        'temperature': None,
        'temp_max': None,
        'temp_min': None,
        'precipitation': 0.0,
        'radiation': None,
    }


def enrich_row_with_weather(row: dict, daily_weather: Dict[str, dict]) -> dict:
    """
    Enrich a forecast row with the weather of its date.

    Args:
        row: Forecast row with a 'date' key (YYYY-MM-DD)
        daily_weather: Output of build_daily_weather

    Returns:
        Updated row with weather_* fields populated
    """
    info = daily_weather.get(row['date'], {})
    row['weather_temperature'] = info.get('temperature', settings.DEFAULT_TEMPERATURE)
    row['weather_temp_max'] = info.get('temp_max')
    row['weather_temp_min'] = info.get('temp_min')
    row['weather_precipitation'] = info.get('precipitation', 0.0)
    row['weather_radiation'] = info.get('radiation', settings.DEFAULT_RADIATION)
    return row
