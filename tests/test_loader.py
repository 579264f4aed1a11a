"""
Unit tests for the weather loader.

Tests the DuckDB hourly cache and the daily weather assembly.
"""

import duckdb

from config import settings
from weather.loader import (
    build_daily_weather,
    enrich_row_with_weather,
    fill_missing_days_from_cache,
    load_hourly_readings,
    save_hourly_readings,
)


class TestHourlyCache:
    """Test caching hourly readings in DuckDB."""

    def test_round_trip(self, tmp_path):
        db_path = str(tmp_path / "hourly.db")
        readings = [
            {'fullDate': '2024-01-01', 'date': '2024-01-01T10:00', 'precipitation': 1.5, 'temp_max': 24.0},
            {'fullDate': '2024-01-01', 'date': '2024-01-01T11:00', 'Chuva_aberta': 0.5},
            {'fullDate': '2024-01-02', 'precipitacao_total': 4.0, 'unknown': 'x'},
            {'precipitation': 9.0},
        ]

        assert save_hourly_readings(readings, 7, db_path) == 3
        loaded = load_hourly_readings(db_path)

        assert set(loaded) == {('7', '2024-01-01'), ('7', '2024-01-02')}
        day_one = loaded[('7', '2024-01-01')]
        assert len(day_one) == 2
        assert {'fullDate': '2024-01-01', 'precipitation': 1.5, 'temp_max': 24.0} in day_one
        assert {'fullDate': '2024-01-01', 'Chuva_aberta': 0.5} in day_one
        assert loaded[('7', '2024-01-02')] == [{'fullDate': '2024-01-02', 'precipitacao_total': 4.0}]

    def test_appends_across_calls(self, tmp_path):
        db_path = str(tmp_path / "hourly.db")
        save_hourly_readings([{'fullDate': '2024-01-01', 'precipitation': 1.0}], 1, db_path)
        save_hourly_readings([{'fullDate': '2024-01-01', 'precipitation': 2.0}], 2, db_path)

        loaded = load_hourly_readings(db_path)
        assert set(loaded) == {('1', '2024-01-01'), ('2', '2024-01-01')}

    def test_nothing_to_save(self, tmp_path):
        db_path = str(tmp_path / "hourly.db")
        assert save_hourly_readings([{'precipitation': 1.0}], 1, db_path) == 0

    def test_missing_database(self, tmp_path):
        assert load_hourly_readings(str(tmp_path / "absent.db")) == {}

    def test_older_schema_with_fewer_columns(self, tmp_path):
        db_path = str(tmp_path / "legacy.db")
        conn = duckdb.connect(db_path)
        conn.execute("CREATE TABLE hourly_weather (store_no VARCHAR, date VARCHAR, Chuva_aberta DOUBLE)")
        conn.execute("INSERT INTO hourly_weather VALUES ('3', '2023-11-05', 2.25), ('3', '2023-11-05', NULL)")
        conn.close()

        loaded = load_hourly_readings(db_path)
        assert list(loaded) == [('3', '2023-11-05')]
        day = loaded[('3', '2023-11-05')]
        assert len(day) == 2
        assert {'fullDate': '2023-11-05', 'Chuva_aberta': 2.25} in day
        assert {'fullDate': '2023-11-05'} in day

    def test_database_without_table(self, tmp_path):
        db_path = str(tmp_path / "empty.db")
        duckdb.connect(db_path).close()

        assert load_hourly_readings(db_path) == {}


class TestFillMissingDaysFromCache:
    """Test falling back to cached readings for days the API missed."""

    def test_missing_day_comes_from_cache(self, tmp_path):
        db_path = str(tmp_path / "hourly.db")
        save_hourly_readings([
            {'fullDate': '2024-01-01', 'precipitation': 12.0},
            {'fullDate': '2024-01-02', 'precipitation': 99.0},
        ], 5, db_path)
        fetched = [{'fullDate': '2024-01-02', 'precipitation': 1.0}]

        combined = fill_missing_days_from_cache(fetched, ['2024-01-01', '2024-01-02'], 5, db_path)

        assert combined == [
            {'fullDate': '2024-01-02', 'precipitation': 1.0},
            {'fullDate': '2024-01-01', 'precipitation': 12.0},
        ]

    def test_other_stores_are_ignored(self, tmp_path):
        db_path = str(tmp_path / "hourly.db")
        save_hourly_readings([{'fullDate': '2024-01-01', 'precipitation': 12.0}], 6, db_path)

        assert fill_missing_days_from_cache([], ['2024-01-01'], 5, db_path) == []

    def test_cache_not_read_when_nothing_missing(self, tmp_path):
        fetched = [{'fullDate': '2024-01-01', 'precipitation': 1.0}]

        combined = fill_missing_days_from_cache(fetched, ['2024-01-01'], 5, str(tmp_path / "absent.db"))

        assert combined == fetched
        assert combined is not fetched

    def test_without_database(self, tmp_path):
        assert fill_missing_days_from_cache([], ['2024-01-01'], 5, str(tmp_path / "absent.db")) == []


class TestBuildDailyWeather:
    """Test merging API daily weather with hourly aggregates."""

    def test_daily_only(self):
        weather_data = [
            {'date': '2024-01-01T00:00:00', 'temperature': 26.0, 'precipitation': 3.0, 'radiation': 1700},
        ]
        daily = build_daily_weather(weather_data)

        assert daily == {'2024-01-01': {
            'temperature': 26.0,
            'temp_max': None,
            'temp_min': None,
            'precipitation': 3.0,
            'radiation': 1700.0,
        }}

    def test_hourly_overrides_precipitation_and_extremes(self):
        weather_data = [
            {'date': '2024-01-01', 'temperature': 22.0, 'temp_max': 25.0, 'temp_min': 19.0,
             'precipitation': 1.0, 'radiation': 900},
        ]
        hourly = [
            {'fullDate': '2024-01-01', 'precipitation': 4.0, 'temp_max': 27.0},
            {'fullDate': '2024-01-01', 'precipitacao_total': 2.0, 'temp_max': 17.0},
        ]
        day = build_daily_weather(weather_data, hourly)['2024-01-01']

        assert day['precipitation'] == 6.0
        assert day['temp_max'] == 27.0
        assert day['temp_min'] == 17.0
        assert day['temperature'] == 22.0

    def test_defaults_for_missing_values(self):
        daily = build_daily_weather([{'date': '2024-01-03', 'humidity': 70}])

        assert daily['2024-01-03']['temperature'] == settings.DEFAULT_TEMPERATURE
        assert daily['2024-01-03']['radiation'] == settings.DEFAULT_RADIATION
        assert daily['2024-01-03']['precipitation'] == 0.0

    def test_hourly_only_day(self):
        hourly = [
            {'fullDate': '2024-01-04', 'temp_max': 30.0, 'precipitation': 1.0},
            {'fullDate': '2024-01-04', 'temp_max': 20.0},
        ]
        day = build_daily_weather([], hourly)['2024-01-04']

        assert day['temperature'] == 25.0
        assert day['precipitation'] == 1.0
        assert day['radiation'] == settings.DEFAULT_RADIATION


class TestEnrichRow:
    """Test copying daily weather into forecast rows."""

    def test_known_day(self):
        daily = {'2024-01-01': {'temperature': 26.0, 'temp_max': 30.0, 'temp_min': 21.0,
                                'precipitation': 0.0, 'radiation': 1600.0}}
        row = enrich_row_with_weather({'date': '2024-01-01'}, daily)

        assert row['weather_temperature'] == 26.0
        assert row['weather_radiation'] == 1600.0

    def test_unknown_day_uses_defaults(self):
        row = enrich_row_with_weather({'date': '2024-02-01'}, {})

        assert row['weather_temperature'] == settings.DEFAULT_TEMPERATURE
        assert row['weather_precipitation'] == 0.0
        assert row['weather_radiation'] == settings.DEFAULT_RADIATION
        assert row['weather_temp_max'] is None
