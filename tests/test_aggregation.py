"""
Unit tests for hourly weather aggregation.

Tests field-name fallback, per-day summing and temperature extremes.
"""

import math
import random
from datetime import date, datetime

import pytest

from weather.aggregation import (
    PRECIPITATION_ACCESSORS,
    aggregate_daily,
    daily_temperature_range,
    numeric_field,
    resolve_date,
    resolve_first,
    resolve_precipitation,
    resolve_temperature,
)


class TestPrecipitationFallback:
    """Test the ordered precipitation accessors."""

    def test_priority_order(self):
        reading = {'precipitation': 1.0, 'precipitacao_total': 2.0, 'Chuva_aberta': 3.0}
        assert resolve_precipitation(reading) == 1.0

        del reading['precipitation']
        assert resolve_precipitation(reading) == 2.0

        del reading['precipitacao_total']
        assert resolve_precipitation(reading) == 3.0

    def test_non_numeric_field_falls_through(self):
        reading = {'precipitation': '4.2', 'precipitacao_total': None, 'Chuva_aberta': 1.5}
        assert resolve_precipitation(reading) == 1.5

    def test_bool_and_nan_are_ignored(self):
        assert resolve_precipitation({'precipitation': True, 'Chuva_aberta': 0.5}) == 0.5
        assert resolve_precipitation({'precipitation': math.nan}) == 0.0

    def test_no_known_field_is_zero(self):
        assert resolve_precipitation({'rain_mm': 12.0}) == 0.0

    def test_zero_is_a_value(self):
        assert resolve_precipitation({'precipitation': 0, 'Chuva_aberta': 9.0}) == 0.0

    def test_accessors_in_isolation(self):
        assert resolve_first({'x': 1}, PRECIPITATION_ACCESSORS) is None
        assert numeric_field('x')({'x': 7}) == 7.0
        assert numeric_field('x')({'x': 'seven'}) is None


class TestTemperatureFallback:
    """Test the ordered temperature accessors."""

    def test_temperature_first(self):
        assert resolve_temperature({'temperature': 21.0, 'temp_media': 19.0}) == 21.0

    def test_midpoint_of_extremes(self):
        assert resolve_temperature({'temp_max': 30.0, 'temp_min': 20.0}) == 25.0

    def test_max_alone(self):
        assert resolve_temperature({'temp_max': 30.0}) == 30.0

    def test_nothing(self):
        assert resolve_temperature({'humidity': 80}) is None


class TestResolveDate:
    """Test calendar date extraction."""

    @pytest.mark.parametrize("reading,expected", [
        ({'fullDate': '2024-01-01'}, date(2024, 1, 1)),
        ({'date': '2024-01-01T13:00:00'}, date(2024, 1, 1)),
        ({'date': '2024-01-01 23:59:00'}, date(2024, 1, 1)),
        ({'date': datetime(2024, 3, 5, 8)}, date(2024, 3, 5)),
        ({'date': date(2024, 3, 5)}, date(2024, 3, 5)),
        ({'fullDate': '2024-02-02', 'date': '2024-02-01T23:00'}, date(2024, 2, 2)),
        ({'fullDate': '', 'date': '2024-02-01'}, date(2024, 2, 1)),
        ({'fullDate': 'n/a', 'date': '2024-02-01'}, date(2024, 2, 1)),
        ({'fullDate': 20240202, 'date': '2024-02-01T08:00'}, date(2024, 2, 1)),
    ])
    def test_supported_shapes(self, reading, expected):
        assert resolve_date(reading) == expected

    @pytest.mark.parametrize("reading", [{}, {'fullDate': None}, {'date': 'yesterday'}, {'date': 20240101}])
    def test_unusable(self, reading):
        assert resolve_date(reading) is None


class TestAggregateDaily:
    """Test per-day precipitation totals."""

    def test_mixed_field_names(self):
        readings = [
            {'date': '2024-01-01', 'precipitation': 5},
            {'date': '2024-01-01', 'precipitacao_total': 3},
            {'date': '2024-01-02', 'precipitation': 2},
        ]
        assert aggregate_daily(readings) == [
            {'date': '2024-01-01', 'total': 8},
            {'date': '2024-01-02', 'total': 2},
        ]

    def test_undated_unrecognized_reading_is_dropped(self):
        readings = [
            {'date': '2024-01-01', 'precipitation': 5},
            {'rain_mm': 99},
        ]
        assert aggregate_daily(readings) == [{'date': '2024-01-01', 'total': 5}]

    def test_undated_reading_with_value_is_dropped(self):
        assert aggregate_daily([{'precipitation': 5}]) == []

    def test_bad_full_date_falls_back_to_date(self):
        readings = [{'fullDate': 'n/a', 'date': '2024-01-01', 'precipitation': 3}]
        assert aggregate_daily(readings) == [{'date': '2024-01-01', 'total': 3}]

    def test_dated_reading_without_value_counts_zero(self):
        assert aggregate_daily([{'fullDate': '2024-05-01', 'humidity': 90}]) == [
            {'date': '2024-05-01', 'total': 0.0},
        ]

    def test_sorted_by_calendar_date(self):
        readings = [
            {'fullDate': '2024-02-10', 'precipitation': 1},
            {'fullDate': '2023-12-31', 'precipitation': 1},
            {'fullDate': '2024-01-09', 'precipitation': 1},
        ]
        dates = [item['date'] for item in aggregate_daily(readings)]
        assert dates == ['2023-12-31', '2024-01-09', '2024-02-10']

    def test_independent_of_input_order(self):
        readings = [
            {'date': f'2024-06-{day:02d}T{hour:02d}:00', 'Chuva_aberta': hour * 0.5}
            for day in range(1, 6)
            for hour in range(24)
        ]
        shuffled = readings[:]
        random.Random(7).shuffle(shuffled)

        expected = aggregate_daily(readings)
        result = aggregate_daily(shuffled)
        assert [item['date'] for item in result] == [item['date'] for item in expected]
        for got, want in zip(result, expected):
            assert got['total'] == pytest.approx(want['total'])
            assert got['total'] == pytest.approx(sum(h * 0.5 for h in range(24)))

    def test_duplicates_are_counted(self):
        reading = {'date': '2024-01-01', 'precipitation': 2.5}
        assert aggregate_daily([reading, reading]) == [{'date': '2024-01-01', 'total': 5.0}]

    def test_empty(self):
        assert aggregate_daily([]) == []

    def test_accepts_generators(self):
        readings = ({'date': '2024-01-01', 'precipitation': v} for v in (1, 2, 3))
        assert aggregate_daily(readings) == [{'date': '2024-01-01', 'total': 6}]


class TestDailyTemperatureRange:
    """Test per-day temperature extremes."""

    def test_extremes(self):
        readings = [
            {'date': '2024-01-01T06:00', 'temp_max': 18.0},
            {'date': '2024-01-01T14:00', 'temp_max': 29.5},
            {'date': '2024-01-01T22:00', 'temperature': 21.0},
            {'date': '2024-01-02T12:00', 'temp_media': 25.0},
        ]
        assert daily_temperature_range(readings) == [
            {'date': '2024-01-01', 'temp_max': 29.5, 'temp_min': 18.0, 'readings': 3},
            {'date': '2024-01-02', 'temp_max': 25.0, 'temp_min': 25.0, 'readings': 1},
        ]

    def test_days_without_temperature_are_omitted(self):
        readings = [
            {'date': '2024-01-01', 'precipitation': 3.0},
            {'date': '2024-01-02', 'temp_max': 20.0},
        ]
        assert [item['date'] for item in daily_temperature_range(readings)] == ['2024-01-02']
