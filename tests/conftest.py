"""
Shared fixtures for classification engine tests.

Tables are synthetic so that expected values can be worked out by hand.
"""

import pytest

from forecasting.evaluator import ForecastEvaluator
from forecasting.thresholds import ThresholdEntry, ThresholdTable


WEEKDAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


@pytest.fixture
def flat_table():
    """Every (month, weekday) has q1=100, mean=200, q3=300."""
    entries = {
        (month, weekday): ThresholdEntry(WEEKDAY_NAMES[weekday], 200.0, 100.0, 300.0)
        for month in range(1, 13)
        for weekday in range(7)
    }
    reference = {
        weekday: ThresholdEntry(WEEKDAY_NAMES[weekday], 1000.0, 800.0, 1200.0)
        for weekday in range(7)
    }
    return ThresholdTable(entries, reference)


@pytest.fixture
def evaluator(flat_table):
    return ForecastEvaluator(flat_table)


@pytest.fixture
def threshold_json():
    """Raw JSON layout with two months and no reference block."""
    return {
        "1": {"days": {
            "0": {"name": "Monday", "mean": 100.0, "q1": 80.0, "q3": 120.0},
            "5": {"name": "Saturday", "mean": 300.0, "q1": 250.0, "q3": 360.0},
        }},
        "2": {"days": {
            "0": {"name": "Monday", "mean": 200.0, "q1": 150.0, "q3": 240.0},
        }},
    }
