"""
Forecasting Package
===================
Contains the sales classification and weather-adjustment engine.

Modules:
- thresholds: Historical (month, weekday) threshold table
- weather_categories: Weather buckets and sales multipliers
- evaluator: Forecast classification and weather projection
- kpi: Trend signals for KPI display
- rounding: Round-half-up helpers
- errors: Typed engine errors
"""

from .errors import (
    ClassificationError,
    InvalidInputError,
    MissingBaselineError,
    ThresholdTableError
)
from .thresholds import ThresholdEntry, ThresholdTable, load_threshold_table
from .weather_categories import categorize, combined_multiplier, describe_weather_factors
from .evaluator import (
    HIGH, MEDIUM, LOW,
    ClassificationResult,
    ContextualClassification,
    ForecastEvaluator,
    WeatherProjection
)
from .kpi import to_trend_signal, classify_for_kpi

__all__ = [
    'ClassificationError',
    'InvalidInputError',
    'MissingBaselineError',
    'ThresholdTableError',
    'ThresholdEntry',
    'ThresholdTable',
    'load_threshold_table',
    'categorize',
    'combined_multiplier',
    'describe_weather_factors',
    'HIGH',
    'MEDIUM',
    'LOW',
    'ClassificationResult',
    'ContextualClassification',
    'ForecastEvaluator',
    'WeatherProjection',
    'to_trend_signal',
    'classify_for_kpi'
]
