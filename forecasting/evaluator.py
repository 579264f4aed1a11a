"""
Forecast Evaluator
==================
Classifies forecasted sales against historical norms and projects the
weather-adjusted sales expected for a weekday.

Two operations:

1. project_expected: reference-period baseline for the weekday scaled by the
   temperature, precipitation and radiation multipliers. The quartiles are
   scaled by the same factor to give weather-adjusted bounds.
2. evaluate: strict quartile comparison of a forecast against the
   (month, weekday) statistics. No weather multiplier is applied here.

        forecast < q1          -> LOW    (below)
        forecast > q3          -> HIGH   (above)
        q1 <= forecast <= q3   -> MEDIUM (within)

Usage:
    from forecasting.thresholds import load_threshold_table
    from forecasting.evaluator import ForecastEvaluator

    evaluator = ForecastEvaluator(load_threshold_table())
    result = evaluator.evaluate(9850.0, weekday=4, month=12)
"""

import math
import numbers
from dataclasses import dataclass, asdict, field
from typing import Dict, List

from forecasting.errors import InvalidInputError
from forecasting.rounding import round_money, round_percent
from forecasting.thresholds import ThresholdTable
from forecasting.weather_categories import (
    TEMPERATURE, PRECIPITATION, RADIATION,
    categorize, describe_weather_factors
)


HIGH = 'HIGH'
MEDIUM = 'MEDIUM'
LOW = 'LOW'

CLASSIFICATIONS = (HIGH, MEDIUM, LOW)

STATUS_BY_CLASSIFICATION = {
    HIGH: 'above',
    MEDIUM: 'within',
    LOW: 'below',
}

EXPLANATIONS = {
    HIGH: 'Above the historical range for the day',
    MEDIUM: 'Within the typical range for the day',
    LOW: 'Below the historical range for the day',
}


@dataclass(frozen=True)
class Thresholds:
    """Classification cut points (q1 and q3)."""
    low: float
    high: float


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one forecast value."""
    forecast_value: float
    expected_baseline: float
    classification: str
    status: str
    deviation_percent: float
    weekday_label: str
    thresholds: Thresholds
    explanation: str = ''

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WeatherReading:
    """A weather value with its category and multiplier."""
    value: float
    category: str
    multiplier: float


@dataclass(frozen=True)
class WeatherProjection:
    """Weather-adjusted sales expectation for a weekday."""
    weekday_label: str
    baseline: float
    expected: float
    q1_adjusted: float
    q3_adjusted: float
    climate_impact: float
    weather: Dict[str, WeatherReading] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ContextualClassification:
    """Classification paired with the weather context of the same day."""
    result: ClassificationResult
    projection: WeatherProjection
    positive_factors: List[str]
    negative_factors: List[str]

    def to_dict(self) -> dict:
        return asdict(self)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_weekday(weekday) -> int:
    """Raise InvalidInputError unless weekday is an integer in 0..6."""
    if not _is_int(weekday) or not 0 <= weekday <= 6:
        raise InvalidInputError(f"weekday must be an integer between 0 (Monday) and 6 (Sunday), got {weekday!r}")
    return int(weekday)


def validate_month(month) -> int:
    """Raise InvalidInputError unless month is an integer in 1..12."""
    if not _is_int(month) or not 1 <= month <= 12:
        raise InvalidInputError(f"month must be an integer between 1 and 12, got {month!r}")
    return int(month)


def validate_number(value, name: str) -> float:
    """Raise InvalidInputError unless value is a finite real number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise InvalidInputError(f"{name} is too large, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
    return number


def deviation_percent(value: float, mean: float) -> float:
    """
    Percentage deviation of value from mean, rounded to one decimal.

    A zero mean has no meaningful relative deviation and yields 0.0.
    """
    if mean == 0:
        return 0.0
    return round_percent((value - mean) / mean * 100)


def classify_value(value: float, q1: float, q3: float) -> str:
    """Strict quartile comparison: boundaries belong to MEDIUM."""
    if value < q1:
        return LOW
    if value > q3:
        return HIGH
    return MEDIUM


class ForecastEvaluator:
    """
    Evaluates forecasts against an injected ThresholdTable.

    The evaluator holds no mutable state; a single instance can serve any
    number of concurrent callers.
    """

    def __init__(self, table: ThresholdTable):
        self.table = table

    def project_expected(self, weekday: int, temperature: float,
                         precipitation: float, radiation: float) -> WeatherProjection:
        """
        Project the weather-adjusted sales expected for a weekday.

        Args:
            weekday: 0 (Monday) to 6 (Sunday)
            temperature: Mean daily temperature (°C)
            precipitation: Daily precipitation (mm)
            radiation: Daily solar radiation

        Returns:
            WeatherProjection with rounded expected value and adjusted quartiles
        """
        weekday = validate_weekday(weekday)
        readings = {
            TEMPERATURE: validate_number(temperature, TEMPERATURE),
            PRECIPITATION: validate_number(precipitation, PRECIPITATION),
            RADIATION: validate_number(radiation, RADIATION),
        }
        entry = self.table.reference_entry(weekday)

        weather = {}
        impact = 1.0
        for dimension, value in readings.items():
            category, multiplier = categorize(dimension, value)
            weather[dimension] = WeatherReading(value=value, category=category, multiplier=multiplier)
            impact *= multiplier

        return WeatherProjection(
            weekday_label=entry.name,
            baseline=entry.mean,
            expected=round_money(entry.mean * impact),
            q1_adjusted=round_money(entry.q1 * impact),
            q3_adjusted=round_money(entry.q3 * impact),
            climate_impact=impact,
            weather=weather,
        )

    def evaluate(self, forecast_value: float, weekday: int, month: int) -> ClassificationResult:
        """
        Classify a forecast against the (month, weekday) historical quartiles.

        Args:
            forecast_value: Forecasted sales for the day
            weekday: 0 (Monday) to 6 (Sunday)
            month: 1 to 12

        Returns:
            ClassificationResult

        Raises:
            InvalidInputError: Arguments outside their domain
            MissingBaselineError: No table entry for (month, weekday)
        """
        value = validate_number(forecast_value, 'forecast_value')
        weekday = validate_weekday(weekday)
        month = validate_month(month)

        entry = self.table.get(month, weekday)
        classification = classify_value(value, entry.q1, entry.q3)

        return ClassificationResult(
            forecast_value=round_money(value),
            expected_baseline=entry.mean,
            classification=classification,
            status=STATUS_BY_CLASSIFICATION[classification],
            deviation_percent=deviation_percent(value, entry.mean),
            weekday_label=entry.name,
            thresholds=Thresholds(low=entry.q1, high=entry.q3),
            explanation=EXPLANATIONS[classification],
        )

    def evaluate_in_context(self, forecast_value: float, weekday: int, month: int,
                            temperature: float, precipitation: float,
                            radiation: float) -> ContextualClassification:
        """
        Classify a forecast and attach the day's weather projection and factors.

        The classification itself is the plain quartile rule of evaluate().
        """
        result = self.evaluate(forecast_value, weekday, month)
        projection = self.project_expected(weekday, temperature, precipitation, radiation)
        positive, negative = describe_weather_factors(temperature, precipitation, radiation)
        return ContextualClassification(
            result=result,
            projection=projection,
            positive_factors=positive,
            negative_factors=negative,
        )
