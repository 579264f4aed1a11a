"""
KPI Trend Signals
=================
Reduces a three-way classification to the up/down/neutral signal shown on
compact KPI cards.
"""

from forecasting.errors import InvalidInputError
from forecasting.evaluator import HIGH, MEDIUM, LOW, ClassificationResult, ForecastEvaluator


TREND_SIGNALS = {
    HIGH: 'up',
    LOW: 'down',
    MEDIUM: 'neutral',
}


def to_trend_signal(result) -> str:
    """
    Map a classification to its trend signal.

    Args:
        result: ClassificationResult, or its classification string

    Returns:
        'up', 'down' or 'neutral'
    """
    classification = result.classification if isinstance(result, ClassificationResult) else result
    try:
        return TREND_SIGNALS[classification]
    except (KeyError, TypeError):
        raise InvalidInputError(f"Unknown classification {classification!r}") from None


def classify_for_kpi(evaluator: ForecastEvaluator, forecast_value: float,
                     weekday: int, month: int) -> str:
    """Evaluate a forecast and return only its trend signal."""
    return to_trend_signal(evaluator.evaluate(forecast_value, weekday, month))
