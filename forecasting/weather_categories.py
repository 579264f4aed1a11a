"""
Weather Categorization Module
=============================
Maps daily weather readings to discrete categories and sales multipliers.

Each dimension is split into half-open buckets whose lower bound is
inclusive: a temperature of exactly 18°C is 'mild', not 'cold'. Readings are
not checked for physical plausibility.

    Dimension       Buckets                                   Multipliers
    temperature     cold <18, mild <24, warm <28, hot         0.56 1.00 1.28 1.38
    precipitation   none <=0, light <=10, moderate <=30,      1.00 0.67 0.59 0.51
                    heavy
    radiation       low <500, medium <1500, high              0.45 0.66 1.00

Usage:
    from forecasting.weather_categories import categorize

    category, multiplier = categorize('temperature', 25.4)   # ('warm', 1.28)
"""

from typing import List, Tuple

from config import settings
from forecasting.errors import InvalidInputError


TEMPERATURE = 'temperature'
PRECIPITATION = 'precipitation'
RADIATION = 'radiation'

DIMENSIONS = (TEMPERATURE, PRECIPITATION, RADIATION)

# Dashboard wording for each category: (is_positive, description)
WEATHER_FACTORS = {
    TEMPERATURE: {
        'cold': (False, 'Cold temperature hurts sales'),
        'mild': (False, 'Mild temperature, neutral for sales'),
        'warm': (True, 'Warm temperature favours sales'),
        'hot': (True, 'Hot temperature can boost sales'),
    },
    PRECIPITATION: {
        'none': (True, 'No rain favours sales'),
        'light': (True, 'Light rain, little impact'),
        'moderate': (False, 'Moderate rain can hurt sales'),
        'heavy': (False, 'Heavy rain hurts sales'),
    },
    RADIATION: {
        'low': (False, 'Low solar radiation, less foot traffic'),
        'medium': (False, 'Moderate solar radiation'),
        'high': (True, 'High solar radiation favours foot traffic'),
    },
}


def categorize_temperature(temperature: float) -> Tuple[str, float]:
    """Return (category, multiplier) for a mean daily temperature in °C."""
    if temperature < settings.TEMPERATURE_MILD_MIN:
        category = 'cold'
    elif temperature < settings.TEMPERATURE_WARM_MIN:
        category = 'mild'
    elif temperature < settings.TEMPERATURE_HOT_MIN:
        category = 'warm'
    else:
        category = 'hot'
    return category, settings.TEMPERATURE_MULTIPLIERS[category]


def categorize_precipitation(precipitation: float) -> Tuple[str, float]:
    """Return (category, multiplier) for a daily precipitation total in mm."""
    # Negative totals are treated as dry so the multiplier never rises with rain
    if precipitation <= 0:
        category = 'none'
    elif precipitation <= settings.PRECIPITATION_LIGHT_MAX:
        category = 'light'
    elif precipitation <= settings.PRECIPITATION_MODERATE_MAX:
        category = 'moderate'
    else:
        category = 'heavy'
    return category, settings.PRECIPITATION_MULTIPLIERS[category]


def categorize_radiation(radiation: float) -> Tuple[str, float]:
    """Return (category, multiplier) for daily solar radiation."""
    if radiation < settings.RADIATION_MEDIUM_MIN:
        category = 'low'
    elif radiation < settings.RADIATION_HIGH_MIN:
        category = 'medium'
    else:
        category = 'high'
    return category, settings.RADIATION_MULTIPLIERS[category]


CATEGORIZERS = {
    TEMPERATURE: categorize_temperature,
    PRECIPITATION: categorize_precipitation,
    RADIATION: categorize_radiation,
}


def categorize(dimension: str, value: float) -> Tuple[str, float]:
    """
    Categorize a reading for one weather dimension.

    Args:
        dimension: 'temperature', 'precipitation' or 'radiation'
        value: Reading for that dimension

    Returns:
        Tuple of (category, multiplier)
    """
    try:
        categorizer = CATEGORIZERS[dimension]
    except KeyError:
        raise InvalidInputError(
            f"Unknown weather dimension '{dimension}', expected one of {DIMENSIONS}"
        ) from None
    return categorizer(value)


def combined_multiplier(temperature: float, precipitation: float, radiation: float) -> float:
    """Product of the three weather multipliers for one day."""
    _, temp_mult = categorize_temperature(temperature)
    _, precip_mult = categorize_precipitation(precipitation)
    _, rad_mult = categorize_radiation(radiation)
    return temp_mult * precip_mult * rad_mult


def describe_weather_factors(temperature: float, precipitation: float,
                             radiation: float) -> Tuple[List[str], List[str]]:
    """
    Split a day's weather into positive and negative sales factors.

    Args:
        temperature: Mean daily temperature (°C)
        precipitation: Daily precipitation (mm)
        radiation: Daily solar radiation

    Returns:
        Tuple of (positive_factors, negative_factors) descriptions
    """
    positive = []
    negative = []
    for dimension, value in ((TEMPERATURE, temperature),
                             (PRECIPITATION, precipitation),
                             (RADIATION, radiation)):
        category, _ = categorize(dimension, value)
        is_positive, description = WEATHER_FACTORS[dimension][category]
        (positive if is_positive else negative).append(description)
    return positive, negative
