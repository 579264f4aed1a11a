"""
Global Settings and Configuration
=================================
Central configuration for the sales classification engine.
All configurable parameters are defined here for easy modification.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# PATH CONFIGURATION
# =============================================================================
# Base directory of this project
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Static configuration files (historical threshold table)
CONFIG_FILES_DIR = os.path.join(BASE_DIR, "config_files")
THRESHOLD_TABLE_PATH = os.environ.get(
    'SALES_THRESHOLDS_PATH',
    os.path.join(CONFIG_FILES_DIR, "sales_thresholds.json")
)

# Data store directory (DuckDB databases)
DATA_STORE_DIR = os.path.join(BASE_DIR, "data_store")
HOURLY_WEATHER_DB_PATH = os.path.join(DATA_STORE_DIR, "hourly_weather.db")

# =============================================================================
# PREDICTION API CONFIGURATION
# =============================================================================
# These are loaded from environment variables (set in .env file)
API_BASE_URL = os.environ.get('FORECAST_API_URL', 'http://localhost:8000').rstrip('/')
API_TIMEOUT = 30        # Seconds per request
MAX_RETRIES = 3         # Attempts per API call
RETRY_DELAY = 1.0       # Seconds, multiplied by the attempt number

# =============================================================================
# RUN PARAMETERS
# =============================================================================
STORE_ID = int(os.environ.get('STORE_ID', 1))
FORECAST_DAYS = int(os.environ.get('FORECAST_DAYS', 7))

# Fallbacks used when the API has no reading for a day
DEFAULT_TEMPERATURE = 22.0   # °C
DEFAULT_RADIATION = 800.0    # kJ/m²

# =============================================================================
# CALENDAR
# =============================================================================
# Weekday index follows date.weekday(): 0 = Monday, 6 = Sunday
WEEKDAY_LABELS = [
    'Monday',
    'Tuesday',
    'Wednesday',
    'Thursday',
    'Friday',
    'Saturday',
    'Sunday',
]

# =============================================================================
# WEATHER CATEGORIES
# =============================================================================
# Multipliers come from historical regression of daily sales on weather.
# They are static inputs; nothing in this project refits them.
#
# Temperature (°C): cold < 18 <= mild < 24 <= warm < 28 <= hot
TEMPERATURE_MILD_MIN = 18.0
TEMPERATURE_WARM_MIN = 24.0
TEMPERATURE_HOT_MIN = 28.0

TEMPERATURE_MULTIPLIERS = {
    'cold': 0.56,
    'mild': 1.00,
    'warm': 1.28,
    'hot': 1.38,
}

# Precipitation (mm/day): none <= 0 < light <= 10 < moderate <= 30 < heavy
PRECIPITATION_LIGHT_MAX = 10.0
PRECIPITATION_MODERATE_MAX = 30.0

PRECIPITATION_MULTIPLIERS = {
    'none': 1.00,
    'light': 0.67,
    'moderate': 0.59,
    'heavy': 0.51,
}

# Solar radiation: low < 500 <= medium < 1500 <= high
RADIATION_MEDIUM_MIN = 500.0
RADIATION_HIGH_MIN = 1500.0

RADIATION_MULTIPLIERS = {
    'low': 0.45,
    'medium': 0.66,
    'high': 1.00,
}

# =============================================================================
# ROUNDING
# =============================================================================
MONEY_DECIMALS = 2       # Sales values, baselines and thresholds
DEVIATION_DECIMALS = 1   # Deviation percentage


def ensure_directories():
    """Create data directories if they don't exist."""
    for dir_path in [CONFIG_FILES_DIR, DATA_STORE_DIR]:
        os.makedirs(dir_path, exist_ok=True)
