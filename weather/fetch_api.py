"""
Prediction API Fetcher
======================
Fetches sales predictions and weather readings from the remote prediction API.

Endpoints:
- GET {API_BASE_URL}/predictions-with-weather/{days}/{store_id}
    {"predictions": [{"date", "value", "confidence"}, ...],
     "weather_data": [{"date", "temperature", "temp_max", "temp_min",
                       "precipitation", "radiation", ...}, ...], ...}
- GET {API_BASE_URL}/hourly-weather/{date}/{store_id}
- GET {API_BASE_URL}/hourly-precipitation/{date}
    {"success": true, "data": [{...hourly reading...}, ...]}

Connection errors and 5xx responses are retried MAX_RETRIES times with a
linearly growing delay. Any other failure is reported and returns None.

Usage:
    python -m weather.fetch_api
"""

import os
import sys
import time

import requests

# Add parent directory to path for imports when running standalone
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings


def get_json(path: str, base_url: str = None, timeout: float = None,
             max_retries: int = None, retry_delay: float = None):
    """
    GET a JSON document from the prediction API.

    Args:
        path: Endpoint path, starting with '/'
        base_url: API root (defaults to settings.API_BASE_URL)
        timeout: Request timeout in seconds
        max_retries: Attempts before giving up
        retry_delay: Base delay between attempts in seconds

    Returns:
        Parsed JSON, or None if the request failed
    """
    base_url = (base_url or settings.API_BASE_URL).rstrip('/')
    timeout = settings.API_TIMEOUT if timeout is None else timeout
    # At least one attempt is always made
    max_retries = max(1, settings.MAX_RETRIES if max_retries is None else max_retries)
    retry_delay = settings.RETRY_DELAY if retry_delay is None else retry_delay
    url = f"{base_url}{path}"

    for attempt in range(1, max_retries + 1):
        try:
            response = requests.get(url, timeout=timeout)
        except requests.RequestException as e:
            print(f"Request failed ({attempt}/{max_retries}): {url} - {e}")
        else:
            if response.status_code == 200:
                try:
                    return response.json()
                except ValueError as e:
                    print(f"Invalid JSON from {url}: {e}")
                    return None
            if response.status_code < 500:
                print(f"API error {response.status_code} for {url}")
                return None
            print(f"API error {response.status_code} ({attempt}/{max_retries}): {url}")

        if attempt < max_retries:
            time.sleep(retry_delay * attempt)

    print(f"Giving up on {url} after {max_retries} attempts")
    return None


def _unwrap_hourly(payload, url_hint: str):
    """Extract the data list from a {"success": true, "data": [...]} payload."""
    if payload is None:
        return None
    if not isinstance(payload, dict) or not payload.get('success') \
            or not isinstance(payload.get('data'), list):
        print(f"No hourly data in response for {url_hint}")
        return None
    return payload['data']


def fetch_predictions_with_weather(days: int = None, store_id: int = None, **kwargs):
    """
    Fetch daily sales predictions and daily weather for a store.

    Args:
        days: Number of days to forecast (defaults to settings.FORECAST_DAYS)
        store_id: Store identifier (defaults to settings.STORE_ID)

    Returns:
        API payload dict with 'predictions' and 'weather_data', or None
    """
    days = settings.FORECAST_DAYS if days is None else days
    store_id = settings.STORE_ID if store_id is None else store_id

    print(f"Fetching {days}-day predictions with weather for store {store_id}...")
    payload = get_json(f"/predictions-with-weather/{days}/{store_id}", **kwargs)
    if payload is None:
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get('predictions'), list):
        print(f"Prediction payload for store {store_id} has no predictions list")
        return None
    payload.setdefault('weather_data', [])
    return payload


def fetch_hourly_weather(date_str: str, store_id: int = None, **kwargs):
    """
    Fetch hourly weather readings for one store and day.

    Returns:
        List of hourly reading dicts, or None
    """
    store_id = settings.STORE_ID if store_id is None else store_id
    path = f"/hourly-weather/{date_str}/{store_id}"
    return _unwrap_hourly(get_json(path, **kwargs), path)


def fetch_hourly_precipitation(date_str: str, **kwargs):
    """
    Fetch hourly precipitation readings for one day.

    Returns:
        List of hourly reading dicts, or None
    """
    path = f"/hourly-precipitation/{date_str}"
    return _unwrap_hourly(get_json(path, **kwargs), path)


def fetch_hourly_for_dates(dates: list, store_id: int = None, **kwargs) -> list:
    """
    Fetch and concatenate hourly readings for several days.

    Readings without 'fullDate' are tagged with the requested day, which
    takes priority over any per-hour 'date' field when grouping by day.
    """
    readings = []
    for date_str in dates:
        hourly = fetch_hourly_weather(date_str, store_id, **kwargs)
        if not hourly:
            continue
        for reading in hourly:
            if not reading.get('fullDate'):
                reading = dict(reading, fullDate=date_str)
            readings.append(reading)
    print(f"Fetched {len(readings)} hourly readings for {len(dates)} day(s)")
    return readings


if __name__ == "__main__":
    result = fetch_predictions_with_weather()
    if result:
        print(f"Received {len(result['predictions'])} predictions")
