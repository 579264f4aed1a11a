"""
Sales Weather Classifier - Main Orchestrator
============================================
This is the main entry point for the classification pipeline.

The pipeline executes the following steps:
1. Load the historical threshold table
2. Fetch sales predictions and daily weather from the prediction API
3. Fetch hourly weather (cached readings fill days the API misses)
   and aggregate it into daily figures
4. For each forecast day:
   a. Enrich with the day's weather
   b. Classify against historical (month, weekday) quartiles
   c. Project the weather-adjusted expected sales
   d. Reduce to a KPI trend signal
5. Print the classification report

Usage:
    python main.py

Configuration:
    Edit config/settings.py or set FORECAST_API_URL, STORE_ID and
    FORECAST_DAYS in the environment / .env file.
"""

import os
import sys
from datetime import date, datetime
from typing import List

import pandas as pd

# Add current directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Import modules
from config import settings
from forecasting.evaluator import ForecastEvaluator
from forecasting.kpi import to_trend_signal
from forecasting.thresholds import load_threshold_table
from weather.aggregation import as_number, resolve_date
from weather.fetch_api import fetch_predictions_with_weather, fetch_hourly_for_dates
from weather.loader import (
    build_daily_weather,
    enrich_row_with_weather,
    fill_missing_days_from_cache,
    save_hourly_readings,
)


REPORT_COLUMNS = [
    'date', 'weekday_label', 'forecast_value', 'classification', 'trend',
    'deviation_percent', 'threshold_low', 'threshold_high',
    'expected_with_weather', 'climate_impact',
    'weather_temperature', 'weather_precipitation', 'weather_radiation',
]


def build_forecast_rows(payload: dict, start_date: date = None) -> List[dict]:
    """
    Turn the API's predictions into chronologically sorted forecast rows.

    Days without a numeric prediction are dropped. When start_date is given,
    days before it are dropped as well.

    Args:
        payload: Response of fetch_predictions_with_weather
        start_date: First day to keep (optional)

    Returns:
        List of rows with date, forecast_value, weekday and month
    """
    rows = []
    for prediction in payload.get('predictions', []):
        day = resolve_date(prediction)
        value = as_number(prediction.get('value'))
        if day is None or value is None:
            continue
        if start_date is not None and day < start_date:
            continue
        rows.append({
            'date': day.isoformat(),
            'forecast_value': value,
            'confidence': prediction.get('confidence'),
            # 0 = Monday, 6 = Sunday
            'weekday': day.weekday(),
            'month': day.month,
        })

    rows.sort(key=lambda r: r['date'])
    return rows


def classify_forecast_row(row: dict, evaluator: ForecastEvaluator) -> dict:
    """
    Classify one enriched forecast row.

    Args:
        row: Forecast row enriched with weather_* fields
        evaluator: ForecastEvaluator built on the threshold table

    Returns:
        Row with classification, projection and trend fields
    """
    contextual = evaluator.evaluate_in_context(
        row['forecast_value'], row['weekday'], row['month'],
        row['weather_temperature'], row['weather_precipitation'], row['weather_radiation']
    )
    result = contextual.result
    projection = contextual.projection

    row['weekday_label'] = result.weekday_label
    row['classification'] = result.classification
    row['status'] = result.status
    row['explanation'] = result.explanation
    row['deviation_percent'] = result.deviation_percent
    row['expected_baseline'] = result.expected_baseline
    row['threshold_low'] = result.thresholds.low
    row['threshold_high'] = result.thresholds.high
    row['trend'] = to_trend_signal(result)

    row['expected_with_weather'] = projection.expected
    row['q1_with_weather'] = projection.q1_adjusted
    row['q3_with_weather'] = projection.q3_adjusted
    row['climate_impact'] = round(projection.climate_impact, 4)
    for dimension, reading in projection.weather.items():
        row[f'{dimension}_category'] = reading.category

    row['positive_factors'] = contextual.positive_factors
    row['negative_factors'] = contextual.negative_factors
    return row


def run_pipeline(evaluator: ForecastEvaluator, payload: dict,
                 hourly_readings: List[dict] = None, start_date: date = None) -> List[dict]:
    """
    Classify every forecast day of an API payload.

    Args:
        evaluator: ForecastEvaluator built on the threshold table
        payload: Response of fetch_predictions_with_weather
        hourly_readings: Hourly readings for the forecast days (optional)
        start_date: First day to keep (optional)

    Returns:
        List of classified forecast rows
    """
    daily_weather = build_daily_weather(payload.get('weather_data', []), hourly_readings)

    results = []
    for row in build_forecast_rows(payload, start_date):
        row = enrich_row_with_weather(row, daily_weather)
        results.append(classify_forecast_row(row, evaluator))
    return results


def print_classification_report(results: List[dict]):
    """Print the classified forecast days as a table with a summary line."""
    if not results:
        print("No forecast days to report")
        return

    df = pd.DataFrame(results)
    columns = [col for col in REPORT_COLUMNS if col in df.columns]
    print(df[columns].to_string(index=False))

    counts = df['classification'].value_counts()
    print(f"\nHIGH: {counts.get('HIGH', 0)} | MEDIUM: {counts.get('MEDIUM', 0)} | LOW: {counts.get('LOW', 0)}")

    for row in results:
        factors = ", ".join(row['positive_factors']) or "none"
        risks = ", ".join(row['negative_factors']) or "none"
        print(f"  {row['date']} {row['weekday_label']}: {row['explanation']} "
              f"(+ {factors}; - {risks})")


def main():
    """Main entry point for the classification pipeline."""
    print("=" * 70)
    print("SALES WEATHER CLASSIFIER")
    print("=" * 70)
    print(f"Store: {settings.STORE_ID} | Days: {settings.FORECAST_DAYS} | API: {settings.API_BASE_URL}")
    print("=" * 70)

    settings.ensure_directories()

    # Step 1: Load thresholds
    print("\n[Step 1] Loading historical thresholds...")
    evaluator = ForecastEvaluator(load_threshold_table())

    # Step 2: Fetch predictions
    print("\n[Step 2] Fetching predictions with weather...")
    payload = fetch_predictions_with_weather(settings.FORECAST_DAYS, settings.STORE_ID)
    if payload is None:
        print("No predictions available, stopping.")
        return 1

    # Step 3: Hourly weather
    print("\n[Step 3] Fetching hourly weather...")
    today = datetime.now().date()
    dates = [row['date'] for row in build_forecast_rows(payload, today)]
    hourly_readings = fetch_hourly_for_dates(dates, settings.STORE_ID)
    if hourly_readings:
        save_hourly_readings(hourly_readings, settings.STORE_ID)
    hourly_readings = fill_missing_days_from_cache(hourly_readings, dates, settings.STORE_ID)

    # Step 4: Classify
    print("\n[Step 4] Classifying forecast days...")
    results = run_pipeline(evaluator, payload, hourly_readings, today)
    print(f"  Classified {len(results)} day(s)")

    # Step 5: Report
    print("\n[Step 5] Classification report")
    print_classification_report(results)

    print("\n" + "=" * 70)
    print("CLASSIFICATION COMPLETE")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
