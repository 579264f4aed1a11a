"""
Weather Package
===============
Fetches, caches and aggregates the weather readings that feed classification.

Modules:
- aggregation: Hourly-to-daily normalization of heterogeneous readings
- fetch_api: Prediction/weather API client
- loader: DuckDB cache of hourly readings and daily weather assembly
"""
