"""
Sales Weather Classifier
========================
Classifies forecasted store sales against historical norms with weather context.

This package provides:
- Historical threshold table loading
- Weather categorization and multipliers
- Forecast evaluation and KPI trend signals
- Hourly weather aggregation and prediction API access
"""

__version__ = "1.0.0"
__author__ = "Bento"
