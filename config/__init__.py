"""
Configuration Package
=====================
Contains global settings, weather multipliers and API parameters.
"""

from .settings import *
