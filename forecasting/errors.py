"""
Classification Errors
=====================
Typed errors raised by the classification engine.

- InvalidInputError: weekday, month or value outside the accepted domain
- MissingBaselineError: (month, weekday) key absent from the threshold table
- ThresholdTableError: threshold data that cannot be loaded
"""


class ClassificationError(Exception):
    """Base class for all classification engine errors."""


class InvalidInputError(ClassificationError, ValueError):
    """Raised before any lookup when an argument is out of range."""


class MissingBaselineError(ClassificationError, LookupError):
    """Raised when the threshold table has no entry for the requested key."""

    def __init__(self, month, weekday):
        self.month = month
        self.weekday = weekday
        if month is None:
            message = f"No reference baseline for weekday {weekday}"
        else:
            message = f"No baseline for month {month}, weekday {weekday}"
        super().__init__(message)


class ThresholdTableError(ClassificationError):
    """Raised when threshold data is malformed or breaks q1 <= mean <= q3."""
