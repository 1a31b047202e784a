"""
Domain-specific exception hierarchy for the timeframe library.
"""


class TimeframeError(Exception):
    """Base class for all library-level errors."""


class InvalidRange(TimeframeError, ValueError):
    """Raised when a start date falls after its end date, or a year-bound operation spans years."""


class InvalidArgument(TimeframeError, TypeError):
    """Raised when an operation receives an argument of the wrong kind."""


class ParseError(TimeframeError, ValueError):
    """Raised when an interval string or input shape cannot be understood."""
