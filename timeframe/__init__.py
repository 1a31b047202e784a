"""
Half-open calendar date intervals with ISO 8601 parsing.
"""

from .domain import (
    DateRange,
    GapCalculator,
    InvalidArgument,
    InvalidRange,
    ParseError,
    Timeframe,
    TimeframeError,
    multiple_timeframes_gaps_left_by,
)
from .parsing import IntervalParser, parse

__version__ = "1.0.0"

__all__ = [
    "DateRange",
    "GapCalculator",
    "IntervalParser",
    "InvalidArgument",
    "InvalidRange",
    "ParseError",
    "Timeframe",
    "TimeframeError",
    "__version__",
    "multiple_timeframes_gaps_left_by",
    "parse",
]
