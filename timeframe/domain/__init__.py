"""
Domain layer - Pure date interval logic without external I/O.
"""

from .exceptions import InvalidArgument, InvalidRange, ParseError, TimeframeError
from .gap_calculator import GapCalculator, multiple_timeframes_gaps_left_by
from .models import DateRange, Timeframe, to_date

__all__ = [
    "DateRange",
    "GapCalculator",
    "InvalidArgument",
    "InvalidRange",
    "ParseError",
    "Timeframe",
    "TimeframeError",
    "multiple_timeframes_gaps_left_by",
    "to_date",
]
