"""
Parsing layer - ISO 8601 intervals, durations and legacy input shapes.
"""

from .duration import Duration
from .interval_parser import IntervalParser, parse
from .iso8601 import IntervalSide, SideKind, resolve_interval

__all__ = ["Duration", "IntervalParser", "IntervalSide", "SideKind", "parse", "resolve_interval"]
