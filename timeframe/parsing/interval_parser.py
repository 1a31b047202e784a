"""
Parse every accepted timeframe input shape into a Timeframe.

Inputs are sorted once into a small set of variants, each routed to its own
resolver:

- ``2009`` or ``"2009"``: a calendar year
- ``'{"startDate": "2009-05-01", "endDate": "2009-06-01"}'`` or a quoted
  canonical string: JSON, decoded and parsed again
- ``{"start_date": ..., "end_date": ...}`` (or ``startDate``/``endDate``)
- anything else textual: an ISO 8601 interval
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Union

from ..domain.exceptions import InvalidArgument, ParseError
from ..domain.models import Timeframe, to_date
from .iso8601 import DEFAULT_SEPARATORS, IntervalSide, resolve_interval, split_interval

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)

MAPPING_KEYS = (
    ("start_date", "end_date"),
    ("startDate", "endDate"),
)

_YEAR = re.compile(r"^\d{4}$")
_JSON_DELIMITERS = ("{", "[", '"')


@dataclass(frozen=True)
class YearInput:
    year: int
    text: Optional[str] = None


@dataclass(frozen=True)
class JsonInput:
    text: str


@dataclass(frozen=True)
class MappingInput:
    start: Any
    end: Any


@dataclass(frozen=True)
class IntervalInput:
    text: str


@dataclass(frozen=True)
class TimeframeInput:
    timeframe: Timeframe


ParsedInput = Union[YearInput, JsonInput, MappingInput, IntervalInput, TimeframeInput]


class IntervalParser:
    """
    Parses years, JSON, mappings and ISO 8601 intervals into Timeframes.

    Instances hold only configuration, so one parser can be shared freely.
    """

    def __init__(
        self,
        allow_year_crossing: bool = True,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ):
        """
        Initialize the parser.

        Args:
            allow_year_crossing: Whether parsed timeframes may straddle a year boundary
            separators: Accepted interval separators, tried in order
        """
        self.allow_year_crossing = allow_year_crossing
        self.separators = tuple(separators)
        self._resolvers: Dict[type, Callable[[Any], Timeframe]] = {
            YearInput: self._resolve_year,
            JsonInput: self._resolve_json,
            MappingInput: self._resolve_mapping,
            IntervalInput: self._resolve_interval,
            TimeframeInput: self._resolve_timeframe,
        }

    @classmethod
    def from_config(cls, config: "AppConfig") -> "IntervalParser":
        """Build a parser honouring the configured year boundary policy and separators."""
        return cls(
            allow_year_crossing=config.parser.year_boundary_policy == "allow",
            separators=config.parser.separators,
        )

    def parse(self, value: Any) -> Timeframe:
        """
        Parse any accepted input shape.

        A complete, time-free end date is read as exclusive, so
        ``"2007-03-01/2008-05-11"`` ends on 2008-05-11 and every canonical
        string parses back to the same timeframe. Shorthand or timed ends
        still include the named day.

        Raises:
            InvalidArgument: If the input is of an unsupported shape
            ParseError: If a textual input is malformed
            InvalidRange: If the parsed start falls after the parsed end
        """
        variant = self.classify(value)
        logger.debug("Parsing %r as %s", value, type(variant).__name__)
        return self._resolvers[type(variant)](variant)

    def classify(self, value: Any) -> ParsedInput:
        """Decide which input variant ``value`` is."""
        if isinstance(value, Timeframe):
            return TimeframeInput(timeframe=value)

        if isinstance(value, bool):
            raise InvalidArgument(f"Cannot parse a timeframe from {value!r}")

        if isinstance(value, int):
            return YearInput(year=value)

        if isinstance(value, Mapping):
            return self._classify_mapping(value)

        if isinstance(value, str):
            text = value.strip()
            if _YEAR.match(text):
                return YearInput(year=int(text), text=text)
            if text.startswith(_JSON_DELIMITERS):
                return JsonInput(text=text)
            return IntervalInput(text=text)

        raise InvalidArgument(
            f"Cannot parse a timeframe from {type(value).__name__} value {value!r}"
        )

    @staticmethod
    def _classify_mapping(value: Mapping) -> MappingInput:
        for start_key, end_key in MAPPING_KEYS:
            if start_key in value and end_key in value:
                return MappingInput(start=value[start_key], end=value[end_key])

        raise InvalidArgument(
            "Mappings must carry start_date/end_date or startDate/endDate, "
            f"got keys {list(value)!r}"
        )

    def _resolve_year(self, variant: YearInput) -> Timeframe:
        try:
            return Timeframe.of_year(variant.year)
        except InvalidArgument as exc:
            if variant.text is None:
                raise
            raise ParseError(f"Could not parse year {variant.text!r}: {exc}") from exc

    def _resolve_json(self, variant: JsonInput) -> Timeframe:
        try:
            decoded = json.loads(variant.text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON timeframe {variant.text!r}: {exc}") from exc
        return self.parse(decoded)

    def _resolve_mapping(self, variant: MappingInput) -> Timeframe:
        return Timeframe.of(
            to_date(variant.start),
            to_date(variant.end),
            allow_year_crossing=self.allow_year_crossing,
        )

    def _resolve_interval(self, variant: IntervalInput) -> Timeframe:
        a_raw, b_raw = split_interval(variant.text, self.separators)
        return resolve_interval(
            IntervalSide.classify(a_raw),
            IntervalSide.classify(b_raw),
            allow_year_crossing=self.allow_year_crossing,
        )

    def _resolve_timeframe(self, variant: TimeframeInput) -> Timeframe:
        return variant.timeframe


_default_parser = IntervalParser()


def parse(value: Any) -> Timeframe:
    """Parse ``value`` with the default parser (year boundary crossing allowed)."""
    return _default_parser.parse(value)
