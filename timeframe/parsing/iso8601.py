"""
ISO 8601 time interval grammar.

An interval is two sides joined by ``/`` (or the legacy ``--``). Each side is
a duration, a date or datetime, or - on the second side only - a bare time
of day that borrows the first side's date. Timeframes are date-only, so
times are validated and then collapse to whole days.
"""

import enum
import re
from dataclasses import dataclass
from typing import Sequence, Tuple

import pendulum
from pendulum import Date

from ..domain.exceptions import ParseError
from ..domain.models import Timeframe, to_date
from .duration import Duration

# ISO interval ends name an inclusive day; Timeframe ends are exclusive
EXCLUDED_LAST_DAY = 86_400

DEFAULT_SEPARATORS = ("/", "--")

_ZONE = re.compile(r"(Z|[+-]\d{2}(:?\d{2})?)$")


class SideKind(enum.Enum):
    """What one side of an interval string holds."""
    DURATION = "duration"
    DATE = "date"
    TIME = "time"


@dataclass(frozen=True)
class IntervalSide:
    """One classified side of an interval string."""
    raw: str
    kind: SideKind
    date_part: str = ""
    time_part: str = ""

    @classmethod
    def classify(cls, raw: str) -> "IntervalSide":
        """Tag a raw side as a duration, a date/datetime or a time-of-day shorthand."""
        text = raw.strip()
        if not text:
            raise ParseError("Interval sides must not be empty")

        if text[0] in "Pp":
            return cls(raw=text, kind=SideKind.DURATION)

        text = text.upper()
        if ":" in text and "T" not in text:
            return cls(raw=text, kind=SideKind.TIME, time_part=text)

        date_part, _, time_part = text.partition("T")
        return cls(raw=text, kind=SideKind.DATE, date_part=date_part, time_part=time_part)

    @property
    def duration(self) -> Duration:
        return Duration.parse(self.raw)


def split_interval(text: str, separators: Sequence[str] = DEFAULT_SEPARATORS) -> Tuple[str, str]:
    """
    Split an interval string at the first accepted separator it contains.

    Raises:
        ParseError: If no separator is present or the string has more than two sides
    """
    for separator in separators:
        if separator in text:
            parts = text.split(separator)
            if len(parts) != 2 or not all(part.strip() for part in parts):
                raise ParseError(
                    "Interval must be specified according to ISO 8601 as "
                    f"<start>/<end>, <start>/<duration> or <duration>/<end>, got {text!r}"
                )
            return parts[0], parts[1]

    raise ParseError(f"No interval separator ({', '.join(separators)}) found in {text!r}")


def complete_shorthand(shorthand: str, reference: str, marker: str) -> str:
    """
    Fill in the leading components a shorthand omits from its reference.

    ``complete_shorthand("15", "2007-11-13", "-")`` gives ``"2007-11-15"``.
    """
    if shorthand.count(marker) >= 2 or len(shorthand) >= len(reference):
        return shorthand
    return reference[: len(reference) - len(shorthand)] + shorthand


def _side_date(date_part: str, time_part: str) -> Date:
    token = f"{date_part}T{time_part}" if time_part else date_part
    return to_date(token)


def _offset(anchor: Date, seconds: int) -> Date:
    """Move ``seconds`` away from midnight of ``anchor``, then past the inclusive last day."""
    moment = pendulum.datetime(anchor.year, anchor.month, anchor.day)
    try:
        return moment.add(seconds=seconds + EXCLUDED_LAST_DAY).date()
    except (OverflowError, ValueError) as exc:
        raise ParseError(
            f"Duration of {seconds} seconds from {anchor.isoformat()} is out of range"
        ) from exc


def _without_zone(time_part: str) -> str:
    """Drop a trailing ``Z`` or UTC offset so shorthand times splice by position."""
    return _ZONE.sub("", time_part)


def _resolve_end(a: IntervalSide, b: IntervalSide) -> Date:
    """
    Resolve the exclusive end for a ``<date>/<date>`` interval.

    A complete, time-free second date is already the exclusive end (the
    canonical wire form). A shorthand or timed second side names the last
    included day, so one day is added.
    """
    if b.kind is SideKind.TIME:
        time_part = b.time_part
        if a.time_part:
            time_part = complete_shorthand(time_part, _without_zone(a.time_part), ":")
        return _side_date(a.date_part, time_part).add(days=1)

    date_part = complete_shorthand(b.date_part, a.date_part, "-")
    time_part = b.time_part
    if time_part and a.time_part:
        time_part = complete_shorthand(time_part, _without_zone(a.time_part), ":")

    end = _side_date(date_part, time_part)
    if date_part == b.date_part and not time_part:
        return end
    return end.add(days=1)


def resolve_interval(
    a: IntervalSide,
    b: IntervalSide,
    allow_year_crossing: bool = True,
) -> Timeframe:
    """
    Turn two classified sides into a Timeframe.

    Supports ``<date>/<date>``, ``<date>/<duration>`` and ``<duration>/<date>``.

    Raises:
        ParseError: If the sides do not form one of those shapes or reach
            beyond the representable calendar
    """
    if a.kind is SideKind.TIME:
        raise ParseError("A bare time of day is only allowed as the second side of an interval")
    if a.kind is SideKind.DURATION and b.kind is not SideKind.DATE:
        raise ParseError("An interval starting with a duration must end with a date")

    try:
        if b.kind is SideKind.DURATION:
            start = _side_date(a.date_part, a.time_part)
            end = _offset(start, b.duration.total_seconds())
        elif a.kind is SideKind.DURATION:
            nominal_end = _side_date(b.date_part, b.time_part)
            start = _offset(nominal_end, -a.duration.total_seconds())
            end = nominal_end.add(days=1)
        else:
            start = _side_date(a.date_part, a.time_part)
            end = _resolve_end(a, b)
    except OverflowError as exc:
        raise ParseError(f"Interval {a.raw}/{b.raw} reaches past the last representable day") from exc

    return Timeframe.of(start, end, allow_year_crossing=allow_year_crossing)
