"""
Domain models for half-open calendar date intervals.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Iterator, List

import pendulum
from pendulum import Date

from .exceptions import InvalidArgument, InvalidRange, ParseError

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


def to_date(value: Any) -> Date:
    """
    Normalise a date-like value to a pendulum ``Date``.

    Accepts pendulum and standard library dates, datetimes (truncated to
    their calendar date) and ISO 8601 date strings.

    Raises:
        ParseError: If a string cannot be read as a calendar date
        InvalidArgument: If the value is not date-like at all
    """
    if isinstance(value, datetime):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, Date):
        return value
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value.strip(), exact=True)
        except ValueError as exc:
            raise ParseError(f"Could not parse date {value!r}: {exc}") from exc
        if isinstance(parsed, date):
            return pendulum.date(parsed.year, parsed.month, parsed.day)
        raise ParseError(f"{value!r} is not a calendar date")
    raise InvalidArgument(f"Cannot interpret {value!r} as a date")


def month_number(month: int | str) -> int:
    """Resolve a month given as 1-12 or as an English (abbreviated) name."""
    if isinstance(month, str):
        key = month.strip().lower()
        for number, name in enumerate(MONTH_NAMES, start=1):
            if key in (name, name[:3]):
                return number
        raise InvalidArgument(f"Unknown month name: {month!r}")

    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidArgument(f"Month must be an integer or a month name, got {month!r}")
    if not 1 <= month <= 12:
        raise InvalidArgument(f"Month must be between 1 and 12, got {month}")
    return month


def crosses_year_boundary(start: Date, end: Date) -> bool:
    """Check whether ``[start, end)`` touches more than one calendar year."""
    return start != end and start.year != end.subtract(days=1).year


def _today(tz: str | None = None) -> Date:
    now = pendulum.today(tz) if tz else pendulum.today()
    return now.date()


def _require_timeframes(values: Iterable[Any], operation: str) -> None:
    for value in values:
        if not isinstance(value, Timeframe):
            raise InvalidArgument(
                f"You can only use timeframes for {operation}, got {value!r}"
            )


@dataclass(frozen=True)
class DateRange:
    """
    Lazy, restartable sequence of every date in ``[start, end)``.

    Each iteration walks the range afresh, so the same object can be looped
    over any number of times.
    """
    start: Date
    end: Date

    def __iter__(self) -> Iterator[Date]:
        current = self.start
        while current < self.end:
            yield current
            current = current.add(days=1)

    def __len__(self) -> int:
        return self.start.diff(self.end).in_days()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, date):
            return False
        return self.start <= to_date(item) < self.end


@dataclass(frozen=True, repr=False)
class Timeframe:
    """
    Represents an immutable span of calendar days.

    The span includes ``start_date`` and every following day up to, but
    excluding, ``end_date``. Equal dates denote a zero-length timeframe.

    Invariant: start_date must not be after end_date.
    """
    start_date: Date
    end_date: Date

    def __post_init__(self):
        object.__setattr__(self, "start_date", to_date(self.start_date))
        object.__setattr__(self, "end_date", to_date(self.end_date))

        if self.start_date > self.end_date:
            raise InvalidRange(
                f"Start date {self.start_date} should be earlier than end date {self.end_date}"
            )

    # Construction

    @classmethod
    def of(cls, start: Any, end: Any, allow_year_crossing: bool = True) -> "Timeframe":
        """
        Create a timeframe from two date-like values.

        Args:
            start: First day of the timeframe
            end: First day after the timeframe
            allow_year_crossing: When False, reject ranges that straddle a
                calendar year boundary

        Raises:
            InvalidRange: If start is after end, or the range crosses a year
                boundary while that is disallowed
        """
        timeframe = cls(start, end)
        if not allow_year_crossing and crosses_year_boundary(timeframe.start_date, timeframe.end_date):
            raise InvalidRange("Timeframes that cross year boundaries are dangerous")
        return timeframe

    @classmethod
    def of_month(cls, year: int, month: int | str) -> "Timeframe":
        """Create the timeframe covering one calendar month."""
        number = month_number(month)
        try:
            start = pendulum.date(year, number, 1)
            end = start.add(months=1)
        except (OverflowError, ValueError) as exc:
            raise InvalidArgument(f"Month {year}-{number:02d} is out of range: {exc}") from exc
        return cls(start, end)

    @classmethod
    def of_year(cls, year: int) -> "Timeframe":
        """
        Create the timeframe covering one calendar year.

        Raises:
            InvalidArgument: If the year or the one after it is not a valid calendar year
        """
        try:
            start, end = pendulum.date(year, 1, 1), pendulum.date(year + 1, 1, 1)
        except (OverflowError, ValueError) as exc:
            raise InvalidArgument(f"Year {year} is out of range: {exc}") from exc
        return cls(start, end)

    @classmethod
    def mid(cls, years: int, tz: str | None = None) -> "Timeframe":
        """Create a timeframe reaching ``years`` years either side of today."""
        today = _today(tz)
        return cls(today.subtract(years=years), today.add(years=years))

    @classmethod
    def this_year(cls, tz: str | None = None) -> "Timeframe":
        """Create the timeframe covering the current calendar year."""
        return cls.of_year(_today(tz).year)

    @classmethod
    def constrained(cls, start: Any, end: Any, constraint: "Timeframe") -> "Timeframe":
        """
        Create a timeframe from ``start`` and ``end``, clamped to ``constraint``.

        A range lying wholly outside the constraint yields a zero-length
        timeframe at the constraint's start.
        """
        if not isinstance(constraint, Timeframe):
            raise InvalidArgument("Constraint must be a Timeframe")

        start, end = to_date(start), to_date(end)
        if start > end:
            raise InvalidRange(f"Start date {start} should be earlier than end date {end}")

        if end <= constraint.start_date or start >= constraint.end_date:
            return cls(constraint.start_date, constraint.start_date)

        if not crosses_year_boundary(start, end):
            return cls(start, end) & constraint

        last_day = end.subtract(days=1)
        if start.year < constraint.start_date.year < last_day.year:
            return constraint

        return cls(
            max(constraint.start_date, start),
            min(constraint.end_date, end),
        )

    # Queries

    @property
    def is_empty(self) -> bool:
        """True for a zero-length timeframe."""
        return self.start_date == self.end_date

    def days(self) -> int:
        """Return the number of days in the timeframe."""
        return self.start_date.diff(self.end_date).in_days()

    def contains(self, item: Any) -> bool:
        """
        Check whether a date or another timeframe lies within this one.

        A date is contained when ``start_date <= date < end_date``; a timeframe
        when its bounds do not reach past ours.
        """
        if isinstance(item, Timeframe):
            return self.start_date <= item.start_date and self.end_date >= item.end_date
        day = to_date(item)
        return self.start_date <= day < self.end_date

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def properly_contains(self, other: "Timeframe") -> bool:
        """Check whether ``other`` lies strictly inside this timeframe on both sides."""
        if not isinstance(other, Timeframe):
            raise InvalidArgument("Proper inclusion only makes sense when testing other Timeframes")
        return self.start_date < other.start_date and self.end_date > other.end_date

    def year(self) -> "Timeframe":
        """Return the calendar year enclosing this timeframe."""
        if crosses_year_boundary(self.start_date, self.end_date):
            raise InvalidRange("Timeframes that cross year boundaries are dangerous during Timeframe.year")
        return Timeframe.of_year(self.start_date.year)

    def first_days_of_months(self) -> List[Date]:
        """Return the first day of every calendar month the timeframe touches."""
        if self.is_empty:
            return []

        first_days: List[Date] = []
        current = self.start_date.start_of("month")
        while current < self.end_date:
            first_days.append(current)
            current = current.add(months=1)
        return first_days

    def months(self) -> List["Timeframe"]:
        """
        Split the timeframe into month-long pieces.

        Partial months at either end are kept as the cropped piece.
        """
        pieces: List[Timeframe] = []
        for first_day in self.first_days_of_months():
            piece = Timeframe.of_month(first_day.year, first_day.month) & self
            if piece is not None:
                pieces.append(piece)
        return pieces

    def full_months(self) -> List["Timeframe"]:
        """Like ``months`` but expanding partial months to the whole month."""
        return [
            Timeframe.of_month(first_day.year, first_day.month)
            for first_day in self.first_days_of_months()
        ]

    def years(self) -> List["Timeframe"]:
        """Split the timeframe into year-long pieces, cropping partial years."""
        pieces: List[Timeframe] = []
        for year in self._touched_years():
            piece = Timeframe.of_year(year) & self
            if piece is not None:
                pieces.append(piece)
        return pieces

    def full_years(self) -> List["Timeframe"]:
        """Like ``years`` but expanding partial years to the whole year."""
        return [Timeframe.of_year(year) for year in self._touched_years()]

    def _touched_years(self) -> range:
        if self.is_empty:
            return range(0)
        return range(self.start_date.year, self.end_date.subtract(days=1).year + 1)

    def dates(self) -> DateRange:
        """Return every date in the timeframe, in ascending order."""
        return DateRange(start=self.start_date, end=self.end_date)

    def last_year(self) -> "Timeframe":
        """Return the same timeframe, one calendar year earlier."""
        return Timeframe(
            self.start_date.subtract(years=1),
            self.end_date.subtract(years=1),
        )

    # Set algebra

    def intersect(self, other: "Timeframe") -> "Timeframe | None":
        """
        Calculate the overlap of two timeframes.
        Returns None if they do not overlap.
        """
        if not isinstance(other, Timeframe):
            raise InvalidArgument("You can only intersect a Timeframe with another Timeframe")

        if other == self:
            return self
        if other.properly_contains(self):
            return self
        if self.properly_contains(other):
            return other
        if self.start_date >= other.end_date or self.end_date <= other.start_date:
            return None

        return Timeframe(
            max(self.start_date, other.start_date),
            min(self.end_date, other.end_date),
        )

    def __and__(self, other: "Timeframe") -> "Timeframe | None":
        return self.intersect(other)

    def ratio(self, other: "Timeframe") -> float:
        """Return the fraction of ``other`` that this timeframe represents, by day count."""
        if not isinstance(other, Timeframe):
            raise InvalidArgument("You can only divide a Timeframe by another Timeframe")
        if other.is_empty:
            raise InvalidArgument(f"Cannot divide by the zero-length timeframe {other}")
        return self.days() / other.days()

    def __truediv__(self, other: "Timeframe") -> float:
        return self.ratio(other)

    def crop(self, container: "Timeframe") -> "Timeframe":
        """
        Clamp this timeframe into ``container``.

        A timeframe disjoint from the container collapses to zero length
        instead of failing.
        """
        if not isinstance(container, Timeframe):
            raise InvalidArgument("You can only crop a timeframe by another timeframe")

        start = max(self.start_date, container.start_date)
        end = min(self.end_date, container.end_date)
        return Timeframe(start, max(start, end))

    def ending_no_later_than(self, day: Any) -> "Timeframe | None":
        """Crop the timeframe to end no later than ``day``; None if it starts at or after it."""
        day = to_date(day)
        if self.end_date < day:
            return self
        if self.start_date >= day:
            return None
        return Timeframe(self.start_date, day)

    def gaps_left_by(self, *others: "Timeframe") -> List["Timeframe"]:
        """
        Calculate the parts of this timeframe not covered by any of ``others``.

        Algorithm:
        1. Drop candidates lying wholly outside this timeframe
        2. Crop the remaining candidates to this timeframe
        3. Drop candidates properly contained by another candidate
        4. Walk the candidates by start date, emitting the stretch between
           the covered frontier and each next start

        Returns the gaps in ascending order; zero-length gaps are omitted.
        """
        _require_timeframes(others, "gap analysis")

        # Step 1: Discard candidates that cannot touch us
        relevant = [
            other for other in others
            if other.end_date > self.start_date and other.start_date < self.end_date
        ]

        # Step 2: Crop
        cropped = [other.crop(self) for other in relevant]

        # Step 3: Redundancy elimination
        candidates = [
            candidate for candidate in cropped
            if not any(other.properly_contains(candidate) for other in cropped)
        ]

        if not candidates:
            return [self]

        # Step 4: Pair each covered frontier with the next candidate start
        candidates.sort(key=lambda candidate: candidate.start_date)

        gaps: List[Timeframe] = []
        frontier = self.start_date

        for candidate in candidates:
            if frontier < candidate.start_date:
                gaps.append(Timeframe(frontier, candidate.start_date))
            frontier = max(frontier, candidate.end_date)

        if frontier < self.end_date:
            gaps.append(Timeframe(frontier, self.end_date))

        return gaps

    def covered_by(self, *others: "Timeframe") -> bool:
        """Check whether the union of ``others`` covers this timeframe."""
        return not self.gaps_left_by(*others)

    # Serialization

    def to_canonical_string(self) -> str:
        """Return the ISO 8601 time interval ``YYYY-MM-DD/YYYY-MM-DD``."""
        return f"{self.start_date.isoformat()}/{self.end_date.isoformat()}"

    def to_json_value(self) -> str:
        """Return the canonical string encoded as a bare JSON string."""
        return json.dumps(self.to_canonical_string())

    def __str__(self) -> str:
        return self.to_canonical_string()

    def __repr__(self) -> str:
        return f"<Timeframe {self.days()} days starting {self.start_date} ending {self.end_date}>"
