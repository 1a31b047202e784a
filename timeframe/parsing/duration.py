"""
ISO 8601 durations (``PnYnMnDTnHnMnS``) reduced to approximate seconds.

Years and months are converted with average lengths rather than calendar
arithmetic, so results are only exact for whole days, hours, minutes and
seconds.
"""

import logging
import math
import re
from dataclasses import dataclass

from ..domain.exceptions import ParseError

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 31_556_926
SECONDS_PER_MONTH = 2_629_743.83
SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600
SECONDS_PER_MINUTE = 60

_MAGNITUDE = r"(\d+(?:[.,]\d+)?)"


def _magnitude(part: str, designator: str) -> float:
    """Read the number in front of ``designator``; malformed or missing values count as zero."""
    match = re.search(_MAGNITUDE + designator, part)
    if match:
        return float(match.group(1).replace(",", "."))
    if designator in part:
        logger.warning(
            "Ignoring malformed %s designator in duration part %r", designator, part
        )
    return 0.0


@dataclass(frozen=True)
class Duration:
    """
    A parsed ISO 8601 duration.

    Every component defaults to zero when its designator is absent.
    """
    years: float = 0.0
    months: float = 0.0
    days: float = 0.0
    hours: float = 0.0
    minutes: float = 0.0
    seconds: float = 0.0

    @classmethod
    def parse(cls, raw: str) -> "Duration":
        """
        Parse a duration such as ``P1Y2M10DT2H30M``.

        The designator is case-insensitive. ``M`` means months before the
        ``T`` separator and minutes after it.

        Raises:
            ParseError: If the text does not start with ``P``
        """
        text = raw.strip().upper()
        if not text.startswith("P"):
            raise ParseError(f"Durations must start with 'P', got {raw!r}")

        date_part, _, time_part = text.partition("T")

        return cls(
            years=_magnitude(date_part, "Y"),
            months=_magnitude(date_part, "M"),
            days=_magnitude(date_part, "D"),
            hours=_magnitude(time_part, "H"),
            minutes=_magnitude(time_part, "M"),
            seconds=_magnitude(time_part, "S"),
        )

    def total_seconds(self) -> int:
        """Return the duration in whole seconds, rounded up."""
        return math.ceil(
            self.years * SECONDS_PER_YEAR
            + self.months * SECONDS_PER_MONTH
            + self.days * SECONDS_PER_DAY
            + self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )
