"""
Gap analysis across many base timeframes.

Pure domain logic: given a shared set of covering timeframes, work out
which parts of each base timeframe remain uncovered.
"""

import logging
from typing import Iterable, List, Sequence

from .exceptions import InvalidArgument
from .models import Timeframe

logger = logging.getLogger(__name__)


class GapCalculator:
    """
    Calculates the gaps a shared set of coverings leaves in many timeframes.

    Algorithm:
    1. Validate every covering (and later every base) is a Timeframe
    2. Ask each base for the gaps the coverings leave in it
    3. Concatenate the results in base order
    """

    def __init__(self, coverings: Iterable[Timeframe]):
        self.coverings: List[Timeframe] = list(coverings)
        self._validate(self.coverings)

    def gaps_in(self, bases: Sequence[Timeframe]) -> List[Timeframe]:
        """
        Find the gaps left in every base timeframe.

        Args:
            bases: Timeframes to check, in the order results should appear

        Returns:
            Gaps for the first base, then the second, and so on
        """
        bases = list(bases)
        self._validate(bases)

        gaps: List[Timeframe] = []
        for base in bases:
            gaps.extend(base.gaps_left_by(*self.coverings))

        logger.debug(
            "Found %d gaps in %d timeframes against %d coverings",
            len(gaps), len(bases), len(self.coverings),
        )
        return gaps

    def uncovered(self, bases: Sequence[Timeframe]) -> List[Timeframe]:
        """Return the bases that still have at least one gap."""
        bases = list(bases)
        self._validate(bases)
        return [base for base in bases if not base.covered_by(*self.coverings)]

    @staticmethod
    def _validate(timeframes: Sequence[Timeframe]) -> None:
        invalid = [item for item in timeframes if not isinstance(item, Timeframe)]
        if invalid:
            raise InvalidArgument(
                f"You can only use timeframes for this operation, got {invalid!r}"
            )


def multiple_timeframes_gaps_left_by(
    bases: Sequence[Timeframe],
    *coverings: Timeframe,
) -> List[Timeframe]:
    """Concatenate the gaps ``coverings`` leave in each of ``bases``."""
    return GapCalculator(coverings).gaps_in(bases)
