"""
Interval calculator.

Combines the learned optimal factor for an item's repetition and difficulty
with a grade multiplier reflecting confidence in the current answer.
"""

import logging
import math

from sm15.application.config import EngineConfig
from sm15.application.difficulty import validate_grade
from sm15.domain.constants import LAPSE_GRADE, MAX_INTERVAL_DAYS, MIN_INTERVAL_DAYS
from sm15.domain.matrix import MatrixKey, bucket_of
from sm15.domain.models import Item
from sm15.domain.ports import OptimalFactorStore

logger = logging.getLogger(__name__)


def clamp_interval(days: float) -> int:
    """Clamp to [1, 5475] and round half-up to a whole day."""
    bounded = max(MIN_INTERVAL_DAYS, min(MAX_INTERVAL_DAYS, days))
    return int(math.floor(bounded + 0.5))


class IntervalCalculator:
    """Produces the next interval from an item's state and the user's matrix."""

    def __init__(self, table: OptimalFactorStore, config: EngineConfig | None = None):
        """
        Args:
            table: The user's optimal factor matrix (read only here).
            config: Engine tunables; defaults if not provided.
        """
        self.table = table
        self.config = config or EngineConfig()

    def lookup_key(self, item: Item, difficulty_factor: float) -> MatrixKey:
        """
        Matrix key to read the next factor from.

        A never-repeated item reads row lapse_count + 1; later repetitions read
        the row after their repetition index.
        """
        if item.repetition_index == 0:
            row = item.lapse_count + 1
        else:
            row = item.repetition_index + 1
        return row, bucket_of(difficulty_factor)

    def next_interval(self, item: Item, grade: int, difficulty_factor: float | None = None) -> int:
        """
        Compute the interval that follows a review of `item` graded `grade`.

        Args:
            item: The item as it was before the review.
            grade: Review grade in [1, 5].
            difficulty_factor: The already-updated A-Factor; defaults to the item's.

        Returns:
            Interval in whole days within [1, 5475].
        """
        grade = validate_grade(grade)
        if grade == LAPSE_GRADE:
            return MIN_INTERVAL_DAYS

        if difficulty_factor is None:
            difficulty_factor = item.difficulty_factor

        row, bucket = self.lookup_key(item, difficulty_factor)
        factor = self.table.lookup(row, bucket)

        if item.repetition_index == 0:
            raw = factor
        else:
            raw = item.interval_days * factor

        interval = clamp_interval(raw * self.config.grade_multipliers[grade])
        logger.debug(
            f"Interval for grade {grade} at ({row}, {bucket}): "
            f"factor {factor:.3f} -> {interval} days"
        )
        return interval
