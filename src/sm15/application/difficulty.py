"""
A-Factor manager.

Keeps each item's difficulty factor an accurate proxy for how hard it is,
by comparing the grade obtained with the recall the memory model expected.
"""

from sm15.application.config import EngineConfig
from sm15.application.memory_model import MemoryModel
from sm15.domain.constants import (
    A_FACTOR_DECIMALS,
    GRADE_PERFORMANCE,
    MAX_A_FACTOR,
    MIN_A_FACTOR,
)
from sm15.domain.errors import InvalidGradeError
from sm15.domain.models import Item


def validate_grade(grade: object) -> int:
    """Return the grade if it is an integer in [1, 5], raise InvalidGradeError otherwise."""
    # bool is an int subclass but never a grade
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGradeError(f"Grade must be an integer, got {grade!r}", grade)
    if grade not in GRADE_PERFORMANCE:
        raise InvalidGradeError(f"Grade must lie in [1, 5], got {grade}", grade)
    return grade


def grade_to_performance(grade: int) -> float:
    """Map a grade onto a 0.0-1.0 recall performance."""
    return GRADE_PERFORMANCE[validate_grade(grade)]


def clamp_a_factor(value: float) -> float:
    return round(max(MIN_A_FACTOR, min(MAX_A_FACTOR, value)), A_FACTOR_DECIMALS)


class DifficultyTracker:
    """
    Computes new A-Factors from review grades.

    Stateless; depends on the memory model for expected performance.
    """

    def __init__(
        self,
        memory_model: MemoryModel | None = None,
        config: EngineConfig | None = None,
    ):
        self.config = config or EngineConfig()
        self.memory = memory_model or MemoryModel(self.config)

    def weight_for(self, interval_days: int) -> float:
        """How much the current A-Factor is trusted over this review's estimate."""
        if interval_days <= self.config.short_interval_days:
            return self.config.short_interval_weight
        if interval_days <= self.config.medium_interval_days:
            return self.config.medium_interval_weight
        return self.config.long_interval_weight

    def update(self, item: Item, grade: int) -> float:
        """
        Return the item's new A-Factor after a review with `grade`.

        Grade 1 takes the lapse path, everything else is estimated from the
        ratio of actual to expected performance.
        """
        grade = validate_grade(grade)
        if grade == 1:
            return self.after_lapse(item)

        expected_fi = self.memory.expected_forgetting_index(
            item.interval_days, item.difficulty_factor
        )
        performance_ratio = grade_to_performance(grade) / (1 - expected_fi)

        if performance_ratio > 0:
            estimated = item.difficulty_factor / performance_ratio
        else:
            estimated = MAX_A_FACTOR

        w = self.weight_for(item.interval_days)
        return clamp_a_factor(item.difficulty_factor * w + estimated * (1 - w))

    def after_lapse(self, item: Item) -> float:
        """A failed recall makes the item harder, more so for repeat offenders."""
        bump = self.config.lapse_difficulty_step + (
            self.config.lapse_difficulty_per_lapse * item.lapse_count
        )
        return clamp_a_factor(item.difficulty_factor + bump)
