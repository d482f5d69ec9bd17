"""
Domain models for the scheduling engine.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .constants import (
    DEFAULT_A_FACTOR,
    DEFAULT_INTERVAL_DAYS,
    DEFAULT_STABILITY,
)


@dataclass(frozen=True)
class Item:
    """
    Scheduling record of a single learning item.

    The engine never mutates an item; every review returns a new one.

    Attributes:
        difficulty_factor: A-Factor in [1.10, 2.50]; smaller means easier.
        repetition_index: Scheduling cycles completed so far.
        interval_days: Current interval in [1, 5475] days.
        lapse_count: Number of grade-1 outcomes.
        memory_stability: Modeled stability in days (> 0).
        last_review_timestamp: Instant of the last review (None if never reviewed).
        next_review_timestamp: last_review_timestamp + interval_days.
    """

    difficulty_factor: float = DEFAULT_A_FACTOR
    repetition_index: int = 0
    interval_days: int = DEFAULT_INTERVAL_DAYS
    lapse_count: int = 0
    memory_stability: float = DEFAULT_STABILITY
    last_review_timestamp: datetime | None = None
    next_review_timestamp: datetime | None = None

    @property
    def is_new(self) -> bool:
        return self.last_review_timestamp is None


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single grading of an item. Consumed by the processor, never retained.

    Attributes:
        grade: 1=blackout ... 5=perfect recall.
        timestamp: When the review took place.
        response_latency_ms: Time the learner took to answer.
    """

    grade: int
    timestamp: datetime
    response_latency_ms: int = 0


class ReviewOutcome(Enum):
    """Transition taken by a review."""

    LAPSED = "lapsed"  # grade 1: interval reset, difficulty bumped
    REVIEWED = "reviewed"  # grade 2-5: difficulty estimated, interval grown


@dataclass(frozen=True)
class FactorEntry:
    """A stored optimal factor and the number of observations blended into it."""

    optimal_factor: float
    sample_count: int = 0


@dataclass(frozen=True)
class ReviewResult:
    """
    Everything a review produced.

    Attributes:
        item: The updated item.
        outcome: Which branch of the state machine was taken.
        event: The review event that was consumed.
        elapsed_days: Days between the previous review and this one (0 if new).
        retrievability: Modeled recall probability at review time (None if new).
        matrix_key: (repetition row, difficulty bucket) the observation was recorded under.
        observed_factor: Interval ratio recorded into the matrix.
    """

    item: Item
    outcome: ReviewOutcome
    event: ReviewEvent
    elapsed_days: float
    retrievability: float | None
    matrix_key: tuple[int, int]
    observed_factor: float
