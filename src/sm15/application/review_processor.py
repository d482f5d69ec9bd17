"""
Review Processor — Application layer orchestrator.

Receives a grade for an item, drives the difficulty tracker, memory model,
optimal factor matrix and interval calculator in sequence, and returns the
updated item. Performs no I/O; persisting the item and the matrix is up to
the caller.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from sm15.application.config import EngineConfig
from sm15.application.difficulty import DifficultyTracker, validate_grade
from sm15.application.interval_calculator import IntervalCalculator
from sm15.application.memory_model import MemoryModel
from sm15.domain.constants import (
    LAPSE_GRADE,
    MAX_A_FACTOR,
    MAX_INTERVAL_DAYS,
    MIN_A_FACTOR,
    MIN_INTERVAL_DAYS,
)
from sm15.domain.errors import InvalidItemStateError, InvalidReviewEventError
from sm15.domain.matrix import bucket_of
from sm15.domain.models import Item, ReviewEvent, ReviewOutcome, ReviewResult
from sm15.domain.ports import OptimalFactorStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


def initialize_item(config: EngineConfig | None = None) -> Item:
    """Return a never-reviewed item with the creation defaults."""
    config = config or EngineConfig()
    return Item(memory_stability=config.initial_stability)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_item(item: Item) -> None:
    """Raise InvalidItemStateError if any invariant of `item` is violated."""
    df = item.difficulty_factor
    if not isinstance(df, (int, float)) or not math.isfinite(df):
        raise InvalidItemStateError(f"difficulty_factor must be a finite number, got {df!r}", df)
    if not MIN_A_FACTOR <= df <= MAX_A_FACTOR:
        raise InvalidItemStateError(
            f"difficulty_factor must lie in [{MIN_A_FACTOR}, {MAX_A_FACTOR}], got {df}", df
        )

    interval = item.interval_days
    if not _is_int(interval) or not MIN_INTERVAL_DAYS <= interval <= MAX_INTERVAL_DAYS:
        raise InvalidItemStateError(
            f"interval_days must be an integer in [{MIN_INTERVAL_DAYS}, {MAX_INTERVAL_DAYS}], "
            f"got {interval!r}",
            interval,
        )

    if not _is_int(item.repetition_index) or item.repetition_index < 0:
        raise InvalidItemStateError(
            f"repetition_index must be a non-negative integer, got {item.repetition_index!r}",
            item.repetition_index,
        )
    if not _is_int(item.lapse_count) or item.lapse_count < 0:
        raise InvalidItemStateError(
            f"lapse_count must be a non-negative integer, got {item.lapse_count!r}",
            item.lapse_count,
        )

    stability = item.memory_stability
    if (
        not isinstance(stability, (int, float))
        or not math.isfinite(stability)
        or stability <= 0
    ):
        raise InvalidItemStateError(
            f"memory_stability must be a positive number, got {stability!r}", stability
        )

    last = item.last_review_timestamp
    if last is not None and not isinstance(last, datetime):
        raise InvalidItemStateError(
            f"last_review_timestamp must be a datetime, got {type(last).__name__}", last
        )


def validate_event(item: Item, event: ReviewEvent) -> None:
    """Raise InvalidReviewEventError if `event` cannot be applied to `item`."""
    if not isinstance(event.timestamp, datetime):
        raise InvalidReviewEventError(
            f"Review timestamp must be a datetime, got {type(event.timestamp).__name__}",
            event.timestamp,
        )
    latency = event.response_latency_ms
    if not _is_int(latency) or latency < 0:
        raise InvalidReviewEventError(
            f"response_latency_ms must be a non-negative integer, got {latency!r}", latency
        )

    last = item.last_review_timestamp
    if last is None:
        return
    if (last.tzinfo is None) != (event.timestamp.tzinfo is None):
        raise InvalidReviewEventError(
            "Cannot compare naive and timezone-aware review timestamps", event.timestamp
        )
    if event.timestamp < last:
        raise InvalidReviewEventError(
            f"Review at {event.timestamp.isoformat()} precedes last review at {last.isoformat()}",
            event.timestamp,
        )


class ReviewProcessor:
    """
    State machine driving an item through New -> Reviewing -> {Reviewing, Lapsed}.

    One processor serves one user: it is bound to that user's optimal factor
    matrix. It holds no other state, so it can be shared between threads.
    """

    def __init__(
        self,
        table: OptimalFactorStore,
        config: EngineConfig | None = None,
        memory_model: MemoryModel | None = None,
        difficulty: DifficultyTracker | None = None,
        intervals: IntervalCalculator | None = None,
    ):
        """
        Args:
            table: The user's optimal factor matrix (read and written).
            config: Engine tunables; defaults if not provided.
            memory_model: Optional custom memory model.
            difficulty: Optional custom difficulty tracker.
            intervals: Optional custom interval calculator.
        """
        self.config = config or EngineConfig()
        self.table = table
        self.memory = memory_model or MemoryModel(self.config)
        self.difficulty = difficulty or DifficultyTracker(self.memory, self.config)
        self.intervals = intervals or IntervalCalculator(table, self.config)

    def initialize_item(self) -> Item:
        return initialize_item(self.config)

    def process_review(
        self,
        item: Item,
        grade: int,
        review_timestamp: datetime,
        response_latency_ms: int = 0,
    ) -> Item:
        """
        Apply a review and return the updated item.

        Raises:
            InvalidGradeError: grade is not an integer in [1, 5].
            InvalidItemStateError: the item violates an invariant.
            InvalidReviewEventError: timestamp or latency cannot be applied.
        """
        return self.review(item, grade, review_timestamp, response_latency_ms).item

    def review(
        self,
        item: Item,
        grade: int,
        review_timestamp: datetime,
        response_latency_ms: int = 0,
    ) -> ReviewResult:
        """
        Apply a review and return the updated item with everything the review produced.

        The input item is never modified; on failure nothing is recorded.
        """
        grade = validate_grade(grade)
        validate_item(item)
        event = ReviewEvent(grade, review_timestamp, response_latency_ms)
        validate_event(item, event)

        if item.is_new:
            elapsed_days = 0.0
            retrievability = None
        else:
            elapsed_days = (review_timestamp - item.last_review_timestamp).total_seconds()
            elapsed_days /= SECONDS_PER_DAY
            retrievability = self.memory.retrievability(elapsed_days, item.memory_stability)

        outcome = ReviewOutcome.LAPSED if grade == LAPSE_GRADE else ReviewOutcome.REVIEWED

        if outcome is ReviewOutcome.LAPSED:
            difficulty_factor = self.difficulty.after_lapse(item)
            interval_days = MIN_INTERVAL_DAYS
            lapse_count = item.lapse_count + 1
        else:
            difficulty_factor = self.difficulty.update(item, grade)
            interval_days = self.intervals.next_interval(item, grade, difficulty_factor)
            lapse_count = item.lapse_count
        stability = self.memory.update_stability(item.memory_stability, grade)

        # Learn from the spacing this cycle actually produced
        matrix_key = (item.repetition_index + 1, bucket_of(item.difficulty_factor))
        observed_factor = interval_days / item.interval_days
        self.table.record(*matrix_key, observed_factor)

        updated = replace(
            item,
            difficulty_factor=difficulty_factor,
            repetition_index=item.repetition_index + 1,
            interval_days=interval_days,
            lapse_count=lapse_count,
            memory_stability=stability,
            last_review_timestamp=review_timestamp,
            next_review_timestamp=review_timestamp + timedelta(days=interval_days),
        )

        logger.debug(
            f"Review grade={grade} outcome={outcome.value} latency={response_latency_ms}ms: "
            f"A-Factor {item.difficulty_factor} -> {difficulty_factor}, "
            f"interval {item.interval_days} -> {interval_days}d, "
            f"recorded {observed_factor:.3f} at {matrix_key}"
        )

        return ReviewResult(
            item=updated,
            outcome=outcome,
            event=event,
            elapsed_days=elapsed_days,
            retrievability=retrievability,
            matrix_key=matrix_key,
            observed_factor=observed_factor,
        )
