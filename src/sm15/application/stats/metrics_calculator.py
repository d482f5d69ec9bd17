"""
Metrics calculator for deriving insights from item scheduling state.

This is a pure computation module with no I/O.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from sm15.application.memory_model import MemoryModel
from sm15.domain.models import Item

SECONDS_PER_DAY = 86400.0


@dataclass
class ItemMetrics:
    """
    Item state enriched with computed metrics.
    """

    # Original state
    difficulty_factor: float
    repetition_index: int
    interval_days: int
    lapse_count: int
    memory_stability: float

    # Computed metrics
    current_retrievability: float | None
    lapse_rate: float | None  # lapses / repetitions
    days_overdue: float | None  # Negative if not yet due
    is_due: bool


class MetricsCalculator:
    """
    Computes derived metrics from Item objects.

    Stateless and side-effect free.
    """

    def __init__(self, memory_model: MemoryModel | None = None):
        self.memory = memory_model or MemoryModel()

    def enrich(self, item: Item, now: datetime | None = None) -> ItemMetrics:
        """
        Enrich an item with computed metrics as of `now` (defaults to the current time).
        """
        if now is None:
            last = item.last_review_timestamp
            # Match the item's timestamps: naive items get a naive local clock
            now = datetime.now(timezone.utc) if last is None or last.tzinfo else datetime.now()

        days_overdue = self._compute_days_overdue(item, now)

        return ItemMetrics(
            difficulty_factor=item.difficulty_factor,
            repetition_index=item.repetition_index,
            interval_days=item.interval_days,
            lapse_count=item.lapse_count,
            memory_stability=item.memory_stability,
            current_retrievability=self._compute_retrievability(item, now),
            lapse_rate=self._compute_lapse_rate(item),
            days_overdue=days_overdue,
            # Never-reviewed items are always due
            is_due=days_overdue is None or days_overdue >= 0,
        )

    def _compute_retrievability(self, item: Item, now: datetime) -> float | None:
        """
        Compute current recall probability: R = exp(-t/S).
        """
        if item.last_review_timestamp is None:
            return None

        days_elapsed = (now - item.last_review_timestamp).total_seconds() / SECONDS_PER_DAY
        # A clock behind the last review counts as "just reviewed"
        return self.memory.retrievability(max(0.0, days_elapsed), item.memory_stability)

    def _compute_lapse_rate(self, item: Item) -> float | None:
        if item.repetition_index == 0:
            return None
        return item.lapse_count / item.repetition_index

    def _compute_days_overdue(self, item: Item, now: datetime) -> float | None:
        if item.next_review_timestamp is None:
            return None
        return (now - item.next_review_timestamp).total_seconds() / SECONDS_PER_DAY
