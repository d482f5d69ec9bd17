"""Tests for the review state machine, including the end-to-end scenarios."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from sm15.application.review_processor import (
    ReviewProcessor,
    initialize_item,
    validate_item,
)
from sm15.domain.errors import (
    InvalidGradeError,
    InvalidItemStateError,
    InvalidReviewEventError,
)
from sm15.domain.models import Item, ReviewOutcome
from sm15.infrastructure.matrix import InMemoryOptimalFactorTable


def run_sequence(processor, grades, start):
    """Apply grades in order, each review on the date the previous one scheduled."""
    item = processor.initialize_item()
    when = start
    history = []
    for grade in grades:
        item = processor.process_review(item, grade, when)
        history.append(item)
        when = item.next_review_timestamp
    return history


class TestInitializeItem:
    def test_creation_defaults(self):
        item = initialize_item()
        assert item.difficulty_factor == 2.5
        assert item.repetition_index == 0
        assert item.interval_days == 1
        assert item.lapse_count == 0
        assert item.memory_stability == 1.5
        assert item.last_review_timestamp is None
        assert item.next_review_timestamp is None

    def test_fresh_items_are_identical(self, processor):
        assert processor.initialize_item() == processor.initialize_item()
        assert initialize_item() == processor.initialize_item()


class TestReviewedPath:
    def test_scenario_b_good_recall_on_new_item(self, processor, t0):
        item = Item(difficulty_factor=2.5, repetition_index=0, interval_days=1)
        result = processor.review(item, 4, t0)

        assert result.outcome is ReviewOutcome.REVIEWED
        assert result.item.difficulty_factor < 2.5
        assert 1 <= result.item.interval_days <= 3
        assert result.item.interval_days > item.interval_days
        assert result.item.repetition_index == 1

    def test_timestamps(self, processor, t0):
        updated = processor.process_review(initialize_item(), 4, t0)
        assert updated.last_review_timestamp == t0
        assert updated.next_review_timestamp == t0 + timedelta(days=updated.interval_days)

    def test_stability_grows(self, processor, t0):
        updated = processor.process_review(initialize_item(), 5, t0)
        assert updated.memory_stability == pytest.approx(1.8)

    def test_huge_stability_stays_reviewable(self, processor, t0):
        item = Item(
            difficulty_factor=1.10,
            repetition_index=40,
            interval_days=5475,
            memory_stability=1.6e308,
            last_review_timestamp=t0 - timedelta(days=5475),
        )
        updated = processor.process_review(item, 5, t0)
        assert updated.memory_stability == 36500.0

        again = processor.process_review(updated, 5, updated.next_review_timestamp)
        assert again.memory_stability == 36500.0

    def test_grade_two_counts_as_review_not_lapse(self, processor, t0):
        result = processor.review(initialize_item(), 2, t0)
        assert result.outcome is ReviewOutcome.REVIEWED
        assert result.item.lapse_count == 0
        assert result.item.memory_stability < 1.5

    def test_elapsed_and_retrievability(self, processor, t0):
        first = processor.process_review(initialize_item(), 4, t0)
        result = processor.review(first, 4, t0 + timedelta(days=3))
        assert result.elapsed_days == pytest.approx(3.0)
        assert 0 < result.retrievability < 1

    def test_new_item_has_no_elapsed_time(self, processor, t0):
        result = processor.review(initialize_item(), 3, t0)
        assert result.elapsed_days == 0
        assert result.retrievability is None

    def test_input_item_untouched(self, processor, t0):
        item = initialize_item()
        processor.process_review(item, 5, t0)
        assert item == initialize_item()


class TestLapsedPath:
    def test_resets_interval_and_counts_lapse(self, processor, t0):
        item = Item(
            difficulty_factor=1.6,
            repetition_index=6,
            interval_days=120,
            lapse_count=2,
            memory_stability=40.0,
            last_review_timestamp=t0 - timedelta(days=120),
        )
        result = processor.review(item, 1, t0)

        assert result.outcome is ReviewOutcome.LAPSED
        assert result.item.interval_days == 1
        assert result.item.lapse_count == 3
        assert result.item.repetition_index == 7
        # 1.6 + 0.2 + 0.1 * 2
        assert result.item.difficulty_factor == 2.0
        assert result.item.memory_stability == pytest.approx(28.0)

    @pytest.mark.parametrize("lapses", [0, 1, 5])
    @pytest.mark.parametrize("interval", [1, 9, 365, 5475])
    def test_always_exactly_one_day(self, processor, t0, lapses, interval):
        item = Item(interval_days=interval, lapse_count=lapses, repetition_index=3)
        updated = processor.process_review(item, 1, t0)
        assert updated.interval_days == 1
        assert updated.lapse_count == lapses + 1


class TestMatrixLearning:
    def test_records_under_old_state(self, processor, table, t0):
        result = processor.review(initialize_item(), 4, t0)
        # Old repetition 0 -> row 1, old A-Factor 2.5 -> bucket 14
        assert result.matrix_key == (1, 14)
        assert result.observed_factor == result.item.interval_days / 1
        entry = table.snapshot()[(1, 14)]
        assert entry.sample_count == 1

    def test_lapse_records_floor_factor(self, processor, table, t0):
        item = Item(difficulty_factor=1.10, repetition_index=2, interval_days=10)
        processor.process_review(item, 1, t0)
        assert table.snapshot()[(3, 0)].optimal_factor == 1.0


class TestScenarios:
    def test_scenario_a(self, processor, t0):
        after_4, after_3, after_1, after_5 = run_sequence(processor, [4, 3, 1, 5], t0)

        assert after_4.interval_days == 2
        assert after_3.interval_days >= after_4.interval_days
        assert after_1.interval_days == 1
        assert after_1.lapse_count == 1
        assert after_5.interval_days > 1
        assert after_5.lapse_count == 1
        assert after_5.repetition_index == 4

    def test_perfect_recall_never_shrinks_interval(self, processor, t0):
        history = run_sequence(processor, [5] * 15, t0)
        intervals = [item.interval_days for item in history]
        assert intervals == sorted(intervals)
        assert intervals[-1] > intervals[0]
        assert intervals[-1] <= 5475

    @pytest.mark.parametrize("grade", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize(
        "item",
        [
            Item(),
            Item(difficulty_factor=1.10, repetition_index=12, interval_days=5475, lapse_count=9),
            Item(difficulty_factor=2.5, repetition_index=1, interval_days=1, lapse_count=30),
            Item(difficulty_factor=1.73, repetition_index=4, interval_days=31, memory_stability=0.2),
        ],
    )
    def test_outputs_stay_in_domain(self, processor, t0, item, grade):
        updated = processor.process_review(item, grade, t0)
        assert 1.10 <= updated.difficulty_factor <= 2.50
        assert 1 <= updated.interval_days <= 5475
        assert updated.repetition_index == item.repetition_index + 1
        assert updated.memory_stability > 0


class TestValidation:
    @pytest.mark.parametrize("grade", [0, 6, 2.5, None])
    def test_scenario_c_invalid_grade(self, processor, table, t0, grade):
        item = initialize_item()
        with pytest.raises(InvalidGradeError):
            processor.process_review(item, grade, t0)
        assert item == initialize_item()
        assert table.snapshot() == {}

    @pytest.mark.parametrize(
        "changes",
        [
            {"difficulty_factor": 2.6},
            {"difficulty_factor": 1.0},
            {"difficulty_factor": float("nan")},
            {"interval_days": 0},
            {"interval_days": 5476},
            {"interval_days": 2.5},
            {"repetition_index": -1},
            {"lapse_count": -1},
            {"memory_stability": 0.0},
            {"last_review_timestamp": "2026-01-01"},
        ],
    )
    def test_invalid_item(self, processor, table, t0, changes):
        item = replace(initialize_item(), **changes)
        with pytest.raises(InvalidItemStateError):
            processor.process_review(item, 4, t0)
        assert table.snapshot() == {}

    def test_validate_item_accepts_defaults(self):
        validate_item(initialize_item())

    def test_negative_latency(self, processor, t0):
        with pytest.raises(InvalidReviewEventError):
            processor.process_review(initialize_item(), 4, t0, response_latency_ms=-5)

    def test_review_before_last_review(self, processor, t0):
        reviewed = processor.process_review(initialize_item(), 4, t0)
        with pytest.raises(InvalidReviewEventError):
            processor.process_review(reviewed, 4, t0 - timedelta(hours=1))

    def test_naive_and_aware_timestamps(self, processor, t0):
        reviewed = processor.process_review(initialize_item(), 4, t0)
        with pytest.raises(InvalidReviewEventError):
            processor.process_review(reviewed, 4, datetime(2026, 2, 1))

    def test_latency_kept_on_event(self, processor, t0):
        result = processor.review(initialize_item(), 4, t0, response_latency_ms=2300)
        assert result.event.response_latency_ms == 2300
        assert result.event.grade == 4


class TestConcurrency:
    def test_concurrent_reviews_lose_no_updates(self, t0):
        table = InMemoryOptimalFactorTable()
        processor = ReviewProcessor(table)
        n = 64

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda _: processor.process_review(initialize_item(), 4, t0), range(n)))

        # Every new item records under row 1, bucket 14
        assert table.snapshot()[(1, 14)].sample_count == n
