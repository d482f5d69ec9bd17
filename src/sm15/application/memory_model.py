"""
Forgetting-curve math.

This is a pure computation module with no I/O.
"""

import math

from sm15.application.config import EngineConfig
from sm15.domain.constants import (
    MAX_FORGETTING_INDEX,
    MIN_FORGETTING_INDEX,
    PASSING_GRADE,
)
from sm15.domain.errors import DomainError


class MemoryModel:
    """
    Exponential forgetting curve: R = exp(-t / S).

    Stateless and side-effect free.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def retrievability(self, elapsed_days: float, stability: float) -> float:
        """
        Probability of recall after `elapsed_days` for a memory of the given stability.
        """
        if stability <= 0:
            raise DomainError(f"Stability must be positive, got {stability}", stability)
        if elapsed_days < 0:
            raise DomainError(f"Elapsed time cannot be negative, got {elapsed_days}", elapsed_days)
        return max(0.0, min(1.0, math.exp(-elapsed_days / stability)))

    def estimated_stability(self, difficulty_factor: float) -> float:
        """
        Stability an item of this difficulty is assumed to have.

        Scales the A-Factor by the target retention (1 - target forgetting index).
        """
        if difficulty_factor <= 0:
            raise DomainError(
                f"Difficulty factor must be positive, got {difficulty_factor}",
                difficulty_factor,
            )
        return difficulty_factor * (1 - self.config.target_forgetting_index)

    def expected_forgetting_index(self, interval_days: float, difficulty_factor: float) -> float:
        """
        Share of items expected to be forgotten at the end of `interval_days`.

        Clamped to [0.01, 0.95] so callers can divide by (1 - FI) safely.
        """
        stability = self.estimated_stability(difficulty_factor)
        forgetting_index = 1 - self.retrievability(interval_days, stability)
        return max(MIN_FORGETTING_INDEX, min(MAX_FORGETTING_INDEX, forgetting_index))

    def update_stability(self, current: float, grade: int) -> float:
        """
        New stability after a review.

        Passing grades (>= 3) grow stability by current * gain * grade / 5;
        lower grades shrink it by current * loss. The result is clamped to
        [min_stability, max_stability].
        """
        if current <= 0:
            raise DomainError(f"Stability must be positive, got {current}", current)

        if grade >= PASSING_GRADE:
            updated = current + current * self.config.stability_gain * grade / 5
        else:
            updated = current - current * self.config.stability_loss
        return max(self.config.min_stability, min(self.config.max_stability, updated))
