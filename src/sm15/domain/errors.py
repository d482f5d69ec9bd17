"""
Typed failures raised by the scheduling engine.

Every error is raised synchronously to the caller; the engine never retries
or repairs out-of-contract input.
"""

from typing import Any


class SchedulingError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class InvalidGradeError(SchedulingError, ValueError):
    """Grade is not an integer in [1, 5]."""


class InvalidItemStateError(SchedulingError, ValueError):
    """An item passed in violates one of its invariants."""


class InvalidReviewEventError(SchedulingError, ValueError):
    """Review timestamp or latency cannot be applied to the item."""


class DomainError(SchedulingError, ArithmeticError):
    """Internal numeric precondition violated (e.g. non-positive stability)."""
