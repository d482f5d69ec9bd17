# Domain Package
from .errors import (
    DomainError,
    InvalidGradeError,
    InvalidItemStateError,
    InvalidReviewEventError,
    SchedulingError,
)
from .models import FactorEntry, Item, ReviewEvent, ReviewOutcome, ReviewResult
from .ports import OptimalFactorStore

__all__ = [
    "Item",
    "ReviewEvent",
    "ReviewOutcome",
    "ReviewResult",
    "FactorEntry",
    "OptimalFactorStore",
    "SchedulingError",
    "InvalidGradeError",
    "InvalidItemStateError",
    "InvalidReviewEventError",
    "DomainError",
]
