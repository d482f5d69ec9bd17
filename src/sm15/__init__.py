"""sm15: SuperMemo-15 style spaced-repetition scheduling engine."""

from sm15.application import (
    EngineConfig,
    ItemMetrics,
    MatrixSummary,
    MetricsCalculator,
    ReviewProcessor,
    initialize_item,
    resolve_config,
    summarize_matrix,
)
from sm15.application.factory import build_review_processor, processor_for_user
from sm15.consts import VERSION
from sm15.domain import (
    DomainError,
    InvalidGradeError,
    InvalidItemStateError,
    InvalidReviewEventError,
    Item,
    ReviewOutcome,
    ReviewResult,
    SchedulingError,
)
from sm15.infrastructure.matrix import InMemoryOptimalFactorTable, OptimalFactorRegistry

__version__ = VERSION

__all__ = [
    "Item",
    "ReviewOutcome",
    "ReviewResult",
    "ReviewProcessor",
    "EngineConfig",
    "resolve_config",
    "initialize_item",
    "build_review_processor",
    "processor_for_user",
    "MetricsCalculator",
    "ItemMetrics",
    "MatrixSummary",
    "summarize_matrix",
    "InMemoryOptimalFactorTable",
    "OptimalFactorRegistry",
    "SchedulingError",
    "InvalidGradeError",
    "InvalidItemStateError",
    "InvalidReviewEventError",
    "DomainError",
]
