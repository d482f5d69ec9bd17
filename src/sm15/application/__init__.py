# Application Package
from .config import EngineConfig, resolve_config
from .review_processor import ReviewProcessor, initialize_item
from .stats import ItemMetrics, MatrixSummary, MetricsCalculator, summarize_matrix

__all__ = [
    "EngineConfig",
    "resolve_config",
    "ReviewProcessor",
    "initialize_item",
    "MetricsCalculator",
    "ItemMetrics",
    "MatrixSummary",
    "summarize_matrix",
]
