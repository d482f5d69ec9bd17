# Application Stats Package
from .matrix_summary import MatrixSummary, summarize_matrix
from .metrics_calculator import ItemMetrics, MetricsCalculator

__all__ = ["MetricsCalculator", "ItemMetrics", "MatrixSummary", "summarize_matrix"]
