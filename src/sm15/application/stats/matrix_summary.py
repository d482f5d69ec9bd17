"""Aggregate view of a user's optimal factor matrix."""

from dataclasses import dataclass

from sm15.domain.ports import OptimalFactorStore


@dataclass
class MatrixSummary:
    entries: int  # Materialized keys, including defaults read once
    observed_entries: int  # Keys with at least one recorded observation
    total_samples: int
    mean_factor: float | None
    min_factor: float | None
    max_factor: float | None


def summarize_matrix(store: OptimalFactorStore) -> MatrixSummary:
    snapshot = store.snapshot()
    factors = [entry.optimal_factor for entry in snapshot.values()]

    return MatrixSummary(
        entries=len(snapshot),
        observed_entries=sum(1 for entry in snapshot.values() if entry.sample_count > 0),
        total_samples=sum(entry.sample_count for entry in snapshot.values()),
        mean_factor=sum(factors) / len(factors) if factors else None,
        min_factor=min(factors, default=None),
        max_factor=max(factors, default=None),
    )
