"""
In-memory optimal factor table — Infrastructure adapter for OptimalFactorStore.

One table per user. All reads and writes go through a single lock so the
moving-average update in `record` is atomic.
"""

import logging
import math
import threading
from collections.abc import Mapping
from typing import Any

from sm15.domain.constants import FACTOR_RETENTION
from sm15.domain.errors import DomainError
from sm15.domain.matrix import (
    MatrixKey,
    clamp_factor,
    default_optimal_factor,
    validate_key,
)
from sm15.domain.models import FactorEntry
from sm15.domain.ports import OptimalFactorStore

logger = logging.getLogger(__name__)


class InMemoryOptimalFactorTable(OptimalFactorStore):
    """
    Dictionary-backed optimal factor matrix.

    Entries are materialized lazily: the first lookup of a key stores its
    default with sample_count=0, the first record of an unseen key stores the
    observation itself with sample_count=1.
    """

    def __init__(
        self,
        entries: Mapping[MatrixKey, FactorEntry] | None = None,
        retention: float = FACTOR_RETENTION,
    ):
        """
        Args:
            entries: Optional previously persisted entries.
            retention: Weight the stored value keeps on each update (0.9 -> 10% new).
        """
        if not 0.0 <= retention < 1.0:
            raise ValueError(f"retention must lie in [0, 1), got {retention}")
        self._retention = retention
        self._entries: dict[MatrixKey, FactorEntry] = dict(entries or {})
        self._lock = threading.Lock()

    def lookup(self, repetition: int, bucket: int) -> float:
        validate_key(repetition, bucket)
        key = (repetition, bucket)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = FactorEntry(default_optimal_factor(repetition, bucket), 0)
                self._entries[key] = entry
            return entry.optimal_factor

    def record(self, repetition: int, bucket: int, observed_factor: float) -> FactorEntry:
        validate_key(repetition, bucket)
        if not math.isfinite(observed_factor) or observed_factor <= 0:
            raise DomainError(
                f"Observed factor must be a positive finite number, got {observed_factor}",
                observed_factor,
            )

        key = (repetition, bucket)
        with self._lock:
            current = self._entries.get(key)
            if current is None:
                updated = FactorEntry(clamp_factor(observed_factor), 1)
            else:
                blended = (
                    current.optimal_factor * self._retention
                    + observed_factor * (1 - self._retention)
                )
                updated = FactorEntry(clamp_factor(blended), current.sample_count + 1)
            self._entries[key] = updated

        logger.debug(
            f"Recorded factor {observed_factor:.3f} at {key}: "
            f"now {updated.optimal_factor:.3f} over {updated.sample_count} samples"
        )
        return updated

    def snapshot(self) -> dict[MatrixKey, FactorEntry]:
        with self._lock:
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ---------- Plain-data conversion ----------

    def to_dict(self) -> dict[str, Any]:
        """Convert the table to JSON-friendly data the caller can persist."""
        return {
            "retention": self._retention,
            "entries": [
                {
                    "repetition": repetition,
                    "bucket": bucket,
                    "optimal_factor": entry.optimal_factor,
                    "sample_count": entry.sample_count,
                }
                for (repetition, bucket), entry in sorted(self.snapshot().items())
            ],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InMemoryOptimalFactorTable":
        """
        Rebuild a table from `to_dict` output.

        Stored factors are clamped back into [1.0, 3.0].
        """
        entries: dict[MatrixKey, FactorEntry] = {}
        for raw in data.get("entries", []):
            repetition = int(raw["repetition"])
            bucket = int(raw["bucket"])
            validate_key(repetition, bucket)
            sample_count = int(raw.get("sample_count", 0))
            if sample_count < 0:
                raise ValueError(f"sample_count must be >= 0 at {(repetition, bucket)}")
            entries[(repetition, bucket)] = FactorEntry(
                clamp_factor(float(raw["optimal_factor"])), sample_count
            )
        return cls(entries, retention=data.get("retention", FACTOR_RETENTION))


class OptimalFactorRegistry:
    """
    Caller-owned map from user ID to that user's table.

    Tables of different users share nothing; only table creation is
    serialized here.
    """

    def __init__(self, retention: float = FACTOR_RETENTION):
        self._retention = retention
        self._tables: dict[str, InMemoryOptimalFactorTable] = {}
        self._lock = threading.Lock()

    def table_for(self, user_id: str) -> InMemoryOptimalFactorTable:
        with self._lock:
            table = self._tables.get(user_id)
            if table is None:
                table = InMemoryOptimalFactorTable(retention=self._retention)
                self._tables[user_id] = table
                logger.info(f"Created optimal factor table for user {user_id}")
            return table

    def register(self, user_id: str, table: InMemoryOptimalFactorTable) -> None:
        """Attach a table restored by the caller (e.g. via `from_dict`)."""
        with self._lock:
            self._tables[user_id] = table

    def users(self) -> list[str]:
        with self._lock:
            return sorted(self._tables)
