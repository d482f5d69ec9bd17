"""
Ports (interfaces) for optimal factor storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import FactorEntry


class OptimalFactorStore(ABC):
    """
    Port for one user's optimal factor matrix.

    Implementations:
        - InMemoryOptimalFactorTable: Lock-guarded dictionary, snapshot-able.
    """

    @abstractmethod
    def lookup(self, repetition: int, bucket: int) -> float:
        """
        Return the factor for the given key.

        Never returns None: keys without a stored entry resolve to the default
        curve.

        Args:
            repetition: Matrix row (>= 1).
            bucket: Difficulty bucket in [0, 24].
        """
        pass

    @abstractmethod
    def record(self, repetition: int, bucket: int, observed_factor: float) -> FactorEntry:
        """
        Blend an observed factor into the entry for the given key.

        Must be atomic per key: concurrent records never lose an update.

        Returns:
            The entry as stored after the update.
        """
        pass

    @abstractmethod
    def snapshot(self) -> dict[tuple[int, int], FactorEntry]:
        """Return a copy of every materialized entry."""
        pass
