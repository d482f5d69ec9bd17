# Infrastructure Matrix Adapters Package
from .in_memory import InMemoryOptimalFactorTable, OptimalFactorRegistry

__all__ = ["InMemoryOptimalFactorTable", "OptimalFactorRegistry"]
