"""
Review Processor Factory
Centralizes wiring the engine's components from configuration.
"""

from sm15.application.config import EngineConfig, resolve_config
from sm15.application.review_processor import ReviewProcessor
from sm15.domain.ports import OptimalFactorStore
from sm15.infrastructure.matrix import InMemoryOptimalFactorTable, OptimalFactorRegistry


def build_review_processor(
    config: EngineConfig | None = None,
    table: OptimalFactorStore | None = None,
) -> ReviewProcessor:
    """
    Returns a ReviewProcessor bound to `table`, or to a fresh in-memory table.
    """
    config = config or resolve_config()
    if table is None:
        table = InMemoryOptimalFactorTable(retention=config.factor_retention)
    return ReviewProcessor(table, config)


def build_registry(config: EngineConfig | None = None) -> OptimalFactorRegistry:
    """Returns an empty per-user registry using the configured retention."""
    config = config or resolve_config()
    return OptimalFactorRegistry(retention=config.factor_retention)


def processor_for_user(
    registry: OptimalFactorRegistry,
    user_id: str,
    config: EngineConfig | None = None,
) -> ReviewProcessor:
    """Returns a ReviewProcessor bound to the user's table in `registry`."""
    return build_review_processor(config, registry.table_for(user_id))
