"""Schema strategy selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import InitializationError
from .base import SchemaProvider
from .kind_index import KindIndexSchemaProvider
from .shared_index import SharedIndexSchemaProvider

if TYPE_CHECKING:
    from ..config.settings import Settings

logger = logging.getLogger(__name__)

SCHEMA_STRATEGIES: dict[str, type[SchemaProvider]] = {
    "shared": SharedIndexSchemaProvider,
    "kind": KindIndexSchemaProvider,
}


def register_schema_strategy(name: str, provider_cls: type[SchemaProvider]) -> None:
    """Make an additional strategy selectable through ``schema_strategy``."""
    if not issubclass(provider_cls, SchemaProvider):
        raise TypeError(f"{provider_cls!r} is not a SchemaProvider")
    SCHEMA_STRATEGIES[name] = provider_cls


def create_schema_provider(settings: Settings) -> SchemaProvider:
    """Instantiate the configured strategy. The caller runs ``init``."""
    provider_cls = SCHEMA_STRATEGIES.get(settings.schema_strategy)
    if provider_cls is None:
        raise InitializationError(
            f"Unknown schema strategy '{settings.schema_strategy}'; "
            f"expected one of {sorted(SCHEMA_STRATEGIES)}",
            operation="init",
        )
    logger.info(
        "schema_provider.selected",
        extra={"strategy": settings.schema_strategy, "provider": provider_cls.__name__},
    )
    return provider_cls()
