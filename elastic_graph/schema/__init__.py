"""Schema providers: routing between graph elements and indices."""

from .base import GRAPH_MAPPINGS, AddElementResult, SchemaProvider, SearchResult
from .factory import SCHEMA_STRATEGIES, create_schema_provider, register_schema_strategy
from .kind_index import KindIndexSchemaProvider
from .shared_index import SharedIndexSchemaProvider

__all__ = [
    "GRAPH_MAPPINGS",
    "SCHEMA_STRATEGIES",
    "AddElementResult",
    "KindIndexSchemaProvider",
    "SchemaProvider",
    "SearchResult",
    "SharedIndexSchemaProvider",
    "create_schema_provider",
    "register_schema_strategy",
]
