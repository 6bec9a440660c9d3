"""Property graph storage on top of an Elasticsearch-style document store."""

from .models import Direction, Edge, Element, ElementKind, Vertex
from .predicates import Compare, HasContainer, Predicates
from .providers import open_query_handler

__all__ = [
    "Compare",
    "Direction",
    "Edge",
    "Element",
    "ElementKind",
    "HasContainer",
    "Predicates",
    "Vertex",
    "open_query_handler",
]

__version__ = "0.1.0"
