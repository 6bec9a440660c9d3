"""Graph element models."""

from .elements import (
    EDGE_ENDPOINT_FIELDS,
    IN_ID,
    IN_LABEL,
    INTERNAL_FIELDS,
    KIND_FIELD,
    LABEL_FIELD,
    OUT_ID,
    OUT_LABEL,
    Direction,
    Edge,
    Element,
    ElementKind,
    Vertex,
)

__all__ = [
    "EDGE_ENDPOINT_FIELDS",
    "IN_ID",
    "IN_LABEL",
    "INTERNAL_FIELDS",
    "KIND_FIELD",
    "LABEL_FIELD",
    "OUT_ID",
    "OUT_LABEL",
    "Direction",
    "Edge",
    "Element",
    "ElementKind",
    "Vertex",
]
