"""Graph predicates and their translation into filter expressions."""

from __future__ import annotations

import enum
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from typing import Any

from . import filters
from .filters import Filter
from .models.elements import LABEL_FIELD

LABEL_KEY = "~label"
ID_KEY = "~id"

# Maps an element id to the stored document id.
DocIdMapper = Callable[[Any], Any]


class Compare(str, enum.Enum):
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    WITHIN = "within"
    WITHOUT = "without"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


_COLLECTION_OPS = (Compare.WITHIN, Compare.WITHOUT)
_UNARY_OPS = (Compare.EXISTS, Compare.NOT_EXISTS)


@dataclass(frozen=True, slots=True)
class HasContainer:
    """A single ``key <op> value`` condition."""

    key: str
    op: Compare = Compare.EQ
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("HasContainer key must be a non-empty string")
        if self.op in _COLLECTION_OPS and (
            isinstance(self.value, (str, bytes)) or not isinstance(self.value, Collection)
        ):
            raise ValueError(f"'{self.op.value}' on '{self.key}' needs a collection of values")
        if self.op not in _UNARY_OPS and self.op not in _COLLECTION_OPS and self.value is None:
            raise ValueError(f"'{self.op.value}' on '{self.key}' needs a value")

    @property
    def lifts_to_labels(self) -> bool:
        return self.key == LABEL_KEY and self.op in (Compare.EQ, Compare.WITHIN)

    def to_filter(self, doc_id: DocIdMapper | None = None) -> Filter:
        if self.key == ID_KEY:
            return _id_filter(self.op, self.value, doc_id or str)
        key = LABEL_FIELD if self.key == LABEL_KEY else self.key
        return _field_filter(key, self.op, self.value)


def _id_filter(op: Compare, value: Any, doc_id: DocIdMapper) -> Filter:
    if op == Compare.EQ:
        return filters.ids([doc_id(value)])
    if op == Compare.WITHIN:
        return filters.ids(doc_id(v) for v in value)
    if op == Compare.NEQ:
        return filters.not_(filters.ids([doc_id(value)]))
    if op == Compare.WITHOUT:
        return filters.not_(filters.ids(doc_id(v) for v in value))
    raise ValueError(f"'{op.value}' is not supported on element ids")


def _field_filter(key: str, op: Compare, value: Any) -> Filter:
    if op == Compare.EQ:
        return filters.term(key, value)
    if op == Compare.NEQ:
        return filters.not_(filters.term(key, value))
    if op == Compare.GT:
        return filters.range_(key, gt=value)
    if op == Compare.GTE:
        return filters.range_(key, gte=value)
    if op == Compare.LT:
        return filters.range_(key, lt=value)
    if op == Compare.LTE:
        return filters.range_(key, lte=value)
    if op == Compare.WITHIN:
        return filters.terms(key, value)
    if op == Compare.WITHOUT:
        return filters.not_(filters.terms(key, value))
    if op == Compare.EXISTS:
        return filters.exists(key)
    if op == Compare.NOT_EXISTS:
        return filters.not_(filters.exists(key))
    raise ValueError(f"Unsupported comparison: {op}")


@dataclass(slots=True)
class Predicates:
    """A conjunction of has-containers plus an optional row limit."""

    has_containers: list[HasContainer] = field(default_factory=list)
    limit: int | None = None

    def has(self, key: str, op: Compare | str = Compare.EQ, value: Any = None) -> Predicates:
        self.has_containers.append(HasContainer(key, Compare(op), value))
        return self

    def _label_container(self) -> HasContainer | None:
        # Only the first label condition is lifted; later ones stay filters so
        # that contradictory label conditions still AND correctly.
        for container in self.has_containers:
            if container.lifts_to_labels:
                return container
        return None

    def labels(self) -> list[str]:
        container = self._label_container()
        if container is None:
            return []
        if container.op == Compare.EQ:
            return [container.value]
        return list(container.value)

    def to_filter(self, doc_id: DocIdMapper | None = None) -> Filter:
        lifted = self._label_container()
        return filters.and_(
            *(c.to_filter(doc_id) for c in self.has_containers if c is not lifted)
        )
