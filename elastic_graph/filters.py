"""Composable filter expressions.

Filters are plain Elasticsearch query DSL dicts. They are built here, passed
through the schema provider and the element service untouched, and evaluated
by the storage backend.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

Filter = dict[str, Any]


def match_all() -> Filter:
    return {"match_all": {}}


def term(field: str, value: Any) -> Filter:
    return {"term": {field: value}}


def terms(field: str, values: Iterable[Any]) -> Filter:
    return {"terms": {field: list(values)}}


def ids(values: Iterable[Any]) -> Filter:
    return {"ids": {"values": [str(v) for v in values]}}


def exists(field: str) -> Filter:
    return {"exists": {"field": field}}


def range_(
    field: str,
    *,
    gt: Any = None,
    gte: Any = None,
    lt: Any = None,
    lte: Any = None,
) -> Filter:
    bounds = {
        op: value
        for op, value in (("gt", gt), ("gte", gte), ("lt", lt), ("lte", lte))
        if value is not None
    }
    if not bounds:
        raise ValueError(f"range filter on '{field}' needs at least one bound")
    return {"range": {field: bounds}}


def _flatten(clauses: Iterable[Filter | None]) -> list[Filter]:
    return [c for c in clauses if c is not None and c != match_all()]


def and_(*clauses: Filter | None) -> Filter:
    """AND the given clauses; ``None`` and match_all clauses are dropped."""
    flat = _flatten(clauses)
    if not flat:
        return match_all()
    if len(flat) == 1:
        return flat[0]
    return {"bool": {"filter": flat}}


def or_(*clauses: Filter | None) -> Filter:
    flat = [c for c in clauses if c is not None]
    if not flat:
        return match_all()
    if len(flat) == 1:
        return flat[0]
    return {"bool": {"should": flat, "minimum_should_match": 1}}


def not_(clause: Filter) -> Filter:
    return {"bool": {"must_not": [clause]}}


def is_match_all(clause: Filter | None) -> bool:
    return clause is None or clause == match_all()
