"""Property and label validation, applied before any routing or write."""

from __future__ import annotations

from typing import Any

from ..errors import InvalidPropertyError, ValidationError

SUPPORTED_VALUE_TYPES = (str, bool, int, float)
RESERVED_PREFIX = "~"


def validate_key(key: Any) -> None:
    if key is None:
        raise InvalidPropertyError(key, "property key can not be null")
    if not isinstance(key, str):
        raise InvalidPropertyError(key, f"property key must be a string, got {type(key).__name__}")
    if not key:
        raise InvalidPropertyError(key, "property key can not be empty")
    if key.startswith(RESERVED_PREFIX):
        raise InvalidPropertyError(key, f"keys starting with '{RESERVED_PREFIX}' are reserved")


def validate_property(key: Any, value: Any) -> None:
    """Raise InvalidPropertyError naming ``key`` if the pair can't be stored."""
    validate_key(key)
    if value is None:
        raise InvalidPropertyError(key, "property value can not be null")
    if isinstance(value, (list, tuple)):
        for item in value:
            if item is None or not isinstance(item, SUPPORTED_VALUE_TYPES):
                raise InvalidPropertyError(
                    key, f"array items must be primitives, got {type(item).__name__}"
                )
    elif not isinstance(value, SUPPORTED_VALUE_TYPES):
        raise InvalidPropertyError(key, f"unsupported value type {type(value).__name__}")


def validate_label(label: Any) -> None:
    if not isinstance(label, str) or not label:
        raise ValidationError(f"label must be a non-empty string, got {label!r}")
