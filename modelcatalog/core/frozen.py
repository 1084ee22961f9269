"""Read-only containers for parameter mappings held by catalog models.

Frozen pydantic models only block attribute assignment; a ``dict`` field can
still be written through. Catalog models therefore store mappings as
``MappingProxyType`` and sequences as tuples, and hand plain containers back
out through ``thaw_value`` whenever a caller needs something it may modify.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping


def freeze_value(value: Any) -> Any:
    """Return ``value`` with every nested mapping and list made read-only."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(inner) for key, inner in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    return value


def thaw_value(value: Any) -> Any:
    """Return a fresh plain-container copy of ``value`` (dicts and lists)."""
    if isinstance(value, Mapping):
        return {key: thaw_value(inner) for key, inner in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_value(item) for item in value]
    return value


__all__ = ["freeze_value", "thaw_value"]
