"""Shared JSON serialization utilities for structured log output."""

from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Path):
        return True, str(obj)
    if isinstance(obj, Enum):
        return True, obj.value
    if isinstance(obj, bytes):
        return True, obj.decode("utf-8", errors="replace")
    if isinstance(obj, (set, frozenset, tuple)):
        return True, list(obj)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    JSON ``default=`` hook that keeps values readable instead of repr-ing them.

    - datetime/date -> ISO 8601 string
    - Path -> string
    - Enum -> value
    - bytes -> UTF-8 text (invalid bytes replaced)
    - set/tuple -> list
    - Everything else -> string (fallback)

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    return str(obj)


__all__ = ["json_serializer"]
