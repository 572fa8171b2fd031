from __future__ import annotations

from typing import Any

from .base import ShapeError


def require_mapping(payload: Any, key: str, *, context: str) -> dict[str, Any]:
    value = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(value, dict):
        raise ShapeError(f"Flickr {context} response did not include '{key}'")
    return value


def require_list(payload: dict[str, Any], key: str, *, context: str) -> list[Any]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise ShapeError(f"Flickr {context} response did not include a '{key}' list")
    return value


def require_text(payload: dict[str, Any], key: str, *, context: str) -> str:
    value = payload.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ShapeError(f"Flickr {context} value '{key}' was missing or empty")
    return value.strip()


def optional_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    # getInfo wraps text values as {"_content": "..."}
    if isinstance(value, dict):
        value = value.get("_content")
    return value.strip() if isinstance(value, str) else ""


def coerce_dimension(value: Any, *, field_name: str) -> int:
    if isinstance(value, bool):
        raise ShapeError(f"Invalid integer value for {field_name}")
    try:
        dimension = int(value)
    except (TypeError, ValueError) as exc:
        raise ShapeError(f"Invalid integer value for {field_name}") from exc
    if dimension < 0:
        raise ShapeError(f"Negative value for {field_name}")
    return dimension
