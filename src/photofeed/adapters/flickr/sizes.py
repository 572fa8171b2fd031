from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ...domain.models import PhotoSource
from ...domain.sizes import SIZE_KEY_LABELS, WANTED_IMAGE_SIZES
from .base import ShapeError
from .payloads import coerce_dimension, require_text


def sort_by_width(sources: Iterable[PhotoSource]) -> tuple[PhotoSource, ...]:
    return tuple(sorted(sources, key=lambda source: source.width, reverse=True))


def pick_main_source(sources: Sequence[PhotoSource]) -> PhotoSource | None:
    if not sources:
        return None
    return sources[-1]


def _source_from_size_entry(entry: dict[str, Any], label: str, *, photo_id: str) -> PhotoSource:
    context = f"size entry of photo {photo_id}"
    page_url = entry.get("url")
    return PhotoSource(
        url=require_text(entry, "source", context=context),
        width=coerce_dimension(entry.get("width"), field_name=f"{context}.width"),
        height=coerce_dimension(entry.get("height"), field_name=f"{context}.height"),
        page_url=page_url if isinstance(page_url, str) and page_url.strip() else None,
        size_label=label,
    )


def sources_from_sizes(size_entries: Iterable[Any], *, photo_id: str) -> tuple[PhotoSource, ...]:
    kept: list[PhotoSource] = []
    for entry in size_entries:
        if not isinstance(entry, dict):
            raise ShapeError(f"Flickr size entry for photo {photo_id} was not an object")
        label = entry.get("label")
        if not isinstance(label, str):
            raise ShapeError(f"Flickr size entry for photo {photo_id} had no text label")
        if label not in WANTED_IMAGE_SIZES:
            continue
        kept.append(_source_from_size_entry(entry, label, photo_id=photo_id))
    return sort_by_width(kept)


def sources_from_extras(photo_payload: dict[str, Any], *, photo_id: str) -> tuple[PhotoSource, ...]:
    context = f"photo {photo_id}"
    sources: list[PhotoSource] = []
    for size_key, label in SIZE_KEY_LABELS.items():
        if photo_payload.get(f"url_{size_key}") is None:
            continue
        sources.append(
            PhotoSource(
                url=require_text(photo_payload, f"url_{size_key}", context=context),
                width=coerce_dimension(
                    photo_payload.get(f"width_{size_key}"),
                    field_name=f"{context}.width_{size_key}",
                ),
                height=coerce_dimension(
                    photo_payload.get(f"height_{size_key}"),
                    field_name=f"{context}.height_{size_key}",
                ),
                size_label=label,
            )
        )
    return sort_by_width(sources)
