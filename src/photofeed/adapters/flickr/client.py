from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from ...domain.models import Photo, PhotoSource
from ...domain.sizes import SIZE_KEY_LABELS
from ...settings import FlickrSettings
from .base import ShapeError
from .payloads import optional_text, require_list, require_mapping, require_text
from .sizes import pick_main_source, sources_from_extras, sources_from_sizes
from .transport import FlickrTransport

LOGGER = logging.getLogger(__name__)

FLICKR_PHOTOS_METHOD = "flickr.photosets.getPhotos"
FLICKR_SIZES_METHOD = "flickr.photos.getSizes"
FLICKR_INFO_METHOD = "flickr.photos.getInfo"
FLICKR_PUBLIC_PHOTOS_METHOD = "flickr.people.getPublicPhotos"
PHOTO_ID_KEY = "photo_id"
PHOTOSET_ID_KEY = "photoset_id"
USER_ID_KEY = "user_id"
PHOTO_PAGE_URL_TYPE = "photopage"


def _require_argument(value: str, *, name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValueError(f"{name} must not be empty")
    return text


def _build_photo(
    *,
    photo_id: str,
    title: str,
    page_url: str,
    sources: tuple[PhotoSource, ...],
    main_source: PhotoSource | None,
) -> Photo:
    try:
        return Photo(
            id=photo_id,
            title=title,
            page_url=page_url,
            main_source=main_source,
            sources=sources,
        )
    except ValidationError as exc:
        raise ShapeError(f"Flickr photo {photo_id} could not be normalized") from exc


def _photo_page_url_from_info(photo_info: dict[str, Any], *, photo_id: str) -> str:
    urls = require_mapping(photo_info, "urls", context=f"info of photo {photo_id}")
    for entry in require_list(urls, "url", context=f"info of photo {photo_id}"):
        if isinstance(entry, dict) and entry.get("type") == PHOTO_PAGE_URL_TYPE:
            return require_text(entry, "_content", context=f"photopage url of photo {photo_id}")
    raise ShapeError(f"Flickr info of photo {photo_id} did not include a photopage url")


class FlickrPhotosAdapter:
    def __init__(
        self,
        *,
        transport: FlickrTransport | None = None,
        settings: FlickrSettings | None = None,
    ) -> None:
        self._settings = settings or FlickrSettings()
        self._transport = transport or FlickrTransport(self._settings)

    def _page_url(self, owner: str, photo_id: str) -> str:
        return f"{self._settings.photo_page_base_url}{owner}/{photo_id}/"

    async def _get_sizes(self, api_key: str, photo_id: str) -> tuple[PhotoSource, ...]:
        response = await self._transport.call(api_key, FLICKR_SIZES_METHOD, {PHOTO_ID_KEY: photo_id})
        sizes = require_mapping(response, "sizes", context=f"sizes of photo {photo_id}")
        size_entries = require_list(sizes, "size", context=f"sizes of photo {photo_id}")
        return sources_from_sizes(size_entries, photo_id=photo_id)

    async def _get_set_photo(self, api_key: str, owner: str, photo_payload: Any) -> Photo:
        if not isinstance(photo_payload, dict):
            raise ShapeError("Flickr photoset entry was not an object")
        photo_id = require_text(photo_payload, "id", context="photoset entry")
        sources = await self._get_sizes(api_key, photo_id)
        return _build_photo(
            photo_id=photo_id,
            title=optional_text(photo_payload, "title"),
            page_url=self._page_url(owner, photo_id),
            sources=sources,
            main_source=pick_main_source(sources),
        )

    async def get_photo_set(self, api_key: str, set_id: str) -> list[Photo]:
        api_key = _require_argument(api_key, name="api_key")
        set_id = _require_argument(set_id, name="set_id")

        response = await self._transport.call(api_key, FLICKR_PHOTOS_METHOD, {PHOTOSET_ID_KEY: set_id})
        photoset = require_mapping(response, "photoset", context=f"photoset {set_id}")
        owner = require_text(photoset, "owner", context=f"photoset {set_id}")
        photo_payloads = require_list(photoset, "photo", context=f"photoset {set_id}")

        photos = await asyncio.gather(
            *(self._get_set_photo(api_key, owner, photo_payload) for photo_payload in photo_payloads)
        )
        LOGGER.info("Fetched %d photos from Flickr photoset '%s'", len(photos), set_id)
        return list(photos)

    def _recent_main_source(self, sources: tuple[PhotoSource, ...]) -> PhotoSource | None:
        preferred_label = SIZE_KEY_LABELS[self._settings.recent_main_size_key]
        for source in sources:
            if source.size_label == preferred_label:
                return source
        return pick_main_source(sources)

    def _recent_photo(self, photo_payload: Any) -> Photo:
        if not isinstance(photo_payload, dict):
            raise ShapeError("Flickr public photos entry was not an object")
        photo_id = require_text(photo_payload, "id", context="public photos entry")
        owner = require_text(photo_payload, "owner", context=f"public photo {photo_id}")
        sources = sources_from_extras(photo_payload, photo_id=photo_id)
        return _build_photo(
            photo_id=photo_id,
            title=optional_text(photo_payload, "title"),
            page_url=self._page_url(owner, photo_id),
            sources=sources,
            main_source=self._recent_main_source(sources),
        )

    async def get_recent_photos(self, api_key: str, user_id: str) -> list[Photo]:
        api_key = _require_argument(api_key, name="api_key")
        user_id = _require_argument(user_id, name="user_id")

        params = {
            USER_ID_KEY: user_id,
            "extras": ",".join(self._settings.recent_extras),
            "per_page": str(self._settings.recent_page_size),
        }
        response = await self._transport.call(api_key, FLICKR_PUBLIC_PHOTOS_METHOD, params)
        photos_payload = require_mapping(response, "photos", context=f"public photos of {user_id}")
        photo_payloads = require_list(photos_payload, "photo", context=f"public photos of {user_id}")

        photos = [self._recent_photo(photo_payload) for photo_payload in photo_payloads]
        LOGGER.info("Fetched %d recent Flickr photos for user '%s'", len(photos), user_id)
        return photos

    async def get_photo(self, api_key: str, photo_id: str) -> Photo:
        api_key = _require_argument(api_key, name="api_key")
        photo_id = _require_argument(photo_id, name="photo_id")

        info_response, sources = await asyncio.gather(
            self._transport.call(api_key, FLICKR_INFO_METHOD, {PHOTO_ID_KEY: photo_id}),
            self._get_sizes(api_key, photo_id),
        )
        photo_info = require_mapping(info_response, "photo", context=f"info of photo {photo_id}")
        photo = _build_photo(
            photo_id=photo_id,
            title=optional_text(photo_info, "title"),
            page_url=_photo_page_url_from_info(photo_info, photo_id=photo_id),
            sources=sources,
            main_source=pick_main_source(sources),
        )
        LOGGER.info("Fetched Flickr photo '%s' with %d sources", photo_id, len(sources))
        return photo
