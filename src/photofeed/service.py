from __future__ import annotations

from .adapters.flickr import FlickrPhotosAdapter, FlickrTransport
from .domain.models import Photo
from .settings import AppSettings, load_settings


def build_flickr_adapter(settings: AppSettings | None = None) -> FlickrPhotosAdapter:
    resolved = settings or load_settings()
    return FlickrPhotosAdapter(
        transport=FlickrTransport(resolved.flickr),
        settings=resolved.flickr,
    )


async def get_photo_set(api_key: str, set_id: str, *, settings: AppSettings | None = None) -> list[Photo]:
    return await build_flickr_adapter(settings).get_photo_set(api_key, set_id)


async def get_recent_photos(
    api_key: str, user_id: str, *, settings: AppSettings | None = None
) -> list[Photo]:
    return await build_flickr_adapter(settings).get_recent_photos(api_key, user_id)


async def get_photo(api_key: str, photo_id: str, *, settings: AppSettings | None = None) -> Photo:
    return await build_flickr_adapter(settings).get_photo(api_key, photo_id)
