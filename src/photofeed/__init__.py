from .adapters.flickr import (
    ApiError,
    FlickrError,
    FlickrPhotosAdapter,
    FlickrTransport,
    ShapeError,
    TransportError,
)
from .domain.models import Photo, PhotoSource
from .service import build_flickr_adapter, get_photo, get_photo_set, get_recent_photos

__all__ = [
    "ApiError",
    "FlickrError",
    "FlickrPhotosAdapter",
    "FlickrTransport",
    "Photo",
    "PhotoSource",
    "ShapeError",
    "TransportError",
    "build_flickr_adapter",
    "get_photo",
    "get_photo_set",
    "get_recent_photos",
]
