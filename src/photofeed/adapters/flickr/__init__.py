from .base import ApiError, FlickrError, PhotoFeedAdapter, ShapeError, TransportError
from .client import FlickrPhotosAdapter
from .transport import FlickrTransport

__all__ = [
    "ApiError",
    "FlickrError",
    "FlickrPhotosAdapter",
    "FlickrTransport",
    "PhotoFeedAdapter",
    "ShapeError",
    "TransportError",
]
