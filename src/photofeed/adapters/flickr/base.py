from __future__ import annotations

from typing import Protocol

from ...domain.models import Photo


class FlickrError(RuntimeError):
    """Base class for failures while fetching photos from Flickr."""


class TransportError(FlickrError):
    """Raised when a Flickr API call still fails after every retry attempt."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Error calling flickr url: {url}: {cause}")
        self.url = url
        self.cause = cause


class ShapeError(FlickrError):
    """Raised when a Flickr response is missing a field or carries an unusable value."""


class ApiError(FlickrError):
    """Raised when Flickr answers with its own failure envelope."""

    def __init__(self, code: int | None, message: str) -> None:
        super().__init__(f"Flickr API error {code}: {message}")
        self.code = code
        self.message = message


class PhotoFeedAdapter(Protocol):
    async def get_photo_set(self, api_key: str, set_id: str) -> list[Photo]:
        """Fetch every photo of a photo set, in set order."""

    async def get_recent_photos(self, api_key: str, user_id: str) -> list[Photo]:
        """Fetch the most recent public photos of a user."""

    async def get_photo(self, api_key: str, photo_id: str) -> Photo:
        """Fetch a single photo."""
