from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from ...settings import FlickrSettings
from .base import ApiError, TransportError

LOGGER = logging.getLogger(__name__)

FLICKR_BASE_PARAMETERS = {"format": "json", "nojsoncallback": "1"}
RESERVED_PARAMETERS = frozenset({*FLICKR_BASE_PARAMETERS, "api_key", "method"})


class MalformedResponseError(ValueError):
    """Raised for a response body that is valid JSON but not a JSON object."""


def build_call_url(
    api_base_url: str,
    api_key: str,
    method_name: str,
    params: Mapping[str, str],
) -> str:
    reserved = RESERVED_PARAMETERS.intersection(params)
    if reserved:
        raise ValueError(f"Reserved Flickr query parameters cannot be overridden: {sorted(reserved)}")
    query = {**FLICKR_BASE_PARAMETERS, "api_key": api_key, "method": method_name}
    query.update(params)
    return f"{api_base_url}?{urlencode(query)}"


def _raise_for_api_error(payload: dict[str, Any]) -> None:
    if payload.get("stat") != "fail":
        return
    raw_code = payload.get("code")
    code = raw_code if isinstance(raw_code, int) else None
    message = payload.get("message")
    raise ApiError(code, message if isinstance(message, str) else "unknown error")


class FlickrTransport:
    def __init__(
        self,
        settings: FlickrSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or FlickrSettings()
        self._client = client

    async def call(
        self,
        api_key: str,
        method_name: str,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        url = build_call_url(self._settings.api_base_url, api_key, method_name, params or {})
        max_attempts = self._settings.max_attempts

        last_error: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                payload = await self._fetch_json(url)
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                if attempt < max_attempts:
                    LOGGER.warning(
                        "Flickr call '%s' failed on attempt %d/%d: %s",
                        method_name,
                        attempt,
                        max_attempts,
                        exc,
                    )
                continue
            _raise_for_api_error(payload)
            return payload

        LOGGER.error("Flickr call '%s' failed after %d attempts", method_name, max_attempts)
        raise TransportError(url, last_error) from last_error

    async def _fetch_json(self, url: str) -> dict[str, Any]:
        headers = {"User-Agent": self._settings.user_agent}
        if self._client is not None:
            response = await self._client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=headers)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise MalformedResponseError("Unexpected Flickr response shape")
        return payload
