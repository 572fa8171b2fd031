from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from photofeed.adapters.flickr import FlickrPhotosAdapter

Responder = Callable[[str, dict[str, str]], dict[str, Any]]


class FakeTransport:
    """In-memory stand-in for FlickrTransport that records every call."""

    def __init__(self, responder: Responder) -> None:
        self._responder = responder
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    async def call(
        self,
        api_key: str,
        method_name: str,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        resolved = dict(params or {})
        self.calls.append((api_key, method_name, resolved))
        return self._responder(method_name, resolved)

    def methods(self) -> list[str]:
        return [method for _, method, _ in self.calls]


class GatedTransport(FakeTransport):
    """Holds gated calls until `expected` of them are in flight at the same time."""

    def __init__(self, responder: Responder, *, gated_methods: set[str], expected: int) -> None:
        super().__init__(responder)
        self._gated_methods = gated_methods
        self._expected = expected
        self._in_flight = 0
        self._released = asyncio.Event()

    async def call(
        self,
        api_key: str,
        method_name: str,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        if method_name in self._gated_methods:
            self._in_flight += 1
            if self._in_flight >= self._expected:
                self._released.set()
            await self._released.wait()
        return await super().call(api_key, method_name, params)


def size_entry(label: str, width: int, height: int | None = None, *, key: str = "x") -> dict[str, Any]:
    return {
        "label": label,
        "width": width,
        "height": height if height is not None else width * 2 // 3,
        "source": f"https://live.staticflickr.com/65535/photo_{key}_{width}.jpg",
        "url": f"https://www.flickr.com/photos/owner/1/sizes/{key}/",
        "media": "photo",
    }


def sizes_response(*entries: dict[str, Any]) -> dict[str, Any]:
    return {"sizes": {"canblog": 0, "size": list(entries)}, "stat": "ok"}


@pytest.fixture
def make_adapter() -> Callable[[Responder], tuple[FlickrPhotosAdapter, FakeTransport]]:
    def _make(responder: Responder) -> tuple[FlickrPhotosAdapter, FakeTransport]:
        transport = FakeTransport(responder)
        return FlickrPhotosAdapter(transport=transport), transport

    return _make
