from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from photofeed.adapters.flickr import ApiError, FlickrTransport, TransportError
from photofeed.adapters.flickr.transport import build_call_url
from photofeed.settings import FlickrSettings

Handler = Callable[[httpx.Request], httpx.Response]


class CountingHandler:
    def __init__(self, responses: list[Handler]) -> None:
        self._responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self._responses)) - 1
        return self._responses[index](request)


def _ok(payload: object) -> Handler:
    return lambda request: httpx.Response(200, json=payload)


def _status(code: int) -> Handler:
    return lambda request: httpx.Response(code, text="upstream failure")


def _connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


async def _call(
    handler: CountingHandler,
    *,
    settings: FlickrSettings | None = None,
    params: dict[str, str] | None = None,
) -> dict:
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = FlickrTransport(settings, client=client)
        return await transport.call("key-123", "flickr.photos.getSizes", params or {"photo_id": "42"})


def test_build_call_url_includes_fixed_and_caller_parameters() -> None:
    url = build_call_url(
        "https://api.flickr.com/services/rest/",
        "key-123",
        "flickr.photosets.getPhotos",
        {"photoset_id": "721"},
    )

    assert url == (
        "https://api.flickr.com/services/rest/?format=json&nojsoncallback=1"
        "&api_key=key-123&method=flickr.photosets.getPhotos&photoset_id=721"
    )


@pytest.mark.asyncio
async def test_call_sends_get_with_query_parameters() -> None:
    handler = CountingHandler([_ok({"stat": "ok", "sizes": {"size": []}})])

    payload = await _call(handler)

    assert payload == {"stat": "ok", "sizes": {"size": []}}
    (request,) = handler.requests
    assert request.method == "GET"
    assert request.url.params["format"] == "json"
    assert request.url.params["nojsoncallback"] == "1"
    assert request.url.params["api_key"] == "key-123"
    assert request.url.params["method"] == "flickr.photos.getSizes"
    assert request.url.params["photo_id"] == "42"
    assert request.headers["User-Agent"] == "photofeed/0.1"


@pytest.mark.asyncio
async def test_call_succeeds_on_third_attempt() -> None:
    handler = CountingHandler([_status(500), _connect_error, _ok({"stat": "ok", "value": 1})])

    payload = await _call(handler)

    assert payload == {"stat": "ok", "value": 1}
    assert len(handler.requests) == 3


@pytest.mark.asyncio
async def test_call_raises_transport_error_after_three_failures() -> None:
    handler = CountingHandler([_status(503)])

    with pytest.raises(TransportError) as exc_info:
        await _call(handler)

    assert len(handler.requests) == 3
    error = exc_info.value
    assert "method=flickr.photos.getSizes" in error.url
    assert isinstance(error.cause, httpx.HTTPStatusError)
    assert error.__cause__ is error.cause


@pytest.mark.asyncio
async def test_call_retries_malformed_json_body() -> None:
    handler = CountingHandler([lambda request: httpx.Response(200, text="jsonFlickrApi({})")])

    with pytest.raises(TransportError) as exc_info:
        await _call(handler)

    assert len(handler.requests) == 3
    assert isinstance(exc_info.value.cause, ValueError)


@pytest.mark.asyncio
async def test_call_rejects_json_that_is_not_an_object() -> None:
    handler = CountingHandler([_ok([1, 2, 3]), _ok({"stat": "ok"})])

    payload = await _call(handler)

    assert payload == {"stat": "ok"}
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_call_raises_api_error_without_retrying() -> None:
    handler = CountingHandler([_ok({"stat": "fail", "code": 1, "message": "Photo not found"})])

    with pytest.raises(ApiError) as exc_info:
        await _call(handler)

    assert len(handler.requests) == 1
    assert exc_info.value.code == 1
    assert exc_info.value.message == "Photo not found"


@pytest.mark.asyncio
async def test_call_honours_configured_attempts() -> None:
    handler = CountingHandler([_status(500)])

    with pytest.raises(TransportError):
        await _call(handler, settings=FlickrSettings(max_attempts=1))

    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_call_uses_configured_api_base() -> None:
    handler = CountingHandler([_ok({"stat": "ok"})])
    settings = FlickrSettings(api_base_url="https://flickr.test/rest/", user_agent="site-builder/2")

    await _call(handler, settings=settings)

    (request,) = handler.requests
    assert request.url.host == "flickr.test"
    assert request.url.path == "/rest/"
    assert request.headers["User-Agent"] == "site-builder/2"


@pytest.mark.parametrize("reserved", ["format", "nojsoncallback", "api_key", "method"])
def test_build_call_url_rejects_reserved_parameters(reserved: str) -> None:
    with pytest.raises(ValueError, match=reserved):
        build_call_url(
            "https://api.flickr.com/services/rest/",
            "key-123",
            "flickr.photos.getSizes",
            {"photo_id": "42", reserved: "override"},
        )


@pytest.mark.asyncio
async def test_call_with_reserved_parameter_makes_no_request() -> None:
    handler = CountingHandler([_ok({"stat": "ok"})])

    with pytest.raises(ValueError, match="method"):
        await _call(handler, params={"method": "flickr.photos.delete"})

    assert handler.requests == []
