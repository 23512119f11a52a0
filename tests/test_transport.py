"""Tests for the HTTP transport."""

import asyncio

import httpx
import pytest

from gphotos_client.adapters.transport import HttpxTransport
from gphotos_client.domain.errors import TransportError
from tests.conftest import RecordingHandler, form_of, make_transport


def test_transport_returns_non_2xx_without_raising() -> None:
    transport = make_transport(lambda request: httpx.Response(503, text="down"))

    response = asyncio.run(transport.send("GET", "https://photos.google.com"))

    assert response.status_code == 503
    assert response.body == "down"
    assert not response.ok


def test_transport_keeps_cookies_between_requests() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/set":
            return httpx.Response(200, headers={"Set-Cookie": "SID=s1; Path=/"})
        return httpx.Response(200, text=request.headers.get("Cookie", ""))

    transport = make_transport(handler)

    async def run() -> str:
        await transport.send("GET", "https://photos.google.com/set")
        response = await transport.send("GET", "https://photos.google.com/echo")
        return response.body

    assert asyncio.run(run()) == "SID=s1"
    assert transport.cookie("SID") == "s1"
    assert transport.cookie("missing") is None


def test_transport_sends_identifying_header_and_form() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200))
    transport = make_transport(handler)

    asyncio.run(
        transport.send("POST", "https://photos.google.com/form", form={"a": "1"})
    )

    request = handler.requests[0]
    assert request.headers["User-Agent"] == "Mozilla/5.0 GPhotosClient/test"
    assert form_of(request) == {"a": "1"}


def test_transport_does_not_follow_redirects_by_default() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "/end"})
        return httpx.Response(200)

    transport = make_transport(handler)

    direct = asyncio.run(transport.send("GET", "https://photos.google.com/start"))
    followed = asyncio.run(
        transport.send("GET", "https://photos.google.com/start", follow_redirects=True)
    )

    assert direct.status_code == 302
    assert followed.status_code == 200
    assert followed.url == "https://photos.google.com/end"


def test_transport_wraps_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    transport = make_transport(handler)

    with pytest.raises(TransportError):
        asyncio.run(transport.send("GET", "https://photos.google.com"))


def test_transport_create_sets_user_agent() -> None:
    transport = HttpxTransport.create(user_agent="Agent/1.0", timeout=3)

    assert transport.http_client.headers["User-Agent"] == "Agent/1.0"
    assert transport.timeout == 3
    asyncio.run(transport.close())
