"""Shared test fixtures."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qs

import httpx
import pytest
from playwright.async_api import Error as PlaywrightError

from gphotos_client.adapters.script_evaluator import ScriptEvaluator
from gphotos_client.adapters.transport import HttpxTransport
from gphotos_client.config import Settings
from gphotos_client.domain.protocol import ALBUM_CREATE_KEY, ALBUM_LIST_KEY, VIDEO_INFO_KEY
from gphotos_client.domain.session import SessionContext
from gphotos_client.services.albums import AlbumResolver
from gphotos_client.services.listing import PaginationEngine
from gphotos_client.services.rpc import RpcClient

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class FakeScriptEvaluator(ScriptEvaluator):
    """Fake sandbox that returns a fixed token and records the pages it saw."""

    token: str | None = "abc123"
    pages: list[tuple[str, str]] = field(default_factory=list)

    async def evaluate(self, html: str, url: str) -> str | None:
        self.pages.append((html, url))
        return self.token


class FailingPlaywright:
    """Stands in for ``async_playwright()`` when the browser can't be driven."""

    def __init__(self, message: str = "page.goto: Timeout 30000ms exceeded.") -> None:
        self.message = message

    async def __aenter__(self):
        raise PlaywrightError(self.message)

    async def __aexit__(self, *exc_info: object) -> None:
        return None


@dataclass
class RecordingHandler:
    """Wraps a request handler and keeps every request it received."""

    handler: Handler
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def make_transport(handler: Handler) -> HttpxTransport:
    """Create a transport whose requests are answered by ``handler``."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        headers={"User-Agent": "Mozilla/5.0 GPhotosClient/test"},
    )
    return HttpxTransport(http_client=http_client)


def rpc_body(payload: object) -> str:
    """Encode an RPC response body with its anti-XSSI prefix."""
    return ")]}'\n" + json.dumps(payload)


def form_of(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    parsed = parse_qs(request.content.decode())
    return {key: values[0] for key, values in parsed.items()}


def query_of(request: httpx.Request) -> list[object]:
    """Decode the ``f.req`` query of an RPC request."""
    return json.loads(form_of(request)["f.req"])


def listing_body(key: str, rows: list[object], cursor: str | None = None) -> str:
    return rpc_body([["wrb.fr", None, {key: [rows, cursor]}]])


def created_album_body(album_id: str, inserted_id: str) -> str:
    return rpc_body([[None, {ALBUM_CREATE_KEY: [album_id, [inserted_id]]}]])


def album_row(
    album_id: str,
    title: str,
    period: tuple[int, int] | None = (1500000000000, 1500000900000),
    count: int | None = 3,
) -> list[object]:
    info: list[object] = [None, title, list(period) if period else None, count]
    return [album_id, None, {ALBUM_LIST_KEY: info}]


def photo_row(  # noqa: PLR0913
    photo_id: str,
    url: str = "https://lh3.example/photo",
    width: int = 4032,
    height: int = 3024,
    created_at: int = 1500000000000,
    uploaded_at: int = 1500000500000,
) -> list[object]:
    return [photo_id, [url, width, height, [1]], created_at, None, None, uploaded_at]


def video_row(  # noqa: PLR0913
    video_id: str,
    length: int = 12000,
    width: int = 1920,
    height: int = 1080,
    created_at: int = 1500000000000,
    uploaded_at: int = 1500000500000,
) -> list[object]:
    return [
        video_id,
        ["https://lh3.example/video", 512, 288, [15658734]],
        created_at,
        None,
        None,
        uploaded_at,
        None,
        None,
        None,
        {VIDEO_INFO_KEY: [length, None, width, height]},
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(username="user@example.com", password="secret")


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(user_id="111222333", token="abc123", cookies=httpx.Cookies())


def build_resolver(handler: Handler) -> AlbumResolver:
    """Create an album resolver backed by ``handler``."""
    rpc = RpcClient(make_transport(handler))
    return AlbumResolver(rpc=rpc, pagination=PaginationEngine(rpc))
