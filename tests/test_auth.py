"""Tests for the login flow."""

import asyncio

import httpx
import pytest

from gphotos_client.adapters import script_evaluator
from gphotos_client.adapters.script_evaluator import PlaywrightScriptEvaluator
from gphotos_client.domain.errors import AuthenticationError, TransportError
from gphotos_client.services.auth import SessionManager, SessionState
from tests.conftest import (
    FailingPlaywright,
    FakeScriptEvaluator,
    RecordingHandler,
    form_of,
    make_transport,
)


HOME_HTML = "<html><script>window.photos_PhotosUi = {};</script></html>"


def login_handler(  # noqa: PLR0913
    *,
    set_galx: bool = True,
    login_status: int = 302,
    profile_target: str = "/u/0/111222333",
    home_status: int = 200,
) -> RecordingHandler:
    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "accounts.google.com" and request.method == "GET":
            headers = {"Set-Cookie": "GALX=galx-value; Path=/"} if set_galx else {}
            return httpx.Response(200, headers=headers, text="<form></form>")
        if host == "accounts.google.com" and request.method == "POST":
            return httpx.Response(login_status)
        if host == "plus.google.com":
            if request.url.path == "/u/0/me":
                return httpx.Response(302, headers={"Location": profile_target})
            return httpx.Response(200)
        if host == "photos.google.com":
            return httpx.Response(home_status, text=HOME_HTML)
        return httpx.Response(404)

    return RecordingHandler(handler)


def test_login_derives_session_context() -> None:
    handler = login_handler()
    evaluator = FakeScriptEvaluator(token="abc123")
    manager = SessionManager(make_transport(handler), evaluator)

    session = asyncio.run(manager.login("user@example.com", "secret"))

    assert session.user_id == "111222333"
    assert session.token == "abc123"
    assert manager.state is SessionState.READY
    assert evaluator.pages == [(HOME_HTML, "https://photos.google.com")]


def test_login_posts_credentials_with_galx_cookie() -> None:
    handler = login_handler()
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator())

    asyncio.run(manager.login("user@example.com", "secret"))

    post = next(request for request in handler.requests if request.method == "POST")
    form = form_of(post)
    assert form["Email"] == "user@example.com"
    assert form["Passwd"] == "secret"
    assert form["GALX"] == "galx-value"
    assert form["PersistentCookie"] == "yes"


def test_login_requires_galx_cookie() -> None:
    handler = login_handler(set_galx=False)
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator())

    with pytest.raises(AuthenticationError):
        asyncio.run(manager.login("user@example.com", "secret"))

    assert manager.state is SessionState.UNAUTHENTICATED
    assert all(request.method == "GET" for request in handler.requests)


@pytest.mark.parametrize("status", [200, 301, 401])
def test_login_only_accepts_302(status: int) -> None:
    handler = login_handler(login_status=status)
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator())

    with pytest.raises(AuthenticationError):
        asyncio.run(manager.login("user@example.com", "wrong"))

    assert manager.state is SessionState.UNAUTHENTICATED


def test_login_fails_when_user_id_is_not_resolved() -> None:
    handler = login_handler(profile_target="/u/0/me/")
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator())

    with pytest.raises(AuthenticationError):
        asyncio.run(manager.login("user@example.com", "secret"))


def test_login_fails_when_home_page_is_unavailable() -> None:
    handler = login_handler(home_status=500)
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator())

    with pytest.raises(TransportError):
        asyncio.run(manager.login("user@example.com", "secret"))


def test_login_fails_when_token_cannot_be_generated() -> None:
    handler = login_handler()
    manager = SessionManager(make_transport(handler), FakeScriptEvaluator(token=None))

    with pytest.raises(AuthenticationError, match="anti-forgery token"):
        asyncio.run(manager.login("user@example.com", "secret"))

    assert manager.state is SessionState.UNAUTHENTICATED


def test_refresh_token_keeps_user_id() -> None:
    handler = login_handler()
    evaluator = FakeScriptEvaluator(token="first")
    manager = SessionManager(make_transport(handler), evaluator)
    session = asyncio.run(manager.login("user@example.com", "secret"))

    evaluator.token = "second"
    refreshed = asyncio.run(manager.refresh_token(session))

    assert refreshed.user_id == session.user_id
    assert refreshed.token == "second"


def test_login_browser_failure_is_authentication_error(monkeypatch) -> None:
    monkeypatch.setattr(script_evaluator, "async_playwright", FailingPlaywright)
    manager = SessionManager(make_transport(login_handler()), PlaywrightScriptEvaluator())

    with pytest.raises(AuthenticationError, match="anti-forgery token"):
        asyncio.run(manager.login("user@example.com", "secret"))

    assert manager.state is SessionState.UNAUTHENTICATED
