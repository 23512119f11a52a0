"""Login flow and anti-forgery token derivation."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from gphotos_client.adapters.script_evaluator import ScriptEvaluator
from gphotos_client.adapters.transport import Transport
from gphotos_client.domain.errors import AuthenticationError, TransportError
from gphotos_client.domain.protocol import (
    HOME_URL,
    LOGIN_COOKIE,
    LOGIN_FORM_CONSTANTS,
    LOGIN_URL,
    PROFILE_URL,
)
from gphotos_client.domain.session import SessionContext

_logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Login progress of a session manager."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    LOGGING_IN = "LOGGING_IN"
    AUTHENTICATED = "AUTHENTICATED"
    READY = "READY"


@dataclass
class SessionManager:
    """Performs the credential login and derives the session context."""

    transport: Transport
    evaluator: ScriptEvaluator
    state: SessionState = SessionState.UNAUTHENTICATED
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def login(self, username: str, password: str) -> SessionContext:
        """Log in and return a ready session context."""
        async with self._lock:
            self.state = SessionState.LOGGING_IN
            try:
                galx = await self._fetch_login_cookie()
                await self._submit_credentials(username, password, galx)
                _logger.info("Logged in as %s", username)
                user_id = await self._fetch_user_id()
                _logger.info("User id is %s", user_id)
                self.state = SessionState.AUTHENTICATED
                token = await self.derive_token()
            except Exception:
                self.state = SessionState.UNAUTHENTICATED
                raise
            self.state = SessionState.READY
            return SessionContext(
                user_id=user_id, token=token, cookies=self.transport.cookies
            )

    async def refresh_token(self, session: SessionContext) -> SessionContext:
        """Derive a fresh token for an existing login."""
        token = await self.derive_token()
        return SessionContext(
            user_id=session.user_id, token=token, cookies=session.cookies
        )

    async def derive_token(self) -> str:
        """Load the home page in the script sandbox and read the token."""
        response = await self.transport.send("GET", HOME_URL, follow_redirects=True)
        if response.status_code != 200:
            raise TransportError(
                "Can't access Google Photos home page",
                status_code=response.status_code,
            )
        token = await self.evaluator.evaluate(response.body, HOME_URL)
        if not token:
            raise AuthenticationError("Can't generate anti-forgery token")
        _logger.info("Anti-forgery token derived (%s...)", token[:4])
        return token

    async def _fetch_login_cookie(self) -> str:
        await self.transport.send("GET", LOGIN_URL, follow_redirects=True)
        galx = self.transport.cookie(LOGIN_COOKIE)
        if not galx:
            raise AuthenticationError(f"Login page did not set the {LOGIN_COOKIE} cookie")
        return galx

    async def _submit_credentials(self, username: str, password: str, galx: str) -> None:
        form = {
            "Email": username,
            "Passwd": password,
            LOGIN_COOKIE: galx,
            **LOGIN_FORM_CONSTANTS,
        }
        response = await self.transport.send("POST", LOGIN_URL, form=form)
        # The login endpoint reports success only through a redirect.
        if response.status_code != 302:
            _logger.error("Failed to login (status=%s)", response.status_code)
            raise AuthenticationError("Failed to login")

    async def _fetch_user_id(self) -> str:
        response = await self.transport.send("HEAD", PROFILE_URL, follow_redirects=True)
        user_id = urlsplit(response.url).path.rstrip("/").split("/")[-1]
        if not user_id or user_id == urlsplit(PROFILE_URL).path.split("/")[-1]:
            raise AuthenticationError(f"Can't parse user id from {response.url}")
        return user_id
