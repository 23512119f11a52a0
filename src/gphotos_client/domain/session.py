"""Domain models for authenticated sessions."""

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class SessionContext:
    """Authenticated state required by every RPC call.

    Derived once per login and never persisted across runs.
    """

    user_id: str
    token: str
    cookies: httpx.Cookies
