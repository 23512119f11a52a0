"""Cookie-persistent HTTP transport."""

from collections.abc import AsyncIterable, Mapping
from dataclasses import dataclass
from typing import Protocol

import httpx

from gphotos_client.domain.errors import TransportError


@dataclass(frozen=True)
class TransportResponse:
    """Status, decoded body and final URL of a completed request."""

    status_code: int
    body: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Interface for sending requests that share one cookie jar."""

    @property
    def cookies(self) -> httpx.Cookies:
        """Return the shared cookie jar."""

    def cookie(self, name: str) -> str | None:
        """Return the value of a stored cookie, if present."""

    async def send(  # noqa: PLR0913
        self,
        method: str,
        url: str,
        *,
        form: Mapping[str, str] | None = None,
        content: bytes | str | AsyncIterable[bytes] | None = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
        timeout: float | None = None,
    ) -> TransportResponse:
        """Send a request and return the response without raising on status."""


@dataclass
class HttpxTransport(Transport):
    """Transport implemented with httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(cls, user_agent: str, timeout: float = 30.0) -> "HttpxTransport":
        """Create a transport with its own httpx session and cookie jar."""
        return cls(
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout=timeout,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self.http_client.cookies

    def cookie(self, name: str) -> str | None:
        """Return the most recently stored cookie with the given name."""
        value = None
        for stored in self.http_client.cookies.jar:
            if stored.name == name:
                value = stored.value
        return value

    async def send(  # noqa: PLR0913
        self,
        method: str,
        url: str,
        *,
        form: Mapping[str, str] | None = None,
        content: bytes | str | AsyncIterable[bytes] | None = None,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
        timeout: float | None = None,
    ) -> TransportResponse:
        """Send a request with the shared cookies and identifying header."""
        try:
            response = await self.http_client.request(
                method,
                url,
                data=dict(form) if form is not None else None,
                content=content,
                headers=dict(headers) if headers else None,
                follow_redirects=follow_redirects,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return TransportResponse(
            status_code=response.status_code,
            body=response.text,
            url=str(response.url),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
