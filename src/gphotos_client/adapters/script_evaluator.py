"""Script sandbox used to derive the anti-forgery token."""

from dataclasses import dataclass
from typing import Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Route, async_playwright

from gphotos_client.domain.errors import AuthenticationError
from gphotos_client.domain.protocol import TOKEN_EXPRESSION


class ScriptEvaluator(Protocol):
    """Interface for running a page's scripts and reading the session token."""

    async def evaluate(self, html: str, url: str) -> str | None:
        """Load ``html`` as if served from ``url`` and return the token, if any."""


@dataclass
class PlaywrightScriptEvaluator(ScriptEvaluator):
    """Evaluator backed by a headless Chromium page."""

    headless: bool = True
    expression: str = TOKEN_EXPRESSION
    timeout_ms: float = 30_000

    async def evaluate(self, html: str, url: str) -> str | None:
        """Serve the fetched markup at its own URL and evaluate the token getter.

        Only the document request is fulfilled locally. Script and style
        subresources load from their real origins so the page initializes.
        """

        async def serve_document(route: Route) -> None:
            await route.fulfill(
                status=200,
                content_type="text/html; charset=utf-8",
                body=html,
            )

        document_url = url.rstrip("/")
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page()
                    await page.route(
                        lambda requested: requested.rstrip("/") == document_url,
                        serve_document,
                    )
                    await page.goto(url, wait_until="load", timeout=self.timeout_ms)
                    token = await page.evaluate(self.expression)
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            raise AuthenticationError(
                f"Can't generate anti-forgery token: {exc.message}"
            ) from exc
        if token is None:
            return None
        return str(token)
