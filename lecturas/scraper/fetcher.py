"""Fetch transports: plain HTTP (direct) or headless-browser rendering.

Both produce a :class:`RawPage` for a URL and translate library errors into
the pipeline's own error kinds.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
from playwright.async_api import Browser
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from lecturas.config import settings
from lecturas.scraper.browser_pool import BrowserConnectionPool, get_browser_pool
from lecturas.scraper.errors import (
    ConnectionCoolingDown,
    ConnectionFailed,
    FallbackFailed,
    FetchFailed,
    FetchTimeout,
)
from lecturas.scraper.models import RawPage

logger = logging.getLogger("lecturas.fetcher")

_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_DEFAULT_HEADERS = {"User-Agent": _BROWSER_UA}


class Transport(Protocol):
    #: Extra text attached to failure envelopes, if any.
    failure_hint: Optional[str]

    async def fetch(self, url: str) -> RawPage:
        """Return the HTML for *url* or raise a ``ReadingsError``."""


# ---------------------------------------------------------------------------
# Direct mode
# ---------------------------------------------------------------------------

class DirectTransport:
    """Single ``httpx`` GET with a browser User-Agent."""

    failure_hint: Optional[str] = None

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._timeout = settings.request_timeout if timeout is None else timeout

    async def fetch(self, url: str) -> RawPage:
        """Fetch *url*.

        Raises:
            FetchFailed: Non-2xx status (``status_code`` set) or a network error.
            FetchTimeout: The request exceeded the configured timeout.
        """
        try:
            async with httpx.AsyncClient(
                headers=_DEFAULT_HEADERS,
                timeout=self._timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchTimeout(
                f"Tiempo de espera agotado al obtener la página ({self._timeout:g}s)"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailed(f"Error al obtener la página: {exc}") from exc

        if not response.is_success:
            raise FetchFailed(
                f"Error al obtener la página: {response.status_code}",
                status_code=response.status_code,
            )
        return RawPage(url=url, html=response.text, status_code=response.status_code)


# ---------------------------------------------------------------------------
# Rendered mode
# ---------------------------------------------------------------------------

class RenderedTransport:
    """Load the page in a headless browser and capture the rendered HTML.

    The browser comes from the shared :class:`BrowserConnectionPool`; when it
    cannot provide one an isolated local browser is launched for this request
    only (if *local_fallback* is enabled).
    """

    failure_hint = "Usando conexión persistente. Si el error persiste, intenta más tarde."

    def __init__(
        self,
        pool: Optional[BrowserConnectionPool] = None,
        navigation_timeout: Optional[float] = None,
        local_fallback: Optional[bool] = None,
    ) -> None:
        self._pool = pool or get_browser_pool()
        self._timeout = (
            settings.navigation_timeout if navigation_timeout is None else navigation_timeout
        )
        self._local_fallback = (
            settings.local_fallback if local_fallback is None else local_fallback
        )

    async def _launch_fallback(self, original: Exception) -> Browser:
        try:
            browser = await self._pool.launch_isolated()
        except Exception as exc:
            logger.error("Local browser fallback failed: %s", exc)
            raise FallbackFailed(str(original), str(exc)) from exc
        logger.info("Local browser fallback launched")
        return browser

    async def _get_browser(self) -> tuple[Browser, bool]:
        """Return ``(browser, isolated)``; isolated browsers must be closed."""
        if not self._pool.has_token:
            missing = ConnectionFailed("BROWSERLESS_TOKEN no configurado")
            if not self._local_fallback:
                raise missing
            logger.info("No Browserless token configured, using local browser")
            return await self._launch_fallback(missing), True

        try:
            return await self._pool.acquire(), False
        except (ConnectionFailed, ConnectionCoolingDown) as exc:
            if not self._local_fallback:
                raise
            logger.error("Browserless unavailable (%s), falling back to local browser", exc)
            return await self._launch_fallback(exc), True

    async def fetch(self, url: str) -> RawPage:
        """Render *url* and return its HTML.

        Raises:
            FetchTimeout: Navigation did not reach network idle in time.
            FetchFailed: The browser could not load the page.
            ConnectionFailed / ConnectionCoolingDown: Pool errors when the
                local fallback is disabled.
            FallbackFailed: The local fallback could not be launched either.
        """
        browser, isolated = await self._get_browser()
        page = None
        try:
            page = await browser.new_page(user_agent=_BROWSER_UA)
            try:
                response = await page.goto(
                    url, wait_until="networkidle", timeout=self._timeout * 1000
                )
            except PlaywrightTimeoutError as exc:
                raise FetchTimeout(
                    f"Tiempo de espera agotado al cargar la página ({self._timeout:g}s)"
                ) from exc
            except PlaywrightError as exc:
                raise FetchFailed(f"Error al cargar la página: {exc}") from exc
            html = await page.content()
            status = response.status if response is not None else 200
        finally:
            # Close the page, never the pooled browser.
            if page is not None:
                try:
                    await page.close()
                except Exception:
                    logger.debug("Failed to close page cleanly")
            if isolated:
                try:
                    await browser.close()
                except Exception:
                    logger.debug("Failed to close local browser cleanly")

        return RawPage(url=url, html=html, status_code=status)


def make_transport(mode: Optional[str] = None) -> Transport:
    """Build the transport for *mode* (defaults to ``settings.fetch_mode``)."""
    mode = (mode or settings.fetch_mode).lower()
    if mode == "direct":
        return DirectTransport()
    if mode == "rendered":
        return RenderedTransport()
    raise ValueError(f"Unknown fetch mode {mode!r}. Use: direct | rendered")
