"""Remote browser connection pool (rendered mode only).

A single Playwright :class:`Browser` connected over CDP to a Browserless
endpoint is kept for the whole process and reused by every request.  Before
reuse the connection is probed; dead connections are dropped and re-opened.
After a failed connection attempt, reconnection is refused for a short
cool-down window so an unreachable endpoint is not hammered.

The pool also owns the Playwright driver, which is used to launch isolated
local browsers when the remote service cannot be used.  Those browsers are
never pooled: the caller closes them after its request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from lecturas.config import settings
from lecturas.scraper.errors import ConnectionCoolingDown, ConnectionFailed

logger = logging.getLogger("lecturas.browser_pool")

LOCAL_BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

Connector = Callable[[str], Awaitable[Browser]]
Launcher = Callable[[], Awaitable[Browser]]
Probe = Callable[[Browser], Awaitable[None]]


class PoolState(str, Enum):
    EMPTY = "empty"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    COOLING_DOWN = "cooling_down"


@dataclass(frozen=True)
class FailureMemo:
    """Last remote connection failure."""

    message: str
    timestamp: float


def _mask(token: str) -> str:
    if len(token) <= 15:
        return "***"
    return f"{token[:10]}...{token[-5:]}"


async def cdp_version_probe(browser: Browser) -> None:
    """Raise if *browser* does not answer a ``Browser.getVersion`` call."""
    if not browser.is_connected():
        raise ConnectionError("browser disconnected")
    session = await browser.new_browser_cdp_session()
    try:
        await session.send("Browser.getVersion")
    finally:
        await session.detach()


class BrowserConnectionPool:
    """Process-wide owner of the pooled remote browser connection.

    *connector*, *launcher*, *probe* and *clock* default to the real
    Playwright-backed implementations and exist so tests can replace them.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        endpoint: Optional[str] = None,
        cooldown: Optional[float] = None,
        headless: Optional[bool] = None,
        connector: Optional[Connector] = None,
        launcher: Optional[Launcher] = None,
        probe: Optional[Probe] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._token = settings.browserless_token if token is None else token
        self._endpoint = settings.browserless_endpoint if endpoint is None else endpoint
        self._cooldown = settings.pool_cooldown if cooldown is None else cooldown
        self._headless = settings.browser_headless if headless is None else headless
        self._connector = connector or self._connect_over_cdp
        self._launcher = launcher or self._launch_local
        self._probe = probe or cdp_version_probe
        self._clock = clock

        self._browser: Optional[Browser] = None
        self._failure: Optional[FailureMemo] = None
        self._connecting = False
        self._lock = asyncio.Lock()

        self._playwright: Optional[Playwright] = None
        self._driver_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    @property
    def failure(self) -> Optional[FailureMemo]:
        return self._failure

    @property
    def state(self) -> PoolState:
        if self._connecting:
            return PoolState.CONNECTING
        if self._browser is not None:
            return PoolState.CONNECTED
        if self._cooling_down():
            return PoolState.COOLING_DOWN
        return PoolState.EMPTY

    def _cooling_down(self) -> bool:
        memo = self._failure
        return memo is not None and self._clock() - memo.timestamp < self._cooldown

    def _ws_url(self) -> str:
        sep = "&" if "?" in self._endpoint else "?"
        return f"{self._endpoint}{sep}token={self._token}"

    # ------------------------------------------------------------------
    # Pooled remote connection
    # ------------------------------------------------------------------

    async def acquire(self) -> Browser:
        """Return the live pooled browser, connecting if necessary.

        Raises:
            ConnectionFailed: No token is configured or the connect attempt
                errored (the failure is memoised).
            ConnectionCoolingDown: A failure was memoised less than the
                cool-down window ago.
        """
        async with self._lock:
            if self._browser is not None:
                try:
                    await self._probe(self._browser)
                except Exception as exc:
                    logger.warning(
                        "Pooled browser connection is no longer valid, reconnecting: %s", exc
                    )
                    self._browser = None
                else:
                    logger.info("Reusing pooled Browserless connection")
                    return self._browser

            if not self._token:
                raise ConnectionFailed("BROWSERLESS_TOKEN no configurado")

            if self._cooling_down():
                raise ConnectionCoolingDown(
                    "Esperando antes de reintentar conexión a Browserless. "
                    f"Error previo: {self._failure.message}"
                )

            logger.info(
                "Opening persistent Browserless connection (%s)", _mask(self._token)
            )
            self._connecting = True
            try:
                browser = await self._connector(self._ws_url())
            except Exception as exc:
                self._failure = FailureMemo(message=str(exc), timestamp=self._clock())
                logger.error("Browserless connection failed: %s", exc)
                raise ConnectionFailed(f"Error al conectar a Browserless: {exc}") from exc
            finally:
                self._connecting = False

            self._browser = browser
            self._failure = None
            logger.info("Persistent Browserless connection established")
            return browser

    # ------------------------------------------------------------------
    # Isolated local browser
    # ------------------------------------------------------------------

    async def launch_isolated(self) -> Browser:
        """Launch a local browser for a single request.

        The returned browser is not pooled; the caller must close it.
        """
        return await self._launcher()

    # ------------------------------------------------------------------
    # Playwright-backed defaults
    # ------------------------------------------------------------------

    async def _ensure_playwright(self) -> Playwright:
        async with self._driver_lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
                logger.info("Playwright driver started")
            return self._playwright

    async def _connect_over_cdp(self, ws_url: str) -> Browser:
        playwright = await self._ensure_playwright()
        return await playwright.chromium.connect_over_cdp(
            ws_url, timeout=settings.navigation_timeout * 1000
        )

    async def _launch_local(self) -> Browser:
        playwright = await self._ensure_playwright()
        return await playwright.chromium.launch(
            headless=self._headless, args=LOCAL_BROWSER_ARGS
        )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the pooled browser and stop Playwright (process shutdown only).

        Shutdown may fail if the driver already exited; log and continue.
        """
        async with self._lock:
            if self._browser is not None:
                try:
                    await self._browser.close()
                except Exception as exc:
                    logger.warning("Exception while closing pooled browser: %s", exc)
                self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                logger.warning("Exception while stopping Playwright: %s", exc)
            self._playwright = None
            logger.info("Playwright driver stopped")


_pool: Optional[BrowserConnectionPool] = None


def get_browser_pool() -> BrowserConnectionPool:
    """Return the process-wide pool, creating it from ``settings`` on first use."""
    global _pool
    if _pool is None:
        _pool = BrowserConnectionPool()
    return _pool


async def close_browser_pool() -> None:
    """Tear down the process-wide pool if one was created."""
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None
