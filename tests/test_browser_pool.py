"""Tests for the remote browser connection pool.

The Playwright connect primitive, liveness probe and clock are replaced with
fakes, so no browser or network is needed.  pytest-asyncio runs with
``asyncio_mode = "auto"``.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from lecturas.scraper.browser_pool import (
    BrowserConnectionPool,
    PoolState,
    cdp_version_probe,
)
from lecturas.scraper.errors import ConnectionCoolingDown, ConnectionFailed


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _browser() -> MagicMock:
    browser = MagicMock(name="browser")
    browser.close = AsyncMock()
    return browser


def _pool(connector=None, probe=None, clock=None, token="tok-1234567890-abcde", **kwargs):
    return BrowserConnectionPool(
        token=token,
        endpoint="wss://chrome.browserless.io",
        cooldown=5.0,
        connector=connector or AsyncMock(side_effect=lambda _url: _browser()),
        probe=probe or AsyncMock(),
        clock=clock or FakeClock(),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Reuse
# ---------------------------------------------------------------------------

class TestReuse:
    async def test_healthy_connection_is_reused(self) -> None:
        connector = AsyncMock(return_value=_browser())
        probe = AsyncMock()
        pool = _pool(connector=connector, probe=probe)

        first = await pool.acquire()
        second = await pool.acquire()
        third = await pool.acquire()

        assert first is second is third
        assert connector.await_count == 1
        assert probe.await_count == 2
        assert pool.state is PoolState.CONNECTED

    async def test_connects_with_token_in_query(self) -> None:
        connector = AsyncMock(return_value=_browser())
        pool = _pool(connector=connector, token="secret")

        await pool.acquire()

        connector.assert_awaited_once_with("wss://chrome.browserless.io?token=secret")

    async def test_dead_connection_is_replaced(self) -> None:
        old, new = _browser(), _browser()
        connector = AsyncMock(side_effect=[old, new])
        probe = AsyncMock(side_effect=ConnectionError("socket closed"))
        pool = _pool(connector=connector, probe=probe)

        assert await pool.acquire() is old
        assert await pool.acquire() is new
        assert connector.await_count == 2

    async def test_concurrent_acquires_share_one_connection(self) -> None:
        async def slow_connect(_url: str) -> MagicMock:
            await asyncio.sleep(0.01)
            return _browser()

        connector = AsyncMock(side_effect=slow_connect)
        pool = _pool(connector=connector)

        results = await asyncio.gather(*(pool.acquire() for _ in range(5)))

        assert connector.await_count == 1
        assert all(b is results[0] for b in results)


# ---------------------------------------------------------------------------
# Failure memo / cool-down
# ---------------------------------------------------------------------------

class TestCoolDown:
    async def test_failure_is_memoised_and_blocks_retry(self) -> None:
        clock = FakeClock()
        connector = AsyncMock(side_effect=OSError("unreachable"))
        pool = _pool(connector=connector, clock=clock)

        with pytest.raises(ConnectionFailed, match="unreachable"):
            await pool.acquire()
        assert pool.failure is not None
        assert pool.failure.message == "unreachable"
        assert pool.state is PoolState.COOLING_DOWN

        clock.advance(1.0)
        with pytest.raises(ConnectionCoolingDown, match="unreachable"):
            await pool.acquire()
        assert connector.await_count == 1

    async def test_retries_after_cooldown_elapses(self) -> None:
        clock = FakeClock()
        browser = _browser()
        connector = AsyncMock(side_effect=[OSError("unreachable"), browser])
        pool = _pool(connector=connector, clock=clock)

        with pytest.raises(ConnectionFailed):
            await pool.acquire()

        clock.advance(5.1)
        assert pool.state is PoolState.EMPTY
        assert await pool.acquire() is browser
        assert connector.await_count == 2
        assert pool.failure is None

    async def test_failed_probe_then_failed_reconnect_cools_down(self) -> None:
        clock = FakeClock()
        connector = AsyncMock(side_effect=[_browser(), OSError("gone")])
        probe = AsyncMock(side_effect=ConnectionError("dead"))
        pool = _pool(connector=connector, probe=probe, clock=clock)

        await pool.acquire()
        with pytest.raises(ConnectionFailed):
            await pool.acquire()
        with pytest.raises(ConnectionCoolingDown):
            await pool.acquire()
        assert connector.await_count == 2

    async def test_missing_token_fails_without_memo(self) -> None:
        connector = AsyncMock()
        pool = _pool(connector=connector, token="")

        with pytest.raises(ConnectionFailed, match="BROWSERLESS_TOKEN"):
            await pool.acquire()

        connector.assert_not_awaited()
        assert pool.failure is None
        assert pool.has_token is False


# ---------------------------------------------------------------------------
# State / lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_initial_state_is_empty(self) -> None:
        assert _pool().state is PoolState.EMPTY

    async def test_state_is_connecting_during_connect(self) -> None:
        seen: list[PoolState] = []
        pool: BrowserConnectionPool

        async def connect(_url: str) -> MagicMock:
            seen.append(pool.state)
            return _browser()

        pool = _pool(connector=AsyncMock(side_effect=connect))
        await pool.acquire()

        assert seen == [PoolState.CONNECTING]

    async def test_launch_isolated_uses_launcher_and_is_not_pooled(self) -> None:
        local = _browser()
        launcher = AsyncMock(return_value=local)
        connector = AsyncMock(return_value=_browser())
        pool = _pool(connector=connector, launcher=launcher)

        assert await pool.launch_isolated() is local
        assert pool.state is PoolState.EMPTY
        connector.assert_not_awaited()

    async def test_aclose_closes_pooled_browser(self) -> None:
        browser = _browser()
        pool = _pool(connector=AsyncMock(return_value=browser))
        await pool.acquire()

        await pool.aclose()

        browser.close.assert_awaited_once()
        assert pool.state is PoolState.EMPTY


# ---------------------------------------------------------------------------
# Default liveness probe
# ---------------------------------------------------------------------------

class TestCdpVersionProbe:
    async def test_disconnected_browser_fails(self) -> None:
        browser = MagicMock()
        browser.is_connected.return_value = False
        with pytest.raises(ConnectionError):
            await cdp_version_probe(browser)

    async def test_queries_version_and_detaches(self) -> None:
        session = MagicMock()
        session.send = AsyncMock(return_value={"product": "Chrome/122"})
        session.detach = AsyncMock()
        browser = MagicMock()
        browser.is_connected.return_value = True
        browser.new_browser_cdp_session = AsyncMock(return_value=session)

        await cdp_version_probe(browser)

        session.send.assert_awaited_once_with("Browser.getVersion")
        session.detach.assert_awaited_once()

    async def test_failed_version_query_raises(self) -> None:
        session = MagicMock()
        session.send = AsyncMock(side_effect=RuntimeError("Target closed"))
        session.detach = AsyncMock()
        browser = MagicMock()
        browser.is_connected.return_value = True
        browser.new_browser_cdp_session = AsyncMock(return_value=session)

        with pytest.raises(RuntimeError):
            await cdp_version_probe(browser)
        session.detach.assert_awaited_once()
