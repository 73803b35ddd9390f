"""Headless Chromium session owned by exactly one request.

Usage::

    async with RenderingSession(settings) as session:
        await session.page.goto(url)

The session is never pooled: each request launches its own browser and the
context manager closes it on every exit path.  Closing happens at most once.
"""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    Route,
    async_playwright,
)

from monojar.config import Settings
from monojar.scraper.errors import BrowserUnavailableError, SessionLeakError

logger = logging.getLogger(__name__)

# Server/container friendly Chromium flags.
LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
)

# Sub-resources that never affect the jar numbers.
BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})


async def _block_heavy_resources(route: Route) -> None:
    """Abort image/font/media requests and let everything else through."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
        return
    await route.continue_()


class RenderingSession:
    """One Playwright driver, one Chromium process and one page."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None
        self._closed = False

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Rendering session is not open")
        return self._page

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> "RenderingSession":
        """Launch the browser, create the page and install request blocking.

        Raises:
            BrowserUnavailableError: If the driver or Chromium fails to start.
        """
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=True,
                args=list(LAUNCH_ARGS),
            )
        except Exception as exc:
            await self.close()
            raise BrowserUnavailableError(f"Browser launch failed: {exc}") from exc
        except BaseException:
            # Cancellation: release what started, then let it propagate.
            await self.close()
            raise

        try:
            page = await self._browser.new_page()
            page.set_default_navigation_timeout(self._settings.navigation_timeout)
            await page.route("**/*", _block_heavy_resources)
        except BaseException:
            await self.close()
            raise

        self._page = page
        logger.debug("[SESSION] Browser session opened")
        return self

    async def close(self) -> None:
        """Shut the browser and driver down.  Subsequent calls are no-ops.

        Raises:
            SessionLeakError: If the browser process could not be closed.
        """
        if self._closed:
            return
        self._closed = True

        browser, driver = self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None

        try:
            if browser is not None:
                await browser.close()
        except PlaywrightError as exc:
            logger.critical("[SESSION] Browser failed to close: %s", exc)
            raise SessionLeakError(f"Browser failed to close: {exc}") from exc
        finally:
            if driver is not None:
                await driver.stop()
        logger.debug("[SESSION] Browser session closed")

    async def __aenter__(self) -> "RenderingSession":
        return await self.open()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
