"""Navigation to the jar page and waiting for its dynamic content.

Both steps go through :func:`~monojar.scraper.retry.with_retry`.  When the
readiness waits still fail, the page is inspected to tell an empty response
and a missing jar apart from an ordinary timeout.
"""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError, Page

from monojar.config import Settings
from monojar.scraper.errors import EmptyPageError, JarNotFoundError, RedirectAnomalyError
from monojar.scraper.extractor import STATS_VALUE_SELECTOR, TITLE_SELECTOR
from monojar.scraper.models import JAR_PATH_MARKER
from monojar.scraper.retry import with_retry

logger = logging.getLogger(__name__)

NOT_FOUND_MARKERS: tuple[str, ...] = ("не знайдено", "not found")


def is_redirect_anomaly(requested_url: str, final_url: str) -> bool:
    """Return ``True`` if navigation ended outside the jar page space."""
    return final_url != requested_url and JAR_PATH_MARKER not in final_url


async def navigate(page: Page, url: str, settings: Settings) -> None:
    """Open *url* on *page*, retrying transient network failures.

    Raises:
        RedirectAnomalyError: If the page ends up on an unrelated URL.
    """

    async def _goto() -> None:
        await page.goto(url, wait_until="networkidle", timeout=settings.wait_timeout)

    logger.info("[NAVIGATE] %s", url)
    await with_retry(
        _goto,
        max_retries=settings.max_retries,
        initial_delay=settings.retry_initial_delay,
        label=f"navigation to {url}",
    )

    if is_redirect_anomaly(url, page.url):
        logger.warning("[NAVIGATE] Redirected from %s to %s", url, page.url)
        raise RedirectAnomalyError(url, page.url)


async def wait_for_content(page: Page, settings: Settings) -> None:
    """Block until the title and the stats values are rendered.

    Raises:
        EmptyPageError: The page body has no visible text.
        JarNotFoundError: The page says the jar does not exist.
        Exception: The original wait error when neither condition applies.
    """
    try:
        await with_retry(
            lambda: page.wait_for_selector(TITLE_SELECTOR, timeout=settings.wait_timeout),
            max_retries=settings.max_retries,
            initial_delay=settings.retry_initial_delay,
            label="title selector",
        )
        await with_retry(
            lambda: page.wait_for_selector(STATS_VALUE_SELECTOR, timeout=settings.stats_timeout),
            max_retries=settings.max_retries,
            initial_delay=settings.retry_initial_delay,
            label="stats selector",
        )
    except Exception as exc:
        logger.warning("[WAIT] Content did not appear on %s: %s", page.url, exc)
        await _capture_screenshot(page, settings)
        await _classify_wait_failure(page, exc)
        raise


async def _capture_screenshot(page: Page, settings: Settings) -> None:
    if not settings.screenshots_enabled:
        return
    try:
        await page.screenshot(path=str(settings.screenshot_path))
        logger.info("[WAIT] Diagnostic screenshot saved to %s", settings.screenshot_path)
    except PlaywrightError as exc:
        logger.warning("[WAIT] Could not save diagnostic screenshot: %s", exc)


async def _classify_wait_failure(page: Page, original: Exception) -> None:
    """Raise a terminal error if the page text explains the failure."""
    try:
        body_text = await page.eval_on_selector("body", "el => el.innerText || ''")
    except PlaywrightError as exc:
        logger.warning("[WAIT] Could not read page text: %s", exc)
        return

    text = (body_text or "").strip()
    if not text:
        raise EmptyPageError("Monobank returned an empty page", url=page.url) from original

    lowered = text.lower()
    if any(marker in lowered for marker in NOT_FOUND_MARKERS):
        raise JarNotFoundError("Jar not found or removed", url=page.url) from original
