"""Tests for navigation, readiness waits and wait-failure diagnosis.

The Playwright ``Page`` is a ``MagicMock`` with ``AsyncMock`` methods;
``asyncio.sleep`` inside the retry policy is patched so backoff is instant.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from monojar.config import Settings
from monojar.scraper.errors import EmptyPageError, JarNotFoundError, RedirectAnomalyError
from monojar.scraper.extractor import STATS_VALUE_SELECTOR, TITLE_SELECTOR
from monojar.scraper.navigation import is_redirect_anomaly, navigate, wait_for_content

JAR_URL = "https://send.monobank.ua/jar/58vdbegH3T"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _settings(**overrides) -> Settings:
    values = dict(
        navigation_timeout=30000,
        wait_timeout=15000,
        stats_timeout=10000,
        max_retries=3,
        retry_initial_delay=1000,
        screenshots_enabled=False,
        screenshot_path=Path("monobank-error.png"),
    )
    values.update(overrides)
    return Settings(**values)


def _make_page(url: str = JAR_URL, body_text: str = "Збір на дрон") -> MagicMock:
    page = MagicMock()
    page.url = url
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.screenshot = AsyncMock()
    page.eval_on_selector = AsyncMock(return_value=body_text)
    return page


@pytest.fixture()
def no_sleep():
    with patch("monojar.scraper.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


# ---------------------------------------------------------------------------
# Redirect heuristic
# ---------------------------------------------------------------------------

class TestIsRedirectAnomaly:
    def test_same_url_is_fine(self) -> None:
        assert is_redirect_anomaly(JAR_URL, JAR_URL) is False

    def test_query_string_inside_jar_space_is_fine(self) -> None:
        assert is_redirect_anomaly(JAR_URL, JAR_URL + "?lang=en") is False

    def test_other_jar_is_tolerated(self) -> None:
        # Loose on purpose: any page under /jar/ is accepted.
        assert is_redirect_anomaly(JAR_URL, "https://send.monobank.ua/jar/Other123") is False

    def test_unrelated_page_is_anomaly(self) -> None:
        assert is_redirect_anomaly(JAR_URL, "https://send.monobank.ua/other-page") is True

    def test_homepage_is_anomaly(self) -> None:
        assert is_redirect_anomaly(JAR_URL, "https://www.monobank.ua/") is True


# ---------------------------------------------------------------------------
# navigate
# ---------------------------------------------------------------------------

class TestNavigate:
    async def test_goes_to_url_with_network_idle(self, no_sleep) -> None:
        page = _make_page()
        await navigate(page, JAR_URL, _settings())

        page.goto.assert_awaited_once_with(JAR_URL, wait_until="networkidle", timeout=15000)
        no_sleep.assert_not_awaited()

    async def test_redirect_to_unrelated_page_fails(self, no_sleep) -> None:
        page = _make_page(url="https://send.monobank.ua/other-page")
        with pytest.raises(RedirectAnomalyError) as excinfo:
            await navigate(page, JAR_URL, _settings())

        assert excinfo.value.kind == "redirect_anomaly"
        assert excinfo.value.final_url == "https://send.monobank.ua/other-page"
        assert page.goto.await_count == 1

    async def test_connection_reset_twice_then_success(self, no_sleep) -> None:
        page = _make_page()
        page.goto = AsyncMock(
            side_effect=[
                PlaywrightError("net::ERR_CONNECTION_RESET at " + JAR_URL),
                PlaywrightError("net::ERR_CONNECTION_RESET at " + JAR_URL),
                None,
            ]
        )
        await navigate(page, JAR_URL, _settings())

        assert page.goto.await_count == 3
        assert no_sleep.await_args_list == [call(1.0), call(2.0)]

    async def test_gives_up_after_max_retries(self, no_sleep) -> None:
        page = _make_page()
        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_CONNECTION_RESET"))
        with pytest.raises(PlaywrightError):
            await navigate(page, JAR_URL, _settings(max_retries=2))

        assert page.goto.await_count == 2

    async def test_non_network_error_is_not_retried(self, no_sleep) -> None:
        page = _make_page()
        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_ABORTED"))
        with pytest.raises(PlaywrightError):
            await navigate(page, JAR_URL, _settings())

        assert page.goto.await_count == 1
        no_sleep.assert_not_awaited()


# ---------------------------------------------------------------------------
# wait_for_content
# ---------------------------------------------------------------------------

class TestWaitForContent:
    async def test_waits_for_title_then_stats(self, no_sleep) -> None:
        page = _make_page()
        await wait_for_content(page, _settings())

        assert page.wait_for_selector.await_args_list == [
            call(TITLE_SELECTOR, timeout=15000),
            call(STATS_VALUE_SELECTOR, timeout=10000),
        ]
        page.eval_on_selector.assert_not_awaited()

    async def test_not_found_text_is_classified(self, no_sleep) -> None:
        page = _make_page(body_text="Page not found")
        page.wait_for_selector = AsyncMock(
            side_effect=PlaywrightTimeoutError("Timeout 15000ms exceeded.")
        )
        with pytest.raises(JarNotFoundError) as excinfo:
            await wait_for_content(page, _settings())

        assert excinfo.value.kind == "jar_not_found"
        # The title wait was retried before the page was inspected.
        assert page.wait_for_selector.await_count == 3

    async def test_ukrainian_not_found_text_is_classified(self, no_sleep) -> None:
        page = _make_page(body_text="Банку НЕ ЗНАЙДЕНО")
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))
        with pytest.raises(JarNotFoundError):
            await wait_for_content(page, _settings())

    async def test_blank_body_is_empty_page(self, no_sleep) -> None:
        page = _make_page(body_text="   \n\t ")
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))
        with pytest.raises(EmptyPageError) as excinfo:
            await wait_for_content(page, _settings())

        assert excinfo.value.kind == "empty_page"

    async def test_unclassified_failure_propagates_original(self, no_sleep) -> None:
        original = PlaywrightTimeoutError("Timeout 10000ms exceeded.")
        page = _make_page(body_text="Збір на дрон\nЗібрано")
        page.wait_for_selector = AsyncMock(side_effect=[None, original, original, original])
        with pytest.raises(PlaywrightTimeoutError) as excinfo:
            await wait_for_content(page, _settings())

        assert excinfo.value is original
        assert page.wait_for_selector.await_args_list[-1] == call(
            STATS_VALUE_SELECTOR, timeout=10000
        )

    async def test_unreadable_body_propagates_original(self, no_sleep) -> None:
        original = PlaywrightTimeoutError("Timeout")
        page = _make_page()
        page.wait_for_selector = AsyncMock(side_effect=original)
        page.eval_on_selector = AsyncMock(side_effect=PlaywrightError("Execution context was destroyed"))
        with pytest.raises(PlaywrightTimeoutError) as excinfo:
            await wait_for_content(page, _settings())

        assert excinfo.value is original

    async def test_screenshot_taken_when_enabled(self, no_sleep, tmp_path) -> None:
        shot = tmp_path / "error.png"
        page = _make_page(body_text="not found")
        page.wait_for_selector = AsyncMock(side_effect=ValueError("bad selector"))
        with pytest.raises(JarNotFoundError):
            await wait_for_content(page, _settings(screenshots_enabled=True, screenshot_path=shot))

        page.screenshot.assert_awaited_once_with(path=str(shot))

    async def test_no_screenshot_when_disabled(self, no_sleep) -> None:
        page = _make_page(body_text="not found")
        page.wait_for_selector = AsyncMock(side_effect=ValueError("bad selector"))
        with pytest.raises(JarNotFoundError):
            await wait_for_content(page, _settings(screenshots_enabled=False))

        page.screenshot.assert_not_awaited()

    async def test_screenshot_failure_does_not_mask_classification(self, no_sleep) -> None:
        page = _make_page(body_text="")
        page.wait_for_selector = AsyncMock(side_effect=ValueError("bad selector"))
        page.screenshot = AsyncMock(side_effect=PlaywrightError("Target closed"))
        with pytest.raises(EmptyPageError):
            await wait_for_content(page, _settings(screenshots_enabled=True))
