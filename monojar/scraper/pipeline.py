"""Per-request orchestration: probe → session → navigate → wait → extract.

``JarParser`` holds no state between calls apart from its settings, so one
instance can serve concurrent requests; every call opens its own
:class:`~monojar.scraper.session.RenderingSession`.
"""

from __future__ import annotations

import logging

from monojar.config import Settings, settings as default_settings
from monojar.scraper.errors import TargetUnreachableError
from monojar.scraper.extractor import extract_jar_data
from monojar.scraper.models import Extraction, JarData
from monojar.scraper.navigation import navigate, wait_for_content
from monojar.scraper.probe import is_reachable
from monojar.scraper.session import RenderingSession

logger = logging.getLogger(__name__)


class JarParser:
    """Turns a jar URL into :class:`JarData`."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    async def parse(self, url: str) -> JarData:
        """Scrape *url* and return the public jar fields.

        Raises:
            TargetUnreachableError: The availability probe failed; no browser
                was launched.
            JarParseError: Any other classified failure.
            Exception: Unclassified browser errors, after retries.
        """
        if not await is_reachable(url, timeout=self.settings.probe_timeout):
            raise TargetUnreachableError(f"Jar page is unreachable: {url}", url=url)

        async with RenderingSession(self.settings) as session:
            await navigate(session.page, url, self.settings)
            await wait_for_content(session.page, self.settings)
            extraction = await extract_jar_data(session.page)

        self._report(url, extraction)
        return extraction.data

    @staticmethod
    def _report(url: str, extraction: Extraction) -> None:
        data, debug = extraction.data, extraction.debug
        if not data.is_complete():
            logger.warning(
                "[PARSE] Incomplete data for %s: title=%r collected=%r target=%r debug=%r",
                url,
                data.title,
                data.collected,
                data.target,
                debug,
            )
            return
        logger.info("[PARSE] %s: %s / %s", url, data.collected, data.target)
        logger.debug("[PARSE] Extraction debug for %s: %r", url, debug)


async def parse_jar(url: str, settings: Settings | None = None) -> JarData:
    """Convenience wrapper: ``await JarParser(settings).parse(url)``."""
    return await JarParser(settings).parse(url)
