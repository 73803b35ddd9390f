"""Extraction of the jar title and amounts from the rendered page.

Two halves, split at the browser boundary:

* :data:`SNAPSHOT_SCRIPT` runs inside the page and only *reads* the DOM: the
  title, the owner line and, for every stats container, its icon ``src``
  values, its 1-based position and its value text.  Only JSON crosses back.
* :func:`select_fields` turns that snapshot into the jar fields.

Strategy for the amounts:

1. **Icons**: a stats container whose icon file name contains
   ``collected.svg`` / ``target.svg`` supplies that amount.
2. **Position**: if an icon is missing, the first/second stats container is
   used instead and ``usedBackup`` is recorded.
"""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Page

from monojar.scraper.models import Extraction, ExtractionDebug, JarData

logger = logging.getLogger(__name__)

TITLE_SELECTOR = "header .field.name h1"
STATS_VALUE_SELECTOR = "header .jar-stats .stats-data-value"

SELECTORS: dict[str, str] = {
    "title": TITLE_SELECTOR,
    "owner": "header .field.name .caption",
    "statsItem": "header .jar-stats > div",
    "value": ".stats-data-value",
}

COLLECTED_ICON = "collected.svg"
TARGET_ICON = "target.svg"

SNAPSHOT_SCRIPT = """
(sel) => {
  const text = (el) => (el && el.textContent != null ? el.textContent : null);
  const pick = (selector) => text(document.querySelector(selector));

  const stats = Array.from(document.querySelectorAll(sel.statsItem)).map((item) => ({
    position: Array.prototype.indexOf.call(item.parentElement.children, item) + 1,
    icons: Array.from(item.querySelectorAll('img')).map((img) => img.getAttribute('src') || ''),
    value: text(item.querySelector(sel.value)),
  }));

  return { title: pick(sel.title), owner: pick(sel.owner), stats };
}
"""


def _clean(value: Any) -> str | None:
    """Trimmed text, or ``None`` for missing/blank values."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _value_by_icon(stats: list[dict[str, Any]], fragment: str) -> str | None:
    for item in stats:
        if any(fragment in (src or "") for src in item.get("icons") or []):
            value = _clean(item.get("value"))
            if value:
                return value
    return None


def _value_by_position(stats: list[dict[str, Any]], position: int) -> str | None:
    for item in stats:
        if item.get("position") == position:
            return _clean(item.get("value"))
    return None


def select_fields(snapshot: dict[str, Any] | None) -> dict[str, Any]:
    """Pick the jar fields out of a DOM snapshot.

    Returns the page-result shape: ``title``, ``collected``, ``target`` plus
    the internal ``debugInfo`` block, which :func:`split_page_result` removes.
    """
    snapshot = snapshot or {}
    stats = snapshot.get("stats") or []

    collected = _value_by_icon(stats, COLLECTED_ICON)
    target = _value_by_icon(stats, TARGET_ICON)
    collected_found = collected is not None
    target_found = target is not None
    used_backup = False

    if collected is None:
        collected = _value_by_position(stats, 1)
        used_backup = True
    if target is None:
        target = _value_by_position(stats, 2)
        used_backup = True

    return {
        "title": _clean(snapshot.get("title")),
        "collected": collected,
        "target": target,
        "debugInfo": {
            "ownerInfo": _clean(snapshot.get("owner")),
            "collectedFound": collected_found,
            "targetFound": target_found,
            "usedBackup": used_backup,
        },
    }


def split_page_result(raw: dict[str, Any]) -> Extraction:
    """Separate the caller-facing fields from the ``debugInfo`` block.

    The returned :class:`JarData` is built only from the three public keys,
    so no debug key can leak into it.
    """
    payload = dict(raw or {})
    debug = ExtractionDebug.from_page(payload.pop("debugInfo", None))
    payload.pop("_debug", None)
    data = JarData(
        title=payload.get("title") or None,
        collected=payload.get("collected") or None,
        target=payload.get("target") or None,
    )
    return Extraction(data=data, debug=debug)


async def extract_jar_data(page: Page) -> Extraction:
    """Snapshot *page* with :data:`SNAPSHOT_SCRIPT` and select the jar fields."""
    snapshot = await page.evaluate(SNAPSHOT_SCRIPT, SELECTORS)
    extraction = split_page_result(select_fields(snapshot))
    if extraction.debug.used_backup:
        logger.info(
            "[EXTRACT] Positional fallback used (collected icon: %s, target icon: %s)",
            extraction.debug.collected_found,
            extraction.debug.target_found,
        )
    return extraction
