"""Data models for the jar scraping pipeline."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

JAR_URL_PATTERN = re.compile(r"^https://send\.monobank\.ua/jar/[A-Za-z0-9]+$")

# Path fragment that still counts as "a jar page" after navigation.
JAR_PATH_MARKER = "send.monobank.ua/jar/"


def is_valid_jar_url(url: str | None) -> bool:
    """Return ``True`` if *url* is a public Monobank jar link."""
    return bool(url) and JAR_URL_PATTERN.match(url) is not None


@dataclass(frozen=True)
class JarData:
    """Caller-facing result of parsing a jar page.

    Any field may be ``None`` when the page did not expose it; partial data
    is a valid result.
    """

    title: str | None
    collected: str | None
    target: str | None

    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.collected) and bool(self.target)

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)

    def progress(self) -> float:
        """Percent of the target collected, capped at 100; 0 if unknown."""
        collected = parse_amount(self.collected)
        target = parse_amount(self.target)
        if not collected or not target:
            return 0.0
        return min(collected / target * 100, 100.0)


def parse_amount(value: str | None) -> float:
    """Turn a display amount such as ``"48 710 ₴"`` into ``48710.0``.

    Everything except digits and the decimal point is dropped; unparseable
    input yields ``0.0``.
    """
    if not value:
        return 0.0
    digits = re.sub(r"[^\d.]", "", value)
    try:
        return float(digits)
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class ExtractionDebug:
    """Server-side diagnostics recorded by the in-page extractor.

    Never serialised to callers.
    """

    owner_info: str | None = None
    collected_found: bool = False
    target_found: bool = False
    used_backup: bool = False

    @classmethod
    def from_page(cls, raw: dict[str, Any] | None) -> "ExtractionDebug":
        """Build from the camelCase block returned by the page script."""
        raw = raw or {}
        return cls(
            owner_info=raw.get("ownerInfo"),
            collected_found=bool(raw.get("collectedFound")),
            target_found=bool(raw.get("targetFound")),
            used_backup=bool(raw.get("usedBackup")),
        )


@dataclass(frozen=True)
class Extraction:
    """Pairs the public :class:`JarData` with its private debug block."""

    data: JarData
    debug: ExtractionDebug
