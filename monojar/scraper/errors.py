"""Classified failures raised by the jar scraping pipeline.

Each subclass carries a short machine-readable ``kind`` that the HTTP layer
returns next to the human-readable message.  Transient browser/network errors
are *not* wrapped: they keep the browser library's own exception type so the
retry policy can classify them by message.
"""

from __future__ import annotations


class JarParseError(Exception):
    """Base class for every terminal pipeline failure."""

    kind: str = "unclassified"

    def __init__(self, message: str, url: str | None = None) -> None:
        self.message = message
        self.url = url
        super().__init__(message)


class TargetUnreachableError(JarParseError):
    """The availability probe could not reach the jar page."""

    kind = "target_unreachable"


class BrowserUnavailableError(JarParseError):
    """The headless browser could not be launched."""

    kind = "infrastructure_unavailable"


class SessionLeakError(JarParseError):
    """A rendering session failed to shut down cleanly."""

    kind = "session_leak"


class RedirectAnomalyError(JarParseError):
    """Navigation ended outside the jar page space."""

    kind = "redirect_anomaly"

    def __init__(self, url: str, final_url: str) -> None:
        self.final_url = final_url
        super().__init__(f"Unexpected redirect from {url} to {final_url}", url=url)


class EmptyPageError(JarParseError):
    """Monobank returned a page with no visible text."""

    kind = "empty_page"


class JarNotFoundError(JarParseError):
    """The jar page reports that the jar does not exist or was removed."""

    kind = "jar_not_found"
