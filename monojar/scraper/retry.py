"""Generic exponential-backoff retry for browser operations.

The same policy wraps page navigation and each DOM-readiness wait; only the
operation closure differs.  Delays follow ``initial_delay * 2**(attempt - 1)``
milliseconds and are only slept *between* attempts, never after the last one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from monojar.scraper.errors import JarParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Lower-cased substrings that mark an error message as a transient network
# failure.  "timeout" also covers Playwright's navigation timeouts.
TRANSIENT_NETWORK_MARKERS: tuple[str, ...] = (
    "socket",
    "econnreset",
    "econnrefused",
    "connection",
    "timeout",
    "navigation timeout",
)


def is_transient_network_error(exc: BaseException) -> bool:
    """Return ``True`` if *exc* looks like a temporary connectivity problem.

    Already-classified pipeline errors (redirects, missing jars, ...) are
    terminal regardless of their wording.
    """
    if isinstance(exc, JarParseError):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_NETWORK_MARKERS)


def backoff_delay(attempt: int, initial_delay: int) -> int:
    """Milliseconds to wait after failed *attempt* (1-based)."""
    return initial_delay * 2 ** (attempt - 1)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    initial_delay: int = 1000,
    is_retryable: Callable[[BaseException], bool] = is_transient_network_error,
    label: str = "operation",
) -> T:
    """Await ``operation()`` up to *max_retries* times.

    Args:
        operation: Zero-argument callable returning a fresh awaitable on each
            call.
        max_retries: Total attempts allowed (values below 1 mean one attempt).
        initial_delay: Backoff base in milliseconds.
        is_retryable: Classifier deciding whether a failure may be retried.
        label: Name used in log lines.

    Raises:
        The last error raised by *operation* once it is non-retryable or the
        attempts are exhausted.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_retries or not is_retryable(exc):
                raise
            delay = backoff_delay(attempt, initial_delay)
            logger.warning(
                "[RETRY] %s failed (attempt %d/%d): %s; retrying in %d ms",
                label,
                attempt,
                max_retries,
                str(exc).splitlines()[0] if str(exc) else type(exc).__name__,
                delay,
            )
            await asyncio.sleep(delay / 1000)
            attempt += 1
