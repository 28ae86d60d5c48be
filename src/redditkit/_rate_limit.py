"""
Server-quota throttling for the redditkit SDK.

Reddit reports its rate-limit quota on every API response:

- ``x-ratelimit-remaining``: requests left in the current window.
- ``x-ratelimit-reset``: seconds until the window resets.

RateLimiter mirrors the last observed values and tells the executor whether
the next call has to wait. It does not implement a limiting algorithm of its
own: when the quota left (minus the calls already in flight) falls under the
threshold, the next call waits for the whole reported reset window.

Example:
    >>> limiter = RateLimiter()
    >>> limiter.should_wait(in_progress=0) is None  # nothing observed yet
    True
    >>> limiter.observe({"x-ratelimit-remaining": "4", "x-ratelimit-reset": "9"})
    >>> limiter.should_wait(in_progress=0)
    9
"""

import logging
import threading
from collections.abc import Mapping

logger = logging.getLogger(__name__)

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"
MIN_REMAINING_REQUEST_THRESHOLD = 5


def _parse_int_header(headers: Mapping[str, str], name: str) -> int | None:
    """
    Read an integer header case-insensitively.

    Reddit sometimes sends decimals ("598.0"); they are truncated. Missing or
    unparsable values yield None.
    """
    raw = headers.get(name)
    if raw is None:
        # Plain dicts are case-sensitive, requests' CaseInsensitiveDict is not.
        lowered = name.lower()
        raw = next((v for k, v in headers.items() if k.lower() == lowered), None)
    if raw is None or raw == "" or not isinstance(raw, (str, int, float)):
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparsable {name} header: {raw!r}")
        return None


class RateLimiter:
    """
    Tracks the server-reported quota and decides when to throttle.

    Both fields start unset and are filled lazily from the first response that
    carries the headers; every later response overwrites them
    (last-observed-wins, no averaging).

    This class is thread-safe.

    Args:
        threshold: Default minimum quota to keep in reserve.
    """

    def __init__(self, threshold: int = MIN_REMAINING_REQUEST_THRESHOLD):
        assert threshold >= 0, "threshold must be >= 0."

        self.threshold = threshold
        self._remaining: int | None = None
        self._reset_seconds: int | None = None
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int | None:
        """Last observed remaining quota, or None if never observed."""
        with self._lock:
            return self._remaining

    @property
    def reset_seconds(self) -> int | None:
        """Last observed reset window in seconds, or None if never observed."""
        with self._lock:
            return self._reset_seconds

    def observe(self, headers: Mapping[str, str] | None) -> None:
        """
        Update the quota from response headers.

        Each header is applied independently; a header that is absent leaves
        the corresponding field untouched.
        """
        if not headers:
            return

        remaining = _parse_int_header(headers, REMAINING_HEADER)
        reset = _parse_int_header(headers, RESET_HEADER)

        with self._lock:
            if remaining is not None:
                self._remaining = remaining
            if reset is not None:
                self._reset_seconds = reset

    def should_wait(self, in_progress: int, threshold: int | None = None) -> int | None:
        """
        Return how many seconds the next call must wait, or None.

        Args:
            in_progress: Calls of this session already sent but not completed.
            threshold: Minimum quota to keep in reserve (defaults to self.threshold).

        Returns:
            The full reset window when ``remaining - in_progress < threshold``,
            None otherwise or when the quota has not been observed yet.
        """
        limit = self.threshold if threshold is None else threshold

        with self._lock:
            remaining = self._remaining
            reset_seconds = self._reset_seconds

        if remaining is None or reset_seconds is None:
            return None

        real_remaining = remaining - in_progress
        if real_remaining >= limit:
            return None

        logger.warning(
            f"Rate limit nearly exhausted (remaining={remaining}, in_progress={in_progress}, "
            f"threshold={limit}). Waiting {reset_seconds}s for the window to reset."
        )
        return reset_seconds

    def __repr__(self) -> str:
        return (
            f"RateLimiter(remaining={self._remaining}, "
            f"reset_seconds={self._reset_seconds}, threshold={self.threshold})"
        )
