"""
Internal helper functions for the redditkit SDK.

These functions are not part of the public API and may change without notice.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def wait(seconds: float) -> None:
    """
    Block the current thread for the given number of seconds.

    Zero or negative durations return immediately. Used for throttling and
    backoff delays, which must be exact (no jitter).

    Args:
        seconds: Duration to sleep.
    """
    if seconds <= 0:
        return
    time.sleep(seconds)


def compact_form(values: Mapping[str, Any] | None) -> dict[str, str]:
    """
    Drop empty values and stringify the rest.

    A pair is kept only when its value is present and non-empty (None, "",
    False and 0 are all dropped), matching what the Reddit endpoints expect
    for optional form fields and query parameters.

    Example:
        >>> compact_form({"grant_type": "refresh_token", "code": None, "limit": 25})
        {'grant_type': 'refresh_token', 'limit': '25'}
    """
    if not values:
        return {}
    return {key: str(value) for key, value in values.items() if value}


def build_url(base_url: str, path: str, query: Mapping[str, Any] | None = None) -> str:
    """
    Join base URL, path and the compacted, URL-encoded query string.

    Example:
        >>> build_url("https://oauth.reddit.com", "/api/info", {"id": "t3_a,t3_b"})
        'https://oauth.reddit.com/api/info?id=t3_a%2Ct3_b'
    """
    url = f"{base_url.rstrip('/')}{path}"
    params = compact_form(query)
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Return a partially masked representation of a secret for logs."""
    if not value:
        return "<none>"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}..."
