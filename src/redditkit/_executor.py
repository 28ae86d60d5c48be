"""
Request pipeline for the redditkit SDK.

RequestExecutor runs one logical API call through the following steps:

    ENSURE_TOKEN -> THROTTLE -> SEND -> CLASSIFY
                      ^                    |
                      +---- retry/renew ---+

- ENSURE_TOKEN: fetch a token if none is held.
- THROTTLE: wait for the full reset window when the server quota runs low.
- SEND: one transport call, counted in SessionState.in_progress.
- CLASSIFY: 404/403 fail, 401 renews the token once, 5xx backs off and
  resends up to max_retry times, anything else is returned to the caller.

SessionState holds the mutable state shared by every call of a session.
"""

import logging
import threading
from collections.abc import Callable

import requests

from redditkit._errors import (
    BadOauthCredentialsError,
    NotFoundError,
    RedditBackendError,
    UnauthorizedError,
)
from redditkit._http import HttpClient
from redditkit._models import RequestDescriptor
from redditkit._rate_limit import MIN_REMAINING_REQUEST_THRESHOLD, RateLimiter
from redditkit._retry import RetryContext
from redditkit._utils import build_url, compact_form, wait

logger = logging.getLogger(__name__)


class SessionState:
    """
    Mutable state owned by one session.

    Token fields and the in-flight counter are guarded by a lock; the lock is
    never held across I/O. Token acquisition itself is not serialized: two
    calls that both find no token will both fetch one.

    Attributes:
        access_token: Current bearer token, or None.
        refresh_token: Current refresh token, or None.
        in_progress: Number of transport calls sent and not yet returned.
    """

    def __init__(self, access_token: str | None = None, refresh_token: str | None = None):
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._in_progress = 0
        self._lock = threading.Lock()

    @property
    def access_token(self) -> str | None:
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self) -> str | None:
        with self._lock:
            return self._refresh_token

    @property
    def in_progress(self) -> int:
        with self._lock:
            return self._in_progress

    def set_tokens(self, access_token: str | None, refresh_token: str | None) -> None:
        """Overwrite both tokens."""
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token

    def set_access_token(self, access_token: str, refresh_token: str | None = None) -> None:
        """Store a renewed access token, and the refresh token if one came with it."""
        with self._lock:
            self._access_token = access_token
            if refresh_token:
                self._refresh_token = refresh_token

    def begin_request(self) -> int:
        with self._lock:
            self._in_progress += 1
            return self._in_progress

    def end_request(self) -> int:
        with self._lock:
            self._in_progress -= 1
            return self._in_progress


class RequestExecutor:
    """
    Runs logical API calls through the token/throttle/send/classify pipeline.

    Example:
        >>> executor = RequestExecutor(
        ...     state=SessionState(access_token="eyJ..."),
        ...     rate_limiter=RateLimiter(),
        ...     http_client=RequestsHttpClient(),
        ...     renew_token=session._renew_access_token,
        ...     user_agent="myapp/1.0",
        ... )
        >>> response = executor.make_request(RequestDescriptor(method="GET", path="/api/v1/me"))

    Args:
        state: The session state (tokens, in-flight counter).
        rate_limiter: The session's quota tracker.
        http_client: Transport used for resource calls.
        renew_token: Fetches a fresh token, stores it in `state` and notifies
            listeners. Must raise on failure.
        user_agent: User-Agent header value.
        base_url: API base URL.
        max_retry: Maximum 5xx backoff cycles per logical call.
        request_timeout: Transport timeout in seconds.
        backoff_step: Seconds multiplied by the attempt number before a resend.
        threshold: Minimum quota kept in reserve by the throttle.
    """

    def __init__(
        self,
        state: SessionState,
        rate_limiter: RateLimiter,
        http_client: HttpClient,
        renew_token: Callable[[], str],
        user_agent: str,
        base_url: str = "https://oauth.reddit.com",
        max_retry: int = 1,
        request_timeout: int = 30,
        backoff_step: float = 1.0,
        threshold: int = MIN_REMAINING_REQUEST_THRESHOLD,
    ):
        assert state is not None, "state cannot be None."
        assert rate_limiter is not None, "rate_limiter cannot be None."
        assert http_client is not None, "http_client cannot be None."
        assert renew_token is not None, "renew_token cannot be None."
        assert user_agent, "user_agent cannot be empty."
        assert base_url, "base_url cannot be empty."
        assert max_retry >= 0, "max_retry must be >= 0."
        assert request_timeout > 0, "request_timeout must be greater than 0."

        self.state = state
        self.rate_limiter = rate_limiter
        self.http_client = http_client
        self.renew_token = renew_token
        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self.max_retry = max_retry
        self.request_timeout = request_timeout
        self.backoff_step = backoff_step
        self.threshold = threshold

    def make_request(self, descriptor: RequestDescriptor) -> requests.Response:
        """
        Execute one logical call and return the successful response.

        Raises:
            NotFoundError: The API answered 404.
            UnauthorizedError: The API answered 403.
            BadOauthCredentialsError: The API answered 401 again after a forced renewal.
            RedditBackendError: The API kept answering 5xx after max_retry resends.
            redditkit.CredentialError / ResponseError: Token acquisition failed.
            requests.RequestException: Transport failure (not retried).
        """
        url = build_url(self.base_url, descriptor.path, descriptor.query)
        retry = RetryContext(max_retry=self.max_retry, backoff_step=self.backoff_step)

        if not self.state.access_token:
            self.renew_token()

        while True:
            self._throttle()
            response = self._send(descriptor, url)
            status = response.status_code

            if status == 404:
                raise NotFoundError(url)
            if status == 403:
                raise UnauthorizedError(url)

            if status == 401:
                if retry.renewed:
                    logger.error(f"{descriptor.method} {url} | 401 again after token renewal. Giving up.")
                    raise BadOauthCredentialsError(url)
                logger.warning(f"{descriptor.method} {url} | 401 Unauthorized. Renewing access token and retrying.")
                self.renew_token()
                retry = retry.mark_renewed()
                continue

            if status >= 500:
                if not retry.can_retry():
                    logger.error(
                        f"{descriptor.method} {url} | HTTP {status}. "
                        f"Max retries ({self.max_retry}) exceeded."
                    )
                    raise RedditBackendError(status_code=status)
                delay = retry.backoff_seconds()
                logger.warning(
                    f"{descriptor.method} {url} | HTTP {status}. "
                    f"Attempt {retry.attempt + 1}/{retry.max_attempts} failed, retrying in {delay:.1f}s..."
                )
                wait(delay)
                retry = retry.next_attempt()
                continue

            return response

    def _throttle(self) -> None:
        delay = self.rate_limiter.should_wait(self.state.in_progress, self.threshold)
        if delay is not None:
            wait(delay)

    def _send(self, descriptor: RequestDescriptor, url: str) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self.state.access_token}",
            "User-Agent": self.user_agent,
            **(descriptor.headers or {}),
        }

        self.state.begin_request()
        try:
            if descriptor.method == "POST":
                response = self.http_client.post(
                    url,
                    data=compact_form(descriptor.body),
                    headers=headers,
                    timeout=self.request_timeout,
                )
            else:
                response = self.http_client.get(url, headers=headers, timeout=self.request_timeout)
        finally:
            self.state.end_request()

        logger.debug(f"{descriptor.method} {url} | HTTP {response.status_code}")
        self.rate_limiter.observe(response.headers)
        return response
