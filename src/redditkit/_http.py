"""
HTTP transport abstraction for the redditkit SDK.

The request executor never talks to `requests` directly: it goes through an
HttpClient, which sends exactly one HTTP call and returns the response
whatever its status code. Authentication, throttling and retries live above
this layer.

Available implementations:
    - RequestsHttpClient: Default transport backed by `requests`. Default.

Example:
    >>> from redditkit._http import RequestsHttpClient
    >>> client = RequestsHttpClient()
    >>> response = client.get(
    ...     "https://oauth.reddit.com/api/v1/me",
    ...     headers={"Authorization": "Bearer eyJ...", "User-Agent": "myapp/1.0"},
    ... )
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, override

import requests

logger = logging.getLogger(__name__)


# =============================================================================
# Abstract Base Class
# =============================================================================


class HttpClient(ABC):
    """
    Abstract base class for HTTP transports.

    Implementations must not raise on HTTP error statuses: the caller
    classifies the status code itself. Transport failures (DNS, connection,
    timeout) are raised as `requests.RequestException`.

    Example:
        >>> class MyHttpClient(HttpClient):
        ...     def get(self, url, headers=None, timeout=30):
        ...         return requests.get(url, headers=headers, timeout=timeout)
        ...     def post(self, url, data=None, headers=None, timeout=30):
        ...         return requests.post(url, data=data, headers=headers, timeout=timeout)
    """

    @abstractmethod
    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: int = 30,
    ) -> requests.Response:
        """
        Execute a GET request.

        Args:
            url: The full URL to request, query string included.
            headers: Headers to send.
            timeout: Request timeout in seconds.

        Returns:
            The HTTP response.

        Raises:
            requests.RequestException: If the HTTP request fails.
        """
        pass

    @abstractmethod
    def post(
        self,
        url: str,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: int = 30,
    ) -> requests.Response:
        """
        Execute a POST request with a form-encoded body.

        Args:
            url: The full URL to request.
            data: Key/value pairs sent as application/x-www-form-urlencoded.
            headers: Headers to send.
            timeout: Request timeout in seconds.

        Returns:
            The HTTP response.

        Raises:
            requests.RequestException: If the HTTP request fails.
        """
        pass


# =============================================================================
# requests Implementation
# =============================================================================


class RequestsHttpClient(HttpClient):
    """
    HTTP transport backed by the `requests` library.

    Example:
        >>> client = RequestsHttpClient()
        >>> response = client.post(
        ...     "https://oauth.reddit.com/api/vote",
        ...     data={"id": "t3_abc", "dir": "1"},
        ...     headers={"Authorization": "Bearer eyJ..."},
        ... )
    """

    @override
    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: int = 30,
    ) -> requests.Response:
        assert url, "URL cannot be empty."
        assert timeout is not None, "Timeout cannot be None."
        assert timeout > 0, "Timeout must be greater than 0."

        logger.debug(f"GET {url}")
        return requests.get(url, headers=headers, timeout=timeout)

    @override
    def post(
        self,
        url: str,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: int = 30,
    ) -> requests.Response:
        assert url, "URL cannot be empty."
        assert timeout is not None, "Timeout cannot be None."
        assert timeout > 0, "Timeout must be greater than 0."

        logger.debug(f"POST {url}")
        return requests.post(url, data=data, headers=headers, timeout=timeout)
