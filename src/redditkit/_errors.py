"""
Exceptions raised by the redditkit SDK.

Every failure surfaced to callers is a distinct subclass of RedditKitError,
grouped by what the caller is expected to do about it:

- CredentialError: re-authenticate (bad client credentials, expired code,
  refresh not supported for the grant).
- ResponseError: the token endpoint answered with something unusable.
- ResourceError: the requested resource is missing or forbidden, or the
  access token keeps being rejected after one renewal.
- RedditBackendError: Reddit returned 5xx (already retried internally).

Example:
    >>> try:
    ...     session.me()
    ... except CredentialError:
    ...     ...  # ask the user to log in again
    ... except RedditBackendError:
    ...     ...  # transient, try later
"""

from redditkit._retry import RetryableError


class RedditKitError(Exception):
    """
    Base class for all redditkit errors.

    Attributes:
        message: Human-readable description of the failure.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# Credential errors
# =============================================================================


class CredentialError(RedditKitError):
    """Base class for errors that require the caller to re-authenticate."""


class BadClientCredentialsError(CredentialError):
    """Raised when the token endpoint rejects the client id/secret (HTTP 401)."""

    def __init__(self) -> None:
        super().__init__("Bad client_id and/or client_secret")


class BadAuthorizationCodeError(CredentialError):
    """Raised when the authorization code is expired or was already used."""

    def __init__(self) -> None:
        super().__init__("The authorization code has expired or already been used")


class MissingRefreshTokenError(CredentialError):
    """
    Raised when the token endpoint signals that refresh is unsupported.

    Reddit answers a refresh request with ``refresh_token: "NO_TEXT"`` when the
    original grant did not issue a usable refresh token.
    """

    def __init__(self) -> None:
        super().__init__("Refresh token has not been sent")


# =============================================================================
# Response errors
# =============================================================================


class ResponseError(RedditKitError):
    """Base class for malformed or error-bearing token endpoint responses."""


class IncompleteResponseError(ResponseError):
    """
    Raised when a token response lacks mandatory fields.

    Attributes:
        missing_fields: The missing field names, in the order they are checked
            (access_token, token_type, expires_in, scope).
    """

    def __init__(self, missing_fields: list[str] | tuple[str, ...]):
        self.missing_fields = tuple(missing_fields)
        super().__init__(
            f"Mandatory value(s) missing in reddit response: {','.join(self.missing_fields)}"
        )


class TokenEndpointError(ResponseError):
    """
    Raised when the token endpoint reports an error other than invalid_grant.

    Attributes:
        error: The error string reported by the server.
    """

    def __init__(self, error: str):
        self.error = error
        super().__init__(error)


# =============================================================================
# Resource errors
# =============================================================================


class ResourceError(RedditKitError):
    """
    Base class for errors tied to a specific API resource.

    Attributes:
        url: The requested URL.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class NotFoundError(ResourceError):
    """Raised when the API answers 404."""

    def __init__(self, url: str):
        super().__init__(f"Resource not found (404): {url}", url=url)


class UnauthorizedError(ResourceError):
    """Raised when the API answers 403."""

    def __init__(self, url: str):
        super().__init__(
            f"You don't have sufficient permission to do this (Unauthorized 403): {url}",
            url=url,
        )


class BadOauthCredentialsError(ResourceError):
    """Raised when the API keeps answering 401 after a forced token renewal."""

    def __init__(self, url: str | None = None):
        super().__init__("Bad access_token used as Bearer", url=url)


# =============================================================================
# Availability errors
# =============================================================================


class RedditBackendError(RedditKitError, RetryableError):
    """
    Raised when Reddit answers 5xx and no retry is left.

    Attributes:
        status_code: The last 5xx status code observed, if known.
    """

    def __init__(self, status_code: int | None = None):
        self.status_code = status_code
        suffix = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Reddit is having issues (return 5xx code){suffix}")
