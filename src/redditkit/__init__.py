"""
Reddit OAuth2 client for Python.

An authenticated client for Reddit's REST API, handling token acquisition
and renewal, server-quota throttling, 5xx retries and listing pagination.

Quick Start:
    >>> from redditkit import RedditSession, ListingQuery, SortLinks
    >>> session = RedditSession(
    ...     client_id="my-client-id",
    ...     redirect_uri="myapp://callback",
    ...     user_agent="myapp/1.0 by u/me",
    ... )
    >>> page = session.list_subreddit_links("python", query=ListingQuery(sort=SortLinks.HOT))
    >>> print([thing.data["title"] for thing in page.children])

Authorization-code flow:
    >>> from redditkit import get_authorization_url, AuthorizationDuration, Scope
    >>> url = get_authorization_url(
    ...     client_id="my-client-id",
    ...     redirect_uri="myapp://callback",
    ...     duration=AuthorizationDuration.PERMANENT,
    ...     scopes=[Scope.IDENTITY, Scope.VOTE],
    ...     state="xyz",
    ... )
    >>> # ...user approves, Reddit redirects with ?code=...
    >>> token = session.exchange_code(code)

Global Configuration:
    >>> from redditkit import REDDITKIT
    >>>
    >>> # Pre-loaded with defaults + env vars
    >>> REDDITKIT.config.api.max_retry
    1
    >>>
    >>> # Custom configuration
    >>> REDDITKIT.configure(
    ...     auth={"client_id": "x", "redirect_uri": "myapp://callback", "user_agent": "myapp/1.0"},
    ...     api={"max_retry": 3, "request_timeout": 10},
    ...     rate_limit={"min_remaining_threshold": 10},
    ... )

Main Classes:
    - RedditSession: Authenticated session exposing the API operations.
    - SessionOptions: Tuning options of a session (retries, timeouts, base URL).
    - ListingCrawler: Lazy iterator over the pages of a listing.
    - ListingQuery / ListingPage / Thing: Listing request and response models.

Authentication:
    - TokenProvider: Performs OAuth2 grants against the token endpoint.
    - Token / TokenCodec: Token value object and its wire format.
    - get_authorization_url: Builds the consent page URL.

HTTP Client:
    - HttpClient: Abstract base class for HTTP transports.
    - RequestsHttpClient: Transport backed by `requests`. Default.
    - RateLimiter: Server-quota tracker used for throttling.

Errors:
    - RedditKitError: Base class of every SDK error.
    - CredentialError / ResponseError / ResourceError: Error families.
    - RedditBackendError: Reddit answered 5xx after all retries.
"""

from importlib.metadata import version as _get_version

__version__ = _get_version("redditkit")

from redditkit._auth import (
    AppOnlyGrant,
    AuthorizationCodeGrant,
    RefreshTokenGrant,
    Token,
    TokenCodec,
    TokenProvider,
    basic_auth_header,
)
from redditkit._authorization import (
    AuthorizationDuration,
    Scope,
    get_authorization_url,
)
from redditkit._config import (
    REDDITKIT,
    ApiConfig,
    AuthConfig,
    ConfigEntry,
    ConfigEnvVarError,
    ConfigValidationError,
    RateLimitConfig,
    RedditKitConfig,
)
from redditkit._errors import (
    BadAuthorizationCodeError,
    BadClientCredentialsError,
    BadOauthCredentialsError,
    CredentialError,
    IncompleteResponseError,
    MissingRefreshTokenError,
    NotFoundError,
    RedditBackendError,
    RedditKitError,
    ResourceError,
    ResponseError,
    TokenEndpointError,
    UnauthorizedError,
)
from redditkit._executor import RequestExecutor, SessionState
from redditkit._http import HttpClient, RequestsHttpClient
from redditkit._models import (
    Credentials,
    ListingPage,
    ListingQuery,
    RequestDescriptor,
    SortLinks,
    Thing,
    VoteDirection,
)
from redditkit._pagination import ListingCrawler
from redditkit._rate_limit import RateLimiter
from redditkit._retry import RetryableError, RetryContext
from redditkit._session import RedditSession, SessionOptions

__all__ = [
    "__version__",
    # Configuration
    "REDDITKIT",
    "RedditKitConfig",
    "ConfigEntry",
    "ConfigEnvVarError",
    "ConfigValidationError",
    "AuthConfig",
    "ApiConfig",
    "RateLimitConfig",
    # Session
    "RedditSession",
    "SessionOptions",
    "SessionState",
    "RequestExecutor",
    "ListingCrawler",
    # Models
    "Credentials",
    "ListingQuery",
    "ListingPage",
    "Thing",
    "RequestDescriptor",
    "SortLinks",
    "VoteDirection",
    # Authentication
    "TokenProvider",
    "Token",
    "TokenCodec",
    "AuthorizationCodeGrant",
    "RefreshTokenGrant",
    "AppOnlyGrant",
    "basic_auth_header",
    "get_authorization_url",
    "Scope",
    "AuthorizationDuration",
    # HTTP Client
    "HttpClient",
    "RequestsHttpClient",
    "RateLimiter",
    # Retry
    "RetryContext",
    "RetryableError",
    # Errors
    "RedditKitError",
    "CredentialError",
    "BadClientCredentialsError",
    "BadAuthorizationCodeError",
    "MissingRefreshTokenError",
    "ResponseError",
    "IncompleteResponseError",
    "TokenEndpointError",
    "ResourceError",
    "NotFoundError",
    "UnauthorizedError",
    "BadOauthCredentialsError",
    "RedditBackendError",
]
