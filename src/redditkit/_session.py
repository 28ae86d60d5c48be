"""
Authenticated Reddit session.

RedditSession is the entry point of the SDK: it owns the credentials, the
token state, the rate limiter and the token listeners, and exposes the Reddit
API operations on top of the request executor.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from redditkit._auth import Token, TokenProvider
from redditkit._executor import RequestExecutor, SessionState
from redditkit._http import HttpClient
from redditkit._models import (
    Credentials,
    ListingPage,
    ListingQuery,
    RequestDescriptor,
    VoteDirection,
)
from redditkit._pagination import ListingCrawler
from redditkit._rate_limit import RateLimiter

if TYPE_CHECKING:
    from redditkit._config import ApiConfig, RateLimitConfig

logger = logging.getLogger(__name__)

TokenListener = Callable[[str], Any]

USER_LISTINGS = (
    "submitted",
    "comments",
    "upvoted",
    "downvoted",
    "hidden",
    "saved",
    "gilded",
    "overview",
)


@dataclass(frozen=True)
class SessionOptions:
    """
    Tuning options of a RedditSession.

    Fields set to None are filled from the global config via with_defaults_from().

    Attributes:
        max_retry: Maximum backoff-then-resend cycles on 5xx (0 disables retries).
        request_timeout: HTTP request timeout in seconds.
        base_url: Base URL of the resource API.
        min_remaining_threshold: Quota kept in reserve before throttling.
        backoff_step: Seconds multiplied by the attempt number before a resend.
    """
    max_retry: int | None = None
    request_timeout: int | None = None
    base_url: str | None = None
    min_remaining_threshold: int | None = None
    backoff_step: float | None = None

    def with_defaults_from(self, api: "ApiConfig", rate_limit: "RateLimitConfig") -> "SessionOptions":
        """
        Returns a new SessionOptions with None values filled from config.

        Example:
            >>> options = SessionOptions(max_retry=5)
            >>> resolved = options.with_defaults_from(REDDITKIT.config.api, REDDITKIT.config.rate_limit)
            >>> resolved.max_retry  # 5 (user-defined)
        """
        return SessionOptions(
            max_retry=self.max_retry if self.max_retry is not None else api.max_retry,
            request_timeout=self.request_timeout if self.request_timeout is not None else api.request_timeout,
            base_url=self.base_url if self.base_url is not None else api.base_url,
            min_remaining_threshold=(
                self.min_remaining_threshold
                if self.min_remaining_threshold is not None
                else rate_limit.min_remaining_threshold
            ),
            backoff_step=self.backoff_step if self.backoff_step is not None else api.backoff_step,
        )


class RedditSession:
    """
    Authenticated client for Reddit's OAuth API.

    A session fetches its access token lazily on the first call (refresh grant
    when a refresh token is known, app-only grant otherwise), renews it once
    when the API answers 401, throttles itself on the server-reported quota
    and retries 5xx answers with a linear backoff.

    Sessions are thread-safe. Nothing is shared between two sessions.

    Example:
        >>> session = RedditSession(
        ...     client_id="my-client-id",
        ...     redirect_uri="myapp://callback",
        ...     user_agent="myapp/1.0 by u/me",
        ... )
        >>> session.on_token(lambda token: store.save(token))
        >>> page = session.list_subreddit_links("python", query=ListingQuery(sort=SortLinks.NEW))
        >>> for thing in page.children:
        ...     print(thing.data["title"])

    Attributes:
        credentials: The resolved OAuth2 client identity.
        options: The resolved session options.
        rate_limiter: The quota tracker of this session.
    """

    def __init__(
        self,
        client_id: str | None = None,
        redirect_uri: str | None = None,
        user_agent: str | None = None,
        client_secret: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        options: SessionOptions | None = None,
        http_client: HttpClient | None = None,
        token_provider: TokenProvider | None = None,
    ):
        """
        Initialize the session.

        Args:
            client_id: Reddit application client ID.
                If None, uses global config (REDDITKIT.config.auth.client_id).
            redirect_uri: Redirect URI registered for the application.
                If None, uses global config.
            user_agent: User-Agent sent with every call. If None, uses global config.
            client_secret: Application secret. If None, uses global config;
                still None selects the installed-client grant.
            access_token: Starting access token (skips the first token fetch).
            refresh_token: Starting refresh token.
            options: Tuning options. Partial options are merged with config
                defaults via with_defaults_from().
            http_client: Transport for API calls. If None, uses RequestsHttpClient.
            token_provider: Token endpoint client. If None, one is built from
                the credentials and REDDITKIT.config.auth.token_url.

        Raises:
            AssertionError: If client_id, redirect_uri or user_agent end up empty.
        """
        # Get global config for defaults
        from redditkit._config import REDDITKIT
        cfg = REDDITKIT.config

        resolved_options = (options or SessionOptions()).with_defaults_from(cfg.api, cfg.rate_limit)

        client_id = client_id or cfg.auth.client_id
        redirect_uri = redirect_uri or cfg.auth.redirect_uri
        user_agent = user_agent or cfg.auth.user_agent
        if client_secret is None:
            client_secret = cfg.auth.client_secret

        assert client_id, "Session client_id can not be empty."
        assert redirect_uri, "Session redirect_uri can not be empty."
        assert user_agent, "Session user_agent can not be empty."

        if not http_client:
            from redditkit._http import RequestsHttpClient
            http_client = RequestsHttpClient()

        if not token_provider:
            token_provider = TokenProvider(
                client_id=client_id,
                client_secret=client_secret,
                token_url=cfg.auth.token_url,
                timeout=resolved_options.request_timeout,
            )

        self.credentials = Credentials(
            client_id=client_id,
            redirect_uri=redirect_uri,
            user_agent=user_agent,
            client_secret=client_secret,
        )
        self.options = resolved_options
        self.token_provider = token_provider
        self.rate_limiter = RateLimiter(threshold=resolved_options.min_remaining_threshold)

        self._state = SessionState(access_token=access_token, refresh_token=refresh_token)
        self._listeners: list[TokenListener] = []
        self._listeners_lock = threading.Lock()
        self._executor = RequestExecutor(
            state=self._state,
            rate_limiter=self.rate_limiter,
            http_client=http_client,
            renew_token=self._renew_access_token,
            user_agent=user_agent,
            base_url=resolved_options.base_url,
            max_retry=resolved_options.max_retry,
            request_timeout=resolved_options.request_timeout,
            backoff_step=resolved_options.backoff_step,
            threshold=resolved_options.min_remaining_threshold,
        )

    # ======================
    # State
    # ======================

    @property
    def access_token(self) -> str | None:
        return self._state.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._state.refresh_token

    @property
    def in_progress(self) -> int:
        """Number of API calls of this session currently on the wire."""
        return self._state.in_progress

    def set_tokens(self, access_token: str | None = None, refresh_token: str | None = None) -> None:
        """
        Replace both held tokens. Omitted tokens become None.

        The next call uses the given access token as is, without going
        through the token endpoint.
        """
        self._state.set_tokens(access_token, refresh_token)

    # ======================
    # Token listeners
    # ======================

    def on_token(self, listener: TokenListener) -> None:
        """
        Register a callable invoked with the new access token every time one is obtained.

        Listeners run synchronously, in registration order, on the thread that
        obtained the token.
        """
        assert callable(listener), "Token listener must be callable."
        with self._listeners_lock:
            self._listeners.append(listener)

    def off_token(self, listener: TokenListener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        with self._listeners_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify_listeners(self, access_token: str) -> None:
        """
        Notifies all registered listeners about a new access token.

        Exceptions raised by listeners are logged but do not interrupt the call.
        """
        with self._listeners_lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(access_token)
            except Exception as e:
                listener_name = getattr(listener, "__name__", listener.__class__.__name__)
                logger.warning(f"Token listener `{listener_name}` raised an exception: {e}")

    # ======================
    # Token acquisition
    # ======================

    def exchange_code(self, code: str) -> Token:
        """
        Exchange an authorization code (from the consent redirect) for tokens.

        The resulting tokens are stored in the session and listeners are notified.

        Raises:
            BadAuthorizationCodeError: The code expired or was already used.
            BadClientCredentialsError: The client id/secret were rejected.
        """
        token = self.token_provider.obtain_from_code(code, self.credentials.redirect_uri)
        self._state.set_tokens(token.access_token, token.refresh_token)
        self._notify_listeners(token.access_token)
        return token

    def _renew_access_token(self) -> str:
        refresh_token = self._state.refresh_token
        if refresh_token:
            logger.info("Renewing access token with the refresh token grant.")
            token = self.token_provider.refresh(refresh_token)
        else:
            logger.info("Requesting an application-only access token.")
            token = self.token_provider.obtain_app_only(self.credentials.redirect_uri)

        self._state.set_access_token(token.access_token, token.refresh_token)
        self._notify_listeners(token.access_token)
        return token.access_token

    # ======================
    # API operations
    # ======================

    def make_request(self, descriptor: RequestDescriptor) -> Any:
        """Run an arbitrary API call and return its decoded JSON body."""
        response = self._executor.make_request(descriptor)
        return response.json()

    def me(self) -> dict[str, Any]:
        """Return the identity of the authenticated user."""
        return self.make_request(RequestDescriptor(method="GET", path="/api/v1/me"))

    def vote(self, id: str, direction: VoteDirection | str) -> Any:
        """
        Vote on a link or comment.

        Args:
            id: Fullname of the thing (e.g. "t3_abc123").
            direction: VoteDirection.UP, DOWN or UNDO.
        """
        assert id, "Vote id can not be empty."
        return self.make_request(RequestDescriptor(
            method="POST",
            path="/api/vote",
            body={"id": id, "dir": str(VoteDirection(direction)), "rank": 2},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        ))

    def list_subreddit_links(
        self,
        subreddit: str,
        query: ListingQuery | dict[str, Any] | None = None,
    ) -> ListingPage:
        """List the links of a subreddit, optionally sorted (new, hot, top, ...)."""
        assert subreddit, "Subreddit name can not be empty."
        query = ListingQuery.coerce(query)
        path = f"/r/{subreddit}"
        if query.sort:
            path = f"{path}/{query.sort}"
        payload = self.make_request(RequestDescriptor(method="GET", path=path, query=query.to_params()))
        return ListingPage.from_api(payload)

    def list_link_comments(self, subreddit: str, link_id: str) -> tuple[ListingPage, ListingPage]:
        """
        Return the link itself and its comment tree.

        Returns:
            A pair (link listing, comments listing).
        """
        assert subreddit, "Subreddit name can not be empty."
        assert link_id, "Link id can not be empty."
        payload = self.make_request(
            RequestDescriptor(method="GET", path=f"/r/{subreddit}/comments/{link_id}")
        )
        link, comments = payload
        return ListingPage.from_api(link), ListingPage.from_api(comments)

    def get_info(self, ids: list[str]) -> ListingPage:
        """Return the things identified by their fullnames."""
        assert ids, "Info ids can not be empty."
        payload = self.make_request(
            RequestDescriptor(method="GET", path="/api/info", query={"id": ",".join(ids)})
        )
        return ListingPage.from_api(payload)

    def get_links(self, ids: list[str]) -> ListingPage:
        """Return the links identified by their fullnames ("t3_...")."""
        return self.get_info(ids)

    def list_user_submitted(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "submitted", query)

    def list_user_comments(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "comments", query)

    def list_user_upvoted(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "upvoted", query)

    def list_user_downvoted(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "downvoted", query)

    def list_user_hidden(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "hidden", query)

    def list_user_saved(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "saved", query)

    def list_user_gilded(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "gilded", query)

    def list_user_overview(self, username: str, query: ListingQuery | dict[str, Any] | None = None) -> ListingPage:
        return self._list_user(username, "overview", query)

    def _list_user(
        self,
        username: str,
        where: str,
        query: ListingQuery | dict[str, Any] | None,
    ) -> ListingPage:
        assert username, "Username can not be empty."
        assert where in USER_LISTINGS, f"Unknown user listing: {where}"
        query = ListingQuery.coerce(query)
        payload = self.make_request(
            RequestDescriptor(method="GET", path=f"/user/{username}/{where}", query=query.to_params())
        )
        return ListingPage.from_api(payload)

    def crawl(
        self,
        api_call: Callable[..., ListingPage],
        *args: Any,
        query: ListingQuery | dict[str, Any] | None = None,
    ) -> ListingCrawler:
        """
        Iterate lazily over every page of a listing operation.

        Example:
            >>> for page in session.crawl(session.list_subreddit_links, "python", query={"limit": 100}):
            ...     handle(page.children)
        """
        return ListingCrawler(api_call, *args, query=query)

    def __repr__(self) -> str:
        return f"RedditSession(credentials={self.credentials!r}, options={self.options!r})"
