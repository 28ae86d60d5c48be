"""
Data models for the redditkit SDK.

This module contains the value objects exchanged with callers:
- Credentials: OAuth2 client identity (frozen)
- ListingQuery: Sort order and cursor parameters of a listing call (frozen)
- Thing / ListingPage: The generic Reddit "Listing" envelope (frozen)
- RequestDescriptor: One API call as handed to the executor (frozen)
- SortLinks / VoteDirection: Enum catalogs used by the session operations
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any


class SortLinks(enum.StrEnum):
    """Sort orders accepted by subreddit listings."""
    NEW = "new"
    HOT = "hot"
    RANDOM = "random"
    RISING = "rising"
    TOP = "top"
    CONTROVERSIAL = "controversial"


class VoteDirection(enum.StrEnum):
    """Vote directions accepted by /api/vote."""
    UP = "1"
    DOWN = "-1"
    UNDO = "0"


@dataclass(frozen=True)
class Credentials:
    """
    OAuth2 client identity used by a session.

    Attributes:
        client_id: Reddit application client ID.
        redirect_uri: Redirect URI registered for the application.
        user_agent: User-Agent header sent with every API call.
        client_secret: Application secret; None selects the installed-client grant.
    """
    client_id: str
    redirect_uri: str
    user_agent: str
    client_secret: str | None = None

    def __post_init__(self) -> None:
        assert self.client_id, "client_id cannot be empty."
        assert self.redirect_uri, "redirect_uri cannot be empty."
        assert self.user_agent, "user_agent cannot be empty."

    def __repr__(self) -> str:
        secret = "****" if self.client_secret else None
        return (
            f"Credentials(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r}, "
            f"user_agent={self.user_agent!r}, client_secret={secret!r})"
        )


@dataclass(frozen=True)
class ListingQuery:
    """
    Parameters of a listing call.

    `sort` is turned into a path segment by the operations that support it;
    every other non-empty field becomes a query parameter.

    Example:
        >>> query = ListingQuery(sort=SortLinks.NEW, limit=25)
        >>> query.to_params()
        {'limit': 25}
        >>> query.with_cursor(after="t3_abc").after
        't3_abc'
    """
    sort: SortLinks | str | None = None
    before: str | None = None
    after: str | None = None
    count: int | None = None
    limit: int | None = None

    def to_params(self) -> dict[str, Any]:
        """Return the query parameters (sort excluded, empty values dropped)."""
        params = {
            "before": self.before,
            "after": self.after,
            "count": self.count,
            "limit": self.limit,
        }
        return {k: v for k, v in params.items() if v}

    def with_cursor(self, *, before: str | None = None, after: str | None = None) -> "ListingQuery":
        """Return a copy with the given cursor(s) set; None leaves a cursor untouched."""
        changes: dict[str, Any] = {}
        if before is not None:
            changes["before"] = before
        if after is not None:
            changes["after"] = after
        return replace(self, **changes) if changes else self

    @classmethod
    def coerce(cls, query: "ListingQuery | dict[str, Any] | None") -> "ListingQuery":
        """Accept a ListingQuery, a plain dict of its fields, or None."""
        if query is None:
            return cls()
        if isinstance(query, cls):
            return query
        return cls(**query)


@dataclass(frozen=True)
class Thing:
    """
    One child of a listing: a kind tag ("t1" comment, "t3" link, ...) and its data.

    Attributes:
        kind: Reddit type prefix of the thing.
        data: The decoded thing, as returned by the API.
    """
    kind: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        """The fullname identifier (e.g. "t3_abc123"), usable as a listing cursor."""
        return self.data.get("name")

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Thing":
        return cls(kind=payload.get("kind", ""), data=payload.get("data") or {})


@dataclass(frozen=True)
class ListingPage:
    """
    One page of a cursor-paginated listing.

    `before`/`after` are opaque cursors to be handed back to the API; they
    are not reusable as identifiers anywhere else.

    Attributes:
        before: Cursor of the previous page, or None.
        after: Cursor of the next page, or None.
        children: The things on this page, in API order.
    """
    before: str | None = None
    after: str | None = None
    children: tuple[Thing, ...] = ()

    def __len__(self) -> int:
        return len(self.children)

    def is_empty(self) -> bool:
        return not self.children

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "ListingPage":
        """
        Decode a `{"kind": "Listing", "data": {...}}` envelope.

        Example:
            >>> page = ListingPage.from_api({
            ...     "kind": "Listing",
            ...     "data": {"after": "t3_b", "before": None, "children": [{"kind": "t3", "data": {"name": "t3_a"}}]},
            ... })
            >>> page.children[0].name
            't3_a'
        """
        data = payload.get("data") or {}
        return cls(
            before=data.get("before") or None,
            after=data.get("after") or None,
            children=tuple(Thing.from_api(child) for child in data.get("children") or []),
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """
    One API call as handed to the request executor. Built per call, never retained.

    Attributes:
        method: "GET" or "POST".
        path: Path relative to the API base URL (e.g. "/api/v1/me").
        query: Query parameters; empty values are dropped.
        body: Form fields for POST calls; empty values are dropped.
        headers: Extra headers, merged over the auth and user-agent headers.
    """
    method: str
    path: str
    query: dict[str, Any] | None = None
    body: dict[str, Any] | None = None
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        assert self.method in ("GET", "POST"), f"Unsupported HTTP method: {self.method}"
        assert self.path.startswith("/"), "Request path must start with '/'."
