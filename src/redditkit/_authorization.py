"""
Consent URL for Reddit's authorization-code flow.

The user opens the URL, approves the requested scopes, and Reddit redirects
to `redirect_uri` with a `code` query parameter; hand that code to
RedditSession.exchange_code().

Example:
    >>> get_authorization_url(
    ...     client_id="asdfqwerg",
    ...     redirect_uri="myapp://callback",
    ...     duration=AuthorizationDuration.PERMANENT,
    ...     scopes=[Scope.IDENTITY, Scope.VOTE],
    ...     state="myStateString",
    ... )
    'https://www.reddit.com/api/v1/authorize?client_id=asdfqwerg&response_type=code&state=myStateString&redirect_uri=myapp%3A%2F%2Fcallback&duration=permanent&scope=identity,vote'
"""

import enum
from collections.abc import Iterable
from urllib.parse import urlencode


class AuthorizationDuration(enum.StrEnum):
    """Lifetime of the granted authorization. Only PERMANENT issues a refresh token."""
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class Scope(enum.StrEnum):
    """OAuth2 scopes understood by Reddit."""
    ACCOUNT = "account"
    CREDDITS = "creddits"
    EDIT = "edit"
    FLAIR = "flair"
    HISTORY = "history"
    IDENTITY = "identity"
    LIVEMANAGE = "livemanage"
    MODCONFIG = "modconfig"
    MODCONTRIBUTORS = "modcontributors"
    MODFLAIR = "modflair"
    MODLOG = "modlog"
    MODMAIL = "modmail"
    MODOTHERS = "modothers"
    MODPOSTS = "modposts"
    MODSELF = "modself"
    MODWIKI = "modwiki"
    MODTRAFFIC = "modtraffic"
    MYSUBREDDITS = "mysubreddits"
    PRIVATEMESSAGES = "privatemessages"
    READ = "read"
    REPORT = "report"
    SAVE = "save"
    STRUCTUREDSTYLES = "structuredstyles"
    SUBMIT = "submit"
    SUBSCRIBE = "subscribe"
    VOTE = "vote"
    WIKIEDIT = "wikiedit"
    WIKIREAD = "wikiread"


def get_authorization_url(
    client_id: str,
    redirect_uri: str,
    duration: AuthorizationDuration | str,
    scopes: Iterable[Scope | str],
    state: str | None = None,
    mobile: bool = False,
    authorize_url: str | None = None,
) -> str:
    """
    Build the URL of Reddit's consent page.

    Args:
        client_id: Reddit application client ID.
        redirect_uri: Redirect URI registered for the application.
        duration: TEMPORARY or PERMANENT.
        scopes: Requested scopes, joined with "," in the given order.
        state: Opaque value echoed back on the redirect; omitted when None.
        mobile: Use the compact (mobile) consent page.
        authorize_url: Authorization endpoint.
            If None, uses global config (REDDITKIT.config.auth.authorize_url).

    Returns:
        The consent URL.
    """
    if authorize_url is None:
        from redditkit._config import REDDITKIT
        authorize_url = REDDITKIT.config.auth.authorize_url

    assert client_id, "client_id can not be empty."
    assert authorize_url, "authorize_url can not be empty."
    assert redirect_uri, "redirect_uri can not be empty."

    scope_list = [str(Scope(scope)) for scope in scopes]
    assert scope_list, "At least one scope must be requested."

    params = {
        "client_id": client_id,
        "response_type": "code",
        "state": state,
        "redirect_uri": redirect_uri,
        "duration": str(AuthorizationDuration(duration)),
        "scope": ",".join(scope_list),
    }
    query = urlencode({k: v for k, v in params.items() if v is not None}, safe=",")

    base = f"{authorize_url.rstrip('/')}{'.compact' if mobile else ''}"
    return f"{base}?{query}"
