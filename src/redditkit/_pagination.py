"""
Lazy traversal of cursor-paginated listings.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from redditkit._models import ListingPage, ListingQuery

logger = logging.getLogger(__name__)


class ListingCrawler:
    """
    Iterates over the pages of a listing operation, one API call per page.

    The direction is picked from the initial query:

    - Forward (no `before`): follow each page's `after` cursor until it is absent.
    - Backward (`before` set): move `before` to the first child of each page
      until a page comes back empty.

    Any empty page ends the traversal. Each new iteration starts over from the
    initial query; no cursor is shared between iterations.

    Example:
        >>> crawler = ListingCrawler(session.list_user_saved, "spez", query=ListingQuery(limit=100))
        >>> saved = [thing for page in crawler for thing in page.children]

    Args:
        api_call: Listing operation accepting a `query=` keyword argument.
        *args: Positional arguments forwarded to api_call on every page.
        query: Initial query (ListingQuery, dict of its fields, or None).
    """

    def __init__(
        self,
        api_call: Callable[..., ListingPage],
        *args: Any,
        query: ListingQuery | dict[str, Any] | None = None,
    ):
        assert callable(api_call), "Crawler api_call must be callable."

        self.api_call = api_call
        self.args = args
        self.query = ListingQuery.coerce(query)

    @property
    def backward(self) -> bool:
        return bool(self.query.before)

    def __iter__(self) -> Iterator[ListingPage]:
        query = self.query
        backward = self.backward
        page_number = 0

        while True:
            page = self.api_call(*self.args, query=query)
            page_number += 1
            logger.debug(
                f"Crawler page {page_number}: {len(page)} item(s), "
                f"before={page.before}, after={page.after}"
            )
            yield page

            if page.is_empty():
                return

            if backward:
                first = page.children[0].name
                if not first:
                    return
                query = query.with_cursor(before=first)
            else:
                if not page.after:
                    return
                query = query.with_cursor(after=page.after)
