"""Tests for ListingCrawler."""

from unittest.mock import Mock

import pytest

from redditkit._models import ListingPage, ListingQuery, Thing
from redditkit._pagination import ListingCrawler


def page(*names: str, after: str | None = None, before: str | None = None) -> ListingPage:
    return ListingPage(
        before=before,
        after=after,
        children=tuple(Thing(kind="t3", data={"name": name}) for name in names),
    )


def scripted_api_call(*pages: ListingPage) -> Mock:
    return Mock(side_effect=list(pages))


class TestListingCrawlerForward:

    def test_follows_after_until_absent(self):
        api_call = scripted_api_call(
            page("t3_a", "t3_b", after="t3_b"),
            page("t3_c", after="t3_c"),
            page("t3_d"),
        )
        crawler = ListingCrawler(api_call, "python", query=ListingQuery(limit=2))

        pages = list(crawler)

        assert [p.children[0].name for p in pages] == ["t3_a", "t3_c", "t3_d"]
        assert [c.kwargs["query"] for c in api_call.call_args_list] == [
            ListingQuery(limit=2),
            ListingQuery(limit=2, after="t3_b"),
            ListingQuery(limit=2, after="t3_c"),
        ]
        assert all(c.args == ("python",) for c in api_call.call_args_list)

    def test_stops_after_empty_page_even_with_after(self):
        api_call = scripted_api_call(page("t3_a", after="t3_a"), page(after="t3_z"))

        pages = list(ListingCrawler(api_call))

        assert len(pages) == 2
        assert api_call.call_count == 2

    def test_single_call_when_first_page_has_no_after(self):
        api_call = scripted_api_call(page("t3_a"))

        assert len(list(ListingCrawler(api_call))) == 1

    def test_first_page_is_always_yielded(self):
        api_call = scripted_api_call(page())

        pages = list(ListingCrawler(api_call))

        assert len(pages) == 1
        assert pages[0].is_empty()


class TestListingCrawlerBackward:

    def test_moves_before_to_first_child_until_empty(self):
        api_call = scripted_api_call(
            page("t3_y", "t3_x"),
            page("t3_w", "t3_v"),
            page("t3_u"),
            page(),
        )
        crawler = ListingCrawler(api_call, query=ListingQuery(before="t3_z"))

        pages = list(crawler)

        assert len(pages) == 4
        assert [len(p) for p in pages] == [2, 2, 1, 0]
        assert [c.kwargs["query"].before for c in api_call.call_args_list] == ["t3_z", "t3_y", "t3_w", "t3_u"]

    def test_ignores_missing_after_in_backward_mode(self):
        api_call = scripted_api_call(page("t3_y"), page())

        pages = list(ListingCrawler(api_call, query={"before": "t3_z"}))

        assert len(pages) == 2

    def test_backward_flag(self):
        assert ListingCrawler(Mock(), query={"before": "t3_z"}).backward is True
        assert ListingCrawler(Mock()).backward is False


class TestListingCrawlerIteration:

    def test_is_lazy(self):
        api_call = scripted_api_call(page("t3_a", after="t3_a"), page("t3_b"))
        crawler = ListingCrawler(api_call)

        iterator = iter(crawler)
        api_call.assert_not_called()

        next(iterator)
        assert api_call.call_count == 1

    def test_each_iteration_restarts_from_initial_query(self):
        api_call = Mock(side_effect=lambda *args, query: page("t3_a", after=None))
        crawler = ListingCrawler(api_call, query=ListingQuery(after="t3_start"))

        list(crawler)
        list(crawler)

        assert [c.kwargs["query"].after for c in api_call.call_args_list] == ["t3_start", "t3_start"]

    def test_errors_propagate(self):
        api_call = Mock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            list(ListingCrawler(api_call))

    def test_non_callable_fails(self):
        with pytest.raises(AssertionError):
            ListingCrawler("not callable")  # type: ignore
