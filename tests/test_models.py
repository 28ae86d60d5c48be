"""Tests for the data models."""

import unittest

from redditkit._models import (
    Credentials,
    ListingPage,
    ListingQuery,
    RequestDescriptor,
    SortLinks,
    Thing,
    VoteDirection,
)


class TestCredentials(unittest.TestCase):

    def test_creation(self):
        credentials = Credentials(client_id="id", redirect_uri="app://cb", user_agent="ua")
        self.assertIsNone(credentials.client_secret)

    def test_empty_fields_fail(self):
        with self.assertRaises(AssertionError):
            Credentials(client_id="", redirect_uri="app://cb", user_agent="ua")
        with self.assertRaises(AssertionError):
            Credentials(client_id="id", redirect_uri="", user_agent="ua")
        with self.assertRaises(AssertionError):
            Credentials(client_id="id", redirect_uri="app://cb", user_agent="")

    def test_repr_masks_secret(self):
        credentials = Credentials(client_id="id", redirect_uri="app://cb", user_agent="ua", client_secret="s3cr3t")
        self.assertNotIn("s3cr3t", repr(credentials))
        self.assertIn("****", repr(credentials))


class TestListingQuery(unittest.TestCase):

    def test_to_params_excludes_sort_and_empty_values(self):
        query = ListingQuery(sort=SortLinks.TOP, before=None, after="t3_a", count=0, limit=10)
        self.assertEqual(query.to_params(), {"after": "t3_a", "limit": 10})

    def test_with_cursor(self):
        query = ListingQuery(limit=10)
        moved = query.with_cursor(after="t3_b")
        self.assertEqual(moved, ListingQuery(limit=10, after="t3_b"))
        self.assertIsNone(query.after)
        self.assertIs(query.with_cursor(), query)

    def test_coerce(self):
        self.assertEqual(ListingQuery.coerce(None), ListingQuery())
        self.assertEqual(ListingQuery.coerce({"limit": 5}), ListingQuery(limit=5))
        query = ListingQuery(before="t3_x")
        self.assertIs(ListingQuery.coerce(query), query)

    def test_coerce_rejects_unknown_fields(self):
        with self.assertRaises(TypeError):
            ListingQuery.coerce({"unknown": 1})


class TestListingPage(unittest.TestCase):

    def test_from_api(self):
        page = ListingPage.from_api({
            "kind": "Listing",
            "data": {
                "after": "t3_b",
                "before": None,
                "children": [
                    {"kind": "t3", "data": {"name": "t3_a", "title": "Hello"}},
                    {"kind": "t3", "data": {"name": "t3_b"}},
                ],
            },
        })
        self.assertEqual(page.after, "t3_b")
        self.assertIsNone(page.before)
        self.assertEqual(len(page), 2)
        self.assertEqual(page.children[0], Thing(kind="t3", data={"name": "t3_a", "title": "Hello"}))
        self.assertFalse(page.is_empty())

    def test_from_api_empty_listing(self):
        page = ListingPage.from_api({"kind": "Listing", "data": {"children": []}})
        self.assertTrue(page.is_empty())
        self.assertIsNone(page.after)

    def test_empty_cursor_strings_become_none(self):
        page = ListingPage.from_api({"data": {"after": "", "before": "", "children": []}})
        self.assertIsNone(page.after)
        self.assertIsNone(page.before)

    def test_thing_name(self):
        self.assertEqual(Thing(kind="t1", data={"name": "t1_x"}).name, "t1_x")
        self.assertIsNone(Thing(kind="t1").name)


class TestRequestDescriptor(unittest.TestCase):

    def test_valid(self):
        descriptor = RequestDescriptor(method="POST", path="/api/vote", body={"id": "t3_a"})
        self.assertEqual(descriptor.body, {"id": "t3_a"})

    def test_rejects_unknown_method(self):
        with self.assertRaises(AssertionError):
            RequestDescriptor(method="DELETE", path="/api/vote")

    def test_rejects_relative_path(self):
        with self.assertRaises(AssertionError):
            RequestDescriptor(method="GET", path="api/v1/me")


class TestEnums(unittest.TestCase):

    def test_sort_links_values(self):
        self.assertEqual(
            [s.value for s in SortLinks],
            ["new", "hot", "random", "rising", "top", "controversial"],
        )

    def test_vote_direction_values(self):
        self.assertEqual(VoteDirection.UP, "1")
        self.assertEqual(VoteDirection.DOWN, "-1")
        self.assertEqual(VoteDirection.UNDO, "0")


if __name__ == "__main__":
    unittest.main()
