"""Tests for the consent URL builder."""

import os
import unittest
from unittest.mock import patch

from redditkit._authorization import AuthorizationDuration, Scope, get_authorization_url
from redditkit._config import REDDITKIT


class TestGetAuthorizationUrl(unittest.TestCase):

    def setUp(self):
        REDDITKIT.configure(allow_env_override=False)
        self.scopes = [Scope.ACCOUNT, Scope.IDENTITY, Scope.VOTE]

    def tearDown(self):
        REDDITKIT.reset()

    def test_builds_consent_url(self):
        url = get_authorization_url(
            client_id="asdfqwerg",
            redirect_uri="myapp://callback",
            duration=AuthorizationDuration.PERMANENT,
            scopes=self.scopes,
            state="myStateString",
        )
        self.assertEqual(
            url,
            "https://www.reddit.com/api/v1/authorize?client_id=asdfqwerg&response_type=code"
            "&state=myStateString&redirect_uri=myapp%3A%2F%2Fcallback&duration=permanent"
            "&scope=account,identity,vote",
        )

    def test_mobile_uses_compact_page(self):
        url = get_authorization_url(
            client_id="asdfqwerg",
            redirect_uri="myapp://callback",
            duration=AuthorizationDuration.TEMPORARY,
            scopes=self.scopes,
            state="s",
            mobile=True,
        )
        self.assertTrue(url.startswith("https://www.reddit.com/api/v1/authorize.compact?client_id=asdfqwerg"))
        self.assertIn("duration=temporary", url)

    def test_state_is_omitted_when_none(self):
        url = get_authorization_url(
            client_id="id", redirect_uri="app://cb", duration="permanent", scopes=["read"],
        )
        self.assertNotIn("state=", url)
        self.assertIn("scope=read", url)

    def test_custom_authorize_url(self):
        url = get_authorization_url(
            client_id="id", redirect_uri="app://cb", duration="temporary", scopes=[Scope.READ],
            authorize_url="https://example.test/authorize",
        )
        self.assertTrue(url.startswith("https://example.test/authorize?"))

    def test_authorize_url_from_global_config(self):
        REDDITKIT.configure(auth={"authorize_url": "https://example.test/authorize"})

        url = get_authorization_url(
            client_id="cid", redirect_uri="app://cb", duration="permanent", scopes=["identity"],
        )

        self.assertTrue(url.startswith("https://example.test/authorize?client_id=cid"))

    def test_configured_authorize_url_with_mobile(self):
        REDDITKIT.configure(auth={"authorize_url": "https://example.test/authorize"})

        url = get_authorization_url(
            client_id="cid", redirect_uri="app://cb", duration="permanent", scopes=["identity"], mobile=True,
        )

        self.assertTrue(url.startswith("https://example.test/authorize.compact?"))

    @patch.dict(os.environ, {"REDDITKIT_AUTH_AUTHORIZE_URL": "https://env.example.test/authorize"})
    def test_authorize_url_from_env_var(self):
        REDDITKIT.reset()

        url = get_authorization_url(
            client_id="cid", redirect_uri="app://cb", duration="temporary", scopes=[Scope.READ],
        )

        self.assertTrue(url.startswith("https://env.example.test/authorize?"))

    def test_explicit_authorize_url_wins_over_config(self):
        REDDITKIT.configure(auth={"authorize_url": "https://example.test/authorize"})

        url = get_authorization_url(
            client_id="cid", redirect_uri="app://cb", duration="temporary", scopes=[Scope.READ],
            authorize_url="https://other.test/authorize",
        )

        self.assertTrue(url.startswith("https://other.test/authorize?"))

    def test_unknown_scope_fails(self):
        with self.assertRaises(ValueError):
            get_authorization_url(client_id="id", redirect_uri="app://cb", duration="temporary", scopes=["teleport"])

    def test_empty_scopes_fail(self):
        with self.assertRaises(AssertionError):
            get_authorization_url(client_id="id", redirect_uri="app://cb", duration="temporary", scopes=[])

    def test_scope_catalog(self):
        self.assertEqual(len(Scope), 28)
        self.assertEqual(Scope.PRIVATEMESSAGES, "privatemessages")


if __name__ == "__main__":
    unittest.main()
