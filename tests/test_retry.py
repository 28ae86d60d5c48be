"""Tests for retry bookkeeping."""

import unittest

from redditkit._errors import RedditBackendError, RedditKitError
from redditkit._retry import RetryableError, RetryContext


class TestRetryContext(unittest.TestCase):
    """Tests for RetryContext."""

    def test_defaults(self):
        retry = RetryContext(max_retry=1)
        self.assertEqual(retry.attempt, 0)
        self.assertFalse(retry.renewed)
        self.assertEqual(retry.max_attempts, 2)

    def test_backoff_is_linear_in_attempt(self):
        retry = RetryContext(max_retry=5)
        delays = []
        while retry.can_retry():
            delays.append(retry.backoff_seconds())
            retry = retry.next_attempt()
        self.assertEqual(delays, [0.0, 1.0, 2.0, 3.0, 4.0])
        self.assertEqual(retry.attempt, 5)

    def test_custom_backoff_step(self):
        retry = RetryContext(max_retry=3, attempt=2, backoff_step=0.5)
        self.assertEqual(retry.backoff_seconds(), 1.0)

    def test_zero_max_retry_never_retries(self):
        retry = RetryContext(max_retry=0)
        self.assertFalse(retry.can_retry())
        self.assertEqual(retry.max_attempts, 1)

    def test_mark_renewed_keeps_attempt(self):
        retry = RetryContext(max_retry=2).next_attempt().mark_renewed()
        self.assertTrue(retry.renewed)
        self.assertEqual(retry.attempt, 1)

    def test_context_is_immutable(self):
        retry = RetryContext(max_retry=2)
        retry.next_attempt()
        self.assertEqual(retry.attempt, 0)

    def test_negative_max_retry_fails(self):
        with self.assertRaises(AssertionError):
            RetryContext(max_retry=-1)


class TestRetryableError(unittest.TestCase):
    """Tests for the RetryableError marker."""

    def test_backend_error_is_retryable(self):
        error = RedditBackendError(status_code=502)
        self.assertIsInstance(error, RetryableError)
        self.assertIsInstance(error, RedditKitError)

    def test_backend_error_message(self):
        self.assertEqual(
            str(RedditBackendError()),
            "Reddit is having issues (return 5xx code)",
        )
        self.assertEqual(
            str(RedditBackendError(status_code=502)),
            "Reddit is having issues (return 5xx code) (HTTP 502)",
        )


if __name__ == "__main__":
    unittest.main()
