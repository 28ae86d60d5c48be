"""Tests for the server-quota rate limiter."""

import threading

import pytest
from requests.structures import CaseInsensitiveDict

from redditkit._rate_limit import MIN_REMAINING_REQUEST_THRESHOLD, RateLimiter


class TestRateLimiterInit:

    def test_starts_unobserved(self):
        limiter = RateLimiter()

        assert limiter.remaining is None
        assert limiter.reset_seconds is None
        assert limiter.threshold == MIN_REMAINING_REQUEST_THRESHOLD == 5

    def test_negative_threshold_fails(self):
        with pytest.raises(AssertionError, match="threshold must be >= 0"):
            RateLimiter(threshold=-1)


class TestRateLimiterObserve:

    def test_reads_both_headers(self):
        limiter = RateLimiter()

        limiter.observe({"x-ratelimit-remaining": "598", "x-ratelimit-reset": "42"})

        assert limiter.remaining == 598
        assert limiter.reset_seconds == 42

    def test_decimal_values_are_truncated(self):
        limiter = RateLimiter()

        limiter.observe({"x-ratelimit-remaining": "598.0", "x-ratelimit-reset": "42.9"})

        assert limiter.remaining == 598
        assert limiter.reset_seconds == 42

    def test_headers_are_case_insensitive(self):
        limiter = RateLimiter()

        limiter.observe({"X-Ratelimit-Remaining": "10", "X-RateLimit-Reset": "20"})

        assert limiter.remaining == 10
        assert limiter.reset_seconds == 20

    def test_accepts_requests_case_insensitive_dict(self):
        limiter = RateLimiter()

        limiter.observe(CaseInsensitiveDict({"X-Ratelimit-Remaining": "7"}))

        assert limiter.remaining == 7

    def test_last_observed_wins(self):
        limiter = RateLimiter()

        limiter.observe({"x-ratelimit-remaining": "100", "x-ratelimit-reset": "60"})
        limiter.observe({"x-ratelimit-remaining": "99", "x-ratelimit-reset": "59"})

        assert limiter.remaining == 99
        assert limiter.reset_seconds == 59

    def test_each_header_applies_independently(self):
        limiter = RateLimiter()

        limiter.observe({"x-ratelimit-remaining": "100", "x-ratelimit-reset": "60"})
        limiter.observe({"x-ratelimit-reset": "30"})

        assert limiter.remaining == 100
        assert limiter.reset_seconds == 30

    def test_unparsable_value_is_ignored(self):
        limiter = RateLimiter()

        limiter.observe({"x-ratelimit-remaining": "100"})
        limiter.observe({"x-ratelimit-remaining": "lots"})

        assert limiter.remaining == 100

    def test_empty_or_missing_headers_are_ignored(self):
        limiter = RateLimiter()

        limiter.observe(None)
        limiter.observe({})
        limiter.observe({"content-type": "application/json"})

        assert limiter.remaining is None
        assert limiter.reset_seconds is None


class TestRateLimiterShouldWait:

    def test_no_wait_before_first_observation(self):
        assert RateLimiter().should_wait(in_progress=0) is None

    def test_no_wait_when_only_one_header_seen(self):
        limiter = RateLimiter()
        limiter.observe({"x-ratelimit-remaining": "0"})

        assert limiter.should_wait(in_progress=0) is None

    def test_waits_full_reset_window_below_threshold(self):
        limiter = RateLimiter()
        limiter.observe({"x-ratelimit-remaining": "4", "x-ratelimit-reset": "9"})

        assert limiter.should_wait(in_progress=0) == 9

    def test_no_wait_at_threshold(self):
        limiter = RateLimiter()
        limiter.observe({"x-ratelimit-remaining": "5", "x-ratelimit-reset": "9"})

        assert limiter.should_wait(in_progress=0) is None

    def test_in_flight_calls_count_against_remaining(self):
        limiter = RateLimiter()
        limiter.observe({"x-ratelimit-remaining": "6", "x-ratelimit-reset": "9"})

        assert limiter.should_wait(in_progress=1) is None
        assert limiter.should_wait(in_progress=2) == 9

    def test_explicit_threshold_overrides_default(self):
        limiter = RateLimiter(threshold=5)
        limiter.observe({"x-ratelimit-remaining": "8", "x-ratelimit-reset": "3"})

        assert limiter.should_wait(in_progress=0, threshold=10) == 3
        assert limiter.should_wait(in_progress=0, threshold=0) is None

    def test_logs_warning_when_throttling(self, caplog):
        limiter = RateLimiter()
        limiter.observe({"x-ratelimit-remaining": "1", "x-ratelimit-reset": "12"})

        with caplog.at_level("WARNING", logger="redditkit._rate_limit"):
            limiter.should_wait(in_progress=0)

        assert "Waiting 12s" in caplog.text


class TestRateLimiterThreadSafety:

    def test_concurrent_observe_keeps_consistent_values(self):
        limiter = RateLimiter()

        def worker(n: int):
            for _ in range(200):
                limiter.observe({"x-ratelimit-remaining": str(n), "x-ratelimit-reset": str(n)})

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert limiter.remaining in range(1, 9)
        assert limiter.reset_seconds in range(1, 9)

    def test_repr(self):
        limiter = RateLimiter(threshold=3)
        limiter.observe({"x-ratelimit-remaining": "10", "x-ratelimit-reset": "20"})

        assert repr(limiter) == "RateLimiter(remaining=10, reset_seconds=20, threshold=3)"
