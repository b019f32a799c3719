"""Tests for the download retry policy."""

from unittest.mock import patch

import httpx
import pytest

from notionsync.utils.retries import compute_backoff, parse_retry_after, should_retry


class TestShouldRetry:

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_statuses(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3)

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 410])
    def test_client_errors_not_retried(self, status):
        assert not should_retry(status, None, attempt=0, max_attempts=3)

    def test_last_attempt_never_retried(self):
        assert not should_retry(503, None, attempt=2, max_attempts=3)

    def test_timeout_retried(self):
        assert should_retry(None, httpx.ReadTimeout("t"), attempt=0, max_attempts=3)

    def test_network_error_retried(self):
        assert should_retry(None, httpx.ConnectError("c"), attempt=0, max_attempts=3)

    def test_other_exception_not_retried(self):
        assert not should_retry(None, ValueError("x"), attempt=0, max_attempts=3)

    def test_nothing_to_go_on(self):
        assert not should_retry(None, None, attempt=0, max_attempts=3)


class TestComputeBackoff:

    def test_exponential(self):
        delays = [compute_backoff(a, base=1.0, maximum=100.0, jitter=False) for a in range(4)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_capped(self):
        assert compute_backoff(10, base=1.0, maximum=30.0, jitter=False) == 30.0

    def test_retry_after_wins(self):
        assert compute_backoff(3, base=1.0, maximum=30.0, jitter=False, retry_after=0.5) == 0.5

    def test_jitter_range(self):
        with patch("notionsync.utils.retries.random.random", return_value=0.0):
            assert compute_backoff(1, base=1.0, jitter=True) == 1.0
        with patch("notionsync.utils.retries.random.random", return_value=1.0):
            assert compute_backoff(1, base=1.0, jitter=True) == 2.0


class TestParseRetryAfter:

    def test_seconds(self):
        assert parse_retry_after(httpx.Response(429, headers={"retry-after": "3"})) == 3.0

    def test_missing(self):
        assert parse_retry_after(httpx.Response(429)) is None

    def test_http_date_ignored(self):
        response = httpx.Response(429, headers={"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert parse_retry_after(response) is None
