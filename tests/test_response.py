"""Tests for failed-response classification."""

import pytest

from spotify_cli.api.response import classify, parse_api_error, parse_retry_after
from spotify_cli.exceptions import (
    ApiResponseError,
    RateLimitedError,
    StatusCodeError,
    UnauthorizedError,
)
from spotify_cli.models.errors import PlayerApiError, RegularApiError


class TestParseRetryAfter:
    @pytest.mark.parametrize(
        "value, expected",
        [("30", 30), (" 7 ", 7), ("0", 0), (None, None), ("soon", None), ("1.5", None)],
    )
    def test_values(self, value, expected):
        assert parse_retry_after(value) == expected


class TestParseApiError:
    def test_wrapped_regular_error(self):
        error = parse_api_error('{"error": {"status": 404, "message": "not found"}}')
        assert error == RegularApiError(status=404, message="not found")

    def test_bare_regular_error(self):
        error = parse_api_error('{"status": 403, "message": "forbidden"}')
        assert isinstance(error, RegularApiError)
        assert error.status == 403

    def test_player_error_selected_by_reason(self):
        error = parse_api_error(
            '{"error": {"status": 403, "message": "Player command failed: '
            'Premium required", "reason": "PREMIUM_REQUIRED"}}'
        )
        assert isinstance(error, PlayerApiError)
        assert error.reason == "PREMIUM_REQUIRED"
        assert str(error) == (
            "403 (PREMIUM_REQUIRED): Player command failed: Premium required"
        )

    @pytest.mark.parametrize(
        "body",
        ["", "<html>nope</html>", "[]", '{"error": "invalid_client"}', '{"message": "x"}'],
    )
    def test_unrecognised_bodies(self, body):
        assert parse_api_error(body) is None


class TestClassify:
    def test_401_is_unauthorized(self):
        assert isinstance(classify(401), UnauthorizedError)

    def test_401_ignores_body(self):
        error = classify(401, body='{"error": {"status": 401, "message": "expired"}}')
        assert isinstance(error, UnauthorizedError)

    def test_429_with_retry_after(self):
        error = classify(429, retry_after="30")
        assert isinstance(error, RateLimitedError)
        assert error.retry_after == 30

    def test_429_without_retry_after(self):
        error = classify(429)
        assert isinstance(error, RateLimitedError)
        assert error.retry_after is None

    def test_404_with_error_body(self):
        error = classify(404, body='{"error":{"status":404,"message":"not found"}}')
        assert isinstance(error, ApiResponseError)
        assert error.api_error == RegularApiError(status=404, message="not found")
        assert error.status == 404
        assert error.message == "not found"

    def test_403_player_error(self):
        error = classify(
            403,
            body='{"error":{"status":403,"message":"Restricted","reason":"UNKNOWN"}}',
        )
        assert isinstance(error, ApiResponseError)
        assert isinstance(error.api_error, PlayerApiError)

    def test_404_with_unparseable_body(self):
        error = classify(404, body="Not Found")
        assert isinstance(error, StatusCodeError)
        assert error.status == 404

    def test_404_without_body(self):
        error = classify(404)
        assert isinstance(error, StatusCodeError)

    @pytest.mark.parametrize("status", [400, 500, 502, 503])
    def test_other_statuses_ignore_body(self, status):
        error = classify(
            status, body='{"error": {"status": 400, "message": "bad request"}}'
        )
        assert isinstance(error, StatusCodeError)
        assert error.status == status


class TestClassifyResponse:
    async def test_rate_limit_header_from_live_response(self, client, spotify_server):
        spotify_server.add("GET", "me", status=429, headers={"Retry-After": "30"})
        with pytest.raises(RateLimitedError) as exc_info:
            await client.get("me")
        assert exc_info.value.retry_after == 30

    async def test_structured_404_from_live_response(self, client, spotify_server):
        spotify_server.add(
            "GET",
            "tracks/missing",
            status=404,
            body={"error": {"status": 404, "message": "not found"}},
        )
        with pytest.raises(ApiResponseError) as exc_info:
            await client.get("tracks/missing")
        assert exc_info.value.api_error == RegularApiError(
            status=404, message="not found"
        )
        assert str(exc_info.value) == "spotify error: 404: not found"

    async def test_unstructured_404_from_live_response(self, client, spotify_server):
        spotify_server.add("GET", "tracks/html", status=404, body="<h1>Not Found</h1>")
        with pytest.raises(StatusCodeError) as exc_info:
            await client.get("tracks/html")
        assert exc_info.value.status == 404
