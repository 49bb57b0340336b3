"""Tests for event-style API logging."""

import json
import logging

from spotify_cli.utils.structured_logger import (
    APILogger,
    StructuredLogger,
    create_api_logger,
)


def read_entries(log_dir):
    (path,) = log_dir.glob("*.jsonl")
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestStructuredLogger:
    def test_message_format(self, caplog):
        caplog.set_level(logging.INFO, logger="spotify_cli.test")
        StructuredLogger("spotify_cli.test").info("something_happened", count=3)
        assert "[something_happened] count=3" in caplog.text

    def test_no_file_without_log_dir(self):
        assert not StructuredLogger("spotify_cli.test").json_enabled

    def test_jsonl_sink(self, tmp_path):
        with StructuredLogger("spotify_cli.test", log_dir=tmp_path) as logger:
            logger.set_session_context(profile="ci")
            logger.warning("first", a=1)
            logger.error("second")
        assert not logger.json_enabled

        entries = read_entries(tmp_path)
        assert [e["event"] for e in entries] == ["first", "second"]
        assert entries[0]["level"] == "WARNING"
        assert entries[0]["a"] == 1
        assert entries[0]["profile"] == "ci"
        assert "session_id" in entries[1]

    def test_secrets_are_redacted(self, tmp_path, caplog):
        caplog.set_level(logging.DEBUG, logger="spotify_cli.test")
        with StructuredLogger("spotify_cli.test", log_dir=tmp_path) as logger:
            logger.debug(
                "headers", token="t0p", nested={"Authorization": "Bearer t0p", "x": 1}
            )
        assert "t0p" not in caplog.text
        (entry,) = read_entries(tmp_path)
        assert "token" not in entry
        assert entry["nested"] == {"x": 1}


class TestAPILogger:
    def test_request_lifecycle_events(self, tmp_path):
        api_log = create_api_logger(log_dir=tmp_path)
        api_log.request_started("POST", "http://x/v1/me", {"access_token": "s", "q": 1})
        api_log.request_completed("POST", "http://x/v1/me", 201, 12.3456)
        api_log.rate_limit_hit("http://x/v1/me", 7)
        api_log.request_failed("GET", "http://x/v1/me", "boom", 1.0, status_code=500)
        api_log.logger.close()

        entries = read_entries(tmp_path)
        assert [e["event"] for e in entries] == [
            "api_request_started",
            "api_request_completed",
            "api_rate_limit_hit",
            "api_request_failed",
        ]
        assert entries[0]["payload"] == {"q": 1}
        assert entries[1]["duration_ms"] == 12.35
        assert entries[2]["retry_after_s"] == 7
        assert entries[3]["status_code"] == 500

    def test_wraps_named_logger(self):
        assert isinstance(create_api_logger(), APILogger)
        assert create_api_logger().logger.name == "spotify_cli.api"
