"""
Structured logging for API traffic.
Emits human-readable log lines and, optionally, JSON lines for later analysis.
"""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Optional

# Never written to any sink
REDACTED_KEYS = frozenset({"authorization", "token", "access_token"})


def _redact(context: dict[str, Any]) -> dict[str, Any]:
    clean = {}
    for key, value in context.items():
        if key.lower() in REDACTED_KEYS:
            continue
        if isinstance(value, dict):
            value = _redact(value)
        clean[key] = value
    return clean


class StructuredLogger:
    """
    Logger that writes ``event key=value`` lines through the standard
    logging module, plus a JSONL file when a log directory is given.

    Usage:
        logger = StructuredLogger("spotify_cli.api")
        logger.info("api_request_completed", method="GET", status_code=200)
    """

    def __init__(self, name: str, log_dir: Optional[Path] = None):
        self.name = name
        self._logger = logging.getLogger(name)
        self._json_file: Optional[IO[str]] = None

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"spotify_cli_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    @property
    def json_enabled(self) -> bool:
        return self._json_file is not None and not self._json_file.closed

    def set_session_context(self, **kwargs: Any) -> None:
        """Set session-level context that appears in all JSON entries."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context: Any) -> str:
        parts = [f"[{event}]"]
        parts.extend(f"{key}={value}" for key, value in context.items())
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context: Any) -> None:
        if not self.json_enabled:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }
        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            self._logger.warning(f"JSON logging failed: {e}")

    def log(self, level: int, event: str, **context: Any) -> None:
        context = _redact(context)
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format_message(event, **context))
        self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context: Any) -> None:
        self.log(logging.DEBUG, event, **context)

    def info(self, event: str, **context: Any) -> None:
        self.log(logging.INFO, event, **context)

    def warning(self, event: str, **context: Any) -> None:
        self.log(logging.WARNING, event, **context)

    def error(self, event: str, **context: Any) -> None:
        self.log(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close the JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class APILogger:
    """Specialized logger for API request events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def request_started(self, method: str, url: str, payload: Any = None):
        """Log API request started."""
        if isinstance(payload, dict):
            payload = _redact(payload)
        self.logger.debug("api_request_started", method=method, url=url, payload=payload)

    def request_completed(
        self, method: str, url: str, status_code: int, duration_ms: float
    ):
        """Log API request completed."""
        self.logger.debug(
            "api_request_completed",
            method=method,
            url=url,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
        )

    def request_failed(
        self,
        method: str,
        url: str,
        error: str,
        duration_ms: float,
        status_code: Optional[int] = None,
    ):
        """Log API request failed."""
        self.logger.warning(
            "api_request_failed",
            method=method,
            url=url,
            status_code=status_code,
            error=error,
            duration_ms=round(duration_ms, 2),
        )

    def rate_limit_hit(self, url: str, retry_after_s: Optional[int] = None):
        """Log rate limit hit."""
        self.logger.warning(
            "api_rate_limit_hit",
            url=url,
            retry_after_s=retry_after_s,
        )


def create_api_logger(log_dir: Optional[Path] = None) -> APILogger:
    """Create the API logger, with a JSON sink when ``log_dir`` is given."""
    return APILogger(StructuredLogger("spotify_cli.api", log_dir=log_dir))
