"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from spotify_cli.models.errors import ApiError


class SpotifyCliError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(SpotifyCliError):
    """Raised for issues related to configuration loading or validation."""


class ClientError(SpotifyCliError):
    """Base class for every failure of a dispatched API request."""


class UnauthorizedError(ClientError):
    """Raised on HTTP 401. The token is invalid or expired."""

    def __init__(self, message: str = "request unauthorized"):
        super().__init__(message)


class RateLimitedError(ClientError):
    """
    Raised on HTTP 429.

    Attributes:
        retry_after: Seconds to wait before retrying, as sent by the server
            in the ``Retry-After`` header, or None if absent or unparseable.
    """

    def __init__(self, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        message = "exceeded request limit"
        if retry_after is not None:
            message += f" (retry after {retry_after}s)"
        super().__init__(message)


class ApiResponseError(ClientError):
    """Raised when the API returns a structured error object."""

    def __init__(self, api_error: "ApiError"):
        self.api_error = api_error
        super().__init__(f"spotify error: {api_error}")

    @property
    def status(self) -> int:
        return self.api_error.status

    @property
    def message(self) -> str:
        return self.api_error.message


class ParseError(ClientError):
    """Raised when a successful response body cannot be decoded."""


class TransportError(ClientError):
    """Raised for network-level failures (connection errors, timeouts)."""


class StatusCodeError(ClientError):
    """Raised for an HTTP failure status that carries no interpretable body."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"status code: {status}")
