"""
Maps failed HTTP responses onto the client's error taxonomy.
"""

import json
import logging
from typing import Optional

import aiohttp

from spotify_cli.exceptions import (
    ApiResponseError,
    ClientError,
    RateLimitedError,
    StatusCodeError,
    UnauthorizedError,
)
from spotify_cli.models.errors import ApiError, api_error_from_dict

log = logging.getLogger(__name__)

# Only these statuses reliably carry a structured error object
STRUCTURED_ERROR_STATUSES = frozenset({403, 404})


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parses a Retry-After header given in whole seconds."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_api_error(body: str) -> Optional[ApiError]:
    """Decodes an error body, bare or wrapped under ``"error"``."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    return api_error_from_dict(data)


def classify(
    status: int, retry_after: Optional[str] = None, body: Optional[str] = None
) -> ClientError:
    """
    Classifies a failure from its status code, Retry-After header and body.
    """
    if status == 401:
        return UnauthorizedError()
    if status == 429:
        return RateLimitedError(parse_retry_after(retry_after))
    if status in STRUCTURED_ERROR_STATUSES and body is not None:
        api_error = parse_api_error(body)
        if api_error is not None:
            return ApiResponseError(api_error)
        log.debug(f"Unstructured error body for status {status}: {body[:200]!r}")
    return StatusCodeError(status)


async def classify_response(response: aiohttp.ClientResponse) -> ClientError:
    """
    Classifies a failed aiohttp response.

    The body is only read for statuses that may carry an error object.
    """
    body = None
    if response.status in STRUCTURED_ERROR_STATUSES:
        try:
            body = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError) as e:
            log.debug(f"Could not read error body: {e}")
    return classify(
        response.status,
        retry_after=response.headers.get("Retry-After"),
        body=body,
    )
