"""
Async client for the Spotify Web API: the authenticated request pipeline.
"""

import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar, Union

import aiohttp
from pydantic import BaseModel, ConfigDict, TypeAdapter

from spotify_cli.exceptions import ClientError, ParseError, RateLimitedError, TransportError
from spotify_cli.models.config import ClientConfig
from spotify_cli.utils.ids import ResourceType, normalize_id, normalize_uri
from spotify_cli.utils.structured_logger import APILogger, create_api_logger

from .auth import TokenProvider, TokenResolver
from .response import classify_response

log = logging.getLogger(__name__)

T = TypeVar("T")

Payload = Union[Mapping[str, Any], list, str, int, float, bool, None]


class HttpMethod(str, Enum):
    """The HTTP methods the Spotify API uses."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RequestSpec(BaseModel):
    """A single request, built per call and discarded after dispatch."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    path: str
    payload: Any = None


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SpotifyAPIClient:
    """
    Async client for the Spotify Web API.

    Every request resolves a bearer token, resolves the URL against the
    configured prefix, places the payload according to the HTTP method and
    turns failures into ClientError subclasses. Nothing is retried, cached
    or queued here: rate limits and auth failures reach the caller.

    A single instance may serve many concurrent requests; its configuration
    never changes after construction.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        token_provider: Optional[TokenProvider] = None,
        session: Optional[aiohttp.ClientSession] = None,
        api_logger: Optional[APILogger] = None,
    ):
        """
        Initializes the API client.

        Args:
            config: Validated client settings. Defaults to the public API prefix.
            token_provider: Source of access tokens, used when the config holds
                no static token.
            session: An existing aiohttp session. The client will not close it.
            api_logger: Structured logger for request events. The caller owns
                an injected logger and closes its log file.

        Raises:
            ConfigurationError: If neither a static token nor a token provider
                was supplied.
        """
        self.config = config or ClientConfig()
        self._resolver = TokenResolver(self.config.token or None, token_provider)
        self._session = session
        self._owns_session = session is None
        self._api_log = api_logger or create_api_logger()

    @classmethod
    def with_token(cls, token: str, **kwargs: Any) -> "SpotifyAPIClient":
        """Shortcut for a client authenticated with a static token."""
        base_url = kwargs.pop("base_url", None)
        settings = {"token": token}
        if base_url:
            settings["base_url"] = base_url
        return cls(ClientConfig(**settings), **kwargs)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout),
            )
            self._owns_session = True
            log.debug(f"Created HTTP session for {self.config.base_url}")
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "SpotifyAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Identifier helpers
    @staticmethod
    def get_id(resource_type: Union[ResourceType, str], raw: str) -> str:
        return normalize_id(resource_type, raw)

    @staticmethod
    def get_uri(resource_type: Union[ResourceType, str], raw: str) -> str:
        return normalize_uri(resource_type, raw)

    def build_url(self, path: str) -> str:
        """Prepends the configured prefix unless ``path`` is already absolute."""
        if path.startswith("http"):
            return path
        return self.config.base_url + path.lstrip("/")

    @staticmethod
    def append_device_id(path: str, device_id: Optional[str]) -> str:
        """Appends a ``device_id`` query parameter to ``path``."""
        if not device_id:
            return path
        separator = "&" if "?" in path else "?"
        return f"{path}{separator}device_id={device_id}"

    def _payload_kwargs(self, spec: RequestSpec) -> dict[str, Any]:
        """
        GET sends the payload as query parameters; every other method sends
        it as a JSON body.
        """
        if spec.payload is None:
            return {}
        if spec.method is HttpMethod.GET:
            if not isinstance(spec.payload, Mapping):
                raise ValueError("GET payload must be a mapping of query parameters.")
            return {
                "params": {
                    str(key): _query_value(value)
                    for key, value in spec.payload.items()
                    if value is not None
                }
            }
        return {"json": spec.payload}

    async def dispatch(
        self, method: Union[HttpMethod, str], path: str, payload: Payload = None
    ) -> str:
        """
        Sends an authenticated request and returns the raw response text.

        Args:
            method: One of GET, POST, PUT, DELETE.
            path: Path relative to the base URL, or an absolute URL.
            payload: Query parameters for GET, JSON body otherwise.

        Returns:
            The unparsed response body.

        Raises:
            ValueError: For an unsupported method or a non-mapping GET payload.
            ClientError: A subclass describing why the request failed.
        """
        try:
            http_method = HttpMethod(method.upper() if isinstance(method, str) else method)
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {method}") from None
        spec = RequestSpec(method=http_method, path=path, payload=payload)
        return await self._send(spec)

    async def _send(self, spec: RequestSpec) -> str:
        url = self.build_url(spec.path)
        request_kwargs = self._payload_kwargs(spec)
        headers = {
            "Authorization": await self._resolver.bearer_header(),
            "Content-Type": "application/json",
        }
        session = await self._initialize_session()

        self._api_log.request_started(spec.method.value, url, spec.payload)
        start_time = time.monotonic()
        error: Optional[ClientError] = None
        status: Optional[int] = None
        try:
            async with session.request(
                spec.method.value, url, headers=headers, **request_kwargs
            ) as r:
                if 200 <= r.status < 300:
                    try:
                        text = await r.text()
                    except UnicodeDecodeError as e:
                        self._api_log.request_failed(
                            spec.method.value,
                            url,
                            repr(e),
                            (time.monotonic() - start_time) * 1000,
                            status_code=r.status,
                        )
                        raise ParseError(f"undecodable response body: {e}") from e
                    self._api_log.request_completed(
                        spec.method.value,
                        url,
                        r.status,
                        (time.monotonic() - start_time) * 1000,
                    )
                    return text
                error = await classify_response(r)
                status = r.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._api_log.request_failed(
                spec.method.value,
                url,
                repr(e),
                (time.monotonic() - start_time) * 1000,
            )
            raise TransportError(f"request error: {e!r}") from e

        if isinstance(error, RateLimitedError):
            self._api_log.rate_limit_hit(url, error.retry_after)
        self._api_log.request_failed(
            spec.method.value,
            url,
            str(error),
            (time.monotonic() - start_time) * 1000,
            status_code=status,
        )
        raise error

    async def get(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Send a GET request with ``params`` as the query string."""
        return await self.dispatch(HttpMethod.GET, path, params)

    async def post(self, path: str, payload: Payload = None) -> str:
        """Send a POST request with ``payload`` as the JSON body."""
        return await self.dispatch(HttpMethod.POST, path, payload)

    async def put(self, path: str, payload: Payload = None) -> str:
        """Send a PUT request with ``payload`` as the JSON body."""
        return await self.dispatch(HttpMethod.PUT, path, payload)

    async def delete(self, path: str, payload: Payload = None) -> str:
        """Send a DELETE request with ``payload`` as the JSON body."""
        return await self.dispatch(HttpMethod.DELETE, path, payload)

    @staticmethod
    def convert_result(text: str, model: Optional[type[T]] = None) -> Any:
        """
        Decodes a successful response body.

        Args:
            text: The raw body returned by ``dispatch``.
            model: Optional type (a pydantic model, ``list[bool]``...) to
                validate the decoded JSON into.

        Raises:
            ParseError: If the body is not JSON or does not fit ``model``.
        """
        try:
            data = json.loads(text)
            if model is None:
                return data
            return TypeAdapter(model).validate_python(data)
        except ValueError as e:
            raise ParseError(f"json parse error: {e}") from e
