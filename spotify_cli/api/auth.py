"""
Resolves the bearer token attached to every API request.

The token either comes from static configuration or from a token provider,
an external collaborator (OAuth2 flows, refresh, on-disk caches) exposing
a single coroutine that returns a currently valid access token.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from spotify_cli.exceptions import ConfigurationError

log = logging.getLogger(__name__)


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that can hand out a currently valid access token."""

    async def get_access_token(self) -> str: ...


class StaticTokenProvider:
    """A token provider that always returns the same token."""

    def __init__(self, token: str):
        if not token:
            raise ConfigurationError("A static token cannot be empty.")
        self._token = token

    async def get_access_token(self) -> str:
        return self._token


class TokenResolver:
    """
    Picks the token source for an API client.

    A static token wins over a provider. The check that at least one source
    exists happens here, once, at construction time.
    """

    def __init__(
        self,
        static_token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
    ):
        """
        Initializes the resolver.

        Args:
            static_token: A fixed access token.
            token_provider: A collaborator that returns fresh tokens on demand.

        Raises:
            ConfigurationError: If neither source was configured.
        """
        if not static_token and token_provider is None:
            raise ConfigurationError(
                "No access token configured. Provide either a static token or "
                "a token provider."
            )
        if token_provider is not None and not isinstance(token_provider, TokenProvider):
            raise ConfigurationError(
                f"{type(token_provider).__name__} does not implement "
                "get_access_token()."
            )
        self._static_token = static_token or None
        self._token_provider = token_provider

    @property
    def uses_static_token(self) -> bool:
        return self._static_token is not None

    async def resolve_token(self) -> str:
        """
        Returns the token for the next request.

        The provider is asked on every call; caching is its own business.
        """
        if self._static_token is not None:
            return self._static_token
        token = await self._token_provider.get_access_token()
        log.debug("Access token obtained from token provider.")
        return token

    async def bearer_header(self) -> str:
        """Returns the value of the Authorization header."""
        return f"Bearer {await self.resolve_token()}"
