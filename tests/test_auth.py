"""Tests for token resolution."""

import pytest

from spotify_cli.api.auth import StaticTokenProvider, TokenProvider, TokenResolver
from spotify_cli.exceptions import ConfigurationError


class TestTokenResolver:
    def test_no_source_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError, match="No access token configured"):
            TokenResolver()

    def test_empty_static_token_counts_as_missing(self):
        with pytest.raises(ConfigurationError):
            TokenResolver(static_token="")

    def test_provider_without_method_is_rejected(self):
        with pytest.raises(ConfigurationError):
            TokenResolver(token_provider=object())

    async def test_static_token(self):
        resolver = TokenResolver(static_token="abc")
        assert resolver.uses_static_token
        assert await resolver.resolve_token() == "abc"
        assert await resolver.bearer_header() == "Bearer abc"

    async def test_provider_token(self):
        resolver = TokenResolver(token_provider=StaticTokenProvider("xyz"))
        assert not resolver.uses_static_token
        assert await resolver.bearer_header() == "Bearer xyz"


class TestStaticTokenProvider:
    def test_satisfies_protocol(self):
        assert isinstance(StaticTokenProvider("abc"), TokenProvider)

    def test_rejects_empty_token(self):
        with pytest.raises(ConfigurationError):
            StaticTokenProvider("")

    async def test_returns_token(self):
        assert await StaticTokenProvider("abc").get_access_token() == "abc"
