"""
Spotify API Layer.

This package handles all communication with the Spotify Web API.
"""

from .auth import StaticTokenProvider, TokenProvider, TokenResolver
from .client import HttpMethod, RequestSpec, SpotifyAPIClient
from .endpoints import SpotifyEndpoints
from .response import classify, classify_response

__all__ = [
    "HttpMethod",
    "RequestSpec",
    "SpotifyAPIClient",
    "SpotifyEndpoints",
    "StaticTokenProvider",
    "TokenProvider",
    "TokenResolver",
    "classify",
    "classify_response",
]
