"""
Utilities for normalizing Spotify identifiers.

Callers may pass a bare ID (``4iV5W9uYEdYUVa79Axb7Rh``), a resource URI
(``spotify:track:4iV5W9uYEdYUVa79Axb7Rh``) or a URL-like path
(``open.spotify.com/track/4iV5W9uYEdYUVa79Axb7Rh``).
"""

import logging
from enum import Enum
from typing import Iterable, Optional, Union

log = logging.getLogger(__name__)


class ResourceType(Enum):
    """Catalog entity kinds, used only to validate identifiers."""

    TRACK = "track"
    ARTIST = "artist"
    ALBUM = "album"
    PLAYLIST = "playlist"
    SHOW = "show"
    EPISODE = "episode"
    USER = "user"


def _coerce_type(resource_type: Union[ResourceType, str]) -> ResourceType:
    if isinstance(resource_type, ResourceType):
        return resource_type
    return ResourceType(resource_type.lower())


def _split_id(
    resource_type: ResourceType, raw: str, delimiter: str
) -> Optional[str]:
    """
    Returns the trailing ID if ``raw`` splits into a well-typed reference.
    """
    fields = raw.split(delimiter)
    if len(fields) < 3:
        return None
    if fields[-2] != resource_type.value:
        log.error(
            f"Expected id of type {resource_type.value!r} but found type "
            f"{fields[-2]!r} in {raw!r}"
        )
        return None
    return fields[-1]


def normalize_id(resource_type: Union[ResourceType, str], raw: str) -> str:
    """
    Extracts the bare Spotify ID from an ID, URI or URL.

    A type mismatch is logged and the input is returned unchanged, leaving
    final validation to the API.
    """
    resource_type = _coerce_type(resource_type)
    for delimiter in (":", "/"):
        if delimiter in raw:
            found = _split_id(resource_type, raw, delimiter)
            if found is not None:
                return found
    return raw


def normalize_uri(resource_type: Union[ResourceType, str], raw: str) -> str:
    """Builds a ``spotify:<type>:<id>`` URI from an ID, URI or URL."""
    resource_type = _coerce_type(resource_type)
    return f"spotify:{resource_type.value}:{normalize_id(resource_type, raw)}"


def normalize_ids(
    resource_type: Union[ResourceType, str], raws: Iterable[str]
) -> list[str]:
    """Normalizes every identifier in ``raws``."""
    resource_type = _coerce_type(resource_type)
    return [normalize_id(resource_type, raw) for raw in raws]
