"""
Thin endpoint wrappers built on top of the request pipeline.

Each wrapper normalizes its identifiers, dispatches through
SpotifyAPIClient and decodes the raw body. Only a representative
subset of the Web API is covered here.
"""

import logging
from typing import Any, Iterable, Optional

from spotify_cli.utils.ids import ResourceType, normalize_ids, normalize_uri

from .client import SpotifyAPIClient

log = logging.getLogger(__name__)

SEARCH_TYPES = ("artist", "album", "track", "playlist", "show", "episode")


class SpotifyEndpoints:
    """Catalog, library and player endpoints for a SpotifyAPIClient."""

    def __init__(self, client: SpotifyAPIClient):
        self._client = client

    @property
    def client(self) -> SpotifyAPIClient:
        return self._client

    async def _get_json(
        self, path: str, params: Optional[dict[str, Any]] = None
    ) -> Any:
        text = await self._client.get(path, params or {})
        return self._client.convert_result(text)

    # Catalog
    async def track(self, track_id: str, market: Optional[str] = None) -> dict[str, Any]:
        """Returns a single track given its ID, URI or URL."""
        trid = self._client.get_id(ResourceType.TRACK, track_id)
        return await self._get_json(f"tracks/{trid}", {"market": market})

    async def tracks(
        self, track_ids: Iterable[str], market: Optional[str] = None
    ) -> dict[str, Any]:
        """Returns several tracks given their IDs, URIs or URLs."""
        ids = normalize_ids(ResourceType.TRACK, track_ids)
        return await self._get_json(
            "tracks", {"ids": ",".join(ids), "market": market}
        )

    async def artist(self, artist_id: str) -> dict[str, Any]:
        arid = self._client.get_id(ResourceType.ARTIST, artist_id)
        return await self._get_json(f"artists/{arid}")

    async def album(self, album_id: str) -> dict[str, Any]:
        alid = self._client.get_id(ResourceType.ALBUM, album_id)
        return await self._get_json(f"albums/{alid}")

    async def album_tracks(
        self, album_id: str, limit: int = 50, offset: int = 0
    ) -> dict[str, Any]:
        alid = self._client.get_id(ResourceType.ALBUM, album_id)
        return await self._get_json(
            f"albums/{alid}/tracks", {"limit": limit, "offset": offset}
        )

    async def search(
        self,
        q: str,
        search_type: str = "track",
        limit: int = 10,
        offset: int = 0,
        market: Optional[str] = None,
        include_external: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Searches the catalog.

        Args:
            q: The search query.
            search_type: One of 'artist', 'album', 'track', 'playlist', 'show'
                or 'episode'.
            limit: The number of items to return.
            offset: The index of the first item to return.
            market: An ISO 3166-1 alpha-2 country code or 'from_token'.
            include_external: 'audio' to include externally hosted audio.
        """
        if search_type not in SEARCH_TYPES:
            raise ValueError(
                f"Invalid search type '{search_type}'. "
                f"Must be one of: {', '.join(SEARCH_TYPES)}."
            )
        return await self._get_json(
            "search",
            {
                "q": q,
                "type": search_type,
                "limit": limit,
                "offset": offset,
                "market": market,
                "include_external": include_external,
            },
        )

    # Users
    async def user(self, user_id: str) -> dict[str, Any]:
        return await self._get_json(f"users/{user_id}")

    async def me(self) -> dict[str, Any]:
        """Detailed profile information about the current user."""
        return await self._get_json("me/")

    async def current_user(self) -> dict[str, Any]:
        """Alias for me()."""
        return await self.me()

    async def current_user_playing_track(self) -> Optional[dict[str, Any]]:
        """Returns the currently playing item, or None when nothing plays."""
        text = await self._client.get("me/player/currently-playing")
        if not text.strip():
            return None
        return self._client.convert_result(text)

    # Playlists
    async def user_playlist_create(
        self,
        user_id: str,
        name: str,
        public: bool = True,
        description: str = "",
    ) -> dict[str, Any]:
        payload = {"name": name, "public": public, "description": description}
        text = await self._client.post(f"users/{user_id}/playlists", payload)
        return self._client.convert_result(text)

    async def user_playlist_add_tracks(
        self,
        user_id: str,
        playlist_id: str,
        track_ids: Iterable[str],
        position: Optional[int] = None,
    ) -> dict[str, Any]:
        """Adds tracks, given as IDs, URIs or URLs, to a playlist."""
        plid = self._client.get_id(ResourceType.PLAYLIST, playlist_id)
        payload: dict[str, Any] = {
            "uris": [normalize_uri(ResourceType.TRACK, t) for t in track_ids]
        }
        if position is not None:
            payload["position"] = position
        text = await self._client.post(
            f"users/{user_id}/playlists/{plid}/tracks", payload
        )
        return self._client.convert_result(text)

    # Library
    async def current_user_saved_tracks_add(self, track_ids: Iterable[str]) -> None:
        ids = normalize_ids(ResourceType.TRACK, track_ids)
        await self._client.put(f"me/tracks/?ids={','.join(ids)}", {})

    async def current_user_saved_tracks_delete(self, track_ids: Iterable[str]) -> None:
        ids = normalize_ids(ResourceType.TRACK, track_ids)
        await self._client.delete(f"me/tracks/?ids={','.join(ids)}", {})

    async def current_user_saved_tracks_contains(
        self, track_ids: Iterable[str]
    ) -> list[bool]:
        ids = normalize_ids(ResourceType.TRACK, track_ids)
        text = await self._client.get("me/tracks/contains", {"ids": ",".join(ids)})
        return self._client.convert_result(text, list[bool])

    # Player
    async def start_playback(
        self,
        device_id: Optional[str] = None,
        context_uri: Optional[str] = None,
        uris: Optional[list[str]] = None,
        offset: Optional[dict[str, Any]] = None,
        position_ms: Optional[int] = None,
    ) -> None:
        """
        Starts or resumes playback.

        Provide ``context_uri`` to play an album, artist or playlist, or
        ``uris`` to play tracks. ``offset`` is ``{"position": <int>}`` or
        ``{"uri": "<track uri>"}``.
        """
        if context_uri and uris:
            log.error("Specify either a context URI or track URIs, not both.")
        payload: dict[str, Any] = {}
        if context_uri:
            payload["context_uri"] = context_uri
        if uris:
            payload["uris"] = [normalize_uri(ResourceType.TRACK, u) for u in uris]
        if offset:
            if "position" in offset:
                payload["offset"] = {"position": offset["position"]}
            elif "uri" in offset:
                payload["offset"] = {"uri": offset["uri"]}
        if position_ms is not None:
            payload["position_ms"] = position_ms
        path = self._client.append_device_id("me/player/play", device_id)
        await self._client.put(path, payload)

    async def pause_playback(self, device_id: Optional[str] = None) -> None:
        path = self._client.append_device_id("me/player/pause", device_id)
        await self._client.put(path, {})

    async def next_track(self, device_id: Optional[str] = None) -> None:
        path = self._client.append_device_id("me/player/next", device_id)
        await self._client.post(path, {})

    async def volume(self, volume_percent: int, device_id: Optional[str] = None) -> None:
        """Sets the playback volume, between 0 and 100 inclusive."""
        if not 0 <= volume_percent <= 100:
            raise ValueError("Volume must be between 0 and 100, inclusive.")
        path = self._client.append_device_id(
            f"me/player/volume?volume_percent={volume_percent}", device_id
        )
        await self._client.put(path, {})
