"""
Shared fixtures: a local aiohttp application standing in for the Spotify API.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from spotify_cli.api.client import SpotifyAPIClient
from spotify_cli.models.config import ClientConfig

TEST_TOKEN = "test-token"


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    body: str

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class Route:
    status: int = 200
    body: Any = ""
    headers: dict[str, str] = field(default_factory=dict)
    delay: float = 0.0


class FakeSpotify:
    """Records every request and answers from a table of canned routes."""

    def __init__(self):
        self.requests: list[RecordedRequest] = []
        self.routes: dict[tuple[str, str], Route] = {}
        self.base_url = ""

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Any = "",
        headers: Optional[dict[str, str]] = None,
        delay: float = 0.0,
    ) -> None:
        """Registers a response for ``path`` relative to ``/v1/``."""
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        self.routes[(method, "/v1/" + path.lstrip("/"))] = Route(
            status, body, headers or {}, delay
        )

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                query=dict(request.query),
                headers=dict(request.headers),
                body=await request.text(),
            )
        )
        route = self.routes.get((request.method, request.path))
        if route is None:
            return web.json_response(
                {"error": {"status": 404, "message": "Service not found"}}, status=404
            )
        if route.delay:
            await asyncio.sleep(route.delay)
        if not route.body:
            return web.Response(status=route.status, headers=route.headers)
        if isinstance(route.body, bytes):
            return web.Response(
                status=route.status,
                body=route.body,
                headers=route.headers,
                content_type="application/json",
                charset="utf-8",
            )
        return web.Response(
            status=route.status,
            text=route.body,
            headers=route.headers,
            content_type="application/json",
        )


@pytest.fixture
async def spotify_server():
    """A running fake API; ``base_url`` points at its ``/v1/`` prefix."""
    fake = FakeSpotify()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("/v1/"))
    yield fake
    await server.close()


@pytest.fixture
async def client(spotify_server):
    """A client with a static token, pointed at the fake API."""
    api = SpotifyAPIClient(
        ClientConfig(base_url=spotify_server.base_url, token=TEST_TOKEN)
    )
    yield api
    await api.close()
