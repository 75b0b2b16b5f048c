"""Shared fixtures: scripted HTTP origins and on-disk sites."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


class FakeOrigin:
    """HTTP origin answering from a route table and recording every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, str, str, float]] = {}
        self.requests: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.server: Optional[TestServer] = None

    async def start(self):
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()

    async def close(self):
        if self.server is not None:
            await self.server.close()
            self.server = None

    def url(self, path: str = "/") -> str:
        return str(self.server.make_url(path))

    def reply(self, path, status=200, body="", content_type="text/plain",
              method="*", delay=0.0):
        self.routes[(method, path)] = (status, body, content_type, delay)
        return self

    def html(self, path, body, status=200, method="*", delay=0.0):
        return self.reply(path, status, body, "text/html", method, delay)

    def count(self, path: str, method: Optional[str] = None) -> int:
        return sum(
            1 for m, p in self.requests if p == path and (method is None or m == method)
        )

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append((request.method, request.path_qs))
        route = self.routes.get((request.method, request.path_qs)) or self.routes.get(
            ("*", request.path_qs)
        )
        if route is None:
            return web.Response(status=404)

        status, body, content_type, delay = route
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if delay:
                await asyncio.sleep(delay)
        finally:
            self.in_flight -= 1
        return web.Response(status=status, text=body, content_type=content_type)


@pytest_asyncio.fixture
async def origin_factory():
    origins: List[FakeOrigin] = []

    async def make() -> FakeOrigin:
        origin = FakeOrigin()
        await origin.start()
        origins.append(origin)
        return origin

    yield make
    for origin in origins:
        await origin.close()


@pytest_asyncio.fixture
async def origin(origin_factory) -> FakeOrigin:
    return await origin_factory()


@pytest_asyncio.fixture
async def other_origin(origin_factory) -> FakeOrigin:
    return await origin_factory()


@pytest_asyncio.fixture
async def dead_url(origin_factory) -> str:
    """URL of an origin that has already stopped listening."""
    origin = await origin_factory()
    url = origin.url("/gone")
    await origin.close()
    return url


@pytest.fixture
def site(tmp_path):
    """Write {relative path: content} into a temp dir and return the dir."""

    def write(files: Dict[str, str]) -> Path:
        for name, content in files.items():
            target = tmp_path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return write
