"""
Local static server exposing a directory as a temporary HTTP origin
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from aiohttp import web

from .utils.error_handler import ServerStartError

logger = logging.getLogger(__name__)

INDEX_FILE = 'index.html'


class StaticServer:
    """Serves static files from one directory on an ephemeral localhost port"""

    def __init__(self, host: str = '127.0.0.1', port: int = 0):
        self.host = host
        self.port = port
        self.root_dir: Optional[Path] = None
        self.base_url: Optional[str] = None
        self._runner: Optional[web.AppRunner] = None

    @property
    def is_serving(self) -> bool:
        return self._runner is not None

    async def serve(self, root_dir: Union[str, Path]) -> str:
        """Start listening and return the origin's base URL (with trailing slash)"""
        if self._runner is not None:
            raise ServerStartError(f"already serving {self.root_dir}")

        root = Path(root_dir).resolve()
        if not root.is_dir():
            raise ServerStartError(f"{root_dir} is not a directory")

        app = web.Application()
        app.router.add_get('/{tail:.*}', self._handle)
        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        try:
            site = web.TCPSite(runner, self.host, self.port)
            await site.start()
        except OSError as e:
            await runner.cleanup()
            raise ServerStartError(f"cannot listen on {self.host}:{self.port}: {e}") from e

        self.root_dir = root
        self._runner = runner
        port = runner.addresses[0][1]
        self.base_url = f"http://{self.host}:{port}/"
        logger.info(f"Serving {root} at {self.base_url}")
        return self.base_url

    async def stop(self):
        """Release the listening socket"""
        if self._runner is None:
            return
        runner, self._runner = self._runner, None
        await runner.cleanup()
        logger.info(f"Stopped serving {self.root_dir}")

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        target = (self.root_dir / request.match_info['tail']).resolve()
        try:
            target.relative_to(self.root_dir)
        except ValueError:
            raise web.HTTPNotFound()

        if target.is_dir():
            if not request.path.endswith('/'):
                raise web.HTTPMovedPermanently(request.path + '/')
            target = target / INDEX_FILE

        if not target.is_file():
            raise web.HTTPNotFound()
        return web.FileResponse(target)


@asynccontextmanager
async def serving(root_dir: Union[str, Path], server: StaticServer = None) -> AsyncIterator[str]:
    """Serve root_dir for the duration of the block; yields the base URL"""
    server = server or StaticServer()
    base_url = await server.serve(root_dir)
    try:
        yield base_url
    finally:
        await server.stop()
