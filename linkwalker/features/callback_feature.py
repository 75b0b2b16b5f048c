"""
Callback Feature - Plain callables for link and page events
"""

import inspect
from typing import Callable, Optional
from .base import CrawlerFeature
from ..crawler.result import LinkResult


class CallbackFeature(CrawlerFeature):
    """Forwards link and page events to user callbacks (sync or async)"""

    def __init__(self, on_link: Optional[Callable] = None, on_page_start: Optional[Callable] = None):
        self.on_link = on_link
        self.on_page_start = on_page_start

    async def initialize(self, checker):
        pass

    async def page_start(self, url: str, checker):
        await self._call(self.on_page_start, url)

    async def process_link(self, result: LinkResult, checker):
        await self._call(self.on_link, result)

    async def finalize(self, report, checker):
        pass

    @staticmethod
    async def _call(callback, *args):
        if callback is None:
            return
        value = callback(*args)
        if inspect.isawaitable(value):
            await value
