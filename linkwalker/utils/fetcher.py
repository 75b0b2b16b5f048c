"""
Fetch Client - HTTP liveness checks with a single HEAD -> GET fallback
"""

import time
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

import aiohttp

from .error_handler import ErrorHandler, FetchFailure

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'linkwalker/1.0'

# Statuses meaning "this server does not do HEAD"
METHOD_REJECTED_STATUSES = frozenset({405, 501})


@dataclass
class FetchResponse:
    """Outcome of a liveness check that got an HTTP response"""
    url: str
    status_code: int
    method: str
    attempts: int
    final_url: Optional[str] = None
    content_type: str = ''
    body: Optional[bytes] = None
    response_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def is_html(self) -> bool:
        return self.content_type == 'text/html'


class FetchClient:
    """Performs liveness checks over a shared aiohttp session"""

    def __init__(self, session: aiohttp.ClientSession, timeout: Optional[float] = None,
                 user_agent: str = DEFAULT_USER_AGENT, error_handler: ErrorHandler = None):
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {'User-Agent': user_agent}
        self.error_handler = error_handler or ErrorHandler()
        self.requests_sent = 0
        self.fallbacks = 0

    async def check(self, url: str, method: str = 'HEAD') -> Union[FetchResponse, FetchFailure]:
        """
        Check whether url answers

        HEAD requests rejected with 405/501 are retried exactly once as GET.
        Transport errors are never retried and come back as FetchFailure.
        """
        start_time = time.time()
        try:
            response = await self._request(method, url)
            if method == 'HEAD' and response.status_code in METHOD_REJECTED_STATUSES:
                logger.debug(f"HEAD rejected with {response.status_code} for {url}, retrying with GET")
                self.fallbacks += 1
                response = await self._request('GET', url)
                response.attempts = 2
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            return self.error_handler.failure_from_exception(url, e)

        response.response_time = time.time() - start_time
        if not response.ok:
            self.error_handler.record_status(url, response.status_code)
        return response

    async def _request(self, method: str, url: str) -> FetchResponse:
        self.requests_sent += 1
        async with self.session.request(method, url, headers=self.headers,
                                        timeout=self.timeout) as response:
            body = None
            if method == 'GET':
                body = await response.read()
            return FetchResponse(
                url=url,
                status_code=response.status,
                method=method,
                attempts=1,
                final_url=str(response.url),
                content_type=response.content_type,
                body=body
            )
