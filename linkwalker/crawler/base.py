"""
Link Checker - Queue-driven crawl that verifies every discovered link
"""

import asyncio
import itertools
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

import aiohttp

from .options import CheckOptions
from .result import LinkState, Report, ResultAggregator, VisitRecord
from ..deduplication import DuplicationManager, ParsedUrl, URLCanonicalizer, is_http_url
from ..monitoring import MetricsCollector
from ..server import StaticServer, serving
from ..utils.error_handler import ErrorHandler, FetchFailure
from ..utils.fetcher import FetchClient, FetchResponse
from ..utils.parser import HTMLParser

logger = logging.getLogger(__name__)


class LinkChecker:
    """
    Crawls from a root URL and classifies every link it finds

    A fixed pool of worker tasks drains one asyncio.Queue. Every canonical
    URL gets exactly one VisitRecord, claimed when it is first discovered,
    and is fetched at most once.
    """

    def __init__(self, options: CheckOptions):
        self.options = options
        self.features = list(options.features)
        self.canonicalizer = URLCanonicalizer()
        self.visited = DuplicationManager()
        self.results = ResultAggregator()
        self.error_handler = ErrorHandler()
        self.metrics_collector = MetricsCollector()
        self.root_url: Optional[str] = None
        self.fetcher: Optional[FetchClient] = None

        self._queue: Optional[asyncio.Queue] = None
        self._sequence = itertools.count()

    @property
    def metrics(self):
        """Counters for the current or finished crawl"""
        return self.metrics_collector.metrics

    def add_feature(self, feature):
        """Add a feature to this checker"""
        self.features.append(feature)
        return self

    async def crawl(self) -> Report:
        """Check everything reachable from options.path, which must be a URL"""
        if not self.options.is_url:
            raise ValueError(f"crawl() needs an http(s) URL, got {self.options.path!r}")
        if self._queue is not None:
            raise RuntimeError("a LinkChecker runs a single crawl")

        root = self.canonicalizer.resolve(self.options.path, self.options.path)
        self.root_url = root.url or root.link
        self._queue = asyncio.Queue()

        async with aiohttp.ClientSession() as session:
            self.fetcher = FetchClient(
                session,
                timeout=self.options.timeout,
                user_agent=self.options.user_agent,
                error_handler=self.error_handler
            )

            for feature in self.features:
                await feature.initialize(self)

            self.enqueue(root, parent=None, crawl=True)
            await self._run_workers()

        report = self.results.finalize()
        self.metrics_collector.update_requests(self.fetcher.requests_sent, self.fetcher.fallbacks)

        for feature in self.features:
            await feature.finalize(report, self)

        logger.info(f"Crawl of {self.root_url} finished: {len(report.links)} links, "
                    f"{len(report.broken)} broken, "
                    f"{self.fetcher.requests_sent} requests")
        logger.debug(f"Dedup stats: {self.visited.get_deduplication_stats()}; "
                     f"errors: {self.error_handler.get_error_summary()}")
        return report

    def enqueue(self, parsed: ParsedUrl, parent: Optional[str], crawl: bool) -> bool:
        """
        Schedule a reference unless its canonical URL is already known

        Returns:
            True if a new VisitRecord was created
        """
        if parsed.is_resolved:
            key = parsed.url
        else:
            # Unresolvable references have no canonical form; dedup on the raw text
            key = ('unresolved', parsed.link)

        record = VisitRecord(
            key=key,
            url=parsed.url or parsed.link,
            link=parsed.link,
            sequence=next(self._sequence),
            parent=parent,
            crawl=crawl,
            failure=parsed.error
        )
        if not self.visited.claim(key, record):
            self.metrics_collector.record_duplicate()
            return False

        self._queue.put_nowait(record)
        return True

    async def _run_workers(self):
        workers = [
            asyncio.create_task(self._worker())
            for _ in range(self.options.concurrency)
        ]
        drained = asyncio.create_task(self._queue.join())
        tasks = [drained, *workers]
        try:
            done, _ = await asyncio.wait(
                tasks,
                timeout=self.options.crawl_timeout,
                return_when=asyncio.FIRST_COMPLETED
            )
            if not done:
                logger.warning(f"Crawl timed out after {self.options.crawl_timeout}s, "
                               f"dropping {self._queue.qsize()} queued links")
            for task in done:
                if task is not drained:
                    # Workers only ever stop by raising
                    task.result()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _worker(self):
        while True:
            record = await self._queue.get()
            try:
                await self._process(record)
            finally:
                self._queue.task_done()

    async def _process(self, record: VisitRecord):
        record.start()
        response_time = None

        if record.failure is not None:
            record.finish(LinkState.BROKEN, failure=record.failure)
        elif await self.options.skip_policy.should_skip(record.url):
            logger.debug(f"Skipping {record.url}: matches links_to_skip")
            record.finish(LinkState.SKIPPED)
        elif not is_http_url(record.url):
            logger.debug(f"Skipping {record.url}: not http(s)")
            record.finish(LinkState.SKIPPED)
        else:
            outcome = await self.fetcher.check(record.url, method='GET' if record.crawl else 'HEAD')
            if isinstance(outcome, FetchFailure):
                record.finish(LinkState.BROKEN, failure=outcome)
            else:
                response_time = outcome.response_time
                state = LinkState.OK if outcome.ok else LinkState.BROKEN
                record.finish(state, status=outcome.status_code)
                if self._should_expand(record, outcome):
                    await self._expand(record, outcome)

        self.results.record(record)
        self.metrics_collector.record_link(record.state.value, response_time)

        result = record.to_result()
        for feature in self.features:
            await feature.process_link(result, self)

    def _should_expand(self, record: VisitRecord, response: FetchResponse) -> bool:
        if not (record.crawl and response.ok and response.is_html and response.body is not None):
            return False
        if record.parent is None:
            return True
        # A same-origin link may still redirect somewhere else
        return self.canonicalizer.is_same_origin(response.final_url or record.url, self.root_url)

    async def _expand(self, record: VisitRecord, response: FetchResponse):
        for feature in self.features:
            await feature.page_start(record.url, self)
        self.metrics_collector.record_page_scanned()

        parser = HTMLParser(response.final_url or record.url, self.canonicalizer)
        links = parser.parse(response.body)
        logger.debug(f"Found {len(links)} links on {record.url}")

        for parsed in links:
            self.enqueue(parsed, parent=record.url, crawl=self._is_expansion_candidate(parsed))

    def _is_expansion_candidate(self, parsed: ParsedUrl) -> bool:
        return (
            self.options.recurse
            and parsed.is_resolved
            and is_http_url(parsed.url)
            and self.canonicalizer.is_same_origin(parsed.url, self.root_url)
        )


async def crawl(options: Union[CheckOptions, str] = None, **kwargs) -> Report:
    """Check a URL target; options.path must be an http(s) URL"""
    return await LinkChecker(_coerce_options(options, kwargs)).crawl()


async def check(options: Union[CheckOptions, str] = None, **kwargs) -> Report:
    """
    Check a URL or a local file tree

    A filesystem path is served over a temporary localhost origin for the
    duration of the crawl. A directory is checked from its index.html, a
    file from itself.
    """
    options = _coerce_options(options, kwargs)
    if options.is_url:
        return await crawl(options)

    path = Path(options.path)
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: {options.path}")

    if path.is_dir():
        root_dir, page = path, ''
    else:
        root_dir, page = path.parent, path.name

    async with serving(root_dir, StaticServer()) as base_url:
        return await crawl(replace(options, path=base_url + quote(page)))


def _coerce_options(options, kwargs) -> CheckOptions:
    if isinstance(options, CheckOptions):
        return replace(options, **kwargs) if kwargs else options
    if options is not None:
        kwargs['path'] = options
    return CheckOptions(**kwargs)
