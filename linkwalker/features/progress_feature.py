"""
Progress Feature - Logs crawl progress and the final summary
"""

import logging
from .base import CrawlerFeature
from ..crawler.result import LinkResult, LinkState

logger = logging.getLogger(__name__)


class ProgressFeature(CrawlerFeature):
    """Logs each classified link and a summary once the crawl drains"""

    def __init__(self, report_every: int = 50):
        self.report_every = report_every
        self.links_seen = 0
        self.pages_scanned = 0

    async def initialize(self, checker):
        logger.info(f"Checking links from {checker.root_url} "
                    f"(recurse={checker.options.recurse}, concurrency={checker.options.concurrency})")

    async def page_start(self, url: str, checker):
        self.pages_scanned += 1
        logger.info(f"Scanning page {url}")

    async def process_link(self, result: LinkResult, checker):
        self.links_seen += 1
        if result.state is LinkState.BROKEN:
            logger.warning(f"[{result.status or '---'}] {result.url} (from {result.parent})")
        else:
            logger.debug(f"[{result.state.value}] {result.url}")

        if self.report_every and self.links_seen % self.report_every == 0:
            logger.info(f"{self.links_seen} links checked, {self.pages_scanned} pages scanned")

    async def finalize(self, report, checker):
        broken = len(report.broken)
        logger.info(f"Checked {len(report.links)} links across {self.pages_scanned} pages: "
                    f"{'passed' if report.passed else f'{broken} broken'}")
