"""
Base Feature Interface - Abstract base class for all checker features
"""

from abc import ABC, abstractmethod
from ..crawler.result import LinkResult, Report


class CrawlerFeature(ABC):
    """Base interface for all checker features"""

    @abstractmethod
    async def initialize(self, checker) -> None:
        """Called once before the root URL is queued"""
        pass

    @abstractmethod
    async def page_start(self, url: str, checker) -> None:
        """Called when an HTML page is about to be scanned for links"""
        pass

    @abstractmethod
    async def process_link(self, result: LinkResult, checker) -> None:
        """Called once per link as soon as it is classified"""
        pass

    @abstractmethod
    async def finalize(self, report: Report, checker) -> None:
        """Called after the report is built"""
        pass
