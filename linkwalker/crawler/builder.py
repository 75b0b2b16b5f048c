"""
Checker Builder - Fluent API for configuring a link check
"""

from typing import Callable, List, Optional, Sequence, Union
from .base import LinkChecker, check
from .options import CheckOptions, DEFAULT_CONCURRENCY
from .result import Report
from ..features.callback_feature import CallbackFeature
from ..features.progress_feature import ProgressFeature
from ..utils.fetcher import DEFAULT_USER_AGENT
from ..utils.skip_policy import SkipPolicy


class CheckerBuilder:
    """Builder for link check options with features"""

    def __init__(self, path: str):
        self.path = path
        self._recurse = False
        self._skip_patterns: List[str] = []
        self._skip_predicate: Optional[Callable] = None
        self._concurrency = DEFAULT_CONCURRENCY
        self._timeout: Optional[float] = None
        self._crawl_timeout: Optional[float] = None
        self._user_agent = DEFAULT_USER_AGENT
        self.features = []

    def recurse(self, enable: bool = True):
        """Follow same-origin HTML pages"""
        self._recurse = enable
        return self

    def skip(self, links: Union[str, Sequence[str], Callable]):
        """Skip links containing a substring, or matching a predicate

        Substrings accumulate; a later predicate replaces an earlier one.
        Both kinds apply together.
        """
        if callable(links):
            self._skip_predicate = links
        elif isinstance(links, str):
            self._skip_patterns.append(links)
        else:
            self._skip_patterns.extend(links)
        return self

    def concurrency(self, count: int):
        self._concurrency = count
        return self

    def timeout(self, seconds: float):
        """Per-request timeout"""
        self._timeout = seconds
        return self

    def crawl_timeout(self, seconds: float):
        """Give up on queued work after this many seconds"""
        self._crawl_timeout = seconds
        return self

    def user_agent(self, value: str):
        self._user_agent = value
        return self

    def with_progress(self, enable: bool = True, report_every: int = 50):
        """Log progress while checking"""
        if enable:
            self.features.append(ProgressFeature(report_every=report_every))
        return self

    def on_link(self, callback: Callable):
        """Call back with every LinkResult as soon as it is classified"""
        self.features.append(CallbackFeature(on_link=callback))
        return self

    def on_page_start(self, callback: Callable):
        """Call back with the URL of every page scanned for links"""
        self.features.append(CallbackFeature(on_page_start=callback))
        return self

    def with_feature(self, feature):
        self.features.append(feature)
        return self

    def build(self) -> CheckOptions:
        """Build the configured options"""
        links_to_skip = None
        if self._skip_patterns and self._skip_predicate:
            links_to_skip = SkipPolicy(self._skip_patterns, self._skip_predicate)
        elif self._skip_predicate:
            links_to_skip = self._skip_predicate
        elif self._skip_patterns:
            links_to_skip = tuple(self._skip_patterns)
        return CheckOptions(
            path=self.path,
            recurse=self._recurse,
            links_to_skip=links_to_skip,
            concurrency=self._concurrency,
            timeout=self._timeout,
            crawl_timeout=self._crawl_timeout,
            user_agent=self._user_agent,
            features=tuple(self.features)
        )

    def build_checker(self) -> LinkChecker:
        """Build a LinkChecker; the path must already be a URL"""
        return LinkChecker(self.build())

    async def run(self) -> Report:
        """Build and run check(), serving local paths as needed"""
        return await check(self.build())
