import inspect
import logging
from typing import Awaitable, Callable, Iterable, Optional, Sequence, Tuple, Union

from .error_handler import SkipPolicyError

logger = logging.getLogger(__name__)

SkipPredicate = Callable[[str], Union[bool, Awaitable[bool]]]
LinksToSkip = Union[Sequence[str], SkipPredicate, 'SkipPolicy', None]


class SkipPolicy:
    """
    Decides which links are never fetched

    A link is skipped when it contains any of the configured substrings or
    when the predicate (sync or async) returns true. Either filter alone is
    enough.
    """

    def __init__(self, patterns: Iterable[str] = (), predicate: Optional[SkipPredicate] = None):
        self.patterns: Tuple[str, ...] = tuple(p for p in patterns if p)
        self.predicate = predicate

    @classmethod
    def from_option(cls, links_to_skip: LinksToSkip) -> 'SkipPolicy':
        if links_to_skip is None:
            return cls()
        if isinstance(links_to_skip, SkipPolicy):
            return links_to_skip
        if callable(links_to_skip):
            return cls(predicate=links_to_skip)
        if isinstance(links_to_skip, str):
            return cls(patterns=[links_to_skip])
        return cls(patterns=links_to_skip)

    def __bool__(self):
        return bool(self.patterns) or self.predicate is not None

    def matches_pattern(self, url: str) -> bool:
        return any(pattern in url for pattern in self.patterns)

    async def should_skip(self, url: str) -> bool:
        if self.matches_pattern(url):
            return True
        if self.predicate is None:
            return False

        try:
            result = self.predicate(url)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise SkipPolicyError(url, e) from e
        return bool(result)
