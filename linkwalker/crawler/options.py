from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..utils.fetcher import DEFAULT_USER_AGENT
from ..utils.skip_policy import LinksToSkip, SkipPolicy

DEFAULT_CONCURRENCY = 100


@dataclass(frozen=True)
class CheckOptions:
    """Configuration for one link check run"""
    path: str
    recurse: bool = False
    links_to_skip: LinksToSkip = None
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: Optional[float] = None
    crawl_timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    features: Tuple = field(default_factory=tuple)

    def __post_init__(self):
        if not self.path:
            raise ValueError("path is required")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")
        for name in ('timeout', 'crawl_timeout'):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        object.__setattr__(self, 'features', tuple(self.features))
        object.__setattr__(self, 'skip_policy', SkipPolicy.from_option(self.links_to_skip))

    @property
    def is_url(self) -> bool:
        return self.path.lower().startswith(('http://', 'https://'))
