"""
linkwalker - find broken links in a site or a local HTML tree
"""

from .crawler import (
    CheckerBuilder,
    CheckOptions,
    LinkChecker,
    LinkResult,
    LinkState,
    Report,
    check,
    crawl
)
from .utils.error_handler import LinkCheckError, ServerStartError, SkipPolicyError
from .utils.parser import get_links

__all__ = [
    'CheckerBuilder',
    'CheckOptions',
    'LinkChecker',
    'LinkResult',
    'LinkState',
    'Report',
    'check',
    'crawl',
    'get_links',
    'LinkCheckError',
    'ServerStartError',
    'SkipPolicyError'
]
