"""
Deduplication module: URL canonicalization and the crawl's visited set
"""

from .duplication_manager import DuplicationManager
from .url_canonicalizer import URLCanonicalizer, ParsedUrl, is_absolute_url, is_http_url

__all__ = [
    'DuplicationManager',
    'URLCanonicalizer',
    'ParsedUrl',
    'is_absolute_url',
    'is_http_url'
]
