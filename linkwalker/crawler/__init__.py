"""
Link checking core - orchestrator, options, builder and results
"""

from .base import LinkChecker, check, crawl
from .builder import CheckerBuilder
from .options import CheckOptions
from .result import LinkResult, LinkState, Report, ResultAggregator, VisitRecord, VisitState

__all__ = [
    'LinkChecker',
    'check',
    'crawl',
    'CheckerBuilder',
    'CheckOptions',
    'LinkResult',
    'LinkState',
    'Report',
    'ResultAggregator',
    'VisitRecord',
    'VisitState'
]
