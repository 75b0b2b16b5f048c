"""
Utility modules for link checking
"""

from .error_handler import ErrorHandler, ErrorType, FetchFailure, ResolutionError
from .fetcher import FetchClient, FetchResponse
from .skip_policy import SkipPolicy

__all__ = [
    'ErrorHandler',
    'ErrorType',
    'FetchFailure',
    'ResolutionError',
    'FetchClient',
    'FetchResponse',
    'SkipPolicy'
]
