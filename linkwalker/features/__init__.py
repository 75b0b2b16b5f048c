"""
Checker Features - Composable hooks into the link checker
"""

from .base import CrawlerFeature
from .callback_feature import CallbackFeature
from .progress_feature import ProgressFeature

__all__ = [
    'CrawlerFeature',
    'CallbackFeature',
    'ProgressFeature'
]
