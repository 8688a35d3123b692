"""
Analysis module for Opinion Insights.

This module provides the rate-limited title translation client and the
repeated-word analysis over translated titles.
"""

from .error_handler import TranslationFailed, RetryConfig
from .throttle import RateLimiter, SequentialRunner
from .translator import TranslationClient, parse_translation
from .word_frequency import WordFrequencyAnalyzer

__all__ = [
    'TranslationFailed',
    'RetryConfig',
    'RateLimiter',
    'SequentialRunner',
    'TranslationClient',
    'parse_translation',
    'WordFrequencyAnalyzer'
]
