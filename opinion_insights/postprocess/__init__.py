"""
Post-processing module for Opinion Insights.

This module provides the run report data structures and their console and
JSON renderings.
"""

from .formatter import (
    ReportFormatter,
    RunReport,
    ArticleSummary,
    FormattingError
)

__all__ = [
    'ReportFormatter',
    'RunReport',
    'ArticleSummary',
    'FormattingError'
]
