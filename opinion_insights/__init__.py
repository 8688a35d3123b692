"""
Opinion Insights.

Scrapes the latest articles of a news site's opinion section, translates
their titles and reports words that recur across the translations.
"""

__version__ = "1.0.0"
