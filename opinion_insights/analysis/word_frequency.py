"""
Repeated-word analysis over translated titles.
"""

import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from ..config.logging import StructuredLogger, get_logger


# Removed (not replaced by a space) before splitting
PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()\[\]?¿¡\"'«»“”‘’…]")

MIN_WORD_LENGTH = 3


class WordFrequencyAnalyzer:
    """
    Report words that recur across titles more often than a threshold.

    Titles are joined with a space, lower-cased, stripped of punctuation and
    split on whitespace; tokens shorter than three characters are dropped.
    Results are ordered by count descending, then alphabetically, so equal
    inputs always produce equal outputs.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or get_logger(__name__)

    @staticmethod
    def tokenize(titles: Iterable[str]) -> List[str]:
        text = PUNCTUATION.sub("", " ".join(t for t in titles if t).lower())
        return [token for token in text.split() if len(token) >= MIN_WORD_LENGTH]

    def count_words(self, titles: Iterable[str]) -> Counter:
        return Counter(self.tokenize(titles))

    def analyze(self, translated_titles: Iterable[str], threshold: int = 2) -> List[Tuple[str, int]]:
        """
        Words occurring strictly more than `threshold` times.

        Args:
            translated_titles: Titles to analyze
            threshold: Minimum count to exceed

        Returns:
            (word, count) pairs sorted by count descending, then word
        """
        counts = self.count_words(translated_titles)
        repeated = [(word, count) for word, count in counts.items() if count > threshold]
        repeated.sort(key=lambda item: (-item[1], item[0]))

        self.logger.debug(
            "Word frequency analyzed",
            distinct_words=len(counts),
            repeated_words=len(repeated),
            threshold=threshold
        )
        return repeated
