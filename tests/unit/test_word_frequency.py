"""
Unit tests for repeated-word analysis.
"""

from opinion_insights.analysis.word_frequency import WordFrequencyAnalyzer


class TestWordFrequencyAnalyzer:
    """Test cases for WordFrequencyAnalyzer class."""

    def setup_method(self):
        self.analyzer = WordFrequencyAnalyzer()

    def test_word_above_threshold_reported(self):
        """Only words strictly above the threshold are reported."""
        titles = ["El futuro del clima", "El futuro del trabajo", "Clima y futuro"]

        assert self.analyzer.analyze(titles, threshold=2) == [("futuro", 3)]

    def test_short_words_dropped(self):
        """Tokens of two characters or fewer are never counted."""
        titles = ["El y la", "el Y LA", "EL y la"]

        assert self.analyzer.analyze(titles, threshold=0) == []

    def test_three_letter_words_kept(self):
        assert self.analyzer.analyze(["the cat", "the dog", "the end"], threshold=2) == [("the", 3)]

    def test_case_and_punctuation_normalized(self):
        """Capitalisation and punctuation do not split counts."""
        titles = ["Democracy, now!", "¿Democracy?", "democracy: a «crisis»", "DEMOCRACY."]

        assert self.analyzer.analyze(titles, threshold=2) == [("democracy", 4)]

    def test_punctuation_removed_not_replaced(self):
        """Punctuation inside a token joins its parts."""
        assert self.analyzer.tokenize(["don't re-read"]) == ["dont", "reread"]

    def test_threshold_is_strict(self):
        titles = ["war peace", "war", "peace"]

        assert self.analyzer.analyze(titles, threshold=2) == []
        assert self.analyzer.analyze(titles, threshold=1) == [("peace", 2), ("war", 2)]

    def test_ties_broken_alphabetically(self):
        """Equal counts are ordered by word so output is deterministic."""
        titles = ["zeta alpha mid", "mid zeta alpha", "alpha mid zeta", "zeta"]

        assert self.analyzer.analyze(titles, threshold=2) == [
            ("zeta", 4), ("alpha", 3), ("mid", 3)
        ]

    def test_analysis_is_idempotent(self):
        titles = ["Budget cuts and budget fights", "Budget talks", "The budget"]

        first = self.analyzer.analyze(titles, threshold=1)
        second = self.analyzer.analyze(titles, threshold=1)

        assert first == second == [("budget", 4)]

    def test_empty_titles_ignored(self):
        assert self.analyzer.analyze(["", "", ""], threshold=0) == []
        assert self.analyzer.analyze([], threshold=2) == []

    def test_count_words(self):
        counts = self.analyzer.count_words(["One two three", "one"])

        assert counts["one"] == 2
        assert counts["two"] == 1
        assert "three" in counts
