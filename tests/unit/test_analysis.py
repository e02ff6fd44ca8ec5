"""
Unit tests for sentence-level analysis.
"""

from unittest.mock import Mock

import pytest

from sentiment_service.analysis import Analysis, analyze
from sentiment_service.errors import AnalysisError
from sentiment_service.model.types import Polarity, SentenceSpan, SentimentResult


class TestAnalyze:
    """Test cases for analyze()."""

    def test_example_text(self, fake_tokenizer, fake_classifier):
        analysis = analyze("I love this. I hate that.", fake_tokenizer, fake_classifier)

        assert [s.text for s in analysis.sentences] == ["I love this.", "I hate that."]
        assert [s.score for s in analysis.sentences] == [0.95, -0.87]
        assert analysis.total_score == pytest.approx(0.08)

    def test_total_is_plain_sum(self, fake_tokenizer, fake_classifier):
        text = "A fine day. Something bad happened! Then it was fine again? Yes."
        analysis = analyze(text, fake_tokenizer, fake_classifier)

        assert analysis.total_score == sum(s.score for s in analysis.sentences)
        assert len(analysis.sentences) == 4

    def test_sentence_count_matches_spans(self, fake_tokenizer, fake_classifier):
        text = "One. Two. Three. Four. Five."
        spans = fake_tokenizer.segment(text)

        analysis = analyze(text, fake_tokenizer, fake_classifier)

        assert [s.text for s in analysis.sentences] == [span.text for span in spans]

    def test_classifier_called_once_in_order(self, fake_tokenizer, fake_classifier):
        analyze("First one. Second one. Third one.", fake_tokenizer, fake_classifier)

        assert fake_classifier.batches == [["First one.", "Second one.", "Third one."]]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_empty_input(self, text, fake_tokenizer, fake_classifier):
        analysis = analyze(text, fake_tokenizer, fake_classifier)

        assert analysis == Analysis(sentences=[], total_score=0.0)
        assert fake_classifier.calls == 0

    def test_deterministic(self, fake_tokenizer, fake_classifier):
        text = "I love this. I hate that. Something bad."
        first = analyze(text, fake_tokenizer, fake_classifier)
        second = analyze(text, fake_tokenizer, fake_classifier)

        assert first == second

    def test_negative_polarity_is_negated(self):
        tokenizer = Mock()
        tokenizer.segment.return_value = [SentenceSpan("Awful.", 0, 6)]
        classifier = Mock()
        classifier.predict.return_value = [SentimentResult(Polarity.NEGATIVE, 0.4)]

        analysis = analyze("Awful.", tokenizer, classifier)

        assert analysis.sentences[0].score == -0.4
        assert analysis.total_score == -0.4

    def test_tokenizer_error(self, fake_tokenizer, fake_classifier):
        fake_tokenizer.error = RuntimeError("tokenizer exploded")

        with pytest.raises(AnalysisError, match="Sentence segmentation failed: tokenizer exploded"):
            analyze("Some text.", fake_tokenizer, fake_classifier)

    def test_classifier_error(self, fake_tokenizer, fake_classifier):
        fake_classifier.error = ValueError("Unsupported sentiment label: NEUTRAL")

        with pytest.raises(AnalysisError, match="Sentiment classification failed"):
            analyze("Some text.", fake_tokenizer, fake_classifier)

    def test_result_count_mismatch(self, fake_tokenizer):
        classifier = Mock()
        classifier.predict.return_value = [SentimentResult(Polarity.POSITIVE, 0.5)]

        with pytest.raises(AnalysisError, match="1 results for 2 sentences"):
            analyze("One. Two.", fake_tokenizer, classifier)


class TestSentimentResult:
    """Test cases for SentimentResult."""

    def test_signed_score(self):
        assert SentimentResult(Polarity.POSITIVE, 0.7).signed_score == 0.7
        assert SentimentResult(Polarity.NEGATIVE, 0.7).signed_score == -0.7

    @pytest.mark.parametrize("magnitude", [-0.1, 1.5])
    def test_magnitude_out_of_range(self, magnitude):
        with pytest.raises(ValueError, match="Magnitude must be within"):
            SentimentResult(Polarity.POSITIVE, magnitude)
