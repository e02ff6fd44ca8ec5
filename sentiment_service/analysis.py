"""
Sentence-level sentiment analysis of a text.
"""

import logging

from pydantic import BaseModel, Field

from sentiment_service.errors import AnalysisError
from sentiment_service.model.types import Classifier, Tokenizer

logger = logging.getLogger(__name__)


class SentenceAnalysis(BaseModel):
    text: str = Field(..., description="Sentence text, trimmed")
    score: float = Field(..., description="Signed sentiment score in [-1, 1]")


class Analysis(BaseModel):
    sentences: list[SentenceAnalysis] = Field(
        default_factory=list, description="Per-sentence scores in input order"
    )
    total_score: float = Field(0.0, description="Sum of sentence scores")


def analyze(text: str, tokenizer: Tokenizer, classifier: Classifier) -> Analysis:
    """
    Segment text into sentences and score each one.

    The caller must hold exclusive access to both models for the duration
    of the call.

    Args:
        text: Input text
        tokenizer: Sentence tokenizer
        classifier: Sentiment classifier

    Returns:
        Analysis whose total_score is the plain sum of the sentence scores

    Raises:
        AnalysisError: If the tokenizer or classifier fails
    """
    # Single segment for now; multi-segment input would be joined here
    unit = " ".join([text])

    try:
        spans = tokenizer.segment(unit)
    except Exception as e:
        raise AnalysisError(f"Sentence segmentation failed: {str(e)}") from e

    sentences = [span.text for span in spans]
    if not sentences:
        return Analysis(sentences=[], total_score=0.0)

    try:
        results = classifier.predict(sentences)
    except Exception as e:
        raise AnalysisError(f"Sentiment classification failed: {str(e)}") from e

    if len(results) != len(sentences):
        raise AnalysisError(
            f"Classifier returned {len(results)} results for {len(sentences)} sentences"
        )

    scored = [
        SentenceAnalysis(text=sentence, score=result.signed_score)
        for sentence, result in zip(sentences, results, strict=True)
    ]
    total_score = sum(item.score for item in scored)

    logger.debug(f"Analyzed {len(scored)} sentences, total score {total_score:.4f}")
    return Analysis(sentences=scored, total_score=total_score)
