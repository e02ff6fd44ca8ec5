"""
Model package: sentence tokenizer, sentiment classifier and the access guard.
"""

from .classifier import SentimentClassifier
from .handle import ModelHandle
from .tokenizer import SentenceTokenizer
from .types import Polarity, SentenceSpan, SentimentResult

__all__ = [
    "ModelHandle",
    "SentenceTokenizer",
    "SentimentClassifier",
    "Polarity",
    "SentenceSpan",
    "SentimentResult",
]
