"""
Value types exchanged between the analysis engine and the NLP models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class SentenceSpan:
    """One sentence found by the tokenizer, trimmed of surrounding whitespace.

    ``start`` and ``end`` are offsets of the trimmed text in the input.
    """

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class SentimentResult:
    polarity: Polarity
    magnitude: float

    def __post_init__(self):
        if not 0.0 <= self.magnitude <= 1.0:
            raise ValueError(f"Magnitude must be within [0, 1], got {self.magnitude}")

    @property
    def signed_score(self) -> float:
        if self.polarity is Polarity.POSITIVE:
            return self.magnitude
        return -self.magnitude


class Tokenizer(Protocol):
    def segment(self, text: str) -> list[SentenceSpan]: ...


class Classifier(Protocol):
    def predict(self, texts: list[str]) -> list[SentimentResult]: ...
