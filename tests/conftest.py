"""
Shared fixtures: in-memory stand-ins for the tokenizer and classifier.
"""

import re
import threading
import time

import pytest
from fastapi.testclient import TestClient

from sentiment_service.api.main import create_app
from sentiment_service.config import Settings
from sentiment_service.context import create_context
from sentiment_service.model.types import Polarity, SentenceSpan, SentimentResult
from sentiment_service.monitoring.metrics import MetricsCollector

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]?")

KNOWN_SCORES = {
    "I love this.": SentimentResult(Polarity.POSITIVE, 0.95),
    "I hate that.": SentimentResult(Polarity.NEGATIVE, 0.87),
}


def expected_result(sentence: str) -> SentimentResult:
    """Score the fake classifier assigns to a sentence."""
    if sentence in KNOWN_SCORES:
        return KNOWN_SCORES[sentence]
    polarity = Polarity.NEGATIVE if "bad" in sentence else Polarity.POSITIVE
    return SentimentResult(polarity, min(len(sentence) / 100, 1.0))


class ConcurrencyTracker:
    """Records the highest number of threads inside a model at once."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def enter(self):
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        if self.delay:
            time.sleep(self.delay)

    def exit(self):
        with self._lock:
            self.active -= 1


class FakeTokenizer(ConcurrencyTracker):
    def __init__(self, delay: float = 0.0):
        super().__init__(delay)
        self.error: Exception | None = None

    def segment(self, text):
        self.enter()
        try:
            if self.error:
                raise self.error
            spans = []
            for match in SENTENCE_PATTERN.finditer(text):
                sentence = match.group().strip()
                if sentence:
                    start = text.index(sentence, match.start())
                    spans.append(SentenceSpan(sentence, start, start + len(sentence)))
            return spans
        finally:
            self.exit()


class FakeClassifier(ConcurrencyTracker):
    def __init__(self, delay: float = 0.0):
        super().__init__(delay)
        self.error: Exception | None = None
        self.batches: list[list[str]] = []

    def predict(self, texts):
        self.enter()
        try:
            if self.error:
                raise self.error
            self.batches.append(list(texts))
            return [expected_result(text) for text in texts]
        finally:
            self.exit()


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, worker_threads=4, max_body_bytes=128 * 1024)


@pytest.fixture
def fake_tokenizer():
    return FakeTokenizer()


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def context(test_settings, fake_tokenizer, fake_classifier, metrics):
    context = create_context(test_settings, fake_tokenizer, fake_classifier, metrics=metrics)
    yield context
    context.dispatcher.shutdown()


@pytest.fixture
def app(context, test_settings):
    return create_app(context=context, app_settings=test_settings)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def score_of():
    """Signed score the fake classifier assigns to a sentence."""
    return lambda sentence: expected_result(sentence).signed_score
