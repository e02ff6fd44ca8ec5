"""
Sentence segmentation using the nltk Punkt tokenizer.
"""

import logging
from pathlib import Path

import nltk
from nltk.tokenize.punkt import PunktTokenizer

from sentiment_service.model.types import SentenceSpan

logger = logging.getLogger(__name__)


class SentenceTokenizer:
    """
    Splits text into trimmed sentence spans with a Punkt model.

    The Punkt parameters are the ``punkt_tab`` nltk resource, looked up in
    ``data_dir`` first when one is given.
    """

    def __init__(
        self,
        language: str = "english",
        data_dir: Path | None = None,
        auto_download: bool = True,
    ):
        self.language = language
        self.data_dir = Path(data_dir) if data_dir else None
        self.auto_download = auto_download
        self.tokenizer: PunktTokenizer | None = None

    @property
    def resource_name(self) -> str:
        return f"tokenizers/punkt_tab/{self.language}/"

    def load_model(self) -> None:
        """Load the Punkt parameters. Performs blocking file and network I/O."""
        try:
            logger.info(f"Loading sentence tokenizer: {self.resource_name}")

            if self.data_dir and str(self.data_dir) not in nltk.data.path:
                nltk.data.path.insert(0, str(self.data_dir))

            self._ensure_resource()
            self.tokenizer = PunktTokenizer(self.language)

            logger.info("Sentence tokenizer loaded successfully")

        except Exception as e:
            logger.error(f"Error loading sentence tokenizer: {str(e)}")
            raise

    def _ensure_resource(self) -> None:
        try:
            nltk.data.find(self.resource_name)
        except LookupError:
            if not self.auto_download:
                raise
            logger.warning("punkt_tab not found locally, downloading")
            download_dir = str(self.data_dir) if self.data_dir else None
            if not nltk.download("punkt_tab", download_dir=download_dir, quiet=True):
                raise LookupError("Failed to download nltk resource punkt_tab")

    def segment(self, text: str) -> list[SentenceSpan]:
        """
        Split text into sentences.

        Args:
            text: Input text

        Returns:
            Ordered sentence spans; empty for empty or whitespace-only input
        """
        if self.tokenizer is None:
            raise ValueError("Tokenizer not loaded. Call load_model() first.")

        if not text or not text.strip():
            return []

        spans = []
        for start, end in self.tokenizer.span_tokenize(text):
            raw = text[start:end]
            sentence = raw.strip()
            if not sentence:
                continue
            offset = start + len(raw) - len(raw.lstrip())
            spans.append(
                SentenceSpan(text=sentence, start=offset, end=offset + len(sentence))
            )

        return spans
