"""
Binary sentiment classifier using a pre-trained transformers model.
"""

import logging
from typing import Any

import torch
from transformers import AutoModelForSequenceClassification, AutoTokenizer, pipeline

from sentiment_service.model.types import Polarity, SentimentResult

logger = logging.getLogger(__name__)

# Checkpoints report either named labels or LABEL_<id>
LABEL_MAPPING = {
    "POSITIVE": Polarity.POSITIVE,
    "NEGATIVE": Polarity.NEGATIVE,
    "LABEL_1": Polarity.POSITIVE,
    "LABEL_0": Polarity.NEGATIVE,
}


class SentimentClassifier:
    """
    Sentiment classifier using distilbert-base-uncased-finetuned-sst-2-english by default.
    """

    def __init__(
        self,
        model_name: str = "distilbert-base-uncased-finetuned-sst-2-english",
        batch_size: int = 32,
    ):
        self.model_name = model_name
        self.batch_size = batch_size
        self.tokenizer = None
        self.model = None
        self.pipeline = None
        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")

    def load_model(self) -> None:
        """Load the pre-trained model and tokenizer."""
        try:
            logger.info(f"Loading classifier: {self.model_name}")

            self.tokenizer = AutoTokenizer.from_pretrained(self.model_name)
            self.model = AutoModelForSequenceClassification.from_pretrained(
                self.model_name
            )

            self.model.to(self.device)
            self.model.eval()

            self.pipeline = pipeline(
                "sentiment-analysis",
                model=self.model,
                tokenizer=self.tokenizer,
                device=0 if self.device.type == "cuda" else -1,
            )

            logger.info(f"Classifier loaded successfully on {self.device}")

        except Exception as e:
            logger.error(f"Error loading classifier: {str(e)}")
            raise

    def predict(self, texts: list[str]) -> list[SentimentResult]:
        """
        Classify a batch of sentences.

        Args:
            texts: Sentences to classify

        Returns:
            One result per input, in input order
        """
        if self.pipeline is None:
            raise ValueError("Model not loaded. Call load_model() first.")

        if not texts:
            return []

        outputs = self.pipeline(texts, batch_size=self.batch_size, truncation=True)

        results = []
        for output in outputs:
            label = output["label"]
            polarity = LABEL_MAPPING.get(label.upper())
            if polarity is None:
                raise ValueError(f"Unsupported sentiment label: {label}")
            results.append(SentimentResult(polarity=polarity, magnitude=float(output["score"])))

        return results

    def get_model_info(self) -> dict[str, Any]:
        """Get information about the loaded model."""
        return {
            "model_name": self.model_name,
            "device": str(self.device),
            "model_loaded": self.model is not None,
        }
