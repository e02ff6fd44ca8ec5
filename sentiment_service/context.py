"""
Process-wide service context: guarded models, worker pool, cache and metrics.
"""

import asyncio
import logging
from dataclasses import dataclass

from sentiment_service.analysis import Analysis, analyze
from sentiment_service.api.cache import AnalysisCache
from sentiment_service.config import Settings
from sentiment_service.dispatch import BlockingTaskDispatcher
from sentiment_service.model import ModelHandle, SentenceTokenizer, SentimentClassifier
from sentiment_service.model.types import Classifier, Tokenizer
from sentiment_service.monitoring.metrics import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """
    Everything a request needs, built once at startup and shared by reference.
    """

    settings: Settings
    tokenizer: ModelHandle[Tokenizer]
    classifier: ModelHandle[Classifier]
    dispatcher: BlockingTaskDispatcher
    metrics: MetricsCollector
    cache: AnalysisCache | None = None

    async def analyze(self, text: str) -> Analysis:
        """Run an analysis on the worker pool with both models held."""

        def job() -> Analysis:
            # Lock order: tokenizer, then classifier
            with self.tokenizer.acquire() as tokenizer, self.classifier.acquire() as classifier:
                return analyze(text, tokenizer, classifier)

        return await self.dispatcher.submit(job)

    async def close(self) -> None:
        """Release resources. Running jobs are allowed to finish."""
        try:
            if self.cache:
                await self.cache.disconnect()
                logger.info("Cache disconnected")
        finally:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.dispatcher.shutdown)


def create_context(
    settings: Settings,
    tokenizer: Tokenizer,
    classifier: Classifier,
    metrics: MetricsCollector | None = None,
    cache: AnalysisCache | None = None,
) -> ServiceContext:
    """Wrap already-loaded models into a context."""
    metrics = metrics or MetricsCollector()
    return ServiceContext(
        settings=settings,
        tokenizer=ModelHandle("tokenizer", tokenizer, metrics),
        classifier=ModelHandle("classifier", classifier, metrics),
        dispatcher=BlockingTaskDispatcher(settings.worker_threads, metrics),
        metrics=metrics,
        cache=cache,
    )


def load_tokenizer(settings: Settings) -> SentenceTokenizer:
    tokenizer = SentenceTokenizer(
        language=settings.tokenizer_language,
        data_dir=settings.tokenizer_data_dir,
        auto_download=settings.tokenizer_auto_download,
    )
    tokenizer.load_model()
    return tokenizer


def load_classifier(settings: Settings) -> SentimentClassifier:
    classifier = SentimentClassifier(
        model_name=settings.classifier_model, batch_size=settings.batch_size
    )
    classifier.load_model()
    return classifier


async def build_context(settings: Settings) -> ServiceContext:
    """
    Load both models and connect optional services.

    Model loading is blocking I/O and runs off the event loop. Any load
    failure propagates; the caller is expected to abort startup.
    """
    logger.info("Initializing application components...")

    metrics = MetricsCollector()
    if settings.metrics_port:
        metrics.start_prometheus_server(settings.metrics_port)

    loop = asyncio.get_running_loop()
    tokenizer = await loop.run_in_executor(None, load_tokenizer, settings)
    metrics.set_model_loaded("tokenizer")
    classifier = await loop.run_in_executor(None, load_classifier, settings)
    metrics.set_model_loaded("classifier")
    logger.info(f"Models loaded: {classifier.get_model_info()}")

    cache = None
    if settings.cache_enabled:
        cache = AnalysisCache(
            redis_url=settings.redis_url,
            ttl=settings.cache_ttl,
            namespace=settings.classifier_model,
        )
        if await cache.connect():
            logger.info("Cache connected successfully")
        else:
            logger.warning("Cache connection failed, continuing without cache")
            cache = None

    context = create_context(settings, tokenizer, classifier, metrics=metrics, cache=cache)
    logger.info("All components initialized successfully")
    return context
