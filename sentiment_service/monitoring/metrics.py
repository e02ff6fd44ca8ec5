"""
Metrics collection and monitoring for the sentiment analysis API.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    start_http_server,
)

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Collects and manages application metrics.

    Called from both the event loop and worker threads.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        # Thread-safe counters
        self._lock = threading.Lock()
        self.registry = registry or CollectorRegistry()

        self.request_count = 0
        self.analysis_count = 0
        self.sentence_count = 0
        self.cache_hit_count = 0
        self.cache_miss_count = 0
        self.error_counts: dict[str, int] = {}

        # Response time tracking
        self.max_request_duration = 0.0
        self.min_request_duration = float('inf')
        self.total_request_duration = 0.0

        # Worker pool tracking
        self.jobs_in_flight = 0
        self.job_count = 0
        self.total_job_duration = 0.0
        self.max_lock_wait = 0.0

        self.setup_prometheus_metrics()

        self.start_time = time.time()

    def setup_prometheus_metrics(self):
        """Setup Prometheus metrics."""
        self.prom_requests_total = Counter(
            'sentiment_api_requests_total',
            'Total number of API requests',
            ['endpoint', 'status'],
            registry=self.registry
        )

        self.prom_analyses_total = Counter(
            'sentiment_api_analyses_total',
            'Total number of texts analyzed',
            registry=self.registry
        )

        self.prom_sentences_total = Counter(
            'sentiment_api_sentences_total',
            'Total number of sentences classified',
            registry=self.registry
        )

        self.prom_cache_operations_total = Counter(
            'sentiment_api_cache_operations_total',
            'Total number of cache operations',
            ['operation'],  # hit or miss
            registry=self.registry
        )

        self.prom_errors_total = Counter(
            'sentiment_api_errors_total',
            'Total number of errors',
            ['kind'],
            registry=self.registry
        )

        self.prom_request_duration = Histogram(
            'sentiment_api_request_duration_seconds',
            'Request duration in seconds',
            ['endpoint'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
            registry=self.registry
        )

        self.prom_job_duration = Histogram(
            'sentiment_api_job_duration_seconds',
            'Time spent running an inference job on a worker thread',
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
            registry=self.registry
        )

        self.prom_lock_wait = Histogram(
            'sentiment_api_model_lock_wait_seconds',
            'Time spent waiting for exclusive model access',
            ['model'],
            buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=self.registry
        )

        self.prom_jobs_in_flight = Gauge(
            'sentiment_api_jobs_in_flight',
            'Number of inference jobs currently running',
            registry=self.registry
        )

        self.prom_model_loaded = Gauge(
            'sentiment_api_model_loaded',
            'Whether the model is loaded (1) or not (0)',
            ['model'],
            registry=self.registry
        )

    def record_request_duration(self, duration: float, endpoint: str = "analyze", status: int = 200):
        """Record request duration."""
        with self._lock:
            self.request_count += 1
            self.total_request_duration += duration

            if duration > self.max_request_duration:
                self.max_request_duration = duration

            if duration < self.min_request_duration:
                self.min_request_duration = duration

            self.prom_request_duration.labels(endpoint=endpoint).observe(duration)
            self.prom_requests_total.labels(endpoint=endpoint, status=str(status)).inc()

    def record_analysis(self, sentences: int):
        """Record a completed analysis."""
        with self._lock:
            self.analysis_count += 1
            self.sentence_count += sentences
            self.prom_analyses_total.inc()
            self.prom_sentences_total.inc(sentences)

    def increment_cache_hit_count(self, count: int = 1):
        with self._lock:
            self.cache_hit_count += count
            self.prom_cache_operations_total.labels(operation="hit").inc(count)

    def increment_cache_miss_count(self, count: int = 1):
        with self._lock:
            self.cache_miss_count += count
            self.prom_cache_operations_total.labels(operation="miss").inc(count)

    def increment_error_count(self, kind: str = "internal"):
        """Increment error count for an error kind."""
        with self._lock:
            self.error_counts[kind] = self.error_counts.get(kind, 0) + 1
            self.prom_errors_total.labels(kind=kind).inc()

    def job_started(self):
        with self._lock:
            self.jobs_in_flight += 1
            self.prom_jobs_in_flight.inc()

    def job_finished(self, duration: float):
        with self._lock:
            self.jobs_in_flight -= 1
            self.job_count += 1
            self.total_job_duration += duration
            self.prom_jobs_in_flight.dec()
            self.prom_job_duration.observe(duration)

    def record_lock_wait(self, model: str, wait: float):
        with self._lock:
            if wait > self.max_lock_wait:
                self.max_lock_wait = wait
            self.prom_lock_wait.labels(model=model).observe(wait)

    def set_model_loaded(self, model: str, loaded: bool = True):
        self.prom_model_loaded.labels(model=model).set(1 if loaded else 0)

    def get_metrics(self) -> dict[str, Any]:
        """Get current metrics."""
        with self._lock:
            avg_request_duration = 0.0
            if self.request_count > 0:
                avg_request_duration = self.total_request_duration / self.request_count

            avg_job_duration = 0.0
            if self.job_count > 0:
                avg_job_duration = self.total_job_duration / self.job_count

            cache_hit_ratio = 0.0
            total_cache_operations = self.cache_hit_count + self.cache_miss_count
            if total_cache_operations > 0:
                cache_hit_ratio = self.cache_hit_count / total_cache_operations

            uptime = time.time() - self.start_time

            return {
                "requests": {
                    "total": self.request_count,
                    "analyses": self.analysis_count,
                    "sentences": self.sentence_count,
                    "errors": sum(self.error_counts.values()),
                    "errors_by_kind": dict(self.error_counts)
                },
                "performance": {
                    "avg_request_duration": avg_request_duration,
                    "max_request_duration": self.max_request_duration,
                    "min_request_duration": self.min_request_duration if self.min_request_duration != float('inf') else 0.0,
                    "total_request_duration": self.total_request_duration,
                    "jobs": {
                        "in_flight": self.jobs_in_flight,
                        "completed": self.job_count,
                        "avg_duration": avg_job_duration,
                        "max_lock_wait": self.max_lock_wait
                    }
                },
                "cache": {
                    "hits": self.cache_hit_count,
                    "misses": self.cache_miss_count,
                    "hit_ratio": cache_hit_ratio,
                    "total_operations": total_cache_operations
                },
                "system": {
                    "uptime": uptime,
                    "start_time": datetime.fromtimestamp(self.start_time).isoformat()
                }
            }

    def get_prometheus_metrics(self) -> bytes:
        """Get Prometheus formatted metrics."""
        return generate_latest(self.registry)

    def start_prometheus_server(self, port: int = 9090):
        """Start Prometheus metrics server."""
        try:
            start_http_server(port, registry=self.registry)
            logger.info(f"Prometheus metrics server started on port {port}")
        except OSError as e:
            logger.error(f"Failed to start Prometheus metrics server: {e}")

    def reset_metrics(self):
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self.request_count = 0
            self.analysis_count = 0
            self.sentence_count = 0
            self.cache_hit_count = 0
            self.cache_miss_count = 0
            self.error_counts = {}
            self.max_request_duration = 0.0
            self.min_request_duration = float('inf')
            self.total_request_duration = 0.0
            self.job_count = 0
            self.total_job_duration = 0.0
            self.max_lock_wait = 0.0

            self.start_time = time.time()
