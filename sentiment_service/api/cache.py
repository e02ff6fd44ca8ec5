"""
Redis caching layer for analysis results.
"""

import hashlib
import json
import logging

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from sentiment_service.analysis import Analysis

logger = logging.getLogger(__name__)


class AnalysisCache:
    """
    Redis-based cache for complete text analyses.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        ttl: int = 3600,
        namespace: str = "default",
    ):
        """
        Args:
            ttl: Time to live in seconds
            namespace: Key segment identifying the classifier that produced the entries
        """
        self.redis_url = redis_url
        self.ttl = ttl
        self.namespace = namespace
        self.redis: Redis | None = None
        self.connected = False

    async def connect(self) -> bool:
        """Connect to Redis.

        Returns:
            bool: True if connection succeeded, False otherwise
        """
        try:
            logger.debug(f"Attempting to connect to Redis at: {self.redis_url}")
            self.redis = Redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            await self.redis.ping()

            self.connected = True
            logger.info("Successfully connected to Redis")
            return True

        except (RedisError, OSError) as e:
            logger.error(f"Failed to connect to Redis: {str(e)}")
            self.connected = False
            return False

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis and self.connected:
            try:
                await self.redis.aclose()
                self.connected = False
                logger.info("Disconnected from Redis")
            except RedisError as e:
                logger.error(f"Error disconnecting from Redis: {str(e)}")

    def _generate_cache_key(self, text: str) -> str:
        """Generate a consistent cache key for the given text."""
        text_hash = hashlib.sha256(text.encode("utf-8")).hexdigest()
        return f"analysis:{self.namespace}:{text_hash}"

    async def get(self, text: str) -> Analysis | None:
        """
        Get cached analysis for text.

        Args:
            text: Input text to check cache for

        Returns:
            Cached analysis or None if not found
        """
        if not self.connected or not self.redis:
            return None

        cache_key = self._generate_cache_key(text)
        try:
            cached_result = await self.redis.get(cache_key)

            if not cached_result:
                logger.debug(f"Cache miss for key: {cache_key}")
                return None

            result = Analysis.model_validate(json.loads(cached_result))
            logger.debug(f"Cache hit for key: {cache_key}")
            return result

        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Invalid entry in cache for key {cache_key}: {str(e)}")
            await self.delete(text)
            return None
        except RedisError as e:
            logger.error(f"Redis error getting cache: {str(e)}")
            return None

    async def set(self, text: str, analysis: Analysis) -> bool:
        """
        Cache analysis for text.

        Returns:
            True if successfully cached, False otherwise
        """
        if not self.connected or not self.redis:
            return False

        try:
            cache_key = self._generate_cache_key(text)
            await self.redis.setex(cache_key, self.ttl, analysis.model_dump_json())
            logger.debug(f"Cached result for key: {cache_key}")
            return True

        except RedisError as e:
            logger.error(f"Error setting cache: {str(e)}")
            return False

    async def delete(self, text: str) -> bool:
        """
        Delete a cached entry.

        Returns:
            True if deleted, False otherwise
        """
        if not self.connected or not self.redis:
            return False

        try:
            cache_key = self._generate_cache_key(text)
            return bool(await self.redis.delete(cache_key))
        except RedisError as e:
            logger.error(f"Error deleting cache key: {str(e)}")
            return False
