"""
Exercise catalog access.

The catalog comes from ExerciseDB (RapidAPI) and changes rarely, so a fetched
copy is kept for EXERCISE_CATALOG_TTL_DAYS in Redis when REDIS_URL is set, or
in process memory otherwise. A cache miss with an unreachable API raises
CatalogUnavailableError.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import httpx
from redis import Redis
from redis.exceptions import RedisError

from fitcore.core.clock import utcnow
from fitcore.core.config import settings
from fitcore.core.errors import CatalogUnavailableError
from fitcore.core.logging import log_event
from fitcore.models.exercise import ExerciseCatalogEntry

logger = logging.getLogger("fitcore")

CATALOG_KEY = "exercises:catalog"


class ExerciseCatalogClient:
    """Thin synchronous client for the ExerciseDB list endpoint."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        api_host: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url or settings.EXERCISE_DB_API_URL
        self.api_key = api_key if api_key is not None else settings.EXERCISE_DB_API_KEY
        self.api_host = api_host or settings.EXERCISE_DB_API_HOST
        self.timeout = timeout or settings.EXERCISE_DB_TIMEOUT_SECONDS
        self._transport = transport

    def fetch_all(self, limit: Optional[int] = None) -> List[ExerciseCatalogEntry]:
        if not self.api_key:
            raise CatalogUnavailableError("EXERCISE_DB_API_KEY is not configured")

        headers = {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.api_host,
        }
        params = {"limit": limit or settings.EXERCISE_CATALOG_LIMIT}

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.base_url, headers=headers, params=params)
        except httpx.HTTPError as e:
            raise CatalogUnavailableError(f"Exercise catalog request failed: {e}") from e

        if response.status_code >= 400:
            raise CatalogUnavailableError(f"Exercise catalog returned {response.status_code}")

        payload = response.json()
        if not isinstance(payload, list):
            raise CatalogUnavailableError("Exercise catalog returned an unexpected payload")
        return [ExerciseCatalogEntry.from_payload(item) for item in payload if isinstance(item, dict)]


class CatalogCache:
    """Redis-backed TTL cache with an in-process fallback."""

    def __init__(self, redis=None, *, ttl_days: Optional[int] = None, clock: Callable[[], datetime] = utcnow):
        self.redis = redis
        self.ttl_seconds = int(timedelta(days=ttl_days or settings.EXERCISE_CATALOG_TTL_DAYS).total_seconds())
        self._clock = clock
        self._local_cache: Dict[str, Any] = {}
        self._local_expiry: Dict[str, datetime] = {}

    def get_catalog(self) -> Optional[List[ExerciseCatalogEntry]]:
        payload = self._get(CATALOG_KEY)
        if payload is None:
            return None
        return [ExerciseCatalogEntry.from_payload(item) for item in payload]

    def set_catalog(self, entries: List[ExerciseCatalogEntry]) -> None:
        self._set(CATALOG_KEY, [entry.to_payload() for entry in entries], self.ttl_seconds)

    def invalidate(self) -> None:
        self._delete(CATALOG_KEY)
        logger.info("Exercise catalog cache invalidated")

    def _get(self, key: str) -> Optional[Any]:
        if self.redis:
            try:
                value = self.redis.get(key)
                if value:
                    return json.loads(value)
            except Exception as e:
                logger.warning(f"Cache get error for {key}: {e}")
            return None

        if key in self._local_cache:
            if self._local_expiry[key] > self._clock():
                return self._local_cache[key]
            del self._local_cache[key]
            del self._local_expiry[key]
        return None

    def _set(self, key: str, value: Any, ttl: int) -> None:
        if self.redis:
            try:
                self.redis.setex(key, ttl, json.dumps(value, default=str))
            except Exception as e:
                logger.warning(f"Cache set error for {key}: {e}")
            return

        self._local_cache[key] = value
        self._local_expiry[key] = self._clock() + timedelta(seconds=ttl)

    def _delete(self, key: str) -> None:
        if self.redis:
            try:
                self.redis.delete(key)
            except Exception as e:
                logger.warning(f"Cache delete error for {key}: {e}")
            return

        self._local_cache.pop(key, None)
        self._local_expiry.pop(key, None)


def get_redis_conn() -> Optional[Redis]:
    """Redis client when REDIS_URL is set and answers a ping, None otherwise."""
    if not settings.REDIS_URL:
        return None
    try:
        conn = Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2, socket_timeout=2)
        conn.ping()
    except RedisError as e:
        logger.warning(f"Redis unavailable: {e}. Using local catalog cache.")
        return None
    return conn


class ExerciseCatalogService:

    def __init__(self, client: Optional[ExerciseCatalogClient] = None, cache: Optional[CatalogCache] = None):
        self.client = client or ExerciseCatalogClient()
        self.cache = cache or CatalogCache(get_redis_conn())

    def get_catalog(self, *, refresh: bool = False) -> List[ExerciseCatalogEntry]:
        if not refresh:
            cached = self.cache.get_catalog()
            if cached is not None:
                return cached

        entries = self.client.fetch_all()
        self.cache.set_catalog(entries)
        log_event(
            "info",
            "exercise.catalog_refreshed",
            request_id=None,
            event_type="exercise_catalog",
            extra={"entries": len(entries)},
        )
        return entries

    def invalidate(self) -> None:
        self.cache.invalidate()


_service_instance: Optional[ExerciseCatalogService] = None


def get_catalog_service() -> ExerciseCatalogService:
    global _service_instance
    if _service_instance is None:
        _service_instance = ExerciseCatalogService()
    return _service_instance


def reset_catalog_service():
    """FOR TESTING ONLY."""
    global _service_instance
    _service_instance = None
