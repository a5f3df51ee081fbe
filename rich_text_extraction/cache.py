"""Caching for OpenGraph lookups.

Any object with ``get(key)`` and ``set(key, value, ttl=None)`` can serve as a
cache backend; ``delete(key)`` is optional and only needed to clear entries.
Cache failures never break extraction: they are logged and the fetch result
is returned uncached.
"""

import os
import threading
import time
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, Union, runtime_checkable

import structlog

from .models import CacheOptions, OpenGraphRecord
from .opengraph import OpenGraphFetcher

logger = structlog.get_logger(__name__).bind(service="cache")

DEFAULT_CACHE_TTL = 3600.0  # seconds

CacheOptionsLike = Union[CacheOptions, Dict[str, Any], None]


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store used to memoize OpenGraph records."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ...


class MemoryCache:
    """Thread-safe in-process cache with optional TTL and size bound."""

    def __init__(self, max_entries: Optional[int] = None):
        """
        Args:
            max_entries: Evict the oldest entry once this many are stored
        """
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[Any, Optional[float]]]" = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MemoryCache":
        """Build a cache bounded by ``cache.max_entries`` from loaded settings."""
        max_entries = (config.get("cache") or {}).get("max_entries")
        return cls(max_entries=int(max_entries) if max_entries else None)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and time.monotonic() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        # No ttl keeps the entry until evicted
        expires_at = time.monotonic() + ttl if ttl is not None else None
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (value, expires_at)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


def build_cache_key(url: str, prefix: Optional[str] = None) -> str:
    """Cache key for a URL, namespaced as ``opengraph:<prefix>:<url>``."""
    return f"opengraph:{prefix}:{url}" if prefix else url


def ambient_app_name() -> Optional[str]:
    """Application name from the environment, used as default key prefix."""
    return os.environ.get("APP_NAME") or None


class OpenGraphService:
    """OpenGraph fetches with read-through/write-through caching."""

    def __init__(
        self,
        fetcher: Optional[OpenGraphFetcher] = None,
        default_ttl: float = DEFAULT_CACHE_TTL,
        app_name: Optional[str] = None,
    ):
        """
        Initialize service.

        Args:
            fetcher: OpenGraph fetcher (default settings when omitted)
            default_ttl: TTL in seconds when cache_options has no expires_in
            app_name: Default key prefix; falls back to the APP_NAME env var
        """
        self.fetcher = fetcher or OpenGraphFetcher()
        self.default_ttl = default_ttl
        self.app_name = app_name

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], fetcher: Optional[OpenGraphFetcher] = None
    ) -> "OpenGraphService":
        """Build a service from loaded settings."""
        cache_section = config.get("cache") or {}
        app_section = config.get("app") or {}
        return cls(
            fetcher=fetcher or OpenGraphFetcher.from_config(config),
            default_ttl=float(cache_section.get("ttl", DEFAULT_CACHE_TTL)),
            app_name=cache_section.get("key_prefix") or app_section.get("name"),
        )

    def resolve_key_prefix(self, options: CacheOptions) -> Optional[str]:
        """Explicit key_prefix, else the application name, else None."""
        if options.key_prefix:
            return options.key_prefix
        return self.app_name or ambient_app_name()

    def cache_key(self, url: str, cache_options: CacheOptionsLike = None) -> str:
        options = CacheOptions.coerce(cache_options)
        return build_cache_key(url, self.resolve_key_prefix(options))

    def _read(self, cache: CacheBackend, key: str) -> Optional[OpenGraphRecord]:
        try:
            cached = cache.get(key)
        except Exception as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None

        if cached is None:
            return None

        try:
            if isinstance(cached, OpenGraphRecord):
                return cached
            return OpenGraphRecord.model_validate(cached)
        except Exception as e:
            logger.warning("cache_entry_invalid", key=key, error=str(e))
            return None

    def _write(
        self, cache: CacheBackend, key: str, record: OpenGraphRecord, ttl: Optional[float]
    ) -> None:
        try:
            cache.set(key, record.model_dump(), ttl)
        except Exception as e:
            logger.warning("cache_write_failed", key=key, error=str(e))

    def get_or_fetch(
        self,
        url: str,
        cache: Optional[CacheBackend] = None,
        cache_options: CacheOptionsLike = None,
    ) -> OpenGraphRecord:
        """
        Return OpenGraph data for a URL, consulting the cache first.

        Without a cache every call fetches. Error records are never written,
        so a transient failure does not stick for the TTL window.

        Args:
            url: Page URL
            cache: Cache backend, or None to skip caching
            cache_options: key_prefix and expires_in overrides

        Returns:
            OpenGraphRecord, error-tagged on fetch failure
        """
        if cache is None:
            return self.fetcher.fetch(url)

        try:
            options = CacheOptions.coerce(cache_options)
        except Exception as e:
            logger.warning("cache_options_invalid", url=url, error=str(e))
            return self.fetcher.fetch(url)

        key = build_cache_key(url, self.resolve_key_prefix(options))

        cached = self._read(cache, key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return cached

        logger.debug("cache_miss", key=key)
        record = self.fetcher.fetch(url)

        if record.ok:
            ttl = options.expires_in if options.expires_in is not None else self.default_ttl
            self._write(cache, key, record, ttl)
        else:
            logger.debug("cache_skip_error_record", key=key, error=record.error)

        return record

    def clear_cache(
        self,
        url: str,
        cache: Optional[CacheBackend] = None,
        cache_options: CacheOptionsLike = None,
    ) -> bool:
        """
        Remove the cached entry for a URL.

        Returns:
            True if an entry was deleted; False when there is no cache, the
            backend cannot delete, or deletion failed
        """
        if cache is None or not hasattr(cache, "delete"):
            return False

        try:
            key = self.cache_key(url, cache_options)
            return bool(cache.delete(key))
        except Exception as e:
            logger.warning("cache_delete_failed", url=url, error=str(e))
            return False

    def clear_cache_for_urls(
        self,
        urls: Iterable[str],
        cache: Optional[CacheBackend] = None,
        cache_options: CacheOptionsLike = None,
    ) -> List[bool]:
        """Remove cached entries for several URLs."""
        return [self.clear_cache(url, cache, cache_options) for url in urls]
