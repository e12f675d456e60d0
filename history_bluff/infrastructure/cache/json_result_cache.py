"""JSON-file adapter for the classifier result cache."""

import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from ...domain.models.fact import Fact
from ...domain.ports.result_cache import CachedResult, CacheStats, normalize_query

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


class CacheFile(BaseModel):
    """On-disk layout of the cache."""

    version: int = CACHE_VERSION
    entries: Dict[str, CachedResult] = Field(default_factory=dict)


class JsonResultCache:
    """Size-bounded result cache persisted to a JSON file.

    The whole map lives in memory and is rewritten on every write. When
    the entry count exceeds ``max_entries`` the oldest writes are evicted.
    A missing, unreadable, corrupt or version-mismatched file starts an
    empty cache. With ``path=None`` nothing touches the disk.
    """

    def __init__(self, path: Optional[str] = None, max_entries: int = 500):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._path = Path(path).expanduser() if path else None
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: Dict[str, CachedResult] = self._load()

    def _load(self) -> Dict[str, CachedResult]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            cache_file = CacheFile.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Ignoring unreadable cache file {self._path}: {e}")
            return {}
        if cache_file.version != CACHE_VERSION:
            logger.info(f"🔄 Cache version {cache_file.version} != {CACHE_VERSION}, starting empty")
            return {}
        logger.info(f"💾 Loaded {len(cache_file.entries)} cached queries from {self._path}")
        return cache_file.entries

    def _save(self) -> None:
        if self._path is None:
            return
        payload = CacheFile(entries=self._entries).model_dump_json()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            # The in-memory cache stays valid; only persistence is lost
            logger.warning(f"⚠️ Could not write cache file {self._path}: {e}")

    def _evict(self) -> None:
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        oldest = sorted(self._entries, key=lambda key: self._entries[key].cached_at)[:overflow]
        for key in oldest:
            del self._entries[key]
        logger.debug(f"Evicted {len(oldest)} cache entries")

    def get(self, query: str) -> Optional[List[Fact]]:
        with self._lock:
            cached = self._entries.get(normalize_query(query))
            return list(cached.facts) if cached else None

    def put(self, query: str, facts: List[Fact]) -> None:
        self.put_many({query: facts})

    def put_many(self, items: Dict[str, List[Fact]]) -> None:
        """Store several queries with one file write."""
        if not items:
            return
        now = datetime.now(timezone.utc)
        with self._lock:
            for query, facts in items.items():
                key = normalize_query(query)
                # Reinsert so ties on cached_at still evict in write order
                self._entries.pop(key, None)
                self._entries[key] = CachedResult(facts=list(facts), cached_at=now)
            self._evict()
            self._save()

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self._save()
        logger.info("🧹 Result cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._entries), max_size=self._max_entries)
