"""Result caches for computed analytics, keyed by string with explicit timestamps."""
from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """A cached payload and the epoch second it was stored."""

    value: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


class ResultCache:
    """Interface for analytics result caching.

    ``ttl_seconds`` of ``None`` means an entry never expires, which is how
    previous-season reports are kept.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or time.time

    def get_entry(self, key: str) -> CacheEntry | None:
        raise NotImplementedError

    def set(self, key: str, value: Any, stored_at: float | None = None) -> CacheEntry:
        raise NotImplementedError

    def invalidate(self, key: str) -> None:
        raise NotImplementedError

    def get(self, key: str, ttl_seconds: float | None = None) -> Any | None:
        entry = self.get_entry(key)
        if entry is None:
            return None
        if ttl_seconds is not None and entry.age(self.clock()) >= ttl_seconds:
            logger.debug("Cache entry %s expired", key)
            return None
        return entry.value


class InMemoryResultCache(ResultCache):
    """Process-local cache for tests and single-process runs."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        super().__init__(clock)
        self._entries: Dict[str, CacheEntry] = {}

    def get_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any, stored_at: float | None = None) -> CacheEntry:
        entry = CacheEntry(value=value, stored_at=self.clock() if stored_at is None else stored_at)
        self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)


class JSONResultCache(ResultCache):
    """JSON-file-backed cache suitable for local runs; values must be JSON-serialisable."""

    def __init__(self, base_dir: str = "data/cache", clock: Optional[Clock] = None) -> None:
        super().__init__(clock)
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.base_dir / f"{safe_key}.json"

    def get_entry(self, key: str) -> CacheEntry | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt cache file %s", path)
            return None
        return CacheEntry(value=payload.get("value"), stored_at=float(payload.get("stored_at", 0)))

    def set(self, key: str, value: Any, stored_at: float | None = None) -> CacheEntry:
        entry = CacheEntry(value=value, stored_at=self.clock() if stored_at is None else stored_at)
        self._path(key).write_text(json.dumps({"value": entry.value, "stored_at": entry.stored_at}, indent=2))
        return entry

    def invalidate(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


def build_result_cache(backend: str = "memory", base_dir: str = "data/cache", clock: Optional[Clock] = None) -> ResultCache:
    if backend == "json":
        return JSONResultCache(base_dir=base_dir, clock=clock)
    if backend == "memory":
        return InMemoryResultCache(clock=clock)
    raise ValueError(f"Unknown cache backend '{backend}'")


__all__ = [
    "CacheEntry",
    "InMemoryResultCache",
    "JSONResultCache",
    "ResultCache",
    "build_result_cache",
]
