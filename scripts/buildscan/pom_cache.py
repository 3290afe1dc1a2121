"""Descriptor cache backends and the enable/fallback policy.

The descriptor parser owns the entry format; keys are strings and values are
any picklable object, returned unchanged by every backend. Conflicting
writes are last-writer-wins.
"""

from __future__ import annotations

import logging
import pickle
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional, Protocol

from scripts.buildscan.errors import CacheInitializationError

logger = logging.getLogger(__name__)

CACHE_DIR_NAME = ".rewrite-cache"
CACHE_DB_NAME = "pom-cache.db"


class PomCache(Protocol):
    """Capabilities the descriptor parser relies on."""

    def get(self, key: str) -> Optional[Any]: ...

    def put(self, key: str, value: Any) -> None: ...

    def close(self) -> None: ...


class _CacheStats:
    def __init__(self):
        self.hits = 0
        self.misses = 0

    def record(self, value: Any) -> Any:
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def stats(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}


class NoopPomCache(_CacheStats):
    """Caching disabled: every lookup misses."""

    persistent = False

    def get(self, key: str) -> Optional[Any]:
        return self.record(None)

    def put(self, key: str, value: Any) -> None:
        pass

    def close(self) -> None:
        pass


class InMemoryPomCache(_CacheStats):
    """Volatile cache living for the duration of one invocation."""

    persistent = False

    def __init__(self):
        super().__init__()
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self.record(self._entries.get(key))

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def close(self) -> None:
        with self._lock:
            self._entries.clear()


class SqlitePomCache(_CacheStats):
    """Persistent cache stored in a SQLite database.

    The database lives in ``<directory>/.rewrite-cache/pom-cache.db``. SQLite
    serializes concurrent writers across processes.
    """

    persistent = True

    def __init__(self, directory: Path | str):
        super().__init__()
        self.db_path = Path(directory) / CACHE_DIR_NAME / CACHE_DB_NAME
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), timeout=30, check_same_thread=False)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS pom_cache (key TEXT PRIMARY KEY, value BLOB NOT NULL)"
        )
        self._conn.commit()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM pom_cache WHERE key = ?", (key,)
            ).fetchone()
        return self.record(pickle.loads(row[0]) if row else None)

    def put(self, key: str, value: Any) -> None:
        payload = sqlite3.Binary(pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL))
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO pom_cache (key, value) VALUES (?, ?)", (key, payload)
            )
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def initialize_cache(
    enabled: bool,
    directory: Optional[Path | str] = None,
    log: Optional[logging.Logger] = None,
) -> PomCache:
    """Choose the cache backing for one invocation.

    Args:
        enabled: Whether descriptor caching is wanted at all.
        directory: Root of the persistent cache. Defaults to the user's home.
        log: Logger for diagnostics. Defaults to the module logger.

    Returns:
        A no-op cache when disabled, otherwise a persistent cache, or an
        in-memory cache when the persistent one cannot be constructed.
    """
    log = log or logger
    if not enabled:
        return NoopPomCache()

    root = Path(directory) if directory is not None else Path.home()
    try:
        return SqlitePomCache(root)
    except Exception as e:
        error = CacheInitializationError(
            f"Unable to initialize persistent pom cache: {e}", file=str(root)
        )
        log.warning("Unable to initialize persistent pom cache, falling back to in-memory cache")
        log.debug(str(error))
        return InMemoryPomCache()
