"""
Key-value persistence for client collections.

Each collection (schedules, workout/week/program libraries, legacy presets)
is a JSON-serializable value stored under one string key. Writes are
last-write-wins; there is no versioning or conflict detection.

Backends:
- InMemoryStore  - process-local dict (default, tests)
- JsonFileStore  - one JSON object on disk, key -> value
- SupabaseStore  - rows of (key, value) in a Supabase table
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import create_client

from workout_planner_api.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a backend cannot persist a value."""


class KeyValueStore(ABC):
    """Load and save a JSON value under a fixed key."""

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when absent or unreadable."""

    @abstractmethod
    def save(self, key: str, value: Any) -> bool:
        """Persist ``value`` under ``key``. Returns True on success."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if something was removed."""


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Values are JSON round-tripped so callers never share objects."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, value: Any) -> bool:
        self._data[key] = json.dumps(value)
        return True

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


class JsonFileStore(KeyValueStore):
    """All keys in one JSON object on disk."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Store file {self.path} does not hold a JSON object")
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write store file {self.path}: {e}") from e

    def load(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def save(self, key: str, value: Any) -> bool:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        return True

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True


def get_supabase_client():
    """Get Supabase client instance, or None when not configured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured. Supabase storage will be disabled.")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


class SupabaseStore(KeyValueStore):
    """Rows of ``(key, value, updated_at)`` in a Supabase table."""

    def __init__(self, table: Optional[str] = None, client=None) -> None:
        self.table = table or settings.STORAGE_TABLE
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def load(self, key: str) -> Optional[Any]:
        supabase = self._get_client()
        if not supabase:
            return None
        try:
            result = (
                supabase.table(self.table)
                .select("value")
                .eq("key", key)
                .single()
                .execute()
            )
            if result.data:
                return result.data.get("value")
            return None
        except Exception as e:
            # single() raises when no rows match
            if "no rows" in str(e).lower() or "0 rows" in str(e).lower():
                logger.debug("Store MISS: %s", key)
                return None
            logger.error("Store read error for %s: %s", key, e)
            return None

    def save(self, key: str, value: Any) -> bool:
        supabase = self._get_client()
        if not supabase:
            return False
        try:
            supabase.table(self.table).upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="key",
            ).execute()
            return True
        except Exception as e:
            logger.error("Store save error for %s: %s", key, e)
            return False

    def delete(self, key: str) -> bool:
        supabase = self._get_client()
        if not supabase:
            return False
        try:
            result = supabase.table(self.table).delete().eq("key", key).execute()
            return bool(result.data)
        except Exception as e:
            logger.error("Store delete error for %s: %s", key, e)
            return False


_store: Optional[KeyValueStore] = None


def create_store(backend: Optional[str] = None) -> KeyValueStore:
    backend = backend or settings.STORAGE_BACKEND
    if backend == "file":
        return JsonFileStore(settings.STORAGE_PATH)
    if backend == "supabase":
        return SupabaseStore(settings.STORAGE_TABLE)
    return InMemoryStore()


def get_store() -> KeyValueStore:
    """Process-wide store for the configured backend."""
    global _store
    if _store is None:
        _store = create_store()
        logger.info("Using %s storage backend", type(_store).__name__)
    return _store
