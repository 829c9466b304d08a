from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from scout_desk.core.config import Settings
from scout_desk.core.logger import get_logger
from scout_desk.services import store_client
from scout_desk.services.store_client import StoreReadError

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Viewer-scoped key/value persistence (shadow squads, session, radar list)."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Stored value, or None when absent; raises when the read itself failed."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Persist value; must be durable when it returns."""

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        # Stored serialised so callers never share mutable state with the store
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """Local-storage equivalent backed by a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Local storage file %s is corrupt; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)


class RemoteKeyValueStore(KeyValueStore):
    """Keys stored as nodes under a prefix in the remote store."""

    def __init__(self, prefix: str = "kv", client: Any = store_client) -> None:
        self.prefix = prefix.strip("/")
        self._client = client

    def _path(self, key: str) -> str:
        return f"{self.prefix}/{key}"

    def get(self, key: str) -> Optional[Any]:
        ok, data = self._client.fetch(self._path(key))
        if not ok:
            raise StoreReadError(f"Could not read '{key}' from remote store")
        return data

    def set(self, key: str, value: Any) -> None:
        ok, status, detail = self._client.put(self._path(key), value)
        if not ok:
            raise RuntimeError(f"Failed to persist '{key}' (status {status}): {detail}")

    def delete(self, key: str) -> None:
        ok, status, detail = self._client.delete(self._path(key))
        if not ok and status != 404:
            raise RuntimeError(f"Failed to delete '{key}' (status {status}): {detail}")


def local_store(settings: Settings) -> KeyValueStore:
    return JsonFileKeyValueStore(settings.local_storage_path)


def squad_store(settings: Settings, client: Any = store_client) -> KeyValueStore:
    """Remote store when configured, otherwise the viewer-local file."""
    if settings.store_url:
        return RemoteKeyValueStore(prefix="shadow_squads", client=client)
    return local_store(settings)
