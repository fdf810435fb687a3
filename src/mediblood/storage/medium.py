"""Key-value string media backing the local durable cache."""

import json
import os
import tempfile
from typing import Dict, Optional, Protocol

from loguru import logger

from mediblood.errors import StorageUnavailable


class KeyValueMedium(Protocol):
    """
    A protocol for persisted string stores.

    Implementations behave like a browser's local storage: string keys map to
    string values, and both operations raise ``StorageUnavailable`` when the
    medium cannot be used.
    """

    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent.
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: String to store
        """
        ...


def _size_of(items: Dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())


class InMemoryMedium:
    """Non-persistent medium for ephemeral sessions and tests."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageUnavailable(f"Cannot store non-string value under {key!r}")
        updated = dict(self._items)
        updated[key] = value
        if self.quota_bytes is not None and _size_of(updated) > self.quota_bytes:
            raise StorageUnavailable(f"Storage quota of {self.quota_bytes} bytes exceeded")
        self._items = updated


class JsonFileMedium:
    """
    File-backed medium holding one JSON object of string values.

    Every write rewrites the whole file through a temporary file and an atomic
    rename, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str, quota_bytes: Optional[int] = None):
        """
        Initialize the medium with a file path.

        Args:
            path: Path to the JSON file
            quota_bytes: Optional maximum size of the stored data
        """
        self.path = path
        self.quota_bytes = quota_bytes

    def _ensure_directory(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageUnavailable(f"Unexpected contents in {self.path}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageUnavailable(f"Cannot store non-string value under {key!r}")
        try:
            items = self._load()
        except StorageUnavailable:
            logger.warning(f"Discarding unreadable storage file {self.path}")
            items = {}
        items[key] = value

        if self.quota_bytes is not None and _size_of(items) > self.quota_bytes:
            raise StorageUnavailable(f"Storage quota of {self.quota_bytes} bytes exceeded")

        try:
            self._ensure_directory()
            fd, tmp_path = tempfile.mkstemp(
                prefix=".mediblood-", suffix=".tmp", dir=os.path.dirname(self.path) or "."
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(items, fh, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageUnavailable(f"Failed to write {self.path}: {e}") from e
