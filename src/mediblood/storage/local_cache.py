"""Local durable cache for records created while the remote store is unavailable."""

import json
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from mediblood.errors import StorageUnavailable
from mediblood.models import Record
from mediblood.storage.medium import KeyValueMedium

DEFAULT_ORDERS_KEY = "medibloodOrdersV1"
DEFAULT_LAST_ORDER_KEY = "medibloodLastOrderIdV1"
DEFAULT_LIST_LIMIT = 200


class LocalOrderCache:
    """
    Append-only record store on top of a key-value medium.

    Reads degrade to an empty collection when the medium is unreadable or
    holds something other than a list; writes are best effort and never fail
    the caller.
    """

    def __init__(
        self,
        medium: KeyValueMedium,
        orders_key: str = DEFAULT_ORDERS_KEY,
        last_order_key: str = DEFAULT_LAST_ORDER_KEY,
        list_limit: int = DEFAULT_LIST_LIMIT,
    ):
        self.medium = medium
        self.orders_key = orders_key
        self.last_order_key = last_order_key
        self.list_limit = list_limit

    def _load_raw(self) -> List[Dict[str, Any]]:
        try:
            raw = self.medium.get_item(self.orders_key)
            parsed = json.loads(raw) if raw else None
        except (StorageUnavailable, ValueError) as e:
            logger.warning(f"Local order cache unreadable, treating as empty: {e}")
            return []
        if not isinstance(parsed, list):
            return []
        return [entry for entry in parsed if isinstance(entry, dict)]

    def _save_raw(self, entries: List[Dict[str, Any]]) -> None:
        try:
            self.medium.set_item(self.orders_key, json.dumps(entries, ensure_ascii=False))
        except (StorageUnavailable, TypeError, ValueError) as e:
            logger.warning(f"Failed to persist local order cache: {e}")

    @staticmethod
    def _parse(entry: Dict[str, Any]) -> Optional[Record]:
        try:
            return Record.model_validate(entry)
        except ValidationError as e:
            logger.debug(f"Skipping malformed cached record {entry.get('id')!r}: {e}")
            return None

    def append(self, record: Record) -> Record:
        """
        Add a record to the persisted collection.

        Args:
            record: Record to store

        Returns:
            Record: The same record, whether or not it could be persisted
        """
        entries = self._load_raw()
        entries.append(record.to_wire())
        self._save_raw(entries)
        logger.debug(f"Cached record {record.id} locally ({len(entries)} total)")
        return record

    def find(self, order_id: str) -> Optional[Record]:
        """
        Return the first cached record with the given id.

        Args:
            order_id: Identifier to look up

        Returns:
            The record, or None if no cached record matches.
        """
        for entry in self._load_raw():
            if entry.get("id") == order_id:
                record = self._parse(entry)
                if record is not None:
                    return record
        return None

    def list(self, limit: Optional[int] = None) -> List[Record]:
        """
        Return cached records, newest first.

        Args:
            limit: Maximum number of records, defaults to the configured list limit

        Returns:
            List[Record]: Records sorted descending by creation timestamp
        """
        limit = self.list_limit if limit is None else limit
        entries = sorted(
            self._load_raw(),
            key=lambda entry: str(entry.get("createdAt") or ""),
            reverse=True,
        )
        records = []
        for entry in entries:
            if len(records) >= limit:
                break
            record = self._parse(entry)
            if record is not None:
                records.append(record)
        return records

    def remember_last_submitted(self, order_id: str) -> None:
        """Persist the last submitted order id for pre-filling later lookups."""
        try:
            self.medium.set_item(self.last_order_key, str(order_id))
        except StorageUnavailable as e:
            logger.warning(f"Failed to remember last order id: {e}")

    def last_submitted(self) -> str:
        """Return the last submitted order id, or an empty string."""
        try:
            return self.medium.get_item(self.last_order_key) or ""
        except StorageUnavailable as e:
            logger.warning(f"Failed to read last order id: {e}")
            return ""
