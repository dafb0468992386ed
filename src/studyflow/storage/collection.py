# src/studyflow/storage/collection.py

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CollectionStore(Generic[T]):
    """
    Base for the feature stores: one JSON array under one fixed storage key.

    Invariants:
    - the in-memory list is the source of truth, storage is a mirror;
    - every mutation builds a new list and goes through `_commit`, which
      replaces the list and re-serializes the whole collection;
    - records are looked up by id with a linear scan.
    """

    storage_key: ClassVar[str]

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._items: list[T] = self._load()
        logger.info("%s loaded key=%s total=%s", type(self).__name__, self.storage_key, len(self._items))

    # ---- subclass hooks ----

    @staticmethod
    def _decode(raw: dict[str, Any]) -> T:
        raise NotImplementedError

    @staticmethod
    def _encode(item: T) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def _item_id(item: T) -> str:
        return str(getattr(item, "id"))

    # ---- persistence ----

    def _load(self) -> list[T]:
        raw = self._storage.get_item(self.storage_key)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Corrupt JSON under key=%s; starting empty.", self.storage_key)
            return []

        if not isinstance(data, list):
            logger.warning("Expected a JSON array under key=%s; starting empty.", self.storage_key)
            return []

        out: list[T] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            try:
                out.append(self._decode(entry))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed record under key=%s: %r", self.storage_key, entry)
        return out

    def _commit(self, items: list[T]) -> None:
        # Encode before swapping so an unencodable record never reaches memory.
        payload = json.dumps([self._encode(i) for i in items], ensure_ascii=False)
        self._items = items
        try:
            self._storage.set_item(self.storage_key, payload)
        except sqlite3.Error:
            # In-memory state stays authoritative; next successful write mirrors it again.
            logger.exception("Failed to persist key=%s", self.storage_key)

    # ---- shared helpers ----

    @property
    def items(self) -> list[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> T | None:
        for item in self._items:
            if self._item_id(item) == item_id:
                return item
        return None

    def resolve_id(self, prefix: str) -> str | None:
        """Return the single id starting with `prefix` (console uses short ids)."""
        prefix = (prefix or "").strip()
        if not prefix:
            return None
        matches = [self._item_id(i) for i in self._items if self._item_id(i).startswith(prefix)]
        return matches[0] if len(matches) == 1 else None

    def _replace(self, item_id: str, fn: Callable[[T], T]) -> T | None:
        updated: T | None = None
        new_items: list[T] = []
        for item in self._items:
            if self._item_id(item) == item_id:
                updated = fn(item)
                new_items.append(updated)
            else:
                new_items.append(item)
        if updated is None:
            return None
        self._commit(new_items)
        return updated

    def delete(self, item_id: str) -> bool:
        new_items = [i for i in self._items if self._item_id(i) != item_id]
        if len(new_items) == len(self._items):
            return False
        self._commit(new_items)
        logger.debug("%s deleted id=%s", type(self).__name__, item_id)
        return True
