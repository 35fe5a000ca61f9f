"""
Pluggable persistence interface.

Entities are stored as JSON-compatible dicts grouped in named collections.
Every operation runs inside a transaction; callers that need several
operations to be atomic (read-then-write) wrap them in ``transaction()``.
Nested transactions join the outermost one.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Set, Union

from ..utils.exceptions import StorageError

Key = Union[int, str]
State = Dict[str, Dict[str, Any]]

COLLECTIONS = ("users", "sessions", "products", "cart_items", "orders")


def empty_collection() -> Dict[str, Any]:
    return {"next_id": 1, "records": {}}


class Repository(ABC):
    """Collection store with get/create/update/delete per entity"""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._state: Optional[State] = None
        self._dirty: Set[str] = set()

    # Backend hooks

    @abstractmethod
    def _begin(self) -> State:
        """Return a private working copy of every collection"""

    @abstractmethod
    def _commit(self, state: State, dirty: Set[str]) -> None:
        """Persist the working copy (only ``dirty`` collections changed)"""

    def _rollback(self) -> None:
        """Release anything acquired by ``_begin`` after a failure"""

    # Transactions

    @contextmanager
    def transaction(self) -> Iterator["Repository"]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._state = self._begin()
                self._dirty = set()
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._state = None
                    self._dirty = set()
                    self._rollback()
                raise
            self._depth -= 1
            if outermost:
                state, dirty = self._state, self._dirty
                self._state = None
                self._dirty = set()
                self._commit(state, dirty)

    def _collection(self, name: str) -> Dict[str, Any]:
        if name not in COLLECTIONS:
            raise StorageError(f"Unknown collection: {name}")
        if self._state is None:
            raise StorageError("No active transaction")
        return self._state.setdefault(name, empty_collection())

    # Entity operations

    def get(self, collection: str, key: Key) -> Optional[Dict[str, Any]]:
        with self.transaction():
            record = self._collection(collection)["records"].get(str(key))
            return copy.deepcopy(record) if record is not None else None

    def all(self, collection: str) -> List[Dict[str, Any]]:
        with self.transaction():
            return [copy.deepcopy(r) for r in self._collection(collection)["records"].values()]

    def find(self, collection: str, **criteria: Any) -> List[Dict[str, Any]]:
        """Records whose fields equal every given criterion"""
        return [
            r for r in self.all(collection)
            if all(r.get(field) == value for field, value in criteria.items())
        ]

    def find_one(self, collection: str, **criteria: Any) -> Optional[Dict[str, Any]]:
        matches = self.find(collection, **criteria)
        return matches[0] if matches else None

    def insert(self, collection: str, record: Dict[str, Any], key: Optional[Key] = None) -> Dict[str, Any]:
        """Store a new record. Without an explicit key the next integer id is assigned."""
        with self.transaction():
            coll = self._collection(collection)
            record = copy.deepcopy(record)
            if key is None:
                key = coll["next_id"]
                coll["next_id"] += 1
                record["id"] = key
            if str(key) in coll["records"]:
                raise StorageError(f"Duplicate key {key!r} in {collection}")
            coll["records"][str(key)] = record
            self._dirty.add(collection)
            return copy.deepcopy(record)

    def update(self, collection: str, key: Key, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.transaction():
            records = self._collection(collection)["records"]
            record = records.get(str(key))
            if record is None:
                return None
            record.update(copy.deepcopy(changes))
            self._dirty.add(collection)
            return copy.deepcopy(record)

    def delete(self, collection: str, key: Key) -> bool:
        with self.transaction():
            records = self._collection(collection)["records"]
            if str(key) not in records:
                return False
            del records[str(key)]
            self._dirty.add(collection)
            return True

    def clear(self, collection: str) -> int:
        with self.transaction():
            records = self._collection(collection)["records"]
            count = len(records)
            if count:
                records.clear()
                self._dirty.add(collection)
            return count

    def count(self, collection: str) -> int:
        with self.transaction():
            return len(self._collection(collection)["records"])
