"""
Durable repository backed by one JSON file per collection.

A transaction holds the data-directory lock, works on a copy loaded from
disk and writes back only the collections it changed. Every changed collection
is staged to a temp file before any of them is moved into place, orders
ahead of the cart. A transaction that fails before commit writes nothing.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..utils.exceptions import StorageError
from ..utils.logger import get_logger
from .base import COLLECTIONS, Repository, State, empty_collection
from .locks import LOCK_TIMEOUT_SECONDS, acquire_lock

logger = get_logger(__name__)

# orders land on disk before the cart they were placed from is cleared
WRITE_ORDER = ("users", "sessions", "products", "orders", "cart_items")


class JsonFileRepository(Repository):

    def __init__(self, data_dir: Union[str, Path], lock_timeout_seconds: float = LOCK_TIMEOUT_SECONDS) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.lock_path = self.data_dir / ".dressshop.lock"
        self.lock_timeout_seconds = lock_timeout_seconds
        self._held: Optional[ExitStack] = None

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _begin(self) -> State:
        stack = ExitStack()
        try:
            stack.enter_context(acquire_lock(self.lock_path, self.lock_timeout_seconds))
        except TimeoutError as e:
            raise StorageError(str(e))
        self._held = stack
        try:
            return {name: self._load(name) for name in COLLECTIONS}
        except BaseException:
            self._release()
            raise

    def _commit(self, state: State, dirty: Set[str]) -> None:
        staged: List[Tuple[Path, Path]] = []
        try:
            for name in WRITE_ORDER:
                if name in dirty:
                    path = self.path_for(name)
                    staged.append((self._stage(path, state[name]), path))
            while staged:
                temp_path, path = staged[0]
                self._replace(temp_path, path)
                staged.pop(0)
        finally:
            for temp_path, _ in staged:
                if temp_path.exists():
                    temp_path.unlink()
            self._release()

    def _rollback(self) -> None:
        self._release()

    def _release(self) -> None:
        held, self._held = self._held, None
        if held is not None:
            held.close()

    def _load(self, collection: str) -> Dict[str, Any]:
        path = self.path_for(collection)
        if not path.exists():
            return empty_collection()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load collection", collection=collection, path=str(path), error=str(e))
            raise StorageError(f"Failed to load {collection} from {path}: {e}")
        if not isinstance(data, dict) or not isinstance(data.get("records"), dict):
            raise StorageError(f"Malformed collection file: {path}")
        data.setdefault("next_id", 1)
        return data

    def _stage(self, path: Path, payload: Dict[str, Any]) -> Path:
        """Write the payload to a temp file beside ``path``"""
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(path.parent), delete=False, encoding="utf-8"
        ) as tf:
            temp_path = Path(tf.name)
            try:
                json.dump(payload, tf, indent=2, ensure_ascii=False)
            except (TypeError, ValueError, OSError) as e:
                tf.close()
                temp_path.unlink()
                raise StorageError(f"Failed to serialise {path.name}: {e}")
        return temp_path

    def _replace(self, temp_path: Path, path: Path) -> None:
        try:
            shutil.move(str(temp_path), str(path))
        except OSError as e:
            raise StorageError(f"Failed to save {path}: {e}")
