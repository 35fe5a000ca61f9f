"""In-process repository: dict arena with per-collection incrementing ids"""

from __future__ import annotations

import copy
from typing import Set

from .base import COLLECTIONS, Repository, State, empty_collection


class MemoryRepository(Repository):
    """Volatile store, used for tests and throwaway demo runs"""

    def __init__(self) -> None:
        super().__init__()
        self._data: State = {name: empty_collection() for name in COLLECTIONS}

    def _begin(self) -> State:
        return copy.deepcopy(self._data)

    def _commit(self, state: State, dirty: Set[str]) -> None:
        for name in dirty:
            self._data[name] = state[name]
