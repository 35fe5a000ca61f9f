"""Persistence backends"""

from ..utils.config import StorageSettings
from .base import COLLECTIONS, Repository
from .json_store import JsonFileRepository
from .memory import MemoryRepository


def create_repository(settings: StorageSettings) -> Repository:
    """Pick the backend once at startup"""
    if settings.backend == "memory":
        return MemoryRepository()
    return JsonFileRepository(settings.data_dir, lock_timeout_seconds=settings.lock_timeout_seconds)


__all__ = ["COLLECTIONS", "JsonFileRepository", "MemoryRepository", "Repository", "create_repository"]
