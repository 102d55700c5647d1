"""
Jobs and applications repositories.

Responsibilities:
- Get-by-id, list and insert for one entity type.
- Atomic inserts.

Non-Responsibilities:
- No validation or scoring.

Invariant:
Entities are never updated or deleted once inserted.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, Protocol, TypeVar

from .models import Application, Job

T = TypeVar("T")


class DuplicateIdError(Exception):
    """Raised when inserting an entity whose id is already stored."""
    pass


class Repository(Protocol[T]):
    def get(self, entity_id: str) -> Optional[T]:
        ...

    def list(self) -> List[T]:
        ...

    def insert(self, entity: T) -> T:
        ...


class InMemoryRepository(Generic[T]):
    """Dict-backed repository; list() returns entities in insertion order."""

    def __init__(self):
        self._items: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, entity_id: str) -> Optional[T]:
        return self._items.get(entity_id)

    def list(self) -> List[T]:
        with self._lock:
            return list(self._items.values())

    def insert(self, entity: T) -> T:
        entity_id = entity.id  # type: ignore[attr-defined]
        with self._lock:
            if entity_id in self._items:
                raise DuplicateIdError(f"Entity already stored: {entity_id}")
            self._items[entity_id] = entity
        return entity


@dataclass
class Store:
    jobs: Repository[Job]
    applications: Repository[Application]


def memory_store() -> Store:
    return Store(jobs=InMemoryRepository(), applications=InMemoryRepository())
