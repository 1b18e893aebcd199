"""Catalog store contract and an in-memory implementation."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Iterable, Protocol

from orbwatch.core.elements import TrackedObject

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Durable, keyed collection of tracked objects.

    ``all()`` must return a new list so callers can treat it as a snapshot.
    ``save_all()`` assigns ids to new objects and replaces existing ones by id.
    """

    def all(self) -> list[TrackedObject]: ...

    def save_all(self, objects: Iterable[TrackedObject]) -> list[TrackedObject]: ...

    def count(self) -> int: ...


class InMemoryCatalogStore:
    """Thread-safe in-memory catalog, ordered by first insertion."""

    def __init__(self, objects: Iterable[TrackedObject] = ()) -> None:
        self._lock = threading.Lock()
        self._next_id = 1
        self._objects: dict[int, TrackedObject] = {}
        if objects:
            self.save_all(objects)

    def all(self) -> list[TrackedObject]:
        with self._lock:
            return list(self._objects.values())

    def save_all(self, objects: Iterable[TrackedObject]) -> list[TrackedObject]:
        """Insert or replace a batch of objects in one write.

        Returns:
            The saved objects, with ids assigned.
        """
        saved = []
        with self._lock:
            for obj in objects:
                if obj.id is None:
                    obj = dataclasses.replace(obj, id=self._next_id)
                self._next_id = max(self._next_id, obj.id + 1)
                self._objects[obj.id] = obj
                saved.append(obj)
        logger.debug("Saved batch of %d objects", len(saved))
        return saved

    def count(self) -> int:
        with self._lock:
            return len(self._objects)
