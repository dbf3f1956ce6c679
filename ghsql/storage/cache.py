"""Lazily populated, exclusively guarded project snapshot."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ghsql.storage.fields import Field

logger = logging.getLogger(__name__)

Value = object
Row = list[Value]


@dataclass(frozen=True)
class ProjectSnapshot:
    """Field metadata and item rows fetched together from one project."""

    project_id: str
    fields: tuple[Field, ...]
    items: tuple[tuple[str, Row], ...]

    def find_row(self, item_id: str) -> Row | None:
        for key, row in self.items:
            if key == item_id:
                return row
        return None


class CacheState(str, Enum):
    EMPTY = "empty"
    POPULATING = "populating"
    POPULATED = "populated"


class CacheSlot:
    """Single snapshot slot; at most one loader runs and readers never see a partial fill."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._state = CacheState.EMPTY
        self._snapshot: ProjectSnapshot | None = None

    @property
    def state(self) -> CacheState:
        with self._condition:
            return self._state

    def get_or_populate(self, loader: Callable[[], ProjectSnapshot]) -> ProjectSnapshot:
        with self._condition:
            while self._state is CacheState.POPULATING:
                self._condition.wait()
            if self._state is CacheState.POPULATED and self._snapshot is not None:
                return self._snapshot
            self._state = CacheState.POPULATING

        logger.debug("Cache empty; populating")
        try:
            snapshot = loader()
        except BaseException:
            with self._condition:
                self._state = CacheState.EMPTY
                self._snapshot = None
                self._condition.notify_all()
            raise

        with self._condition:
            self._snapshot = snapshot
            self._state = CacheState.POPULATED
            self._condition.notify_all()
        logger.debug("Cache populated with %d items", len(snapshot.items))
        return snapshot

    def take(self) -> ProjectSnapshot | None:
        """Drain the slot, leaving it empty, and return what it held."""
        with self._condition:
            while self._state is CacheState.POPULATING:
                self._condition.wait()
            snapshot = self._snapshot
            self._snapshot = None
            self._state = CacheState.EMPTY
        if snapshot is not None:
            logger.debug("Cache invalidated")
        return snapshot

    def invalidate(self) -> None:
        self.take()
