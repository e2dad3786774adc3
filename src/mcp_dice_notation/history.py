from __future__ import annotations

import threading
import uuid
from collections import deque
from dataclasses import dataclass, field

from .models import RollResult


DEFAULT_MAX_ENTRIES = 50


@dataclass(frozen=True)
class HistoryEntry:
    result: RollResult
    context: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class RollHistory:
    """Most-recent-first list of rolls, capped at ``max_entries``.

    The oldest entry is dropped when a new roll would exceed the cap.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: deque[HistoryEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def add(self, result: RollResult, context: str | None = None) -> HistoryEntry:
        entry = HistoryEntry(result=result, context=context)
        with self._lock:
            self._entries.appendleft(entry)
        return entry

    def entries(self, limit: int | None = None) -> list[HistoryEntry]:
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        with self._lock:
            items = list(self._entries)
        return items if limit is None else items[:limit]

    def get(self, entry_id: str) -> HistoryEntry | None:
        with self._lock:
            return next((e for e in self._entries if e.id == entry_id), None)

    def remove(self, entry_id: str) -> bool:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    self._entries.remove(entry)
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def is_full(self) -> bool:
        return len(self) >= self.max_entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
