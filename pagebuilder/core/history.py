"""
core/history.py - Bounded undo/redo history of page snapshots
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import copy
import logging
import uuid

logger = logging.getLogger("pagebuilder.history")


DEFAULT_HISTORY_LIMIT = 50


@dataclass
class HistoryEntry:
    """Snapshot of the committed section list at a checkpoint."""

    sections: List[Dict[str, Any]]
    description: str = ""
    entry_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "description": self.description,
            "timestamp": self.timestamp,
            "section_count": len(self.sections),
        }


class PageHistory:
    """
    Linear history with a cursor.

    Recording after an undo drops the redo branch. The oldest entries are
    evicted once the limit is reached.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = limit
        self._entries: List[HistoryEntry] = []
        self._index = -1

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def current(self) -> Optional[HistoryEntry]:
        if 0 <= self._index < len(self._entries):
            return self._entries[self._index]
        return None

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def record(self, sections: List[Dict[str, Any]], description: str = "") -> HistoryEntry:
        """
        Push a snapshot after the cursor.

        Args:
            sections: Serialized section list (copied)
            description: Human-readable label for the change

        Returns:
            The recorded entry
        """
        entry = HistoryEntry(sections=copy.deepcopy(sections), description=description)
        del self._entries[self._index + 1:]
        self._entries.append(entry)
        if len(self._entries) > self._limit:
            self._entries = self._entries[-self._limit:]
        self._index = len(self._entries) - 1
        logger.debug(f"History checkpoint '{description}' ({len(self._entries)}/{self._limit})")
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        """Step back one entry; returns the entry to restore or None."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[HistoryEntry]:
        """Step forward one entry; returns the entry to restore or None."""
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)
