"""Bounded history of committed calculations."""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from interactive_calculator.common.models import HistoryEntry


DEFAULT_HISTORY_LIMIT: int = 20


class HistoryRecorder(BaseModel):
    """
    Immutable, newest-first list of history entries.

    Every change returns a new recorder, so a buffer command can hand back the updated history
    alongside the updated buffer without touching the previous snapshot.
    """

    model_config = ConfigDict(frozen=True)

    entries: Tuple[HistoryEntry, ...] = Field(default=(), description="Entries, most recent first")
    limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1, description="Maximum number of entries kept")

    def record(self, entry: HistoryEntry) -> "HistoryRecorder":
        """
        Prepend an entry and drop the oldest ones beyond the limit.

        :param HistoryEntry entry: Entry to record

        :return: Updated recorder
        :rtype: HistoryRecorder
        """
        entries: Tuple[HistoryEntry, ...] = (entry, *self.entries)[: self.limit]
        return self.model_copy(update={"entries": entries})

    def clear(self) -> "HistoryRecorder":
        """Return an empty recorder with the same limit."""
        return self.model_copy(update={"entries": ()})

    def find(self, entry_id: str) -> Optional[HistoryEntry]:
        """Look up an entry by id, None when it is no longer recorded."""
        return next((entry for entry in self.entries if entry.id == entry_id), None)

    def __len__(self) -> int:
        return len(self.entries)
