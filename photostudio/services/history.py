"""History store - local, most-recent-first list of successful sessions."""

import json
import logging
import os
from dataclasses import replace
from pathlib import Path

from ..config import HISTORY_KEY, HISTORY_PATH
from ..models.history import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """JSON file holding the serialized history list under a fixed key.

    Call load() once at startup; add() and clear() write the file.
    """

    def __init__(self, path: str | Path = HISTORY_PATH, key: str = HISTORY_KEY):
        self.path = Path(path)
        self.key = key
        self._entries: list[HistoryEntry] = []

    @property
    def entries(self) -> list[HistoryEntry]:
        """All entries, most recent first (a copy)."""
        return list(self._entries)

    def load(self) -> list[HistoryEntry]:
        """Read the history file. Missing or corrupt history loads as empty."""
        self._entries = []
        if not self.path.exists():
            return self.entries

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
            raw_entries = document.get(self.key, [])
            self._entries = [HistoryEntry.from_dict(item) for item in raw_entries]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse history from {self.path}: {e}")
            self._entries = []

        return self.entries

    def save(self):
        """Write the whole list atomically (temp file + rename)."""
        document = {self.key: [entry.to_dict() for entry in self._entries]}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to save history to {self.path}: {e}")

    def add(self, entry: HistoryEntry) -> HistoryEntry:
        """
        Prepend a completed entry and persist.

        An id already in the history gets a numeric suffix ("gen_<ms>_2"),
        so get() always finds exactly one entry. Returns the stored entry.
        """
        taken = {e.id for e in self._entries}
        if entry.id in taken:
            n = 2
            while f"{entry.id}_{n}" in taken:
                n += 1
            entry = replace(entry, id=f"{entry.id}_{n}")

        self._entries = [entry, *self._entries]
        self.save()
        return entry

    def get(self, entry_id: str) -> HistoryEntry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def clear(self):
        self._entries = []
        self.save()
