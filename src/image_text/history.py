"""Persisted scan history.

A JSON file holding the most recent copied/scanned texts, newest first.
Adding beyond the limit evicts the oldest entries.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .models import new_id

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


class HistoryItem(BaseModel):
    """One history record."""

    id: str = Field(default_factory=new_id)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    text: str


_ITEMS = TypeAdapter(list[HistoryItem])


class HistoryStore:
    """History list backed by a JSON file.

    Every mutation is written through to disk.
    """

    def __init__(self, path: Path, limit: int = DEFAULT_LIMIT):
        self.path = Path(path)
        self.limit = limit
        self._items: list[HistoryItem] = self._load()

    @property
    def items(self) -> list[HistoryItem]:
        """History items, newest first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, text: str) -> HistoryItem:
        """Insert text at the front, evicting the oldest items beyond the limit."""
        item = HistoryItem(text=text)
        self._items.insert(0, item)
        del self._items[self.limit :]
        self._save()
        return item

    def delete(self, indices: Iterable[int]) -> None:
        """Remove items at the given positions (positions in the current list)."""
        drop = set(indices)
        self._items = [item for i, item in enumerate(self._items) if i not in drop]
        self._save()

    def clear(self) -> None:
        self._items = []
        self._save()

    def _load(self) -> list[HistoryItem]:
        if not self.path.exists():
            return []

        try:
            items = _ITEMS.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, e)
            return []

        return items[: self.limit]

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            [item.model_dump(mode="json") for item in self._items],
            ensure_ascii=False,
            indent=2,
        )

        # Write to a temp file in the same directory, then swap it in
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".history-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, self.path)
        except OSError:
            Path(temp_path).unlink(missing_ok=True)
            raise
