"""Named filter presets persisted to a local JSON file."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from winmix.models.matches import MatchFilters
from winmix.models.presets import SavedFilter

logger = logging.getLogger(__name__)

STORAGE_KEY = "winmix-saved-filters"

_adapter = TypeAdapter(list[SavedFilter])


class SavedFilterStore:
    """CRUD over saved filters in ``<state_dir>/winmix-saved-filters.json``."""

    def __init__(self, state_dir: Path) -> None:
        self.path = Path(state_dir) / f"{STORAGE_KEY}.json"

    def _load(self) -> list[SavedFilter]:
        if not self.path.exists():
            return []
        try:
            return _adapter.validate_json(self.path.read_bytes())
        except ValidationError as e:
            logger.warning("Ignoring unreadable saved filters at %s: %s", self.path, e)
            return []

    def _write(self, items: list[SavedFilter]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_adapter.dump_json(items, indent=2))

    def list(self) -> list[SavedFilter]:
        return self._load()

    def get(self, filter_id: str) -> SavedFilter | None:
        return next((f for f in self._load() if f.id == filter_id), None)

    def save(self, name: str, filters: MatchFilters) -> bool:
        """Append a preset. Blank names are rejected (returns False)."""
        if not name.strip():
            return False

        items = self._load()
        taken = {f.id for f in items}
        stamp = int(time.time() * 1000)
        while str(stamp) in taken:
            stamp += 1

        items.append(
            SavedFilter(
                id=str(stamp),
                name=name.strip(),
                filters=filters,
                created_at=datetime.now(timezone.utc),
            )
        )
        self._write(items)
        logger.info("Saved filter %r (id=%s)", name.strip(), stamp)
        return True

    def update(self, filter_id: str, name: str, filters: MatchFilters) -> None:
        items = self._load()
        updated = [
            f.model_copy(update={"name": name.strip(), "filters": filters}) if f.id == filter_id else f
            for f in items
        ]
        self._write(updated)

    def delete(self, filter_id: str) -> None:
        self._write([f for f in self._load() if f.id != filter_id])

    def clear(self) -> None:
        self._write([])
