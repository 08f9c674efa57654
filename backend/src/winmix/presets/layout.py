"""Dashboard widget order and visibility, persisted to a local JSON file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from winmix.models.presets import DashboardWidget

logger = logging.getLogger(__name__)

STORAGE_KEY = "winmix-dashboard-layout"

DEFAULT_WIDGETS: list[DashboardWidget] = [
    DashboardWidget(id="statistics", component="StatisticsCards", position=0, visible=True, size="large"),
    DashboardWidget(id="probability", component="ProbabilitySection", position=1, visible=True, size="medium"),
    DashboardWidget(id="charts", component="EnhancedChartSection", position=2, visible=True, size="large"),
    DashboardWidget(id="results", component="ResultsTable", position=3, visible=True, size="large"),
]

_adapter = TypeAdapter(list[DashboardWidget])


def _defaults() -> list[DashboardWidget]:
    return [w.model_copy() for w in DEFAULT_WIDGETS]


def move_widget(
    widgets: list[DashboardWidget],
    dragged_id: str,
    target_position: int,
) -> list[DashboardWidget]:
    """Remove the dragged widget, insert it at ``target_position``, renumber."""
    if target_position < 0:
        raise ValueError(f"target_position must be >= 0, got {target_position}")
    ids = [w.id for w in widgets]
    if dragged_id not in ids:
        raise KeyError(dragged_id)

    reordered = list(widgets)
    dragged = reordered.pop(ids.index(dragged_id))
    reordered.insert(target_position, dragged)
    return [w.model_copy(update={"position": i}) for i, w in enumerate(reordered)]


class DashboardLayout:
    """Widget layout stored at ``<state_dir>/winmix-dashboard-layout.json``."""

    def __init__(self, state_dir: Path) -> None:
        self.path = Path(state_dir) / f"{STORAGE_KEY}.json"

    @property
    def widgets(self) -> list[DashboardWidget]:
        if not self.path.exists():
            return _defaults()
        try:
            return _adapter.validate_json(self.path.read_bytes())
        except ValidationError as e:
            logger.warning("Layout file %s unreadable, using defaults: %s", self.path, e)
            return _defaults()

    def _write(self, widgets: list[DashboardWidget]) -> list[DashboardWidget]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_adapter.dump_json(widgets, indent=2))
        return widgets

    def visible_widgets(self) -> list[DashboardWidget]:
        return sorted((w for w in self.widgets if w.visible), key=lambda w: w.position)

    def move(self, dragged_id: str, target_position: int) -> list[DashboardWidget]:
        return self._write(move_widget(self.widgets, dragged_id, target_position))

    def toggle_visibility(self, widget_id: str) -> list[DashboardWidget]:
        widgets = self.widgets
        if widget_id not in {w.id for w in widgets}:
            raise KeyError(widget_id)
        return self._write(
            [w.model_copy(update={"visible": not w.visible}) if w.id == widget_id else w for w in widgets]
        )

    def reset(self) -> list[DashboardWidget]:
        return self._write(_defaults())
