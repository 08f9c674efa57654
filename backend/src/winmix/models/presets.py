"""Models for saved filter presets, dashboard widgets, and prediction pairs."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from winmix.models.matches import MatchFilters, MatchStatistics


class SavedFilter(BaseModel):
    id: str
    name: str
    filters: MatchFilters
    created_at: datetime


class DashboardWidget(BaseModel):
    id: str
    component: str
    position: int
    visible: bool = True
    size: Literal["small", "medium", "large"] | None = None


class MatchPair(BaseModel):
    slot: int
    home_team: str = ""
    away_team: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.home_team.strip() and self.away_team.strip())

    @property
    def label(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


class PairPrediction(BaseModel):
    pair: MatchPair
    stats: MatchStatistics | None = None
    error: str | None = None
