"""Models for match records, filters, and derived statistics."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

RESULT_CODES = ("H", "D", "A")


def winner_code(home_goals: int, away_goals: int) -> str:
    """Outcome code from the home side's perspective."""
    if home_goals > away_goals:
        return "H"
    if away_goals > home_goals:
        return "A"
    return "D"


class MatchRecord(BaseModel):
    id: int | str | None = None
    home_team: str
    away_team: str

    # Scores (None goal fields count as 0 in aggregates)
    full_time_home_goals: int | None = 0
    full_time_away_goals: int | None = 0
    half_time_home_goals: int | None = None
    half_time_away_goals: int | None = None

    # Precomputed upstream
    result_computed: str | None = None  # H, D, A
    btts_computed: bool | None = None
    comeback_computed: bool | None = None

    match_time: datetime | None = None

    @property
    def home_goals(self) -> int:
        return self.full_time_home_goals or 0

    @property
    def away_goals(self) -> int:
        return self.full_time_away_goals or 0

    @property
    def score(self) -> str:
        """Full-time score key, e.g. ``"2:1"``."""
        return f"{self.home_goals}:{self.away_goals}"

    @property
    def has_halftime(self) -> bool:
        return self.half_time_home_goals is not None and self.half_time_away_goals is not None

    @property
    def halftime_score(self) -> str | None:
        if not self.has_halftime:
            return None
        return f"{self.half_time_home_goals}-{self.half_time_away_goals}"

    @property
    def halftime_winner(self) -> str | None:
        """H/D/A at half time, or None when the halftime score is unknown."""
        if not self.has_halftime:
            return None
        return winner_code(self.half_time_home_goals, self.half_time_away_goals)


class MatchFilters(BaseModel):
    home_team: str | None = None
    away_team: str | None = None
    btts_computed: bool | None = None
    comeback_computed: bool | None = None
    result_computed: str | None = None
    date_from: str | None = None
    date_to: str | None = None


class ScoreFrequency(BaseModel):
    score: str
    count: int
    percentage: float


class PredictionQuality(BaseModel):
    home_qualified: bool
    away_qualified: bool
    draw_highlighted: bool
    btts_qualified: bool
    confidence_level: float
    confidence: str  # low, medium, high
    recommendation: str


class MatchStatistics(BaseModel):
    total_matches: int = 0

    # Outcome counts
    home_wins: int = 0
    draws: int = 0
    away_wins: int = 0
    btts_count: int = 0
    comeback_count: int = 0

    # Goal averages (1 decimal)
    avg_goals: float = 0.0
    home_avg_goals: float = 0.0
    away_avg_goals: float = 0.0

    # Percentages (1 decimal)
    home_win_percentage: float = 0.0
    draw_percentage: float = 0.0
    away_win_percentage: float = 0.0
    btts_percentage: float = 0.0
    comeback_percentage: float = 0.0

    most_frequent_results: list[ScoreFrequency] = []
    halftime_transformations: int = 0

    # Head-to-head only
    prediction_quality: PredictionQuality | None = None
