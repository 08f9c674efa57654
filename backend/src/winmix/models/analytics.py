"""Models for the extended analytics view."""

from __future__ import annotations

from pydantic import BaseModel


class ResultCount(BaseModel):
    result: str
    count: int
    percentage: float


class GoalsTrend(BaseModel):
    over25_goals: int
    under25_goals: int
    over25_percentage: float
    under25_percentage: float


class MonthlyBtts(BaseModel):
    month: str  # YYYY-MM
    btts_rate: float
    matches: int


class BttsAnalysis(BaseModel):
    btts_true: int
    btts_false: int
    btts_percentage: float
    monthly_trend: list[MonthlyBtts]


class WeekdayResults(BaseModel):
    day: str
    matches: int
    avg_goals: float
    btts_rate: float


class ComebackScenario(BaseModel):
    scenario: str  # e.g. "A → D"
    count: int
    percentage: float


class ComebackAnalysis(BaseModel):
    total_comebacks: int
    comeback_percentage: float
    by_scoreline: list[ComebackScenario]


class HalftimeScenario(BaseModel):
    halftime: str
    fulltime: str
    count: int
    percentage: float


class HalftimeVsFulltime(BaseModel):
    correlation_rate: float
    scenarios: list[HalftimeScenario]


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    avg_goals: float
    btts_rate: float
    comeback_rate: float


class AdvancedAnalytics(BaseModel):
    total_matches: int
    most_common_results: list[ResultCount]
    goals_trend: GoalsTrend
    btts_analysis: BttsAnalysis
    weekly_results: list[WeekdayResults]
    comeback_analysis: ComebackAnalysis
    halftime_vs_fulltime: HalftimeVsFulltime
    seasonal_trends: list[MonthlyTrend]
