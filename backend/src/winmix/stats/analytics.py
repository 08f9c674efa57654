"""Extended analytics over a filtered match set (monthly, weekday, HT/FT views)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

import polars as pl

from winmix.models.analytics import (
    AdvancedAnalytics,
    BttsAnalysis,
    ComebackAnalysis,
    ComebackScenario,
    GoalsTrend,
    HalftimeScenario,
    HalftimeVsFulltime,
    MonthlyBtts,
    MonthlyTrend,
    ResultCount,
    WeekdayResults,
)
from winmix.models.matches import MatchRecord
from winmix.stats.aggregator import percentage, round_half_up

logger = logging.getLogger(__name__)

TOP_COMMON_RESULTS = 10
TOP_COMEBACK_SCENARIOS = 5
TOP_HTFT_SCENARIOS = 10
BTTS_TREND_MONTHS = 6
SEASONAL_MONTHS = 12
GOALS_LINE = 2.5

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_SCHEMA = {
    "home_goals": pl.Int64,
    "away_goals": pl.Int64,
    "ht_home": pl.Int64,
    "ht_away": pl.Int64,
    "result": pl.String,
    "btts": pl.Boolean,
    "comeback": pl.Boolean,
    "match_time": pl.Datetime("us"),
}


def _naive_utc(ts: datetime | None) -> datetime | None:
    if ts is None or ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def records_to_frame(records: Iterable[MatchRecord]) -> pl.DataFrame:
    """One row per match with goals coerced to 0 and flags defaulting to False."""
    rows = list(records)
    df = pl.DataFrame(
        {
            "home_goals": [r.home_goals for r in rows],
            "away_goals": [r.away_goals for r in rows],
            "ht_home": [r.half_time_home_goals for r in rows],
            "ht_away": [r.half_time_away_goals for r in rows],
            "result": [r.result_computed for r in rows],
            "btts": [r.btts_computed for r in rows],
            "comeback": [r.comeback_computed for r in rows],
            "match_time": [_naive_utc(r.match_time) for r in rows],
        },
        schema=_SCHEMA,
    )
    return df.with_columns(
        (pl.col("home_goals") + pl.col("away_goals")).alias("total_goals"),
        pl.col("btts").fill_null(False),
        pl.col("comeback").fill_null(False),
        (pl.col("ht_home").is_not_null() & pl.col("ht_away").is_not_null()).alias("has_ht"),
        pl.when(pl.col("ht_home") > pl.col("ht_away"))
        .then(pl.lit("H"))
        .when(pl.col("ht_home") < pl.col("ht_away"))
        .then(pl.lit("A"))
        .otherwise(pl.lit("D"))
        .alias("ht_winner"),
        # Absent final result reads as a draw in these views
        pl.col("result").fill_null("D").alias("ft_result"),
        pl.concat_str(
            [pl.col("home_goals").cast(pl.String), pl.lit("-"), pl.col("away_goals").cast(pl.String)]
        ).alias("ft_score"),
        pl.concat_str(
            [pl.col("ht_home").cast(pl.String), pl.lit("-"), pl.col("ht_away").cast(pl.String)]
        ).alias("ht_score"),
    )


def _top_counts(df: pl.DataFrame, key: str, limit: int) -> pl.DataFrame:
    """Frequency table of ``key``, count desc, then ``key`` asc on ties."""
    return (
        df.group_by(key)
        .agg(pl.len().alias("count"))
        .sort(["count", key], descending=[True, False])
        .head(limit)
    )


def _most_common_results(df: pl.DataFrame) -> list[ResultCount]:
    n = df.height
    return [
        ResultCount(result=row["ft_score"], count=row["count"], percentage=percentage(row["count"], n))
        for row in _top_counts(df, "ft_score", TOP_COMMON_RESULTS).iter_rows(named=True)
    ]


def _goals_trend(df: pl.DataFrame) -> GoalsTrend:
    n = df.height
    over = int(df.filter(pl.col("total_goals") > GOALS_LINE).height)
    under = n - over
    return GoalsTrend(
        over25_goals=over,
        under25_goals=under,
        over25_percentage=percentage(over, n),
        under25_percentage=percentage(under, n),
    )


def _monthly(df: pl.DataFrame) -> pl.DataFrame:
    """Per-month aggregates, chronological. Matches without a kickoff are skipped."""
    return (
        df.filter(pl.col("match_time").is_not_null())
        .with_columns(pl.col("match_time").dt.strftime("%Y-%m").alias("month"))
        .group_by("month")
        .agg(
            pl.len().alias("matches"),
            pl.col("total_goals").sum().alias("goals"),
            pl.col("btts").sum().alias("btts"),
            pl.col("comeback").sum().alias("comebacks"),
        )
        .sort("month")
    )


def _btts_analysis(df: pl.DataFrame, monthly: pl.DataFrame) -> BttsAnalysis:
    n = df.height
    btts_true = int(df["btts"].sum())
    trend = [
        MonthlyBtts(
            month=row["month"],
            btts_rate=percentage(row["btts"], row["matches"]),
            matches=row["matches"],
        )
        for row in monthly.tail(BTTS_TREND_MONTHS).iter_rows(named=True)
    ]
    return BttsAnalysis(
        btts_true=btts_true,
        btts_false=n - btts_true,
        btts_percentage=percentage(btts_true, n),
        monthly_trend=trend,
    )


def _weekly_results(df: pl.DataFrame) -> list[WeekdayResults]:
    by_day = (
        df.filter(pl.col("match_time").is_not_null())
        .with_columns(pl.col("match_time").dt.weekday().alias("weekday"))
        .group_by("weekday")
        .agg(
            pl.len().alias("matches"),
            pl.col("total_goals").sum().alias("goals"),
            pl.col("btts").sum().alias("btts"),
        )
    )
    lookup = {row["weekday"]: row for row in by_day.iter_rows(named=True)}

    out: list[WeekdayResults] = []
    for idx, day in enumerate(WEEKDAYS, start=1):
        row = lookup.get(idx)
        if row is None:
            out.append(WeekdayResults(day=day, matches=0, avg_goals=0.0, btts_rate=0.0))
            continue
        out.append(
            WeekdayResults(
                day=day,
                matches=row["matches"],
                avg_goals=round_half_up(row["goals"] / row["matches"]),
                btts_rate=percentage(row["btts"], row["matches"]),
            )
        )
    return out


def _comeback_analysis(df: pl.DataFrame) -> ComebackAnalysis:
    n = df.height
    total = int(df["comeback"].sum())
    scenarios = (
        df.filter(pl.col("comeback") & pl.col("has_ht"))
        .with_columns(
            pl.concat_str([pl.col("ht_winner"), pl.lit(" → "), pl.col("ft_result")]).alias("scenario")
        )
    )
    by_scoreline = [
        ComebackScenario(
            scenario=row["scenario"],
            count=row["count"],
            percentage=percentage(row["count"], total),
        )
        for row in _top_counts(scenarios, "scenario", TOP_COMEBACK_SCENARIOS).iter_rows(named=True)
    ]
    return ComebackAnalysis(
        total_comebacks=total,
        comeback_percentage=percentage(total, n),
        by_scoreline=by_scoreline,
    )


def _halftime_vs_fulltime(df: pl.DataFrame) -> HalftimeVsFulltime:
    n = df.height
    with_ht = df.filter(pl.col("has_ht"))
    correlated = with_ht.filter(pl.col("ht_winner") == pl.col("ft_result")).height

    top = (
        with_ht.group_by(["ht_score", "ft_score"])
        .agg(pl.len().alias("count"))
        .sort(["count", "ht_score", "ft_score"], descending=[True, False, False])
        .head(TOP_HTFT_SCENARIOS)
    )
    scenarios = [
        HalftimeScenario(
            halftime=row["ht_score"],
            fulltime=row["ft_score"],
            count=row["count"],
            percentage=percentage(row["count"], n),
        )
        for row in top.iter_rows(named=True)
    ]
    # Denominator is every match, not only those with a halftime score
    return HalftimeVsFulltime(correlation_rate=percentage(correlated, n), scenarios=scenarios)


def _seasonal_trends(monthly: pl.DataFrame) -> list[MonthlyTrend]:
    return [
        MonthlyTrend(
            month=row["month"],
            avg_goals=round_half_up(row["goals"] / row["matches"]),
            btts_rate=percentage(row["btts"], row["matches"]),
            comeback_rate=percentage(row["comebacks"], row["matches"]),
        )
        for row in monthly.tail(SEASONAL_MONTHS).iter_rows(named=True)
    ]


def compute_advanced_analytics(records: Iterable[MatchRecord]) -> AdvancedAnalytics | None:
    """Build the extended analytics view. Returns None for an empty record set."""
    records = list(records)
    if not records:
        return None

    df = records_to_frame(records)
    monthly = _monthly(df)
    logger.debug("Analytics over %d matches, %d months", df.height, monthly.height)

    return AdvancedAnalytics(
        total_matches=df.height,
        most_common_results=_most_common_results(df),
        goals_trend=_goals_trend(df),
        btts_analysis=_btts_analysis(df, monthly),
        weekly_results=_weekly_results(df),
        comeback_analysis=_comeback_analysis(df),
        halftime_vs_fulltime=_halftime_vs_fulltime(df),
        seasonal_trends=_seasonal_trends(monthly),
    )
