"""Match-statistics aggregation engine.

Turns a list of match records into the derived statistics shown on the
dashboard, and classifies head-to-head statistics into a prediction
recommendation.

Rules:
  - Empty input gives the all-zero statistics object (never NaN).
  - Missing full-time goals count as 0; records without a halftime score are
    left out of the halftime transformation count only.
  - Averages and percentages are rounded half-up to 1 decimal.
  - Score frequencies are ordered by count desc, then by score string, so the
    order of the input records never changes the result.
"""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from winmix.models.matches import (
    MatchRecord,
    MatchStatistics,
    PredictionQuality,
    ScoreFrequency,
)

TOP_RESULTS = 5

# Prediction thresholds (percent)
HIGH_CONFIDENCE_PCT = 65.0
MEDIUM_CONFIDENCE_PCT = 50.0
DRAW_HIGHLIGHT_PCT = 30.0
BTTS_QUALIFY_PCT = 55.0

BTTS_SUFFIX = " + BTTS"


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like JavaScript's ``toFixed``: half-up on the exact binary value.

    2.25 is exact and goes to 2.3; 1.45 is stored just below and goes to 1.4.
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(count: int, total: int) -> float:
    """``count / total * 100`` rounded to 1 decimal; 0.0 when total is 0."""
    if total == 0:
        return 0.0
    return round_half_up(count / total * 100)


def _average(total: int, n: int) -> float:
    if n == 0:
        return 0.0
    return round_half_up(total / n)


def most_frequent_scores(
    records: list[MatchRecord],
    limit: int = TOP_RESULTS,
) -> list[ScoreFrequency]:
    """Top ``limit`` full-time scores by frequency."""
    n = len(records)
    counts = Counter(r.score for r in records)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        ScoreFrequency(score=score, count=count, percentage=percentage(count, n))
        for score, count in ranked[:limit]
    ]


def count_halftime_transformations(records: Iterable[MatchRecord]) -> int:
    """Matches whose halftime leader differs from the full-time result.

    A record with a halftime score but no (or an unrecognized)
    ``result_computed`` never matches the halftime winner, so it counts as a
    transformation.
    """
    transformations = 0
    for r in records:
        ht_winner = r.halftime_winner
        if ht_winner is None:
            continue
        if ht_winner != r.result_computed:
            transformations += 1
    return transformations


def compute_statistics(records: Iterable[MatchRecord]) -> MatchStatistics:
    """Aggregate a record set into ``MatchStatistics``."""
    records = list(records)
    n = len(records)
    if n == 0:
        return MatchStatistics()

    home_wins = draws = away_wins = 0
    btts_count = comeback_count = 0
    home_goals = away_goals = 0

    for r in records:
        if r.result_computed == "H":
            home_wins += 1
        elif r.result_computed == "D":
            draws += 1
        elif r.result_computed == "A":
            away_wins += 1

        if r.btts_computed is True:
            btts_count += 1
        if r.comeback_computed is True:
            comeback_count += 1

        home_goals += r.home_goals
        away_goals += r.away_goals

    return MatchStatistics(
        total_matches=n,
        home_wins=home_wins,
        draws=draws,
        away_wins=away_wins,
        btts_count=btts_count,
        comeback_count=comeback_count,
        avg_goals=_average(home_goals + away_goals, n),
        home_avg_goals=_average(home_goals, n),
        away_avg_goals=_average(away_goals, n),
        home_win_percentage=percentage(home_wins, n),
        draw_percentage=percentage(draws, n),
        away_win_percentage=percentage(away_wins, n),
        btts_percentage=percentage(btts_count, n),
        comeback_percentage=percentage(comeback_count, n),
        most_frequent_results=most_frequent_scores(records),
        halftime_transformations=count_halftime_transformations(records),
    )


def _recommendation(home: float, away: float, draw: float, btts: float) -> tuple[str, str]:
    """Return (confidence, recommendation). Ties at the max go home, then away."""
    max_pct = max(home, away, draw)

    if max_pct >= HIGH_CONFIDENCE_PCT:
        confidence = "high"
        if home == max_pct:
            recommendation = "home win"
        elif away == max_pct:
            recommendation = "away win"
        else:
            recommendation = "draw (highlighted)"
    elif max_pct >= MEDIUM_CONFIDENCE_PCT:
        confidence = "medium"
        if home == max_pct:
            recommendation = "home win (medium confidence)"
        elif away == max_pct:
            recommendation = "away win (medium confidence)"
        else:
            recommendation = "draw (medium confidence)"
    else:
        confidence = "low"
        recommendation = "uncertain outcome"

    if btts >= BTTS_QUALIFY_PCT:
        recommendation += BTTS_SUFFIX

    return confidence, recommendation


def compute_prediction_quality(stats: MatchStatistics) -> PredictionQuality:
    """Classify head-to-head statistics into a confidence bucket."""
    home = stats.home_win_percentage
    away = stats.away_win_percentage
    draw = stats.draw_percentage
    btts = stats.btts_percentage

    confidence, recommendation = _recommendation(home, away, draw, btts)
    return PredictionQuality(
        home_qualified=home >= HIGH_CONFIDENCE_PCT,
        away_qualified=away >= HIGH_CONFIDENCE_PCT,
        draw_highlighted=draw > DRAW_HIGHLIGHT_PCT,
        btts_qualified=btts >= BTTS_QUALIFY_PCT,
        confidence_level=max(home, away, draw),
        confidence=confidence,
        recommendation=recommendation,
    )


def with_prediction_quality(stats: MatchStatistics) -> MatchStatistics:
    """Copy of ``stats`` with ``prediction_quality`` attached."""
    return stats.model_copy(update={"prediction_quality": compute_prediction_quality(stats)})
