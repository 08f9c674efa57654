"""Head-to-head predictions for up to 8 team pairs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from winmix.matches.store import MatchStore
from winmix.models.presets import MatchPair, PairPrediction
from winmix.stats.aggregator import compute_statistics, with_prediction_quality

logger = logging.getLogger(__name__)

MAX_PAIRS = 8


def parse_pair(slot: int, text: str) -> MatchPair:
    """Parse ``"Home:Away"`` into a MatchPair."""
    home, sep, away = text.partition(":")
    if not sep:
        raise ValueError(f"Expected HOME:AWAY, got {text!r}")
    return MatchPair(slot=slot, home_team=home.strip(), away_team=away.strip())


def predict_pair(store: MatchStore, pair: MatchPair) -> PairPrediction:
    """Aggregate the pair's meeting history and classify it.

    Empty history gives ``stats=None``; fetch failures are logged and
    returned in ``error``.
    """
    try:
        records = store.fetch_pair(pair.home_team, pair.away_team)
    except Exception as e:
        logger.error("Error calculating stats for %s: %s", pair.label, e, exc_info=True)
        return PairPrediction(pair=pair, error=str(e))

    if not records:
        logger.info("No history for %s", pair.label)
        return PairPrediction(pair=pair)

    stats = with_prediction_quality(compute_statistics(records))
    return PairPrediction(pair=pair, stats=stats)


def run_predictions(
    store: MatchStore,
    pairs: list[MatchPair],
    max_workers: int = MAX_PAIRS,
) -> list[PairPrediction]:
    """Predict every complete pair concurrently, keeping the input order."""
    if len(pairs) > MAX_PAIRS:
        raise ValueError(f"At most {MAX_PAIRS} pairs, got {len(pairs)}")

    valid = [p for p in pairs if p.is_complete]
    if not valid:
        raise ValueError("At least one pair needs both a home and an away team")

    logger.info("Running predictions for %d pair(s)", len(valid))
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(valid)))) as pool:
        return list(pool.map(lambda p: predict_pair(store, p), valid))
