"""Tests for head-to-head predictions."""

import pytest

from conftest import make_record
from winmix.models.presets import MatchPair
from winmix.predictions.runner import MAX_PAIRS, parse_pair, predict_pair, run_predictions


class StubStore:
    """Returns canned history per pair; raises for pairs listed in ``failing``."""

    def __init__(self, history=None, failing=()):
        self.history = history or {}
        self.failing = set(failing)
        self.requested = []

    def fetch_pair(self, home_team, away_team):
        self.requested.append((home_team, away_team))
        if (home_team, away_team) in self.failing:
            raise RuntimeError("connection reset")
        return self.history.get((home_team, away_team), [])


def _dominant_home_history():
    return [make_record(ft=(2, 1), btts=True) for _ in range(7)] + [
        make_record(ft=(0, 0), btts=False),
        make_record(ft=(0, 1), btts=False),
        make_record(ft=(1, 1), btts=True),
    ]


class TestParsePair:
    def test_parse(self):
        pair = parse_pair(1, " Arsenal : Chelsea ")
        assert pair == MatchPair(slot=1, home_team="Arsenal", away_team="Chelsea")

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            parse_pair(1, "Arsenal Chelsea")


class TestRunPredictions:
    def test_high_confidence_home(self):
        store = StubStore({("Arsenal", "Chelsea"): _dominant_home_history()})
        [result] = run_predictions(store, [MatchPair(slot=1, home_team="Arsenal", away_team="Chelsea")])
        q = result.stats.prediction_quality
        assert result.stats.total_matches == 10
        assert result.stats.home_win_percentage == 70.0
        assert q.confidence == "high"
        assert q.recommendation == "home win + BTTS"

    def test_keeps_order_and_skips_incomplete(self):
        store = StubStore({("A", "B"): [make_record(ft=(1, 0))]})
        pairs = [
            MatchPair(slot=1, home_team="C", away_team="D"),
            MatchPair(slot=2, home_team="", away_team="X"),
            MatchPair(slot=3, home_team="A", away_team="B"),
        ]
        results = run_predictions(store, pairs)
        assert [r.pair.slot for r in results] == [1, 3]
        assert results[0].stats is None
        assert results[0].error is None
        assert results[1].stats.home_wins == 1

    def test_failure_is_isolated(self):
        store = StubStore({("A", "B"): [make_record()]}, failing=[("C", "D")])
        results = run_predictions(store, [
            MatchPair(slot=1, home_team="C", away_team="D"),
            MatchPair(slot=2, home_team="A", away_team="B"),
        ])
        assert results[0].stats is None
        assert "connection reset" in results[0].error
        assert results[1].stats is not None

    def test_no_valid_pairs(self):
        with pytest.raises(ValueError):
            run_predictions(StubStore(), [MatchPair(slot=1)])

    def test_too_many_pairs(self):
        pairs = [MatchPair(slot=i, home_team="A", away_team="B") for i in range(MAX_PAIRS + 1)]
        with pytest.raises(ValueError):
            run_predictions(StubStore(), pairs)

    def test_all_eight_pairs_fetched(self):
        store = StubStore()
        pairs = [MatchPair(slot=i, home_team=f"H{i}", away_team=f"A{i}") for i in range(1, MAX_PAIRS + 1)]
        results = run_predictions(store, pairs)
        assert len(results) == MAX_PAIRS
        assert sorted(store.requested) == sorted((p.home_team, p.away_team) for p in pairs)


def test_predict_pair_without_history():
    result = predict_pair(StubStore(), MatchPair(slot=1, home_team="A", away_team="B"))
    assert result.stats is None
    assert result.error is None
