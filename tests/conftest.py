"""Shared fixtures: an in-memory stand-in for the Supabase query builder."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from winmix.matches.store import MatchStore
from winmix.models.matches import MatchRecord


def make_row(
    home: str = "Arsenal",
    away: str = "Chelsea",
    ft: tuple[int, int] = (1, 0),
    ht: tuple[int, int] | None = (0, 0),
    result: str | None = None,
    btts: bool | None = None,
    comeback: bool | None = False,
    match_time: str | None = "2024-01-01T15:00:00+00:00",
    id: int | None = None,
) -> dict[str, Any]:
    """Row shaped like the matches table; result/btts derived from the score by default."""
    h, a = ft
    if result is None:
        result = "H" if h > a else "A" if a > h else "D"
    if btts is None:
        btts = h > 0 and a > 0
    return {
        "id": id,
        "home_team": home,
        "away_team": away,
        "full_time_home_goals": h,
        "full_time_away_goals": a,
        "half_time_home_goals": ht[0] if ht else None,
        "half_time_away_goals": ht[1] if ht else None,
        "result_computed": result,
        "btts_computed": btts,
        "comeback_computed": comeback,
        "match_time": match_time,
    }


def make_record(**kwargs) -> MatchRecord:
    return MatchRecord.model_validate(make_row(**kwargs))


class FakeQuery:
    def __init__(self, client: "FakeClient", name: str) -> None:
        self.client = client
        self.name = name
        self.columns = "*"
        self.count_mode = None
        self.head = False
        self.predicates: list[tuple[str, str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.bounds: tuple[int, int] | None = None

    def select(self, columns: str = "*", count=None, head=None) -> "FakeQuery":
        self.columns = columns
        self.count_mode = count
        self.head = bool(head)
        return self

    def eq(self, col: str, val: Any) -> "FakeQuery":
        self.predicates.append((col, "eq", val))
        return self

    def gte(self, col: str, val: Any) -> "FakeQuery":
        self.predicates.append((col, "gte", val))
        return self

    def lte(self, col: str, val: Any) -> "FakeQuery":
        self.predicates.append((col, "lte", val))
        return self

    def order(self, col: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (col, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.bounds = (start, end)
        return self

    def _matches(self, row: dict) -> bool:
        for col, op, val in self.predicates:
            cell = row.get(col)
            if op == "eq" and cell != val:
                return False
            if op == "gte" and (cell is None or cell < val):
                return False
            if op == "lte" and (cell is None or cell > val):
                return False
        return True

    def execute(self) -> SimpleNamespace:
        self.client.calls.append(self)
        if self.client.errors:
            raise self.client.errors.pop(0)

        rows = [r for r in self.client.rows if self._matches(r)]
        total = len(rows)
        if self.order_by is not None:
            col, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(col) or "", reverse=desc)
        if self.bounds is not None:
            start, end = self.bounds
            rows = rows[start:end + 1]
        if self.columns != "*":
            cols = [c.strip() for c in self.columns.split(",")]
            rows = [{c: r.get(c) for c in cols} for r in rows]

        return SimpleNamespace(
            data=[] if self.head else rows,
            count=total if self.count_mode == "exact" else None,
        )


class FakeClient:
    def __init__(self, rows: list[dict] | None = None) -> None:
        self.rows = rows or []
        self.calls: list[FakeQuery] = []
        self.errors: list[Exception] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def sample_rows() -> list[dict]:
    return [
        make_row("Arsenal", "Chelsea", (2, 1), (1, 0), match_time="2024-03-02T15:00:00+00:00", id=1),
        make_row("Arsenal", "Chelsea", (1, 1), (0, 1), comeback=True, match_time="2024-02-10T15:00:00+00:00", id=2),
        make_row("Liverpool", "Everton", (0, 2), (0, 0), match_time="2024-01-20T15:00:00+00:00", id=3),
        make_row("Arsenal", "Chelsea", (2, 1), (2, 0), match_time="2023-12-26T15:00:00+00:00", id=4),
        make_row("Everton", "Arsenal", (0, 0), None, match_time="2023-11-04T15:00:00+00:00", id=5),
    ]


@pytest.fixture
def fake_client(sample_rows) -> FakeClient:
    return FakeClient(sample_rows)


@pytest.fixture
def store(fake_client) -> MatchStore:
    return MatchStore(client=fake_client, table_name="matches")
