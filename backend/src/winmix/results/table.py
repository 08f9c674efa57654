"""Client-side sorting and pagination for the results table."""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel

from winmix.models.matches import MatchRecord

SortDirection = Literal["asc", "desc"]

MAX_VISIBLE_PAGES = 5


class ResultRow(BaseModel):
    home: str
    away: str
    ht: str
    ft: str
    btts: str
    comeback: str


class SortConfig(BaseModel):
    key: str | None = None
    direction: SortDirection = "asc"


def to_result_rows(records: list[MatchRecord]) -> list[ResultRow]:
    """Display rows; unknown halftime scores show as N/A."""
    return [
        ResultRow(
            home=r.home_team,
            away=r.away_team,
            ht=r.halftime_score or "N/A",
            ft=f"{r.home_goals}-{r.away_goals}",
            btts="Yes" if r.btts_computed else "No",
            comeback="Yes" if r.comeback_computed else "No",
        )
        for r in records
    ]


def toggle_sort(current: SortConfig, key: str) -> SortConfig:
    """Clicking the active ascending column flips it to descending."""
    if key not in ResultRow.model_fields:
        raise KeyError(key)
    direction: SortDirection = "asc"
    if current.key == key and current.direction == "asc":
        direction = "desc"
    return SortConfig(key=key, direction=direction)


def sort_rows(rows: list[ResultRow], config: SortConfig) -> list[ResultRow]:
    """Stable sort by one column; no key leaves the order untouched."""
    if config.key is None:
        return list(rows)
    return sorted(
        rows,
        key=lambda row: getattr(row, config.key),
        reverse=config.direction == "desc",
    )


def total_pages(n_items: int, per_page: int) -> int:
    return math.ceil(n_items / per_page) if per_page > 0 else 0


def paginate(rows: list, page: int, per_page: int) -> list:
    start = (page - 1) * per_page
    return rows[start:start + per_page]


def is_valid_page(page: int, n_pages: int) -> bool:
    return 1 <= page <= n_pages


def page_window(current: int, n_pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int]:
    """Page numbers shown in the pager around ``current``."""
    if n_pages <= max_visible:
        return list(range(1, n_pages + 1))
    start = max(1, current - 2)
    end = min(n_pages, start + max_visible - 1)
    return list(range(start, end + 1))
