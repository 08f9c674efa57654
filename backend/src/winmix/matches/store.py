"""Read match records from Supabase with dashboard filters applied."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from winmix.config import get_settings
from winmix.models.matches import MatchFilters, MatchRecord

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000  # Supabase caps a single select at 1000 rows


class MatchStoreError(RuntimeError):
    """A match query failed after retries."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _execute(query) -> Any:
    return query.execute()


def apply_filters(query, filters: MatchFilters | None):
    """Add equality and date-range predicates for every set filter."""
    if filters is None:
        return query
    if filters.home_team:
        query = query.eq("home_team", filters.home_team)
    if filters.away_team:
        query = query.eq("away_team", filters.away_team)
    if filters.btts_computed is not None:
        query = query.eq("btts_computed", filters.btts_computed)
    if filters.comeback_computed is not None:
        query = query.eq("comeback_computed", filters.comeback_computed)
    if filters.result_computed:
        query = query.eq("result_computed", filters.result_computed)
    if filters.date_from:
        query = query.gte("match_time", filters.date_from)
    if filters.date_to:
        query = query.lte("match_time", filters.date_to)
    return query


class MatchStore:
    """Query facade over the matches table.

    The Supabase client is created lazily so tests can pass a fake one.
    """

    def __init__(self, client=None, table_name: str | None = None) -> None:
        self._client = client
        self.table_name = table_name or get_settings().matches_table

    @property
    def client(self):
        if self._client is None:
            from winmix.db import get_client

            self._client = get_client()
        return self._client

    def _table(self):
        return self.client.table(self.table_name)

    def _run(self, operation: str, query) -> Any:
        try:
            return _execute(query)
        except APIError as e:
            raise MatchStoreError(operation, e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise MatchStoreError(operation, str(e)) from e

    def count(self, filters: MatchFilters | None = None) -> int:
        """Exact number of matches for ``filters``."""
        q = apply_filters(self._table().select("*", count="exact", head=True), filters)
        resp = self._run("count", q)
        return resp.count or 0

    def fetch_page(
        self,
        filters: MatchFilters | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> list[MatchRecord]:
        """One page of matches, newest first. ``page`` is 1-based."""
        if page < 1 or page_size < 1:
            raise ValueError(f"Invalid page {page} / page_size {page_size}")
        start = (page - 1) * page_size
        q = (
            apply_filters(self._table().select("*"), filters)
            .order("match_time", desc=True)
            .range(start, start + page_size - 1)
        )
        rows = self._run("fetch_page", q).data or []
        return [MatchRecord.model_validate(r) for r in rows]

    def _paginated_select(
        self,
        columns: str,
        filters: MatchFilters | None,
        order_col: str,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict]:
        """Fetch rows in blocks of PAGE_SIZE until exhausted or ``limit`` reached."""
        all_rows: list[dict] = []
        offset = 0

        while True:
            size = PAGE_SIZE if limit is None else min(PAGE_SIZE, limit - len(all_rows))
            if size <= 0:
                break
            q = (
                apply_filters(self._table().select(columns), filters)
                .order(order_col, desc=desc)
                .range(offset, offset + size - 1)
            )
            rows = self._run("select", q).data or []
            all_rows.extend(rows)
            if len(rows) < size:
                break
            offset += size

        return all_rows

    def fetch_all(
        self,
        filters: MatchFilters | None = None,
        limit: int | None = None,
    ) -> list[MatchRecord]:
        """Every match for ``filters`` (newest first), optionally capped at ``limit``."""
        rows = self._paginated_select("*", filters, "match_time", desc=True, limit=limit)
        logger.debug("Fetched %d matches for %s", len(rows), filters)
        return [MatchRecord.model_validate(r) for r in rows]

    def fetch_pair(self, home_team: str, away_team: str) -> list[MatchRecord]:
        """All historical meetings with ``home_team`` at home against ``away_team``."""
        return self.fetch_all(MatchFilters(home_team=home_team, away_team=away_team))

    def fetch_teams(self) -> list[str]:
        """Distinct team names across home and away sides, sorted.

        Failures are logged and give an empty list.
        """
        try:
            home = self._paginated_select("home_team", None, "home_team")
            away = self._paginated_select("away_team", None, "away_team")
        except MatchStoreError as e:
            logger.error("Error fetching teams: %s", e)
            return []

        teams = {r["home_team"] for r in home} | {r["away_team"] for r in away}
        return sorted(t for t in teams if t)
