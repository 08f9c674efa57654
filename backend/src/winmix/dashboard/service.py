"""Dashboard data cycle: count, page, and aggregate the filtered match set."""

from __future__ import annotations

import logging
import math

from pydantic import BaseModel

from winmix.matches.store import MatchStore, MatchStoreError
from winmix.models.analytics import AdvancedAnalytics
from winmix.models.matches import MatchFilters, MatchRecord, MatchStatistics
from winmix.stats.aggregator import compute_statistics
from winmix.stats.analytics import compute_advanced_analytics

logger = logging.getLogger(__name__)


class DashboardView(BaseModel):
    matches: list[MatchRecord] = []
    stats: MatchStatistics | None = None
    total_count: int = 0
    total_pages: int = 0
    current_page: int = 1
    page_size: int = 50
    error: str | None = None


def load_dashboard(
    store: MatchStore,
    filters: MatchFilters | None = None,
    page: int = 1,
    page_size: int = 50,
) -> DashboardView:
    """Fetch one page of matches plus statistics over the whole filtered set.

    Statistics are None when nothing matches. Store failures are reported in
    ``error`` rather than raised.
    """
    filters = filters or MatchFilters()
    view = DashboardView(current_page=page, page_size=page_size)

    try:
        total = store.count(filters)
        view.total_count = total
        view.total_pages = math.ceil(total / page_size)
        view.matches = store.fetch_page(filters, page, page_size)

        if total > 0:
            records = store.fetch_all(filters)
            if records:
                view.stats = compute_statistics(records)
    except MatchStoreError as e:
        logger.error("Dashboard load failed: %s", e)
        view.matches = []
        view.stats = None
        view.error = str(e)

    logger.info(
        "Dashboard page %d/%d: %d of %d matches",
        view.current_page, view.total_pages, len(view.matches), view.total_count,
    )
    return view


class AnalyticsView(BaseModel):
    analytics: AdvancedAnalytics | None = None
    error: str | None = None


def load_analytics(
    store: MatchStore,
    filters: MatchFilters | None = None,
    limit: int = 1000,
) -> AnalyticsView:
    """Extended analytics over the newest ``limit`` matches for ``filters``.

    ``analytics`` is None when nothing matches; store failures land in ``error``.
    """
    try:
        records = store.fetch_all(filters, limit=limit)
    except MatchStoreError as e:
        logger.error("Analytics load failed: %s", e)
        return AnalyticsView(error=str(e))
    return AnalyticsView(analytics=compute_advanced_analytics(records))
