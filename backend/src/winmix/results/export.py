"""CSV export of the listed matches."""

from __future__ import annotations

import logging
from pathlib import Path

import polars as pl

from winmix.models.matches import MatchRecord

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Home team", "Away team", "Half time", "Full time", "BTTS", "Comeback", "Time"]
BOM = "\ufeff"


def matches_to_frame(records: list[MatchRecord]) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "Home team": [r.home_team for r in records],
            "Away team": [r.away_team for r in records],
            "Half time": [r.halftime_score or "N/A" for r in records],
            "Full time": [f"{r.home_goals}-{r.away_goals}" for r in records],
            "BTTS": ["Yes" if r.btts_computed else "No" for r in records],
            "Comeback": ["Yes" if r.comeback_computed else "No" for r in records],
            # null, not "", so the writer leaves the field unquoted and empty
            "Time": [r.match_time.isoformat() if r.match_time else None for r in records],
        },
        schema={h: pl.String for h in CSV_HEADERS},
    )


def matches_to_csv(records: list[MatchRecord]) -> str:
    """Spreadsheet-friendly CSV: UTF-8 BOM, minimal quoting, no trailing newline."""
    if not records:
        raise ValueError("No matches to export for the current filters")
    body = matches_to_frame(records).write_csv(quote_style="necessary")
    if body.endswith("\n"):
        body = body[:-1]
    return BOM + body


def export_matches(records: list[MatchRecord], path: Path) -> int:
    """Write the CSV to ``path``. Returns the number of exported matches."""
    content = matches_to_csv(records)
    path.write_text(content, encoding="utf-8")
    logger.info("Exported %d matches to %s", len(records), path)
    return len(records)
