"""CLI entry point for the WinMix dashboard backend.

Usage:
    winmix stats --home Arsenal --btts
    winmix results --page 2 --sort ft --desc
    winmix export --output matches.csv
    winmix predict "Arsenal:Chelsea" "Liverpool:Everton"
    winmix filters save "Arsenal BTTS" --home Arsenal --btts
    winmix layout move charts 0
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from winmix.config import get_settings
from winmix.matches.store import MatchStore, MatchStoreError
from winmix.models.matches import RESULT_CODES, MatchFilters, MatchStatistics

app = typer.Typer(help="WinMix match analytics CLI", no_args_is_help=True)
filters_app = typer.Typer(help="Saved filter presets", no_args_is_help=True)
layout_app = typer.Typer(help="Dashboard widget layout", no_args_is_help=True)
app.add_typer(filters_app, name="filters")
app.add_typer(layout_app, name="layout")

console = Console()

HOME_OPT = typer.Option(None, "--home", help="Home team")
AWAY_OPT = typer.Option(None, "--away", help="Away team")
BTTS_OPT = typer.Option(None, "--btts/--no-btts", help="Both teams scored")
COMEBACK_OPT = typer.Option(None, "--comeback/--no-comeback", help="Comeback matches")
RESULT_OPT = typer.Option(None, "--result", help="Full-time result H, D or A")
DATE_FROM_OPT = typer.Option(None, "--date-from", help="From date YYYY-MM-DD (inclusive)")
DATE_TO_OPT = typer.Option(None, "--date-to", help="To date YYYY-MM-DD (inclusive)")
PRESET_OPT = typer.Option(None, "--preset", help="Apply a saved filter by id")
LOG_LEVEL_OPT = typer.Option("INFO", "--log-level", help="Logging level")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _store() -> MatchStore:
    return MatchStore()


def _state_dir() -> Path:
    return get_settings().state_dir


def _build_filters(
    home: Optional[str],
    away: Optional[str],
    btts: Optional[bool],
    comeback: Optional[bool],
    result: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
    preset: Optional[str] = None,
) -> MatchFilters:
    """Merge a saved preset (if any) with explicit options; options win."""
    base = MatchFilters()
    if preset:
        from winmix.presets.saved_filters import SavedFilterStore

        saved = SavedFilterStore(_state_dir()).get(preset)
        if saved is None:
            console.print(f"[red]Unknown saved filter: {preset}[/red]")
            raise typer.Exit(1)
        base = saved.filters

    if result is not None and result.upper() not in RESULT_CODES:
        console.print(f"[red]Invalid result: {result}. Use H, D or A[/red]")
        raise typer.Exit(1)

    for label, value in (("date-from", date_from), ("date-to", date_to)):
        if value is None:
            continue
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            console.print(f"[red]Invalid {label}: {value}. Use YYYY-MM-DD[/red]")
            raise typer.Exit(1)

    overrides = {
        "home_team": home,
        "away_team": away,
        "btts_computed": btts,
        "comeback_computed": comeback,
        "result_computed": result.upper() if result else None,
        "date_from": date_from,
        "date_to": date_to,
    }
    return base.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def _print_statistics(stats: MatchStatistics, title: str = "Match Statistics") -> None:
    table = Table(title=title)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Matches", str(stats.total_matches))
    table.add_row("Home wins", f"{stats.home_wins} ({stats.home_win_percentage}%)")
    table.add_row("Draws", f"{stats.draws} ({stats.draw_percentage}%)")
    table.add_row("Away wins", f"{stats.away_wins} ({stats.away_win_percentage}%)")
    table.add_row("BTTS", f"{stats.btts_count} ({stats.btts_percentage}%)")
    table.add_row("Comebacks", f"{stats.comeback_count} ({stats.comeback_percentage}%)")
    table.add_row("Avg goals", str(stats.avg_goals))
    table.add_row("Home avg goals", str(stats.home_avg_goals))
    table.add_row("Away avg goals", str(stats.away_avg_goals))
    table.add_row("HT/FT transformations", str(stats.halftime_transformations))
    console.print(table)

    if stats.most_frequent_results:
        freq = Table(title="Most Frequent Results")
        freq.add_column("Score")
        freq.add_column("Count", justify="right")
        freq.add_column("%", justify="right")
        for r in stats.most_frequent_results:
            freq.add_row(r.score, str(r.count), str(r.percentage))
        console.print(freq)


@app.command()
def stats(
    home: Optional[str] = HOME_OPT,
    away: Optional[str] = AWAY_OPT,
    btts: Optional[bool] = BTTS_OPT,
    comeback: Optional[bool] = COMEBACK_OPT,
    result: Optional[str] = RESULT_OPT,
    date_from: Optional[str] = DATE_FROM_OPT,
    date_to: Optional[str] = DATE_TO_OPT,
    preset: Optional[str] = PRESET_OPT,
    page: int = typer.Option(1, "--page", min=1, help="Result page (1-based)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Matches per page"),
    log_level: str = LOG_LEVEL_OPT,
) -> None:
    """Show statistics for the filtered matches and one page of results."""
    _setup_logging(log_level)
    from winmix.dashboard.service import load_dashboard

    filters = _build_filters(home, away, btts, comeback, result, date_from, date_to, preset)
    size = page_size or get_settings().default_page_size
    view = load_dashboard(_store(), filters, page, size)

    if view.error:
        console.print(f"[red]✗ {view.error}[/red]")
        raise typer.Exit(1)
    if view.stats is None:
        console.print("[dim]No matches for the current filters.[/dim]")
        return

    _print_statistics(view.stats)
    console.print(
        f"[dim]Page {view.current_page}/{view.total_pages} "
        f"({len(view.matches)} of {view.total_count} matches)[/dim]"
    )


@app.command()
def results(
    home: Optional[str] = HOME_OPT,
    away: Optional[str] = AWAY_OPT,
    btts: Optional[bool] = BTTS_OPT,
    comeback: Optional[bool] = COMEBACK_OPT,
    result: Optional[str] = RESULT_OPT,
    date_from: Optional[str] = DATE_FROM_OPT,
    date_to: Optional[str] = DATE_TO_OPT,
    preset: Optional[str] = PRESET_OPT,
    page: int = typer.Option(1, "--page", help="Page (1-based)"),
    per_page: int = typer.Option(50, "--per-page", min=1, help="Rows per page"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Column: home, away, ht, ft, btts, comeback"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    log_level: str = LOG_LEVEL_OPT,
) -> None:
    """List filtered matches with client-side sorting and paging."""
    _setup_logging(log_level)
    from winmix.results.table import (
        SortConfig,
        is_valid_page,
        page_window,
        paginate,
        sort_rows,
        to_result_rows,
        total_pages,
    )

    filters = _build_filters(home, away, btts, comeback, result, date_from, date_to, preset)
    try:
        records = _store().fetch_all(filters)
    except MatchStoreError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    rows = to_result_rows(records)
    if not rows:
        console.print("[dim]No matches for the current filters.[/dim]")
        return

    n_pages = total_pages(len(rows), per_page)
    if not is_valid_page(page, n_pages):
        console.print(f"[red]Page {page} out of range (1-{n_pages})[/red]")
        raise typer.Exit(1)

    if sort is not None and sort not in ("home", "away", "ht", "ft", "btts", "comeback"):
        console.print(f"[red]Unknown sort column: {sort}[/red]")
        raise typer.Exit(1)
    config = SortConfig(key=sort, direction="desc" if desc else "asc")

    table = Table(title="Listed Results")
    for col in ("Home", "Away", "HT", "FT", "BTTS", "Comeback"):
        table.add_column(col)
    for row in paginate(sort_rows(rows, config), page, per_page):
        table.add_row(row.home, row.away, row.ht, row.ft, row.btts, row.comeback)
    console.print(table)

    pages = " ".join(f"[bold]{p}[/bold]" if p == page else str(p) for p in page_window(page, n_pages))
    console.print(f"Pages: {pages}  ({len(rows)} matches)")


@app.command()
def export(
    output: Path = typer.Option(Path("matches.csv"), "--output", "-o", help="CSV file to write"),
    home: Optional[str] = HOME_OPT,
    away: Optional[str] = AWAY_OPT,
    btts: Optional[bool] = BTTS_OPT,
    comeback: Optional[bool] = COMEBACK_OPT,
    result: Optional[str] = RESULT_OPT,
    date_from: Optional[str] = DATE_FROM_OPT,
    date_to: Optional[str] = DATE_TO_OPT,
    preset: Optional[str] = PRESET_OPT,
    log_level: str = LOG_LEVEL_OPT,
) -> None:
    """Export the filtered matches to CSV."""
    _setup_logging(log_level)
    from winmix.results.export import export_matches

    filters = _build_filters(home, away, btts, comeback, result, date_from, date_to, preset)
    try:
        records = _store().fetch_all(filters)
        n = export_matches(records, output)
    except MatchStoreError as e:
        console.print(f"[red]✗ Export failed: {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ {n} matches exported to {output}[/green]")


@app.command()
def analytics(
    home: Optional[str] = HOME_OPT,
    away: Optional[str] = AWAY_OPT,
    btts: Optional[bool] = BTTS_OPT,
    comeback: Optional[bool] = COMEBACK_OPT,
    result: Optional[str] = RESULT_OPT,
    date_from: Optional[str] = DATE_FROM_OPT,
    date_to: Optional[str] = DATE_TO_OPT,
    preset: Optional[str] = PRESET_OPT,
    log_level: str = LOG_LEVEL_OPT,
) -> None:
    """Extended analytics: goal trends, weekdays, months, HT/FT."""
    _setup_logging(log_level)
    from winmix.dashboard.service import load_analytics

    filters = _build_filters(home, away, btts, comeback, result, date_from, date_to, preset)
    view = load_analytics(_store(), filters, limit=get_settings().analytics_limit)
    if view.error:
        console.print(f"[red]✗ {view.error}[/red]")
        raise typer.Exit(1)

    data = view.analytics
    if data is None:
        console.print("[dim]No matches for the current filters.[/dim]")
        return

    summary = Table(title=f"Analytics ({data.total_matches} matches)")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Over 2.5", f"{data.goals_trend.over25_goals} ({data.goals_trend.over25_percentage}%)")
    summary.add_row("Under 2.5", f"{data.goals_trend.under25_goals} ({data.goals_trend.under25_percentage}%)")
    summary.add_row("BTTS", f"{data.btts_analysis.btts_true} ({data.btts_analysis.btts_percentage}%)")
    summary.add_row(
        "Comebacks",
        f"{data.comeback_analysis.total_comebacks} ({data.comeback_analysis.comeback_percentage}%)",
    )
    summary.add_row("HT/FT correlation", f"{data.halftime_vs_fulltime.correlation_rate}%")
    console.print(summary)

    weekly = Table(title="By Weekday")
    weekly.add_column("Day")
    weekly.add_column("Matches", justify="right")
    weekly.add_column("Avg goals", justify="right")
    weekly.add_column("BTTS %", justify="right")
    for d in data.weekly_results:
        weekly.add_row(d.day, str(d.matches), str(d.avg_goals), str(d.btts_rate))
    console.print(weekly)

    if data.seasonal_trends:
        monthly = Table(title="Monthly Trends")
        monthly.add_column("Month")
        monthly.add_column("Avg goals", justify="right")
        monthly.add_column("BTTS %", justify="right")
        monthly.add_column("Comeback %", justify="right")
        for m in data.seasonal_trends:
            monthly.add_row(m.month, str(m.avg_goals), str(m.btts_rate), str(m.comeback_rate))
        console.print(monthly)


@app.command()
def teams(log_level: str = LOG_LEVEL_OPT) -> None:
    """List every team appearing as home or away side."""
    _setup_logging(log_level)
    names = _store().fetch_teams()
    if not names:
        console.print("[dim]No teams found.[/dim]")
        return
    for name in names:
        console.print(name)


@app.command()
def predict(
    pairs: List[str] = typer.Argument(..., help='Pairs as "Home:Away" (max 8)'),
    log_level: str = LOG_LEVEL_OPT,
) -> None:
    """Head-to-head predictions from historical meetings."""
    _setup_logging(log_level)
    from winmix.predictions.runner import parse_pair, run_predictions

    try:
        parsed = [parse_pair(i, text) for i, text in enumerate(pairs, start=1)]
        predictions = run_predictions(_store(), parsed)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Predictions")
    table.add_column("#", justify="right")
    table.add_column("Match")
    table.add_column("Meetings", justify="right")
    table.add_column("H/D/A %")
    table.add_column("BTTS %", justify="right")
    table.add_column("Confidence")
    table.add_column("Recommendation")

    for p in predictions:
        if p.stats is None or p.stats.prediction_quality is None:
            note = f"[red]{p.error}[/red]" if p.error else "[dim]no history[/dim]"
            table.add_row(str(p.pair.slot), p.pair.label, "0", "-", "-", "-", note)
            continue
        s = p.stats
        q = s.prediction_quality
        table.add_row(
            str(p.pair.slot),
            p.pair.label,
            str(s.total_matches),
            f"{s.home_win_percentage}/{s.draw_percentage}/{s.away_win_percentage}",
            str(s.btts_percentage),
            q.confidence,
            q.recommendation,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Saved filters
# ---------------------------------------------------------------------------

@filters_app.command("list")
def filters_list() -> None:
    """List saved filters."""
    from winmix.presets.saved_filters import SavedFilterStore

    items = SavedFilterStore(_state_dir()).list()
    if not items:
        console.print("[dim]No saved filters.[/dim]")
        return
    table = Table(title="Saved Filters")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Filters")
    table.add_column("Created")
    for f in items:
        active = f.filters.model_dump(exclude_none=True)
        table.add_row(f.id, f.name, ", ".join(f"{k}={v}" for k, v in active.items()) or "-", f.created_at.isoformat())
    console.print(table)


@filters_app.command("save")
def filters_save(
    name: str = typer.Argument(..., help="Preset name"),
    home: Optional[str] = HOME_OPT,
    away: Optional[str] = AWAY_OPT,
    btts: Optional[bool] = BTTS_OPT,
    comeback: Optional[bool] = COMEBACK_OPT,
    result: Optional[str] = RESULT_OPT,
    date_from: Optional[str] = DATE_FROM_OPT,
    date_to: Optional[str] = DATE_TO_OPT,
) -> None:
    """Save the given filter options under NAME."""
    from winmix.presets.saved_filters import SavedFilterStore

    filters = _build_filters(home, away, btts, comeback, result, date_from, date_to)
    if not SavedFilterStore(_state_dir()).save(name, filters):
        console.print("[red]Filter name must not be empty[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Saved filter {name.strip()!r}[/green]")


@filters_app.command("delete")
def filters_delete(filter_id: str = typer.Argument(..., help="Saved filter id")) -> None:
    """Delete a saved filter."""
    from winmix.presets.saved_filters import SavedFilterStore

    store = SavedFilterStore(_state_dir())
    if store.get(filter_id) is None:
        console.print(f"[red]Unknown saved filter: {filter_id}[/red]")
        raise typer.Exit(1)
    store.delete(filter_id)
    console.print(f"[green]✓ Deleted {filter_id}[/green]")


@filters_app.command("clear")
def filters_clear() -> None:
    """Delete every saved filter."""
    from winmix.presets.saved_filters import SavedFilterStore

    SavedFilterStore(_state_dir()).clear()
    console.print("[green]✓ All saved filters removed[/green]")


# ---------------------------------------------------------------------------
# Dashboard layout
# ---------------------------------------------------------------------------

def _print_layout(widgets) -> None:
    table = Table(title="Dashboard Layout")
    table.add_column("Pos", justify="right")
    table.add_column("ID")
    table.add_column("Component")
    table.add_column("Size")
    table.add_column("Visible")
    for w in sorted(widgets, key=lambda w: w.position):
        table.add_row(str(w.position), w.id, w.component, w.size or "-", "yes" if w.visible else "no")
    console.print(table)


@layout_app.command("show")
def layout_show() -> None:
    """Show widget order and visibility."""
    from winmix.presets.layout import DashboardLayout

    _print_layout(DashboardLayout(_state_dir()).widgets)


@layout_app.command("move")
def layout_move(
    widget_id: str = typer.Argument(..., help="Widget id"),
    position: int = typer.Argument(..., min=0, help="Target position (0-based)"),
) -> None:
    """Move a widget to a new position."""
    from winmix.presets.layout import DashboardLayout

    try:
        widgets = DashboardLayout(_state_dir()).move(widget_id, position)
    except KeyError:
        console.print(f"[red]Unknown widget: {widget_id}[/red]")
        raise typer.Exit(1)
    _print_layout(widgets)


@layout_app.command("toggle")
def layout_toggle(widget_id: str = typer.Argument(..., help="Widget id")) -> None:
    """Show or hide a widget."""
    from winmix.presets.layout import DashboardLayout

    try:
        widgets = DashboardLayout(_state_dir()).toggle_visibility(widget_id)
    except KeyError:
        console.print(f"[red]Unknown widget: {widget_id}[/red]")
        raise typer.Exit(1)
    _print_layout(widgets)


@layout_app.command("reset")
def layout_reset() -> None:
    """Restore the default layout."""
    from winmix.presets.layout import DashboardLayout

    _print_layout(DashboardLayout(_state_dir()).reset())


if __name__ == "__main__":
    app()
