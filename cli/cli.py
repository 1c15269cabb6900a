"""CLI for the workload risk engine.

Works on a roster JSON document (the pydantic dump of ``Roster``). The wall
clock is read here, and only when ``--today`` is omitted; the engine itself
always receives an explicit reference day.
"""

import datetime as dt
import json
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from app.config.settings import settings
from app.core.logger import configure_from_settings
from app.metrics.availability import availability, required_rest_days
from app.metrics.errors import WorkloadPreconditionError
from app.metrics.range_grid import (
    GridMode,
    aggregate,
    build_grid,
    cell_display,
    cell_placeholder,
    column_dates,
    format_planned_range,
    shift_dates,
)
from app.metrics.timeline import current_assessment, project
from app.metrics.workload_report import summarize, upcoming_schedule
from models.workload import Category, RiskAssessment, Roster, SubjectWorkload
from state.sample_roster import generate_sample_roster
from state.workload_store import apply_grid_input, upsert_record

app = typer.Typer(help="Workload risk (ACWR) engine CLI", no_args_is_help=True)
console = Console()

STATUS_STYLES = {
    "insufficient_data": "dim",
    "low_confidence_reference": "cyan",
    "low": "blue",
    "safe": "green",
    "warning": "yellow",
    "danger": "bold red",
}


@app.callback()
def main() -> None:
    configure_from_settings(settings)


def _parse_day(value: str | None, name: str = "--today") -> dt.date:
    if value is None:
        return dt.datetime.now(tz=dt.UTC).date()
    try:
        return dt.date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"{name} must be YYYY-MM-DD, got {value!r}") from e


def _parse_what_if(values: list[str]) -> dict[dt.date, int]:
    """Parse ``YYYY-MM-DD=COUNT`` pairs into an override mapping."""
    overrides: dict[dt.date, int] = {}
    for value in values:
        day_text, sep, count_text = value.partition("=")
        if not sep:
            raise typer.BadParameter(f"--what-if expects YYYY-MM-DD=COUNT, got {value!r}")
        try:
            count = int(count_text)
        except ValueError as e:
            raise typer.BadParameter(f"--what-if count must be an integer, got {count_text!r}") from e
        if count < 0:
            raise typer.BadParameter(f"--what-if count must be >= 0, got {count}")
        overrides[_parse_day(day_text.strip(), "--what-if")] = count
    return overrides


def _load_roster(path: Path) -> Roster:
    try:
        return Roster.model_validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        console.print(Panel(Text(f"Roster file not found: {path}", style="bold red"), border_style="red"))
        raise typer.Exit(1) from e
    except ValidationError as e:
        console.print(Panel(Text("Roster file is not valid", style="bold red"), subtitle=str(e.error_count()) + " errors", border_style="red"))
        logger.error(f"Invalid roster {path}: {e}")
        raise typer.Exit(1) from e


def _save_roster(roster: Roster, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(roster.model_dump_json(indent=2), encoding="utf-8")


def _require_subject(roster: Roster, subject_id: str) -> SubjectWorkload:
    subject = roster.get(subject_id)
    if subject is None:
        console.print(Panel(Text(f"Unknown subject: {subject_id}", style="bold red"), border_style="red"))
        raise typer.Exit(1)
    return subject


def _format_ratio(assessment: RiskAssessment) -> str:
    return "-" if assessment.ratio is None else f"{assessment.ratio:.2f}"


def _fail(error: WorkloadPreconditionError) -> typer.Exit:
    console.print(Panel(Text(error.message, style="bold red"), subtitle=error.code, border_style="red"))
    return typer.Exit(1)


def _grid_mode(value: str) -> GridMode:
    if value == "plan":
        return "plan"
    if value == "result":
        return "result"
    raise typer.BadParameter(f"--mode must be plan or result, got {value!r}")


def _category(value: str) -> Category:
    if value == "competitive":
        return "competitive"
    if value == "training":
        return "training"
    raise typer.BadParameter(f"--category must be competitive or training, got {value!r}")


@app.command()
def timeline(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    subject_id: str = typer.Option(..., "--subject", "-s", help="Subject to project"),
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    past_days: int = typer.Option(settings.past_days, "--past-days", help="Days of history before today"),
    future_days: int = typer.Option(settings.future_days, "--future-days", help="Days after today"),
    what_if: list[str] = typer.Option([], "--what-if", help="Hypothetical load, YYYY-MM-DD=COUNT (repeatable)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Project actual and predicted ACWR for one subject."""
    roster = _load_roster(roster_file)
    subject = _require_subject(roster, subject_id)
    reference = _parse_day(today)

    try:
        points = list(
            project(
                subject,
                reference,
                past_days=past_days,
                future_days=future_days,
                overrides=_parse_what_if(what_if),
                acute_window_days=settings.acute_window_days,
                chronic_window_days=settings.chronic_window_days,
            )
        )
    except WorkloadPreconditionError as e:
        raise _fail(e) from e

    if as_json:
        typer.echo(json.dumps([point.model_dump(mode="json") for point in points], ensure_ascii=False))
        return

    table = Table(title=f"ACWR timeline: {subject.name or subject.subject_id}")
    for column in ("Date", "Series", "Acute", "Chronic", "Ratio", "Phase", "Status"):
        table.add_column(column)
    for point in points:
        assessment = point.assessment
        series = "actual+predicted" if point.actual and point.predicted else ("actual" if point.actual else "predicted")
        table.add_row(
            point.date.isoformat(),
            series,
            str(assessment.acute_load),
            f"{assessment.chronic_weekly_load:.1f}",
            _format_ratio(assessment),
            assessment.phase,
            Text(assessment.status, style=STATUS_STYLES[assessment.status]),
        )
    console.print(table)


@app.command()
def status(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Show today's risk and rest availability for every subject."""
    roster = _load_roster(roster_file)
    reference = _parse_day(today)

    rows = []
    for subject in roster.subjects:
        assessment = current_assessment(
            subject,
            reference,
            acute_window_days=settings.acute_window_days,
            chronic_window_days=settings.chronic_window_days,
        )
        rest = availability(subject, reference)
        rows.append((subject, assessment, rest))

    if as_json:
        payload = [
            {
                "subject_id": subject.subject_id,
                "availability": rest.status,
                "available_from": rest.available_from.isoformat(),
                "assessment": assessment.model_dump(mode="json"),
            }
            for subject, assessment, rest in rows
        ]
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return

    table = Table(title=f"Roster status on {reference.isoformat()}")
    for column in ("Subject", "No.", "Availability", "Acute", "Ratio", "Phase", "Status"):
        table.add_column(column)
    for subject, assessment, rest in rows:
        rest_label = "available" if rest.status == "available" else f"resting until {rest.available_from.isoformat()}"
        table.add_row(
            subject.name or subject.subject_id,
            subject.number,
            rest_label,
            str(assessment.acute_load),
            _format_ratio(assessment),
            assessment.phase,
            Text(assessment.status, style=STATUS_STYLES[assessment.status]),
        )
    console.print(table)


@app.command()
def grid(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    start: str | None = typer.Option(None, "--start", help="First column (YYYY-MM-DD), defaults to today"),
    days: int = typer.Option(7, "--days", min=1, help="Number of date columns"),
    week_offset: int = typer.Option(0, "--week-offset", help="Move the columns by whole weeks (negative for earlier)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Show the planned/actual grid with row, column and grand totals."""
    roster = _load_roster(roster_file)
    dates = shift_dates(column_dates(_parse_day(start, "--start"), days), 7 * week_offset)
    built = build_grid(roster.subjects, dates)

    if as_json:
        payload = {
            "dates": [day.isoformat() for day in dates],
            "rows": {
                subject_id: {
                    "cells": [aggregate([built.cells[subject_id][day]]) for day in dates],
                    "total": built.row_total(subject_id),
                }
                for subject_id in built.subject_ids
            },
            "column_totals": [built.column_total(day) for day in dates],
            "grand_total": built.grand_total(),
        }
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return

    table = Table(title="Workload grid", show_footer=True)
    table.add_column("Subject", footer="Total")
    for day in dates:
        table.add_column(day.strftime("%m/%d %a"), footer=built.column_total(day), justify="right")
    table.add_column("Total", footer=built.grand_total(), justify="right")
    for subject in roster.subjects:
        cells = [aggregate([built.cells[subject.subject_id][day]]) for day in dates]
        table.add_row(subject.name or subject.subject_id, *cells, built.row_total(subject.subject_id))
    console.print(table)


@app.command()
def report(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    subject_id: str = typer.Option(..., "--subject", "-s", help="Subject to summarize"),
) -> None:
    """Print a monthly workload report for one subject."""
    subject = _require_subject(_load_roster(roster_file), subject_id)
    summary = summarize(subject)

    console.print(
        Panel(
            Text(
                f"Total: {summary.total_count}  Competitive: {summary.competitive_sessions}  "
                f"Training: {summary.training_sessions}  Avg competitive: {summary.average_competitive_count}"
            ),
            title=subject.name or subject.subject_id,
        )
    )
    for month in summary.months:
        table = Table(title=f"{month.month} (total {month.total_count})")
        for column in ("Date", "Category", "Count", "Notes"):
            table.add_column(column)
        for record in month.records:
            table.add_row(record.date.isoformat(), record.category, str(record.count), record.notes or "")
        console.print(table)


@app.command("set-cell")
def set_cell(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    subject_id: str = typer.Option(..., "--subject", "-s", help="Subject to edit"),
    day: str = typer.Option(..., "--date", help="Cell date (YYYY-MM-DD)"),
    value: str = typer.Option("", "--value", help='Cell text, e.g. "50", "50-60"; empty deletes'),
    mode: str = typer.Option("plan", "--mode", help="plan or result"),
) -> None:
    """Apply grid cell input to a subject and save the roster."""
    grid_mode = _grid_mode(mode)

    roster = _load_roster(roster_file)
    subject = _require_subject(roster, subject_id)
    updated = apply_grid_input(subject, day=_parse_day(day, "--date"), text=value, mode=grid_mode)

    subjects = [updated if s.subject_id == subject_id else s for s in roster.subjects]
    _save_roster(Roster(subjects=subjects), roster_file)
    logger.info(f"Applied {grid_mode} input {value!r} to {subject_id} on {day}")
    console.print(f"[green]Saved {roster_file}[/green]")


@app.command()
def cell(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    subject_id: str = typer.Option(..., "--subject", "-s", help="Subject of the cell"),
    day: str = typer.Option(..., "--date", help="Cell date (YYYY-MM-DD)"),
    mode: str = typer.Option("plan", "--mode", help="plan or result"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a panel"),
) -> None:
    """Show a grid cell's editable text and its empty-cell hint."""
    grid_mode = _grid_mode(mode)
    subject = _require_subject(_load_roster(roster_file), subject_id)
    cell_day = _parse_day(day, "--date")

    text = cell_display(subject, cell_day, grid_mode)
    placeholder = cell_placeholder(subject, cell_day, grid_mode)

    if as_json:
        typer.echo(json.dumps({"text": text, "placeholder": placeholder}, ensure_ascii=False))
        return

    body = Text(text) if text else Text(placeholder, style="dim")
    console.print(Panel(body, title=f"{subject.name or subject.subject_id} {cell_day.isoformat()} ({grid_mode})"))


@app.command()
def schedule(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List planned workloads from yesterday onwards, grouped by date."""
    roster = _load_roster(roster_file)
    upcoming = upcoming_schedule(roster.subjects, _parse_day(today))

    if as_json:
        payload = {
            day.isoformat(): [{"subject_id": entry.subject_id, "plan": format_planned_range(entry.plan)} for entry in entries]
            for day, entries in upcoming.items()
        }
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return

    if not upcoming:
        console.print("[dim]No planned workloads[/dim]")
        return

    table = Table(title="Upcoming schedule")
    for column in ("Date", "Subject", "No.", "Plan"):
        table.add_column(column)
    for day, entries in upcoming.items():
        for entry in entries:
            table.add_row(day.strftime("%m/%d %a"), entry.name or entry.subject_id, entry.number, format_planned_range(entry.plan))
    console.print(table)


@app.command("log")
def log_workload(
    roster_file: Path = typer.Argument(..., help="Roster JSON file"),
    subject_id: str = typer.Option(..., "--subject", "-s", help="Subject to record for"),
    count: int = typer.Option(..., "--count", min=0, help="Recorded workload"),
    day: str | None = typer.Option(None, "--date", help="Record date (YYYY-MM-DD), defaults to today"),
    category: str = typer.Option("competitive", "--category", help="competitive or training"),
    notes: str | None = typer.Option(None, "--notes", help="Free-form notes"),
) -> None:
    """Record a workload and show the rest it requires."""
    record_category = _category(category)
    roster = _load_roster(roster_file)
    subject = _require_subject(roster, subject_id)
    record_day = _parse_day(day, "--date")

    updated = upsert_record(subject, day=record_day, count=count, category=record_category, notes=notes)
    subjects = [updated if s.subject_id == subject_id else s for s in roster.subjects]
    _save_roster(Roster(subjects=subjects), roster_file)
    logger.info(f"Logged {record_category} workload {count} for {subject_id} on {record_day.isoformat()}")

    rest_days = required_rest_days(count)
    if rest_days == 0:
        console.print(f"[green]Saved {roster_file}; no rest required[/green]")
        return
    available_from = record_day + dt.timedelta(days=rest_days + 1)
    console.print(f"[green]Saved {roster_file}; rest {rest_days} day(s), available from {available_from.isoformat()}[/green]")


@app.command("add-subject")
def add_subject(
    roster_file: Path = typer.Argument(..., help="Roster JSON file (created when missing)"),
    subject_id: str = typer.Option(..., "--id", help="New subject id"),
    name: str = typer.Option("", "--name", help="Display name"),
    number: str = typer.Option("", "--number", help="Uniform or roster number"),
) -> None:
    """Add an empty subject to the roster."""
    roster = _load_roster(roster_file) if roster_file.exists() else Roster()
    if roster.get(subject_id) is not None:
        console.print(Panel(Text(f"Subject already exists: {subject_id}", style="bold red"), border_style="red"))
        raise typer.Exit(1)

    subjects = [*roster.subjects, SubjectWorkload(subject_id=subject_id, name=name, number=number)]
    _save_roster(Roster(subjects=subjects), roster_file)
    logger.info(f"Added subject {subject_id} to {roster_file}")
    console.print(f"[green]Added {subject_id} ({len(subjects)} subjects)[/green]")


@app.command()
def sample(
    output: Path = typer.Argument(..., help="Where to write the sample roster JSON"),
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
) -> None:
    """Write a demonstration roster relative to today."""
    roster = generate_sample_roster(_parse_day(today))
    _save_roster(roster, output)
    console.print(f"[green]Wrote {len(roster.subjects)} subjects to {output}[/green]")


if __name__ == "__main__":
    app()
