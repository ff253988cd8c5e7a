from __future__ import annotations

import sys
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Generator, Optional

import typer
from rich.console import Console

from croptracker.aggregate import compute_stats, recent_records
from croptracker.config import get_settings
from croptracker.domain.models import CropQuery, StatusFilter
from croptracker.exceptions import CropTrackerError
from croptracker.export.csv_export import csv_filename, to_csv
from croptracker.infrastructure.kv_store import build_kv_store
from croptracker.query import run_query
from croptracker.reporter import print_dashboard, print_records, report_text, render_report
from croptracker.seed import load_sample_data
from croptracker.store import RecordStore
from croptracker.utils.logging import configure_logging

app = typer.Typer(help="Crop Tracker: record plantings, costs and confirmations.")

DATE_FORMATS = ["%Y-%m-%d"]


def _open_store() -> RecordStore:
    settings = get_settings()
    return RecordStore(build_kv_store(settings), key=settings.storage_key)


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@contextmanager
def _reported_errors() -> Generator[None, None, None]:
    """Turn core failures into a red message and exit status 1."""
    try:
        yield
    except CropTrackerError as exc:
        typer.secho(f"Error: {exc.message}", fg=typer.colors.RED, err=True)
        for field, message in exc.details.items():
            typer.secho(f"  {field}: {message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"backend={settings.storage_backend} data_dir={settings.data_dir} key={settings.storage_key} | "
        f"page_size={settings.page_size} currency={settings.currency_symbol} env={settings.app_env}"
    )


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", help="Crop name, e.g. Maize."),
    planted: datetime = typer.Option(..., "--planted", "-d", formats=DATE_FORMATS, help="Date planted (YYYY-MM-DD)."),
    acreage: float = typer.Option(..., "--acreage", "-a", help="Land area in acres (> 0)."),
    expenses: float = typer.Option(..., "--expenses", "-e", help="Amount spent (>= 0)."),
    notes: str = typer.Option("", "--notes", help="Free-text notes."),
    confirmed: bool = typer.Option(False, "--confirmed/--unconfirmed", help="Planting confirmed?"),
) -> None:
    """
    Add a crop record.
    """
    store = _open_store()
    with _reported_errors():
        record = store.add(
            {
                "name": name,
                "date_planted": planted.date(),
                "acreage": acreage,
                "expenses": expenses,
                "notes": notes,
                "confirmed": confirmed,
            }
        )
    typer.secho(f"{record.name} has been added successfully! (id {record.id})", fg=typer.colors.GREEN)


@app.command()
def update(
    record_id: str = typer.Argument(..., help="Id of the record to change."),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    planted: Optional[datetime] = typer.Option(None, "--planted", "-d", formats=DATE_FORMATS),
    acreage: Optional[float] = typer.Option(None, "--acreage", "-a"),
    expenses: Optional[float] = typer.Option(None, "--expenses", "-e"),
    notes: Optional[str] = typer.Option(None, "--notes"),
    confirmed: Optional[bool] = typer.Option(None, "--confirmed/--unconfirmed"),
) -> None:
    """
    Change only the supplied fields of a crop record.
    """
    changes: Dict[str, Any] = {
        key: value
        for key, value in {
            "name": name,
            "date_planted": _as_date(planted),
            "acreage": acreage,
            "expenses": expenses,
            "notes": notes,
            "confirmed": confirmed,
        }.items()
        if value is not None
    }
    if not changes:
        typer.echo("Nothing to update.")
        return

    store = _open_store()
    with _reported_errors():
        record = store.update(record_id, changes)
    if record is None:
        typer.secho(f"No crop record with id {record_id}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"{record.name} has been updated successfully!", fg=typer.colors.GREEN)


@app.command()
def delete(
    record_id: str = typer.Argument(..., help="Id of the record to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete a crop record.
    """
    if not yes:
        typer.confirm("This crop record will be permanently deleted. Continue?", abort=True)
    store = _open_store()
    with _reported_errors():
        removed = store.delete(record_id)
    if not removed:
        typer.secho(f"No crop record with id {record_id}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho("Crop has been deleted successfully!", fg=typer.colors.GREEN)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete every crop record. Cannot be undone.
    """
    if not yes:
        typer.confirm("All crop records will be permanently deleted. Continue?", abort=True)
    store = _open_store()
    with _reported_errors():
        store.clear_all()
    typer.secho("All data has been cleared successfully!", fg=typer.colors.GREEN)


@app.command("list")
def list_records(
    search: str = typer.Option("", "--search", "-q", help="Match crop name or notes (case-insensitive)."),
    status: StatusFilter = typer.Option(StatusFilter.ALL, "--status", "-s", case_sensitive=False),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=DATE_FORMATS),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=DATE_FORMATS),
    page: int = typer.Option(1, "--page", "-p", min=1),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
) -> None:
    """
    List crop records with optional filters, one page at a time.
    """
    settings = get_settings()
    query = CropQuery(
        search_term=search,
        status_filter=status,
        date_from=_as_date(date_from),
        date_to=_as_date(date_to),
        page=page,
        page_size=page_size or settings.page_size,
    )
    result = run_query(_open_store().list(), query)
    print_records(result, Console(), settings.currency_symbol, settings.number_decimals)


@app.command()
def stats() -> None:
    """
    Show summary statistics and the most recently added crops.
    """
    settings = get_settings()
    records = _open_store().list()
    print_dashboard(
        compute_stats(records),
        recent_records(records),
        Console(),
        settings.currency_symbol,
        settings.number_decimals,
    )


@app.command("export-csv")
def export_csv(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination file (default crop_records_<today>.csv)."),
) -> None:
    """
    Write every crop record to a CSV file.
    """
    settings = get_settings()
    target = output or Path(csv_filename())
    text = to_csv(_open_store().list(), currency_symbol=settings.currency_symbol)
    try:
        target.write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        typer.secho(f"Failed to export CSV: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho(f"CSV file written to {target}", fg=typer.colors.GREEN)


@app.command()
def report(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save the report as plain text instead of printing it."),
) -> None:
    """
    Print the crop yield & expense report.
    """
    settings = get_settings()
    store = _open_store()
    records = store.list()
    totals = compute_stats(records)
    if output is None:
        render_report(
            records,
            totals,
            Console(),
            currency_symbol=settings.currency_symbol,
            decimals=settings.number_decimals,
        )
        return
    text = report_text(
        records, totals, currency_symbol=settings.currency_symbol, decimals=settings.number_decimals
    )
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as exc:
        typer.secho(f"Failed to save report: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho(f"Report written to {output}", fg=typer.colors.GREEN)


@app.command()
def seed(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Replace all records with sample crop data.
    """
    if not yes:
        typer.confirm("Existing crop records will be replaced by sample data. Continue?", abort=True)
    with _reported_errors():
        records = load_sample_data(_open_store())
    typer.secho(f"{len(records)} sample crop records have been loaded!", fg=typer.colors.GREEN)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
