from __future__ import annotations

import io
from datetime import date
from typing import Optional, Sequence

from rich import box
from rich.columns import Columns
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from croptracker.aggregate import confirmed_percentage
from croptracker.domain.models import CropRecord, QueryPage, StoreStats
from croptracker.export.formatters import (
    DEFAULT_CURRENCY_SYMBOL,
    format_currency,
    format_date,
    format_long_date,
    format_number,
)

REPORT_TITLE = "Crop Yield & Expense Report"
REPORT_FOOTER = "Generated by Crop Yield & Expense Tracker"


def _status_label(record: CropRecord) -> str:
    return "Confirmed" if record.confirmed else "Pending"


def _records_table(
    records: Sequence[CropRecord],
    currency_symbol: str,
    decimals: int,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    show_id: bool = False,
) -> Table:
    table = Table(title=title, caption=caption, box=box.ROUNDED)

    if show_id:
        table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Crop", style="cyan", no_wrap=True)
    table.add_column("Date Planted", style="magenta")
    table.add_column("Acreage", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="yellow")
    table.add_column("Status")
    table.add_column("Notes", overflow="ellipsis", max_width=40)

    for record in records:
        status = _status_label(record)
        row = [
            escape(record.name),
            format_date(record.date_planted),
            f"{format_number(record.acreage, decimals)} acres",
            format_currency(record.expenses, currency_symbol),
            f"[bold green]{status}[/bold green]" if record.confirmed else f"[dim]{status}[/dim]",
            escape(record.notes) or "-",
        ]
        if show_id:
            row.insert(0, record.id)
        table.add_row(*row)
    return table


def _summary_panels(
    stats: StoreStats, currency_symbol: str, decimals: int, with_percentage: bool = False
) -> Columns:
    confirmed_subtitle = (
        f"{confirmed_percentage(stats)}% confirmed" if with_percentage else "Confirmed Crops"
    )
    cards = [
        ("Total Crops", str(stats.total_count), f"{stats.confirmed_count} confirmed"),
        ("Total Acres", format_number(stats.total_acreage, decimals), "acres planted"),
        ("Total Expenses", format_currency(stats.total_expenses, currency_symbol), "spent so far"),
        ("Confirmed", f"{stats.confirmed_count}/{stats.total_count}", confirmed_subtitle),
    ]
    return Columns(
        [
            Panel(f"[bold]{value}[/bold]\n[dim]{subtitle}[/dim]", title=label, expand=True)
            for label, value, subtitle in cards
        ],
        equal=True,
        expand=True,
    )


def print_records(
    page: QueryPage,
    console: Optional[Console] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = 1,
) -> None:
    """
    Render one page of the filtered record view as a rich table.
    """
    console = console or Console()

    if not page.total_count:
        console.print("[yellow]No crop records match the current filters.[/yellow]")
        return

    if not page.items:
        console.print(f"[yellow]Page {page.page} is past the last page ({page.total_pages}).[/yellow]")
        return

    caption = (
        f"Showing {page.first_index} to {page.last_index} of {page.total_count} results"
        f" (page {page.page} of {page.total_pages})"
    )

    console.print(
        _records_table(
            page.items,
            currency_symbol,
            decimals,
            title=f"Crop Records ({page.total_count})",
            caption=caption,
            show_id=True,
        )
    )


def print_dashboard(
    stats: StoreStats,
    recent: Sequence[CropRecord],
    console: Optional[Console] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = 1,
) -> None:
    """
    Render the summary cards and the most recently added records.
    """
    console = console or Console()
    console.print(_summary_panels(stats, currency_symbol, decimals, with_percentage=True))
    if recent:
        console.print(_records_table(recent, currency_symbol, decimals, title="Recent Crops"))
    else:
        console.print("[dim]No crops recorded yet. Add your first crop to get started.[/dim]")


def render_report(
    records: Sequence[CropRecord],
    stats: StoreStats,
    console: Optional[Console] = None,
    generated_on: Optional[date] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = 1,
) -> None:
    """
    Print the full report: title, summary statistics, crop details, footer.
    """
    console = console or Console()
    generated_on = generated_on or date.today()

    console.print(Rule(f"[bold]{REPORT_TITLE}[/bold]"))
    console.print(f"Generated on {format_long_date(generated_on)}", justify="center")
    console.print()
    console.print("[bold]Summary Statistics[/bold]")
    console.print(_summary_panels(stats, currency_symbol, decimals))
    console.print()
    console.print("[bold]Crop Details[/bold]")
    if records:
        console.print(_records_table(records, currency_symbol, decimals))
    else:
        console.print("No crop records found.", justify="center")
    console.print(Rule())
    console.print(REPORT_FOOTER, justify="center", style="dim")


def report_text(
    records: Sequence[CropRecord],
    stats: StoreStats,
    generated_on: Optional[date] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    decimals: int = 1,
    width: int = 120,
) -> str:
    """
    Return the report as plain text (no colour codes), ready to be saved.
    """
    console = Console(record=True, width=width, file=io.StringIO(), color_system=None)
    render_report(records, stats, console, generated_on, currency_symbol, decimals)
    return console.export_text()


__all__ = ["print_records", "print_dashboard", "render_report", "report_text"]
