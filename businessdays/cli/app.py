"""
Main CLI application using Typer.
"""

import asyncio
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.holiday_cache import HolidayCache
from ..adapters.holiday_client import HolidayClient
from ..adapters.mock_holiday_client import MockHolidayClient
from ..api.params import parse_utc_date
from ..config import AppConfig, load_config
from ..domain.calendar import StaticHolidayCalendar
from ..domain.exceptions import BusinessDaysError
from ..logging_config import setup_logging
from ..services.business_date import BusinessDateService, format_utc

app = typer.Typer(
    name="businessdays",
    help="Add business days and hours on a working calendar",
    add_completion=False
)

console = Console()


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
MockOption = Annotated[
    bool,
    typer.Option("--mock", help="Use the bundled holiday list instead of the remote one."),
]


def _load(config_file: Optional[Path]) -> AppConfig:
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    setup_logging(config.log_level)
    return config


def _build_cache(config: AppConfig, mock: bool) -> HolidayCache:
    if mock:
        return HolidayCache(MockHolidayClient())
    return HolidayCache(
        HolidayClient(url=config.holidays.url, timeout=config.holidays.timeout_seconds)
    )


@app.command()
def compute(
    days: Annotated[int, typer.Option("--days", "-d", min=0, help="Business days to add")] = 0,
    hours: Annotated[float, typer.Option("--hours", "-h", min=0, help="Business hours to add (fractions allowed)")] = 0,
    date: Annotated[Optional[str], typer.Option("--date", help="Start instant in UTC, e.g. 2025-04-10T15:00:00Z. Defaults to now.")] = None,
    holiday: Annotated[Optional[List[str]], typer.Option("--holiday", help="Holiday date (YYYY-MM-DD). Repeatable; skips the holiday source.")] = None,
    mock: MockOption = False,
    config_file: ConfigOption = None,
):
    """
    Compute the instant N business days and M business hours from a start.

    Examples:

        # Two business hours from now
        businessdays compute --hours 2

        # From a fixed instant, offline
        businessdays compute --days 1 --hours 4 --date 2025-04-10T15:00:00Z --mock

        # With an explicit holiday list
        businessdays compute --days 3 --holiday 2025-04-17 --holiday 2025-04-18
    """
    config = _load(config_file)
    schedule = config.to_schedule()

    try:
        start = parse_utc_date(date) if date is not None else None

        if holiday:
            service = BusinessDateService(schedule, holidays=StaticHolidayCalendar(holiday))
        else:
            service = BusinessDateService.from_cache(
                schedule,
                _build_cache(config, mock),
                prefetch_years_ahead=config.holidays.prefetch_years_ahead,
            )

        result = asyncio.run(service.compute(start=start, days=days, hours=hours))

    except BusinessDaysError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold]Start:[/bold] {format_utc(start) if start else 'now'}\n"
        f"[bold]Added:[/bold] {days} day(s), {hours:g} hour(s)\n"
        f"[bold]Local:[/bold] {result.in_timezone(schedule.timezone).format('dddd YYYY-MM-DD HH:mm')} ({schedule.timezone})\n"
        f"[bold green]Result:[/bold green] {format_utc(result)}",
        title="Business date"
    ))


@app.command()
def holidays(
    year: Annotated[int, typer.Argument(help="Calendar year to list")],
    mock: MockOption = False,
    config_file: ConfigOption = None,
):
    """
    List the holidays known for a year.
    """
    config = _load(config_file)
    cache = _build_cache(config, mock)

    try:
        dates = asyncio.run(cache.get_holidays(year))
    except BusinessDaysError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not dates:
        console.print(f"[yellow]No holidays found for {year}.[/yellow]")
        return

    table = Table(
        title=f"Holidays {year}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Weekday", style="dim")

    for iso_date in sorted(dates):
        weekday = pendulum.parse(iso_date).format("dddd")
        table.add_row(iso_date, weekday)

    console.print()
    console.print(table)
    console.print()


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port (overrides PORT and config)")] = None,
    mock: MockOption = False,
    config_file: ConfigOption = None,
):
    """
    Run the HTTP API.
    """
    import uvicorn

    from ..api.app import create_app

    config = _load(config_file)
    source = MockHolidayClient() if mock else None
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(f"[bold cyan]Business days API listening on {bind_host}:{bind_port}[/bold cyan]")
    uvicorn.run(
        create_app(config, source=source),
        host=bind_host,
        port=bind_port,
        log_level=config.log_level.lower(),
    )


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]businessdays[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
