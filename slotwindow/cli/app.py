"""
Main CLI application using Typer.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from pendulum import Date, DateTime
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.booking_api import BookingApiClient
from ..adapters.mock_booking_client import MockBookingClient
from ..config import AppConfig, load_config
from ..domain import pricing
from ..domain.exceptions import SlotWindowError
from ..domain.models import AvailabilitySnapshot, TimeSlot, to_booking_date
from ..services.booking_window import BookingWindowService

app = typer.Typer(
    name="slotwindow",
    help="Check same-day slot availability and booking-window rules",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DateOption = Annotated[Optional[str], typer.Option("--date", "-d", help="Booking date: YYYY-MM-DD, 'today' or 'tomorrow'")]
AtOption = Annotated[Optional[str], typer.Option("--at", help="Pretend the current time is this time of day, e.g. '10:31 AM'")]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load(config_file: Optional[Path], verbose: bool = False) -> AppConfig:
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _configure_logging("DEBUG" if verbose else config.log_level)
    return config


def _resolve_clock(config: AppConfig, at: Optional[str]):
    """Return the clock: real time, or today at a simulated time of day."""
    if not at:
        return None

    try:
        simulated = TimeSlot.parse(at)
    except SlotWindowError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid --at value: {e}")
        raise typer.Exit(1)

    def clock() -> DateTime:
        return simulated.starts_on(pendulum.now(config.timezone))

    return clock


def _resolve_date(option: Optional[str], today: Date) -> Date:
    if not option or option.lower() == "today":
        return today
    if option.lower() == "tomorrow":
        return today.add(days=1)

    try:
        return to_booking_date(option)
    except SlotWindowError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _build_service(config: AppConfig, at: Optional[str] = None, client=None) -> BookingWindowService:
    return BookingWindowService(
        engine=config.build_engine(),
        clock=_resolve_clock(config, at),
        booking_client=client,
        reschedule_policy=config.reschedule.to_policy(),
    )


def _render_snapshot(snapshot: AvailabilitySnapshot, service: BookingWindowService) -> Table:
    engine = service.engine
    is_today = snapshot.booking_date == snapshot.now.date()

    table = Table(
        title=f"Slots for {snapshot.booking_date.format('dddd, D MMMM YYYY')}",
        caption=f"As of {snapshot.now.format('hh:mm A')} · {engine.lead_time_minutes} min lead time",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Slot", style="bold")
    table.add_column("Status")
    table.add_column("Starts in", justify="right", style="dim")

    for slot in engine.catalog:
        if slot.label in snapshot.available:
            status = "[green]available[/green]"
        else:
            status = "[red]unavailable[/red]"

        starts_in = ""
        if is_today:
            minutes = engine.minutes_until(slot, snapshot.now)
            starts_in = pricing.format_duration(int(minutes)) if minutes >= 0 else "passed"

        table.add_row(slot.label, status, starts_in)

    return table


def _print_next_slot(snapshot: AvailabilitySnapshot) -> None:
    if snapshot.is_fully_booked:
        console.print("[yellow]⚠ No more slots available for this date. Please choose another day.[/yellow]")
    else:
        console.print(f"[bold green]✓ Next available slot:[/bold green] {snapshot.next_available}")


@app.command()
def slots(
    config_file: ConfigOption = None,
    date: DateOption = None,
    at: AtOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Show which slots can be booked for a date.

    Examples:

        slotwindow slots
        slotwindow slots --date tomorrow
        slotwindow slots --at "10:31 AM"
    """
    config = _load(config_file, verbose)
    service = _build_service(config, at)
    now = service.current_time()
    booking_date = _resolve_date(date, now.date())

    snapshot = service.snapshot(booking_date, now)

    console.print()
    console.print(_render_snapshot(snapshot, service))
    console.print()
    _print_next_slot(snapshot)
    console.print()


@app.command()
def check(
    slot: Annotated[str, typer.Argument(help="Slot label, e.g. '11:00 AM'")],
    config_file: ConfigOption = None,
    date: DateOption = None,
    at: AtOption = None,
):
    """
    Validate a slot selection the way the checkout form does.
    """
    config = _load(config_file)
    service = _build_service(config, at)
    now = service.current_time()
    booking_date = _resolve_date(date, now.date())

    result = service.validate(slot, booking_date.to_date_string(), now)

    if result.is_valid:
        console.print(f"[green]✓ {result.message}[/green]")
        return

    console.print(f"[bold red]✗ {result.message}[/bold red]")
    raise typer.Exit(1)


@app.command()
def watch(
    config_file: ConfigOption = None,
    date: DateOption = None,
    interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Refresh interval in seconds")] = None,
    iterations: Annotated[int, typer.Option("--iterations", "-n", help="Stop after N refreshes (0 = run until Ctrl+C)")] = 0,
):
    """
    Keep the slot table fresh as time passes.
    """
    config = _load(config_file)
    service = _build_service(config)
    refresh_seconds = interval or config.booking.refresh_interval_seconds

    def render() -> Table:
        now = service.current_time()
        booking_date = _resolve_date(date, now.date())
        return _render_snapshot(service.snapshot(booking_date, now), service)

    count = 0
    try:
        with Live(render(), console=console, refresh_per_second=1) as live:
            while True:
                count += 1
                if iterations and count >= iterations:
                    break
                time.sleep(refresh_seconds)
                live.update(render())
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


@app.command()
def quote(
    subtotal: Annotated[float, typer.Argument(help="Order subtotal in rupees")],
    config_file: ConfigOption = None,
    tax_rate: Annotated[Optional[float], typer.Option("--tax-rate", help="Tax rate in percent")] = None,
):
    """
    Show tax, total and the amount charged in paise.
    """
    config = _load(config_file)
    currency = config.payment.currency
    rate = tax_rate if tax_rate is not None else config.payment.tax_rate

    validation = pricing.validate_amount(subtotal)
    if not validation.is_valid:
        console.print(f"[bold red]Error:[/bold red] {validation.error}")
        raise typer.Exit(1)

    result = pricing.quote(subtotal, rate)

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column(justify="right")
    table.add_row("Subtotal", pricing.format_amount(result.subtotal, currency))
    table.add_row(f"Tax ({float(result.tax_rate):g}%)", pricing.format_amount(result.tax, currency))
    table.add_row("Total", pricing.format_amount(result.total, currency))
    table.add_row("Charged (paise)", str(result.total_paise))

    console.print(Panel.fit(table, title="Payment quote"))


@app.command()
def reschedule_info(
    booking_id: Annotated[str, typer.Argument(help="Booking ID")],
    config_file: ConfigOption = None,
    mock: Annotated[bool, typer.Option("--mock", help="Read bookings from bundled mock data")] = False,
):
    """
    Show how many reschedules a booking has left.
    """
    config = _load(config_file)

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using bundled booking data[/yellow]\n")
        client = MockBookingClient()
    else:
        client = BookingApiClient(
            base_url=config.api.base_url,
            access_token=config.api.access_token,
            timeout=config.api.timeout_seconds,
        )

    service = _build_service(config, client=client)

    try:
        status = service.reschedule_status(booking_id)
    except SlotWindowError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    notes = "\n".join(f"• {note}" for note in service.reschedule_policy.notes())
    console.print(Panel.fit(
        f"[bold]{status.headline}[/bold]\n\n"
        f"[bold]Rescheduled:[/bold] {status.reschedule_count} time(s)\n\n"
        f"{notes}",
        title=f"Booking {status.booking_id}"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotwindow[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
