"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler

from ..adapters.json_availability import JsonAvailabilityResolver
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotGridError
from ..domain.layout_engine import parse_date
from ..domain.models import PositionedSlot, SlotKind
from ..services.layout_service import CalendarLayoutService

app = typer.Typer(
    name="slotgrid",
    help="Lay out calendar availability as positioned grid slots",
    add_completion=False
)

console = Console()

KIND_STYLES = {
    SlotKind.AVAILABLE: "bold green",
    SlotKind.UNAVAILABLE: "dim",
    SlotKind.OUT_OF_OFFICE: "bold yellow",
}


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the given config file, or the default one if it exists."""
    if config_file:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _render_day(date_key: str, slots: List[PositionedSlot]) -> None:
    weekday = pendulum.parse(date_key).format("dddd, DD.MM.YYYY")
    console.print(f"[bold cyan]{weekday}[/bold cyan]")

    if not slots:
        console.print("  [dim]Ganztägig abwesend, kein Vertreter hinterlegt[/dim]")
        return

    for slot in slots:
        console.print(f"  {slot.format_display()}", style=KIND_STYLES[slot.kind], markup=False)


@app.command()
def layout(
    availability: Annotated[Optional[Path], typer.Option("--availability", "-a", help="Availability JSON file. Defaults to availability_file from the config.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="First visible date (YYYY-MM-DD). Defaults to today.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", "-d", help="Number of visible days")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "--tz", help="Display timezone (IANA name)")] = None,
    start_hour: Annotated[Optional[int], typer.Option("--start-hour", help="First visible hour")] = None,
    end_hour: Annotated[Optional[int], typer.Option("--end-hour", help="Last visible hour (exclusive)")] = None,
    no_ooo_merge: Annotated[bool, typer.Option("--no-ooo-merge", help="Ganztägige Abwesenheiten nicht zusammenfassen.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the layout as JSON for a renderer.")] = False,
):
    """
    Lay out the availability of a range of days.

    Examples:

        slotgrid layout -a availability.json --start 2024-11-25

        slotgrid layout -a availability.json --days 1 --tz America/New_York --json
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config.log_level)

        if no_ooo_merge:
            config.enable_out_of_office_merging = False

        tz = timezone or config.timezone
        first_hour = start_hour if start_hour is not None else config.grid.start_hour
        last_hour = end_hour if end_hour is not None else config.grid.end_hour
        day_count = days if days is not None else config.grid.days
        if day_count <= 0:
            raise ValueError("--days must be greater than zero")

        data_file = availability or config.availability_file
        if data_file is None:
            console.print("[bold red]Fehler:[/bold red] Keine Verfügbarkeitsdatei angegeben (--availability).")
            raise typer.Exit(1)

        start_date = parse_date(start, tz) if start else pendulum.now(tz).date()
        end_date = start_date.add(days=day_count - 1)

        service = CalendarLayoutService(
            resolver=JsonAvailabilityResolver(data_file),
            engine=config.build_engine(),
        )
        layouts: Dict[str, List[PositionedSlot]] = asyncio.run(
            service.build_layout(
                start_date=start_date,
                end_date=end_date,
                timezone=tz,
                start_hour=first_hour,
                end_hour=last_hour,
            )
        )
    except (FileNotFoundError, SlotGridError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        payload = {
            date_key: [slot.to_dict() for slot in slots]
            for date_key, slots in layouts.items()
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    pendulum.set_locale("de")
    console.print(
        f"\n[bold cyan]🗓️  Slot-Raster {start_date.format('DD.MM.YYYY')} - "
        f"{end_date.format('DD.MM.YYYY')}[/bold cyan] ({tz}, {first_hour}:00 - {last_hour}:00)\n"
    )
    for date_key, slots in layouts.items():
        _render_day(date_key, slots)
        console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotgrid[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
