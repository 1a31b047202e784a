"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig
from ..domain.exceptions import TimeframeError
from ..domain.gap_calculator import GapCalculator
from ..domain.models import Timeframe
from ..parsing.interval_parser import IntervalParser

app = typer.Typer(
    name="timeframe",
    help="Parse, split and compare half-open date intervals",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./timeframe.yaml"),
]


def _setup(config_file: Optional[Path]) -> Tuple[AppConfig, IntervalParser]:
    """Load configuration, route logging through Rich and build a parser."""
    config = AppConfig.load(config_file)
    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    return config, IntervalParser.from_config(config)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command()
def show(
    interval: Annotated[str, typer.Argument(help="Year, ISO 8601 interval or JSON timeframe")],
    config_file: ConfigOption = None,
):
    """
    Parse a timeframe and show its canonical forms.

    Examples:

        timeframe show 2009

        timeframe show 2007-03-01/P1Y2M10DT2H30M
    """
    try:
        _, parser = _setup(config_file)
        timeframe = parser.parse(interval)
    except (TimeframeError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(Panel.fit(
        f"[bold]Canonical:[/bold] {timeframe}\n"
        f"[bold]JSON:[/bold] {escape(timeframe.to_json_value())}\n"
        f"[bold]Days:[/bold] {timeframe.days()}",
        title="Timeframe"
    ))


@app.command()
def months(
    interval: Annotated[str, typer.Argument(help="Timeframe to split into months")],
    config_file: ConfigOption = None,
):
    """
    Split a timeframe into month-long pieces.
    """
    try:
        _, parser = _setup(config_file)
        timeframe = parser.parse(interval)
    except (TimeframeError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title=f"Months of {timeframe}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Timeframe", style="bold yellow")
    table.add_column("Days", justify="right")
    table.add_column("Share", justify="right", style="dim")

    for piece in timeframe.months():
        share = f"{piece / timeframe:.1%}"
        table.add_row(str(piece), str(piece.days()), share)

    console.print(table)


@app.command()
def gaps(
    bases: Annotated[List[str], typer.Argument(help="Timeframes to check for gaps")],
    cover: Annotated[
        Optional[List[str]],
        typer.Option("--cover", "-C", help="Covering timeframe (repeatable)"),
    ] = None,
    config_file: ConfigOption = None,
):
    """
    List the gaps the covering timeframes leave in each base timeframe.

    Examples:

        timeframe gaps 2009 -C 2009-03-01/2009-04-01 -C 2009-05-01/2009-06-01
    """
    try:
        _, parser = _setup(config_file)
        base_timeframes = [parser.parse(base) for base in bases]
        coverings = [parser.parse(item) for item in cover or []]
        found = GapCalculator(coverings).gaps_in(base_timeframes)
    except (TimeframeError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not found:
        console.print("[green]✓ Fully covered, no gaps.[/green]")
        return

    table = Table(
        title=f"{len(found)} gap(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Gap", style="bold yellow")
    table.add_column("Days", justify="right")

    for gap in found:
        table.add_row(str(gap), str(gap.days()))

    console.print(table)


@app.command()
def around(
    years: Annotated[int, typer.Argument(help="Years either side of today")],
    config_file: ConfigOption = None,
):
    """
    Show the timeframe reaching YEARS years either side of today.
    """
    try:
        config, _ = _setup(config_file)
        timeframe = Timeframe.mid(years, tz=config.timezone)
    except (TimeframeError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"{timeframe} ({timeframe.days()} days)")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]timeframe[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
