"""Command-line interface for logroute."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from . import __version__
from .config_routes import (
    build_stage,
    generate_sample_routes_file,
    parse_routes_file,
)
from .errors import ConfigurationError, RouteParseError
from .formatting import EventFormatter
from .models import Level, LogEvent, RoutesConfig, parse_level
from .route import Route
from .stage import Stage

app = typer.Typer(
    name="logroute",
    help="Send leveled log events through filters to files and the console.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

# Default file name
DEFAULT_ROUTES_FILE = ".logroutes"

# Level to color mapping for rich output
LEVEL_COLORS = {
    Level.TRACE: "dim",
    Level.DEBUG: "blue",
    Level.INFO: "green",
    Level.WARN: "yellow",
    Level.ERROR: "red",
    Level.FATAL: "red bold",
}


class RichAppender:
    """Appender printing formatted events to the rich console."""

    def __init__(self, color: bool = True, formatter: EventFormatter | None = None) -> None:
        self.color = color
        self.formatter = formatter or EventFormatter("[{Level}] {Message}")

    def __call__(self, event: LogEvent) -> None:
        line = self.formatter.format(event)
        if self.color and event.level in LEVEL_COLORS:
            console.print(Text(line, style=LEVEL_COLORS[event.level]), highlight=False)
        else:
            console.print(line, highlight=False, markup=False)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"logroute {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """logroute - leveled, filtered, multi-destination logging."""
    pass


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Create a sample .logroutes file in the current directory."""
    path = Path.cwd() / DEFAULT_ROUTES_FILE

    if force and path.exists():
        path.unlink()

    if generate_sample_routes_file(path):
        console.print(f"[green]Created:[/green] {DEFAULT_ROUTES_FILE}")
    else:
        console.print(f"[yellow]Skipped (already exists):[/yellow] {DEFAULT_ROUTES_FILE}")
        console.print("[dim]Use --force to overwrite the existing file.[/dim]")


@app.command()
def levels() -> None:
    """List the log levels and their numeric values."""
    for level in Level:
        style = LEVEL_COLORS.get(level, "dim")
        console.print(Text(f"{level.value}  {level.name}", style=style), highlight=False)


@app.command()
def check(
    config_file: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to .logroutes file.",
        ),
    ] = Path(DEFAULT_ROUTES_FILE),
) -> None:
    """Parse a .logroutes file and print the routes it declares."""
    if not config_file.exists():
        err_console.print(f"[red]Error:[/red] {config_file} not found.")
        raise typer.Exit(1)

    config = _load_routes_config(config_file)

    level = config.level.name if config.level is not None else "(environment or INFO)"
    console.print(f"[bold]Global level:[/bold] {level}")

    if not config.routes:
        console.print("[yellow]No routes declared.[/yellow]")
        return

    for spec in config.routes.values():
        console.print(f"[bold]{escape(spec.name)}[/bold] level={spec.level.name}")
        for throttle in spec.throttles:
            key = "level" if throttle.by_level else "message"
            console.print(f"  throttle {throttle.interval}s per {key}")
        for appender in spec.appenders:
            if appender.kind == "file":
                console.print(f"  file {escape(appender.path or '')} (buffer {appender.buffer_size})")
            else:
                console.print("  console")


@app.command()
def emit(
    level: Annotated[
        str,
        typer.Argument(help="Level name or number, e.g. INFO or 3."),
    ],
    message: Annotated[
        list[str],
        typer.Argument(help="Message text."),
    ],
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to .logroutes file (default: console only).",
        ),
    ] = None,
    stats: Annotated[
        bool,
        typer.Option(
            "--stats",
            "-s",
            help="Show dispatch statistics at the end.",
        ),
    ] = False,
    color: Annotated[
        bool,
        typer.Option(
            "--color/--no-color",
            help="Enable/disable colored output.",
        ),
    ] = True,
) -> None:
    """Log a single message through the configured routes.

    Without --config the message goes to a colored console route. The
    global threshold comes from the config file, then LOGROUTE_LEVEL,
    then INFO.

    Examples:
        logroute emit INFO "service started"
        logroute emit ERROR disk full --config .logroutes --stats
    """
    try:
        event_level = parse_level(level, Level.TRACE, Level.FATAL)
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    stage = _build_stage(config_file, color=color)

    with stage:
        stage.log(event_level, " ".join(message))

    if stats:
        err_console.print()
        err_console.print("[bold]Dispatch Statistics:[/bold]")
        err_console.print(stage.stats.summary(), highlight=False)


def _build_stage(config_file: Path | None, color: bool) -> Stage:
    """Create the stage for a command, from a file or with a console route."""
    try:
        if config_file is None:
            stage = Stage()
            stage.to_route(Route("console").with_appender(RichAppender(color=color)))
            return stage

        config = _load_routes_config(config_file)
        return build_stage(config, base_dir=config_file.parent)
    except (ConfigurationError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _load_routes_config(path: Path) -> RoutesConfig:
    """Load routes config from file, with fallback to empty config."""
    if not path.exists():
        err_console.print(
            f"[yellow]Warning:[/yellow] {path} not found. "
            "Run 'logroute init' to create one."
        )
        return RoutesConfig()

    try:
        return parse_routes_file(path)
    except RouteParseError as e:
        err_console.print(f"[red]Error parsing {path}:[/red] {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
