"""Parser for .logroutes configuration files."""

from pathlib import Path
from typing import Mapping

from .appenders import ConsoleAppender, FileAppender
from .errors import InvalidLevelError, RouteParseError
from .models import AppenderSpec, Level, RoutesConfig, RouteSpec, ThrottleSpec, parse_level
from .route import Route
from .stage import Stage
from .throttle import ThrottleFilter


def parse_routes_file(path: Path) -> RoutesConfig:
    """Parse a .logroutes file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        RouteParseError: If the file contains invalid syntax.
    """
    content = path.read_text(encoding="utf-8")
    return parse_routes_content(content)


def parse_routes_content(content: str) -> RoutesConfig:
    """Parse .logroutes content from a string.

    Format (one directive per line, ``#`` starts a comment):
        LEVEL:<level>                       global threshold
        ROUTE:<name>[:<level>]              declare a route
        FILE:<route>:<path>[:<buffer>]      file appender on a route
        CONSOLE:<route>                     console appender on a route
        THROTTLE:<route>:<seconds>[:level]  throttle filter on a route

    Routes must be declared before they are referenced.

    Raises:
        RouteParseError: If the content contains invalid syntax.
    """
    config = RoutesConfig()

    for line_number, line in enumerate(content.splitlines(), start=1):
        parse_routes_line(config, line, line_number)

    return config


def parse_routes_line(config: RoutesConfig, line: str, line_number: int) -> None:
    """Apply a single .logroutes line to ``config``.

    Raises:
        RouteParseError: If the line contains invalid syntax.
    """
    line = line.strip()

    # Skip empty lines and comments
    if not line or line.startswith("#"):
        return

    if ":" not in line:
        raise RouteParseError(
            "Invalid directive format. Expected KIND:value",
            line_number,
            line,
        )

    kind, _, value = line.partition(":")
    kind = kind.strip().upper()
    value = value.strip()

    if not value:
        raise RouteParseError(f"Empty value for directive {kind}", line_number, line)

    match kind:
        case "LEVEL":
            config.level = _parse_level(value, line_number, line)
        case "ROUTE":
            _parse_route(config, value, line_number, line)
        case "FILE":
            _parse_file(config, value, line_number, line)
        case "CONSOLE":
            route = _lookup_route(config, value, line_number, line)
            route.appenders.append(AppenderSpec(kind="console"))
        case "THROTTLE":
            _parse_throttle(config, value, line_number, line)
        case _:
            raise RouteParseError(
                f"Unknown directive: {kind}. "
                "Expected LEVEL, ROUTE, FILE, CONSOLE, or THROTTLE",
                line_number,
                line,
            )


def _parse_level(value: str, line_number: int, line: str) -> Level:
    try:
        return parse_level(value)
    except InvalidLevelError as e:
        raise RouteParseError(str(e), line_number, line) from e


def _lookup_route(config: RoutesConfig, name: str, line_number: int, line: str) -> RouteSpec:
    name = name.strip()
    if name not in config.routes:
        raise RouteParseError(f"Undeclared route: {name!r}", line_number, line)
    return config.routes[name]


def _parse_route(config: RoutesConfig, value: str, line_number: int, line: str) -> None:
    """Parse a ROUTE:name[:level] directive."""
    name, _, level_str = value.partition(":")
    name = name.strip()

    if not name:
        raise RouteParseError("ROUTE directive requires a name", line_number, line)
    if name in config.routes:
        raise RouteParseError(f"Route declared twice: {name!r}", line_number, line)

    level = _parse_level(level_str, line_number, line) if level_str.strip() else Level.ALL
    config.add_route(RouteSpec(name=name, level=level))


def _parse_file(config: RoutesConfig, value: str, line_number: int, line: str) -> None:
    """Parse a FILE:route:path[:buffer] directive."""
    name, _, rest = value.partition(":")
    route = _lookup_route(config, name, line_number, line)
    rest = rest.strip()

    buffer_size = 10
    head, sep, tail = rest.rpartition(":")
    if sep and tail.strip().isdigit():
        rest, buffer_size = head.strip(), int(tail)

    if not rest:
        raise RouteParseError("FILE directive requires a path", line_number, line)
    if buffer_size < 1:
        raise RouteParseError("Buffer size must be at least 1", line_number, line)

    route.appenders.append(AppenderSpec(kind="file", path=rest, buffer_size=buffer_size))


def _parse_throttle(config: RoutesConfig, value: str, line_number: int, line: str) -> None:
    """Parse a THROTTLE:route:seconds[:level] directive."""
    parts = [part.strip() for part in value.split(":")]
    if len(parts) not in (2, 3):
        raise RouteParseError(
            "THROTTLE directive requires format THROTTLE:route:seconds[:level]",
            line_number,
            line,
        )

    route = _lookup_route(config, parts[0], line_number, line)

    try:
        interval = float(parts[1])
    except ValueError as e:
        raise RouteParseError(f"Invalid interval: {parts[1]!r}", line_number, line) from e
    if interval <= 0:
        raise RouteParseError("Interval must be positive", line_number, line)

    by_level = False
    if len(parts) == 3:
        if parts[2].lower() != "level":
            raise RouteParseError(
                f"Unknown throttle key: {parts[2]!r}. Expected 'level'",
                line_number,
                line,
            )
        by_level = True

    route.throttles.append(ThrottleSpec(interval=interval, by_level=by_level))


def build_stage(
    config: RoutesConfig,
    environ: Mapping[str, str] | None = None,
    base_dir: Path | None = None,
) -> Stage:
    """Create a Stage with the routes, filters and appenders in ``config``.

    Relative file paths are resolved against ``base_dir`` when given.
    """
    stage = Stage(config.level, environ=environ)

    for spec in config.routes.values():
        route = Route(spec.name, spec.level)

        for throttle in spec.throttles:
            if throttle.by_level:
                route.filter(ThrottleFilter.by_level(throttle.interval))
            else:
                route.filter(ThrottleFilter(throttle.interval))

        for appender in spec.appenders:
            if appender.kind == "console":
                route.with_appender(ConsoleAppender())
            else:
                path = Path(appender.path)
                if base_dir is not None and not path.is_absolute():
                    path = base_dir / path
                route.with_appender(FileAppender(path, buffer_size=appender.buffer_size))

        stage.to_route(route)

    return stage


# --- Sample file generation ---

SAMPLE_LOGROUTES = """\
# .logroutes - Define where log events go
#
# Directives:
#   LEVEL:INFO                      - Global threshold (overrides LOGROUTE_LEVEL)
#   ROUTE:name[:LEVEL]              - Declare a route with its own threshold
#   FILE:route:path[:buffer]        - Append lines to a file, flushing every <buffer> writes
#   CONSOLE:route                   - Print to stdout (ERROR and above to stderr)
#   THROTTLE:route:seconds[:level]  - Drop repeats of a message (or level) within the window
#
# Levels: ALL, TRACE, DEBUG, INFO, WARN, ERROR, FATAL, NEVER (or 0-7)

LEVEL:INFO

# Everything to the console
ROUTE:console
CONSOLE:console
THROTTLE:console:1.0

# Full log file
ROUTE:app:DEBUG
FILE:app:app.log:10

# Errors only, flushed on every write
ROUTE:errors:ERROR
FILE:errors:errors.log:1
"""


def generate_sample_routes_file(path: Path) -> bool:
    """Generate a sample .logroutes file.

    Returns:
        True if file was created, False if it already exists.
    """
    if path.exists():
        return False

    path.write_text(SAMPLE_LOGROUTES, encoding="utf-8")
    return True
