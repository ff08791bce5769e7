"""Named routes: a level, a filter chain and a set of appenders."""

import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .chains import Appender, Filter, dispatch, evaluate_filters, validate_callback
from .models import Level, LogEvent, RouteStats, parse_level

# Last-resort channel for appender failures
err_console = Console(stderr=True)


def default_route_name() -> str:
    """Name of the running program, used when a route is not named."""
    program = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    return program or "python"


class Route:
    """An independently leveled pipeline stage.

    A route rejects events below its own level, stamps its name on the
    events it handles, runs its filters and then hands the event to each
    of its appenders in registration order.

    An appender that raises is reported to stderr and counted in
    ``stats.appender_failures``; the other appenders still receive the
    event. Pass ``fail_fast=True`` to let the exception propagate instead.

    Attributes:
        name: Unique key of the route on a stage.
        level: Events below this level are ignored.
        filters: Predicates run in order before dispatch.
        appenders: Destinations run in order after the filters pass.
        stats: Counters for this route.
    """

    def __init__(
        self,
        name: str | None = None,
        level: Level | int | str = Level.ALL,
        *,
        fail_fast: bool = False,
        console: Console | None = None,
    ) -> None:
        self.name = name or default_route_name()
        self.level = parse_level(level)
        self.filters: list[Filter] = []
        self.appenders: list[Appender] = []
        self.fail_fast = fail_fast
        self.stats = RouteStats()
        self._console = console or err_console

    def __repr__(self) -> str:
        return f"Route({self.name!r}, {self.level.name})"

    def set_level(self, level: Level | int | str) -> "Route":
        """Change the route's threshold."""
        self.level = parse_level(level)
        return self

    def filter(self, predicate: Filter) -> "Route":
        """Append a filter to this route's chain.

        Raises:
            InvalidArgumentError: If ``predicate`` cannot take one argument.
        """
        validate_callback(predicate, "filter")
        self.filters.append(predicate)
        return self

    def with_appender(self, appender: Appender) -> "Route":
        """Append a destination to this route.

        Raises:
            InvalidArgumentError: If ``appender`` cannot take one argument.
        """
        validate_callback(appender, "appender")
        self.appenders.append(appender)
        return self

    def accept(self, event: LogEvent) -> bool:
        """Run an event through this route.

        Returns:
            True if the event reached the appenders.
        """
        if event.level < self.level:
            self.stats.level_rejected += 1
            return False

        event.target = self.name

        if not evaluate_filters(self.filters, event):
            self.stats.filter_rejected += 1
            return False

        on_error = None if self.fail_fast else self._report_failure
        self.stats.appender_failures += dispatch(self.appenders, event, on_error)
        self.stats.dispatched += 1
        return True

    def _report_failure(self, appender: Appender, event: LogEvent, exc: Exception) -> None:
        self._console.print(
            f"[red]logroute:[/red] appender {escape(repr(appender))} on route "
            f"{escape(self.name)!r} failed: {escape(f'{type(exc).__name__}: {exc}')}",
            highlight=False,
        )

    def close(self) -> None:
        """Close every appender that has a ``close()`` method."""
        for appender in self.appenders:
            close = getattr(appender, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> "Route":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
