"""The stage: global threshold, global filters and the route registry."""

import os
import threading
from typing import Mapping

from .chains import Filter, evaluate_filters, validate_callback
from .errors import DuplicateRouteError, InvalidArgumentError
from .models import (
    HIGHEST_CONCRETE_LEVEL,
    HIGHEST_LEVEL,
    LOWEST_LEVEL,
    DispatchStats,
    Level,
    LogEvent,
    parse_level,
)
from .payload import Payload, evaluate_payload
from .route import Route

# Environment variable holding the initial global threshold
LEVEL_ENV_VAR = "LOGROUTE_LEVEL"

DEFAULT_LEVEL = Level.INFO


def resolve_initial_level(
    level: Level | int | str | None = None,
    environ: Mapping[str, str] | None = None,
    env_var: str = LEVEL_ENV_VAR,
) -> Level:
    """Work out the starting threshold of a stage.

    Resolution order: explicit ``level``, then the environment variable
    (a level name, or an integer between ALL and FATAL), then INFO. An
    empty environment value counts as unset.

    Raises:
        LevelRangeError: If an integer is out of range.
        InvalidLevelError: If a value is not a level at all.
    """
    if level is not None:
        return parse_level(level)

    env = os.environ if environ is None else environ
    value = env.get(env_var, "").strip()
    if value:
        return parse_level(value, LOWEST_LEVEL, HIGHEST_CONCRETE_LEVEL)

    return DEFAULT_LEVEL


class Stage:
    """Entry point for log calls.

    A stage holds the global threshold, the global filter chain and the
    named routes. A log call runs entirely on the caller's thread:

    1. Calls below the global threshold return before anything else.
    2. A LogEvent is created with no payload yet and global filters run
       in order. They see level and timestamp, and may set the payload.
    3. The payload is evaluated, unless a global filter already set it.
    4. Each route, in registration order, gets its own copy of the event
       and applies its own level, filters and appenders.

    Log and configuration calls hold one re-entrant lock, so a stage can
    be shared between threads. Appenders and filters installed on it are
    only ever called with that lock held.

    Usage:
        stage = Stage(Level.INFO)
        stage.to_route(Route("app").with_appender(ConsoleAppender()))
        stage.info("started")
        stage.debug(lambda: expensive_dump())  # never evaluated at INFO
    """

    def __init__(
        self,
        level: Level | int | str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        env_var: str = LEVEL_ENV_VAR,
    ) -> None:
        """Initialize the stage.

        Args:
            level: Explicit global threshold. Overrides the environment.
            environ: Mapping to read the override from (default os.environ).
            env_var: Name of the override variable.
        """
        self.level = resolve_initial_level(level, environ, env_var)
        self.filters: list[Filter] = []
        self.routes: dict[str, Route] = {}
        self.stats = DispatchStats()
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Stage({self.level.name}, routes={list(self.routes)})"

    # --- Configuration ---

    def configure(self, level: Level | int | str) -> "Stage":
        """Set the global threshold.

        Raises:
            LevelRangeError: If an integer level is out of range.
            InvalidLevelError: If the value is not a level.
        """
        parsed = parse_level(level, LOWEST_LEVEL, HIGHEST_LEVEL)
        with self._lock:
            self.level = parsed
        return self

    def filter(self, predicate: Filter) -> "Stage":
        """Append a filter to the global chain."""
        validate_callback(predicate, "filter")
        with self._lock:
            self.filters.append(predicate)
        return self

    def to_route(self, route: Route) -> "Stage":
        """Register a route.

        Raises:
            InvalidArgumentError: If ``route`` is not a Route.
            DuplicateRouteError: If a route with that name exists. The
                registry is left unchanged.
        """
        if not isinstance(route, Route):
            raise InvalidArgumentError(
                f"Expected a Route, got {type(route).__name__}"
            )
        with self._lock:
            if route.name in self.routes:
                raise DuplicateRouteError(route.name)
            self.routes[route.name] = route
            self.stats.routes[route.name] = route.stats
        return self

    def route(self, name: str) -> Route:
        """Return the route registered under ``name``."""
        return self.routes[name]

    # --- Logging ---

    def log(self, level: Level | int, payload: Payload) -> None:
        """Log a payload at an explicit level.

        The payload is evaluated only after the global filters accept the
        event. Exceptions raised while evaluating a callable payload
        propagate to the caller.

        Raises:
            LevelRangeError: If a call that gets past the threshold is not
                at a concrete level (TRACE to FATAL).
        """
        with self._lock:
            self.stats.received += 1
            if level < self.level:
                self.stats.level_rejected += 1
                return

            level = parse_level(level, Level.TRACE, HIGHEST_CONCRETE_LEVEL)
            event = LogEvent(level=level, payload=None)

            if not evaluate_filters(self.filters, event):
                self.stats.filter_rejected += 1
                return

            # Lazy payloads are only realized once the global chain accepts
            if event.payload is None:
                event.payload = evaluate_payload(payload)

            self.stats.accepted += 1
            for route in self.routes.values():
                route.accept(event.copy())

    def trace(self, payload: Payload) -> None:
        self.log(Level.TRACE, payload)

    def debug(self, payload: Payload) -> None:
        self.log(Level.DEBUG, payload)

    def info(self, payload: Payload) -> None:
        self.log(Level.INFO, payload)

    def warn(self, payload: Payload) -> None:
        self.log(Level.WARN, payload)

    def error(self, payload: Payload) -> None:
        self.log(Level.ERROR, payload)

    def fatal(self, payload: Payload) -> None:
        self.log(Level.FATAL, payload)

    # --- Lifecycle ---

    def close(self) -> None:
        """Close every route's appenders."""
        with self._lock:
            for route in self.routes.values():
                route.close()

    def __enter__(self) -> "Stage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
