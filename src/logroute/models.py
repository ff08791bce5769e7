"""Data models for logroute."""

from copy import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from .errors import InvalidLevelError, LevelRangeError


class Level(IntEnum):
    """Severity levels, ordered from most permissive to "never log".

    ALL and NEVER are thresholds only; every concrete severity lies
    strictly between them.
    """
    ALL = 0
    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5
    FATAL = 6
    NEVER = 7

    @classmethod
    def from_str(cls, value: str) -> "Level":
        """Parse a level from a name or an integer string."""
        return parse_level(value)


LOWEST_LEVEL = Level.ALL
HIGHEST_LEVEL = Level.NEVER
HIGHEST_CONCRETE_LEVEL = Level.FATAL


def passes(level: int, threshold: int) -> bool:
    """Return True if an event at ``level`` gets past ``threshold``."""
    return level >= threshold


def name_of(value: int) -> str:
    """Return the name of a defined level value.

    Raises:
        InvalidLevelError: If ``value`` is not a defined level.
    """
    try:
        return Level(value).name
    except ValueError as e:
        raise InvalidLevelError(f"Unknown level value: {value!r}") from e


def parse_level(
    token: "str | int | Level",
    lowest: int = LOWEST_LEVEL,
    highest: int = HIGHEST_LEVEL,
) -> Level:
    """Parse a level from a Level, an int, a name or an integer string.

    Names are case-insensitive. Integers must lie within
    ``[lowest, highest]``.

    Raises:
        LevelRangeError: For an integer outside the accepted range.
        InvalidLevelError: For anything else that is not a level.
    """
    if isinstance(token, Level):
        value = int(token)
    elif isinstance(token, int) and not isinstance(token, bool):
        value = token
    elif isinstance(token, str):
        text = token.strip()
        if text.upper() in Level.__members__:
            value = int(Level[text.upper()])
        else:
            try:
                value = int(text)
            except ValueError:
                raise InvalidLevelError(f"Unknown log level: {token!r}") from None
    else:
        raise InvalidLevelError(f"Unknown log level: {token!r}")

    if not lowest <= value <= highest:
        raise LevelRangeError(value, int(lowest), int(highest))
    return Level(value)


@dataclass
class LogEvent:
    """A log call that made it past the global threshold.

    Filters may rewrite ``payload`` and ``target`` in place; everything
    downstream of that filter sees the new values.

    Attributes:
        level: Severity of the call.
        payload: The evaluated message text. None while global filters run,
            since the payload is evaluated only after they accept the event.
        timestamp: Wall-clock time the event was created.
        target: Name of the route currently handling the event.
    """
    level: Level
    payload: str | None
    timestamp: datetime = field(default_factory=datetime.now)
    target: str | None = None

    def copy(self) -> "LogEvent":
        """Return an independent shallow copy of this event."""
        return copy(self)


@dataclass
class RouteStats:
    """Counters for a single route."""
    level_rejected: int = 0
    filter_rejected: int = 0
    dispatched: int = 0
    appender_failures: int = 0


@dataclass
class DispatchStats:
    """Counters describing what happened to log calls on a stage.

    Useful for checking that nothing was dropped without a trace.
    """
    received: int = 0
    level_rejected: int = 0
    filter_rejected: int = 0
    accepted: int = 0
    routes: dict[str, RouteStats] = field(default_factory=dict)

    @property
    def rejection_rate(self) -> float:
        """Percentage of received calls stopped at the global stage."""
        if self.received == 0:
            return 0.0
        return ((self.level_rejected + self.filter_rejected) / self.received) * 100

    def summary(self) -> str:
        """Generate a summary string of the counters."""
        lines = [
            f"Received: {self.received}",
            f"Accepted: {self.accepted}",
            f"Rejected: {self.level_rejected + self.filter_rejected} "
            f"({self.rejection_rate:.1f}%)",
        ]

        if self.routes:
            lines.append("\nRoutes:")
            for name, route in self.routes.items():
                lines.append(
                    f"  {name}: dispatched={route.dispatched} "
                    f"level_rejected={route.level_rejected} "
                    f"filter_rejected={route.filter_rejected} "
                    f"failures={route.appender_failures}"
                )

        return "\n".join(lines)


# --- Route file configuration ---

@dataclass(frozen=True)
class AppenderSpec:
    """An appender declared in a .logroutes file.

    Attributes:
        kind: "file" or "console".
        path: Output file for "file" appenders.
        buffer_size: Writes between flushes for "file" appenders.
    """
    kind: str
    path: str | None = None
    buffer_size: int = 10


@dataclass(frozen=True)
class ThrottleSpec:
    """A throttle filter declared in a .logroutes file."""
    interval: float
    by_level: bool = False


@dataclass
class RouteSpec:
    """A route declared in a .logroutes file."""
    name: str
    level: Level = Level.ALL
    appenders: list[AppenderSpec] = field(default_factory=list)
    throttles: list[ThrottleSpec] = field(default_factory=list)


@dataclass
class RoutesConfig:
    """Parsed .logroutes configuration."""
    level: Level | None = None
    routes: dict[str, RouteSpec] = field(default_factory=dict)

    def add_route(self, route: RouteSpec) -> None:
        """Add a route declaration."""
        self.routes[route.name] = route
