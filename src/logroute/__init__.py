"""logroute - leveled event logging with filters, routes and appenders."""

__version__ = "0.1.0"

from .errors import (
    ConfigurationError,
    DuplicateRouteError,
    InvalidArgumentError,
    InvalidLevelError,
    LevelRangeError,
    RouteParseError,
)
from .models import Level, LogEvent, name_of, parse_level, passes
from .route import Route
from .stage import Stage
from .appenders import ConsoleAppender, FileAppender
from .formatting import EventFormatter
from .throttle import ThrottleFilter

__all__ = [
    "__version__",
    "ConfigurationError",
    "DuplicateRouteError",
    "InvalidArgumentError",
    "InvalidLevelError",
    "LevelRangeError",
    "RouteParseError",
    "Level",
    "LogEvent",
    "name_of",
    "parse_level",
    "passes",
    "Route",
    "Stage",
    "ConsoleAppender",
    "FileAppender",
    "EventFormatter",
    "ThrottleFilter",
]
