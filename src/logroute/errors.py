"""Exception types raised by logroute."""


class ConfigurationError(Exception):
    """Base class for errors raised while setting up a pipeline."""


class InvalidLevelError(ConfigurationError, ValueError):
    """A level name or value that is not one of the defined levels."""


class LevelRangeError(InvalidLevelError):
    """An integer level outside the range accepted at that point."""

    def __init__(self, value: int, lowest: int, highest: int):
        self.value = value
        self.lowest = lowest
        self.highest = highest
        super().__init__(
            f"Level {value} out of range [{lowest}, {highest}]"
        )


class DuplicateRouteError(ConfigurationError):
    """A route with the same name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Route already registered: {name!r}")


class InvalidArgumentError(ConfigurationError, TypeError):
    """A filter, appender or option that does not fit its contract."""


class RouteParseError(ConfigurationError):
    """Error parsing a .logroutes file."""

    def __init__(self, message: str, line_number: int, line_content: str):
        self.line_number = line_number
        self.line_content = line_content
        super().__init__(f"Line {line_number}: {message}\n  Content: {line_content!r}")
