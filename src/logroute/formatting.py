"""Rendering events as single lines of text."""

from string import Formatter

from .errors import InvalidArgumentError
from .models import LogEvent

DEFAULT_TEMPLATE = "{Timestamp}.{MSec} [{Level}] {Message}"
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Placeholders a template may use
PLACEHOLDERS = frozenset({"Timestamp", "MSec", "Level", "Message", "Target"})


class EventFormatter:
    """Format events using a ``str.format`` template.

    Placeholders:
        {Timestamp}  event time rendered with ``time_format``
        {MSec}       milliseconds of the event time, zero padded to 3 digits
        {Level}      level name
        {Message}    the payload; continuation lines are indented with a tab
        {Target}     name of the route handling the event

    The result is stripped of leading and trailing whitespace.
    """

    def __init__(
        self,
        template: str = DEFAULT_TEMPLATE,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        self.template = template
        self.time_format = time_format
        self._check_template(template)

    @staticmethod
    def _check_template(template: str) -> None:
        try:
            fields = [name for _, name, _, _ in Formatter().parse(template) if name is not None]
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid template {template!r}: {e}") from e

        for name in fields:
            if name not in PLACEHOLDERS:
                raise InvalidArgumentError(
                    f"Unknown placeholder {{{name}}} in template. "
                    f"Expected one of: {', '.join(sorted(PLACEHOLDERS))}"
                )

    def format(self, event: LogEvent) -> str:
        """Render an event as text without a trailing newline."""
        message = "\n\t".join(event.payload.strip().splitlines())
        text = self.template.format(
            Timestamp=event.timestamp.strftime(self.time_format),
            MSec=f"{event.timestamp.microsecond // 1000:03d}",
            Level=event.level.name,
            Message=message,
            Target=event.target or "",
        )
        return text.strip()
