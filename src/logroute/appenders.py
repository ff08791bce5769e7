"""File and console destinations for events."""

import atexit
import sys
from pathlib import Path
from typing import TextIO

from .errors import InvalidArgumentError
from .formatting import DEFAULT_TEMPLATE, DEFAULT_TIME_FORMAT, EventFormatter
from .models import Level, LogEvent

DEFAULT_BUFFER_SIZE = 10


def _is_stream(target: object) -> bool:
    return hasattr(target, "write") and hasattr(target, "flush")


class FileAppender:
    """Write one formatted line per event, flushing every few writes.

    The stream is flushed after ``buffer_size`` writes, and immediately
    after any event at ``flush_level`` (ERROR) or above. Either way the
    countdown starts again.

    ``target`` is a path, opened here and owned by the appender, or an
    already open text stream, which is flushed but never closed. The
    appender closes itself at interpreter exit; ``close()`` is safe to
    call more than once.

    The exit hook holds a reference to the appender, so one that is never
    closed stays alive with its open stream until the process ends. Close
    short-lived appenders explicitly or use them as context managers;
    ``close()`` also removes the exit hook.

    Usage:
        with FileAppender("app.log", buffer_size=5) as appender:
            route.with_appender(appender)
    """

    def __init__(
        self,
        target: str | Path | TextIO,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        template: str = DEFAULT_TEMPLATE,
        time_format: str = DEFAULT_TIME_FORMAT,
        formatter: EventFormatter | None = None,
        flush_level: Level = Level.ERROR,
        mode: str = "a",
        encoding: str = "utf-8",
    ) -> None:
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size < 1:
            raise InvalidArgumentError(
                f"buffer_size must be a positive integer, got {buffer_size!r}"
            )

        self.formatter = formatter or EventFormatter(template, time_format)
        self.buffer_size = buffer_size
        self.flush_level = flush_level
        self._countdown = buffer_size
        self._closed = False

        if _is_stream(target):
            self.path: Path | None = None
            self.stream: TextIO = target  # type: ignore[assignment]
            self._owns_stream = False
        else:
            self.path = Path(target)
            self.stream = open(self.path, mode, encoding=encoding)
            self._owns_stream = True

        atexit.register(self.close)

    def __repr__(self) -> str:
        where = str(self.path) if self.path else repr(self.stream)
        return f"FileAppender({where})"

    @property
    def pending(self) -> int:
        """Number of writes since the last flush."""
        return self.buffer_size - self._countdown

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, event: LogEvent) -> None:
        """Write an event, flushing if the buffer is full or it is severe."""
        if self._closed:
            raise ValueError(f"{self!r} is closed")

        self.stream.write(self.formatter.format(event) + "\n")
        self._countdown -= 1

        if self._countdown <= 0 or event.level >= self.flush_level:
            self.flush()

    def flush(self) -> None:
        """Flush the stream and restart the countdown."""
        self.stream.flush()
        self._countdown = self.buffer_size

    def close(self) -> None:
        """Flush, then close the stream if this appender opened it."""
        if self._closed:
            return
        self._closed = True
        atexit.unregister(self.close)

        if getattr(self.stream, "closed", False):
            return
        self.stream.flush()
        if self._owns_stream:
            self.stream.close()

    def __enter__(self) -> "FileAppender":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ConsoleAppender:
    """Write events to stdout, or to stderr from ``err_level`` (ERROR) up.

    Every write is flushed. The streams are never closed. Lines written
    to the two streams close together in time may appear out of order
    when both are read merged.

    When no streams are given, ``sys.stdout`` and ``sys.stderr`` are
    looked up on each write.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        *,
        template: str = DEFAULT_TEMPLATE,
        time_format: str = DEFAULT_TIME_FORMAT,
        formatter: EventFormatter | None = None,
        err_level: Level = Level.ERROR,
    ) -> None:
        self.formatter = formatter or EventFormatter(template, time_format)
        self.err_level = err_level
        self._out = out
        self._err = err

    def __repr__(self) -> str:
        return "ConsoleAppender()"

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def stream_for(self, event: LogEvent) -> TextIO:
        """Return the stream an event is written to."""
        return self.err if event.level >= self.err_level else self.out

    def __call__(self, event: LogEvent) -> None:
        stream = self.stream_for(event)
        stream.write(self.formatter.format(event) + "\n")
        stream.flush()

    def close(self) -> None:
        """Flush both streams."""
        for stream in (self.out, self.err):
            if not getattr(stream, "closed", False):
                stream.flush()
