"""Filter chains and appender chains."""

import inspect
from typing import Callable, Iterable

from .errors import InvalidArgumentError
from .models import LogEvent

Filter = Callable[[LogEvent], bool]
Appender = Callable[[LogEvent], None]

# Called with (appender, event, exception) when an isolated appender fails.
ErrorHandler = Callable[[Appender, LogEvent, Exception], None]


def validate_callback(callback: object, kind: str) -> None:
    """Check that ``callback`` can be called with exactly one argument.

    Args:
        callback: The filter or appender being registered.
        kind: "filter" or "appender", used in the error message.

    Raises:
        InvalidArgumentError: If it is not callable, or its signature
            cannot take a single positional argument.
    """
    if not callable(callback):
        raise InvalidArgumentError(
            f"{kind} must be callable, got {type(callback).__name__}"
        )

    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        # Some builtins have no introspectable signature
        return

    try:
        signature.bind(None)
    except TypeError as e:
        raise InvalidArgumentError(
            f"{kind} {callback!r} must accept exactly one argument (the event): {e}"
        ) from e


def evaluate_filters(filters: Iterable[Filter], event: LogEvent) -> bool:
    """Run filters in order, stopping at the first rejection.

    Filters after a rejecting one are never called.

    Returns:
        True if every filter accepted the event.
    """
    for predicate in filters:
        if not predicate(event):
            return False
    return True


def dispatch(
    appenders: Iterable[Appender],
    event: LogEvent,
    on_error: ErrorHandler | None = None,
) -> int:
    """Hand the event to every appender, in order.

    With ``on_error`` set, an appender that raises is reported through it
    and the remaining appenders still run. Without it the exception
    propagates and later appenders are skipped.

    Returns:
        The number of appenders that failed.
    """
    failures = 0
    for appender in appenders:
        if on_error is None:
            appender(event)
            continue
        try:
            appender(event)
        except Exception as e:
            failures += 1
            on_error(appender, event, e)
    return failures
