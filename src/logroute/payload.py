"""Turning log call payloads into message text."""

import traceback
from typing import Any, Callable, Union

# A payload is a message, an exception, anything printable, or a
# zero-argument callable returning one of those.
Payload = Union[str, BaseException, Any, Callable[[], Any]]


def evaluate_payload(payload: Payload) -> str:
    """Evaluate a payload into the message text stored on an event.

    Callables are invoked with no arguments and their result evaluated
    again, so a callable may return another callable. Exceptions raised
    by the callable are not caught.

    Args:
        payload: The value passed to a log call.

    Returns:
        The message text.
    """
    while callable(payload) and not isinstance(payload, (str, BaseException)):
        payload = payload()

    if isinstance(payload, BaseException):
        return format_exception(payload)
    if isinstance(payload, str):
        return payload
    return str(payload)


def format_exception(exc: BaseException) -> str:
    """Format an exception as ``"<TypeName>: <message>"``.

    Notes attached with ``add_note()`` are appended as
    ``" (Specifically: ...)"``, followed by the traceback on the next
    line when the exception has been raised.
    """
    text = f"{type(exc).__name__}: {exc}"

    notes = getattr(exc, "__notes__", None)
    if notes:
        text += f" (Specifically: {'; '.join(str(n) for n in notes)})"

    if exc.__traceback__ is not None:
        stack = "".join(traceback.format_tb(exc.__traceback__))
        text += "\n" + stack.rstrip("\n")

    return text
