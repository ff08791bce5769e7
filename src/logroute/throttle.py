"""Time-windowed suppression of repeated events."""

import time
from collections import OrderedDict
from typing import Callable, Hashable

from .errors import InvalidArgumentError
from .models import LogEvent


DEFAULT_MAX_KEYS = 1024


def message_key(event: LogEvent) -> Hashable:
    return event.payload


def level_key(event: LogEvent) -> Hashable:
    return event.level


class ThrottleFilter:
    """Filter that lets an event through at most once per interval.

    Events are grouped by ``key`` (the message text by default). The first
    event for a key always passes; later ones pass only once ``interval``
    seconds have elapsed since the last one that passed. Suppressed events
    do not restart the window.

    ``ThrottleFilter.by_level`` groups by severity instead, so e.g. only
    one WARN per interval gets through whatever its text.

    Keys whose window has expired are dropped on every call, and at most
    ``max_keys`` keys are remembered. When the cap is hit the oldest key is
    forgotten, so its next event passes early. Global filters run before
    the payload is evaluated, so a message-keyed throttle belongs on a route.

    Args:
        interval: Minimum number of seconds between accepted events.
        key: Function mapping an event to its grouping key.
        clock: Monotonic time source in seconds.
        max_keys: Upper bound on the number of remembered keys.
    """

    def __init__(
        self,
        interval: float,
        key: Callable[[LogEvent], Hashable] = message_key,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = DEFAULT_MAX_KEYS,
    ) -> None:
        if interval <= 0:
            raise InvalidArgumentError(f"interval must be positive, got {interval!r}")
        if isinstance(max_keys, bool) or not isinstance(max_keys, int) or max_keys < 1:
            raise InvalidArgumentError(f"max_keys must be a positive integer, got {max_keys!r}")
        self.interval = interval
        self.key = key
        self.clock = clock
        self.max_keys = max_keys
        # Ordered oldest acceptance first
        self._last_accepted: OrderedDict[Hashable, float] = OrderedDict()
        self.suppressed = 0

    @classmethod
    def by_level(
        cls, interval: float, clock: Callable[[], float] = time.monotonic
    ) -> "ThrottleFilter":
        """Create a filter that throttles per level rather than per message."""
        return cls(interval, key=level_key, clock=clock)

    def __repr__(self) -> str:
        key_name = getattr(self.key, "__name__", repr(self.key))
        return f"ThrottleFilter({self.interval}s, key={key_name})"

    def __call__(self, event: LogEvent) -> bool:
        key = self.key(event)
        now = self.clock()

        self._prune(now)

        last = self._last_accepted.get(key)
        if last is not None and now - last < self.interval:
            self.suppressed += 1
            return False

        self._last_accepted[key] = now
        self._last_accepted.move_to_end(key)
        while len(self._last_accepted) > self.max_keys:
            self._last_accepted.popitem(last=False)
        return True

    def _prune(self, now: float) -> None:
        cutoff = now - self.interval
        while self._last_accepted:
            oldest = next(iter(self._last_accepted.values()))
            if oldest > cutoff:
                break
            self._last_accepted.popitem(last=False)

    def reset(self) -> None:
        """Forget every key seen so far."""
        self._last_accepted.clear()
