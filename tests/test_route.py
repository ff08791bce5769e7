"""Tests for routes."""

import io

import pytest
from rich.console import Console

from logroute.errors import InvalidArgumentError, InvalidLevelError
from logroute.models import Level, LogEvent
from logroute.route import Route, default_route_name


def make_event(payload: str = "Test message", level: Level = Level.INFO) -> LogEvent:
    """Helper to create LogEvent for testing."""
    return LogEvent(level=level, payload=payload)


def quiet_console() -> tuple[Console, io.StringIO]:
    """Console writing into a buffer instead of stderr."""
    buffer = io.StringIO()
    return Console(file=buffer, width=1000), buffer


class TestRouteConstruction:
    """Tests for creating and configuring routes."""

    def test_defaults(self):
        """A route should default to the program name and ALL."""
        route = Route()
        assert route.name == default_route_name()
        assert route.level == Level.ALL
        assert route.filters == []
        assert route.appenders == []

    def test_level_from_string(self):
        """Levels may be given by name."""
        assert Route("app", "warn").level == Level.WARN

    def test_invalid_level(self):
        """An unknown level should raise at construction."""
        with pytest.raises(InvalidLevelError):
            Route("app", "LOUD")

    def test_chaining(self):
        """filter() and with_appender() should return the route."""
        route = Route("app")
        assert route.filter(lambda e: True) is route
        assert route.with_appender(lambda e: None) is route
        assert route.set_level(Level.ERROR) is route
        assert route.level == Level.ERROR

    def test_rejects_bad_filter(self):
        """A non-callable filter should raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            Route("app").filter(42)

    def test_rejects_bad_appender_arity(self):
        """An appender taking no arguments should raise InvalidArgumentError."""
        route = Route("app")
        with pytest.raises(InvalidArgumentError):
            route.with_appender(lambda: None)
        assert route.appenders == []


class TestRouteAccept:
    """Tests for Route.accept()."""

    def test_below_level_rejected(self):
        """Events below the route level never reach appenders."""
        received = []
        route = Route("app", Level.WARN).with_appender(received.append)

        assert route.accept(make_event(level=Level.INFO)) is False
        assert received == []
        assert route.stats.level_rejected == 1

    def test_below_level_skips_filters(self):
        """Filters should not run for events below the route level."""
        calls = []
        route = Route("app", Level.ERROR).filter(lambda e: calls.append(e) or True)

        route.accept(make_event(level=Level.WARN))

        assert calls == []

    def test_stamps_target(self):
        """The route should stamp its name on the event."""
        received = []
        route = Route("audit").with_appender(received.append)

        route.accept(make_event())

        assert received[0].target == "audit"

    def test_filter_sees_target(self):
        """Filters should run after the target is stamped."""
        seen = []
        route = Route("audit").filter(lambda e: seen.append(e.target) or True)

        route.accept(make_event())

        assert seen == ["audit"]

    def test_filter_rejection(self):
        """A rejecting filter should stop the event before appenders."""
        received = []
        route = Route("app").filter(lambda e: False).with_appender(received.append)

        assert route.accept(make_event()) is False
        assert received == []
        assert route.stats.filter_rejected == 1

    def test_filter_mutation_reaches_appender(self):
        """A filter setting payload := "X" should make appenders see "X"."""
        received = []

        def rewrite(event):
            event.payload = "X"
            return True

        route = Route("app").filter(rewrite).with_appender(received.append)
        route.accept(make_event("original"))

        assert received[0].payload == "X"

    def test_dispatch_order(self):
        """Appenders A, B, C should all receive the event in order."""
        order = []
        route = (
            Route("app")
            .with_appender(lambda e: order.append("A"))
            .with_appender(lambda e: order.append("B"))
            .with_appender(lambda e: order.append("C"))
        )

        assert route.accept(make_event()) is True
        assert order == ["A", "B", "C"]
        assert route.stats.dispatched == 1


class TestAppenderFailures:
    """Tests for how routes handle failing appenders."""

    def test_isolated_by_default(self):
        """A failing appender should not stop the others."""
        console, buffer = quiet_console()
        received = []

        def broken(event):
            raise OSError("network drive removed")

        route = Route("app", console=console).with_appender(broken).with_appender(received.append)
        route.accept(make_event())

        assert len(received) == 1
        assert route.stats.appender_failures == 1
        assert "network drive removed" in buffer.getvalue()
        assert "OSError" in buffer.getvalue()

    def test_fail_fast(self):
        """With fail_fast, the exception propagates and later appenders are skipped."""
        received = []

        def broken(event):
            raise OSError("network drive removed")

        route = Route("app", fail_fast=True).with_appender(broken).with_appender(received.append)

        with pytest.raises(OSError):
            route.accept(make_event())

        assert received == []


class TestRouteLifecycle:
    """Tests for closing routes."""

    def test_close_closes_appenders(self):
        """close() should call close() on appenders that have it."""

        class Closable:
            closed = False

            def __call__(self, event):
                pass

            def close(self):
                self.closed = True

        appender = Closable()
        with Route("app").with_appender(appender).with_appender(lambda e: None):
            pass

        assert appender.closed is True
