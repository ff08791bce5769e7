"""Tests for payload evaluation."""

import pytest

from logroute.payload import evaluate_payload, format_exception


class Printable:
    """Object with its own string conversion."""

    def __str__(self) -> str:
        return "printable!"


def raise_and_catch(exc: BaseException) -> BaseException:
    """Raise exc so it carries a traceback, then return it."""
    try:
        raise exc
    except BaseException as caught:
        return caught


class TestEvaluatePayload:
    """Tests for evaluate_payload()."""

    def test_string_verbatim(self):
        """Strings should be stored unchanged."""
        assert evaluate_payload("  hello\n") == "  hello\n"

    def test_object_with_str(self):
        """Objects should be converted with str()."""
        assert evaluate_payload(Printable()) == "printable!"

    def test_plain_values(self):
        """Numbers and None should use the default conversion."""
        assert evaluate_payload(42) == "42"
        assert evaluate_payload(None) == "None"

    def test_callable(self):
        """Callables should be invoked with no arguments."""
        assert evaluate_payload(lambda: "lazy") == "lazy"

    def test_nested_callables(self):
        """A callable returning a callable should be evaluated again."""
        assert evaluate_payload(lambda: lambda: lambda: 7) == "7"

    def test_callable_returning_exception(self):
        """A callable returning an exception should format the exception."""
        assert evaluate_payload(lambda: ValueError("bad")) == "ValueError: bad"

    def test_callable_error_propagates(self):
        """Errors raised by the callable should not be caught."""

        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            evaluate_payload(broken)

    def test_unraised_exception(self):
        """An exception without traceback should be a single line."""
        assert evaluate_payload(KeyError("missing")) == "KeyError: 'missing'"


class TestFormatException:
    """Tests for format_exception()."""

    def test_type_and_message(self):
        """Output should start with the type name and message."""
        assert format_exception(ValueError("bad input")) == "ValueError: bad input"

    def test_notes_as_context(self):
        """Notes should be appended as extra context."""
        exc = ValueError("bad input")
        exc.__notes__ = ["while reading config"]

        assert format_exception(exc) == (
            "ValueError: bad input (Specifically: while reading config)"
        )

    def test_traceback_on_next_line(self):
        """A raised exception should include its traceback after a newline."""
        exc = raise_and_catch(RuntimeError("boom"))

        text = format_exception(exc)
        first, _, rest = text.partition("\n")

        assert first == "RuntimeError: boom"
        assert "raise_and_catch" in rest
        assert not text.endswith("\n")
