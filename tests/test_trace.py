"""Tests for logtee.trace — DEBUG-level call tracing through the singleton."""

from pathlib import Path

import pytest

from logtee.levels import DEBUG, INFO
from logtee.manager import get_tee
from logtee.trace import trace


@trace
def add(a, b):
    return a + b


@trace
def shout(text, times=1):
    return None


@trace
def explode():
    raise RuntimeError("kaboom")


def test_passthrough_when_debug_disabled(buf):
    get_tee().add_sink(buf, INFO)
    assert add(2, 3) == 5
    assert buf.getvalue() == ""


def test_entry_and_return(buf):
    get_tee().add_sink(buf, DEBUG)
    assert add(2, 3) == 5
    lines = buf.getvalue().splitlines()
    assert lines[0] == "(DD): [TRACE] >> test_trace.add(2, 3)"
    assert lines[1] == "(DD): [TRACE] << test_trace.add returned: 5"


def test_none_result_not_reported(buf):
    get_tee().add_sink(buf, DEBUG)
    shout("hi", times=2)
    out = buf.getvalue()
    assert "shout('hi', times=2)" in out
    assert "returned" not in out


def test_long_arguments_shortened(buf):
    get_tee().add_sink(buf, DEBUG)
    add("x" * 60, "")
    add([1, 2, 3, 4, 5], [6])
    shout(Path("a"))
    out = buf.getvalue()
    assert "x" * 47 + "..." in out
    assert "[...5 items...]" in out
    assert "Path('a')" in out


def test_exception_reported_and_reraised(buf):
    get_tee().add_sink(buf, DEBUG)
    with pytest.raises(RuntimeError):
        explode()
    assert "!! test_trace.explode raised: RuntimeError: kaboom" in buf.getvalue()
