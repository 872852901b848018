# /tests/test_error_utils.py

from __future__ import annotations

import pytest

from ui.error_handler import ErrorHandler
from ui.error_utils import (
    ErrorContext,
    catch_and_log,
    catch_and_log_silent,
    warn_on_exception,
)


def _boom():
    raise RuntimeError("boom")


def test_catch_and_log_returns_default_and_counts():
    handler = ErrorHandler.get_instance()
    before = handler.error_count

    @catch_and_log("Doing a thing", default_return=-1)
    def f():
        _boom()

    assert f() == -1
    assert handler.error_count == before + 1


def test_catch_and_log_can_reraise():
    @catch_and_log("Doing a thing", reraise=True)
    def f():
        _boom()

    with pytest.raises(RuntimeError):
        f()


def test_silent_and_warning_variants_pass_values_through():
    @catch_and_log_silent("frame")
    def ok(x):
        return x * 2

    @catch_and_log_silent("frame", default_return="fallback")
    def bad():
        _boom()

    @warn_on_exception("counts", default_return=0)
    def warn():
        _boom()

    assert ok(4) == 8
    assert bad() == "fallback"
    assert warn() == 0


def test_error_context_suppresses_and_records():
    with ErrorContext("Searching systems", show_dialog=False) as ctx:
        _boom()
    assert isinstance(ctx.error, RuntimeError)

    with pytest.raises(RuntimeError):
        with ErrorContext("Searching systems", reraise=True):
            _boom()
