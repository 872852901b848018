# /ui/error_utils.py
"""
Error-reporting wrappers for Telescope UI slots.

An exception escaping a Qt slot or paintEvent lands in sys.excepthook and,
for a paint, leaves the pane blank until the next event. These wrappers keep
the pane alive and route the failure to the right place:

    catch_and_log        error log + (rate-limited) message box
    catch_and_log_silent error log only; for per-frame code
    warn_on_exception    warning log only; for non-critical refreshes
"""

from __future__ import annotations

import functools
from typing import Any, Callable

from controller.log_config import get_system_logger
from ui.error_handler import handle_error, log_warning

_logger = get_system_logger('errors')

Reporter = Callable[[BaseException, str], None]


def _report_dialog(exc: BaseException, where: str) -> None:
    handle_error(exc, where)


def _report_silent(exc: BaseException, where: str) -> None:
    _logger.error(f"Error in {where}: {exc}", exc_info=(type(exc), exc, exc.__traceback__))


def _report_warning(exc: BaseException, where: str) -> None:
    log_warning(str(exc), where)


def _guard(report: Reporter, context: str, reraise: bool, default_return: Any):
    def decorator(func: Callable) -> Callable:
        where = context or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                report(e, where)
                if reraise:
                    raise
                return default_return
        return wrapper
    return decorator


def catch_and_log(context: str = "", reraise: bool = False, default_return: Any = None):
    """Report through the global ErrorHandler; `default_return` stands in for the result."""
    return _guard(_report_dialog, context, reraise, default_return)


def catch_and_log_silent(context: str = "", default_return: Any = None):
    return _guard(_report_silent, context, False, default_return)


def warn_on_exception(context: str = "", default_return: Any = None):
    return _guard(_report_warning, context, False, default_return)


class ErrorContext:
    """
    Block-level counterpart of the decorators.

        with ErrorContext("Searching systems", show_dialog=False) as ctx:
            rows = db.search_systems(text)
        if ctx.error is not None:
            ...
    """

    def __init__(self, context: str, reraise: bool = False, show_dialog: bool = True):
        self.context = context
        self.reraise = reraise
        self.show_dialog = show_dialog
        self.error: BaseException | None = None

    def __enter__(self) -> "ErrorContext":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_type is None or not issubclass(exc_type, Exception):
            return False
        self.error = exc_value
        report = _report_dialog if self.show_dialog else _report_silent
        report(exc_value, self.context)
        return not self.reraise
