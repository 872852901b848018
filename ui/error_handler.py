# /ui/error_handler.py

"""
Global Error Handler for Telescope

Captures uncaught exceptions and Qt messages, routes them into the logging
tree and shows a short message box for the first few failures only.
"""

from __future__ import annotations

import sys
import threading
from typing import Callable, Optional

from PySide6.QtCore import QTimer, QtMsgType, qInstallMessageHandler
from PySide6.QtWidgets import QApplication, QMessageBox, QWidget

from controller.log_config import get_system_logger


class ErrorHandler:
    """
    Singleton: sys.excepthook + Qt message handler.
    """

    _instance: Optional['ErrorHandler'] = None

    def __init__(self) -> None:
        self.logger = get_system_logger('errors')
        self.qt_logger = get_system_logger('qt')
        self._original_excepthook: Optional[Callable] = None
        self._main_window: Optional[QWidget] = None

        # Thread safety
        self._lock = threading.Lock()
        self._error_count = 0
        self._max_error_dialogs = 3  # Prevent dialog spam
        self.show_dialogs = True

    @classmethod
    def get_instance(cls) -> 'ErrorHandler':
        """Get or create the singleton error handler instance"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def error_count(self) -> int:
        with self._lock:
            return self._error_count

    def install(self) -> None:
        with self._lock:
            if self._original_excepthook is None:
                self._original_excepthook = sys.excepthook
                sys.excepthook = self._handle_exception
                qInstallMessageHandler(self._handle_qt_message)
                self.logger.info("Global exception and Qt message handlers installed")

    def uninstall(self) -> None:
        with self._lock:
            if self._original_excepthook is not None:
                sys.excepthook = self._original_excepthook
                self._original_excepthook = None
                qInstallMessageHandler(None)
                self.logger.info("Global exception handler uninstalled")

    def set_main_window(self, window: Optional[QWidget]) -> None:
        self._main_window = window

    def _handle_exception(self, exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            if self._original_excepthook:
                self._original_excepthook(exc_type, exc_value, exc_traceback)
            return

        with self._lock:
            self._error_count += 1
            count = self._error_count

        self.logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
        if count <= self._max_error_dialogs:
            self._show_error_dialog(f"{exc_type.__name__}: {exc_value}", "Uncaught exception")

    def _handle_qt_message(self, msg_type, context, message) -> None:
        if msg_type == QtMsgType.QtDebugMsg:
            self.qt_logger.debug(f"Qt: {message}")
        elif msg_type == QtMsgType.QtWarningMsg:
            self.qt_logger.warning(f"Qt: {message}")
        elif msg_type == QtMsgType.QtCriticalMsg:
            self.qt_logger.error(f"Qt Critical: {message}")
        elif msg_type == QtMsgType.QtFatalMsg:
            self.qt_logger.critical(f"Qt Fatal: {message}")
        else:
            self.qt_logger.info(f"Qt: {message}")

    def _show_error_dialog(self, text: str, context: str) -> None:
        """Queue a message box on the GUI thread (no-op without a running app)."""
        if not self.show_dialogs or QApplication.instance() is None:
            return

        def show_dialog() -> None:
            QMessageBox.critical(
                self._main_window,
                "Telescope Error",
                f"{context}:\n\n{text}\n\nPlease check the logs for more details.",
            )

        QTimer.singleShot(0, show_dialog)

    def handle_error(self, exception: BaseException, context: str = "") -> None:
        """
        Manually handle an error (for use in try/except blocks).

        Args:
            exception: The exception that occurred
            context: Description of what was happening when the error occurred
        """
        self.logger.error(f"Error in {context}: {exception}",
                          exc_info=(type(exception), exception, exception.__traceback__))
        with self._lock:
            self._error_count += 1
            count = self._error_count
        if count <= self._max_error_dialogs:
            self._show_error_dialog(f"{type(exception).__name__}: {exception}", context or "Error")

    def log_warning(self, message: str, context: str = "") -> None:
        self.logger.warning(f"{context}: {message}" if context else message)


# Convenience functions for global access
def install_error_handler() -> ErrorHandler:
    handler = ErrorHandler.get_instance()
    handler.install()
    return handler


def handle_error(exception: BaseException, context: str = "") -> None:
    ErrorHandler.get_instance().handle_error(exception, context)


def log_warning(message: str, context: str = "") -> None:
    ErrorHandler.get_instance().log_warning(message, context)
