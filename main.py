# /main.py
"""
Telescope - Main Entry Point

A star-map companion for a spaceflight game built with Python and PySide6/Qt.
This module sets up logging, reads the TELESCOPE_* configuration, installs the
global error handler and shows the main window.
"""

from __future__ import annotations

import logging
import sys

from controller import config as config_mod
from controller.log_config import setup_telescope_logging
from data import db


def main() -> int:
    config = config_mod.load()
    setup_telescope_logging(config.log_dir, config.log_level_value, config.log_console)
    log = logging.getLogger('system.startup')
    log.info("Telescope logging system initialized")

    if config.sde_db is not None:
        db.set_active_db_path(config.sde_db)
    log.info(f"static data: {db.get_active_db_path()}")

    from PySide6.QtWidgets import QApplication
    from ui.error_handler import install_error_handler
    from ui.main_window import MainWindow

    app = QApplication(sys.argv)
    error_handler = install_error_handler()

    try:
        win = MainWindow(config)
        error_handler.set_main_window(win)
        win.show()
        win.start_loading()
        return app.exec()
    except Exception as e:
        # Handle startup errors
        error_handler.handle_error(e, "Application startup")
        return 1
    finally:
        error_handler.uninstall()


if __name__ == "__main__":
    raise SystemExit(main())
