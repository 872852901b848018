# /tests/test_log_config.py

from __future__ import annotations

import logging

import pytest

from controller.log_config import (
    get_data_logger,
    get_map_logger,
    get_system_logger,
    get_ui_logger,
    setup_telescope_logging,
)

_NAMES = ("", "map", "data", "ui", "system")


@pytest.fixture
def restore_logging():
    saved = {}
    for name in _NAMES:
        lg = logging.getLogger(name)
        saved[name] = (list(lg.handlers), lg.level, lg.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        lg = logging.getLogger(name)
        for h in lg.handlers:
            if h not in handlers:
                h.close()
        lg.handlers[:] = handlers
        lg.setLevel(level)
        lg.propagate = propagate


def test_logger_names():
    assert get_map_logger("engine").name == "map.engine"
    assert get_map_logger().name == "map"
    assert get_data_logger("data.loader").name == "data.loader"
    assert get_ui_logger("tabs").name == "ui.tabs"
    assert get_system_logger("errors").name == "system.errors"


def test_categories_write_to_their_own_files(tmp_path, restore_logging):
    setup_telescope_logging(tmp_path, logging.DEBUG)
    get_map_logger("engine").info("map message")
    get_data_logger("loader").warning("data warning")
    get_ui_logger("tabs").error("ui failure")
    for name in _NAMES:
        for h in logging.getLogger(name).handlers:
            h.flush()

    assert "map message" in (tmp_path / "map_debug.log").read_text(encoding="utf-8")
    assert "data warning" in (tmp_path / "data_debug.log").read_text(encoding="utf-8")
    assert "data warning" in (tmp_path / "warning.log").read_text(encoding="utf-8")
    errors = (tmp_path / "error.log").read_text(encoding="utf-8")
    assert "ui failure" in errors
    assert "data warning" not in errors
