# /tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

from controller import config
from settings import system_config as cfg

_VARS = [
    "TELESCOPE_SDE_DB", "TELESCOPE_FACTOR", "TELESCOPE_REGION_FACTOR", "TELESCOPE_INVERT_AXES",
    "TELESCOPE_STARTUP_REGIONS", "TELESCOPE_NOTIFY_ON_SEARCH", "TELESCOPE_DEBUG_OVERLAY",
    "TELESCOPE_LOG_LEVEL", "TELESCOPE_LOG_DIR", "TELESCOPE_LOG_CONSOLE",
]


def _clear(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    c = config.load()
    assert c.sde_db is None
    assert c.factor == cfg.UNIVERSE_FACTOR
    assert c.invert_axes == cfg.UNIVERSE_INVERT_AXES
    assert c.startup_regions == ()
    assert c.notify_on_search is True
    assert c.log_level_value == logging.INFO


def test_environment_overrides(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.setenv("TELESCOPE_SDE_DB", str(tmp_path / "sde.db"))
    monkeypatch.setenv("TELESCOPE_FACTOR", "-5")
    monkeypatch.setenv("TELESCOPE_INVERT_AXES", "1,0")
    monkeypatch.setenv("TELESCOPE_STARTUP_REGIONS", "10000002, x, 10000043")
    monkeypatch.setenv("TELESCOPE_NOTIFY_ON_SEARCH", "off")
    monkeypatch.setenv("TELESCOPE_LOG_LEVEL", "debug")
    monkeypatch.setenv("TELESCOPE_LOG_DIR", str(tmp_path))
    c = config.load()
    assert c.sde_db == Path(tmp_path / "sde.db")
    assert c.factor == -5
    assert c.invert_axes == (True, False, False)
    assert c.startup_regions == (10000002, 10000043)
    assert c.notify_on_search is False
    assert c.log_level_value == logging.DEBUG
    assert c.log_dir == tmp_path


def test_bad_numbers_fall_back(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("TELESCOPE_FACTOR", "lots")
    monkeypatch.setenv("TELESCOPE_LOG_LEVEL", "chatty")
    c = config.load()
    assert c.factor == cfg.UNIVERSE_FACTOR
    assert c.log_level_value == logging.INFO
