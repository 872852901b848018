# /tests/conftest.py

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from data import db  # noqa: E402

# Raw static-data rows (metres), two regions
REGIONS = [(10000001, "Alpha"), (10000002, "Beta")]
CONSTELLATIONS = [(20000001, "Alpha One", 10000001), (20000002, "Beta One", 10000002)]
SYSTEMS = [
    (30000001, "Amamake", 20000001, 1e13, 0.0, 2e13),
    (30000002, "Auga", 20000001, 3e13, 5e13, 4e13),
    (30000003, "Bravo", 20000002, -2e13, 0.0, -6e13),
]
CONNECTIONS = [("c1", 30000001, 30000002), ("c2", 30000002, 30000003)]
ABSTRACT = [
    (30000001, 0.0, 0.0, 10000001),
    (30000002, 10.0, 0.0, 10000001),
    (30000003, 50.0, 50.0, 10000002),
]


def build_sde(path: Path) -> Path:
    conn = sqlite3.connect(str(path))
    conn.executescript(
        """
        CREATE TABLE mapRegions (regionId INTEGER PRIMARY KEY, regionName TEXT);
        CREATE TABLE mapConstellations (constellationId INTEGER PRIMARY KEY,
                                        constellationName TEXT, regionId INTEGER);
        CREATE TABLE mapSolarSystems (solarSystemId INTEGER PRIMARY KEY, solarSystemName TEXT,
                                      constellationId INTEGER,
                                      projX REAL, projY REAL, projZ REAL);
        CREATE TABLE mapSystemConnections (systemConnectionId TEXT PRIMARY KEY,
                                           systemA INTEGER, systemB INTEGER);
        CREATE TABLE mapAbstractSystems (solarSystemId INTEGER PRIMARY KEY,
                                         x REAL, y REAL, regionId INTEGER);
        """
    )
    conn.executemany("INSERT INTO mapRegions VALUES (?, ?)", REGIONS)
    conn.executemany("INSERT INTO mapConstellations VALUES (?, ?, ?)", CONSTELLATIONS)
    conn.executemany("INSERT INTO mapSolarSystems VALUES (?, ?, ?, ?, ?, ?)", SYSTEMS)
    conn.executemany("INSERT INTO mapSystemConnections VALUES (?, ?, ?)", CONNECTIONS)
    conn.executemany("INSERT INTO mapAbstractSystems VALUES (?, ?, ?, ?)", ABSTRACT)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def sde_db(tmp_path, monkeypatch):
    """Point data.db at a small temporary static-data export."""
    path = build_sde(tmp_path / "sde.db")
    monkeypatch.setattr(db, "_active_db_path_override", None)
    db.set_active_db_path(path)
    yield path
    db.close_active_connection()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def no_error_dialogs(monkeypatch):
    """Keep reported errors in the log; never queue a modal box under test."""
    from ui.error_handler import ErrorHandler
    monkeypatch.setattr(ErrorHandler.get_instance(), "show_dialogs", False)
