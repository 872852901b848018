# /tests/test_dataset_loader.py

from __future__ import annotations

import sqlite3
import threading

import pytest

from controller.dataset_loader import DatasetLoader
from data import datasets, db
from engine.models import Dataset, Point


@pytest.fixture
def loader():
    ld = DatasetLoader("test")
    yield ld
    ld.stop()


def _named(name: str) -> Dataset:
    return Dataset(points=(Point(1, (0.0, 0.0)),), name=name)


def test_nothing_requested_nothing_pending(loader):
    assert loader.poll() is None
    assert not loader.pending
    assert loader.generation == 0


def test_request_delivers_dataset(loader):
    gen = loader.request(lambda: _named("first"))
    assert gen == 1
    ds = loader.wait()
    assert ds is not None and ds.name == "first"
    assert not loader.pending
    assert loader.poll() is None


def test_only_newest_generation_is_delivered(loader):
    release = threading.Event()

    def slow():
        release.wait(2.0)
        return _named("old")

    loader.request(slow)
    gen = loader.request(lambda: _named("new"))
    assert gen == 2
    assert loader.pending
    release.set()
    ds = loader.wait()
    assert ds is not None and ds.name == "new"
    assert loader.poll() is None


def test_failed_read_settles_without_result(loader):
    def broken():
        raise sqlite3.OperationalError("no such table: mapSolarSystems")

    loader.request(broken)
    assert loader.wait() is None
    assert not loader.pending


def test_failed_build_settles_without_result(loader):
    def broken():
        raise KeyError("x")

    loader.request(broken)
    assert loader.wait() is None
    assert not loader.pending


def test_loads_universe_from_static_data(loader, sde_db):
    loader.request(datasets.build_universe_dataset)
    ds = loader.wait()
    assert ds is not None
    assert [p.id for p in ds.points] == [30000001, 30000002, 30000003]


def test_missing_database_is_reported_not_raised(loader, tmp_path, monkeypatch):
    monkeypatch.setattr(db, "_active_db_path_override", None)
    db.set_active_db_path(tmp_path / "missing.db")
    loader.request(datasets.build_universe_dataset)
    assert loader.wait() is None
    assert not loader.pending
    assert not (tmp_path / "missing.db").exists()
