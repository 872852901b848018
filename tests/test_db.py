# /tests/test_db.py

from __future__ import annotations

import shutil
import sqlite3

import pytest

from data import db


def test_system_points_are_raw_metres(sde_db):
    rows = db.get_system_points()
    assert [r["id"] for r in rows] == [30000001, 30000002, 30000003]
    assert rows[0] == {"id": 30000001, "name": "Amamake", "x": 1e13, "y": 0.0, "z": 2e13}


def test_connections(sde_db):
    rows = db.get_system_connections()
    assert {(r["id"], r["system_a"], r["system_b"]) for r in rows} == {
        ("c1", 30000001, 30000002),
        ("c2", 30000002, 30000003),
    }


def test_region_boxes_span_member_systems(sde_db):
    alpha, beta = db.get_region_labels()
    assert alpha["region_name"] == "Alpha"
    assert (alpha["min_x"], alpha["min_y"], alpha["min_z"]) == (1e13, 0.0, 2e13)
    assert (alpha["max_x"], alpha["max_y"], alpha["max_z"]) == (3e13, 5e13, 4e13)
    assert beta["region_id"] == 10000002
    assert beta["min_z"] == beta["max_z"] == -6e13


def test_abstract_layout_filtered_by_region(sde_db):
    rows = db.get_abstract_points((10000001,))
    assert [(r["id"], r["name"], r["x"], r["y"]) for r in rows] == [
        (30000001, "Amamake", 0.0, 0.0),
        (30000002, "Auga", 10.0, 0.0),
    ]
    assert len(db.get_abstract_points()) == 3


def test_abstract_connections_need_both_ends_in_region(sde_db):
    rows = db.get_abstract_connections((10000001,))
    assert rows == [{"id": "c1", "a_x": 0.0, "a_y": 0.0, "b_x": 10.0, "b_y": 0.0}]
    assert len(db.get_abstract_connections((10000001, 10000002))) == 2


def test_search_is_case_insensitive_substring(sde_db):
    assert [r["name"] for r in db.search_systems("A")] == ["Amamake", "Auga", "Bravo"]
    hit, = db.search_systems("  aUG ")
    assert hit == {"system_id": 30000002, "name": "Auga",
                   "region_id": 10000001, "region_name": "Alpha"}
    assert len(db.search_systems("a", limit=1)) == 1
    assert db.search_systems("") == []
    assert db.search_systems("zzz") == []


def test_search_skips_systems_outside_the_map_id_range(sde_db):
    conn = sqlite3.connect(str(sde_db))
    conn.execute("INSERT INTO mapSolarSystems VALUES (31000001, 'Augury', 20000001, 0.0, 0.0, 0.0)")
    conn.commit()
    conn.close()
    assert [r["system_id"] for r in db.search_systems("aug")] == [30000002]


def test_lookup_helpers(sde_db):
    assert db.get_region_name(10000002) == "Beta"
    assert db.get_region_name(1) is None
    assert [r["region_name"] for r in db.get_regions()] == ["Alpha", "Beta"]
    assert db.get_counts() == {"systems": 3, "connections": 2, "regions": 2}


def test_connection_is_read_only(sde_db):
    with pytest.raises(sqlite3.Error):
        db.get_connection().execute("DELETE FROM mapRegions")


def test_switching_path_reopens(sde_db, tmp_path):
    first = db.get_connection()
    other = tmp_path / "other.db"
    shutil.copy(sde_db, other)
    db.set_active_db_path(other)
    second = db.get_connection()
    assert second is not first
    assert db.get_active_db_path() == other
    assert db.get_active_db_uri().endswith("other.db?mode=ro")
