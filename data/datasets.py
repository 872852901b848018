# /data/datasets.py

"""
Dataset builders

Turn raw static-data records from data/db.py into corrected, engine-ready
Dataset values. These run on the loader worker thread; they never touch Qt.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from controller.log_config import get_data_logger
from engine.models import Dataset, Edge, Label, Point
from settings import system_config as cfg
from . import db
from .coordinates import CoordinateCorrection

logger = get_data_logger('datasets')

UNIVERSE_CORRECTION = CoordinateCorrection(cfg.UNIVERSE_FACTOR, cfg.UNIVERSE_INVERT_AXES)
REGION_CORRECTION = CoordinateCorrection(cfg.REGION_FACTOR, cfg.REGION_INVERT_AXES)


# ---------- Record -> model ----------

def points_from_rows(rows: Iterable[Dict], correction: CoordinateCorrection) -> List[Point]:
    out: List[Point] = []
    for r in rows:
        raw = (r["x"], r["y"], r["z"]) if r.get("z") is not None else (r["x"], r["y"])
        out.append(Point(int(r["id"]), correction.apply(raw), r.get("name") or ""))
    return out


def id_edges_from_rows(rows: Iterable[Dict]) -> List[Edge]:
    return [Edge(r["id"], int(r["system_a"]), int(r["system_b"])) for r in rows]


def coord_edges_from_rows(rows: Iterable[Dict], correction: CoordinateCorrection) -> List[Edge]:
    return [
        Edge(r["id"],
             correction.apply((r["a_x"], r["a_y"])),
             correction.apply((r["b_x"], r["b_y"])))
        for r in rows
    ]


def labels_from_region_rows(rows: Iterable[Dict], correction: CoordinateCorrection) -> List[Label]:
    out: List[Label] = []
    for r in rows:
        lo, hi = correction.apply_box(
            (r["min_x"], r["min_y"], r["min_z"]),
            (r["max_x"], r["max_y"], r["max_z"]),
        )
        anchor = tuple((a + b) / 2.0 for a, b in zip(lo, hi))
        out.append(Label(r["region_name"], anchor, int(r["region_id"])))
    return out


# ---------- Builders (loader entry points) ----------

def build_universe_dataset(correction: Optional[CoordinateCorrection] = None) -> Dataset:
    """Every system, every stargate connection and one label per region."""
    correction = correction or UNIVERSE_CORRECTION
    points = points_from_rows(db.get_system_points(), correction)
    edges = id_edges_from_rows(db.get_system_connections())
    labels = labels_from_region_rows(db.get_region_labels(), correction)
    logger.info(f"universe dataset: {len(points)} systems, {len(edges)} connections, "
                f"{len(labels)} regions")
    return Dataset(points=tuple(points), edges=tuple(edges), labels=tuple(labels), name="Universe")


def build_region_dataset(regions: Sequence[int],
                         correction: Optional[CoordinateCorrection] = None) -> Dataset:
    """Schematic layout of one or more regions."""
    correction = correction or REGION_CORRECTION
    regions = tuple(int(r) for r in regions)
    points = points_from_rows(db.get_abstract_points(regions), correction)
    edges = coord_edges_from_rows(db.get_abstract_connections(regions), correction)

    names = [db.get_region_name(r) or str(r) for r in regions]
    name = ", ".join(names) if names else "Regions"
    region_id = regions[0] if len(regions) == 1 else None
    logger.info(f"region dataset {name!r}: {len(points)} systems, {len(edges)} connections")
    return Dataset(points=tuple(points), edges=tuple(edges), name=name, region_id=region_id)
