# /tests/test_spatial_index.py

from __future__ import annotations

import math
import random

from engine import spatial_index
from engine.models import Bounds
from engine.spatial_index import EMPTY_INDEX


def _brute_force(points, center, radius):
    return {pid for pid, (x, y) in points
            if math.hypot(x - center[0], y - center[1]) <= radius}


def test_empty_input_gives_empty_index():
    index = spatial_index.build([])
    assert index is EMPTY_INDEX
    assert spatial_index.query_within(index, (0.0, 0.0), 1e9) == set()
    assert spatial_index.nearest(index, (0.0, 0.0), 1e9) is None


def test_query_matches_brute_force():
    rng = random.Random(7)
    points = [(i, (rng.uniform(-500, 500), rng.uniform(-500, 500))) for i in range(2000)]
    index = spatial_index.build(points)
    for _ in range(25):
        center = (rng.uniform(-600, 600), rng.uniform(-600, 600))
        radius = rng.uniform(0, 300)
        assert spatial_index.query_within(index, center, radius) == _brute_force(points, center, radius)


def test_radius_is_inclusive():
    index = spatial_index.build([(1, (3.0, 4.0)), (2, (3.0, 4.000001))])
    assert spatial_index.query_within(index, (0.0, 0.0), 5.0) == {1}


def test_zero_radius_hits_exact_point_only():
    index = spatial_index.build([(1, (2.0, 2.0)), (2, (2.0, 2.5))])
    assert spatial_index.query_within(index, (2.0, 2.0), 0.0) == {1}


def test_negative_radius_returns_nothing():
    index = spatial_index.build([(1, (0.0, 0.0))])
    assert spatial_index.query_within(index, (0.0, 0.0), -1.0) == set()


def test_nearest_prefers_closest_then_lower_id():
    index = spatial_index.build([(9, (1.0, 0.0)), (4, (-1.0, 0.0)), (2, (0.0, 3.0))])
    assert spatial_index.nearest(index, (0.0, 0.0), 2.0) == 4
    assert spatial_index.nearest(index, (0.9, 0.0), 2.0) == 9
    assert spatial_index.nearest(index, (0.0, 10.0), 2.0) is None


def test_midpoint_query_with_diagonal_radius_returns_everything():
    rng = random.Random(11)
    for n in (1, 2, 37, 500):
        points = [(i, (rng.uniform(-1e3, 1e3), rng.gauss(0, 50))) for i in range(n)]
        bounds = Bounds.from_planes(p for _, p in points)
        index = spatial_index.build(points)
        found = spatial_index.query_within(index, bounds.midpoint, bounds.diagonal)
        assert found == {pid for pid, _ in points}
