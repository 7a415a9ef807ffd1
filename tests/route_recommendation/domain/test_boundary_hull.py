# tests/route_recommendation/domain/test_boundary_hull.py

import random

import pytest

from route_recommendation.domain.boundary_hull import compute_hull, hull_to_geojson

EPS = 1e-12


def _cross(o, a, b):
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _edges(hull):
    return [(hull[i], hull[(i + 1) % len(hull)]) for i in range(len(hull))]


def test_fewer_than_three_points_returned_unchanged():
    assert compute_hull([]) == []
    assert compute_hull([(1.0, 2.0)]) == [(1.0, 2.0)]
    assert compute_hull([(1.0, 2.0), (3.0, 4.0)]) == [(1.0, 2.0), (3.0, 4.0)]


def test_square_with_interior_points():
    cantos = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
    internos = [(0.5, 0.5), (0.2, 0.7), (0.9, 0.1)]

    hull = compute_hull(internos + cantos)

    assert len(hull) == 4
    assert set(hull) == set(cantos)
    assert hull[0] == (0.0, 0.0)


def test_start_is_lowest_latitude_then_lowest_longitude():
    pts = [(1.0, 5.0), (0.0, 3.0), (0.0, 1.0), (2.0, 2.0)]
    assert compute_hull(pts)[0] == (0.0, 1.0)


@pytest.mark.parametrize("seed", range(6))
def test_random_points_inside_and_convex(seed):
    rng = random.Random(seed)
    pts = [(59.8 + rng.random() * 0.3, 10.6 + rng.random() * 0.4) for _ in range(60)]

    hull = compute_hull(pts)

    assert 3 <= len(hull) <= len(pts)
    for a, b in _edges(hull):
        for p in pts:
            assert _cross(a, b, p) >= -EPS
    voltas = [_cross(hull[i], hull[(i + 1) % len(hull)], hull[(i + 2) % len(hull)]) for i in range(len(hull))]
    assert all(v > 0 for v in voltas)


def test_collinear_points_give_degenerate_polygon():
    pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]

    hull = compute_hull(pts)

    assert hull == [(0.0, 0.0), (3.0, 3.0)]


def test_points_on_edges_are_not_vertices():
    pts = [(0.0, 0.0), (0.0, 0.5), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.5, 0.0)]
    assert set(compute_hull(pts)) == {(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)}


def test_duplicate_points():
    pts = [(0.0, 0.0), (0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (0.0, 1.0), (0.0, 1.0), (0.2, 0.2)]

    hull = compute_hull(pts)

    assert len(hull) == 3
    assert set(hull) == {(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)}


def test_all_points_identical():
    assert compute_hull([(5.0, 5.0)] * 4) == [(5.0, 5.0)]


def test_geojson_ring_is_closed_and_lng_lat():
    hull = [(59.0, 10.0), (59.0, 11.0), (60.0, 11.0)]

    feature = hull_to_geojson(hull, {"id": 3})

    ring = feature["geometry"]["coordinates"][0]
    assert feature["geometry"]["type"] == "Polygon"
    assert ring[0] == [10.0, 59.0]
    assert ring[0] == ring[-1]
    assert len(ring) == 4
    assert feature["properties"] == {"id": 3}
