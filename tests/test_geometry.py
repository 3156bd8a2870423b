# tests/test_geometry.py
"""
Deterministic tests for geometry: path builders, flattening, winding numbers,
containment under both fill rules, shapely conversion, mirror and scale.
"""

from __future__ import annotations

import pytest
from shapely.geometry import LineString, Polygon

from badge_overlay.core.geometry import (
    BezierPath,
    close_path,
    cubic_to,
    ellipse_path,
    flatten_segments,
    line_to,
    mirror_path_x,
    move_to,
    path_from_geometry,
    polygon_path,
    rect_path,
    rounded_rect_path,
    scale_path,
    winding_number,
)
from badge_overlay.core.types import Rect, SegmentKind, WindingRule


def _nested_squares() -> BezierPath:
    """Two squares drawn in the same direction; the inner one has winding 2."""
    return BezierPath([
        move_to(0, 0), line_to(100, 0), line_to(100, 100), line_to(0, 100), close_path(),
        move_to(25, 25), line_to(75, 25), line_to(75, 75), line_to(25, 75), close_path(),
    ])


def test_rect_path_bbox_and_contains() -> None:
    p = rect_path(Rect(10, 20, 110, 70))
    assert p.bounding_box() == Rect(10, 20, 110, 70)
    assert p.contains((50, 40))
    assert p.contains((10, 20))  # corner: closed region
    assert p.contains((110, 45))  # edge
    assert not p.contains((9, 40))
    assert not p.contains((50, 71))


def test_empty_path() -> None:
    p = BezierPath([])
    assert p.bounding_box().is_empty
    assert p.flattened_rings() == []
    assert not p.contains((0, 0))


def test_flatten_cubic_uses_steps() -> None:
    segs = [move_to(0, 0), cubic_to(0, 10, 10, 10, 10, 0), close_path()]
    rings = flatten_segments(segs, steps=16)
    assert len(rings) == 1
    assert rings[0].shape == (17, 2)
    assert tuple(rings[0][-1]) == pytest.approx((10.0, 0.0))


def test_flatten_one_ring_per_subpath() -> None:
    rings = _nested_squares().flattened_rings()
    assert len(rings) == 2
    assert all(r.shape == (4, 2) for r in rings)


def test_winding_number_inside_outside() -> None:
    rings = rect_path(Rect(0, 0, 10, 10)).flattened_rings()
    assert abs(winding_number(rings, (5, 5))) == 1
    assert winding_number(rings, (15, 5)) == 0
    assert abs(winding_number(_nested_squares().flattened_rings(), (50, 50))) == 2


def test_nonzero_vs_even_odd() -> None:
    p = _nested_squares()
    assert p.contains((50, 50), WindingRule.NONZERO)
    assert not p.contains((50, 50), WindingRule.EVEN_ODD)
    assert p.contains((10, 10), WindingRule.NONZERO)
    assert p.contains((10, 10), WindingRule.EVEN_ODD)


def test_ellipse_path() -> None:
    p = ellipse_path(Rect(0, 0, 100, 50))
    b = p.bounding_box()
    assert (b.min_x, b.min_y, b.max_x, b.max_y) == pytest.approx((0, 0, 100, 50))
    assert p.contains((50, 25))
    assert not p.contains((3, 3))
    assert sum(1 for s in p.segments() if s.kind is SegmentKind.CUBIC) == 4


def test_rounded_rect_radius_clamped() -> None:
    p = rounded_rect_path(Rect(0, 0, 40, 20), radius=100)
    b = p.bounding_box()
    assert (b.min_x, b.min_y, b.max_x, b.max_y) == pytest.approx((0, 0, 40, 20))
    # Clamped to 10: the shape is a stadium, corners are cut away
    assert not p.contains((0.5, 0.5))
    assert p.contains((20, 10))


def test_rounded_rect_zero_radius_is_rect() -> None:
    p = rounded_rect_path(Rect(0, 0, 40, 20), radius=0)
    assert all(s.kind is not SegmentKind.CUBIC for s in p.segments())


def test_path_from_geometry_keeps_holes() -> None:
    poly = Polygon(
        [(0, 0), (100, 0), (100, 100), (0, 100)],
        holes=[[(40, 40), (60, 40), (60, 60), (40, 60)]],
    )
    p = path_from_geometry(poly)
    assert p.contains((10, 10))
    assert not p.contains((50, 50))
    assert p.region().area == pytest.approx(100 * 100 - 20 * 20)


def test_path_from_geometry_rejects_lines() -> None:
    with pytest.raises(ValueError):
        path_from_geometry(LineString([(0, 0), (1, 1)]))


def test_polygon_path_concave() -> None:
    p = polygon_path([(0, 0), (100, 0), (100, 100), (50, 50), (0, 100)])
    assert p.contains((50, 25))
    assert not p.contains((50, 90))


def test_mirror_path_x_about_center() -> None:
    tri = polygon_path([(10, 0), (50, 0), (10, 20)])
    m = mirror_path_x(tri)
    assert m.bounding_box() == tri.bounding_box()
    assert m.contains((48, 1))
    assert not m.contains((12, 18))
    ends = [s.end for s in m.segments() if s.end is not None]
    assert ends == [(50.0, 0.0), (10.0, 0.0), (50.0, 20.0)]


def test_mirror_path_x_explicit_axis() -> None:
    m = mirror_path_x(rect_path(Rect(0, 0, 10, 10)), axis_x=20)
    assert m.bounding_box() == Rect(30, 0, 40, 10)


def test_scale_path() -> None:
    s = scale_path(rect_path(Rect(0, 0, 100, 50)), 0.5)
    assert s.bounding_box() == Rect(0, 0, 50, 25)
    s2 = scale_path(rect_path(Rect(0, 0, 100, 50)), 0.5, origin=(50, 25))
    assert s2.bounding_box() == Rect(25, 12.5, 75, 37.5)
