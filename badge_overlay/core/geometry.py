# badge_overlay/core/geometry.py
"""
Geometry helpers: bezier path flattening, winding numbers, the shapely-backed
containment region, and path builders for the common element shapes
(rect, rounded rect, oval, polygon, shapely geometry).
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from shapely.geometry import LineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import polygonize, unary_union
from shapely.prepared import PreparedGeometry, prep

from badge_overlay.core.config import CONTAINMENT_TOLERANCE_PT, CURVE_FLATTEN_STEPS
from badge_overlay.core.types import (
    PathSegment,
    Point as PointT,
    Rect,
    SegmentKind,
    WindingRule,
)

# Cubic control distance for a quarter circle of radius 1.
KAPPA: float = 0.5522847498


def move_to(x: float, y: float) -> PathSegment:
    return PathSegment(SegmentKind.MOVE, ((float(x), float(y)),))


def line_to(x: float, y: float) -> PathSegment:
    return PathSegment(SegmentKind.LINE, ((float(x), float(y)),))


def quad_to(cx: float, cy: float, x: float, y: float) -> PathSegment:
    return PathSegment(SegmentKind.QUAD, ((float(cx), float(cy)), (float(x), float(y))))


def cubic_to(
    c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float
) -> PathSegment:
    return PathSegment(
        SegmentKind.CUBIC,
        ((float(c1x), float(c1y)), (float(c2x), float(c2y)), (float(x), float(y))),
    )


def close_path() -> PathSegment:
    return PathSegment(SegmentKind.CLOSE)


def _quad_points(p0: PointT, c: PointT, p1: PointT, steps: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    mt = 1.0 - t
    return mt * mt * np.asarray(p0) + 2.0 * mt * t * np.asarray(c) + t * t * np.asarray(p1)


def _cubic_points(p0: PointT, c1: PointT, c2: PointT, p1: PointT, steps: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    mt = 1.0 - t
    return (
        mt ** 3 * np.asarray(p0)
        + 3.0 * mt * mt * t * np.asarray(c1)
        + 3.0 * mt * t * t * np.asarray(c2)
        + t ** 3 * np.asarray(p1)
    )


def flatten_segments(
    segments: Iterable[PathSegment],
    steps: int = CURVE_FLATTEN_STEPS,
) -> list[np.ndarray]:
    """
    Flatten path segments into rings of (N, 2) vertices, one per subpath.
    Open subpaths are returned as-is; filling treats them as implicitly closed.
    """
    rings: list[np.ndarray] = []
    current: list[np.ndarray] = []
    pen: PointT | None = None
    start: PointT | None = None

    def finish() -> None:
        if current:
            rings.append(np.vstack(current))
        current.clear()

    for seg in segments:
        if seg.kind is SegmentKind.CLOSE:
            finish()
            pen = start
            continue
        end = seg.points[-1]
        if seg.kind is SegmentKind.MOVE or pen is None:
            finish()
            start = end
            pen = end
            current.append(np.asarray([end], dtype=float))
            continue
        if not current:
            # drawing after a close continues from the subpath start
            current.append(np.asarray([pen], dtype=float))
        if seg.kind is SegmentKind.LINE:
            current.append(np.asarray([end], dtype=float))
        elif seg.kind is SegmentKind.QUAD:
            current.append(_quad_points(pen, seg.points[0], end, steps))
        elif seg.kind is SegmentKind.CUBIC:
            current.append(_cubic_points(pen, seg.points[0], seg.points[1], end, steps))
        pen = end
    finish()
    return rings


def winding_number(rings: Sequence[np.ndarray], point: PointT) -> int:
    """Signed crossing count of all rings around point (rings implicitly closed)."""
    px, py = point
    total = 0
    for ring in rings:
        if len(ring) < 2:
            continue
        a = np.asarray(ring, dtype=float)
        b = np.roll(a, -1, axis=0)
        x0, y0 = a[:, 0], a[:, 1]
        x1, y1 = b[:, 0], b[:, 1]
        cross = (x1 - x0) * (py - y0) - (px - x0) * (y1 - y0)
        up = (y0 <= py) & (y1 > py) & (cross > 0)
        down = (y0 > py) & (y1 <= py) & (cross < 0)
        total += int(np.count_nonzero(up)) - int(np.count_nonzero(down))
    return total


def _is_filled(winding: int, rule: WindingRule) -> bool:
    if rule is WindingRule.EVEN_ODD:
        return winding % 2 == 1
    return winding != 0


def build_region(rings: Sequence[np.ndarray], rule: WindingRule) -> BaseGeometry:
    """
    Filled area of the rings under the winding rule, as a shapely geometry.
    Rings are noded and polygonized; each face is kept when its winding
    number at an interior point is filled under rule.
    """
    closed = [r for r in rings if len(r) >= 3]
    if not closed:
        return Polygon()
    if len(closed) == 1:
        single = Polygon(closed[0])
        if single.is_valid and not single.is_empty:
            return single
    lines = [LineString(np.vstack([r, r[:1]])) for r in closed]
    faces = list(polygonize(unary_union(lines)))
    kept = []
    for face in faces:
        p = face.representative_point()
        if _is_filled(winding_number(closed, (p.x, p.y)), rule):
            kept.append(face)
    if not kept:
        return Polygon()
    return unary_union(kept)


class BezierPath:
    """
    Immutable closed path made of move/line/quad/cubic/close segments.
    Implements the Boundary protocol; containment treats the region as closed
    (points on the outline are inside).
    """

    def __init__(
        self,
        segments: Iterable[PathSegment],
        flatten_steps: int = CURVE_FLATTEN_STEPS,
        tolerance: float = CONTAINMENT_TOLERANCE_PT,
    ) -> None:
        self._tolerance = tolerance
        self._segments: tuple[PathSegment, ...] = tuple(segments)
        self._rings = flatten_segments(self._segments, steps=flatten_steps)
        self._regions: dict[WindingRule, BaseGeometry] = {}
        self._prepared: dict[WindingRule, PreparedGeometry] = {}
        if self._rings:
            xy = np.vstack(self._rings)
            mins = xy.min(axis=0)
            maxs = xy.max(axis=0)
            self._bbox = Rect(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))
        else:
            self._bbox = Rect(0.0, 0.0, 0.0, 0.0)

    def __repr__(self) -> str:
        return f"BezierPath(segments={len(self._segments)}, bbox={self._bbox.as_tuple()})"

    def segments(self) -> tuple[PathSegment, ...]:
        return self._segments

    def bounding_box(self) -> Rect:
        return self._bbox

    def flattened_rings(self) -> list[np.ndarray]:
        return [r.copy() for r in self._rings]

    def region(self, rule: WindingRule = WindingRule.NONZERO) -> BaseGeometry:
        """Filled region as shapely geometry (built lazily, once per rule)."""
        region = self._regions.get(rule)
        if region is None:
            region = build_region(self._rings, rule)
            self._regions[rule] = region
        return region

    def contains(self, point: PointT, rule: WindingRule = WindingRule.NONZERO) -> bool:
        prepared = self._prepared.get(rule)
        if prepared is None:
            prepared = prep(self.region(rule))
            self._prepared[rule] = prepared
        p = Point(point[0], point[1])
        if prepared.covers(p):
            return True
        region = self.region(rule)
        return not region.is_empty and region.distance(p) <= self._tolerance


def rect_path(rect: Rect) -> BezierPath:
    return BezierPath([
        move_to(rect.min_x, rect.min_y),
        line_to(rect.max_x, rect.min_y),
        line_to(rect.max_x, rect.max_y),
        line_to(rect.min_x, rect.max_y),
        close_path(),
    ])


def rounded_rect_path(rect: Rect, radius: float) -> BezierPath:
    """Rounded rectangle with cubic quarter-circle corners (radius clamped to half the short side)."""
    r = max(0.0, min(radius, rect.width / 2.0, rect.height / 2.0))
    if r == 0:
        return rect_path(rect)
    k = KAPPA * r
    x0, y0, x1, y1 = rect.as_tuple()
    return BezierPath([
        move_to(x0 + r, y0),
        line_to(x1 - r, y0),
        cubic_to(x1 - r + k, y0, x1, y0 + r - k, x1, y0 + r),
        line_to(x1, y1 - r),
        cubic_to(x1, y1 - r + k, x1 - r + k, y1, x1 - r, y1),
        line_to(x0 + r, y1),
        cubic_to(x0 + r - k, y1, x0, y1 - r + k, x0, y1 - r),
        line_to(x0, y0 + r),
        cubic_to(x0, y0 + r - k, x0 + r - k, y0, x0 + r, y0),
        close_path(),
    ])


def ellipse_path(rect: Rect) -> BezierPath:
    """Oval inscribed in rect, four cubic quarter arcs."""
    cx, cy = rect.center
    rx = rect.width / 2.0
    ry = rect.height / 2.0
    kx = KAPPA * rx
    ky = KAPPA * ry
    return BezierPath([
        move_to(cx + rx, cy),
        cubic_to(cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry),
        cubic_to(cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy),
        cubic_to(cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry),
        cubic_to(cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy),
        close_path(),
    ])


def polygon_path(points: Sequence[PointT]) -> BezierPath:
    """Closed polyline through points."""
    if not points:
        return BezierPath([])
    segments = [move_to(*points[0])]
    segments.extend(line_to(x, y) for x, y in points[1:])
    segments.append(close_path())
    return BezierPath(segments)


def path_from_geometry(geom: BaseGeometry) -> BezierPath:
    """
    Polygon / MultiPolygon to a path. Exteriors are oriented opposite to holes
    so holes stay empty under the nonzero rule.
    """
    if geom is None or geom.is_empty:
        return BezierPath([])
    if isinstance(geom, Polygon):
        polys = [geom]
    elif isinstance(geom, MultiPolygon):
        polys = list(geom.geoms)
    else:
        raise ValueError(f"Unsupported geometry type for path: {geom.geom_type}")
    segments: list[PathSegment] = []
    for poly in polys:
        poly = orient(poly, sign=1.0)
        for ring in [poly.exterior, *poly.interiors]:
            coords = list(ring.coords)[:-1]
            if len(coords) < 3:
                continue
            segments.append(move_to(*coords[0]))
            segments.extend(line_to(x, y) for x, y in coords[1:])
            segments.append(close_path())
    return BezierPath(segments)


def _map_points(path: BezierPath, fn) -> BezierPath:
    return BezierPath(
        PathSegment(seg.kind, tuple(fn(p) for p in seg.points)) for seg in path.segments()
    )


def mirror_path_x(path: BezierPath, axis_x: float | None = None) -> BezierPath:
    """Mirror horizontally about x = axis_x (default: the path's bbox center)."""
    if axis_x is None:
        bbox = path.bounding_box()
        span = bbox.min_x + bbox.max_x
    else:
        span = 2.0 * axis_x
    return _map_points(path, lambda p: (span - p[0], p[1]))


def scale_path(path: BezierPath, factor: float, origin: PointT = (0.0, 0.0)) -> BezierPath:
    """Uniform scale about origin."""
    ox, oy = origin
    return _map_points(path, lambda p: (ox + (p[0] - ox) * factor, oy + (p[1] - oy) * factor))


def distance(a: PointT, b: PointT) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])
