# badge_overlay/core/classify.py
"""
Shape classifier: detect axis-aligned rectangles and rounded rectangles with
small corner radius so placement can skip containment sampling.
Tolerant checks only ever err toward "not rectangle-like".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from badge_overlay.core.config import MAX_CORNER_RADIUS_PT
from badge_overlay.core.types import Boundary, PathSegment, Point, Rect, SegmentKind

logger = logging.getLogger(__name__)


@dataclass
class ShapeStats:
    """Segment walk summary used by the classifier."""
    line_points: list[Point] = field(default_factory=list)
    curve_count: int = 0
    max_curve_deviation: float = 0.0


def curve_deviation(segment: PathSegment) -> float:
    """
    Largest per-axis distance between a curve's control point(s) and its end
    point; a cheap proxy for corner radius. 0 for non-curves.
    """
    if segment.kind not in (SegmentKind.QUAD, SegmentKind.CUBIC):
        return 0.0
    end = segment.points[-1]
    return max(
        max(abs(c[0] - end[0]), abs(c[1] - end[1]))
        for c in segment.points[:-1]
    )


def classify_segments(path: Boundary) -> ShapeStats:
    stats = ShapeStats()
    for seg in path.segments():
        if seg.kind in (SegmentKind.MOVE, SegmentKind.LINE):
            stats.line_points.append(seg.points[0])
        elif seg.kind in (SegmentKind.QUAD, SegmentKind.CUBIC):
            stats.curve_count += 1
            stats.max_curve_deviation = max(stats.max_curve_deviation, curve_deviation(seg))
    return stats


def _truncated_corners(bounds: Rect) -> set[tuple[int, int]]:
    return {
        (int(bounds.min_x), int(bounds.min_y)),
        (int(bounds.max_x), int(bounds.min_y)),
        (int(bounds.max_x), int(bounds.max_y)),
        (int(bounds.min_x), int(bounds.max_y)),
    }


def _is_corner_cycle(points: list[Point], bounds: Rect) -> bool:
    """
    Points visit all four bbox corners (after integer truncation) and every
    edge between consecutive points, wrap-around included, is axis-aligned.
    """
    vertices = [(int(x), int(y)) for x, y in points]
    if set(vertices) != _truncated_corners(bounds):
        return False
    for (x0, y0), (x1, y1) in zip(vertices, vertices[1:] + vertices[:1]):
        if x0 != x1 and y0 != y1:
            return False
    return True


def _all_points_near_edges(points: list[Point], bounds: Rect, tolerance: float) -> bool:
    """Every point lies within tolerance of at least one bbox edge."""
    for x, y in points:
        near_vertical = abs(x - bounds.min_x) <= tolerance or abs(x - bounds.max_x) <= tolerance
        near_horizontal = abs(y - bounds.min_y) <= tolerance or abs(y - bounds.max_y) <= tolerance
        if not near_vertical and not near_horizontal:
            return False
    return True


def is_rectangle_like(path: Boundary, max_corner_radius: float = MAX_CORNER_RADIUS_PT) -> bool:
    """
    True for a pure 4-vertex rectangle matching its bbox corners, or for a
    curved outline whose curves deviate at most max_corner_radius and whose
    straight vertices all hug the bbox edges.
    """
    bounds = path.bounding_box()
    if bounds.is_empty:
        return False
    stats = classify_segments(path)

    if stats.curve_count == 0 and len(stats.line_points) == 4:
        result = _is_corner_cycle(stats.line_points, bounds)
    elif stats.curve_count > 0 and stats.max_curve_deviation <= max_corner_radius:
        result = _all_points_near_edges(stats.line_points, bounds, max_corner_radius)
    else:
        result = False

    logger.debug(
        "classify: vertices=%d curves=%d max_deviation=%.2f -> rectangle_like=%s",
        len(stats.line_points), stats.curve_count, stats.max_curve_deviation, result,
    )
    return result
