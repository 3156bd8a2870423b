# badge_overlay/core/search.py
"""
Constrained search for general paths: circle-fit oracle, per-corner fast ray
search (diagonal walk + bisection) and the wedge grid fallback.
"""

from __future__ import annotations

import logging
import math

from badge_overlay.core.config import CONTAINMENT_TOLERANCE_PT, RING_SAMPLE_COUNT
from badge_overlay.core.corners import corner_point, inset_direction, point_along
from badge_overlay.core.types import (
    Boundary,
    PhysicalCorner,
    PlacementStrategy,
    PlacementTuning,
    Point,
    Rect,
    WindingRule,
)

logger = logging.getLogger(__name__)

# Unit offsets of the ring samples: every 60 degrees starting at angle 0.
RING_OFFSETS: tuple[tuple[float, float], ...] = tuple(
    (math.cos(i * 2.0 * math.pi / RING_SAMPLE_COUNT), math.sin(i * 2.0 * math.pi / RING_SAMPLE_COUNT))
    for i in range(RING_SAMPLE_COUNT)
)


def circle_fits(
    boundary: Boundary,
    center: Point,
    radius: float,
    rule: WindingRule = WindingRule.NONZERO,
    bounds: Rect | None = None,
    tolerance: float = CONTAINMENT_TOLERANCE_PT,
) -> bool:
    """
    Approximate "circle of radius fits inside the path": bbox prefilter,
    then the center and RING_SAMPLE_COUNT circumference points must be inside.
    """
    b = bounds if bounds is not None else boundary.bounding_box()
    cx, cy = center
    if (
        cx - radius < b.min_x - tolerance
        or cx + radius > b.max_x + tolerance
        or cy - radius < b.min_y - tolerance
        or cy + radius > b.max_y + tolerance
    ):
        return False
    if not boundary.contains(center, rule):
        return False
    for ux, uy in RING_OFFSETS:
        if not boundary.contains((cx + radius * ux, cy + radius * uy), rule):
            return False
    return True


def fast_corner_ray(
    boundary: Boundary,
    radius: float,
    corner: PhysicalCorner,
    tuning: PlacementTuning | None = None,
    rule: WindingRule = WindingRule.NONZERO,
) -> Point | None:
    """
    Walk from the bbox corner along the 45 degree inset direction: test t = R,
    then double t (at most tuning.ray_expansions times, never past the bbox
    diagonal) until a fit is bracketed, then bisect back toward the corner.
    Returns None when no tested distance fits.
    """
    tuning = tuning or PlacementTuning()
    b = boundary.bounding_box()
    origin = corner_point(b, corner)
    direction = inset_direction(corner)

    def fits(t: float) -> bool:
        return circle_fits(boundary, point_along(origin, direction, t), radius, rule, bounds=b)

    if fits(radius):
        return point_along(origin, direction, radius)

    max_t = b.diagonal
    lo = radius
    hi = radius * 2.0
    bracketed = False
    for _ in range(tuning.ray_expansions):
        if hi > max_t:
            break
        if fits(hi):
            bracketed = True
            break
        lo = hi
        hi *= 2.0
    if not bracketed:
        return None

    for _ in range(tuning.ray_bisect_steps):
        mid = (lo + hi) * 0.5
        if fits(mid):
            hi = mid
        else:
            lo = mid
    return point_along(origin, direction, hi)


def robust_corner_wedge(
    boundary: Boundary,
    radius: float,
    corner: PhysicalCorner,
    tuning: PlacementTuning | None = None,
    rule: WindingRule = WindingRule.NONZERO,
) -> Point | None:
    """
    Sample a wedge_grid x wedge_grid grid over the wedge_fraction sub-rectangle
    anchored at the corner, rows and columns ordered from the corner outward.
    First fitting point wins.
    """
    tuning = tuning or PlacementTuning()
    b = boundary.bounding_box()
    ox, oy = corner_point(b, corner)
    dx, dy = inset_direction(corner)
    w = b.width * tuning.wedge_fraction
    h = b.height * tuning.wedge_fraction
    steps = tuning.wedge_grid - 1
    for iy in range(tuning.wedge_grid):
        y = oy + dy * (iy * h / steps)
        for ix in range(tuning.wedge_grid):
            p = (ox + dx * (ix * w / steps), y)
            if circle_fits(boundary, p, radius, rule, bounds=b):
                return p
    return None


def search_corner(
    boundary: Boundary,
    radius: float,
    corner: PhysicalCorner,
    tuning: PlacementTuning | None = None,
    rule: WindingRule = WindingRule.NONZERO,
) -> tuple[Point, PlacementStrategy] | None:
    """Fast ray first, wedge grid if the ray fails; None if both fail."""
    p = fast_corner_ray(boundary, radius, corner, tuning, rule)
    if p is not None:
        logger.debug(f"search: {corner.value} answered by corner ray at ({p[0]:.2f}, {p[1]:.2f})")
        return p, "corner_ray"
    p = robust_corner_wedge(boundary, radius, corner, tuning, rule)
    if p is not None:
        logger.debug(f"search: {corner.value} answered by wedge grid at ({p[0]:.2f}, {p[1]:.2f})")
        return p, "corner_wedge"
    logger.debug(f"search: {corner.value} has no feasible point")
    return None
