# badge_overlay/core/corners.py
"""
Corner geometry and the O(1) rectangle fast path: the badge anchor is inset
from the chosen bbox corner along both axes, no containment test.
"""

from __future__ import annotations

from badge_overlay.core.types import BadgeSpec, PhysicalCorner, Point, Rect, Vector


def corner_point(bounds: Rect, corner: PhysicalCorner) -> Point:
    """The bbox corner itself (y down: top is min_y)."""
    if corner is PhysicalCorner.TOP_LEFT:
        return (bounds.min_x, bounds.min_y)
    if corner is PhysicalCorner.TOP_RIGHT:
        return (bounds.max_x, bounds.min_y)
    if corner is PhysicalCorner.BOTTOM_LEFT:
        return (bounds.min_x, bounds.max_y)
    return (bounds.max_x, bounds.max_y)


def inset_direction(corner: PhysicalCorner) -> Vector:
    """Per-axis unit steps pointing from the corner into the bbox."""
    if corner is PhysicalCorner.TOP_LEFT:
        return (1.0, 1.0)
    if corner is PhysicalCorner.TOP_RIGHT:
        return (-1.0, 1.0)
    if corner is PhysicalCorner.BOTTOM_LEFT:
        return (1.0, -1.0)
    return (-1.0, -1.0)


def point_along(origin: Point, direction: Vector, t: float) -> Point:
    """origin + t * direction (t is the per-axis inset, not the Euclidean length)."""
    return (origin[0] + direction[0] * t, origin[1] + direction[1] * t)


def rect_corner_anchor(
    bounds: Rect,
    corner: PhysicalCorner,
    badge: BadgeSpec,
    nudge: float = 0.5,
) -> Point:
    """
    Badge center inset by the badge's effective radius from the corner, plus
    a sub-unit nudge toward the interior. The nudge never exceeds half the
    slack left by the short side, so the padded circle stays inside bounds.
    """
    radius = badge.effective_radius
    slack = min(bounds.width, bounds.height) - 2.0 * radius
    inset = radius + max(0.0, min(nudge, slack / 2.0))
    return point_along(corner_point(bounds, corner), inset_direction(corner), inset)
