# badge_overlay/core/scoring.py
"""
Candidate scoring: proximity to the candidate's own corner plus a bonus when
an enlarged circle also fits. Higher is better; ties keep corner priority order.
"""

from __future__ import annotations

from badge_overlay.core.corners import corner_point
from badge_overlay.core.geometry import distance
from badge_overlay.core.search import circle_fits
from badge_overlay.core.types import (
    Boundary,
    Candidate,
    PhysicalCorner,
    PlacementTuning,
    Point,
    Rect,
    WindingRule,
)


def normalized_corner_distance(point: Point, corner: PhysicalCorner, bounds: Rect) -> float:
    """Distance to the bbox corner divided by the bbox diagonal (at least 1)."""
    return distance(point, corner_point(bounds, corner)) / max(1.0, bounds.diagonal)


def clearance_bonus(
    boundary: Boundary,
    point: Point,
    radius: float,
    tuning: PlacementTuning,
    rule: WindingRule = WindingRule.NONZERO,
) -> float:
    """1.0 if a circle of radius * clearance_radius_factor also fits, else 0.0."""
    fits = circle_fits(boundary, point, radius * tuning.clearance_radius_factor, rule)
    return 1.0 if fits else 0.0


def score_candidate(
    point: Point,
    corner: PhysicalCorner,
    bounds: Rect,
    bonus: float,
    tuning: PlacementTuning,
) -> float:
    """score = -normalized corner distance + clearance_weight * bonus."""
    return -normalized_corner_distance(point, corner, bounds) + tuning.clearance_weight * bonus


def select_best(candidates: list[Candidate]) -> Candidate | None:
    """
    Highest score wins. Candidates must be in corner priority order; a later
    candidate only replaces the best on a strictly higher score.
    """
    best: Candidate | None = None
    for cand in candidates:
        if best is None or cand.score > best.score:
            best = cand
    return best
