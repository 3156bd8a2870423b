# badge_overlay/core/placement.py
"""
Badge placement engine. Rectangles and rectangle-like paths take the O(1)
corner fast path; other paths run the per-corner constrained search and the
best scored candidate wins. Infeasible placements are a normal result.
"""

from __future__ import annotations

import logging

from badge_overlay.core.classify import is_rectangle_like
from badge_overlay.core.corners import rect_corner_anchor
from badge_overlay.core.direction import corners_in_priority, resolve_corner
from badge_overlay.core.error_codes import NO_FEASIBLE_CORNER, SHAPE_TOO_SMALL, user_message
from badge_overlay.core.scoring import clearance_bonus, score_candidate, select_best
from badge_overlay.core.search import fast_corner_ray, search_corner
from badge_overlay.core.types import (
    BadgeSpec,
    Boundary,
    Candidate,
    Corner,
    LayoutDirection,
    PlacementResult,
    PlacementTuning,
    Point,
    Rect,
    RectShape,
    Shape,
    WindingRule,
    shape_bounds,
)

logger = logging.getLogger(__name__)


def _too_small(bounds: Rect, radius: float) -> bool:
    return bounds.width < 2.0 * radius or bounds.height < 2.0 * radius


def _infeasible(
    radius: float,
    error_key: str,
    candidates: list[Candidate] | None = None,
) -> PlacementResult:
    return PlacementResult(
        anchor_pt=None,
        strategy="infeasible",
        effective_radius=radius,
        candidates=candidates or [],
        error_key=error_key,
        warnings=[user_message(error_key)],
    )


def search_placement(
    boundary: Boundary,
    badge: BadgeSpec,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    tuning: PlacementTuning | None = None,
    rule: WindingRule = WindingRule.NONZERO,
) -> PlacementResult:
    """
    General-path placement, no rectangle shortcut. Unless tuning.full_scan,
    a fast-ray hit on the primary corner returns immediately; otherwise every
    corner is searched (ray, then wedge) and the best score wins.
    """
    tuning = tuning or PlacementTuning()
    radius = badge.effective_radius
    bounds = boundary.bounding_box()
    if _too_small(bounds, radius):
        logger.debug(f"placement: bbox {bounds.width:.2f}x{bounds.height:.2f} below 2R={2 * radius:.2f}")
        return _infeasible(radius, SHAPE_TOO_SMALL)

    order = corners_in_priority(layout_direction)
    if not tuning.full_scan:
        corner, physical = order[0]
        p = fast_corner_ray(boundary, radius, physical, tuning, rule)
        if p is not None:
            logger.debug(f"placement: primary corner {physical.value} fast ray hit")
            cand = Candidate(point=p, corner=corner, physical_corner=physical, strategy="corner_ray")
            return PlacementResult(
                anchor_pt=p,
                strategy="corner_ray",
                effective_radius=radius,
                corner=corner,
                physical_corner=physical,
                candidates=[cand],
            )

    candidates: list[Candidate] = []
    for corner, physical in order:
        found = search_corner(boundary, radius, physical, tuning, rule)
        if found is None:
            continue
        point, strategy = found
        bonus = clearance_bonus(boundary, point, radius, tuning, rule)
        candidates.append(Candidate(
            point=point,
            corner=corner,
            physical_corner=physical,
            strategy=strategy,
            score=score_candidate(point, physical, bounds, bonus, tuning),
            clearance_bonus=bonus,
        ))

    best = select_best(candidates)
    if best is None:
        logger.debug("placement: no corner produced a feasible candidate")
        return _infeasible(radius, NO_FEASIBLE_CORNER, candidates)
    logger.debug(
        f"placement: best {best.physical_corner.value} via {best.strategy} "
        f"score={best.score:.4f} of {len(candidates)} candidate(s)"
    )
    return PlacementResult(
        anchor_pt=best.point,
        strategy=best.strategy,
        effective_radius=radius,
        corner=best.corner,
        physical_corner=best.physical_corner,
        score=best.score,
        candidates=candidates,
    )


def run_placement(
    shape: Shape,
    badge: BadgeSpec | None = None,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    tuning: PlacementTuning | None = None,
) -> PlacementResult:
    """Full placement with diagnostics (strategy, candidates, error key)."""
    badge = badge or BadgeSpec()
    tuning = tuning or PlacementTuning()
    radius = badge.effective_radius
    bounds = shape_bounds(shape)
    if _too_small(bounds, radius):
        logger.debug(f"placement: bbox {bounds.width:.2f}x{bounds.height:.2f} below 2R={2 * radius:.2f}")
        return _infeasible(radius, SHAPE_TOO_SMALL)

    # A corner arc no wider than R keeps the padded circle at the inset anchor inside.
    corner_limit = min(tuning.max_corner_radius, radius)
    if isinstance(shape, RectShape) or is_rectangle_like(shape.boundary, corner_limit):
        physical = resolve_corner(Corner.TOP_LEADING, layout_direction)
        anchor = rect_corner_anchor(bounds, physical, badge, nudge=tuning.rect_nudge)
        logger.debug(f"placement: rectangle fast path at {physical.value}")
        return PlacementResult(
            anchor_pt=anchor,
            strategy="rect_fast_path",
            effective_radius=radius,
            corner=Corner.TOP_LEADING,
            physical_corner=physical,
        )

    return search_placement(shape.boundary, badge, layout_direction, tuning, shape.winding_rule)


def place_badge(
    shape: Shape,
    badge: BadgeSpec | None = None,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    tuning: PlacementTuning | None = None,
) -> Point | None:
    """Badge center inside shape, or None when nothing fits."""
    return run_placement(shape, badge, layout_direction, tuning).anchor_pt
