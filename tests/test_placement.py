# tests/test_placement.py
"""
Placement engine end to end: reference scenarios (rectangle LTR/RTL, small
circle, notched L, rounded rectangle) and the engine properties: containment,
fast-path equivalence, monotonic infeasibility under shrinking, mirror
symmetry with RTL, determinism. Also configuration validation.
"""

from __future__ import annotations

import math

import pytest

from badge_overlay.core.error_codes import NO_FEASIBLE_CORNER, SHAPE_TOO_SMALL, user_message
from badge_overlay.core.geometry import (
    BezierPath,
    close_path,
    ellipse_path,
    line_to,
    mirror_path_x,
    move_to,
    polygon_path,
    rect_path,
    rounded_rect_path,
    scale_path,
)
from badge_overlay.core.io import shape_from_wkt
from badge_overlay.core.placement import place_badge, run_placement, search_placement
from badge_overlay.core.search import circle_fits
from badge_overlay.core.types import (
    BadgeSpec,
    BadgeSpecError,
    Boundary,
    Corner,
    LayoutDirection,
    PathShape,
    PhysicalCorner,
    PlacementTuning,
    Rect,
    RectShape,
    TuningError,
    WindingRule,
)

LTR = LayoutDirection.LEFT_TO_RIGHT
RTL = LayoutDirection.RIGHT_TO_LEFT
BADGE = BadgeSpec(size=16, padding=2)
R = BADGE.effective_radius


class CountingBoundary:
    """Delegates to a real path and counts containment queries."""

    def __init__(self, inner: Boundary) -> None:
        self.inner = inner
        self.calls = 0

    def bounding_box(self) -> Rect:
        return self.inner.bounding_box()

    def segments(self):
        return self.inner.segments()

    def contains(self, point, rule: WindingRule = WindingRule.NONZERO) -> bool:
        self.calls += 1
        return self.inner.contains(point, rule)


def _notched_l():
    """400x112 bbox with the top-left 42x56 block cut away."""
    return polygon_path([(42, 0), (400, 0), (400, 112), (0, 112), (0, 56), (42, 56)])


def _rect_lookalikes() -> list[PathShape]:
    """Shapes whose vertices or curves sit near bbox corners without being rectangles."""
    return [
        PathShape(BezierPath([move_to(0, 0), line_to(100, 100), line_to(100, 0), line_to(0, 100), close_path()])),
        PathShape(polygon_path([(0, 0), (100, 0), (100, 100), (0, 0)])),
        PathShape(ellipse_path(Rect(0, 0, 16, 16))),
        PathShape(ellipse_path(Rect(0, 0, 40, 40))),
        PathShape(rounded_rect_path(Rect(0, 0, 100, 60), 8)),
    ]


def _sample_shapes() -> list[PathShape]:
    return [
        PathShape(rect_path(Rect(0, 0, 200, 100))),
        PathShape(ellipse_path(Rect(0, 0, 100, 100))),
        PathShape(ellipse_path(Rect(10, 5, 180, 70))),
        PathShape(rounded_rect_path(Rect(0, 0, 120, 80), 30)),
        PathShape(_notched_l()),
        PathShape(polygon_path([(0, 0), (150, 0), (150, 150), (75, 60), (0, 150)])),
    ]


# ----- Reference scenarios -----


def test_rectangle_ltr_top_left() -> None:
    anchor = place_badge(RectShape(Rect(0, 0, 200, 100)), BADGE, LTR)
    assert anchor == pytest.approx((R + 0.5, R + 0.5))
    assert anchor == pytest.approx((13.81, 13.81), abs=0.01)


def test_rectangle_rtl_top_right() -> None:
    anchor = place_badge(RectShape(Rect(0, 0, 200, 100)), BADGE, RTL)
    assert anchor == pytest.approx((200 - R - 0.5, R + 0.5))
    assert anchor == pytest.approx((186.19, 13.81), abs=0.01)


def test_small_circle_is_infeasible() -> None:
    shape = PathShape(ellipse_path(Rect(0, 0, 20, 20)))
    assert place_badge(shape, BADGE, LTR) is None
    result = run_placement(shape, BADGE, LTR)
    assert not result.found
    assert result.strategy == "infeasible"
    assert result.error_key == SHAPE_TOO_SMALL
    assert result.warnings == [user_message(SHAPE_TOO_SMALL)]


def test_notched_l_uses_wedge_at_leading_corner() -> None:
    result = run_placement(PathShape(_notched_l()), BADGE, LTR)
    assert result.found
    assert result.strategy == "corner_wedge"
    assert result.corner is Corner.TOP_LEADING
    assert result.physical_corner is PhysicalCorner.TOP_LEFT
    assert result.anchor_pt == pytest.approx((60.0, 16.8))
    assert len(result.candidates) == 4
    assert result.candidates[0].clearance_bonus == 1.0
    assert all(c.clearance_bonus == 0.0 for c in result.candidates[1:])
    assert circle_fits(_notched_l(), result.anchor_pt, R)


def test_rounded_rect_takes_fast_path_without_sampling() -> None:
    counter = CountingBoundary(rounded_rect_path(Rect(0, 0, 200, 100), 6))
    result = run_placement(PathShape(counter), BADGE, LTR)
    assert result.strategy == "rect_fast_path"
    assert result.anchor_pt == pytest.approx((R + 0.5, R + 0.5))
    assert result.score is None
    assert result.candidates == []
    assert counter.calls == 0


# ----- Engine properties -----


@pytest.mark.parametrize("direction", [LTR, RTL])
def test_returned_anchor_always_fits(direction: LayoutDirection) -> None:
    for shape in _sample_shapes():
        result = run_placement(shape, BADGE, direction)
        assert result.found, shape
        assert circle_fits(shape.boundary, result.anchor_pt, R, shape.winding_rule)


@pytest.mark.parametrize("badge", [
    BadgeSpec(size=2, padding=0),
    BadgeSpec(size=4, padding=0),
    BadgeSpec(size=8, padding=1),
    BADGE,
    BadgeSpec(size=24, padding=4),
], ids=lambda b: f"{b.size:g}/{b.padding:g}")
@pytest.mark.parametrize("direction", [LTR, RTL])
def test_found_anchor_fits_for_any_badge(badge: BadgeSpec, direction: LayoutDirection) -> None:
    for shape in _sample_shapes() + _rect_lookalikes():
        result = run_placement(shape, badge, direction)
        if result.found:
            assert circle_fits(shape.boundary, result.anchor_pt, badge.effective_radius, shape.winding_rule), (
                shape, result.strategy, result.anchor_pt,
            )


def test_bowtie_and_closed_triangle_skip_fast_path() -> None:
    for shape in _rect_lookalikes()[:2]:
        result = run_placement(shape, BADGE, LTR)
        assert result.strategy != "rect_fast_path"
        if result.found:
            assert circle_fits(shape.boundary, result.anchor_pt, R, shape.winding_rule)


@pytest.mark.parametrize("shape, badge", [
    (PathShape(ellipse_path(Rect(0, 0, 16, 16))), BadgeSpec(size=4, padding=0)),
    (PathShape(rounded_rect_path(Rect(0, 0, 100, 60), 8)), BadgeSpec(size=2, padding=0)),
])
def test_small_badge_on_wide_corner_arcs_uses_search(shape: PathShape, badge: BadgeSpec) -> None:
    result = run_placement(shape, badge, LTR)
    assert result.found
    assert result.strategy != "rect_fast_path"
    assert circle_fits(shape.boundary, result.anchor_pt, badge.effective_radius, shape.winding_rule)


def test_default_badge_keeps_fast_path_on_8pt_corners() -> None:
    result = run_placement(PathShape(rounded_rect_path(Rect(0, 0, 100, 60), 8)), BADGE, LTR)
    assert result.strategy == "rect_fast_path"


def test_fast_path_matches_general_search() -> None:
    b = Rect(0, 0, 200, 100)
    fast = place_badge(RectShape(b), BADGE, LTR)
    general = search_placement(rect_path(b), BADGE, LTR)
    assert general.strategy == "corner_ray"
    assert math.dist(fast, general.anchor_pt) <= 1.0


def test_rect_fast_path_for_path_and_rect_shape_agree() -> None:
    b = Rect(5, 10, 205, 110)
    assert place_badge(PathShape(rect_path(b)), BADGE, RTL) == pytest.approx(
        place_badge(RectShape(b), BADGE, RTL)
    )


@pytest.mark.parametrize("make_path", [
    lambda: ellipse_path(Rect(0, 0, 100, 100)),
    lambda: rect_path(Rect(0, 0, 120, 60)),
    lambda: _notched_l(),
])
def test_shrinking_never_restores_feasibility(make_path) -> None:
    base = make_path()
    results = [
        place_badge(PathShape(scale_path(base, f)), BADGE, LTR)
        for f in (1.0, 0.8, 0.6, 0.4, 0.3, 0.2, 0.1)
    ]
    assert results[0] is not None
    assert results[-1] is None
    first_none = results.index(None)
    assert all(r is None for r in results[first_none:])


@pytest.mark.parametrize("make_path", [
    lambda: rect_path(Rect(0, 0, 200, 100)),
    lambda: _notched_l(),
    lambda: ellipse_path(Rect(0, 0, 100, 60)),
])
def test_mirror_symmetry_with_rtl(make_path) -> None:
    path = make_path()
    b = path.bounding_box()
    ltr = place_badge(PathShape(path), BADGE, LTR)
    rtl = place_badge(PathShape(mirror_path_x(path)), BADGE, RTL)
    assert ltr is not None and rtl is not None
    assert rtl[0] == pytest.approx(b.min_x + b.max_x - ltr[0], abs=1e-6)
    assert rtl[1] == pytest.approx(ltr[1], abs=1e-6)


def test_deterministic() -> None:
    for shape in _sample_shapes():
        first = run_placement(shape, BADGE, LTR, PlacementTuning(full_scan=True))
        second = run_placement(shape, BADGE, LTR, PlacementTuning(full_scan=True))
        assert first.anchor_pt == second.anchor_pt
        assert [c.score for c in first.candidates] == [c.score for c in second.candidates]


# ----- Engine flow -----


def test_primary_ray_hit_returns_early() -> None:
    result = run_placement(PathShape(ellipse_path(Rect(0, 0, 100, 100))), BADGE, LTR)
    assert result.strategy == "corner_ray"
    assert result.physical_corner is PhysicalCorner.TOP_LEFT
    assert len(result.candidates) == 1
    assert result.score is None


def test_full_scan_scores_every_corner() -> None:
    result = run_placement(
        PathShape(ellipse_path(Rect(0, 0, 100, 100))), BADGE, LTR, PlacementTuning(full_scan=True)
    )
    assert result.found
    assert len(result.candidates) == 4
    assert {c.physical_corner for c in result.candidates} == set(PhysicalCorner)
    assert result.score == max(c.score for c in result.candidates)


def test_thin_frame_has_no_feasible_corner() -> None:
    frame = shape_from_wkt(
        "POLYGON ((0 0, 100 0, 100 100, 0 100, 0 0), (5 5, 95 5, 95 95, 5 95, 5 5))"
    )
    result = run_placement(frame, BADGE, LTR)
    assert place_badge(frame, BADGE, LTR) is None
    assert result.error_key == NO_FEASIBLE_CORNER
    assert result.candidates == []


def test_even_odd_hole_is_avoided() -> None:
    # Same-direction rings: under even-odd the inner square is a hole
    path = BezierPath([
        move_to(0, 0), line_to(60, 0), line_to(60, 60), line_to(0, 60), close_path(),
        move_to(10, 10), line_to(50, 10), line_to(50, 50), line_to(10, 50), close_path(),
    ])
    assert place_badge(PathShape(path, WindingRule.NONZERO), BADGE, LTR) is not None
    assert place_badge(PathShape(path, WindingRule.EVEN_ODD), BADGE, LTR) is None


def test_rect_too_small_and_just_big_enough() -> None:
    assert place_badge(RectShape(Rect(0, 0, 26, 200)), BADGE) is None
    assert place_badge(RectShape(Rect(0, 0, 27, 27)), BADGE) == pytest.approx((13.5, 13.5))
    small = BadgeSpec(size=16, padding=0)
    assert place_badge(RectShape(Rect(0, 0, 23, 23)), small) is not None


def test_defaults() -> None:
    assert place_badge(RectShape(Rect(0, 0, 200, 100))) == pytest.approx((R + 0.5, R + 0.5))


# ----- Configuration -----


def test_badge_spec_derived_values() -> None:
    assert BADGE.half_size == 8.0
    assert BADGE.half_diagonal == pytest.approx(11.3137, abs=1e-4)
    assert BADGE.effective_radius == pytest.approx(13.3137, abs=1e-4)


@pytest.mark.parametrize("size,padding", [
    (0, 2), (-16, 2), (float("nan"), 2), (float("inf"), 2), (16, -1), (16, float("nan")),
])
def test_badge_spec_rejects_bad_values(size: float, padding: float) -> None:
    with pytest.raises(BadgeSpecError) as exc:
        BadgeSpec(size=size, padding=padding)
    assert exc.value.error_key == "invalid_badge_spec"
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize("kwargs", [
    {"wedge_grid": 1},
    {"wedge_fraction": 0.0},
    {"wedge_fraction": 1.5},
    {"rect_nudge": 1.0},
    {"ray_expansions": -1},
    {"clearance_radius_factor": 0.5},
    {"max_corner_radius": -2},
])
def test_tuning_rejects_bad_values(kwargs: dict) -> None:
    with pytest.raises(TuningError) as exc:
        PlacementTuning(**kwargs)
    assert exc.value.error_key == "invalid_tuning"
