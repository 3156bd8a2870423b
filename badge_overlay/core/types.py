# badge_overlay/core/types.py
"""
Value types for badge placement: rectangles, path segments, shapes,
badge spec, tuning, corners, candidates and the placement result.
All of them are immutable except the result containers built once per call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Protocol, Union, runtime_checkable

from badge_overlay.core.config import (
    BADGE_PADDING_PT,
    BADGE_SIZE_PT,
    CLEARANCE_RADIUS_FACTOR,
    CLEARANCE_WEIGHT,
    MAX_CORNER_RADIUS_PT,
    RAY_BISECT_STEPS,
    RAY_MAX_EXPANSIONS,
    RECT_NUDGE_PT,
    WEDGE_FRACTION,
    WEDGE_GRID,
)
from badge_overlay.core.error_codes import INVALID_BADGE_SPEC, INVALID_TUNING

Point = tuple[float, float]
Vector = tuple[float, float]

PlacementStrategy = Literal["rect_fast_path", "corner_ray", "corner_wedge", "infeasible"]


class Corner(str, Enum):
    """Logical corner, in placement priority order."""
    TOP_LEADING = "top_leading"
    TOP_TRAILING = "top_trailing"
    BOTTOM_LEADING = "bottom_leading"
    BOTTOM_TRAILING = "bottom_trailing"


class PhysicalCorner(str, Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


class LayoutDirection(str, Enum):
    LEFT_TO_RIGHT = "ltr"
    RIGHT_TO_LEFT = "rtl"


class WindingRule(str, Enum):
    NONZERO = "nonzero"
    EVEN_ODD = "evenodd"


class SegmentKind(str, Enum):
    MOVE = "move"
    LINE = "line"
    QUAD = "quad"
    CUBIC = "cubic"
    CLOSE = "close"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; y grows downward so min_y is the top edge."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> Rect:
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return (minx, miny, maxx, maxy), the shapely bounds order."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)


@dataclass(frozen=True)
class PathSegment:
    """
    One path element. MOVE/LINE carry (end,), QUAD carries (control, end),
    CUBIC carries (control1, control2, end), CLOSE carries ().
    """
    kind: SegmentKind
    points: tuple[Point, ...] = ()

    @property
    def end(self) -> Point | None:
        return self.points[-1] if self.points else None


@runtime_checkable
class Boundary(Protocol):
    """Closed region the engine can query. Injectable so tests can use synthetic shapes."""

    def bounding_box(self) -> Rect: ...

    def contains(self, point: Point, rule: WindingRule = WindingRule.NONZERO) -> bool: ...

    def segments(self) -> tuple[PathSegment, ...]: ...


@dataclass(frozen=True)
class RectShape:
    bounds: Rect


@dataclass(frozen=True)
class PathShape:
    boundary: Boundary
    winding_rule: WindingRule = WindingRule.NONZERO


Shape = Union[RectShape, PathShape]


def shape_bounds(shape: Shape) -> Rect:
    """Bounding box of either shape variant."""
    if isinstance(shape, RectShape):
        return shape.bounds
    return shape.boundary.bounding_box()


class BadgeSpecError(ValueError):
    """Badge size or padding out of range."""

    def __init__(self, message: str, error_key: str = INVALID_BADGE_SPEC) -> None:
        super().__init__(message)
        self.error_key = error_key


class TuningError(ValueError):
    """Placement tuning value out of range."""

    def __init__(self, message: str, error_key: str = INVALID_TUNING) -> None:
        super().__init__(message)
        self.error_key = error_key


@dataclass(frozen=True)
class BadgeSpec:
    """Square badge of side `size` that must keep `padding` away from the shape boundary."""
    size: float = BADGE_SIZE_PT
    padding: float = BADGE_PADDING_PT

    def __post_init__(self) -> None:
        if not math.isfinite(self.size) or self.size <= 0:
            raise BadgeSpecError(f"Badge size must be a positive number, got {self.size!r}")
        if not math.isfinite(self.padding) or self.padding < 0:
            raise BadgeSpecError(f"Badge padding must be zero or positive, got {self.padding!r}")

    @property
    def half_size(self) -> float:
        return self.size / 2.0

    @property
    def half_diagonal(self) -> float:
        return 0.5 * math.sqrt(2.0 * self.size * self.size)

    @property
    def effective_radius(self) -> float:
        """Radius of the smallest circle holding the badge, plus padding."""
        return self.half_diagonal + self.padding


@dataclass(frozen=True)
class PlacementTuning:
    """Search knobs. Defaults mirror config.py; pass a custom instance per call to vary them."""
    max_corner_radius: float = MAX_CORNER_RADIUS_PT
    ray_expansions: int = RAY_MAX_EXPANSIONS
    ray_bisect_steps: int = RAY_BISECT_STEPS
    wedge_fraction: float = WEDGE_FRACTION
    wedge_grid: int = WEDGE_GRID
    clearance_radius_factor: float = CLEARANCE_RADIUS_FACTOR
    clearance_weight: float = CLEARANCE_WEIGHT
    rect_nudge: float = RECT_NUDGE_PT
    full_scan: bool = False

    def __post_init__(self) -> None:
        if self.max_corner_radius < 0:
            raise TuningError(f"max_corner_radius must be >= 0, got {self.max_corner_radius!r}")
        if self.ray_expansions < 0 or self.ray_bisect_steps < 0:
            raise TuningError("Ray expansion and bisection counts must be >= 0")
        if not 0 < self.wedge_fraction <= 1:
            raise TuningError(f"wedge_fraction must be in (0, 1], got {self.wedge_fraction!r}")
        if self.wedge_grid < 2:
            raise TuningError(f"wedge_grid must be >= 2, got {self.wedge_grid!r}")
        if self.clearance_radius_factor < 1:
            raise TuningError(f"clearance_radius_factor must be >= 1, got {self.clearance_radius_factor!r}")
        if not 0 <= self.rect_nudge < 1:
            raise TuningError(f"rect_nudge must be in [0, 1), got {self.rect_nudge!r}")


@dataclass
class Candidate:
    """A feasible anchor found for one corner during a single placement call."""
    point: Point
    corner: Corner
    physical_corner: PhysicalCorner
    strategy: PlacementStrategy
    score: float = 0.0
    clearance_bonus: float = 0.0


@dataclass
class PlacementResult:
    """Anchor (badge center) or an explicit infeasible outcome with its error key."""
    anchor_pt: Point | None
    strategy: PlacementStrategy
    effective_radius: float
    corner: Corner | None = None
    physical_corner: PhysicalCorner | None = None
    score: float | None = None
    candidates: list[Candidate] = field(default_factory=list)
    error_key: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.anchor_pt is not None
