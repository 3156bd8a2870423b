# badge_overlay/core/config.py
"""
Central configuration for badge placement.
All tunable values live here; no magic numbers in other modules.
Engine calls receive them through BadgeSpec / PlacementTuning defaults.
"""

from __future__ import annotations

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Badge -----
BADGE_SIZE_PT: float = 16.0
"""Side length of the square badge."""

BADGE_PADDING_PT: float = 2.0
"""Minimum gap between the badge's circumscribed circle and the shape boundary."""

# ----- Shape classifier -----
MAX_CORNER_RADIUS_PT: float = 8.0
"""Curves whose control points stray further than this from their end point are not 'rounded corners'."""

# ----- Corner fast path -----
RECT_NUDGE_PT: float = 0.5
"""Sub-unit push toward the interior for rectangle anchors (rounding slack)."""

# ----- Corner ray search -----
RAY_MAX_EXPANSIONS: int = 3
"""Doublings of the ray distance after the first test at R."""

RAY_BISECT_STEPS: int = 6
"""Binary search iterations once a fitting distance is bracketed."""

# ----- Wedge fallback -----
WEDGE_FRACTION: float = 0.45
"""Wedge extent as a fraction of bbox width and height, anchored at the corner."""

WEDGE_GRID: int = 4
"""Samples per axis in the wedge grid (WEDGE_GRID x WEDGE_GRID points)."""

# ----- Circle-fit oracle -----
RING_SAMPLE_COUNT: int = 6
"""Circumference samples (every 60 degrees, starting at 0). Fixed for reproducibility."""

# ----- Scoring -----
CLEARANCE_RADIUS_FACTOR: float = 1.25
"""Radius multiplier for the extra-clearance check."""

CLEARANCE_WEIGHT: float = 0.15
"""Score bonus weight when the enlarged circle also fits."""

# ----- Path flattening -----
CURVE_FLATTEN_STEPS: int = 16
"""Line pieces per quadratic/cubic curve when building the containment region."""

SVG_ARC_STEPS: int = 16
"""Line pieces per SVG elliptical arc when importing path data."""

# ----- Rendering -----
RENDER_WIDTH_PX: int = 600
RENDER_HEIGHT_PX: int = 600

# ----- Feasibility -----
CONTAINMENT_TOLERANCE_PT: float = 1e-6
"""Points this close to the outline (or bbox edge) count as inside; absorbs float noise."""
