# badge_overlay/core/direction.py
"""
Layout-direction adapter: map logical (leading/trailing) corners to physical
(left/right) corners. Applied once per call before any search.
"""

from __future__ import annotations

from badge_overlay.core.types import Corner, LayoutDirection, PhysicalCorner

_LTR: dict[Corner, PhysicalCorner] = {
    Corner.TOP_LEADING: PhysicalCorner.TOP_LEFT,
    Corner.TOP_TRAILING: PhysicalCorner.TOP_RIGHT,
    Corner.BOTTOM_LEADING: PhysicalCorner.BOTTOM_LEFT,
    Corner.BOTTOM_TRAILING: PhysicalCorner.BOTTOM_RIGHT,
}

_RTL: dict[Corner, PhysicalCorner] = {
    Corner.TOP_LEADING: PhysicalCorner.TOP_RIGHT,
    Corner.TOP_TRAILING: PhysicalCorner.TOP_LEFT,
    Corner.BOTTOM_LEADING: PhysicalCorner.BOTTOM_RIGHT,
    Corner.BOTTOM_TRAILING: PhysicalCorner.BOTTOM_LEFT,
}


def resolve_corner(corner: Corner, direction: LayoutDirection) -> PhysicalCorner:
    """Leading is left in LTR and right in RTL; top/bottom never change."""
    if direction is LayoutDirection.RIGHT_TO_LEFT:
        return _RTL[corner]
    return _LTR[corner]


def corners_in_priority(direction: LayoutDirection) -> list[tuple[Corner, PhysicalCorner]]:
    """All corners in priority order (top-leading first), already resolved."""
    return [(c, resolve_corner(c, direction)) for c in Corner]


def parse_layout_direction(s: str | None) -> LayoutDirection:
    """Parse 'ltr' / 'rtl' (also 'left-to-right' / 'right-to-left'); empty means LTR."""
    value = (s or "").strip().lower().replace("_", "-")
    if value in ("", "ltr", "left-to-right"):
        return LayoutDirection.LEFT_TO_RIGHT
    if value in ("rtl", "right-to-left"):
        return LayoutDirection.RIGHT_TO_LEFT
    raise ValueError(f"Unknown layout direction: {s!r}")
