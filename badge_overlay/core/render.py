# badge_overlay/core/render.py
"""
Matplotlib debug PNG: element shape, bbox, per-corner candidates, chosen badge
square and its padded clearance circle. Y axis points down like UI space.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle, Rectangle
from shapely.geometry.base import BaseGeometry

from badge_overlay.core.config import RENDER_HEIGHT_PX, RENDER_WIDTH_PX
from badge_overlay.core.types import BadgeSpec, PlacementResult, Rect, RectShape, Shape, shape_bounds

CORNER_COLORS: dict[str, str] = {
    "top_left": "tab:green",
    "top_right": "tab:orange",
    "bottom_left": "tab:purple",
    "bottom_right": "tab:brown",
}


def set_axes_to_bounds(ax: plt.Axes, bounds: Rect, pad_frac: float = 0.05) -> None:
    """Set xlim/ylim from bounds with margin; equal aspect; y down; hide axes."""
    dx = max(1.0, bounds.width * pad_frac)
    dy = max(1.0, bounds.height * pad_frac)
    ax.set_xlim(bounds.min_x - dx, bounds.max_x + dx)
    ax.set_ylim(bounds.max_y + dy, bounds.min_y - dy)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")


def _draw_region(ax: plt.Axes, geom: BaseGeometry) -> None:
    if geom is None or geom.is_empty:
        return
    polys = [geom] if geom.geom_type == "Polygon" else list(getattr(geom, "geoms", []))
    for g in polys:
        if g.geom_type != "Polygon":
            continue
        xy = np.array(g.exterior.coords)
        ax.fill(xy[:, 0], xy[:, 1], facecolor="lightblue", edgecolor="navy", linewidth=1)
        for hole in g.interiors:
            hxy = np.array(hole.coords)
            ax.fill(hxy[:, 0], hxy[:, 1], facecolor="white", edgecolor="navy", linewidth=1)


def _draw_shape(ax: plt.Axes, shape: Shape) -> None:
    if isinstance(shape, RectShape):
        b = shape.bounds
        ax.add_patch(Rectangle((b.min_x, b.min_y), b.width, b.height,
                               facecolor="lightblue", edgecolor="navy", linewidth=1))
        return
    region_fn = getattr(shape.boundary, "region", None)
    if region_fn is not None:
        _draw_region(ax, region_fn(shape.winding_rule))


def render_debug(
    shape: Shape,
    result: PlacementResult,
    badge: BadgeSpec,
    output_path: str | Path,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
) -> None:
    """Render the placement debug overlay to a PNG."""
    bounds = shape_bounds(shape)
    fig = plt.figure(figsize=(width_px / 100.0, height_px / 100.0), dpi=100, constrained_layout=False)
    try:
        # Leave bottom margin so legend does not overlap the image
        ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
        ax.axis("off")
        _draw_shape(ax, shape)
        ax.add_patch(Rectangle((bounds.min_x, bounds.min_y), bounds.width, bounds.height,
                               fill=False, linestyle="--", linewidth=1, edgecolor="gray", label="bbox"))

        for cand in result.candidates:
            x, y = cand.point
            ax.scatter([x], [y], s=18, color=CORNER_COLORS.get(cand.physical_corner.value, "black"),
                       label=f"{cand.physical_corner.value} ({cand.strategy})", zorder=4)

        if result.anchor_pt is not None:
            cx, cy = result.anchor_pt
            half = badge.half_size
            ax.add_patch(Rectangle((cx - half, cy - half), badge.size, badge.size,
                                   facecolor="red", alpha=0.6, edgecolor="darkred", zorder=5, label="badge"))
            ax.add_patch(Circle((cx, cy), result.effective_radius, fill=False,
                                edgecolor="darkred", linestyle=":", zorder=5, label="clearance"))

        set_axes_to_bounds(ax, bounds)
        title = result.strategy if result.found else f"infeasible: {result.error_key}"
        ax.set_title(title, fontsize=9)
        handles, labels = ax.get_legend_handles_labels()
        extra = []
        if handles:
            leg = ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=3, fontsize=7)
            extra.append(leg)
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
            fig.savefig(output_path, dpi=100, facecolor="white", bbox_inches="tight", bbox_extra_artists=extra)
    finally:
        plt.close(fig)
