# badge_overlay/core/reporting.py
"""
Create reports/<run_name>/ and write placement.json and run_metadata.json.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from badge_overlay.core.config import (
    CLEARANCE_RADIUS_FACTOR,
    CLEARANCE_WEIGHT,
    CURVE_FLATTEN_STEPS,
    MAX_CORNER_RADIUS_PT,
    RAY_BISECT_STEPS,
    RAY_MAX_EXPANSIONS,
    RECT_NUDGE_PT,
    REPORTS_DIR,
    RING_SAMPLE_COUNT,
    WEDGE_FRACTION,
    WEDGE_GRID,
)
from badge_overlay.core.error_codes import user_message
from badge_overlay.core.types import BadgeSpec, LayoutDirection, PlacementResult, PlacementTuning

SCHEMA_VERSION = "1.0"


def _point_dict(p: tuple[float, float] | None) -> dict | None:
    if p is None:
        return None
    return {"x": float(p[0]), "y": float(p[1])}


def placement_to_dict(
    result: PlacementResult,
    badge: BadgeSpec,
    geometry_source: str,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
) -> dict:
    """Exact structure for placement.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "badge": {
            "size": badge.size,
            "padding": badge.padding,
            "effective_radius": result.effective_radius,
        },
        "input": {
            "geometry_source": geometry_source,
            "layout_direction": layout_direction.value,
        },
        "result": {
            "found": result.found,
            "anchor_pt": _point_dict(result.anchor_pt),
            "strategy": result.strategy,
            "corner": result.corner.value if result.corner else None,
            "physical_corner": result.physical_corner.value if result.physical_corner else None,
            "score": result.score,
            "error_key": result.error_key,
            "message": user_message(result.error_key, fallback="") if result.error_key else "",
        },
        "candidates": [
            {
                "anchor_pt": _point_dict(c.point),
                "corner": c.corner.value,
                "physical_corner": c.physical_corner.value,
                "strategy": c.strategy,
                "score": c.score,
                "clearance_bonus": c.clearance_bonus,
            }
            for c in result.candidates
        ],
        "warnings": list(result.warnings),
    }


def run_metadata_dict(
    run_name: str,
    geometry_source: str,
    badge: BadgeSpec,
    layout_direction: LayoutDirection,
    tuning: PlacementTuning | None = None,
) -> dict:
    """Run settings plus the engine constants in effect, stamped with UTC time."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "geometry_source": geometry_source,
        "badge_size": badge.size,
        "badge_padding": badge.padding,
        "layout_direction": layout_direction.value,
        "tuning": asdict(tuning or PlacementTuning()),
        "config": {
            "MAX_CORNER_RADIUS_PT": MAX_CORNER_RADIUS_PT,
            "RECT_NUDGE_PT": RECT_NUDGE_PT,
            "RAY_MAX_EXPANSIONS": RAY_MAX_EXPANSIONS,
            "RAY_BISECT_STEPS": RAY_BISECT_STEPS,
            "WEDGE_FRACTION": WEDGE_FRACTION,
            "WEDGE_GRID": WEDGE_GRID,
            "RING_SAMPLE_COUNT": RING_SAMPLE_COUNT,
            "CLEARANCE_RADIUS_FACTOR": CLEARANCE_RADIUS_FACTOR,
            "CLEARANCE_WEIGHT": CLEARANCE_WEIGHT,
            "CURVE_FLATTEN_STEPS": CURVE_FLATTEN_STEPS,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Report directory for one run (repo_root/output_dir/run_name), created if missing."""
    report_dir = (repo_root / (output_dir or REPORTS_DIR)).resolve() / run_name
    report_dir.mkdir(parents=True, exist_ok=True)
    return report_dir


def _dump(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_placement_json(
    report_dir: Path,
    result: PlacementResult,
    badge: BadgeSpec,
    geometry_source: str,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
) -> Path:
    """Serialize one placement result as report_dir/placement.json."""
    return _dump(
        report_dir / "placement.json",
        placement_to_dict(result, badge, geometry_source, layout_direction),
    )


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    geometry_source: str,
    badge: BadgeSpec,
    layout_direction: LayoutDirection,
    tuning: PlacementTuning | None = None,
) -> Path:
    return _dump(
        report_dir / "run_metadata.json",
        run_metadata_dict(run_name, geometry_source, badge, layout_direction, tuning),
    )
