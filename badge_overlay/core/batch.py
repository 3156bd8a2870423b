# badge_overlay/core/batch.py
"""
Batch mode: place one badge per shape for many elements, or for a directory
of shape files. Output: reports/batch_<run_name>/index.csv and cases/<case_id>/.
"""

from __future__ import annotations

import csv
import logging
import time
from pathlib import Path
from typing import Iterable

from badge_overlay.core.config import REPORTS_DIR
from badge_overlay.core.error_codes import RUN_FAILED
from badge_overlay.core.io import SHAPE_SUFFIXES, load_shape
from badge_overlay.core.placement import run_placement
from badge_overlay.core.reporting import ensure_report_dir, write_placement_json
from badge_overlay.core.types import (
    BadgeSpec,
    LayoutDirection,
    PlacementResult,
    PlacementTuning,
    Shape,
)

logger = logging.getLogger(__name__)

INDEX_FIELDS: list[str] = [
    "case_id", "geometry_source", "found", "strategy", "corner",
    "anchor_x", "anchor_y", "error_key", "duration_ms",
]


def place_badges(
    shapes: Iterable[Shape],
    badge: BadgeSpec | None = None,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    tuning: PlacementTuning | None = None,
) -> list[PlacementResult]:
    """One independent placement per shape, in input order."""
    badge = badge or BadgeSpec()
    tuning = tuning or PlacementTuning()
    return [run_placement(s, badge, layout_direction, tuning) for s in shapes]


def _row(case_id: str, source: str, result: PlacementResult | None, duration_ms: int, error_key: str | None = None) -> dict:
    anchor = result.anchor_pt if result is not None else None
    return {
        "case_id": case_id,
        "geometry_source": source,
        "found": bool(result is not None and result.found),
        "strategy": result.strategy if result is not None else "error",
        "corner": result.physical_corner.value if result is not None and result.physical_corner else "",
        "anchor_x": round(anchor[0], 3) if anchor else "",
        "anchor_y": round(anchor[1], 3) if anchor else "",
        "error_key": error_key or (result.error_key if result is not None else "") or "",
        "duration_ms": duration_ms,
    }


def run_batch(
    run_name: str,
    batch_dir: Path,
    badge: BadgeSpec | None = None,
    layout_direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    tuning: PlacementTuning | None = None,
    limit: int | None = None,
    repo_root: Path | None = None,
    output_dir: str = REPORTS_DIR,
    render: bool = False,
) -> Path:
    """
    Place a badge for every shape file in batch_dir (.wkt, .svg, .svgd, .rect).
    Files that fail to load are recorded with error_key run_failed.
    Returns the batch report directory containing index.csv and cases/<case_id>/.
    """
    root = (repo_root or Path.cwd()).resolve()
    batch_dir = batch_dir.resolve()
    if not batch_dir.is_dir():
        raise ValueError(f"Batch directory not found: {batch_dir}")
    badge = badge or BadgeSpec()
    tuning = tuning or PlacementTuning()
    report_dir = ensure_report_dir(root, f"batch_{run_name}", output_dir=output_dir)
    cases_dir = report_dir / "cases"
    cases_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(p for p in batch_dir.iterdir() if p.suffix.lower() in SHAPE_SUFFIXES)
    if limit is not None:
        files = files[:limit]

    rows: list[dict] = []
    for i, shape_path in enumerate(files):
        case_id = f"case_{i:04d}_{shape_path.stem}"
        source = str(shape_path.relative_to(root)) if root in shape_path.parents else str(shape_path)
        t0 = time.perf_counter()
        try:
            shape = load_shape(shape_path)
        except (OSError, ValueError) as e:
            logger.warning(f"batch: {source} failed to load: {e}")
            rows.append(_row(case_id, source, None, int((time.perf_counter() - t0) * 1000), RUN_FAILED))
            continue
        result = run_placement(shape, badge, layout_direction, tuning)
        duration_ms = int((time.perf_counter() - t0) * 1000)
        case_dir = cases_dir / case_id
        case_dir.mkdir(parents=True, exist_ok=True)
        write_placement_json(case_dir, result, badge, source, layout_direction)
        if render:
            from badge_overlay.core.render import render_debug
            render_debug(shape, result, badge, case_dir / "debug.png")
        rows.append(_row(case_id, source, result, duration_ms))

    index_path = report_dir / "index.csv"
    with open(index_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=INDEX_FIELDS)
        w.writeheader()
        w.writerows(rows)
    return report_dir
