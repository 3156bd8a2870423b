# badge_overlay/core/runner.py
"""
CLI entrypoint: load a shape, place the badge, export placement.json,
run_metadata.json and debug.png under reports/<run_name>/.
Shape sources: --geometry (.wkt/.svg/.svgd/.rect file), --svg-path (inline d), --rect "x,y,w,h".
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from badge_overlay.core.config import BADGE_PADDING_PT, BADGE_SIZE_PT, REPORTS_DIR
from badge_overlay.core.io import load_shape, parse_rect, parse_svg_path
from badge_overlay.core.placement import run_placement
from badge_overlay.core.reporting import (
    ensure_report_dir,
    write_placement_json,
    write_run_metadata_json,
)
from badge_overlay.core.types import BadgeSpec, LayoutDirection, PathShape, PlacementTuning, Shape

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Place a corner badge inside an element shape.")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--geometry", type=str, default=None, help="Shape file path (repo-relative)")
    src.add_argument("--svg-path", type=str, default=None, dest="svg_path", help="Inline SVG path data")
    src.add_argument("--rect", type=str, default=None, help="Rectangle 'x,y,w,h'")
    p.add_argument("--badge-size", type=float, default=BADGE_SIZE_PT, dest="badge_size", help="Badge side (pt)")
    p.add_argument("--padding", type=float, default=BADGE_PADDING_PT, help="Clearance around the badge (pt)")
    p.add_argument("--rtl", action="store_true", help="Right-to-left layout (leading corner is top right)")
    p.add_argument("--full-scan", action="store_true", dest="full_scan", help="Score every corner, no early exit")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Name of the report directory under --output-dir")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Root that relative shape paths and reports resolve against (default: cwd)")
    p.add_argument("--no-render", action="store_true", dest="no_render", help="Skip debug.png")
    p.add_argument("--batch-dir", type=str, default=None, dest="batch_dir", help="Batch mode: directory of shape files")
    p.add_argument("--batch-limit", type=int, default=None, dest="batch_limit", help="Place at most this many shapes from --batch-dir")
    return p.parse_args(argv)


def _load_input(args: argparse.Namespace, repo_root: Path) -> tuple[Shape, str]:
    """Shape plus a short description of where it came from."""
    if args.rect:
        return parse_rect(args.rect), f"rect:{args.rect}"
    if args.svg_path:
        return PathShape(parse_svg_path(args.svg_path)), "svg-path"
    if args.geometry:
        return load_shape(args.geometry, repo_root=repo_root), args.geometry
    raise ValueError("One of --geometry, --svg-path, --rect or --batch-dir is required")


def main(argv: list[str] | None = None) -> None:
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level_name, logging.INFO))

    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()
    badge = BadgeSpec(size=args.badge_size, padding=args.padding)
    tuning = PlacementTuning(full_scan=args.full_scan)
    direction = LayoutDirection.RIGHT_TO_LEFT if args.rtl else LayoutDirection.LEFT_TO_RIGHT

    if args.batch_dir:
        from badge_overlay.core.batch import run_batch
        batch_dir = Path(args.batch_dir)
        if not batch_dir.is_absolute():
            batch_dir = repo_root / batch_dir
        out = run_batch(
            run_name=args.run_name,
            batch_dir=batch_dir,
            badge=badge,
            layout_direction=direction,
            tuning=tuning,
            limit=args.batch_limit,
            repo_root=repo_root,
            output_dir=args.output_dir,
            render=not args.no_render,
        )
        print(out / "index.csv")
        return

    shape, source = _load_input(args, repo_root)
    result = run_placement(shape, badge, direction, tuning)
    if not result.found:
        logger.info(f"No placement: {result.error_key}")

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    paths = [
        write_placement_json(report_dir, result, badge, source, direction),
        write_run_metadata_json(report_dir, args.run_name, source, badge, direction, tuning),
    ]
    if not args.no_render:
        from badge_overlay.core.render import render_debug
        debug_path = report_dir / "debug.png"
        render_debug(shape, result, badge, debug_path)
        paths.append(debug_path)

    for p in paths:
        print(p)
    print("Strategy used:", result.strategy)


if __name__ == "__main__":
    main()
