# badge_overlay/core/io.py
"""
Load element shapes: WKT polygons (shapely), SVG path data (svgpathtools),
plain "x,y,w,h" rectangles. Invalid polygons are fixed with buffer(0) when possible.
"""

from __future__ import annotations

import re
from pathlib import Path

import numpy as np
from shapely import wkt
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from badge_overlay.core.config import SVG_ARC_STEPS
from badge_overlay.core.geometry import (
    BezierPath,
    close_path,
    cubic_to,
    line_to,
    move_to,
    path_from_geometry,
    quad_to,
)
from badge_overlay.core.types import PathSegment, PathShape, Rect, RectShape, Shape, WindingRule

_PATH_D_RE = re.compile(r'<path[^>]*\sd\s*=\s*"([^"]+)"[^>]*/?\s*>', re.IGNORECASE)
_FILL_RULE_RE = re.compile(r'fill-rule\s*[=:]\s*"?\s*(nonzero|evenodd)', re.IGNORECASE)


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Absolute path for a shape file; relative paths hang off repo_root when given."""
    candidate = Path(path)
    if repo_root is not None and not candidate.is_absolute():
        candidate = repo_root / candidate
    return candidate.resolve()


def read_text(path: str | Path, repo_root: Path | None = None) -> str:
    shape_file = _resolve_path(path, repo_root)
    if not shape_file.exists():
        raise FileNotFoundError(f"Shape file not found: {shape_file}")
    return shape_file.read_text(encoding="utf-8").strip()


_WKT_AREAL_PREFIXES = ("MULTIPOLYGON", "POLYGON", "GEOMETRYCOLLECTION")


def _leading_wkt(text: str) -> str:
    """Cut an areal WKT string after its outermost closing paren; anything else passes through."""
    text = text.strip()
    head = text.upper()
    prefix = next((p for p in _WKT_AREAL_PREFIXES if head.startswith(p)), None)
    if prefix is None:
        return text
    open_parens = 0
    for pos in range(len(prefix), len(text)):
        ch = text[pos]
        if ch == "(":
            open_parens += 1
        elif ch == ")":
            open_parens -= 1
            if open_parens == 0:
                return text[: pos + 1].strip()
    return text


def parse_wkt(wkt_string: str) -> BaseGeometry:
    """Parse WKT, ignoring trailing text after the first geometry. No validity fix here."""
    return wkt.loads(_leading_wkt(wkt_string))


def _polygon_parts(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        return [part for sub in geom.geoms for part in _polygon_parts(sub)]
    return []


def validate_geometry(geom: BaseGeometry) -> BaseGeometry:
    """
    Reduce a geometry to its valid polygonal area (Polygon or MultiPolygon).
    Self-intersecting parts go through buffer(0). Raises ValueError when no area remains.
    """
    if geom is None or geom.is_empty:
        raise ValueError("Shape geometry is empty")
    parts = _polygon_parts(geom)
    if not parts:
        raise ValueError(f"Shape geometry has no polygonal area ({geom.geom_type})")
    repaired: list[Polygon] = []
    for part in parts:
        repaired.extend(_polygon_parts(part if part.is_valid else part.buffer(0)))
    if not repaired:
        raise ValueError("Shape geometry has no area left after repair")
    return repaired[0] if len(repaired) == 1 else MultiPolygon(repaired)


def shape_from_wkt(wkt_string: str) -> PathShape:
    """WKT polygon(s) as a path shape (holes preserved)."""
    geom = validate_geometry(parse_wkt(wkt_string))
    return PathShape(path_from_geometry(geom))


def load_wkt(path: str | Path, repo_root: Path | None = None) -> PathShape:
    """Read a .wkt file and return it as a validated path shape."""
    return shape_from_wkt(read_text(path, repo_root))


def _pt(z: complex) -> tuple[float, float]:
    return (float(z.real), float(z.imag))


def parse_svg_path(d: str, arc_steps: int = SVG_ARC_STEPS) -> BezierPath:
    """
    SVG path data to a BezierPath. Every continuous subpath is closed; an
    explicit final line back to the subpath start is folded into the close.
    Elliptical arcs are flattened into arc_steps lines.
    """
    try:
        svg_path = parse_path(d)
    except Exception as e:
        raise ValueError(f"Invalid SVG path data: {e}") from e
    if len(svg_path) == 0:
        raise ValueError("SVG path data has no segments")

    segments: list[PathSegment] = []
    for sub in svg_path.continuous_subpaths():
        start = sub[0].start
        segments.append(move_to(*_pt(start)))
        last = len(sub) - 1
        for i, seg in enumerate(sub):
            if isinstance(seg, Line):
                if i == last and seg.end == start:
                    continue
                segments.append(line_to(*_pt(seg.end)))
            elif isinstance(seg, QuadraticBezier):
                segments.append(quad_to(*_pt(seg.control), *_pt(seg.end)))
            elif isinstance(seg, CubicBezier):
                segments.append(cubic_to(*_pt(seg.control1), *_pt(seg.control2), *_pt(seg.end)))
            elif isinstance(seg, Arc):
                for t in np.linspace(0.0, 1.0, arc_steps + 1)[1:]:
                    segments.append(line_to(*_pt(seg.point(float(t)))))
        segments.append(close_path())
    return BezierPath(segments)


def shape_from_svg(svg_text: str) -> PathShape:
    """First <path d="..."> of an SVG document; honours a fill-rule attribute."""
    match = _PATH_D_RE.search(svg_text)
    if not match:
        raise ValueError("No <path d=...> element found in SVG")
    rule = WindingRule.NONZERO
    rule_match = _FILL_RULE_RE.search(match.group(0))
    if rule_match and rule_match.group(1).lower() == "evenodd":
        rule = WindingRule.EVEN_ODD
    return PathShape(parse_svg_path(match.group(1)), winding_rule=rule)


def parse_rect(s: str) -> RectShape:
    """'x,y,w,h' (commas or spaces) to a rectangle shape."""
    parts = [p for p in re.split(r"[,\s]+", (s or "").strip()) if p]
    if len(parts) != 4:
        raise ValueError(f"Rectangle must be 'x,y,w,h', got {s!r}")
    try:
        x, y, w, h = (float(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Rectangle must be numeric 'x,y,w,h', got {s!r}") from e
    if w <= 0 or h <= 0:
        raise ValueError(f"Rectangle width and height must be positive, got {s!r}")
    return RectShape(Rect.from_xywh(x, y, w, h))


def load_shape(path: str | Path, repo_root: Path | None = None) -> Shape:
    """
    Load a shape file by suffix: .wkt (WKT polygon), .svg (first <path>),
    .svgd (raw path data), .rect ('x,y,w,h').
    Raises FileNotFoundError if path is missing, ValueError on bad content.
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".wkt":
        return load_wkt(path, repo_root)
    text = read_text(path, repo_root)
    if suffix == ".svg":
        return shape_from_svg(text)
    if suffix == ".svgd":
        return PathShape(parse_svg_path(text))
    if suffix == ".rect":
        return parse_rect(text)
    raise ValueError(f"Unsupported shape file type: {suffix or '(none)'}")


SHAPE_SUFFIXES: tuple[str, ...] = (".wkt", ".svg", ".svgd", ".rect")
