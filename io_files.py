"""Helpers for writing generated colliders to disk."""

from __future__ import annotations

import os
from typing import List

from config import CFG
from models import Bounds, BoxShape, Rect


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_coords(shapes: List[BoxShape], rects: List[Rect], bounds: Bounds, base_dir: str) -> str:
    """Write one line per collider: cell rectangle and world-space box."""

    path = _resolve_output_path(base_dir, CFG.COORDS_OUT, "colliders.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"# region {bounds.label()}\n")
        if not shapes:
            f.write("No colliders\n")
        else:
            for i, (shape, r) in enumerate(zip(shapes, rects), start=1):
                f.write(
                    f"#{i} cells ({r.x},{r.y}) {r.w}×{r.h} -> "
                    f"offset ({shape.offset_x:.2f},{shape.offset_y:.2f}) "
                    f"size ({shape.size_x:.2f}×{shape.size_y:.2f})\n"
                )
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "collider_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Collider View</title>
<link rel='stylesheet' href='/styles.css'></head>
<body class='container'>
<h1>Collider View</h1>
<section class='card'>{svg}</section>
<section class='card'><h3>Colliders</h3><ol>{legend_html}</ol></section>
</body></html>"""
        )
    return path


__all__ = ["write_coords", "write_layout_view_html"]
