# app.py: tile map form, generate/remove endpoints, latest result view
from __future__ import annotations
import os
from typing import Any, Dict, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify

from config import CFG
from generator import ColliderGenerator, GenerateResult, MemoryHost
from io_files import write_coords, write_layout_view_html
from models import InvalidOccupancyError
from progress import as_json as progress_json, set_done, set_message
from render import render_result
from tilemap import OccupancySource

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_COORDS_FULL_PATH, COORDS_DIR, COORDS_FILENAME = _resolve_output_paths(
    CFG.COORDS_OUT, "colliders.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "collider_view.html"
)

# The tile map and its colliders live here between requests.
HOST = MemoryHost()

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "message": "Nothing generated yet.",
    "grid_label": "",
    "overlap": CFG.OVERLAP,
    "target": CFG.TARGET,
    "used_cells": 0,
    "rect_count": 0,
    "elapsed_str": "0s",
    "svg": "",
    "legend": "",
    "coords_filename": COORDS_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

app = Flask(__name__, static_folder=None, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return send_from_directory(BASE_DIR, "tilemap_form.html")


@app.route("/styles.css")
def styles_css():
    return send_from_directory(BASE_DIR, "styles.css")


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def _merge_like_mapping() -> Dict[str, Any]:
    """JSON body first, then form fields, then query args; single values only."""
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)
    for src in (request.form, request.args):
        for k in src.keys():
            merged.setdefault(k, src.get(k))
    return merged


def _int_field(like: Dict[str, Any], key: str) -> int:
    raw = like.get(key)
    if raw is None or str(raw).strip() == "":
        return 0
    try:
        return int(str(raw).strip())
    except ValueError:
        raise InvalidOccupancyError(f"{key} must be an integer, got {raw!r}")


def _run_from_request() -> Tuple[ColliderGenerator, GenerateResult]:
    like = _merge_like_mapping()
    origin = (_int_field(like, "origin_x"), _int_field(like, "origin_y"))
    HOST.source = OccupancySource.from_text(str(like.get("tilemap") or ""), origin=origin)
    generator = ColliderGenerator(
        HOST,
        overlap=like.get("overlap") or None,
        target=like.get("target") or None,
    )
    return generator, generator.generate()


def _record_result(generator: ColliderGenerator, result: GenerateResult) -> None:
    svg_markup, legend_html = render_result(HOST.source, result.rects)
    coords_name = COORDS_FILENAME
    layout_name = LAYOUT_FILENAME
    try:
        coords_path = write_coords(result.shapes, result.rects, result.bounds, BASE_DIR)
        coords_name = os.path.basename(coords_path) or COORDS_FILENAME
        layout_path = write_layout_view_html(svg_markup, legend_html, BASE_DIR)
        layout_name = os.path.basename(layout_path) or LAYOUT_FILENAME
    except OSError as e:
        set_message(f"could not write outputs: {e}")

    LAST_RESULT.update({
        "ok": True,
        "message": f"{len(result.rects)} colliders for {result.used_cells} tiles",
        "grid_label": result.bounds.label(),
        "overlap": generator.overlap.value,
        "target": generator.target.value,
        "used_cells": result.used_cells,
        "rect_count": len(result.rects),
        "elapsed_str": _fmt_elapsed(result.elapsed_sec),
        "svg": svg_markup,
        "legend": legend_html,
        "coords_filename": coords_name,
        "layout_filename": layout_name,
    })


def _record_failure(reason: str) -> None:
    set_done(False, reason=reason)
    LAST_RESULT.update({
        "ok": False,
        "message": reason,
        "grid_label": "",
        "used_cells": 0,
        "rect_count": 0,
        "elapsed_str": "0s",
        "svg": "",
        "legend": "",
    })


@app.route("/generate", methods=["POST"])
def generate():
    try:
        generator, result = _run_from_request()
    except ValueError as e:
        _record_failure(f"Bad tile map: {e}")
        return render_template("result.html", **LAST_RESULT), 400
    _record_result(generator, result)
    return render_template("result.html", **LAST_RESULT)


@app.route("/api/generate", methods=["POST"])
def api_generate():
    try:
        generator, result = _run_from_request()
    except ValueError as e:
        _record_failure(f"Bad tile map: {e}")
        return jsonify({"ok": False, "reason": str(e)}), 400
    _record_result(generator, result)
    b = result.bounds
    return jsonify({
        "ok": True,
        "overlap": generator.overlap.value,
        "target": generator.target.value,
        "bounds": {"x": b.x, "y": b.y, "w": b.w, "h": b.h},
        "rects": [{"x": r.x, "y": r.y, "w": r.w, "h": r.h} for r in result.rects],
        "shapes": [
            {"offset": [s.offset_x, s.offset_y], "size": [s.size_x, s.size_y]}
            for s in result.shapes
        ],
    })


@app.route("/remove", methods=["POST"])
def remove():
    removed = ColliderGenerator(HOST).remove_all()
    return jsonify({"ok": True, "removed": removed, "boxes": len(HOST.all_boxes())})


@app.route("/download/coords")
def download_coords():
    return send_from_directory(COORDS_DIR, COORDS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
