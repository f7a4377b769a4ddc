from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global run state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = os.environ.get("COLLIDER_STATE_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "collider_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("colliders.run_log")
    if logger.handlers:
        return logger

    configured = os.environ.get("COLLIDER_LOG_FILE")
    if configured:
        log_path = Path(configured)
    else:
        log_path = Path(__file__).resolve().parent / "logs" / "collider_runs.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except OSError:
        # No log file; runs continue without the audit trail.
        logger.handlers.clear()
    return logger


RUN_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(RUN_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.3f}s"
    except (TypeError, ValueError):
        return None


def log_event(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            RUN_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            RUN_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to callers.
        pass


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        try:
            _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
        except OSError:
            _LAST_STATE_MTIME = time.time()
    except OSError:
        # Persistence must never break a generate run.
        pass


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime


# Single source of truth for /progress
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Generating | Done | Error
    "grid": "",                # e.g. "12 × 4 cells @ (-3,0)"
    "overlap": "",             # Allowed | NotAllowed
    "target": "",              # UseHostObject | CreateChildContainer
    "used_cells": 0,           # occupied cells in the region
    "rect_count": 0,           # rectangles emitted
    "elapsed_start": None,     # t0 (float) when the run started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # success flag if known
    "run_id": 0,               # monotonically increasing identifier
}

LOG_STATE: Dict[str, Any] = {"run_start": None}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None and not PROGRESS.get("done"):
        PROGRESS["elapsed"] = _now() - float(t0)

def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except (TypeError, ValueError):
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "grid": "",
            "overlap": "",
            "target": "",
            "used_cells": 0,
            "rect_count": 0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": current_run_id + 1,
        })
        LOG_STATE["run_start"] = None
        log_event("Run state reset", run_id=PROGRESS["run_id"])
        _persist_locked()

def start_timer() -> None:
    with PROGRESS_LOCK:
        now = _now()
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        LOG_STATE["run_start"] = now
        log_event("Run started", run_id=PROGRESS["run_id"])
        _persist_locked()

# ------------------------------
# Setters
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()

def set_grid(v: Any) -> None:
    with PROGRESS_LOCK:
        grid_str = "" if v is None else str(v)
        if grid_str != PROGRESS["grid"] and grid_str:
            log_event("Grid built", grid=grid_str)
        PROGRESS["grid"] = grid_str
        _persist_locked()

def set_policy(overlap: Any, target: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["overlap"] = "" if overlap is None else str(getattr(overlap, "value", overlap))
        PROGRESS["target"] = "" if target is None else str(getattr(target, "value", target))
        _persist_locked()

def set_counts(used_cells: Any, rect_count: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["used_cells"] = max(0, int(used_cells))
        PROGRESS["rect_count"] = max(0, int(rect_count))
        _persist_locked()

def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)
        _persist_locked()

def set_done(ok: bool = True, *, reason: Any = None) -> None:
    """Mark the run complete; ``reason`` is surfaced via ``message``."""

    with PROGRESS_LOCK:
        now = _now()
        _touch_elapsed_locked()
        PROGRESS["status"] = "Done" if ok else "Error"
        PROGRESS["ok"] = bool(ok)
        PROGRESS["done"] = True
        if reason is not None:
            PROGRESS["message"] = str(reason)
        run_start = LOG_STATE.get("run_start")
        total = max(0.0, now - float(run_start)) if isinstance(run_start, (int, float)) else None
        LOG_STATE["run_start"] = None
        log_event(
            "Run finished",
            status=PROGRESS["status"],
            grid=PROGRESS["grid"],
            overlap=PROGRESS["overlap"],
            used=PROGRESS["used_cells"],
            rects=PROGRESS["rect_count"],
            duration=_fmt_seconds(total),
            message=PROGRESS["message"],
        )
        _persist_locked()

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        out = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        out["elapsed_str"] = _fmt_seconds(PROGRESS["elapsed"]) or "0.000s"
        return out

def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
