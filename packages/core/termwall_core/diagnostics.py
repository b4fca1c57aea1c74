"""Doctor payload summarising paths, settings and the current countdown."""

from __future__ import annotations

import platform
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from PIL import __version__ as pillow_version

from termwall_countdown import CountdownEngine, CountdownError

from .config import config_path, load_config, working_dir
from .errors import TermwallError
from .logging_setup import log_dir
from .selection import list_candidates


def _countdown(cfg) -> dict[str, Any] | None:
    if cfg.schedule is None:
        return None
    try:
        snap = CountdownEngine(cfg.schedule).poll()
    except CountdownError as exc:
        return {"error": str(exc)}
    return {
        "label": snap.label,
        "band": snap.band.value,
        "caption": snap.caption,
        "fill": list(snap.fill),
        "stroke": list(snap.stroke),
    }


def build_doctor_payload(image_dir: str | Path) -> dict[str, Any]:
    image_dir = Path(image_dir)
    path = config_path(image_dir)
    payload: dict[str, Any] = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "pillow": pillow_version,
        "image_dir": str(image_dir),
        "working_dir": str(working_dir(image_dir)),
        "config_path": str(path),
        "log_dir": str(log_dir()),
    }

    try:
        payload["candidates"] = len(list_candidates(image_dir))
    except TermwallError as exc:
        payload["candidates"] = {"error": str(exc)}

    try:
        cfg = load_config(path)
    except (TermwallError, CountdownError) as exc:
        payload["config"] = {"error": str(exc)}
        return payload

    payload["config"] = {
        "general": asdict(cfg.general),
        "display": asdict(cfg.display),
        "overlay": asdict(cfg.overlay) if cfg.overlay else None,
        "font_exists": Path(cfg.general.ttf_font_path).is_file(),
    }
    if cfg.schedule is not None:
        payload["schedule"] = {
            "term_start": cfg.schedule.term_start.isoformat(),
            "term_last_lecture": cfg.schedule.term_last_lecture.isoformat(),
            "first_paper": cfg.schedule.first_paper.isoformat(),
            "last_paper_end_time": cfg.schedule.last_paper_end_time.isoformat(),
            "tz": str(cfg.schedule.tz),
        }
    payload["countdown"] = _countdown(cfg)
    return payload
