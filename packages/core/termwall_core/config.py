"""TOML settings schema, template and load helpers."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from termwall_countdown import ScheduleDateError, TermSchedule, build_schedule, parse_schedule_value, zone

from .errors import ConfigError

_TOML_DATE_ERROR = re.compile(r"Invalid date or datetime \(at line (\d+)")

WORKING_DIR_NAME = "Working"
CONFIG_FILE_NAME = "config.toml"

TOML_TEMPLATE = """\
[general]
# ttf_font_path = '/path/to/font.ttf'
# timezone = 'Europe/London'

# [display]
# width = 1920
# height = 1080
# taskbar_height = 40

# [countdown]
# term_start = <YYYY-MM-DD>
# term_last_lecture = <YYYY-MM-DD>
# first_paper = <YYYY-MM-DD>
# last_paper_end_time = <YYYY-MM-DD>T<HH:MM:SS>

# [overlay]
# text = ''
"""


@dataclass
class GeneralConfig:
    ttf_font_path: str = ""
    timezone: str | None = None


@dataclass
class DisplayConfig:
    width: int = 1920
    height: int = 1080
    taskbar_height: int = 40


@dataclass
class CountdownConfig:
    term_start: Any = None
    term_last_lecture: Any = None
    first_paper: Any = None
    last_paper_end_time: Any = None


@dataclass
class OverlayConfig:
    text: str = ""


@dataclass
class AppConfig:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    countdown: CountdownConfig | None = None
    overlay: OverlayConfig | None = None
    schedule: TermSchedule | None = None
    source: Path | None = None


def working_dir(image_dir: str | Path) -> Path:
    return Path(image_dir) / WORKING_DIR_NAME


def config_path(image_dir: str | Path) -> Path:
    return working_dir(image_dir) / CONFIG_FILE_NAME


def ensure_config_file(path: Path) -> bool:
    """Write the commented template when no file exists. Returns True if written."""
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(TOML_TEMPLATE, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to write configuration template to {path}: {exc}") from exc
    return True


def _merge(dataclass_type, raw: Any, section: str):
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_general(cfg: AppConfig, path: Path) -> None:
    font = cfg.general.ttf_font_path
    if not isinstance(font, str) or not font.strip():
        raise ConfigError(
            f"Please fix the TOML file at {path}: [general] ttf_font_path is required. "
            "(Is this the first time this program is run?)"
        )
    font_path = Path(font).expanduser()
    if not font_path.is_absolute():
        font_path = path.parent / font_path
    cfg.general.ttf_font_path = str(font_path)


def _normalize_display(cfg: AppConfig) -> None:
    try:
        cfg.display.width = int(cfg.display.width)
        cfg.display.height = int(cfg.display.height)
        cfg.display.taskbar_height = max(0, int(cfg.display.taskbar_height))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"[display] values must be integers: {exc}") from exc
    if cfg.display.width < 1 or cfg.display.height < 1:
        raise ConfigError(f"[display] size must be positive, got {cfg.display.width}x{cfg.display.height}")


def _normalize_overlay(cfg: AppConfig) -> None:
    if cfg.overlay is None:
        return
    if not isinstance(cfg.overlay.text, str):
        raise ConfigError("[overlay] text must be a string")
    if not cfg.overlay.text.strip():
        cfg.overlay = None


def _build_schedule(cfg: AppConfig) -> None:
    if cfg.countdown is None:
        return
    missing = [k for k, v in vars(cfg.countdown).items() if v is None]
    if missing:
        raise ConfigError(f"[countdown] is missing {', '.join(missing)}")
    c = cfg.countdown
    cfg.schedule = build_schedule(
        term_start=c.term_start,
        term_last_lecture=c.term_last_lecture,
        first_paper=c.first_paper,
        last_paper_end_time=c.last_paper_end_time,
        tz=zone(cfg.general.timezone),
    )


def _schedule_date_error(exc: tomllib.TOMLDecodeError, text: str) -> ScheduleDateError | None:
    """Re-parse a schedule value tomllib rejected, to report which field is out of range."""
    match = _TOML_DATE_ERROR.search(str(exc))
    if match is None:
        return None
    lines = text.splitlines()
    lineno = int(match.group(1))
    if not 1 <= lineno <= len(lines):
        return None
    key, sep, value = lines[lineno - 1].partition("=")
    key = key.strip()
    if not sep or key not in vars(CountdownConfig()):
        return None
    try:
        parse_schedule_value(value.split("#", 1)[0].strip(), key)
    except ScheduleDateError as err:
        return err
    return None


def parse_config(raw: dict[str, Any], path: Path) -> AppConfig:
    cfg = AppConfig(
        general=_merge(GeneralConfig, raw.get("general", {}), "general"),
        display=_merge(DisplayConfig, raw.get("display", {}), "display"),
        countdown=_merge(CountdownConfig, raw["countdown"], "countdown") if "countdown" in raw else None,
        overlay=_merge(OverlayConfig, raw["overlay"], "overlay") if "overlay" in raw else None,
        source=path,
    )
    _normalize_general(cfg, path)
    _normalize_display(cfg)
    _normalize_overlay(cfg)
    _build_schedule(cfg)
    return cfg


def load_config(path: Path) -> AppConfig:
    """Read, validate and resolve the settings file at ``path``.

    A missing file is replaced by the commented template first, which then
    fails validation until a font path is filled in. Schedule date and order
    errors propagate from ``termwall_countdown`` unchanged.
    """
    ensure_config_file(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration from {path}: {exc}") from exc
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        date_error = _schedule_date_error(exc, text)
        if date_error is not None:
            raise date_error from exc
        raise ConfigError(f"Please fix the TOML file at {path}: {exc}") from exc
    return parse_config(raw, path)
