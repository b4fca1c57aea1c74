"""Core app services for settings, selection, the render pipeline and wallpaper application."""

from .config import AppConfig, config_path, load_config, working_dir
from .diagnostics import build_doctor_payload
from .errors import ConfigError, SelectionError, TermwallError, WallpaperError
from .pipeline import RenderedFrame, RunResult, WallpaperPipeline
from .selection import choose_image, list_candidates
from .wallpaper import apply_wallpaper, ensure_blank_background

__all__ = [
    "AppConfig",
    "ConfigError",
    "RenderedFrame",
    "RunResult",
    "SelectionError",
    "TermwallError",
    "WallpaperError",
    "WallpaperPipeline",
    "apply_wallpaper",
    "build_doctor_payload",
    "choose_image",
    "config_path",
    "ensure_blank_background",
    "list_candidates",
    "load_config",
    "working_dir",
]
