"""Cross-platform desktop wallpaper application."""

from __future__ import annotations

import platform
import shutil
import subprocess
from pathlib import Path

from PIL import Image

from .errors import WallpaperError
from .logging_setup import get_logger

_SPI_SETDESKWALLPAPER = 0x0014
_SPIF_UPDATEINIFILE = 0x01
_SPIF_SENDCHANGE = 0x02
_DESKTOP_KEY = r"Control Panel\Desktop"
# "10" is Fill: scale to cover the screen and crop the overhang.
_WALLPAPER_STYLE_FILL = "10"


def ensure_blank_background(path: Path) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (1, 1), (0, 0, 0)).save(path, format="PNG")
    except OSError as exc:
        raise WallpaperError(f"Failed to save blank wallpaper to {path}: {exc}") from exc
    return path


def _run(cmd: list[str]) -> None:
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise WallpaperError(f"{cmd[0]} is not available") from exc
    except subprocess.CalledProcessError as exc:
        raise WallpaperError(f"{' '.join(cmd)} failed: {exc.stderr.strip() or exc.returncode}") from exc


def _set_windows_fill_style() -> None:
    import winreg  # type: ignore

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, _DESKTOP_KEY, 0, winreg.KEY_SET_VALUE) as key:
            winreg.SetValueEx(key, "WallpaperStyle", 0, winreg.REG_SZ, _WALLPAPER_STYLE_FILL)
            winreg.SetValueEx(key, "TileWallpaper", 0, winreg.REG_SZ, "0")
    except OSError as exc:
        raise WallpaperError(f"Failed to set the wallpaper style: {exc}") from exc


def _set_windows_wallpaper(path: Path) -> None:
    import ctypes  # type: ignore

    _set_windows_fill_style()
    ok = ctypes.windll.user32.SystemParametersInfoW(  # type: ignore[attr-defined]
        _SPI_SETDESKWALLPAPER, 0, str(path), _SPIF_UPDATEINIFILE | _SPIF_SENDCHANGE
    )
    if not ok:
        raise WallpaperError(f"SystemParametersInfoW refused {path}")


def _set_macos_wallpaper(path: Path) -> None:
    script = f'tell application "System Events" to tell every desktop to set picture to "{path}"'
    _run(["osascript", "-e", script])


def _set_linux_wallpaper(path: Path) -> None:
    if shutil.which("gsettings") is None:
        raise WallpaperError("No supported wallpaper backend found (gsettings missing)")
    uri = path.resolve().as_uri()
    _run(["gsettings", "set", "org.gnome.desktop.background", "picture-options", "zoom"])
    _run(["gsettings", "set", "org.gnome.desktop.background", "picture-uri", uri])
    _run(["gsettings", "set", "org.gnome.desktop.background", "picture-uri-dark", uri])


def set_wallpaper(path: Path) -> None:
    system = platform.system()
    if system == "Windows":
        _set_windows_wallpaper(path)
    elif system == "Darwin":
        _set_macos_wallpaper(path)
    else:
        _set_linux_wallpaper(path)


def apply_wallpaper(path: Path, blank_path: Path | None = None) -> None:
    """Point the desktop at ``path``.

    Desktops cache wallpapers by file path, and the output path never
    changes, so a blank image is set first when ``blank_path`` is given.
    """
    logger = get_logger()
    if blank_path is not None:
        set_wallpaper(ensure_blank_background(blank_path))
    set_wallpaper(path)
    logger.info(f"wallpaper set to {path}", extra={"event": "wallpaper_applied", "output": path})
