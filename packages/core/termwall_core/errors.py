"""Application-level errors raised outside the rendering core."""

from __future__ import annotations


class TermwallError(Exception):
    pass


class ConfigError(TermwallError):
    pass


class SelectionError(TermwallError):
    pass


class WallpaperError(TermwallError):
    pass
