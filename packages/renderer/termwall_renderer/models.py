"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Rgba = tuple[int, int, int, int]


@dataclass(frozen=True)
class FrameSize:
    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class RenderSpec:
    text: str
    x: int
    y: int
    size: int
    fill: Rgba
    outline: Rgba
    outline_width: int


@dataclass(frozen=True)
class TextExtent:
    width: int
    height: int
    left: int
    top: int


class FitOutcome(str, Enum):
    FITS_WIDTH = "FitsWidth"
    FITS_HEIGHT = "FitsHeight"
    FITS_EXACTLY = "FitsExactly"
    UNREACHABLE = "Unreachable"
