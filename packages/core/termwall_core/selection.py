"""Source image discovery and random selection."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Callable, Sequence

from PIL import Image

from .errors import SelectionError

Picker = Callable[[Sequence[Path]], Path]


def _image_suffixes() -> set[str]:
    return {ext.lower() for ext, fmt in Image.registered_extensions().items() if fmt in Image.OPEN}


def list_candidates(directory: str | Path) -> list[Path]:
    """Regular files in ``directory`` (not recursive) that Pillow can open, sorted by name."""
    root = Path(directory)
    if not root.is_dir():
        raise SelectionError(f'Directory "{root}" does not exist')
    suffixes = _image_suffixes()
    return sorted(p for p in root.iterdir() if p.is_file() and p.suffix.lower() in suffixes)


def choose_image(directory: str | Path, pick: Picker = random.choice) -> Path:
    candidates = list_candidates(directory)
    if not candidates:
        raise SelectionError(f'Directory "{directory}" contains no images')
    return pick(candidates)
