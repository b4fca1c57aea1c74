"""One wallpaper run: load, fit, annotate, overlay, persist."""

from __future__ import annotations

import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

from PIL import Image

from termwall_countdown import CountdownEngine, CountdownSnapshot
from termwall_renderer import (
    FontResource,
    FrameSize,
    OverlayCompositor,
    OverlayResult,
    RenderSpec,
    ResourceError,
    draw_text_with_outline,
    fit_to_frame,
    load_image,
)

from .config import AppConfig
from .logging_setup import get_logger

MARGIN_PX = 12
CAPTION_FONT_SIZE = 20
LABEL_FONT_SIZE = 200
CAPTION_OUTLINE_PX = 2
LABEL_OUTLINE_PX = 6
CAPTION_FILL = (255, 255, 255, 255)
CAPTION_OUTLINE = (0, 0, 0, 127)


@dataclass
class RenderedFrame:
    image: Image.Image
    countdown: CountdownSnapshot | None = None
    overlay: OverlayResult | None = None


@dataclass(frozen=True)
class RunResult:
    source: Path
    output: Path
    size: tuple[int, int]
    label: str | None
    overlay_applied: bool
    duration_s: float


class WallpaperPipeline:
    """Single-threaded compositor for one source image per call."""

    def __init__(
        self,
        config: AppConfig,
        clock: Callable[[], datetime] | None = None,
        fonts: FontResource | None = None,
    ) -> None:
        self.config = config
        self.frame = FrameSize(config.display.width, config.display.height)
        self._clock = clock
        self._fonts = fonts
        self._logger = get_logger()

    @property
    def fonts(self) -> FontResource:
        if self._fonts is None:
            self._fonts = FontResource.load(self.config.general.ttf_font_path)
        return self._fonts

    @contextmanager
    def _stage(self, name: str, source: Path) -> Iterator[None]:
        try:
            yield
        except Exception:
            self._logger.error(
                f"stage {name} failed for {source}",
                extra={"event": "stage_failed", "stage": name, "source": source},
            )
            raise
        self._logger.debug(f"stage {name} done", extra={"event": "stage_ok", "stage": name, "source": source})

    def _baseline(self) -> int:
        return self.frame.height - self.config.display.taskbar_height - MARGIN_PX

    def render(self, image_path: str | Path) -> RenderedFrame:
        source = Path(image_path)
        with self._stage("load", source):
            image = load_image(source)
        with self._stage("fit", source):
            image = fit_to_frame(image, self.frame)
            canvas = image.convert("RGBA")
        with self._stage("font", source):
            fonts = self.fonts

        rendered = RenderedFrame(image=canvas)
        with self._stage("filename", source):
            self._draw_filename(canvas, fonts, source.stem)
        if self.config.schedule is not None:
            with self._stage("countdown", source):
                rendered.countdown = self._draw_countdown(canvas, fonts)
        if self.config.overlay is not None:
            with self._stage("overlay", source):
                compositor = OverlayCompositor(
                    fonts, self.frame, vertical_offset=self.config.display.taskbar_height // 2
                )
                rendered.overlay = compositor.apply(canvas, self.config.overlay.text)
        return rendered

    def _draw_filename(self, canvas: Image.Image, fonts: FontResource, name: str) -> None:
        width, height = fonts.measure(name, CAPTION_FONT_SIZE)
        spec = RenderSpec(
            text=name,
            x=self.frame.width - MARGIN_PX - width,
            y=self._baseline() - height,
            size=CAPTION_FONT_SIZE,
            fill=CAPTION_FILL,
            outline=CAPTION_OUTLINE,
            outline_width=CAPTION_OUTLINE_PX,
        )
        draw_text_with_outline(canvas, spec, fonts)

    def _draw_countdown(self, canvas: Image.Image, fonts: FontResource) -> CountdownSnapshot:
        assert self.config.schedule is not None
        snapshot = CountdownEngine(self.config.schedule, clock=self._clock).poll()
        _caption_w, caption_h = fonts.measure(snapshot.caption, CAPTION_FONT_SIZE)
        _label_w, label_h = fonts.measure(snapshot.label, LABEL_FONT_SIZE)
        caption_y = self._baseline() - caption_h
        draw_text_with_outline(
            canvas,
            RenderSpec(
                snapshot.caption, MARGIN_PX, caption_y, CAPTION_FONT_SIZE,
                snapshot.fill, snapshot.stroke, CAPTION_OUTLINE_PX,
            ),
            fonts,
        )
        draw_text_with_outline(
            canvas,
            RenderSpec(
                snapshot.label, MARGIN_PX, caption_y - MARGIN_PX - label_h, LABEL_FONT_SIZE,
                snapshot.fill, snapshot.stroke, LABEL_OUTLINE_PX,
            ),
            fonts,
        )
        self._logger.info(
            f"countdown {snapshot.label} ({snapshot.band.value})", extra={"event": "countdown_drawn"}
        )
        return snapshot

    def persist(self, image: Image.Image, output_path: str | Path) -> Path:
        """Write a PNG via a sibling temp file so a failed save never clobbers the old output."""
        output = Path(output_path)
        tmp: str | None = None
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".termwall-", suffix=".png", dir=output.parent)
            os.close(fd)
            image.save(tmp, format="PNG")
            os.replace(tmp, output)
        except OSError as exc:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            raise ResourceError(output, f"Failed to save processed image ({exc})") from exc
        return output

    def process(self, image_path: str | Path, output_path: str | Path) -> RunResult:
        start = time.perf_counter()
        source = Path(image_path)
        self._logger.info(f"processing {source}", extra={"event": "process_start", "source": source})
        rendered = self.render(source)
        with self._stage("persist", source):
            output = self.persist(rendered.image, output_path)
        elapsed = time.perf_counter() - start
        self._logger.info(
            f"saved {output} in {elapsed:.2f}s",
            extra={"event": "process_ok", "source": source, "output": output},
        )
        return RunResult(
            source=source,
            output=output,
            size=rendered.image.size,
            label=rendered.countdown.label if rendered.countdown else None,
            overlay_applied=rendered.overlay is not None,
            duration_s=elapsed,
        )
