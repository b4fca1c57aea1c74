"""CLI entrypoints for rendering, applying and diagnosing term countdown wallpapers."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from termwall_core import (
    TermwallError,
    WallpaperPipeline,
    apply_wallpaper,
    build_doctor_payload,
    choose_image,
    config_path,
    load_config,
    working_dir,
)
from termwall_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from termwall_countdown import CountdownError
from termwall_renderer import InvariantViolation, RenderError

EXIT_INPUT_ERROR = 1
EXIT_INTERNAL_ERROR = 70


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _default_dir() -> str:
    return os.environ.get("TERMWALL_DIR", ".")


def cmd_run(args: argparse.Namespace) -> int:
    image_dir = Path(args.dir).expanduser()
    cfg = load_config(config_path(image_dir))
    chosen = choose_image(image_dir)
    output = working_dir(image_dir) / "current.png"

    result = WallpaperPipeline(cfg).process(chosen, output)
    if not args.no_apply:
        apply_wallpaper(output, blank_path=working_dir(image_dir) / "blank.png")
    print(f"{result.source.name} -> {result.output}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    cfg_path = Path(args.config).expanduser() if args.config else config_path(Path(args.image).expanduser().parent)
    cfg = load_config(cfg_path)
    result = WallpaperPipeline(cfg).process(Path(args.image).expanduser(), Path(args.output).expanduser())
    _print_json(
        {
            "source": result.source,
            "output": result.output,
            "size": list(result.size),
            "label": result.label,
            "overlay_applied": result.overlay_applied,
            "duration_s": round(result.duration_s, 3),
        }
    )
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    _print_json(build_doctor_payload(Path(args.dir).expanduser()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termwall", description="Term countdown desktop wallpaper")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Pick a random image, render it and set it as the wallpaper")
    run_cmd.add_argument("-d", "--dir", default=_default_dir(), help="Path to directory containing the images")
    run_cmd.add_argument("--no-apply", action="store_true", help="Render Working/current.png without setting it")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render one image to an explicit output path")
    render_cmd.add_argument("--image", required=True, help="Source image")
    render_cmd.add_argument("--output", required=True, help="Destination PNG")
    render_cmd.add_argument("--config", default=None, help="Settings file (default: <image dir>/Working/config.toml)")
    render_cmd.set_defaults(func=cmd_render)

    doctor_cmd = sub.add_parser("doctor", help="Print resolved paths, settings and countdown state")
    doctor_cmd.add_argument("-d", "--dir", default=_default_dir(), help="Path to directory containing the images")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(console=False, verbose=args.verbose)
    install_crash_hooks()
    logger = get_logger()
    try:
        return int(args.func(args))
    except InvariantViolation as exc:
        logger.critical(f"internal error: {exc}", exc_info=True, extra={"event": "invariant_violation"})
        print(f"internal error: {exc}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    except (TermwallError, CountdownError, RenderError) as exc:
        logger.error(str(exc), extra={"event": "run_failed"})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
