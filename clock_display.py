import argparse
import asyncio
import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from ascii_clock.clock_face import ClockFace
from ascii_clock.config import ClockSettings, ConfigError, load_config, save_config, settings_options
from ascii_clock.fonts import FontRegistry
from ascii_clock.preview import CLEAR_SCREEN, CURSOR_HOME, HIDE_CURSOR, SHOW_CURSOR, frame_to_ansi, save_snapshot
from ascii_clock.themes import AnimationSpeed, AnimationStyle, BackgroundStyle, ColorTheme, TimeFormat

logger = logging.getLogger("clock_display")


def canvas_size(width: Optional[int], height: Optional[int]) -> tuple[int, int]:
    terminal = shutil.get_terminal_size((80, 24))
    columns = width if width else terminal.columns
    rows = height if height else max(terminal.lines - 1, 1)
    return (max(1, columns), max(1, rows))


def build_registry(settings: ClockSettings) -> FontRegistry:
    registry = FontRegistry()
    loaded = registry.load_custom_fonts(settings.custom_fonts_dir())
    if loaded:
        logger.info("Loaded custom fonts: %s", ", ".join(loaded))
    resolved = registry.find(settings.font)
    if resolved is None:
        logger.warning("Unknown font %r, falling back to the default", settings.font)
    else:
        settings.font = resolved
    return registry


async def run_clock(face: ClockFace, width: Optional[int], height: Optional[int]) -> None:
    loop = asyncio.get_running_loop()
    start_time = loop.time()
    frame_interval = 1.0 / face.settings.fps
    out = sys.stdout
    out.write(HIDE_CURSOR + CLEAR_SCREEN)
    try:
        while True:
            frame_start = loop.time()
            columns, rows = canvas_size(width, height)
            elapsed_ms = int((frame_start - start_time) * 1000)
            frame = face.render(datetime.now(), elapsed_ms, columns, rows)
            out.write(CURSOR_HOME + frame_to_ansi(frame))
            out.flush()
            await asyncio.sleep(max(0.0, frame_interval - (loop.time() - frame_start)))
    finally:
        out.write(SHOW_CURSOR + "\n")
        out.flush()


def render_snapshot(face: ClockFace, path: Path, width: Optional[int], height: Optional[int], elapsed_ms: int) -> None:
    columns, rows = canvas_size(width, height)
    frame = face.render(datetime.now(), elapsed_ms, columns, rows)
    save_snapshot(frame, path)
    logger.info("Snapshot written to %s (%dx%d cells)", path, columns, rows)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ASCII-art terminal clock")
    parser.add_argument("--config", type=Path, help="Path to config file")
    parser.add_argument("--font")
    parser.add_argument("--theme", choices=[theme.value for theme in ColorTheme])
    parser.add_argument("--animation", choices=[style.value for style in AnimationStyle])
    parser.add_argument("--speed", choices=[speed.value for speed in AnimationSpeed])
    parser.add_argument("--background", choices=[style.value for style in BackgroundStyle])
    parser.add_argument("--format", choices=[fmt.value for fmt in TimeFormat])
    parser.add_argument("--colon-blink", choices=("on", "off"))
    parser.add_argument("--fps", type=float)
    parser.add_argument("--width", type=int, help="Canvas width in cells (default: terminal width)")
    parser.add_argument("--height", type=int, help="Canvas height in cells (default: terminal height)")
    parser.add_argument("--snapshot", type=Path, help="Render a single frame to a PNG file and exit")
    parser.add_argument("--elapsed", type=int, default=0, help="Animation time in ms used for --snapshot")
    parser.add_argument("--list-fonts", action="store_true")
    parser.add_argument("--save", action="store_true", help="Persist the effective settings")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def build_override_map(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {
        "font": args.font,
        "color_theme": args.theme,
        "animation_style": args.animation,
        "animation_speed": args.speed,
        "background_style": args.background,
        "time_format": args.format,
        "fps": args.fps,
    }
    if args.colon_blink == "on":
        overrides["colon_blink"] = True
    elif args.colon_blink == "off":
        overrides["colon_blink"] = False
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    settings = settings_options(load_config(args.config), build_override_map(args))
    registry = build_registry(settings)
    if args.list_fonts:
        for name in registry.list_fonts():
            print(name)
        return 0
    if args.save:
        try:
            path = save_config(settings, args.config)
        except ConfigError as error:
            logger.error("%s", error)
            return 1
        logger.info("Settings saved to %s", path)
    face = ClockFace(registry, settings)
    if args.snapshot:
        render_snapshot(face, args.snapshot, args.width, args.height, args.elapsed)
        return 0
    try:
        asyncio.run(run_clock(face, args.width, args.height))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
