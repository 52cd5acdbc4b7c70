from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from .fonts import DEFAULT_FONT
from .themes import AnimationSpeed, AnimationStyle, BackgroundStyle, ColorTheme, TimeFormat

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "ASCII_CLOCK_CONFIG_DIR"
CONFIG_FILENAME = "config.yaml"
FONTS_SUBDIR = "fonts"


class ConfigError(Exception):
    pass


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as error:
        logger.warning("Failed to read config file %s: %s", path, error)
        return {}
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring config file %s: expected a mapping", path)
        return {}
    return data


def _merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def config_dir() -> Path:
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "ascii-clock"


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def fonts_dir() -> Path:
    return config_dir() / FONTS_SUBDIR


@dataclass
class ClockSettings:
    font: str = DEFAULT_FONT
    color_theme: ColorTheme = ColorTheme.CYAN
    time_format: TimeFormat = TimeFormat.TWENTY_FOUR_HOUR
    animation_style: AnimationStyle = AnimationStyle.NONE
    animation_speed: AnimationSpeed = AnimationSpeed.MEDIUM
    colon_blink: bool = False
    background_style: BackgroundStyle = BackgroundStyle.NONE
    fonts_dir: Optional[str] = None
    fps: float = 10.0

    def snapshot(self) -> "ClockSettings":
        return replace(self)

    def restore(self, snapshot: "ClockSettings") -> None:
        for item in fields(self):
            setattr(self, item.name, getattr(snapshot, item.name))

    def custom_fonts_dir(self) -> Path:
        if self.fonts_dir:
            return Path(self.fonts_dir).expanduser()
        return fonts_dir()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "font": self.font,
            "color_theme": self.color_theme.value,
            "time_format": self.time_format.value,
            "animation_style": self.animation_style.value,
            "animation_speed": self.animation_speed.value,
            "colon_blink": self.colon_blink,
            "background_style": self.background_style.value,
            "fonts_dir": self.fonts_dir,
            "fps": self.fps,
        }


DEFAULTS: Dict[str, Any] = ClockSettings().to_dict()


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _as_fps(value: Any) -> float:
    try:
        fps = float(value)
    except (TypeError, ValueError):
        fps = DEFAULTS["fps"]
    return _clamp(fps, 1.0, 60.0)


def build_settings(data: Dict[str, Any]) -> ClockSettings:
    merged = _merge_dict(DEFAULTS, data)
    font = merged.get("font") or DEFAULT_FONT
    fonts_location = merged.get("fonts_dir")
    return ClockSettings(
        font=str(font),
        color_theme=ColorTheme.parse(merged.get("color_theme")),
        time_format=TimeFormat.parse(merged.get("time_format")),
        animation_style=AnimationStyle.parse(merged.get("animation_style")),
        animation_speed=AnimationSpeed.parse(merged.get("animation_speed")),
        colon_blink=_as_bool(merged.get("colon_blink"), False),
        background_style=BackgroundStyle.parse(merged.get("background_style")),
        fonts_dir=str(fonts_location) if fonts_location else None,
        fps=_as_fps(merged.get("fps")),
    )


def load_config(path: Optional[Path] = None) -> ClockSettings:
    path = path or config_file_path()
    return build_settings(_load_yaml(path))


def save_config(settings: ClockSettings, path: Optional[Path] = None) -> Path:
    path = path or config_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(settings.to_dict(), sort_keys=False), encoding="utf-8")
    except OSError as error:
        raise ConfigError(f"Failed to save config to {path}: {error}") from error
    return path


def settings_options(settings: ClockSettings, overrides: Dict[str, Any]) -> ClockSettings:
    data = settings.to_dict()
    for key, value in overrides.items():
        if value is not None and key in data:
            data[key] = value
    return build_settings(data)
