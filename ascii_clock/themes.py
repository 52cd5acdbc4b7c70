from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypeVar

RGB = tuple[int, int, int]
E = TypeVar("E", bound="CyclicEnum")

RED: RGB = (255, 0, 0)
ORANGE: RGB = (255, 127, 0)
YELLOW: RGB = (255, 255, 0)
GREEN: RGB = (0, 255, 0)
CYAN: RGB = (0, 255, 255)
BLUE: RGB = (0, 0, 255)
MAGENTA: RGB = (255, 0, 255)
WHITE: RGB = (255, 255, 255)
RAINBOW: tuple[RGB, ...] = (RED, ORANGE, YELLOW, GREEN, CYAN, BLUE, MAGENTA)


def clamp_channel(value: float) -> int:
    return max(0, min(255, int(value)))


def progress(position: int, extent: int) -> float:
    if extent <= 0:
        return 0.0
    return max(0.0, min(1.0, position / extent))


class CyclicEnum(Enum):
    """Closed set of choices navigated in a fixed, explicit order."""

    @classmethod
    def cycle(cls: type[E]) -> tuple[E, ...]:
        return _CYCLES[cls]

    @classmethod
    def default(cls: type[E]) -> E:
        return _DEFAULTS.get(cls, cls.cycle()[0])

    @classmethod
    def parse(cls: type[E], value: Any, fallback: Optional[E] = None) -> E:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = "".join(ch for ch in value.lower() if ch.isalnum())
            for member in cls:
                candidates = (member.value, member.name, member.display_name)
                if any("".join(ch for ch in c.lower() if ch.isalnum()) == key for c in candidates):
                    return member
        return fallback if fallback is not None else cls.default()

    def next(self: E) -> E:
        order = self.cycle()
        return order[(order.index(self) + 1) % len(order)]

    def prev(self: E) -> E:
        order = self.cycle()
        return order[(order.index(self) - 1) % len(order)]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES.get(self, self.name.title())


class TimeFormat(CyclicEnum):
    TWENTY_FOUR_HOUR = "24h"
    TWELVE_HOUR = "12h"

    def toggle(self) -> "TimeFormat":
        return self.next()


class AnimationStyle(CyclicEnum):
    NONE = "none"
    SHIFTING = "shifting"
    PULSING = "pulsing"
    WAVE = "wave"
    REACTIVE = "reactive"


class BackgroundStyle(CyclicEnum):
    NONE = "none"
    STARFIELD = "starfield"
    MATRIX_RAIN = "matrix_rain"
    GRADIENT_WAVE = "gradient_wave"


@dataclass(frozen=True)
class SpeedProfile:
    shift_cycle_ms: int
    pulse_period_ms: int
    wave_period_ms: int
    flash_decay_ms: int
    star_twinkle_period_ms: int
    matrix_fall_speed: float
    gradient_scroll_period_ms: int


class AnimationSpeed(CyclicEnum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"

    @property
    def profile(self) -> SpeedProfile:
        return SPEED_PROFILES[self]


SPEED_PROFILES: dict[AnimationSpeed, SpeedProfile] = {
    AnimationSpeed.SLOW: SpeedProfile(
        shift_cycle_ms=30_000,
        pulse_period_ms=3_000,
        wave_period_ms=4_000,
        flash_decay_ms=800,
        star_twinkle_period_ms=500,
        matrix_fall_speed=0.5,
        gradient_scroll_period_ms=5_000,
    ),
    AnimationSpeed.MEDIUM: SpeedProfile(
        shift_cycle_ms=15_000,
        pulse_period_ms=1_500,
        wave_period_ms=2_000,
        flash_decay_ms=400,
        star_twinkle_period_ms=300,
        matrix_fall_speed=1.0,
        gradient_scroll_period_ms=3_000,
    ),
    AnimationSpeed.FAST: SpeedProfile(
        shift_cycle_ms=5_000,
        pulse_period_ms=750,
        wave_period_ms=1_000,
        flash_decay_ms=200,
        star_twinkle_period_ms=150,
        matrix_fall_speed=2.0,
        gradient_scroll_period_ms=1_500,
    ),
}


class ColorTheme(CyclicEnum):
    CYAN = "cyan"
    GREEN = "green"
    MAGENTA = "magenta"
    YELLOW = "yellow"
    RED = "red"
    BLUE = "blue"
    WHITE = "white"
    RAINBOW = "rainbow"
    RAINBOW_VERTICAL = "rainbow_vertical"
    GRADIENT_WARM = "gradient_warm"
    GRADIENT_COOL = "gradient_cool"
    GRADIENT_OCEAN = "gradient_ocean"
    GRADIENT_NEON = "gradient_neon"
    GRADIENT_FIRE = "gradient_fire"

    def is_dynamic(self) -> bool:
        return self in _GRADIENTS or self in (ColorTheme.RAINBOW, ColorTheme.RAINBOW_VERTICAL)

    def color(self) -> RGB:
        return _STATIC_COLORS[self]

    def color_at_position(self, x: int, y: int, width: int, height: int) -> RGB:
        if self is ColorTheme.RAINBOW:
            return _rainbow(x, width)
        if self is ColorTheme.RAINBOW_VERTICAL:
            return _rainbow(y, height)
        gradient = _GRADIENTS.get(self)
        if gradient is None:
            return self.color()
        return gradient(progress(x, width))


def _rainbow(position: int, extent: int) -> RGB:
    if extent <= 0:
        return RAINBOW[0]
    return RAINBOW[(max(position, 0) * len(RAINBOW) // extent) % len(RAINBOW)]


def _gradient_warm(p: float) -> RGB:
    if p < 0.5:
        return (255, clamp_channel(127.0 * (p * 2.0)), 0)
    return (255, clamp_channel(127 + int(128.0 * ((p - 0.5) * 2.0))), 0)


def _gradient_cool(p: float) -> RGB:
    if p < 0.5:
        return (0, clamp_channel(255.0 * (p * 2.0)), 255)
    return (0, 255, clamp_channel(255 - int(255.0 * ((p - 0.5) * 2.0))))


def _gradient_ocean(p: float) -> RGB:
    if p < 0.5:
        return (clamp_channel(100.0 * (p * 2.0)), clamp_channel(150.0 + 105.0 * (p * 2.0)), 255)
    return (100, 255, clamp_channel(255 - int(127.0 * ((p - 0.5) * 2.0))))


def _gradient_neon(p: float) -> RGB:
    return (clamp_channel(255 - int(255.0 * p)), clamp_channel(255.0 * p), 255)


def _gradient_fire(p: float) -> RGB:
    if p < 0.33:
        return (clamp_channel(128 + int(127.0 * (p * 3.0))), 0, 0)
    if p < 0.66:
        return (255, clamp_channel(165.0 * ((p - 0.33) * 3.0)), 0)
    return (255, clamp_channel(165 + int(90.0 * ((p - 0.66) * 3.0))), 0)


_GRADIENTS = {
    ColorTheme.GRADIENT_WARM: _gradient_warm,
    ColorTheme.GRADIENT_COOL: _gradient_cool,
    ColorTheme.GRADIENT_OCEAN: _gradient_ocean,
    ColorTheme.GRADIENT_NEON: _gradient_neon,
    ColorTheme.GRADIENT_FIRE: _gradient_fire,
}

_STATIC_COLORS: dict[ColorTheme, RGB] = {
    ColorTheme.CYAN: CYAN,
    ColorTheme.GREEN: GREEN,
    ColorTheme.MAGENTA: MAGENTA,
    ColorTheme.YELLOW: YELLOW,
    ColorTheme.RED: RED,
    ColorTheme.BLUE: BLUE,
    ColorTheme.WHITE: WHITE,
    ColorTheme.RAINBOW: MAGENTA,
    ColorTheme.RAINBOW_VERTICAL: MAGENTA,
    ColorTheme.GRADIENT_NEON: MAGENTA,
    ColorTheme.GRADIENT_WARM: RED,
    ColorTheme.GRADIENT_FIRE: RED,
    ColorTheme.GRADIENT_COOL: CYAN,
    ColorTheme.GRADIENT_OCEAN: CYAN,
}

_CYCLES: dict[type, tuple[Any, ...]] = {
    TimeFormat: (TimeFormat.TWENTY_FOUR_HOUR, TimeFormat.TWELVE_HOUR),
    AnimationStyle: (
        AnimationStyle.NONE,
        AnimationStyle.SHIFTING,
        AnimationStyle.PULSING,
        AnimationStyle.WAVE,
        AnimationStyle.REACTIVE,
    ),
    BackgroundStyle: (
        BackgroundStyle.NONE,
        BackgroundStyle.STARFIELD,
        BackgroundStyle.MATRIX_RAIN,
        BackgroundStyle.GRADIENT_WAVE,
    ),
    AnimationSpeed: (AnimationSpeed.SLOW, AnimationSpeed.MEDIUM, AnimationSpeed.FAST),
    ColorTheme: (
        ColorTheme.CYAN,
        ColorTheme.GREEN,
        ColorTheme.MAGENTA,
        ColorTheme.YELLOW,
        ColorTheme.RED,
        ColorTheme.BLUE,
        ColorTheme.WHITE,
        ColorTheme.RAINBOW,
        ColorTheme.RAINBOW_VERTICAL,
        ColorTheme.GRADIENT_WARM,
        ColorTheme.GRADIENT_COOL,
        ColorTheme.GRADIENT_OCEAN,
        ColorTheme.GRADIENT_NEON,
        ColorTheme.GRADIENT_FIRE,
    ),
}

_DEFAULTS: dict[type, Any] = {
    AnimationSpeed: AnimationSpeed.MEDIUM,
}

_DISPLAY_NAMES: dict[Any, str] = {
    TimeFormat.TWENTY_FOUR_HOUR: "24 Hour",
    TimeFormat.TWELVE_HOUR: "12 Hour",
    BackgroundStyle.MATRIX_RAIN: "Matrix",
    BackgroundStyle.GRADIENT_WAVE: "Gradient",
    ColorTheme.RAINBOW_VERTICAL: "Rainbow V",
    ColorTheme.GRADIENT_WARM: "Warm",
    ColorTheme.GRADIENT_COOL: "Cool",
    ColorTheme.GRADIENT_OCEAN: "Ocean",
    ColorTheme.GRADIENT_NEON: "Neon",
    ColorTheme.GRADIENT_FIRE: "Fire",
}
