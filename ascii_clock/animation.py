from __future__ import annotations
import colorsys
import math
from dataclasses import dataclass
from typing import Optional
from .themes import RGB, AnimationSpeed, AnimationStyle, clamp_channel

HOUR_FLASH = 1.0
MINUTE_FLASH = 0.7
SECOND_FLASH = 0.3
FLASH_CUTOFF = 0.01
BLINK_PERIOD_MS = 1000
BLINK_ON_MS = 500


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Return (hue in degrees, saturation, lightness) for an 8-bit colour."""
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return (h * 360.0, s, l)


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    s = max(0.0, min(1.0, s))
    l = max(0.0, min(1.0, l))
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, l, s)
    return (clamp_channel(round(r * 255)), clamp_channel(round(g * 255)), clamp_channel(round(b * 255)))


def _phase(elapsed_ms: int, period_ms: int) -> float:
    return (max(elapsed_ms, 0) % period_ms) / period_ms


def _scale(color: RGB, factor: float) -> RGB:
    return (clamp_channel(color[0] * factor), clamp_channel(color[1] * factor), clamp_channel(color[2] * factor))


def shift_hue(color: RGB, elapsed_ms: int, speed: AnimationSpeed) -> RGB:
    h, s, l = rgb_to_hsl(*color)
    offset = _phase(elapsed_ms, speed.profile.shift_cycle_ms) * 360.0
    return hsl_to_rgb((h + offset) % 360.0, s, l)


def pulse(color: RGB, elapsed_ms: int, speed: AnimationSpeed) -> RGB:
    phase = _phase(elapsed_ms, speed.profile.pulse_period_ms)
    brightness = 0.5 + 0.5 * math.sin(phase * 2.0 * math.pi)
    return _scale(color, 0.3 + 0.7 * brightness)


def wave(color: RGB, elapsed_ms: int, speed: AnimationSpeed, x: int, width: int) -> RGB:
    time_phase = _phase(elapsed_ms, speed.profile.wave_period_ms)
    x_phase = x / width if width > 0 else 0.0
    return _scale(color, 0.6 + 0.4 * math.sin((x_phase + time_phase) * 2.0 * math.pi))


def flash(color: RGB, stimulus: float) -> RGB:
    return _scale(color, 1.0 + max(0.0, min(1.0, stimulus)))


def apply_animation(
    color: RGB,
    style: AnimationStyle,
    speed: AnimationSpeed,
    elapsed_ms: int,
    x: int = 0,
    width: int = 0,
    stimulus: float = 0.0,
) -> RGB:
    if style is AnimationStyle.SHIFTING:
        return shift_hue(color, elapsed_ms, speed)
    if style is AnimationStyle.PULSING:
        return pulse(color, elapsed_ms, speed)
    if style is AnimationStyle.WAVE:
        return wave(color, elapsed_ms, speed, x, width)
    if style is AnimationStyle.REACTIVE:
        return flash(color, stimulus)
    return color


def is_colon_visible(elapsed_ms: int) -> bool:
    return max(elapsed_ms, 0) % BLINK_PERIOD_MS < BLINK_ON_MS


@dataclass
class FlashState:
    """Decaying brightness stimulus triggered by clock ticks."""

    last_hour: Optional[int] = None
    last_minute: Optional[int] = None
    last_second: Optional[int] = None
    intensity: float = 0.0
    flash_start_ms: Optional[int] = None

    def update(self, hour: int, minute: int, second: int, now_ms: int, speed: AnimationSpeed) -> float:
        if self.last_hour is None:
            self.last_hour, self.last_minute, self.last_second = hour, minute, second
        elif hour != self.last_hour:
            self._trigger(HOUR_FLASH, now_ms)
            self.last_hour, self.last_minute, self.last_second = hour, minute, second
        elif minute != self.last_minute:
            self._trigger(MINUTE_FLASH, now_ms)
            self.last_minute, self.last_second = minute, second
        elif second != self.last_second:
            self._trigger(SECOND_FLASH, now_ms)
            self.last_second = second
        if self.flash_start_ms is not None:
            decay_ms = speed.profile.flash_decay_ms
            progress = min(max(now_ms - self.flash_start_ms, 0) / decay_ms, 1.0)
            self.intensity *= 1.0 - progress
            if self.intensity < FLASH_CUTOFF:
                self.intensity = 0.0
                self.flash_start_ms = None
        return self.intensity

    def _trigger(self, intensity: float, now_ms: int) -> None:
        self.intensity = intensity
        self.flash_start_ms = now_ms
