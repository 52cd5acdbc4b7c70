from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional
from .animation import hsl_to_rgb
from .themes import RGB, AnimationSpeed, BackgroundStyle

Cell = tuple[str, Optional[RGB]]
Grid = list[list[Cell]]

BLANK: Cell = (" ", None)
STAR_CHARS = (".", "*", "+", "·", "✦", "✧")
STAR_COLORS: tuple[RGB, ...] = ((60, 60, 80), (100, 100, 140), (150, 150, 200))
STAR_DENSITY = 3
MATRIX_CHARS = tuple("アイウエオカキクケコサシスセソタチツテト0123456789")
MATRIX_HEAD_COLOR: RGB = (200, 255, 200)
MATRIX_STEP_MS = 50.0
GRADIENT_CHARS = (" ", "░", "▒", "▓")


@dataclass
class RainColumn:
    head_y: float
    speed_multiplier: float
    trail_length: int
    character_seed: int

    @classmethod
    def for_column(cls, x: int, height: int) -> "RainColumn":
        stagger = (x * 7 + 3) % max(height * 2, 1)
        return cls(
            head_y=-float(stagger),
            speed_multiplier=0.3 + ((x * 13) % 10) / 15.0,
            trail_length=4 + (x * 11) % 8,
            character_seed=x * 17,
        )

    def advance(self, delta_y: float, height: int) -> None:
        self.head_y += delta_y * self.speed_multiplier
        if self.head_y > height + self.trail_length:
            self.head_y = -float(self.trail_length)
            self.character_seed += 1

    def cell(self, y: int) -> Cell:
        tail_y = self.head_y - self.trail_length
        if not tail_y <= y <= self.head_y:
            return BLANK
        distance = self.head_y - y
        char = MATRIX_CHARS[(self.character_seed + y) % len(MATRIX_CHARS)]
        if distance < 1.0:
            return (char, MATRIX_HEAD_COLOR)
        intensity = 1.0 - distance / self.trail_length
        return (char, (0, int(80.0 + 120.0 * intensity), 0))


def starfield_cell(x: int, y: int, elapsed_ms: int, speed: AnimationSpeed) -> Cell:
    frame_number = max(elapsed_ms, 0) // speed.profile.star_twinkle_period_ms
    seed = x * 31 + y * 17 + frame_number
    if seed % 100 >= STAR_DENSITY:
        return BLANK
    return (STAR_CHARS[seed % len(STAR_CHARS)], STAR_COLORS[seed % len(STAR_COLORS)])


def gradient_cell(x: int, y: int, width: int, height: int, elapsed_ms: int, speed: AnimationSpeed) -> Cell:
    period = speed.profile.gradient_scroll_period_ms
    time_phase = (max(elapsed_ms, 0) % period) / period
    x_norm = x / max(width, 1)
    y_norm = y / max(height, 1)
    intensity = (math.sin((x_norm + y_norm * 0.5 + time_phase) * 2.0 * math.pi) + 1.0) / 2.0
    char = GRADIENT_CHARS[min(int(intensity * 4), len(GRADIENT_CHARS) - 1)]
    if char == " ":
        return BLANK
    hue = (x_norm * 60.0 + time_phase * 360.0) % 360.0
    return (char, hsl_to_rgb(hue, 0.7, 0.15 + intensity * 0.2))


@dataclass
class BackgroundState:
    columns: list[RainColumn] = field(default_factory=list)
    width: int = 0
    height: int = 0
    last_update_ms: Optional[int] = None

    def resize(self, width: int, height: int) -> None:
        self.columns = [RainColumn.for_column(x, height) for x in range(width)]
        self.width = width
        self.height = height

    def update_rain(self, elapsed_ms: int, speed: AnimationSpeed) -> None:
        previous = elapsed_ms if self.last_update_ms is None else self.last_update_ms
        delta_ms = max(elapsed_ms - previous, 0)
        self.last_update_ms = elapsed_ms
        delta_y = delta_ms / MATRIX_STEP_MS * speed.profile.matrix_fall_speed
        for column in self.columns:
            column.advance(delta_y, self.height)

    def rain_cell(self, x: int, y: int) -> Cell:
        if x >= len(self.columns):
            return BLANK
        return self.columns[x].cell(y)

    def render(
        self,
        style: BackgroundStyle,
        elapsed_ms: int,
        speed: AnimationSpeed,
        width: int,
        height: int,
    ) -> Grid:
        if style is BackgroundStyle.MATRIX_RAIN:
            if (width, height) != (self.width, self.height) or len(self.columns) != width:
                self.resize(width, height)
            self.update_rain(elapsed_ms, speed)
        grid: Grid = []
        for y in range(height):
            row: list[Cell] = []
            for x in range(width):
                if style is BackgroundStyle.STARFIELD:
                    row.append(starfield_cell(x, y, elapsed_ms, speed))
                elif style is BackgroundStyle.MATRIX_RAIN:
                    row.append(self.rain_cell(x, y))
                elif style is BackgroundStyle.GRADIENT_WAVE:
                    row.append(gradient_cell(x, y, width, height, elapsed_ms, speed))
                else:
                    row.append(BLANK)
            grid.append(row)
        return grid
