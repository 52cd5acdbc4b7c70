from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from .animation import FlashState, apply_animation, is_colon_visible
from .background import BackgroundState, Grid
from .config import ClockSettings
from .figfont import Font
from .fonts import FontRegistry
from .themes import RGB, ColorTheme, TimeFormat

DATE_FORMAT = "%A, %B %d, %Y"
DATE_GAP = 2


def format_time(now: datetime, time_format: TimeFormat) -> str:
    if time_format is TimeFormat.TWELVE_HOUR:
        hour = int(now.strftime("%I"))
        suffix = "PM" if now.hour >= 12 else "AM"
        return f"{hour:2}:{now.minute:02}:{now.second:02} {suffix}"
    return f"{now.hour:02}:{now.minute:02}:{now.second:02}"


def format_date(now: datetime) -> str:
    return now.strftime(DATE_FORMAT)


def colon_mask(font: Font, text: str) -> list[bool]:
    mask: list[bool] = []
    for char in text:
        mask.extend([char == ":"] * font.char_width(char))
    return mask


def base_color(theme: ColorTheme, x: int, y: int, width: int, height: int) -> RGB:
    if theme.is_dynamic():
        return theme.color_at_position(x, y, width, height)
    return theme.color()


@dataclass
class ClockFace:
    """Composites the background, the glyph clock and the date line into one frame."""

    registry: FontRegistry
    settings: ClockSettings
    background: BackgroundState = field(default_factory=BackgroundState)
    flash: FlashState = field(default_factory=FlashState)

    @property
    def font(self) -> Font:
        return self.registry.get_or_default(self.settings.font)

    def render(self, now: datetime, elapsed_ms: int, width: int, height: int) -> Grid:
        settings = self.settings
        grid = self.background.render(
            settings.background_style, elapsed_ms, settings.animation_speed, width, height
        )
        stimulus = self.flash.update(now.hour, now.minute, now.second, elapsed_ms, settings.animation_speed)
        font = self.font
        time_text = format_time(now, settings.time_format)
        date_text = format_date(now)
        block_height = font.height + DATE_GAP + 1
        top = max((height - block_height) // 2, 0)
        self._draw_glyphs(grid, font, time_text, top, elapsed_ms, stimulus, width, height)
        self._draw_date(grid, date_text, top + font.height + DATE_GAP, elapsed_ms, stimulus, width, height)
        return grid

    def _draw_glyphs(
        self,
        grid: Grid,
        font: Font,
        text: str,
        top: int,
        elapsed_ms: int,
        stimulus: float,
        width: int,
        height: int,
    ) -> None:
        settings = self.settings
        lines = font.render_text(text)
        text_width = len(lines[0]) if lines else 0
        left = max((width - text_width) // 2, 0)
        mask = colon_mask(font, text) if settings.colon_blink else []
        hide_colons = settings.colon_blink and not is_colon_visible(elapsed_ms)
        for line_index, line in enumerate(lines):
            y = top + line_index
            if y >= height:
                break
            for char_index, char in enumerate(line):
                if char == " ":
                    continue
                x = left + char_index
                if x >= width:
                    continue
                if hide_colons and char_index < len(mask) and mask[char_index]:
                    continue
                color = base_color(settings.color_theme, char_index, line_index, text_width, len(lines))
                grid[y][x] = (
                    char,
                    apply_animation(
                        color,
                        settings.animation_style,
                        settings.animation_speed,
                        elapsed_ms,
                        char_index,
                        text_width,
                        stimulus,
                    ),
                )

    def _draw_date(
        self,
        grid: Grid,
        text: str,
        y: int,
        elapsed_ms: int,
        stimulus: float,
        width: int,
        height: int,
    ) -> None:
        if y >= height:
            return
        settings = self.settings
        left = max((width - len(text)) // 2, 0)
        for index, char in enumerate(text):
            x = left + index
            if char == " " or x >= width:
                continue
            color = base_color(settings.color_theme, index, 0, len(text), 1)
            grid[y][x] = (
                char,
                apply_animation(
                    color,
                    settings.animation_style,
                    settings.animation_speed,
                    elapsed_ms,
                    index,
                    len(text),
                    stimulus,
                ),
            )

