from __future__ import annotations
from typing import Optional
from PIL import Image, ImageDraw, ImageFont
from .background import Grid
from .themes import RGB

RESET = "\033[0m"
CURSOR_HOME = "\033[H"
CLEAR_SCREEN = "\033[2J"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
DEFAULT_CELL_SIZE = (8, 16)
BLOCK_SHADES = {"█": 1.0, "▓": 0.75, "▒": 0.5, "░": 0.25}


def foreground(color: RGB) -> str:
    return f"\033[38;2;{color[0]};{color[1]};{color[2]}m"


def frame_to_ansi(frame: Grid) -> str:
    """Serialize a frame to 24-bit ANSI text, one line per row."""
    lines = []
    for row in frame:
        line = ""
        current: Optional[RGB] = None
        for char, color in row:
            if color != current:
                line += foreground(color) if color is not None else RESET
                current = color
            line += char
        lines.append(line + RESET if current is not None else line)
    return "\n".join(lines)


def load_cell_font(cell_height: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.load_default(size=max(cell_height - 2, 1))
    except TypeError:
        return ImageFont.load_default()


def _shade(color: RGB, amount: float, background: RGB) -> RGB:
    return tuple(int(bg + (fg - bg) * amount) for fg, bg in zip(color, background))


def frame_to_image(
    frame: Grid,
    cell_size: tuple[int, int] = DEFAULT_CELL_SIZE,
    background: RGB = (0, 0, 0),
    default_color: RGB = (255, 255, 255),
) -> Image.Image:
    cell_width, cell_height = cell_size
    columns = max((len(row) for row in frame), default=0)
    image = Image.new("RGB", (max(columns * cell_width, 1), max(len(frame) * cell_height, 1)), background)
    draw = ImageDraw.Draw(image)
    font = load_cell_font(cell_height)
    for y, row in enumerate(frame):
        for x, (char, color) in enumerate(row):
            if char == " ":
                continue
            fill = color or default_color
            left = x * cell_width
            top = y * cell_height
            box = (left, top, left + cell_width - 1, top + cell_height - 1)
            shade = BLOCK_SHADES.get(char)
            if shade is not None:
                draw.rectangle(box, fill=_shade(fill, shade, background))
                continue
            try:
                draw.text((left, top), char, fill=fill, font=font)
            except UnicodeError:
                draw.rectangle(box, outline=fill)
    return image


def save_snapshot(frame: Grid, path, cell_size: tuple[int, int] = DEFAULT_CELL_SIZE) -> None:
    frame_to_image(frame, cell_size).save(path, format="PNG")
