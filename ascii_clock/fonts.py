from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterator, Optional
from .figfont import Font, FontParseError, parse_font

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"
FONTS_DIR = ASSETS_DIR / "fonts"
FONT_EXTENSIONS = {".flf", ".tlf"}
DEFAULT_FONT = "Standard"

BUNDLED_FONTS: tuple[tuple[str, str], ...] = (
    ("Standard", "Standard.flf"),
    ("Pixel", "Pixel.tlf"),
    ("Pixel Hash", "Pixel_Hash.flf"),
    ("Pixel Shade", "Pixel_Shade.tlf"),
    ("Pixel Dots", "Pixel_Dots.flf"),
    ("Big Pixel", "Big_Pixel.tlf"),
)


def normalize(name: str) -> str:
    return "".join(ch.lower() for ch in name if ch.isalnum())


def read_font_file(path: Path, name: Optional[str] = None) -> Font:
    content = path.read_text(encoding="utf-8", errors="replace")
    return parse_font(name or path.stem, content)


class FontRegistry:
    def __init__(self, bundled: tuple[tuple[str, str], ...] = BUNDLED_FONTS, fonts_dir: Path = FONTS_DIR) -> None:
        self.fonts: dict[str, Font] = {}
        for name, filename in bundled:
            try:
                self.fonts[name] = read_font_file(fonts_dir / filename, name)
            except (OSError, FontParseError) as error:
                logger.warning("Failed to load bundled font %r: %s", name, error)
        if DEFAULT_FONT not in self.fonts:
            raise RuntimeError(f"Bundled font {DEFAULT_FONT!r} is required but could not be loaded")

    def load_custom_fonts(self, directory: Optional[Path]) -> list[str]:
        loaded: list[str] = []
        if directory is None or not directory.is_dir():
            return loaded
        try:
            entries = sorted(directory.iterdir())
        except OSError as error:
            logger.warning("Failed to read fonts directory %s: %s", directory, error)
            return loaded
        for entry in entries:
            if not entry.is_file() or entry.suffix.lower() not in FONT_EXTENSIONS:
                continue
            name = entry.stem
            if name in self.fonts:
                logger.debug("Skipping %s, font %r already registered", entry, name)
                continue
            try:
                self.fonts[name] = read_font_file(entry, name)
            except OSError as error:
                logger.warning("Failed to read font %s: %s", entry, error)
                continue
            except FontParseError as error:
                logger.warning("Failed to parse font %s: %s", entry, error)
                continue
            loaded.append(name)
        return loaded

    def get(self, name: str) -> Optional[Font]:
        return self.fonts.get(name)

    def get_or_default(self, name: Optional[str]) -> Font:
        if name and name in self.fonts:
            return self.fonts[name]
        return self.fonts[DEFAULT_FONT]

    def find(self, reference: Optional[str]) -> Optional[str]:
        if not reference:
            return None
        if reference in self.fonts:
            return reference
        target = normalize(Path(reference).stem if Path(reference).suffix.lower() in FONT_EXTENSIONS else reference)
        for name in self.list_fonts():
            if normalize(name) == target:
                return name
        return None

    def has_font(self, name: str) -> bool:
        return name in self.fonts

    def list_fonts(self) -> list[str]:
        return sorted(self.fonts)

    def __len__(self) -> int:
        return len(self.fonts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_fonts())

    def __contains__(self, name: object) -> bool:
        return name in self.fonts
