from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

FLF_SIGNATURE = "flf2a"
TLF_SIGNATURE = "tlf2a"
SIGNATURES = (FLF_SIGNATURE, TLF_SIGNATURE)
FIRST_CODE = 32
LAST_CODE = 126
END_MARKER = "@"


class FontParseError(ValueError):
    pass


class InvalidHeader(FontParseError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid header: {detail}")
        self.detail = detail


class InvalidCharacter(FontParseError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid character: {detail}")
        self.detail = detail


class UnexpectedEndOfFile(FontParseError):
    def __init__(self) -> None:
        super().__init__("Unexpected end of file")


@dataclass(frozen=True)
class FontHeader:
    signature: str
    hardblank: str
    height: int
    baseline: int
    max_length: int
    old_layout: int
    comment_lines: int


@dataclass(frozen=True)
class Font:
    """An ASCII-art font: every glyph is a list of exactly ``height`` strings."""

    name: str
    height: int
    glyphs: Mapping[str, tuple[str, ...]] = field(default_factory=dict, repr=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "glyphs", MappingProxyType(dict(self.glyphs)))

    def glyph(self, char: str) -> Optional[tuple[str, ...]]:
        return self.glyphs.get(char)

    def render_text(self, text: str) -> list[str]:
        rows: list[list[str]] = [[] for _ in range(self.height)]
        fallback = self.glyphs.get(" ")
        for char in text:
            lines = self.glyphs.get(char, fallback)
            if lines is None:
                continue
            for index, line in enumerate(lines[: self.height]):
                rows[index].append(line)
        return ["".join(parts) for parts in rows]

    def char_width(self, char: str) -> int:
        lines = self.glyphs.get(char)
        if not lines:
            return 0
        return len(lines[0])

    def text_width(self, text: str) -> int:
        rendered = self.render_text(text)
        return len(rendered[0]) if rendered else 0


def _iter_lines(content: str) -> Iterator[str]:
    if not content:
        return
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def _parse_int(value: str, label: str, minimum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except ValueError:
        raise InvalidHeader(f"Invalid {label}") from None
    if minimum is not None and number < minimum:
        raise InvalidHeader(f"Invalid {label}")
    return number


def parse_header(line: str) -> FontHeader:
    signature = next((sig for sig in SIGNATURES if line.startswith(sig)), None)
    if signature is None:
        raise InvalidHeader("Missing flf2a or tlf2a signature")
    if len(line) <= len(signature):
        raise InvalidHeader("Missing hardblank character")
    hardblank = line[len(signature)]
    parts = line[len(signature) + 1:].split()
    if len(parts) < 5:
        raise InvalidHeader("Not enough header fields")
    return FontHeader(
        signature=signature,
        hardblank=hardblank,
        height=_parse_int(parts[0], "height", minimum=1),
        baseline=_parse_int(parts[1], "baseline", minimum=0),
        max_length=_parse_int(parts[2], "max_length", minimum=0),
        old_layout=_parse_int(parts[3], "old_layout"),
        comment_lines=_parse_int(parts[4], "comment_lines", minimum=0),
    )


def clean_glyph_line(line: str, hardblank: str) -> str:
    # a lone "@" and the closing "@@" are stripped the same way
    return line.rstrip().rstrip(END_MARKER).replace(hardblank, " ")


def _parse_glyph(lines: Iterator[str], header: FontHeader) -> tuple[str, ...]:
    glyph: list[str] = []
    for _ in range(header.height):
        line = next(lines, None)
        if line is None:
            raise UnexpectedEndOfFile()
        glyph.append(clean_glyph_line(line, header.hardblank))
    return tuple(glyph)


def parse_font(name: str, content: str) -> Font:
    lines = _iter_lines(content)
    first = next(lines, None)
    if first is None:
        raise UnexpectedEndOfFile()
    header = parse_header(first)
    for _ in range(header.comment_lines):
        next(lines, None)
    glyphs: dict[str, tuple[str, ...]] = {}
    for code in range(FIRST_CODE, LAST_CODE + 1):
        glyphs[chr(code)] = _parse_glyph(lines, header)
    return Font(name=name, height=header.height, glyphs=glyphs)
