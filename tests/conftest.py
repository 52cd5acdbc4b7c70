from __future__ import annotations
from typing import Callable, Sequence
import pytest
from ascii_clock.figfont import Font, parse_font
from ascii_clock.fonts import FontRegistry


def build_font_blob(
    height: int = 2,
    signature: str = "flf2a",
    comments: Sequence[str] = ("synthetic test font",),
) -> str:
    lines = [f"{signature}$ {height} {height - 1} 4 0 {len(comments)} 0 0"]
    lines.extend(comments)
    for code in range(32, 127):
        char = "$" if code == 32 else chr(code)
        for row in range(height):
            marker = "@@" if row == height - 1 else "@"
            lines.append(f"{char}{row}{marker}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def font_blob_factory() -> Callable[..., str]:
    return build_font_blob


@pytest.fixture
def font_blob() -> str:
    return build_font_blob()


@pytest.fixture
def test_font(font_blob: str) -> Font:
    return parse_font("Test", font_blob)


@pytest.fixture(scope="session")
def registry() -> FontRegistry:
    return FontRegistry()


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    home = tmp_path / "config"
    monkeypatch.setenv("ASCII_CLOCK_CONFIG_DIR", str(home))
    return home
