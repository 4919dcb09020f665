# tests/conftest.py
from pathlib import Path
from typing import Callable, Optional

import pytest
from PIL import Image

from combinator.domain.enums import JamoSlot
from combinator.domain.hangul import slot_chars
from combinator.domain.rules import GlyphRules
from combinator.services.settings_store import GlobalConfig
from combinator.services.sprite_sheet import SpriteSheet
from combinator.services.workspace import JamoSource, Workspace

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
CLEAR = (0, 0, 0, 0)


class FakeSheet:
    """In-memory PixelSource: a solid fill with individual pixel overrides."""

    def __init__(self, width: int, height: int, fill=WHITE, pixels: Optional[dict] = None) -> None:
        self.width = width
        self.height = height
        self._fill = fill
        self._pixels = dict(pixels or {})

    def get_pixel(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError((x, y))
        return self._pixels.get((x, y), self._fill)


@pytest.fixture
def solid_sheet() -> Callable[..., SpriteSheet]:
    def _make(color=BLACK, cells: int = 1, size: int = 16) -> SpriteSheet:
        return SpriteSheet(Image.new("RGBA", (size * cells, size), color))

    return _make


@pytest.fixture
def make_workspace(tmp_path: Path):
    """Build a Workspace in memory, sharing one rule list and sheet per slot."""

    def _make(
        rules: Optional[dict] = None,
        sheets: Optional[dict] = None,
        **config,
    ) -> Workspace:
        rules = rules or {}
        sheets = sheets or {}
        sources = {
            slot: tuple(
                JamoSource(
                    slot=slot,
                    char=char,
                    rules=rules.get(slot, GlyphRules.unconfigured()),
                    sheet=sheets.get(slot),
                )
                for char in slot_chars(slot)
            )
            for slot in JamoSlot
        }
        return Workspace(path=tmp_path, config=GlobalConfig(**config), sources=sources)

    return _make


@pytest.fixture
def fake_sheet():
    return FakeSheet
