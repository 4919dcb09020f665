from __future__ import annotations

import threading
from pathlib import Path
from typing import Sequence

from PIL import Image, UnidentifiedImageError

from combinator.domain.bitmap import InkThreshold, sample, sheet_capacity
from combinator.domain.errors import ConfigError


class SpriteSheet:
    """A decoded sprite sheet with per-variant sampling cached.

    The image is converted to RGBA once at load time and is never modified
    afterwards, so one instance can be shared by every worker thread.
    """

    def __init__(self, image: Image.Image, *, name: str = "") -> None:
        self._image = image.convert("RGBA")
        self._pixels = self._image.load()
        self._name = name or "<sheet>"
        self._cells: dict[tuple[int, int, InkThreshold], bytes] = {}
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: Path) -> "SpriteSheet":
        """Decode an image file.

        Raises:
            ConfigError: if the file cannot be read as an image.
        """
        try:
            with Image.open(path) as img:
                img.load()
                return cls(img, name=str(path))
        except (OSError, UnidentifiedImageError) as e:
            raise ConfigError("{}: cannot decode sprite sheet: {}".format(path, e)) from e

    @property
    def name(self) -> str:
        return self._name

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def get_pixel(self, x: int, y: int) -> Sequence[int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("pixel ({}, {}) outside {}x{} sheet".format(x, y, self.width, self.height))
        return self._pixels[x, y]

    def capacity(self, cell_size: int) -> int:
        return sheet_capacity(self.width, self.height, cell_size)

    def cell_bits(self, variant: int, cell_size: int, threshold: InkThreshold) -> bytes:
        key = (variant, cell_size, threshold)
        with self._lock:
            cached = self._cells.get(key)
        if cached is not None:
            return cached
        bits = sample(self, variant, cell_size, threshold)
        with self._lock:
            self._cells[key] = bits
        return bits
