from __future__ import annotations

"""Glyph bitmap sampling and packing (domain layer).

A packed glyph is always GLYPH_BYTES bytes. Pixel (x, y) of a cell maps to
linear index idx = x + y * cell_size, stored in byte idx // 8 at bit
7 - idx % 8 (MSB first). Cells larger than 16x16 do not fit.

This module knows nothing about image files; it reads pixels through the
PixelSource protocol.
"""

from dataclasses import dataclass
from typing import Final, Optional, Protocol, Sequence

from combinator.domain.errors import ConfigError, SpriteBoundsError


GLYPH_BYTES: Final[int] = 32
MAX_CELL_SIZE: Final[int] = 16
DEFAULT_CELL_SIZE: Final[int] = 16

# Channel limits for "ink". Two historical values exist for the colour limit.
DEFAULT_CHANNEL_MAX: Final[int] = 128
STRICT_CHANNEL_MAX: Final[int] = 64
DEFAULT_ALPHA_MIN: Final[int] = 192


class PixelSource(Protocol):
    """Read-only RGBA pixel access over a 2-D image."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def get_pixel(self, x: int, y: int) -> Sequence[int]: ...


@dataclass(frozen=True)
class InkThreshold:
    """A pixel is ink when r, g and b are all below channel_max and alpha is at least alpha_min."""

    channel_max: int = DEFAULT_CHANNEL_MAX
    alpha_min: int = DEFAULT_ALPHA_MIN

    @classmethod
    def strict(cls) -> "InkThreshold":
        return cls(channel_max=STRICT_CHANNEL_MAX)

    def is_ink(self, pixel: Sequence[int]) -> bool:
        r, g, b = pixel[0], pixel[1], pixel[2]
        a = pixel[3] if len(pixel) > 3 else 255
        return r < self.channel_max and g < self.channel_max and b < self.channel_max and a >= self.alpha_min


def check_cell_size(cell_size: int) -> int:
    if isinstance(cell_size, bool) or not isinstance(cell_size, int) or not 1 <= cell_size <= MAX_CELL_SIZE:
        raise ConfigError("cell size must be an integer in 1..{}, got {!r}".format(MAX_CELL_SIZE, cell_size))
    return cell_size


def sheet_columns(sheet_width: int, cell_size: int) -> int:
    return sheet_width // cell_size


def sheet_capacity(sheet_width: int, sheet_height: int, cell_size: int) -> int:
    """Number of whole cells a sheet holds."""
    return sheet_columns(sheet_width, cell_size) * (sheet_height // cell_size)


def cell_origin(sheet_width: int, variant: int, cell_size: int) -> tuple[int, int]:
    """Return the top-left pixel of a variant's cell.

    Raises:
        SpriteBoundsError: if the sheet is narrower than one cell.
    """
    columns = sheet_columns(sheet_width, cell_size)
    if columns == 0:
        raise SpriteBoundsError(
            "sheet width {} is smaller than the cell size {}".format(sheet_width, cell_size)
        )
    row, col = divmod(variant, columns)
    return col * cell_size, row * cell_size


def sample(
    sheet: PixelSource,
    variant: int,
    cell_size: int = DEFAULT_CELL_SIZE,
    threshold: InkThreshold = InkThreshold(),
) -> bytes:
    """Threshold one sheet cell into a packed glyph.

    Raises:
        SpriteBoundsError: if the cell lies (partly) outside the sheet.
    """
    check_cell_size(cell_size)
    x0, y0 = cell_origin(sheet.width, variant, cell_size)
    if variant < 0 or x0 + cell_size > sheet.width or y0 + cell_size > sheet.height:
        raise SpriteBoundsError(
            "variant {} needs pixels up to ({}, {}) but the sheet is {}x{}".format(
                variant, x0 + cell_size - 1, y0 + cell_size - 1, sheet.width, sheet.height
            )
        )

    out = bytearray(GLYPH_BYTES)
    for y in range(cell_size):
        for x in range(cell_size):
            if threshold.is_ink(sheet.get_pixel(x0 + x, y0 + y)):
                idx = x + y * cell_size
                out[idx // 8] |= 1 << (7 - idx % 8)
    return bytes(out)


def pack(*planes: Optional[bytes]) -> bytes:
    """OR any number of packed planes together. None planes contribute nothing."""
    out = bytearray(GLYPH_BYTES)
    for plane in planes:
        if plane is None:
            continue
        if len(plane) != GLYPH_BYTES:
            raise ValueError("packed glyph must be {} bytes, got {}".format(GLYPH_BYTES, len(plane)))
        for i, b in enumerate(plane):
            out[i] |= b
    return bytes(out)


def bitmap_hex(bitmap: bytes) -> str:
    return bitmap.hex().upper()
