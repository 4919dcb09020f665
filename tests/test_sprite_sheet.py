from pathlib import Path

import pytest
from PIL import Image

from combinator.domain.bitmap import InkThreshold
from combinator.domain.errors import ConfigError, SpriteBoundsError
from combinator.services.sprite_sheet import SpriteSheet


def test_open_bmp_and_sample(tmp_path: Path):
    img = Image.new("RGB", (32, 16), (255, 255, 255))
    for x in range(16, 32):
        img.putpixel((x, 0), (0, 0, 0))
    path = tmp_path / "glyphs.bmp"
    img.save(path)

    sheet = SpriteSheet.open(path)
    assert (sheet.width, sheet.height) == (32, 16)
    assert sheet.capacity(16) == 2
    assert tuple(sheet.get_pixel(16, 0)) == (0, 0, 0, 255)

    bits = sheet.cell_bits(1, 16, InkThreshold())
    assert bits[:2] == b"\xff\xff"
    assert bits[2:] == bytes(30)
    assert sheet.cell_bits(0, 16, InkThreshold()) == bytes(32)


def test_one_bit_images_are_supported():
    sheet = SpriteSheet(Image.new("1", (16, 16), 0))
    assert sheet.cell_bits(0, 16, InkThreshold()) == b"\xff" * 32


def test_cell_bits_are_cached():
    sheet = SpriteSheet(Image.new("RGBA", (16, 16), (0, 0, 0, 255)))
    first = sheet.cell_bits(0, 16, InkThreshold())
    assert sheet.cell_bits(0, 16, InkThreshold()) is first


def test_cache_is_keyed_by_threshold():
    sheet = SpriteSheet(Image.new("RGBA", (16, 16), (100, 100, 100, 255)))
    assert sheet.cell_bits(0, 16, InkThreshold()) == b"\xff" * 32
    assert sheet.cell_bits(0, 16, InkThreshold.strict()) == bytes(32)


def test_out_of_bounds_variant():
    sheet = SpriteSheet(Image.new("RGBA", (16, 16)))
    with pytest.raises(SpriteBoundsError):
        sheet.cell_bits(1, 16, InkThreshold())
    with pytest.raises(IndexError):
        sheet.get_pixel(16, 0)


def test_undecodable_file(tmp_path: Path):
    path = tmp_path / "glyphs.bmp"
    path.write_bytes(b"not an image")
    with pytest.raises(ConfigError):
        SpriteSheet.open(path)
