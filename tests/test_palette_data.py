import numpy as np
import pytest

from pixel_filter.colour_convert import rgb_to_oklab
from pixel_filter.constants import PALETTE_HEX
from pixel_filter.core_types import PaletteParseError
from pixel_filter.palette_data import (
    build_palette,
    build_perceptual_palette,
    load_palette_file,
    parse_hex,
)


def test_parse_hex_channels():
    assert np.allclose(parse_hex("ff8000"), [1.0, 128 / 255.0, 0.0])


def test_parse_hex_accepts_upper_case():
    assert np.allclose(parse_hex("FFFFFF"), [1.0, 1.0, 1.0])


@pytest.mark.parametrize("bad", ["zz0000", "fff", "#ffffff", "", "12345g", "1234567"])
def test_parse_hex_rejects(bad):
    with pytest.raises(PaletteParseError):
        parse_hex(bad)


def test_parse_error_is_value_error():
    assert issubclass(PaletteParseError, ValueError)


def test_perceptual_palette_preserves_order():
    pal = build_perceptual_palette(["ffffff", "000000"])
    assert pal.shape == (2, 3)
    assert pal[0, 0] > pal[1, 0]
    assert np.allclose(pal[1], rgb_to_oklab(np.zeros(3)))


def test_perceptual_palette_aborts_on_first_bad_entry():
    with pytest.raises(PaletteParseError):
        build_perceptual_palette(["000000", "nothex", "ffffff"])


def test_default_palette_items():
    items, pal_oklab = build_palette()
    assert len(items) == len(PALETTE_HEX) == 48
    assert pal_oklab.shape == (48, 3)
    assert items[8].hex == "fff7ff"
    assert items[8].rgb == (255, 247, 255)
    assert np.allclose(items[8].oklab, pal_oklab[8])


def test_load_palette_file(tmp_path):
    path = tmp_path / "pal.hex"
    path.write_text("; retro set\n#FF0000\n00ff00\n\n# comment\n0000ff\n", encoding="utf-8")
    assert load_palette_file(path) == ["FF0000", "00ff00", "0000ff"]


def test_load_palette_file_rejects_bad_entry(tmp_path):
    path = tmp_path / "pal.hex"
    path.write_text("ff0000\nf00\n", encoding="utf-8")
    with pytest.raises(PaletteParseError):
        load_palette_file(path)
