import numpy as np
import pytest

from pixel_filter import FilterConfig, quantize
from pixel_filter.colour_convert import rgb_to_oklab
from pixel_filter.config import bayer_matrix
from pixel_filter.core_types import ConfigPreconditionViolation, PaletteParseError
from pixel_filter.dither.candidates import round_half_away
from pixel_filter.dither.run import composite_pixels
from pixel_filter.palette_data import build_palette
from pixel_filter.palette_lock import is_palette_only, palette_set
from pixel_filter.utils import nearest_palette_indices


def test_white_image_maps_to_lightest_entry(solid_rgba):
    img = solid_rgba(2, 2, (255, 255, 255, 255))
    out = quantize(img)
    assert out.shape == (2, 2, 4)
    assert out.dtype == np.uint8
    assert out.reshape(-1, 4).tolist() == [[255, 247, 255, 255]] * 4


def test_input_is_not_mutated(random_rgba):
    before = random_rgba.copy()
    out = quantize(random_rgba)
    assert np.array_equal(random_rgba, before)
    assert not np.shares_memory(out, random_rgba)


def test_output_uses_palette_and_binary_alpha(random_rgba):
    out = quantize(random_rgba)
    items, _ = build_palette()
    assert is_palette_only(out, palette_set(items))
    assert set(np.unique(out[..., 3]).tolist()) <= {0, 255}


def test_zero_dither_is_plain_nearest(random_rgba):
    items, pal = build_palette()
    pal_rgb = np.array([p.rgb for p in items], dtype=np.uint8)

    idx = nearest_palette_indices(rgb_to_oklab(random_rgba[..., :3]), pal)
    alpha = round_half_away(random_rgba[..., 3] / 255.0) * 255

    for tmap in (((0, 2), (3, 1)), bayer_matrix(2), ((0,),)):
        out = quantize(
            random_rgba,
            FilterConfig(threshold_map=tmap, color_dither=0.0, alpha_dither=0.0),
        )
        assert np.array_equal(out[..., :3], pal_rgb[idx])
        assert np.array_equal(out[..., 3], alpha.astype(np.uint8))


def test_checkerboard_from_mid_grey(solid_rgba):
    img = solid_rgba(4, 4, (128, 128, 128, 255))
    config = FilterConfig(color_dither=1.0, alpha_dither=0.0, palette=["000000", "ffffff"])
    out = quantize(img, config)
    black = [0, 0, 0, 255]
    white = [255, 255, 255, 255]
    assert out[0, 0].tolist() == black
    assert out[0, 1].tolist() == white
    assert out[1, 0].tolist() == white
    assert out[1, 1].tolist() == black
    assert np.array_equal(out[2:, 2:], out[:2, :2])


def test_half_alpha_dithers_between_transparent_and_opaque(solid_rgba):
    img = solid_rgba(2, 2, (0, 0, 0, 128))
    config = FilterConfig(color_dither=0.0, alpha_dither=1.0, palette=["000000"])
    out = quantize(img, config)
    assert sorted(out[..., 3].ravel().tolist()) == [0, 0, 255, 255]


def test_fixed_point(random_rgba):
    once = quantize(random_rgba)
    twice = quantize(once)
    assert np.array_equal(once, twice)


def test_worker_count_does_not_change_output(rng):
    img = rng.integers(0, 256, size=(300, 11, 4), dtype=np.uint8)
    single = quantize(img, workers=1)
    threaded = quantize(img, workers=4)
    assert np.array_equal(single, threaded)


def test_empty_image():
    img = np.zeros((0, 5, 4), dtype=np.uint8)
    assert quantize(img).shape == (0, 5, 4)


def test_rejects_non_rgba_buffer():
    with pytest.raises(TypeError):
        quantize(np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(TypeError):
        quantize(np.zeros((2, 2, 4), dtype=np.float32))


def test_bad_palette_fails_before_processing(random_rgba):
    with pytest.raises(PaletteParseError):
        quantize(random_rgba, FilterConfig(palette=["ffffff", "zz0000"]))


def test_bad_threshold_map_fails_at_config_time():
    with pytest.raises(ConfigPreconditionViolation):
        FilterConfig(threshold_map=((0, 1), (1, 2)))


def test_composite_scales_and_rounds():
    items, pal = build_palette(["fff7ff", "1b112c"])
    out = composite_pixels(pal, np.array([1.0, 0.0]))
    assert out.tolist() == [[255, 247, 255, 255], [27, 17, 44, 0]]
