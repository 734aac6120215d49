from pixel_filter.palette_data import build_palette
from pixel_filter.palette_lock import colour_usage_report, is_palette_only, palette_set


def test_palette_set():
    items, _ = build_palette(["000000", "ffffff"])
    assert palette_set(items) == {(0, 0, 0), (255, 255, 255)}


def test_is_palette_only(solid_rgba):
    items, _ = build_palette(["000000", "ffffff"])
    pal = palette_set(items)
    img = solid_rgba(2, 2, (255, 255, 255, 255))
    assert is_palette_only(img, pal)
    img[0, 0, 3] = 0
    assert is_palette_only(img, pal)
    img[0, 1, 3] = 128
    assert not is_palette_only(img, pal)
    img[0, 1, 3] = 255
    img[1, 1, :3] = (1, 2, 3)
    assert not is_palette_only(img, pal)


def test_colour_usage_report_counts_visible_pixels(solid_rgba):
    img = solid_rgba(2, 3, (0, 0, 0, 255))
    img[0, :2, :3] = 255
    img[1, 2, 3] = 0
    assert colour_usage_report(img) == [("#000000", 2), ("#ffffff", 2)] or colour_usage_report(
        img
    ) == [("#ffffff", 2), ("#000000", 2)]


def test_colour_usage_report_orders_by_count(solid_rgba):
    img = solid_rgba(1, 3, (0, 0, 0, 255))
    img[0, 0, :3] = 255
    assert colour_usage_report(img) == [("#000000", 2), ("#ffffff", 1)]
    img[..., 3] = 0
    assert colour_usage_report(img) == []
