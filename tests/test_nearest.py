import numpy as np

from pixel_filter import utils
from pixel_filter.palette_data import build_palette
from pixel_filter.utils import (
    nearest_chunk_rows,
    nearest_palette_colour,
    nearest_palette_indices,
    split_rows_into_parts,
)


def test_nearest_is_minimal_distance(rng):
    _, pal = build_palette()
    colours = np.column_stack(
        [rng.uniform(0.0, 1.0, 200), rng.uniform(-0.3, 0.3, 200), rng.uniform(-0.3, 0.3, 200)]
    )
    idx = nearest_palette_indices(colours, pal)
    for colour, j in zip(colours, idx):
        dist2 = np.sum((pal - colour) ** 2, axis=1)
        assert dist2[j] <= dist2.min() + 1e-12


def test_nearest_returns_palette_member():
    _, pal = build_palette()
    picked = nearest_palette_colour(pal, np.array([0.5, 0.01, -0.02]))
    assert picked.shape == (3,)
    assert any(np.array_equal(picked, row) for row in pal)


def test_first_listed_wins_exact_tie():
    pal = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
    assert int(nearest_palette_indices(np.array([1.0, 0.0, 0.0]), pal)) == 0


def test_duplicate_entries_pick_first():
    pal = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    assert int(nearest_palette_indices(np.array([0.9, 0.0, 0.0]), pal)) == 1


def test_leading_shape_is_kept():
    pal = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    img = np.zeros((2, 3, 3))
    img[1, 2, 0] = 0.8
    idx = nearest_palette_indices(img, pal)
    assert idx.shape == (2, 3)
    assert idx[1, 2] == 1 and idx.sum() == 1


def test_split_rows_covers_range():
    spans = split_rows_into_parts(10, 3)
    assert spans[0][0] == 0 and spans[-1][1] == 10
    assert all(a[1] == b[0] for a, b in zip(spans, spans[1:]))
    assert split_rows_into_parts(0, 4) == []


def test_chunk_rows_shrink_with_palette_size():
    assert nearest_chunk_rows(48) * 48 <= 1 << 20
    assert nearest_chunk_rows(4096) < nearest_chunk_rows(48)
    assert nearest_chunk_rows(10**9) == 1


def test_small_chunks_match_one_pass(rng, monkeypatch):
    _, pal = build_palette()
    colours = np.column_stack(
        [rng.uniform(0.0, 1.0, 500), rng.uniform(-0.3, 0.3, 500), rng.uniform(-0.3, 0.3, 500)]
    )
    expected = nearest_palette_indices(colours, pal)
    monkeypatch.setattr(utils, "_NEAREST_BUDGET", 7 * pal.shape[0])
    assert nearest_chunk_rows(pal.shape[0]) == 7
    assert np.array_equal(nearest_palette_indices(colours, pal), expected)
