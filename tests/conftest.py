from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def random_rgba(rng: np.random.Generator) -> np.ndarray:
    return rng.integers(0, 256, size=(12, 9, 4), dtype=np.uint8)


@pytest.fixture
def solid_rgba():
    def make(height: int, width: int, rgba) -> np.ndarray:
        img = np.empty((height, width, 4), dtype=np.uint8)
        img[...] = np.array(rgba, dtype=np.uint8)
        return img

    return make
