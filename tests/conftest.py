import numpy as np
import pytest

from engraver.models.filter_config import FilterConfig
from engraver.models.pixel_grid import PixelGrid
from engraver.services.engraving_filter import EngravingFilter
from engraver.services.image_service import ImageService


@pytest.fixture
def images():
    return ImageService()


@pytest.fixture
def engraving_filter():
    return EngravingFilter(workers=1)


@pytest.fixture
def default_config():
    return FilterConfig.from_values("121202121", add=127.0, mult=0.5)


@pytest.fixture
def make_grid():
    def _make(rows):
        return PixelGrid.from_array(np.array(rows, dtype=np.uint8).reshape(len(rows), -1, 3))
    return _make


@pytest.fixture
def random_rows():
    def _make(width, height, seed=0):
        rng = np.random.default_rng(seed)
        data = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
        return [[tuple(int(c) for c in px) for px in row] for row in data]
    return _make
