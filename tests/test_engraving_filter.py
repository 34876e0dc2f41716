import math

import numpy as np
import pytest
from PIL import Image

from engraver.models.filter_config import FilterConfig
from engraver.models.pixel_grid import PixelGrid
from engraver.services.engraving_filter import EngravingFilter

from helpers import reference_engrave, round_half_away, uniform_rows

SQRT2 = math.sqrt(2.0)


def _values(grid):
    return {px for px in grid.to_list()}


class TestScenarios:
    def test_uniform_image(self, engraving_filter, default_config, make_grid):
        result = engraving_filter.apply(make_grid(uniform_rows(3, 3, (100, 100, 100))), default_config)
        assert result.shape == (3, 3)
        assert _values(result) == {(127, 127, 127)}

    def test_uniform_image_inverted(self, engraving_filter, make_grid):
        conf = FilterConfig.from_values("121202121", add=127.0, mult=0.5, invert=True)
        result = engraving_filter.apply(make_grid(uniform_rows(3, 3, (100, 100, 100))), conf)
        assert _values(result) == {(128, 128, 128)}

    def test_zero_mask_keeps_center_scaled(self, engraving_filter, make_grid):
        conf = FilterConfig.from_values("000000000", add=127.0, mult=0.5)
        grid = make_grid([[(0, 0, 0), (3, 3, 3), (100, 100, 100), (255, 255, 255)]])
        result = engraving_filter.apply(grid, conf)
        # center * mult + add, halves rounded away from zero
        assert result.to_list() == [(127, 127, 127), (129, 129, 129), (177, 177, 177), (255, 255, 255)]

    def test_single_pixel_has_no_neighbours(self, engraving_filter, default_config, make_grid):
        result = engraving_filter.apply(make_grid([[(100, 40, 0)]]), default_config)
        assert result.to_list() == [(177, 147, 127)]

    def test_corner_uses_partial_neighbourhood(self, engraving_filter, default_config, make_grid):
        grid = make_grid([[(0, 0, 0), (30, 30, 30)], [(60, 60, 60), (90, 90, 90)]])
        result = engraving_filter.apply(grid, default_config)

        # (0, 0): right and down neighbours weigh 1, the diagonal one sqrt(2)
        average = (1.0 * 30 + 1.0 * 60 + SQRT2 * 90) / (2.0 + SQRT2)
        expected = round_half_away(-(average - 0) * 0.5 + 127.0)
        assert expected == 95
        assert result.pixel(0, 0) == (95, 95, 95)

        assert result.pixel(1, 1) == (159, 159, 159)

    def test_other_mask_changes_corner(self, engraving_filter, make_grid):
        grid = make_grid([[(0, 0, 0), (30, 30, 30)], [(60, 60, 60), (90, 90, 90)]])
        conf = FilterConfig.from_values("212101212", add=127.0, mult=0.5)
        # diagonal neighbour now weighs 1, orthogonal ones sqrt(2)
        assert engraving_filter.apply(grid, conf).pixel(0, 0) == (99, 99, 99)


class TestConversion:
    @pytest.mark.parametrize(
        "add, mult, expected",
        [
            (200.0, 1.0, 44),  # 300 wraps
            (-10.0, 0.0, 246),  # -10 wraps
            (127.0, 0.0, 127),
        ],
    )
    def test_wraps_instead_of_saturating(self, engraving_filter, make_grid, add, mult, expected):
        conf = FilterConfig.from_values("000000000", add=add, mult=mult)
        result = engraving_filter.apply(make_grid([[(100, 100, 100)]]), conf)
        assert result.to_list() == [(expected, expected, expected)]

    @pytest.mark.parametrize("add", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_becomes_zero(self, engraving_filter, make_grid, add):
        conf = FilterConfig.from_values("121202121", add=add, mult=0.5)
        result = engraving_filter.apply(make_grid(uniform_rows(2, 2, (10, 20, 30))), conf)
        assert _values(result) == {(0, 0, 0)}

    def test_nan_multiplier_propagates(self, engraving_filter, make_grid):
        conf = FilterConfig.from_values("121202121", add=127.0, mult=float("nan"))
        result = engraving_filter.apply(make_grid(uniform_rows(2, 2, (10, 20, 30))), conf)
        assert _values(result) == {(0, 0, 0)}


class TestGrayscale:
    def test_uniform_gray(self, engraving_filter, make_grid):
        # sqrt(127^2 + 127^2 + 63.5^2) == 190.5 -> 191 -> 127.33 -> 127
        conf = FilterConfig.from_values("121202121", add=127.0, mult=0.5, grayscale=True)
        result = engraving_filter.apply(make_grid(uniform_rows(3, 3, (100, 100, 100))), conf)
        assert _values(result) == {(127, 127, 127)}

    def test_uniform_gray_inverted(self, engraving_filter, make_grid):
        conf = FilterConfig.from_values("121202121", add=127.0, mult=0.5, invert=True, grayscale=True)
        result = engraving_filter.apply(make_grid(uniform_rows(3, 3, (100, 100, 100))), conf)
        assert _values(result) == {(128, 128, 128)}

    def test_gray_wraps(self, engraving_filter, make_grid):
        conf = FilterConfig.from_values("121202121", add=1000.0, mult=0.0, grayscale=True)
        result = engraving_filter.apply(make_grid(uniform_rows(2, 2, (5, 5, 5))), conf)
        assert _values(result) == {(232, 232, 232)}

    def test_negative_channels_read_as_zero(self, engraving_filter, make_grid):
        # (100, 40, 0) - 200 -> (-100, -160, -200): every channel saturates to 0
        conf = FilterConfig.from_values("000000000", add=-200.0, mult=1.0, grayscale=True)
        assert engraving_filter.apply(make_grid([[(100, 40, 0)]]), conf).to_list() == [(0, 0, 0)]

    def test_partly_negative_pixel(self, engraving_filter, make_grid):
        # (100, 40, 0) - 50 -> (50, -10, -50) -> (50, 0, 0): 50 / 1.5 -> 33
        conf = FilterConfig.from_values("000000000", add=-50.0, mult=1.0, grayscale=True)
        assert engraving_filter.apply(make_grid([[(100, 40, 0)]]), conf).to_list() == [(33, 33, 33)]

    def test_channels_equal(self, engraving_filter, make_grid, random_rows):
        conf = FilterConfig.from_values("121202121", add=127.0, mult=1.5, grayscale=True)
        pixels = engraving_filter.apply(make_grid(random_rows(9, 7)), conf).pixels
        assert np.array_equal(pixels[..., 0], pixels[..., 1])
        assert np.array_equal(pixels[..., 0], pixels[..., 2])


class TestShape:
    @pytest.mark.parametrize("width, height", [(1, 1), (1, 6), (6, 1), (2, 3), (17, 5)])
    def test_same_size(self, engraving_filter, default_config, random_rows, make_grid, width, height):
        result = engraving_filter.apply(make_grid(random_rows(width, height)), default_config)
        assert (result.width, result.height) == (width, height)

    @pytest.mark.parametrize("width, height", [(0, 0), (0, 4), (4, 0)])
    def test_empty(self, engraving_filter, default_config, width, height):
        result = engraving_filter.apply(PixelGrid.zeroed(width, height), default_config)
        assert result.shape == (height, width)

    def test_input_untouched(self, engraving_filter, default_config, random_rows, make_grid):
        grid = make_grid(random_rows(5, 4))
        before = grid.pixels.copy()
        result = engraving_filter.apply(grid, default_config)
        assert result is not grid
        assert np.array_equal(grid.pixels, before)


class TestReference:
    @pytest.mark.parametrize(
        "code, add, mult, invert, gray",
        [
            ("121202121", 127.0, 0.5, False, False),
            ("121202121", 127.0, 0.5, True, True),
            ("222222222", 30.0, 3.0, False, False),
            ("100020001", 127.0, -2.0, True, False),
            ("012101210", 0.0, 7.5, False, True),
            ("000010000", 127.0, 0.5, False, False),
        ],
    )
    def test_matches_per_pixel_reference(self, make_grid, random_rows, code, add, mult, invert, gray):
        rows = random_rows(11, 8, seed=len(code) + int(code))
        conf = FilterConfig.from_values(code, add=add, mult=mult, invert=invert, grayscale=gray)
        expected = reference_engrave(rows, conf.weights.weights, add, mult, invert, gray)
        result = EngravingFilter(workers=1).apply(make_grid(rows), conf)
        assert result == make_grid(expected)


class TestParallel:
    def test_threaded_matches_sequential(self, make_grid, random_rows):
        grid = make_grid(random_rows(23, 37, seed=3))
        conf = FilterConfig.from_values("121202121", add=127.0, mult=2.0, invert=True)
        sequential = EngravingFilter(workers=1).apply(grid, conf)
        threaded = EngravingFilter(workers=4, parallel_threshold=0)
        assert threaded._bands(37, 23) == [(0, 10), (10, 20), (20, 30), (30, 37)]
        assert threaded.apply(grid, conf) == sequential

    def test_more_workers_than_rows(self, make_grid, random_rows, default_config):
        grid = make_grid(random_rows(5, 2))
        threaded = EngravingFilter(workers=8, parallel_threshold=0)
        assert threaded.apply(grid, default_config) == EngravingFilter(workers=1).apply(grid, default_config)

    def test_small_images_stay_on_one_band(self):
        assert EngravingFilter(workers=8)._bands(10, 10) == [(0, 10)]

    def test_repeatable(self, make_grid, random_rows, default_config):
        grid = make_grid(random_rows(13, 13, seed=9))
        engraving_filter = EngravingFilter(workers=3, parallel_threshold=0)
        assert engraving_filter.apply(grid, default_config) == engraving_filter.apply(grid, default_config)


def test_apply_to_image_converts_to_rgb(default_config):
    image = Image.new("RGBA", (4, 3), (100, 100, 100, 10))
    result = EngravingFilter(workers=1).apply_to_image(image, default_config)
    assert result.mode == "RGB"
    assert result.size == (4, 3)
    assert set(result.getdata()) == {(127, 127, 127)}
