"""Tests for pixel sampling and coordinate grids."""

import numpy as np
import pytest

from pixwarp import ChannelIndexOutOfBounds, Image, ImageSize, InterpolationMode, interpolate_pixel, meshgrid
from pixwarp.warp import coordinate_grid


@pytest.fixture
def square():
    """2x2 single-channel image [[0, 1], [2, 3]]."""
    return Image[1](ImageSize(2, 2), [0.0, 1.0, 2.0, 3.0], dtype=np.float32)


class TestInterpolationMode:
    """Test mode parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("nearest", InterpolationMode.NEAREST),
            ("BILINEAR", InterpolationMode.BILINEAR),
            (0, InterpolationMode.NEAREST),
            (InterpolationMode.BILINEAR, InterpolationMode.BILINEAR),
        ],
    )
    def test_parse(self, value, expected):
        assert InterpolationMode.parse(value) is expected

    def test_invalid_name(self):
        with pytest.raises(ValueError, match="Valid options"):
            InterpolationMode.parse("bicubic")


class TestGrids:
    """Test meshgrid and coordinate_grid."""

    def test_meshgrid(self):
        xx, yy = meshgrid(np.arange(3), np.arange(2))

        assert xx.shape == (2, 3)
        assert yy.shape == (2, 3)
        np.testing.assert_array_equal(xx, [[0, 1, 2], [0, 1, 2]])
        np.testing.assert_array_equal(yy, [[0, 0, 0], [1, 1, 1]])

    def test_coordinate_grid(self):
        grid = coordinate_grid(3, 2)

        assert grid.shape == (2, 3, 2)
        assert grid.dtype == np.float32
        np.testing.assert_array_equal(grid[1, 2], [2.0, 1.0])
        np.testing.assert_array_equal(grid[0, 0], [0.0, 0.0])


class TestNearest:
    """Test nearest-neighbor sampling."""

    def test_lattice_points(self, square):
        for (u, v), expected in {(0, 0): 0.0, (1, 0): 1.0, (0, 1): 2.0, (1, 1): 3.0}.items():
            assert interpolate_pixel(square, u, v, 0, "nearest") == expected

    def test_rounding(self, square):
        assert interpolate_pixel(square, 0.49, 0.0, 0, "nearest") == 0.0
        assert interpolate_pixel(square, 0.5, 0.0, 0, "nearest") == 1.0
        assert interpolate_pixel(square, 0.0, 0.6, 0, "nearest") == 2.0

    def test_clamps_to_edge(self, square):
        assert interpolate_pixel(square, -5.0, -5.0, 0, "nearest") == 0.0
        assert interpolate_pixel(square, 10.0, 0.0, 0, "nearest") == 1.0
        assert interpolate_pixel(square, 10.0, 10.0, 0, "nearest") == 3.0


class TestBilinear:
    """Test bilinear sampling."""

    def test_center(self, square):
        assert interpolate_pixel(square, 0.5, 0.5, 0) == pytest.approx(1.5)

    def test_along_edges(self, square):
        assert interpolate_pixel(square, 0.5, 0.0, 0) == pytest.approx(0.5)
        assert interpolate_pixel(square, 0.0, 0.25, 0) == pytest.approx(0.5)

    def test_last_column_reuses_edge(self, square):
        assert interpolate_pixel(square, 1.0, 0.5, 0) == pytest.approx(2.0)

    def test_clamps_to_edge(self, square):
        assert interpolate_pixel(square, -1.0, 0.5, 0) == pytest.approx(1.0)
        assert interpolate_pixel(square, 1.5, 0.5, 0) == pytest.approx(2.0)

    def test_multichannel(self):
        image = Image[2](ImageSize(2, 1), [0.0, 10.0, 1.0, 20.0], dtype=np.float64)

        assert interpolate_pixel(image, 0.25, 0.0, 0) == pytest.approx(0.25)
        assert interpolate_pixel(image, 0.25, 0.0, 1) == pytest.approx(12.5)

    def test_accepts_array_view(self, square):
        assert interpolate_pixel(square.data, 0.5, 0.5, 0) == pytest.approx(1.5)


class TestSamplingErrors:
    """Test argument validation."""

    def test_bad_channel(self, square):
        with pytest.raises(ChannelIndexOutOfBounds):
            interpolate_pixel(square, 0.0, 0.0, 1)

    def test_empty_image(self):
        image = Image[1](ImageSize(0, 0), np.empty(0, dtype=np.float32))
        with pytest.raises(ValueError):
            interpolate_pixel(image, 0.0, 0.0, 0)

    def test_wrong_rank(self):
        with pytest.raises(ValueError, match=r"\[H, W, C\]"):
            interpolate_pixel(np.zeros((2, 2), dtype=np.float32), 0.0, 0.0, 0)
