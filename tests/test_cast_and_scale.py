"""Tests for cast_and_scale."""

import numpy as np
import pytest

from pixwarp import CastError, Image, ImageSize, InvalidImageSize, cast_and_scale


class TestCastAndScale:
    """Test element type conversion with scaling."""

    def test_u8_to_f32_unit_range(self):
        src = Image[1](ImageSize(2, 1), [0, 255], dtype=np.uint8)
        dst = Image[1].from_size_val(src.size, 0.0, dtype=np.float32)

        cast_and_scale(src, dst, 1.0 / 255.0)

        assert dst.dtype == np.float32
        np.testing.assert_allclose(dst.as_slice(), [0.0, 1.0], atol=1e-7)

    def test_linear_per_element(self):
        rng = np.random.default_rng(42)
        data = rng.integers(0, 256, size=4 * 3 * 3, dtype=np.uint8)
        src = Image[3](ImageSize(4, 3), data)
        dst = Image[3].from_size_val(src.size, -1.0, dtype=np.float64)

        cast_and_scale(src, dst, 0.5)

        np.testing.assert_array_equal(dst.as_slice(), data.astype(np.float64) * 0.5)

    def test_previous_dst_contents_ignored(self):
        src = Image[1](ImageSize(2, 1), [1.0, 2.0], dtype=np.float32)
        dst = Image[1].from_size_val(src.size, 123.0, dtype=np.float32)

        cast_and_scale(src, dst, 2.0)

        np.testing.assert_array_equal(dst.as_slice(), [2.0, 4.0])

    def test_float_to_integer_truncates(self):
        src = Image[1](ImageSize(3, 1), [0.9, 1.5, 2.99], dtype=np.float32)
        dst = Image[1].from_size_val(src.size, 0, dtype=np.int32)

        cast_and_scale(src, dst, 1)

        np.testing.assert_array_equal(dst.as_slice(), [0, 1, 2])

    def test_integer_to_integer(self):
        src = Image[1](ImageSize(2, 1), [10, 20], dtype=np.uint8)
        dst = Image[1].from_size_val(src.size, 0, dtype=np.int32)

        cast_and_scale(src, dst, 3)

        np.testing.assert_array_equal(dst.as_slice(), [30, 60])

    def test_float16_destination(self):
        src = Image[1](ImageSize(2, 1), [0, 255], dtype=np.uint8)
        dst = Image[1].from_size_val(src.size, 0.0, dtype=np.float16)

        cast_and_scale(src, dst, 1.0 / 255.0)

        assert dst.dtype == np.float16
        np.testing.assert_allclose(dst.as_slice().astype(np.float32), [0.0, 1.0], atol=1e-3)

    def test_unrepresentable_value_raises_before_writing(self):
        src = Image[1](ImageSize(2, 1), [1.0, 300.0], dtype=np.float32)
        dst = Image[1].from_size_val(src.size, 7, dtype=np.uint8)

        with pytest.raises(CastError):
            cast_and_scale(src, dst, 1)

        np.testing.assert_array_equal(dst.as_slice(), [7, 7])

    def test_negative_to_unsigned_raises(self):
        src = Image[1](ImageSize(1, 1), [-1], dtype=np.int16)
        dst = Image[1].from_size_val(src.size, 0, dtype=np.uint8)

        with pytest.raises(CastError):
            cast_and_scale(src, dst, 1)

    def test_nan_to_integer_raises(self):
        src = Image[1](ImageSize(1, 1), [np.nan], dtype=np.float32)
        dst = Image[1].from_size_val(src.size, 0, dtype=np.uint8)

        with pytest.raises(CastError):
            cast_and_scale(src, dst, 1)

    def test_size_mismatch(self):
        src = Image[1](ImageSize(2, 1), [0, 1], dtype=np.uint8)
        dst = Image[1].from_size_val(ImageSize(1, 2), 0.0, dtype=np.float32)

        with pytest.raises(InvalidImageSize):
            cast_and_scale(src, dst, 1.0)

    def test_channel_mismatch(self):
        src = Image[3].from_size_val(ImageSize(2, 2), 0, dtype=np.uint8)
        dst = Image[1].from_size_val(ImageSize(2, 2), 0.0, dtype=np.float32)

        with pytest.raises(TypeError):
            cast_and_scale(src, dst, 1.0)
