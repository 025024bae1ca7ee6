"""Tests for Perspective (chained 2D transforms with matrix composition)."""

import copy

import numpy as np
import pytest

from pixwarp import CannotComputeDeterminant, Image, ImageSize, Perspective, WarpConfig, warp_perspective


@pytest.fixture
def ramp_4x4():
    """4x4 single-channel ramp [0..15]."""
    return Image[1](ImageSize(4, 4), np.arange(16, dtype=np.float32))


@pytest.fixture
def nearest():
    return WarpConfig(interpolation="nearest")


class TestWarpConfig:
    """Test WarpConfig dataclass."""

    def test_defaults(self):
        config = WarpConfig()

        assert config.interpolation == "bilinear"
        assert config.fill_value == 0.0

    def test_interpolation_is_normalized(self):
        assert WarpConfig(interpolation="NEAREST").interpolation == "nearest"

    def test_invalid_interpolation(self):
        with pytest.raises(ValueError, match="Invalid interpolation"):
            WarpConfig(interpolation="bicubic")
        with pytest.raises(TypeError):
            WarpConfig(interpolation=1)

    def test_fill_value(self):
        assert WarpConfig(fill_value=3).fill_value == 3.0
        with pytest.raises(TypeError):
            WarpConfig(fill_value="zero")


class TestPerspectiveBuilder:
    """Test pipeline construction and compilation."""

    def test_initialization(self):
        pipeline = Perspective()

        assert pipeline.is_identity()
        assert len(pipeline) == 0
        assert not pipeline.is_compiled
        assert pipeline.config == WarpConfig()

    def test_method_chaining(self):
        pipeline = Perspective()
        result = pipeline.scale(2.0).rotate(0.1).translate(1.0, 2.0).flip_horizontal(4)

        assert result is pipeline
        assert len(pipeline) == 4
        assert not pipeline.is_identity()

    def test_empty_pipeline_compiles_to_identity(self):
        np.testing.assert_array_equal(Perspective().get_matrix(), np.eye(3).reshape(-1))

    def test_translate(self):
        matrix = Perspective().translate(1, 2).get_matrix()
        np.testing.assert_array_equal(matrix, [1, 0, 1, 0, 1, 2, 0, 0, 1])

    def test_composition_order(self):
        scale_then_move = Perspective().scale(2.0).translate(1, 0).get_matrix()
        move_then_scale = Perspective().translate(1, 0).scale(2.0).get_matrix()

        np.testing.assert_array_equal(scale_then_move, [2, 0, 1, 0, 2, 0, 0, 0, 1])
        np.testing.assert_array_equal(move_then_scale, [2, 0, 2, 0, 2, 0, 0, 0, 1])

    def test_anisotropic_scale_about_center(self):
        matrix = Perspective().scale(2.0, 3.0, center=(1.0, 1.0)).get_matrix()
        np.testing.assert_allclose(matrix, [2, 0, -1, 0, 3, -2, 0, 0, 1], atol=1e-6)

    def test_rotate(self):
        matrix = Perspective().rotate(np.pi / 2).get_matrix()
        np.testing.assert_allclose(matrix, [0, -1, 0, 1, 0, 0, 0, 0, 1], atol=1e-6)

    def test_rotate_about_center(self):
        matrix = Perspective().rotate(np.pi, center=(1.0, 1.0)).get_matrix()
        np.testing.assert_allclose(matrix, [-1, 0, 2, 0, -1, 2, 0, 0, 1], atol=1e-6)

    def test_flips(self):
        np.testing.assert_array_equal(
            Perspective().flip_horizontal(5).get_matrix(), [-1, 0, 4, 0, 1, 0, 0, 0, 1]
        )
        np.testing.assert_array_equal(
            Perspective().flip_vertical(3).get_matrix(), [1, 0, 0, 0, -1, 2, 0, 0, 1]
        )

    def test_raw_matrix(self):
        m = [1, 0.5, 0, 0, 1, 0, 0.01, 0, 1]
        np.testing.assert_allclose(Perspective().matrix(m).get_matrix(), m, atol=1e-7)

    def test_compile_and_dirty_flag(self):
        pipeline = Perspective().translate(1, 0).compile()
        assert pipeline.is_compiled

        pipeline.translate(0, 1)
        assert not pipeline.is_compiled
        np.testing.assert_array_equal(pipeline.get_matrix(), [1, 0, 1, 0, 1, 1, 0, 0, 1])
        assert pipeline.is_compiled

    def test_get_matrix_returns_copy(self):
        pipeline = Perspective().translate(1, 0)
        pipeline.get_matrix()[2] = 100.0

        assert pipeline.get_matrix()[2] == 1.0

    def test_reset(self):
        pipeline = Perspective().translate(1, 0).compile().reset()

        assert pipeline.is_identity()
        assert not pipeline.is_compiled

    def test_copy_is_independent(self):
        pipeline = Perspective(WarpConfig("nearest")).translate(1, 0)
        for duplicate in (pipeline.copy(), copy.copy(pipeline), copy.deepcopy(pipeline)):
            duplicate.translate(0, 1)
            duplicate.config.fill_value = 5.0

            assert len(pipeline) == 1
            assert pipeline.config.fill_value == 0.0
            assert duplicate.config.interpolation == "nearest"

    def test_repr(self):
        pipeline = Perspective().translate(1, 0).rotate(0.5)
        assert repr(pipeline) == "Perspective(2 steps: [translate, rotate]) [not compiled]"

        pipeline.compile()
        assert repr(pipeline) == "Perspective(2 steps: [translate, rotate]) [compiled]"


class TestPerspectiveApply:
    """Test applying pipelines to images."""

    def test_identity_returns_copy(self, ramp_4x4):
        result = Perspective()(ramp_4x4)

        assert result == ramp_4x4
        assert result is not ramp_4x4

    def test_flip(self, nearest):
        src = Image[1](ImageSize(2, 3), [0.0, 1.0, 2.0, 3.0, 4.0, 5.0], dtype=np.float32)
        result = Perspective(nearest).flip_horizontal(src.width).apply(src)

        assert isinstance(result, Image[1])
        np.testing.assert_array_equal(result.as_slice(), [1, 0, 3, 2, 5, 4])

    def test_resize_with_size(self, ramp_4x4, nearest):
        result = Perspective(nearest).scale(0.3333)(ramp_4x4, size=ImageSize(2, 2))

        assert result.size == ImageSize(2, 2)
        np.testing.assert_array_equal(result.as_slice(), [0, 3, 12, 15])

    def test_size_as_pair(self, ramp_4x4, nearest):
        result = Perspective(nearest).scale(0.5)(ramp_4x4, size=(2, 2))
        assert result.size == ImageSize(2, 2)

    def test_matches_direct_warp(self, ramp_4x4):
        pipeline = Perspective().rotate(0.3, center=(1.5, 1.5)).translate(0.25, -0.5)
        expected = Image[1].from_size_val(ramp_4x4.size, 0.0, dtype=np.float32)
        warp_perspective(ramp_4x4, expected, pipeline.get_matrix(), "bilinear")

        result = pipeline(ramp_4x4)

        np.testing.assert_array_equal(result.as_slice(), expected.as_slice())

    def test_interpolation_override(self, ramp_4x4):
        pipeline = Perspective().translate(0.5, 0)
        bilinear = pipeline(ramp_4x4)
        nearest = pipeline(ramp_4x4, interpolation="nearest")

        assert bilinear.get_pixel(1, 0, 0) == pytest.approx(0.5)
        assert nearest.get_pixel(1, 0, 0) == 1.0

    def test_source_unchanged(self, ramp_4x4):
        original = ramp_4x4.copy()
        Perspective().rotate(1.0, center=(2, 2))(ramp_4x4)

        assert ramp_4x4 == original

    def test_singular_pipeline(self, ramp_4x4):
        with pytest.raises(CannotComputeDeterminant):
            Perspective().scale(0.0)(ramp_4x4)
