"""Tests for the dither entry point."""

import numpy as np
import pytest

from bayer_dither.core.color import ColorPolicy
from bayer_dither.core.engine import decide, dither
from bayer_dither.core.errors import (
    DitherError,
    EmptyBuffer,
    InvalidMatrixSize,
    InvalidPixelFormat,
)
from bayer_dither.core.order import PreserveOrder


def _random_rgb(seed=0, shape=(16, 16, 3)):
    return np.random.default_rng(seed).integers(0, 256, shape, dtype=np.uint8)


class TestValidation:
    def test_invalid_matrix_size(self):
        gray = np.full((4, 4), 128, dtype=np.uint8)
        with pytest.raises(InvalidMatrixSize, match="Choose from"):
            dither(gray, 3)

    def test_matrix_size_checked_first(self):
        bad = np.zeros((2, 2), dtype=np.float32)
        with pytest.raises(InvalidMatrixSize):
            dither(bad, 3, color_mode=True)

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidMatrixSize, DitherError)
        assert issubclass(DitherError, ValueError)

    def test_color_needs_three_channels(self):
        gray = np.zeros((4, 4), dtype=np.uint8)
        with pytest.raises(InvalidPixelFormat):
            dither(gray, 2, color_mode=True)

    def test_color_rejects_rgba(self):
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        with pytest.raises(InvalidPixelFormat):
            dither(rgba, 2, color_mode=True)

    def test_grayscale_rejects_rgb(self):
        with pytest.raises(InvalidPixelFormat):
            dither(_random_rgb(), 2)

    def test_rejects_float_buffers(self):
        with pytest.raises(InvalidPixelFormat, match="integer"):
            dither(np.zeros((4, 4)), 2)

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            dither(_random_rgb(), 2, color_mode=True, policy="sepia")

    def test_invalid_preserve(self):
        with pytest.raises(ValueError, match="Invalid preserve order"):
            dither(_random_rgb(), 2, color_mode=True, preserve_mode="both")


class TestEmpty:
    def test_empty_returns_empty(self):
        empty = np.zeros((0, 5), dtype=np.uint8)
        result = dither(empty, 4)
        assert result.shape == (0, 5)
        assert result is not empty

    def test_empty_color(self):
        empty = np.zeros((3, 0, 3), dtype=np.uint8)
        assert dither(empty, 8, color_mode=True).shape == (3, 0, 3)

    def test_empty_strict(self):
        with pytest.raises(EmptyBuffer):
            dither(np.zeros((0, 0), dtype=np.uint8), 2, allow_empty=False)


class TestGrayscaleDither:
    def test_checkerboard_scenario(self):
        gray = np.full((4, 4), 128, dtype=np.uint8)
        result = dither(gray, 2)
        expected = np.tile(np.array([[255, 0], [0, 255]], dtype=np.uint8), (2, 2))
        assert np.array_equal(result, expected)

    def test_single_channel_shape_kept(self):
        gray = np.full((4, 6, 1), 200, dtype=np.uint8)
        result = dither(gray, 4)
        assert result.shape == (4, 6, 1)

    def test_preserve_is_noop_in_grayscale(self):
        gray = _random_rgb()[..., 0]
        assert np.array_equal(
            dither(gray, 4, preserve_mode="dark"),
            dither(gray, 4),
        )

    def test_sixteen_bit(self):
        gray = np.full((4, 4), 32768, dtype=np.uint16)
        result = dither(gray, 2)
        assert result.dtype == np.uint16
        expected = np.tile(np.array([[65535, 0], [0, 65535]], dtype=np.uint16), (2, 2))
        assert np.array_equal(result, expected)

    def test_explicit_max_value(self):
        gray = np.full((2, 2), 8, dtype=np.uint8)
        # 4-bit range: thresholds [[0, 8], [12, 4]]
        result = dither(gray, 2, max_value=15)
        assert result.tolist() == [[15, 0], [0, 15]]

    def test_input_not_mutated(self):
        gray = _random_rgb()[..., 1].copy()
        before = gray.copy()
        dither(gray, 8)
        assert np.array_equal(gray, before)

    def test_deterministic(self):
        gray = _random_rgb(seed=9)[..., 2]
        assert np.array_equal(dither(gray, 8), dither(gray, 8))


class TestColorDither:
    def test_red_ramp_scenario(self):
        """Dark-preserving a dim red region ramps the red channel."""
        rgb = np.zeros((4, 4, 3), dtype=np.uint8)
        rgb[...] = (3, 0, 0)  # luma 0: every pixel dark

        plain = dither(rgb, 2, color_mode=True)
        assert np.all(plain == 0)

        result = dither(rgb, 2, color_mode=True, preserve_mode=PreserveOrder.DARK)
        red = result[..., 0].ravel()
        assert np.all(np.diff(red.astype(int)) >= 0)
        assert red.max() == 127
        assert len(np.unique(red)) == 16
        assert np.all(result[..., 1:] == 0)

    @pytest.mark.parametrize("mode", ["dark", "light"])
    def test_preserve_keeps_classification(self, mode):
        rgb = _random_rgb(seed=11)
        light = decide(rgb, 4, color_mode=True)
        result = dither(rgb, 4, color_mode=True, preserve_mode=mode)
        assert np.array_equal(result.max(axis=2) > 127, light)

    def test_preserve_light_ranges(self):
        rgb = _random_rgb(seed=12)
        light = decide(rgb, 8, color_mode=True)
        result = dither(rgb, 8, color_mode=True, preserve_mode="light")
        peak = result.max(axis=2)
        assert np.all(peak[~light] == 0)
        assert peak[light].min() == 128
        assert peak[light].max() == 255

    def test_unset_preserve_is_binary(self):
        rgb = _random_rgb(seed=13)
        result = dither(rgb, 4, color_mode=True)
        assert set(np.unique(result.max(axis=2)).tolist()) <= {0, 255}

    def test_mono_policy_is_black_and_white(self):
        rgb = _random_rgb(seed=14)
        result = dither(rgb, 4, color_mode=True, policy="mono")
        assert set(np.unique(result).tolist()) <= {0, 255}
        assert np.all(result[..., 0] == result[..., 1])
        assert np.all(result[..., 1] == result[..., 2])

    def test_passthrough_keeps_light_pixels(self):
        rgb = _random_rgb(seed=15)
        light = decide(rgb, 4, color_mode=True)
        result = dither(rgb, 4, color_mode=True, policy=ColorPolicy.PASSTHROUGH)
        assert np.array_equal(result[light], rgb[light])
        assert np.all(result[~light] == 0)

    def test_input_not_mutated(self):
        rgb = _random_rgb(seed=16)
        before = rgb.copy()
        dither(rgb, 2, color_mode=True, preserve_mode="dark")
        assert np.array_equal(rgb, before)


class TestDecide:
    def test_grayscale_decision(self):
        gray = np.full((2, 2), 128, dtype=np.uint8)
        assert decide(gray, 2).tolist() == [[True, False], [False, True]]

    def test_color_decision_shape(self):
        assert decide(_random_rgb(), 8, color_mode=True).shape == (16, 16)

    def test_invalid_size(self):
        with pytest.raises(InvalidMatrixSize):
            decide(np.zeros((2, 2), dtype=np.uint8), 6)
