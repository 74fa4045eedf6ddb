"""Tests for the image processing pipeline."""

import numpy as np
import pytest
from PIL import Image

from bayer_dither.core.color import ColorPolicy
from bayer_dither.core.errors import InvalidMatrixSize
from bayer_dither.core.order import PreserveOrder
from bayer_dither.core.processor import DitherSettings, process_image


def _gradient_image(width=32, height=16):
    """Horizontal RGB gradient with some hue variation."""
    x = np.linspace(0, 255, width, dtype=np.uint8)
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = x
    rgb[..., 1] = x[::-1]
    rgb[..., 2] = 128
    return Image.fromarray(rgb)


class TestSettings:
    def test_default_settings(self):
        s = DitherSettings()
        assert s.matrix_size == 4
        assert s.color is False
        assert s.preserve == PreserveOrder.NONE
        assert s.policy == ColorPolicy.HUE
        assert s.mask is False

    def test_hash_deterministic(self):
        assert DitherSettings().hash() == DitherSettings().hash()

    def test_hash_changes_with_settings(self):
        base = DitherSettings().hash()
        assert DitherSettings(matrix_size=8).hash() != base
        assert DitherSettings(color=True).hash() != base
        assert DitherSettings(preserve=PreserveOrder.DARK).hash() != base
        assert DitherSettings(policy=ColorPolicy.MONO).hash() != base
        assert DitherSettings(mask=True).hash() != base


class TestProcessImage:
    def test_grayscale_output(self):
        result = process_image(_gradient_image(), DitherSettings(matrix_size=2))
        assert result.mode == "L"
        assert result.size == (32, 16)
        assert set(np.unique(np.array(result)).tolist()) <= {0, 255}

    def test_grayscale_from_rgba(self):
        img = Image.new("RGBA", (8, 8), (128, 128, 128, 255))
        result = process_image(img, DitherSettings(matrix_size=2))
        expected = np.tile(np.array([[255, 0], [0, 255]], dtype=np.uint8), (4, 4))
        assert np.array_equal(np.array(result), expected)

    def test_color_output(self):
        settings = DitherSettings(matrix_size=4, color=True)
        result = process_image(_gradient_image(), settings)
        assert result.mode == "RGB"
        assert result.size == (32, 16)

    def test_color_preserve_order(self):
        settings = DitherSettings(
            matrix_size=8, color=True, preserve=PreserveOrder.DARK
        )
        result = np.array(process_image(_gradient_image(), settings))
        peak = result.max(axis=2)
        # dark pixels ramp below the midpoint, light pixels stay at full
        assert len(np.unique(peak[peak <= 127])) > 2
        assert set(np.unique(peak[peak > 127]).tolist()) <= {255}

    def test_mask_output(self):
        img = _gradient_image()
        result = process_image(img, DitherSettings(matrix_size=4, mask=True))
        arr = np.array(result)
        assert result.mode == "RGBA"
        assert np.array_equal(arr[..., :3], np.array(img))
        assert set(np.unique(arr[..., 3]).tolist()) <= {0, 255}

    def test_mask_light_is_inverse_of_dark(self):
        img = _gradient_image()
        dark = np.array(process_image(img, DitherSettings(mask=True)))
        light = np.array(
            process_image(
                img, DitherSettings(mask=True, preserve=PreserveOrder.LIGHT)
            )
        )
        total = dark[..., 3].astype(int) + light[..., 3].astype(int)
        assert np.all(total == 255)

    def test_sixteen_bit_grayscale(self):
        arr = np.full((4, 4), 32768, dtype=np.uint16)
        img = Image.fromarray(arr)
        result = process_image(img, DitherSettings(matrix_size=2))
        out = np.array(result)
        assert out.dtype == np.uint16
        assert set(np.unique(out).tolist()) == {0, 65535}

    def test_thirty_two_bit_gray_treated_as_sixteen_bit(self):
        img = Image.fromarray(np.full((4, 4), 32768, dtype=np.int32))
        assert img.mode == "I"
        out = np.array(process_image(img, DitherSettings(matrix_size=2)))
        expected = np.tile(np.array([[65535, 0], [0, 65535]]), (2, 2))
        assert out.dtype == np.uint16
        assert np.array_equal(out, expected)

    def test_thirty_two_bit_gray_out_of_range_clips(self):
        arr = np.array([[70000, 70000], [-5, -5]], dtype=np.int32)
        result = process_image(Image.fromarray(arr), DitherSettings(matrix_size=2))
        out = np.array(result)
        assert out.tolist() == [[65535, 65535], [0, 0]]

    def test_thirty_two_bit_gray_in_color_mode(self):
        img = Image.fromarray(np.full((4, 4), 32768, dtype=np.int32))
        result = process_image(img, DitherSettings(matrix_size=2, color=True))
        out = np.array(result)
        assert result.mode == "RGB"
        expected = np.tile(np.array([[255, 0], [0, 255]]), (2, 2))
        assert np.array_equal(out[..., 0], expected)

    def test_invalid_matrix_size(self):
        with pytest.raises(InvalidMatrixSize):
            process_image(_gradient_image(), DitherSettings(matrix_size=5))

    def test_source_untouched(self):
        img = _gradient_image()
        before = np.array(img).copy()
        process_image(img, DitherSettings(color=True, preserve=PreserveOrder.LIGHT))
        assert np.array_equal(np.array(img), before)
