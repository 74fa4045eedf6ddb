"""Ordered (Bayer) threshold dithering."""

from __future__ import annotations

import numpy as np

from bayer_dither.core.color import ColorPolicy, apply_policy, compute_luma
from bayer_dither.core.matrix import ThresholdSampler


def threshold_decision(values: np.ndarray, sampler: ThresholdSampler) -> np.ndarray:
    """Classify a 2D intensity plane: True = light (value > threshold)."""
    h, w = values.shape
    return values.astype(np.int64) > sampler.threshold_map(w, h)


def dither_grayscale(
    gray: np.ndarray, sampler: ThresholdSampler, max_value: int = 255
) -> np.ndarray:
    """Binarize a 2D intensity plane against the tiled matrix.

    Args:
        gray: 2D unsigned integer array.
        sampler: threshold source, already scaled to ``max_value``.
        max_value: value written for light pixels.

    Returns:
        New array of the same shape and dtype holding only 0 and max_value.
    """
    light = threshold_decision(gray, sampler)
    return np.where(light, max_value, 0).astype(gray.dtype)


def dither_color(
    rgb: np.ndarray,
    sampler: ThresholdSampler,
    max_value: int = 255,
    policy: ColorPolicy = ColorPolicy.HUE,
) -> np.ndarray:
    """Dither the luma of an (H, W, 3) buffer and map the result onto RGB.

    All three channels of a pixel share one light/dark decision.
    """
    luma = compute_luma(rgb, max_value)
    light = threshold_decision(luma, sampler)
    levels = np.where(light, max_value, 0)
    return apply_policy(rgb, levels, policy, max_value)
