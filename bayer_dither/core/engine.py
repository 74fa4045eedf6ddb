"""Dithering entry point.

Validation → threshold sampler → grayscale or color pass → optional
order-preserving post-pass. Inputs are never modified.
"""

from __future__ import annotations

import numpy as np

from bayer_dither.core.color import ColorPolicy, apply_policy, compute_luma
from bayer_dither.core.dither import (
    dither_color,
    dither_grayscale,
    threshold_decision,
)
from bayer_dither.core.errors import EmptyBuffer, InvalidPixelFormat
from bayer_dither.core.matrix import ThresholdSampler, bayer_matrix
from bayer_dither.core.order import PreserveOrder, as_preserve_order, preserve_order


def _check_format(buffer: np.ndarray, color_mode: bool) -> None:
    if not np.issubdtype(buffer.dtype, np.integer):
        raise InvalidPixelFormat(buffer.shape, "an integer pixel buffer")
    if color_mode:
        if buffer.ndim != 3 or buffer.shape[2] != 3:
            raise InvalidPixelFormat(buffer.shape, "an (H, W, 3) RGB buffer")
    elif not (buffer.ndim == 2 or (buffer.ndim == 3 and buffer.shape[2] == 1)):
        raise InvalidPixelFormat(buffer.shape, "an (H, W) grayscale buffer")


def _max_value(buffer: np.ndarray, max_value: int | None) -> int:
    if max_value is not None:
        return int(max_value)
    return int(np.iinfo(buffer.dtype).max)


def _plane(buffer: np.ndarray) -> np.ndarray:
    return buffer if buffer.ndim == 2 else buffer[..., 0]


def decide(
    buffer: np.ndarray,
    matrix_size: int,
    color_mode: bool = False,
    max_value: int | None = None,
) -> np.ndarray:
    """Return the (H, W) light/dark decision plane (True = light)."""
    bayer_matrix(matrix_size)
    buffer = np.asarray(buffer)
    _check_format(buffer, color_mode)
    top = _max_value(buffer, max_value)
    sampler = ThresholdSampler(matrix_size, top)

    values = compute_luma(buffer, top) if color_mode else _plane(buffer)
    return threshold_decision(values, sampler)


def dither(
    buffer: np.ndarray,
    matrix_size: int,
    color_mode: bool = False,
    preserve_mode: PreserveOrder | str | None = PreserveOrder.NONE,
    policy: ColorPolicy | str = ColorPolicy.HUE,
    max_value: int | None = None,
    allow_empty: bool = True,
) -> np.ndarray:
    """Apply ordered dithering to a pixel buffer.

    Args:
        buffer: (H, W) or (H, W, 1) grayscale, or (H, W, 3) RGB, integer dtype.
        matrix_size: Bayer matrix size, 2, 4 or 8.
        color_mode: dither the luma of an RGB buffer instead of a gray plane.
        preserve_mode: decision class that keeps its luma ordering.
            Only applies in color mode.
        policy: how dithered levels are rendered onto RGB pixels.
        max_value: channel maximum; defaults to the dtype maximum.
        allow_empty: return an empty copy for zero-size input instead of
            raising EmptyBuffer.

    Returns:
        New array with the shape and dtype of ``buffer``.

    Raises:
        InvalidMatrixSize: matrix_size is not 2, 4 or 8.
        InvalidPixelFormat: buffer layout or dtype does not fit the mode.
        EmptyBuffer: zero-size input with allow_empty=False.
    """
    bayer_matrix(matrix_size)
    buffer = np.asarray(buffer)
    _check_format(buffer, color_mode)
    top = _max_value(buffer, max_value)
    sampler = ThresholdSampler(matrix_size, top)
    preserve = as_preserve_order(preserve_mode)
    policy = ColorPolicy(policy)

    if buffer.size == 0:
        if not allow_empty:
            raise EmptyBuffer(buffer.shape)
        return buffer.copy()

    if not color_mode:
        out = dither_grayscale(_plane(buffer), sampler, top)
        return out.reshape(buffer.shape)

    if preserve == PreserveOrder.NONE:
        return dither_color(buffer, sampler, top, policy)

    luma = compute_luma(buffer, top)
    light = threshold_decision(luma, sampler)
    levels = preserve_order(luma, light, preserve, top)
    return apply_policy(buffer, levels, policy, top)
