"""Luma extraction and mapping of dither levels back onto RGB pixels."""

from __future__ import annotations

from enum import Enum

import numpy as np


class ColorPolicy(str, Enum):
    HUE = "hue"
    PASSTHROUGH = "passthrough"
    MONO = "mono"


# ITU-R BT.601 weights, in thousandths
LUMA_WEIGHTS = (299, 587, 114)


def compute_luma(rgb: np.ndarray, max_value: int = 255) -> np.ndarray:
    """Return the integer luma plane of an (H, W, 3) buffer.

    Computed as floor(0.299 R + 0.587 G + 0.114 B) in integer arithmetic,
    so neutral grays map exactly onto themselves. This deliberately differs
    from truncating the float sum, where rounding error drops some grays by
    one (gray 1 becomes 0) and shifts a few colored pixels near a boundary.
    """
    channels = rgb.astype(np.int64)
    wr, wg, wb = LUMA_WEIGHTS
    luma = (
        wr * channels[..., 0] + wg * channels[..., 1] + wb * channels[..., 2]
    ) // 1000
    return np.clip(luma, 0, max_value)


def _scale_along_hue(channels: np.ndarray, levels: np.ndarray) -> np.ndarray:
    peak = channels.max(axis=2)
    lv = levels[..., np.newaxis]
    scaled = channels * lv // np.maximum(peak, 1)[..., np.newaxis]
    # Achromatic black has no hue to keep
    return np.where(peak[..., np.newaxis] > 0, scaled, lv)


def apply_policy(
    rgb: np.ndarray,
    levels: np.ndarray,
    policy: ColorPolicy,
    max_value: int = 255,
) -> np.ndarray:
    """Map per-pixel levels in [0, max_value] back onto RGB pixels.

    Args:
        rgb: (H, W, 3) source pixels.
        levels: (H, W) output intensities (0/max for plain dithering,
                a ramp inside the preserved class otherwise).
        policy: how a level is rendered:
            HUE         - brightest channel set to the level, hue kept.
            PASSTHROUGH - original color dimmed by level / max_value.
            MONO        - neutral gray at the level.
        max_value: channel maximum.

    Returns:
        New (H, W, 3) array with the dtype of ``rgb``.
    """
    channels = rgb.astype(np.int64)
    lv = levels.astype(np.int64)

    if policy == ColorPolicy.HUE:
        out = _scale_along_hue(channels, lv)
    elif policy == ColorPolicy.PASSTHROUGH:
        out = channels * lv[..., np.newaxis] // max_value
    elif policy == ColorPolicy.MONO:
        out = np.repeat(lv[..., np.newaxis], 3, axis=2)
    else:
        raise ValueError(f"Unknown color policy: {policy!r}")

    return np.clip(out, 0, max_value).astype(rgb.dtype)


def alpha_mask(
    rgb: np.ndarray,
    decision: np.ndarray,
    keep_light: bool,
    max_value: int = 255,
) -> np.ndarray:
    """Keep original colors, masking out one decision class via alpha.

    Returns an (H, W, 4) array: alpha is max_value on pixels whose decision
    equals ``keep_light`` and 0 elsewhere.
    """
    alpha = np.where(decision == keep_light, max_value, 0).astype(rgb.dtype)
    return np.concatenate([rgb, alpha[..., np.newaxis]], axis=2)
