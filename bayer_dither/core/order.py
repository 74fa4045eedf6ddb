"""Order-preserving post-pass over one dither decision class.

Plain dithering collapses every dark pixel to 0 and every light pixel to max.
This pass re-ramps one class so its members keep their relative brightness
order, while staying on their side of the midpoint: dark levels span
[0, max // 2], light levels span [max // 2 + 1, max].

Runs after the per-pixel pass; it needs a global sort over the class.
"""

from __future__ import annotations

from enum import Enum

import numpy as np


class PreserveOrder(str, Enum):
    NONE = "none"
    DARK = "dark"
    LIGHT = "light"


def as_preserve_order(value: PreserveOrder | str | None) -> PreserveOrder:
    """Accept an enum member, its (case-insensitive) value, or None."""
    if value is None:
        return PreserveOrder.NONE
    if isinstance(value, PreserveOrder):
        return value
    try:
        return PreserveOrder(str(value).lower())
    except ValueError:
        raise ValueError(
            "Invalid preserve order option. Choose from: dark, light."
        ) from None


def ramp_levels(count: int, low: int, high: int) -> np.ndarray:
    """Evenly spaced integer levels from low to high (inclusive)."""
    if count <= 1:
        return np.full(count, low, dtype=np.int64)
    k = np.arange(count, dtype=np.int64)
    return low + k * (high - low) // (count - 1)


def preserve_order(
    luma: np.ndarray,
    decision: np.ndarray,
    mode: PreserveOrder | str | None,
    max_value: int = 255,
) -> np.ndarray:
    """Return the (H, W) output levels for a dithered plane.

    Args:
        luma: original (H, W) intensities.
        decision: (H, W) bool, True = light.
        mode: which class gets the ramp. NONE leaves flat 0/max levels.
        max_value: channel maximum.

    Members of the preserved class are ranked by luma with a stable sort
    (ties keep row-major scan order) and given evenly spaced levels across
    the class range. A class with fewer than two members stays flat.
    """
    mode = as_preserve_order(mode)
    levels = np.where(decision, max_value, 0).astype(np.int64)
    if mode == PreserveOrder.NONE:
        return levels

    group = decision if mode == PreserveOrder.LIGHT else ~decision
    members = np.flatnonzero(group)
    if members.size <= 1:
        return levels

    ranked = members[np.argsort(luma.ravel()[members], kind="stable")]

    mid = max_value // 2
    if mode == PreserveOrder.DARK:
        ramp = ramp_levels(members.size, 0, mid)
    else:
        ramp = ramp_levels(members.size, mid + 1, max_value)

    out = levels.ravel().copy()
    out[ranked] = ramp
    return out.reshape(levels.shape)
