"""Image processing pipeline.

Pillow image → pixel buffer → dither engine → Pillow image.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import numpy as np
from PIL import Image

from bayer_dither.core.color import ColorPolicy, alpha_mask
from bayer_dither.core.engine import decide, dither
from bayer_dither.core.order import PreserveOrder

# Single-channel modes whose samples are 16-bit. Older Pillow opens 16-bit
# PNG and TIFF gray as 32-bit "I".
_GRAY16_MODES = ("I", "I;16", "I;16L", "I;16B")
_GRAY16_MAX = 65535


@dataclass(frozen=True)
class DitherSettings:
    """Processing settings that affect output."""

    matrix_size: int = 4
    color: bool = False
    preserve: PreserveOrder = PreserveOrder.NONE
    policy: ColorPolicy = ColorPolicy.HUE
    mask: bool = False  # RGBA alpha mask instead of recolored pixels

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        data = (
            f"{self.matrix_size}:{self.color}:{self.preserve.value}:"
            f"{self.policy.value}:{self.mask}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]


def _to_gray_buffer(img: Image.Image) -> np.ndarray:
    if img.mode in _GRAY16_MODES:
        # "I" can hold any int32; convert("L") would clip it, not rescale
        wide = np.array(img).astype(np.int64)
        return np.clip(wide, 0, _GRAY16_MAX).astype(np.uint16)
    return np.array(img.convert("L"), dtype=np.uint8)


def _to_rgb_buffer(img: Image.Image) -> np.ndarray:
    if img.mode in _GRAY16_MODES:
        gray = (_to_gray_buffer(img) >> 8).astype(np.uint8)
        return np.repeat(gray[..., np.newaxis], 3, axis=2)
    return np.array(img.convert("RGB"), dtype=np.uint8)


def _from_buffer(buffer: np.ndarray) -> Image.Image:
    # uint8 (H, W) → L, (H, W, 3) → RGB, (H, W, 4) → RGBA, uint16 (H, W) → I;16
    return Image.fromarray(np.ascontiguousarray(buffer))


def process_image(img: Image.Image, settings: DitherSettings) -> Image.Image:
    """Dither a single image according to settings.

    Grayscale mode works on the image's luminance ("L", or 16-bit gray kept
    as is). Color mode works on RGB. With ``mask`` set the original colors are
    kept and the dither pattern goes into the alpha channel: opaque on light
    pixels when preserving light, on dark pixels otherwise.
    """
    if settings.mask:
        rgb = _to_rgb_buffer(img)
        light = decide(rgb, settings.matrix_size, color_mode=True)
        keep_light = settings.preserve == PreserveOrder.LIGHT
        return _from_buffer(alpha_mask(rgb, light, keep_light))

    if settings.color:
        buffer = _to_rgb_buffer(img)
    else:
        buffer = _to_gray_buffer(img)

    out = dither(
        buffer,
        settings.matrix_size,
        color_mode=settings.color,
        preserve_mode=settings.preserve,
        policy=settings.policy,
    )
    return _from_buffer(out)
