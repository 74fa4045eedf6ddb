"""Terminal size detection utilities."""

from __future__ import annotations

import shutil


def get_terminal_size(
    fallback_width: int = 80,
    fallback_height: int = 24,
) -> tuple[int, int]:
    """Get current terminal size in columns and rows.

    Returns (width, height). Falls back to provided defaults
    if terminal size cannot be determined.
    """
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_to_terminal(
    img_width: int,
    img_height: int,
    max_width: int | None = None,
    max_height: int | None = None,
) -> tuple[int, int]:
    """Calculate preview pixel dimensions that fit within the terminal.

    The preview draws two pixels per character cell (upper and lower
    half-block), and a cell is roughly twice as tall as it is wide, so one
    preview pixel is about square. The image is never enlarged.

    Args:
        img_width: original image width in pixels.
        img_height: original image height in pixels.
        max_width: maximum character columns (defaults to terminal width).
        max_height: maximum character rows (defaults to terminal height - 4 for UI).

    Returns:
        (pixel_width, pixel_height) tuple; pixel_height is at most 2 * max_height.
    """
    if max_width is None or max_height is None:
        tw, th = get_terminal_size()
        if max_width is None:
            max_width = tw
        if max_height is None:
            max_height = max(th - 4, 10)  # Leave room for UI chrome

    if img_width <= 0 or img_height <= 0:
        return 0, 0

    max_w = max(1, max_width)
    max_h = max(1, max_height) * 2

    scale = min(max_w / img_width, max_h / img_height, 1.0)
    return max(1, int(img_width * scale)), max(1, int(img_height * scale))
