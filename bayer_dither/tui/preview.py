"""Dithered image preview widget for the TUI."""

from __future__ import annotations

import numpy as np
from PIL import Image
from rich.text import Text
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

UPPER_HALF_BLOCK = "▀"
EMPTY_MESSAGE = "No image loaded. Press 'o' to open a file."


def _flatten(img: Image.Image) -> np.ndarray:
    """RGB pixels of an image; transparent areas are composited onto black."""
    if img.mode in ("RGBA", "LA"):
        rgba = img.convert("RGBA")
        black = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        img = Image.alpha_composite(black, rgba)
    elif img.mode.startswith("I"):
        # 16-bit gray: keep the high byte
        gray = np.clip(np.array(img).astype(np.int64), 0, 65535) >> 8
        return np.repeat(gray.astype(np.uint8)[..., np.newaxis], 3, axis=2)
    return np.array(img.convert("RGB"), dtype=np.uint8)


def image_to_text(img: Image.Image) -> Text:
    """Render an image as half-block characters.

    Each character cell covers two pixel rows: the foreground color is the
    upper pixel, the background color the lower one. Odd heights are padded
    with a black row.
    """
    rgb = _flatten(img)
    h = rgb.shape[0]
    if h % 2:
        rgb = np.concatenate([rgb, np.zeros_like(rgb[:1])], axis=0)

    text = Text()
    for y in range(0, rgb.shape[0], 2):
        if y > 0:
            text.append("\n")
        top_row = rgb[y]
        bottom_row = rgb[y + 1]
        for top, bottom in zip(top_row, bottom_row):
            style = (
                f"rgb({top[0]},{top[1]},{top[2]}) "
                f"on rgb({bottom[0]},{bottom[1]},{bottom[2]})"
            )
            text.append(UPPER_HALF_BLOCK, style=style)
    return text


class DitherPreview(Widget):
    """Widget that displays a dithered image using Rich styled text."""

    DEFAULT_CSS = """
    DitherPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    DitherPreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="preview-content")

    def update_image(self, img: Image.Image) -> None:
        """Show a dithered image."""
        content = self.query_one("#preview-content", Static)
        content.update(image_to_text(img))
