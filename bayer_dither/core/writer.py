"""Save dithered images to a file or a binary stream."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from PIL import Image

# Output extension → Pillow format name
OUTPUT_FORMATS: dict[str, str] = {
    ".png": "PNG",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}

# Formats that cannot store an alpha channel
_NO_ALPHA = ("JPEG", "BMP")


def auto_output_path(input_path: Path) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_dithered.png"


def _prepare(img: Image.Image, fmt: str) -> Image.Image:
    if fmt in _NO_ALPHA and img.mode in ("RGBA", "LA"):
        return img.convert("RGB")
    # Only PNG and TIFF keep 16-bit gray
    if img.mode.startswith("I") and fmt not in ("PNG", "TIFF"):
        return img.convert("L")
    return img


def save_image(img: Image.Image, output_path: Path) -> None:
    """Save an image in the format determined by the output file extension."""
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    fmt = OUTPUT_FORMATS.get(suffix)
    if fmt is None:
        raise ValueError(f"Unsupported output format: {suffix or '(none)'}")
    _prepare(img, fmt).save(str(output_path), format=fmt)


def write_png(img: Image.Image, stream: BinaryIO) -> None:
    """PNG-encode an image onto a binary stream and flush it."""
    img.save(stream, format="PNG")
    stream.flush()
