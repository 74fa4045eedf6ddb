"""Image loading from local files, HTTP(S) URLs or standard input.

Multi-frame containers (animated GIF/PNG, multi-page TIFF) are reduced to
their first frame.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from bayer_dither.version import __version__

IMAGE_SUFFIXES = (
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp",
)

STDIN_MARKER = "-"
STDIN_LABEL = "<stdin>"


@dataclass
class ImageInfo:
    """Metadata about the decoded input."""

    path: Path | None  # local file; None for stdin and URLs
    format: str  # "png", "jpeg", ...
    width: int
    height: int
    mode: str  # Pillow mode of the decoded image
    source: str = STDIN_LABEL  # what the user asked for: path, URL or "<stdin>"


@dataclass
class SourceImage:
    image: Image.Image
    info: ImageInfo


def is_url(path: str) -> bool:
    """Check if the input looks like an HTTP(S) URL."""
    try:
        parsed = urlparse(str(path))
        return parsed.scheme in ("http", "https")
    except ValueError:
        return False


def _guess_extension_from_url(url: str) -> str:
    """Extract file extension from a URL path."""
    parsed = urlparse(url)
    suffix = Path(parsed.path).suffix.lower()
    if suffix in IMAGE_SUFFIXES:
        return suffix
    # Pillow sniffs the real format from content
    return ".img"


DOWNLOAD_TIMEOUT = 30
CHUNK_SIZE = 65536


def download_image(
    url: str,
    on_progress: Callable[[int, int], None] | None = None,
) -> Path:
    """Fetch an image over HTTP(S) into a temporary file.

    The caller owns the returned file and is responsible for deleting it.
    On failure nothing is left behind.

    Args:
        url: HTTP(S) URL to download.
        on_progress: optional callback(bytes_received, content_length);
            content_length is 0 when the server does not send one.

    Raises:
        ValueError: if the URL is unreachable, returns an error or is empty.
    """
    request = urllib.request.Request(
        url, headers={"User-Agent": f"bayer-dither/{__version__}"}
    )
    fd, name = tempfile.mkstemp(suffix=_guess_extension_from_url(url))
    tmp_path = Path(name)

    try:
        with os.fdopen(fd, "wb") as out, urllib.request.urlopen(
            request, timeout=DOWNLOAD_TIMEOUT
        ) as resp:
            total = int(resp.headers.get("Content-Length") or 0)
            received = 0
            for chunk in iter(lambda: resp.read(CHUNK_SIZE), b""):
                out.write(chunk)
                received += len(chunk)
                if on_progress is not None:
                    on_progress(received, total)
        if received == 0:
            raise ValueError(f"Downloaded file is empty: {url}")
    except urllib.error.URLError as e:
        tmp_path.unlink(missing_ok=True)
        raise ValueError(f"Failed to download {url}: {e}") from e
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise

    return tmp_path


def _decode(data: BinaryIO | Path, label: str) -> Image.Image:
    """Decode the first frame and detach it from the source."""
    try:
        with Image.open(data) as img:
            img.seek(0)
            fmt = img.format
            img.load()
            frame = img.copy()
    except (UnidentifiedImageError, OSError, EOFError) as e:
        raise ValueError(f"Cannot decode image {label}: {e}") from e
    frame.format = fmt
    return frame


def read_stdin(stream: BinaryIO | None = None) -> SourceImage:
    """Read and decode image bytes from a binary stream (stdin by default)."""
    if stream is None:
        stream = sys.stdin.buffer
    data = stream.read()
    if not data:
        raise ValueError("No image data on standard input")
    img = _decode(io.BytesIO(data), "from standard input")
    return SourceImage(image=img, info=_info(img, None, STDIN_LABEL))


def _info(img: Image.Image, path: Path | None, source: str) -> ImageInfo:
    return ImageInfo(
        path=path,
        format=(img.format or "unknown").lower(),
        width=img.width,
        height=img.height,
        mode=img.mode,
        source=source,
    )


def read_image(source: str | Path | None) -> SourceImage:
    """Open an image and return its first frame with metadata.

    Accepts a local file path, an HTTP(S) URL (downloaded to a temporary
    file that is removed once decoded), or None / "-" for standard input.
    URL and stdin sources carry no local path in their ImageInfo.
    """
    if source is None or str(source) == STDIN_MARKER:
        return read_stdin()

    source_str = str(source)
    if is_url(source_str):
        tmp_path = download_image(source_str)
        try:
            img = _decode(tmp_path, source_str)
        finally:
            tmp_path.unlink(missing_ok=True)
        return SourceImage(image=img, info=_info(img, None, source_str))

    local_path = Path(source_str)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")

    img = _decode(local_path, str(local_path))
    return SourceImage(image=img, info=_info(img, local_path, source_str))
