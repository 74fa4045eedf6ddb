"""Errors raised by the dithering engine.

All of them are configuration mistakes detected before any pixel is touched.
"""

from __future__ import annotations


class DitherError(ValueError):
    """Base class for dithering failures."""


class InvalidMatrixSize(DitherError):
    def __init__(self, size: object) -> None:
        super().__init__(
            f"Invalid Bayer matrix size: {size!r}. Choose from: 2, 4, 8."
        )
        self.size = size


class InvalidPixelFormat(DitherError):
    def __init__(self, shape: tuple[int, ...], expected: str) -> None:
        super().__init__(
            f"Invalid pixel format: buffer shape {shape} does not match {expected}."
        )
        self.shape = shape
        self.expected = expected


class EmptyBuffer(DitherError):
    def __init__(self, shape: tuple[int, ...]) -> None:
        super().__init__(f"Empty pixel buffer: shape {shape}.")
        self.shape = shape
