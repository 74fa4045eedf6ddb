"""LRU cache for rendered previews keyed by (image_key, settings_hash)."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, TypeVar

T = TypeVar("T")


class PreviewCache(Generic[T]):
    """Simple LRU cache for dithered previews.

    Keys are (image_key, settings_hash) tuples; image_key identifies the
    source image and the preview size it was scaled to.
    """

    def __init__(self, max_size: int = 32) -> None:
        self._max_size = max_size
        self._cache: OrderedDict[tuple[str, str], T] = OrderedDict()

    def get(self, image_key: str, settings_hash: str) -> T | None:
        """Get a cached preview, or None if not present."""
        key = (image_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
            return self._cache[key]
        return None

    def put(self, image_key: str, settings_hash: str, value: T) -> None:
        """Cache a rendered preview, evicting the least recently used."""
        key = (image_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)
        self._cache[key] = value

    def clear(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)
