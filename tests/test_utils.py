"""Tests for the preview cache and terminal fitting."""

from bayer_dither.utils.cache import PreviewCache
from bayer_dither.utils.terminal import fit_to_terminal


class TestPreviewCache:
    def test_miss_returns_none(self):
        cache = PreviewCache()
        assert cache.get("img", "abc") is None

    def test_put_get(self):
        cache = PreviewCache()
        cache.put("img", "abc", 42)
        assert cache.get("img", "abc") == 42
        assert cache.get("img", "other") is None

    def test_evicts_least_recently_used(self):
        cache = PreviewCache(max_size=2)
        cache.put("a", "s", 1)
        cache.put("b", "s", 2)
        cache.get("a", "s")  # b is now the oldest
        cache.put("c", "s", 3)
        assert cache.size == 2
        assert cache.get("b", "s") is None
        assert cache.get("a", "s") == 1
        assert cache.get("c", "s") == 3

    def test_overwrite_does_not_grow(self):
        cache = PreviewCache(max_size=2)
        cache.put("a", "s", 1)
        cache.put("a", "s", 2)
        assert cache.size == 1
        assert cache.get("a", "s") == 2

    def test_clear(self):
        cache = PreviewCache()
        cache.put("a", "s", 1)
        cache.clear()
        assert cache.size == 0


class TestFitToTerminal:
    def test_width_constrained(self):
        # 80 columns, 40 rows → up to 80x80 pixels
        assert fit_to_terminal(800, 400, max_width=80, max_height=40) == (80, 40)

    def test_height_constrained(self):
        assert fit_to_terminal(400, 800, max_width=80, max_height=20) == (20, 40)

    def test_never_enlarges(self):
        assert fit_to_terminal(10, 6, max_width=80, max_height=24) == (10, 6)

    def test_minimum_one_pixel(self):
        assert fit_to_terminal(10000, 1, max_width=10, max_height=10) == (10, 1)

    def test_zero_size_image(self):
        assert fit_to_terminal(0, 10, max_width=10, max_height=10) == (0, 0)
