"""Tests for gifmoji.core.normalize."""

import numpy as np

from gifmoji.core.normalize import NormalizationStats, TransparencyNormalizer
from gifmoji.core.sequence import Frame


def _pixels(*rows):
    return np.array(rows, dtype=np.uint8)


class TestNormalizePixels:
    """The per-pixel chroma-key rule."""

    def test_transparent_becomes_key(self):
        pixels = _pixels([[10, 20, 30, 0]])
        result = TransparencyNormalizer().normalize_pixels(pixels)
        assert tuple(result[0, 0]) == (255, 0, 255, 255)

    def test_opaque_magenta_is_remapped(self):
        pixels = _pixels([[255, 0, 255, 255]])
        result = TransparencyNormalizer().normalize_pixels(pixels)
        assert tuple(result[0, 0]) == (254, 0, 255, 255)

    def test_partial_alpha_becomes_opaque(self):
        pixels = _pixels([[12, 34, 56, 1], [200, 100, 50, 128]])
        result = TransparencyNormalizer().normalize_pixels(pixels)
        assert tuple(result[0, 0]) == (12, 34, 56, 255)
        assert tuple(result[0, 1]) == (200, 100, 50, 255)

    def test_semi_transparent_magenta_is_not_remapped(self):
        pixels = _pixels([[255, 0, 255, 100]])
        result = TransparencyNormalizer().normalize_pixels(pixels)
        assert tuple(result[0, 0]) == (255, 0, 255, 255)

    def test_all_alpha_is_255(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
        result = TransparencyNormalizer().normalize_pixels(pixels)
        assert np.all(result[:, :, 3] == 255)

    def test_input_is_not_modified(self):
        pixels = _pixels([[1, 2, 3, 0]])
        TransparencyNormalizer().normalize_pixels(pixels)
        assert tuple(pixels[0, 0]) == (1, 2, 3, 0)

    def test_key_only_where_transparent(self):
        rng = np.random.default_rng(11)
        pixels = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
        pixels[::3, ::3] = (255, 0, 255, 255)
        pixels[1::4, ::2, 3] = 0

        result = TransparencyNormalizer().normalize_pixels(pixels)
        is_key = np.all(result == (255, 0, 255, 255), axis=2)
        assert np.array_equal(is_key, pixels[:, :, 3] == 0)


class TestNormalizationStats:
    """Diagnostic bucket counts."""

    def test_counts_per_bucket(self):
        pixels = _pixels([[0, 0, 0, 0], [255, 0, 255, 255], [1, 1, 1, 255], [9, 9, 9, 50]])
        normalizer = TransparencyNormalizer()
        normalizer.normalize_pixels(pixels)
        assert normalizer.last == NormalizationStats(transparent=1, remapped=1, opaque=2)

    def test_totals_accumulate(self):
        pixels = _pixels([[0, 0, 0, 0], [1, 1, 1, 255]])
        normalizer = TransparencyNormalizer()
        normalizer.normalize_pixels(pixels)
        normalizer.normalize_pixels(pixels)
        assert normalizer.totals == NormalizationStats(transparent=2, remapped=0, opaque=2)
        assert normalizer.totals.total == 4

    def test_reset(self):
        normalizer = TransparencyNormalizer()
        normalizer.normalize_pixels(_pixels([[0, 0, 0, 0]]))
        normalizer.reset()
        assert normalizer.totals.total == 0


class TestNormalizeFrame:
    """Frame-level normalization is idempotent."""

    def test_marks_frame_normalized(self):
        frame = Frame(pixels=_pixels([[0, 0, 0, 0]]), delay_ms=50)
        result = TransparencyNormalizer().normalize(frame)
        assert result.normalized
        assert not frame.normalized
        assert result.delay_ms == 50

    def test_idempotent(self):
        rng = np.random.default_rng(3)
        pixels = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
        pixels[0, 0] = (255, 0, 255, 255)
        pixels[1, 1, 3] = 0
        normalizer = TransparencyNormalizer()

        once = normalizer.normalize(Frame(pixels=pixels, delay_ms=20))
        twice = normalizer.normalize(once)
        assert np.array_equal(once.pixels, twice.pixels)
        assert normalizer.last.total == 0
