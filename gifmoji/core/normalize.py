"""
Transparency Normalizer - Binary chroma-key transparency for GIF output

GIF has no partial alpha. Every frame is flattened to fully opaque pixels,
with fully transparent pixels painted in a reserved magenta key that the
encoder maps to its transparent palette index.
"""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .sequence import Frame

logger = logging.getLogger(__name__)

CHROMA_KEY = (255, 0, 255)
CHROMA_KEY_RGBA = np.array([255, 0, 255, 255], dtype=np.uint8)
# Opaque magenta in the source is nudged here so it never reads as the key
REMAPPED_KEY_RGBA = np.array([254, 0, 255, 255], dtype=np.uint8)


@dataclass(frozen=True)
class NormalizationStats:
    """Pixel counts per normalization bucket"""
    transparent: int = 0
    remapped: int = 0
    opaque: int = 0

    @property
    def total(self) -> int:
        return self.transparent + self.remapped + self.opaque

    def __add__(self, other: 'NormalizationStats') -> 'NormalizationStats':
        return NormalizationStats(
            transparent=self.transparent + other.transparent,
            remapped=self.remapped + other.remapped,
            opaque=self.opaque + other.opaque,
        )


class TransparencyNormalizer:
    """Applies the chroma-key rule and keeps running bucket counts"""

    def __init__(self):
        self.totals = NormalizationStats()
        self.last = NormalizationStats()

    def normalize_pixels(self, pixels: np.ndarray) -> np.ndarray:
        """
        Return a copy of an RGBA buffer with every pixel fully opaque.

        alpha == 0          -> (255, 0, 255, 255)
        == (255, 0, 255, 255) -> (254, 0, 255, 255)
        anything else       -> alpha forced to 255, RGB kept
        """
        result = pixels.copy()

        transparent = pixels[:, :, 3] == 0
        collides = np.all(pixels == CHROMA_KEY_RGBA, axis=2)

        result[:, :, 3] = 255
        result[collides] = REMAPPED_KEY_RGBA
        result[transparent] = CHROMA_KEY_RGBA

        n_transparent = int(np.count_nonzero(transparent))
        n_remapped = int(np.count_nonzero(collides))
        self.last = NormalizationStats(
            transparent=n_transparent,
            remapped=n_remapped,
            opaque=int(transparent.size) - n_transparent - n_remapped,
        )
        self.totals = self.totals + self.last

        logger.debug(
            "Normalized frame: %d transparent, %d remapped, %d opaque",
            self.last.transparent, self.last.remapped, self.last.opaque
        )
        return result

    def normalize(self, frame: 'Frame') -> 'Frame':
        """Normalize a frame; already-normalized frames pass through unchanged"""
        if frame.normalized:
            self.last = NormalizationStats()
            return frame
        return replace(frame, pixels=self.normalize_pixels(frame.pixels), normalized=True)

    def reset(self) -> None:
        self.totals = NormalizationStats()
        self.last = NormalizationStats()
