"""
Source Parser - Decodes image files into read-only RGBA source buffers
Supports anything Pillow can open (PNG, GIF, JPEG, BMP, WebP)
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import SourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceImage:
    """Decoded still image the generator reads from"""
    width: int
    height: int
    pixels: np.ndarray  # HxWx4 uint8, read-only
    name: str = "source"
    source_path: Optional[Path] = None

    @property
    def has_transparency(self) -> bool:
        """Check if any pixel is not fully opaque"""
        return bool(np.any(self.pixels[:, :, 3] < 255))


class SourceParser:
    """Parses image files and arrays into SourceImage objects"""

    SUPPORTED_FORMATS = {'.png', '.gif', '.jpg', '.jpeg', '.bmp', '.webp'}

    @classmethod
    def parse(cls, path: str | Path) -> SourceImage:
        """Parse an image file into a SourceImage

        Args:
            path: Path to the image file

        Raises:
            SourceError: if the file is missing, unsupported or undecodable
        """
        path = Path(path)

        if not path.exists():
            raise SourceError(f"File not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in cls.SUPPORTED_FORMATS:
            raise SourceError(f"Unsupported format: {suffix}")

        try:
            with Image.open(path) as img:
                # Animated inputs contribute their first frame only
                img.seek(0)
                pixels = np.array(img.convert('RGBA'))
        except (UnidentifiedImageError, OSError) as e:
            raise SourceError(f"Could not decode {path}: {e}") from e

        logger.debug("Decoded %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
        return cls.from_array(pixels, name=path.stem, source_path=path)

    @classmethod
    def from_array(
        cls,
        pixels: np.ndarray,
        name: str = "source",
        source_path: Optional[Path] = None
    ) -> SourceImage:
        """Create a SourceImage from an HxWx3 or HxWx4 array"""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise SourceError("Pixels must be HxWx3 or HxWx4 array")

        h, w = pixels.shape[:2]
        if w == 0 or h == 0:
            raise SourceError(f"Source image has zero size ({w}x{h})")

        # Ensure RGBA
        if pixels.shape[2] == 3:
            alpha = np.full((h, w, 1), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels.astype(np.uint8), alpha], axis=2)
        else:
            pixels = pixels.astype(np.uint8, copy=True)

        pixels.setflags(write=False)
        return SourceImage(width=w, height=h, pixels=pixels, name=name, source_path=source_path)


def validate_source(source: SourceImage) -> None:
    """Raise SourceError unless the source is a usable RGBA buffer"""
    if source.width <= 0 or source.height <= 0:
        raise SourceError(f"Source image has zero size ({source.width}x{source.height})")
    if source.pixels.shape != (source.height, source.width, 4):
        raise SourceError(
            f"Pixel buffer shape {source.pixels.shape} does not match "
            f"{source.width}x{source.height} RGBA"
        )


async def load_source(path: str | Path) -> SourceImage:
    """Decode an image off the event loop; awaited once before generation"""
    return await asyncio.to_thread(SourceParser.parse, path)
