import numpy as np
import pytest

from gifmoji.core.parser import SourceParser

RED = (220, 30, 40, 255)
BLUE = (20, 40, 210, 255)


def solid_pixels(width: int, height: int, color=RED) -> np.ndarray:
    """Opaque solid-colour RGBA buffer"""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


@pytest.fixture
def solid_source():
    """100x100 fully opaque solid-colour source"""
    return SourceParser.from_array(solid_pixels(100, 100), name="solid")


@pytest.fixture
def split_source():
    """100x100 source: top half red, bottom half blue"""
    pixels = solid_pixels(100, 100, BLUE)
    pixels[:50] = RED
    return SourceParser.from_array(pixels, name="split")


@pytest.fixture
def holed_source():
    """10x10 opaque source with one fully transparent pixel at row 4, column 3"""
    pixels = solid_pixels(10, 10)
    pixels[4, 3] = (0, 0, 0, 0)
    return SourceParser.from_array(pixels, name="holed")
