"""
Animation sequence - Frames plus timing, ready for an encoder
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

import numpy as np

from .errors import EncodeError
from .normalize import CHROMA_KEY, NormalizationStats

if TYPE_CHECKING:
    from ..procedural.base import EffectConfig

# GIF disposal method 2: restore to background before the next frame
DISPOSAL_RESTORE_BACKGROUND = 2


@dataclass(frozen=True, eq=False)
class Frame:
    """One RGBA animation frame"""
    pixels: np.ndarray
    delay_ms: int
    disposal: int = DISPOSAL_RESTORE_BACKGROUND
    normalized: bool = False

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@dataclass(frozen=True, eq=False)
class AnimationSequence:
    """Ordered, normalized frames for one generation pass"""
    frames: Tuple[Frame, ...]
    width: int
    height: int
    delay_ms: int
    loop: int = 0  # 0 = forever
    chroma_key: Tuple[int, int, int] = CHROMA_KEY
    seed: Optional[float] = None
    stats: NormalizationStats = field(default_factory=NormalizationStats)

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[index]


def assemble(
    frames: Sequence[Frame],
    config: 'EffectConfig',
    seed: Optional[float] = None,
    stats: Optional[NormalizationStats] = None
) -> AnimationSequence:
    """Build an AnimationSequence; raises without producing a partial sequence"""
    if not frames:
        raise EncodeError("No frames to assemble")

    height, width = frames[0].pixels.shape[:2]
    for i, frame in enumerate(frames):
        if frame.pixels.shape != (height, width, 4):
            raise EncodeError(
                f"Frame {i} is {frame.width}x{frame.height}, expected {width}x{height}"
            )
        if not frame.normalized:
            raise EncodeError(f"Frame {i} has not been normalized")

    return AnimationSequence(
        frames=tuple(frames),
        width=width,
        height=height,
        delay_ms=config.frame_delay_ms,
        seed=seed,
        stats=stats or NormalizationStats(),
    )
