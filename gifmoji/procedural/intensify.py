"""
Intensify Effect - Jittery "intensifies" shake around the canvas centre
Offsets come from layered sines of a per-sequence seed, so every frame of
one animation shares the same coherent pattern.
"""

import math
from typing import NamedTuple, Optional

import numpy as np

from .base import BaseEffect, EffectConfig, IntensifyParams, Style
from ..core.compositor import Placement
from ..core.errors import ConfigError

# Seeds are drawn from [0, SEED_RANGE) when the caller does not pass one
SEED_RANGE = 1000.0


class Offset2D(NamedTuple):
    x: float
    y: float


def intensify_offset(seed: float, frame_idx: int, intensity: float) -> Offset2D:
    """Positional offset of a frame; pure in (seed, frame_idx, intensity)"""
    x = intensity * (math.sin(seed + frame_idx * 1.37) + math.sin(seed * 1.79 + frame_idx * 0.73))
    y = intensity * (math.sin(seed * 0.97 + frame_idx * 1.49) + math.sin(seed * 1.31 + frame_idx * 0.91))
    return Offset2D(x, y)


def draw_seed(rng: Optional[np.random.Generator] = None) -> float:
    """Draw one seed for a whole sequence"""
    rng = rng or np.random.default_rng()
    return float(rng.uniform(0.0, SEED_RANGE))


class IntensifyEffect(BaseEffect):
    """Shakes the source by a seeded, deterministic offset per frame"""

    name = "intensify"
    description = "Seeded positional jitter"
    style = Style.INTENSIFY

    def __init__(self, config: Optional[EffectConfig] = None, seed: Optional[float] = None):
        config = config or EffectConfig(effect=IntensifyParams())
        if not isinstance(config.effect, IntensifyParams):
            raise ConfigError(
                f"IntensifyEffect needs IntensifyParams, got {type(config.effect).__name__}"
            )
        super().__init__(config)
        self.intensity = config.effect.intensity
        self.seed = draw_seed() if seed is None else float(seed)

    def offset(self, frame_idx: int) -> Offset2D:
        return intensify_offset(self.seed, frame_idx, self.intensity)

    def placement(self, frame_idx: int) -> Placement:
        offset = self.offset(frame_idx)
        return Placement(dx=offset.x, dy=offset.y)
