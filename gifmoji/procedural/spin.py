"""
Spin Effect - One full turn per loop, centred on the canvas
"""

import math
from typing import Optional

from .base import BaseEffect, EffectConfig, SpinParams, Style
from ..core.compositor import Placement
from ..core.errors import ConfigError


class SpinEffect(BaseEffect):
    """Rotates the source through a full turn across the loop"""

    name = "spin"
    description = "Smooth rotation, clockwise or reversed"
    style = Style.SPIN

    def __init__(self, config: Optional[EffectConfig] = None):
        config = config or EffectConfig(effect=SpinParams())
        if not isinstance(config.effect, SpinParams):
            raise ConfigError(f"SpinEffect needs SpinParams, got {type(config.effect).__name__}")
        super().__init__(config)
        self.direction = -1 if config.effect.reverse else 1

    def angle(self, frame_idx: int) -> float:
        """Base rotation for a frame: direction * 2pi * i / n"""
        return self.direction * 2 * math.pi * self._get_progress(frame_idx)

    def placement(self, frame_idx: int) -> Placement:
        return Placement(angle=self.angle(frame_idx))

    def previous_placement(self, frame_idx: int) -> Placement:
        previous = self.angle(self._previous_index(frame_idx))
        delta = self.angle(frame_idx) - previous

        # Frame 0 looks back at frame n-1; unwrap by a turn so the step
        # keeps the spin direction
        if delta * self.direction < 0:
            previous -= self.direction * 2 * math.pi

        return Placement(angle=previous)
