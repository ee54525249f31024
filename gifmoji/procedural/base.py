"""
Base Effect - Abstract base class for frame generation strategies
Holds the shared effect configuration and the motion-blur windowing loop
"""

import logging
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np

from ..core.compositor import Compositor, Placement
from ..core.errors import ConfigError
from ..core.normalize import TransparencyNormalizer
from ..core.parser import SourceImage, validate_source
from ..core.sequence import Frame

logger = logging.getLogger(__name__)


class Style(Enum):
    """Available generation strategies"""
    SPIN = "spin"
    INTENSIFY = "intensify"


@dataclass(frozen=True)
class SpinParams:
    """Spin-only parameters"""
    reverse: bool = False

    style = Style.SPIN

    def __post_init__(self):
        if not isinstance(self.reverse, (bool, np.bool_)):
            raise ConfigError(f"reverse must be true or false, got {self.reverse!r}")


@dataclass(frozen=True)
class IntensifyParams:
    """Intensify-only parameters"""
    intensity: float = 1.0

    style = Style.INTENSIFY

    def __post_init__(self):
        _require_real('intensity', self.intensity)
        if not np.isfinite(self.intensity) or self.intensity < 0:
            raise ConfigError(f"intensity must be a finite value >= 0, got {self.intensity}")


EffectParams = Union[SpinParams, IntensifyParams]

# UI surface names -> EffectConfig field names
_FIELD_ALIASES = {
    'frameDelayMs': 'frame_delay_ms',
    'numFrames': 'num_frames',
    'blurFrames': 'blur_frames',
    'blurAmount': 'blur_amount',
    'blurLength': 'blur_length',
}


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _require_real(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class EffectConfig:
    """Immutable, validated parameter set for one generation request"""
    effect: EffectParams = field(default_factory=SpinParams)
    frame_delay_ms: int = 50
    zoom: float = 1.0
    num_frames: int = 8
    blur_frames: int = 0
    blur_amount: float = 0.5
    blur_length: float = 0.5

    def __post_init__(self):
        self.validate()

    @property
    def style(self) -> Style:
        return self.effect.style

    def validate(self) -> None:
        """Raise ConfigError on the first invalid field"""
        if not isinstance(self.effect, (SpinParams, IntensifyParams)):
            raise ConfigError(f"Unknown effect parameters: {self.effect!r}")

        _require_int('frame_delay_ms', self.frame_delay_ms)
        if self.frame_delay_ms <= 0:
            raise ConfigError(f"frame_delay_ms must be > 0, got {self.frame_delay_ms}")

        _require_real('zoom', self.zoom)
        if not np.isfinite(self.zoom) or self.zoom <= 0:
            raise ConfigError(f"zoom must be > 0, got {self.zoom}")

        _require_int('num_frames', self.num_frames)
        if self.num_frames < 1:
            raise ConfigError(f"num_frames must be >= 1, got {self.num_frames}")

        _require_int('blur_frames', self.blur_frames)
        if self.blur_frames < 0:
            raise ConfigError(f"blur_frames must be >= 0, got {self.blur_frames}")

        for name in ('blur_amount', 'blur_length'):
            value = getattr(self, name)
            _require_real(name, value)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")

    def output_size(self, source: SourceImage) -> tuple:
        """(width, height) of every frame for this source"""
        width = max(1, int(round(source.width * self.zoom)))
        height = max(1, int(round(source.height * self.zoom)))
        return width, height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EffectConfig':
        """
        Build a config from the flat UI surface.

        ``reverse`` is read only for spin and ``intensity`` only for
        intensify; the other is ignored.
        """
        data = {_FIELD_ALIASES.get(k, k): v for k, v in data.items()}

        style_name = data.pop('style', Style.SPIN.value)
        try:
            style = style_name if isinstance(style_name, Style) else Style(str(style_name).lower())
        except ValueError:
            raise ConfigError(
                f"Unknown style: {style_name}. Available: {[s.value for s in Style]}"
            ) from None

        reverse = data.pop('reverse', False)
        intensity = data.pop('intensity', 1.0)
        if style is Style.SPIN:
            effect = SpinParams(reverse=reverse)
        else:
            effect = IntensifyParams(intensity=intensity)

        # Filter to valid fields
        valid_fields = {f for f in cls.__dataclass_fields__ if f != 'effect'}
        unknown = set(data) - valid_fields
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", sorted(unknown))
        filtered = {k: v for k, v in data.items() if k in valid_fields}

        return cls(effect=effect, **filtered)

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary form, the inverse of from_dict"""
        data = {
            'style': self.style.value,
            'frame_delay_ms': self.frame_delay_ms,
            'zoom': self.zoom,
            'num_frames': self.num_frames,
            'blur_frames': self.blur_frames,
            'blur_amount': self.blur_amount,
            'blur_length': self.blur_length,
        }
        if isinstance(self.effect, SpinParams):
            data['reverse'] = self.effect.reverse
        else:
            data['intensity'] = self.effect.intensity
        return data


class BaseEffect(ABC):
    """
    Abstract base class for frame generation strategies.

    Subclasses only say where the source sits for a given frame index;
    the base class lays down the base layer, the trailing blur sub-frames
    and the transparency normalization.
    """

    # Effect metadata
    name: str = "base"
    description: str = "Base effect"
    style: Optional[Style] = None

    def __init__(self, config: EffectConfig):
        config.validate()
        self.config = config
        self.normalizer = TransparencyNormalizer()

    @abstractmethod
    def placement(self, frame_idx: int) -> Placement:
        """Base-layer placement for a frame"""

    def previous_placement(self, frame_idx: int) -> Placement:
        """Placement of the cyclic predecessor frame"""
        return self.placement(self._previous_index(frame_idx))

    def blur_placements(self, frame_idx: int) -> List[tuple]:
        """
        (placement, alpha) for each trailing blur sub-frame of a frame.

        The window covers the last ``blur_length`` of the step from the
        previous frame; sub-frame b of B sits b / (B + 1) of the way from
        the window start towards the current frame.
        """
        cfg = self.config
        if cfg.blur_frames == 0:
            return []

        current = self.placement(frame_idx)
        previous = self.previous_placement(frame_idx)
        start = previous.lerp(current, 1.0 - cfg.blur_length)

        layers = []
        for blur_idx in range(cfg.blur_frames):
            t = blur_idx / (cfg.blur_frames + 1)
            layers.append((start.lerp(current, t), cfg.blur_amount * (1.0 - t)))
        return layers

    def apply(self, source: SourceImage) -> List[Frame]:
        """Generate every frame of the animation, in display order"""
        validate_source(source)
        width, height = self.config.output_size(source)
        compositor = Compositor(source, width, height, scale=self.config.zoom)
        self.normalizer.reset()

        frames = []
        for i in range(self.config.num_frames):
            pixels = np.zeros((height, width, 4), dtype=np.uint8)

            # Base layer first so the blur ghosts sit on top
            compositor.draw(pixels, self.placement(i), 1.0)
            for layer, alpha in self.blur_placements(i):
                compositor.draw(pixels, layer, alpha)

            frames.append(self.normalizer.normalize(self._create_frame(pixels)))

        logger.debug(
            "%s produced %d frames of %dx%d (%d blur layers each)",
            self.name, len(frames), width, height, self.config.blur_frames
        )
        return frames

    def _create_frame(self, pixels: np.ndarray) -> Frame:
        """Helper to create a new frame from pixels"""
        return Frame(pixels=pixels, delay_ms=self.config.frame_delay_ms)

    def _previous_index(self, frame_idx: int) -> int:
        return (frame_idx - 1) % self.config.num_frames

    def _get_progress(self, frame_idx: int) -> float:
        """Get normalized progress for a frame (0-1)"""
        return frame_idx / self.config.num_frames
