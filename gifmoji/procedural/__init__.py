"""
Procedural Effects - Frame generation strategies
"""

import logging
from typing import List, Optional

from .base import (
    BaseEffect,
    EffectConfig,
    EffectParams,
    IntensifyParams,
    SpinParams,
    Style,
)
from .intensify import IntensifyEffect, Offset2D, draw_seed, intensify_offset
from .spin import SpinEffect
from ..core.errors import ConfigError
from ..core.parser import SourceImage, validate_source
from ..core.sequence import AnimationSequence, Frame, assemble

logger = logging.getLogger(__name__)

# Effect registry for easy access
EFFECTS = {
    'spin': SpinEffect,
    'rotate': SpinEffect,  # Alias
    'intensify': IntensifyEffect,
    'shake': IntensifyEffect,  # Alias
}


def get_effect(name: str | Style) -> type:
    """Get effect class by name or style"""
    if isinstance(name, Style):
        name = name.value
    name = name.lower()
    if name not in EFFECTS:
        raise ConfigError(f"Unknown effect: {name}. Available: {sorted(EFFECTS)}")
    return EFFECTS[name]


def create_effect(config: EffectConfig, seed: Optional[float] = None) -> BaseEffect:
    """Instantiate the strategy matching ``config.style``"""
    config.validate()
    effect_class = get_effect(config.style)
    if config.style is Style.INTENSIFY:
        return effect_class(config, seed=seed)
    return effect_class(config)


def generate(source: SourceImage, config: EffectConfig, seed: Optional[float] = None) -> List[Frame]:
    """
    Produce the normalized frames for one animation.

    Args:
        source: Decoded source image (only read)
        config: Validated effect parameters
        seed: Intensify seed; drawn once per call when omitted, unused by spin

    Raises:
        ConfigError: invalid parameters, before any compositing
        SourceError: zero-sized or malformed source
    """
    effect = create_effect(config, seed=seed)
    validate_source(source)
    return effect.apply(source)


def generate_sequence(
    source: SourceImage,
    config: EffectConfig,
    seed: Optional[float] = None
) -> AnimationSequence:
    """Generate frames and assemble them into an AnimationSequence"""
    effect = create_effect(config, seed=seed)
    validate_source(source)
    frames = effect.apply(source)
    used_seed = getattr(effect, 'seed', None)

    logger.info(
        "Generated %s animation: %d frames, %d ms delay",
        config.style.value, len(frames), config.frame_delay_ms
    )
    return assemble(frames, config, seed=used_seed, stats=effect.normalizer.totals)


__all__ = [
    'BaseEffect',
    'EffectConfig',
    'EffectParams',
    'SpinParams',
    'IntensifyParams',
    'Style',
    'SpinEffect',
    'IntensifyEffect',
    'Offset2D',
    'intensify_offset',
    'draw_seed',
    'EFFECTS',
    'get_effect',
    'create_effect',
    'generate',
    'generate_sequence',
]
