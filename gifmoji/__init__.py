"""
gifmoji - Turn a still image into a looping spin or intensify GIF
"""

from .core import (
    SourceParser,
    SourceImage,
    AnimationSequence,
    Frame,
    GifEncoder,
    SpriteExporter,
    GifmojiError,
    ConfigError,
    SourceError,
    EncodeError,
)
from .procedural import (
    EFFECTS,
    EffectConfig,
    IntensifyParams,
    SpinParams,
    Style,
    generate,
    generate_sequence,
    get_effect,
)
from .core.session import GenerationSession, OutputResource
from .core.presets import PresetManager, EffectPreset, get_preset, load_config

__version__ = "0.1.0"
__all__ = [
    'SourceParser',
    'SourceImage',
    'AnimationSequence',
    'Frame',
    'GifEncoder',
    'SpriteExporter',
    'GifmojiError',
    'ConfigError',
    'SourceError',
    'EncodeError',
    'EFFECTS',
    'EffectConfig',
    'SpinParams',
    'IntensifyParams',
    'Style',
    'generate',
    'generate_sequence',
    'get_effect',
    'GenerationSession',
    'OutputResource',
    'PresetManager',
    'EffectPreset',
    'get_preset',
    'load_config',
    'animate',
]


def animate(
    image_path: str,
    output_path: str = None,
    config: EffectConfig = None,
    preset: str = None,
    seed: float = None
):
    """
    Animate an image with a config or a named preset.

    Args:
        image_path: Path to the source image
        output_path: Output GIF path (auto-generated if None)
        config: Effect configuration (default: plain spin)
        preset: Preset name, used when no config is given
        seed: Intensify seed for reproducible output

    Returns:
        Path to the written GIF
    """
    from pathlib import Path

    if config is None and preset is not None:
        found = get_preset(preset)
        if found is None:
            raise ConfigError(f"Unknown preset: {preset}")
        config = found.to_config()
    config = config or EffectConfig()

    source = SourceParser.parse(image_path)
    sequence = generate_sequence(source, config, seed=seed)

    # Generate output path if not specified
    if output_path is None:
        input_path = Path(image_path)
        output_path = input_path.parent / f"{input_path.stem}_{config.style.value}.gif"

    return SpriteExporter.to_gif(sequence, output_path)
