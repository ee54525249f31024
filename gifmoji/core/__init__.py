"""
gifmoji - Core pixel pipeline
"""

from .errors import GifmojiError, ConfigError, SourceError, EncodeError
from .parser import SourceParser, SourceImage, load_source, validate_source
from .normalize import (
    TransparencyNormalizer,
    NormalizationStats,
    CHROMA_KEY,
    CHROMA_KEY_RGBA,
    REMAPPED_KEY_RGBA,
)
from .compositor import Compositor, Placement
from .sequence import Frame, AnimationSequence, assemble, DISPOSAL_RESTORE_BACKGROUND
from .exporter import Encoder, GifEncoder, SpriteExporter, encode_sequence

__all__ = [
    'GifmojiError',
    'ConfigError',
    'SourceError',
    'EncodeError',
    'SourceParser',
    'SourceImage',
    'load_source',
    'validate_source',
    'TransparencyNormalizer',
    'NormalizationStats',
    'CHROMA_KEY',
    'CHROMA_KEY_RGBA',
    'REMAPPED_KEY_RGBA',
    'Compositor',
    'Placement',
    'Frame',
    'AnimationSequence',
    'assemble',
    'DISPOSAL_RESTORE_BACKGROUND',
    'Encoder',
    'GifEncoder',
    'SpriteExporter',
    'encode_sequence',
]
