"""
Error types raised by the frame generation pipeline
"""


class GifmojiError(Exception):
    """Base class for all gifmoji errors"""


class ConfigError(GifmojiError, ValueError):
    """Invalid effect parameter, raised before any compositing work"""


class SourceError(GifmojiError):
    """Degenerate or undecodable source image"""


class EncodeError(GifmojiError):
    """The animated-image encoder failed to produce output"""
