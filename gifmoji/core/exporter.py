"""
GIF Exporter - Encodes animation sequences through Pillow
Encoding runs on a worker pool and completes through a one-shot future
"""

import io
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image

from .errors import EncodeError
from .normalize import CHROMA_KEY
from .sequence import DISPOSAL_RESTORE_BACKGROUND, AnimationSequence, Frame

logger = logging.getLogger(__name__)

# Palette index reserved for the chroma key
TRANSPARENT_INDEX = 255

_default_executor: Optional[ThreadPoolExecutor] = None


def default_executor() -> ThreadPoolExecutor:
    """Process-wide worker pool shared by encoders that are not given one"""
    global _default_executor
    if _default_executor is None:
        _default_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="gifmoji-encode")
    return _default_executor


class Encoder(ABC):
    """
    Animated-image encoder contract.

    Frames are submitted one at a time with ``add_frame``; ``render``
    starts encoding and returns a future that resolves exactly once with
    the encoded bytes or fails with EncodeError.
    """

    def __init__(
        self,
        width: int,
        height: int,
        delay_ms: int,
        loop: int = 0,
        chroma_key: tuple = CHROMA_KEY,
        executor: Optional[Executor] = None
    ):
        self.width = width
        self.height = height
        self.delay_ms = delay_ms
        self.loop = loop
        self.chroma_key = chroma_key
        self.executor = executor or default_executor()
        self._frames: List[Frame] = []
        self._future: Optional[Future] = None

    @classmethod
    def for_sequence(cls, sequence: AnimationSequence, executor: Optional[Executor] = None) -> 'Encoder':
        """Encoder configured from a sequence, with every frame submitted"""
        encoder = cls(
            sequence.width,
            sequence.height,
            sequence.delay_ms,
            loop=sequence.loop,
            chroma_key=sequence.chroma_key,
            executor=executor,
        )
        for frame in sequence.frames:
            encoder.add_frame(frame)
        return encoder

    def add_frame(self, frame: Frame) -> None:
        """Submit one complete frame"""
        if self._future is not None:
            raise EncodeError("Cannot add frames after render() was called")
        if frame.pixels.shape != (self.height, self.width, 4):
            raise EncodeError(
                f"Frame is {frame.width}x{frame.height}, encoder expects {self.width}x{self.height}"
            )
        self._frames.append(frame)

    def render(self) -> Future:
        """Start encoding on the worker pool; returns the one-shot result"""
        if self._future is not None:
            return self._future
        if not self._frames:
            raise EncodeError("No frames to encode")

        frames = list(self._frames)
        self._future = self.executor.submit(self._encode_guarded, frames)
        return self._future

    def _encode_guarded(self, frames: List[Frame]) -> bytes:
        try:
            return self.encode(frames)
        except EncodeError:
            raise
        except Exception as e:
            raise EncodeError(f"{type(self).__name__} failed: {e}") from e

    @abstractmethod
    def encode(self, frames: List[Frame]) -> bytes:
        # Pillow folds identical consecutive frames into one and sums their
        # durations, so the loop length is kept but not the frame count.
        """Encode frames synchronously; runs on the worker pool"""


class GifEncoder(Encoder):
    """Pillow GIF writer with chroma-key transparency"""

    def _to_palette(self, frame: Frame) -> Image.Image:
        pixels = frame.pixels
        img = Image.fromarray(np.ascontiguousarray(pixels[:, :, :3]), 'RGB')

        # Mask of chroma-keyed pixels
        key = np.all(pixels[:, :, :3] == np.array(self.chroma_key, dtype=np.uint8), axis=2)
        mask = Image.fromarray((key * 255).astype(np.uint8), 'L')

        # 255 colours leave the last index free for transparency
        img_p = img.convert('P', palette=Image.Palette.ADAPTIVE, colors=255)
        palette = img_p.getpalette()[:255 * 3]
        palette += [0] * (255 * 3 - len(palette))
        img_p.putpalette(palette + list(self.chroma_key))
        img_p.paste(TRANSPARENT_INDEX, mask=mask)
        return img_p

    def encode(self, frames: List[Frame]) -> bytes:
        images = [self._to_palette(frame) for frame in frames]

        buffer = io.BytesIO()
        images[0].save(
            buffer,
            format='GIF',
            save_all=True,
            append_images=images[1:],
            duration=self.delay_ms,
            loop=self.loop,
            transparency=TRANSPARENT_INDEX,
            disposal=DISPOSAL_RESTORE_BACKGROUND,
        )
        data = buffer.getvalue()
        logger.debug("Encoded %d frames into %d bytes", len(images), len(data))
        return data


def encode_sequence(sequence: AnimationSequence, executor: Optional[Executor] = None) -> bytes:
    """Blocking convenience: encode a sequence to GIF bytes"""
    return GifEncoder.for_sequence(sequence, executor=executor).render().result()


class SpriteExporter:
    """Writes encoded animations and individual frames to disk"""

    @classmethod
    def to_png(cls, frame: Frame, path: str | Path) -> Path:
        """Export a single frame to PNG"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.fromarray(frame.pixels.astype(np.uint8), 'RGBA')
        img.save(path, 'PNG')

        return path

    @classmethod
    def to_gif(cls, sequence: AnimationSequence, path: str | Path) -> Path:
        """Encode a sequence and write it to a GIF file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_sequence(sequence))
        return path

    @classmethod
    def to_frames(
        cls,
        sequence: AnimationSequence,
        directory: str | Path,
        prefix: str = "frame"
    ) -> List[Path]:
        """Export animation frames as individual PNGs"""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        paths = []
        for i, frame in enumerate(sequence.frames):
            frame_path = directory / f"{prefix}_{i:04d}.png"
            cls.to_png(frame, frame_path)
            paths.append(frame_path)

        return paths
