"""
Generation Session - Owns the currently displayed animation

Each refresh takes a new request token. When an older request's encoder
finishes after a newer one was started, its result is dropped, so the
latest request always wins. The previous output is only released once a
newer one has been produced.
"""

import asyncio
import contextlib
import itertools
import logging
import os
import tempfile
from concurrent.futures import Executor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import EncodeError
from .exporter import Encoder, GifEncoder
from .parser import SourceImage, load_source
from .sequence import AnimationSequence
from ..procedural import EffectConfig, generate_sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class OutputResource:
    """Encoded animation backed by a temporary file"""
    path: Path
    data: bytes
    token: int
    sequence: AnimationSequence

    @classmethod
    def create(cls, data: bytes, token: int, sequence: AnimationSequence) -> 'OutputResource':
        fd, name = tempfile.mkstemp(prefix="gifmoji-", suffix=".gif")
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        return cls(path=Path(name), data=data, token=token, sequence=sequence)

    def release(self) -> None:
        """Best-effort removal; an already-released resource is fine"""
        with contextlib.suppress(OSError):
            self.path.unlink()


class GenerationSession:
    """Runs generation requests and keeps the single current output"""

    def __init__(
        self,
        encoder_class: Callable[..., Encoder] = GifEncoder,
        executor: Optional[Executor] = None
    ):
        self.encoder_class = encoder_class
        self.executor = executor
        self.current: Optional[OutputResource] = None
        self._tokens = itertools.count(1)
        self._latest = 0

    @property
    def latest_token(self) -> int:
        return self._latest

    async def load(self, path: str | Path) -> SourceImage:
        """Decode the source image; the only suspension point before generation"""
        return await load_source(path)

    async def refresh(
        self,
        source: SourceImage,
        config: EffectConfig,
        seed: Optional[float] = None
    ) -> Optional[OutputResource]:
        """
        Generate, encode and adopt a new animation.

        Returns the new output, or None when a newer request superseded
        this one while it was encoding.

        Raises:
            ConfigError, SourceError: before any encoding starts
            EncodeError: the encoder failed; the previous output is kept
        """
        token = next(self._tokens)
        self._latest = token

        sequence = generate_sequence(source, config, seed=seed)

        encoder = self.encoder_class(
            sequence.width,
            sequence.height,
            sequence.delay_ms,
            loop=sequence.loop,
            chroma_key=sequence.chroma_key,
            executor=self.executor,
        )
        for frame in sequence.frames:
            encoder.add_frame(frame)

        try:
            data = await asyncio.wrap_future(encoder.render())
        except EncodeError:
            logger.warning("Encoding failed for request %d", token)
            raise
        except Exception as e:
            raise EncodeError(f"Encoding failed: {e}") from e

        if token != self._latest:
            logger.info("Discarding stale result of request %d (latest is %d)", token, self._latest)
            return None

        return self._adopt(OutputResource.create(data, token, sequence))

    def _adopt(self, output: OutputResource) -> OutputResource:
        previous = self.current
        self.current = output
        if previous is not None:
            previous.release()
        logger.debug("Adopted output of request %d at %s", output.token, output.path)
        return output

    def close(self) -> None:
        """Release the current output"""
        if self.current is not None:
            self.current.release()
            self.current = None
