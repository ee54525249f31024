"""
Compositor - Draws a rotated/translated, scaled copy of the source onto a frame
Inverse-mapped bilinear sampling with premultiplied alpha and source-over blending
"""

from typing import NamedTuple

import numpy as np

from .parser import SourceImage

# Tolerance on the footprint edge so exact quarter turns keep their border pixels
EDGE_EPSILON = 1e-6


class Placement(NamedTuple):
    """Affine placement relative to the destination centre"""
    angle: float = 0.0  # radians, positive turns clockwise on screen
    dx: float = 0.0
    dy: float = 0.0

    def lerp(self, other: 'Placement', t: float) -> 'Placement':
        """Linear interpolation towards another placement"""
        return Placement(
            angle=self.angle + (other.angle - self.angle) * t,
            dx=self.dx + (other.dx - self.dx) * t,
            dy=self.dy + (other.dy - self.dy) * t,
        )


class Compositor:
    """
    Shared blending primitive for all effects.

    The source is scaled by ``scale`` and centred in a ``width`` x ``height``
    destination, then rotated about that centre and shifted by the
    placement offset. Destination pixels outside the transformed source are
    never written.
    """

    def __init__(self, source: SourceImage, width: int, height: int, scale: float = 1.0):
        self.source = source
        self.width = width
        self.height = height
        self.scale = scale

        # Premultiplied source in float64 so exact placements round-trip
        premul = source.pixels.astype(np.float64)
        premul[:, :, :3] *= premul[:, :, 3:4] / 255.0
        self._premul = premul

        # Pixel-centre coordinates relative to the destination centre
        y_coords, x_coords = np.mgrid[0:height, 0:width].astype(np.float64)
        self._rel_x = x_coords + 0.5 - width / 2.0
        self._rel_y = y_coords + 0.5 - height / 2.0

    def source_coords(self, placement: Placement) -> tuple:
        """Map every destination pixel centre back to source pixel indices"""
        cos_a = np.cos(placement.angle)
        sin_a = np.sin(placement.angle)

        dx = self._rel_x - placement.dx
        dy = self._rel_y - placement.dy

        # Inverse rotation, then undo the scale
        src_x = (dx * cos_a + dy * sin_a) / self.scale + self.source.width / 2.0 - 0.5
        src_y = (-dx * sin_a + dy * cos_a) / self.scale + self.source.height / 2.0 - 0.5
        return src_x, src_y

    def draw(self, dest: np.ndarray, placement: Placement, alpha: float = 1.0) -> np.ndarray:
        """
        Blend the transformed source into ``dest`` (HxWx4 uint8) in place.

        For each covered pixel: out = src * a + dest * (1 - a), where
        a = source pixel alpha * ``alpha``.
        """
        if dest.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Destination shape {dest.shape} does not match "
                f"{self.height}x{self.width}x4"
            )
        if alpha <= 0.0:
            return dest

        w, h = self.source.width, self.source.height
        src_x, src_y = self.source_coords(placement)

        footprint = (
            (src_x >= -0.5 - EDGE_EPSILON) & (src_x <= w - 0.5 + EDGE_EPSILON) &
            (src_y >= -0.5 - EDGE_EPSILON) & (src_y <= h - 0.5 + EDGE_EPSILON)
        )
        if not np.any(footprint):
            return dest

        sx = src_x[footprint]
        sy = src_y[footprint]
        sample = self._bilinear(sx, sy)

        # Source-over in straight alpha
        src_a = sample[:, 3:4] / 255.0 * alpha
        src_rgb = sample[:, :3] / 255.0 * alpha  # already premultiplied

        dst = dest[footprint].astype(np.float64) / 255.0
        dst_a = dst[:, 3:4]
        dst_rgb = dst[:, :3] * dst_a

        out_a = src_a + dst_a * (1.0 - src_a)
        out_rgb_premul = src_rgb + dst_rgb * (1.0 - src_a)
        out_rgb = np.where(out_a > 0, out_rgb_premul / np.maximum(out_a, 1e-12), 0.0)

        out = np.concatenate([out_rgb, out_a], axis=1)
        dest[footprint] = np.rint(np.clip(out * 255.0, 0, 255)).astype(np.uint8)
        return dest

    def _bilinear(self, sx: np.ndarray, sy: np.ndarray) -> np.ndarray:
        """Bilinear sample of the premultiplied source at flat coordinates"""
        h, w = self.source.height, self.source.width

        x0 = np.floor(sx).astype(np.int64)
        y0 = np.floor(sy).astype(np.int64)
        fx = (sx - x0)[:, np.newaxis]
        fy = (sy - y0)[:, np.newaxis]

        # Clamp to valid range for indexing; edges extend the border pixel
        x0c = np.clip(x0, 0, w - 1)
        x1c = np.clip(x0 + 1, 0, w - 1)
        y0c = np.clip(y0, 0, h - 1)
        y1c = np.clip(y0 + 1, 0, h - 1)

        p00 = self._premul[y0c, x0c]
        p10 = self._premul[y0c, x1c]
        p01 = self._premul[y1c, x0c]
        p11 = self._premul[y1c, x1c]

        return (
            p00 * (1 - fx) * (1 - fy) +
            p10 * fx * (1 - fy) +
            p01 * (1 - fx) * fy +
            p11 * fx * fy
        )
