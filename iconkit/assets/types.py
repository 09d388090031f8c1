# iconkit/assets/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from iconkit import color
from iconkit.errors import IconKitError, IllegalParameter
from iconkit.types import Index3

PALETTE_DEPTHS = (1, 4, 8)
SUPPORTED_DEPTHS = (1, 4, 8, 16, 24, 32)


def _empty_palette() -> NDArray[np.uint32]:
    return np.zeros(0, dtype=np.uint32)


@dataclass(slots=True)
class RasterImage:
    """
    Decoded raster data, rows top-to-bottom.

    For palettized depths ``samples`` holds one palette index per byte,
    otherwise ``bpp // 8`` bytes per pixel in on-disk channel order.
    An image without a palette carries an empty palette array.
    """

    width: int
    height: int
    bpp: int
    samples: NDArray[np.uint8]
    palette: NDArray[np.uint32] = field(default_factory=_empty_palette)

    @property
    def has_palette(self) -> bool:
        return self.palette.size > 0

    @property
    def pitch(self) -> int:
        """Bytes per row of ``samples``."""
        if self.bpp >= 8:
            return (self.bpp // 8) * self.width
        return self.width

    def image_data(self) -> bytes:
        return self.samples.tobytes()

    def palette_data(self) -> NDArray[np.uint32]:
        if not self.has_palette:
            raise IconKitError("Unable to acquire palette data")
        return self.palette.copy()

    def flip_vertical(self) -> None:
        """Reverse the row order in place."""
        if self.bpp not in SUPPORTED_DEPTHS:
            raise IconKitError(f"Cannot flip image with bit depth {self.bpp}")

        rows = self.samples.reshape(self.height, self.pitch)
        for row in range(self.height // 2):
            mirror = self.height - 1 - row
            tmp = rows[row].copy()
            rows[row] = rows[mirror]
            rows[mirror] = tmp

    def to_argb32(self) -> NDArray[np.uint32]:
        """Promote the samples to canonical 0xAARRGGBB colors."""
        count = self.width * self.height

        if self.bpp == 32:
            px = self.samples[: count * 4].reshape(count, 4)
            return color.pack_argb_array(px[:, 3], px[:, 2], px[:, 1], px[:, 0])

        if self.bpp == 24:
            px = self.samples[: count * 3].reshape(count, 3)
            return color.pack_argb_array(0xFF, px[:, 2], px[:, 1], px[:, 0])

        if self.bpp == 16:
            # A1R5G5B5, the alpha bit is ignored
            px = self.samples[: count * 2].reshape(count, 2).astype(np.uint32)
            lo, hi = px[:, 0], px[:, 1]
            r = (hi & 0x7C) >> 2
            g = ((lo & 0xE0) >> 5) | ((hi & 0x03) << 3)
            b = lo & 0x1F
            return color.pack_argb_array(0xFF, r * 8, g * 8, b * 8)

        if self.bpp in PALETTE_DEPTHS:
            indices = self.samples[:count]
            if indices.size and int(indices.max()) >= self.palette.size:
                raise IllegalParameter("Palette index out of range")
            return self.palette[indices].astype(np.uint32)

        raise IconKitError("Unable to acquire 32bit image data")


@dataclass(frozen=True, slots=True)
class Face:
    """Triangle with one 0-based index per attribute per corner."""

    vertices: Index3
    tex_coords: Index3
    normals: Index3
    smoothing_group: int = -1


@dataclass(frozen=True, slots=True)
class UnindexedGeometry:
    """One full attribute triple per triangle corner, 9 floats per face."""

    positions: NDArray[np.float32]
    normals: NDArray[np.float32]
    tex_coords: NDArray[np.float32]

    @property
    def corner_count(self) -> int:
        return self.positions.size // 3


ICON_FILE_ID = 0x010000
ICON_RESERVED = 0x3F800000

TEXTURE_SIZE = 128
TEXTURE_PIXELS = TEXTURE_SIZE * TEXTURE_SIZE


@dataclass(frozen=True, slots=True)
class IconHeader:
    file_id: int = ICON_FILE_ID
    animation_shapes: int = 1
    texture_type: int = 0x07  # > 0x07: RLE compressed texture
    reserved: int = ICON_RESERVED
    vertex_count: int = 0

    @property
    def compressed(self) -> bool:
        return self.texture_type > 0x07


@dataclass(frozen=True, slots=True)
class AnimationHeader:
    id_tag: int = 1
    frame_length: int = 31
    anim_speed: float = 1.0
    play_offset: int = 0


@dataclass(frozen=True, slots=True)
class FrameKey:
    time: float
    value: float


@dataclass(frozen=True, slots=True)
class AnimationFrame:
    shape_id: int
    keys: Tuple[FrameKey, ...] = ()
