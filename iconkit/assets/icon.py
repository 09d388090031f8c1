# iconkit/assets/icon.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from iconkit.assets.mesh import IndexedMesh
from iconkit.assets.types import (
    AnimationFrame,
    AnimationHeader,
    FrameKey,
    ICON_FILE_ID,
    ICON_RESERVED,
    TEXTURE_PIXELS,
    TEXTURE_SIZE,
    IconHeader,
)
from iconkit.errors import IllegalParameter
from iconkit.math import fixed_to_floats, floats_to_fixed

logger = logging.getLogger(__name__)

VERTEX_COLOR_WHITE = 0xFFFFFFFF


def _static_frames() -> List[AnimationFrame]:
    return [AnimationFrame(shape_id=0, keys=(FrameKey(time=0.0, value=1.0),))]


class IconAsset:
    """
    In-memory icon: animated geometry, per-vertex texture coordinates and
    colors, animation frames and a 128x128 texture.

    Geometry is kept in its raw 16-bit fixed point form so that a decoded
    file encodes back to the same bytes.
    """

    def __init__(self) -> None:
        self.header = IconHeader()
        self.shapes: NDArray[np.int16] = np.zeros((0, 1, 4), dtype=np.int16)
        self.normals: NDArray[np.int16] = np.zeros((0, 4), dtype=np.int16)
        self.uvs: NDArray[np.int16] = np.zeros((0, 2), dtype=np.int16)
        self.colors: NDArray[np.uint32] = np.zeros(0, dtype=np.uint32)

        self.animation = AnimationHeader()
        self.frames: List[AnimationFrame] = []

        self.texture: NDArray[np.uint32] = np.zeros(TEXTURE_PIXELS, dtype=np.uint32)

    # -- Counts --
    @property
    def vertex_count(self) -> int:
        return self.header.vertex_count

    @property
    def shape_count(self) -> int:
        return self.header.animation_shapes

    @property
    def texture_type(self) -> int:
        return self.header.texture_type

    @property
    def compressed(self) -> bool:
        return self.header.compressed

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def set_texture_type(self, texture_type: int) -> None:
        self.header = replace(self.header, texture_type=texture_type)

    # -- Geometry access --
    def vertex_data(self, shape: int = 0) -> NDArray[np.float32]:
        """
        Positions of one animation shape as ``(n, 3)`` floats.

        ``shape=-1`` returns every shape, shape-major, as ``(shapes, n, 3)``.
        """
        if shape >= self.shape_count or shape < -1:
            raise IllegalParameter(f"Shape {shape} out of range")
        if shape == -1:
            return fixed_to_floats(self.shapes[:, :, :3].transpose(1, 0, 2))
        return fixed_to_floats(self.shapes[:, shape, :3])

    def normal_data(self) -> NDArray[np.float32]:
        return fixed_to_floats(self.normals[:, :3])

    def vertex_texture_data(self) -> NDArray[np.float32]:
        return fixed_to_floats(self.uvs)

    def vertex_color_data(self) -> NDArray[np.uint32]:
        return self.colors.copy()

    # -- Animation --
    def _frame(self, frame: int) -> AnimationFrame:
        if frame < 0 or frame >= len(self.frames):
            raise IllegalParameter(f"Frame {frame} out of range")
        return self.frames[frame]

    def frame_shape(self, frame: int) -> int:
        return self._frame(frame).shape_id

    def frame_keys(self, frame: int) -> Tuple[FrameKey, ...]:
        return self._frame(frame).keys

    # -- Texture --
    def texture_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < TEXTURE_SIZE and 0 <= y < TEXTURE_SIZE):
            raise IllegalParameter(f"Texel ({x}, {y}) outside the texture")
        return int(self.texture[y * TEXTURE_SIZE + x])

    def texture_rows(self) -> NDArray[np.uint32]:
        return self.texture.reshape(TEXTURE_SIZE, TEXTURE_SIZE)

    def set_texture(self, pixels: ArrayLike) -> None:
        data = np.asarray(pixels, dtype=np.uint32).reshape(-1)
        if data.size != TEXTURE_PIXELS:
            raise IllegalParameter(
                f"Texture must hold {TEXTURE_PIXELS} pixels, got {data.size}"
            )
        self.texture = data.copy()

    # -- Conversion --
    def set_geometry_arrays(
        self, positions: ArrayLike, normals: ArrayLike, uvs: ArrayLike
    ) -> None:
        """
        Replace all geometry with a single static shape.

        ``positions`` and ``normals`` hold three floats per vertex, ``uvs``
        two or three (a third component is ignored).
        """
        pos = np.asarray(positions, dtype=np.float32).reshape(-1)
        nrm = np.asarray(normals, dtype=np.float32).reshape(-1)
        tex = np.asarray(uvs, dtype=np.float32).reshape(-1)
        n = pos.size // 3

        if pos.size % 9 or nrm.size != pos.size:
            raise IllegalParameter("Geometry must hold whole triangles")
        if tex.size not in (2 * n, 3 * n):
            raise IllegalParameter(
                f"Expected 2 or 3 texture components for {n} vertices, got {tex.size} values"
            )

        pos = pos.reshape(n, 3)
        nrm = nrm.reshape(n, 3)
        tex = tex.reshape(n, -1) if n else tex.reshape(0, 2)

        shapes = np.zeros((n, 1, 4), dtype=np.int16)
        shapes[:, 0, :3] = floats_to_fixed(pos)
        normals16 = np.zeros((n, 4), dtype=np.int16)
        normals16[:, :3] = floats_to_fixed(nrm)

        self.shapes = shapes
        self.normals = normals16
        self.uvs = floats_to_fixed(tex[:, :2])
        self.colors = np.full(n, VERTEX_COLOR_WHITE, dtype=np.uint32)
        self.header = replace(
            self.header,
            file_id=ICON_FILE_ID,
            reserved=ICON_RESERVED,
            animation_shapes=1,
            vertex_count=n,
        )
        self.frames = _static_frames()

        logger.debug("Geometry set: %d vertices", n)

    def set_geometry(self, mesh: IndexedMesh, scale: float = 1.0) -> None:
        geometry = mesh.to_unindexed(scale)
        self.set_geometry_arrays(
            geometry.positions, geometry.normals, geometry.tex_coords
        )

    def build_mesh(self, name: str) -> IndexedMesh:
        """Unindexed mesh of shape 0; every vertex gets its own indices."""
        n = self.vertex_count
        tex = np.zeros((n, 3), dtype=np.float32)
        tex[:, :2] = self.vertex_texture_data()
        return IndexedMesh.from_unindexed(
            name, self.vertex_data(0), self.normal_data(), tex
        )

    @classmethod
    def from_mesh(cls, mesh: IndexedMesh, scale: float = 1.0) -> IconAsset:
        asset = cls()
        asset.set_geometry(mesh, scale)
        return asset
