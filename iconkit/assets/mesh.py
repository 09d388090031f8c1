# iconkit/assets/mesh.py
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import IO, Iterator, List

import numpy as np
from numpy.typing import ArrayLike

from iconkit.assets.types import Face, UnindexedGeometry
from iconkit.errors import IllegalParameter, InvalidContext
from iconkit.fileio import PathLike, open_text
from iconkit.types import Vec3

logger = logging.getLogger(__name__)


@dataclass
class IndexedMesh:
    """
    Triangle mesh with separately indexed positions, texture coordinates
    and normals. Attribute arrays are flat lists of triples.
    """

    name: str = ""
    positions: List[float] = field(default_factory=list)
    normals: List[float] = field(default_factory=list)
    tex_coords: List[float] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def normal_count(self) -> int:
        return len(self.normals) // 3

    @property
    def tex_count(self) -> int:
        return len(self.tex_coords) // 3

    @property
    def face_count(self) -> int:
        return len(self.faces)

    # -- Building --
    def add_vertex(self, x: float, y: float, z: float) -> None:
        self.positions.extend((x, y, z))

    def add_normal(self, x: float, y: float, z: float) -> None:
        self.normals.extend((x, y, z))

    def add_tex_coord(self, u: float, v: float, w: float = 0.0) -> None:
        self.tex_coords.extend((u, v, w))

    def add_face(self, face: Face) -> None:
        self.faces.append(face)

    # -- Access --
    @staticmethod
    def _triple(values: List[float], count: int, i: int, what: str) -> Vec3:
        if i < 0 or i >= count:
            raise IllegalParameter(f"{what} index {i} out of range (0..{count - 1})")
        return values[3 * i], values[3 * i + 1], values[3 * i + 2]

    def vertex(self, i: int) -> Vec3:
        return self._triple(self.positions, self.vertex_count, i, "Vertex")

    def normal(self, i: int) -> Vec3:
        return self._triple(self.normals, self.normal_count, i, "Normal")

    def tex_coord(self, i: int) -> Vec3:
        return self._triple(self.tex_coords, self.tex_count, i, "Texture")

    def face(self, i: int) -> Face:
        if i < 0 or i >= self.face_count:
            raise IllegalParameter(f"Face index {i} out of range")
        return self.faces[i]

    # -- Conversion --
    def to_unindexed(self, scale: float = 1.0) -> UnindexedGeometry:
        """
        Expand to one full attribute triple per triangle corner.

        Positions are multiplied by ``scale``; normals and texture
        coordinates are copied unchanged.
        """
        n = self.face_count
        if n == 0:
            empty = np.zeros(0, dtype=np.float32)
            return UnindexedGeometry(empty, empty.copy(), empty.copy())

        v_idx = np.array([f.vertices for f in self.faces], dtype=np.int64)
        t_idx = np.array([f.tex_coords for f in self.faces], dtype=np.int64)
        n_idx = np.array([f.normals for f in self.faces], dtype=np.int64)

        def gather(values: List[float], count: int, idx: np.ndarray, what: str):
            if idx.min() < 0 or idx.max() >= count:
                raise IllegalParameter(f"Face references a missing {what}")
            table = np.asarray(values, dtype=np.float32).reshape(count, 3)
            return table[idx.reshape(-1)].reshape(-1)

        positions = gather(self.positions, self.vertex_count, v_idx, "vertex")
        positions = positions * np.float32(scale)
        normals = gather(self.normals, self.normal_count, n_idx, "normal")
        tex_coords = gather(self.tex_coords, self.tex_count, t_idx, "texture vertex")

        return UnindexedGeometry(positions, normals, tex_coords)

    @classmethod
    def from_unindexed(
        cls,
        name: str,
        positions: ArrayLike,
        normals: ArrayLike,
        tex_coords: ArrayLike,
    ) -> IndexedMesh:
        """Triangle i uses indices 3i, 3i+1, 3i+2 for every attribute."""
        pos = np.asarray(positions, dtype=np.float64).reshape(-1)
        nrm = np.asarray(normals, dtype=np.float64).reshape(-1)
        tex = np.asarray(tex_coords, dtype=np.float64).reshape(-1)

        if pos.size % 9 or nrm.size != pos.size or tex.size != pos.size:
            raise IllegalParameter("Unindexed arrays must hold 9 floats per triangle")

        mesh = cls(
            name=name,
            positions=pos.tolist(),
            normals=nrm.tolist(),
            tex_coords=tex.tolist(),
        )
        for i in range(pos.size // 9):
            corners = (3 * i, 3 * i + 1, 3 * i + 2)
            mesh.faces.append(Face(corners, corners, corners, smoothing_group=1))
        return mesh


class MeshCollection:
    """Ordered list of meshes, the content of one OBJ file."""

    def __init__(self) -> None:
        self._meshes: List[IndexedMesh] = []

    def __len__(self) -> int:
        return len(self._meshes)

    def __iter__(self) -> Iterator[IndexedMesh]:
        return iter(self._meshes)

    def mesh(self, index: int) -> IndexedMesh:
        if index < 0 or index >= len(self._meshes):
            raise IllegalParameter(f"Mesh index {index} out of range")
        return self._meshes[index]

    def add_mesh(self, mesh: IndexedMesh) -> None:
        self._meshes.append(copy.deepcopy(mesh))

    def read(self, stream: IO[str]) -> None:
        from iconkit.codec.obj import read_obj

        if self._meshes:
            raise InvalidContext("The mesh list is not empty")
        self._meshes = read_obj(stream)
        logger.debug("Read %d meshes", len(self._meshes))

    def read_file(self, path: PathLike) -> None:
        if self._meshes:
            raise InvalidContext("The mesh list is not empty")
        with open_text(path) as f:
            self.read(f)

    def write(self, stream: IO[str]) -> None:
        from iconkit.codec.obj import write_obj

        write_obj(self._meshes, stream)

    def write_file(self, path: PathLike) -> None:
        with open_text(path, "w") as f:
            self.write(f)

    @classmethod
    def from_file(cls, path: PathLike) -> MeshCollection:
        collection = cls()
        collection.read_file(path)
        return collection
