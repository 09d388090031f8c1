# iconkit/assets/__init__.py
from iconkit.assets.defaults import DefaultFiles
from iconkit.assets.types import (
    AnimationFrame,
    AnimationHeader,
    Face,
    FrameKey,
    IconHeader,
    RasterImage,
    UnindexedGeometry,
)
from iconkit.assets.raster import RasterFormat, decode_raster, read_raster, write_tga
from iconkit.assets.mesh import IndexedMesh, MeshCollection
from iconkit.assets.icon import IconAsset
from iconkit.assets.iconsys import (
    IconSys,
    IconSysColor,
    IconSysLightColor,
    IconSysLightVec,
)

__all__ = [
    "AnimationFrame",
    "AnimationHeader",
    "DefaultFiles",
    "Face",
    "FrameKey",
    "IconAsset",
    "IconHeader",
    "IconSys",
    "IconSysColor",
    "IconSysLightColor",
    "IconSysLightVec",
    "IndexedMesh",
    "MeshCollection",
    "RasterFormat",
    "RasterImage",
    "UnindexedGeometry",
    "decode_raster",
    "read_raster",
    "write_tga",
]
