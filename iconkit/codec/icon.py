# iconkit/codec/icon.py
"""
Binary icon file (.icn / .ico) serialization.

Layout, little endian:

    header          <5I  file_id, animation_shapes, texture_type,
                         reserved, vertex_count
    vertex block    per vertex: animation_shapes x <4h position,
                    <4h normal, <2hI (u, v, color)
    animation       <IIfII id_tag, frame_length, anim_speed, play_offset,
                    frame_count; per frame <II (shape_id, key_count)
                    followed by key_count x <ff (time, value)
    texture         16384 x <H, or a run-length stream if texture_type > 7
"""

import io
import logging
import struct
from typing import BinaryIO, List

import numpy as np

from iconkit.assets.icon import IconAsset
from iconkit.assets.types import (
    AnimationFrame,
    AnimationHeader,
    FrameKey,
    IconHeader,
)
from iconkit.codec import texture
from iconkit.errors import IconKitError, IoFailure, OutOfMemory
from iconkit.fileio import PathLike, check_available, open_binary

logger = logging.getLogger(__name__)

INT_MAX = 0x7FFFFFFF


def _vertex_dtype(shapes: int) -> np.dtype:
    return np.dtype(
        [
            ("shapes", "<i2", (shapes, 4)),
            ("normal", "<i2", (4,)),
            ("uv", "<i2", (2,)),
            ("color", "<u4"),
        ]
    )


def _check_count(value: int, what: str) -> int:
    if value > INT_MAX:
        raise IconKitError(f"{what} is bigger than INT_MAX")
    return value


class IconCodec:
    HEADER = struct.Struct("<5I")
    ANIM_HEADER = struct.Struct("<IIfII")
    FRAME = struct.Struct("<II")
    KEY = struct.Struct("<ff")

    # -- Reading --
    @staticmethod
    def _read_exact(stream: BinaryIO, size: int) -> bytes:
        data = stream.read(size)
        if len(data) != size:
            raise IoFailure("Unexpected end of icon file")
        return data

    @classmethod
    def read_header(cls, stream: BinaryIO) -> IconHeader:
        file_id, shapes, texture_type, reserved, n_vertices = cls.HEADER.unpack(
            cls._read_exact(stream, cls.HEADER.size)
        )
        # file_id and reserved vary between real files and are not checked
        _check_count(n_vertices, "Vertex count")
        _check_count(shapes, "Animation shape count")
        if n_vertices % 3 != 0:
            raise IconKitError("Icon header seems to be corrupted")
        if shapes == 0:
            raise IconKitError("Icon header declares no animation shapes")

        return IconHeader(
            file_id=file_id,
            animation_shapes=shapes,
            texture_type=texture_type,
            reserved=reserved,
            vertex_count=n_vertices,
        )

    @classmethod
    def read(cls, stream: BinaryIO) -> IconAsset:
        asset = IconAsset()
        header = cls.read_header(stream)
        n = header.vertex_count

        dtype = _vertex_dtype(header.animation_shapes)
        check_available(stream, dtype.itemsize * n, "Vertex block")
        try:
            raw = cls._read_exact(stream, dtype.itemsize * n)
            block = np.frombuffer(raw, dtype=dtype, count=n)
            asset.shapes = block["shapes"].astype(np.int16)
            asset.normals = block["normal"].astype(np.int16)
            asset.uvs = block["uv"].astype(np.int16)
            asset.colors = block["color"].astype(np.uint32)
        except MemoryError as e:
            raise OutOfMemory(f"Could not allocate {n} vertices") from e
        asset.header = header

        id_tag, frame_length, anim_speed, play_offset, n_frames = cls.ANIM_HEADER.unpack(
            cls._read_exact(stream, cls.ANIM_HEADER.size)
        )
        _check_count(n_frames, "Frame count")
        check_available(stream, cls.FRAME.size * n_frames, "Frame table")
        asset.animation = AnimationHeader(
            id_tag=id_tag,
            frame_length=frame_length,
            anim_speed=anim_speed,
            play_offset=play_offset,
        )

        frames: List[AnimationFrame] = []
        for _ in range(n_frames):
            shape_id, n_keys = cls.FRAME.unpack(cls._read_exact(stream, cls.FRAME.size))
            _check_count(n_keys, "Key count")
            check_available(stream, cls.KEY.size * n_keys, "Key table")
            raw_keys = cls._read_exact(stream, cls.KEY.size * n_keys)
            keys = tuple(FrameKey(t, v) for t, v in cls.KEY.iter_unpack(raw_keys))
            frames.append(AnimationFrame(shape_id=shape_id, keys=keys))
        asset.frames = frames

        if header.compressed:
            asset.texture = texture.read_rle(stream)
        else:
            asset.texture = texture.read_uncompressed(stream)

        logger.debug(
            "Read icon: %d vertices, %d shapes, %d frames, texture type 0x%02X",
            n,
            header.animation_shapes,
            len(frames),
            header.texture_type,
        )
        return asset

    @classmethod
    def decode(cls, data: bytes) -> IconAsset:
        return cls.read(io.BytesIO(data))

    # -- Writing --
    @classmethod
    def write(cls, asset: IconAsset, stream: BinaryIO) -> None:
        """Serialize ``asset``; compressed textures need a seekable stream."""
        header = asset.header
        n = header.vertex_count

        stream.write(
            cls.HEADER.pack(
                header.file_id,
                header.animation_shapes,
                header.texture_type,
                header.reserved,
                n,
            )
        )

        block = np.zeros(n, dtype=_vertex_dtype(header.animation_shapes))
        block["shapes"] = asset.shapes
        block["normal"] = asset.normals
        block["uv"] = asset.uvs
        block["color"] = asset.colors
        stream.write(block.tobytes())

        anim = asset.animation
        stream.write(
            cls.ANIM_HEADER.pack(
                anim.id_tag,
                anim.frame_length,
                anim.anim_speed,
                anim.play_offset,
                len(asset.frames),
            )
        )
        for frame in asset.frames:
            stream.write(cls.FRAME.pack(frame.shape_id, len(frame.keys)))
            for key in frame.keys:
                stream.write(cls.KEY.pack(key.time, key.value))

        if header.compressed:
            texture.write_rle(stream, asset.texture)
        else:
            texture.write_uncompressed(stream, asset.texture)

    @classmethod
    def encode(cls, asset: IconAsset) -> bytes:
        buf = io.BytesIO()
        cls.write(asset, buf)
        return buf.getvalue()


def read_icon(path: PathLike) -> IconAsset:
    with open_binary(path) as f:
        return IconCodec.read(f)


def write_icon(asset: IconAsset, path: PathLike) -> None:
    with open_binary(path, "wb") as f:
        IconCodec.write(asset, f)
    logger.debug("Wrote icon %s", path)
