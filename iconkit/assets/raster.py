# iconkit/assets/raster.py
"""
Raster decoding entry point and the 32-bit TGA writer.

Both supported container variants decode to a RasterImage; callers pick
the variant explicitly through RasterFormat.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO

import numpy as np
from numpy.typing import ArrayLike

from iconkit import color
from iconkit.assets.importers.bmp import decode_bmp, unpack_indices
from iconkit.assets.importers.tga import TGA_HEADER, TGA_TOP_LEFT, TGA_TRUE_COLOR, decode_tga
from iconkit.assets.types import RasterImage
from iconkit.errors import IllegalParameter, OutOfMemory
from iconkit.fileio import PathLike, open_binary, read_bytes

logger = logging.getLogger(__name__)

_TGA_MAX_SIDE = 0xFFFF


class RasterFormat(Enum):
    BMP = "bmp"
    TGA = "tga"

    @classmethod
    def from_path(cls, path: PathLike) -> "RasterFormat":
        if Path(path).suffix.lower() == ".bmp":
            return cls.BMP
        return cls.TGA


def decode_raster(data: bytes, fmt: RasterFormat) -> RasterImage:
    try:
        if fmt is RasterFormat.BMP:
            return decode_bmp(data)
        return decode_tga(data)
    except MemoryError as e:
        raise OutOfMemory(f"Could not allocate {fmt.value} image buffer") from e


def read_raster(path: PathLike, fmt: RasterFormat | None = None) -> RasterImage:
    if fmt is None:
        fmt = RasterFormat.from_path(path)
    return decode_raster(read_bytes(path), fmt)


def encode_tga(pixels: ArrayLike, width: int, height: int) -> bytes:
    """
    Encode canonical colors as an uncompressed 32-bit top-left TGA.

    Raises:
        IllegalParameter: if a side exceeds 65535 or the pixel count
            does not match the dimensions.
    """
    if width > _TGA_MAX_SIDE or height > _TGA_MAX_SIDE:
        raise IllegalParameter(f"Image too large for TGA: {width}x{height}")

    words = np.asarray(pixels, dtype=np.uint32).reshape(-1)
    if words.size != width * height:
        raise IllegalParameter(
            f"Expected {width * height} pixels, got {words.size}"
        )

    a, r, g, b = color.unpack_argb_array(words)
    body = np.stack([b, g, r, a], axis=-1).tobytes()

    header = TGA_HEADER.pack(
        0, 0, TGA_TRUE_COLOR, b"\x00" * 5, 0, 0, width, height, 32, TGA_TOP_LEFT | 0x08
    )
    return header + body


def write_tga(
    target: PathLike | BinaryIO, pixels: ArrayLike, width: int, height: int
) -> None:
    payload = encode_tga(pixels, width, height)
    if hasattr(target, "write"):
        target.write(payload)
    else:
        with open_binary(target, "wb") as f:
            f.write(payload)
    logger.debug("Wrote TGA %dx%d", width, height)


__all__ = [
    "RasterFormat",
    "RasterImage",
    "decode_raster",
    "read_raster",
    "encode_tga",
    "write_tga",
    "unpack_indices",
]
