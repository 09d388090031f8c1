# iconkit/assets/importers/tga.py
import logging
import struct
from pathlib import Path

import numpy as np

from iconkit.assets.importers.base import AssetImporter
from iconkit.assets.types import RasterImage
from iconkit.errors import IllegalParameter, IoFailure, NotImplementedFormat
from iconkit.fileio import read_bytes

logger = logging.getLogger(__name__)

# id length, color map type, image type, color map spec,
# x origin, y origin, width, height, pixel size, descriptor
TGA_HEADER = struct.Struct("<BBB5sHHHHBB")
_CMAP_SPEC = struct.Struct("<HHB")

TGA_TRUE_COLOR = 2
TGA_TOP_LEFT = 0x20

_PIXEL_SIZES = (16, 24, 32)


def decode_tga(data: bytes) -> RasterImage:
    """Decode an uncompressed true color Targa image, rows top-to-bottom."""
    if len(data) < TGA_HEADER.size:
        raise IoFailure("Unexpected end of TGA header")

    (
        id_length,
        cmap_type,
        image_type,
        cmap_spec,
        _x_origin,
        _y_origin,
        width,
        height,
        pixel_size,
        descriptor,
    ) = TGA_HEADER.unpack_from(data, 0)

    if image_type != TGA_TRUE_COLOR:
        raise NotImplementedFormat(f"TGA image type {image_type} is not supported")
    if pixel_size not in _PIXEL_SIZES:
        raise NotImplementedFormat(f"TGA pixel size {pixel_size} is not supported")
    if width == 0 or height == 0:
        raise IllegalParameter(f"Invalid TGA dimensions {width}x{height}")

    offset = TGA_HEADER.size + id_length
    if cmap_type:
        _first, length, entry_bits = _CMAP_SPEC.unpack(cmap_spec)
        offset += length * ((entry_bits + 7) // 8)

    size = width * height * (pixel_size // 8)
    if offset + size > len(data):
        raise IoFailure("Unexpected end of TGA pixel data")

    image = RasterImage(
        width=width,
        height=height,
        bpp=pixel_size,
        samples=np.frombuffer(data, dtype=np.uint8, count=size, offset=offset).copy(),
    )
    if not descriptor & TGA_TOP_LEFT:
        image.flip_vertical()

    logger.debug("Decoded TGA %dx%d at %d bpp", width, height, pixel_size)
    return image


class TgaImporter(AssetImporter):
    suffixes = (".tga",)

    def import_file(self, path: Path) -> RasterImage:
        return decode_tga(read_bytes(path))
