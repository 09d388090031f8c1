# iconkit/assets/importers/bmp.py
"""
Windows bitmap decoding.

Supported: uncompressed 1, 4, 8, 24 and 32 bits per pixel, and 32 bit with
BI_BITFIELDS color masks. 16 bit and the RLE compressions are rejected.
"""

import logging
import struct
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from iconkit.assets.importers.base import AssetImporter
from iconkit.assets.types import RasterImage
from iconkit.errors import (
    IconKitError,
    IllegalParameter,
    IoFailure,
    NotImplementedFormat,
)
from iconkit.fileio import read_bytes

logger = logging.getLogger(__name__)

BI_RGB = 0
BI_BITFIELDS = 3

_FILE_HEADER = struct.Struct("<2sIHHI")  # type, size, reserved1, reserved2, offbits
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")

_PALETTE_SIZES = {1: 2, 4: 16, 8: 256}
_DEFAULT_MASKS = (0x00FF0000, 0x0000FF00, 0x000000FF)  # R, G, B


def unpack_indices(packed: NDArray[np.uint8], bpp: int, count: int) -> NDArray[np.uint8]:
    """
    Expand packed palette indices to one byte per pixel along the last axis.

    The most significant bits of each source byte hold the leftmost pixel.
    """
    packed = np.asarray(packed, dtype=np.uint8)
    if bpp == 1:
        out = np.unpackbits(packed, axis=-1)
    elif bpp == 4:
        out = np.stack([packed >> 4, packed & 0x0F], axis=-1)
        out = out.reshape(*packed.shape[:-1], packed.shape[-1] * 2)
    elif bpp == 8:
        out = packed
    else:
        raise IllegalParameter(f"Cannot unpack indices of {bpp} bit depth")
    return np.ascontiguousarray(out[..., :count])


def _row_stride(width: int, bpp: int) -> int:
    return ((width * bpp + 31) // 32) * 4


def _read_rows(
    data: bytes, offset: int, width: int, height: int, bpp: int
) -> NDArray[np.uint8]:
    """Pixel rows in file order with the 4-byte row padding stripped."""
    stride = _row_stride(width, bpp)
    row_bytes = (width * bpp + 7) // 8
    needed = (height - 1) * stride + row_bytes

    if offset < 0 or offset + needed > len(data):
        raise IoFailure("Unexpected end of BMP pixel data")

    block = np.frombuffer(data, dtype=np.uint8, offset=offset, count=min(height * stride, len(data) - offset))
    if block.size < height * stride:
        block = np.concatenate([block, np.zeros(height * stride - block.size, dtype=np.uint8)])
    return block.reshape(height, stride)[:, :row_bytes]


def _read_palette(data: bytes, offset: int, bpp: int) -> NDArray[np.uint32]:
    entries = _PALETTE_SIZES[bpp]
    if offset + entries * 4 > len(data):
        raise IoFailure("Unexpected end of BMP palette")
    return np.frombuffer(data, dtype="<u4", count=entries, offset=offset).astype(np.uint32)


def _apply_masks(rows: NDArray[np.uint8], masks: tuple[int, int, int]) -> NDArray[np.uint8]:
    words = np.ascontiguousarray(rows).view("<u4").astype(np.uint32).reshape(-1)

    channels = []
    for mask in masks:
        m = np.uint32(mask)
        divisor = np.uint32((mask >> 8) + 1)
        channels.append(((words & m) // divisor) & np.uint32(0xFF))

    r, g, b = channels
    out = (r << 16) | (g << 8) | b
    return out.astype("<u4").view(np.uint8)


def decode_bmp(data: bytes, file_offset: int = 0) -> RasterImage:
    """
    Decode a bitmap into a RasterImage with rows ordered top-to-bottom.

    Raises:
        IoFailure: on truncated input.
        NotImplementedFormat: for valid but unsupported encodings.
        IllegalParameter: for empty images.
    """
    base = file_offset
    if len(data) < base + _FILE_HEADER.size + _INFO_HEADER.size:
        raise IoFailure("Unexpected end of BMP header")

    magic, _, _, _, off_bits = _FILE_HEADER.unpack_from(data, base)
    (
        info_size,
        width,
        height,
        _planes,
        bpp,
        compression,
        _size_image,
        _xppm,
        _yppm,
        clr_used,
        _clr_important,
    ) = _INFO_HEADER.unpack_from(data, base + _FILE_HEADER.size)

    if magic != b"BM":
        raise IconKitError("Image file seems to be corrupted")

    if clr_used or height < 0:
        raise NotImplementedFormat(
            "BMP color table overrides and top-down bitmaps are not supported"
        )
    if width <= 0 or height == 0:
        raise IllegalParameter(f"Invalid BMP dimensions {width}x{height}")

    extra = base + _FILE_HEADER.size + max(info_size, _INFO_HEADER.size)
    pixels_at = base + off_bits
    palette = np.zeros(0, dtype=np.uint32)

    if bpp in (1, 4, 8):
        if compression != BI_RGB:
            raise NotImplementedFormat(f"BMP compression {compression} at {bpp} bpp")
        palette = _read_palette(data, extra, bpp)
        rows = _read_rows(data, pixels_at, width, height, bpp)
        samples = unpack_indices(rows, bpp, width).reshape(-1)

    elif bpp == 16:
        raise NotImplementedFormat("16 bit bitmaps are not supported")

    elif bpp == 24:
        if compression != BI_RGB:
            raise NotImplementedFormat(f"BMP compression {compression} at 24 bpp")
        samples = np.ascontiguousarray(_read_rows(data, pixels_at, width, height, 24)).reshape(-1)

    elif bpp == 32:
        if compression == BI_RGB:
            masks = _DEFAULT_MASKS
        elif compression == BI_BITFIELDS:
            mask_at = base + _FILE_HEADER.size + _INFO_HEADER.size
            if mask_at + 12 > len(data):
                raise IoFailure("Unexpected end of BMP color masks")
            masks = struct.unpack_from("<3I", data, mask_at)
        else:
            raise NotImplementedFormat(f"BMP compression {compression} at 32 bpp")
        rows = _read_rows(data, pixels_at, width, height, 32)
        samples = _apply_masks(rows, masks)

    else:
        raise IconKitError(f"Illegal bit depth in BMP image file: {bpp}")

    image = RasterImage(
        width=width,
        height=height,
        bpp=bpp,
        samples=np.array(samples, dtype=np.uint8),
        palette=palette,
    )
    # stored bottom-to-top
    image.flip_vertical()

    logger.debug("Decoded BMP %dx%d at %d bpp", width, height, bpp)
    return image


class BmpImporter(AssetImporter):
    suffixes = (".bmp",)

    def import_file(self, path: Path) -> RasterImage:
        return decode_bmp(read_bytes(path))
