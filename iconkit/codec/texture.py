# iconkit/codec/texture.py
"""
Icon texture encodings.

Texels are stored as 16-bit words with five bits per channel, red in the
low bits. Compressed textures use a word oriented run-length scheme:

    u32 size of the record stream in bytes
    records:
        token < 0xFF00   repeat: one word follows, replicated ``token`` times
        token >= 0xFF00  literal: (0xFFFF - token) + 1 words follow
"""

import logging
import struct
from typing import BinaryIO, List

import numpy as np
from numpy.typing import ArrayLike, NDArray

from iconkit import color
from iconkit.assets.types import TEXTURE_PIXELS
from iconkit.errors import IconKitError, IoFailure
from iconkit.fileio import check_available

logger = logging.getLogger(__name__)

LITERAL_THRESHOLD = 0xFF00
MAX_REPEAT = 0xFEFF
MAX_LITERAL = 255

_U32 = struct.Struct("<I")
_U16 = struct.Struct("<H")


def decode_555(words: ArrayLike) -> NDArray[np.uint32]:
    w = np.asarray(words, dtype=np.uint16).astype(np.uint32)
    r = (w & 0x1F) << 3
    g = ((w >> 5) & 0x1F) << 3
    b = ((w >> 10) & 0x1F) << 3
    return color.pack_argb_array(0xFF, r, g, b)


def encode_555(pixels: ArrayLike) -> NDArray[np.uint16]:
    _, r, g, b = color.unpack_argb_array(pixels)
    r16 = r.astype(np.uint16) >> 3
    g16 = g.astype(np.uint16) >> 3
    b16 = b.astype(np.uint16) >> 3
    return (r16 | (g16 << 5) | (b16 << 10)).astype(np.uint16)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise IoFailure("Unexpected end of texture data")
    return data


# -- Uncompressed --
def read_uncompressed(stream: BinaryIO) -> NDArray[np.uint32]:
    raw = _read_exact(stream, TEXTURE_PIXELS * 2)
    return decode_555(np.frombuffer(raw, dtype="<u2"))


def write_uncompressed(stream: BinaryIO, pixels: ArrayLike) -> None:
    stream.write(encode_555(pixels).astype("<u2").tobytes())


# -- Run-length --
def decode_rle_words(body: bytes) -> NDArray[np.uint16]:
    """
    Expand an RLE record stream to exactly 16384 words.

    Raises:
        IoFailure: on a truncated record or a pixel count other than 16384.
    """
    out = np.empty(TEXTURE_PIXELS, dtype=np.uint16)
    index = 0
    pos = 0
    end = len(body)

    while pos < end:
        if pos + 2 > end:
            raise IoFailure("Truncated RLE record")
        (token,) = _U16.unpack_from(body, pos)
        pos += 2

        if token < LITERAL_THRESHOLD:
            if pos + 2 > end:
                raise IoFailure("Truncated RLE repeat record")
            (word,) = _U16.unpack_from(body, pos)
            pos += 2
            if index + token > TEXTURE_PIXELS:
                raise IoFailure("RLE texture holds more than 16384 pixels")
            out[index : index + token] = word
            index += token
        else:
            count = (0xFFFF - token) + 1
            if pos + 2 * count > end:
                raise IoFailure("Truncated RLE literal record")
            if index + count > TEXTURE_PIXELS:
                raise IoFailure("RLE texture holds more than 16384 pixels")
            out[index : index + count] = np.frombuffer(body, dtype="<u2", count=count, offset=pos)
            pos += 2 * count
            index += count

    if index != TEXTURE_PIXELS:
        raise IoFailure(f"RLE texture holds {index} pixels, expected 16384")
    return out


def read_rle(stream: BinaryIO) -> NDArray[np.uint32]:
    (size,) = _U32.unpack(_read_exact(stream, 4))
    if size > 0x7FFFFFFF:
        raise IconKitError("Texture size is bigger than INT_MAX")
    check_available(stream, size, "RLE texture")
    return decode_555(decode_rle_words(_read_exact(stream, size)))


def encode_rle_words(words: ArrayLike) -> bytes:
    """
    Compress 16-bit words into RLE records, without the size prefix.

    Runs longer than one word become repeat records. Other words are
    grouped into literal records of at most 255 words that stop right
    before the next run.
    """
    w: List[int] = np.asarray(words, dtype=np.uint16).tolist()
    n = len(w)
    out = bytearray()

    i = 0
    while i < n:
        run = 1
        while i + run < n and w[i + run] == w[i] and run < MAX_REPEAT:
            run += 1

        if run > 1:
            out += _U16.pack(run)
            out += _U16.pack(w[i])
            i += run
            continue

        count = 0
        while i + count < n and count < MAX_LITERAL:
            nxt = i + count + 1
            if nxt < n and w[i + count] == w[nxt]:
                break
            count += 1

        out += _U16.pack(0xFFFF - (count - 1))
        out += np.asarray(w[i : i + count], dtype="<u2").tobytes()
        i += count

    return bytes(out)


def write_rle(stream: BinaryIO, pixels: ArrayLike) -> None:
    """Write the size field and record stream; the stream must be seekable."""
    base = stream.tell()
    stream.write(_U32.pack(0))

    body = encode_rle_words(encode_555(pixels))
    stream.write(body)

    end = stream.tell()
    stream.seek(base)
    stream.write(_U32.pack(end - base - 4))
    stream.seek(end)

    logger.debug("Compressed texture to %d bytes", len(body))
