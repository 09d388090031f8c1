# iconkit/color.py
"""
Canonical 32-bit color.

Every pixel that crosses a module boundary is a single unsigned 32-bit word
laid out as 0xAARRGGBB:

    bits 24..31  alpha
    bits 16..23  red
    bits  8..15  green
    bits  0..7   blue
"""

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from iconkit.types import ARGB32


def argb(a: int, r: int, g: int, b: int) -> ARGB32:
    return ARGB32(
        ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)
    )


def xrgb(r: int, g: int, b: int) -> ARGB32:
    """Opaque color, alpha forced to 0xFF."""
    return argb(0xFF, r, g, b)


def get_a(c: int) -> int:
    return (c >> 24) & 0xFF


def get_r(c: int) -> int:
    return (c >> 16) & 0xFF


def get_g(c: int) -> int:
    return (c >> 8) & 0xFF


def get_b(c: int) -> int:
    return c & 0xFF


def unpack_argb(c: int) -> Tuple[int, int, int, int]:
    return get_a(c), get_r(c), get_g(c), get_b(c)


# -- Vectorised --
def pack_argb_array(
    a: ArrayLike, r: ArrayLike, g: ArrayLike, b: ArrayLike
) -> NDArray[np.uint32]:
    a32 = np.asarray(a, dtype=np.uint32) & 0xFF
    r32 = np.asarray(r, dtype=np.uint32) & 0xFF
    g32 = np.asarray(g, dtype=np.uint32) & 0xFF
    b32 = np.asarray(b, dtype=np.uint32) & 0xFF
    return (a32 << 24) | (r32 << 16) | (g32 << 8) | b32


def unpack_argb_array(
    c: ArrayLike,
) -> Tuple[NDArray[np.uint8], NDArray[np.uint8], NDArray[np.uint8], NDArray[np.uint8]]:
    c32 = np.asarray(c, dtype=np.uint32)
    return (
        ((c32 >> 24) & 0xFF).astype(np.uint8),
        ((c32 >> 16) & 0xFF).astype(np.uint8),
        ((c32 >> 8) & 0xFF).astype(np.uint8),
        (c32 & 0xFF).astype(np.uint8),
    )
