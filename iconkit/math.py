# iconkit/math.py
import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from iconkit.errors import IllegalParameter
from iconkit.types import Fixed16, Scalar

FIXED_SCALE = 4096.0

FIXED_MIN = -32768
FIXED_MAX = 32767


# -- Fixed point (1.3.12) --
def float_to_fixed(f: Scalar) -> Fixed16:
    """
    Convert a float to the 16-bit fixed point used by icon geometry.

    The product is computed in single precision and truncated toward zero,
    which is what the console tools produce.

    Raises:
        IllegalParameter: if the value does not fit a signed 16-bit word.
    """
    scaled = float(np.float32(f) * np.float32(FIXED_SCALE))
    if not math.isfinite(scaled):
        raise IllegalParameter(f"Cannot convert {f!r} to fixed point")
    fixed = math.trunc(scaled)
    if fixed < FIXED_MIN or fixed > FIXED_MAX:
        raise IllegalParameter(f"Value {f!r} is outside the fixed point range")
    return Fixed16(fixed)


def fixed_to_float(i: int) -> Scalar:
    return float(np.float32(i) / np.float32(FIXED_SCALE))


def floats_to_fixed(values: ArrayLike) -> NDArray[np.int16]:
    scaled = np.asarray(values, dtype=np.float32) * np.float32(FIXED_SCALE)
    if not np.all(np.isfinite(scaled)):
        raise IllegalParameter("Cannot convert non-finite values to fixed point")
    fixed = np.trunc(scaled)
    if fixed.size and (fixed.min() < FIXED_MIN or fixed.max() > FIXED_MAX):
        raise IllegalParameter("Values are outside the fixed point range")
    return fixed.astype(np.int16)


def fixed_to_floats(values: ArrayLike) -> NDArray[np.float32]:
    return np.asarray(values, dtype=np.float32) / np.float32(FIXED_SCALE)
