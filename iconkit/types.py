# iconkit/types.py
from typing import NewType, Tuple, TypeAlias

ARGB32 = NewType("ARGB32", int)  # 0xAARRGGBB
Fixed16 = NewType("Fixed16", int)  # signed 16-bit, scale 4096

Scalar: TypeAlias = float

Vec3 = Tuple[float, float, float]
Index3 = Tuple[int, int, int]
