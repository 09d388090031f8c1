import numpy as np
import pytest

from iconkit.assets.mesh import MeshCollection

QUAD_OBJ = """\
# quad made of two triangles
v 0.0 0.0 0.0
v 1.0 0.0 0.0
v 1.0 1.0 0.0
v 0.0 1.0 0.0
vt 0.0 0.0
vt 1.0 0.0
vt 1.0 1.0
vt 0.0 1.0
vn 0.0 0.0 1.0
g quad
s 1
f 1/1/1 2/2/1 3/3/1
f 1/1/1 3/3/1 4/4/1
"""

# two groups, the index counters keep running across groups
TWO_GROUPS_OBJ = """\
v 0.0 0.0 0.0
v 1.0 0.0 0.0
v 0.0 1.0 0.0
vt 0.0 0.0
vn 0.0 0.0 1.0
g first
s 1
f 1/1/1 2/1/1 3/1/1
v 0.0 0.0 1.0
v 1.0 0.0 1.0
v 0.0 1.0 1.0
vt 1.0 1.0
vn 0.0 1.0 0.0
g second
s 2
f 4/2/2 5/2/2 6/2/2
"""


@pytest.fixture
def quad_obj(tmp_path):
    """Path to an OBJ file holding one quad mesh named 'quad'."""
    path = tmp_path / "quad.obj"
    path.write_text(QUAD_OBJ)
    return path


@pytest.fixture
def two_groups_obj(tmp_path):
    path = tmp_path / "groups.obj"
    path.write_text(TWO_GROUPS_OBJ)
    return path


@pytest.fixture
def quad_mesh(quad_obj):
    return MeshCollection.from_file(quad_obj).mesh(0)


@pytest.fixture
def gradient_texture():
    """128x128 opaque colors whose channels are multiples of 8."""
    y, x = np.mgrid[0:128, 0:128].astype(np.uint32)
    r = (x * 2) & 0xF8
    g = (y * 2) & 0xF8
    b = ((x + y) & 0x1F) << 3
    return (0xFF000000 | (r << 16) | (g << 8) | b).astype(np.uint32).reshape(-1)
