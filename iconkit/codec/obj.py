# iconkit/codec/obj.py
"""
Wavefront OBJ reading and writing.

Only triangles with all three of position, texture and normal indices are
understood. Indices in the file are 1-based and keep counting across
groups; in memory every mesh uses 0-based indices into its own arrays.
"""

import logging
from typing import IO, Iterable, List, Tuple

from iconkit.assets.mesh import IndexedMesh
from iconkit.assets.types import Face
from iconkit.errors import IllegalParameter

logger = logging.getLogger(__name__)

HEADER = (
    "# OBJ File created by iconkit\n"
    "#\n"
)


def _parse_triple(parts: List[str], lineno: int) -> Tuple[float, float, float]:
    try:
        values = [float(p) for p in parts[1:4]]
    except ValueError as e:
        raise IllegalParameter(f"Line {lineno}: malformed vertex data") from e
    if len(values) < 2:
        raise IllegalParameter(f"Line {lineno}: not enough components")
    while len(values) < 3:
        values.append(0.0)
    return values[0], values[1], values[2]


def _parse_face(
    parts: List[str], lineno: int, bases: Tuple[int, int, int]
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int], Tuple[int, int, int]]:
    if len(parts) != 4:
        raise IllegalParameter(f"Line {lineno}: only triangular faces are supported")

    v_base, t_base, n_base = bases
    verts, texs, norms = [], [], []
    for corner in parts[1:]:
        tokens = corner.split("/")
        if len(tokens) != 3 or not all(tokens):
            raise IllegalParameter(
                f"Line {lineno}: face corners must be v/vt/vn, got {corner!r}"
            )
        try:
            v, t, n = (int(x) for x in tokens)
        except ValueError as e:
            raise IllegalParameter(f"Line {lineno}: bad face index in {corner!r}") from e
        verts.append(v - v_base - 1)
        texs.append(t - t_base - 1)
        norms.append(n - n_base - 1)
    return tuple(verts), tuple(texs), tuple(norms)


def read_obj(stream: IO[str]) -> List[IndexedMesh]:
    """
    Parse OBJ text into meshes.

    A ``g <name>`` line marks a new group; the next vertex line closes the
    current mesh, names it after that group and starts a new one. The mesh
    under construction at end of input is kept only if it has faces.
    """
    meshes: List[IndexedMesh] = []
    mesh = IndexedMesh()
    group_name = ""
    new_group = False
    smoothing = -1

    v_count = t_count = n_count = 0
    bases = (0, 0, 0)

    for lineno, raw in enumerate(stream, 1):
        line = raw.strip()
        if not line:
            continue

        head = line[0]
        if head == "#":
            continue

        parts = line.split()
        tag = parts[0]

        if head == "v":
            if new_group:
                mesh.name = group_name
                meshes.append(mesh)
                mesh = IndexedMesh()
                bases = (v_count, t_count, n_count)
                new_group = False

            if tag == "v":
                mesh.add_vertex(*_parse_triple(parts, lineno))
                v_count += 1
            elif tag == "vt":
                mesh.add_tex_coord(*_parse_triple(parts, lineno))
                t_count += 1
            elif tag == "vn":
                mesh.add_normal(*_parse_triple(parts, lineno))
                n_count += 1
            # vp (parameter space) is ignored

        elif tag == "f":
            verts, texs, norms = _parse_face(parts, lineno, bases)
            mesh.add_face(Face(verts, texs, norms, smoothing_group=smoothing))

        elif tag == "g":
            if len(parts) > 1:
                group_name = parts[1]
                new_group = True

        elif tag == "s" and len(parts) > 1:
            if parts[1] == "off":
                smoothing = 0
            else:
                try:
                    smoothing = int(parts[1])
                except ValueError as e:
                    raise IllegalParameter(
                        f"Line {lineno}: bad smoothing group {parts[1]!r}"
                    ) from e

    if mesh.face_count > 0:
        mesh.name = group_name
        meshes.append(mesh)

    logger.debug(
        "Parsed OBJ: %d meshes, %d vertices, %d texture vertices, %d normals",
        len(meshes),
        v_count,
        t_count,
        n_count,
    )
    return meshes


def write_obj(meshes: Iterable[IndexedMesh], stream: IO[str]) -> None:
    """Write meshes as OBJ text with file-global 1-based indices."""
    stream.write(HEADER)

    v_base = t_base = n_base = 0
    for mesh in meshes:
        stream.write(f"# object {mesh.name} to come\n#\n")

        for i in range(mesh.vertex_count):
            stream.write("v  {:.6f} {:.6f} {:.6f}\n".format(*mesh.vertex(i)))
        stream.write(f"# {mesh.vertex_count} vertices\n\n")

        for i in range(mesh.tex_count):
            stream.write("vt  {:.6f} {:.6f} {:.6f}\n".format(*mesh.tex_coord(i)))
        stream.write(f"# {mesh.tex_count} texture vertices\n\n")

        for i in range(mesh.normal_count):
            stream.write("vn  {:.6f} {:.6f} {:.6f}\n".format(*mesh.normal(i)))
        stream.write(f"# {mesh.normal_count} vertex normals\n\n")

        stream.write(f"g {mesh.name}\n")
        current = None
        for face in mesh.faces:
            if face.smoothing_group != current:
                current = face.smoothing_group
                stream.write(f"s {current}\n")
            corners = (
                f"{v + v_base + 1}/{t + t_base + 1}/{n + n_base + 1}"
                for v, t, n in zip(face.vertices, face.tex_coords, face.normals)
            )
            stream.write("f " + " ".join(corners) + "\n")
        stream.write(f"# {mesh.face_count} faces\n\n")

        v_base += mesh.vertex_count
        t_base += mesh.tex_count
        n_base += mesh.normal_count
        stream.write("g\n")
