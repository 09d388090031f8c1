# iconkit/cli/obj2icon.py
"""Convert one mesh of an OBJ file, plus an optional texture, to an icon file."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from iconkit.assets.icon import TEXTURE_SIZE, IconAsset
from iconkit.assets.importers.texture import TextureImporter
from iconkit.assets.mesh import MeshCollection
from iconkit.cli import configure_logging
from iconkit.codec.icon import write_icon
from iconkit.config import RLE_TEXTURE_TYPE, Obj2IconConfig
from iconkit.errors import IconKitError, IllegalParameter

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> Obj2IconConfig:
    parser = argparse.ArgumentParser(
        prog="obj2icon",
        description="Convert a Wavefront OBJ mesh to a 3D save icon.",
    )
    parser.add_argument(
        "-f", "--input-file", type=Path, required=True,
        help="OBJ file to read",
    )
    parser.add_argument(
        "-o", "--output-file", type=Path, default=None,
        help="Icon file to write (default: default.icn)",
    )
    parser.add_argument(
        "-t", "--input-texture", type=Path, default=None,
        help="128x128 texture (BMP, TGA or anything Pillow reads)",
    )
    parser.add_argument(
        "-m", "--mesh-index", type=int, default=0,
        help="Index of the mesh to convert (default: 0)",
    )
    parser.add_argument(
        "-s", "--scale-factor", type=float, default=0.0,
        help="Scale applied to the vertex positions; 0 means 1.0",
    )
    parser.add_argument(
        "-c", "--compress", action="store_true",
        help="Store the texture run-length compressed",
    )
    parser.add_argument(
        "-l", "--list-obj-file", action="store_true",
        help="List the meshes in the OBJ file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    return Obj2IconConfig(
        input_file=args.input_file,
        output_file=args.output_file,
        texture_file=args.input_texture,
        mesh_index=args.mesh_index,
        scale=args.scale_factor if args.scale_factor != 0.0 else 1.0,
        compress=args.compress,
        list_meshes=args.list_obj_file,
        verbose=args.verbose,
    )


def list_meshes(meshes: MeshCollection, source: Path) -> None:
    logger.info(" * Parsing OBJ file \"%s\" contents...", source)
    logger.info(" **  Found %d meshes:", len(meshes))
    for i, mesh in enumerate(meshes):
        logger.info(
            " **   #%d: %s - %d Triangles, %d Vertices",
            i,
            mesh.name,
            mesh.face_count,
            mesh.vertex_count,
        )


def load_texture(path: Path):
    image = TextureImporter().import_file(path)
    if image.width != TEXTURE_SIZE or image.height != TEXTURE_SIZE:
        raise IllegalParameter(
            f"Only textures of size 128x128 allowed! \"{path}\" has "
            f"{image.width}x{image.height}"
        )
    # icon textures are stored bottom row first
    image.flip_vertical()
    return image.to_argb32()


def run(config: Obj2IconConfig) -> int:
    try:
        logger.debug(" * Reading OBJ file \"%s\"", config.input_file)
        meshes = MeshCollection.from_file(config.input_file)

        if config.mesh_index < 0 or config.mesh_index >= len(meshes):
            logger.error(
                "Invalid mesh index. Index given: %d; Maximum allowed for \"%s\": %d",
                config.mesh_index,
                config.input_file,
                len(meshes) - 1,
            )
            return 1

        if config.list_meshes:
            list_meshes(meshes, config.input_file)

        pixels = load_texture(config.texture_file) if config.texture_file else None

        destination = config.destination
        if destination is None:
            return 0

        mesh = meshes.mesh(config.mesh_index)
        logger.debug(
            " * Copying geometry data: Mesh #%d - %s", config.mesh_index, mesh.name
        )
        if config.scale < 0.0:
            logger.warning("!WARNING! Scale factor is negative.")

        icon = IconAsset.from_mesh(mesh, config.scale)
        if pixels is not None:
            icon.set_texture(pixels)
        if config.compress:
            icon.set_texture_type(RLE_TEXTURE_TYPE)

        logger.debug(" * Writing output to \"%s\"", destination)
        write_icon(icon, destination)
    except IconKitError as e:
        logger.error("%s", e)
        return 1

    logger.info("Success :)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    configure_logging(config.verbose)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
