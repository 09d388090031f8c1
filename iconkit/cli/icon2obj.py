# iconkit/cli/icon2obj.py
"""Extract geometry and texture from an icon file."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from iconkit.assets.defaults import DefaultFiles
from iconkit.assets.icon import TEXTURE_SIZE, IconAsset
from iconkit.assets.importers.texture import save_image
from iconkit.assets.mesh import MeshCollection
from iconkit.assets.raster import write_tga
from iconkit.cli import configure_logging
from iconkit.codec.icon import read_icon
from iconkit.config import Icon2ObjConfig
from iconkit.errors import IconKitError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> Icon2ObjConfig:
    parser = argparse.ArgumentParser(
        prog="icon2obj",
        description="Extract geometry and texture from a 3D save icon.",
    )
    parser.add_argument(
        "-f", "--input-file", type=Path, required=True,
        help="Icon file used as input",
    )
    parser.add_argument(
        "-o", "--output-file", type=Path, default=Path(DefaultFiles.OBJ),
        help="OBJ destination file (default: default.obj)",
    )
    parser.add_argument(
        "-ot", "--output-texture", type=Path, default=Path(DefaultFiles.TEXTURE),
        help="Texture destination, TGA or any format Pillow writes (default: default.tga)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)
    return Icon2ObjConfig(
        input_file=args.input_file,
        output_file=args.output_file,
        texture_file=args.output_texture,
        verbose=args.verbose,
    )


def write_geometry(icon: IconAsset, name: str, destination: Path) -> None:
    meshes = MeshCollection()
    meshes.add_mesh(icon.build_mesh(name))
    logger.debug(" * Writing geometry output to file \"%s\"", destination)
    meshes.write_file(destination)


def write_texture(icon: IconAsset, destination: Path) -> None:
    # stored bottom row first
    pixels = icon.texture_rows()[::-1].reshape(-1)

    logger.debug(" * Writing texture to file \"%s\"", destination)
    if destination.suffix.lower() == ".tga":
        write_tga(destination, pixels, TEXTURE_SIZE, TEXTURE_SIZE)
    else:
        save_image(destination, pixels, TEXTURE_SIZE, TEXTURE_SIZE)


def run(config: Icon2ObjConfig) -> int:
    try:
        icon = read_icon(config.input_file)
        logger.debug(
            " **  Found geometry - %d vertices, %d shapes.",
            icon.vertex_count,
            icon.shape_count,
        )
        if icon.frame_count > 1:
            logger.info(" **  Found animation - %d frames.", icon.frame_count)

        write_geometry(icon, str(config.input_file), config.output_file)
        write_texture(icon, config.texture_file)
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
