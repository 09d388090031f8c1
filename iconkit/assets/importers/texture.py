# iconkit/assets/importers/texture.py
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from iconkit import color
from iconkit.assets.importers.base import AssetImporter
from iconkit.assets.raster import RasterFormat, RasterImage, read_raster
from iconkit.errors import IoFailure, NotImplementedFormat

_CORE_SUFFIXES = (".bmp", ".tga")


class TextureImporter(AssetImporter):
    """
    BMP and TGA go through the native decoders, everything else through
    Pillow as 32-bit BGRA samples.
    """

    suffixes = (".png", ".jpg", ".jpeg") + _CORE_SUFFIXES

    def import_file(self, path: Path) -> RasterImage:
        path = Path(path)
        if path.suffix.lower() in _CORE_SUFFIXES:
            return read_raster(path, RasterFormat.from_path(path))

        try:
            with Image.open(path) as img:
                converted = img.convert("RGBA")
                width, height = converted.size
                rgba = np.asarray(converted, dtype=np.uint8).reshape(-1, 4)
        except UnidentifiedImageError as e:
            raise NotImplementedFormat(f"Unrecognised image file {path}") from e
        except OSError as e:
            raise IoFailure(f"Could not read {path}: {e}") from e

        # on-disk order of 32-bit samples is B, G, R, A
        bgra = rgba[:, [2, 1, 0, 3]]
        return RasterImage(
            width=width,
            height=height,
            bpp=32,
            samples=np.ascontiguousarray(bgra).reshape(-1),
        )


def save_image(path: Path, pixels: np.ndarray, width: int, height: int) -> None:
    """Write canonical colors through Pillow, format picked from the suffix."""
    a, r, g, b = color.unpack_argb_array(np.asarray(pixels).reshape(-1))
    rgba = np.stack([r, g, b, a], axis=-1).reshape(height, width, 4)
    try:
        Image.fromarray(rgba).save(path)
    except (OSError, ValueError) as e:
        raise IoFailure(f"Could not write {path}: {e}") from e
