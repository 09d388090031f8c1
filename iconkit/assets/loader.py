# iconkit/assets/loader.py
import logging
from pathlib import Path
from typing import Any, Dict

from iconkit.assets.importers.base import AssetImporter
from iconkit.assets.importers.bmp import BmpImporter
from iconkit.assets.importers.icon import IconImporter
from iconkit.assets.importers.iconsys import IconSysImporter
from iconkit.assets.importers.mesh import ObjImporter
from iconkit.assets.importers.texture import TextureImporter
from iconkit.assets.importers.tga import TgaImporter
from iconkit.errors import NotImplementedFormat
from iconkit.fileio import PathLike

logger = logging.getLogger(__name__)


class AssetLoader:
    def __init__(self, asset_root: PathLike = ".") -> None:
        self.root = Path(asset_root)

        self._importers: Dict[str, AssetImporter] = {}
        # first importer claiming a suffix wins
        for importer in (
            ObjImporter(),
            IconImporter(),
            BmpImporter(),
            TgaImporter(),
            TextureImporter(),
            IconSysImporter(),
        ):
            for ext in importer.suffixes:
                self._importers.setdefault(ext, importer)

    def importer_for(self, path: PathLike) -> AssetImporter:
        ext = Path(path).suffix.lower()
        importer = self._importers.get(ext)
        if not importer:
            raise NotImplementedFormat(f"No importer for {ext or path}")
        return importer

    def load(self, path: PathLike) -> Any:
        """
        Blocking load. The importer is picked by the file suffix.
        """
        full_path = self.root / path
        data = self.importer_for(full_path).import_file(full_path)
        logger.debug("Loaded %s as %s", full_path, type(data).__name__)
        return data
