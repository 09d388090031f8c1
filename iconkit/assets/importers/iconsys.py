# iconkit/assets/importers/iconsys.py
from pathlib import Path

from iconkit.assets.iconsys import IconSys
from iconkit.assets.importers.base import AssetImporter
from iconkit.codec.iconsys import read_iconsys


class IconSysImporter(AssetImporter):
    suffixes = (".sys",)

    def import_file(self, path: Path) -> IconSys:
        return read_iconsys(path)
