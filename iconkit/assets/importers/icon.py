# iconkit/assets/importers/icon.py
from pathlib import Path

from iconkit.assets.icon import IconAsset
from iconkit.assets.importers.base import AssetImporter
from iconkit.codec.icon import read_icon


class IconImporter(AssetImporter):
    suffixes = (".icn", ".ico")

    def import_file(self, path: Path) -> IconAsset:
        return read_icon(path)
