# iconkit/assets/importers/mesh.py
from pathlib import Path

from iconkit.assets.importers.base import AssetImporter
from iconkit.assets.mesh import MeshCollection


class ObjImporter(AssetImporter):
    suffixes = (".obj",)

    def import_file(self, path: Path) -> MeshCollection:
        return MeshCollection.from_file(path)
