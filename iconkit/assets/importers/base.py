# iconkit/assets/importers/base.py
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Tuple

from iconkit.fileio import PathLike


class AssetImporter(ABC):
    """Decodes one family of file formats, picked by lower case suffix."""

    suffixes: Tuple[str, ...] = ()

    def accepts(self, path: PathLike) -> bool:
        return Path(path).suffix.lower() in self.suffixes

    @abstractmethod
    def import_file(self, path: Path) -> Any:
        """
        Read a file from disk and return the decoded asset object.
        The returned object owns all of its buffers.
        """
        pass
