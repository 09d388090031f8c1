# iconkit/assets/defaults/__init__.py
from enum import StrEnum


class DefaultFiles(StrEnum):
    ICON = "default.icn"
    OBJ = "default.obj"
    TEXTURE = "default.tga"
    ICONSYS = "icon.sys"


__all__ = [
    "DefaultFiles",
]
