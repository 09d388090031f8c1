# iconkit/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from iconkit.assets.defaults import DefaultFiles

Channels4 = Tuple[int, int, int, int]
Vector4 = Tuple[float, float, float, float]

RLE_TEXTURE_TYPE = 0x0F


@dataclass(frozen=True, slots=True)
class Obj2IconConfig:
    """Settings of the OBJ to icon converter."""

    input_file: Path
    output_file: Optional[Path] = None
    texture_file: Optional[Path] = None
    mesh_index: int = 0
    scale: float = 1.0
    compress: bool = False
    list_meshes: bool = False
    verbose: bool = False

    @property
    def destination(self) -> Optional[Path]:
        """
        Where to write the icon. Listing alone writes nothing unless an
        output file was given.
        """
        if self.output_file is not None:
            return self.output_file
        if self.list_meshes:
            return None
        return Path(DefaultFiles.ICON)


@dataclass(frozen=True, slots=True)
class Icon2ObjConfig:
    """Settings of the icon to OBJ converter."""

    input_file: Path
    output_file: Path = Path(DefaultFiles.OBJ)
    texture_file: Path = Path(DefaultFiles.TEXTURE)
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class IconSysBuilderConfig:
    """
    Settings of the icon.sys builder. ``None`` leaves the value of the
    input record (or the default record) untouched.

    Colors are 0..255; light colors are scaled to 0.0..1.0 when applied.
    """

    input_file: Optional[Path] = None
    output_file: Path = Path(DefaultFiles.ICONSYS)
    title: Optional[str] = None
    linebreak: Optional[int] = None
    icon: Optional[str] = None
    copy_icon: Optional[str] = None
    delete_icon: Optional[str] = None
    opacity: Optional[int] = None
    light_dirs: Tuple[Optional[Vector4], ...] = (None, None, None)
    light_colors: Tuple[Optional[Channels4], ...] = (None, None, None)
    ambient_color: Optional[Channels4] = None
    background: Tuple[Optional[Channels4], ...] = (None, None, None, None)
    list_file: bool = False
    verbose: bool = False
