# iconkit/codec/iconsys.py
import logging
import struct
from typing import BinaryIO

from iconkit.assets.iconsys import (
    FILENAME_BYTES,
    IconSys,
    IconSysColor,
    IconSysLightColor,
    IconSysLightVec,
    decode_title,
    encode_title,
)
from iconkit.errors import IoFailure
from iconkit.fileio import PathLike, open_binary

logger = logging.getLogger(__name__)


def _cstring(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


def _filename_field(name: str) -> bytes:
    return name.encode("ascii", errors="replace")[:FILENAME_BYTES]


class IconSysCodec:
    # magic, reserved1, linebreak offset (bytes), reserved2, opacity,
    # 4 x 4I background, 3 x 4f light dirs, 4 x 4f light colors + ambient,
    # title, icon, copy icon, delete icon, reserved3
    LAYOUT = struct.Struct("<4sHHII16I12f16f68s64s64s64s512s")

    @classmethod
    def read(cls, stream: BinaryIO) -> IconSys:
        raw = stream.read(cls.LAYOUT.size)
        if len(raw) != cls.LAYOUT.size:
            raise IoFailure("Unexpected end of icon.sys file")
        return cls.decode(raw)

    @classmethod
    def decode(cls, data: bytes) -> IconSys:
        if len(data) < cls.LAYOUT.size:
            raise IoFailure("Unexpected end of icon.sys data")
        fields = cls.LAYOUT.unpack_from(data, 0)

        magic, reserved1, lb_offset, reserved2, opacity = fields[:5]
        colors = fields[5:21]
        dirs = fields[21:33]
        lights = fields[33:49]
        title, icon, copy_icon, delete_icon, reserved3 = fields[49:]

        # magic and reserved fields vary between real files and are not checked
        return IconSys(
            decoded_title=decode_title(title),
            linebreak=lb_offset >> 1,
            background_opacity=opacity,
            background=[IconSysColor(*colors[i : i + 4]) for i in range(0, 16, 4)],
            light_dirs=[IconSysLightVec(*dirs[i : i + 4]) for i in range(0, 12, 4)],
            light_colors=[IconSysLightColor(*lights[i : i + 4]) for i in range(0, 12, 4)],
            ambient=IconSysLightColor(*lights[12:16]),
            icon_file=_cstring(icon),
            icon_copy_file=_cstring(copy_icon),
            icon_delete_file=_cstring(delete_icon),
            magic=magic,
            reserved1=reserved1,
            reserved2=reserved2,
            reserved3=reserved3,
        )

    @classmethod
    def encode(cls, record: IconSys) -> bytes:
        colors = [c for color in record.background for c in color.as_tuple()]
        dirs = [c for vec in record.light_dirs for c in vec.as_tuple()]
        lights = [c for light in record.light_colors for c in light.as_tuple()]
        lights += record.ambient.as_tuple()

        return cls.LAYOUT.pack(
            record.magic,
            record.reserved1,
            record.linebreak * 2,
            record.reserved2,
            record.background_opacity,
            *colors,
            *dirs,
            *lights,
            encode_title(record.decoded_title),
            _filename_field(record.icon_file),
            _filename_field(record.icon_copy_file),
            _filename_field(record.icon_delete_file),
            record.reserved3,
        )

    @classmethod
    def write(cls, record: IconSys, stream: BinaryIO) -> None:
        stream.write(cls.encode(record))


def read_iconsys(path: PathLike) -> IconSys:
    with open_binary(path) as f:
        record = IconSysCodec.read(f)
    logger.debug("Read icon.sys %s: %r", path, record.title_single_line)
    return record


def write_iconsys(record: IconSys, path: PathLike) -> None:
    with open_binary(path, "wb") as f:
        IconSysCodec.write(record, f)
