import io
import struct

import pytest

from iconkit.assets.iconsys import (
    IconSys,
    IconSysColor,
    IconSysLightColor,
    IconSysLightVec,
    decode_title,
    encode_title,
)
from iconkit.codec.iconsys import IconSysCodec, read_iconsys, write_iconsys
from iconkit.errors import IllegalParameter, IoFailure


def test_record_size():
    assert IconSysCodec.LAYOUT.size == 964
    assert len(IconSysCodec.encode(IconSys())) == 964


def test_title_encoding():
    encoded = encode_title("Ab 1:")
    assert encoded[:10] == bytes.fromhex("8260 8282 823f 8250 8146")
    assert encoded[10:] == bytes(58)
    assert decode_title(encoded) == "Ab 1:"


def test_title_drops_unsupported_characters():
    assert decode_title(encode_title("a-b!c")) == "abc"


def test_title_decoding_of_full_width_space_and_unknowns():
    assert decode_title(bytes.fromhex("8140 8260 9999 0000 8260")) == " A?"


def test_round_trip(tmp_path):
    record = IconSys(decoded_title="SAVEDATA", linebreak=4, background_opacity=0x40)
    record.background[1] = IconSysColor(1, 2, 3, 4)
    record.light_dirs[2] = IconSysLightVec(0.25, -0.5, 1.0, 0.0)
    record.light_colors[0] = IconSysLightColor(0.5, 0.25, 1.0, 0.0)
    record.ambient = IconSysLightColor(0.125, 0.125, 0.125, 0.0)
    record.set_icon_file("MAIN.ICN")
    record.set_icon_copy_file("COPY.ICN")
    record.set_icon_delete_file("DEL.ICN")

    path = tmp_path / "icon.sys"
    write_iconsys(record, path)
    data = path.read_bytes()

    assert data[:4] == b"PS2D"
    # the file stores the linebreak as a byte offset
    assert struct.unpack_from("<H", data, 6)[0] == 8

    loaded = read_iconsys(path)
    assert loaded.decoded_title == "SAVEDATA"
    assert loaded.title == "SAVE\nDATA"
    assert loaded.title_single_line == "SAVE DATA"
    assert loaded.background_opacity == 0x40
    assert loaded.background[1].as_tuple() == (1, 2, 3, 4)
    assert loaded.light_dirs[2].as_tuple() == (0.25, -0.5, 1.0, 0.0)
    assert loaded.light_colors[0].as_tuple() == (0.5, 0.25, 1.0, 0.0)
    assert loaded.ambient.as_tuple() == (0.125, 0.125, 0.125, 0.0)
    assert (loaded.icon_file, loaded.icon_copy_file, loaded.icon_delete_file) == (
        "MAIN.ICN",
        "COPY.ICN",
        "DEL.ICN",
    )
    assert loaded.is_valid()
    assert IconSysCodec.encode(loaded) == data


def test_default_lights_survive_single_precision():
    loaded = IconSysCodec.decode(IconSysCodec.encode(IconSys()))
    assert loaded.light_dirs[1].as_tuple() == pytest.approx((0.0, -0.4, -0.1, 0.0))
    assert loaded.decoded_title == "DEFAULT"
    assert loaded.icon_file == "ICON.ICN"


def test_title_linebreak():
    record = IconSys(decoded_title="HELLOWORLD", linebreak=5)
    assert record.title == "HELLO\nWORLD"
    record.set_linebreak(32)
    assert record.title == "HELLOWORLD"
    record.set_linebreak(0)
    assert record.title == "HELLOWORLD"


def test_setters_validate():
    record = IconSys()
    with pytest.raises(IllegalParameter):
        record.set_title("X" * 33)
    with pytest.raises(IllegalParameter):
        record.set_linebreak(33)
    with pytest.raises(IllegalParameter):
        record.set_background_opacity(256)
    with pytest.raises(IllegalParameter):
        record.set_icon_file("X" * 33)


def test_background_color_channels():
    c = IconSysColor(300, -5, 10, 0)
    assert c.as_tuple() == (255, 0, 10, 0)

    c = IconSysColor()
    c.set_r(0x40)
    assert c.r8 == 0x80
    assert c.g8 == 0xFF
    with pytest.raises(IllegalParameter):
        c.set_g(0x81)


def test_light_color_channels():
    c = IconSysLightColor(1.5, -1.0, 0.5, 0.0)
    assert c.as_tuple() == (1.0, 0.0, 0.5, 0.0)
    assert c.b8 == 127
    with pytest.raises(IllegalParameter):
        c.set_r(1.1)


def test_is_valid():
    assert IconSys().is_valid()
    assert not IconSys(magic=b"XXXX").is_valid()
    assert not IconSys(reserved3=b"\x01" + bytes(511)).is_valid()


def test_short_read(tmp_path):
    with pytest.raises(IoFailure):
        IconSysCodec.read(io.BytesIO(bytes(100)))
    with pytest.raises(IoFailure):
        read_iconsys(tmp_path / "missing.sys")
