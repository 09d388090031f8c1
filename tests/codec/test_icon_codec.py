import io
import struct

import numpy as np
import pytest

from iconkit.assets.icon import IconAsset
from iconkit.assets.types import AnimationFrame, FrameKey
from iconkit.codec.icon import IconCodec, read_icon, write_icon
from iconkit.codec.texture import TEXTURE_PIXELS
from iconkit.errors import IconKitError, IoFailure


def build_two_shape_icon():
    """Three vertices, two animation shapes, two frames, uncompressed texture."""
    out = bytearray(struct.pack("<5I", 0x010000, 2, 0x07, 0x3F800000, 3))
    for i in range(3):
        out += struct.pack("<4h", i * 100, -i * 100, 4096, 0)
        out += struct.pack("<4h", i * 200, i * 50, -4096, 0)
        out += struct.pack("<4h", 0, 4096, 0, 0)
        out += struct.pack("<2hI", i * 1024, 4096 - i * 1024, 0x80FF00FF + i)
    out += struct.pack("<IIfII", 1, 60, 1.0, 0, 2)
    out += struct.pack("<II", 0, 1) + struct.pack("<ff", 0.0, 1.0)
    out += struct.pack("<II", 1, 2) + struct.pack("<ff", 0.0, 0.0) + struct.pack("<ff", 1.0, 1.0)
    out += (np.arange(TEXTURE_PIXELS, dtype=np.uint16) & 0x7FFF).astype("<u2").tobytes()
    return bytes(out)


def test_default_asset_size():
    # header, empty vertex block, animation header, texture
    assert len(IconCodec.encode(IconAsset())) == 20 + 20 + TEXTURE_PIXELS * 2


def test_decode_two_shapes():
    icon = IconCodec.decode(build_two_shape_icon())

    assert icon.vertex_count == 3
    assert icon.shape_count == 2
    assert icon.animation.frame_length == 60
    assert icon.vertex_data(0)[1].tolist() == [100 / 4096, -100 / 4096, 1.0]
    assert icon.vertex_data(1)[2].tolist() == [400 / 4096, 100 / 4096, -1.0]
    assert icon.vertex_data(-1).shape == (2, 3, 3)
    assert icon.vertex_texture_data()[2].tolist() == [0.5, 0.5]
    assert icon.vertex_color_data().tolist() == [0x80FF00FF, 0x80FF0100, 0x80FF0101]
    assert icon.frames == [
        AnimationFrame(0, (FrameKey(0.0, 1.0),)),
        AnimationFrame(1, (FrameKey(0.0, 0.0), FrameKey(1.0, 1.0))),
    ]
    assert icon.texture_pixel(0, 0) == 0xFF000000


def test_decode_encode_is_byte_exact():
    data = build_two_shape_icon()
    assert IconCodec.encode(IconCodec.decode(data)) == data


def test_compressed_texture_round_trip(tmp_path, quad_mesh, gradient_texture):
    icon = IconAsset.from_mesh(quad_mesh)
    icon.set_texture(gradient_texture)
    icon.set_texture_type(0x0F)

    path = tmp_path / "quad.icn"
    write_icon(icon, path)
    data = path.read_bytes()
    assert struct.unpack_from("<I", data, 8)[0] == 0x0F

    loaded = read_icon(path)
    assert loaded.compressed
    np.testing.assert_array_equal(loaded.texture, gradient_texture)
    np.testing.assert_array_equal(loaded.shapes, icon.shapes)
    assert loaded.frames == icon.frames


def test_header_validation():
    with pytest.raises(IconKitError, match="corrupted"):
        IconCodec.decode(struct.pack("<5I", 0x010000, 1, 7, 0, 4))
    with pytest.raises(IconKitError):
        IconCodec.decode(struct.pack("<5I", 0x010000, 0, 7, 0, 3))


def test_truncated_file():
    data = build_two_shape_icon()
    with pytest.raises(IoFailure):
        IconCodec.decode(data[:10])
    with pytest.raises(IoFailure):
        IconCodec.decode(data[:-2])


def test_declared_counts_are_checked_against_file_size():
    header = struct.pack("<5I", 0x010000, 1, 0x07, 0x3F800000, 0)
    too_many_keys = header + struct.pack("<IIfII", 1, 31, 1.0, 0, 1) + struct.pack("<II", 0, 0x7FFFFFFF)
    with pytest.raises(IoFailure, match="Key table declares"):
        IconCodec.decode(too_many_keys)

    too_many_frames = header + struct.pack("<IIfII", 1, 31, 1.0, 0, 1000)
    with pytest.raises(IoFailure, match="Frame table declares"):
        IconCodec.decode(too_many_frames)

    too_many_vertices = struct.pack("<5I", 0x010000, 1, 0x07, 0x3F800000, 3000)
    with pytest.raises(IoFailure, match="Vertex block declares"):
        IconCodec.decode(too_many_vertices)


def test_missing_file(tmp_path):
    with pytest.raises(IoFailure):
        read_icon(tmp_path / "nope.icn")


def test_write_to_stream_matches_encode(quad_mesh):
    icon = IconAsset.from_mesh(quad_mesh)
    buf = io.BytesIO()
    IconCodec.write(icon, buf)
    assert buf.getvalue() == IconCodec.encode(icon)
    # 6 vertices of one shape: 8 + 8 + 4 + 4 bytes each
    assert len(buf.getvalue()) == 20 + 6 * 24 + 20 + 8 + 8 + TEXTURE_PIXELS * 2


def test_texture_dimensions_are_shared():
    from iconkit.assets import icon as icon_module, types
    from iconkit.codec import texture

    assert texture.TEXTURE_PIXELS is types.TEXTURE_PIXELS
    assert icon_module.TEXTURE_SIZE is types.TEXTURE_SIZE
    assert IconAsset().texture.size == types.TEXTURE_SIZE ** 2
