import logging

import numpy as np
import pytest
from PIL import Image

from iconkit.assets.mesh import MeshCollection
from iconkit.assets.raster import read_raster
from iconkit.cli import icon2obj, iconsys_builder, obj2icon
from iconkit.codec.icon import read_icon
from iconkit.codec.iconsys import read_iconsys

RED = 0xFFF80000
BLACK = 0xFF000000


@pytest.fixture
def top_red_png(tmp_path):
    """128x128 texture, black with a red top row."""
    rgb = np.zeros((128, 128, 3), dtype=np.uint8)
    rgb[0, :, 0] = 248
    path = tmp_path / "texture.png"
    Image.fromarray(rgb).save(path)
    return path


@pytest.fixture
def textured_icon(tmp_path, quad_obj, top_red_png):
    path = tmp_path / "quad.icn"
    assert obj2icon.main(["-f", str(quad_obj), "-o", str(path), "-t", str(top_red_png)]) == 0
    return path


# -- obj2icon --
def test_obj2icon_writes_icon(tmp_path, quad_obj):
    out = tmp_path / "out.icn"
    assert obj2icon.main(["-f", str(quad_obj), "-o", str(out), "-s", "0.5"]) == 0

    icon = read_icon(out)
    assert icon.vertex_count == 6
    assert icon.vertex_data(0)[2].tolist() == [0.5, 0.5, 0.0]
    assert not icon.compressed


def test_obj2icon_stores_texture_bottom_up(textured_icon):
    icon = read_icon(textured_icon)
    assert icon.texture_pixel(0, 127) == RED
    assert icon.texture_pixel(5, 0) == BLACK


def test_obj2icon_compress_flag(tmp_path, quad_obj):
    out = tmp_path / "out.icn"
    assert obj2icon.main(["-f", str(quad_obj), "-o", str(out), "-c"]) == 0
    assert read_icon(out).texture_type == 0x0F


def test_obj2icon_rejects_wrong_texture_size(tmp_path, quad_obj):
    tex = tmp_path / "small.png"
    Image.new("RGB", (64, 64)).save(tex)
    out = tmp_path / "out.icn"

    assert obj2icon.main(["-f", str(quad_obj), "-o", str(out), "-t", str(tex)]) == 1
    assert not out.exists()


def test_obj2icon_failures(tmp_path, quad_obj):
    out = tmp_path / "out.icn"
    assert obj2icon.main(["-f", str(tmp_path / "missing.obj"), "-o", str(out)]) == 1
    assert obj2icon.main(["-f", str(quad_obj), "-o", str(out), "-m", "1"]) == 1
    assert not out.exists()


def test_obj2icon_listing_writes_nothing(tmp_path, quad_obj, monkeypatch, caplog):
    caplog.set_level(logging.INFO)
    monkeypatch.chdir(tmp_path)

    assert obj2icon.main(["-f", str(quad_obj), "-l"]) == 0

    assert "quad - 2 Triangles, 4 Vertices" in caplog.text
    assert not (tmp_path / "default.icn").exists()


def test_obj2icon_requires_input():
    with pytest.raises(SystemExit):
        obj2icon.main([])


# -- icon2obj --
def test_icon2obj_tga(tmp_path, textured_icon):
    obj = tmp_path / "out.obj"
    tga = tmp_path / "out.tga"
    assert icon2obj.main(["-f", str(textured_icon), "-o", str(obj), "-ot", str(tga)]) == 0

    mesh = MeshCollection.from_file(obj).mesh(0)
    assert mesh.face_count == 2
    assert mesh.vertex_count == 6

    pixels = read_raster(tga).to_argb32()
    assert pixels[0] == RED
    assert pixels[-1] == BLACK


def test_icon2obj_png(tmp_path, textured_icon):
    obj = tmp_path / "out.obj"
    png = tmp_path / "out.png"
    assert icon2obj.main(["-f", str(textured_icon), "-o", str(obj), "-ot", str(png)]) == 0

    with Image.open(png) as img:
        assert img.size == (128, 128)
        assert img.getpixel((0, 0)) == (248, 0, 0, 255)
        assert img.getpixel((0, 1)) == (0, 0, 0, 255)


def test_icon2obj_bad_input(tmp_path):
    bad = tmp_path / "bad.icn"
    bad.write_bytes(b"\x00" * 8)
    assert icon2obj.main(["-f", str(bad), "-o", str(tmp_path / "x.obj")]) == 1


# -- iconsys-builder --
def test_iconsys_builder_settings(tmp_path):
    out = tmp_path / "icon.sys"
    argv = [
        "-o", str(out),
        "--set-title", "HELLOWORLD",
        "--title-linebreak", "5",
        "--set-icon", "A.ICN",
        "--set-delete-icon", "D.ICN",
        "--set-opacity", "64",
        "--color-1", "10", "20", "30", "0",
        "--lcolor-a", "255", "0", "0", "0",
        "--light-2", "1", "0", "0", "0",
    ]
    assert iconsys_builder.main(argv) == 0

    record = read_iconsys(out)
    assert record.title == "HELLO\nWORLD"
    assert (record.icon_file, record.icon_copy_file, record.icon_delete_file) == (
        "A.ICN",
        "A.ICN",
        "D.ICN",
    )
    assert record.background_opacity == 64
    assert record.background[0].as_tuple() == (10, 20, 30, 0)
    assert record.ambient.as_tuple() == (1.0, 0.0, 0.0, 0.0)
    assert record.light_dirs[1].as_tuple() == (1.0, 0.0, 0.0, 0.0)


def test_iconsys_builder_modifies_input(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    first = tmp_path / "first.sys"
    second = tmp_path / "second.sys"
    assert iconsys_builder.main(["-o", str(first), "--set-title", "KEEPME"]) == 0
    assert iconsys_builder.main(["-f", str(first), "-o", str(second), "-l", "--set-opacity", "7"]) == 0

    record = read_iconsys(second)
    assert record.decoded_title == "KEEPME"
    assert record.background_opacity == 7
    assert "KEEPME" in caplog.text
    assert "Background Opacity: 0x07" in caplog.text


def test_iconsys_builder_failures(tmp_path):
    out = tmp_path / "icon.sys"
    assert iconsys_builder.main(["-f", str(tmp_path / "missing.sys"), "-o", str(out)]) == 1

    with pytest.raises(SystemExit):
        iconsys_builder.main(["-o", str(out), "--color-1", "300", "0", "0", "0"])
    with pytest.raises(SystemExit):
        iconsys_builder.main(["-o", str(out), "--title-linebreak", "0"])
    with pytest.raises(SystemExit):
        iconsys_builder.main(["-o", str(out), "--set-title", "X" * 33])
    assert not out.exists()
