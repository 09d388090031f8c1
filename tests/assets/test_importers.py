import pytest
from PIL import Image

from iconkit.assets.icon import IconAsset
from iconkit.assets.iconsys import IconSys
from iconkit.assets.importers.bmp import BmpImporter
from iconkit.assets.importers.icon import IconImporter
from iconkit.assets.importers.iconsys import IconSysImporter
from iconkit.assets.importers.mesh import ObjImporter
from iconkit.assets.importers.texture import TextureImporter, save_image
from iconkit.assets.importers.tga import TgaImporter
from iconkit.assets.mesh import MeshCollection
from iconkit.assets.types import RasterImage
from iconkit.codec.icon import write_icon
from iconkit.codec.iconsys import write_iconsys
from iconkit.errors import IoFailure, NotImplementedFormat


def test_obj_importer_simple_triangle(tmp_path):
    obj_content = """
    v 0.0 0.0 0.0
    v 1.0 0.0 0.0
    v 0.0 1.0 0.0
    vn 0.0 0.0 1.0
    vt 0.0 0.0
    f 1/1/1 2/1/1 3/1/1
    """
    f = tmp_path / "triangle.obj"
    f.write_text(obj_content)

    meshes = ObjImporter().import_file(f)

    assert isinstance(meshes, MeshCollection)
    assert len(meshes) == 1
    assert meshes.mesh(0).face_count == 1


def test_obj_importer_missing_file(tmp_path):
    with pytest.raises(IoFailure):
        ObjImporter().import_file(tmp_path / "missing.obj")


def test_texture_importer_png(tmp_path):
    img = Image.new("RGB", (2, 2), color="red")
    f = tmp_path / "test.png"
    img.save(f)

    tex = TextureImporter().import_file(f)

    assert isinstance(tex, RasterImage)
    assert (tex.width, tex.height, tex.bpp) == (2, 2, 32)
    assert tex.to_argb32().tolist() == [0xFFFF0000] * 4


def test_texture_importer_uses_native_decoders(tmp_path):
    f = tmp_path / "test.bmp"
    Image.new("RGB", (2, 2), color="blue").save(f)

    tex = TextureImporter().import_file(f)
    assert tex.bpp == 24
    assert tex.to_argb32().tolist() == [0xFF0000FF] * 4

    assert BmpImporter().import_file(f).to_argb32().tolist() == [0xFF0000FF] * 4


def test_texture_importer_rejects_garbage(tmp_path):
    f = tmp_path / "noise.png"
    f.write_bytes(b"definitely not an image")
    with pytest.raises(NotImplementedFormat):
        TextureImporter().import_file(f)


def test_tga_importer(tmp_path):
    f = tmp_path / "test.tga"
    Image.new("RGBA", (2, 1), color=(1, 2, 3, 4)).save(f)
    assert TgaImporter().import_file(f).to_argb32().tolist() == [0x04010203] * 2


def test_save_image_png(tmp_path):
    f = tmp_path / "out.png"
    save_image(f, [0xFF102030, 0x80405060], 2, 1)
    with Image.open(f) as img:
        assert img.mode == "RGBA"
        assert img.getpixel((1, 0)) == (0x40, 0x50, 0x60, 0x80)


def test_icon_and_iconsys_importers(tmp_path, quad_mesh):
    icn = tmp_path / "quad.icn"
    write_icon(IconAsset.from_mesh(quad_mesh), icn)
    icon = IconImporter().import_file(icn)
    assert isinstance(icon, IconAsset)
    assert icon.vertex_count == 6

    sys_file = tmp_path / "icon.sys"
    write_iconsys(IconSys(decoded_title="HELLO"), sys_file)
    record = IconSysImporter().import_file(sys_file)
    assert record.decoded_title == "HELLO"
