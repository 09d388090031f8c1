# iconkit/__init__.py
"""Conversion tools for 3D save icons: icon binaries, OBJ meshes and textures."""

__version__ = "1.0.0"
