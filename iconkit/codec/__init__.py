# iconkit/codec/__init__.py
"""Serialization of icon binaries, icon.sys records, textures and OBJ text."""
