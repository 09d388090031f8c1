# iconkit/assets/iconsys.py
"""
icon.sys save descriptor model.

The console's browser reads the save title, the background gradient, the
three-light rig and the names of the icon files from this record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from iconkit.errors import IllegalParameter

ICONSYS_MAGIC = b"PS2D"
TITLE_BYTES = 68
FILENAME_BYTES = 64
RESERVED_BYTES = 512

MAX_TITLE_CHARS = 32
MAX_FILENAME_CHARS = 32
MAX_CHANNEL = 0x80

DEFAULT_TITLE = "DEFAULT"
DEFAULT_ICON = "ICON.ICN"
DEFAULT_LINEBREAK = 32

# double-byte punctuation, first byte 0x81
_PUNCTUATION: Dict[str, int] = {
    ":": 0x46,
    "/": 0x5E,
    "(": 0x69,
    ")": 0x6A,
    "[": 0x6D,
    "]": 0x6E,
    "{": 0x6F,
    "}": 0x70,
}
_PUNCTUATION_REVERSE = {v: k for k, v in _PUNCTUATION.items()}


# -- Title transcoding --
def encode_title(text: str) -> bytes:
    """Encode ASCII text to the double-byte title field, zero padded."""
    out = bytearray()
    for ch in text:
        code = ord(ch)
        if ch == " ":
            out += b"\x82\x3f"
        elif ch in _PUNCTUATION:
            out += bytes((0x81, _PUNCTUATION[ch]))
        elif 48 <= code <= 90:
            # digits and upper case
            out += bytes((0x82, code + 31))
        elif 97 <= code <= 122:
            out += bytes((0x82, code + 32))
    return bytes(out[:TITLE_BYTES]).ljust(TITLE_BYTES, b"\x00")


def decode_title(data: bytes) -> str:
    chars: List[str] = []
    for i in range(0, min(len(data), TITLE_BYTES) - 1, 2):
        lead, trail = data[i], data[i + 1]
        if lead == 0x00:
            if trail == 0x00:
                break
            chars.append("?")
        elif lead == 0x81:
            if trail == 0x40:
                chars.append(" ")
            else:
                chars.append(_PUNCTUATION_REVERSE.get(trail, "?"))
        elif lead == 0x82:
            if 0x4F <= trail <= 0x7A:
                chars.append(chr(trail - 31))
            elif 0x81 <= trail <= 0x9B:
                chars.append(chr(trail - 32))
            elif trail == 0x3F:
                chars.append(" ")
            else:
                chars.append("?")
        else:
            chars.append("?")
    return "".join(chars)


def _clamp(value, low, high):
    return max(low, min(high, value))


# -- Components --
@dataclass(slots=True)
class IconSysColor:
    """Background corner color, channels nominally 0..0x80."""

    r: int = MAX_CHANNEL
    g: int = MAX_CHANNEL
    b: int = MAX_CHANNEL
    x: int = 0

    def __post_init__(self) -> None:
        self.r = _clamp(int(self.r), 0, 255)
        self.g = _clamp(int(self.g), 0, 255)
        self.b = _clamp(int(self.b), 0, 255)
        self.x = _clamp(int(self.x), 0, 255)

    @staticmethod
    def _checked(value: int) -> int:
        if not 0 <= value <= MAX_CHANNEL:
            raise IllegalParameter(f"Color channel {value} outside 0..{MAX_CHANNEL}")
        return value

    def set_r(self, value: int) -> None:
        self.r = self._checked(value)

    def set_g(self, value: int) -> None:
        self.g = self._checked(value)

    def set_b(self, value: int) -> None:
        self.b = self._checked(value)

    def set_x(self, value: int) -> None:
        self.x = self._checked(value)

    @property
    def r8(self) -> int:
        return min(self.r << 1, 255)

    @property
    def g8(self) -> int:
        return min(self.g << 1, 255)

    @property
    def b8(self) -> int:
        return min(self.b << 1, 255)

    @property
    def x8(self) -> int:
        return min(self.x << 1, 255)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.x


@dataclass(slots=True)
class IconSysLightColor:
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    x: float = 0.0

    def __post_init__(self) -> None:
        self.r = _clamp(float(self.r), 0.0, 1.0)
        self.g = _clamp(float(self.g), 0.0, 1.0)
        self.b = _clamp(float(self.b), 0.0, 1.0)
        self.x = _clamp(float(self.x), 0.0, 1.0)

    @staticmethod
    def _checked(value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise IllegalParameter(f"Light color channel {value} outside 0.0..1.0")
        return value

    def set_r(self, value: float) -> None:
        self.r = self._checked(value)

    def set_g(self, value: float) -> None:
        self.g = self._checked(value)

    def set_b(self, value: float) -> None:
        self.b = self._checked(value)

    def set_x(self, value: float) -> None:
        self.x = self._checked(value)

    @property
    def r8(self) -> int:
        return int(self.r * 255.0)

    @property
    def g8(self) -> int:
        return int(self.g * 255.0)

    @property
    def b8(self) -> int:
        return int(self.b * 255.0)

    @property
    def x8(self) -> int:
        return int(self.x * 255.0)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.r, self.g, self.b, self.x


@dataclass(slots=True)
class IconSysLightVec:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.z, self.w


def _default_background() -> List[IconSysColor]:
    return [IconSysColor() for _ in range(4)]


def _default_light_dirs() -> List[IconSysLightVec]:
    return [
        IconSysLightVec(0.5, 0.5, 0.5, 0.0),
        IconSysLightVec(0.0, -0.4, -0.1, 0.0),
        IconSysLightVec(-0.5, -0.5, 0.5, 0.0),
    ]


def _default_light_colors() -> List[IconSysLightColor]:
    return [IconSysLightColor() for _ in range(3)]


@dataclass
class IconSys:
    """
    Parsed icon.sys record.

    ``background`` holds the corner colors upper left, upper right, lower
    left and lower right. ``linebreak`` counts characters, the file stores
    it in bytes of the double-byte title.
    """

    decoded_title: str = DEFAULT_TITLE
    linebreak: int = DEFAULT_LINEBREAK
    background_opacity: int = 0
    background: List[IconSysColor] = field(default_factory=_default_background)
    light_dirs: List[IconSysLightVec] = field(default_factory=_default_light_dirs)
    light_colors: List[IconSysLightColor] = field(default_factory=_default_light_colors)
    ambient: IconSysLightColor = field(default_factory=IconSysLightColor)
    icon_file: str = DEFAULT_ICON
    icon_copy_file: str = DEFAULT_ICON
    icon_delete_file: str = DEFAULT_ICON

    # kept for round trips and is_valid()
    magic: bytes = ICONSYS_MAGIC
    reserved1: int = 0
    reserved2: int = 0
    reserved3: bytes = bytes(RESERVED_BYTES)

    # -- Title --
    def set_title(self, text: str) -> None:
        if len(text) > MAX_TITLE_CHARS:
            raise IllegalParameter("Title string exceeds character limit")
        self.decoded_title = text

    def set_linebreak(self, chars: int) -> None:
        if chars < 0 or chars > MAX_TITLE_CHARS:
            raise IllegalParameter("Linebreak exceeds character limit")
        self.linebreak = chars

    @property
    def title(self) -> str:
        """Title with a newline at the linebreak position."""
        lb = self.linebreak
        if 0 < lb < len(self.decoded_title):
            return self.decoded_title[:lb] + "\n" + self.decoded_title[lb:]
        return self.decoded_title

    @property
    def title_single_line(self) -> str:
        return self.title.replace("\n", " ", 1)

    # -- Icon files --
    @staticmethod
    def _checked_filename(name: str) -> str:
        if len(name) > MAX_FILENAME_CHARS:
            raise IllegalParameter(f"Filename {name!r} exceeds character limit")
        return name

    def set_icon_file(self, name: str) -> None:
        self.icon_file = self._checked_filename(name)

    def set_icon_copy_file(self, name: str) -> None:
        self.icon_copy_file = self._checked_filename(name)

    def set_icon_delete_file(self, name: str) -> None:
        self.icon_delete_file = self._checked_filename(name)

    # -- Background --
    def set_background_opacity(self, value: int) -> None:
        if not 0 <= value <= 255:
            raise IllegalParameter(f"Background opacity {value} outside 0..255")
        self.background_opacity = value

    def is_valid(self) -> bool:
        """Whether magic and reserved fields hold their documented values."""
        return (
            self.magic == ICONSYS_MAGIC
            and self.reserved2 == 0
            and not any(self.reserved3)
        )
