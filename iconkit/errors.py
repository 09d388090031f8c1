# iconkit/errors.py


class IconKitError(Exception):
    """General failure. Base class of every error raised by iconkit."""


class IoFailure(IconKitError, OSError):
    """A file could not be opened, read or written, or ended too early."""


class IllegalParameter(IconKitError, ValueError):
    """A value violates a domain precondition (index or range)."""


class InvalidContext(IconKitError, RuntimeError):
    """An operation was called at the wrong point of an object's lifecycle."""


class NotImplementedFormat(IconKitError, NotImplementedError):
    """A structurally valid but unsupported encoding variant."""


class OutOfMemory(IconKitError, MemoryError):
    """Allocation of a large buffer failed."""


__all__ = [
    "IconKitError",
    "IoFailure",
    "IllegalParameter",
    "InvalidContext",
    "NotImplementedFormat",
    "OutOfMemory",
]
