# iconkit/fileio.py
import io
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional

from iconkit.errors import IoFailure

PathLike = str | Path


def read_bytes(path: PathLike) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IoFailure(f"Could not open {path} for read: {e}") from e


@contextmanager
def _guarded(path: PathLike, f: IO) -> Iterator[IO]:
    with f:
        try:
            yield f
        except IoFailure:
            raise
        except OSError as e:
            raise IoFailure(f"I/O error on {path}: {e}") from e


@contextmanager
def open_binary(path: PathLike, mode: str = "rb") -> Iterator[IO[bytes]]:
    """
    Open a binary file, reporting OS level failures as IoFailure.
    The stream is closed on every exit path.
    """
    try:
        f = open(path, mode)
    except OSError as e:
        raise IoFailure(f"Could not open {path}: {e}") from e
    with _guarded(path, f) as guarded:
        yield guarded


@contextmanager
def open_text(path: PathLike, mode: str = "r") -> Iterator[IO[str]]:
    try:
        f = open(path, mode, encoding="ascii", errors="replace")
    except OSError as e:
        raise IoFailure(f"Could not open {path}: {e}") from e
    with _guarded(path, f) as guarded:
        yield guarded


def bytes_remaining(stream: IO[bytes]) -> Optional[int]:
    """Bytes between the current position and the end, None if unseekable."""
    if not stream.seekable():
        return None
    pos = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(pos)
    return end - pos


def check_available(stream: IO[bytes], size: int, what: str) -> None:
    """Raise IoFailure if ``stream`` cannot hold ``size`` more bytes."""
    remaining = bytes_remaining(stream)
    if remaining is not None and size > remaining:
        raise IoFailure(
            f"{what} declares {size} bytes but only {remaining} remain"
        )
