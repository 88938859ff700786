# packages/lrzmagic/src/lrzmagic/header/io.py
from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from ..errors import HeaderIOError
from .header import HeaderView, read_header

__all__ = ["open_archive", "read_archive_header"]


@contextmanager
def open_archive(path: str | Path, writable: bool = False) -> Iterator[BinaryIO]:
    """Open an archive read-only ("rb") or read+update ("r+b"), positioned at 0.

    Never truncates nor appends; the handle is closed on every exit path.
    """
    mode = "r+b" if writable else "rb"
    try:
        fp = open(path, mode)
    except OSError as e:
        raise HeaderIOError("open", str(path), e) from e
    try:
        try:
            fp.seek(0)
        except OSError as e:
            raise HeaderIOError("seek", str(path), e) from e
        yield fp
    finally:
        fp.close()


def read_archive_header(path: str | Path) -> HeaderView:
    """Read-only decode of the header of the archive at `path`."""
    with open_archive(path) as fp:
        try:
            return read_header(fp)
        except OSError as e:
            raise HeaderIOError("read", str(path), e) from e
