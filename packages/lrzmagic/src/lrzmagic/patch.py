# packages/lrzmagic/src/lrzmagic/patch.py
# -----------------------------------------------------------------------------
# Size patcher: guarded in-place rewrite of bytes 6..13 (stored size, LE u64).
# [STORE:OVERWRITE] mutates the archive; every other byte is left untouched.

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .config import PatchRequest
from .errors import EncryptedArchive, ExistingSizeProtected, HeaderIOError, SizeAlreadySet
from .header import SIZE_LEN, SIZE_OFFSET, HeaderFields, encode_size, open_archive, read_header

__all__ = ["PatchResult", "check_patch", "patch_size", "set_size"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PatchResult:
    previous: Optional[int]
    new_size: int
    written: bytes
    forced: bool = False

    @property
    def hex(self) -> str:
        return " ".join(f"{b:02x}" for b in self.written)


def check_patch(fields: HeaderFields, new_size: int, force: bool = False) -> None:
    """Apply the guard table (first match wins); raise on rejection.

    1. encrypted                         -> EncryptedArchive
    2. stored == new_size                -> SizeAlreadySet (even with force)
    3. stored != 0 and not force         -> ExistingSizeProtected
    """
    if fields.is_encrypted:
        raise EncryptedArchive("file is encrypted: cannot poke size")
    stored = fields.stored_size
    if stored == new_size:
        raise SizeAlreadySet(f"expected size {new_size} already stored")
    if stored and not force:
        raise ExistingSizeProtected(f"size {stored} already stored (use force to overwrite)")


def patch_size(fp: BinaryIO, fields: HeaderFields, new_size: int, force: bool = False,
               path: Optional[str] = None) -> PatchResult:
    """
    Write `new_size` into the size field of the archive open on `fp`.

    Paramètres
    ----------
    fp : BinaryIO
        Handle opened read+update ("r+b"), any position.
    fields : HeaderFields
        Decoded header of that same file (guards use `is_encrypted` and
        `stored_size`).
    new_size : int
        Size to store, validated nonzero by the caller (see PatchRequest).
    force : bool
        Allow overwriting a nonzero stored size.

    Retour
    ------
    PatchResult with the 8 bytes written.

    Exceptions
    ----------
    EncryptedArchive / SizeAlreadySet / ExistingSizeProtected before any write;
    HeaderIOError(stage="write-seek"|"write") on I/O failure. A "write"
    failure may leave the size field partially written.
    """
    check_patch(fields, new_size, force)
    stored = fields.stored_size
    if stored:
        log.warning("size %d already stored; force selected so will overwrite with %d. CAUTION!!",
                    stored, new_size)

    data = encode_size(new_size)
    try:
        fp.seek(SIZE_OFFSET)
    except OSError as e:
        raise HeaderIOError("write-seek", path, e) from e
    try:
        n = fp.write(data)
        fp.flush()
    except OSError as e:
        log.error("fatal error writing size bytes; file may be corrupted")
        raise HeaderIOError("write", path, e) from e
    if n is not None and n != SIZE_LEN:
        log.error("short write (%d/%d bytes); file may be corrupted", n, SIZE_LEN)
        raise HeaderIOError("write", path)

    result = PatchResult(previous=stored, new_size=new_size, written=data, forced=bool(stored))
    log.info("new size is %d; magic size set to: %s", new_size, result.hex)
    return result


def set_size(path: str | Path, request: PatchRequest) -> PatchResult:
    """Open `path` in "r+b", decode its header, then patch it under the guards."""
    with open_archive(path, writable=True) as fp:
        try:
            view = read_header(fp)
        except OSError as e:
            raise HeaderIOError("read", str(path), e) from e
        return patch_size(fp, view.fields, request.new_size, request.force, path=str(path))
