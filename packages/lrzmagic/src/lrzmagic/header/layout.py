# packages/lrzmagic/src/lrzmagic/header/layout.py
"""
Version resolver for the lrzip magic header.

The 6-byte prefix (``LRZI`` + major + minor) decides everything else: the
total header length, where each field sits, and which fields exist at all.
The table below is resolved once into a :class:`HeaderLayout` that the field
decoder consumes; no other module does offset arithmetic on the version.

    minor   length  hash/enc  method byte  comment  notes
    <8      24      no        no (LZMA)    no       legacy, filter offset fo
    8       18      yes       inferred     no
    9-10    20      yes       inferred     yes      len byte @19
    >=11    21      yes       explicit     yes      len byte @20

Legacy filter offset: ``fo = 0 if minor == 6 else 1``. Every legacy field from
byte 16 onward is shifted by ``fo``; minor 7 keeps its filter byte at 16.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Tuple

from ..errors import NotAnArchive, TruncatedHeader

__all__ = [
    "MAGIC", "PREFIX_LEN", "SIZE_OFFSET", "SIZE_LEN", "COMMENT_MAX",
    "LayoutKind", "HeaderVersion", "HeaderLayout",
    "parse_prefix", "read_prefix", "resolve_layout",
]

log = logging.getLogger(__name__)

MAGIC = b"LRZI"
PREFIX_LEN = 6
SIZE_OFFSET = 6
SIZE_LEN = 8
COMMENT_MAX = 64
LEGACY_LEN = 24


class LayoutKind(Enum):
    LEGACY = "legacy"   # minor < 8
    V8 = "v8"           # minor == 8
    V9 = "v9"           # minor 9..10
    V11 = "v11"         # minor >= 11


@dataclass(frozen=True, slots=True)
class HeaderVersion:
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True, slots=True)
class HeaderLayout:
    """Resolved field positions for one header revision.

    Offsets set to ``None`` mark fields the revision does not carry.
    """
    kind: LayoutKind
    length: int
    filter_offset: int = 0          # legacy shift (fo)
    filter_at: Optional[int] = None
    hash_at: Optional[int] = None
    encryption_at: Optional[int] = None
    compression_at: Optional[int] = None
    params_at: Optional[int] = None     # explicit-method layouts only
    levels_at: Optional[int] = None
    comment_len_at: Optional[int] = None
    # legacy-only bytes
    lzma_props_at: Optional[int] = None
    md5_flag_at: Optional[int] = None
    encrypted_flag_at: Optional[int] = None

    @property
    def has_comment(self) -> bool:
        return self.comment_len_at is not None

    @property
    def explicit_method(self) -> bool:
        return self.params_at is not None


def resolve_layout(version: HeaderVersion) -> HeaderLayout:
    minor = version.minor
    if minor < 8:
        fo = 0 if minor == 6 else 1
        return HeaderLayout(
            kind=LayoutKind.LEGACY,
            length=LEGACY_LEN,
            filter_offset=fo,
            filter_at=16 if minor == 7 else None,
            lzma_props_at=16 + fo,
            md5_flag_at=21 + fo,
            encrypted_flag_at=22 + fo,
        )
    common = dict(filter_at=14, hash_at=15, encryption_at=16, compression_at=17)
    if minor == 8:
        return HeaderLayout(kind=LayoutKind.V8, length=18, **common)
    if minor <= 10:
        return HeaderLayout(kind=LayoutKind.V9, length=20, levels_at=18, comment_len_at=19, **common)
    return HeaderLayout(kind=LayoutKind.V11, length=21, params_at=18, levels_at=19,
                        comment_len_at=20, **common)


def parse_prefix(prefix: bytes) -> HeaderVersion:
    """Validate the signature and return the version tag."""
    if len(prefix) < PREFIX_LEN:
        if prefix[:len(MAGIC)] != MAGIC[:len(prefix)]:
            raise NotAnArchive("not an lrzip archive (bad magic)")
        raise TruncatedHeader(PREFIX_LEN, len(prefix), "prefix")
    if bytes(prefix[:4]) != MAGIC:
        raise NotAnArchive(f"not an lrzip archive (magic {bytes(prefix[:4])!r})")
    return HeaderVersion(prefix[4], prefix[5])


def read_prefix(fp: BinaryIO) -> Tuple[bytes, HeaderVersion, HeaderLayout]:
    """Read exactly the 6-byte prefix from `fp` (positioned at offset 0)."""
    prefix = fp.read(PREFIX_LEN)
    version = parse_prefix(prefix)
    layout = resolve_layout(version)
    log.debug("lrzip %s -> layout %s (%d bytes)", version, layout.kind.value, layout.length)
    return bytes(prefix), version, layout
