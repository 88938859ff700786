# packages/lrzmagic/src/lrzmagic/header/encode.py
"""Write decoded fields back into a fixed-header image.

Bytes the codec does not model (legacy unused bytes, the legacy LZMA
dictionary word) are taken from ``view.raw``; everything else is re-encoded
from `view.fields`, so ``pack_fixed(view) == view.raw`` is a check of the
decoder itself.
"""
from __future__ import annotations
import struct
from typing import Optional

from ..errors import EncryptedArchive
from .header import HeaderView
from .layout import MAGIC, SIZE_OFFSET, LayoutKind

__all__ = ["pack_fixed", "encode_size"]

_LE = "<"


def encode_size(size: int) -> bytes:
    """8-byte little-endian image of the stored-size field."""
    return struct.pack(_LE + "Q", size)


def pack_fixed(view: HeaderView, stored_size: Optional[int] = None) -> bytes:
    """Re-encode the fixed header, optionally with a new stored size."""
    f, lay = view.fields, view.layout
    buf = bytearray(view.raw[:lay.length])
    buf[0:4] = MAGIC
    buf[4] = view.version.major
    buf[5] = view.version.minor

    if f.is_encrypted:
        if stored_size is not None:
            raise EncryptedArchive("encrypted archive: size field holds key-derivation bytes")
        buf[SIZE_OFFSET] = f.key.loops_exp
        buf[SIZE_OFFSET + 1] = f.key.loops_base
        buf[SIZE_OFFSET + 2:SIZE_OFFSET + 8] = f.key.salt
    else:
        size = f.stored_size if stored_size is None else stored_size
        buf[SIZE_OFFSET:SIZE_OFFSET + 8] = encode_size(size)

    if lay.filter_at is not None:
        buf[lay.filter_at] = f.filter.code

    if lay.kind is LayoutKind.LEGACY:
        buf[lay.md5_flag_at] = f.legacy_md5_code
        buf[lay.encrypted_flag_at] = f.legacy_encrypted_code
        lz = f.compression.lzma
        at = lay.lzma_props_at
        if lz is None:
            buf[at] = 0
        else:
            buf[at] = (lz.pb * 5 + lz.lp) * 9 + lz.lc
            struct.pack_into(_LE + "I", buf, at + 1, lz.dict_size)
        return bytes(buf)

    buf[lay.hash_at] = f.hash_code
    buf[lay.encryption_at] = f.encryption_code
    buf[lay.compression_at] = f.compression.method_code
    if lay.params_at is not None:
        buf[lay.params_at] = f.compression.params_code
    if lay.levels_at is not None:
        buf[lay.levels_at] = (f.rzip_level << 4) | f.lrzip_level
    if lay.comment_len_at is not None:
        buf[lay.comment_len_at] = len(view.comment_raw or b"")
    return bytes(buf)
