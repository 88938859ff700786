# packages/lrzmagic/src/lrzmagic/header/__init__.py
from __future__ import annotations

# Version resolver
from .layout import (
    MAGIC, SIZE_OFFSET, SIZE_LEN, COMMENT_MAX,
    LayoutKind, HeaderVersion, HeaderLayout, resolve_layout, read_prefix,
)

# Field decoder
from .fields import (
    DICT_UNBOUNDED, BLOCK_MAX, lzma_dict_size, bzip3_block_size,
    FilterInfo, LzmaProps, ZpaqProps, ZstdProps, CompressionInfo, KeyDerivation,
    HeaderFields, decode_fields,
)

# Comment reader
from .comment import read_comment

# Full decode + file helpers
from .header import HeaderView, read_header, decode_header
from .io import open_archive, read_archive_header
from .encode import pack_fixed, encode_size

__all__ = [
    "MAGIC", "SIZE_OFFSET", "SIZE_LEN", "COMMENT_MAX",
    "LayoutKind", "HeaderVersion", "HeaderLayout", "resolve_layout", "read_prefix",
    "DICT_UNBOUNDED", "BLOCK_MAX", "lzma_dict_size", "bzip3_block_size",
    "FilterInfo", "LzmaProps", "ZpaqProps", "ZstdProps", "CompressionInfo", "KeyDerivation",
    "HeaderFields", "decode_fields",
    "read_comment",
    "HeaderView", "read_header", "decode_header",
    "open_archive", "read_archive_header",
    "pack_fixed", "encode_size",
]
