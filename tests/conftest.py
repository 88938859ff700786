from __future__ import annotations
import struct
from pathlib import Path
from types import SimpleNamespace

import pytest

PAYLOAD = bytes(range(0xA0, 0xC0))  # stands in for the compressed stream


def legacy_header(minor: int, size: int = 0, filter_b: int = 0, props: int = 0x5D,
                  dict_size: int = 1 << 23, md5: int = 1, enc: int = 0,
                  key: bytes = b"") -> bytes:
    """24-byte header for minor < 8 (filter offset fo = 0 only for minor 6)."""
    fo = 0 if minor == 6 else 1
    b = bytearray(24)
    b[0:4] = b"LRZI"
    b[4], b[5] = 0, minor
    if enc:
        b[6:14] = key.ljust(8, b"\x00")
    else:
        struct.pack_into("<Q", b, 6, size)
    if minor == 7:
        b[16] = filter_b
    b[16 + fo] = props
    if props:
        struct.pack_into("<I", b, 17 + fo, dict_size)
    b[21 + fo] = md5
    b[22 + fo] = enc
    return bytes(b)


def modern_header(minor: int, size: int = 0, filter_b: int = 0, hash_b: int = 1, enc: int = 0,
                  comp: int | None = None, params: int = 20, levels: int = 0x79, comment: bytes = b"",
                  key: bytes = b"") -> bytes:
    """Header for minor >= 8 (18, 20 or 21 fixed bytes + comment).

    Default compression is LZMA with dictionary code 20 in every layout.
    """
    if comp is None:
        comp = 1 if minor >= 11 else 20
    length = 18 if minor == 8 else (20 if minor <= 10 else 21)
    b = bytearray(length)
    b[0:4] = b"LRZI"
    b[4], b[5] = 0, minor
    if enc:
        b[6:14] = key.ljust(8, b"\x00")
    else:
        struct.pack_into("<Q", b, 6, size)
    b[14], b[15], b[16], b[17] = filter_b, hash_b, enc, comp
    if minor in (9, 10):
        b[18], b[19] = levels, len(comment)
    elif minor >= 11:
        b[18], b[19], b[20] = params, levels, len(comment)
    return bytes(b) + (comment if minor >= 9 else b"")


@pytest.fixture
def lrz():
    return SimpleNamespace(legacy=legacy_header, modern=modern_header, payload=PAYLOAD)


@pytest.fixture
def write_archive(tmp_path):
    def _write(header: bytes, name: str = "a.lrz") -> Path:
        p = tmp_path / name
        p.write_bytes(header + PAYLOAD)
        return p
    return _write
