from __future__ import annotations
import io
import pytest

from lrzmagic.errors import NotAnArchive, TruncatedHeader
from lrzmagic.header import HeaderVersion, LayoutKind, read_header, read_prefix, resolve_layout


class CountingReader(io.BytesIO):
    def __init__(self, data: bytes):
        super().__init__(data)
        self.reads = []

    def read(self, n=-1):
        self.reads.append(n)
        return super().read(n)


@pytest.mark.parametrize("minor,kind,length,comment", [
    (4, LayoutKind.LEGACY, 24, False),
    (6, LayoutKind.LEGACY, 24, False),
    (7, LayoutKind.LEGACY, 24, False),
    (8, LayoutKind.V8, 18, False),
    (9, LayoutKind.V9, 20, True),
    (10, LayoutKind.V9, 20, True),
    (11, LayoutKind.V11, 21, True),
    (12, LayoutKind.V11, 21, True),
    (30, LayoutKind.V11, 21, True),
])
def test_layout_table(minor, kind, length, comment):
    lay = resolve_layout(HeaderVersion(0, minor))
    assert lay.kind is kind
    assert lay.length == length
    assert lay.has_comment is comment


def test_legacy_filter_offset_rule():
    six = resolve_layout(HeaderVersion(0, 6))
    seven = resolve_layout(HeaderVersion(0, 7))
    five = resolve_layout(HeaderVersion(0, 5))
    assert six.filter_offset == 0 and six.filter_at is None
    assert (six.lzma_props_at, six.md5_flag_at, six.encrypted_flag_at) == (16, 21, 22)
    assert seven.filter_offset == 1 and seven.filter_at == 16
    assert (seven.lzma_props_at, seven.md5_flag_at, seven.encrypted_flag_at) == (17, 22, 23)
    # anything but minor 6 takes the shifted offsets
    assert five.filter_offset == 1 and five.filter_at is None
    assert five.encrypted_flag_at == 23


def test_explicit_method_only_from_v11():
    assert not resolve_layout(HeaderVersion(0, 10)).explicit_method
    lay = resolve_layout(HeaderVersion(0, 11))
    assert lay.explicit_method
    assert (lay.compression_at, lay.params_at, lay.levels_at, lay.comment_len_at) == (17, 18, 19, 20)


def test_prefix_version(lrz):
    prefix, ver, lay = read_prefix(io.BytesIO(lrz.modern(11)))
    assert prefix == b"LRZI\x00\x0b"
    assert ver == HeaderVersion(0, 11) and str(ver) == "0.11"
    assert lay.length == 21


def test_bad_magic_stops_after_prefix(lrz):
    data = b"PK\x03\x04" + lrz.modern(11)[4:] + lrz.payload
    fp = CountingReader(data)
    with pytest.raises(NotAnArchive):
        read_header(fp)
    assert fp.reads == [6]


def test_short_files():
    with pytest.raises(TruncatedHeader):
        read_prefix(io.BytesIO(b"LRZ"))
    with pytest.raises(TruncatedHeader):
        read_prefix(io.BytesIO(b""))
    with pytest.raises(NotAnArchive):
        read_prefix(io.BytesIO(b"GZ"))


def test_truncated_fixed_header(lrz):
    with pytest.raises(TruncatedHeader) as ei:
        read_header(io.BytesIO(lrz.legacy(6)[:20]))
    assert ei.value.needed == 24 and ei.value.got == 20
