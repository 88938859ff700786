from __future__ import annotations

from lrzmagic import compression_ratio, decode_header, format_info, to_dict


def test_legacy_dump_minor6(lrz):
    v = decode_header(lrz.legacy(6, size=10, md5=0))
    txt = format_info(v, "f.lrz")
    assert "Dumping magic header 24 bytes" in txt
    assert "Magic Bytes 0-3: 4C 52 5A 49 LRZI" in txt
    assert "Bytes 6-13:      LRZIP Uncompressed Size bytes: 0A 00 00 00 00 00 00 00" in txt
    assert "Byte  21:        MD5 Sum at EOF: no" in txt
    assert "Byte  23:        unused" in txt
    assert "LRZIP Filter" not in txt


def test_legacy_not_lzma(lrz):
    v = decode_header(lrz.legacy(7, props=0))
    assert "unused. Not an LZMA compressed archive" in format_info(v, "f.lrz")


def test_modern_dump(lrz):
    v = decode_header(lrz.modern(12, size=1, filter_b=7, hash_b=6, comp=3, params=8,
                                 levels=0x59, comment=b"note"))
    txt = format_info(v, "f.lrz", archive_size=1)
    assert "Filter: ARM64 (07)" in txt
    assert "Hash: SHA3 256 (6)" in txt
    assert "Encryption: None (0)" in txt
    assert "BZIP3 Block Size=unbounded (code 8)" in txt
    assert "Rzip level 5, Lrzip level 9" in txt
    assert "Bytes 21-24:     Comment: note" in txt
    assert "compression ratio is 1.000x" in txt


def test_delta_unspecified_label(lrz):
    v = decode_header(lrz.modern(11, filter_b=(20 << 3) | 7))
    assert "Filter: Delta, offset unspecified" in format_info(v, "f.lrz")


def test_to_dict_and_ratio(lrz):
    v = decode_header(lrz.modern(9, size=400, comp=40))
    d = to_dict(v)
    assert d["layout"] == "v9" and d["method"] == "LZMA"
    assert d["dict_size"] == 0xFFFFFFFF
    assert compression_ratio(v, 100) == 4.0
    assert compression_ratio(decode_header(lrz.modern(9)), 100) is None
