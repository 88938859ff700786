# packages/lrzmagic/src/lrzmagic/render.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .enums import CompressionMethod, FilterKind, label
from .header import DICT_UNBOUNDED, HeaderView, LayoutKind, SIZE_OFFSET

__all__ = ["compression_ratio", "format_info", "to_dict"]


def compression_ratio(view: HeaderView, archive_size: int) -> Optional[float]:
    """stored_size / archive_size, or None when the size is unknown (0/encrypted)."""
    size = view.stored_size
    if not size or archive_size <= 0:
        return None
    return size / archive_size


def _hex(b: bytes) -> str:
    return " ".join(f"{x:02X}" for x in b)


def _dict_label(size: int) -> str:
    return "unbounded" if size == DICT_UNBOUNDED else str(size)


def _compression_lines(view: HeaderView) -> List[str]:
    comp = view.fields.compression
    lay = view.layout
    out: List[str] = []
    if lay.kind is LayoutKind.LEGACY:
        at = lay.lzma_props_at
        if comp.lzma is None:
            out.append(f"Bytes {at:2d}-{at + 4:2d}:     unused. Not an LZMA compressed archive")
        else:
            lz = comp.lzma
            out.append(f"Bytes {at:2d}-{at + 4:2d}:     LZMA Properties Bytes; {_hex(view.raw[at:at + 5])} "
                       f"lc={lz.lc}, lp={lz.lp}, pb={lz.pb}, Dictionary Size={lz.dict_size}")
        return out

    at = lay.compression_at
    out.append(f"Byte  {at}:        Compression method: {label(comp.method)} ({comp.method_code:02X})")
    if comp.method is CompressionMethod.LZMA:
        out.append(f"                  LZMA Dictionary Size={_dict_label(comp.lzma.dict_size)} "
                   f"(code {comp.lzma.dict_code})")
    elif comp.method is CompressionMethod.ZPAQ:
        out.append(f"                  ZPAQ Level={comp.zpaq.level}, Block Size code={comp.zpaq.block_code}")
    elif comp.method is CompressionMethod.BZIP3:
        out.append(f"                  BZIP3 Block Size={_dict_label(comp.bzip3_block_size)} "
                   f"(code {comp.bzip3_block_code})")
    elif comp.method is CompressionMethod.ZSTD:
        out.append(f"                  ZSTD Strategy={comp.zstd.strategy}, Level={comp.zstd.level}")
    return out


def _filter_label(view: HeaderView) -> str:
    flt = view.fields.filter
    if flt.kind is FilterKind.DELTA:
        off = "unspecified" if flt.delta_offset is None else str(flt.delta_offset)
        return f"Delta, offset {off}"
    return label(flt.kind)


def format_info(view: HeaderView, filename: str, archive_size: Optional[int] = None) -> str:
    """Byte-offset annotated dump of the header (info mode)."""
    f, lay, raw = view.fields, view.layout, view.raw
    lines = [
        f"{filename} is an lrzip version {view.version} file",
        f"{filename} {'is' if f.is_encrypted else 'is not'} encrypted",
    ]
    if f.is_encrypted:
        lines.append(f"{filename} uncompressed file size is not known because file is encrypted")
    else:
        lines.append(f"{filename} uncompressed file size is {f.stored_size} bytes")
        if archive_size is not None:
            ratio = compression_ratio(view, archive_size)
            if ratio is not None:
                lines.append(f"{filename} compression ratio is {ratio:.3f}x")

    lines += [
        f"Dumping magic header {view.total_length} bytes",
        "Byte Offset      Description/Content",
        "===========      ===================",
        f"Magic Bytes 0-3: {_hex(raw[0:4])} {raw[0:4].decode('ascii', errors='replace')}",
        f"Bytes 4-5:       LRZIP Major, Minor version: {raw[4]:02X}, {raw[5]:02X}",
    ]
    if f.is_encrypted:
        lines.append(f"Bytes 6-7:       Encryption Hash Loops: {raw[6]:02X} {raw[7]:02X} = {f.key.hash_loops}")
        lines.append(f"Bytes 8-13:      Encryption Salt: {_hex(f.key.salt)}")
    else:
        lines.append(f"Bytes 6-13:      LRZIP Uncompressed Size bytes: {_hex(raw[SIZE_OFFSET:SIZE_OFFSET + 8])}")

    if lay.kind is LayoutKind.LEGACY:
        lines.append("Bytes 14 and 15: unused")
        if lay.filter_at is not None:
            lines.append(f"Byte  16:        LRZIP Filter {raw[16]:X} ({_filter_label(view)})")
        lines += _compression_lines(view)
        lines.append(f"Byte  {lay.md5_flag_at}:        MD5 Sum at EOF: {'yes' if f.md5_stored else 'no'}")
        lines.append(f"Byte  {lay.encrypted_flag_at}:        File is encrypted: "
                     f"{'yes' if f.legacy_encrypted_code == 1 else 'no'}")
        if lay.filter_offset == 0:
            lines.append("Byte  23:        unused")
        return "\n".join(lines)

    lines.append(f"Byte  {lay.filter_at}:        Filter: {_filter_label(view)} ({f.filter.code:02X})")
    lines.append(f"Byte  {lay.hash_at}:        Hash: {label(f.hash)} ({f.hash_code})")
    lines.append(f"Byte  {lay.encryption_at}:        Encryption: {label(f.encryption)} ({f.encryption_code})")
    lines += _compression_lines(view)
    if lay.levels_at is not None:
        lines.append(f"Byte  {lay.levels_at}:        Rzip level {f.rzip_level}, Lrzip level {f.lrzip_level}")
    if lay.has_comment:
        n = len(view.comment_raw or b"")
        lines.append(f"Byte  {lay.comment_len_at}:        Comment length: {n}")
        if f.comment is not None:
            lines.append(f"Bytes {lay.length}-{lay.length + n - 1}:     Comment: {f.comment}")
    return "\n".join(lines)


def to_dict(view: HeaderView) -> Dict[str, Any]:
    """JSON-friendly summary (scan reports, --json)."""
    f = view.fields
    comp = f.compression
    d: Dict[str, Any] = {
        "version": str(view.version),
        "layout": view.layout.kind.value,
        "header_len": view.total_length,
        "encrypted": f.is_encrypted,
        "stored_size": f.stored_size,
        "filter": f.filter.kind.name,
        "delta_offset": f.filter.delta_offset,
        "method": comp.method.name if comp else None,
        "hash": f.hash.name if f.hash is not None else None,
        "encryption": f.encryption.name if f.encryption is not None else None,
        "rzip_level": f.rzip_level,
        "lrzip_level": f.lrzip_level,
        "comment": f.comment,
    }
    if comp is not None and comp.lzma is not None:
        d["dict_size"] = comp.lzma.dict_size
    if comp is not None and comp.zstd is not None:
        d["zstd_strategy"] = comp.zstd.strategy
        d["zstd_level"] = comp.zstd.level
    if f.md5_stored is not None:
        d["md5_stored"] = f.md5_stored
    return d
