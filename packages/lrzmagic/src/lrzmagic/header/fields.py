# packages/lrzmagic/src/lrzmagic/header/fields.py
# -----------------------------------------------------------------------------
# Field decoder (lrzip magic header) - bit-packed sub-fields → dataclasses.
# All bit-mask logic lives here; the rest of the package only sees enums.

from __future__ import annotations
import struct
from dataclasses import dataclass, field
from typing import Optional

from ..enums import CompressionMethod, EncryptionMode, FilterKind, HashAlgorithm
from ..errors import TruncatedHeader
from .layout import SIZE_LEN, SIZE_OFFSET, HeaderLayout, HeaderVersion, LayoutKind

__all__ = [
    "DICT_UNBOUNDED", "BLOCK_MAX",
    "lzma_dict_size", "bzip3_block_size",
    "FilterInfo", "LzmaProps", "ZpaqProps", "ZstdProps", "CompressionInfo",
    "KeyDerivation", "HeaderFields",
    "decode_filter_legacy", "decode_filter_v12",
    "decode_lzma_props", "decode_zpaq", "decode_method_byte", "infer_compression",
    "decode_levels", "decode_fields",
]

_LE = "<"

#: Sentinel returned for the "unbounded" LZMA dictionary code (40).
DICT_UNBOUNDED = 0xFFFFFFFF
#: Sentinel returned for the maximum BZIP3 block code (8).
BLOCK_MAX = 0xFFFFFFFF

# pre-v12 filter codes 0..6 (7 = delta); v12+ reuses 0..6 and turns 7 into ARM64
_FILTER_CODES = (
    FilterKind.NONE, FilterKind.X86, FilterKind.ARM, FilterKind.ARMT,
    FilterKind.PPC, FilterKind.SPARC, FilterKind.IA64,
)

# minor 8..10 compression byte: bit 7 marks ZPAQ, high nibble 0xF marks BZIP3
_LZMA_DICT_MAX_CODE = 40
_MARKER_BIT = 0b1000_0000
_BZIP3_MARK = 0b1111_0000


# -----------------------------------------------------------------------------
# Formulas
# -----------------------------------------------------------------------------
def lzma_dict_size(p: int) -> int:
    """Dictionary size from the LZMA property byte (40 = unbounded)."""
    if p == _LZMA_DICT_MAX_CODE:
        return DICT_UNBOUNDED
    return (2 | (p & 1)) << (p // 2 + 11)


def bzip3_block_size(p: int) -> int:
    """Block size from the BZIP3 property nibble (8 = max)."""
    if p == 8:
        return BLOCK_MAX
    return (2 | (p & 1)) << (p // 2 + 24)


# -----------------------------------------------------------------------------
# Decoded structures
# -----------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class FilterInfo:
    """Pre-compression filter.

    `delta_offset` is ``None`` when the filter is not Delta, or when the
    pre-v12 encoding falls in its ``> 16`` branch, which never stored a value.
    `code` is the raw byte as read.
    """
    kind: FilterKind = FilterKind.NONE
    delta_offset: Optional[int] = None
    code: int = 0

    @property
    def delta_code(self) -> int:
        return self.code >> 3


@dataclass(frozen=True, slots=True)
class LzmaProps:
    dict_code: Optional[int]   # compact byte (minor >= 8), None for legacy
    dict_size: int
    lc: Optional[int] = None
    lp: Optional[int] = None
    pb: Optional[int] = None

    @property
    def unbounded(self) -> bool:
        return self.dict_size == DICT_UNBOUNDED


@dataclass(frozen=True, slots=True)
class ZpaqProps:
    level: int
    block_code: int


@dataclass(frozen=True, slots=True)
class ZstdProps:
    strategy: int
    level: int


@dataclass(frozen=True, slots=True)
class CompressionInfo:
    """Compression method plus its method-specific parameters.

    Exactly one of `lzma`, `zpaq`, `bzip3_block_code`, `zstd` is set for the
    matching method; NONE/UNKNOWN carry none of them. `method_code` and
    `params_code` keep the raw bytes (``params_code`` is None when the layout
    has a single compression byte).
    """
    method: CompressionMethod
    lzma: Optional[LzmaProps] = None
    zpaq: Optional[ZpaqProps] = None
    bzip3_block_code: Optional[int] = None
    zstd: Optional[ZstdProps] = None
    method_code: int = 0
    params_code: Optional[int] = None

    @property
    def bzip3_block_size(self) -> Optional[int]:
        if self.bzip3_block_code is None:
            return None
        return bzip3_block_size(self.bzip3_block_code)


@dataclass(frozen=True, slots=True)
class KeyDerivation:
    """What bytes 6..13 hold in an encrypted archive."""
    loops_exp: int
    loops_base: int
    salt: bytes

    @property
    def hash_loops(self) -> int:
        return self.loops_base << self.loops_exp


@dataclass(frozen=True, slots=True)
class HeaderFields:
    """Decoded view of the fixed header (+ comment).

    Fields a revision does not carry stay ``None``.
    """
    stored_size: Optional[int]
    is_encrypted: bool
    encryption: Optional[EncryptionMode] = None
    encryption_code: Optional[int] = None
    hash: Optional[HashAlgorithm] = None
    hash_code: Optional[int] = None
    filter: FilterInfo = field(default_factory=FilterInfo)
    compression: Optional[CompressionInfo] = None
    rzip_level: Optional[int] = None
    lrzip_level: Optional[int] = None
    comment: Optional[str] = None
    key: Optional[KeyDerivation] = None
    # legacy only
    md5_stored: Optional[bool] = None
    legacy_md5_code: Optional[int] = None
    legacy_encrypted_code: Optional[int] = None


# -----------------------------------------------------------------------------
# Bit-packed decoders
# -----------------------------------------------------------------------------
def decode_filter_legacy(raw: int) -> FilterInfo:
    """Filter byte for minor < 12: low 3 bits select, 7 = Delta.

    High bits are only meaningful for Delta; any other code carrying them is
    reported as UNKNOWN.
    """
    low = raw & 0b111
    if low != 7:
        kind = _FILTER_CODES[low] if raw == low else FilterKind.UNKNOWN
        return FilterInfo(kind, None, raw)
    offset = raw >> 3
    if offset <= 16:
        return FilterInfo(FilterKind.DELTA, offset + 1, raw)
    # offsets above 16 have no defined mapping before v12
    return FilterInfo(FilterKind.DELTA, None, raw)


def decode_filter_v12(raw: int) -> FilterInfo:
    """Filter byte for minor >= 12: > 7 is always Delta, 7 = ARM64."""
    if raw > 7:
        offset = raw >> 3
        if offset > 16:
            offset = (offset - 15) * 16
        else:
            offset += 1
        return FilterInfo(FilterKind.DELTA, offset, raw)
    if raw == 7:
        return FilterInfo(FilterKind.ARM64, None, raw)
    return FilterInfo(_FILTER_CODES[raw], None, raw)


def decode_lzma_props(props: bytes) -> Optional[LzmaProps]:
    """Legacy 5-byte LZMA properties (props byte + LE u32 dictionary).

    Returns None when the props byte is 0 (archive not LZMA compressed).
    """
    d = props[0]
    if not d:
        return None
    lc = d % 9
    d //= 9
    (ds,) = struct.unpack_from(_LE + "I", props, 1)
    return LzmaProps(dict_code=None, dict_size=ds, lc=lc, lp=d % 5, pb=d // 5)


def decode_zpaq(b: int) -> ZpaqProps:
    return ZpaqProps(level=(b >> 4) & 0b111, block_code=b & 0b1111)


def infer_compression(b: int) -> CompressionInfo:
    """Minor 8..10: method inferred from the bit pattern of one byte.

    ``1111 bbbb`` is BZIP3, ``1lll bbbb`` is ZPAQ (level, block code), any other
    non-zero byte is an LZMA dictionary code and 0 means no stored parameters.
    """
    if b & _MARKER_BIT:
        if b & 0xF0 == _BZIP3_MARK:
            return CompressionInfo(CompressionMethod.BZIP3, bzip3_block_code=b & 0b1111, method_code=b)
        return CompressionInfo(CompressionMethod.ZPAQ, zpaq=decode_zpaq(b), method_code=b)
    if b:
        return CompressionInfo(CompressionMethod.LZMA,
                               lzma=LzmaProps(dict_code=b, dict_size=lzma_dict_size(b)),
                               method_code=b)
    return CompressionInfo(CompressionMethod.NONE, method_code=b)


def decode_method_byte(method_b: int, params_b: int) -> CompressionInfo:
    """Minor >= 11: explicit method in the low 3 bits, parameters in the next byte."""
    method = CompressionMethod.from_code(method_b & 0b111)
    kw = dict(method_code=method_b, params_code=params_b)
    if method is CompressionMethod.LZMA:
        return CompressionInfo(method, lzma=LzmaProps(dict_code=params_b,
                                                      dict_size=lzma_dict_size(params_b)), **kw)
    if method is CompressionMethod.ZPAQ:
        return CompressionInfo(method, zpaq=decode_zpaq(params_b), **kw)
    if method is CompressionMethod.BZIP3:
        return CompressionInfo(method, bzip3_block_code=params_b & 0b1111, **kw)
    if method is CompressionMethod.ZSTD:
        return CompressionInfo(method, zstd=ZstdProps(strategy=method_b >> 4, level=params_b), **kw)
    return CompressionInfo(method, **kw)


def decode_levels(b: int) -> tuple[int, int]:
    """(rzip_level, lrzip_level) from the packed level byte (rzip in the high nibble)."""
    return b >> 4, b & 0b1111


# -----------------------------------------------------------------------------
# Whole-header decode
# -----------------------------------------------------------------------------
def decode_fields(raw: bytes, version: HeaderVersion, layout: HeaderLayout) -> HeaderFields:
    """Decode the fixed part of `raw` (already extended to `layout.length`).

    Pure function of the bytes; the only failure is a short buffer. The
    comment, if any, is attached later by :func:`header.comment.read_comment`.
    """
    if len(raw) < layout.length:
        raise TruncatedHeader(layout.length, len(raw))
    if layout.kind is LayoutKind.LEGACY:
        return _decode_legacy(raw, layout)

    enc_code = raw[layout.encryption_at]
    encryption = EncryptionMode.from_code(enc_code)
    is_encrypted = enc_code != 0
    hash_code = raw[layout.hash_at]

    filt_b = raw[layout.filter_at]
    filt = decode_filter_v12(filt_b) if version.minor >= 12 else decode_filter_legacy(filt_b)

    if layout.explicit_method:
        comp = decode_method_byte(raw[layout.compression_at], raw[layout.params_at])
    else:
        comp = infer_compression(raw[layout.compression_at])

    rzip_level = lrzip_level = None
    if layout.levels_at is not None:
        rzip_level, lrzip_level = decode_levels(raw[layout.levels_at])

    stored, key = _size_or_key(raw, is_encrypted)
    return HeaderFields(
        stored_size=stored,
        is_encrypted=is_encrypted,
        encryption=encryption,
        encryption_code=enc_code,
        hash=HashAlgorithm.from_code(hash_code),
        hash_code=hash_code,
        filter=filt,
        compression=comp,
        rzip_level=rzip_level,
        lrzip_level=lrzip_level,
        key=key,
    )


def _decode_legacy(raw: bytes, layout: HeaderLayout) -> HeaderFields:
    enc_code = raw[layout.encrypted_flag_at]
    md5_code = raw[layout.md5_flag_at]
    is_encrypted = bool(enc_code)

    filt = FilterInfo()
    if layout.filter_at is not None:
        filt = decode_filter_legacy(raw[layout.filter_at])

    at = layout.lzma_props_at
    lzma = decode_lzma_props(bytes(raw[at:at + 5]))
    if lzma is not None:
        comp = CompressionInfo(CompressionMethod.LZMA, lzma=lzma, method_code=raw[at])
    else:
        comp = CompressionInfo(CompressionMethod.NONE, method_code=0)

    stored, key = _size_or_key(raw, is_encrypted)
    return HeaderFields(
        stored_size=stored,
        is_encrypted=is_encrypted,
        filter=filt,
        compression=comp,
        key=key,
        md5_stored=md5_code == 1,
        legacy_md5_code=md5_code,
        legacy_encrypted_code=enc_code,
    )


def _size_or_key(raw: bytes, is_encrypted: bool) -> tuple[Optional[int], Optional[KeyDerivation]]:
    if not is_encrypted:
        (size,) = struct.unpack_from(_LE + "Q", raw, SIZE_OFFSET)
        return size, None
    salt = bytes(raw[SIZE_OFFSET + 2:SIZE_OFFSET + SIZE_LEN])
    return None, KeyDerivation(loops_exp=raw[SIZE_OFFSET], loops_base=raw[SIZE_OFFSET + 1], salt=salt)
