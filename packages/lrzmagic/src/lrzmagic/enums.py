# packages/lrzmagic/src/lrzmagic/enums.py
from __future__ import annotations
from enum import IntEnum

__all__ = [
    "HashAlgorithm", "EncryptionMode", "FilterKind", "CompressionMethod",
    "label",
]


class _Coded(IntEnum):
    """IntEnum with an UNKNOWN member returned for codes it does not model."""

    @classmethod
    def from_code(cls, code: int):
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN  # type: ignore[attr-defined]


class HashAlgorithm(_Coded):
    CRC = 0
    MD5 = 1
    RIPEMD = 2
    SHA256 = 3
    SHA384 = 4
    SHA512 = 5
    SHA3_256 = 6
    SHA3_512 = 7
    SHAKE128_16 = 8
    SHAKE128_32 = 9
    SHAKE128_64 = 10
    SHAKE256_8 = 11
    SHAKE256_32 = 12
    SHAKE256_64 = 13
    UNKNOWN = -1


class EncryptionMode(_Coded):
    NONE = 0
    AES128 = 1
    AES256 = 2
    UNKNOWN = -1


class FilterKind(IntEnum):
    # Values are display order only; the byte codes differ between layouts
    # (see header.fields.decode_filter_*).
    NONE = 0
    X86 = 1
    ARM = 2
    ARMT = 3
    ARM64 = 4
    PPC = 5
    SPARC = 6
    IA64 = 7
    DELTA = 8
    UNKNOWN = -1


class CompressionMethod(_Coded):
    # code 0 covers none/bzip/gzip/lzo: the header stores no parameters for them
    NONE = 0
    LZMA = 1
    ZPAQ = 2
    BZIP3 = 3
    ZSTD = 4
    UNKNOWN = -1


# one table per enum: IntEnum members of different classes compare equal as ints
_LABELS = {
    HashAlgorithm: {
        HashAlgorithm.SHA256: "SHA 256",
        HashAlgorithm.SHA384: "SHA 384",
        HashAlgorithm.SHA512: "SHA 512",
        HashAlgorithm.SHA3_256: "SHA3 256",
        HashAlgorithm.SHA3_512: "SHA3 512",
    },
    EncryptionMode: {
        EncryptionMode.NONE: "None",
        EncryptionMode.AES128: "AES 128",
        EncryptionMode.AES256: "AES 256",
    },
    CompressionMethod: {
        CompressionMethod.NONE: "NONE/BZIP/GZIP/LZO",
    },
    FilterKind: {
        FilterKind.NONE: "None",
        FilterKind.X86: "x86",
        FilterKind.ARMT: "ARMT",
        FilterKind.DELTA: "Delta",
    },
}


def label(member: IntEnum) -> str:
    """Human-readable name; falls back to the member name."""
    if member.name == "UNKNOWN":
        return "Unknown"
    return _LABELS.get(type(member), {}).get(member, member.name)
