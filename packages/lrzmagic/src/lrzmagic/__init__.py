# packages/lrzmagic/src/lrzmagic/__init__.py
from __future__ import annotations

"""lrzmagic - lrzip magic header codec (public surface).

Decode the versioned magic header of .lrz archives and patch the stored
uncompressed size in place.
"""

__version__ = "0.1.0"

# API publique (stable)
from .config import PatchRequest, ScanConfig
from .enums import CompressionMethod, EncryptionMode, FilterKind, HashAlgorithm
from .errors import (
    ExitCode, FormatError, NotAnArchive, TruncatedHeader, InvalidComment,
    EncryptedArchive, SizeAlreadySet, ExistingSizeProtected, HeaderIOError,
)
from .header import HeaderVersion, HeaderFields, HeaderView, read_header, decode_header, read_archive_header
from .patch import PatchResult, patch_size, set_size
from .render import format_info, to_dict, compression_ratio

__all__ = [
    "__version__",
    "PatchRequest", "ScanConfig",
    "CompressionMethod", "EncryptionMode", "FilterKind", "HashAlgorithm",
    "ExitCode", "FormatError", "NotAnArchive", "TruncatedHeader", "InvalidComment",
    "EncryptedArchive", "SizeAlreadySet", "ExistingSizeProtected", "HeaderIOError",
    "HeaderVersion", "HeaderFields", "HeaderView", "read_header", "decode_header", "read_archive_header",
    "PatchResult", "patch_size", "set_size",
    "format_info", "to_dict", "compression_ratio",
]
