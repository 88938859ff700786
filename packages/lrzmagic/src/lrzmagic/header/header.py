# packages/lrzmagic/src/lrzmagic/header/header.py
from __future__ import annotations
import io
import logging
from dataclasses import dataclass, replace
from typing import BinaryIO, Optional

from ..errors import TruncatedHeader
from .comment import decode_comment, read_comment
from .fields import HeaderFields, decode_fields
from .layout import HeaderLayout, HeaderVersion, read_prefix

__all__ = ["HeaderView", "read_header", "decode_header"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HeaderView:
    """Fully decoded magic header.

    `raw` holds the fixed header bytes (``layout.length``); `comment_raw`
    the comment tail as stored, if any.
    """
    version: HeaderVersion
    layout: HeaderLayout
    fields: HeaderFields
    raw: bytes
    comment_raw: Optional[bytes] = None

    @property
    def stored_size(self) -> Optional[int]:
        return self.fields.stored_size

    @property
    def is_encrypted(self) -> bool:
        return self.fields.is_encrypted

    @property
    def total_length(self) -> int:
        return len(self.raw) + len(self.comment_raw or b"")


def read_header(fp: BinaryIO) -> HeaderView:
    """Decode the magic header from `fp`, positioned at offset 0.

    Reads the 6-byte prefix first and stops there on a bad signature; then
    the rest of the fixed header; then the comment when the layout has one.
    Never reads past the header region.
    """
    prefix, version, layout = read_prefix(fp)
    rest = fp.read(layout.length - len(prefix))
    raw = prefix + rest
    if len(raw) < layout.length:
        raise TruncatedHeader(layout.length, len(raw))

    fields = decode_fields(raw, version, layout)
    tail = read_comment(fp, raw, layout)
    if tail is not None:
        fields = replace(fields, comment=decode_comment(tail))
    log.debug("decoded lrzip %s header: %d bytes, encrypted=%s",
              version, len(raw) + len(tail or b""), fields.is_encrypted)
    return HeaderView(version=version, layout=layout, fields=fields, raw=raw, comment_raw=tail)


def decode_header(buf: bytes) -> HeaderView:
    """Same as :func:`read_header` on an in-memory buffer (extra bytes ignored)."""
    return read_header(io.BytesIO(bytes(buf)))
