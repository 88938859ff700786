# packages/lrzmagic/src/lrzmagic/header/comment.py
from __future__ import annotations
from typing import BinaryIO, Optional

from ..errors import InvalidComment, TruncatedHeader
from .layout import COMMENT_MAX, HeaderLayout

__all__ = ["comment_length", "read_comment", "decode_comment"]


def comment_length(raw: bytes, layout: HeaderLayout) -> int:
    """Declared comment length (0 when the layout has no comment)."""
    if not layout.has_comment:
        return 0
    n = raw[layout.comment_len_at]
    if n > COMMENT_MAX:
        raise InvalidComment(f"comment length {n} exceeds {COMMENT_MAX} bytes")
    return n


def decode_comment(tail: bytes) -> str:
    return tail.decode("utf-8", errors="replace")


def read_comment(fp: BinaryIO, raw: bytes, layout: HeaderLayout) -> Optional[bytes]:
    """Read the comment bytes that follow the fixed header.

    `fp` must sit right after the fixed header. The length byte is
    authoritative: exactly that many bytes are consumed, or TruncatedHeader.
    Returns None for a zero length byte or a layout without comment.
    """
    n = comment_length(raw, layout)
    if not n:
        return None
    tail = fp.read(n)
    if len(tail) != n:
        raise TruncatedHeader(layout.length + n, layout.length + len(tail), "comment")
    return tail
