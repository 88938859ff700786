# packages/lrzmagic/src/lrzmagic/errors.py
from __future__ import annotations
from enum import IntEnum

__all__ = [
    "ExitCode",
    "FormatError",
    "NotAnArchive", "TruncatedHeader", "InvalidComment",
    "EncryptedArchive", "SizeAlreadySet", "ExistingSizeProtected",
    "HeaderIOError",
]


class ExitCode(IntEnum):
    """Stable process statuses, one per failure class."""
    OK = 0
    USAGE = -1
    INFO_CONFLICT = 1
    INVALID_SIZE = 2
    BAD_OPTION = 3
    OPEN_FAILED = 4
    SEEK_FAILED = 5
    READ_FAILED = 6
    ENCRYPTED = 7
    ALREADY_SET = 8
    SIZE_PROTECTED = 9
    WRITE_SEEK_FAILED = 10
    WRITE_FAILED = 11
    NOT_AN_ARCHIVE = 12
    TRUNCATED = 13
    MISSING_FILENAME = 14


class FormatError(ValueError):
    """Base class of every header decode/patch rejection.

    `exit_code` is the status the CLI reports for this class.
    """
    exit_code: ExitCode = ExitCode.READ_FAILED


class NotAnArchive(FormatError):
    """Bytes 0-3 are not the `LRZI` signature."""
    exit_code = ExitCode.NOT_AN_ARCHIVE


class TruncatedHeader(FormatError):
    """Fewer bytes available than the resolved layout demands."""
    exit_code = ExitCode.TRUNCATED

    def __init__(self, needed: int, got: int, what: str = "header") -> None:
        super().__init__(f"{what}: truncated (need {needed} bytes, got {got})")
        self.needed = needed
        self.got = got


class InvalidComment(FormatError):
    """Comment length byte above the 64-byte capacity."""
    exit_code = ExitCode.TRUNCATED


class EncryptedArchive(FormatError):
    """Size field holds key-derivation bytes and cannot be patched."""
    exit_code = ExitCode.ENCRYPTED


class SizeAlreadySet(FormatError):
    """Requested size equals the stored one (rejected even with force)."""
    exit_code = ExitCode.ALREADY_SET


class ExistingSizeProtected(FormatError):
    """A nonzero size is already stored and force was not given."""
    exit_code = ExitCode.SIZE_PROTECTED


class HeaderIOError(OSError):
    """open/seek/read/write failure on the archive file.

    `stage` is one of "open", "seek", "read", "write-seek", "write".
    A failure at stage "write" may leave the size field partially written.
    """

    _EXIT = {
        "open": ExitCode.OPEN_FAILED,
        "seek": ExitCode.SEEK_FAILED,
        "read": ExitCode.READ_FAILED,
        "write-seek": ExitCode.WRITE_SEEK_FAILED,
        "write": ExitCode.WRITE_FAILED,
    }

    def __init__(self, stage: str, path: str | None = None, cause: BaseException | None = None) -> None:
        msg = f"{stage} failed"
        if path:
            msg += f" on {path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        self.stage = stage
        self.path = path
        self.__cause__ = cause

    @property
    def exit_code(self) -> ExitCode:
        return self._EXIT.get(self.stage, ExitCode.READ_FAILED)
