# packages/lrzmagic/src/lrzmagic/config.py
from __future__ import annotations
import os
from dataclasses import dataclass

__all__ = ["PatchRequest", "ScanConfig", "SUFFIXES_ENV"]

U64_MAX = (1 << 64) - 1

#: Comma-separated suffix list overriding ScanConfig.suffixes in the CLI.
SUFFIXES_ENV = "LRZMAGIC_SUFFIXES"


@dataclass(frozen=True, slots=True)
class PatchRequest:
    """
    Requested rewrite of the stored-size field.

    Fields
    ------
    new_size : int
        Uncompressed size to store. Must satisfy 1 <= new_size <= 2**64-1;
        zero is what lrzip writes when the size is unknown, so it is refused.
    force : bool, default=False
        Allow overwriting a nonzero stored size. Never allows writing the
        value already stored, and never allows touching an encrypted archive.

    Notes
    -----
    Immutable; bounds violations raise `ValueError`.
    """
    new_size: int
    force: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.new_size, bool) or not isinstance(self.new_size, int):
            raise ValueError("PatchRequest.new_size must be an int")
        if not (1 <= self.new_size <= U64_MAX):
            raise ValueError("PatchRequest.new_size must be in [1..2**64-1]")


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Batch scan options (directories walked, suffix filter, magic sniffing)."""
    recursive: bool = True
    suffixes: tuple[str, ...] = (".lrz",)
    sniff: bool = True   # also accept files without suffix if they start with LRZI

    def __post_init__(self) -> None:
        if not isinstance(self.suffixes, tuple):
            raise ValueError("ScanConfig.suffixes must be a tuple")
        for s in self.suffixes:
            if not s.startswith("."):
                raise ValueError(f"ScanConfig.suffixes: {s!r} must start with '.'")

    @classmethod
    def from_env(cls, **overrides) -> "ScanConfig":
        raw = os.environ.get(SUFFIXES_ENV)
        if raw and "suffixes" not in overrides:
            overrides["suffixes"] = tuple(s.strip().lower() for s in raw.split(",") if s.strip())
        return cls(**overrides)
