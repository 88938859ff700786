from __future__ import annotations
import logging, sys
from pathlib import Path
from typing import Iterable, Optional

from lrzmagic.config import ScanConfig
from lrzmagic.header import MAGIC

def setup_logging(log_file: Optional[Path], verbose: bool = True) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=log_fmt, datefmt=datefmt, handlers=handlers)

def looks_like_lrz(p: Path) -> bool:
    try:
        with open(p, "rb") as f:
            return f.read(4) == MAGIC
    except OSError:
        return False

def list_archives(inputs: Iterable[str | Path], cfg: ScanConfig) -> list[Path]:
    """Expand files/directories into the archive paths to scan (sorted, unique)."""
    out: list[Path] = []
    for item in inputs:
        root = Path(item)
        if root.is_file():
            out.append(root)
            continue
        if not root.is_dir():
            logging.warning("introuvable: %s", root)
            continue
        it = root.rglob("*") if cfg.recursive else root.glob("*")
        for p in it:
            if not p.is_file():
                continue
            if p.suffix.lower() in cfg.suffixes or (cfg.sniff and looks_like_lrz(p)):
                out.append(p)
    return sorted(set(out))
