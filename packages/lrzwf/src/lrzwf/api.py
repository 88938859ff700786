from __future__ import annotations
import os
from pathlib import Path

def atomic_write(path: Path | str, data: bytes) -> None:
    """Write `data` to a sibling .tmp file, fsync, then rename over `path`."""
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)
