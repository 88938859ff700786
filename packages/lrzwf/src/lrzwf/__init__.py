# packages/lrzwf/src/lrzwf/__init__.py
from __future__ import annotations

from .api import atomic_write

__all__ = [
    "atomic_write",
    # on n'importe PAS le sous-module cli ici (argparse/numpy chargés à la demande)
]

__version__ = "0.1.0"
