from __future__ import annotations
import argparse, csv, io, json, logging, sys
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from .common import setup_logging, list_archives
from ..api import atomic_write
from lrzmagic import FormatError, ScanConfig, compression_ratio, read_archive_header, to_dict

COLUMNS = ("path", "version", "layout", "encrypted", "stored_size", "archive_size", "ratio",
           "method", "hash", "filter", "comment", "error")

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="lrzscan: inventaire des en-têtes .lrz (lecture seule)")
    p.add_argument("inputs", nargs="+", help="Fichiers ou dossiers")
    p.add_argument("--out", default=None, help="Rapport (.csv ou .jsonl); stdout si absent")
    p.add_argument("--summary", default=None, help="Résumé agrégé (JSON)")
    p.add_argument("--no-recursive", action="store_true")
    p.add_argument("--no-sniff", action="store_true", help="Ne garder que les suffixes connus")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)

def scan_one(path: Path) -> Dict[str, Any]:
    """Decode one archive header; failures are reported in the row, never raised."""
    row: Dict[str, Any] = {c: None for c in COLUMNS}
    row["path"] = str(path)
    try:
        row["archive_size"] = path.stat().st_size
        view = read_archive_header(path)
    except (FormatError, OSError) as e:
        row["error"] = f"{type(e).__name__}: {e}"
        return row
    d = to_dict(view)
    for k in ("version", "layout", "encrypted", "stored_size", "method", "hash", "filter", "comment"):
        row[k] = d[k]
    row["ratio"] = compression_ratio(view, row["archive_size"])
    return row

def summarize(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    ok = [r for r in rows if r["error"] is None]
    known = [r for r in ok if r["stored_size"]]
    sizes = np.array([r["stored_size"] for r in known], dtype=np.float64)
    packed = np.array([r["archive_size"] for r in known], dtype=np.float64)
    ratios = np.array([r["ratio"] for r in known if r["ratio"] is not None], dtype=np.float64)
    return {
        "files": len(rows),
        "decoded": len(ok),
        "errors": len(rows) - len(ok),
        "encrypted": sum(1 for r in ok if r["encrypted"]),
        "size_unknown": sum(1 for r in ok if not r["encrypted"] and not r["stored_size"]),
        "total_stored": int(sizes.sum()) if sizes.size else 0,
        "overall_ratio": float(sizes.sum() / packed.sum()) if packed.size and packed.sum() > 0 else None,
        "ratio_mean": float(ratios.mean()) if ratios.size else None,
        "ratio_median": float(np.median(ratios)) if ratios.size else None,
    }

def _fmt_ratio(x: float | None) -> str:
    return "n/a" if x is None else f"{x:.3f}"

def _render(rows: List[Dict[str, Any]], fmt: str) -> str:
    if fmt == "jsonl":
        return "".join(json.dumps(r, ensure_ascii=False) + "\n" for r in rows)
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=COLUMNS, lineterminator="\n")
    w.writeheader()
    w.writerows(rows)
    return buf.getvalue()

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)
    cfg = ScanConfig.from_env(recursive=not args.no_recursive, sniff=not args.no_sniff)

    paths = list_archives(args.inputs, cfg)
    if not paths:
        logging.error("Aucune archive trouvée dans %s", ", ".join(args.inputs)); return 2

    rows = []
    for i, p in enumerate(paths, 1):
        logging.debug("[%d/%d] scan: %s", i, len(paths), p)
        row = scan_one(p)
        if row["error"]:
            logging.warning("Échec %s: %s", p, row["error"])
        rows.append(row)

    fmt = "jsonl" if args.out and args.out.endswith(".jsonl") else "csv"
    text = _render(rows, fmt)
    if args.out:
        atomic_write(args.out, text.encode("utf-8"))
        logging.info("→ écrit %s", args.out)
    else:
        sys.stdout.write(text)

    summary = summarize(rows)
    if args.summary:
        atomic_write(args.summary, (json.dumps(summary, indent=2) + "\n").encode("utf-8"))
        logging.info("→ résumé %s", args.summary)
    logging.info("Terminé: %d/%d décodées, %d chiffrées, %d sans taille, total=%d octets, "
                 "ratio global=%s, moyen=%s, médian=%s",
                 summary["decoded"], summary["files"], summary["encrypted"], summary["size_unknown"],
                 summary["total_stored"], _fmt_ratio(summary["overall_ratio"]),
                 _fmt_ratio(summary["ratio_mean"]), _fmt_ratio(summary["ratio_median"]))
    return 0 if summary["errors"] == 0 else 1

if __name__ == "__main__":
    sys.exit(main())
