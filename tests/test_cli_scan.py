from __future__ import annotations
import csv, json, logging
import pytest

from lrzmagic import ScanConfig
from lrzwf.cli.common import list_archives
from lrzwf.cli.scan import main as scan_main, scan_one, summarize


@pytest.fixture
def tree(tmp_path, lrz):
    root = tmp_path / "archives"; (root / "sub").mkdir(parents=True)
    (root / "a.lrz").write_bytes(lrz.modern(11, size=len(lrz.payload) * 4 + 21) + lrz.payload)
    (root / "sub" / "b.lrz").write_bytes(lrz.legacy(6, size=0) + lrz.payload)
    (root / "sub" / "noext").write_bytes(lrz.modern(9, enc=1, key=b"k" * 8) + lrz.payload)
    (root / "bad.lrz").write_bytes(b"NOPE" + bytes(30))
    (root / "readme.txt").write_text("not an archive", encoding="utf-8")
    return root


def test_list_archives(tree):
    names = sorted(p.name for p in list_archives([tree], ScanConfig()))
    assert names == ["a.lrz", "b.lrz", "bad.lrz", "noext"]
    flat = sorted(p.name for p in list_archives([tree], ScanConfig(recursive=False, sniff=False)))
    assert flat == ["a.lrz", "bad.lrz"]


def test_scan_one_reports_errors_in_row(tree):
    row = scan_one(tree / "bad.lrz")
    assert row["error"].startswith("NotAnArchive")
    ok = scan_one(tree / "a.lrz")
    assert ok["error"] is None and ok["version"] == "0.11"
    assert ok["ratio"] == pytest.approx(ok["stored_size"] / ok["archive_size"])


def test_summarize(tree):
    rows = [scan_one(p) for p in list_archives([tree], ScanConfig())]
    s = summarize(rows)
    assert (s["files"], s["decoded"], s["errors"], s["encrypted"], s["size_unknown"]) == (4, 3, 1, 1, 1)
    a = next(r for r in rows if r["path"].endswith("a.lrz"))
    assert s["total_stored"] == a["stored_size"]
    assert s["overall_ratio"] == pytest.approx(a["ratio"])
    assert s["ratio_median"] == pytest.approx(a["ratio"])


def test_summarize_empty():
    s = summarize([])
    assert s["files"] == 0 and s["overall_ratio"] is None and s["ratio_mean"] is None


def test_scan_cli_csv(tree, tmp_path):
    out = tmp_path / "report" / "scan.csv"
    rc = scan_main([str(tree), "--out", str(out)])
    assert rc == 1  # bad.lrz
    rows = list(csv.DictReader(out.open(encoding="utf-8")))
    assert len(rows) == 4
    by_name = {r["path"].rsplit("/", 1)[-1]: r for r in rows}
    assert by_name["b.lrz"]["layout"] == "legacy"
    assert by_name["noext"]["encrypted"] == "True"


def test_scan_cli_jsonl_all_ok(tree, tmp_path):
    (tree / "bad.lrz").unlink()
    out = tmp_path / "scan.jsonl"
    assert scan_main([str(tree), "--out", str(out)]) == 0
    recs = [json.loads(line) for line in out.read_text(encoding="utf-8").splitlines()]
    assert {r["method"] for r in recs} == {"LZMA"}
    assert all(r["error"] is None for r in recs)


def test_scan_cli_summary_file(tree, tmp_path, caplog):
    summ = tmp_path / "out" / "summary.json"
    with caplog.at_level(logging.INFO):
        rc = scan_main([str(tree), "--out", str(tmp_path / "s.csv"), "--summary", str(summ)])
    assert rc == 1
    s = json.loads(summ.read_text(encoding="utf-8"))
    assert (s["files"], s["errors"]) == (4, 1)
    assert s["total_stored"] > 0 and s["ratio_median"] == pytest.approx(s["ratio_mean"])
    assert f"total={s['total_stored']} octets" in caplog.text
    assert f"médian={s['ratio_median']:.3f}" in caplog.text


def test_scan_cli_nothing_found(tmp_path):
    assert scan_main([str(tmp_path)]) == 2


def test_suffix_env(monkeypatch):
    monkeypatch.setenv("LRZMAGIC_SUFFIXES", ".LRZ, .tlrz")
    assert ScanConfig.from_env().suffixes == (".lrz", ".tlrz")
    with pytest.raises(ValueError):
        ScanConfig(suffixes=("lrz",))
