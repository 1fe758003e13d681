from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

import filelist.crawl as crawl
from filelist.cli import main, safe_print
from filelist.config import Settings
from filelist.crawl import iter_files, relative_name, scan

HELLO_SHA256 = "2CF24DBA5FB0A30E26E83B2AC5B9E29E1B161E5C1FA7425E73043362938B9824"


def _run(capsys, argv) -> tuple[int, list[str]]:
    code = main(argv)
    out = capsys.readouterr().out
    return code, out.splitlines()


def test_iter_files_sorted_by_path(tmp_path: Path):
    for rel in ["z.txt", "a/b.txt", "a.txt", "m/n/o.dll"]:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(rel, encoding="utf-8")
    (tmp_path / "empty_dir").mkdir()
    files = iter_files(tmp_path)
    assert files == sorted(files)
    assert len(files) == 4
    assert all(os.path.isfile(f) for f in files)


def test_relative_name(tmp_path: Path):
    assert relative_name(tmp_path, tmp_path / "sub" / "b.exe") == os.path.join("sub", "b.exe")
    assert relative_name(str(tmp_path) + os.sep, str(tmp_path / "a.txt")) == "a.txt"


def test_scan_two_file_tree(sample_tree):
    entries = list(scan(sample_tree, settings=Settings()))
    assert [e.name for e in entries] == ["a.txt", os.path.join("sub", "b.exe")]
    a, b = entries
    assert a.hash_string == HELLO_SHA256
    assert b.build_date_time is None
    assert b.linker_version == ""
    assert b.file_size == 10
    assert len(b.hash_string) == 64


def test_scan_file_deleted_after_enumeration(sample_tree, monkeypatch):
    ghost = str(sample_tree / "ghost.exe")
    real = crawl.iter_files(sample_tree)
    monkeypatch.setattr(crawl, "iter_files", lambda root: sorted(real + [ghost]))
    entries = list(scan(sample_tree, settings=Settings()))
    assert len(entries) == 3
    g = next(e for e in entries if e.name == "ghost.exe")
    assert (g.file_size, g.last_write_time, g.hash_string) == (0, None, "")
    assert (g.build_date_time, g.linker_version) == (None, "")


def test_scan_worker_pool_keeps_order(tmp_path: Path, make_pe):
    for i in range(30):
        (tmp_path / f"f{i:02d}.txt").write_text(str(i), encoding="utf-8")
        make_pe(tmp_path / "bin" / f"m{i:02d}.dll", time_t=1_000_000 + i)
    settings = Settings()
    seq = list(scan(tmp_path, workers=1, settings=settings))
    par = list(scan(tmp_path, workers=8, settings=settings))
    assert par == seq
    assert [e.name for e in par] == sorted(e.name for e in par)
    assert len(par) == 60


def test_cli_missing_root_exits_1(capsys):
    code = main([])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "usage" in captured.err


def test_cli_root_not_a_directory(tmp_path: Path, capsys):
    code, lines = _run(capsys, [str(tmp_path / "nope")])
    assert code == 1
    assert lines == []


def test_cli_empty_directory_prints_nothing(tmp_path: Path, capsys):
    code, lines = _run(capsys, [str(tmp_path)])
    assert code == 0
    assert lines == []


def test_cli_writes_header_and_rows(sample_tree, capsys):
    code, lines = _run(capsys, [str(sample_tree), "--utc"])
    assert code == 0
    assert len(lines) == 3
    assert lines[0].split("\t")[0] == "Name"
    a = lines[1].split("\t")
    assert a[0] == "a.txt"
    assert a[1] == "5"
    assert a[3] == HELLO_SHA256
    b = lines[2].split("\t")
    assert b[0] == os.path.join("sub", "b.exe")
    assert b[6] == "" and b[7] == ""
    assert all(len(line.split("\t")) == 8 for line in lines)


def test_cli_is_idempotent(sample_tree, capsys):
    _, first = _run(capsys, [str(sample_tree)])
    _, second = _run(capsys, [str(sample_tree)])
    assert first == second


def test_cli_workers_match_sequential(sample_tree, capsys):
    _, seq = _run(capsys, [str(sample_tree)])
    _, par = _run(capsys, [str(sample_tree), "--workers", "4"])
    assert par == seq


def test_cli_config_file_separator(sample_tree, tmp_path_factory, capsys):
    cfg = tmp_path_factory.mktemp("cfg") / "filelist.yaml"
    cfg.write_text("separator: '|'\n", encoding="utf-8")
    code, lines = _run(capsys, [str(sample_tree), "--config", str(cfg)])
    assert code == 0
    assert lines[0].startswith("Name|File Size|")


@pytest.mark.parametrize("flag", ["--progress", "-v"])
def test_cli_progress_and_verbose_keep_stdout_clean(sample_tree, capsys, flag):
    _, plain = _run(capsys, [str(sample_tree)])
    _, other = _run(capsys, [str(sample_tree), flag])
    assert other == plain


def test_safe_print_replaces_unencodable_characters():
    buf = io.BytesIO()
    stream = io.TextIOWrapper(buf, encoding="ascii", newline="")
    safe_print("naïve\t日本.exe", stream)
    safe_print("plain", stream)
    stream.flush()
    assert buf.getvalue() == b"na?ve\t??.exe\nplain\n"


@pytest.mark.parametrize(
    "content",
    [
        "workers: [unclosed\n",  # not valid YAML
        "- just\n- a list\n",  # not a mapping
        "log_level: LOUD\n",
        "hash_chunk_size: 0\n",
    ],
)
def test_cli_bad_config_is_usage_error(sample_tree, tmp_path_factory, capsys, content):
    cfg = tmp_path_factory.mktemp("cfg") / "bad.yaml"
    cfg.write_text(content, encoding="utf-8")
    code = main([str(sample_tree), "--config", str(cfg)])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "usage" in captured.err


def test_cli_missing_config_file(sample_tree, tmp_path: Path, capsys):
    code = main([str(sample_tree), "--config", str(tmp_path / "none.yaml")])
    assert code == 1
    assert capsys.readouterr().out == ""


def test_cli_zero_chunk_size_env_is_rejected(sample_tree, monkeypatch, capsys):
    monkeypatch.setenv("FILELIST_HASH_CHUNK_SIZE", "0")
    code = main([str(sample_tree)])
    assert code == 1
    assert capsys.readouterr().out == ""
