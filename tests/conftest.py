import struct
from pathlib import Path

import pytest

E_LFANEW = 0x80


def _make_pe(
    path: Path,
    time_t: int = 1_600_000_000,
    major: int = 14,
    minor: int = 29,
    e_lfanew: int = E_LFANEW,
) -> Path:
    """Write a minimal file with the three header fields at their fixed offsets."""
    buf = bytearray(e_lfanew + 0x40)
    buf[0:2] = b"MZ"
    struct.pack_into("<i", buf, 60, e_lfanew)
    buf[e_lfanew : e_lfanew + 4] = b"PE\x00\x00"
    struct.pack_into("<i", buf, e_lfanew + 8, time_t)
    struct.pack_into("<bb", buf, e_lfanew + 26, major, minor)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(bytes(buf))
    return path


@pytest.fixture
def make_pe():
    return _make_pe


@pytest.fixture
def sample_tree(tmp_path_factory):
    """a.txt ("hello") and sub/b.exe (10 bytes, too short for a PE header)."""
    root = tmp_path_factory.mktemp("tree")
    (root / "a.txt").write_text("hello", encoding="utf-8")
    (root / "sub").mkdir()
    (root / "sub" / "b.exe").write_bytes(b"MZ" + b"\x00" * 8)
    return root
