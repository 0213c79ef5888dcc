#!/usr/bin/env python3
"""
Unit tests for DiskFilesystem and the filesystem primitives it delegates to.

All tests run in a temporary directory used as the prefix.

Run:
    python -m pytest tests/test_filesystem.py -v
"""

import errno
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest  # noqa: E402

from diskfs.common import osutil  # noqa: E402
from diskfs.common.constants import FileOpenMode  # noqa: E402
from diskfs.common.errors import ContractViolation, OpenFailed, PrimitiveFailed  # noqa: E402
from diskfs.common.models import PathKind  # noqa: E402
from diskfs.file import BufferedStreamFile, RawHandleFile  # noqa: E402
from diskfs.filesystem import DiskFilesystem, Filesystem  # noqa: E402

# ── Fixtures ───────────────────────────────────────────────────


@pytest.fixture(params=["stream", "raw"])
def fs(request, tmp_path: Path) -> DiskFilesystem:
    """A filesystem rooted at the test's temp directory."""
    return DiskFilesystem(str(tmp_path), backend=request.param)


# ── Construction ──────────────────────────────────────────────


def test_backend_by_name(tmp_path):
    assert DiskFilesystem(str(tmp_path), backend="stream").file_class is BufferedStreamFile
    assert DiskFilesystem(str(tmp_path), backend="raw").file_class is RawHandleFile


def test_backend_by_class(tmp_path):
    fs = DiskFilesystem(str(tmp_path), backend=RawHandleFile)
    assert fs.file_class is RawHandleFile
    assert "raw" in repr(fs)


def test_unknown_backend(tmp_path):
    with pytest.raises(ValueError):
        DiskFilesystem(str(tmp_path), backend="tape")


def test_is_a_filesystem(fs):
    assert isinstance(fs, Filesystem)
    assert fs.name == "DiskFilesystem"


# ── open / close ──────────────────────────────────────────────


def test_open_resolves_against_prefix(fs, tmp_path):
    (tmp_path / "levels").mkdir()
    (tmp_path / "levels" / "intro.bin").write_bytes(b"intro")

    f = fs.open("levels/intro.bin", FileOpenMode.READ)
    assert f.path == fs.resolve("levels/intro.bin")
    assert f.read_bytes(16) == b"intro"
    fs.close(f)
    assert not f.is_open()


def test_open_absolute_bypasses_prefix(fs, tmp_path):
    other = tmp_path.parent / f"{tmp_path.name}-outside.bin"
    other.write_bytes(b"outside")
    try:
        f = fs.open(str(other.resolve()), FileOpenMode.READ)
        assert f.read_bytes(16) == b"outside"
        fs.close(f)
    finally:
        other.unlink()


def test_round_trip_through_filesystem(fs, tmp_path):
    data = os.urandom(4096)
    f = fs.open("blob.bin", FileOpenMode.WRITE)
    f.write(data)
    fs.close(f)

    f = fs.open("blob.bin", FileOpenMode.READ)
    assert f.size() == len(data)
    assert f.read_bytes(len(data)) == data
    fs.close(f)
    assert (tmp_path / "blob.bin").read_bytes() == data


def test_open_tracks_handles(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"a")
    f1 = fs.open("a.bin", FileOpenMode.READ)
    f2 = fs.open("a.bin", FileOpenMode.READ)
    assert fs.open_handles == 2
    fs.close(f1)
    assert fs.open_handles == 1
    fs.close(f2)
    assert fs.open_handles == 0


def test_independent_handles_on_same_path(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"0123456789")
    f1 = fs.open("a.bin", FileOpenMode.READ)
    f2 = fs.open("a.bin", FileOpenMode.READ)
    f1.seek(5)
    assert f2.position() == 0
    assert f2.read_bytes(2) == b"01"
    assert f1.read_bytes(2) == b"56"
    fs.close(f1)
    fs.close(f2)


def test_failed_open_does_not_leak(fs):
    with pytest.raises(OpenFailed) as exc_info:
        fs.open("missing.bin", FileOpenMode.READ)
    assert exc_info.value.path == fs.resolve("missing.bin")
    assert fs.open_handles == 0


def test_double_close_is_contract_violation(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"a")
    f = fs.open("a.bin", FileOpenMode.READ)
    fs.close(f)
    with pytest.raises(ContractViolation):
        fs.close(f)


def test_close_foreign_handle_is_contract_violation(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"a")
    other = DiskFilesystem(str(tmp_path))
    f = other.open("a.bin", FileOpenMode.READ)
    with pytest.raises(ContractViolation):
        fs.close(f)
    assert f.is_open()
    other.close(f)


def test_close_none_is_contract_violation(fs):
    with pytest.raises(ContractViolation):
        fs.close(None)  # type: ignore[arg-type]


def test_opened_releases_handle(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"abc")
    with fs.opened("a.bin", FileOpenMode.READ) as f:
        assert f.read_bytes(3) == b"abc"
        assert fs.open_handles == 1
    assert not f.is_open()
    assert fs.open_handles == 0


def test_opened_releases_handle_on_error(fs, tmp_path):
    (tmp_path / "a.bin").write_bytes(b"abc")
    with pytest.raises(RuntimeError):
        with fs.opened("a.bin", FileOpenMode.READ) as f:
            raise RuntimeError("boom")
    assert not f.is_open()
    assert fs.open_handles == 0


def test_opened_open_failure(fs):
    with pytest.raises(OpenFailed):
        with fs.opened("missing.bin", FileOpenMode.READ):
            pass
    assert fs.open_handles == 0


# ── Existence and metadata ────────────────────────────────────


def test_create_file_exists_is_file(fs, tmp_path):
    fs.create_file("new.txt")
    assert fs.exists("new.txt")
    assert fs.is_file("new.txt")
    assert not fs.is_directory("new.txt")
    assert (tmp_path / "new.txt").is_file()

    fs.delete_file("new.txt")
    assert not fs.exists("new.txt")


def test_create_file_truncates(fs, tmp_path):
    (tmp_path / "full.txt").write_bytes(b"content")
    fs.create_file("full.txt")
    assert (tmp_path / "full.txt").read_bytes() == b""


def test_queries_on_missing_path(fs):
    assert not fs.exists("nope")
    assert not fs.is_file("nope")
    assert not fs.is_directory("nope")


def test_last_modified_time(fs, tmp_path):
    target = tmp_path / "m.bin"
    target.write_bytes(b"x")
    os.utime(target, ns=(1_000_000_000, 1_000_000_000))
    first = fs.last_modified_time("m.bin")
    os.utime(target, ns=(2_000_000_000, 2_000_000_000))
    second = fs.last_modified_time("m.bin")
    assert first == 1_000_000_000
    assert second > first


def test_last_modified_time_missing(fs):
    with pytest.raises(PrimitiveFailed) as exc_info:
        fs.last_modified_time("missing.bin")
    assert exc_info.value.errno == errno.ENOENT


def test_stat_file(fs, tmp_path):
    (tmp_path / "s.bin").write_bytes(b"12345")
    info = fs.stat("s.bin")
    assert info.exists
    assert info.kind == PathKind.FILE
    assert info.size == 5
    assert info.resolved == fs.resolve("s.bin")
    assert info.mtime is not None
    assert fs.open_handles == 0


def test_stat_directory(fs, tmp_path):
    (tmp_path / "d").mkdir()
    info = fs.stat("d")
    assert info.kind == PathKind.DIRECTORY
    assert info.size is None


def test_stat_missing(fs):
    info = fs.stat("missing")
    assert not info.exists
    assert info.kind == PathKind.MISSING
    assert info.mtime is None


# ── Directories ───────────────────────────────────────────────


def test_create_and_delete_directory(fs, tmp_path):
    fs.create_directory("levels")
    assert fs.is_directory("levels")
    assert not fs.is_file("levels")
    assert (tmp_path / "levels").is_dir()

    fs.delete_directory("levels")
    assert not fs.exists("levels")


def test_create_directory_existing_is_noop(fs, tmp_path):
    fs.create_directory("levels")
    fs.create_directory("levels")
    assert fs.is_directory("levels")


def test_create_directory_over_file_is_noop(fs, tmp_path):
    (tmp_path / "taken").write_bytes(b"x")
    fs.create_directory("taken")
    assert fs.is_file("taken")


def test_create_directory_missing_parent(fs):
    with pytest.raises(PrimitiveFailed) as exc_info:
        fs.create_directory("a/b/c")
    assert exc_info.value.op == "mkdir"


def test_delete_non_empty_directory(fs, tmp_path):
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "x").write_bytes(b"x")
    with pytest.raises(PrimitiveFailed):
        fs.delete_directory("full")
    assert (tmp_path / "full").is_dir()


def test_delete_missing_file(fs):
    with pytest.raises(PrimitiveFailed) as exc_info:
        fs.delete_file("missing.bin")
    assert exc_info.value.errno == errno.ENOENT
    assert exc_info.value.path == fs.resolve("missing.bin")


def test_list_files(fs, tmp_path):
    (tmp_path / "dir").mkdir()
    (tmp_path / "dir" / "a.bin").write_bytes(b"a")
    (tmp_path / "dir" / "b.bin").write_bytes(b"b")
    (tmp_path / "dir" / "sub").mkdir()
    assert sorted(fs.list_files("dir")) == ["a.bin", "b.bin", "sub"]


def test_list_files_empty(fs):
    fs.create_directory("empty")
    assert fs.list_files("empty") == []


def test_list_files_missing(fs):
    with pytest.raises(PrimitiveFailed):
        fs.list_files("missing")


# ── Primitives on resolved paths ──────────────────────────────


def test_osutil_does_not_resolve(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    osutil.create_file("rel.bin")
    assert (tmp_path / "rel.bin").is_file()
    assert osutil.exists("rel.bin")
    assert osutil.list_files(".") == ["rel.bin"]
    osutil.delete_file("rel.bin")
    assert not osutil.exists("rel.bin")


def test_empty_prefix_uses_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    fs = DiskFilesystem()
    fs.create_file("cwd.bin")
    assert (tmp_path / "cwd.bin").is_file()


class UnopenableFile(BufferedStreamFile):
    """Backend that refuses every open, like a file without read permission."""

    def open(self, path, mode):
        raise OpenFailed("open", errno.EACCES, path)


def test_stat_does_not_open_file(tmp_path):
    (tmp_path / "locked.bin").write_bytes(b"12345")
    fs = DiskFilesystem(str(tmp_path), backend=UnopenableFile)
    info = fs.stat("locked.bin")
    assert info.kind == PathKind.FILE
    assert info.size == 5
    assert fs.open_handles == 0


def test_osutil_file_size(tmp_path):
    (tmp_path / "sized.bin").write_bytes(b"abc")
    assert osutil.file_size(str(tmp_path / "sized.bin")) == 3
    with pytest.raises(PrimitiveFailed) as exc_info:
        osutil.file_size(str(tmp_path / "missing.bin"))
    assert exc_info.value.errno == errno.ENOENT
