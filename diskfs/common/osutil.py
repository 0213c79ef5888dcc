"""Filesystem primitives operating on already-resolved paths.

Queries never raise. Mutations and ``mtime`` raise ``PrimitiveFailed`` with
the errno and path of the failing call.
"""

import os

from diskfs.common.errors import PrimitiveFailed


def exists(path: str) -> bool:
    """Return True if *path* names any filesystem entry."""
    return os.path.exists(path)


def is_directory(path: str) -> bool:
    return os.path.isdir(path)


def is_file(path: str) -> bool:
    return os.path.isfile(path)


def mtime(path: str) -> int:
    """Return the modification time of *path* in nanoseconds since the epoch."""
    try:
        return os.stat(path).st_mtime_ns
    except OSError as e:
        raise PrimitiveFailed.from_oserror("stat", e, path) from e


def create_directory(path: str) -> None:
    try:
        os.mkdir(path, 0o755)
    except OSError as e:
        raise PrimitiveFailed.from_oserror("mkdir", e, path) from e


def delete_directory(path: str) -> None:
    """Remove the empty directory *path*."""
    try:
        os.rmdir(path)
    except OSError as e:
        raise PrimitiveFailed.from_oserror("rmdir", e, path) from e


def create_file(path: str) -> None:
    """Create *path* as an empty file, truncating it if it already exists."""
    try:
        with open(path, "wb"):
            pass
    except OSError as e:
        raise PrimitiveFailed.from_oserror("open", e, path) from e


def delete_file(path: str) -> None:
    try:
        os.unlink(path)
    except OSError as e:
        raise PrimitiveFailed.from_oserror("unlink", e, path) from e


def list_files(path: str) -> list[str]:
    """Return the entry names in directory *path* in no particular order."""
    try:
        return os.listdir(path)
    except OSError as e:
        raise PrimitiveFailed.from_oserror("listdir", e, path) from e


def file_size(path: str) -> int:
    """Return the byte size of *path*."""
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise PrimitiveFailed.from_oserror("stat", e, path) from e
