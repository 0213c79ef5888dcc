"""Disk filesystem: root-prefixed path resolution over the host disk."""

import logging
from typing import TYPE_CHECKING, Optional, Union

from diskfs.common import osutil
from diskfs.common import path as pathutil
from diskfs.common.constants import BackendName, FileOpenMode
from diskfs.common.errors import ensure
from diskfs.common.models import PathInfo, PathKind
from diskfs.file.backends import select_backend
from diskfs.file.base import File
from diskfs.filesystem.interface import Filesystem

if TYPE_CHECKING:
    from diskfs.config import FilesystemSettings

logger = logging.getLogger("diskfs.filesystem")


class DiskFilesystem(Filesystem):
    """Filesystem on the host disk with every path resolved against a prefix.

    Relative paths are joined to the prefix; absolute paths are used verbatim
    and never see the prefix. An empty prefix (the default) leaves relative
    paths relative to the process working directory.

    The filesystem keeps track of the handles it issued. Closing a handle
    through another filesystem, or twice, is a ``ContractViolation``.

    There is no internal locking. ``set_prefix`` is meant to be called once
    during configuration.

    Usage:
        fs = DiskFilesystem("/data/game")
        with fs.opened("levels/intro.bin", FileOpenMode.READ) as f:
            data = f.read_bytes(f.size())
    """

    def __init__(
        self,
        prefix: str = "",
        backend: Union[str, BackendName, type[File]] = BackendName.AUTO,
    ) -> None:
        """Initialize the filesystem.

        Args:
            prefix: Root prefix for relative paths ("" = working directory)
            backend: Backend name or File subclass used for new handles
        """
        self._prefix = ""
        self.set_prefix(prefix)
        if isinstance(backend, type):
            self._file_class = backend
        else:
            self._file_class = select_backend(backend)
        self._handles: set[File] = set()

    @classmethod
    def from_settings(cls, settings: "FilesystemSettings") -> "DiskFilesystem":
        """Build a filesystem from loaded settings."""
        return cls(prefix=settings.prefix, backend=settings.backend)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def file_class(self) -> type[File]:
        return self._file_class

    def set_prefix(self, prefix: str) -> None:
        ensure(prefix is not None, "Prefix must be != None")
        self._prefix = prefix

    def resolve(self, path: str) -> str:
        """Return the absolute path for *path*.

        Absolute paths are returned verbatim. Relative paths are joined to
        the prefix without normalizing ``.`` or ``..`` segments.
        """
        ensure(path is not None, "Path must be != None")
        if pathutil.is_absolute(path):
            return path
        return pathutil.join(self._prefix, path)

    # ── File handles ────────────────────────────────────────────────

    def open(self, path: str, mode: FileOpenMode) -> File:
        abs_path = self.resolve(path)
        file = self._file_class()
        try:
            file.open(abs_path, mode)
        except BaseException:
            file.close()
            raise
        self._handles.add(file)
        return file

    def close(self, file: File) -> None:
        ensure(file is not None, "File must be != None")
        ensure(file in self._handles, f"{file!r} was not opened by this filesystem or is already closed")
        file.close()
        self._handles.discard(file)

    @property
    def open_handles(self) -> int:
        """Number of issued handles not yet closed."""
        return len(self._handles)

    # ── Metadata ────────────────────────────────────────────────────

    def exists(self, path: str) -> bool:
        return osutil.exists(self.resolve(path))

    def is_directory(self, path: str) -> bool:
        return osutil.is_directory(self.resolve(path))

    def is_file(self, path: str) -> bool:
        return osutil.is_file(self.resolve(path))

    def last_modified_time(self, path: str) -> int:
        return osutil.mtime(self.resolve(path))

    def stat(self, path: str) -> PathInfo:
        """Collect existence, type, size and modification time of *path*."""
        abs_path = self.resolve(path)
        info = PathInfo(path=path, resolved=abs_path)
        if not osutil.exists(abs_path):
            return info

        info.mtime = osutil.mtime(abs_path)
        if osutil.is_directory(abs_path):
            info.kind = PathKind.DIRECTORY
        elif osutil.is_file(abs_path):
            info.kind = PathKind.FILE
            info.size = osutil.file_size(abs_path)
        else:
            info.kind = PathKind.OTHER
        return info

    # ── Directory and file operations ───────────────────────────────

    def create_directory(self, path: str) -> None:
        """Create the directory at *path* unless something already exists there.

        The existence check and the creation are separate calls, so a
        concurrent creator can still make the second one fail.
        """
        abs_path = self.resolve(path)
        if not osutil.exists(abs_path):
            osutil.create_directory(abs_path)
            logger.debug("Created directory '%s'", abs_path)

    def delete_directory(self, path: str) -> None:
        osutil.delete_directory(self.resolve(path))

    def create_file(self, path: str) -> None:
        osutil.create_file(self.resolve(path))

    def delete_file(self, path: str) -> None:
        osutil.delete_file(self.resolve(path))

    def list_files(self, path: str) -> list[str]:
        return osutil.list_files(self.resolve(path))

    def __repr__(self) -> str:
        return f"<{self.name} prefix={self._prefix!r} backend={self._file_class.kind}>"


def create_filesystem(settings: Optional["FilesystemSettings"] = None) -> DiskFilesystem:
    """Create a DiskFilesystem from settings, loading them when not given."""
    if settings is None:
        from diskfs.config import load_settings

        settings = load_settings()
    fs = DiskFilesystem.from_settings(settings)
    logger.info("Using %r", fs)
    return fs
