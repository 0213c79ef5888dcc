"""Abstract interface for filesystems."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from diskfs.common.constants import FileOpenMode
from diskfs.file.base import File


class Filesystem(ABC):
    """Abstract base class for filesystems that issue file handles.

    Handles returned by ``open`` belong to the caller until they are passed
    back to ``close`` on the same filesystem. ``opened`` wraps the pair so the
    handle is released on every exit path.

    Available implementations:
    - DiskFilesystem: host disk, paths resolved against a root prefix
    """

    @abstractmethod
    def open(self, path: str, mode: FileOpenMode) -> File:
        """Open *path* and return a handle owned by the caller.

        Raises:
            OpenFailed: The native open call failed.
        """
        pass

    @abstractmethod
    def close(self, file: File) -> None:
        """Release a handle returned by ``open``. The handle is invalid afterwards."""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        pass

    @abstractmethod
    def last_modified_time(self, path: str) -> int:
        """Return an opaque modification time, comparable between calls."""
        pass

    @abstractmethod
    def create_directory(self, path: str) -> None:
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        pass

    @abstractmethod
    def create_file(self, path: str) -> None:
        pass

    @abstractmethod
    def delete_file(self, path: str) -> None:
        pass

    @abstractmethod
    def list_files(self, path: str) -> list[str]:
        """Return entry names of the directory at *path*, unordered."""
        pass

    @contextmanager
    def opened(self, path: str, mode: FileOpenMode) -> Iterator[File]:
        """Open *path* for the duration of a ``with`` block.

        Usage:
            with fs.opened("levels/intro.bin", FileOpenMode.READ) as f:
                header = f.read_bytes(16)
        """
        file = self.open(path, mode)
        try:
            yield file
        finally:
            self.close(file)

    @property
    def name(self) -> str:
        """Get filesystem name for logging."""
        return self.__class__.__name__
