"""Abstract file handle shared by all backends."""

import errno
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from diskfs.common.constants import U32_MAX, FileOpenMode
from diskfs.common.errors import SeekFailed, ensure

Buffer = Union[bytes, bytearray, memoryview]


class File(ABC):
    """A handle bound to at most one opened native resource.

    A handle is either closed or open. Every operation except ``open``,
    ``close`` and ``is_open`` requires it to be open; calling one on a
    closed handle raises ``ContractViolation``. Offsets, sizes and counts
    are unsigned 32-bit.

    Backends differ in how ``end_of_file`` is answered, see their docstrings.
    """

    #: Backend name used by configuration and logging
    kind = "file"

    def __init__(self) -> None:
        self.path: Optional[str] = None
        self.mode: Optional[FileOpenMode] = None

    @abstractmethod
    def open(self, path: str, mode: FileOpenMode) -> None:
        """Bind the handle to *path* opened with *mode*.

        Raises:
            OpenFailed: The native open call failed.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the native resource. Does nothing on a closed handle."""

    @abstractmethod
    def is_open(self) -> bool:
        pass

    @abstractmethod
    def size(self) -> int:
        """Return the byte length of the file without moving the cursor."""

    @abstractmethod
    def position(self) -> int:
        """Return the 0-based cursor offset."""

    @abstractmethod
    def end_of_file(self) -> bool:
        pass

    @abstractmethod
    def seek(self, position: int) -> None:
        """Move the cursor to *position* bytes from the start of the file."""

    @abstractmethod
    def seek_to_end(self) -> None:
        pass

    @abstractmethod
    def skip(self, count: int) -> None:
        """Move the cursor *count* bytes forward from its current offset."""

    @abstractmethod
    def read(self, buffer: Any, size: Optional[int] = None) -> int:
        """Read up to *size* bytes into the writable *buffer*.

        Args:
            buffer: Caller-owned writable buffer (``bytearray``, ``memoryview``, ...)
            size: Bytes to read, defaults to ``len(buffer)``

        Returns:
            Number of bytes read, fewer than *size* at end of file

        Raises:
            ReadFailed: The native read failed.
        """

    @abstractmethod
    def write(self, data: Buffer, size: Optional[int] = None) -> int:
        """Write *size* bytes of *data* at the cursor.

        Returns:
            Number of bytes written, always *size*

        Raises:
            WriteFailed: The native write failed.
            ShortWriteError: Fewer bytes than requested were stored.
        """

    @abstractmethod
    def flush(self) -> None:
        """Push buffered data to the underlying storage.

        Raises:
            FlushFailed: The native flush failed.
        """

    def read_bytes(self, size: int) -> bytes:
        """Read up to *size* bytes and return them as a new object."""
        buffer = bytearray(size)
        n = self.read(buffer, size)
        return bytes(buffer[:n])

    # ── Contract checks ─────────────────────────────────────────────

    def _check_open(self) -> None:
        ensure(self.is_open(), f"{type(self).__name__} is not open")

    @staticmethod
    def _check_mode(mode: FileOpenMode) -> FileOpenMode:
        ensure(mode in (FileOpenMode.READ, FileOpenMode.WRITE), f"Invalid open mode: {mode!r}")
        return FileOpenMode(mode)

    @staticmethod
    def _check_u32(value: int, what: str) -> None:
        ensure(isinstance(value, int) and 0 <= value <= U32_MAX, f"{what} must be in [0, {U32_MAX}], got {value!r}")

    def _check_result(self, value: int, op: str) -> int:
        """Reject native offsets that do not fit the 32-bit range."""
        if value > U32_MAX:
            raise SeekFailed(op, errno.EOVERFLOW, self.path, f"offset {value} exceeds 32-bit range")
        return value

    def _writable_view(self, buffer: Any, size: Optional[int]) -> memoryview:
        ensure(buffer is not None, "Data must be != None")
        view = memoryview(buffer).cast("B")
        ensure(not view.readonly, "Read buffer must be writable")
        if size is None:
            size = view.nbytes
        self._check_u32(size, "size")
        ensure(size <= view.nbytes, f"Buffer holds {view.nbytes} bytes, {size} requested")
        return view[:size]

    def _readable_view(self, data: Buffer, size: Optional[int]) -> memoryview:
        ensure(data is not None, "Data must be != None")
        view = memoryview(data).cast("B")
        if size is None:
            size = view.nbytes
        self._check_u32(size, "size")
        ensure(size <= view.nbytes, f"Buffer holds {view.nbytes} bytes, {size} requested")
        return view[:size]

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        mode = self.mode.value if self.mode else None
        return f"<{type(self).__name__} path={self.path!r} mode={mode} {state}>"
