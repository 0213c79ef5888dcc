"""Error taxonomy for diskfs.

Two families:

- ``ContractViolation`` for programmer errors (``None`` arguments, use of a
  closed handle, undersized buffers, out-of-range offsets). These are not
  meant to be caught and handled.
- ``FileIOError`` for native call failures. Each carries the errno reported by
  the OS, the path the handle or primitive was bound to, and the native call
  that failed.
"""

from typing import Optional


class DiskFSError(Exception):
    """Base class for all diskfs errors."""


class ContractViolation(DiskFSError, AssertionError):
    """A caller broke the contract of an operation."""


class ShortWriteError(ContractViolation):
    """A write stored fewer bytes than requested."""

    def __init__(self, path: Optional[str], requested: int, written: int) -> None:
        self.path = path
        self.requested = requested
        self.written = written
        super().__init__(f"Short write: {written} of {requested} bytes, path = '{path}'")


def ensure(condition: object, message: str) -> None:
    """Raise ContractViolation unless *condition* holds.

    Unlike ``assert`` this stays active under ``python -O``.
    """
    if not condition:
        raise ContractViolation(message)


class FileIOError(DiskFSError):
    """A native I/O call failed."""

    def __init__(self, op: str, errno: Optional[int], path: Optional[str], message: str = "") -> None:
        self.op = op
        self.errno = errno
        self.path = path
        self.message = message
        super().__init__(f"{op}: errno = {errno}, path = '{path}'" + (f" ({message})" if message else ""))

    @classmethod
    def from_oserror(cls, op: str, exc: OSError, path: Optional[str]) -> "FileIOError":
        """Build the error from an OSError; callers chain it with ``raise ... from exc``."""
        return cls(op, exc.errno, path, exc.strerror or "")


class OpenFailed(FileIOError):
    """Opening the native resource failed."""


class ReadFailed(FileIOError):
    """A native read failed."""


class WriteFailed(FileIOError):
    """A native write failed."""


class SeekFailed(FileIOError):
    """Seeking, telling or querying the size failed."""


class FlushFailed(FileIOError):
    """Flushing buffered data to storage failed."""


class PrimitiveFailed(FileIOError):
    """A filesystem primitive (mkdir, unlink, listdir, stat, ...) failed."""
