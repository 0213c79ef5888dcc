"""Buffered-stream file backend built on Python's buffered binary files."""

import logging
import os
from typing import Any, BinaryIO, Optional

from diskfs.common.constants import U32_MAX, FileOpenMode
from diskfs.common.errors import FlushFailed, OpenFailed, ReadFailed, SeekFailed, ShortWriteError, WriteFailed, ensure
from diskfs.file.base import Buffer, File

logger = logging.getLogger("diskfs.file")

_OPEN_MODES = {
    FileOpenMode.READ: "rb",
    FileOpenMode.WRITE: "wb",
}


class BufferedStreamFile(File):
    """File backend over ``io.BufferedReader`` / ``io.BufferedWriter``.

    - WRITE creates the file or truncates an existing one.
    - ``end_of_file`` asks the reader buffer directly whether any byte is
      left at the cursor, so it is true right after a seek to the end as
      well as after a read that consumed the last byte. It is always false
      in WRITE mode.
    - ``size`` is derived by seeking to the end and restoring the cursor.
    """

    kind = "stream"

    def __init__(self) -> None:
        super().__init__()
        self._file: Optional[BinaryIO] = None

    def open(self, path: str, mode: FileOpenMode) -> None:
        ensure(path is not None, "Path must be != None")
        ensure(not self.is_open(), f"File already open, path = '{self.path}'")
        mode = self._check_mode(mode)
        try:
            self._file = open(path, _OPEN_MODES[mode])  # noqa: SIM115
        except OSError as e:
            raise OpenFailed.from_oserror("open", e, path) from e
        self.path = path
        self.mode = mode
        logger.debug("Opened '%s' for %s (%s)", path, mode.value, self.kind)

    def close(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            f.close()
        except OSError as e:
            logger.warning("close: errno = %s, path = '%s'", e.errno, self.path)
        logger.debug("Closed '%s'", self.path)

    def is_open(self) -> bool:
        return self._file is not None

    def _stream(self) -> BinaryIO:
        self._check_open()
        return self._file  # type: ignore[return-value]

    def size(self) -> int:
        f = self._stream()
        try:
            pos = f.tell()
            f.seek(0, os.SEEK_END)
            size = f.tell()
            f.seek(pos, os.SEEK_SET)
        except OSError as e:
            raise SeekFailed.from_oserror("seek", e, self.path) from e
        return self._check_result(size, "seek")

    def position(self) -> int:
        f = self._stream()
        try:
            pos = f.tell()
        except OSError as e:
            raise SeekFailed.from_oserror("tell", e, self.path) from e
        return self._check_result(pos, "tell")

    def end_of_file(self) -> bool:
        f = self._stream()
        if self.mode != FileOpenMode.READ:
            return False
        try:
            return f.peek(1) == b""  # type: ignore[attr-defined,no-any-return]
        except OSError as e:
            raise ReadFailed.from_oserror("peek", e, self.path) from e

    def _seek(self, offset: int, whence: int) -> None:
        f = self._stream()
        try:
            pos = f.seek(offset, whence)
        except OSError as e:
            raise SeekFailed.from_oserror("seek", e, self.path) from e
        self._check_result(pos, "seek")

    def seek(self, position: int) -> None:
        self._check_u32(position, "position")
        self._seek(position, os.SEEK_SET)

    def seek_to_end(self) -> None:
        self._seek(0, os.SEEK_END)

    def skip(self, count: int) -> None:
        self._check_u32(count, "count")
        ensure(self.position() + count <= U32_MAX, f"skip({count}) would move past offset {U32_MAX}")
        self._seek(count, os.SEEK_CUR)

    def read(self, buffer: Any, size: Optional[int] = None) -> int:
        f = self._stream()
        view = self._writable_view(buffer, size)
        try:
            n = f.readinto(view)  # type: ignore[attr-defined]
        except OSError as e:
            raise ReadFailed.from_oserror("read", e, self.path) from e
        return n or 0

    def write(self, data: Buffer, size: Optional[int] = None) -> int:
        f = self._stream()
        view = self._readable_view(data, size)
        try:
            n = f.write(view)
        except OSError as e:
            raise WriteFailed.from_oserror("write", e, self.path) from e
        if n != view.nbytes:
            raise ShortWriteError(self.path, view.nbytes, n or 0)
        return n

    def flush(self) -> None:
        f = self._stream()
        try:
            f.flush()
        except OSError as e:
            raise FlushFailed.from_oserror("flush", e, self.path) from e
